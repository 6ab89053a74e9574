"""Push token images and metadata documents to IPFS through the launch service."""
import logging
from typing import Dict, Optional

import httpx

from launchpad.errors import UploadError
from launchpad.models import LaunchRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://pumpportal.fun/api"


def build_metadata_document(request: LaunchRequest, image_uri: Optional[str]) -> Dict:
    return {
        "name": request.name,
        "symbol": request.symbol,
        "description": request.description,
        "image": image_uri,
        "external_url": request.website,
        "attributes": [],
        "properties": {
            "files": [{"uri": image_uri, "type": "image/png"}] if image_uri else [],
            "category": "image",
        },
    }


class AssetUploader:
    """One request per call; no retries, no caching."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def _post(self, what: str, **kwargs) -> Dict:
        url = f"{self.base_url}/ipfs"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            raise UploadError(f"{what} upload timed out") from e
        except httpx.HTTPError as e:
            raise UploadError(f"{what} upload failed: {e}") from e

        if resp.status_code >= 300:
            logger.warning("IPFS %s upload returned %s", what, resp.status_code)
            raise UploadError(f"{what} upload failed: HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise UploadError(f"{what} upload returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UploadError(f"{what} upload returned unexpected payload")
        return data

    async def upload_image(self, data: bytes, filename: str = "token.png",
                           content_type: str = "image/png") -> str:
        result = await self._post("Image", files={"file": (filename, data, content_type)})
        uri = result.get("ipfs")
        if not uri:
            raise UploadError("Image upload response missing 'ipfs'")
        logger.info("Uploaded image %s (%d bytes) -> %s", filename, len(data), uri)
        return uri

    async def upload_metadata(self, doc: Dict) -> str:
        result = await self._post("Metadata", json=doc)
        uri = result.get("metadataUri")
        if not uri:
            raise UploadError("Metadata upload response missing 'metadataUri'")
        logger.info("Uploaded metadata for %s -> %s", doc.get("symbol"), uri)
        return uri
