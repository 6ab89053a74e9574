"""Create, buy and sell against the bonding curve through the launch service, plus token lookups.

Each operation asks the service for an unsigned transaction, decodes it and
hands it to the injected wallet. Stages run strictly in order:
upload -> trade-local -> decode -> sign/broadcast. Nothing is retried.
"""
import base64
import binascii
import logging
from typing import Dict, Optional

import httpx
from solders.transaction import VersionedTransaction

from launchpad.asset_uploader import AssetUploader, build_metadata_document
from launchpad.errors import ServiceError, SigningError, ValidationError
from launchpad.models import (
    AssetReference, LaunchRequest, LaunchResult,
    DEFAULT_POOL, DEFAULT_PRIORITY_FEE, DEFAULT_SLIPPAGE_BPS,
)
from launchpad.validation import validate_launch_request, validate_trade
from launchpad.wallet import WalletCapability

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://pumpportal.fun/api"


def decode_transaction(encoded: str) -> VersionedTransaction:
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise ServiceError(f"Launch service returned invalid base64: {e}") from e
    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        raise ServiceError(f"Launch service returned an undecodable transaction: {e}") from e


class LaunchTransactionClient:
    def __init__(
        self,
        wallet: WalletCapability,
        uploader: Optional[AssetUploader] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        default_slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        default_priority_fee: float = DEFAULT_PRIORITY_FEE,
        pool: str = DEFAULT_POOL,
    ):
        self.wallet = wallet
        self.base_url = base_url.rstrip("/")
        self.uploader = uploader or AssetUploader(self.base_url, timeout)
        self.timeout = timeout
        self.default_slippage_bps = default_slippage_bps
        self.default_priority_fee = default_priority_fee
        self.pool = pool

    async def _trade_local(self, payload: Dict, action: str) -> Dict:
        url = f"{self.base_url}/trade-local"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise ServiceError(f"{action} request timed out") from e
        except httpx.HTTPError as e:
            raise ServiceError(f"{action} request failed: {e}") from e

        if resp.status_code >= 300:
            logger.warning("trade-local %s returned %s", action, resp.status_code)
            raise ServiceError(f"{action} failed: HTTP {resp.status_code}", status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ServiceError(f"{action} returned invalid JSON", status_code=resp.status_code) from e
        if not isinstance(data, dict) or not data.get("transaction"):
            raise ServiceError(f"No transaction returned from {action} API", status_code=resp.status_code)
        return data

    async def _sign_and_send(self, transaction: VersionedTransaction, action: str) -> str:
        try:
            signature = await self.wallet.sign_and_send_transaction(transaction)
        except Exception as e:
            logger.warning("Wallet failed to sign %s transaction: %s", action, e)
            raise SigningError(f"Wallet failed to sign {action} transaction: {e}") from e
        if not signature:
            raise SigningError(f"Wallet returned no signature for {action} transaction")
        return str(signature)

    async def upload_assets(self, request: LaunchRequest, image: Optional[bytes] = None) -> Optional[AssetReference]:
        """Upload the image (if bytes given) and the metadata document (if any image exists)."""
        image_uri = request.image_uri
        if image:
            image_uri = await self.uploader.upload_image(image, filename=f"{request.symbol.lower()}.png")
        if not image_uri:
            return None
        metadata_uri = await self.uploader.upload_metadata(build_metadata_document(request, image_uri))
        return AssetReference(metadata_uri=metadata_uri, image_uri=image_uri)

    async def create(self, request: LaunchRequest, image: Optional[bytes] = None) -> LaunchResult:
        validate_launch_request(request)
        logger.info("Launching %s ($%s)", request.name, request.symbol)

        assets = await self.upload_assets(request, image)

        payload = {
            "name": request.name,
            "symbol": request.symbol,
            "description": request.description,
            "imageUrl": assets.image_uri if assets else request.image_uri,
            "options": {
                "twitter": request.twitter,
                "telegram": request.telegram,
                "website": request.website,
            },
            "initialBuy": request.initial_buy or 0,
            "slippageBps": request.slippage_bps,
            "priorityFee": request.priority_fee,
            "pool": self.pool,
        }
        if assets:
            payload["metadataUri"] = assets.metadata_uri

        data = await self._trade_local(payload, "create")
        if not data.get("mint"):
            raise ServiceError("No mint returned from create API")
        transaction = decode_transaction(data["transaction"])
        signature = await self._sign_and_send(transaction, "create")

        result = LaunchResult(
            signature=signature,
            mint=data["mint"],
            bonding_curve=data.get("bondingCurve", ""),
            associated_bonding_curve=data.get("associatedBondingCurve", ""),
            metadata_uri=assets.metadata_uri if assets else None,
        )
        logger.info("Launched %s ($%s): mint=%s sig=%s", request.name, request.symbol, result.mint, signature)
        return result

    async def _trade(self, action: str, mint: str, amount: float, slippage_bps: Optional[int]) -> str:
        if slippage_bps is None:
            slippage_bps = self.default_slippage_bps
        validate_trade(mint, amount, slippage_bps)

        payload = {
            "publicKey": self.wallet.public_key(),
            "action": action,
            "mint": mint,
            "amount": amount,
            "denominatedInSol": "true" if action == "buy" else "false",
            "slippage": slippage_bps,
            "priorityFee": self.default_priority_fee,
            "pool": self.pool,
        }
        data = await self._trade_local(payload, action)
        transaction = decode_transaction(data["transaction"])
        signature = await self._sign_and_send(transaction, action)
        logger.info("%s %s on %s: sig=%s", action.capitalize(), amount, mint, signature)
        return signature

    async def buy(self, mint: str, sol_amount: float, slippage_bps: Optional[int] = None) -> str:
        return await self._trade("buy", mint, sol_amount, slippage_bps)

    async def sell(self, mint: str, token_amount: float, slippage_bps: Optional[int] = None) -> str:
        return await self._trade("sell", mint, token_amount, slippage_bps)

    async def token_info(self, mint: str) -> Dict:
        """Current token data for a mint, as the launch service reports it."""
        if not mint or not mint.strip():
            raise ValidationError(["Mint address is required"])
        url = f"{self.base_url}/tokens/{mint.strip()}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url)
        except httpx.TimeoutException as e:
            raise ServiceError("token info request timed out") from e
        except httpx.HTTPError as e:
            raise ServiceError(f"token info request failed: {e}") from e

        if resp.status_code >= 300:
            logger.warning("Token info for %s returned %s", mint, resp.status_code)
            raise ServiceError(f"Failed to fetch token info: HTTP {resp.status_code}", status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ServiceError("token info returned invalid JSON", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise ServiceError("token info returned an unexpected payload", status_code=resp.status_code)
        return data
