from fastapi import APIRouter, HTTPException, Request
from typing import Optional
import base64
import binascii
import logging

from launchpad.errors import (
    LaunchError, ValidationError, UploadError, ServiceError, SigningError,
    WalletNotConfiguredError, MonitorNotConfiguredError,
)
from launchpad.models import LaunchRequest

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_IMAGE_BYTES = 5 * 1024 * 1024


def _pipeline(request: Request):
    return request.app.state.pipeline


async def _read_body(request: Request) -> dict:
    try:
        body = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Expected a JSON object")
    return body


def _text_field(body: dict, key: str) -> str:
    value = body.get(key)
    if not value or not isinstance(value, str) or not value.strip():
        raise HTTPException(status_code=400, detail=f"Missing '{key}' field")
    return value.strip()


def _image_field(body: dict) -> Optional[bytes]:
    """Decode the optional base64 ``imageBase64`` field of a launch form."""
    encoded = body.get("imageBase64")
    if not encoded:
        return None
    if not isinstance(encoded, str):
        raise HTTPException(status_code=400, detail="'imageBase64' must be a base64 string")
    if "," in encoded and encoded.startswith("data:"):
        encoded = encoded.split(",", 1)[1]
    try:
        image = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="'imageBase64' is not valid base64")
    if len(image) > MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="Image too large")
    return image


def _to_http_error(e: LaunchError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail={"message": "Validation failed", "errors": e.errors})
    if isinstance(e, (WalletNotConfiguredError, MonitorNotConfiguredError)):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, (UploadError, ServiceError, SigningError)):
        logger.warning("Upstream failure: %s", e)
        return HTTPException(status_code=502, detail=str(e))
    logger.error("Unhandled launch error: %s", e, exc_info=True)
    return HTTPException(status_code=500, detail=str(e))


# ── Prompt → suggestions ──

@router.post("/analyze")
async def analyze(request: Request):
    """Themes, sentiment, keywords and audience for a free-text prompt"""
    body = await _read_body(request)
    prompt = _text_field(body, "prompt")
    return {"analysis": _pipeline(request).analyze_prompt(prompt).to_dict()}


@router.post("/suggestions")
async def suggestions(request: Request):
    body = await _read_body(request)
    prompt = _text_field(body, "prompt")
    count = body.get("count", 3)
    if isinstance(count, bool) or not isinstance(count, int):
        raise HTTPException(status_code=400, detail="'count' must be an integer")

    pipeline = _pipeline(request)
    check = pipeline.validate_prompt(prompt)
    if not check["isValid"]:
        raise HTTPException(status_code=400, detail={"message": "Invalid prompt", "errors": check["errors"]})
    analysis = pipeline.analyze_prompt(prompt)
    return {
        "analysis": analysis.to_dict(),
        "suggestions": [s.to_dict() for s in pipeline.synthesize_suggestions(prompt, count)],
    }


@router.post("/validate-prompt")
async def validate_prompt(request: Request):
    body = await _read_body(request)
    prompt = body.get("prompt")
    return _pipeline(request).validate_prompt(prompt if isinstance(prompt, str) else "")


# ── Launch and trades ──

@router.post("/launch")
async def launch(request: Request):
    """Create a token from a manual launch form. Image bytes may ride along as imageBase64."""
    body = await _read_body(request)
    image = _image_field(body)
    try:
        launch_request = LaunchRequest.from_dict(body)
    except (AttributeError, TypeError):
        raise HTTPException(status_code=400, detail="Malformed launch request")
    try:
        result = await _pipeline(request).launch(launch_request, image=image)
    except LaunchError as e:
        raise _to_http_error(e)
    return {"success": True, **result.to_dict()}


async def _trade(request: Request, action: str):
    body = await _read_body(request)
    mint = body.get("mint") or ""
    amount = body.get("amount")
    slippage_bps: Optional[int] = body.get("slippageBps")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise HTTPException(status_code=400, detail="'amount' must be a number")
    pipeline = _pipeline(request)
    try:
        if action == "buy":
            signature = await pipeline.buy(mint, amount, slippage_bps)
        else:
            signature = await pipeline.sell(mint, amount, slippage_bps)
    except LaunchError as e:
        raise _to_http_error(e)
    return {"success": True, "signature": signature}


@router.post("/buy")
async def buy(request: Request):
    return await _trade(request, "buy")


@router.post("/sell")
async def sell(request: Request):
    return await _trade(request, "sell")


@router.get("/launches")
async def recent_launches(request: Request, limit: int = 20):
    """Most recent launches first"""
    limit = max(1, min(limit, 50))
    launches = _pipeline(request).recent_launches(limit)
    return {"launches": [r.to_dict() for r in launches], "count": len(launches)}


@router.get("/tokens/{mint}")
async def token_info(request: Request, mint: str):
    """Token data from the launch service for a mint address"""
    try:
        info = await _pipeline(request).token_info(mint)
    except ServiceError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=f"Token {mint} not found")
        raise _to_http_error(e)
    except LaunchError as e:
        raise _to_http_error(e)
    return {"token": info}

# ── Mention monitor ──

@router.post("/monitor/start")
async def start_monitor(request: Request):
    try:
        status = await _pipeline(request).start_monitor()
    except LaunchError as e:
        raise _to_http_error(e)
    return {"success": True, "message": "Started monitoring mentions", **status}


@router.post("/monitor/stop")
async def stop_monitor(request: Request):
    try:
        status = await _pipeline(request).stop_monitor()
    except LaunchError as e:
        raise _to_http_error(e)
    return {"success": True, "message": "Stopped monitoring", **status}


@router.get("/monitor/status")
async def monitor_status(request: Request):
    return _pipeline(request).monitor_status()


@router.post("/test-parse")
async def test_parse(request: Request):
    """Dry-run the mention parser without launching anything"""
    body = await _read_body(request)
    text = _text_field(body, "tweetText")
    return _pipeline(request).test_parse(text)
