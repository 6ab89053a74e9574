"""Tests for create/buy/sell through the launch service"""
import httpx
import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from solders.transaction import VersionedTransaction

from conftest import async_client, make_response
from launchpad.errors import ServiceError, SigningError, UploadError, ValidationError
from launchpad.launch_client import LaunchTransactionClient, decode_transaction
from launchpad.models import LaunchRequest


def _uploader(image_uri="ipfs://img", metadata_uri="ipfs://meta"):
    uploader = MagicMock()
    uploader.upload_image = AsyncMock(return_value=image_uri)
    uploader.upload_metadata = AsyncMock(return_value=metadata_uri)
    return uploader


def _request(**overrides):
    fields = {"name": "Super Sheep", "symbol": "SHEEP", "description": "Baa", "twitter": "https://x.com/sheep"}
    fields.update(overrides)
    return LaunchRequest(**fields)


def _created(tx_b64):
    return make_response(200, {
        "transaction": tx_b64,
        "mint": "Mint111",
        "bondingCurve": "Curve111",
        "associatedBondingCurve": "Assoc111",
    })


class TestDecodeTransaction:
    def test_decodes(self, unsigned_tx_b64):
        assert isinstance(decode_transaction(unsigned_tx_b64), VersionedTransaction)

    def test_bad_base64(self):
        with pytest.raises(ServiceError, match="invalid base64"):
            decode_transaction("not base64!!")

    def test_not_a_transaction(self):
        with pytest.raises(ServiceError, match="undecodable"):
            decode_transaction("aGVsbG8=")


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_with_image(self, wallet, unsigned_tx_b64):
        uploader = _uploader()
        mock_post = AsyncMock(return_value=_created(unsigned_tx_b64))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            client = LaunchTransactionClient(wallet, uploader=uploader, base_url="https://launch.example/api")
            result = await client.create(_request(initial_buy=0.1), image=b"png")

        uploader.upload_image.assert_awaited_once_with(b"png", filename="sheep.png")
        uploader.upload_metadata.assert_awaited_once()
        url = mock_post.call_args.args[0]
        payload = mock_post.call_args.kwargs["json"]
        assert url == "https://launch.example/api/trade-local"
        assert payload["imageUrl"] == "ipfs://img"
        assert payload["metadataUri"] == "ipfs://meta"
        assert payload["options"]["twitter"] == "https://x.com/sheep"
        assert payload["initialBuy"] == 0.1
        assert payload["slippageBps"] == 500
        assert payload["pool"] == "pump"

        wallet.sign_and_send_transaction.assert_awaited_once()
        assert isinstance(wallet.sign_and_send_transaction.call_args.args[0], VersionedTransaction)
        assert result.signature == "5igSig"
        assert result.mint == "Mint111"
        assert result.bonding_curve == "Curve111"
        assert result.associated_bonding_curve == "Assoc111"
        assert result.metadata_uri == "ipfs://meta"
        assert result.pump_fun_url == "https://pump.fun/Mint111"

    @pytest.mark.asyncio
    async def test_create_without_image_skips_upload(self, wallet, unsigned_tx_b64):
        uploader = _uploader()
        mock_post = AsyncMock(return_value=_created(unsigned_tx_b64))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            result = await LaunchTransactionClient(wallet, uploader=uploader).create(_request())

        uploader.upload_image.assert_not_awaited()
        uploader.upload_metadata.assert_not_awaited()
        assert "metadataUri" not in mock_post.call_args.kwargs["json"]
        assert result.metadata_uri is None

    @pytest.mark.asyncio
    async def test_image_url_gets_metadata(self, wallet, unsigned_tx_b64):
        uploader = _uploader()
        mock_post = AsyncMock(return_value=_created(unsigned_tx_b64))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            await LaunchTransactionClient(wallet, uploader=uploader).create(_request(image_uri="https://img.example/a.png"))

        uploader.upload_image.assert_not_awaited()
        uploader.upload_metadata.assert_awaited_once()
        assert mock_post.call_args.kwargs["json"]["imageUrl"] == "https://img.example/a.png"

    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_service(self, wallet):
        uploader = _uploader()
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            with pytest.raises(ValidationError):
                await LaunchTransactionClient(wallet, uploader=uploader).create(
                    _request(symbol="WAYTOOLONGSYM"), image=b"png")
            MockClient.assert_not_called()

        uploader.upload_image.assert_not_awaited()
        wallet.sign_and_send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upload_failure_short_circuits(self, wallet):
        uploader = _uploader()
        uploader.upload_image = AsyncMock(side_effect=UploadError("ipfs down"))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            with pytest.raises(UploadError):
                await LaunchTransactionClient(wallet, uploader=uploader).create(_request(), image=b"png")
            MockClient.assert_not_called()

        wallet.sign_and_send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,image", [
        ({"image_uri": "https://img.example/s.png"}, None),
        ({}, b"png"),
    ])
    async def test_metadata_upload_failure_short_circuits(self, wallet, overrides, image):
        uploader = _uploader()
        uploader.upload_metadata = AsyncMock(side_effect=UploadError("metadata rejected"))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            with pytest.raises(UploadError, match="metadata rejected"):
                await LaunchTransactionClient(wallet, uploader=uploader).create(_request(**overrides), image=image)
            MockClient.assert_not_called()

        uploader.upload_metadata.assert_awaited_once()
        wallet.sign_and_send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_transaction(self, wallet):
        mock_post = AsyncMock(return_value=make_response(200, {"mint": "Mint111"}))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            with pytest.raises(ServiceError, match="No transaction returned from create API"):
                await LaunchTransactionClient(wallet, uploader=_uploader()).create(_request())

        wallet.sign_and_send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_mint(self, wallet, unsigned_tx_b64):
        mock_post = AsyncMock(return_value=make_response(200, {"transaction": unsigned_tx_b64}))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            with pytest.raises(ServiceError, match="No mint returned from create API"):
                await LaunchTransactionClient(wallet, uploader=_uploader()).create(_request())

        wallet.sign_and_send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_status_carries_code(self, wallet):
        mock_post = AsyncMock(return_value=make_response(503, {}))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            with pytest.raises(ServiceError) as exc:
                await LaunchTransactionClient(wallet, uploader=_uploader()).create(_request())

        assert exc.value.status_code == 503

    @pytest.mark.asyncio
    async def test_network_error(self, wallet):
        mock_post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            with pytest.raises(ServiceError):
                await LaunchTransactionClient(wallet, uploader=_uploader()).create(_request())

    @pytest.mark.asyncio
    async def test_wallet_failure_is_signing_error(self, wallet, unsigned_tx_b64):
        wallet.sign_and_send_transaction = AsyncMock(side_effect=RuntimeError("user rejected"))
        mock_post = AsyncMock(return_value=_created(unsigned_tx_b64))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            with pytest.raises(SigningError, match="user rejected"):
                await LaunchTransactionClient(wallet, uploader=_uploader()).create(_request())

    @pytest.mark.asyncio
    async def test_empty_signature_is_signing_error(self, wallet, unsigned_tx_b64):
        wallet.sign_and_send_transaction = AsyncMock(return_value="")
        mock_post = AsyncMock(return_value=_created(unsigned_tx_b64))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            with pytest.raises(SigningError):
                await LaunchTransactionClient(wallet, uploader=_uploader()).create(_request())


class TestTrades:
    @pytest.mark.asyncio
    async def test_buy_payload(self, wallet, payer, unsigned_tx_b64):
        mock_post = AsyncMock(return_value=make_response(200, {"transaction": unsigned_tx_b64}))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            sig = await LaunchTransactionClient(wallet, uploader=_uploader()).buy("Mint111", 0.5)

        payload = mock_post.call_args.kwargs["json"]
        assert sig == "5igSig"
        assert payload["publicKey"] == str(payer.pubkey())
        assert payload["action"] == "buy"
        assert payload["amount"] == 0.5
        assert payload["denominatedInSol"] == "true"
        assert payload["slippage"] == 500
        assert payload["priorityFee"] == 0.0001

    @pytest.mark.asyncio
    async def test_sell_payload(self, wallet, unsigned_tx_b64):
        mock_post = AsyncMock(return_value=make_response(200, {"transaction": unsigned_tx_b64}))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(post=mock_post)
            client = LaunchTransactionClient(wallet, uploader=_uploader(), default_priority_fee=0.001, pool="auto")
            await client.sell("Mint111", 1000, slippage_bps=100)

        payload = mock_post.call_args.kwargs["json"]
        assert payload["action"] == "sell"
        assert payload["denominatedInSol"] == "false"
        assert payload["slippage"] == 100
        assert payload["priorityFee"] == 0.001
        assert payload["pool"] == "auto"

    @pytest.mark.asyncio
    async def test_invalid_trade_never_reaches_service(self, wallet):
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            with pytest.raises(ValidationError):
                await LaunchTransactionClient(wallet, uploader=_uploader()).buy("", 0)
            MockClient.assert_not_called()


class TestTokenInfo:
    @pytest.mark.asyncio
    async def test_fetches_token(self, wallet):
        info = {"mint": "Mint111", "name": "Super Sheep", "symbol": "SHEEP", "market_cap": 31.2}
        mock_get = AsyncMock(return_value=make_response(200, info))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(get=mock_get)
            client = LaunchTransactionClient(wallet, uploader=_uploader(), base_url="https://launch.example/api/")
            result = await client.token_info("Mint111")

        assert result == info
        assert mock_get.call_args.args[0] == "https://launch.example/api/tokens/Mint111"
        wallet.sign_and_send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found_carries_code(self, wallet):
        mock_get = AsyncMock(return_value=make_response(404, {}))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(get=mock_get)
            with pytest.raises(ServiceError, match="HTTP 404") as exc:
                await LaunchTransactionClient(wallet, uploader=_uploader()).token_info("Nope111")

        assert exc.value.status_code == 404

    @pytest.mark.asyncio
    async def test_timeout(self, wallet):
        mock_get = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(get=mock_get)
            with pytest.raises(ServiceError, match="timed out"):
                await LaunchTransactionClient(wallet, uploader=_uploader()).token_info("Mint111")

    @pytest.mark.asyncio
    async def test_invalid_json(self, wallet):
        mock_get = AsyncMock(return_value=make_response(200, ValueError("not json")))
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            MockClient.return_value = async_client(get=mock_get)
            with pytest.raises(ServiceError, match="invalid JSON"):
                await LaunchTransactionClient(wallet, uploader=_uploader()).token_info("Mint111")

    @pytest.mark.asyncio
    async def test_blank_mint_never_reaches_service(self, wallet):
        with patch("launchpad.launch_client.httpx.AsyncClient") as MockClient:
            with pytest.raises(ValidationError):
                await LaunchTransactionClient(wallet, uploader=_uploader()).token_info("  ")
            MockClient.assert_not_called()
