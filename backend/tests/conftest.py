import base64

import pytest
from unittest.mock import AsyncMock, MagicMock
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.transaction import VersionedTransaction


def make_response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json = MagicMock(side_effect=payload)
    else:
        resp.json = MagicMock(return_value=payload)
    return resp


def async_client(post=None, get=None):
    """AsyncMock usable as ``async with httpx.AsyncClient(...) as client``."""
    instance = AsyncMock()
    if post is not None:
        instance.post = post
    if get is not None:
        instance.get = get
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    return instance


@pytest.fixture
def payer():
    return Keypair()


@pytest.fixture
def unsigned_tx_b64(payer):
    """A decodable base64 transaction like the launch service returns."""
    msg = MessageV0.try_compile(payer.pubkey(), [], [], Hash.default())
    tx = VersionedTransaction(msg, [payer])
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture
def wallet(payer):
    w = MagicMock()
    w.public_key = MagicMock(return_value=str(payer.pubkey()))
    w.sign_and_send_transaction = AsyncMock(return_value="5igSig")
    return w
