"""Wallet signing capability.

The pipeline only needs a public identity and a sign-and-submit call. Any
object with that shape can be injected; ``KeypairWallet`` is a server-side
implementation backed by a local keypair and a Solana JSON-RPC endpoint.
"""
import base64
import logging
from typing import Protocol

import httpx
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"


class WalletCapability(Protocol):
    def public_key(self) -> str:
        ...

    async def sign_and_send_transaction(self, transaction: VersionedTransaction) -> str:
        ...


class RpcError(Exception):
    pass


class KeypairWallet:
    def __init__(self, keypair: Keypair, rpc_url: str = DEFAULT_RPC_URL, timeout: float = 30):
        self.keypair = keypair
        self.rpc_url = rpc_url
        self.timeout = timeout

    @classmethod
    def from_base58(cls, secret: str, rpc_url: str = DEFAULT_RPC_URL, timeout: float = 30) -> "KeypairWallet":
        return cls(Keypair.from_base58_string(secret.strip()), rpc_url, timeout)

    def public_key(self) -> str:
        return str(self.keypair.pubkey())

    def sign(self, transaction: VersionedTransaction) -> VersionedTransaction:
        return VersionedTransaction(transaction.message, [self.keypair])

    async def sign_and_send_transaction(self, transaction: VersionedTransaction) -> str:
        signed = self.sign(transaction)
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "sendTransaction",
            "params": [
                base64.b64encode(bytes(signed)).decode(),
                {"encoding": "base64", "preflightCommitment": "confirmed"},
            ],
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(self.rpc_url, json=payload)
        if resp.status_code != 200:
            raise RpcError(f"RPC sendTransaction returned HTTP {resp.status_code}")
        data = resp.json()
        if "error" in data:
            err = data["error"]
            message = err.get("message", err) if isinstance(err, dict) else err
            raise RpcError(f"RPC sendTransaction error: {message}")
        signature = data.get("result")
        logger.info("Submitted transaction %s from %s", signature, self.public_key())
        return signature
