"""Error taxonomy for launch, trade and monitor operations.

Every error is local to one request or operation. Manual callers receive
them directly; the ingestion monitor records them and moves on.
"""
from typing import List, Optional


class LaunchError(Exception):
    """Base class for pipeline failures."""


class ValidationError(LaunchError):
    """Malformed input, rejected before any network call."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid request")


class UploadError(LaunchError):
    """Image or metadata push to IPFS failed."""


class ServiceError(LaunchError):
    """Launch service returned an error status or an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class SigningError(LaunchError):
    """Wallet rejected the transaction or failed to produce a signature."""


class WalletNotConfiguredError(LaunchError):
    """No signing wallet available for on-chain operations."""


class MonitorNotConfiguredError(LaunchError):
    """No mention source available for the ingestion monitor."""
