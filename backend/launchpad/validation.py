"""Input checks run before any upload or launch-service call."""
from typing import List

from launchpad.errors import ValidationError
from launchpad.models import LaunchRequest

MAX_SYMBOL_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 1000
MAX_SLIPPAGE_BPS = 10_000


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_slippage(slippage_bps, errors: List[str]):
    if not isinstance(slippage_bps, int) or isinstance(slippage_bps, bool):
        errors.append("Slippage must be an integer number of basis points")
    elif not 0 <= slippage_bps <= MAX_SLIPPAGE_BPS:
        errors.append(f"Slippage must be between 0 and {MAX_SLIPPAGE_BPS} basis points")


def launch_request_errors(request: LaunchRequest) -> List[str]:
    errors: List[str] = []

    if not request.name or not request.name.strip():
        errors.append("Token name is required")

    if not request.symbol or not request.symbol.strip():
        errors.append("Token symbol is required")
    elif len(request.symbol) > MAX_SYMBOL_LENGTH:
        errors.append(f"Token symbol must be {MAX_SYMBOL_LENGTH} characters or less")

    if not request.description or not request.description.strip():
        errors.append("Token description is required")
    elif len(request.description) > MAX_DESCRIPTION_LENGTH:
        errors.append(f"Token description must be {MAX_DESCRIPTION_LENGTH} characters or less")

    if not _is_number(request.initial_buy) or request.initial_buy < 0:
        errors.append("Initial buy must be a non-negative SOL amount")
    if not _is_number(request.priority_fee) or request.priority_fee < 0:
        errors.append("Priority fee must be a non-negative SOL amount")
    _check_slippage(request.slippage_bps, errors)
    return errors


def validate_launch_request(request: LaunchRequest) -> LaunchRequest:
    errors = launch_request_errors(request)
    if errors:
        raise ValidationError(errors)
    return request


def validate_trade(mint: str, amount, slippage_bps) -> None:
    errors: List[str] = []
    if not mint or not str(mint).strip():
        errors.append("Mint address is required")
    if not _is_number(amount) or amount <= 0:
        errors.append("Amount must be a positive number")
    _check_slippage(slippage_bps, errors)
    if errors:
        raise ValidationError(errors)
