"""
Unit conversion and address helpers.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Union

from .exceptions import InvalidAddressError, InvalidAmountError

MIST_PER_SUI = 1_000_000_000
# Coin balances are Move u64 values
MAX_MIST = 2**64 - 1
SUI_COIN_TYPE = "0x2::sui::SUI"
SUI_COIN_OBJECT_TYPE = "0x2::coin::Coin<0x2::sui::SUI>"

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

Amount = Union[int, float, str, Decimal]


def strip_hex_prefix(value: str) -> str:
    """Remove a leading 0x/0X if present"""
    if value[:2].lower() == "0x":
        return value[2:]
    return value


def is_valid_address(value) -> bool:
    """Check that a value is a 0x-prefixed, 64 hex character Sui address"""
    return isinstance(value, str) and ADDRESS_PATTERN.match(value) is not None


def validate_address(value, field: str = "address") -> str:
    """
    Validate and normalise a Sui address or object id.

    Args:
        value: Candidate address
        field: Name used in the error message

    Returns:
        The address in lowercase

    Raises:
        InvalidAddressError: If the value does not match ^0x[0-9a-fA-F]{64}$
    """
    if not is_valid_address(value):
        raise InvalidAddressError(
            f"Invalid {field}: must be a 66-character hex string starting with 0x (got {value!r})"
        )
    return value.lower()


def _to_decimal(amount: Amount) -> Decimal:
    # bool is an int subclass; True must not become 1 MIST
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    try:
        # str() first so that 0.006 is read as written, not as its binary float
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {amount!r} is not finite")
    return value


def _check_range(value_mist: Decimal, amount: Amount) -> None:
    # Must run before int(): Decimal("1e30000000") is cheap, its int() is not
    if abs(value_mist) > MAX_MIST:
        raise InvalidAmountError(
            f"Amount too large: {amount} exceeds the maximum of {MAX_MIST} MIST"
        )


def to_mist(amount_sui: Amount) -> int:
    """
    Convert an amount in SUI to MIST, truncating toward zero.

    >>> to_mist(0.006)
    6000000
    >>> to_mist("0.0000000015")
    1

    Raises:
        InvalidAmountError: If the amount is malformed or above MAX_MIST
    """
    value = _to_decimal(amount_sui) * MIST_PER_SUI
    _check_range(value, amount_sui)
    return int(value.to_integral_value(rounding=ROUND_DOWN))


def mist_to_sui(amount_mist: int) -> str:
    """Render a MIST amount as a SUI string with 9 decimals"""
    return f"{Decimal(amount_mist) / MIST_PER_SUI:.9f}"


def parse_amount(amount: Amount, unit: str = "mist") -> int:
    """
    Turn a caller-supplied amount into a positive integer of MIST.

    Args:
        amount: The amount as given by the caller
        unit: "mist" when the amount is already fractional units, "sui" for whole units

    Returns:
        Amount in MIST

    Raises:
        InvalidAmountError: If the amount is not positive, above MAX_MIST, not an integer MIST value,
            or the unit is unknown
    """
    unit = (unit or "mist").lower()
    if unit == "sui":
        mist = to_mist(amount)
    elif unit == "mist":
        value = _to_decimal(amount)
        _check_range(value, amount)
        if value != value.to_integral_value():
            raise InvalidAmountError(f"Amount must be an integer in MIST, got {amount}")
        mist = int(value)
    else:
        raise InvalidAmountError(f"Unknown amount unit: {unit!r} (expected 'mist' or 'sui')")

    if mist <= 0:
        raise InvalidAmountError(f"Invalid amount: must be a positive number (got {amount} {unit})")
    return mist
