from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from .chain.rpc import _keccak256

WEI_PER_ETHER = 10**18
ZERO_ADDRESS = "0x" + "0" * 40
MAX_UINT256 = 2**256 - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

Numeric = Union[str, int, float, Decimal]


def format_error(error: object) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    addr_hash = _keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def is_valid_address(address: object) -> bool:
    """
    Check that a value is a 0x-prefixed 20-byte hex address.

    All-lowercase and all-uppercase addresses are accepted as-is; mixed
    case must carry a valid EIP-55 checksum.
    """
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        return False
    body = address[2:]
    if body == body.lower() or body == body.upper():
        return True
    return to_checksum_address(address) == address


def to_wei(value: Numeric) -> int:
    """
    Convert an ether-denominated amount to wei.

    Raises:
        ValueError: If the amount is not a finite number or has more than
            18 decimal places.
    """
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Failed to convert to wei: invalid amount {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Failed to convert to wei: invalid amount {value!r}")

    with localcontext() as ctx:
        ctx.prec = 80
        wei = amount * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValueError(f"Failed to convert to wei: too many decimals in {value!r}")
    return int(wei)


def from_wei(value: Union[str, int]) -> str:
    """Format a wei amount in ether units, e.g. ``10**18 -> "1.0"``."""
    try:
        wei = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Failed to convert from wei: {exc}") from exc

    sign = "-" if wei < 0 else ""
    whole, frac = divmod(abs(wei), WEI_PER_ETHER)
    frac_str = f"{frac:018d}".rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"


def bps_to_percent(value: Union[str, int]) -> Decimal:
    """On-chain basis points to a two-decimal percentage (2500 -> 25.00)."""
    return (Decimal(int(value)) / 100).quantize(Decimal("0.01"))
