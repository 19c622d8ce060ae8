from decimal import Decimal, ROUND_DOWN, localcontext
from math import isqrt
from typing import Union

from flip_core.common.errors import InvalidCurveParameters

# uint256 fixed-point scale used by the contracts for prices and fee percentages.
WAD = 10 ** 18

# Enough digits for any uint256 (78 digits) plus 18 decimals.
_DECIMAL_PRECISION = 100

__all__ = [
    "WAD",
    "isqrt",
    "as_uint",
    "to_wei",
    "from_wei",
    "percent_to_fee",
    "int_approx_equal",
]


def as_uint(value: Union[int, str], name: str) -> int:
    """
    Coerces a caller-supplied quantity to a non-negative int.

    Accepts ints and base-10 digit strings (uint256 values usually arrive as strings from JSON or ABI decoders).
    Floats and bools are rejected: they cannot carry a uint256 without losing precision.

    :raises InvalidCurveParameters: if the value is not a non-negative integer.
    """
    if isinstance(value, bool):
        raise InvalidCurveParameters(f"'{name}' must be a non-negative integer, got {value!r}.")
    if isinstance(value, int):
        if value < 0:
            raise InvalidCurveParameters(f"'{name}' cannot be negative, got {value}.")
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdigit():
            return int(stripped)
    raise InvalidCurveParameters(f"'{name}' must be a non-negative integer, got {value!r}.")


def to_wei(amount: Union[Decimal, str, int]) -> int:
    """
    Converts an ether-denominated amount to wei, truncating anything below 1 wei.
    Same result as ethers' parseEther for inputs with at most 18 decimals.
    """
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        scaled = Decimal(str(amount)) * WAD
        if scaled < 0:
            raise ValueError(f"Cannot convert a negative amount to wei: {amount}")
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_wei(wei: int) -> Decimal:
    """Converts wei to an exact Decimal amount of ether."""
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return Decimal(wei) / WAD


def percent_to_fee(percent: Union[Decimal, str, int]) -> int:
    """
    Converts a creator fee typed as a percentage (e.g. 5 for 5%) into the 1e18-scaled fraction the contracts store.
    """
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return to_wei(Decimal(str(percent)) / Decimal("100"))


def int_approx_equal(a: int, b: int, tol: int = 0) -> bool:
    return abs(a - b) <= tol
