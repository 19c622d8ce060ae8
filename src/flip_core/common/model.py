from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flip_core.common.enums import OrderSide
from flip_core.common.errors import InvalidCurveParameters
from flip_core.common.math import WAD


@dataclass(frozen=True)
class CurveParams:
    """
    Immutable parameters of a FLIP collection's bonding curve.

    All prices are wei and fee_percent is scaled by 1e18 (5% == 5 * 10**16).
    max_price is carried along for collections that set one; the curve itself never reads it.
    """
    max_supply: int
    initial_price: int
    fee_percent: int = 0
    max_price: int = 0

    def __post_init__(self):
        for name in ("max_supply", "initial_price", "fee_percent", "max_price"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidCurveParameters(f"'{name}' must be an integer, got {value!r}.")
            if value < 0:
                raise InvalidCurveParameters(f"'{name}' cannot be negative.")
        if self.max_supply == 0:
            raise InvalidCurveParameters("'max_supply' must be greater than zero.")
        if self.fee_percent > WAD:
            raise InvalidCurveParameters("'fee_percent' cannot exceed 100% (1e18).")


@dataclass
class CurveState:
    """Tracks the runtime state of a simulated collection."""
    current_supply: int = 0
    liquidity: Optional[int] = None
    last_timestamp: Optional[datetime] = None


@dataclass
class TransactionRequest:
    """A batch mint/buy or sell of `count` units."""
    order_type: OrderSide
    count: int = 0
    user_id: Optional[str] = None


@dataclass
class TransactionResult:
    """Outcome of a transaction. All amounts are wei."""
    executed_count: int
    raw_total: int
    fee: int
    total_price: int
    average_price: int
    new_supply: int
    timestamp: datetime


@dataclass(frozen=True)
class PricePoint:
    """One sample of the curve shape, as plotted by the collection price chart."""
    supply: int
    price: int
