import logging
from typing import List, Union

from flip_core.common.enums import SellShortfallPolicy
from flip_core.common.errors import InsufficientSupplyForSell, InvalidCurveParameters
from flip_core.common.math import WAD, as_uint, isqrt
from flip_core.common.model import PricePoint

logger = logging.getLogger(__name__)


class FlipCurveHelper:
    """
    Integer arithmetic of the FLIP bonding curve, reproduced operation by operation from the contract.

    The per-unit price at a supply level s is:
        price(0) = initial_price
        price(s) = initial_price
                   + (initial_price * 2 * isqrt(100 * s * max_supply) * isqrt(10000 * s * s)) // max_supply**2

    Both roots are truncated independently before they are multiplied, and every division floors.
    Do not simplify the expression algebraically: each truncation changes the result at the wei level.
    """

    @staticmethod
    def validate_curve(max_supply: int, current_supply: int, fee_percent: int = 0):
        """
        Checks the inputs shared by every pricing call.

        :raises InvalidCurveParameters: if max_supply is zero, current_supply is past max_supply,
            or fee_percent is outside [0, 1e18].
        """
        if max_supply == 0:
            raise InvalidCurveParameters("'max_supply' must be greater than zero.")
        if current_supply > max_supply:
            raise InvalidCurveParameters(
                f"'current_supply' ({current_supply}) cannot exceed 'max_supply' ({max_supply})."
            )
        if fee_percent > WAD:
            raise InvalidCurveParameters("'fee_percent' cannot exceed 100% (1e18).")

    @staticmethod
    def unit_price(supply: int, max_supply: int, initial_price: int) -> int:
        """
        Price of the single unit minted when the supply is `supply`.
        Callers are expected to have validated the inputs; max_supply must be non-zero.
        """
        if supply == 0:
            return initial_price
        sqrt1 = isqrt(100 * supply * max_supply)
        sqrt2 = isqrt(10000 * supply * supply)
        return initial_price + (initial_price * 2 * sqrt1 * sqrt2) // (max_supply * max_supply)

    @staticmethod
    def fee_amount(total: int, fee_percent: int) -> int:
        return (total * fee_percent) // WAD

    @staticmethod
    def apply_transaction_fee(total: int, fee_percent: int, is_buy: bool) -> int:
        """
        Applies the creator fee once, to the aggregated total.
        Buyers pay the fee on top, sellers have it deducted from their proceeds.
        """
        fee = FlipCurveHelper.fee_amount(total, fee_percent)
        if is_buy:
            return total + fee
        return total - fee

    @staticmethod
    def raw_buy_total(max_supply: int, current_supply: int, initial_price: int, count: int) -> int:
        """Sum of unit prices for supply levels current_supply .. current_supply + count - 1."""
        total = 0
        for i in range(count):
            total += FlipCurveHelper.unit_price(current_supply + i, max_supply, initial_price)
        return total

    @staticmethod
    def raw_sell_total(
        max_supply: int,
        current_supply: int,
        initial_price: int,
        count: int,
        policy: SellShortfallPolicy = SellShortfallPolicy.STRICT,
    ) -> int:
        """
        Sum of unit prices for supply levels current_supply - 1 down to current_supply - count.
        Each unit is priced at the supply level it occupies before it is burned.
        """
        if count > current_supply:
            if policy == SellShortfallPolicy.STRICT:
                raise InsufficientSupplyForSell(count, current_supply)
            logger.warning(
                "Sell of %s units truncated to the %s units in supply", count, current_supply
            )

        total = 0
        for i in range(count):
            supply = current_supply - i - 1
            if supply < 0:
                break
            total += FlipCurveHelper.unit_price(supply, max_supply, initial_price)
        return total

    @staticmethod
    def batch_buy_price(
        max_supply: int,
        current_supply: int,
        initial_price: int,
        count: int,
        fee_percent: int,
    ) -> int:
        FlipCurveHelper.validate_curve(max_supply, current_supply, fee_percent)
        total = FlipCurveHelper.raw_buy_total(max_supply, current_supply, initial_price, count)
        return FlipCurveHelper.apply_transaction_fee(total, fee_percent, is_buy=True)

    @staticmethod
    def batch_sell_price(
        max_supply: int,
        current_supply: int,
        initial_price: int,
        count: int,
        fee_percent: int,
        policy: SellShortfallPolicy = SellShortfallPolicy.STRICT,
    ) -> int:
        FlipCurveHelper.validate_curve(max_supply, current_supply, fee_percent)
        total = FlipCurveHelper.raw_sell_total(max_supply, current_supply, initial_price, count, policy)
        return FlipCurveHelper.apply_transaction_fee(total, fee_percent, is_buy=False)

    @staticmethod
    def sample_curve(max_supply: int, initial_price: int, points: int = 50) -> List[PricePoint]:
        """
        Samples the curve at points + 1 evenly spaced supply levels, floor(max_supply * i / points) for i in 0..points.
        """
        if max_supply == 0:
            raise InvalidCurveParameters("'max_supply' must be greater than zero.")
        if points <= 0:
            raise InvalidCurveParameters("'points' must be greater than zero.")

        samples = []
        for i in range(points + 1):
            supply = (max_supply * i) // points
            samples.append(PricePoint(supply, FlipCurveHelper.unit_price(supply, max_supply, initial_price)))
        return samples

    @staticmethod
    def coerce_policy(policy: Union[SellShortfallPolicy, str]) -> SellShortfallPolicy:
        if isinstance(policy, SellShortfallPolicy):
            return policy
        if not isinstance(policy, str):
            raise InvalidCurveParameters(f"Unknown sell shortfall policy {policy!r}.")
        try:
            return SellShortfallPolicy.from_str(policy)
        except NotImplementedError as e:
            raise InvalidCurveParameters(str(e)) from e

    @staticmethod
    def coerce_inputs(**quantities: Union[int, str]) -> dict:
        """Runs every named quantity through as_uint, preserving the names."""
        return {name: as_uint(value, name) for name, value in quantities.items()}
