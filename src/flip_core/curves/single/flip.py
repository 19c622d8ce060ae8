import logging
from datetime import datetime
from typing import List, Optional

from flip_core.common.enums import SellShortfallPolicy
from flip_core.common.errors import MaxSupplyExceeded, TradingDisabled
from flip_core.common.math import as_uint
from flip_core.common.model import (
    CurveParams,
    CurveState,
    PricePoint,
    TransactionRequest,
    TransactionResult,
)
from flip_core.curves.single.base import BondingCurve
from flip_core.curves.utils.flip_curve_helper import FlipCurveHelper as helper

logger = logging.getLogger(__name__)


class FlipBondingCurve(BondingCurve):
    """
        A simulated FLIP collection: the contract's square-root bonding curve plus a mutable supply.

        Supported options:
          - Allow buy/sell toggles
          - Sell shortfall policy (strict or truncating)
          - Max supply enforcement on buys
          - Creator fee (taken from params.fee_percent)

        The unit price at supply s is:
          price(s) = p + (p * 2 * isqrt(100 * s * max) * isqrt(10000 * s²)) // max²

        A batch buy of n units costs price(s) + ... + price(s+n-1); a batch sell of n units
        returns price(s-1) + ... + price(s-n). The fee is applied once to the batch total.
    """

    def __init__(self, params: CurveParams, state: Optional[CurveState] = None, **kwargs):
        super().__init__(params, state)
        helper.validate_curve(params.max_supply, as_uint(self._state.current_supply, "current_supply"))
        if self._state.last_timestamp is None:
            self._state.last_timestamp = datetime.now()

        self.options = {
            "allow_buy": True,
            "allow_sell": True,
            "sell_policy": SellShortfallPolicy.STRICT,
            "enforce_max_supply": True,
        }

        for k, v in kwargs.items():
            if k in self.options:
                self.options[k] = v
            else:
                if "custom" not in self.options:
                    self.options["custom"] = {}
                self.options["custom"][k] = v

        self.options["sell_policy"] = helper.coerce_policy(self.options["sell_policy"])

    def get_spot_price(self, supply: int) -> int:
        """Return the fee-exclusive price of the unit minted at `supply`."""
        return helper.unit_price(as_uint(supply, "supply"), self.params.max_supply, self.params.initial_price)

    def next_mint_price(self) -> int:
        """What the next single mint costs, creator fee included."""
        return helper.apply_transaction_fee(
            self.get_spot_price(self.current_supply), self.params.fee_percent, is_buy=True
        )

    def floor_sell_price(self) -> int:
        """What selling a single unit returns right now, creator fee deducted. Zero when nothing is minted."""
        if self.current_supply == 0:
            return 0
        return helper.apply_transaction_fee(
            self.get_spot_price(self.current_supply - 1), self.params.fee_percent, is_buy=False
        )

    def calculate_purchase_cost(self, count: int) -> int:
        """Sum of unit prices from current_supply to current_supply + count - 1, before fees."""
        return helper.raw_buy_total(
            self.params.max_supply,
            self.current_supply,
            self.params.initial_price,
            as_uint(count, "count"),
        )

    def calculate_sale_return(self, count: int) -> int:
        """Sum of unit prices from current_supply - 1 down to current_supply - count, before fees."""
        return helper.raw_sell_total(
            self.params.max_supply,
            self.current_supply,
            self.params.initial_price,
            as_uint(count, "count"),
            self.options["sell_policy"],
        )

    def price_curve(self, points: int = 50) -> List[PricePoint]:
        return helper.sample_curve(self.params.max_supply, self.params.initial_price, points)

    def buy(self, request: TransactionRequest) -> TransactionResult:
        """
        Mints/buys `request.count` units, respecting:
          - allow_buy
          - enforce_max_supply
          - creator fee (added on top)
        Updates supply & liquidity in state, returns a TransactionResult.
        """
        if not self.options["allow_buy"]:
            raise TradingDisabled("Buys are disabled for this bonding curve.")

        count = as_uint(request.count, "count")
        if self.options["enforce_max_supply"] and self.current_supply + count > self.params.max_supply:
            raise MaxSupplyExceeded(count, self.current_supply, self.params.max_supply)

        raw_cost = self.calculate_purchase_cost(count)
        fee = helper.fee_amount(raw_cost, self.params.fee_percent)
        total_cost = raw_cost + fee

        self._update_state_after_buy(count, raw_cost)
        return self._result(count, raw_cost, fee, total_cost)

    def sell(self, request: TransactionRequest) -> TransactionResult:
        """
        Sells `request.count` units back into the curve, respecting:
          - allow_sell
          - sell shortfall policy
          - creator fee (deducted from proceeds)
        Updates supply & liquidity in state, returns a TransactionResult.
        """
        if not self.options["allow_sell"]:
            raise TradingDisabled("Sells are disabled for this bonding curve.")

        count = as_uint(request.count, "count")
        raw_return = self.calculate_sale_return(count)
        executed = min(count, self.current_supply)
        fee = helper.fee_amount(raw_return, self.params.fee_percent)
        total_return = raw_return - fee

        self._update_state_after_sell(executed, raw_return)
        return self._result(executed, raw_return, fee, total_return)

    def _result(self, executed: int, raw_total: int, fee: int, total: int) -> TransactionResult:
        now = datetime.now()
        self._state.last_timestamp = now
        logger.debug(
            "Executed %s units for %s wei (fee %s), supply now %s", executed, total, fee, self.current_supply
        )
        return TransactionResult(
            executed_count=executed,
            raw_total=raw_total,
            fee=fee,
            total_price=total,
            average_price=(total // executed) if executed != 0 else 0,
            new_supply=self.current_supply,
            timestamp=now,
        )

    @classmethod
    def from_values(cls, max_supply, initial_price, current_supply=0, fee_percent=0, **kwargs) -> "FlipBondingCurve":
        """Builds a curve from raw ints or digit strings, as received from an API or the command line."""
        params = CurveParams(
            max_supply=as_uint(max_supply, "max_supply"),
            initial_price=as_uint(initial_price, "initial_price"),
            fee_percent=as_uint(fee_percent, "fee_percent"),
        )
        state = CurveState(current_supply=as_uint(current_supply, "current_supply"))
        return cls(params, state, **kwargs)
