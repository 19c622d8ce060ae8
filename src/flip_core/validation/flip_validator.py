import copy
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Union

from flip_core.common.enums import OrderSide
from flip_core.common.errors import PricingError
from flip_core.common.math import as_uint, from_wei, percent_to_fee
from flip_core.common.model import TransactionRequest
from flip_core.curves.single.flip import FlipBondingCurve
from flip_core.curves.utils.flip_curve_helper import FlipCurveHelper as helper

MIN_CREATOR_FEE_PERCENT = Decimal("1")
MAX_CREATOR_FEE_PERCENT = Decimal("100")
CREATOR_FEE_STEP = Decimal("0.1")


class FlipCurveValidator:
    """
    Validator for FLIP collection curves.
    Performs:
      1) Param checks, mirroring the collection creation form
      2) Boundary tests (spot price at 0, zero-unit cost, monotonic curve)
      3) Scenario tests (small buy/sell sequence on a copy of the curve)

    Each step returns a dict with:
      {
        "errors": [str...],
        "warnings": [str...],
        "info": {...}
      }
    and 'run_all_validations' aggregates them into a single result.
    """

    @staticmethod
    def validate_params(
        max_supply: Union[int, str],
        initial_price: Union[int, str],
        creator_fee_percent: Union[Decimal, str, int],
        max_price: Optional[Union[int, str]] = 0,
    ) -> Dict[str, Any]:
        """
        Checks the values a creator submits when launching a collection:
          - max_supply > 0
          - initial_price > 0 (wei)
          - creator fee between 1 and 100 percent, in steps of 0.1
        Warns when a non-zero max_price sits below the curve's top price.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        try:
            max_supply = as_uint(max_supply, "max_supply")
            if max_supply == 0:
                errors.append("FlipCurve: 'max_supply' must be > 0.")
        except PricingError as e:
            errors.append(f"FlipCurve: {e}")
            max_supply = None

        try:
            initial_price = as_uint(initial_price, "initial_price")
            if initial_price == 0:
                errors.append("FlipCurve: 'initial_price' must be > 0.")
        except PricingError as e:
            errors.append(f"FlipCurve: {e}")
            initial_price = None

        try:
            max_price = as_uint(max_price or 0, "max_price")
        except PricingError as e:
            errors.append(f"FlipCurve: {e}")
            max_price = None

        fee_percent = None
        try:
            fee = Decimal(str(creator_fee_percent))
        except InvalidOperation:
            errors.append(f"FlipCurve: creator fee {creator_fee_percent!r} is not a number.")
        else:
            if not fee.is_finite():
                errors.append(f"FlipCurve: creator fee {creator_fee_percent!r} is not a number.")
            elif fee < MIN_CREATOR_FEE_PERCENT:
                errors.append("FlipCurve: creator fee must be at least 1%.")
            elif fee > MAX_CREATOR_FEE_PERCENT:
                errors.append("FlipCurve: creator fee cannot exceed 100%.")
            elif fee % CREATOR_FEE_STEP != 0:
                errors.append("FlipCurve: creator fee must be a multiple of 0.1%.")
            else:
                fee_percent = percent_to_fee(fee)

        top_price = None
        if max_supply and initial_price is not None:
            top_price = helper.unit_price(max_supply - 1, max_supply, initial_price)
            if max_price and max_price < top_price:
                warnings.append(
                    f"FlipCurve: 'max_price' ({max_price}) is below the curve's top unit price ({top_price})."
                )

        info["param_summary"] = {
            "max_supply": str(max_supply),
            "initial_price": str(initial_price),
            "creator_fee_percent": str(creator_fee_percent),
            "fee_percent": str(fee_percent),
            "max_price": str(max_price),
            "top_price": str(top_price),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def boundary_tests(curve: 'FlipBondingCurve') -> Dict[str, Any]:
        """
        Calls a few boundary conditions on the curve:
          - get_spot_price(0) == initial_price
          - calculate_purchase_cost(0) == 0
          - sampled curve never decreases

        Returns a dict of errors/warnings/info.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        # 1) Spot price at supply=0
        price_at_zero = curve.get_spot_price(0)
        if price_at_zero != curve.params.initial_price:
            errors.append(
                f"Spot price at supply=0 is {price_at_zero}, expected initial price {curve.params.initial_price}."
            )

        # 2) Cost to buy 0 units => should be 0
        cost_zero = curve.calculate_purchase_cost(0)
        if cost_zero != 0:
            warnings.append(f"Cost to buy 0 units is not zero: got {cost_zero}")

        # 3) Monotonic across the plotted curve
        samples = curve.price_curve()
        for prev, point in zip(samples, samples[1:]):
            if point.price < prev.price:
                errors.append(f"Price decreases between supply {prev.supply} and {point.supply}.")

        info["boundary_tests_run"] = True
        info["max_unit_price"] = str(samples[-1].price)
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def scenario_tests(curve: 'FlipBondingCurve') -> Dict[str, Any]:
        """
        Runs a small scenario on a copy of the curve (the caller's curve is left untouched):
          1) buy(10)
          2) buy(5)
          3) sell(15)
        Buy amounts are capped by the remaining supply. Selling everything just bought must
        return exactly what was paid before fees.

        Return 'errors', 'warnings', 'info'.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        sim = copy.deepcopy(curve)
        bought = 0
        paid_raw = 0

        for count in (10, 5):
            count = min(count, sim.params.max_supply - sim.current_supply)
            try:
                result = sim.buy(TransactionRequest(order_type=OrderSide.BUY, count=count))
            except PricingError as e:
                errors.append(f"Exception in scenario step buy({count}): {e}")
                continue
            if result.total_price < result.raw_total:
                errors.append(f"Buying {count} units => fee reduced the total.")
            bought += result.executed_count
            paid_raw += result.raw_total

        try:
            result = sim.sell(TransactionRequest(order_type=OrderSide.SELL, count=bought))
            if result.raw_total != paid_raw:
                errors.append(
                    f"Selling {bought} units returned {result.raw_total}, expected {paid_raw} before fees."
                )
            if result.total_price > result.raw_total:
                errors.append(f"Selling {bought} units => fee increased the proceeds.")
        except PricingError as e:
            errors.append(f"Exception in scenario step sell({bought}): {e}")

        if sim.current_supply != curve.current_supply:
            errors.append("Supply did not return to its starting level after the scenario.")

        info["scenario_units"] = bought
        info["scenario_raw_total"] = str(paid_raw)
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def run_all_validations(curve: 'FlipBondingCurve', creator_fee_percent=None) -> Dict[str, Any]:
        """
        Aggregates:
          - param check
          - boundary tests
          - scenario tests
        Returns a dict with keys: errors, warnings, info
        """
        if not isinstance(curve, FlipBondingCurve):
            raise ValueError("Invalid curve type for FlipCurveValidator.")

        if creator_fee_percent is None:
            creator_fee_percent = from_wei(curve.params.fee_percent) * 100

        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        # 1) Param checks
        param_check = FlipCurveValidator.validate_params(
            curve.params.max_supply,
            curve.params.initial_price,
            creator_fee_percent,
            curve.params.max_price,
        )
        results["errors"].extend(param_check["errors"])
        results["warnings"].extend(param_check["warnings"])
        results["info"].update(param_check["info"])

        # 2) Boundary tests
        boundary = FlipCurveValidator.boundary_tests(curve)
        results["errors"].extend(boundary["errors"])
        results["warnings"].extend(boundary["warnings"])
        results["info"].update(boundary["info"])

        # 3) Scenario tests
        scenario = FlipCurveValidator.scenario_tests(curve)
        results["errors"].extend(scenario["errors"])
        results["warnings"].extend(scenario["warnings"])
        results["info"].update(scenario["info"])

        return results
