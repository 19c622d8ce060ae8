"""
Off-chain estimator for FLIP mint/buy/sell prices.

These are the entry points the frontend and any analytics job use to preview what the Trade contract will charge
or pay out. Every function is pure: identical inputs always give identical wei amounts, matching the contract's
uint256 arithmetic bit for bit.

Quantities may be passed as ints or base-10 digit strings. Prices and fee_percent are scaled by 1e18.
"""
import logging
from typing import List, Union

from flip_core.common.enums import SellShortfallPolicy
from flip_core.common.model import PricePoint
from flip_core.curves.utils.flip_curve_helper import FlipCurveHelper as helper

logger = logging.getLogger(__name__)

Uint = Union[int, str]


def unit_price(supply: Uint, max_supply: Uint, initial_price: Uint) -> int:
    """Price of one unit minted at the given supply level, without fees."""
    q = helper.coerce_inputs(supply=supply, max_supply=max_supply, initial_price=initial_price)
    helper.validate_curve(q["max_supply"], 0)
    return helper.unit_price(q["supply"], q["max_supply"], q["initial_price"])


def batch_buy_price(
    max_supply: Uint,
    current_supply: Uint,
    initial_price: Uint,
    count: Uint,
    fee_percent: Uint,
) -> int:
    """
    Total a buyer pays to mint/buy `count` units starting at `current_supply`, creator fee included.

    :raises InvalidCurveParameters: on a zero max supply, a supply past max supply, a fee above 100%
        or any input that is not a non-negative integer.
    """
    q = helper.coerce_inputs(
        max_supply=max_supply,
        current_supply=current_supply,
        initial_price=initial_price,
        count=count,
        fee_percent=fee_percent,
    )
    price = helper.batch_buy_price(
        q["max_supply"], q["current_supply"], q["initial_price"], q["count"], q["fee_percent"]
    )
    logger.debug("Batch buy quote: %s units from supply %s -> %s wei", q["count"], q["current_supply"], price)
    return price


def batch_sell_price(
    max_supply: Uint,
    current_supply: Uint,
    initial_price: Uint,
    count: Uint,
    fee_percent: Uint,
    policy: Union[SellShortfallPolicy, str] = SellShortfallPolicy.STRICT,
) -> int:
    """
    Proceeds a seller receives for `count` units sold back from `current_supply`, creator fee deducted.

    With the default STRICT policy, asking for more units than are in supply raises InsufficientSupplyForSell.
    TRUNCATE prices only the units that exist, matching the legacy frontend estimate.
    """
    q = helper.coerce_inputs(
        max_supply=max_supply,
        current_supply=current_supply,
        initial_price=initial_price,
        count=count,
        fee_percent=fee_percent,
    )
    price = helper.batch_sell_price(
        q["max_supply"],
        q["current_supply"],
        q["initial_price"],
        q["count"],
        q["fee_percent"],
        helper.coerce_policy(policy),
    )
    logger.debug("Batch sell quote: %s units from supply %s -> %s wei", q["count"], q["current_supply"], price)
    return price


def price_curve(max_supply: Uint, initial_price: Uint, points: int = 50) -> List[PricePoint]:
    """Samples the curve for plotting, points + 1 evenly spaced supply levels from 0 to max_supply."""
    q = helper.coerce_inputs(max_supply=max_supply, initial_price=initial_price)
    return helper.sample_curve(q["max_supply"], q["initial_price"], points)
