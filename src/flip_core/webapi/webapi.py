import logging
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from flask import current_app, jsonify
from flask_openapi3 import Info, Tag
from flask_openapi3 import OpenAPI

from flip_core.common.enums import OrderSide, SellShortfallPolicy
from flip_core.common.errors import PricingError
from flip_core.common.math import from_wei
from flip_core.common.model import TransactionRequest
from flip_core.config import Settings
from flip_core.curves.single.flip import FlipBondingCurve
from flip_core.validation.flip_validator import FlipCurveValidator

logger = logging.getLogger(__name__)

info = Info(title="FLIP Pricing API", version="1.0.0")
app = OpenAPI(__name__, info=info)
app.config["FLIP_SETTINGS"] = Settings.from_env()


class CurveTransactionAction(Enum):
    buy = "buy"
    sell = "sell"


class SellPolicy(Enum):
    strict = "strict"
    truncate = "truncate"


class CurveTransactionRequest(BaseModel):
    action: CurveTransactionAction = Field(description="Quote a batch buy or a batch sell")
    max_supply: int = Field(ge=0, description="Collection max supply")
    current_supply: int = Field(ge=0, description="Units already minted")
    initial_price: int = Field(ge=0, description="Price at supply 0, in wei")
    count: int = Field(ge=0, description="Number of units to buy / sell")
    fee_percent: int = Field(0, ge=0, description="Creator fee scaled by 1e18 (5% = 50000000000000000)")
    sell_policy: Optional[SellPolicy] = Field(None, description="What to do when selling more than the supply")


class CurveStatusRequest(BaseModel):
    max_supply: int = Field(ge=0, description="Collection max supply")
    current_supply: int = Field(0, ge=0, description="Units already minted")
    initial_price: int = Field(ge=0, description="Price at supply 0, in wei")
    fee_percent: int = Field(0, ge=0, description="Creator fee scaled by 1e18")
    points: Optional[int] = Field(None, gt=0, description="Number of intervals to sample the curve at")


class CurveValidateRequest(BaseModel):
    max_supply: int = Field(ge=0, description="Collection max supply")
    initial_price: int = Field(ge=0, description="Price at supply 0, in wei")
    creator_fee_percent: Decimal = Field(description="Creator fee as typed in the form, in percent")
    max_price: int = Field(0, ge=0, description="Optional max price, in wei")


curve_action_tag = Tag(
    name="Bonding Curve Transaction",
    description="Quote a batch buy or sell against a collection's curve before submitting it on-chain",
)

curve_status_tag = Tag(
    name="Bonding Curve Status",
    description="Get the shape of a bonding curve for plotting and the current mint/sell prices",
)

curve_validate_tag = Tag(
    name="Bonding Curve Validation",
    description="Check collection creation parameters before deploying",
)


def _settings() -> Settings:
    return current_app.config["FLIP_SETTINGS"]


@app.errorhandler(PricingError)
def handle_pricing_error(e: PricingError):
    logger.info("Rejected pricing request: %s", e)
    return jsonify({"error": type(e).__name__, "message": str(e)}), 400


@app.post("/curve/transaction", summary="Curve Transaction", tags=[curve_action_tag])
def transaction(body: CurveTransactionRequest):
    """
    Quotes a batch buy or sell on a curve. All wei amounts are returned as strings.
    """
    if body.sell_policy is None:
        policy = _settings().sell_policy
    else:
        policy = SellShortfallPolicy.from_str(body.sell_policy.value)

    curve = FlipBondingCurve.from_values(
        body.max_supply,
        body.initial_price,
        current_supply=body.current_supply,
        fee_percent=body.fee_percent,
        sell_policy=policy,
    )
    side = OrderSide.from_str(body.action.name)
    request = TransactionRequest(order_type=side, count=body.count)

    if side == OrderSide.BUY:
        result = curve.buy(request)
    else:
        result = curve.sell(request)

    logger.info("Quoted %s of %s units at supply %s", side, body.count, body.current_supply)
    return jsonify({
        "action": body.action.value,
        "count": body.count,
        "executed_count": result.executed_count,
        "raw_total": str(result.raw_total),
        "fee": str(result.fee),
        "total_price": str(result.total_price),
        "total_price_eth": str(from_wei(result.total_price)),
        "new_supply": result.new_supply,
    })


@app.get("/curve/status", summary="Curve Status", tags=[curve_status_tag])
def status(query: CurveStatusRequest):
    """
    Return a representation of the curve which can be plotted visually by the caller,
    plus the next mint price and the floor sell price at the current supply.
    """
    curve = FlipBondingCurve.from_values(
        query.max_supply,
        query.initial_price,
        current_supply=query.current_supply,
        fee_percent=query.fee_percent,
    )
    points = query.points or _settings().chart_points
    return jsonify({
        "current_supply": curve.current_supply,
        "next_mint_price": str(curve.next_mint_price()),
        "floor_sell_price": str(curve.floor_sell_price()),
        "curve": [
            {"supply": p.supply, "price": str(p.price), "price_eth": str(from_wei(p.price))}
            for p in curve.price_curve(points)
        ],
    })


@app.post("/curve/validate", summary="Validate Curve Parameters", tags=[curve_validate_tag])
def validate(body: CurveValidateRequest):
    """
    Runs the collection creation checks and returns the errors/warnings/info report.
    """
    report = FlipCurveValidator.validate_params(
        body.max_supply,
        body.initial_price,
        body.creator_fee_percent,
        body.max_price,
    )
    return jsonify(report)


if __name__ == "__main__":
    settings = Settings.from_env()
    app.run(host=settings.api_host, port=settings.api_port, debug=settings.api_debug)
