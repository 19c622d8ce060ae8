import argparse
import logging
import sys
from typing import List, Optional

from flip_core.common.enums import SellShortfallPolicy
from flip_core.common.errors import PricingError
from flip_core.common.math import from_wei
from flip_core.config import Settings
from flip_core.pricing import batch_buy_price, batch_sell_price, price_curve

logger = logging.getLogger(__name__)


def _add_curve_args(p: argparse.ArgumentParser):
    p.add_argument("--max-supply", required=True, help="Collection max supply")
    p.add_argument("--initial-price", required=True, help="Price at supply 0, in wei")


def _add_quote_args(p: argparse.ArgumentParser):
    _add_curve_args(p)
    p.add_argument("--current-supply", required=True, help="Units already minted")
    p.add_argument("--count", default="1", help="Number of units (default 1)")
    p.add_argument("--fee-percent", default="0", help="Creator fee scaled by 1e18 (5%% = 50000000000000000)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="flip_core", description="Off-chain FLIP bonding curve pricing")
    sub = p.add_subparsers(dest="command", required=True)

    buy = sub.add_parser("buy", help="Quote a batch mint/buy")
    _add_quote_args(buy)

    sell = sub.add_parser("sell", help="Quote a batch sell")
    _add_quote_args(sell)
    sell.add_argument(
        "--policy",
        choices=[policy.name.lower() for policy in SellShortfallPolicy],
        default=None,
        help="Behaviour when count exceeds the current supply (default from FLIP_SELL_POLICY)",
    )

    curve = sub.add_parser("curve", help="Print the sampled price curve")
    _add_curve_args(curve)
    curve.add_argument("--points", type=int, default=None, help="Number of intervals (default from FLIP_CHART_POINTS)")

    sub.add_parser("serve", help="Run the pricing HTTP API")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "buy":
            price = batch_buy_price(args.max_supply, args.current_supply, args.initial_price, args.count,
                                    args.fee_percent)
            print(f"{price} wei ({from_wei(price)} ETH)")
        elif args.command == "sell":
            policy = SellShortfallPolicy.from_str(args.policy) if args.policy else settings.sell_policy
            price = batch_sell_price(args.max_supply, args.current_supply, args.initial_price, args.count,
                                     args.fee_percent, policy)
            print(f"{price} wei ({from_wei(price)} ETH)")
        elif args.command == "curve":
            for point in price_curve(args.max_supply, args.initial_price, args.points or settings.chart_points):
                print(f"{point.supply}\t{point.price}\t{from_wei(point.price)}")
        elif args.command == "serve":
            from flip_core.webapi.webapi import app

            logger.info("Serving pricing API on %s:%s", settings.api_host, settings.api_port)
            app.run(host=settings.api_host, port=settings.api_port, debug=settings.api_debug)
    except PricingError as e:
        logger.error("%s: %s", type(e).__name__, e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
