class PricingError(ValueError):
    """Base class for every error raised while pricing against the FLIP curve."""


class InvalidCurveParameters(PricingError):
    """Curve inputs that the on-chain contract would never accept (zero max supply, supply out of range, etc.)."""


class InsufficientSupplyForSell(PricingError):
    """A sell asked for more units than are currently minted."""

    def __init__(self, count: int, current_supply: int):
        self.count = count
        self.current_supply = current_supply
        super().__init__(f"Cannot sell {count} units with a current supply of {current_supply}.")


class MaxSupplyExceeded(PricingError):
    """A buy would mint past the collection's max supply."""

    def __init__(self, count: int, current_supply: int, max_supply: int):
        self.count = count
        self.current_supply = current_supply
        self.max_supply = max_supply
        super().__init__(
            f"Cannot buy {count} units: only {max_supply - current_supply} of {max_supply} remain."
        )


class TradingDisabled(PricingError):
    pass
