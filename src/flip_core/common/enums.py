from enum import Enum


class OrderSide(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def from_str(cls, side_str):
        if side_str.upper() == OrderSide.BUY.name:
            return OrderSide.BUY
        elif side_str.upper() == OrderSide.SELL.name:
            return OrderSide.SELL
        else:
            raise NotImplementedError(f"No order side enum for {side_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class SellShortfallPolicy(Enum):
    """
    What a batch sell does when asked for more units than the current supply.

    STRICT raises InsufficientSupplyForSell.
    TRUNCATE stops pricing once the supply runs out and returns the partial total,
    which is how the web frontend has always estimated sells.
    """
    STRICT = "STRICT"
    TRUNCATE = "TRUNCATE"

    @classmethod
    def from_str(cls, policy_str: str) -> "SellShortfallPolicy":
        """
        Convert a string to a SellShortfallPolicy enum.
        :param policy_str: str
        :return: SellShortfallPolicy or NotImplementedError
        """
        if policy_str.upper() == SellShortfallPolicy.STRICT.name:
            return SellShortfallPolicy.STRICT
        elif policy_str.upper() == SellShortfallPolicy.TRUNCATE.name:
            return SellShortfallPolicy.TRUNCATE
        else:
            raise NotImplementedError(f"No sell shortfall policy enum for {policy_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()
