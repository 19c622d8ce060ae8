from abc import ABC, abstractmethod
from typing import Optional

from flip_core.common.model import CurveState, CurveParams, TransactionRequest, TransactionResult


class BondingCurve(ABC):
    """Abstract base class defining the interface for any bonding curve implementation."""
    def __init__(self, params: 'CurveParams', state: Optional['CurveState'] = None):
        """
        Initializes the bonding curve with parameters and an optional existing state.

        :param params: CurveParams - defines curve configuration
        :param state: CurveState - optional initial state
        """
        self._params = params
        self._state = state or CurveState()

    @property
    def params(self) -> 'CurveParams':
        """Returns the bonding curve parameters."""
        return self._params

    @property
    def current_supply(self) -> int:
        """Returns the current supply from the state."""
        return self._state.current_supply

    @abstractmethod
    def get_spot_price(self, supply: int) -> int:
        """
        Returns the price of a single unit at a given supply level.

        :param supply: int - Supply level the unit is minted at.
        :return: int: The price in wei at given supply.
        """
        pass

    @abstractmethod
    def calculate_purchase_cost(self, count: int) -> int:
        """
        Calculates how much it costs to buy `count` units from the current state of the bonding curve,
        before fees.

        :param count: int - Number of units the user wants to purchase.
        :return: Total cost in wei.
        """
        pass

    @abstractmethod
    def calculate_sale_return(self, count: int) -> int:
        """
        Calculates how much is returned if a user sells `count` units back into the bonding curve, before fees.

        :param count: int - Number of units the user wants to sell.
        :return: Total return in wei.
        """
        pass

    @abstractmethod
    def buy(self, request: 'TransactionRequest') -> 'TransactionResult':
        """
        Executes a buy operation along the bonding curve, updating the internal state (supply, liquidity)
        and returns a TransactionResult.

        :param request: TransactionRequest
        :return: A TransactionResult detailing executed count, total price, new supply, etc.
        """
        pass

    @abstractmethod
    def sell(self, request: 'TransactionRequest') -> 'TransactionResult':
        """
        Executes a sell operation along the bonding curve, updating the internal state (supply, liquidity)
        and returns a TransactionResult.

        :param request: TransactionRequest
        :return: A TransactionResult detailing executed count, total return, new supply, etc.
        """
        pass

    def _update_state_after_buy(self, count: int, reserve_delta: int):
        """
        Updates the internal state of the bonding curve after buying `count` units.

        :param count: int - Number of units bought.
        :param reserve_delta: int - Amount added to the curve reserve, fees excluded.
        """
        self._state.current_supply = self.current_supply + count
        if self._state.liquidity is not None:
            self._state.liquidity += reserve_delta

    def _update_state_after_sell(self, count: int, reserve_delta: int):
        """
        Updates the internal state of the bonding curve after selling `count` units.

        :param count: int - Number of units sold.
        :param reserve_delta: int - Amount paid out of the curve reserve, fees excluded.
        """
        self._state.current_supply = self.current_supply - count
        if self._state.liquidity is not None:
            self._state.liquidity -= reserve_delta
