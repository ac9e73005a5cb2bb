"""
Market data interface for the Greeks engine.

The engine itself never fetches anything: hosts pull quotes and holdings
from a provider and pass them in. Any object with these two methods works.
"""

from typing import List, Protocol

from greeks_engine.core.models import Holding, MarketQuote


class IMarketDataProvider(Protocol):
    """
    Interface for option market data and portfolio sources.

    Defines minimal contract: current quotes for the monitored universe and
    the current book of holdings.
    """

    def get_quotes(self) -> List[MarketQuote]:
        """
        Load the latest quote for every monitored contract.

        Returns:
            List of MarketQuote objects (calls and puts), one per contract
        """
        ...

    def get_holdings(self) -> List[Holding]:
        """
        Load the current book.

        Returns:
            List of Holding objects; empty when nothing is held
        """
        ...
