"""Market data providers"""

from greeks_engine.data.base import IMarketDataProvider
from greeks_engine.data.file_provider import FileMarketDataProvider
from greeks_engine.data.synthetic import SyntheticMarketDataProvider

__all__ = ['IMarketDataProvider', 'FileMarketDataProvider', 'SyntheticMarketDataProvider']
