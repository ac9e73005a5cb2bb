"""
File-backed market data provider.

Reads a quotes table and an optional holdings table from CSV or Parquet
(format detected from the file extension). Files are re-read on every call,
so a process that rewrites them between ticks feeds the monitor live data.

Quotes columns:
    required: symbol, option_type, strike_price, spot_price, implied_volatility
              and either time_to_expiry (years) or expiry (any date string
              dateutil can parse)
    optional: risk_free_rate, volume, open_interest, last_price

Holdings columns:
    required: symbol, quantity

Usage:
    >>> provider = FileMarketDataProvider('data/quotes.csv', 'data/book.csv')
    >>> quotes = provider.get_quotes()
    >>> holdings = provider.get_holdings()
"""

from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union
import logging

import pandas as pd
from dateutil import parser as date_parser

from greeks_engine.core.models import DAYS_PER_YEAR, Holding, InvalidInputError, MarketQuote

logger = logging.getLogger(__name__)


QUOTE_COLUMNS = ['symbol', 'option_type', 'strike_price', 'spot_price', 'implied_volatility']
HOLDING_COLUMNS = ['symbol', 'quantity']


def read_table(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a CSV or Parquet file into a DataFrame.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the extension is neither .csv nor .parquet/.pq
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Data file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix in ('.parquet', '.pq'):
        return pd.read_parquet(file_path)
    if suffix == '.csv':
        return pd.read_csv(file_path)
    raise ValueError(f"Unsupported file format '{suffix}' for {file_path} (use .csv or .parquet)")


def years_to_expiry(expiry, as_of: date) -> float:
    """
    Year fraction from as_of to expiry (ACT/365), floored at zero.

    Args:
        expiry: Date, Timestamp or date string
        as_of: Valuation date
    """
    if isinstance(expiry, datetime):
        expiry_date = expiry.date()
    elif isinstance(expiry, date):
        expiry_date = expiry
    else:
        expiry_date = date_parser.parse(str(expiry)).date()

    days = (expiry_date - as_of).days
    return max(days, 0) / DAYS_PER_YEAR


def _optional(row: dict, column: str, default=None):
    value = row.get(column, default)
    if value is None or pd.isna(value):
        return default
    return value


def _whole_quantity(value, symbol: str) -> int:
    """Signed contract count; fractional or missing quantities are rejected."""
    if pd.isna(value):
        raise InvalidInputError(f"Missing quantity for {symbol}")
    quantity = float(value)
    if not quantity.is_integer():
        raise InvalidInputError(
            f"quantity for {symbol} must be a whole number of contracts, got {value!r}"
        )
    return int(quantity)


class FileMarketDataProvider:
    """
    Market data provider over local quote and holdings files.

    Expired contracts (expiry before as_of) get time_to_expiry = 0 and are
    priced at intrinsic value by the engine.
    """

    def __init__(
        self,
        quotes_path: Union[str, Path],
        holdings_path: Optional[Union[str, Path]] = None,
        as_of: Optional[date] = None,
        default_risk_free_rate: float = 0.06
    ):
        """
        Initialize provider.

        Args:
            quotes_path: Quotes table (.csv or .parquet)
            holdings_path: Holdings table; None means an empty book
            as_of: Valuation date for expiry columns (default: today)
            default_risk_free_rate: Rate used when the table has no rate column
        """
        self.quotes_path = Path(quotes_path)
        self.holdings_path = Path(holdings_path) if holdings_path is not None else None
        self.as_of = as_of
        self.default_risk_free_rate = default_risk_free_rate

    @staticmethod
    def _check_columns(df: pd.DataFrame, required: List[str], path: Path):
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise ValueError(f"{path} is missing required columns: {missing}")

    def get_quotes(self) -> List[MarketQuote]:
        """
        Load all quotes from the quotes file.

        Raises:
            FileNotFoundError: If the quotes file does not exist
            ValueError: If required columns are missing
        """
        df = read_table(self.quotes_path)
        self._check_columns(df, QUOTE_COLUMNS, self.quotes_path)

        if 'time_to_expiry' not in df.columns and 'expiry' not in df.columns:
            raise ValueError(
                f"{self.quotes_path} needs either a time_to_expiry or an expiry column"
            )

        as_of = self.as_of or date.today()
        quotes = [self._row_to_quote(row, as_of) for row in df.to_dict('records')]

        logger.info(f"Loaded {len(quotes)} quotes from {self.quotes_path}")
        return quotes

    def _row_to_quote(self, row: dict, as_of: date) -> MarketQuote:
        time_to_expiry = _optional(row, 'time_to_expiry')
        if time_to_expiry is None:
            expiry = _optional(row, 'expiry')
            if expiry is None:
                raise ValueError(f"No time_to_expiry or expiry for {row['symbol']}")
            time_to_expiry = years_to_expiry(expiry, as_of)

        last_price = _optional(row, 'last_price')

        return MarketQuote(
            symbol=str(row['symbol']),
            option_type=str(row['option_type']).strip().lower(),
            strike_price=float(row['strike_price']),
            spot_price=float(row['spot_price']),
            time_to_expiry=float(time_to_expiry),
            implied_volatility=float(row['implied_volatility']),
            risk_free_rate=float(_optional(row, 'risk_free_rate', self.default_risk_free_rate)),
            volume=int(_optional(row, 'volume', 0)),
            open_interest=int(_optional(row, 'open_interest', 0)),
            last_price=float(last_price) if last_price is not None else None,
        )

    def get_holdings(self) -> List[Holding]:
        """
        Load the book from the holdings file.

        Returns:
            List of holdings; empty if no holdings file was configured

        Raises:
            FileNotFoundError: If a configured holdings file does not exist
            ValueError: If required columns are missing
            InvalidInputError: If a quantity is missing or fractional
        """
        if self.holdings_path is None:
            return []

        df = read_table(self.holdings_path)
        self._check_columns(df, HOLDING_COLUMNS, self.holdings_path)

        holdings = [
            Holding(
                symbol=str(row['symbol']),
                quantity=_whole_quantity(row['quantity'], str(row['symbol'])),
            )
            for row in df.to_dict('records')
        ]
        logger.info(f"Loaded {len(holdings)} holdings from {self.holdings_path}")
        return holdings
