"""
Synthetic market data provider (SIMULATED DATA, not market prices).

Generates a small index option chain with randomised spot, expiry, IV and
liquidity for demos, smoke runs and tests. A seed makes every run
reproducible: two providers with the same seed produce identical ticks.

Ranges per tick:
    spot:            base_spot +/- 100
    time_to_expiry:  10 to 30 days
    IV:              15% to 40%
    volume:          1,000 to 6,000
    open interest:   10,000 to 60,000
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from greeks_engine.core.models import DAYS_PER_YEAR, Holding, MarketQuote


DEFAULT_STRIKES = (17800.0, 18000.0, 18200.0, 18400.0, 18600.0)


def contract_symbol(underlying: str, strike: float, option_type: str) -> str:
    """Symbol convention for synthetic contracts, e.g. NIFTY_18000_call"""
    return f"{underlying}_{strike:.0f}_{option_type}"


class SyntheticMarketDataProvider:
    """
    Seeded random option chain plus a fixed demo book.

    Each get_quotes() call advances the generator, so successive ticks differ
    while the sequence as a whole is reproducible from the seed.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        underlying: str = 'NIFTY',
        base_spot: float = 18000.0,
        strikes: Sequence[float] = DEFAULT_STRIKES,
        risk_free_rate: float = 0.06,
        holdings: Optional[Sequence[Tuple[str, int]]] = None
    ):
        """
        Initialize provider.

        Args:
            seed: RNG seed (None = nondeterministic)
            underlying: Underlying name used in symbols
            base_spot: Centre of the simulated spot range
            strikes: Strikes listed for both calls and puts
            risk_free_rate: Rate attached to every quote
            holdings: (symbol, quantity) pairs; defaults to a three-leg
                      book around the 18000/18200 strikes
        """
        if base_spot <= 100:
            raise ValueError(f"base_spot must be > 100, got {base_spot}")
        if not strikes:
            raise ValueError("strikes must not be empty")

        self.seed = seed
        self.underlying = underlying
        self.base_spot = base_spot
        self.strikes = tuple(float(k) for k in strikes)
        self.risk_free_rate = risk_free_rate
        self.rng = np.random.default_rng(seed)

        if holdings is None:
            holdings = [
                (contract_symbol(underlying, 18000, 'call'), 100),
                (contract_symbol(underlying, 18000, 'put'), -50),
                (contract_symbol(underlying, 18200, 'call'), 75),
            ]
        self.holdings = [Holding(symbol=s, quantity=int(q)) for s, q in holdings]

    def get_quotes(self) -> List[MarketQuote]:
        """Generate one tick: a call and a put for every strike."""
        spot = float(self.base_spot + self.rng.uniform(-100.0, 100.0))
        quotes = []
        for strike in self.strikes:
            for option_type in ('call', 'put'):
                days = self.rng.uniform(10.0, 30.0)
                quotes.append(MarketQuote(
                    symbol=contract_symbol(self.underlying, strike, option_type),
                    option_type=option_type,
                    strike_price=strike,
                    spot_price=spot,
                    time_to_expiry=float(days / DAYS_PER_YEAR),
                    implied_volatility=float(self.rng.uniform(0.15, 0.40)),
                    risk_free_rate=self.risk_free_rate,
                    volume=int(self.rng.integers(1000, 6000)),
                    open_interest=int(self.rng.integers(10000, 60000)),
                ))
        return quotes

    def get_holdings(self) -> List[Holding]:
        """Return the demo book."""
        return list(self.holdings)
