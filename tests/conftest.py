"""
Shared pytest fixtures for unit tests.

This module provides reusable test fixtures including:
- The reference ATM NIFTY contract (S=K=18000, 10 days, 6%, 20% vol)
- A three-position book with hand-computable totals
- Factories for Greeks and evaluated snapshots
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from greeks_engine.core.models import (
    Greeks,
    LiveOptionSnapshot,
    MarketQuote,
    OptionContract,
    PortfolioPosition,
    RiskLevel,
    TradingRecommendation,
)


# =============================================================================
# Helper Functions
# =============================================================================

def make_greeks(
    price: float = 100.0,
    delta: float = 0.5,
    gamma: float = 0.001,
    theta: float = -365.0,
    vega: float = 100.0,
    rho: float = 10.0
) -> Greeks:
    """Greeks with sensible defaults; theta=-365/yr is -1 per day."""
    return Greeks(price=price, delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)


def make_snapshot(
    symbol: str = 'NIFTY_18000_call',
    option_type: str = 'call',
    risk_level: RiskLevel = RiskLevel.LOW,
    recommendation: TradingRecommendation = TradingRecommendation.HOLD,
    implied_volatility: float = 0.20,
    volume: int = 5000,
    open_interest: int = 20000,
    time_to_expiry: float = 0.05,
    greeks: Greeks = None,
    last_price: float = 100.0
) -> LiveOptionSnapshot:
    """Evaluated snapshot with every field overridable."""
    return LiveOptionSnapshot(
        symbol=symbol,
        option_type=option_type,
        strike_price=18000.0,
        spot_price=18000.0,
        last_price=last_price,
        implied_volatility=implied_volatility,
        volume=volume,
        open_interest=open_interest,
        time_to_expiry=time_to_expiry,
        greeks=greeks or make_greeks(),
        risk_level=risk_level,
        trading_recommendation=recommendation,
    )


# =============================================================================
# Contract Fixtures
# =============================================================================

@pytest.fixture
def atm_call() -> OptionContract:
    """ATM NIFTY call, 10 calendar days to expiry"""
    return OptionContract(
        spot_price=18000.0,
        strike_price=18000.0,
        time_to_expiry=10 / 365,
        risk_free_rate=0.06,
        volatility=0.20,
        option_type='call',
    )


@pytest.fixture
def atm_put(atm_call) -> OptionContract:
    """Put twin of atm_call"""
    return OptionContract(
        spot_price=atm_call.spot_price,
        strike_price=atm_call.strike_price,
        time_to_expiry=atm_call.time_to_expiry,
        risk_free_rate=atm_call.risk_free_rate,
        volatility=atm_call.volatility,
        option_type='put',
    )


@pytest.fixture
def atm_quote() -> MarketQuote:
    """Market quote matching atm_call"""
    return MarketQuote(
        symbol='NIFTY_18000_call',
        option_type='call',
        strike_price=18000.0,
        spot_price=18000.0,
        time_to_expiry=10 / 365,
        implied_volatility=0.20,
        risk_free_rate=0.06,
        volume=3000,
        open_interest=25000,
    )


# =============================================================================
# Portfolio Fixtures
# =============================================================================

@pytest.fixture
def sample_positions() -> List[PortfolioPosition]:
    """
    Three-position book: 100 x delta 0.5, -50 x delta -0.5, 200 x delta 0.7.

    Totals: delta 215, gamma 0.3, theta -164250/yr (-450/day),
    vega 15000 (150 per vol point), value 13000.
    """
    return [
        PortfolioPosition(
            symbol='NIFTY_18000_call',
            quantity=100,
            greeks=make_greeks(price=50.0, delta=0.5, gamma=0.002, theta=-365.0, vega=100.0, rho=10.0),
            price=50.0,
        ),
        PortfolioPosition(
            symbol='NIFTY_18000_put',
            quantity=-50,
            greeks=make_greeks(price=40.0, delta=-0.5, gamma=0.002, theta=-365.0, vega=100.0, rho=-10.0),
            price=40.0,
        ),
        PortfolioPosition(
            symbol='NIFTY_17800_call',
            quantity=200,
            greeks=make_greeks(price=30.0, delta=0.7, gamma=0.001, theta=-730.0, vega=50.0, rho=20.0),
            price=30.0,
        ),
    ]


# =============================================================================
# Factory Fixtures
# =============================================================================

@pytest.fixture
def greeks_factory():
    """Factory for Greeks objects (see make_greeks)"""
    return make_greeks


@pytest.fixture
def snapshot_factory():
    """Factory for LiveOptionSnapshot objects (see make_snapshot)"""
    return make_snapshot
