"""
Core data models for the options Greeks and portfolio risk engine.

This module defines immutable data structures for:
- OptionContract: Pricing inputs for a single European option
- Greeks: Model price and sensitivities for one contract
- MarketQuote: One row pulled from a market-data collaborator
- LiveOptionSnapshot: Priced and classified contract in a monitored universe
- PortfolioPosition: Signed holding of one contract with per-unit Greeks
- Holding: Symbol + signed quantity as reported by a portfolio source
- PortfolioGreeksRisk: Portfolio-level exposures, risk score and hedging advice
- Signal: Greeks-driven trade idea with conviction score
- ContractAnalysis: Narrative risk assessment for one contract
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional


DAYS_PER_YEAR = 365


class InvalidInputError(ValueError):
    """Raised when engine inputs fail domain validation (before any pricing)."""


class RiskLevel(Enum):
    """Discrete risk band for a contract or a portfolio's gamma exposure"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def severity(self) -> int:
        """Ordinal used for ranking (low=1 ... extreme=4)"""
        return _RISK_SEVERITY[self]


class TradingRecommendation(Enum):
    """Ordered trade recommendation labels"""
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"

    @property
    def is_actionable(self) -> bool:
        """True for every label except HOLD"""
        return self is not TradingRecommendation.HOLD

    @property
    def strength(self) -> int:
        """Conviction magnitude: 2 for strong labels, 1 for buy/sell, 0 for hold"""
        return _RECOMMENDATION_STRENGTH[self]


_RISK_SEVERITY = {
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
    RiskLevel.EXTREME: 4,
}

_RECOMMENDATION_STRENGTH = {
    TradingRecommendation.STRONG_BUY: 2,
    TradingRecommendation.BUY: 1,
    TradingRecommendation.HOLD: 0,
    TradingRecommendation.SELL: 1,
    TradingRecommendation.STRONG_SELL: 2,
}


def _require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")


def _require_option_type(value: str) -> None:
    if value not in ('call', 'put'):
        raise InvalidInputError(f"option_type must be 'call' or 'put', got {value!r}")


@dataclass(frozen=True)
class OptionContract:
    """
    Pricing inputs for a single European-style option.

    Validated on construction so the pricing formula never sees NaN,
    infinities or out-of-domain values.
    """
    spot_price: float                    # Underlying price, > 0
    strike_price: float                  # Strike, > 0
    time_to_expiry: float                # Years, >= 0 (0 = at expiry)
    risk_free_rate: float                # Annualized, may be 0 or negative
    volatility: float                    # Annualized sigma, >= 0
    option_type: Literal['call', 'put']  # Call or put

    def __post_init__(self):
        """Validate contract fields"""
        for name in ('spot_price', 'strike_price', 'time_to_expiry',
                     'risk_free_rate', 'volatility'):
            _require_finite(name, getattr(self, name))

        if self.spot_price <= 0:
            raise InvalidInputError(f"spot_price must be > 0, got {self.spot_price}")
        if self.strike_price <= 0:
            raise InvalidInputError(f"strike_price must be > 0, got {self.strike_price}")
        if self.time_to_expiry < 0:
            raise InvalidInputError(f"time_to_expiry must be >= 0, got {self.time_to_expiry}")
        if self.volatility < 0:
            raise InvalidInputError(f"volatility must be >= 0, got {self.volatility}")
        _require_option_type(self.option_type)

    @property
    def moneyness(self) -> float:
        """Spot / strike"""
        return self.spot_price / self.strike_price

    @property
    def is_degenerate(self) -> bool:
        """True when d1/d2 are undefined (at expiry or zero volatility)"""
        return self.time_to_expiry == 0 or self.volatility == 0


@dataclass(frozen=True)
class Greeks:
    """
    Model price and sensitivities for ONE contract (per unit).

    Units are raw formula outputs:
    - theta: per year
    - vega: per 1.00 of volatility (100 vol points)
    - rho: per 1.00 of rate

    Use the *_per_day / *_per_*_point properties for display scaling.
    """
    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def __post_init__(self):
        """Reject NaN and infinite sensitivities"""
        for name in ('price', 'delta', 'gamma', 'theta', 'vega', 'rho'):
            _require_finite(name, getattr(self, name))

    @property
    def theta_per_day(self) -> float:
        """Time decay per calendar day"""
        return self.theta / DAYS_PER_YEAR

    @property
    def vega_per_vol_point(self) -> float:
        """Price change for a 1% (one vol point) move in volatility"""
        return self.vega / 100

    @property
    def rho_per_rate_point(self) -> float:
        """Price change for a 1% move in the risk-free rate"""
        return self.rho / 100

    def to_dict(self) -> dict:
        """Convert to dictionary (raw units)."""
        return {
            'price': self.price,
            'delta': self.delta,
            'gamma': self.gamma,
            'theta': self.theta,
            'vega': self.vega,
            'rho': self.rho,
        }


@dataclass(frozen=True)
class MarketQuote:
    """
    One row of market data as supplied by a data collaborator.

    Carries everything needed to price the contract (spot, strike, expiry,
    IV, rate) plus liquidity stats used by the scanner and signals.
    """
    symbol: str
    option_type: Literal['call', 'put']
    strike_price: float
    spot_price: float
    time_to_expiry: float                # Years
    implied_volatility: float
    risk_free_rate: float = 0.06
    volume: int = 0
    open_interest: int = 0
    last_price: Optional[float] = None   # Observed traded price, if any

    def __post_init__(self):
        """Validate liquidity fields (pricing fields validated by to_contract)"""
        _require_option_type(self.option_type)
        if self.volume < 0:
            raise InvalidInputError(f"volume must be >= 0, got {self.volume}")
        if self.open_interest < 0:
            raise InvalidInputError(f"open_interest must be >= 0, got {self.open_interest}")
        if self.last_price is not None:
            _require_finite('last_price', self.last_price)
            if self.last_price < 0:
                raise InvalidInputError(f"last_price must be >= 0, got {self.last_price}")

    def to_contract(self) -> OptionContract:
        """Build pricing inputs, using implied volatility as sigma."""
        return OptionContract(
            spot_price=self.spot_price,
            strike_price=self.strike_price,
            time_to_expiry=self.time_to_expiry,
            risk_free_rate=self.risk_free_rate,
            volatility=self.implied_volatility,
            option_type=self.option_type,
        )


@dataclass(frozen=True)
class LiveOptionSnapshot:
    """
    Immutable, fully evaluated row in a monitored option universe.

    Created fresh every refresh cycle. Only `symbol` links snapshots across
    ticks; nothing is updated in place.
    """
    symbol: str
    option_type: Literal['call', 'put']
    strike_price: float
    spot_price: float
    last_price: float
    implied_volatility: float
    volume: int
    open_interest: int
    time_to_expiry: float
    greeks: Greeks
    risk_level: RiskLevel
    trading_recommendation: TradingRecommendation

    @property
    def moneyness(self) -> float:
        """Spot / strike"""
        return self.spot_price / self.strike_price

    def to_dict(self) -> dict:
        """Flat dictionary for tabular output (raw Greek units)."""
        row = {
            'symbol': self.symbol,
            'option_type': self.option_type,
            'strike_price': self.strike_price,
            'spot_price': self.spot_price,
            'last_price': self.last_price,
            'implied_volatility': self.implied_volatility,
            'volume': self.volume,
            'open_interest': self.open_interest,
            'time_to_expiry': self.time_to_expiry,
            'risk_level': self.risk_level.value,
            'trading_recommendation': self.trading_recommendation.value,
        }
        row.update(self.greeks.to_dict())
        return row


@dataclass(frozen=True)
class PortfolioPosition:
    """
    Signed holding of one option contract.

    `quantity` is in contract units (not notional): positive = long,
    negative = short. `greeks` are per unit; aggregation multiplies them by
    quantity. `spot_price` is the underlying price, used only to size the
    adverse move in drawdown estimates.
    """
    symbol: str
    quantity: int
    greeks: Greeks
    price: float
    spot_price: Optional[float] = None

    def __post_init__(self):
        """Validate position fields"""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidInputError(
                f"quantity must be an integer number of contracts, got {self.quantity!r}"
            )
        _require_finite('price', self.price)
        if self.price < 0:
            raise InvalidInputError(f"price must be >= 0, got {self.price}")
        if self.spot_price is not None:
            _require_finite('spot_price', self.spot_price)
            if self.spot_price <= 0:
                raise InvalidInputError(f"spot_price must be > 0, got {self.spot_price}")

    @property
    def is_long(self) -> bool:
        """True if this is a long position (buying)"""
        return self.quantity > 0

    @property
    def is_short(self) -> bool:
        """True if this is a short position (selling)"""
        return self.quantity < 0

    @property
    def delta_exposure(self) -> float:
        """Net delta for this position (delta * quantity)"""
        return self.greeks.delta * self.quantity

    @property
    def gamma_exposure(self) -> float:
        """Net gamma for this position (gamma * quantity)"""
        return self.greeks.gamma * self.quantity

    @property
    def theta_exposure(self) -> float:
        """Net theta for this position (theta * quantity)"""
        return self.greeks.theta * self.quantity

    @property
    def vega_exposure(self) -> float:
        """Net vega for this position (vega * quantity)"""
        return self.greeks.vega * self.quantity

    @property
    def rho_exposure(self) -> float:
        """Net rho for this position (rho * quantity)"""
        return self.greeks.rho * self.quantity

    @property
    def market_value(self) -> float:
        """Capital tied up: |quantity| * price (long and short both count)"""
        return abs(self.quantity) * self.price


@dataclass(frozen=True)
class Holding:
    """
    Book entry as reported by a portfolio collaborator: symbol and signed
    contract quantity only. Greeks are attached from the current tick.
    """
    symbol: str
    quantity: int

    def __post_init__(self):
        """Validate quantity"""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidInputError(
                f"quantity must be an integer number of contracts, got {self.quantity!r}"
            )


@dataclass(frozen=True)
class PortfolioGreeksRisk:
    """
    Portfolio-level exposures, recomputed from scratch on every evaluation.

    `max_drawdown_risk` and `hedging_recommendations` are filled in by the
    hedging advisor; recommendations are ordered most urgent first.
    """
    total_delta: float = 0.0
    total_gamma: float = 0.0
    total_theta: float = 0.0   # Per year
    total_vega: float = 0.0    # Per 1.00 of volatility
    total_rho: float = 0.0
    portfolio_value: float = 0.0
    risk_score: int = 0
    gamma_exposure: RiskLevel = RiskLevel.LOW
    max_drawdown_risk: float = 0.0
    hedging_recommendations: tuple[str, ...] = ()
    position_count: int = 0
    underlying_price: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        """True when no positions were aggregated"""
        return self.position_count == 0

    @property
    def total_theta_per_day(self) -> float:
        """Portfolio time decay per calendar day"""
        return self.total_theta / DAYS_PER_YEAR

    @property
    def total_vega_per_vol_point(self) -> float:
        """Portfolio P&L for a one vol point move"""
        return self.total_vega / 100

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'total_delta': self.total_delta,
            'total_gamma': self.total_gamma,
            'total_theta': self.total_theta,
            'total_vega': self.total_vega,
            'total_rho': self.total_rho,
            'portfolio_value': self.portfolio_value,
            'risk_score': self.risk_score,
            'gamma_exposure': self.gamma_exposure.value,
            'max_drawdown_risk': self.max_drawdown_risk,
            'hedging_recommendations': list(self.hedging_recommendations),
            'position_count': self.position_count,
            'underlying_price': self.underlying_price,
        }


@dataclass(frozen=True)
class Signal:
    """
    Greeks-driven trade idea with conviction score.

    Produced per contract by the signal generator; `reason` carries the
    human-readable trigger for explainability.
    """
    symbol: str                          # Contract symbol
    action: Literal['buy', 'sell']       # Trade side
    order_type: Literal['limit', 'market']
    conviction: float                    # 0.0 to 1.0 signal strength
    reason: str                          # Why the signal fired
    strategy_name: str                   # Rule that produced it
    price: Optional[float] = None        # Limit price, None for market orders
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        """Validate signal fields"""
        if not (0.0 <= self.conviction <= 1.0):
            raise ValueError(f"Conviction must be between 0 and 1, got {self.conviction}")
        if self.action not in ('buy', 'sell'):
            raise ValueError(f"action must be 'buy' or 'sell', got {self.action!r}")
        if self.order_type not in ('limit', 'market'):
            raise ValueError(f"order_type must be 'limit' or 'market', got {self.order_type!r}")


@dataclass(frozen=True)
class ContractAnalysis:
    """Narrative assessment of a single contract's Greeks."""
    symbol: str
    risk_assessment: str
    strategic_insights: tuple[str, ...] = ()
    hedging_options: tuple[str, ...] = ()
