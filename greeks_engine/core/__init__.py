"""Core data models"""

from greeks_engine.core.models import (
    DAYS_PER_YEAR,
    InvalidInputError,
    RiskLevel,
    TradingRecommendation,
    OptionContract,
    Greeks,
    MarketQuote,
    LiveOptionSnapshot,
    PortfolioPosition,
    Holding,
    PortfolioGreeksRisk,
    Signal,
    ContractAnalysis,
)

__all__ = [
    'DAYS_PER_YEAR',
    'InvalidInputError',
    'RiskLevel',
    'TradingRecommendation',
    'OptionContract',
    'Greeks',
    'MarketQuote',
    'LiveOptionSnapshot',
    'PortfolioPosition',
    'Holding',
    'PortfolioGreeksRisk',
    'Signal',
    'ContractAnalysis',
]
