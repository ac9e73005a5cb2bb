"""Portfolio aggregation and hedging"""

from greeks_engine.portfolio.aggregator import PortfolioAggregator, RiskScoreConfig
from greeks_engine.portfolio.hedging import HedgingAdvisor, HedgingConfig, VolatilityRegime

__all__ = [
    'PortfolioAggregator',
    'RiskScoreConfig',
    'HedgingAdvisor',
    'HedgingConfig',
    'VolatilityRegime',
]
