"""
Opportunity scanner: split a priced universe into high-risk contracts and
trading opportunities.

Filters are stable (input order preserved). Opportunities must also clear a
liquidity floor so thinly traded contracts never surface as trade ideas:

    opportunity = recommendation != hold
                  and volume >= min_volume
                  and open_interest >= min_open_interest

Optional ranking (rank=True): high-risk rows by severity (extreme first),
opportunities by recommendation strength (strong_* first). Python's sort is
stable, so ties keep input order.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence
import logging

import pandas as pd

from greeks_engine.core.models import LiveOptionSnapshot, RiskLevel

logger = logging.getLogger(__name__)


SNAPSHOT_COLUMNS = [
    'symbol', 'option_type', 'strike_price', 'spot_price', 'last_price',
    'implied_volatility', 'volume', 'open_interest', 'time_to_expiry',
    'risk_level', 'trading_recommendation',
    'price', 'delta', 'gamma', 'theta', 'vega', 'rho',
]


class ScanResult(NamedTuple):
    """Output of OpportunityScanner.scan"""
    high_risk: List[LiveOptionSnapshot]
    opportunities: List[LiveOptionSnapshot]


@dataclass(frozen=True)
class ScannerConfig:
    """Liquidity floor and ordering for the scanner."""
    min_volume: int = 500
    min_open_interest: int = 1000
    rank: bool = False

    def __post_init__(self):
        """Validate parameters."""
        if self.min_volume < 0:
            raise ValueError(f"min_volume must be >= 0, got {self.min_volume}")
        if self.min_open_interest < 0:
            raise ValueError(f"min_open_interest must be >= 0, got {self.min_open_interest}")


class OpportunityScanner:
    """
    Filters a universe of evaluated snapshots.

    Example:
        >>> scanner = OpportunityScanner(ScannerConfig(min_volume=1000))
        >>> result = scanner.scan(snapshots)
        >>> print(f"{len(result.high_risk)} high risk, {len(result.opportunities)} ideas")
    """

    def __init__(self, config: Optional[ScannerConfig] = None):
        self.config = config or ScannerConfig()

    def is_high_risk(self, snapshot: LiveOptionSnapshot) -> bool:
        return snapshot.risk_level in (RiskLevel.HIGH, RiskLevel.EXTREME)

    def is_liquid(self, snapshot: LiveOptionSnapshot) -> bool:
        return (
            snapshot.volume >= self.config.min_volume
            and snapshot.open_interest >= self.config.min_open_interest
        )

    def is_opportunity(self, snapshot: LiveOptionSnapshot) -> bool:
        return snapshot.trading_recommendation.is_actionable and self.is_liquid(snapshot)

    def scan(self, universe: Sequence[LiveOptionSnapshot]) -> ScanResult:
        """
        Split universe into (high_risk, opportunities).

        Args:
            universe: Snapshots from one refresh tick

        Returns:
            ScanResult; both lists empty for an empty universe
        """
        high_risk = [s for s in universe if self.is_high_risk(s)]
        opportunities = [s for s in universe if self.is_opportunity(s)]

        if self.config.rank:
            high_risk.sort(key=lambda s: s.risk_level.severity, reverse=True)
            opportunities.sort(key=lambda s: s.trading_recommendation.strength, reverse=True)

        logger.debug(
            f"Scanned {len(universe)} contracts: {len(high_risk)} high risk, "
            f"{len(opportunities)} opportunities"
        )
        return ScanResult(high_risk=high_risk, opportunities=opportunities)


def snapshots_to_frame(snapshots: Sequence[LiveOptionSnapshot]) -> pd.DataFrame:
    """
    Flatten snapshots into a DataFrame (one row per contract, raw Greek units).

    Always returns the full column set, even for an empty sequence.
    """
    if not snapshots:
        return pd.DataFrame(columns=SNAPSHOT_COLUMNS)
    return pd.DataFrame([s.to_dict() for s in snapshots], columns=SNAPSHOT_COLUMNS)
