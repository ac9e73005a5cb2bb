"""
Portfolio Greeks aggregation and composite risk score.

Totals are quantity-weighted sums over positions, iterated in caller order
with a single accumulator so results are reproducible.

Risk score normalization:

    scale       = max(1, portfolio_value / reference_portfolio_value)
    component_x = min(1, |x| / (cap_x * scale))
    risk_score  = round(sum(weight_x * component_x))   clamped to [0, 100]

for x in (total_delta, total_gamma, theta per day, vega per vol point).
Weights sum to 100, so the score saturates at 100 once every component is
at its cap, and it never decreases when any |x| grows.

Gamma exposure band: |total_gamma| / total contracts (sum of |quantity|),
banded with the same gamma thresholds the contract classifier uses.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence
import logging

from greeks_engine.core.models import (
    DAYS_PER_YEAR,
    PortfolioGreeksRisk,
    PortfolioPosition,
    RiskLevel,
)
from greeks_engine.portfolio.hedging import HedgingAdvisor, VolatilityRegime
from greeks_engine.risk.classifier import ClassifierThresholds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskScoreConfig:
    """
    Caps and weights for the composite risk score.

    Caps are the exposure at which a component saturates for a portfolio of
    `reference_portfolio_value` or less; larger books get proportionally
    larger caps.
    """
    delta_cap: float = 100.0
    gamma_cap: float = 5.0
    theta_cap_per_day: float = 100.0
    vega_cap_per_point: float = 200.0
    delta_weight: float = 30.0
    gamma_weight: float = 30.0
    theta_weight: float = 15.0
    vega_weight: float = 25.0
    reference_portfolio_value: float = 1_000_000.0

    def __post_init__(self):
        """Validate parameters."""
        caps = {
            'delta_cap': self.delta_cap,
            'gamma_cap': self.gamma_cap,
            'theta_cap_per_day': self.theta_cap_per_day,
            'vega_cap_per_point': self.vega_cap_per_point,
            'reference_portfolio_value': self.reference_portfolio_value,
        }
        for name, value in caps.items():
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")

        weights = (self.delta_weight, self.gamma_weight, self.theta_weight, self.vega_weight)
        if any(w < 0 for w in weights):
            raise ValueError(f"weights must be >= 0, got {weights}")
        if abs(sum(weights) - 100.0) > 1e-9:
            raise ValueError(f"weights must sum to 100, got {sum(weights)}")


@dataclass
class PortfolioAggregator:
    """
    Aggregates per-unit Greeks across signed positions.

    When constructed with a HedgingAdvisor, the returned record also carries
    max_drawdown_risk and hedging_recommendations; otherwise those stay at
    their neutral values.

    Example:
        >>> aggregator = PortfolioAggregator(advisor=HedgingAdvisor())
        >>> risk = aggregator.aggregate(positions)
        >>> print(risk.total_delta, risk.risk_score, risk.hedging_recommendations)
    """

    score_config: RiskScoreConfig = field(default_factory=RiskScoreConfig)
    gamma_thresholds: ClassifierThresholds = field(default_factory=ClassifierThresholds)
    advisor: Optional[HedgingAdvisor] = None

    def aggregate(
        self,
        positions: Sequence[PortfolioPosition],
        iv_regime: Optional[VolatilityRegime] = None
    ) -> PortfolioGreeksRisk:
        """
        Aggregate a book of positions into portfolio exposures.

        Args:
            positions: Current book, any order; iterated as given
            iv_regime: Optional IV trend passed through to the hedging advisor

        Returns:
            PortfolioGreeksRisk (all-zero record for an empty book)
        """
        if not positions:
            return PortfolioGreeksRisk()

        total_delta = 0.0
        total_gamma = 0.0
        total_theta = 0.0
        total_vega = 0.0
        total_rho = 0.0
        portfolio_value = 0.0
        contracts = 0
        spot_weight = 0
        spot_sum = 0.0

        for position in positions:
            total_delta += position.delta_exposure
            total_gamma += position.gamma_exposure
            total_theta += position.theta_exposure
            total_vega += position.vega_exposure
            total_rho += position.rho_exposure
            portfolio_value += position.market_value
            contracts += abs(position.quantity)
            if position.spot_price is not None:
                spot_weight += abs(position.quantity)
                spot_sum += abs(position.quantity) * position.spot_price

        underlying_price = spot_sum / spot_weight if spot_weight > 0 else None

        risk = PortfolioGreeksRisk(
            total_delta=total_delta,
            total_gamma=total_gamma,
            total_theta=total_theta,
            total_vega=total_vega,
            total_rho=total_rho,
            portfolio_value=portfolio_value,
            risk_score=self.risk_score(
                total_delta, total_gamma, total_theta, total_vega, portfolio_value
            ),
            gamma_exposure=self.gamma_exposure(total_gamma, contracts),
            position_count=len(positions),
            underlying_price=underlying_price,
        )

        logger.debug(
            f"Aggregated {len(positions)} positions: delta={total_delta:.2f}, "
            f"gamma={total_gamma:.4f}, score={risk.risk_score}"
        )

        if self.advisor is None:
            return risk

        drawdown, recommendations = self.advisor.advise(risk, iv_regime)
        return replace(
            risk,
            max_drawdown_risk=drawdown,
            hedging_recommendations=tuple(recommendations),
        )

    def risk_score(
        self,
        total_delta: float,
        total_gamma: float,
        total_theta: float,
        total_vega: float,
        portfolio_value: float
    ) -> int:
        """Composite 0-100 score (see module docstring)."""
        cfg = self.score_config
        scale = max(1.0, portfolio_value / cfg.reference_portfolio_value)

        components = (
            (cfg.delta_weight, abs(total_delta), cfg.delta_cap),
            (cfg.gamma_weight, abs(total_gamma), cfg.gamma_cap),
            (cfg.theta_weight, abs(total_theta) / DAYS_PER_YEAR, cfg.theta_cap_per_day),
            (cfg.vega_weight, abs(total_vega) / 100, cfg.vega_cap_per_point),
        )
        score = sum(
            weight * min(1.0, exposure / (cap * scale))
            for weight, exposure, cap in components
        )
        return int(min(100, max(0, round(score))))

    def gamma_exposure(self, total_gamma: float, contracts: int) -> RiskLevel:
        """Gamma band from per-contract portfolio gamma."""
        if contracts == 0:
            return RiskLevel.LOW
        return self.gamma_thresholds.band_for_gamma(total_gamma / contracts)

