"""
Hedging guidance and drawdown estimate from portfolio-level exposures.

Drawdown model (one trading day, adverse move of shock_pct):

    move          = shock_pct * underlying_price
    delta_risk    = |total_delta| * move
    gamma_risk    = 0.5 * |total_gamma| * move ** 2
    premium_risk  = premium_shock_pct * portfolio_value
    max_drawdown  = delta_risk + gamma_risk + premium_risk

Every term is non-negative and non-decreasing in its input, so the estimate
is monotone in |delta|, |gamma| and portfolio value.

Recommendations come from independent rules evaluated in a fixed priority
order (gamma, delta, vega, theta). Each rule reads only the risk record and
its own limits and contributes at most one message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging

from greeks_engine.core.models import PortfolioGreeksRisk, RiskLevel

logger = logging.getLogger(__name__)


class VolatilityRegime(Enum):
    """Direction implied volatility is trending, supplied by the caller"""
    FALLING = "falling"
    STABLE = "stable"
    RISING = "rising"


@dataclass(frozen=True)
class HedgingConfig:
    """
    Policy constants for drawdown sizing and hedge triggers.

    Vega limit is in vega-per-vol-point units, theta limit in money per day.
    """
    shock_pct: float = 0.05               # Adverse underlying move
    premium_shock_pct: float = 0.10       # Share of premium at risk in a day
    reference_spot: float = 18000.0       # Used when positions carry no spot
    delta_limit: float = 50.0
    vega_limit_per_point: float = 150.0
    theta_limit_per_day: float = -100.0

    def __post_init__(self):
        """Validate parameters."""
        if self.shock_pct <= 0:
            raise ValueError(f"shock_pct must be > 0, got {self.shock_pct}")
        if self.premium_shock_pct < 0:
            raise ValueError(f"premium_shock_pct must be >= 0, got {self.premium_shock_pct}")
        if self.reference_spot <= 0:
            raise ValueError(f"reference_spot must be > 0, got {self.reference_spot}")
        if self.delta_limit <= 0:
            raise ValueError(f"delta_limit must be > 0, got {self.delta_limit}")
        if self.vega_limit_per_point <= 0:
            raise ValueError(f"vega_limit_per_point must be > 0, got {self.vega_limit_per_point}")
        if self.theta_limit_per_day >= 0:
            raise ValueError(f"theta_limit_per_day must be < 0, got {self.theta_limit_per_day}")


Rule = Callable[[PortfolioGreeksRisk, Optional[VolatilityRegime]], Optional[str]]


class HedgingAdvisor:
    """
    Derives max-drawdown risk and ordered hedging recommendations.

    Example:
        >>> advisor = HedgingAdvisor()
        >>> drawdown, recs = advisor.advise(risk)
        >>> for rec in recs:
        ...     print(rec)
    """

    def __init__(self, config: Optional[HedgingConfig] = None):
        self.config = config or HedgingConfig()
        # Priority order: most urgent first
        self._rules: Tuple[Rule, ...] = (
            self._gamma_rule,
            self._delta_rule,
            self._vega_rule,
            self._theta_rule,
        )

    def underlying_for(self, risk: PortfolioGreeksRisk) -> float:
        """Underlying price used to size the adverse move."""
        if risk.underlying_price is not None:
            return risk.underlying_price
        return self.config.reference_spot

    def max_drawdown_risk(self, risk: PortfolioGreeksRisk) -> float:
        """One-day loss estimate under an adverse shock (see module docstring)."""
        move = self.config.shock_pct * self.underlying_for(risk)
        delta_risk = abs(risk.total_delta) * move
        gamma_risk = 0.5 * abs(risk.total_gamma) * move ** 2
        premium_risk = self.config.premium_shock_pct * abs(risk.portfolio_value)
        return delta_risk + gamma_risk + premium_risk

    def recommendations(
        self,
        risk: PortfolioGreeksRisk,
        iv_regime: Optional[VolatilityRegime] = None
    ) -> List[str]:
        """Messages from every rule that fires, in priority order."""
        messages = []
        for rule in self._rules:
            message = rule(risk, iv_regime)
            if message is not None:
                messages.append(message)
        return messages

    def advise(
        self,
        risk: PortfolioGreeksRisk,
        iv_regime: Optional[VolatilityRegime] = None
    ) -> Tuple[float, List[str]]:
        """
        Drawdown estimate and hedging guidance for a portfolio.

        Args:
            risk: Aggregated portfolio exposures
            iv_regime: Current IV trend, if known. Only changes the wording
                      of the vega message (escalated when IV moves against
                      the book), never whether it fires.

        Returns:
            (max_drawdown_risk, recommendations)
        """
        if risk.is_empty:
            return 0.0, []

        drawdown = self.max_drawdown_risk(risk)
        messages = self.recommendations(risk, iv_regime)
        logger.debug(
            f"Hedging advice: drawdown={drawdown:,.2f}, {len(messages)} recommendation(s)"
        )
        return drawdown, messages

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _gamma_rule(self, risk, iv_regime):
        if risk.gamma_exposure not in (RiskLevel.HIGH, RiskLevel.EXTREME):
            return None
        urgency = "Urgent: " if risk.gamma_exposure is RiskLevel.EXTREME else ""
        return (
            f"{urgency}{risk.gamma_exposure.value.capitalize()} gamma exposure "
            f"({risk.total_gamma:.4f}). Reduce gamma by closing short-dated options "
            f"or adding offsetting gamma positions."
        )

    def _delta_rule(self, risk, iv_regime):
        if abs(risk.total_delta) <= self.config.delta_limit:
            return None
        side = "Sell" if risk.total_delta > 0 else "Buy"
        return (
            f"High delta exposure ({risk.total_delta:.2f}). {side} "
            f"{abs(risk.total_delta):.0f} units of the underlying to move toward delta-neutral."
        )

    def _vega_rule(self, risk, iv_regime):
        vega_point = risk.total_vega_per_vol_point
        if abs(vega_point) <= self.config.vega_limit_per_point:
            return None
        direction = "long" if vega_point > 0 else "short"
        # IV moving against the position: escalate
        adverse = (
            (iv_regime is VolatilityRegime.FALLING and vega_point > 0)
            or (iv_regime is VolatilityRegime.RISING and vega_point < 0)
        )
        urgency = "Urgent: " if adverse else ""
        regime_note = f" IV regime: {iv_regime.value}." if iv_regime is not None else ""
        return (
            f"{urgency}High vega exposure ({vega_point:.2f} per vol point, {direction} volatility). "
            f"Consider volatility hedging with opposite-vega options.{regime_note}"
        )

    def _theta_rule(self, risk, iv_regime):
        theta_day = risk.total_theta_per_day
        if theta_day >= self.config.theta_limit_per_day:
            return None
        return (
            f"Heavy time decay ({theta_day:.2f} per day). Consider rolling to later "
            f"expiries or offsetting with short premium."
        )
