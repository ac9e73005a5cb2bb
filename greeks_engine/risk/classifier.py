"""
Contract-level risk classification and trade recommendation.

Two policy tables, both plain dataclasses so they can be tuned from config
without touching the algorithm:

1. ClassifierThresholds: risk bands from gamma, daily theta and IV
2. RecommendationPolicy: integer score from IV regime, delta and gamma

Recommendation score (each term independent):

    IV term:     IV <= iv_cheap          -> +1   (cheap optionality)
                 IV >= iv_extreme        -> -2   (very rich premium)
                 IV >= iv_rich           -> -1   (rich premium)
    Delta term:  |delta| >= conviction_delta -> +1   (directional conviction)
                 |delta| <= lottery_delta    -> -1   (far OTM, premium to sell)
    Gamma term:  gamma >= convexity_gamma and IV < iv_rich -> +1

    score >= 3 -> strong_buy     score == 2 -> buy
    score <= -3 -> strong_sell   score == -2 -> sell
    otherwise hold (mixed or weak evidence resolves toward hold)
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from greeks_engine.core.models import (
    ContractAnalysis,
    Greeks,
    LiveOptionSnapshot,
    RiskLevel,
    TradingRecommendation,
)


@dataclass(frozen=True)
class ClassifierThresholds:
    """
    Risk band thresholds. A contract lands in the first band any of whose
    conditions it meets, checked from extreme down to medium.

    Theta thresholds are per calendar day (negative = decay).
    """
    extreme_gamma: float = 0.05
    extreme_theta_per_day: float = -15.0
    extreme_iv: float = 0.35

    high_gamma: float = 0.03
    high_theta_per_day: float = -10.0
    high_iv: float = 0.25

    medium_gamma: float = 0.015
    medium_iv: float = 0.18

    def __post_init__(self):
        """Validate band ordering"""
        if not (self.extreme_gamma >= self.high_gamma >= self.medium_gamma >= 0):
            raise ValueError(
                "gamma thresholds must satisfy extreme >= high >= medium >= 0, got "
                f"{self.extreme_gamma}/{self.high_gamma}/{self.medium_gamma}"
            )
        if not (self.extreme_iv >= self.high_iv >= self.medium_iv >= 0):
            raise ValueError(
                "IV thresholds must satisfy extreme >= high >= medium >= 0, got "
                f"{self.extreme_iv}/{self.high_iv}/{self.medium_iv}"
            )
        if not (self.extreme_theta_per_day <= self.high_theta_per_day <= 0):
            raise ValueError(
                "theta thresholds must satisfy extreme <= high <= 0, got "
                f"{self.extreme_theta_per_day}/{self.high_theta_per_day}"
            )

    def band_for_gamma(self, gamma: float) -> RiskLevel:
        """Risk band from gamma alone (also used for portfolio gamma exposure)."""
        abs_gamma = abs(gamma)
        if abs_gamma > self.extreme_gamma:
            return RiskLevel.EXTREME
        if abs_gamma > self.high_gamma:
            return RiskLevel.HIGH
        if abs_gamma > self.medium_gamma:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW


@dataclass(frozen=True)
class RecommendationPolicy:
    """Score inputs for the trading recommendation (see module docstring)."""
    iv_cheap: float = 0.18
    iv_rich: float = 0.30
    iv_extreme: float = 0.35
    conviction_delta: float = 0.60
    lottery_delta: float = 0.30
    convexity_gamma: float = 0.03

    def __post_init__(self):
        """Validate policy ordering"""
        if not (self.iv_cheap < self.iv_rich <= self.iv_extreme):
            raise ValueError(
                f"IV regime must satisfy cheap < rich <= extreme, got "
                f"{self.iv_cheap}/{self.iv_rich}/{self.iv_extreme}"
            )
        if not (0 <= self.lottery_delta < self.conviction_delta <= 1):
            raise ValueError(
                f"delta bounds must satisfy 0 <= lottery < conviction <= 1, got "
                f"{self.lottery_delta}/{self.conviction_delta}"
            )

    def iv_points(self, implied_volatility: float) -> int:
        if implied_volatility <= self.iv_cheap:
            return 1
        if implied_volatility >= self.iv_extreme:
            return -2
        if implied_volatility >= self.iv_rich:
            return -1
        return 0

    def delta_points(self, delta: float) -> int:
        abs_delta = abs(delta)
        if abs_delta >= self.conviction_delta:
            return 1
        if abs_delta <= self.lottery_delta:
            return -1
        return 0

    def gamma_points(self, gamma: float, implied_volatility: float) -> int:
        if gamma >= self.convexity_gamma and implied_volatility < self.iv_rich:
            return 1
        return 0

    def score(self, greeks: Greeks, implied_volatility: float) -> int:
        """Total recommendation score, in [-3, 3]."""
        return (
            self.iv_points(implied_volatility)
            + self.delta_points(greeks.delta)
            + self.gamma_points(greeks.gamma, implied_volatility)
        )

    @staticmethod
    def label(score: int) -> TradingRecommendation:
        """Map a score to its recommendation label."""
        if score >= 3:
            return TradingRecommendation.STRONG_BUY
        if score == 2:
            return TradingRecommendation.BUY
        if score <= -3:
            return TradingRecommendation.STRONG_SELL
        if score == -2:
            return TradingRecommendation.SELL
        return TradingRecommendation.HOLD


@dataclass(frozen=True)
class ContractRiskClassifier:
    """
    Deterministic risk level + recommendation for one contract.

    Example:
        >>> classifier = ContractRiskClassifier()
        >>> level, rec = classifier.classify(greeks, implied_volatility=0.22)
        >>> level
        <RiskLevel.MEDIUM: 'medium'>
    """
    thresholds: ClassifierThresholds = field(default_factory=ClassifierThresholds)
    policy: RecommendationPolicy = field(default_factory=RecommendationPolicy)

    def risk_level(self, greeks: Greeks, implied_volatility: float) -> RiskLevel:
        """Risk band from gamma, daily theta and implied volatility."""
        t = self.thresholds
        abs_gamma = abs(greeks.gamma)
        theta_day = greeks.theta_per_day

        if (abs_gamma > t.extreme_gamma
                or theta_day < t.extreme_theta_per_day
                or implied_volatility > t.extreme_iv):
            return RiskLevel.EXTREME
        if (abs_gamma > t.high_gamma
                or theta_day < t.high_theta_per_day
                or implied_volatility > t.high_iv):
            return RiskLevel.HIGH
        if abs_gamma > t.medium_gamma or implied_volatility > t.medium_iv:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def recommendation(self, greeks: Greeks, implied_volatility: float) -> TradingRecommendation:
        """Trade recommendation from the scoring policy."""
        return self.policy.label(self.policy.score(greeks, implied_volatility))

    def classify(
        self,
        greeks: Greeks,
        implied_volatility: float
    ) -> Tuple[RiskLevel, TradingRecommendation]:
        """
        Classify one contract.

        Args:
            greeks: Model Greeks for the contract (theta per year)
            implied_volatility: Annualized IV as decimal (0.20 = 20%)

        Returns:
            (risk_level, trading_recommendation)
        """
        return (
            self.risk_level(greeks, implied_volatility),
            self.recommendation(greeks, implied_volatility),
        )


@dataclass(frozen=True)
class AnalysisThresholds:
    """Trigger levels for the narrative contract analysis."""
    acceleration_gamma: float = 0.03
    heavy_decay_theta_per_day: float = -10.0
    elevated_iv: float = 0.30
    near_expiry_years: float = 0.027       # ~10 days
    scalping_gamma: float = 0.02
    vol_selling_iv: float = 0.35
    vol_selling_vega_per_point: float = 15.0
    directional_delta: float = 0.70
    directional_max_iv: float = 0.20
    delta_hedge_delta: float = 0.50
    vega_hedge_per_point: float = 20.0
    shares_per_contract: int = 100


@dataclass(frozen=True)
class ContractAnalyzer:
    """
    Human-readable assessment of one evaluated contract: a risk summary
    sentence, strategic insights and contract-level hedging options.
    """
    thresholds: AnalysisThresholds = field(default_factory=AnalysisThresholds)

    def analyze(self, snapshot: LiveOptionSnapshot) -> ContractAnalysis:
        """Build the narrative analysis for a snapshot."""
        return ContractAnalysis(
            symbol=snapshot.symbol,
            risk_assessment=self._risk_assessment(snapshot),
            strategic_insights=tuple(self._strategic_insights(snapshot)),
            hedging_options=tuple(self._hedging_options(snapshot)),
        )

    def _risk_assessment(self, snapshot: LiveOptionSnapshot) -> str:
        t = self.thresholds
        greeks = snapshot.greeks
        parts = [f"Risk Level: {snapshot.risk_level.value.upper()}."]

        if abs(greeks.gamma) > t.acceleration_gamma:
            parts.append("High gamma indicates significant acceleration risk.")
        if greeks.theta_per_day < t.heavy_decay_theta_per_day:
            parts.append("High time decay - position losing significant value daily.")
        if snapshot.implied_volatility > t.elevated_iv:
            parts.append("High IV suggests elevated volatility risk.")

        return " ".join(parts)

    def _strategic_insights(self, snapshot: LiveOptionSnapshot) -> List[str]:
        t = self.thresholds
        greeks = snapshot.greeks
        insights = []

        if snapshot.time_to_expiry < t.near_expiry_years and abs(greeks.gamma) > t.scalping_gamma:
            insights.append("Near expiry with high gamma - ideal for scalping strategies")
        if (snapshot.implied_volatility > t.vol_selling_iv
                and greeks.vega_per_vol_point > t.vol_selling_vega_per_point):
            insights.append("High IV with significant vega - consider volatility selling strategies")
        if abs(greeks.delta) > t.directional_delta and snapshot.implied_volatility < t.directional_max_iv:
            insights.append("Deep ITM with low IV - consider directional strategies")

        return insights

    def _hedging_options(self, snapshot: LiveOptionSnapshot) -> List[str]:
        t = self.thresholds
        greeks = snapshot.greeks
        hedging = []

        if abs(greeks.delta) > t.delta_hedge_delta:
            shares = abs(greeks.delta * t.shares_per_contract)
            hedging.append(f"Delta hedge: {shares:.0f} shares of underlying")
        if abs(greeks.gamma) > t.acceleration_gamma:
            hedging.append("Consider gamma hedging with opposing gamma positions")
        if abs(greeks.vega_per_vol_point) > t.vega_hedge_per_point:
            hedging.append("Vega hedge: Use options with opposite vega exposure")

        return hedging
