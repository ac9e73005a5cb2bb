"""
Unit tests for hedging guidance - Layer 4
File: tests/unit/test_hedging.py
Target: greeks_engine/portfolio/hedging.py
"""

import pytest

from greeks_engine.core.models import PortfolioGreeksRisk, RiskLevel
from greeks_engine.portfolio.hedging import HedgingAdvisor, HedgingConfig, VolatilityRegime


def make_risk(**overrides) -> PortfolioGreeksRisk:
    """Non-empty risk record with quiet exposures unless overridden"""
    values = dict(
        total_delta=10.0,
        total_gamma=0.1,
        total_theta=-3650.0,     # -10 per day
        total_vega=5000.0,       # 50 per vol point
        portfolio_value=1000.0,
        gamma_exposure=RiskLevel.LOW,
        position_count=1,
    )
    values.update(overrides)
    return PortfolioGreeksRisk(**values)


@pytest.fixture
def advisor():
    return HedgingAdvisor()


# ============================================================================
# Drawdown
# ============================================================================

class TestMaxDrawdown:
    """delta*move + 0.5*gamma*move^2 + premium shock"""

    def test_formula_with_underlying(self, advisor):
        # ARRANGE: move = 5% of 100 = 5
        risk = make_risk(total_delta=10.0, total_gamma=2.0, portfolio_value=1000.0,
                         underlying_price=100.0)

        # ACT
        drawdown = advisor.max_drawdown_risk(risk)

        # ASSERT: 10*5 + 0.5*2*25 + 0.1*1000
        assert drawdown == pytest.approx(50.0 + 25.0 + 100.0)

    def test_reference_spot_when_underlying_unknown(self, advisor):
        risk = make_risk(total_delta=1.0, total_gamma=0.0, portfolio_value=0.0)
        assert advisor.max_drawdown_risk(risk) == pytest.approx(0.05 * 18000.0)

    def test_non_negative_for_short_exposures(self, advisor):
        risk = make_risk(total_delta=-40.0, total_gamma=-3.0)
        assert advisor.max_drawdown_risk(risk) > 0

    def test_monotone_in_delta_and_gamma(self, advisor):
        base = advisor.max_drawdown_risk(make_risk())
        assert advisor.max_drawdown_risk(make_risk(total_delta=20.0)) > base
        assert advisor.max_drawdown_risk(make_risk(total_gamma=0.5)) > base
        assert advisor.max_drawdown_risk(make_risk(portfolio_value=5000.0)) > base

    def test_empty_risk_gets_no_advice(self, advisor):
        assert advisor.advise(PortfolioGreeksRisk()) == (0.0, [])


# ============================================================================
# Rules
# ============================================================================

class TestRecommendations:
    """Independent rules in priority order gamma, delta, vega, theta"""

    def test_quiet_book_has_no_recommendations(self, advisor):
        drawdown, recs = advisor.advise(make_risk())

        assert drawdown > 0
        assert recs == []

    def test_all_rules_fire_in_priority_order(self, advisor):
        risk = make_risk(
            gamma_exposure=RiskLevel.HIGH,
            total_delta=100.0,
            total_vega=20000.0,       # 200 per vol point
            total_theta=-73000.0,     # -200 per day
        )

        _, recs = advisor.advise(risk)

        assert len(recs) == 4
        assert recs[0].startswith("High gamma exposure")
        assert recs[1].startswith("High delta exposure")
        assert recs[2].startswith("High vega exposure")
        assert recs[3].startswith("Heavy time decay")

    def test_extreme_gamma_is_urgent(self, advisor):
        _, recs = advisor.advise(make_risk(gamma_exposure=RiskLevel.EXTREME))
        assert recs[0].startswith("Urgent: Extreme gamma exposure")

    def test_medium_gamma_is_not_flagged(self, advisor):
        _, recs = advisor.advise(make_risk(gamma_exposure=RiskLevel.MEDIUM))
        assert recs == []

    def test_delta_hedge_direction(self, advisor):
        _, long_recs = advisor.advise(make_risk(total_delta=80.0))
        _, short_recs = advisor.advise(make_risk(total_delta=-80.0))

        assert "Sell 80 units of the underlying" in long_recs[0]
        assert "Buy 80 units of the underlying" in short_recs[0]

    def test_delta_at_limit_does_not_fire(self, advisor):
        _, recs = advisor.advise(make_risk(total_delta=50.0))
        assert recs == []

    @pytest.mark.parametrize("vega,regime,urgent", [
        (20000.0, None, False),
        (20000.0, VolatilityRegime.RISING, False),
        (20000.0, VolatilityRegime.STABLE, False),
        (20000.0, VolatilityRegime.FALLING, True),     # long vol, IV falling
        (-20000.0, VolatilityRegime.FALLING, False),
        (-20000.0, VolatilityRegime.RISING, True),     # short vol, IV rising
    ])
    def test_vega_rule_fires_in_every_regime(self, advisor, vega, regime, urgent):
        """The regime escalates the wording, never suppresses the hedge"""
        _, recs = advisor.advise(make_risk(total_vega=vega), iv_regime=regime)

        assert len(recs) == 1
        assert "High vega exposure" in recs[0]
        assert recs[0].startswith("Urgent: ") is urgent
        if regime is not None:
            assert recs[0].endswith(f"IV regime: {regime.value}.")

    def test_high_vega_with_rising_iv_suggests_hedge(self, advisor):
        _, recs = advisor.advise(make_risk(total_vega=50000.0), iv_regime=VolatilityRegime.RISING)
        assert recs == [
            "High vega exposure (500.00 per vol point, long volatility). "
            "Consider volatility hedging with opposite-vega options. IV regime: rising."
        ]

    def test_vega_under_limit_never_fires(self, advisor):
        for regime in (None, *VolatilityRegime):
            _, recs = advisor.advise(make_risk(total_vega=10000.0), iv_regime=regime)
            assert recs == []

    def test_vega_message_states_direction(self, advisor):
        _, recs = advisor.advise(make_risk(total_vega=-20000.0))
        assert "short volatility" in recs[0]

    def test_theta_rule(self, advisor):
        _, recs = advisor.advise(make_risk(total_theta=-365.0 * 150))
        assert recs == ["Heavy time decay (-150.00 per day). Consider rolling to later "
                        "expiries or offsetting with short premium."]

    def test_custom_limits(self):
        strict = HedgingAdvisor(HedgingConfig(delta_limit=5.0))
        _, recs = strict.advise(make_risk(total_delta=10.0))
        assert recs[0].startswith("High delta exposure (10.00)")


class TestHedgingConfig:
    def test_invalid_shock_rejected(self):
        with pytest.raises(ValueError, match="shock_pct"):
            HedgingConfig(shock_pct=0.0)

    def test_positive_theta_limit_rejected(self):
        with pytest.raises(ValueError, match="theta_limit_per_day"):
            HedgingConfig(theta_limit_per_day=10.0)
