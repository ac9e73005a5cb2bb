"""
Unit tests for Black-Scholes pricing - Layer 2
File: tests/unit/test_black_scholes.py
Target: greeks_engine/pricing/black_scholes.py

Covers the textbook identities (put-call parity, delta bounds, gamma/vega
symmetry), the degenerate branch and the ATM NIFTY reference contract.
"""

import math

import pytest

from greeks_engine.core.models import OptionContract
from greeks_engine.pricing.black_scholes import (
    calculate_d1_d2,
    intrinsic_value,
    norm_cdf,
    norm_pdf,
    price_and_greeks,
    price_many,
)


def contract(spot=100.0, strike=100.0, time=0.5, rate=0.05, vol=0.2, option_type='call'):
    return OptionContract(
        spot_price=spot, strike_price=strike, time_to_expiry=time,
        risk_free_rate=rate, volatility=vol, option_type=option_type
    )


# ============================================================================
# Normal distribution helpers
# ============================================================================

class TestNormalDistribution:
    """Test the erf-based CDF and the PDF"""

    def test_cdf_reference_points(self):
        assert norm_cdf(0.0) == pytest.approx(0.5)
        assert norm_cdf(1.96) == pytest.approx(0.975, abs=1e-4)
        assert norm_cdf(-1.96) == pytest.approx(0.025, abs=1e-4)

    def test_cdf_symmetry(self):
        for x in (0.1, 0.5, 1.3, 2.7):
            assert norm_cdf(x) + norm_cdf(-x) == pytest.approx(1.0)

    def test_pdf_peak(self):
        assert norm_pdf(0.0) == pytest.approx(1 / math.sqrt(2 * math.pi))


# ============================================================================
# Reference scenario
# ============================================================================

class TestAtmReferenceContract:
    """S=K=18000, T=10/365, r=6%, sigma=20%"""

    def test_call_price_and_greeks(self, atm_call):
        """Pinned values of the closed-form solution"""
        # ACT
        greeks = price_and_greeks(atm_call)

        # ASSERT
        assert greeks.price == pytest.approx(252.6, abs=0.1)
        assert greeks.delta == pytest.approx(0.5264, abs=1e-3)
        assert greeks.gamma == pytest.approx(6.68e-4, rel=1e-2)
        assert greeks.vega == pytest.approx(1186.0, abs=1.0)
        assert greeks.vega_per_vol_point == pytest.approx(11.86, abs=0.01)
        assert greeks.theta_per_day == pytest.approx(-13.38, abs=0.02)
        assert greeks.rho > 0

    def test_atm_call_delta_slightly_above_half(self, atm_call):
        """Positive drift pushes ATM call delta above 0.5"""
        assert 0.5 < price_and_greeks(atm_call).delta < 0.55

    def test_d1_d2_spacing(self, atm_call):
        """d1 - d2 = sigma * sqrt(T)"""
        d1, d2 = calculate_d1_d2(atm_call)
        assert d1 - d2 == pytest.approx(0.20 * math.sqrt(10 / 365))

    def test_d1_d2_undefined_when_degenerate(self):
        with pytest.raises(ValueError):
            calculate_d1_d2(contract(time=0.0))


# ============================================================================
# Identities
# ============================================================================

class TestPricingIdentities:
    """Properties that must hold for any valid non-degenerate contract"""

    @pytest.mark.parametrize("spot,strike,time,rate,vol", [
        (100.0, 100.0, 0.5, 0.05, 0.2),
        (18000.0, 18200.0, 10 / 365, 0.06, 0.25),
        (50.0, 65.0, 2.0, 0.01, 0.6),
        (120.0, 80.0, 0.1, 0.0, 0.15),
        (100.0, 105.0, 1.0, -0.01, 0.3),
    ])
    def test_put_call_parity(self, spot, strike, time, rate, vol):
        """C - P = S - K * exp(-rT)"""
        call = price_and_greeks(contract(spot, strike, time, rate, vol, 'call'))
        put = price_and_greeks(contract(spot, strike, time, rate, vol, 'put'))

        expected = spot - strike * math.exp(-rate * time)
        assert call.price - put.price == pytest.approx(expected, abs=1e-6 * spot)

    @pytest.mark.parametrize("spot", [60.0, 90.0, 100.0, 110.0, 160.0])
    def test_delta_bounds_and_put_call_relation(self, spot):
        """Call delta in [0, 1], put delta in [-1, 0], put = call - 1"""
        call = price_and_greeks(contract(spot=spot, option_type='call'))
        put = price_and_greeks(contract(spot=spot, option_type='put'))

        assert 0.0 <= call.delta <= 1.0
        assert -1.0 <= put.delta <= 0.0
        assert put.delta == pytest.approx(call.delta - 1.0)

    def test_call_delta_increases_with_spot(self):
        deltas = [price_and_greeks(contract(spot=s)).delta for s in (70.0, 85.0, 100.0, 115.0, 130.0)]
        assert deltas == sorted(deltas)
        assert len(set(deltas)) == len(deltas)

    def test_put_delta_increases_with_spot(self):
        """Put delta rises from -1 toward 0 as the underlying rallies"""
        deltas = [
            price_and_greeks(contract(spot=s, option_type='put')).delta
            for s in (70.0, 85.0, 100.0, 115.0, 130.0)
        ]
        assert deltas == sorted(deltas)
        assert len(set(deltas)) == len(deltas)
        assert all(-1.0 <= d <= 0.0 for d in deltas)

    def test_gamma_and_vega_match_for_call_and_put(self):
        """Gamma and vega do not depend on option type"""
        call = price_and_greeks(contract(spot=95.0, option_type='call'))
        put = price_and_greeks(contract(spot=95.0, option_type='put'))

        assert call.gamma == pytest.approx(put.gamma)
        assert call.vega == pytest.approx(put.vega)
        assert call.gamma > 0
        assert call.vega > 0

    def test_price_never_negative(self):
        """Deep OTM options price at or just above zero"""
        greeks = price_and_greeks(contract(spot=10.0, strike=1000.0, time=0.01, vol=0.1))
        assert greeks.price >= 0.0

    def test_call_rho_positive_put_rho_negative(self):
        assert price_and_greeks(contract(option_type='call')).rho > 0
        assert price_and_greeks(contract(option_type='put')).rho < 0


# ============================================================================
# Degenerate branch
# ============================================================================

class TestDegenerateContracts:
    """T == 0 or sigma == 0 takes the intrinsic-value branch"""

    @pytest.mark.parametrize("spot,strike,option_type,price,delta", [
        (110.0, 100.0, 'call', 10.0, 1.0),
        (90.0, 100.0, 'call', 0.0, 0.0),
        (100.0, 100.0, 'call', 0.0, 0.5),
        (90.0, 100.0, 'put', 10.0, -1.0),
        (110.0, 100.0, 'put', 0.0, 0.0),
        (100.0, 100.0, 'put', 0.0, -0.5),
    ])
    def test_at_expiry(self, spot, strike, option_type, price, delta):
        """Price is intrinsic value, delta is the step function"""
        greeks = price_and_greeks(contract(spot, strike, time=0.0, option_type=option_type))

        assert greeks.price == price
        assert greeks.delta == delta
        assert greeks.gamma == 0.0
        assert greeks.theta == 0.0
        assert greeks.vega == 0.0
        assert greeks.rho == 0.0

    def test_zero_volatility_uses_same_branch(self):
        greeks = price_and_greeks(contract(spot=110.0, strike=100.0, time=0.5, vol=0.0))

        assert greeks.price == 10.0
        assert greeks.delta == 1.0
        assert greeks.gamma == 0.0

    @pytest.mark.parametrize("spot,strike,option_type", [
        (18500.0, 18000.0, 'call'),
        (17500.0, 18000.0, 'call'),
        (17500.0, 18000.0, 'put'),
        (18500.0, 18000.0, 'put'),
    ])
    def test_continuity_near_expiry(self, spot, strike, option_type):
        """Closed form with tiny T approaches the degenerate result"""
        near = price_and_greeks(contract(spot, strike, time=1e-6, rate=0.06, vol=0.2,
                                         option_type=option_type))
        at = price_and_greeks(contract(spot, strike, time=0.0, rate=0.06, vol=0.2,
                                       option_type=option_type))

        assert near.price == pytest.approx(at.price, abs=1e-2)  # r*K*T discount is ~1e-3
        assert near.delta == pytest.approx(at.delta, abs=1e-6)

    def test_intrinsic_value(self):
        assert intrinsic_value(contract(spot=120.0, strike=100.0, option_type='call')) == 20.0
        assert intrinsic_value(contract(spot=120.0, strike=100.0, option_type='put')) == 0.0


class TestPriceMany:
    def test_preserves_order(self):
        contracts = [contract(spot=s) for s in (90.0, 100.0, 110.0)]
        results = price_many(contracts)

        assert [r.price for r in results] == [price_and_greeks(c).price for c in contracts]

    def test_empty(self):
        assert price_many([]) == []
