"""
Black-Scholes-Merton pricing for European calls and puts.

Pure functions: contract in, Greeks out. No state, no I/O, safe to call
from any number of threads.

Units returned (per single contract):
- theta: per year (display scaling lives on Greeks.theta_per_day)
- vega: per 1.00 of volatility
- rho: per 1.00 of rate

Degenerate inputs (T == 0 or sigma == 0) take an explicit limit branch:
price = intrinsic value, delta = 1 / 0 (0.5 at the strike, signed for puts),
all other Greeks 0. The closed form would divide by zero there.

Example:
    >>> contract = OptionContract(
    ...     spot_price=18000, strike_price=18000, time_to_expiry=10 / 365,
    ...     risk_free_rate=0.06, volatility=0.20, option_type='call'
    ... )
    >>> greeks = price_and_greeks(contract)
    >>> round(greeks.price, 1)
    252.6
"""

import math
from typing import Iterable, List, Tuple

from greeks_engine.core.models import Greeks, OptionContract


_SQRT_2 = math.sqrt(2.0)
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def norm_cdf(x: float) -> float:
    """Standard normal cumulative distribution function (erf based)."""
    return 0.5 * (1.0 + math.erf(x / _SQRT_2))


def norm_pdf(x: float) -> float:
    """Standard normal probability density function."""
    return _INV_SQRT_2PI * math.exp(-0.5 * x * x)


def calculate_d1_d2(contract: OptionContract) -> Tuple[float, float]:
    """
    Calculate d1 and d2 for a non-degenerate contract.

    Raises:
        ValueError: If the contract is degenerate (T == 0 or sigma == 0)
    """
    if contract.is_degenerate:
        raise ValueError("d1/d2 are undefined when time_to_expiry or volatility is zero")

    vol_sqrt_t = contract.volatility * math.sqrt(contract.time_to_expiry)
    d1 = (
        math.log(contract.spot_price / contract.strike_price)
        + (contract.risk_free_rate + 0.5 * contract.volatility ** 2) * contract.time_to_expiry
    ) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t
    return d1, d2


def intrinsic_value(contract: OptionContract) -> float:
    """Exercise value today: max(S-K, 0) for calls, max(K-S, 0) for puts."""
    if contract.option_type == 'call':
        return max(contract.spot_price - contract.strike_price, 0.0)
    return max(contract.strike_price - contract.spot_price, 0.0)


def _degenerate_greeks(contract: OptionContract) -> Greeks:
    spot = contract.spot_price
    strike = contract.strike_price

    if spot == strike:
        delta = 0.5
    elif contract.option_type == 'call':
        delta = 1.0 if spot > strike else 0.0
    else:
        delta = 1.0 if spot < strike else 0.0

    if contract.option_type == 'put':
        delta = -delta

    return Greeks(
        price=intrinsic_value(contract),
        delta=delta,
        gamma=0.0,
        theta=0.0,
        vega=0.0,
        rho=0.0,
    )


def price_and_greeks(contract: OptionContract) -> Greeks:
    """
    Theoretical price and first-order Greeks for one contract.

    Args:
        contract: Validated pricing inputs

    Returns:
        Greeks (per unit, raw units, see module docstring)
    """
    if contract.is_degenerate:
        return _degenerate_greeks(contract)

    spot = contract.spot_price
    strike = contract.strike_price
    time = contract.time_to_expiry
    rate = contract.risk_free_rate
    vol = contract.volatility

    d1, d2 = calculate_d1_d2(contract)
    sqrt_t = math.sqrt(time)
    discounted_strike = strike * math.exp(-rate * time)
    pdf_d1 = norm_pdf(d1)

    # Shared by calls and puts
    gamma = pdf_d1 / (spot * vol * sqrt_t)
    vega = spot * pdf_d1 * sqrt_t
    decay = -spot * pdf_d1 * vol / (2 * sqrt_t)

    if contract.option_type == 'call':
        nd2 = norm_cdf(d2)
        price = spot * norm_cdf(d1) - discounted_strike * nd2
        delta = norm_cdf(d1)
        theta = decay - rate * discounted_strike * nd2
        rho = discounted_strike * time * nd2
    else:
        n_minus_d2 = norm_cdf(-d2)
        price = discounted_strike * n_minus_d2 - spot * norm_cdf(-d1)
        delta = norm_cdf(d1) - 1.0
        theta = decay + rate * discounted_strike * n_minus_d2
        rho = -discounted_strike * time * n_minus_d2

    # Deep OTM prices can round a hair below zero
    price = max(price, 0.0)

    return Greeks(
        price=price,
        delta=delta,
        gamma=gamma,
        theta=theta,
        vega=vega,
        rho=rho,
    )


def price_many(contracts: Iterable[OptionContract]) -> List[Greeks]:
    """Price a batch of contracts, preserving input order."""
    return [price_and_greeks(contract) for contract in contracts]
