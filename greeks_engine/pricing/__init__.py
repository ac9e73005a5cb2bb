"""Closed-form option pricing"""

from greeks_engine.pricing.black_scholes import (
    norm_cdf,
    norm_pdf,
    calculate_d1_d2,
    intrinsic_value,
    price_and_greeks,
    price_many,
)

__all__ = [
    'norm_cdf',
    'norm_pdf',
    'calculate_d1_d2',
    'intrinsic_value',
    'price_and_greeks',
    'price_many',
]
