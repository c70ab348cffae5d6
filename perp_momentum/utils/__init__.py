"""Utilities: precision helpers and math functions."""

from perp_momentum.utils.precision import format_price, format_size, round_price
from perp_momentum.utils.math_helpers import seeded_ema, ieee_div

__all__ = [
    "format_price",
    "format_size",
    "round_price",
    "seeded_ema",
    "ieee_div",
]
