"""
Mathematical helper functions.

Seeded EMA and float division with IEEE semantics.
"""

from typing import Optional, Sequence

import numpy as np


def seeded_ema(values: Sequence[float], period: int) -> Optional[float]:
    """
    Exponential moving average seeded at the oldest value of the series.

    Multiplier is 2 / (period + 1). The whole series is folded starting
    from values[0], so the result depends on how much history is passed in.

    Args:
        values: Series, oldest first
        period: EMA period

    Returns:
        Latest EMA value, or None if fewer than `period` values
    """
    arr = np.asarray(values, dtype=float)
    if len(arr) < period or len(arr) == 0:
        return None

    alpha = 2.0 / (period + 1.0)
    acc = arr[0]

    for v in arr[1:]:
        acc = v * alpha + acc * (1.0 - alpha)

    return float(acc)


def ieee_div(num: float, den: float) -> float:
    """
    Divide without raising on a zero denominator.

    x/0 gives ±inf and 0/0 gives nan, so threshold comparisons on the
    result simply evaluate to False (or True for > on inf).
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))
