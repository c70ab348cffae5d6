"""
Momentum Indicator

Per-symbol MACD oscillator over a bounded close-price window.

Window: last 2 × slow_period closes. Each update recomputes fast/slow EMAs
over the whole window, seeded at its oldest close, so values only settle
once the window has filled. The signal line is an EMA of the retained
momentum history plus the new value; history keeps 2 × signal_period points.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional

from perp_momentum.core.config import IndicatorConfig
from perp_momentum.utils.math_helpers import seeded_ema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MomentumPoint:
    momentum: float  # fast EMA - slow EMA
    signal: float  # EMA of momentum
    histogram: float  # momentum - signal


class _SymbolSeries:
    """Price window and momentum history for one symbol."""

    def __init__(self, window: int, history: int):
        self.prices: Deque[float] = deque(maxlen=window)
        self.points: Deque[MomentumPoint] = deque(maxlen=history)


class MomentumIndicator:
    """
    MACD engine keyed by symbol.

    No point is produced until a symbol has at least `slow_period` closes;
    callers treat that as Hold.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()
        self._series: Dict[str, _SymbolSeries] = {}

    @property
    def window_size(self) -> int:
        return self.config.slow_period * 2

    @property
    def history_size(self) -> int:
        return self.config.signal_period * 2

    def _get(self, symbol: str) -> _SymbolSeries:
        series = self._series.get(symbol)
        if series is None:
            series = _SymbolSeries(self.window_size, self.history_size)
            self._series[symbol] = series
        return series

    def add_price(self, symbol: str, price: float) -> Optional[MomentumPoint]:
        """
        Append a close and recompute the latest point.

        Returns:
            The new MomentumPoint, or None while the window is too short
        """
        series = self._get(symbol)
        series.prices.append(float(price))

        if len(series.prices) < self.config.slow_period:
            return None

        prices = list(series.prices)
        fast = seeded_ema(prices, self.config.fast_period) or 0.0
        slow = seeded_ema(prices, self.config.slow_period) or 0.0
        momentum = fast - slow

        momenta = [p.momentum for p in series.points]
        momenta.append(momentum)
        signal = seeded_ema(momenta, self.config.signal_period)
        if signal is None:
            signal = 0.0

        point = MomentumPoint(momentum=momentum, signal=signal, histogram=momentum - signal)
        series.points.append(point)
        return point

    def add_prices(self, symbol: str, prices: List[float]) -> Optional[MomentumPoint]:
        """Feed closes oldest first; returns the last point produced, if any."""
        latest = None
        for price in prices:
            point = self.add_price(symbol, price)
            if point is not None:
                latest = point
        return latest

    def history(self, symbol: str) -> List[MomentumPoint]:
        series = self._series.get(symbol)
        return list(series.points) if series else []

    def prices(self, symbol: str) -> List[float]:
        series = self._series.get(symbol)
        return list(series.prices) if series else []

    def latest(self, symbol: str) -> Optional[MomentumPoint]:
        series = self._series.get(symbol)
        if not series or not series.points:
            return None
        return series.points[-1]

    def reset(self, symbol: str):
        """Drop all state for a symbol and start a fresh window."""
        self._series[symbol] = _SymbolSeries(self.window_size, self.history_size)
        logger.debug("[MomentumIndicator] Reset %s", symbol)

    def remove(self, symbol: str):
        self._series.pop(symbol, None)
