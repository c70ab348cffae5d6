"""
Signal Engine

Turns MACD histogram momentum into Buy/Sell/Hold and gates it with
order-book and 24h ticker confirmation.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from perp_momentum.core.config import SignalConfig
from perp_momentum.data.models import DepthSnapshot, TickerSnapshot
from perp_momentum.indicators.macd import MomentumIndicator, MomentumPoint
from perp_momentum.signals.confirmation import analyze_depth, analyze_ticker
from perp_momentum.utils.math_helpers import ieee_div

logger = logging.getLogger(__name__)


class Signal(str, Enum):
    BUY = "Buy"
    SELL = "Sell"
    HOLD = "Hold"


class SignalGenerator:
    """
    Momentum-acceleration signal generation.

    A Buy candidate needs the histogram rising for two consecutive bars with
    a positive second difference, the last change exceeding
    `acceleration_pct` of the previous bar's magnitude, and momentum at or
    above its signal line (or within `cross_tolerance` of it). Sell mirrors.

    `last_signal` is the debounce state per symbol. It is only advanced
    through `record_emitted`; nothing in this class calls it.
    """

    def __init__(self, indicator: MomentumIndicator, config: Optional[SignalConfig] = None):
        self.indicator = indicator
        self.config = config or SignalConfig()
        self._last_signal: Dict[str, Signal] = {}

    # ------------------------
    # Momentum classification
    # ------------------------

    def check_momentum_trend(self, points: Sequence[MomentumPoint]) -> Optional[Tuple[bool, float]]:
        """
        Classify the last three histogram values.

        Returns:
            (is_increasing, change_percent) when the histogram is
            accelerating in one direction, otherwise None
        """
        if len(points) < 3:
            return None

        current, previous, prev_prev = points[-1], points[-2], points[-3]

        curr_change = current.histogram - previous.histogram
        prev_change = previous.histogram - prev_prev.histogram
        acceleration = curr_change - prev_change

        change_percent = ieee_div(abs(curr_change), abs(previous.histogram)) * 100.0

        is_increasing = curr_change > 0 and prev_change > 0 and acceleration > 0
        is_decreasing = curr_change < 0 and prev_change < 0 and acceleration < 0

        if is_increasing or is_decreasing:
            return is_increasing, change_percent
        return None

    def _near_cross(self, point: MomentumPoint) -> bool:
        return ieee_div(abs(point.momentum - point.signal), abs(point.signal)) < self.config.cross_tolerance

    def check_momentum(self, points: Sequence[MomentumPoint]) -> Optional[Signal]:
        """Candidate signal before strength, debounce and confirmation gates."""
        if len(points) < 2:
            return None

        current = points[-1]
        trend = self.check_momentum_trend(points)
        if trend is not None:
            is_increasing, change_percent = trend
            if change_percent > self.config.acceleration_pct:
                if is_increasing:
                    if current.momentum >= current.signal or self._near_cross(current):
                        return Signal.BUY
                else:
                    if current.momentum <= current.signal or self._near_cross(current):
                        return Signal.SELL

        return Signal.HOLD

    @staticmethod
    def momentum_strength(points: Sequence[MomentumPoint]) -> Optional[float]:
        """Absolute histogram change over the last bar."""
        if len(points) < 2:
            return None
        return abs(points[-1].histogram - points[-2].histogram)

    # ------------------------
    # Gated decisions
    # ------------------------

    def should_buy(
        self,
        symbol: str,
        price: float,
        depth: Optional[DepthSnapshot] = None,
        ticker: Optional[TickerSnapshot] = None,
    ) -> bool:
        return self._should_trade(Signal.BUY, symbol, price, depth, ticker)

    def should_sell(
        self,
        symbol: str,
        price: float,
        depth: Optional[DepthSnapshot] = None,
        ticker: Optional[TickerSnapshot] = None,
    ) -> bool:
        return self._should_trade(Signal.SELL, symbol, price, depth, ticker)

    def _should_trade(
        self,
        wanted: Signal,
        symbol: str,
        price: float,
        depth: Optional[DepthSnapshot],
        ticker: Optional[TickerSnapshot],
    ) -> bool:
        points = self.indicator.history(symbol)
        signal = self.check_momentum(points)
        strength = self.momentum_strength(points)

        if signal is not wanted or strength is None:
            return False

        # Missing market context does not block a signal
        depth_confirms = True
        if depth is not None:
            strong_buy, strong_sell = analyze_depth(depth, price, self.config)
            depth_confirms = strong_buy if wanted is Signal.BUY else strong_sell

        ticker_confirms = True
        if ticker is not None:
            bullish, bearish = analyze_ticker(ticker, self.config)
            ticker_confirms = bullish if wanted is Signal.BUY else bearish

        logger.debug(
            "[SignalGenerator] %s candidate=%s strength=%.6f depth=%s ticker=%s last=%s",
            symbol, signal.value, strength, depth_confirms, ticker_confirms,
            self._last_signal.get(symbol),
        )

        return (
            strength > self.config.min_strength
            and self._last_signal.get(symbol) is not wanted
            and depth_confirms
            and ticker_confirms
        )

    # ------------------------
    # Debounce state
    # ------------------------

    def last_signal(self, symbol: str) -> Optional[Signal]:
        return self._last_signal.get(symbol)

    def record_emitted(self, symbol: str, signal: Signal):
        """Advance the debounce state after a signal has been acted on."""
        self._last_signal[symbol] = signal

    def reset(self, symbol: str):
        self._last_signal.pop(symbol, None)
