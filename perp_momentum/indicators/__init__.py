"""Indicators: MACD momentum oscillator."""

from perp_momentum.indicators.macd import MomentumIndicator, MomentumPoint

__all__ = ["MomentumIndicator", "MomentumPoint"]
