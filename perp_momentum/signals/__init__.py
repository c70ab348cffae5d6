"""Signals: momentum signal generation and market confirmation."""

from perp_momentum.signals.confirmation import analyze_depth, analyze_ticker
from perp_momentum.signals.engine import Signal, SignalGenerator

__all__ = ["Signal", "SignalGenerator", "analyze_depth", "analyze_ticker"]
