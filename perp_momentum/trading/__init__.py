"""Trading: monitoring loop and order placement."""

from perp_momentum.trading.manager import CycleReport, TradingManager

__all__ = ["CycleReport", "TradingManager"]
