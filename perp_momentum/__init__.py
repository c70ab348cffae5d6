"""
Perpetuals Momentum Trading Engine

MACD momentum signals with order-book and 24h ticker confirmation,
fixed 1:2 take-profit/stop-loss brackets, one process, one venue.

Components:
- Indicator: Per-symbol MACD over a bounded close window
- Confirmation: Order-book imbalance and 24h ticker bias
- Signal Generator: Histogram acceleration → Buy/Sell/Hold with gates
- Currency Registry: Thread-safe per-symbol config, status and position
- Trading Manager: Polling loop tying gateway, signals and orders together
- Risk Overlay: Take-profit / stop-loss bracket around the entry price
- Gateway: Hyperliquid market data and order submission
"""

__version__ = "0.1.0"

from perp_momentum.core.config import Config
from perp_momentum.core.registry import CurrencyRegistry
from perp_momentum.core.scheduler import Scheduler

__all__ = [
    "Config",
    "CurrencyRegistry",
    "Scheduler",
]
