"""Core system components: config, models, registry, scheduler."""

from perp_momentum.core.config import Config
from perp_momentum.core.registry import CurrencyRegistry
from perp_momentum.core.scheduler import Scheduler

__all__ = [
    "Config",
    "CurrencyRegistry",
    "Scheduler",
]
