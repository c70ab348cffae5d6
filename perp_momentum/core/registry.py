"""
Currency Registry

Thread-safe mapping of symbol -> SymbolStatus. Whole-map locking;
all writes are last-writer-wins. Readers always receive copies.
"""

import copy
import logging
import threading
import time
from typing import Dict, List, Optional, Tuple

from perp_momentum.core.models import Position, SymbolConfig, SymbolStatus, TradingStatus

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class CurrencyRegistry:
    """Sole owner of per-symbol configuration and live status."""

    def __init__(self):
        self._lock = threading.Lock()
        self._statuses: Dict[str, SymbolStatus] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._statuses)

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return symbol in self._statuses

    def add(self, config: SymbolConfig) -> SymbolStatus:
        """Insert or overwrite a symbol as Active with no position."""
        status = SymbolStatus(
            config=config,
            status=TradingStatus.active(),
            last_update=now_ms(),
            position=None,
        )
        with self._lock:
            replaced = config.symbol in self._statuses
            self._statuses[config.symbol] = status
            snapshot = copy.deepcopy(status)
        logger.info("[Registry] %s %s", "Replaced" if replaced else "Added", config.symbol)
        return snapshot

    def remove(self, symbol: str) -> bool:
        with self._lock:
            removed = self._statuses.pop(symbol, None) is not None
        if removed:
            logger.info("[Registry] Removed %s", symbol)
        return removed

    def get(self, symbol: str) -> Optional[SymbolStatus]:
        with self._lock:
            status = self._statuses.get(symbol)
            return copy.deepcopy(status) if status is not None else None

    def list_all(self) -> List[Tuple[str, SymbolStatus]]:
        """Snapshot of every entry, sorted by symbol."""
        with self._lock:
            return [(s, copy.deepcopy(st)) for s, st in sorted(self._statuses.items())]

    def active_symbols(self) -> List[str]:
        with self._lock:
            return sorted(s for s, st in self._statuses.items() if st.status.is_active)

    def set_status(self, symbol: str, status: TradingStatus) -> bool:
        """Update lifecycle state. Returns False if the symbol is unknown."""
        with self._lock:
            entry = self._statuses.get(symbol)
            if entry is None:
                return False
            entry.status = status
            entry.last_update = now_ms()
        logger.info("[Registry] %s -> %s", symbol, status)
        return True

    def record_position(self, symbol: str, position: Position) -> bool:
        """Replace the stored position (no netting with an existing one)."""
        with self._lock:
            entry = self._statuses.get(symbol)
            if entry is None:
                return False
            entry.position = copy.deepcopy(position)
            entry.last_update = now_ms()
        return True

    def clear_position(self, symbol: str) -> bool:
        with self._lock:
            entry = self._statuses.get(symbol)
            if entry is None:
                return False
            entry.position = None
            entry.last_update = now_ms()
        return True
