"""
Market data records supplied by the gateway.

Snapshots are built per call and never retained by the engine.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from perp_momentum.core.errors import MarketDataParseError


def parse_float(field_name: str, value: object) -> float:
    """
    Parse a venue numeric field.

    Raises:
        MarketDataParseError: on missing, non-numeric or non-finite input
    """
    if isinstance(value, bool) or value is None:
        raise MarketDataParseError(field_name, value)
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise MarketDataParseError(field_name, value) from e
    if math.isnan(out) or math.isinf(out):
        raise MarketDataParseError(field_name, value)
    return out


def parse_int(field_name: str, value: object) -> int:
    return int(parse_float(field_name, value))


def parse_levels(field_name: str, levels) -> List[Tuple[float, float]]:
    """Normalize [[px, sz], ...] or [{"px", "sz"}, ...] book levels."""
    out: List[Tuple[float, float]] = []
    for lvl in levels or []:
        if isinstance(lvl, dict):
            px, sz = lvl.get("px", lvl.get("price")), lvl.get("sz", lvl.get("qty"))
        elif isinstance(lvl, (list, tuple)) and len(lvl) >= 2:
            px, sz = lvl[0], lvl[1]
        else:
            raise MarketDataParseError(field_name, lvl)
        out.append((parse_float(f"{field_name}.price", px), parse_float(f"{field_name}.qty", sz)))
    return out


@dataclass(frozen=True)
class Candle:
    open_time: int  # epoch ms
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int


@dataclass
class DepthSnapshot:
    """Order book levels as (price, qty); asks ascending, bids descending."""

    asks: List[Tuple[float, float]] = field(default_factory=list)
    bids: List[Tuple[float, float]] = field(default_factory=list)
    timestamp: int = 0

    @property
    def best_bid(self) -> Optional[float]:
        return self.bids[0][0] if self.bids else None

    @property
    def best_ask(self) -> Optional[float]:
        return self.asks[0][0] if self.asks else None


@dataclass
class TickerSnapshot:
    """24h statistics for one symbol."""

    symbol: str
    price_change_percent: float
    high_price: float
    low_price: float
    last_price: float
    volume: float
    bid_price: float
    ask_price: float
