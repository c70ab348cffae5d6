"""
Market Data & Execution Gateway contract.

The engine talks to the venue only through this interface. Implementations
raise GatewayError (or MarketDataParseError) on any failure; they do not
retry.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from perp_momentum.core.models import OrderSide
from perp_momentum.data.models import Candle, DepthSnapshot, TickerSnapshot
from perp_momentum.execution.orders import ConditionalOrder, OrderResult


class MarketGateway(ABC):
    """Venue access used by the trading manager."""

    @abstractmethod
    def get_candles(
        self,
        symbol: str,
        interval: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """Candles for `symbol`, in the order the venue returns them."""

    @abstractmethod
    def get_depth(self, symbol: str, limit: Optional[int] = None) -> DepthSnapshot:
        """Order book snapshot, up to `limit` levels per side."""

    @abstractmethod
    def get_ticker(self, symbol: Optional[str] = None) -> List[TickerSnapshot]:
        """24h statistics for one symbol, or all symbols when None."""

    @abstractmethod
    def get_latest_price(self, symbol: str) -> float:
        """Last traded (or mid) price."""

    @abstractmethod
    def place_order(
        self,
        symbol: str,
        side: OrderSide,
        quantity: float,
        take_profit: Optional[ConditionalOrder] = None,
        stop_loss: Optional[ConditionalOrder] = None,
    ) -> OrderResult:
        """Submit a market entry with optional TP/SL attachments."""
