"""Market data: gateway contract and snapshot records."""

from perp_momentum.data.gateway import MarketGateway
from perp_momentum.data.models import Candle, DepthSnapshot, TickerSnapshot

__all__ = ["MarketGateway", "Candle", "DepthSnapshot", "TickerSnapshot"]
