"""
Order data structures (ConditionalOrder, OrderResult).
"""

from dataclasses import dataclass
from typing import Literal, Optional

from perp_momentum.core.models import OrderSide


@dataclass(frozen=True)
class ConditionalOrder:
    """
    Take-profit / stop-loss attachment sent with an entry order.

    Triggers on mark price and closes the whole position.
    """

    kind: Literal["TAKE_PROFIT_MARKET", "STOP_MARKET"]
    stop_price: float
    working_type: Literal["MARK_PRICE", "CONTRACT_PRICE"] = "MARK_PRICE"
    close_position: bool = True

    @property
    def is_take_profit(self) -> bool:
        return self.kind == "TAKE_PROFIT_MARKET"

    def to_payload(self) -> dict:
        return {
            "type": self.kind,
            "stopPrice": self.stop_price,
            "workingType": self.working_type,
            "closePosition": self.close_position,
        }


@dataclass
class OrderResult:
    """Venue acknowledgement of a submitted entry order."""

    order_id: str
    symbol: str
    side: OrderSide
    quantity: float  # Requested size
    filled_quantity: float = 0.0
    avg_price: Optional[float] = None
    status: Literal["filled", "resting", "simulated"] = "filled"
    take_profit_id: Optional[str] = None
    stop_loss_id: Optional[str] = None
