"""
Risk Overlay

Fixed take-profit / stop-loss bounds around the entry price.
Default 10% target, 5% stop (risk:reward 1:2).
"""

from dataclasses import dataclass
from typing import Tuple

from perp_momentum.core.models import OrderSide
from perp_momentum.execution.orders import ConditionalOrder
from perp_momentum.utils.precision import round_price


@dataclass(frozen=True)
class RiskOverlay:
    side: OrderSide
    entry_price: float
    take_profit: float
    stop_loss: float

    @property
    def reward_to_risk(self) -> float:
        risk = abs(self.entry_price - self.stop_loss)
        if risk == 0:
            return 0.0
        return abs(self.take_profit - self.entry_price) / risk

    def attachments(self, price_precision: int) -> Tuple[ConditionalOrder, ConditionalOrder]:
        """Take-profit and stop-loss orders, prices rounded to the symbol's precision."""
        take_profit = ConditionalOrder(
            kind="TAKE_PROFIT_MARKET",
            stop_price=round_price(self.take_profit, price_precision),
        )
        stop_loss = ConditionalOrder(
            kind="STOP_MARKET",
            stop_price=round_price(self.stop_loss, price_precision),
        )
        return take_profit, stop_loss


def compute_risk_overlay(
    side: OrderSide,
    entry_price: float,
    take_profit_pct: float = 0.10,
    stop_loss_pct: float = 0.05,
) -> RiskOverlay:
    """
    Map (side, entry price) to TP/SL prices.

    Buy:  TP = p × (1 + tp), SL = p × (1 - sl)
    Sell: TP = p × (1 - tp), SL = p × (1 + sl)
    """
    if side is OrderSide.BUY:
        take_profit = entry_price * (1.0 + take_profit_pct)
        stop_loss = entry_price * (1.0 - stop_loss_pct)
    else:
        take_profit = entry_price * (1.0 - take_profit_pct)
        stop_loss = entry_price * (1.0 + stop_loss_pct)
    return RiskOverlay(side=side, entry_price=entry_price, take_profit=take_profit, stop_loss=stop_loss)
