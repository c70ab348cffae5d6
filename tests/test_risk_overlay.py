"""Tests for the take-profit / stop-loss overlay."""

import pytest

from perp_momentum.core.models import OrderSide
from perp_momentum.risk.overlay import compute_risk_overlay


def test_buy_bracket():
    overlay = compute_risk_overlay(OrderSide.BUY, 100.0)
    assert overlay.take_profit == pytest.approx(110.0)
    assert overlay.stop_loss == pytest.approx(95.0)


def test_sell_bracket():
    overlay = compute_risk_overlay(OrderSide.SELL, 100.0)
    assert overlay.take_profit == pytest.approx(90.0)
    assert overlay.stop_loss == pytest.approx(105.0)


def test_reward_to_risk_is_two():
    assert compute_risk_overlay(OrderSide.BUY, 37.5).reward_to_risk == pytest.approx(2.0)
    assert compute_risk_overlay(OrderSide.SELL, 37.5).reward_to_risk == pytest.approx(2.0)


def test_attachments_round_to_symbol_precision():
    overlay = compute_risk_overlay(OrderSide.BUY, 123.456)
    take_profit, stop_loss = overlay.attachments(price_precision=2)

    assert take_profit.kind == "TAKE_PROFIT_MARKET"
    assert take_profit.stop_price == 135.8
    assert stop_loss.kind == "STOP_MARKET"
    assert stop_loss.stop_price == 117.28
    assert take_profit.to_payload() == {
        "type": "TAKE_PROFIT_MARKET",
        "stopPrice": 135.8,
        "workingType": "MARK_PRICE",
        "closePosition": True,
    }
