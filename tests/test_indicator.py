"""Tests for the MACD indicator and the seeded EMA."""

import math

import pytest

from perp_momentum.core.config import IndicatorConfig
from perp_momentum.indicators.macd import MomentumIndicator
from perp_momentum.utils.math_helpers import ieee_div, seeded_ema


def test_seeded_ema_needs_full_period():
    assert seeded_ema([1.0, 2.0, 3.0], 5) is None
    assert seeded_ema([], 1) is None


def test_seeded_ema_starts_from_oldest_value():
    # alpha = 0.5: 1 -> 1.5 -> 2.25
    assert seeded_ema([1.0, 2.0, 3.0], 3) == pytest.approx(2.25)
    assert seeded_ema([10.0] * 5, 3) == pytest.approx(10.0)


def test_ieee_div_never_raises():
    assert ieee_div(1.0, 0.0) == math.inf
    assert math.isnan(ieee_div(0.0, 0.0))
    assert ieee_div(3.0, 2.0) == 1.5


def test_no_point_before_slow_period():
    ind = MomentumIndicator()
    for i in range(25):
        assert ind.add_price("BTC-USDT", 100.0 + i) is None
    assert ind.history("BTC-USDT") == []
    assert ind.latest("BTC-USDT") is None

    assert ind.add_price("BTC-USDT", 125.0) is not None
    assert len(ind.history("BTC-USDT")) == 1


def test_window_and_history_are_bounded():
    ind = MomentumIndicator(IndicatorConfig(fast_period=12, slow_period=26, signal_period=9))
    for i in range(200):
        ind.add_price("ETH-USDT", 1000.0 + math.sin(i / 5.0) * 20)

    assert len(ind.prices("ETH-USDT")) == 52
    assert len(ind.history("ETH-USDT")) == 18
    # Oldest entries were evicted
    assert ind.prices("ETH-USDT")[-1] == pytest.approx(1000.0 + math.sin(199 / 5.0) * 20)


def test_momentum_uses_ema_seeded_at_window_start():
    ind = MomentumIndicator()
    prices = [100.0 + (i % 7) for i in range(40)]
    point = ind.add_prices("BTC-USDT", prices)

    window = ind.prices("BTC-USDT")
    expected = seeded_ema(window, 12) - seeded_ema(window, 26)
    assert point.momentum == pytest.approx(expected)
    assert point.histogram == pytest.approx(point.momentum - point.signal)


def test_signal_line_is_zero_until_enough_momentum_history():
    ind = MomentumIndicator()
    prices = [100.0 + i for i in range(26 + 8)]
    ind.add_prices("BTC-USDT", prices)

    history = ind.history("BTC-USDT")
    assert len(history) == 9
    assert all(p.signal == 0.0 for p in history[:8])
    assert history[8].signal != 0.0


def test_flat_prices_give_zero_momentum():
    ind = MomentumIndicator()
    point = ind.add_prices("BTC-USDT", [50.0] * 30)
    assert point.momentum == pytest.approx(0.0)
    assert point.histogram == pytest.approx(0.0)


def test_direction_sanity():
    up, down = MomentumIndicator(), MomentumIndicator()
    n = 26 + 18
    for i in range(n):
        up.add_price("X", 100.0 + i)
        down.add_price("X", 100.0 + n - i)

    up_count = sum(1 for p in up.history("X") if p.momentum >= 0)
    down_count = sum(1 for p in down.history("X") if p.momentum >= 0)
    assert up_count > down_count


def test_symbols_are_independent_and_reset():
    ind = MomentumIndicator()
    ind.add_prices("A", [1.0 + i for i in range(30)])
    ind.add_prices("B", [1.0] * 3)

    assert len(ind.history("A")) == 5
    assert ind.prices("B") == [1.0, 1.0, 1.0]

    ind.reset("A")
    assert ind.history("A") == []
    assert ind.prices("A") == []

    ind.remove("B")
    assert ind.prices("B") == []
