"""Tests for momentum classification and the gated buy/sell decisions."""

import math

from perp_momentum.data.models import DepthSnapshot
from perp_momentum.indicators.macd import MomentumIndicator, MomentumPoint
from perp_momentum.signals.engine import Signal, SignalGenerator


class StubIndicator:
    """Serves a fixed momentum history."""

    def __init__(self, points):
        self.points = list(points)

    def history(self, symbol):
        return list(self.points)


def pts(histograms, momentum=None, signal=0.0):
    """Points with the given histograms; momentum defaults to histogram + signal."""
    return [
        MomentumPoint(
            momentum=(h + signal) if momentum is None else momentum,
            signal=signal,
            histogram=h,
        )
        for h in histograms
    ]


def generator(points):
    return SignalGenerator(StubIndicator(points))


def test_accelerating_rise_is_buy():
    gen = generator([])
    assert gen.check_momentum(pts([1.0, 2.0, 3.5])) is Signal.BUY


def test_accelerating_fall_is_sell():
    gen = generator([])
    assert gen.check_momentum(pts([-1.0, -2.0, -3.5])) is Signal.SELL


def test_decelerating_rise_is_hold():
    gen = generator([])
    assert gen.check_momentum(pts([1.0, 2.0, 2.5])) is Signal.HOLD


def test_small_relative_change_is_hold():
    gen = generator([])
    # 1.5 / 101 is under 3%
    assert gen.check_momentum(pts([100.0, 101.0, 102.5])) is Signal.HOLD


def test_short_history():
    gen = generator([])
    assert gen.check_momentum(pts([1.0])) is None
    assert gen.check_momentum(pts([1.0, 2.0])) is Signal.HOLD
    assert gen.momentum_strength(pts([1.0])) is None
    assert gen.momentum_strength(pts([1.0, 2.5])) == 1.5


def test_buy_requires_momentum_at_or_near_signal_line():
    gen = generator([])
    near = pts([1.0, 2.0, 3.5], momentum=9.995, signal=10.0)
    below = pts([1.0, 2.0, 3.5], momentum=9.0, signal=10.0)
    assert gen.check_momentum(near) is Signal.BUY
    assert gen.check_momentum(below) is Signal.HOLD


def test_sell_requires_momentum_at_or_near_signal_line():
    gen = generator([])
    above = pts([-1.0, -2.0, -3.5], momentum=11.0, signal=10.0)
    assert gen.check_momentum(above) is Signal.HOLD


def test_zero_previous_histogram_does_not_raise():
    gen = generator([])
    # Change percent against a zero bar is infinite
    assert gen.check_momentum(pts([-1.0, 0.0, 2.0])) is Signal.BUY
    trend = gen.check_momentum_trend(pts([-1.0, 0.0, 2.0]))
    assert trend[0] is True and math.isinf(trend[1])


def test_should_buy_without_market_context():
    gen = generator(pts([1.0, 2.0, 3.5]))
    assert gen.should_buy("BTC-USDT", 100.0) is True
    assert gen.should_sell("BTC-USDT", 100.0) is False


def test_should_buy_requires_minimum_strength():
    gen = generator(pts([0.00001, 0.00003, 0.00008]))
    assert gen.check_momentum(gen.indicator.history("X")) is Signal.BUY
    assert gen.should_buy("X", 100.0) is False


def test_depth_must_confirm():
    gen = generator(pts([1.0, 2.0, 3.5]))
    sell_wall = DepthSnapshot(asks=[(100.2, 50.0)], bids=[(99.8, 1.0)])
    buy_wall = DepthSnapshot(asks=[(100.2, 1.0)], bids=[(99.8, 50.0)])
    assert gen.should_buy("X", 100.0, depth=sell_wall) is False
    assert gen.should_buy("X", 100.0, depth=buy_wall) is True


def test_debounce_is_not_advanced_by_default():
    gen = generator(pts([1.0, 2.0, 3.5]))
    assert gen.should_buy("X", 100.0)
    assert gen.should_buy("X", 100.0)
    assert gen.last_signal("X") is None


def test_record_emitted_suppresses_repeat():
    gen = generator(pts([1.0, 2.0, 3.5]))
    gen.record_emitted("X", Signal.BUY)
    assert gen.should_buy("X", 100.0) is False
    # Other symbols are unaffected
    assert gen.should_buy("Y", 100.0) is True

    gen.reset("X")
    assert gen.should_buy("X", 100.0) is True


def test_buy_and_sell_never_both_true():
    indicator = MomentumIndicator()
    gen = SignalGenerator(indicator)
    series = (
        [100.0 * 1.03 ** i for i in range(40)]
        + [100.0 * 1.03 ** 40 * 0.97 ** i for i in range(40)]
        + [100.0 + 10.0 * math.sin(i / 3.0) for i in range(60)]
    )
    for price in series:
        indicator.add_price("X", price)
        assert not (gen.should_buy("X", price) and gen.should_sell("X", price))
