"""Tests for the currency registry."""

import threading

from perp_momentum.core.models import Position, PositionSide, TradingState, TradingStatus
from perp_momentum.core.registry import CurrencyRegistry

from conftest import btc_config


def test_add_creates_active_entry_without_position():
    reg = CurrencyRegistry()
    reg.add(btc_config())

    entries = reg.list_all()
    assert len(entries) == 1
    symbol, status = entries[0]
    assert symbol == "BTC-USDT"
    assert status.status.is_active
    assert status.position is None
    assert status.last_update > 0


def test_record_position_replaces():
    reg = CurrencyRegistry()
    reg.add(btc_config())

    reg.record_position("BTC-USDT", Position("BTC-USDT", PositionSide.LONG, 1.0, 100.0, leverage=20))
    reg.record_position("BTC-USDT", Position("BTC-USDT", PositionSide.SHORT, 1.0, 105.0, leverage=20))

    pos = reg.get("BTC-USDT").position
    assert pos.side is PositionSide.SHORT
    assert pos.entry_price == 105.0

    assert reg.clear_position("BTC-USDT")
    assert reg.get("BTC-USDT").position is None


def test_readers_get_copies():
    reg = CurrencyRegistry()
    reg.add(btc_config())

    snapshot = reg.get("BTC-USDT")
    snapshot.status = TradingStatus.suspended()
    assert reg.get("BTC-USDT").status.is_active


def test_set_status_and_active_symbols():
    reg = CurrencyRegistry()
    reg.add(btc_config())

    assert reg.set_status("BTC-USDT", TradingStatus.error("rejected"))
    status = reg.get("BTC-USDT").status
    assert status.state is TradingState.ERROR
    assert str(status) == "Error(rejected)"
    assert reg.active_symbols() == []

    assert reg.set_status("BTC-USDT", TradingStatus.active())
    assert reg.active_symbols() == ["BTC-USDT"]


def test_unknown_symbol_operations():
    reg = CurrencyRegistry()
    assert reg.get("NOPE") is None
    assert not reg.set_status("NOPE", TradingStatus.suspended())
    assert not reg.record_position("NOPE", Position("NOPE", PositionSide.LONG, 1.0, 1.0))
    assert not reg.remove("NOPE")


def test_re_adding_resets_state():
    reg = CurrencyRegistry()
    reg.add(btc_config())
    reg.set_status("BTC-USDT", TradingStatus.suspended())
    reg.record_position("BTC-USDT", Position("BTC-USDT", PositionSide.LONG, 1.0, 100.0))

    reg.add(btc_config(min_qty=2.0))
    status = reg.get("BTC-USDT")
    assert len(reg) == 1
    assert status.status.is_active
    assert status.position is None
    assert status.config.min_qty == 2.0


def test_concurrent_writers():
    reg = CurrencyRegistry()
    reg.add(btc_config())

    def worker(i):
        for _ in range(200):
            reg.set_status("BTC-USDT", TradingStatus.suspended() if i % 2 else TradingStatus.active())
            reg.list_all()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(reg.list_all()) == 1
