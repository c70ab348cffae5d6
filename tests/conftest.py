"""Shared fixtures: in-memory gateway and ready-made configs."""

import pytest

from perp_momentum.core.config import Config
from perp_momentum.core.errors import GatewayError
from perp_momentum.core.models import SymbolConfig
from perp_momentum.data.gateway import MarketGateway
from perp_momentum.data.models import Candle, DepthSnapshot, TickerSnapshot
from perp_momentum.execution.orders import OrderResult
from perp_momentum.trading.manager import TradingManager

FIVE_MIN_MS = 5 * 60_000


def make_candles(closes, start_ms=1_700_000_000_000, step_ms=FIVE_MIN_MS):
    """Candles oldest first with the given closes."""
    return [
        Candle(
            open_time=start_ms + i * step_ms,
            open=c,
            high=c,
            low=c,
            close=c,
            volume=1.0,
            close_time=start_ms + (i + 1) * step_ms - 1,
        )
        for i, c in enumerate(closes)
    ]


def btc_config(min_qty=1.0):
    return SymbolConfig(
        symbol="BTC-USDT",
        base_asset="BTC",
        quote_asset="USDT",
        min_qty=min_qty,
        price_precision=1,
        qty_precision=3,
        min_notional=5.0,
        leverage=20,
    )


class FakeGateway(MarketGateway):
    """Scripted gateway. Set `fail[<source>]` to make a call raise GatewayError."""

    def __init__(self):
        self.candles = {}
        self.depth = {}
        self.tickers = {}
        self.prices = {}
        self.fail = {}
        self.orders = []
        self.calls = []

    def _check(self, source, symbol):
        self.calls.append((source, symbol))
        if self.fail.get(source):
            raise GatewayError(f"{source} unavailable")

    def get_candles(self, symbol, interval, start=None, end=None, limit=None):
        self._check("candles", symbol)
        candles = list(self.candles.get(symbol, []))
        if limit:
            candles = candles[-limit:]
        # Venue returns newest first
        return list(reversed(candles))

    def get_depth(self, symbol, limit=None):
        self._check("depth", symbol)
        if symbol not in self.depth:
            raise GatewayError("no book")
        return self.depth[symbol]

    def get_ticker(self, symbol=None):
        self._check("ticker", symbol)
        if symbol is None:
            return list(self.tickers.values())
        return [self.tickers[symbol]] if symbol in self.tickers else []

    def get_latest_price(self, symbol):
        self._check("price", symbol)
        return self.prices[symbol]

    def place_order(self, symbol, side, quantity, take_profit=None, stop_loss=None):
        self._check("order", symbol)
        self.orders.append((symbol, side, quantity, take_profit, stop_loss))
        return OrderResult(
            order_id=str(len(self.orders)),
            symbol=symbol,
            side=side,
            quantity=quantity,
            filled_quantity=quantity,
            status="filled",
        )


@pytest.fixture
def config(monkeypatch):
    for var in ("HL_NETWORK", "HL_ADDRESS", "HL_SECRET_KEY"):
        monkeypatch.delenv(var, raising=False)
    cfg = Config()
    cfg.monitoring.log_to_file = False
    return cfg


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def manager(config, gateway):
    return TradingManager(config, gateway)


@pytest.fixture
def bullish_depth():
    return DepthSnapshot(asks=[(412.0, 5.0)], bids=[(411.0, 10.0)])


@pytest.fixture
def bullish_ticker():
    return TickerSnapshot(
        symbol="BTC-USDT",
        price_change_percent=1.0,
        high_price=415.0,
        low_price=410.0,
        last_price=411.6,
        volume=1000.0,
        bid_price=411.5,
        ask_price=411.7,
    )
