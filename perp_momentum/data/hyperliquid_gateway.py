"""
Hyperliquid Gateway

MarketGateway over the Hyperliquid SDK: candles, L2 book, 24h ticker and
market entries with reduce-only TP/SL trigger orders.

Symbols of the form BASE-QUOTE map to the Hyperliquid coin BASE, except
where the venue lists the contract under another name (1000PEPE is kPEPE).
"""

import logging
import time
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import requests
from eth_account import Account
from hyperliquid.exchange import Exchange
from hyperliquid.info import Info
from hyperliquid.utils.error import Error as HyperliquidError

from perp_momentum.core.config import Config
from perp_momentum.core.errors import GatewayError
from perp_momentum.core.models import OrderSide
from perp_momentum.data.gateway import MarketGateway
from perp_momentum.data.models import (
    Candle,
    DepthSnapshot,
    TickerSnapshot,
    parse_float,
    parse_int,
    parse_levels,
)
from perp_momentum.execution.orders import ConditionalOrder, OrderResult
from perp_momentum.utils.precision import format_price, format_size

logger = logging.getLogger(__name__)

_INTERVAL_MS = {
    "1m": 60_000,
    "5m": 5 * 60_000,
    "15m": 15 * 60_000,
    "30m": 30 * 60_000,
    "1h": 60 * 60_000,
    "4h": 4 * 60 * 60_000,
    "1d": 24 * 60 * 60_000,
}

_DAY_MS = 24 * 60 * 60_000

# Thousand-unit contracts are listed with a "k" prefix
_COIN_ALIASES = {
    "1000PEPE": "kPEPE",
    "1000SHIB": "kSHIB",
    "1000BONK": "kBONK",
    "1000FLOKI": "kFLOKI",
    "1000LUNC": "kLUNC",
}


def symbol_to_coin(symbol: str) -> str:
    """'BTC-USDT' -> 'BTC', '1000PEPE-USDT' -> 'kPEPE'; bare coin names pass through."""
    base = symbol.split("-", 1)[0].upper()
    return _COIN_ALIASES.get(base, base)


def _to_ms(ts: datetime) -> int:
    return int(ts.timestamp() * 1000)


class HyperliquidGateway(MarketGateway):
    """
    Hyperliquid implementation of the market gateway.

    No retries: every SDK or transport failure surfaces as GatewayError.
    """

    def __init__(
        self,
        config: Config,
        info: Optional[Info] = None,
        exchange: Optional[Exchange] = None,
        dry_run: bool = False,
    ):
        """
        Initialize gateway.

        Args:
            config: System configuration
            info: Info client (created from config if omitted)
            exchange: Exchange client (created from the API wallet key if omitted)
            dry_run: Skip order submission and return simulated results
        """
        self.config = config
        self.dry_run = dry_run
        self.info = info or Info(config.hyperliquid.api_url, skip_ws=True)

        if exchange is None and not dry_run:
            wallet = Account.from_key(config.hyperliquid.secret_key)
            exchange = Exchange(
                wallet,
                config.hyperliquid.api_url,
                account_address=config.hyperliquid.address or None,
            )
        self.exchange = exchange
        self._sz_decimals: Dict[str, int] = {}

    # ------------------------
    # Internal helpers
    # ------------------------

    def _call(self, what: str, func: Callable, *args, **kwargs) -> Any:
        """Invoke an SDK method, mapping failures to GatewayError."""
        try:
            return func(*args, **kwargs)
        except GatewayError:
            raise
        except HyperliquidError as e:
            code = getattr(e, "status_code", None)
            message = getattr(e, "error_message", None) or getattr(e, "message", None) or str(e)
            raise GatewayError(f"{what}: {message}", code) from e
        except requests.RequestException as e:
            raise GatewayError(f"{what}: {e}") from e

    def _meta_and_ctxs(self):
        resp = self._call("metaAndAssetCtxs", self.info.meta_and_asset_ctxs)
        if isinstance(resp, list) and len(resp) >= 2:
            meta, ctxs = resp[0] or {}, resp[1] or []
        else:
            raise GatewayError("unexpected response for metaAndAssetCtxs")
        universe = meta.get("universe", [])
        for u in universe:
            if u.get("name") is not None:
                self._sz_decimals[u["name"]] = int(u.get("szDecimals", 0))
        return universe, ctxs

    def _size_decimals(self, coin: str) -> int:
        if coin not in self._sz_decimals:
            self._meta_and_ctxs()
        return self._sz_decimals.get(coin, 0)

    @staticmethod
    def _first_status(resp: Any) -> Dict:
        """Extract the first order status; raise on venue rejection."""
        if not isinstance(resp, dict) or resp.get("status") != "ok":
            detail = resp.get("response") if isinstance(resp, dict) else resp
            raise GatewayError(f"order rejected: {detail}")
        try:
            statuses = resp["response"]["data"]["statuses"]
        except (KeyError, TypeError) as e:
            raise GatewayError(f"unexpected order response: {resp}") from e
        if not statuses:
            raise GatewayError("order response carried no status")
        status = statuses[0]
        if isinstance(status, dict) and "error" in status:
            raise GatewayError(str(status["error"]))
        return status if isinstance(status, dict) else {}

    # ------------------------
    # Market data
    # ------------------------

    def get_candles(
        self,
        symbol: str,
        interval: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        if interval not in _INTERVAL_MS:
            raise GatewayError(f"unsupported interval: {interval}")
        coin = symbol_to_coin(symbol)
        interval_ms = _INTERVAL_MS[interval]

        end_ms = _to_ms(end) if end else int(time.time() * 1000)
        if start:
            start_ms = _to_ms(start)
        else:
            start_ms = end_ms - (limit or 500) * interval_ms

        resp = self._call("candleSnapshot", self.info.candles_snapshot, coin, interval, start_ms, end_ms)
        rows = resp if isinstance(resp, list) else []

        candles: List[Candle] = []
        for c in rows:
            if not isinstance(c, dict):
                continue
            open_time = parse_int("t", c.get("t"))
            close_time = c.get("T")
            candles.append(Candle(
                open_time=open_time,
                open=parse_float("o", c.get("o")),
                high=parse_float("h", c.get("h")),
                low=parse_float("l", c.get("l")),
                close=parse_float("c", c.get("c")),
                volume=parse_float("v", c.get("v", 0)),
                close_time=parse_int("T", close_time) if close_time is not None else open_time + interval_ms - 1,
            ))

        candles.sort(key=lambda k: k.open_time)
        if limit:
            candles = candles[-limit:]
        return candles

    def get_depth(self, symbol: str, limit: Optional[int] = None) -> DepthSnapshot:
        return self._book(symbol_to_coin(symbol), limit)

    def _book(self, coin: str, limit: Optional[int] = None) -> DepthSnapshot:
        resp = self._call("l2Book", self.info.l2_snapshot, coin)
        if not isinstance(resp, dict):
            raise GatewayError(f"unexpected l2Book response for {coin}")

        levels = resp.get("levels")
        if isinstance(levels, list) and len(levels) >= 2:
            bids, asks = levels[0], levels[1]
        else:
            bids, asks = resp.get("bids") or [], resp.get("asks") or []

        snapshot = DepthSnapshot(
            asks=parse_levels("asks", asks),
            bids=parse_levels("bids", bids),
            timestamp=int(resp.get("time") or 0),
        )
        if limit:
            snapshot.asks = snapshot.asks[:limit]
            snapshot.bids = snapshot.bids[:limit]
        return snapshot

    def _day_range(self, coin: str) -> tuple:
        """24h high/low from hourly candles."""
        end_ms = int(time.time() * 1000)
        resp = self._call("candleSnapshot", self.info.candles_snapshot, coin, "1h", end_ms - _DAY_MS, end_ms)
        rows = [c for c in (resp if isinstance(resp, list) else []) if isinstance(c, dict)]
        if not rows:
            raise GatewayError(f"no 24h candles for {coin}")
        high = max(parse_float("h", c.get("h")) for c in rows)
        low = min(parse_float("l", c.get("l")) for c in rows)
        return high, low

    def _top_of_book(self, coin: str, ctx: Dict, last: float) -> tuple:
        """Best bid/ask from the L2 book; impact prices, then last, fill an empty side."""
        book = self._book(coin, 1)
        bid, ask = book.best_bid, book.best_ask
        if bid is None or ask is None:
            impact = ctx.get("impactPxs") or []
            if len(impact) >= 2:
                fallback = parse_float("impactBid", impact[0]), parse_float("impactAsk", impact[1])
            else:
                fallback = last, last
            bid = fallback[0] if bid is None else bid
            ask = fallback[1] if ask is None else ask
        return bid, ask

    def _build_ticker(self, symbol: str, coin: str, ctx: Dict) -> TickerSnapshot:
        prev_day = parse_float("prevDayPx", ctx.get("prevDayPx"))
        last = parse_float("markPx", ctx.get("midPx") or ctx.get("markPx"))
        bid, ask = self._top_of_book(coin, ctx, last)
        high, low = self._day_range(coin)
        change_pct = (last - prev_day) / prev_day * 100.0 if prev_day else 0.0

        return TickerSnapshot(
            symbol=symbol,
            price_change_percent=change_pct,
            high_price=max(high, last),
            low_price=min(low, last),
            last_price=last,
            volume=parse_float("dayBaseVlm", ctx.get("dayBaseVlm", 0)),
            bid_price=bid,
            ask_price=ask,
        )

    def get_ticker(self, symbol: Optional[str] = None) -> List[TickerSnapshot]:
        universe, ctxs = self._meta_and_ctxs()
        ctx_by_coin = {u.get("name"): ctxs[i] for i, u in enumerate(universe) if i < len(ctxs)}

        if symbol is not None:
            coin = symbol_to_coin(symbol)
            ctx = ctx_by_coin.get(coin)
            if ctx is None:
                raise GatewayError(f"unknown coin {coin}")
            return [self._build_ticker(symbol, coin, ctx)]

        return [self._build_ticker(coin, coin, ctx) for coin, ctx in ctx_by_coin.items() if coin]

    def get_latest_price(self, symbol: str) -> float:
        coin = symbol_to_coin(symbol)
        mids = self._call("allMids", self.info.all_mids)
        if not isinstance(mids, dict) or coin not in mids:
            raise GatewayError(f"no price for {coin}")
        return parse_float("mid", mids[coin])

    # ------------------------
    # Orders
    # ------------------------

    def place_order(
        self,
        symbol: str,
        side: OrderSide,
        quantity: float,
        take_profit: Optional[ConditionalOrder] = None,
        stop_loss: Optional[ConditionalOrder] = None,
    ) -> OrderResult:
        coin = symbol_to_coin(symbol)
        sz_dec = self._size_decimals(coin)
        sz = float(format_size(quantity, sz_dec))
        if sz <= 0:
            raise GatewayError(f"{symbol}: quantity {quantity} rounds to zero at {sz_dec} decimals")

        if self.dry_run:
            logger.info("[HyperliquidGateway] DRY RUN %s %s %s", side.value, sz, coin)
            return OrderResult(
                order_id=f"dry-{uuid.uuid4().hex[:12]}",
                symbol=symbol,
                side=side,
                quantity=sz,
                filled_quantity=sz,
                status="simulated",
            )

        resp = self._call(
            "order", self.exchange.market_open, coin, side.is_buy, sz, None, self.config.hyperliquid.slippage
        )
        status = self._first_status(resp)

        if "filled" in status:
            filled = status["filled"]
            result = OrderResult(
                order_id=str(filled.get("oid")),
                symbol=symbol,
                side=side,
                quantity=sz,
                filled_quantity=parse_float("totalSz", filled.get("totalSz")),
                avg_price=parse_float("avgPx", filled.get("avgPx")),
                status="filled",
            )
        else:
            resting = status.get("resting", {})
            result = OrderResult(
                order_id=str(resting.get("oid")),
                symbol=symbol,
                side=side,
                quantity=sz,
                status="resting",
            )

        exit_sz = result.filled_quantity or sz
        if take_profit is not None:
            result.take_profit_id = self._place_trigger(coin, side, exit_sz, sz_dec, take_profit)
        if stop_loss is not None:
            result.stop_loss_id = self._place_trigger(coin, side, exit_sz, sz_dec, stop_loss)
        return result

    def _place_trigger(
        self,
        coin: str,
        entry_side: OrderSide,
        sz: float,
        sz_decimals: int,
        attachment: ConditionalOrder,
    ) -> Optional[str]:
        """Reduce-only trigger order closing the entry. Failures are logged, not raised."""
        px = float(format_price(attachment.stop_price, sz_decimals, 6))
        order_type = {
            "trigger": {
                "triggerPx": px,
                "isMarket": True,
                "tpsl": "tp" if attachment.is_take_profit else "sl",
            }
        }
        try:
            resp = self._call("order", self.exchange.order, coin, not entry_side.is_buy, sz, px, order_type, True)
            status = self._first_status(resp)
        except GatewayError as e:
            logger.error("[HyperliquidGateway] %s %s placement failed: %s", coin, attachment.kind, e)
            return None
        inner = status.get("resting") or status.get("filled") or {}
        oid = inner.get("oid")
        return str(oid) if oid is not None else None
