"""
Trading Manager

Orchestrates the monitoring loop: Registry → Gateway → Indicator → Signals
→ Risk Overlay → Gateway → Registry.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from perp_momentum.core.config import Config
from perp_momentum.core.errors import GatewayError, SymbolNotFound, TradingBlocked
from perp_momentum.core.models import (
    OrderSide,
    Position,
    PositionSide,
    SymbolConfig,
    SymbolStatus,
    TradingStatus,
)
from perp_momentum.core.registry import CurrencyRegistry
from perp_momentum.core.scheduler import Scheduler
from perp_momentum.data.gateway import MarketGateway
from perp_momentum.data.models import Candle, DepthSnapshot, TickerSnapshot
from perp_momentum.indicators.macd import MomentumIndicator
from perp_momentum.risk.overlay import compute_risk_overlay
from perp_momentum.signals.confirmation import describe_ticker
from perp_momentum.signals.engine import Signal, SignalGenerator

logger = logging.getLogger(__name__)


def _to_ms(ts: datetime) -> int:
    return int(ts.timestamp() * 1000)


@dataclass
class CycleReport:
    """Outcome of one monitoring cycle for one symbol."""

    symbol: str
    skipped: bool = False
    reason: Optional[str] = None
    new_candles: int = 0
    last_close: Optional[float] = None
    signal: Signal = Signal.HOLD
    position: Optional[Position] = None
    errors: List[str] = field(default_factory=list)


class TradingManager:
    """
    Main orchestrator for the trading engine.

    Owns the registry, indicator and signal generator; all venue access goes
    through the gateway. One symbol's failures never abort a cycle.
    """

    def __init__(self, config: Config, gateway: MarketGateway, stop_event: Optional[threading.Event] = None):
        """
        Initialize trading manager.

        Args:
            config: System configuration
            gateway: Market data & execution gateway
            stop_event: Cancellation signal (created if not given)
        """
        self.config = config
        self.gateway = gateway
        self.stop_event = stop_event or threading.Event()

        self.registry = CurrencyRegistry()
        self.indicator = MomentumIndicator(config.indicator)
        self.signals = SignalGenerator(self.indicator, config.signal)

        # Open time of the newest candle fed to the indicator, per symbol
        self._last_candle_time: Dict[str, int] = {}
        # Serializes cycles against operator commands touching the indicator
        self._cycle_lock = threading.RLock()

        self.scheduler = Scheduler(config.monitor.interval_sec, self.run_cycle, self.stop_event)

    # ------------------------
    # Symbol management
    # ------------------------

    def add_symbol(self, config: SymbolConfig) -> SymbolStatus:
        """Register (or replace) a symbol and reset its indicator state."""
        with self._cycle_lock:
            status = self.registry.add(config)
            self.indicator.reset(config.symbol)
            self.signals.reset(config.symbol)
            self._last_candle_time.pop(config.symbol, None)
        return status

    def add_symbols(self, configs: Iterable[SymbolConfig]) -> int:
        count = 0
        for config in configs:
            self.add_symbol(config)
            count += 1
        return count

    def remove_symbol(self, symbol: str) -> bool:
        with self._cycle_lock:
            removed = self.registry.remove(symbol)
            self.indicator.remove(symbol)
            self.signals.reset(symbol)
            self._last_candle_time.pop(symbol, None)
        return removed

    def get_status(self, symbol: str) -> Optional[SymbolStatus]:
        return self.registry.get(symbol)

    def list_statuses(self) -> List[Tuple[str, SymbolStatus]]:
        return self.registry.list_all()

    def set_status(self, symbol: str, status: TradingStatus) -> bool:
        return self.registry.set_status(symbol, status)

    # ------------------------
    # Orders
    # ------------------------

    def place_order(self, symbol: str, side: OrderSide, reference_price: float) -> Position:
        """
        Open a position of the symbol's minimum quantity with TP/SL attached.

        Any stored position is replaced, not netted.

        Raises:
            SymbolNotFound: symbol not registered
            TradingBlocked: symbol is not Active (no gateway call made)
            GatewayError: venue rejected or transport failed
        """
        status = self.registry.get(symbol)
        if status is None:
            raise SymbolNotFound(symbol)
        if not status.status.is_active:
            raise TradingBlocked(symbol, status.status)

        cfg = status.config
        overlay = compute_risk_overlay(
            side,
            reference_price,
            take_profit_pct=self.config.risk.take_profit_pct,
            stop_loss_pct=self.config.risk.stop_loss_pct,
        )
        take_profit, stop_loss = overlay.attachments(cfg.price_precision)

        notional = cfg.min_qty * reference_price
        if notional < cfg.min_notional:
            logger.warning(
                "[TradingManager] %s notional %.4f below minimum %.4f",
                symbol, notional, cfg.min_notional,
            )

        result = self.gateway.place_order(symbol, side, cfg.min_qty, take_profit, stop_loss)

        position = Position(
            symbol=symbol,
            side=PositionSide.from_order_side(side),
            quantity=result.filled_quantity or result.quantity,
            entry_price=reference_price,
            unrealized_pnl_pct=0.0,
            leverage=cfg.leverage,
        )
        self.registry.record_position(symbol, position)

        logger.info(
            "[TradingManager] Opened %s %s: order=%s qty=%s entry=%s TP=%.*f SL=%.*f",
            symbol, side.value, result.order_id, position.quantity, reference_price,
            cfg.price_precision, take_profit.stop_price, cfg.price_precision, stop_loss.stop_price,
        )
        logger.info(
            "[TradingManager] Risk: max loss %.2f%%, target %.2f%%, reward:risk %.1f",
            self.config.risk.stop_loss_pct * 100, self.config.risk.take_profit_pct * 100,
            overlay.reward_to_risk,
        )
        return position

    def place_manual_order(self, symbol: str, side: OrderSide) -> Position:
        """Operator-initiated order at the current venue price."""
        if symbol not in self.registry:
            raise SymbolNotFound(symbol)
        price = self.gateway.get_latest_price(symbol)
        logger.info("[TradingManager] %s current price %s", symbol, price)
        return self.place_order(symbol, side, price)

    # ------------------------
    # Monitoring loop
    # ------------------------

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    def run_cycle(self) -> List[CycleReport]:
        """Evaluate every Active symbol once."""
        reports: List[CycleReport] = []
        if self.cancelled:
            return reports

        with self._cycle_lock:
            symbols = self.registry.active_symbols()
            logger.info("[TradingManager] Cycle start: %d active symbols", len(symbols))

            for symbol in symbols:
                if self.cancelled:
                    logger.info("[TradingManager] Cancelled mid-cycle")
                    break
                try:
                    reports.append(self._process_symbol(symbol))
                except Exception as e:
                    logger.exception("[TradingManager] %s - unexpected error", symbol)
                    reports.append(CycleReport(symbol=symbol, skipped=True, reason="error", errors=[str(e)]))

        return reports

    def _process_symbol(self, symbol: str) -> CycleReport:
        report = CycleReport(symbol=symbol)
        mon = self.config.monitor

        depth = self._fetch_depth(symbol, report)
        ticker = self._fetch_ticker(symbol, report)

        if self.cancelled:
            report.skipped, report.reason = True, "cancelled"
            return report

        end = datetime.now(timezone.utc)
        start = end - timedelta(minutes=mon.candle_lookback_minutes)
        try:
            candles = self.gateway.get_candles(symbol, mon.candle_interval, start, end, mon.candle_limit)
        except GatewayError as e:
            logger.warning("[TradingManager] %s - candle fetch failed: %s", symbol, e)
            report.errors.append(f"candles: {e}")
            report.skipped, report.reason = True, "candles unavailable"
            return report

        if not candles:
            report.skipped, report.reason = True, "no candles"
            return report

        new_candles = self._feed_new_candles(symbol, candles, _to_ms(end))
        report.new_candles = len(new_candles)
        if not new_candles:
            logger.debug("[TradingManager] %s - no new closed candles", symbol)
            report.skipped, report.reason = True, "no new candles"
            return report

        latest = new_candles[-1]
        report.last_close = latest.close

        self._log_market_conditions(symbol, latest.close, ticker)

        price = latest.close
        if self.signals.should_buy(symbol, price, depth, ticker):
            report.signal = Signal.BUY
        elif self.signals.should_sell(symbol, price, depth, ticker):
            report.signal = Signal.SELL
        else:
            return report

        side = OrderSide.BUY if report.signal is Signal.BUY else OrderSide.SELL
        logger.info("[TradingManager] %s - %s signal at %s", symbol, report.signal.value, price)

        if self.config.signal.advance_debounce:
            self.signals.record_emitted(symbol, report.signal)

        if self.cancelled:
            report.reason = "cancelled"
            return report

        try:
            report.position = self.place_order(symbol, side, price)
        except (GatewayError, TradingBlocked, SymbolNotFound) as e:
            logger.warning("[TradingManager] %s - order failed: %s", symbol, e)
            report.errors.append(f"order: {e}")

        return report

    def _fetch_depth(self, symbol: str, report: CycleReport) -> Optional[DepthSnapshot]:
        if self.cancelled:
            return None
        try:
            return self.gateway.get_depth(symbol, self.config.monitor.depth_limit)
        except GatewayError as e:
            logger.warning("[TradingManager] %s - depth fetch failed: %s", symbol, e)
            report.errors.append(f"depth: {e}")
            return None

    def _fetch_ticker(self, symbol: str, report: CycleReport) -> Optional[TickerSnapshot]:
        if self.cancelled:
            return None
        try:
            tickers = self.gateway.get_ticker(symbol)
        except GatewayError as e:
            logger.warning("[TradingManager] %s - ticker fetch failed: %s", symbol, e)
            report.errors.append(f"ticker: {e}")
            return None
        return tickers[0] if tickers else None

    def _feed_new_candles(self, symbol: str, candles: List[Candle], now_ms: int) -> List[Candle]:
        """
        Feed closes of finished candles newer than the last one fed, oldest first.

        A candle still forming at `now_ms` is held back until a later cycle
        sees it closed, so only final closes reach the indicator.
        """
        last_seen = self._last_candle_time.get(symbol)
        ordered = sorted(candles, key=lambda c: c.open_time)
        fresh = [
            c for c in ordered
            if c.close_time < now_ms and (last_seen is None or c.open_time > last_seen)
        ]
        for candle in fresh:
            self.indicator.add_price(symbol, candle.close)
        if fresh:
            self._last_candle_time[symbol] = fresh[-1].open_time
        return fresh

    def _log_market_conditions(self, symbol: str, price: float, ticker: Optional[TickerSnapshot]):
        if ticker is None:
            logger.info("[TradingManager] %s - last=%.4f", symbol, price)
            return
        volatility, position, _ = describe_ticker(ticker)
        logger.info(
            "[TradingManager] %s - last=%.4f 24h=%.2f%% volatility=%.2f%% range_position=%.1f%%",
            symbol, price, ticker.price_change_percent, volatility, position,
        )

    def run_monitor_loop(self):
        """Run cycles every `monitor.interval_sec` until `stop()` (blocks)."""
        logger.info("[TradingManager] Monitoring %d symbols", len(self.registry))
        self.scheduler.run_forever()

    def stop(self):
        self.scheduler.stop()

    # ------------------------
    # Reporting
    # ------------------------

    def format_status_report(self) -> str:
        statuses = self.list_statuses()
        if not statuses:
            return "No symbols configured"

        lines: List[str] = []
        for symbol, st in statuses:
            cfg = st.config
            updated = datetime.fromtimestamp(st.last_update / 1000, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
            lines.append(f"{symbol}: {st.status} (updated {updated} UTC)")
            lines.append(
                f"  min_qty={cfg.min_qty} price_precision={cfg.price_precision} "
                f"qty_precision={cfg.qty_precision} min_notional={cfg.min_notional} leverage={cfg.leverage}x"
            )
            pos = st.position
            if pos is None:
                lines.append("  no position")
            else:
                lines.append(
                    f"  position: {pos.side.value} {pos.quantity} @ {pos.entry_price} "
                    f"pnl={pos.unrealized_pnl_pct:.2f}% leverage={pos.leverage}x"
                )
        return "\n".join(lines)
