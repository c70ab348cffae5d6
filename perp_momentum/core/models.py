"""
Symbol configuration, trading status and position records.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from perp_momentum.core.errors import ConfigError


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @property
    def is_buy(self) -> bool:
        return self is OrderSide.BUY


class PositionSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"

    @classmethod
    def from_order_side(cls, side: OrderSide) -> "PositionSide":
        return cls.LONG if side is OrderSide.BUY else cls.SHORT


class TradingState(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    ERROR = "Error"


@dataclass(frozen=True)
class TradingStatus:
    """Lifecycle state of a symbol. `reason` is only set for ERROR."""

    state: TradingState = TradingState.ACTIVE
    reason: Optional[str] = None

    @classmethod
    def active(cls) -> "TradingStatus":
        return cls(TradingState.ACTIVE)

    @classmethod
    def suspended(cls) -> "TradingStatus":
        return cls(TradingState.SUSPENDED)

    @classmethod
    def error(cls, reason: str) -> "TradingStatus":
        return cls(TradingState.ERROR, reason)

    @property
    def is_active(self) -> bool:
        return self.state is TradingState.ACTIVE

    def __str__(self) -> str:
        if self.state is TradingState.ERROR:
            return f"Error({self.reason})"
        return self.state.value


_ENTRY_FIELDS = (
    "symbol",
    "base_asset",
    "quote_asset",
    "min_qty",
    "price_precision",
    "qty_precision",
    "min_notional",
    "leverage",
)


@dataclass(frozen=True)
class SymbolConfig:
    """
    Static trading parameters for one symbol.

    Replaced wholesale by re-adding the symbol; never mutated in place.
    """

    symbol: str
    base_asset: str
    quote_asset: str
    min_qty: float  # Order quantity used for every entry
    price_precision: int
    qty_precision: int
    min_notional: float
    leverage: int

    def __post_init__(self):
        if not self.symbol or not self.symbol.strip():
            raise ConfigError("symbol must not be empty")
        if not self.base_asset or not self.quote_asset:
            raise ConfigError(f"{self.symbol}: base and quote assets are required")
        if not self.min_qty > 0:
            raise ConfigError(f"{self.symbol}: min_qty must be > 0, got {self.min_qty}")
        if self.price_precision < 0 or self.qty_precision < 0:
            raise ConfigError(f"{self.symbol}: precisions must be >= 0")
        if self.min_notional < 0:
            raise ConfigError(f"{self.symbol}: min_notional must be >= 0")
        if self.leverage < 1:
            raise ConfigError(f"{self.symbol}: leverage must be >= 1, got {self.leverage}")

    @classmethod
    def from_dict(cls, data: dict) -> "SymbolConfig":
        """Build from a mapping with the dataclass field names."""
        missing = [name for name in _ENTRY_FIELDS if name not in data]
        if missing:
            raise ConfigError(f"symbol config missing fields: {', '.join(missing)}")
        try:
            return cls(
                symbol=str(data["symbol"]).strip(),
                base_asset=str(data["base_asset"]).strip(),
                quote_asset=str(data["quote_asset"]).strip(),
                min_qty=float(data["min_qty"]),
                price_precision=int(data["price_precision"]),
                qty_precision=int(data["qty_precision"]),
                min_notional=float(data["min_notional"]),
                leverage=int(data["leverage"]),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"invalid symbol config {data!r}: {e}") from e

    @classmethod
    def from_entry(cls, text: str) -> "SymbolConfig":
        """
        Parse a manual entry of the form
        ``symbol,base,quote,min_qty,price_precision,qty_precision,min_notional,leverage``.

        Example: ``BTC-USDT,BTC,USDT,0.001,1,3,5.0,20``
        """
        parts = [p.strip() for p in text.strip().split(",")]
        if len(parts) != len(_ENTRY_FIELDS):
            raise ConfigError(
                f"expected {len(_ENTRY_FIELDS)} comma-separated fields, got {len(parts)}"
            )
        return cls.from_dict(dict(zip(_ENTRY_FIELDS, parts)))


@dataclass
class Position:
    symbol: str
    side: PositionSide
    quantity: float
    entry_price: float
    unrealized_pnl_pct: float = 0.0
    leverage: int = 1


@dataclass
class SymbolStatus:
    """Live state of one tracked symbol, owned by the registry."""

    config: SymbolConfig
    status: TradingStatus = field(default_factory=TradingStatus.active)
    last_update: int = 0  # epoch ms
    position: Optional[Position] = None
