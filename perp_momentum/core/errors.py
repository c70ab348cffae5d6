"""
Error taxonomy for the trading engine.

Gateway failures are recoverable and only degrade one symbol's data for
one cycle. Config and trading errors are raised to the caller without
touching any state.
"""

from typing import Optional


class TradingError(Exception):
    """Base class for all engine errors."""


class GatewayError(TradingError):
    """Transport failure or venue-reported error from the market gateway."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (code={self.code})"
        return self.message


class MarketDataParseError(GatewayError):
    """Venue returned a non-numeric value for a numeric field."""

    def __init__(self, field: str, value: object):
        super().__init__(f"cannot parse {field}={value!r} as a number")
        self.field = field
        self.value = value


class ConfigError(TradingError, ValueError):
    """Malformed symbol entry or configuration value."""


class TradingBlocked(TradingError):
    """Order attempted on a symbol that is not Active."""

    def __init__(self, symbol: str, status: object):
        super().__init__(f"{symbol} is not tradable (status={status})")
        self.symbol = symbol
        self.status = status


class SymbolNotFound(TradingError, KeyError):
    """Symbol is not registered."""

    def __init__(self, symbol: str):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self) -> str:
        return f"no configuration for symbol {self.symbol}"
