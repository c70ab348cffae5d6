"""
Configuration management for the momentum trading engine.

Supports loading from YAML/dicts and environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from typing import Literal

from perp_momentum.core.errors import ConfigError
from perp_momentum.core.models import SymbolConfig


# Preset symbols registered at startup unless the config lists its own.
DEFAULT_SYMBOLS: list[dict] = [
    {"symbol": "BTC-USDT", "base_asset": "BTC", "quote_asset": "USDT", "min_qty": 1.0,
     "price_precision": 1, "qty_precision": 3, "min_notional": 5.0, "leverage": 20},
    {"symbol": "ETH-USDT", "base_asset": "ETH", "quote_asset": "USDT", "min_qty": 30.0,
     "price_precision": 2, "qty_precision": 3, "min_notional": 5.0, "leverage": 20},
    {"symbol": "SOL-USDT", "base_asset": "SOL", "quote_asset": "USDT", "min_qty": 410.0,
     "price_precision": 3, "qty_precision": 1, "min_notional": 5.0, "leverage": 20},
    {"symbol": "XRP-USDT", "base_asset": "XRP", "quote_asset": "USDT", "min_qty": 10000.0,
     "price_precision": 4, "qty_precision": 1, "min_notional": 5.0, "leverage": 20},
    {"symbol": "BNB-USDT", "base_asset": "BNB", "quote_asset": "USDT", "min_qty": 16.0,
     "price_precision": 4, "qty_precision": 1, "min_notional": 5.0, "leverage": 20},
    {"symbol": "1000PEPE-USDT", "base_asset": "1000PEPE", "quote_asset": "USDT", "min_qty": 980000.0,
     "price_precision": 4, "qty_precision": 1, "min_notional": 5.0, "leverage": 20},
    {"symbol": "SUI-USDT", "base_asset": "SUI", "quote_asset": "USDT", "min_qty": 5800.0,
     "price_precision": 4, "qty_precision": 1, "min_notional": 5.0, "leverage": 20},
    {"symbol": "ARB-USDT", "base_asset": "ARB", "quote_asset": "USDT", "min_qty": 38000.0,
     "price_precision": 4, "qty_precision": 1, "min_notional": 5.0, "leverage": 20},
]


@dataclass
class IndicatorConfig:
    """MACD periods (bars)."""

    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9


@dataclass
class SignalConfig:
    """Momentum trigger and confirmation thresholds."""

    acceleration_pct: float = 3.0  # Histogram change vs previous bar, percent
    cross_tolerance: float = 0.001  # Relative distance counted as "at the cross"
    min_strength: float = 0.0001  # Minimum |histogram delta|

    # Order book
    depth_band: float = 0.01  # Only levels within ±1% of the reference price
    depth_ratio: float = 1.2  # One side must exceed the other by 20%

    # 24h ticker (all percentages)
    change_threshold_pct: float = 0.2
    low_position_pct: float = 20.0
    high_position_pct: float = 80.0
    volatility_pct: float = 2.0
    volatile_long_max_pct: float = 40.0
    volatile_short_min_pct: float = 60.0
    max_spread_pct: float = 0.1

    # Advance the debounce state after an emitted signal. Off by default:
    # repeated signals in the same direction are not suppressed.
    advance_debounce: bool = False


@dataclass
class RiskConfig:
    """Take-profit / stop-loss distances as fractions of entry price (1:2)."""

    take_profit_pct: float = 0.10
    stop_loss_pct: float = 0.05


@dataclass
class MonitorConfig:
    """Polling loop parameters."""

    interval_sec: float = 60.0
    candle_interval: Literal["1m", "5m", "15m", "1h", "4h", "1d"] = "5m"
    candle_lookback_minutes: int = 120
    candle_limit: int = 24
    depth_limit: int = 20


@dataclass
class MonitoringConfig:
    """Logging."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True


@dataclass
class HyperliquidConfig:
    """Hyperliquid-specific settings."""

    network: Literal["testnet", "mainnet"] = "testnet"
    address: str = ""  # Main wallet address (from env)
    secret_key: str = ""  # API wallet private key (from env)
    slippage: float = 0.05  # Max slippage for market entries

    # API endpoint (auto-set by network)
    api_url: str = ""

    def __post_init__(self):
        """Set API URL based on network."""
        from hyperliquid.utils import constants

        if self.network == "testnet":
            self.api_url = constants.TESTNET_API_URL
        else:
            self.api_url = constants.MAINNET_API_URL


@dataclass
class Config:
    """
    Complete system configuration.

    Environment variables (override config file):
    - HL_NETWORK: "testnet" or "mainnet"
    - HL_ADDRESS: Main wallet address
    - HL_SECRET_KEY: API wallet private key
    """

    indicator: IndicatorConfig = field(default_factory=IndicatorConfig)
    signal: SignalConfig = field(default_factory=SignalConfig)
    risk: RiskConfig = field(default_factory=RiskConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    hyperliquid: HyperliquidConfig = field(default_factory=HyperliquidConfig)
    symbols: list[dict] = field(default_factory=lambda: [dict(s) for s in DEFAULT_SYMBOLS])

    def __post_init__(self):
        """Load environment variable overrides."""
        if os.getenv("HL_NETWORK"):
            self.hyperliquid.network = os.getenv("HL_NETWORK", "testnet")

        if os.getenv("HL_ADDRESS"):
            self.hyperliquid.address = os.getenv("HL_ADDRESS", "")

        if os.getenv("HL_SECRET_KEY"):
            self.hyperliquid.secret_key = os.getenv("HL_SECRET_KEY", "")

        # Re-initialize to set API URL
        self.hyperliquid.__post_init__()

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top-level YAML must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        from dataclasses import is_dataclass, fields

        def build(dc_type, data):
            if not is_dataclass(dc_type):
                return data
            kwargs = {}
            for f in fields(dc_type):
                if f.name in data:
                    val = data[f.name]
                    if hasattr(f.type, "__dataclass_fields__"):
                        kwargs[f.name] = build(f.type, val)
                    else:
                        kwargs[f.name] = val
            return dc_type(**kwargs)

        return build(cls, data)

    def symbol_configs(self) -> list[SymbolConfig]:
        """Parse the `symbols` section. Raises ConfigError on bad entries."""
        return [SymbolConfig.from_dict(entry) for entry in self.symbols]

    def validate(self, require_credentials: bool = True) -> list[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if require_credentials:
            if not self.hyperliquid.address:
                errors.append("HL_ADDRESS environment variable required")
            if not self.hyperliquid.secret_key:
                errors.append("HL_SECRET_KEY environment variable required")

        ind = self.indicator
        if not (0 < ind.fast_period < ind.slow_period):
            errors.append("indicator.fast_period must be > 0 and < slow_period")
        if ind.signal_period < 1:
            errors.append("indicator.signal_period must be >= 1")

        if self.monitor.interval_sec <= 0:
            errors.append("monitor.interval_sec must be > 0")
        if self.monitor.candle_limit < 1:
            errors.append("monitor.candle_limit must be >= 1")

        if not (0 < self.risk.stop_loss_pct < 1):
            errors.append("risk.stop_loss_pct must be in (0, 1)")
        if not (0 < self.risk.take_profit_pct < 1):
            errors.append("risk.take_profit_pct must be in (0, 1)")

        seen = set()
        for entry in self.symbols:
            try:
                sc = SymbolConfig.from_dict(entry)
            except ConfigError as e:
                errors.append(f"symbols: {e}")
                continue
            if sc.symbol in seen:
                errors.append(f"symbols: duplicate symbol {sc.symbol}")
            seen.add(sc.symbol)

        return errors

