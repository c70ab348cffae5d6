"""
Main entry point for the perpetuals momentum trading engine.

Orchestrates all components: Scheduler → Gateway → Indicator → Signals → Risk → Orders.
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from perp_momentum.core.config import Config
from perp_momentum.core.errors import ConfigError
from perp_momentum.data.hyperliquid_gateway import HyperliquidGateway
from perp_momentum.monitoring.logging_setup import configure_logging
from perp_momentum.trading.manager import TradingManager

logger = logging.getLogger("perp_momentum")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="perp-momentum")
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Run without placing any orders")
    parser.add_argument("--once", action="store_true", help="Run a single monitoring cycle and exit")
    parser.add_argument("--status", action="store_true", help="Print symbol status and exit")
    parser.add_argument(
        "--symbols",
        type=str,
        default="",
        help="Comma-separated subset of configured symbols, e.g. BTC-USDT,ETH-USDT",
    )
    return parser


def select_symbols(config: Config, wanted: str):
    """Configured symbols, optionally restricted to a comma-separated list."""
    configs = config.symbol_configs()
    if not wanted:
        return configs
    names = {s.strip() for s in wanted.split(",") if s.strip()}
    unknown = names - {c.symbol for c in configs}
    if unknown:
        raise ConfigError(f"unknown symbols: {', '.join(sorted(unknown))}")
    return [c for c in configs if c.symbol in names]


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    # Load .env if present (before Config) to populate HL_* variables
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    try:
        config = Config.from_yaml(args.config) if args.config else Config()
    except (OSError, ConfigError) as e:
        print(f"[ERROR] Cannot load config: {e}", file=sys.stderr)
        return 1

    configure_logging(config.monitoring)

    errors = config.validate(require_credentials=not args.dry_run)
    if errors:
        logger.error("[Init] Configuration validation failed:")
        for err in errors:
            logger.error("  - %s", err)
        return 1

    try:
        symbols = select_symbols(config, args.symbols)
    except ConfigError as e:
        logger.error("[Init] %s", e)
        return 1

    logger.info("[Init] Starting %s trading engine%s", config.hyperliquid.network, " (dry run)" if args.dry_run else "")
    gateway = HyperliquidGateway(config, dry_run=args.dry_run)
    manager = TradingManager(config, gateway)
    manager.add_symbols(symbols)
    logger.info("[Init] Registered %d symbols", len(symbols))

    if args.status:
        print(manager.format_status_report())
        return 0

    if args.once:
        reports = manager.run_cycle()
        for report in reports:
            logger.info(
                "[Main] %s: signal=%s new_candles=%d%s",
                report.symbol, report.signal.value, report.new_candles,
                f" skipped ({report.reason})" if report.skipped else "",
            )
        return 0

    try:
        manager.run_monitor_loop()
    except KeyboardInterrupt:
        logger.info("[Main] Shutdown signal received")
        manager.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
