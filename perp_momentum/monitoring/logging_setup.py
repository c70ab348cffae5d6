"""Logging setup: console plus optional rotating file under log_dir."""

import logging
import logging.handlers
from pathlib import Path

from perp_momentum.core.config import MonitoringConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "perp_momentum.log"


def configure_logging(config: MonitoringConfig) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        config: Monitoring section of the system config
    """
    level = getattr(logging, str(config.log_level).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # pytest's capture handlers are not console handlers
    console_handlers = [
        h
        for h in root.handlers
        if isinstance(h, logging.StreamHandler)
        and not isinstance(h, logging.FileHandler)
        and type(h).__name__ not in {"LogCaptureHandler", "_LiveLoggingNullHandler"}
    ]
    if not console_handlers:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)
    for handler in console_handlers:
        handler.setLevel(level)

    if config.log_to_file:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = (log_dir / LOG_FILE).resolve()

        existing_targets = {
            getattr(handler, "baseFilename", None)
            for handler in root.handlers
            if hasattr(handler, "baseFilename")
        }
        if str(log_path) not in existing_targets:
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    # SDK and HTTP client chatter
    logging.getLogger("urllib3").setLevel(logging.WARNING)
