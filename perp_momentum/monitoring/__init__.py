"""Monitoring: logging configuration."""

from perp_momentum.monitoring.logging_setup import configure_logging

__all__ = ["configure_logging"]
