"""Logging and metrics for Crux."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .logging import configure_logging
from .metrics import METRICS, increment, observe, set_enabled

if TYPE_CHECKING:
    from crux.config.config import MonitoringConfig

__all__ = ["configure_logging", "configure_observability", "METRICS", "increment", "observe", "set_enabled"]


def configure_observability(config: MonitoringConfig) -> None:
    """Apply a MonitoringConfig: logging setup plus the metrics switch."""
    configure_logging(config)
    set_enabled(config.metrics_enabled)
