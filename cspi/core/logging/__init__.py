"""Logging utilities for monitoring and debugging."""

from cspi.core.logging.config import LogConfig
from cspi.core.logging.logger import (
    configure_logging,
    configure_logging_from_settings,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "configure_logging",
    "configure_logging_from_settings",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
]
