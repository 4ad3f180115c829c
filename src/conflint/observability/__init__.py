"""Logging setup for the CLI and collaborators."""

from conflint.observability.logging import (
    LoggingConfig,
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = ["LoggingConfig", "get_logger", "setup_logging", "shutdown_logging"]
