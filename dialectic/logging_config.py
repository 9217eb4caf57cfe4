"""
Logging configuration utilities.

Usage:
    from dialectic.config import load_config
    from dialectic.logging_config import configure_from_config

    configure_from_config(load_config())
"""

import os
from typing import Optional

from .config import DialecticConfig, parse_bool
from .logger import configure_logger, get_logger


def configure_from_config(config: DialecticConfig) -> None:
    """Configure the global logger from a loaded DialecticConfig."""
    configure_logger(
        enabled=config.log_enabled,
        level=config.log_level,
        log_directory=config.log_directory,
        log_sensitive_data=config.log_sensitive_data,
        console_output=config.log_console,
    )


def configure_from_environment() -> None:
    """Configure logger from environment variables only.

    Environment variables:
        DIALECTIC_LOG_ENABLED: '0', '1', 'true', 'false'
        DIALECTIC_LOG_LEVEL: 'ERROR', 'WARN', 'INFO', 'DEBUG', 'TRACE'
        DIALECTIC_LOG_DIRECTORY: Path to log directory
        DIALECTIC_LOG_SENSITIVE: '0' to redact thought text from logs
        DIALECTIC_LOG_CONSOLE: echo entries to stderr
        DIALECTIC_RUN_ID: Run ID for correlation
    """
    configure_logger(
        enabled=parse_bool(os.environ.get("DIALECTIC_LOG_ENABLED"), True),
        level=os.environ.get("DIALECTIC_LOG_LEVEL", "INFO"),
        log_directory=os.environ.get("DIALECTIC_LOG_DIRECTORY"),
        log_sensitive_data=parse_bool(os.environ.get("DIALECTIC_LOG_SENSITIVE"), True),
        console_output=parse_bool(os.environ.get("DIALECTIC_LOG_CONSOLE"), False),
        run_id=os.environ.get("DIALECTIC_RUN_ID"),
    )


def set_run_id(run_id: Optional[str]) -> None:
    """Set run ID for cross-process correlation."""
    if run_id:
        get_logger().run_id = run_id


__all__ = [
    "configure_from_config",
    "configure_from_environment",
    "set_run_id",
]
