"""Logging configuration for the Home Assistant flow bridge.

Provides console logging with appropriate levels for plugin code
vs third-party libraries.
"""

import logging
import sys
from typing import Literal

from ha_flow_bridge.settings import get_settings

APP_LOGGER = "ha_flow_bridge"

# List of noisy third-party loggers to suppress
NOISY_LOGGERS = [
    "asyncio",
]


def suppress_noisy_loggers() -> None:
    """Suppress noisy third-party loggers."""
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
) -> None:
    """Configure plugin logging.

    Sets up logging with:
    - Plugin logs at configured level
    - Third-party library logs suppressed to WARNING+
    - Clean console output format

    Args:
        level: Override log level (defaults to settings.log_level or INFO)
    """
    log_level = level or getattr(get_settings(), "log_level", "INFO")

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(getattr(logging, log_level))

    # Replace only our own handler so the host's logging stays untouched
    for handler in list(app_logger.handlers):
        if getattr(handler, "_ha_flow_bridge", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, log_level))
    console_handler.setFormatter(
        logging.Formatter(
            "%(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    console_handler._ha_flow_bridge = True  # type: ignore[attr-defined]
    app_logger.addHandler(console_handler)

    suppress_noisy_loggers()

