"""Logging utilities for hulud-guard."""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Loggers created through get_logger, so verbosity can be changed in one place
_LOGGER_NAMES = set()
_level = logging.INFO

LOG_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "critical": "red bold",
    "debug": "dim",
})


class HuludGuardLogger:
    """Logger with rich formatting that writes to stderr.

    Logs go to stderr so that JSON results on stdout stay machine readable.
    """

    def __init__(self, name: str, level: Optional[int] = None) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(_level if level is None else level)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Setup rich console handler with custom theme."""
        console = Console(theme=LOG_THEME, stderr=True)

        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )

        formatter = logging.Formatter(
            fmt="%(name)s: %(message)s",
            datefmt="[%X]"
        )
        handler.setFormatter(formatter)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)


def setup_logging(verbose: bool = False, level: Optional[int] = None) -> None:
    """Set the level of every hulud-guard logger.

    Args:
        verbose: Enable debug logging
        level: Explicit logging level, overrides ``verbose``
    """
    global _level

    if level is None:
        level = logging.DEBUG if verbose else logging.INFO

    _level = level
    for name in _LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> HuludGuardLogger:
    """Get a hulud-guard logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    _LOGGER_NAMES.add(name)
    return HuludGuardLogger(name)
