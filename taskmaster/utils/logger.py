"""
Logging utilities for the API.

`setup_logging` configures the root logger once at startup. Services log
domain events through `StructuredLogger`, which renders each event as a
JSON object so ids can be grepped and shipped as-is.
"""

import json
import logging
import sys
from typing import Union

from taskmaster.utils.clock import utcnow

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Install a single stdout handler on the root logger.

    Safe to call more than once; only the level is updated on later calls.

    Args:
        level: Logging level name or number
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_taskmaster", False):
            return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._taskmaster = True
    root.addHandler(console_handler)


class StructuredLogger:
    """Logger that emits one JSON document per event."""

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name, usually the module's ``__name__``
        """
        self.logger = logging.getLogger(name)

    def _build(self, level: int, message: str, **kwargs) -> str:
        log_data = {
            "timestamp": utcnow().isoformat(),
            "level": logging.getLevelName(level),
            "message": message,
            "service": self.logger.name,
        }
        log_data.update(kwargs)
        return json.dumps(log_data, default=str)

    def _log_structured(self, level: int, message: str, **kwargs):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._build(level, message, **kwargs))

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message."""
        self._log_structured(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log error message with the active exception's traceback."""
        if self.logger.isEnabledFor(logging.ERROR):
            kwargs["exception"] = True
            self.logger.exception(self._build(logging.ERROR, message, **kwargs))


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
