"""Contract for runtime telemetry and structured logging sinks."""

from __future__ import annotations

import logging
from typing import Protocol

from rich.console import Console
from rich.logging import RichHandler


class Telemetry(Protocol):
    """Reports operational events of a search run."""

    def emit(self, event_name: str, payload: dict) -> None:
        """Publish telemetry event to the configured sink."""


class LoggingTelemetry:
    """Telemetry sink that forwards events to a standard logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger("dirt_finder.telemetry")
        self._level = level

    def emit(self, event_name: str, payload: dict) -> None:
        self._logger.log(self._level, event_name, extra=payload)


def configure_logging(level: str | int = "WARNING") -> None:
    """Send ``dirt_finder`` logs to stderr; stdout is reserved for matches."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    root = logging.getLogger("dirt_finder")
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
