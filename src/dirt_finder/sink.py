"""Output sinks for matched coordinates."""

from __future__ import annotations

import sys
import threading
from typing import Protocol, TextIO

from .models import Coordinate


def format_match(coordinate: Coordinate) -> str:
    return f"[{coordinate.x}, {coordinate.y}, {coordinate.z}]"


class MatchSink(Protocol):
    """Receives matches from concurrent emitters."""

    def emit(self, coordinate: Coordinate) -> None:
        """Record one match; must be safe to call from several threads."""


class StreamMatchSink:
    """Writes one ``[x, y, z]`` line per match under a lock."""

    def __init__(self, stream: TextIO | None = None, *, flush: bool = True) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._flush = flush
        self._lock = threading.Lock()
        self.count = 0

    def emit(self, coordinate: Coordinate) -> None:
        line = format_match(coordinate) + "\n"
        with self._lock:
            self._stream.write(line)
            if self._flush:
                self._stream.flush()
            self.count += 1


class CollectingMatchSink:
    """Keeps matches in memory, in arrival order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.matches: list[Coordinate] = []

    def emit(self, coordinate: Coordinate) -> None:
        with self._lock:
            self.matches.append(coordinate)
