"""Parallel exhaustive search over a ``SearchVolume``."""

from __future__ import annotations

import logging
import multiprocessing
import os
import queue
import threading
import time
from collections.abc import Iterator
from multiprocessing.process import BaseProcess
from typing import Any, Literal

from .models import Coordinate, Partition, SearchVolume
from .partition import SearchPartitioner
from .predicate import Predicate
from .sink import MatchSink
from .telemetry import LoggingTelemetry, Telemetry

Backend = Literal["process", "thread"]

_MATCHES = "matches"
_DONE = "done"
_FAILED = "failed"

# Cells scanned between checks of the stop flag.
STOP_CHECK_INTERVAL = 1024


class SearchError(RuntimeError):
    """Raised when a worker dies or fails before finishing its range."""


def default_worker_count() -> int:
    return os.cpu_count() or 1


def scan_partition(
    volume: SearchVolume,
    predicate: Predicate,
    partition: Partition,
    channel: Any,
    batch_size: int,
    stop: Any,
) -> None:
    """Worker body: test every cell of ``partition`` and post matches to ``channel``.

    Messages are ``(kind, partition_index, body)`` tuples; every worker ends
    with exactly one ``done`` or ``failed`` message, unless ``stop`` is set
    because the consumer has given up on the search.
    """
    matches_at = predicate.matches_at
    batch: list[tuple[int, int, int]] = []
    try:
        cells = SearchPartitioner(volume).iter_range(partition.begin, partition.end)
        for scanned, (x, y, z) in enumerate(cells, 1):
            if scanned % STOP_CHECK_INTERVAL == 0 and stop.is_set():
                return
            if matches_at(x, y, z):
                batch.append((x, y, z))
                if len(batch) >= batch_size:
                    channel.put((_MATCHES, partition.index, batch))
                    batch = []
        if batch:
            channel.put((_MATCHES, partition.index, batch))
    except Exception as exc:  # noqa: BLE001 - reported to the coordinating side.
        channel.put((_FAILED, partition.index, f"{type(exc).__name__}: {exc}"))
        return
    channel.put((_DONE, partition.index, None))


class SearchEngine:
    """Static-partition worker pool that streams matching coordinates."""

    def __init__(
        self,
        *,
        workers: int | None = None,
        backend: Backend = "process",
        batch_size: int = 64,
        start_method: str | None = None,
        poll_interval_seconds: float = 1.0,
        telemetry: Telemetry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        if backend not in ("process", "thread"):
            raise ValueError(f"Unsupported backend: {backend}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self._workers = workers or default_worker_count()
        self._backend = backend
        self._batch_size = batch_size
        self._start_method = start_method
        self._poll_interval_seconds = poll_interval_seconds
        self._logger = logger or logging.getLogger("dirt_finder.engine")
        self._telemetry = telemetry or LoggingTelemetry(self._logger)

    @property
    def workers(self) -> int:
        return self._workers

    def search(
        self,
        volume: SearchVolume,
        predicate: Predicate,
        workers: int | None = None,
    ) -> Iterator[Coordinate]:
        """Yield every coordinate of ``volume`` that satisfies ``predicate``.

        Matches from different workers arrive in no particular order. The
        generator finishes once every worker has covered its range.
        """
        worker_count = self._workers if workers is None else workers
        partitions = [p for p in SearchPartitioner(volume).partitions(worker_count) if p.size]

        channel, spawn, stop = self._transport()
        started_at = time.monotonic()
        self._telemetry.emit(
            "search_started",
            {
                "cells": volume.volume,
                "constraints": len(predicate),
                "workers": len(partitions),
                "backend": self._backend,
            },
        )

        runners: dict[int, Any] = {}
        pending = {p.index for p in partitions}
        found = 0
        try:
            for partition in partitions:
                runner = spawn(
                    target=scan_partition,
                    args=(volume, predicate, partition, channel, self._batch_size, stop),
                    name=f"dirt-finder-worker-{partition.index}",
                    daemon=True,
                )
                runner.start()
                runners[partition.index] = runner
                self._logger.debug(
                    "partition_assigned",
                    extra={"partition": partition.index, "begin": partition.begin, "end": partition.end},
                )

            suspects: set[int] = set()
            while pending:
                try:
                    kind, index, body = channel.get(timeout=self._poll_interval_seconds)
                except queue.Empty:
                    suspects = self._check_runners(runners, pending, suspects)
                    continue

                if kind == _MATCHES:
                    for x, y, z in body:
                        found += 1
                        yield Coordinate(x, y, z)
                elif kind == _DONE:
                    pending.discard(index)
                    self._logger.debug("worker_finished", extra={"partition": index})
                else:
                    raise SearchError(f"Worker {index} failed: {body}")
        finally:
            self._shutdown(runners, stop, abandon=bool(pending))

        self._telemetry.emit(
            "search_finished",
            {"matches": found, "elapsed_seconds": round(time.monotonic() - started_at, 3)},
        )

    def run(
        self,
        volume: SearchVolume,
        predicate: Predicate,
        sink: MatchSink,
        workers: int | None = None,
    ) -> int:
        """Drain ``search`` into ``sink`` and return the number of matches."""
        count = 0
        for coordinate in self.search(volume, predicate, workers=workers):
            sink.emit(coordinate)
            count += 1
        return count

    def _transport(self) -> tuple[Any, Any, Any]:
        if self._backend == "thread":
            return queue.Queue(), threading.Thread, threading.Event()
        context = multiprocessing.get_context(self._start_method)
        return context.Queue(), context.Process, context.Event()

    def _check_runners(self, runners: dict[int, Any], pending: set[int], suspects: set[int]) -> set[int]:
        # A runner must look dead on two consecutive idle polls so messages it
        # flushed just before exiting are drained first.
        dead = {index for index in pending if not runners[index].is_alive()}
        lost = dead & suspects
        if lost:
            self._logger.error("worker_lost", extra={"partitions": sorted(lost)})
            raise SearchError(f"Worker(s) {sorted(lost)} exited before finishing their range")
        return dead

    def _shutdown(self, runners: dict[int, Any], stop: Any, *, abandon: bool) -> None:
        if abandon:
            stop.set()
        for runner in runners.values():
            if abandon and isinstance(runner, BaseProcess) and runner.is_alive():
                runner.terminate()
            runner.join()
