"""Time-series recording for simulation metrics.

StatsRecorder keeps one list per metric name. Samplers registered on the
SimulationContext append one value per sample interval, so series recorded
at the same cadence line up by index.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

logger = logging.getLogger(__name__)


class StatsRecorder:
    """Metric name -> list of recorded values (one per sample tick)."""

    def __init__(self) -> None:
        self._series: dict[str, list[Any]] = defaultdict(list)

    def record(self, name: str, value: Any) -> None:
        """Append ``value`` to the series called ``name``."""
        self._series[name].append(value)

    def get_recorded(self, name: str) -> list[Any]:
        """The series recorded under ``name``; empty if never recorded."""
        return list(self._series.get(name, ()))


class WindowMean:
    """Accumulates observations between two samples.

    ``take()`` returns the mean of the window (``None`` when empty) and
    starts a new window.
    """

    __slots__ = ("_count", "_total")

    def __init__(self) -> None:
        self._total = 0.0
        self._count = 0

    def add(self, value: float) -> None:
        self._total += value
        self._count += 1

    def take(self) -> float | None:
        mean = self._total / self._count if self._count else None
        self._total = 0.0
        self._count = 0
        return mean


class Series:
    """Names of the series the pipeline records."""

    TICK = "tick"
    EVENTS = "events"
    LOAD_FROM_X = "load_from_x"
    LOAD_FROM_Y = "load_from_y"
    MEAN_LATENCY_FROM_Y = "mean_latency_from_y"
    MEAN_LATENCY_FROM_Z = "mean_latency_from_z"
    MEAN_AVAILABILITY_FROM_Y = "mean_availability_from_y"
    MEAN_AVAILABILITY_FROM_Z = "mean_availability_from_z"
    Z_CAPACITY = "z_capacity"
    POOL_SIZE = "pool_size"
    POOL_USAGE = "pool_usage"
    MEAN_QUEUE_WAIT_TIME = "mean_queue_wait_time"
    QUEUE_SIZE = "queue_size"
    ENQUEUE_COUNT = "enqueue_count"
    QUEUE_REJECT_COUNT = "queue_reject_count"
    MEAN_TRIES_PER_REQUEST = "mean_tries_per_request"
