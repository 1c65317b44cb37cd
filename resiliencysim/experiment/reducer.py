"""Reduce recorded series into one row per sampled tick.

Series are aligned by index: the i-th value of every scalar series and the
i-th batch of completed requests belong to the i-th recorded tick. A series
shorter than ``tick`` (for example a metric only some models record) yields
``None`` for the missing ticks rather than failing.

Class-partitioned means are ``None`` when the partition is empty, so a tick
without data stays distinguishable from a tick whose mean is truly zero.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, fields
from typing import Any, TypeVar

from resiliencysim.events import Request
from resiliencysim.instrumentation import Series, StatsRecorder

T = TypeVar("T")


@dataclass(frozen=True)
class SlimRow:
    """One reduced record per sampled tick."""

    tick: float
    load_from_x: float | None = None
    load_from_y: float | None = None
    mean_latency_from_y: float | None = None
    mean_latency_from_z: float | None = None
    mean_availability_from_y: float | None = None
    mean_availability_from_z: float | None = None
    z_capacity: float | None = None
    pool_size: float | None = None
    pool_usage: float | None = None
    mean_queue_wait_time: float | None = None
    queue_size: float | None = None
    enqueue_count: float | None = None
    queue_reject_count: float | None = None
    mean_tries_per_request: float | None = None

    mean_response_p1_availability: float | None = None
    mean_response_p2_availability: float | None = None
    mean_response_p3_availability: float | None = None
    mean_response_p1_latency: float | None = None
    mean_response_p2_latency: float | None = None
    mean_response_p3_latency: float | None = None
    mean_response_g_fast_latency: float | None = None
    mean_response_g_medium_latency: float | None = None
    mean_response_g_slow_latency: float | None = None
    mean_response_g_fast_availability: float | None = None
    mean_response_g_medium_availability: float | None = None
    mean_response_g_slow_availability: float | None = None


SLIM_ROW_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(SlimRow))

SCALAR_SERIES: tuple[str, ...] = (
    Series.LOAD_FROM_X,
    Series.LOAD_FROM_Y,
    Series.MEAN_LATENCY_FROM_Y,
    Series.MEAN_LATENCY_FROM_Z,
    Series.MEAN_AVAILABILITY_FROM_Y,
    Series.MEAN_AVAILABILITY_FROM_Z,
    Series.Z_CAPACITY,
    Series.POOL_SIZE,
    Series.POOL_USAGE,
    Series.MEAN_QUEUE_WAIT_TIME,
    Series.QUEUE_SIZE,
    Series.ENQUEUE_COUNT,
    Series.QUEUE_REJECT_COUNT,
    Series.MEAN_TRIES_PER_REQUEST,
)


def optional_item(series: Sequence[T], index: int, default: T | None = None) -> T | None:
    """``series[index]``, or ``default`` when the series is too short."""
    if index >= len(series):
        return default
    return series[index]


def mean(values: Iterable[float]) -> float | None:
    """Arithmetic mean, or None for no values."""
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def mean_availability(requests: Iterable[Request]) -> float | None:
    return mean(1.0 if r.succeeded else 0.0 for r in requests)


def mean_latency(requests: Iterable[Request]) -> float | None:
    return mean(r.response_time.end_time - r.response_time.start_time for r in requests)


def _partition_means(batch: list[Request]) -> dict[str, Any]:
    by_priority = {p: [r for r in batch if r.metadata.priority == p] for p in (0, 1, 2)}
    by_deadline = {
        name: [r for r in batch if r.metadata.deadline_class == name]
        for name in ("fast", "medium", "slow")
    }

    values: dict[str, Any] = {}
    for p, requests in by_priority.items():
        values[f"mean_response_p{p + 1}_availability"] = mean_availability(requests)
        values[f"mean_response_p{p + 1}_latency"] = mean_latency(requests)
    for name, requests in by_deadline.items():
        values[f"mean_response_g_{name}_latency"] = mean_latency(requests)
        values[f"mean_response_g_{name}_availability"] = mean_availability(requests)
    return values


def get_slim_rows(stats: StatsRecorder) -> list[SlimRow]:
    """Turn a trial's recorded series into rows, one per recorded tick.

    Args:
        stats: The trial's recorder.

    Returns:
        Rows in tick order.
    """
    ticks = stats.get_recorded(Series.TICK)
    events: list[list[Request]] = stats.get_recorded(Series.EVENTS)
    scalars = {name: stats.get_recorded(name) for name in SCALAR_SERIES}

    rows = []
    for index, tick in enumerate(ticks):
        batch = optional_item(events, index, [])
        values = {name: optional_item(series, index) for name, series in scalars.items()}
        values.update(_partition_means(batch))
        rows.append(SlimRow(tick=tick, **values))
    return rows
