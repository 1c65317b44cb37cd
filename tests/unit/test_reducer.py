"""Unit tests for reducing recorded series into SlimRows."""

import pytest

from resiliencysim.events import EventMetadata, Request, ResponseStatus, ResponseTime
from resiliencysim.experiment import SLIM_ROW_FIELDS, SlimRow, get_slim_rows
from resiliencysim.instrumentation import Series, StatsRecorder


def completed(start, end, ok=True, priority=None, deadline_class=None):
    request = Request(
        key="k-1",
        response_time=ResponseTime(start_time=start),
        metadata=EventMetadata(priority=priority, deadline_class=deadline_class),
    )
    request.complete(ResponseStatus.SUCCESS if ok else ResponseStatus.FAILURE, end)
    return request


def recorder(ticks, batches, **series):
    stats = StatsRecorder()
    for tick in ticks:
        stats.record(Series.TICK, tick)
    for batch in batches:
        stats.record(Series.EVENTS, batch)
    for name, values in series.items():
        for value in values:
            stats.record(name, value)
    return stats


class TestSlimRowShape:
    def test_field_order(self):
        assert SLIM_ROW_FIELDS[0] == "tick"
        assert SLIM_ROW_FIELDS[1:3] == ("load_from_x", "load_from_y")
        assert SLIM_ROW_FIELDS[-1] == "mean_response_g_slow_availability"
        assert len(SLIM_ROW_FIELDS) == 27

    def test_no_ticks_no_rows(self):
        assert get_slim_rows(StatsRecorder()) == []


class TestScalarSeries:
    def test_values_aligned_by_index(self):
        stats = recorder([1000.0, 2000.0], [[], []], load_from_x=[4, 7], z_capacity=[300, 300])
        rows = get_slim_rows(stats)
        assert [r.tick for r in rows] == [1000.0, 2000.0]
        assert [r.load_from_x for r in rows] == [4, 7]
        assert [r.z_capacity for r in rows] == [300, 300]

    def test_short_series_yields_none(self):
        stats = recorder([1000.0, 2000.0, 3000.0], [[], [], []], load_from_y=[5])
        rows = get_slim_rows(stats)
        assert [r.load_from_y for r in rows] == [5, None, None]

    def test_missing_series_yields_none(self):
        rows = get_slim_rows(recorder([1000.0], [[]]))
        assert rows[0].pool_size is None
        assert rows[0].mean_tries_per_request is None

    def test_missing_batch_treated_as_empty(self):
        rows = get_slim_rows(recorder([1000.0, 2000.0], [[completed(0, 10, priority=0)]]))
        assert rows[0].mean_response_p1_latency == 10
        assert rows[1].mean_response_p1_latency is None


class TestPartitionMeans:
    def test_priority_partitions(self):
        batch = [
            completed(0, 10, ok=True, priority=0),
            completed(0, 30, ok=False, priority=0),
            completed(5, 10, ok=True, priority=1),
        ]
        row = get_slim_rows(recorder([1000.0], [batch]))[0]

        assert row.mean_response_p1_availability == 0.5
        assert row.mean_response_p1_latency == 20
        assert row.mean_response_p2_availability == 1.0
        assert row.mean_response_p2_latency == 5
        assert row.mean_response_p3_availability is None
        assert row.mean_response_p3_latency is None

    def test_deadline_partitions(self):
        batch = [
            completed(0, 40, ok=True, deadline_class="fast"),
            completed(0, 60, ok=False, deadline_class="slow"),
            completed(0, 80, ok=False, deadline_class="slow"),
        ]
        row = get_slim_rows(recorder([1000.0], [batch]))[0]

        assert row.mean_response_g_fast_latency == 40
        assert row.mean_response_g_fast_availability == 1.0
        assert row.mean_response_g_medium_latency is None
        assert row.mean_response_g_medium_availability is None
        assert row.mean_response_g_slow_latency == 70
        assert row.mean_response_g_slow_availability == 0.0

    def test_all_successes_is_exactly_one(self):
        batch = [completed(0, t, priority=2) for t in (1.5, 2.5, 3.5, 4.5, 5.5, 6.5, 7.5)]
        row = get_slim_rows(recorder([1000.0], [batch]))[0]
        assert row.mean_response_p3_availability == 1.0
        assert row.mean_response_p3_latency == pytest.approx(4.5)

    def test_unclassified_requests_ignored(self):
        row = get_slim_rows(recorder([1000.0], [[completed(0, 10)]]))[0]
        assert row.mean_response_p1_latency is None
        assert row.mean_response_g_fast_latency is None

    def test_rows_compare_equal(self):
        batch = [completed(0, 10, priority=1)]
        assert get_slim_rows(recorder([1000.0], [batch])) == [
            SlimRow(tick=1000.0, mean_response_p2_availability=1.0, mean_response_p2_latency=10)
        ]
