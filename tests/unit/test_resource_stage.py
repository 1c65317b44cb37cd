"""Unit tests for StochasticResourceStage."""

import pytest

from resiliencysim.core import Event, Simulation
from resiliencysim.instrumentation import Series
from resiliencysim.stages import AdmissionQueue, Intermediary, Stage, StochasticResourceStage


class Passthrough(Stage):
    def work_on(self, request):
        yield 0.0


def unbounded_resource(context):
    z = StochasticResourceStage(context)
    z.in_queue = AdmissionQueue()
    return z


class TestDefaults:
    def test_default_parameters(self, context):
        z = StochasticResourceStage(context)
        assert z.name == "Z"
        assert z.mean == 30.0
        assert z.availability == 0.9995
        assert z.deadlock_threshold == 70
        assert z.deadlock_availability == 0.7
        assert z.in_queue.capacity == 1
        assert z.in_queue.get_num_workers() == 300

    def test_keeps_given_queue_sizes(self, context):
        z = StochasticResourceStage(context, capacity=0, workers=1)
        assert z.in_queue.capacity == 0
        assert z.in_queue.get_num_workers() == 1

    def test_keeps_empty_queue_passed_to_stage(self, context):
        queue = AdmissionQueue(capacity=2, workers=3)
        assert len(queue) == 0

        stage = Passthrough(context, in_queue=queue)

        assert stage.in_queue is queue
        assert stage.in_queue.get_num_workers() == 3

    def test_expected_latency_is_monotone_in_concurrency(self, context):
        z = StochasticResourceStage(context)
        latencies = [z.expected_latency(c) for c in range(0, 200)]
        assert latencies == sorted(latencies)
        assert latencies[-1] > latencies[0]

    def test_expected_latency_formula(self, context):
        z = StochasticResourceStage(context)
        assert z.expected_latency(0) == pytest.approx(30.06)
        assert z.expected_latency(10) == pytest.approx(30 + 0.06 * 1.06 ** 10)


class TestAvailability:
    def test_full_availability_never_fails(self, context):
        z = unbounded_resource(context)
        z.availability = 1.0
        z.deadlock_threshold = 1e6

        Simulation(context).run(z, 10_000)

        assert z.failed == 0
        assert z.served == 10_000

    def test_zero_availability_fails_first_request(self, context):
        z = unbounded_resource(context)
        z.availability = 0.0

        Simulation(context).run(z, 1)

        assert z.failed == 1
        assert z.served == 0

    def test_failure_rate_below_threshold(self, context):
        z = unbounded_resource(context)
        z.availability = 0.9
        z.deadlock_threshold = 1e6

        Simulation(context).run(z, 5000)

        assert z.failed / 5000 == pytest.approx(0.1, abs=0.02)

    def test_failure_rate_in_deadlock(self, context):
        z = unbounded_resource(context)
        z.availability = 1.0
        z.deadlock_threshold = 0

        Simulation(context).run(z, 5000)

        assert z.failed / 5000 == pytest.approx(0.3, abs=0.03)


class TestConcurrency:
    def test_concurrency_returns_to_zero(self, context):
        z = unbounded_resource(context)
        z.availability = 0.5

        Simulation(context).run(z, 2000)

        assert z.concurrent == 0
        assert z.served + z.failed == 2000
        assert z.in_queue.busy == 0

    def test_latency_clamped_at_zero(self, context):
        z = unbounded_resource(context)
        z.mean = -100
        z.latency_a = 0.0
        y = Intermediary(context, z)

        Simulation(context).run(y, 2000)

        observed = [v for v in context.stats.get_recorded(Series.MEAN_LATENCY_FROM_Z) if v is not None]
        assert observed
        assert all(v == 0.0 for v in observed)


class TestAdmission:
    def test_rejections_when_workers_and_buffer_full(self, context):
        z = StochasticResourceStage(context, capacity=0, workers=1)
        z.mean = 100
        z.availability = 1.0

        Simulation(context).run(z, 500)

        assert z.in_queue.rejected > 0
        assert z.served + z.in_queue.rejected == 500

    def test_set_workers_starts_buffered_requests(self, context):
        z = StochasticResourceStage(context, capacity=10, workers=0)
        z.availability = 1.0
        # Non-daemon, so the run waits for it even though every request is parked.
        context.heap.push(Event.once(time=500.0, event_type="resize", fn=lambda e: z.set_workers(5)))

        Simulation(context).run(z, 5)

        assert z.served == 5
        assert z.in_queue.get_num_workers() == 5


class TestSampling:
    def test_records_load_and_capacity(self, context):
        z = unbounded_resource(context)
        z.in_queue = AdmissionQueue(workers=300)

        Simulation(context).run(z, 2000)

        loads = context.stats.get_recorded(Series.LOAD_FROM_Y)
        capacities = context.stats.get_recorded(Series.Z_CAPACITY)
        assert len(loads) == len(capacities) > 0
        assert 0 < sum(loads) <= 2000
        assert set(capacities) == {300}
