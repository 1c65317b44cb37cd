"""Backend resource whose latency and availability degrade with load.

StochasticResourceStage models the last stage of the pipeline, for example
a database. Its mean latency grows exponentially with the number of requests
it is working on concurrently, and once that number reaches
``deadlock_threshold`` its availability drops from ``availability`` to
``deadlock_availability``. The result is a cliff rather than a gentle slope,
which is what load-shedding and backpressure policies have to react to.

Example::

    z = StochasticResourceStage(context)
    z.availability = 0.99
    z.mean = 50
    model = create_naive_model(z)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from resiliencysim.errors import StageFailure
from resiliencysim.instrumentation import Series
from resiliencysim.stages.queue import AdmissionQueue
from resiliencysim.stages.stage import Stage

if TYPE_CHECKING:
    from collections.abc import Generator

    from resiliencysim.core.context import SimulationContext
    from resiliencysim.core.event import Event
    from resiliencysim.events import Request

logger = logging.getLogger(__name__)


class StochasticResourceStage(Stage):
    """Bounded-concurrency resource with load-dependent latency.

    Latency for one request, with ``c`` the concurrency including itself::

        mean = mean_offset + latency_a * latency_b ** c
        std  = std_offset + mean / std_divisor
        latency ~ Normal(mean, std), clamped at 0

    After the wait the request fails with probability ``1 - availability``,
    or ``1 - deadlock_availability`` when ``c >= deadlock_threshold``.

    Args:
        context: The trial's SimulationContext.
        name: Identifier for logging. Defaults to ``"Z"``.
        capacity: Admission buffer size.
        workers: Worker pool size.

    Attributes:
        load: Admissions since the last sample.
        concurrent: Requests currently being worked on.
        mean: Base latency offset in ticks.
        latency_a: Scale of the concurrency-driven latency term.
        latency_b: Growth base of the concurrency-driven latency term.
        std_offset: Base standard deviation.
        std_divisor: Divides the mean to widen the spread as latency grows.
        availability: Success probability below the deadlock threshold.
        deadlock_threshold: Concurrency at which the deadlock regime starts.
        deadlock_availability: Success probability in the deadlock regime.
    """

    def __init__(
        self,
        context: SimulationContext,
        name: str = "Z",
        capacity: float = 1,
        workers: float = 300,
    ):
        super().__init__(context, name=name, in_queue=AdmissionQueue(capacity, workers))
        self.load = 0
        self.concurrent = 0

        self.mean = 30.0
        self.latency_a = 0.06
        self.latency_b = 1.06
        self.std_offset = 5.0
        self.std_divisor = 500.0

        self.availability = 0.9995
        self.deadlock_threshold = 70
        self.deadlock_availability = 0.7

        self.served = 0
        self.failed = 0

        context.set_interval(self._sample, context.sample_duration)

    def admit(self, event: Event) -> Generator | None:
        self.load += 1
        return super().admit(event)

    def expected_latency(self, concurrency: int) -> float:
        """Mean latency at the given concurrency."""
        return self.mean + self.latency_a * self.latency_b ** concurrency

    def in_deadlock(self) -> bool:
        return self.concurrent >= self.deadlock_threshold

    def work_on(self, request: Request) -> Generator:
        self.concurrent += 1
        try:
            mean = self.expected_latency(self.concurrent)
            std = self.std_offset + mean / self.std_divisor
            latency = max(self.context.rng.normal(mean, std), 0.0)

            yield latency

            available = self.deadlock_availability if self.in_deadlock() else self.availability
            if self.context.rng.random() >= available:
                self.failed += 1
                raise StageFailure(self.name, "unavailable")
            self.served += 1
        finally:
            self.concurrent -= 1

    def _sample(self) -> None:
        stats = self.context.stats
        stats.record(Series.LOAD_FROM_Y, self.load)
        stats.record(Series.Z_CAPACITY, self.in_queue.get_num_workers() or 0)
        self.load = 0
