"""Stages that forward requests downstream.

Client (X) is the pipeline entry, Intermediary (Y) sits between the client
and the model, and PerRequestTimeout gives up on a downstream call once the
request's timeout budget has elapsed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from resiliencysim.core.event import Event
from resiliencysim.core.sim_future import SimFuture, any_of
from resiliencysim.errors import StageFailure
from resiliencysim.instrumentation import Series, WindowMean
from resiliencysim.stages.stage import REQUEST, Stage

if TYPE_CHECKING:
    from collections.abc import Generator

    from resiliencysim.core.context import SimulationContext
    from resiliencysim.events import Request

logger = logging.getLogger(__name__)


class Intermediary(Stage):
    """Forwards every request and records what it observes downstream.

    Each sample records the mean latency and the mean availability of the
    downstream calls completed since the previous sample (``None`` when
    there were none).
    """

    latency_series = Series.MEAN_LATENCY_FROM_Z
    availability_series = Series.MEAN_AVAILABILITY_FROM_Z

    def __init__(self, context: SimulationContext, wrapped: Stage, name: str = "Y"):
        super().__init__(context, wrapped=wrapped, name=name)
        self._latency = WindowMean()
        self._availability = WindowMean()
        context.set_interval(self._sample, context.sample_duration)

    def work_on(self, request: Request) -> Generator:
        started = self.now
        try:
            yield from self.call(self.wrapped, request)
        except StageFailure:
            self._observe(started, succeeded=False)
            raise
        self._observe(started, succeeded=True)

    def _observe(self, started: float, succeeded: bool) -> None:
        self._latency.add(self.now - started)
        self._availability.add(1.0 if succeeded else 0.0)

    def _sample(self) -> None:
        stats = self.context.stats
        stats.record(self.latency_series, self._latency.take())
        stats.record(self.availability_series, self._availability.take())


class Client(Intermediary):
    """Pipeline entry. Counts arrivals and observes the intermediary."""

    latency_series = Series.MEAN_LATENCY_FROM_Y
    availability_series = Series.MEAN_AVAILABILITY_FROM_Y

    def __init__(self, context: SimulationContext, wrapped: Stage, name: str = "X"):
        super().__init__(context, wrapped=wrapped, name=name)
        self.load = 0

    def admit(self, event: Event) -> Generator | None:
        self.load += 1
        return super().admit(event)

    def _sample(self) -> None:
        super()._sample()
        self.context.stats.record(Series.LOAD_FROM_X, self.load)
        self.load = 0


class PerRequestTimeout(Stage):
    """Fails a request whose downstream reply takes longer than its budget.

    The budget is the request's ``metadata.timeout_budget`` when set (and
    ``use_request_budget`` is on), else ``timeout``. The downstream work is
    not interrupted: it keeps its worker and concurrency slot until its own
    wait elapses.

    Args:
        context: The trial's SimulationContext.
        wrapped: Downstream stage.
        timeout: Default budget in ticks.
        use_request_budget: Honour per-request budgets set by the entry hook.
    """

    def __init__(
        self,
        context: SimulationContext,
        wrapped: Stage,
        timeout: float = 300.0,
        use_request_budget: bool = True,
        name: str = "PerRequestTimeout",
    ):
        super().__init__(context, wrapped=wrapped, name=name)
        self.timeout = timeout
        self.use_request_budget = use_request_budget
        self.timeouts = 0

    def work_on(self, request: Request) -> Generator:
        budget = request.metadata.timeout_budget if self.use_request_budget else None
        if budget is None:
            budget = self.timeout

        reply = SimFuture()
        timer = SimFuture()
        timer_event = Event.once(
            time=self.now + budget,
            event_type="per_request_timeout",
            fn=lambda _e: timer.resolve(),
        )
        yield 0.0, [
            Event(
                time=self.now,
                event_type=REQUEST,
                target=self.wrapped,
                context={"request": request, "reply": reply},
            ),
            timer_event,
        ]

        try:
            index, _ = yield any_of(reply, timer)
        finally:
            timer_event.cancel()

        if index == 1:
            self.timeouts += 1
            raise StageFailure(self.name, f"timed out after {budget}")
