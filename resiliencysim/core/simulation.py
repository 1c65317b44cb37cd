"""The simulation loop and the request source that feeds it.

Simulation.run() emits a fixed number of requests into a pipeline's entry
stage and processes events in tick order until nothing but daemon events
(samplers, deferred configuration changes) remains.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from resiliencysim.core.entity import Entity
from resiliencysim.core.event import Event
from resiliencysim.core.sim_future import SimFuture
from resiliencysim.errors import SimulationAbort, StageFailure
from resiliencysim.events import Request, ResponseStatus, ResponseTime
from resiliencysim.instrumentation import Series

if TYPE_CHECKING:
    from collections.abc import Generator

    from resiliencysim.core.context import SimulationContext

logger = logging.getLogger(__name__)


class RequestSource(Entity):
    """Generates requests with exponential inter-arrival gaps.

    The rate is read from the context's ArrivalProcess on every arrival, so
    a deferred change to ``events_per_1000_ticks`` takes effect immediately.

    Args:
        driver: Entity that carries each request through the pipeline.
        limit: Number of requests to generate.
    """

    def __init__(self, driver: Entity, limit: int, name: str = "Source"):
        super().__init__(name)
        self._driver = driver
        self._limit = limit
        self.generated = 0

    def next_arrival(self) -> Event | None:
        """Schedule the next arrival, or None when the source is exhausted."""
        if self.generated >= self._limit:
            return None
        rate = self.context.arrivals.rate_per_tick
        if rate <= 0:
            logger.warning("[%s] Arrival rate is %s; no further arrivals", self.name, rate)
            return None
        gap = self.context.rng.exponential(rate)
        return Event(time=self.now + gap, event_type="arrival", target=self)

    def handle_event(self, event: Event) -> list[Event]:
        self.generated += 1
        request = Request(key=self._next_key(), response_time=ResponseTime(start_time=self.now))
        events = [Event(time=self.now, event_type="dispatch", target=self._driver, context={"request": request})]
        following = self.next_arrival()
        if following is not None:
            events.append(following)
        return events

    def _next_key(self) -> str:
        arrivals = self.context.arrivals
        value = self.context.rng.normal(arrivals.keyspace_mean, arrivals.keyspace_std)
        return f"k-{round(value)}"


class RequestDriver(Entity):
    """Carries each request through the entry stage and records its outcome.

    Completed requests (success or failure) are batched and recorded under
    ``events`` together with the sample ``tick`` on every sample interval.
    """

    def __init__(self, entry: Entity, name: str = "Driver"):
        super().__init__(name)
        self._entry = entry
        self._batch: list[Request] = []
        self.completed = 0

    def handle_event(self, event: Event) -> Generator:
        request: Request = event.context["request"]
        reply = SimFuture()
        yield 0.0, [
            Event(
                time=self.now,
                event_type="request",
                target=self._entry,
                context={"request": request, "reply": reply},
            )
        ]
        try:
            yield reply
        except StageFailure:
            request.complete(ResponseStatus.FAILURE, self.now)
        else:
            request.complete(ResponseStatus.SUCCESS, self.now)
        self._batch.append(request)
        self.completed += 1

    def sample(self) -> None:
        stats = self.context.stats
        stats.record(Series.TICK, self.now)
        stats.record(Series.EVENTS, self._batch)
        self._batch = []


class Simulation:
    """Drives one trial's event loop.

    Args:
        context: The trial's SimulationContext.
        end_tick: Optional hard horizon; events past it are not processed.
    """

    def __init__(self, context: SimulationContext, end_tick: float | None = None):
        self._context = context
        self._end_tick = end_tick
        self.events_processed = 0

    def run(self, entry: Entity, arrivals: int) -> int:
        """Send ``arrivals`` requests into ``entry`` and run to completion.

        Returns:
            The number of events processed.

        Raises:
            SimulationAbort: If any event handler raises.
        """
        ctx = self._context
        driver = RequestDriver(entry)
        source = RequestSource(driver, arrivals)
        driver.attach(ctx)
        source.attach(ctx)

        ctx.set_interval(driver.sample, ctx.sample_duration)
        first = source.next_arrival()
        if first is not None:
            ctx.heap.push(first)

        logger.info("Simulation starting: %d arrivals at %.3f events/tick", arrivals, ctx.arrivals.rate_per_tick)

        pacing = ctx.pacing
        while ctx.heap.has_primary_events():
            event = ctx.heap.pop()
            if event.cancelled:
                continue
            if self._end_tick is not None and event.time > self._end_tick:
                logger.info("Simulation reached end tick %s", self._end_tick)
                break

            ctx.clock.update(event.time)
            try:
                new_events = event.invoke()
            except Exception as exc:
                raise SimulationAbort(f"{event!r} raised {exc!r} at tick {event.time}") from exc
            ctx.heap.push(new_events)

            self.events_processed += 1
            if pacing.enabled and self.events_processed % pacing.every == 0:
                time.sleep(pacing.sleep_ms / 1000.0)

        logger.info(
            "Simulation finished at tick %.1f: %d events processed, %d/%d requests completed",
            ctx.clock.now,
            self.events_processed,
            driver.completed,
            source.generated,
        )
        return self.events_processed
