"""Per-trial simulation state.

A SimulationContext bundles everything one trial mutates: the clock, the
pending-event heap, the stats recorder, the random source and the arrival
process. The experiment runner builds a fresh context for every trial, so
trials never share state and can run side by side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from resiliencysim.core.clock import Clock
from resiliencysim.core.event import Event
from resiliencysim.core.event_heap import EventHeap
from resiliencysim.instrumentation import StatsRecorder
from resiliencysim.random_source import RandomSource

logger = logging.getLogger(__name__)

Callback = Callable[[], "list[Event] | Event | None"]
"""Scheduled callback; returned events are scheduled at the firing tick."""


@dataclass
class ArrivalProcess:
    """Arrival-rate and keyspace knobs for the request source.

    Attributes:
        events_per_1000_ticks: Mean arrival rate. May be changed mid-run.
        keyspace_mean: Mean of the normal distribution keys are drawn from.
        keyspace_std: Standard deviation of that distribution.
    """

    events_per_1000_ticks: float = 400.0
    keyspace_mean: float = 10_000.0
    keyspace_std: float = 500.0

    @property
    def rate_per_tick(self) -> float:
        return self.events_per_1000_ticks / 1000.0


@dataclass
class Pacing:
    """Real wall-clock pause inserted every ``every`` processed events.

    Disabled by default. It throttles very long chains of events without
    changing simulated time.
    """

    sleep_ms: float = 0.0
    every: int = 0

    @property
    def enabled(self) -> bool:
        return self.sleep_ms > 0 and self.every > 0


@dataclass
class SimulationContext:
    """Everything one trial owns. Build a new one per trial."""

    rng: RandomSource = field(default_factory=RandomSource)
    sample_duration: float = 1000.0
    tick_dilation: float = 1.0
    clock: Clock = field(default_factory=Clock)
    heap: EventHeap = field(default_factory=EventHeap)
    stats: StatsRecorder = field(default_factory=StatsRecorder)
    arrivals: ArrivalProcess = field(default_factory=ArrivalProcess)
    pacing: Pacing = field(default_factory=Pacing)

    @property
    def now(self) -> float:
        return self.clock.now

    def set_timeout(self, fn: Callback, delay: float) -> Event:
        """Run ``fn`` once, ``delay`` ticks from now.

        Returns the scheduled event so the caller can cancel it.
        """
        event = Event.once(
            time=self.clock.now + delay,
            event_type="timeout",
            fn=lambda _e: fn(),
            daemon=True,
        )
        self.heap.push(event)
        return event

    def set_interval(self, fn: Callable[[], None], every: float) -> None:
        """Run ``fn`` every ``every`` ticks, first at ``now + every``.

        Interval events are daemons: they never keep a run alive on their own.
        """
        if every <= 0:
            raise ValueError("Interval must be positive.")

        def fire(event: Event) -> Event:
            fn()
            return Event.once(time=event.time + every, event_type="interval", fn=fire, daemon=True)

        self.heap.push(Event.once(time=self.clock.now + every, event_type="interval", fn=fire, daemon=True))
