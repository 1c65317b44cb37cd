"""Parameter injectors for sensitivity analysis.

An injector turns a positional parameter vector into a ScenarioFunction.
Every variant sets the arrival rate and the resource stage's capacity,
mean latency and availability from the vector, then schedules exactly one
deferred change to a single dimension at ``CHANGE_AT`` ticks (scaled by the
context's tick dilation). Each variant steps a different dimension and
holds the rest fixed.

Vector layouts:

====================  ================================================
``latency2``          [rate, mean, availability, new mean]
``load2``             [rate, mean, availability, new rate]
``availability2``     [rate, mean, availability, new availability]
``capacity``          [rate, workers, mean, availability, new workers]
====================  ================================================

Vectors are interpreted positionally and are not validated.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Callable

from resiliencysim.core.context import Pacing
from resiliencysim.errors import ConfigurationLookupError
from resiliencysim.models import ModelKind
from resiliencysim.scenarios.hooks import deadline_hook, priority_hook
from resiliencysim.scenarios.scenario import Scenario, ScenarioFunction
from resiliencysim.stages import (
    AdmissionQueue,
    Client,
    Intermediary,
    PerRequestTimeout,
    StochasticResourceStage,
)

if TYPE_CHECKING:
    from resiliencysim.core.context import SimulationContext
    from resiliencysim.core.event import Event
    from resiliencysim.models import Model, ModelFactory

logger = logging.getLogger(__name__)

CHANGE_AT = 8000
"""Tick (before dilation) at which the deferred change fires."""

KEYSPACE_MEAN = 10_000
KEYSPACE_STD = 500
Z_WORKERS = 500

Injector = Callable[[Sequence[float]], ScenarioFunction]


class InjectorKind(Enum):
    LATENCY = "latency2"
    LOAD = "load2"
    AVAILABILITY = "availability2"
    CAPACITY = "capacity"


def _set_rate(context: SimulationContext, events_per_1000_ticks: float) -> None:
    context.arrivals.events_per_1000_ticks = events_per_1000_ticks / context.tick_dilation


def _prepare(
    context: SimulationContext, model_factory: ModelFactory, workers: float = Z_WORKERS
) -> tuple[StochasticResourceStage, Model]:
    context.arrivals.keyspace_mean = KEYSPACE_MEAN
    context.arrivals.keyspace_std = KEYSPACE_STD
    z = StochasticResourceStage(context)
    z.in_queue = AdmissionQueue(capacity=0, workers=workers)
    return z, model_factory(z)


def _defer(
    context: SimulationContext,
    description: str,
    change: Callable[[], list[Event] | None],
) -> None:
    at = CHANGE_AT * context.tick_dilation

    def apply() -> list[Event] | None:
        logger.info("[Injector] Applying %s at tick %.1f", description, context.now)
        return change()

    context.set_timeout(apply, at)


def latency2_injector(params: Sequence[float]) -> ScenarioFunction:
    """Steps the resource stage's mean latency."""

    def scenario(model_factory: ModelFactory, context: SimulationContext) -> Scenario:
        dilation = context.tick_dilation
        z, model = _prepare(context, model_factory)
        y = Intermediary(context, model.entry)
        timeout = PerRequestTimeout(context, y, timeout=300 * dilation + 10, use_request_budget=False)
        x = Client(context, timeout)

        buffer = 10 if model.id == ModelKind.PER_REQUEST_TIMEOUT.value else None
        x.before_hook = deadline_hook((40, 45, 50), dilation, timeout_buffer=buffer)

        _set_rate(context, params[0])
        z.mean = math.floor(params[1])
        z.availability = params[2]
        new_mean = math.floor(params[3])

        def change() -> None:
            z.mean = new_mean

        _defer(context, f"mean latency {new_mean}", change)
        return Scenario(name="SteadyLatency", model=model, entry=x)

    return scenario


def load2_injector(params: Sequence[float]) -> ScenarioFunction:
    """Steps the arrival rate; capacity stays fixed."""

    def scenario(model_factory: ModelFactory, context: SimulationContext) -> Scenario:
        z, model = _prepare(context, model_factory)
        y = Intermediary(context, model.entry)
        x = Client(context, y)
        x.before_hook = priority_hook()

        _set_rate(context, params[0])
        z.mean = math.floor(params[1])
        z.availability = params[2]

        def change() -> None:
            _set_rate(context, params[3])

        _defer(context, f"arrival rate {params[3]}", change)
        return Scenario(name="SteadyLoad", model=model, entry=x)

    return scenario


def availability2_injector(params: Sequence[float]) -> ScenarioFunction:
    """Steps the resource stage's availability."""

    def scenario(model_factory: ModelFactory, context: SimulationContext) -> Scenario:
        z, model = _prepare(context, model_factory)
        y = Intermediary(context, model.entry)
        x = Client(context, y)
        x.before_hook = priority_hook()

        if model.paced:
            context.pacing = Pacing(sleep_ms=3, every=1000)

        _set_rate(context, params[0])
        z.mean = math.floor(params[1])
        z.availability = params[2]

        def change() -> None:
            z.availability = params[3]

        _defer(context, f"availability {params[3]}", change)
        return Scenario(name="SteadyAvailability", model=model, entry=x)

    return scenario


def capacity_injector(params: Sequence[float]) -> ScenarioFunction:
    """Steps the resource stage's worker count."""

    def scenario(model_factory: ModelFactory, context: SimulationContext) -> Scenario:
        z, model = _prepare(context, model_factory, workers=math.floor(params[1]))
        y = Intermediary(context, model.entry)
        x = Client(context, y)
        x.before_hook = priority_hook()

        _set_rate(context, params[0])
        z.mean = math.floor(params[2])
        z.availability = params[3]
        new_workers = math.floor(params[4])

        def change() -> list[Event]:
            return z.set_workers(new_workers)

        _defer(context, f"worker count {new_workers}", change)
        return Scenario(name="SteadyCapacity", model=model, entry=x)

    return scenario


INJECTORS: dict[InjectorKind, Injector] = {
    InjectorKind.LATENCY: latency2_injector,
    InjectorKind.LOAD: load2_injector,
    InjectorKind.AVAILABILITY: availability2_injector,
    InjectorKind.CAPACITY: capacity_injector,
}


def get_injector(name: str | InjectorKind) -> Injector:
    """Look up an injector by kind or by its scenario name.

    Raises:
        ConfigurationLookupError: If no injector has that name.
    """
    try:
        kind = name if isinstance(name, InjectorKind) else InjectorKind(name)
    except ValueError:
        raise ConfigurationLookupError(f"No Injector available for {name}") from None
    return INJECTORS[kind]
