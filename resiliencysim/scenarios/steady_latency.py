from __future__ import annotations

from typing import TYPE_CHECKING

from resiliencysim.scenarios.hooks import deadline_hook
from resiliencysim.scenarios.scenario import Scenario
from resiliencysim.stages import Client, Intermediary, PerRequestTimeout, StochasticResourceStage

if TYPE_CHECKING:
    from resiliencysim.core.context import SimulationContext
    from resiliencysim.models import ModelFactory


def steady_latency(model_factory: ModelFactory, context: SimulationContext) -> Scenario:
    """Fixed load against a resource with the default latency model.

    A 60-tick timeout sits between the client and the intermediary, and every
    request carries a class deadline plus a 10-tick timeout budget.
    """
    dilation = context.tick_dilation
    context.arrivals.events_per_1000_ticks = 400 / dilation
    context.arrivals.keyspace_mean = 10_000
    context.arrivals.keyspace_std = 500

    z = StochasticResourceStage(context)
    model = model_factory(z)
    y = Intermediary(context, model.entry)
    timeout = PerRequestTimeout(context, y, timeout=60 * dilation + 10, use_request_budget=False)
    x = Client(context, timeout)
    x.before_hook = deadline_hook((55, 60, 65), dilation, timeout_buffer=10)

    return Scenario(name="SteadyLatency", model=model, entry=x)
