"""Scenarios, entry hooks and parameter injectors."""

from resiliencysim.scenarios.hooks import (
    DEADLINE_CLASSES,
    deadline_hook,
    key_class,
    key_suffix,
    priority_hook,
)
from resiliencysim.scenarios.injectors import (
    CHANGE_AT,
    INJECTORS,
    Injector,
    InjectorKind,
    availability2_injector,
    capacity_injector,
    get_injector,
    latency2_injector,
    load2_injector,
)
from resiliencysim.scenarios.scenario import Scenario, ScenarioFunction
from resiliencysim.scenarios.steady_latency import steady_latency

__all__ = [
    "CHANGE_AT",
    "DEADLINE_CLASSES",
    "INJECTORS",
    "Injector",
    "InjectorKind",
    "Scenario",
    "ScenarioFunction",
    "availability2_injector",
    "capacity_injector",
    "deadline_hook",
    "get_injector",
    "key_class",
    "key_suffix",
    "latency2_injector",
    "load2_injector",
    "priority_hook",
    "steady_latency",
]
