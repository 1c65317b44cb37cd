from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from resiliencysim.core.context import SimulationContext
    from resiliencysim.models import Model, ModelFactory
    from resiliencysim.stages import Stage


@dataclass
class Scenario:
    """Arrival configuration and pipeline wiring layered on a model.

    Attributes:
        name: Scenario name, used in output file names.
        model: The model the scenario wraps.
        entry: The stage the simulation sends requests to.
    """

    name: str
    model: Model
    entry: Stage


ScenarioFunction = Callable[["ModelFactory", "SimulationContext"], Scenario]
"""Builds a scenario for one trial from a model factory and a fresh context."""
