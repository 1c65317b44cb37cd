"""Models: named compositions of stages wrapped around a resource stage.

A model factory receives the scenario's StochasticResourceStage and returns
the stages that sit in front of it. Scenarios then put their own client and
intermediary in front of ``model.entry``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from resiliencysim.errors import ConfigurationLookupError
from resiliencysim.stages import PerRequestTimeout, Stage, StochasticResourceStage

logger = logging.getLogger(__name__)


class ModelKind(Enum):
    NAIVE = "A"
    PER_REQUEST_TIMEOUT = "G"


@dataclass
class Model:
    """A named stage composition.

    Attributes:
        id: Short identifier used in output file names.
        name: Human-readable name.
        entry: The stage requests enter the model through.
        stages: Every stage of the model by role.
        paced: Whether long event chains should be throttled in real time.
    """

    id: str
    name: str
    entry: Stage
    stages: dict[str, Stage] = field(default_factory=dict)
    paced: bool = False


ModelFactory = Callable[[StochasticResourceStage], Model]


def create_naive_model(z: StochasticResourceStage) -> Model:
    """Requests go straight to the resource."""
    return Model(id=ModelKind.NAIVE.value, name="Naive", entry=z, stages={"z": z})


def create_per_request_timeout_model(z: StochasticResourceStage) -> Model:
    """Each request gives up after its own timeout budget."""
    timeout = PerRequestTimeout(z.context, z, timeout=300 * z.context.tick_dilation)
    return Model(
        id=ModelKind.PER_REQUEST_TIMEOUT.value,
        name="PerRequestTimeout",
        entry=timeout,
        stages={"timeout": timeout, "z": z},
    )


MODELS: dict[ModelKind, ModelFactory] = {
    ModelKind.NAIVE: create_naive_model,
    ModelKind.PER_REQUEST_TIMEOUT: create_per_request_timeout_model,
}


def get_model(name: str | ModelKind) -> ModelFactory:
    """Look up a model factory by kind or by its identifier.

    Raises:
        ConfigurationLookupError: If no model has that identifier.
    """
    try:
        kind = name if isinstance(name, ModelKind) else ModelKind(name)
    except ValueError:
        raise ConfigurationLookupError(f"No Model available for {name}") from None
    return MODELS[kind]
