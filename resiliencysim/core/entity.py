"""Base class for simulation actors that respond to events.

Entities are the building blocks of a simulation model. Each entity receives
events via handle_event() and returns reactions (new events or generators).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

from resiliencysim.core.event import Event

if TYPE_CHECKING:
    from collections.abc import Generator

    from resiliencysim.core.context import SimulationContext
    from resiliencysim.core.sim_future import SimFuture

logger = logging.getLogger(__name__)

SimYield = Union[float, tuple[float, list[Event]], "SimFuture"]
"""Type alias for generator yield values: delay, (delay, side_effects), or SimFuture."""

SimReturn = list[Event] | Event | None
"""Type alias for generator return values: events to schedule on completion."""


class Entity(ABC):
    """Abstract base class for all simulation actors.

    Entities receive events through handle_event() and produce reactions.
    They hold a reference to the trial's SimulationContext for the clock,
    the random source and the stats recorder.

    Attributes:
        name: Identifier for logging and debugging.
    """

    def __init__(self, name: str):
        self.name = name
        self._context: SimulationContext | None = None

    def attach(self, context: SimulationContext) -> None:
        """Bind this entity to a trial's simulation context."""
        self._context = context
        logger.debug("[%s] Attached to simulation context", self.name)

    @property
    def context(self) -> SimulationContext:
        """The simulation context this entity belongs to.

        Raises:
            RuntimeError: If accessed before the entity is attached.
        """
        if self._context is None:
            raise RuntimeError(
                f"Entity {self.name} is not attached to a simulation context."
            )
        return self._context

    @property
    def now(self) -> float:
        """Current simulated tick."""
        return self.context.clock.now

    @abstractmethod
    def handle_event(
        self, event: Event
    ) -> Union[Generator[SimYield, None, SimReturn], list[Event], Event, None]:
        """Process an incoming event and return any resulting events.

        Returns:
            Generator: For multi-step processes. Yield delays; optionally return
                events on completion.
            list[Event] | Event | None: For immediate, single-step responses.
        """
        raise NotImplementedError
