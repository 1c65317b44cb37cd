"""Function adapter so timers and deferred parameter changes can be events."""

from typing import Callable, Union

from resiliencysim.core.entity import Entity
from resiliencysim.core.event import Event

EventFn = Callable[[Event], Union[list[Event], Event, None]]


class CallbackEntity(Entity):
    """Entity whose ``handle_event`` is a plain function.

    ``Event.once`` builds one of these for each scheduled callback, which is
    how ``SimulationContext.set_timeout`` and ``set_interval`` reach the heap.
    The function may return follow-up events, e.g. requests started by
    ``Stage.set_workers``.
    """

    def __init__(self, name: str, fn: EventFn):
        super().__init__(name)
        self._fn = fn

    def handle_event(self, event: Event) -> list[Event] | Event | None:
        return self._fn(event)
