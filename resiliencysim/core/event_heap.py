import heapq

from resiliencysim.core.event import Event


class EventHeap:
    """Priority queue of pending events ordered by (tick, insertion order).

    Tracks how many non-daemon events are pending so the simulation loop can
    stop once only periodic samplers and other daemon events remain.
    """

    def __init__(self, events: list[Event] | None = None):
        self._heap = list(events) if events else []
        heapq.heapify(self._heap)
        self._primary = sum(1 for event in self._heap if not event.daemon)

    def push(self, events: Event | list[Event]) -> None:
        """Push an Event or a list of Events onto the heap."""
        if isinstance(events, list):
            for event in events:
                self._push_one(event)
        else:
            self._push_one(events)

    def _push_one(self, event: Event) -> None:
        heapq.heappush(self._heap, event)
        if not event.daemon:
            self._primary += 1

    def pop(self) -> Event:
        event = heapq.heappop(self._heap)
        if not event.daemon:
            self._primary -= 1
        return event

    def peek(self) -> Event:
        return self._heap[0]

    def has_events(self) -> bool:
        return bool(self._heap)

    def has_primary_events(self) -> bool:
        """True while at least one non-daemon event is pending."""
        return self._primary > 0

    def size(self) -> int:
        return len(self._heap)
