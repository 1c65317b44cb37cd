"""Base class for pipeline stages.

A stage receives ``request`` events carrying a Request and a reply
SimFuture. Admission goes through the stage's AdmissionQueue; once a
worker is free the stage runs ``work_on(request)`` as a process and then
resolves the reply, or fails it with the StageFailure the process raised.

Subclasses implement only ``work_on``:

    class Fixed(Stage):
        def work_on(self, request):
            yield 10.0
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import TYPE_CHECKING, Callable

from resiliencysim.core.entity import Entity
from resiliencysim.core.event import Event
from resiliencysim.core.sim_future import SimFuture
from resiliencysim.errors import StageFailure
from resiliencysim.stages.queue import AdmissionQueue

if TYPE_CHECKING:
    from collections.abc import Generator

    from resiliencysim.core.context import SimulationContext
    from resiliencysim.events import Request

logger = logging.getLogger(__name__)

REQUEST = "request"
DEQUEUE = "stage.dequeue"

BeforeHook = Callable[["Request"], None]


class Stage(Entity):
    """A pipeline component that accepts a request, works on it and replies.

    Args:
        context: The trial's SimulationContext.
        wrapped: Downstream stage, if this stage calls one.
        name: Identifier for logging. Defaults to the class name.
        in_queue: Admission queue. Defaults to an unbounded one.

    Attributes:
        before_hook: Optional function applied to each request before admission.
    """

    def __init__(
        self,
        context: SimulationContext,
        wrapped: Stage | None = None,
        name: str | None = None,
        in_queue: AdmissionQueue | None = None,
    ):
        super().__init__(name or type(self).__name__)
        self.attach(context)
        self.wrapped = wrapped
        self.in_queue = in_queue if in_queue is not None else AdmissionQueue()
        self.before_hook: BeforeHook | None = None

    def handle_event(self, event: Event) -> Generator | None:
        if event.event_type == DEQUEUE:
            return self._start(event)
        if self.before_hook is not None:
            self.before_hook(event.context["request"])
        return self.admit(event)

    def admit(self, event: Event) -> Generator | None:
        """Start the request on a free worker, buffer it, or reject it."""
        if self.in_queue.try_start():
            return self._start(event)
        if not self.in_queue.offer(event):
            logger.debug("[%s] Rejected %s: queue full", self.name, event.context["request"].key)
            event.context["reply"].fail(StageFailure(self.name, "queue full"))
        return None

    def set_workers(self, workers: float) -> list[Event]:
        """Resize the worker pool; buffered requests start on any new workers."""
        started = self.in_queue.set_num_workers(workers)
        return [Event(time=self.now, event_type=DEQUEUE, target=self, context=e.context) for e in started]

    @abstractmethod
    def work_on(self, request: Request) -> Generator:
        """Simulated work for one request. Raise StageFailure to fail it."""
        raise NotImplementedError

    def call(self, target: Stage, request: Request) -> Generator:
        """Send ``request`` to ``target`` and park until it replies.

        Use with ``yield from``; a downstream failure surfaces as StageFailure.
        """
        reply = SimFuture()
        yield 0.0, [
            Event(
                time=self.now,
                event_type=REQUEST,
                target=target,
                context={"request": request, "reply": reply},
            )
        ]
        return (yield reply)

    def _start(self, event: Event) -> Generator:
        event.add_completion_hook(self._on_worker_free)
        return self._serve(event)

    def _serve(self, event: Event) -> Generator:
        request = event.context["request"]
        reply: SimFuture = event.context["reply"]
        try:
            yield from self.work_on(request)
        except StageFailure as exc:
            reply.fail(exc)
        else:
            reply.resolve(request)

    def _on_worker_free(self, tick: float) -> Event | None:
        following = self.in_queue.release()
        if following is None:
            return None
        return Event(time=tick, event_type=DEQUEUE, target=self, context=following.context)
