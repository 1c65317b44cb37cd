"""Event types that form the fundamental units of simulation work.

Events drive the simulation forward. Each event represents something that happens
at a specific simulated tick. When invoked, an event calls its target entity's
handle_event() method. For function-based dispatch, use Event.once() which wraps
a function in a CallbackEntity.

This module also provides ProcessContinuation for generator-based multi-step
processes, enabling stages to yield simulated waits and resume execution later.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from itertools import count
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from resiliencysim.core.entity import Entity

logger = logging.getLogger(__name__)

_global_event_counter = count()

CompletionHook = Callable[[float], Union[list["Event"], "Event", None]]
"""Signature for hooks that run when an event or process finishes."""


class Event:
    """The fundamental unit of simulation work.

    Events are scheduled onto the EventHeap and processed in chronological order.
    Each event targets an Entity whose handle_event() method processes it.

    Events support two additional mechanisms:

    1. **Generators**: When handle_event() returns a generator, the event is
       wrapped as a ProcessContinuation, enabling multi-step processes that
       yield simulated waits between steps.

    2. **Completion Hooks**: Functions registered via on_complete run when the
       event finishes (including after generator exhaustion). Admission queues
       use them to hand a freed worker slot to the next buffered request.

    Sorting uses (time, insertion_order) so events scheduled at the same tick
    are processed FIFO, which keeps a seeded run reproducible.

    Attributes:
        time: Tick at which this event should be processed.
        event_type: Human-readable label for debugging.
        daemon: If True, this event won't keep the simulation alive.
        target: Entity to receive this event.
        on_complete: Hooks to run when processing finishes.
        context: Arbitrary payload (request, reply future, ...).
    """

    __slots__ = (
        "_cancelled",
        "_sort_index",
        "context",
        "daemon",
        "event_type",
        "on_complete",
        "target",
        "time",
    )

    def __init__(
        self,
        time: float,
        event_type: str,
        target: Entity | None = None,
        *,
        daemon: bool = False,
        on_complete: list[CompletionHook] | None = None,
        context: dict[str, Any] | None = None,
    ):
        if target is None:
            raise ValueError(f"Event '{event_type}' must have a 'target'.")

        self.time = time
        self.event_type = event_type
        self.daemon = daemon
        self.target = target
        self.on_complete = on_complete if on_complete is not None else []
        self.context = context if context is not None else {}
        self._sort_index = next(_global_event_counter)
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        """Whether this event has been cancelled."""
        return self._cancelled

    def cancel(self) -> None:
        """Mark this event as cancelled. The simulation loop will skip it on pop.

        Cancelling an already-cancelled or already-processed event is a no-op.
        """
        self._cancelled = True

    def __repr__(self) -> str:
        target_name = getattr(self.target, "name", None) or type(self.target).__name__
        return f"Event({self.time!r}, {self.event_type!r}, target={target_name})"

    def add_completion_hook(self, hook: CompletionHook) -> None:
        """Attach a function to run when this event finishes processing.

        Args:
            hook: Function called with the finish tick when processing completes.
        """
        self.on_complete.append(hook)

    def invoke(self) -> list[Event]:
        """Execute this event and return any resulting events.

        Dispatches to the target entity's handle_event() method. If the handler
        returns a generator, it's wrapped as a ProcessContinuation and advanced
        to its first yield immediately.
        """
        raw_result = self.target.handle_event(self)

        if isinstance(raw_result, Generator):
            return self._start_process(raw_result)

        normalized = self._normalize_return(raw_result)
        return normalized + self._run_completion_hooks(self.time)

    def _run_completion_hooks(self, time: float) -> list[Event]:
        """Run all hooks once and flatten their results."""
        hooks = list(self.on_complete)
        self.on_complete.clear()

        results: list[Event] = []
        for hook in hooks:
            hook_result = hook(time)

            if not hook_result:
                continue
            if isinstance(hook_result, list):
                results.extend(hook_result)
            else:
                results.append(hook_result)

        return results

    def _start_process(self, gen: Generator) -> list[Event]:
        continuation = ProcessContinuation(
            time=self.time,
            event_type=self.event_type,
            daemon=self.daemon,
            target=self.target,
            process=gen,
            on_complete=self.on_complete,
            context=self.context,
        )
        return continuation.invoke()

    def _normalize_return(self, value: Any) -> list[Event]:
        """Standardizes return values into list[Event]."""
        if value is None:
            return []
        if isinstance(value, list):
            return value
        if isinstance(value, Event):
            return [value]
        return []

    def __lt__(self, other: Event) -> bool:
        if self.time != other.time:
            return self.time < other.time
        return self._sort_index < other._sort_index

    @staticmethod
    def once(
        time: float,
        event_type: str,
        fn: Callable[[Event], Any],
        *,
        daemon: bool = False,
        context: dict[str, Any] | None = None,
    ) -> Event:
        """Create a one-shot event that invokes a function.

        Wraps the function in a CallbackEntity so that all events
        use target-based dispatch uniformly.
        """
        from resiliencysim.core.callback_entity import CallbackEntity

        entity = CallbackEntity(name=f"once:{event_type}", fn=fn)
        return Event(
            time=time,
            event_type=event_type,
            target=entity,
            daemon=daemon,
            context=context or {},
        )


class ProcessContinuation(Event):
    """Internal event that resumes a paused generator-based process.

    Each invocation advances the generator to its next yield point, schedules
    another continuation for the yielded wait, and collects any side-effect
    events. Yields are interpreted as:

    - ``yield delay`` - wait for ``delay`` ticks before resuming
    - ``yield (delay, events)`` - wait and also schedule side-effect events
    - ``yield SimFuture()`` - park until the future is resolved or failed

    Attributes:
        process: The Python generator being executed incrementally.
    """

    __slots__ = ("_send_value", "_throw_exception", "process")

    def __init__(
        self,
        time: float,
        event_type: str,
        target: Entity | None = None,
        *,
        daemon: bool = False,
        on_complete: list[CompletionHook] | None = None,
        context: dict[str, Any] | None = None,
        process: Generator | None = None,
    ):
        super().__init__(
            time=time,
            event_type=event_type,
            target=target,
            daemon=daemon,
            on_complete=on_complete,
            context=context,
        )
        self.process = process
        self._send_value: Any = None
        self._throw_exception: BaseException | None = None

    def invoke(self) -> list[Event]:
        """Advance the generator to its next yield and schedule the continuation."""
        from resiliencysim.core.sim_future import SimFuture

        try:
            if self._throw_exception is not None:
                exc, self._throw_exception = self._throw_exception, None
                yielded_val = self.process.throw(exc)
            else:
                yielded_val = self.process.send(self._send_value)

            if isinstance(yielded_val, SimFuture):
                yielded_val._park(self)
                return []

            delay, side_effects = self._normalize_yield(yielded_val)

            next_continuation = ProcessContinuation(
                time=self.time + delay,
                event_type=self.event_type,
                daemon=self.daemon,
                target=self.target,
                on_complete=self.on_complete,
                process=self.process,
                context=self.context,
            )

            result = list(side_effects)
            result.append(next_continuation)
            return result

        except StopIteration as e:
            finished = self._normalize_return(e.value)
            return finished + self._run_completion_hooks(self.time)

    def _normalize_yield(self, value: Any) -> tuple[float, list[Event]]:
        """Unpacks `yield 0.1` vs `yield 0.1, [events]`"""
        if isinstance(value, tuple):
            delay, effects = value[0], value[1]
            if effects is None:
                effects = []
            elif isinstance(effects, Event):
                effects = [effects]
            return float(delay), effects
        if isinstance(value, (int, float)):
            return float(value), []
        logger.warning("Generator yielded unknown type %s; assuming 0 delay.", type(value))
        return 0.0, []
