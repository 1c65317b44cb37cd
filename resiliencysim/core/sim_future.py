"""SimFuture: yield on outcomes, not just waits.

A stage calling a downstream stage sends the request together with a
SimFuture and then yields that future. The process parks until the
downstream stage calls ``future.resolve(value)`` or ``future.fail(exc)``;
a failure is thrown into the parked generator at the yield point.

Example::

    class Proxy(Stage):
        def work_on(self, request):
            reply = SimFuture()
            yield 0.0, [Event(
                time=self.now, event_type="request", target=self.wrapped,
                context={"request": request, "reply": reply},
            )]
            yield reply  # raises StageFailure if the downstream failed
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from resiliencysim.core.context import SimulationContext
    from resiliencysim.core.event import ProcessContinuation

logger = logging.getLogger(__name__)


class SimFuture:
    """A future that generators can yield to park until settled.

    Each SimFuture can only be yielded by one generator. The simulation
    context used to schedule the resume is taken from the entity whose
    process parks on the future, so no process-wide state is involved.

    Attributes:
        is_settled: True if the future has been resolved or failed.
        value: The resolved value (raises RuntimeError if not yet resolved).
    """

    __slots__ = (
        "_resolved", "_failed", "_value", "_exception",
        "_parked", "_parked_context", "_settle_callbacks",
    )

    def __init__(self) -> None:
        self._resolved: bool = False
        self._failed: bool = False
        self._value: Any = None
        self._exception: BaseException | None = None

        self._parked: ProcessContinuation | None = None
        self._parked_context: SimulationContext | None = None

        self._settle_callbacks: list[Callable[[SimFuture], None]] = []

    @property
    def is_settled(self) -> bool:
        """Whether this future has been resolved or failed."""
        return self._resolved or self._failed

    @property
    def value(self) -> Any:
        """The resolved value.

        Raises:
            RuntimeError: If the future hasn't been resolved yet.
        """
        if not self._resolved:
            raise RuntimeError("SimFuture has not been resolved yet")
        return self._value

    def _park(self, continuation: ProcessContinuation) -> None:
        """Store the continuation so it can resume when the future settles.

        If the future is already settled, resumes immediately.

        Raises:
            RuntimeError: If another generator is already parked on this future.
        """
        if self._parked is not None:
            raise RuntimeError(
                "SimFuture already has a parked process. "
                "Each SimFuture can only be yielded by one generator."
            )

        self._parked = continuation
        self._parked_context = continuation.target.context

        if self.is_settled:
            self._resume()

    def resolve(self, value: Any = None) -> None:
        """Resolve the future, resuming the parked generator with ``value``.

        Resolving an already-settled future is a no-op.
        """
        if self.is_settled:
            return
        self._resolved = True
        self._value = value
        if self._parked is not None:
            self._resume()
        self._fire_callbacks()

    def fail(self, exception: BaseException) -> None:
        """Fail the future, throwing ``exception`` into the parked generator.

        Failing an already-settled future is a no-op.
        """
        if self.is_settled:
            return
        self._failed = True
        self._exception = exception
        if self._parked is not None:
            self._resume()
        self._fire_callbacks()

    def _add_settle_callback(self, fn: Callable[[SimFuture], None]) -> None:
        """Register a callback to fire when this future settles."""
        if self.is_settled:
            fn(self)
        else:
            self._settle_callbacks.append(fn)

    def _fire_callbacks(self) -> None:
        callbacks = list(self._settle_callbacks)
        self._settle_callbacks.clear()
        for cb in callbacks:
            cb(self)

    def _resume(self) -> None:
        """Schedule a ProcessContinuation at the current tick to resume the generator."""
        from resiliencysim.core.event import ProcessContinuation

        parked = self._parked
        context = self._parked_context
        continuation = ProcessContinuation(
            time=context.clock.now,
            event_type=parked.event_type,
            daemon=parked.daemon,
            target=parked.target,
            process=parked.process,
            on_complete=parked.on_complete,
            context=parked.context,
        )

        if self._resolved:
            continuation._send_value = self._value
        else:
            continuation._throw_exception = self._exception

        context.heap.push(continuation)
        self._parked = None

    def __repr__(self) -> str:
        if self._resolved:
            return f"SimFuture(resolved={self._value!r})"
        elif self._failed:
            return f"SimFuture(failed={self._exception!r})"
        elif self._parked is not None:
            return "SimFuture(parked)"
        else:
            return "SimFuture(pending)"


def any_of(*futures: SimFuture) -> SimFuture:
    """Return a future that settles when ANY input future settles.

    The composite resolves with ``(index, value)`` of the first future to
    resolve. If the first future to settle fails, the composite fails too.
    This is how a per-request timeout races a downstream reply against a timer.
    """
    if len(futures) < 2:
        raise ValueError("any_of() requires at least 2 futures")

    composite = SimFuture()

    def on_settle(settled: SimFuture, idx: int = 0) -> None:
        if composite.is_settled:
            return
        if settled._resolved:
            composite.resolve((idx, settled._value))
        else:
            composite.fail(settled._exception)

    for i, f in enumerate(futures):
        f._add_settle_callback(lambda sf, i=i: on_settle(sf, i))

    return composite
