"""Bounded FIFO admission queue with a worker pool.

A stage owns one AdmissionQueue. A request starts immediately when a worker
is free, waits in the buffer while there is room, and is rejected otherwise.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resiliencysim.core.event import Event

logger = logging.getLogger(__name__)


class AdmissionQueue:
    """FIFO buffer of ``capacity`` slots in front of ``workers`` workers.

    Args:
        capacity: Maximum number of requests waiting for a worker.
        workers: Number of requests that may be worked on at once.
    """

    def __init__(self, capacity: float = float("inf"), workers: float = float("inf")):
        if capacity < 0 or workers < 0:
            raise ValueError("capacity and workers must be non-negative")
        self.capacity = capacity
        self._workers = workers
        self._busy = 0
        self._buffer: deque[Event] = deque()
        self.enqueued = 0
        self.rejected = 0

    @property
    def busy(self) -> int:
        """Workers currently occupied."""
        return self._busy

    @property
    def available(self) -> float:
        """Free workers right now."""
        return max(self._workers - self._busy, 0)

    def get_num_workers(self) -> float:
        return self._workers

    def set_num_workers(self, workers: float) -> list[Event]:
        """Resize the worker pool.

        Returns the buffered events that can start on the newly free workers.
        Shrinking never interrupts work in progress; the pool drains down to
        the new size as workers finish.
        """
        if workers < 0:
            raise ValueError("workers must be non-negative")
        logger.debug("AdmissionQueue resized from %s to %s workers", self._workers, workers)
        self._workers = workers
        started = []
        while self._buffer and self._busy < self._workers:
            self._busy += 1
            started.append(self._buffer.popleft())
        return started

    def __len__(self) -> int:
        return len(self._buffer)

    def try_start(self) -> bool:
        """Claim a worker if one is free."""
        if self._busy < self._workers:
            self._busy += 1
            return True
        return False

    def offer(self, event: Event) -> bool:
        """Buffer ``event``; False when the buffer is full."""
        if len(self._buffer) >= self.capacity:
            self.rejected += 1
            return False
        self._buffer.append(event)
        self.enqueued += 1
        return True

    def release(self) -> Event | None:
        """Free a worker, handing it straight to the next buffered event if any."""
        if self._buffer and self._busy <= self._workers:
            return self._buffer.popleft()
        self._busy -= 1
        return None
