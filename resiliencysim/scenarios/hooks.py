"""Entry hooks that derive request metadata from the request key.

Keys look like ``"k-10234"``. The numeric suffix modulo 3 picks one of
three classes, so under a uniform key distribution each class gets a third
of the traffic. The hooks keep no state: the same key always yields the
same metadata.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from resiliencysim.events import Request

DEADLINE_CLASSES = ("fast", "medium", "slow")


def key_suffix(key: str) -> int:
    """The integer after the two-character key prefix."""
    return int(key[2:])


def key_class(key: str) -> int:
    """Class index 0, 1 or 2 for ``key``."""
    return key_suffix(key) % 3


def deadline_hook(
    deadlines: tuple[float, float, float],
    dilation: float = 1.0,
    timeout_buffer: float | None = None,
) -> Callable[[Request], None]:
    """Hook assigning a class deadline and, optionally, a timeout budget.

    Args:
        deadlines: Deadline in ticks for the fast, medium and slow classes.
        dilation: Global time-dilation factor applied to the deadline.
        timeout_buffer: When given, ``timeout_budget = deadline + timeout_buffer``.
    """

    def hook(request: Request) -> None:
        index = key_class(request.key)
        metadata = request.metadata
        metadata.deadline = deadlines[index] * dilation
        metadata.deadline_class = DEADLINE_CLASSES[index]
        if timeout_buffer is not None:
            metadata.timeout_budget = metadata.deadline + timeout_buffer

    return hook


def priority_hook() -> Callable[[Request], None]:
    """Hook assigning priority class ``suffix % 3``."""

    def hook(request: Request) -> None:
        request.metadata.priority = key_class(request.key)

    return hook
