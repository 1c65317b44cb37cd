"""The simulated request and its metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResponseStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


@dataclass
class ResponseTime:
    start_time: float
    end_time: float | None = None

    @property
    def latency(self) -> float | None:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


@dataclass
class EventMetadata:
    """Scenario-specific fields derived from the request key.

    Every field is optional; the entry hook fills in the ones its scenario
    uses before the request is admitted.

    Attributes:
        deadline: Class-specific deadline in ticks.
        deadline_class: ``"fast"``, ``"medium"`` or ``"slow"``.
        priority: Priority class 0, 1 or 2.
        timeout_budget: Total time a per-request timeout stage allows.
    """

    deadline: float | None = None
    deadline_class: str | None = None
    priority: int | None = None
    timeout_budget: float | None = None


@dataclass
class Request:
    """One simulated request flowing through the pipeline."""

    key: str
    response_time: ResponseTime
    response: ResponseStatus = ResponseStatus.PENDING
    metadata: EventMetadata = field(default_factory=EventMetadata)

    @property
    def succeeded(self) -> bool:
        return self.response is ResponseStatus.SUCCESS

    def complete(self, status: ResponseStatus, end_time: float) -> None:
        self.response = status
        self.response_time.end_time = end_time
