"""Exceptions raised by stages, the engine and the experiment harness."""


class StageFailure(RuntimeError):
    """A stage could not serve a request.

    Raised inside a stage's ``work_on`` process (sampled unavailability,
    queue rejection, timeout) and thrown into the caller's parked process.
    Whether to retry or give up is decided by the composing stages.
    """

    def __init__(self, stage: str, reason: str):
        super().__init__(f"{stage}: {reason}")
        self.stage = stage
        self.reason = reason


class SimulationAbort(RuntimeError):
    """The driven run raised while processing an event.

    The experiment runner logs it and ends the trial early; the rest of a
    batch keeps going.
    """


class ConfigurationLookupError(LookupError):
    """Unknown model or injector identifier."""
