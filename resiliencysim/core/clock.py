class Clock:
    """Simulated clock measured in ticks."""

    def __init__(self, start_tick: float = 0.0):
        self._current_time = start_tick

    @property
    def now(self) -> float:
        return self._current_time

    def update(self, tick: float) -> None:
        self._current_time = tick
