"""Trial settings and their environment overrides.

Environment variables:
    RS_SEED: Seed of every trial's random source.
    RS_ARRIVALS: Requests generated per trial.
    RS_TICK_DILATION: Global time-dilation factor.
    RS_SAMPLE_DURATION: Ticks between two samples.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from resiliencysim.random_source import DEFAULT_SEED

logger = logging.getLogger(__name__)

SAMPLE_DURATION = 1000
TICK_DILATION = 1


@dataclass(frozen=True)
class TrialSettings:
    """Knobs shared by every trial of a batch.

    Attributes:
        seed: Seed of the trial's random source.
        warmup_draws: Uniform draws discarded right after seeding.
        arrivals: Requests generated per trial.
        min_terminal_tick: A run whose clock stops earlier is reported as short.
        sample_duration: Ticks between two samples.
        tick_dilation: Global time-dilation factor.
        end_tick: Optional hard horizon for the event loop.
    """

    seed: int = DEFAULT_SEED
    warmup_draws: int = 2
    arrivals: int = 20_000
    min_terminal_tick: float = 145_000
    sample_duration: float = SAMPLE_DURATION
    tick_dilation: float = TICK_DILATION
    end_tick: float | None = None

    @classmethod
    def from_env(cls, **overrides) -> TrialSettings:
        """Defaults, then ``RS_*`` environment variables, then ``overrides``."""
        settings = cls()
        env = {
            "seed": ("RS_SEED", int),
            "arrivals": ("RS_ARRIVALS", int),
            "tick_dilation": ("RS_TICK_DILATION", float),
            "sample_duration": ("RS_SAMPLE_DURATION", float),
        }
        for field_name, (var, convert) in env.items():
            raw = os.environ.get(var)
            if raw:
                settings = replace(settings, **{field_name: convert(raw)})
                logger.debug("%s=%s overrides %s", var, raw, field_name)
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(settings, **overrides)
