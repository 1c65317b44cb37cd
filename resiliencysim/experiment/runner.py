"""Experiment runner: one trial per (model, scenario, trial id).

Every trial gets a fresh SimulationContext and a freshly seeded random
source, so two trials with the same seed, model and scenario produce
identical rows regardless of what ran before them in the same process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from resiliencysim.config import TrialSettings
from resiliencysim.core import Simulation, SimulationContext
from resiliencysim.errors import SimulationAbort
from resiliencysim.experiment.export import write_rows
from resiliencysim.experiment.reducer import SlimRow, get_slim_rows
from resiliencysim.models import ModelFactory, ModelKind, get_model
from resiliencysim.random_source import RandomSource
from resiliencysim.scenarios import InjectorKind, ScenarioFunction, get_injector

logger = logging.getLogger(__name__)


def trial_name(model_id: str, trial_id: int | str, scenario_name: str) -> str:
    """``<modelId>-<trialId>-<scenarioName>``, the output file stem."""
    return f"{model_id}-{trial_id}-{scenario_name}"


@dataclass
class TrialResult:
    """Outcome of one trial.

    Attributes:
        name: Trial name, also the CSV file stem.
        path: Where the rows were written.
        rows: The reduced rows.
        finished_at: Tick the simulation clock stopped at.
        aborted: Whether an event handler raised and ended the run early.
    """

    name: str
    path: Path
    rows: list[SlimRow] = field(default_factory=list)
    finished_at: float = 0.0
    aborted: bool = False


class ExperimentRunner:
    """Runs trials and writes one CSV per trial into ``output_dir``.

    Args:
        output_dir: Directory the CSV files land in. Created if missing.
        settings: Settings shared by every trial. Defaults to TrialSettings().
    """

    def __init__(self, output_dir: str | Path, settings: TrialSettings | None = None):
        self.output_dir = Path(output_dir)
        self.settings = settings or TrialSettings()

    def _new_context(self) -> SimulationContext:
        settings = self.settings
        rng = RandomSource(settings.seed)
        rng.discard(settings.warmup_draws)
        return SimulationContext(
            rng=rng,
            sample_duration=settings.sample_duration,
            tick_dilation=settings.tick_dilation,
        )

    def run(self, model_factory: ModelFactory, scenario_fn: ScenarioFunction, trial_id: int | str) -> TrialResult:
        """Run a single trial and write its rows.

        An abort inside the event loop is logged and the rows collected up
        to that point are still written.
        """
        settings = self.settings
        context = self._new_context()
        scenario = scenario_fn(model_factory, context)
        name = trial_name(scenario.model.id, trial_id, scenario.name)

        logger.info("Experiment %s starting (seed=%d)", name, settings.seed)
        aborted = False
        try:
            Simulation(context, end_tick=settings.end_tick).run(scenario.entry, settings.arrivals)
        except SimulationAbort:
            aborted = True
            logger.exception("Caught simulation run abort in %s", name)

        finished_at = context.now
        logger.info("Experiment %s finished. Clock stopped at %.1f", name, finished_at)
        if finished_at < settings.min_terminal_tick:
            logger.warning(
                "SHORT %s: clock stopped at %.1f, expected at least %.1f",
                name,
                finished_at,
                settings.min_terminal_tick,
            )

        rows = get_slim_rows(context.stats)
        path = write_rows(rows, self.output_dir / f"{name}.csv")
        return TrialResult(name=name, path=path, rows=rows, finished_at=finished_at, aborted=aborted)

    def run_batch(
        self,
        model: str | ModelKind,
        injector: str | InjectorKind,
        parameter_vectors: Iterable[Sequence[float]],
    ) -> list[TrialResult]:
        """One trial per parameter vector; the trial id is the vector's index.

        Raises:
            ConfigurationLookupError: If ``model`` or ``injector`` is unknown.
                Raised before any trial runs.
        """
        model_factory = get_model(model)
        make_scenario = get_injector(injector)

        results = []
        for trial_id, params in enumerate(parameter_vectors):
            logger.debug("Trial %d parameters: %s", trial_id, list(params))
            results.append(self.run(model_factory, make_scenario(params), trial_id))
        return results


def run_instance(
    model_factory: ModelFactory,
    scenario_fn: ScenarioFunction,
    output_dir: str | Path,
    trial_id: int | str,
    settings: TrialSettings | None = None,
) -> TrialResult:
    """Run one trial. See ExperimentRunner.run."""
    return ExperimentRunner(output_dir, settings).run(model_factory, scenario_fn, trial_id)


def run_batch(
    model: str | ModelKind,
    injector: str | InjectorKind,
    parameter_vectors: Iterable[Sequence[float]],
    output_dir: str | Path,
    settings: TrialSettings | None = None,
) -> list[TrialResult]:
    """Run one trial per parameter vector. See ExperimentRunner.run_batch."""
    return ExperimentRunner(output_dir, settings).run_batch(model, injector, parameter_vectors)
