"""Command-line entry point for sensitivity-analysis batches.

Usage:
    python -m resiliencysim MODEL INJECTOR PARAMS_CSV OUTPUT_DIR [--seed N]

PARAMS_CSV holds one headerless parameter vector per line. One trial runs per
line and writes ``OUTPUT_DIR/<model>-<line index>-<scenario>.csv``.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from resiliencysim.config import TrialSettings
from resiliencysim.errors import ConfigurationLookupError
from resiliencysim.experiment import ExperimentRunner, read_parameter_vectors
from resiliencysim.logging_config import configure_from_env, enable_console_logging
from resiliencysim.models import ModelKind, get_model
from resiliencysim.scenarios import InjectorKind, get_injector

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resiliencysim",
        description="Run one simulation trial per parameter vector and write per-tick CSVs.",
    )
    parser.add_argument("model", help=f"Model id ({', '.join(k.value for k in ModelKind)})")
    parser.add_argument("injector", help=f"Injector name ({', '.join(k.value for k in InjectorKind)})")
    parser.add_argument("params", help="Headerless CSV, one parameter vector per line")
    parser.add_argument("output", help="Output directory")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default 42 or RS_SEED)")
    parser.add_argument("--arrivals", type=int, default=None, help="Requests per trial")
    parser.add_argument("--tick-dilation", type=float, default=None, help="Global time-dilation factor")
    parser.add_argument("--plot", action="store_true", help="Also save a PNG chart per trial")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if not configure_from_env():
        enable_console_logging(level="INFO")

    settings = TrialSettings.from_env(
        seed=args.seed,
        arrivals=args.arrivals,
        tick_dilation=args.tick_dilation,
    )
    try:
        get_model(args.model)
        get_injector(args.injector)
    except ConfigurationLookupError as exc:
        logger.error("%s", exc)
        return 2

    vectors = read_parameter_vectors(args.params)
    results = ExperimentRunner(args.output, settings).run_batch(args.model, args.injector, vectors)

    if args.plot:
        from resiliencysim.analysis import plot_trial

        for result in results:
            plot_trial(result.rows, result.path.with_suffix(".png"), title=result.name)

    aborted = [r.name for r in results if r.aborted]
    if aborted:
        logger.warning("%d of %d trials aborted: %s", len(aborted), len(results), ", ".join(aborted))
        return 1
    logger.info("Wrote %d trials to %s", len(results), args.output)
    return 0
