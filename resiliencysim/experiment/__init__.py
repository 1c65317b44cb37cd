"""Experiment harness: trial runner, row reducer and CSV export."""

from resiliencysim.experiment.export import read_parameter_vectors, rows_to_frame, write_rows
from resiliencysim.experiment.reducer import SLIM_ROW_FIELDS, SlimRow, get_slim_rows
from resiliencysim.experiment.runner import (
    ExperimentRunner,
    TrialResult,
    run_batch,
    run_instance,
    trial_name,
)

__all__ = [
    "ExperimentRunner",
    "SLIM_ROW_FIELDS",
    "SlimRow",
    "TrialResult",
    "get_slim_rows",
    "read_parameter_vectors",
    "rows_to_frame",
    "run_batch",
    "run_instance",
    "trial_name",
    "write_rows",
]
