"""CSV input and output for the experiment harness."""

from __future__ import annotations

import logging
from dataclasses import astuple
from pathlib import Path

import pandas as pd

from resiliencysim.experiment.reducer import SLIM_ROW_FIELDS, SlimRow

logger = logging.getLogger(__name__)


def rows_to_frame(rows: list[SlimRow]) -> pd.DataFrame:
    """DataFrame with exactly the SlimRow columns, in field order."""
    return pd.DataFrame([astuple(row) for row in rows], columns=list(SLIM_ROW_FIELDS))


def write_rows(rows: list[SlimRow], path: str | Path) -> Path:
    """Write ``rows`` as CSV with a header row. Missing values are empty cells."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows_to_frame(rows).to_csv(path, index=False)
    logger.debug("Wrote %d rows to %s", len(rows), path)
    return path


def read_parameter_vectors(path: str | Path) -> list[list[float]]:
    """Read one parameter vector per line from a headerless CSV."""
    frame = pd.read_csv(path, header=None, dtype=float)
    vectors = [list(row) for row in frame.itertuples(index=False, name=None)]
    logger.info("Read %d parameter vectors from %s", len(vectors), path)
    return vectors
