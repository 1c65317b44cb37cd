"""Plots of a trial's reduced rows."""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from resiliencysim.experiment.export import rows_to_frame  # noqa: E402
from resiliencysim.experiment.reducer import SlimRow  # noqa: E402

logger = logging.getLogger(__name__)

PRIORITY_COLUMNS = ("p1", "p2", "p3")
DEADLINE_COLUMNS = ("g_fast", "g_medium", "g_slow")


def plot_trial(rows: list[SlimRow], path: str | Path, title: str | None = None) -> Path:
    """Save a three-panel chart of load, latency and availability over ticks.

    Missing values are left as gaps in the lines.

    Returns:
        The path of the written image.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = rows_to_frame(rows).astype(float)

    fig, axes = plt.subplots(3, 1, figsize=(12, 10), sharex=True)

    ax = axes[0]
    ax.plot(frame["tick"], frame["load_from_x"], label="Load from X", linewidth=1.5)
    ax.plot(frame["tick"], frame["load_from_y"], label="Load from Y", linewidth=1.5)
    ax.plot(frame["tick"], frame["z_capacity"], label="Z capacity", linestyle="--", alpha=0.7)
    ax.set_ylabel("Requests / sample")
    ax.set_title("Load")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(frame["tick"], frame["mean_latency_from_y"], label="From Y", linewidth=1.5)
    ax.plot(frame["tick"], frame["mean_latency_from_z"], label="From Z", linewidth=1.5)
    for group in PRIORITY_COLUMNS + DEADLINE_COLUMNS:
        ax.plot(frame["tick"], frame[f"mean_response_{group}_latency"], label=group, alpha=0.6)
    ax.set_ylabel("Mean latency (ticks)")
    ax.set_title("Latency")
    ax.legend(ncol=4, fontsize="small")
    ax.grid(True, alpha=0.3)

    ax = axes[2]
    ax.plot(frame["tick"], frame["mean_availability_from_y"], label="From Y", linewidth=1.5)
    ax.plot(frame["tick"], frame["mean_availability_from_z"], label="From Z", linewidth=1.5)
    for group in PRIORITY_COLUMNS + DEADLINE_COLUMNS:
        ax.plot(frame["tick"], frame[f"mean_response_{group}_availability"], label=group, alpha=0.6)
    ax.set_xlabel("Tick")
    ax.set_ylabel("Mean availability")
    ax.set_ylim(-0.05, 1.05)
    ax.set_title("Availability")
    ax.legend(ncol=4, fontsize="small")
    ax.grid(True, alpha=0.3)

    if title:
        fig.suptitle(title, fontsize=14)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Saved plot %s", path)
    return path
