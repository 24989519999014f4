"""Report rendering: ranked text listings and bar charts."""

from __future__ import annotations

import logging
import os
from collections.abc import Hashable, Mapping
from typing import Any

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from src.aggregation.models import Job
from src.pipeline_config import OutputKind

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 100


def outfile(job: Job, charts_dir: str = "charts") -> str:
    """``charts/<outfile>.txt`` for text jobs, ``charts/<outfile>.png`` for charts."""
    ext = "txt" if job.kind is OutputKind.TEXT else "png"
    return os.path.join(charts_dir, f"{job.outfile}.{ext}")


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def top_entries(
    result: Mapping[Hashable, Any],
    limit: int | None = None,
) -> list[tuple[Hashable, Any]]:
    """Sort by value descending, ties by key ascending, and keep the first *limit*."""
    ranked = sorted(result.items(), key=lambda kv: (-kv[1], kv[0]))
    return ranked if limit is None else ranked[:limit]


def gen_text(result: Mapping[Hashable, Any], job: Job, default_top_n: int = DEFAULT_TOP_N) -> str:
    """Render a top-N listing, one ``key: value`` line per entry."""
    limit = job.max_results if job.max_results is not None else default_top_n
    lines = [f"{key}: {_format_value(value)}" for key, value in top_entries(result, limit)]
    return "".join(line + "\n" for line in lines)


def gen_chart(result: Mapping[Hashable, Any], job: Job, path: str) -> None:
    """Draw a bar chart of *result* over its sorted keys and save it to *path*."""
    xs = sorted(result)
    ys = [result[x] for x in xs]
    labels = [job.format_key(x) for x in xs]

    fig, ax = plt.subplots(figsize=(8, 4))
    try:
        ax.bar(range(len(xs)), ys, color="#4c72b0")
        ax.set_xticks(range(len(xs)))
        ax.set_xticklabels(labels)
        ax.set_title(job.title)
        ax.set_xlabel(job.x_label)
        ax.set_ylabel(job.y_label)
        fig.tight_layout()
        fig.savefig(path, dpi=150)
    finally:
        plt.close(fig)


def render_job(
    result: Mapping[Hashable, Any],
    job: Job,
    charts_dir: str = "charts",
    default_top_n: int = DEFAULT_TOP_N,
) -> str:
    """Write *job*'s report under *charts_dir* and return the written path."""
    os.makedirs(charts_dir, exist_ok=True)
    path = outfile(job, charts_dir)

    if job.kind is OutputKind.TEXT:
        with open(path, "w", encoding="utf-8") as f:
            f.write(gen_text(result, job, default_top_n))
    else:
        gen_chart(result, job, path)

    logger.info("Wrote %s report to %s", job.name, path)
    return path
