"""Batch runner: ingest a log directory, run every job, write reports.

Entry point
-----------
Run as a module::

    python -m src.runner \\
        --logs logs \\
        --charts charts \\
        --jobs lines words thanked

Use ``--help`` for full argument documentation.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from src.aggregation.engine import run
from src.aggregation.jobs import JOBS, select_jobs
from src.aggregation.models import Job, JobFailure, JobResult
from src.config import settings
from src.errors import ChatlogError, JobExecutionError
from src.ingestion.models import IngestionFailure, Record
from src.ingestion.pipeline import ingest_all
from src.ingestion.tokenizer import init_stop_words
from src.pipeline_config import RunConfig
from src.reporting.render import render_job

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of one batch run."""

    num_records: int = 0
    results: list[JobResult] = field(default_factory=list)
    ingestion_failures: list[IngestionFailure] = field(default_factory=list)
    job_failures: list[JobFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.ingestion_failures and not self.job_failures


def _run_and_render(
    job: Job,
    records: Sequence[Record],
    config: RunConfig,
    default_top_n: int,
) -> JobResult:
    result = run(job, records, max_workers=config.max_workers)
    try:
        path = render_job(result, job, config.charts_dir, default_top_n)
    except Exception as exc:
        raise JobExecutionError(job.name, "render", exc) from exc
    return JobResult(job=job, result=result, output_path=path)


def run_jobs(
    jobs: Sequence[Job],
    records: Sequence[Record],
    config: RunConfig,
    default_top_n: int | None = None,
) -> tuple[list[JobResult], list[JobFailure]]:
    """Run *jobs* concurrently over the shared *records* and render each report.

    A failing job is recorded and does not affect the others.
    """
    top_n = default_top_n if default_top_n is not None else settings.default_top_n
    results: list[JobResult] = []
    failures: list[JobFailure] = []

    with ThreadPoolExecutor(max_workers=max(1, len(jobs))) as executor:
        future_to_job = {
            executor.submit(_run_and_render, job, records, config, top_n): job for job in jobs
        }
        for future in as_completed(future_to_job):
            job = future_to_job[future]
            try:
                results.append(future.result())
            except ChatlogError as exc:
                logger.error("Job %s failed: %s", job.name, exc)
                failures.append(JobFailure(job_name=job.name, error=exc))

    # Keep catalog order regardless of completion order
    order = {job.name: i for i, job in enumerate(jobs)}
    results.sort(key=lambda r: order[r.job.name])
    failures.sort(key=lambda f: order[f.job_name])
    return results, failures


def run_all(config: RunConfig, stop_words_path: str | None = None) -> RunSummary:
    """Run the full batch: stop words -> ingestion -> jobs -> reports.

    Raises:
        MissingStopWordFileError: If the stop-word file cannot be read.
        KeyError: If ``config.job_names`` names an unknown job.
    """
    init_stop_words(stop_words_path or settings.stop_words_path)
    jobs = select_jobs(config.job_names)

    report = ingest_all(config.logs_dir, max_workers=config.max_workers)
    results, job_failures = run_jobs(jobs, report.records, config)

    return RunSummary(
        num_records=len(report.records),
        results=results,
        ingestion_failures=report.failures,
        job_failures=job_failures,
    )


def format_summary(summary: RunSummary) -> str:
    """Human-readable end-of-run report, listing every accumulated failure."""
    lines = [f"Records: {summary.num_records}"]
    for r in summary.results:
        lines.append(f"  {r.job.name}: {len(r.result)} keys -> {r.output_path}")
    if summary.ingestion_failures:
        lines.append(f"Ingestion failures: {len(summary.ingestion_failures)}")
        lines.extend(f"  {f.path}: {f.error}" for f in summary.ingestion_failures)
    if summary.job_failures:
        lines.append(f"Job failures: {len(summary.job_failures)}")
        lines.extend(f"  {f.job_name}: {f.error}" for f in summary.job_failures)
    return "\n".join(lines)


# ── CLI entry point ────────────────────────────────────────────────────────


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser for the batch runner."""
    parser = argparse.ArgumentParser(
        prog="python -m src.runner",
        description=(
            "Chat-log analytics runner\n\n"
            "Parses every YYYY-MM-DD log file in a directory, runs the selected\n"
            "map-reduce jobs over the parsed records and writes one report per job\n"
            "(a .txt top-N listing or a .png bar chart)."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--logs",
        default=None,
        metavar="LOGS_DIR",
        help=f"Directory of HTML log files (default: {settings.logs_dir}).",
    )
    parser.add_argument(
        "--charts",
        default=None,
        metavar="OUTPUT_DIR",
        help=f"Directory where reports are written (default: {settings.charts_dir}).",
    )
    parser.add_argument(
        "--stop-words",
        default=None,
        metavar="PATH",
        help=f"Newline-delimited stop-word file (default: {settings.stop_words_path}).",
    )
    parser.add_argument(
        "--jobs",
        nargs="+",
        metavar="NAME",
        default=None,
        help=f"Jobs to run. Valid: {', '.join(j.name for j in JOBS)}. Defaults to all.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help="Worker threads per fan-out (default: executor default).",
    )
    parser.add_argument(
        "--list-jobs",
        action="store_true",
        default=False,
        help="Print the job catalog and exit.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    if args.list_jobs:
        for job in JOBS:
            print(f"{job.name:10} {job.kind.value:6} {job.title or job.outfile}")
        return 0

    logging.basicConfig(
        level=settings.log_level,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = RunConfig.from_settings(
            settings,
            logs_dir=args.logs,
            charts_dir=args.charts,
            job_names=args.jobs,
            max_workers=args.workers,
        )
        summary = run_all(config, stop_words_path=args.stop_words)
    except KeyError as exc:
        parser.error(str(exc))
    except (ChatlogError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(format_summary(summary))
    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
