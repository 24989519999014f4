"""Job endpoints: list the catalog and run one job over a log directory."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException

from src.aggregation.engine import run
from src.aggregation.jobs import JOBS, get_job
from src.aggregation.models import Job
from src.api.models import FileFailure, JobInfo, JobRunRequest, JobRunResponse, ResultEntry
from src.config import settings
from src.errors import ChatlogError, JobExecutionError
from src.ingestion.pipeline import ingest_all
from src.pipeline_config import OutputKind
from src.reporting.render import top_entries

router = APIRouter()


def _job_info(job: Job) -> JobInfo:
    return JobInfo(
        name=job.name,
        kind=job.kind,
        title=job.title,
        x_label=job.x_label,
        y_label=job.y_label,
        max_results=job.max_results,
        outfile=job.outfile,
    )


def _run_job(job: Job, logs_dir: str, limit: int | None) -> JobRunResponse:
    """Ingest *logs_dir* and run *job*; ranked for text jobs, key-sorted for charts."""
    report = ingest_all(logs_dir, max_workers=settings.max_workers)
    result = run(job, report.records, max_workers=settings.max_workers)

    if job.kind is OutputKind.TEXT:
        cap = limit or job.max_results or settings.default_top_n
        pairs = top_entries(result, cap)
    else:
        pairs = sorted(result.items())
        if limit:
            pairs = pairs[:limit]

    return JobRunResponse(
        job=job.name,
        num_records=len(report.records),
        entries=[ResultEntry(key=job.format_key(k), value=v) for k, v in pairs],
        failures=[FileFailure(path=f.path, error=str(f.error)) for f in report.failures],
    )


@router.get("/api/jobs", response_model=list[JobInfo])
async def list_jobs() -> list[JobInfo]:
    """List the built-in job catalog."""
    return [_job_info(job) for job in JOBS]


@router.post("/api/jobs/{name}/run", response_model=JobRunResponse)
async def run_job(name: str, request: JobRunRequest | None = None) -> JobRunResponse:
    """Run one job over a log directory and return its ranked entries."""
    try:
        job = get_job(name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown job: {name}") from exc

    request = request or JobRunRequest()
    logs_dir = request.logs_dir or settings.logs_dir

    try:
        return await asyncio.to_thread(_run_job, job, logs_dir, request.limit)
    except JobExecutionError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Log directory not found: {logs_dir}") from exc
    except (ChatlogError, OSError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
