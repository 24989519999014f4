"""Pydantic request/response schemas for the chat-log analytics API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.pipeline_config import OutputKind


class JobInfo(BaseModel):
    """Catalog metadata for one job."""

    name: str
    kind: OutputKind
    title: str = ""
    x_label: str = ""
    y_label: str = ""
    max_results: int | None = None
    outfile: str


class JobRunRequest(BaseModel):
    """Request body for the /api/jobs/{name}/run endpoint."""

    logs_dir: str | None = None
    limit: int | None = Field(default=None, ge=1)


class ResultEntry(BaseModel):
    """One reduced key/value pair, with the key rendered as a label."""

    key: str
    value: Any


class FileFailure(BaseModel):
    """A log file skipped because it failed to parse."""

    path: str
    error: str


class JobRunResponse(BaseModel):
    """Response body for the /api/jobs/{name}/run endpoint."""

    job: str
    num_records: int
    entries: list[ResultEntry]
    failures: list[FileFailure] = []
