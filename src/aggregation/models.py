"""Data models for map-reduce jobs."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.ingestion.models import Record
from src.pipeline_config import OutputKind

Mapper = Callable[[Record], Iterable[tuple[Hashable, Any]]]
Reducer = Callable[[Any, Sequence[Any]], Any]


@dataclass(frozen=True)
class Job:
    """A declarative aggregation recipe: mapper, reducer and output metadata.

    ``mapper`` and ``reducer`` must be pure: both run concurrently and in no
    particular order.
    """

    name: str
    mapper: Mapper
    reducer: Reducer
    outfile: str
    kind: OutputKind = OutputKind.TEXT
    title: str = ""
    x_label: str = ""
    y_label: str = ""
    max_results: int | None = None
    x_format: Callable[[Any], str] | None = None

    def format_key(self, key: Any) -> str:
        """Render a result key as an axis label."""
        return self.x_format(key) if self.x_format is not None else str(key)


@dataclass
class JobResult:
    """Reduced output of one job run."""

    job: Job
    result: dict[Any, Any] = field(default_factory=dict)
    output_path: str | None = None


@dataclass
class JobFailure:
    """A job whose run or report was aborted."""

    job_name: str
    error: Exception
