"""Run configuration: output kinds and the immutable RunConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.config import Settings


class OutputKind(StrEnum):
    """How a job's result is rendered."""

    TEXT = "text"
    CHART = "chart"


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one batch run.

    ``job_names`` selects jobs from the catalog; an empty tuple means every
    built-in job.
    """

    logs_dir: str = "logs"
    charts_dir: str = "charts"
    job_names: tuple[str, ...] = field(default_factory=tuple)
    max_workers: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> RunConfig:
        """Build a RunConfig from *settings*, letting non-None overrides win."""
        values: dict[str, Any] = {
            "logs_dir": settings.logs_dir,
            "charts_dir": settings.charts_dir,
            "max_workers": settings.max_workers,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if "job_names" in values:
            values["job_names"] = tuple(values["job_names"])
        return cls(**values)
