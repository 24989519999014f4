"""Data models for the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Record:
    """One timestamped, speaker-attributed utterance."""

    time: datetime
    text: str
    user: str | None = None


@dataclass
class IngestionFailure:
    """A log file whose ingestion was aborted."""

    path: str
    error: Exception


@dataclass
class IngestionReport:
    """Records gathered from a log directory plus per-file failures."""

    records: list[Record] = field(default_factory=list)
    failures: list[IngestionFailure] = field(default_factory=list)
    files_read: int = 0
