"""Error taxonomy for ingestion and aggregation failures."""

from __future__ import annotations


class ChatlogError(Exception):
    """Base class for all chatlog-analytics errors."""


class MalformedLineError(ChatlogError, ValueError):
    """A log entry does not start with an ``HH:MM`` offset."""

    def __init__(self, line: str, path: str | None = None) -> None:
        self.line = line
        self.path = path
        where = f" in {path}" if path else ""
        msg = f"Malformed log line{where}: {line!r}"
        super().__init__(msg)


class InvalidFilenameError(ChatlogError, ValueError):
    """A log filename carries no ``YYYY-MM-DD`` day."""

    def __init__(self, path: str) -> None:
        self.path = path
        msg = f"No YYYY-MM-DD day in log filename: {path!r}"
        super().__init__(msg)


class JobExecutionError(ChatlogError, RuntimeError):
    """A mapper or reducer raised while running a job."""

    def __init__(self, job_name: str, stage: str, cause: BaseException) -> None:
        self.job_name = job_name
        self.stage = stage
        msg = f"Job {job_name!r} failed in {stage} stage: {cause!r}"
        super().__init__(msg)


class MissingStopWordFileError(ChatlogError, FileNotFoundError):
    """The stop-word file could not be read."""

    def __init__(self, path: str) -> None:
        self.path = path
        msg = f"Stop-word file not found: {path!r}"
        super().__init__(msg)
