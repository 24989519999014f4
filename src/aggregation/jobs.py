"""Built-in job catalog.

Each job is plain data: a pure mapper, a pure reducer and report metadata.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from src.aggregation.models import Job
from src.ingestion.models import Record
from src.ingestion.parsers import fix_user
from src.ingestion.tokenizer import is_content_word, tokenize
from src.pipeline_config import OutputKind

THANK_RE = re.compile(r"thank", re.IGNORECASE)
ADDRESSEE_RE = re.compile(r"[A-Za-z0-9_`'|-]+:")

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
# Assume 52 of each weekday per year
WEEKS_PER_YEAR = 52.0


def month_only(time: datetime) -> datetime:
    """Truncate *time* to midnight on the first day of its month."""
    return datetime(time.year, time.month, 1)


def month_label(time: datetime) -> str:
    return time.strftime("%b")


def weekday_label(day: int) -> str:
    """ISO weekday number (1 = Monday) -> ``"Mon"``."""
    return WEEKDAYS[day - 1]


def get_thanked(text: str) -> str | None:
    """Return the ``name:`` token a thank-you is addressed to, if any.

    ``"thank you jim:"`` -> ``"jim:"``
    """
    if not THANK_RE.search(text):
        return None
    match = ADDRESSEE_RE.search(text)
    return match.group(0) if match else None


def _sum(_key: Any, values: Sequence[float]) -> float:
    return sum(values)


def _count_distinct(_key: Any, values: Sequence[Any]) -> int:
    return len(set(values))


def _weekly_average(_key: Any, values: Sequence[float]) -> float:
    return sum(values) / WEEKS_PER_YEAR


# ── Mappers ────────────────────────────────────────────────────────────────


def map_month_lines(record: Record) -> list[tuple[datetime, int]]:
    return [(month_only(record.time), 1)]


def map_month_users(record: Record) -> list[tuple[datetime, str]]:
    if record.user is None:
        return []
    return [(month_only(record.time), record.user)]


def map_active_users(record: Record) -> list[tuple[str, int]]:
    if record.user is None:
        return []
    return [(record.user, 1)]


def map_words(record: Record) -> list[tuple[str, int]]:
    return [(token, 1) for token in tokenize(record.text) if is_content_word(token)]


def map_thanked(record: Record) -> list[tuple[str, int]]:
    thanked = get_thanked(record.text)
    if thanked is None:
        return []
    return [(fix_user(thanked), 1)]


def map_weekday_lines(record: Record) -> list[tuple[int, int]]:
    return [(record.time.isoweekday(), 1)]


# ── Catalog ────────────────────────────────────────────────────────────────

NUMLINES = Job(
    name="lines",
    mapper=map_month_lines,
    reducer=_sum,
    outfile="lines",
    kind=OutputKind.CHART,
    title="Lines/Month",
    x_label="Month",
    y_label="Lines",
    x_format=month_label,
)

NUMUSERS = Job(
    name="users",
    mapper=map_month_users,
    reducer=_count_distinct,
    outfile="users",
    kind=OutputKind.CHART,
    title="Users/Month",
    x_label="Month",
    y_label="Users",
    x_format=month_label,
)

ACTIVE = Job(
    name="active",
    mapper=map_active_users,
    reducer=_sum,
    outfile="active",
    max_results=10,
)

WORDS = Job(
    name="words",
    mapper=map_words,
    reducer=_sum,
    outfile="words",
    max_results=100,
)

THANKED = Job(
    name="thanked",
    mapper=map_thanked,
    reducer=_sum,
    outfile="thanked",
    max_results=100,
)

DAYLOGS = Job(
    name="daylogs",
    mapper=map_weekday_lines,
    reducer=_weekly_average,
    outfile="daylogs",
    kind=OutputKind.CHART,
    title="Lines/Day",
    x_label="Day",
    y_label="Lines (average)",
    x_format=weekday_label,
)

JOBS: list[Job] = [NUMLINES, NUMUSERS, ACTIVE, WORDS, THANKED, DAYLOGS]


def get_job(name: str) -> Job:
    """Look up a built-in job by name.

    Raises:
        KeyError: If no job has that name.
    """
    for job in JOBS:
        if job.name == name:
            return job
    msg = f"Unknown job: {name!r}. Available: {[j.name for j in JOBS]}"
    raise KeyError(msg)


def select_jobs(names: Sequence[str] | None = None) -> list[Job]:
    """Return the named jobs in catalog order, or every job when *names* is empty."""
    if not names:
        return list(JOBS)
    wanted = [get_job(n) for n in names]
    return [job for job in JOBS if job in wanted]
