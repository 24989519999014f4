"""Log-line parsing: ``HH:MM`` offsets, speaker names and carry-forward attribution."""

from __future__ import annotations

import os
import re
from datetime import datetime, timedelta

import bs4

from src.errors import InvalidFilenameError, MalformedLineError
from src.ingestion.markup import first_bold_span, plain_text
from src.ingestion.models import Record

DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
ENTRY_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?!\d)(.*)$", re.DOTALL)


def fix_user(user: str) -> str:
    """Strip the trailing colon convention from a speaker name.

    ``"chouser: "`` -> ``"chouser"``
    """
    return user.strip().removesuffix(":").strip()


def logfile_day(path: str | os.PathLike[str]) -> datetime:
    """Return midnight of the day named in a log filename.

    ``"logs/2010-01-01.html"`` -> ``datetime(2010, 1, 1)``

    Raises:
        InvalidFilenameError: If the filename carries no valid ``YYYY-MM-DD``.
    """
    name = os.path.basename(os.fspath(path))
    match = DATE_RE.search(name)
    if match is None:
        raise InvalidFilenameError(os.fspath(path))
    year, month, day = (int(g) for g in match.groups())
    try:
        return datetime(year, month, day)
    except ValueError as exc:
        raise InvalidFilenameError(os.fspath(path)) from exc


def parse_entry_text(text: str) -> tuple[int, int, str]:
    """Split a log entry into its offset and remainder.

    ``"21:38 chouser: great, thanks!"`` -> ``(21, 38, " chouser: great, thanks!")``

    Raises:
        MalformedLineError: If *text* does not start with a valid ``HH:MM``.
    """
    match = ENTRY_RE.match(text)
    if match is None:
        raise MalformedLineError(text)
    hour, minute, rest = match.groups()
    if int(hour) > 23 or int(minute) > 59:
        raise MalformedLineError(text)
    return int(hour), int(minute), rest


def add_time(day: datetime, hour: int, minute: int) -> datetime:
    return day + timedelta(minutes=hour * 60 + minute)


def parse_line(day: datetime, previous: Record | None, node: bs4.Tag) -> Record:
    """Turn one ``<p>`` log entry into a :class:`Record`.

    A bold span marks an explicit speaker and resets the current speaker.
    Entries without one inherit ``previous.user`` (``None`` for the first
    entry of a file).
    """
    bold = first_bold_span(node)
    hour, minute, rest = parse_entry_text(plain_text(node))

    if bold is not None:
        raw_user = plain_text(bold)
        # The remainder still starts with the speaker span; drop that many characters
        text = rest.lstrip()[len(raw_user.strip()) :]
        user: str | None = fix_user(raw_user)
    else:
        text = rest
        user = previous.user if previous is not None else None

    return Record(time=add_time(day, hour, minute), text=text.strip(), user=user)
