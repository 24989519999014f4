"""Log-directory ingestion: list files -> parse each file sequentially -> merge.

Files are independent of one another and are ingested concurrently; the
entries inside one file are parsed strictly in order because each entry may
inherit its speaker from the one before it.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path

from src.errors import ChatlogError, MalformedLineError
from src.ingestion.markup import find_log_entries, parse_document
from src.ingestion.models import IngestionFailure, IngestionReport, Record
from src.ingestion.parsers import DATE_RE, logfile_day, parse_line

logger = logging.getLogger(__name__)


def list_log_files(root: str | os.PathLike[str]) -> list[Path]:
    """Return files directly under *root* whose names contain ``YYYY-MM-DD``, sorted by name."""
    root_path = Path(root)
    return sorted(p for p in root_path.iterdir() if p.is_file() and DATE_RE.search(p.name))


def parse_logfile(content: str, day: datetime, path: str | None = None) -> list[Record]:
    """Fold :func:`parse_line` over every log entry in *content*, in document order.

    Raises:
        MalformedLineError: On the first entry without an ``HH:MM`` offset;
            no records are returned for the file.
    """
    records: list[Record] = []
    previous: Record | None = None
    for node in find_log_entries(parse_document(content)):
        try:
            previous = parse_line(day, previous, node)
        except MalformedLineError as exc:
            raise MalformedLineError(exc.line, path) from exc
        records.append(previous)
    return records


def ingest_file(path: str | os.PathLike[str]) -> list[Record]:
    """Parse one log file into records.

    Raises:
        InvalidFilenameError: If the filename carries no ``YYYY-MM-DD`` day.
        MalformedLineError: If any entry lacks an ``HH:MM`` offset.
    """
    day = logfile_day(path)
    with open(path, encoding="utf-8", errors="replace") as f:
        content = f.read()
    records = parse_logfile(content, day, path=os.fspath(path))
    logger.debug("Parsed %d records from %s", len(records), path)
    return records


def ingest_all(
    root: str | os.PathLike[str],
    max_workers: int | None = None,
) -> IngestionReport:
    """Ingest every log file under *root* concurrently.

    A file that fails to parse contributes no records; its error is recorded
    in ``report.failures`` and the remaining files are still ingested.

    Args:
        root: Directory holding ``YYYY-MM-DD`` log files.
        max_workers: Thread-pool size (``None`` for the executor default).

    Returns:
        :class:`IngestionReport` with the concatenated records of every
        successfully parsed file. Cross-file order is not significant.
    """
    files = list_log_files(root)
    report = IngestionReport(files_read=len(files))
    if not files:
        logger.warning("No log files found under %s", root)
        return report

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_path = {executor.submit(ingest_file, path): path for path in files}

        for future in as_completed(future_to_path):
            path = future_to_path[future]
            try:
                report.records.extend(future.result())
            except (ChatlogError, OSError) as exc:
                logger.error("Ingestion failed for %s: %s", path, exc)
                report.failures.append(IngestionFailure(path=str(path), error=exc))

    logger.info(
        "Ingested %d records from %d files (%d failed)",
        len(report.records),
        len(files),
        len(report.failures),
    )
    return report
