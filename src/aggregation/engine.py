"""Generic two-stage map-reduce over an in-memory record collection.

Stages:
- map: ``job.mapper`` per record, concurrently; all emitted pairs flattened.
- group: single-threaded fold of pairs into ``key -> [values]``.
- reduce: ``job.reducer(key, values)`` per key, concurrently.

The engine knows nothing about individual jobs.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Hashable, Iterable, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any

from src.aggregation.models import Job, Mapper, Reducer
from src.errors import JobExecutionError
from src.ingestion.models import Record

logger = logging.getLogger(__name__)


def map_stage(
    mapper: Mapper,
    records: Iterable[Record],
    executor: Executor,
) -> list[tuple[Hashable, Any]]:
    """Apply *mapper* to every record and flatten the emitted pairs."""
    pairs: list[tuple[Hashable, Any]] = []
    for emitted in executor.map(lambda r: list(mapper(r)), records):
        pairs.extend(emitted)
    return pairs


def group_stage(pairs: Iterable[tuple[Hashable, Any]]) -> dict[Hashable, list[Any]]:
    """Collect values by key: ``[(k1, v1), (k1, v2), (k2, v3)]`` -> ``{k1: [v1, v2], k2: [v3]}``."""
    grouped: dict[Hashable, list[Any]] = defaultdict(list)
    for key, value in pairs:
        grouped[key].append(value)
    return dict(grouped)


def reduce_stage(
    reducer: Reducer,
    grouped: dict[Hashable, Sequence[Any]],
    executor: Executor,
) -> dict[Hashable, Any]:
    """Collapse each key's value list with *reducer*."""
    keys = list(grouped)
    values = executor.map(lambda k: reducer(k, grouped[k]), keys)
    return dict(zip(keys, values, strict=True))


def run(
    job: Job,
    records: Sequence[Record],
    max_workers: int | None = None,
    executor: Executor | None = None,
) -> dict[Hashable, Any]:
    """Run *job* over *records* and return the ``key -> scalar`` result.

    Args:
        job: Job to execute.
        records: Shared, read-only record collection.
        max_workers: Pool size when no *executor* is supplied.
        executor: Optional executor to reuse; it is not shut down here.

    Returns:
        Mapping from each emitted key to its reduced value.

    Raises:
        JobExecutionError: If any mapper or reducer call raises. No partial
            result is returned.
    """
    if executor is None:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return run(job, records, executor=pool)

    try:
        pairs = map_stage(job.mapper, records, executor)
    except Exception as exc:
        raise JobExecutionError(job.name, "map", exc) from exc

    grouped = group_stage(pairs)

    try:
        result = reduce_stage(job.reducer, grouped, executor)
    except Exception as exc:
        raise JobExecutionError(job.name, "reduce", exc) from exc

    logger.info(
        "Job %s: %d records -> %d pairs -> %d keys",
        job.name,
        len(records),
        len(pairs),
        len(result),
    )
    return result
