"""Tests for report rendering."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

from src.aggregation.jobs import ACTIVE, DAYLOGS, NUMLINES, WORDS
from src.aggregation.models import Job
from src.reporting.render import gen_text, outfile, render_job, top_entries


def _job(**overrides) -> Job:
    defaults = {
        "name": "counts",
        "mapper": lambda r: [],
        "reducer": lambda k, vs: sum(vs),
        "outfile": "counts",
    }
    defaults.update(overrides)
    return Job(**defaults)


class TestOutfile:
    def test_text_job(self) -> None:
        assert outfile(ACTIVE) == os.path.join("charts", "active.txt")

    def test_chart_job(self) -> None:
        assert outfile(DAYLOGS, "out") == os.path.join("out", "daylogs.png")


class TestTopEntries:
    def test_sorted_descending_ties_by_key(self) -> None:
        result = {"b": 1, "c": 4, "a": 4, "d": 2}
        assert top_entries(result) == [("a", 4), ("c", 4), ("d", 2), ("b", 1)]

    def test_limit(self) -> None:
        assert top_entries({"a": 1, "b": 2, "c": 3}, 2) == [("c", 3), ("b", 2)]


class TestGenText:
    def test_listing(self) -> None:
        assert gen_text({"a": 4, "b": 1, "c": 4}, ACTIVE) == "a: 4\nc: 4\nb: 1\n"

    def test_capped_at_job_max(self) -> None:
        result = {f"user{i:02d}": i for i in range(20)}
        lines = gen_text(result, ACTIVE).splitlines()
        assert len(lines) == 10
        assert lines[0] == "user19: 19"

    def test_default_cap(self) -> None:
        result = {f"w{i}": 1 for i in range(8)}
        assert len(gen_text(result, _job(), default_top_n=5).splitlines()) == 5

    def test_whole_floats_print_as_ints(self) -> None:
        assert gen_text({"a": 2.0, "b": 0.5}, _job()) == "a: 2\nb: 0.5\n"

    def test_empty_result(self) -> None:
        assert gen_text({}, WORDS) == ""


class TestRenderJob:
    def test_writes_text_report(self, tmp_path: Path) -> None:
        path = render_job({"chouser": 3, "rhickey": 5}, ACTIVE, str(tmp_path / "charts"))
        assert path == str(tmp_path / "charts" / "active.txt")
        assert Path(path).read_text(encoding="utf-8") == "rhickey: 5\nchouser: 3\n"

    def test_writes_chart(self, tmp_path: Path) -> None:
        result = {1: 2.5, 5: 1.0, 3: 0.25}
        path = render_job(result, DAYLOGS, str(tmp_path))
        assert path.endswith("daylogs.png")
        data = Path(path).read_bytes()
        assert data[:8] == b"\x89PNG\r\n\x1a\n"

    def test_writes_month_chart(self, tmp_path: Path) -> None:
        result = {datetime(2010, 2, 1): 10, datetime(2010, 1, 1): 4}
        path = render_job(result, NUMLINES, str(tmp_path))
        assert os.path.getsize(path) > 0
