"""Tests for API endpoints (log directories are built under tmp_path)."""

from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from src.aggregation.models import Job
from src.api.main import app
from src.ingestion.tokenizer import init_stop_words

client = TestClient(app)

LOG = """<p>21:38 <b>chouser:</b> great, thanks rhickey: clojure rocks</p>
<p>21:39 np</p>
<p>21:40 <b>rhickey:</b> clojure</p>"""


@pytest.fixture
def logs_dir(tmp_path: Path) -> str:
    init_stop_words(["the"])
    (tmp_path / "2010-01-01.html").write_text(LOG, encoding="utf-8")
    return str(tmp_path)


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_list_jobs():
    response = client.get("/api/jobs")
    assert response.status_code == 200
    jobs = {j["name"]: j for j in response.json()}
    assert set(jobs) == {"lines", "users", "active", "words", "thanked", "daylogs"}
    assert jobs["active"]["max_results"] == 10
    assert jobs["daylogs"]["kind"] == "chart"


def test_run_text_job(logs_dir):
    response = client.post("/api/jobs/active/run", json={"logs_dir": logs_dir})
    assert response.status_code == 200
    body = response.json()
    assert body["job"] == "active"
    assert body["num_records"] == 3
    assert body["entries"] == [
        {"key": "chouser", "value": 2},
        {"key": "rhickey", "value": 1},
    ]
    assert body["failures"] == []


def test_run_with_limit(logs_dir):
    response = client.post("/api/jobs/words/run", json={"logs_dir": logs_dir, "limit": 1})
    assert response.status_code == 200
    assert response.json()["entries"] == [{"key": "clojure", "value": 2}]


def test_run_chart_job_labels_keys(logs_dir):
    response = client.post("/api/jobs/daylogs/run", json={"logs_dir": logs_dir})
    assert response.status_code == 200
    # 2010-01-01 was a Friday
    assert response.json()["entries"] == [{"key": "Fri", "value": 3 / 52}]


def test_run_without_body_uses_settings(logs_dir):
    with patch("src.api.routes.jobs.settings") as mock_settings:
        mock_settings.logs_dir = logs_dir
        mock_settings.max_workers = None
        mock_settings.default_top_n = 100
        response = client.post("/api/jobs/lines/run")
    assert response.status_code == 200
    assert response.json()["entries"] == [{"key": "Jan", "value": 3}]


def test_reports_file_failures(logs_dir):
    (Path(logs_dir) / "2010-01-02.html").write_text("<p>garbage</p>", encoding="utf-8")
    response = client.post("/api/jobs/active/run", json={"logs_dir": logs_dir})
    assert response.status_code == 200
    failures = response.json()["failures"]
    assert len(failures) == 1
    assert failures[0]["path"].endswith("2010-01-02.html")


def test_unknown_job_returns_404():
    response = client.post("/api/jobs/nope/run", json={})
    assert response.status_code == 404


def test_missing_logs_dir_returns_404(tmp_path):
    response = client.post("/api/jobs/active/run", json={"logs_dir": str(tmp_path / "missing")})
    assert response.status_code == 404


def test_job_failure_returns_500(logs_dir):
    def explode(record):
        raise RuntimeError("mapper bug")

    broken = Job(name="broken", mapper=explode, reducer=lambda k, vs: 0, outfile="broken")
    with patch("src.api.routes.jobs.get_job", return_value=broken):
        response = client.post("/api/jobs/broken/run", json={"logs_dir": logs_dir})
    assert response.status_code == 500
    assert "broken" in response.json()["detail"]


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_rejected(logs_dir, limit):
    response = client.post("/api/jobs/active/run", json={"logs_dir": logs_dir, "limit": limit})
    assert response.status_code == 422
