import io
import json
import zipfile
from pathlib import Path

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from metricscan.api import _unpack_sources, app, archive_url


SOURCE = """
class MyStep(private val redisMethod: String) {
    private val meterPrefix = "redis-poll-$redisMethod"
    fun start() {
        meterRegistry?.counter(scenarioName, stepName, "$meterPrefix-records", tags)
        eventsLogger?.warn("redis.poll.failure", e, tags = tags)
    }
}
"""


def _make_zip_bytes() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("repo/src/main/kotlin/MyStep.kt", SOURCE)
    return buffer.getvalue()


def test_health() -> None:
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "ok"}


def test_analyze_endpoint() -> None:
    client = TestClient(app)
    response = client.post(
        "/analyze",
        json={"file_name": "MyStep.kt", "text": SOURCE, "overrides": {"MyStep.redisMethod": "scan"}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["meters"] == [
        {"name": "redis-poll-scan-records", "kind": "counter", "source_file": "MyStep.kt", "resolved": True}
    ]
    assert data["events"][0]["value_type"] == "Throwable"


def test_report_endpoint_json() -> None:
    client = TestClient(app)
    response = client.post(
        "/report?max_files=5",
        files={"file": ("repo.zip", _make_zip_bytes(), "application/zip")},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["unresolved"] == 1
    assert data["meters"][0]["name"] == "redis-poll-$redisMethod-records"


def test_report_endpoint_csv_with_overrides() -> None:
    client = TestClient(app)
    overrides = json.dumps({"MyStep.redisMethod": "scan"})
    response = client.post(
        "/report",
        params={"format": "csv", "overrides": overrides},
        files={"file": ("repo.zip", _make_zip_bytes(), "application/zip")},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "meter,redis-poll-scan-records,counter,,,MyStep.kt" in response.text


def test_report_rejects_non_zip() -> None:
    client = TestClient(app)
    response = client.post(
        "/report",
        files={"file": ("repo.txt", b"not zip", "text/plain")},
    )
    assert response.status_code == 400


def test_report_rejects_bad_overrides() -> None:
    client = TestClient(app)
    response = client.post(
        "/report",
        params={"overrides": "[1]"},
        files={"file": ("repo.zip", _make_zip_bytes(), "application/zip")},
    )
    assert response.status_code == 400


def test_report_requires_input() -> None:
    client = TestClient(app)
    response = client.post("/report")
    assert response.status_code == 400


def test_report_repo_url(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(app)
    zip_bytes = _make_zip_bytes()
    requested: list[str] = []

    class FakeResponse:
        status_code = 200
        content = zip_bytes

    def fake_get(url: str, timeout: float = 60.0, **_kwargs) -> FakeResponse:
        requested.append(url)
        return FakeResponse()

    monkeypatch.setattr("metricscan.api.httpx.get", fake_get)

    response = client.post("/report?repo_url=https://github.com/qalipsis/qalipsis-plugin-redis")
    assert response.status_code == 200
    assert response.json()["meters"]
    assert requested == ["https://github.com/qalipsis/qalipsis-plugin-redis/archive/HEAD.zip"]


def test_report_repo_url_download_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(app)

    class NotFound:
        status_code = 404
        content = b""

    monkeypatch.setattr("metricscan.api.httpx.get", lambda url, **_kwargs: NotFound())

    response = client.post("/report?repo_url=https://github.com/qalipsis/missing")
    assert response.status_code == 400
    assert "status 404" in response.json()["detail"]


@pytest.mark.parametrize(
    ("repo_url", "expected"),
    [
        ("https://github.com/owner/repo", "https://github.com/owner/repo/archive/HEAD.zip"),
        ("https://github.com/owner/repo.git", "https://github.com/owner/repo/archive/HEAD.zip"),
        (
            "https://github.com/owner/repo/tree/release/1.0",
            "https://github.com/owner/repo/archive/release/1.0.zip",
        ),
        ("https://example.com/snapshots/repo.zip", "https://example.com/snapshots/repo.zip"),
    ],
)
def test_archive_url(repo_url: str, expected: str) -> None:
    assert archive_url(repo_url) == expected


@pytest.mark.parametrize(
    "repo_url",
    ["ftp://github.com/owner/repo", "https://gitlab.com/owner/repo", "https://github.com/owner"],
)
def test_archive_url_rejects(repo_url: str) -> None:
    with pytest.raises(HTTPException):
        archive_url(repo_url)


def test_unpack_sources_skips_other_files(tmp_path: Path) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("repo-main/src/MyStep.kt", SOURCE)
        archive.writestr("repo-main/README.md", "# readme")
        archive.writestr("repo-main/build.gradle.kts", "plugins {}")

    root = _unpack_sources(buffer.getvalue(), tmp_path, ["kt"])

    assert root == tmp_path / "repo-main"
    assert [path.name for path in root.rglob("*") if path.is_file()] == ["MyStep.kt"]
