"""FastAPI service to build the metrics-and-events report from an uploaded repo archive."""

from __future__ import annotations

import argparse
import io
import json
import logging
import zipfile
from dataclasses import asdict
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Iterable
from urllib.parse import urlparse

import httpx
from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from .analyzer import analyze
from .config import resolve_scan_config
from .file_walker import normalize_extension
from .logging_config import setup_logging
from .overrides import OverridesError, validate_key
from .pipeline import build_report_from_roots
from .report import catalog_to_dict, render_csv


logger = logging.getLogger(__name__)

app = FastAPI(title="Metrics Report API")


class AnalyzeRequest(BaseModel):
    file_name: str
    text: str
    overrides: dict[str, str] = Field(default_factory=dict)


def _unpack_sources(zip_bytes: bytes, target_dir: Path, extensions: Iterable[str]) -> Path:
    """Unpack the source files of an archive and return the repository root.

    GitHub archives wrap everything in one ``<repo>-<ref>/`` directory, which
    becomes the root so reported paths start inside the repository.
    """
    if not zip_bytes:
        raise HTTPException(status_code=400, detail="Empty archive.")

    suffixes = tuple(normalize_extension(ext) for ext in extensions)
    try:
        with zipfile.ZipFile(io.BytesIO(zip_bytes)) as archive:
            members = [name for name in archive.namelist() if name.endswith(suffixes)]
            archive.extractall(target_dir, members=members)
    except zipfile.BadZipFile as exc:
        raise HTTPException(status_code=400, detail="Invalid zip archive.") from exc
    logger.info("Unpacked %d source files from archive", len(members))

    entries = list(target_dir.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return target_dir


def archive_url(repo_url: str) -> str:
    """Map a GitHub repository link (optionally ``/tree/<branch>``) to its zip archive."""
    parsed = urlparse(repo_url)
    if parsed.scheme not in {"http", "https"}:
        raise HTTPException(status_code=400, detail="repo_url must be http/https.")
    if parsed.path.lower().endswith(".zip"):
        return repo_url
    if parsed.netloc.lower() not in {"github.com", "www.github.com"}:
        raise HTTPException(status_code=400, detail="repo_url must be a GitHub repo URL or zip link.")

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        raise HTTPException(status_code=400, detail="repo_url must name an owner and a repository.")
    owner, repo = parts[0], parts[1].removesuffix(".git")
    # HEAD follows the default branch.
    ref = "/".join(parts[3:]) if len(parts) > 3 and parts[2] == "tree" else "HEAD"
    return f"https://github.com/{owner}/{repo}/archive/{ref}.zip"


def _download_archive(repo_url: str) -> bytes:
    url = archive_url(repo_url)
    try:
        response = httpx.get(url, timeout=60.0, follow_redirects=True)
    except httpx.RequestError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to reach {url}.") from exc
    if response.status_code != 200:
        raise HTTPException(
            status_code=400,
            detail=f"Failed to download {url} (status {response.status_code}).",
        )
    return response.content


def _parse_overrides_query(raw: str | None) -> dict[str, str]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="overrides must be a JSON object.") from exc
    if not isinstance(data, dict) or not all(isinstance(value, str) for value in data.values()):
        raise HTTPException(status_code=400, detail="overrides must map keys to strings.")
    try:
        return {validate_key(key): value for key, value in data.items()}
    except OverridesError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analyze")
def analyze_file(request: AnalyzeRequest) -> dict:
    result = analyze(request.file_name, request.text, request.overrides)
    return {
        "meters": [asdict(meter) for meter in result.meters],
        "events": [asdict(event) for event in result.events],
    }


@app.post("/report")
def build_report(
    file: UploadFile | None = File(default=None),
    repo_url: str | None = Query(default=None),
    overrides: str | None = Query(default=None),
    format: str = Query(default="json", pattern="^(json|csv)$"),
    max_files: int | None = None,
) -> Response:
    if file is None and not repo_url:
        raise HTTPException(
            status_code=400, detail="Provide either a zip file upload or repo_url."
        )
    override_map = _parse_overrides_query(overrides)
    config = resolve_scan_config()

    with TemporaryDirectory() as temp_dir:
        if repo_url:
            zip_bytes = _download_archive(repo_url)
        else:
            if not file or not file.filename or not file.filename.lower().endswith(".zip"):
                raise HTTPException(status_code=400, detail="Upload a .zip archive.")
            zip_bytes = file.file.read()
        root = _unpack_sources(zip_bytes, Path(temp_dir), config.extensions)
        catalog = build_report_from_roots(
            [root],
            output_path=None,
            overrides=override_map,
            config=config,
            max_files=max_files,
        )

    if format == "csv":
        return Response(content=render_csv(catalog), media_type="text/csv")
    return JSONResponse(content=catalog_to_dict(catalog))


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the metrics report API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host")
    parser.add_argument("--port", type=int, default=9000, help="Bind port")
    args = parser.parse_args()

    setup_logging(resolve_scan_config().log_level)

    import uvicorn

    uvicorn.run("metricscan.api:app", host=args.host, port=args.port, reload=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
