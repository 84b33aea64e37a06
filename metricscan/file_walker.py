"""File walking utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from .models import SourceText


logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".kt",)
DEFAULT_EXCLUDES = {"build", ".gradle", ".git", ".idea", "out", "node_modules"}


def iter_source_files(
    root: str | Path,
    extensions: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
) -> list[str]:
    root_path = Path(root)
    suffixes = {normalize_extension(ext) for ext in (extensions or DEFAULT_EXTENSIONS)}
    exclude_set = set(DEFAULT_EXCLUDES if excludes is None else excludes)
    matches: list[str] = []

    for path in root_path.rglob("*"):
        if not path.is_file() or path.suffix not in suffixes:
            continue
        if any(part in exclude_set for part in path.relative_to(root_path).parts):
            continue
        matches.append(str(path))

    return sorted(matches)


def read_sources(paths: Iterable[str | Path]) -> Iterator[SourceText]:
    """Yield the text of each path, skipping files that cannot be read."""
    for path in paths:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Skipping unreadable file %s: %s", path, exc)
            continue
        yield SourceText(path=str(path), text=text)


def normalize_extension(extension: str) -> str:
    extension = extension.strip()
    return extension if extension.startswith(".") else f".{extension}"
