"""Environment-driven scan settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .file_walker import DEFAULT_EXCLUDES, DEFAULT_EXTENSIONS


DEFAULT_REPORT_PATH = "META-INF/services/qalipsis/metrics-and-events.csv"


@dataclass(frozen=True)
class ScanConfig:
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    excludes: tuple[str, ...] = tuple(sorted(DEFAULT_EXCLUDES))
    workers: int = 1
    log_level: str = "INFO"
    overrides_file: str | None = None
    report_path: str = DEFAULT_REPORT_PATH


def _split_list(raw: str | None) -> tuple[str, ...] | None:
    if raw is None:
        return None
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def resolve_scan_config() -> ScanConfig:
    defaults = ScanConfig()
    return ScanConfig(
        extensions=_split_list(os.getenv("METRICSCAN_EXTENSIONS")) or defaults.extensions,
        excludes=_split_list(os.getenv("METRICSCAN_EXCLUDES")) or defaults.excludes,
        workers=_read_int("METRICSCAN_WORKERS", defaults.workers),
        log_level=os.getenv("METRICSCAN_LOG_LEVEL") or defaults.log_level,
        overrides_file=os.getenv("METRICSCAN_OVERRIDES_FILE") or None,
        report_path=os.getenv("METRICSCAN_REPORT_PATH") or defaults.report_path,
    )
