"""End-to-end pipeline for building the metrics-and-events report from source roots."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from .analyzer import analyze_source
from .config import ScanConfig, resolve_scan_config
from .file_walker import iter_source_files, read_sources
from .logging_config import setup_logging
from .models import AnalysisResult, SourceText
from .overrides import OverridesError, load_overrides_file, merge_overrides, parse_overrides
from .report import Catalog, catalog_to_dict, merge_results, render_csv, save_report, unresolved_warnings


logger = logging.getLogger(__name__)

STDOUT = "-"


def analyze_files(
    sources: Iterable[SourceText],
    overrides: Mapping[str, str] | None = None,
    workers: int = 1,
) -> list[AnalysisResult]:
    """Analyze each source; results keep the input order for any worker count."""
    overrides = dict(overrides or {})
    if workers <= 1:
        return [analyze_source(source, overrides) for source in sources]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda source: analyze_source(source, overrides), sources))


def collect_files(
    roots: Sequence[str | Path],
    extensions: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
    max_files: int | None = None,
) -> list[str]:
    files: list[str] = []
    for root in roots:
        root_path = Path(root)
        if not root_path.is_dir():
            logger.warning("Source root %s is not a directory, skipping", root_path)
            continue
        files.extend(iter_source_files(root_path, extensions=extensions, excludes=excludes))
    if max_files is not None:
        files = files[:max_files]
    return files


def build_report_from_roots(
    roots: Sequence[str | Path],
    output_path: str | Path | None = None,
    overrides: Mapping[str, str] | None = None,
    config: ScanConfig | None = None,
    max_files: int | None = None,
) -> Catalog:
    config = config or ScanConfig()
    files = collect_files(roots, config.extensions, config.excludes, max_files)
    results = analyze_files(read_sources(files), overrides, workers=config.workers)
    catalog = merge_results(results)

    for line in unresolved_warnings(catalog):
        logger.warning(line)

    if output_path:
        output = save_report(catalog, output_path)
        logger.info(
            "Metrics report generated: %s (%d meters, %d events)",
            output.resolve(),
            len(catalog.meters),
            len(catalog.events),
        )
    return catalog


def _build_parser(config: ScanConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metricscan",
        description="Catalog meter and event declarations found in Kotlin sources",
    )
    parser.add_argument("roots", nargs="+", help="Source directories to scan")
    parser.add_argument(
        "--output",
        default=config.report_path,
        help=f"Report path, or - for stdout (default: {config.report_path})",
    )
    parser.add_argument(
        "--format",
        choices=["csv", "json"],
        default="csv",
        help="Output format",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="CLASS.VAR=VALUE",
        help="Value for a variable that cannot be resolved from source (repeatable)",
    )
    parser.add_argument(
        "--overrides-file",
        default=config.overrides_file,
        help="JSON object of ClassName.variableName -> value",
    )
    parser.add_argument(
        "--extension",
        action="append",
        default=None,
        help="Source file extension to scan (repeatable, default .kt)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=config.workers,
        help="Number of files analyzed in parallel",
    )
    parser.add_argument(
        "--max-files",
        type=int,
        default=None,
        help="Limit number of files analyzed (for quick checks)",
    )
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    env_config = resolve_scan_config()
    args = _build_parser(env_config).parse_args(argv)
    setup_logging(args.log_level)

    try:
        file_overrides = load_overrides_file(args.overrides_file) if args.overrides_file else {}
        overrides = merge_overrides(file_overrides, parse_overrides(args.override))
    except (OverridesError, OSError) as exc:
        logger.error("%s", exc)
        return 2

    config = ScanConfig(
        extensions=tuple(args.extension) if args.extension else env_config.extensions,
        excludes=env_config.excludes,
        workers=max(1, args.workers),
        log_level=args.log_level,
        overrides_file=args.overrides_file,
        report_path=env_config.report_path,
    )

    to_stdout = args.output == STDOUT
    if args.format == "csv" and not to_stdout:
        build_report_from_roots(args.roots, args.output, overrides, config, args.max_files)
        return 0

    catalog = build_report_from_roots(args.roots, None, overrides, config, args.max_files)
    if args.format == "json":
        rendered = json.dumps(catalog_to_dict(catalog), indent=2)
    else:
        rendered = render_csv(catalog)

    if to_stdout:
        sys.stdout.write(rendered)
    else:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered, encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
