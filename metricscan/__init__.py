"""Static catalog of meter and event declarations in Kotlin sources."""

from .analyzer import analyze, analyze_source
from .file_walker import iter_source_files, read_sources
from .models import AnalysisResult, EventEntry, MeterEntry, SourceText
from .report import Catalog, merge_results, render_csv, save_report

__all__ = [
    "AnalysisResult",
    "Catalog",
    "EventEntry",
    "MeterEntry",
    "SourceText",
    "analyze",
    "analyze_source",
    "iter_source_files",
    "merge_results",
    "read_sources",
    "render_csv",
    "save_report",
]
