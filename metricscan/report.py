"""Merge per-file results into the metrics-and-events catalog and serialize it."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable, TextIO

from .models import AnalysisResult, EventEntry, MeterEntry


REPORT_COLUMNS = ("category", "name", "type", "severity", "value_type", "source_file")

OVERRIDE_HINT = (
    "Supply an override such as --override ClassName.variableName=value "
    "(ClassName is the source file name without its extension)."
)


@dataclass(frozen=True)
class Catalog:
    meters: list[MeterEntry] = field(default_factory=list)
    events: list[EventEntry] = field(default_factory=list)

    @property
    def unresolved_meters(self) -> list[MeterEntry]:
        return [meter for meter in self.meters if not meter.resolved]

    @property
    def unresolved_events(self) -> list[EventEntry]:
        return [event for event in self.events if not event.resolved]


def merge_results(results: Iterable[AnalysisResult]) -> Catalog:
    """Deduplicate and sort entries from many files.

    Meters are unique by (name, kind) and events by (name, severity,
    value_type); the first occurrence in *results* order is kept. Each list
    is then sorted by source file, then name.
    """
    meters: dict[tuple[str, str], MeterEntry] = {}
    events: dict[tuple[str, str, str], EventEntry] = {}

    for result in results:
        for meter in result.meters:
            meters.setdefault((meter.name, meter.kind), meter)
        for event in result.events:
            events.setdefault((event.name, event.severity, event.value_type), event)

    return Catalog(
        meters=sorted(meters.values(), key=lambda entry: (entry.source_file, entry.name)),
        events=sorted(events.values(), key=lambda entry: (entry.source_file, entry.name)),
    )


def report_rows(catalog: Catalog) -> list[tuple[str, ...]]:
    rows: list[tuple[str, ...]] = []
    for meter in catalog.meters:
        rows.append(("meter", meter.name, meter.kind, "", "", meter.source_file))
    for event in catalog.events:
        rows.append(("event", event.name, "", event.severity, event.value_type, event.source_file))
    return rows


def write_csv(catalog: Catalog, stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_COLUMNS)
    writer.writerows(report_rows(catalog))


def render_csv(catalog: Catalog) -> str:
    buffer = io.StringIO()
    write_csv(catalog, buffer)
    return buffer.getvalue()


def save_report(catalog: Catalog, path: str | Path) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8", newline="") as handle:
        write_csv(catalog, handle)
    return output


def catalog_to_dict(catalog: Catalog) -> dict[str, Any]:
    return {
        "meters": [asdict(meter) for meter in catalog.meters],
        "events": [asdict(event) for event in catalog.events],
        "unresolved": len(catalog.unresolved_meters) + len(catalog.unresolved_events),
    }


def unresolved_warnings(catalog: Catalog) -> list[str]:
    """Return warning lines naming every entry whose name kept a template token."""
    meters = catalog.unresolved_meters
    events = catalog.unresolved_events
    if not meters and not events:
        return []

    lines = ["Some entries have unresolved name prefixes.", OVERRIDE_HINT]
    lines.extend(f"  Meter '{meter.name}' in {meter.source_file}" for meter in meters)
    lines.extend(f"  Event '{event.name}' in {event.source_file}" for event in events)
    return lines
