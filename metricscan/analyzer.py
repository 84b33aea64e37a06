"""Detect meter and event declarations in Kotlin source text.

Plugins instrument their steps through two receivers: a meter registry
(``meterRegistry`` / ``CampaignMeterRegistry``) and an events logger
(``eventsLogger`` / ``EventsLogger``). Calls are recognized in three shapes::

    meterRegistry?.counter(scenarioName, stepName, "$meterPrefix-records", tags)

    meterRegistry?.apply {
        timer(scenarioName, stepName, "${meterPrefix}-time-to-response", tags)
    }

    eventsLogger?.also { logger ->
        logger.info("$eventPrefix.received", recordsCount, tags = tags)
    }

Each file is scanned twice per receiver: once for direct calls and once for
calls inside scope blocks. The offset of every processed ``(`` is claimed so
that a call reachable by both passes, or by nested blocks, yields one entry.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Mapping

from .arguments import event_arguments, meter_name_argument
from .models import (
    EVENT_SEVERITIES,
    METER_KINDS,
    NO_VALUE,
    AnalysisResult,
    CallRecord,
    EventEntry,
    MeterEntry,
    SourceText,
)
from .scanner import extract_arguments
from .scopes import find_scope_regions
from .symbols import build_symbol_table
from .templates import resolve_template
from .value_types import classify_value


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Receiver:
    variable: str
    type_name: str
    methods: frozenset[str]

    def used_in(self, text: str) -> bool:
        return self.variable in text or self.type_name in text


METER_RECEIVER = Receiver("meterRegistry", "CampaignMeterRegistry", METER_KINDS)
EVENT_RECEIVER = Receiver("eventsLogger", "EventsLogger", EVENT_SEVERITIES)


def receiver_call_pattern(receiver: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(receiver)}\??\.(\w+)\s*\(")


def bare_call_pattern(methods: frozenset[str]) -> re.Pattern[str]:
    return re.compile(rf"\b({'|'.join(sorted(methods))})\s*\(")


def analyze(
    file_identifier: str,
    file_text: str,
    overrides: Mapping[str, str] | None = None,
) -> AnalysisResult:
    """Extract all meters and events declared in one source file.

    *overrides* maps ``ClassName.variable`` to a literal value; entries for
    this file's class name (the identifier without extension) replace the
    values of same-named declarations, or supply values for variables the
    file never declares.
    """
    return analyze_source(SourceText(path=file_identifier, text=file_text), overrides)


def analyze_source(source: SourceText, overrides: Mapping[str, str] | None = None) -> AnalysisResult:
    text = source.text
    has_meters = METER_RECEIVER.used_in(text)
    has_events = EVENT_RECEIVER.used_in(text)
    if not has_meters and not has_events:
        return AnalysisResult()

    variables = build_symbol_table(source, overrides)

    meters = list(find_meters(text, source.identifier, variables)) if has_meters else []
    events = list(find_events(text, source.identifier, variables)) if has_events else []
    logger.debug(
        "Analyzed %s: %d meters, %d events", source.identifier, len(meters), len(events)
    )
    return AnalysisResult(meters=meters, events=events)


def find_calls(text: str, receiver: Receiver) -> Iterator[CallRecord]:
    """Yield every call of a recognized method on *receiver*, once per call site."""
    claimed: set[int] = set()

    for match in receiver_call_pattern(receiver.variable).finditer(text):
        method = match.group(1)
        if method not in receiver.methods:
            continue
        open_paren = match.end() - 1
        claimed.add(open_paren)
        yield CallRecord(method, open_paren, tuple(extract_arguments(text, open_paren)))

    for region in find_scope_regions(text, receiver.variable):
        if region.implicit_receiver:
            pattern = bare_call_pattern(receiver.methods)
        else:
            pattern = receiver_call_pattern(region.parameter_name)

        for match in pattern.finditer(text, region.open, region.close + 1):
            method = match.group(1)
            if method not in receiver.methods:
                continue
            open_paren = match.end() - 1
            if open_paren in claimed:
                continue
            claimed.add(open_paren)
            yield CallRecord(method, open_paren, tuple(extract_arguments(text, open_paren)))


def find_meters(text: str, source_file: str, variables: Mapping[str, str]) -> Iterator[MeterEntry]:
    for call in find_calls(text, METER_RECEIVER):
        name_expression = meter_name_argument(call.arguments)
        if name_expression is None:
            logger.debug("Skipping %s call at %s:%d without a name", call.method, source_file, call.open_paren)
            continue
        name, resolved = resolve_template(name_expression, variables)
        yield MeterEntry(name=name, kind=call.method, source_file=source_file, resolved=resolved)


def find_events(text: str, source_file: str, variables: Mapping[str, str]) -> Iterator[EventEntry]:
    for call in find_calls(text, EVENT_RECEIVER):
        parsed = event_arguments(call.arguments)
        if parsed is None:
            logger.debug("Skipping %s call at %s:%d without a name", call.method, source_file, call.open_paren)
            continue
        name_expression, value_expression = parsed
        name, resolved = resolve_template(name_expression, variables)
        value_type = classify_value(value_expression) if value_expression is not None else NO_VALUE
        yield EventEntry(
            name=name,
            severity=call.method,
            value_type=value_type,
            source_file=source_file,
            resolved=resolved,
        )
