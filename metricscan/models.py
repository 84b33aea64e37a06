"""Lightweight data models for extracted meters and events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath


METER_KINDS = frozenset({"counter", "timer", "gauge", "summary", "rate", "throughput"})
EVENT_SEVERITIES = frozenset({"trace", "debug", "info", "warn", "error"})

NO_VALUE = "none"


@dataclass(frozen=True)
class SourceText:
    path: str
    text: str

    @property
    def identifier(self) -> str:
        return PurePath(self.path).name

    @property
    def class_name(self) -> str:
        return PurePath(self.path).stem


class ReceiverMode(Enum):
    IMPLICIT = "implicit"  # apply | run
    PARAMETER = "parameter"  # let | also


@dataclass(frozen=True)
class ScopeRegion:
    open: int
    close: int
    receiver: ReceiverMode
    parameter_name: str

    @property
    def implicit_receiver(self) -> bool:
        return self.receiver is ReceiverMode.IMPLICIT


@dataclass(frozen=True)
class CallRecord:
    method: str
    open_paren: int
    arguments: tuple[str, ...]


@dataclass(frozen=True)
class MeterEntry:
    name: str
    kind: str
    source_file: str
    resolved: bool


@dataclass(frozen=True)
class EventEntry:
    name: str
    severity: str
    value_type: str
    source_file: str
    resolved: bool


@dataclass(frozen=True)
class AnalysisResult:
    meters: list[MeterEntry] = field(default_factory=list)
    events: list[EventEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.meters and not self.events
