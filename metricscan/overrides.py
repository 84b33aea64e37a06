"""Manual values for template variables the analyzer cannot resolve from source.

Keys use the ``ClassName.variableName`` format, where ``ClassName`` is the
source file name without its extension::

    RedisLettucePollStepNewImpl.redisMethod=scan
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping


class OverridesError(ValueError):
    pass


def validate_key(key: str) -> str:
    key = key.strip()
    class_name, sep, variable = key.partition(".")
    if not sep or not class_name or not variable:
        raise OverridesError(f"Override key must look like ClassName.variableName, got {key!r}")
    return key


def parse_override(item: str) -> tuple[str, str]:
    key, sep, value = item.partition("=")
    if not sep:
        raise OverridesError(f"Override must look like ClassName.variableName=value, got {item!r}")
    return validate_key(key), value


def parse_overrides(items: list[str] | None) -> dict[str, str]:
    return dict(parse_override(item) for item in items or [])


def load_overrides_file(path: str | Path) -> dict[str, str]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise OverridesError(f"Overrides file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise OverridesError(f"Overrides file {path} must contain a JSON object")
    overrides: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, str):
            raise OverridesError(f"Override {key!r} in {path} must be a string")
        overrides[validate_key(key)] = value
    return overrides


def merge_overrides(*maps: Mapping[str, str] | None) -> dict[str, str]:
    merged: dict[str, str] = {}
    for mapping in maps:
        if mapping:
            merged.update(mapping)
    return merged
