"""Same-file string constant lookup used to resolve name templates."""

from __future__ import annotations

import logging
import re
from typing import Mapping

from .models import SourceText


logger = logging.getLogger(__name__)

# val meterPrefix = "kafka-produce"
# private val eventPrefix: String = "kafka.produce"
# private const val TIMER_NAME = "kafka.events.export"
VARIABLE_DECLARATION = re.compile(
    r'(?:private|protected|internal|public)?\s*(?:const\s+)?val\s+(\w+)(?:\s*:\s*\w+)?\s*=\s*"([^"]*?)"'
)


def extract_variables(text: str) -> dict[str, str]:
    variables: dict[str, str] = {}
    for match in VARIABLE_DECLARATION.finditer(text):
        variables[match.group(1)] = match.group(2)
    return variables


def apply_overrides(
    variables: dict[str, str],
    overrides: Mapping[str, str],
    class_name: str,
) -> dict[str, str]:
    """Inject ``<class_name>.<name>`` overrides into *variables* in place."""
    prefix = f"{class_name}."
    for key, value in overrides.items():
        if not key.startswith(prefix):
            continue
        name = key[len(prefix):]
        if name in variables:
            logger.debug("Override %s replaces declared value %r", key, variables[name])
        variables[name] = value
    return variables


def build_symbol_table(source: SourceText, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    variables = extract_variables(source.text)
    if overrides:
        apply_overrides(variables, overrides, source.class_name)
    return variables
