"""Best-effort classification of an event value expression.

The classifier only looks at the expression text, it does not resolve
types. Rules are evaluated in order and the first match wins:

=============================================  ==============
Expression                                      Label
=============================================  ==============
``arrayOf(a, b)``                               ``Array<A, B>``
``12L``                                         ``Long``
``1.5`` / ``1.5f``                              ``Double``
``12``                                          ``Int``
``"text"``                                      ``String``
``true`` / ``false``                            ``Boolean``
contains ``Duration`` / ``durationSinceNanos``  ``Duration``
ends with ``.size`` / ``.count()``              ``Int``
ends with ``.toDouble()`` etc.                  matching type
ends with ``.message`` / ``.asText()``          ``String``
contains ``timeTo`` / ``TimeTo``                ``Duration``
numeric-looking name (bytes, count, ...)        ``Number``
error-looking name (e, error, ...)              ``Throwable``
anything else                                   ``Object``
=============================================  ==============
"""

from __future__ import annotations

import re

from .scanner import split_top_level


ARRAY_CONSTRUCTOR = "arrayOf("

LONG_LITERAL = re.compile(r"-?\d+L")
DECIMAL_LITERAL = re.compile(r"-?\d+\.\d+f?")
INTEGER_LITERAL = re.compile(r"-?\d+")

DURATION_MARKERS = ("Duration", "durationSinceNanos")
SIZE_ACCESSORS = (".size", ".count()")
CONVERSION_ACCESSORS = (
    (".toDouble()", "Double"),
    (".toInt()", "Int"),
    (".toLong()", "Long"),
)
TEXT_ACCESSORS = (".message", ".asText()")
TIME_KEYWORDS = ("timeTo", "TimeTo")
NUMBER_KEYWORDS = ("bytes", "count", "records", "items", "size", "length", "total", "number")
NUMBER_ACCESSORS = (".contentLength", ".contentLength.toDouble()")


def classify_value(expression: str) -> str:
    trimmed = expression.strip()

    if trimmed.startswith(ARRAY_CONSTRUCTOR):
        return _classify_array(trimmed)
    if LONG_LITERAL.fullmatch(trimmed):
        return "Long"
    if DECIMAL_LITERAL.fullmatch(trimmed):
        return "Double"
    if INTEGER_LITERAL.fullmatch(trimmed):
        return "Int"
    if trimmed.startswith('"'):
        return "String"
    if trimmed in ("true", "false"):
        return "Boolean"
    if any(marker in trimmed for marker in DURATION_MARKERS):
        return "Duration"
    if trimmed.endswith(SIZE_ACCESSORS):
        return "Int"
    for suffix, label in CONVERSION_ACCESSORS:
        if trimmed.endswith(suffix):
            return label
    if trimmed.endswith(TEXT_ACCESSORS):
        return "String"
    if any(keyword in trimmed for keyword in TIME_KEYWORDS):
        return "Duration"
    if looks_like_number(trimmed):
        return "Number"
    if looks_like_throwable(trimmed):
        return "Throwable"
    return "Object"


def _classify_array(expression: str) -> str:
    inner = expression[len(ARRAY_CONSTRUCTOR):]
    if inner.endswith(")"):
        inner = inner[:-1]
    elements = split_top_level(inner)
    if not elements:
        return "Array"
    labels: list[str] = []
    for element in elements:
        label = classify_value(element)
        if label not in labels:
            labels.append(label)
    return f"Array<{', '.join(labels)}>"


def looks_like_number(expression: str) -> bool:
    lower = expression.lower()
    return any(keyword in lower for keyword in NUMBER_KEYWORDS) or expression.endswith(NUMBER_ACCESSORS)


def looks_like_throwable(expression: str) -> bool:
    lower = expression.lower()
    return (
        lower in ("e", "error")
        or "throwable" in lower
        or "exception" in lower
        or lower.endswith("cause")
    )
