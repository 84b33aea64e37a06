"""Map raw call arguments to name and value expressions."""

from __future__ import annotations

from typing import Sequence


METER_POSITIONAL_ARITY = 4
METER_NAME_INDEX = 2


def named_argument(arg: str, key: str) -> str | None:
    """Return the right-hand side of ``key = expr``, or None for any other argument."""
    stripped = arg.lstrip()
    if not stripped.startswith(key):
        return None
    rest = stripped[len(key):].lstrip()
    # `name == x` is a comparison, not a named argument.
    if not rest.startswith("=") or rest.startswith("=="):
        return None
    return rest[1:].strip()


def _find_named(args: Sequence[str], key: str) -> str | None:
    for arg in args:
        value = named_argument(arg, key)
        if value is not None:
            return value
    return None


def meter_name_argument(args: Sequence[str]) -> str | None:
    """Pick the name expression of a meter call.

    Supported shapes::

        counter(scenarioName, stepName, "name", tags)
        timer(scenarioName = "", stepName = "", name = NAME, tags = tags)
        counter(CONSTANT_NAME)
    """
    named = _find_named(args, "name")
    if named is not None:
        return named
    if len(args) >= METER_POSITIONAL_ARITY:
        return args[METER_NAME_INDEX]
    if len(args) == 1:
        return args[0]
    return None


def event_arguments(args: Sequence[str]) -> tuple[str, str | None] | None:
    """Return ``(name_expression, value_expression)`` of an event call.

    ``info("name", value, tags = t)`` gives ``("name", "value")``,
    ``info("name", tags = t)`` gives ``("name", None)`` and
    ``error(name = "n", value = e)`` gives ``("n", "e")``.
    """
    if not args:
        return None

    named = _find_named(args, "name")
    if named is not None:
        return named, _find_named(args, "value")

    value = None
    if len(args) >= 2 and named_argument(args[1], "tags") is None:
        value = args[1]
    return args[0], value
