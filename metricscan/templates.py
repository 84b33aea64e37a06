"""Resolution of ``$name`` / ``${name}`` string templates against a symbol table."""

from __future__ import annotations

import re
from typing import Mapping


# Group 1 is the braced form, group 2 the simple form.
TEMPLATE_TOKEN = re.compile(r"\$(?:\{(\w+)\}|(\w+))")
# Any braced expression, including ones that are not a plain name (``${step.name}``).
BRACED_EXPRESSION = re.compile(r"\$\{[^}]*\}")


def unquote(value: str) -> str:
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        return trimmed[1:-1]
    return trimmed


def resolve_template(raw: str, variables: Mapping[str, str]) -> tuple[str, bool]:
    """Resolve a name expression to ``(text, fully_resolved)``.

    A bare identifier (``SOME_CONST``) is looked up and its value resolved in
    turn. A quoted literal has every ``${name}`` and ``$name`` token
    substituted, transitively, in one left-to-right pass, so text that came
    from a variable value is never scanned again. Unknown names stay in the
    output verbatim so the report still shows which variable needs an
    override. Braced expressions that are not a plain name, such as
    ``${context.stepName}``, are kept as written and leave the result
    unresolved.

    A name that is reached again while its own value is being resolved is
    treated as unknown, so cyclic declarations terminate.
    """
    return _resolve(raw, variables, ())


def _resolve(raw: str, variables: Mapping[str, str], chain: tuple[str, ...]) -> tuple[str, bool]:
    stripped = raw.strip()
    if stripped.startswith('"'):
        return _substitute(unquote(stripped), variables, chain)

    if stripped in chain:
        return stripped, False
    value = variables.get(stripped)
    if value is None:
        return stripped, False
    return _substitute(value, variables, (*chain, stripped))


def _substitute(text: str, variables: Mapping[str, str], chain: tuple[str, ...]) -> tuple[str, bool]:
    fully_resolved = True

    def replace(match: re.Match[str]) -> str:
        nonlocal fully_resolved
        name = match.group(1) or match.group(2)
        value = variables.get(name)
        if value is None or name in chain:
            fully_resolved = False
            return match.group(0)
        resolved, ok = _substitute(value, variables, (*chain, name))
        if not ok:
            fully_resolved = False
        return resolved

    result = TEMPLATE_TOKEN.sub(replace, text)
    if fully_resolved and BRACED_EXPRESSION.search(result):
        fully_resolved = False
    return result, fully_resolved
