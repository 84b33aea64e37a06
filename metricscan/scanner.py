"""String-, paren- and brace-aware cursor primitives over raw source text.

Every helper makes a single left-to-right pass and never raises on
malformed input: an unbalanced call yields no arguments and an unmatched
brace yields ``-1``, so the caller can keep scanning the rest of the file.
"""

from __future__ import annotations


OPENERS = "([{"
CLOSERS = ")]}"


def extract_arguments(text: str, open_paren: int) -> list[str]:
    """Return the top-level arguments of the call whose ``(`` is at *open_paren*.

    Nested parentheses, brackets, braces and double-quoted strings are kept
    intact inside the argument they belong to. Arguments are stripped; an
    empty trailing argument (``f(a, )`` or ``f()``) is dropped.
    """
    if open_paren < 0 or open_paren >= len(text) or text[open_paren] != "(":
        return []

    depth = 0
    in_string = False
    escaped = False
    args: list[str] = []
    current: list[str] = []

    for char in text[open_paren:]:
        if escaped:
            current.append(char)
            escaped = False
            continue

        if in_string:
            current.append(char)
            if char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
            current.append(char)
        elif char in OPENERS:
            depth += 1
            if depth > 1:
                current.append(char)
        elif char in CLOSERS:
            depth -= 1
            if depth == 0:
                last = "".join(current).strip()
                if last:
                    args.append(last)
                return args
            current.append(char)
        elif char == "," and depth == 1:
            args.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    # Ran off the end of the text without closing the call.
    return []


def find_matching_brace(text: str, open_brace: int) -> int:
    """Return the index of the ``}`` matching the ``{`` at *open_brace*, or -1."""
    if open_brace < 0 or open_brace >= len(text) or text[open_brace] != "{":
        return -1

    depth = 0
    in_string = False
    in_line_comment = False
    in_block_comment = False
    escaped = False
    length = len(text)

    i = open_brace
    while i < length:
        char = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if in_line_comment:
            if char == "\n":
                in_line_comment = False
            i += 1
            continue

        if in_block_comment:
            if char == "*" and nxt == "/":
                in_block_comment = False
                i += 2
                continue
            i += 1
            continue

        if escaped:
            escaped = False
            i += 1
            continue

        if in_string:
            if char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == "/" and nxt == "/":
            in_line_comment = True
            i += 2
            continue
        if char == "/" and nxt == "*":
            in_block_comment = True
            i += 2
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1

    return -1


def split_top_level(text: str) -> list[str]:
    """Split *text* on commas that are not nested in brackets or strings."""
    result: list[str] = []
    depth = 0
    in_string = False
    escaped = False
    current: list[str] = []

    for char in text:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if in_string:
            current.append(char)
            if char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
            current.append(char)
        elif char in OPENERS:
            depth += 1
            current.append(char)
        elif char in CLOSERS:
            depth -= 1
            current.append(char)
        elif char == "," and depth == 0:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    last = "".join(current).strip()
    if last:
        result.append(last)
    return result
