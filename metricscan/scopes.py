"""Scope-function block detection (``apply``/``run``/``let``/``also``) on a receiver."""

from __future__ import annotations

import re

from .models import ReceiverMode, ScopeRegion
from .scanner import find_matching_brace


# Inside these blocks the receiver is ``this``, so calls appear bare.
IMPLICIT_RECEIVER_SCOPES = ("apply", "run")
# Inside these blocks the receiver is a lambda parameter (``it`` or named).
PARAMETER_RECEIVER_SCOPES = ("let", "also")

DEFAULT_PARAMETER = "it"
IMPLICIT_PARAMETER = "this"
LAMBDA_PARAMETER_WINDOW = 100

_IDENTIFIER = re.compile(r"\w+")


def scope_block_pattern(receiver: str) -> re.Pattern[str]:
    scopes = "|".join(IMPLICIT_RECEIVER_SCOPES + PARAMETER_RECEIVER_SCOPES)
    return re.compile(rf"\b{re.escape(receiver)}\??\.\s*({scopes})\s*\{{")


def find_scope_regions(text: str, receiver: str) -> list[ScopeRegion]:
    """Return every scope block attached to *receiver*, in source order.

    Nested blocks on the same receiver are each returned; the detector
    de-duplicates calls that fall inside more than one region.
    """
    regions: list[ScopeRegion] = []
    for match in scope_block_pattern(receiver).finditer(text):
        open_brace = match.end() - 1
        close_brace = find_matching_brace(text, open_brace)
        if close_brace <= open_brace:
            continue

        if match.group(1) in IMPLICIT_RECEIVER_SCOPES:
            regions.append(
                ScopeRegion(
                    open=open_brace,
                    close=close_brace,
                    receiver=ReceiverMode.IMPLICIT,
                    parameter_name=IMPLICIT_PARAMETER,
                )
            )
        else:
            regions.append(
                ScopeRegion(
                    open=open_brace,
                    close=close_brace,
                    receiver=ReceiverMode.PARAMETER,
                    parameter_name=extract_lambda_parameter(text, open_brace) or DEFAULT_PARAMETER,
                )
            )
    return regions


def extract_lambda_parameter(text: str, open_brace: int) -> str | None:
    """Return ``name`` for a ``{ name -> ...`` block, or None when ``it`` is implied."""
    search_end = min(open_brace + LAMBDA_PARAMETER_WINDOW, len(text))
    arrow = text.find("->", open_brace + 1)
    if arrow < 0 or arrow > search_end:
        return None
    between = text[open_brace + 1 : arrow].strip()
    if _IDENTIFIER.fullmatch(between):
        return between
    return None
