"""Pieces of the command-line front end: target selection, running and usage text."""

from __future__ import annotations

from rich.console import Console

FAILURE_SYMBOL = "✗"
FAILURE_FALLBACK = "[ FAIL ]"


def failure_marker(console: Console) -> str:
    """
    Marker prefixed to fatal build errors.

    Falls back to plain text on the legacy Windows console and on streams
    whose encoding has no cross symbol.
    """
    if console.legacy_windows:
        return FAILURE_FALLBACK

    try:
        FAILURE_SYMBOL.encode(console.encoding)
    except (UnicodeEncodeError, LookupError):
        return FAILURE_FALLBACK
    return FAILURE_SYMBOL
