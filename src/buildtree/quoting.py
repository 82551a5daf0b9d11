"""Quoting of command tokens for log output.

Commands are always executed as argument vectors, so quoting here only affects
how a command line is displayed. The goal is a transcript that can be pasted
back into a shell.
"""

from __future__ import annotations

import json


def _first_index_of_any(s: str, chars: str) -> int:
    found = [i for i in (s.find(c) for c in chars) if i >= 0]
    return min(found) if found else -1


def _last_index_of_any(s: str, chars: str) -> int:
    return max(s.rfind(c) for c in chars)


def maybe_quote(s: str) -> str:
    """Quote a token if it contains spaces or quote characters.

    Examples:
        >>> maybe_quote("plain")
        'plain'
        >>> maybe_quote("two words")
        '"two words"'
        >>> maybe_quote("CFLAGS=-O2 -g")
        'CFLAGS="-O2 -g"'
        >>> maybe_quote('X="a b"')
        'X=\\'"a b"\\''
    """
    if "'" in s:
        return json.dumps(s, ensure_ascii=False)

    quotes = s.count('"')

    if quotes == 0:
        space = s.find(" ")
        if space < 0:
            return s

        equal = s.find("=")
        if equal < 0 or equal > space:
            return f'"{s}"'

        # Only the value part of NAME=value is quoted
        return f'{s[:equal + 1]}"{s[equal + 1:]}"'

    if quotes == 2:
        begin = _first_index_of_any(s, '" ')
        equal = s.find("=")
        if 0 <= equal < begin:
            begin = equal + 1

        end = _last_index_of_any(s, '" ') + 1

        return f"{s[:begin]}'{s[begin:end]}'{s[end:]}"

    return f"'{s}'"


def join_command(tokens: list[str] | tuple[str, ...]) -> str:
    """Render an argument vector as a single display line."""
    return " ".join(maybe_quote(token) for token in tokens)
