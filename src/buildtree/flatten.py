"""Flattening of command arguments.

Build scripts assemble commands from strings, lists of strings and lazily
evaluated producers (for example a globber). These helpers turn such mixtures
into a flat list of strings.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

# Anything flatten() accepts: str, list/tuple of those, or a zero-argument
# callable returning a sequence of strings.
Flattenable = Any


def flatten(*items: Flattenable) -> list[str]:
    """Flatten strings, sequences and producers into a single list.

    flatten("cc", ["-c", "-O2"], thunk("main.c")) == ["cc", "-c", "-O2", "main.c"]

    Raises:
        TypeError: If an item is of an unsupported type
    """
    return _flatten([], items)


def wrap(optional: str, *items: Flattenable) -> list[str]:
    """Like flatten(), but the first argument is dropped when it is empty.

    Useful for optional wrapper programs such as "ccache" or "valgrind".
    """
    if optional:
        items = (optional,) + items
    return _flatten([], items)


def flattener(*items: Flattenable) -> Callable[[], list[str]]:
    """Lazy version of flatten()."""
    return lambda: flatten(*items)


def thunk(*strings: str) -> Callable[[], list[str]]:
    """Return a producer which returns the given strings."""
    values = list(strings)
    return lambda: list(values)


def _flatten(dest: list[str], items: Iterable[Flattenable]) -> list[str]:
    for item in items:
        if isinstance(item, str):
            dest.append(item)
        elif isinstance(item, (list, tuple)):
            _flatten(dest, item)
        elif callable(item):
            _flatten(dest, item())
        else:
            raise TypeError(f"Cannot flatten value of type {type(item).__name__}: {item!r}")
    return dest
