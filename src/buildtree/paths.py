"""Path and glob helpers for build scripts."""

from __future__ import annotations

import glob as _glob
import os
import shutil
from typing import Callable

from buildtree.conditions import exists

__all__ = [
    "exists",
    "glob",
    "globber",
    "look_path",
    "replace_suffix",
    "touch",
]


def glob(*patterns: str) -> list[str]:
    """Expand glob patterns. Results of each pattern are sorted and concatenated."""
    results: list[str] = []
    for pattern in patterns:
        results.extend(sorted(_glob.glob(pattern)))
    return results


def globber(*patterns: str) -> Callable[[], list[str]]:
    """Lazy version of glob(), for use as dependencies of outdated()."""
    return lambda: glob(*patterns)


def touch(filename: str | os.PathLike) -> None:
    """Create or truncate a file, creating parent directories as needed."""
    parent = os.path.dirname(filename)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(filename, "w"):
        pass


def replace_suffix(path: str, new_suffix: str) -> str:
    """Replace the dot-separated suffix of the last path component.

    replace_suffix("src/main.c", ".o") == "src/main.o"

    Raises:
        ValueError: If the last component has no suffix
    """
    i = path.rfind(".")
    if i <= 0 or "/" in path[i:]:
        raise ValueError(f"Path has no suffix: {path}")
    return path[:i] + new_suffix


def look_path(*executables: str) -> str:
    """The first of the given programs found on PATH, or "" if none is."""
    for name in executables:
        if shutil.which(name):
            return name
    return ""
