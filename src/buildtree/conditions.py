"""Conditions deciding whether a task runs.

A condition is a zero-argument predicate. It is evaluated when the executor
reaches the task it guards, not when the build tree is constructed, so it sees
the files produced by earlier tasks of the same run.
"""

from __future__ import annotations

import os
from typing import Callable, Iterable, Union

from buildtree.logging import Logger
from buildtree.task import Condition

PathLike = Union[str, "os.PathLike[str]"]

# Per-call dependencies: an iterable of paths or a producer of one
Sources = Union[Iterable[PathLike], Callable[[], Iterable[PathLike]], None]


def all_of(*conds: Condition) -> Condition:
    """True iff every condition is true. Stops at the first false one."""
    if len(conds) == 1:
        return conds[0]

    def check() -> bool:
        for cond in conds:
            if not cond():
                return False
        return True

    return check


def any_of(*conds: Condition) -> Condition:
    """True iff at least one condition is true. Stops at the first true one."""
    if len(conds) == 1:
        return conds[0]

    def check() -> bool:
        for cond in conds:
            if cond():
                return True
        return False

    return check


def exists(path: PathLike) -> bool:
    """Whether a path exists.

    Only a "no such file" result counts as missing; other stat errors such
    as permission problems count as existing.
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def missing(path: PathLike) -> Condition:
    """Condition which is true when the path does not exist."""
    return lambda: not exists(path)


def _resolve_sources(sources: Sources) -> list[PathLike]:
    if sources is None:
        return []
    if callable(sources):
        return list(sources())
    if isinstance(sources, (str, os.PathLike)):
        return [sources]
    return list(sources)


def outdated(
    target: PathLike,
    sources: Sources = None,
    *,
    global_deps: Iterable[PathLike] = (),
    logger: Logger | None = None,
) -> Condition:
    """Condition which is true when the target needs to be rebuilt.

    The target is outdated if it does not exist, if any dependency cannot be
    stat'ed, or if any dependency was modified after it. The dependencies are
    the global dependencies followed by the per-call sources.

    Args:
        target: Path of the build output
        sources: Paths, or a zero-argument callable returning paths; resolved
            each time the condition is evaluated
        global_deps: Paths every staleness check depends on, typically the
            build script itself
        logger: Receives a warning for each dependency which cannot be stat'ed

    Returns:
        A zero-argument predicate
    """
    global_deps = list(global_deps)

    def check() -> bool:
        try:
            target_time = os.stat(target).st_mtime_ns
        except OSError:
            if logger:
                logger.trace(f"{target} does not exist", markup=False)
            return True

        deps = global_deps + _resolve_sources(sources)

        for source in deps:
            try:
                source_time = os.stat(source).st_mtime_ns
            except OSError as e:
                if logger:
                    logger.warn(f"{target} dependency {source}: {e}", markup=False)
                return True

            if source_time > target_time:
                if logger:
                    logger.trace(f"{target} is older than {source}", markup=False)
                return True

        return False

    return check
