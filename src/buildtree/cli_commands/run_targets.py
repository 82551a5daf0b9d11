"""Selection and execution of top-level targets."""

from __future__ import annotations

from typing import Iterable

from rich.markup import escape

from buildtree.executor import Executor
from buildtree.logging import Logger
from buildtree.task import GroupTask, Task, TaskTag


def select_targets(available: Iterable[Task], names: list[str]) -> tuple[list[Task], list[str]]:
    """
    Pick the targets to run.

    With no names, every default target is selected. Targets are returned in
    the order they are declared, not the order they were named.

    Args:
    available: Top-level targets
    names: Target names from the command line

    Returns:
    Tuple of (selected targets, names which matched no target)
    """
    wanted = set(names)
    selected: list[Task] = []
    found: set[str] = set()

    for task in available:
        if not isinstance(task, GroupTask):
            continue
        if task.name in wanted or (not names and task.is_default):
            selected.append(task)
            found.add(task.name)

    unknown = [name for name in names if name not in found]
    return selected, unknown


def run_targets(executor: Executor, targets: Iterable[Task], logger: Logger) -> None:
    """
    Run targets in order, sharing one visited-task cache between them.

    Raises:
    ExecutionError: On the first failing command or function; later targets
    are not attempted
    """
    cache: set[TaskTag] = set()

    for task in targets:
        name = task.name if isinstance(task, GroupTask) else ""
        logger.debug(f"Target {escape(name)}")
        if not executor.run(task, cache):
            logger.info(f"Nothing to be done for {escape(name)}", highlight=False, soft_wrap=True)
