"""Task values: the nodes of a build tree.

A build is described as a tree of tasks. Leaves run a command or call a
function; group nodes hold children and may be named (top-level targets),
marked default, or gated by a condition. Every node carries a TaskTag which is
its identity: the executor runs each tag at most once per invocation, however
many parents reference the node.
"""

from __future__ import annotations

import itertools
import os
import shutil
from dataclasses import dataclass, field
from typing import Callable, Iterable

from buildtree.environment import Env
from buildtree.flatten import Flattenable, flatten, wrap
from buildtree.logging import Logger

# Zero-argument predicate deciding whether a task runs
Condition = Callable[[], bool]

HELP_NAME = "help"

_serials = itertools.count(1)


class TaskConstructionError(Exception):
    """Raised when a value that was not built by a task factory reaches the executor."""

    pass


class TargetValidationError(Exception):
    """Raised when the top-level target list is inconsistent."""

    pass


class TaskTag:
    """Opaque identity of a task node.

    Tags compare by object identity; the serial number only exists to make
    debug output readable.
    """

    __slots__ = ("serial",)

    def __init__(self) -> None:
        self.serial = next(_serials)

    def __repr__(self) -> str:
        return f"<TaskTag #{self.serial}>"


@dataclass(frozen=True, eq=False)
class Task:
    """Base class of all task nodes. Use the factory functions to build tasks."""

    tag: TaskTag = field(default_factory=TaskTag, init=False, repr=False)

    def describe(self) -> str:
        return f"task #{self.tag.serial}"


@dataclass(frozen=True, eq=False)
class CommandTask(Task):
    """Runs an external program. The env overlay is applied to the child only."""

    command: tuple[str, ...] = ()
    env: Env | None = None

    def commandline(self) -> str:
        """Display form of the command, prefixed by the environment overlay."""
        from buildtree.quoting import join_command

        line = join_command(self.command)
        if self.env:
            line = f"{self.env} {line}"
        return line

    def environ(self) -> dict[str, str] | None:
        """Environment for the child process, or None to inherit ours."""
        if self.env is None:
            return None
        return self.env.environ()

    def describe(self) -> str:
        return self.commandline()


@dataclass(frozen=True, eq=False)
class FunctionTask(Task):
    """Calls a Python function. The function reports failure by raising."""

    function: Callable[[], object] | None = None

    def describe(self) -> str:
        name = getattr(self.function, "__qualname__", None) or repr(self.function)
        return f"function {name}"


@dataclass(frozen=True, eq=False)
class GroupTask(Task):
    """Runs its children in order. Optionally named, default or conditional."""

    children: tuple[Task, ...] = ()
    condition: Condition | None = None
    name: str = ""
    is_default: bool = False

    def describe(self) -> str:
        if self.name:
            return f"target {self.name}"
        return super().describe()


class Tasks(list):
    """List of top-level targets."""

    def add(self, task: Task) -> Task:
        """Append a task and return it, so it can also be used as a child."""
        self.append(task)
        return task


def _check_children(tasks: Iterable[Task]) -> tuple[Task, ...]:
    children = tuple(tasks)
    for child in children:
        if not isinstance(child, Task):
            raise TaskConstructionError(
                f"Child tasks must be created with the task factories, got {child!r}"
            )
    return children


def target(name: str, *tasks: Task) -> GroupTask:
    """Named top-level target."""
    return GroupTask(children=_check_children(tasks), name=name)


def target_default(name: str, *tasks: Task) -> GroupTask:
    """Named top-level target which runs when no target is given."""
    return GroupTask(children=_check_children(tasks), name=name, is_default=True)


def group(*tasks: Task) -> GroupTask:
    """Anonymous group of tasks, run in order."""
    return GroupTask(children=_check_children(tasks))


def if_(condition: Condition, *tasks: Task) -> GroupTask:
    """Group of tasks which only runs when the condition holds."""
    if not callable(condition):
        raise TaskConstructionError(f"Condition must be callable, got {condition!r}")
    return GroupTask(children=_check_children(tasks), condition=condition)


def command(*command: Flattenable) -> CommandTask:
    """Command task inheriting the process environment."""
    return CommandTask(command=tuple(flatten(*command)))


def command_wrap(optional_wrapper: str, *command: Flattenable) -> CommandTask:
    """Command task prefixed with a wrapper program, unless it is empty."""
    return CommandTask(command=tuple(wrap(optional_wrapper, *command)))


def system(commandline: str) -> CommandTask:
    """Command task from a whitespace-separated command line."""
    return CommandTask(command=tuple(commandline.split()))


def func(function: Callable[[], object]) -> FunctionTask:
    """Function task."""
    if not callable(function):
        raise TaskConstructionError(f"Function task needs a callable, got {function!r}")
    return FunctionTask(function=function)


def directory(dirpath: str | os.PathLike) -> FunctionTask:
    """Task creating a directory and its parents."""
    return func(lambda: os.makedirs(dirpath, exist_ok=True))


def directory_of(filename: str | os.PathLike) -> FunctionTask:
    """Task creating the parent directory of a file."""
    return directory(os.path.dirname(filename) or ".")


def removal(*paths: str | os.PathLike) -> FunctionTask:
    """Task removing files or directory trees.

    Every path is attempted; the first error is raised afterwards.
    """

    def remove() -> None:
        first_error: OSError | None = None
        for path in paths:
            try:
                if os.path.isdir(path) and not os.path.islink(path):
                    shutil.rmtree(path)
                else:
                    os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    return func(remove)


def installation(
    destination: str,
    source_name: str,
    executable: bool = False,
    logger: Logger | None = None,
) -> FunctionTask:
    """Task installing a file, see buildtree.install.install()."""
    from buildtree.install import install

    return func(lambda: install(destination, source_name, executable, logger=logger))


def validate_targets(targets: Iterable[Task]) -> bool:
    """Check the top-level target list.

    Returns:
        True if any target is marked default

    Raises:
        TaskConstructionError: If an entry is not a task
        TargetValidationError: If a name is used twice or a target is named "help"
    """
    defaults = False
    names: set[str] = set()

    for task in targets:
        if not isinstance(task, Task):
            raise TaskConstructionError(
                f"Targets must be created with the task factories, got {task!r}"
            )
        if not isinstance(task, GroupTask):
            continue

        if task.is_default:
            defaults = True

        if task.name:
            if task.name == HELP_NAME:
                raise TargetValidationError(f"Target name '{HELP_NAME}' is reserved")
            if task.name in names:
                raise TargetValidationError(f"Duplicate target name: {task.name}")
            names.add(task.name)

    return defaults
