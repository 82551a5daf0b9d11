"""Task execution."""

from __future__ import annotations

import subprocess

from rich.markup import escape

from buildtree.logging import Logger
from buildtree.process_runner import PassthroughProcessRunner, ProcessRunner
from buildtree.task import (
    CommandTask,
    FunctionTask,
    GroupTask,
    Task,
    TaskConstructionError,
    TaskTag,
)


class ExecutionError(Exception):
    """Raised when a command or function task fails."""

    pass


class Executor:
    """Runs task trees.

    Each task is visited at most once per cache: the first visit evaluates its
    condition, runs its children and then its own command or function; every
    later visit of the same task is a no-op.
    """

    def __init__(self, logger: Logger, process_runner: ProcessRunner | None = None):
        """Initialize executor.

        Args:
            logger: Logger for progress and diagnostics
            process_runner: Used to spawn commands (default: PassthroughProcessRunner)
        """
        self._logger = logger
        self._process_runner = process_runner or PassthroughProcessRunner(logger)

    def run(self, task: Task, cache: set[TaskTag] | None = None) -> bool:
        """Run a task tree.

        Args:
            task: Root of the tree
            cache: Tags of tasks already visited during this invocation. The
                same set must be passed for every target of one invocation.

        Returns:
            True if any command or function ran

        Raises:
            TaskConstructionError: If the tree contains a value which is not a task
            ExecutionError: If a condition, command or function fails
        """
        if cache is None:
            cache = set()

        tag = getattr(task, "tag", None)
        if not isinstance(task, Task) or not isinstance(tag, TaskTag):
            raise TaskConstructionError("Task values must be created with the task factories")

        if tag in cache:
            self._logger.trace(f"Already visited {escape(task.describe())}")
            return False
        cache.add(tag)

        match task:
            case GroupTask():
                return self._run_group(task, cache)
            case CommandTask():
                return self._run_command(task)
            case FunctionTask():
                return self._run_function(task)
            case _:
                raise TaskConstructionError(f"Unknown task type: {type(task).__name__}")

    def _run_group(self, task: GroupTask, cache: set[TaskTag]) -> bool:
        if task.condition is not None:
            try:
                met = task.condition()
            except Exception as e:
                detail = str(e) or type(e).__name__
                raise ExecutionError(f"Condition of {task.describe()} failed: {detail}") from e

            if not met:
                self._logger.debug(f"Skipping {escape(task.describe())}: condition not met")
                return False

        worked = False
        for child in task.children:
            if self.run(child, cache):
                worked = True
        return worked

    def _run_command(self, task: CommandTask) -> bool:
        if not task.command:
            return False

        self._logger.info(f"Running {escape(task.commandline())}", highlight=False, soft_wrap=True)

        try:
            self._process_runner.run(list(task.command), env=task.environ(), check=True)
        except subprocess.CalledProcessError as e:
            raise ExecutionError(f"{task.command[0]}: exit status {e.returncode}") from e
        except OSError as e:
            raise ExecutionError(f"{task.command[0]}: {e}") from e

        return True

    def _run_function(self, task: FunctionTask) -> bool:
        if task.function is None:
            return False

        self._logger.debug(f"Calling {escape(task.describe())}")

        try:
            task.function()
        except Exception as e:
            raise ExecutionError(str(e) or type(e).__name__) from e

        return True
