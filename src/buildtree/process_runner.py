"""Seam between the executor and subprocess.

Commands reach the operating system only through a ProcessRunner, so tests
can substitute a runner that records argument vectors instead of spawning
programs.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from typing import Any

from buildtree.logging import Logger

__all__ = [
    "ProcessRunner",
    "PassthroughProcessRunner",
]


class ProcessRunner(ABC):
    """Runs one program to completion, with subprocess.run() semantics."""

    @abstractmethod
    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a program and wait for it.

        Accepts the same arguments as subprocess.run().

        Raises:
            subprocess.CalledProcessError: If check=True and the exit status is non-zero
            OSError: If the program cannot be started
        """
        ...


class PassthroughProcessRunner(ProcessRunner):
    """Runs programs with subprocess.run(); stdio is shared with the build."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        argv = args[0] if args else kwargs.get("args")
        self._logger.trace(f"exec {argv!r}", markup=False)
        return subprocess.run(*args, **kwargs)
