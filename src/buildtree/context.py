"""Build context handed to the function producing the targets."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from rich.markup import escape

from buildtree.conditions import PathLike, Sources, outdated
from buildtree.flatten import Flattenable, flatten
from buildtree.logging import Logger
from buildtree.task import Condition, FunctionTask, installation
from buildtree.variables import VariableRegistry


@dataclass
class BuildContext:
    """State shared by the whole build script for one invocation.

    Attributes:
        logger: Logger for build script output and diagnostics
        global_deps: Files every outdated() check depends on, normally the
            build script itself. Fixed before the targets are built.
        variables: Command-line variables and the defaults queried so far
    """

    logger: Logger
    global_deps: tuple[str, ...] = ()
    variables: VariableRegistry = field(default_factory=VariableRegistry)

    def getvar(self, key: str, default: str = "") -> str:
        """Value of a command-line variable (KEY=VALUE), or the default."""
        return self.variables.getvar(key, default)

    def outdated(self, target: PathLike, sources: Sources = None) -> Condition:
        """outdated() condition which also depends on the global dependencies."""
        return outdated(target, sources, global_deps=self.global_deps, logger=self.logger)

    def installation(self, destination: str, source_name: str, executable: bool = False) -> FunctionTask:
        """installation() task logging through this context."""
        return installation(destination, source_name, executable, logger=self.logger)

    def println(self, *parts: Flattenable) -> None:
        """Log space-separated strings. The arguments are flattened."""
        self.logger.info(escape(" ".join(flatten(*parts))), highlight=False)


def make_global_deps(main_file: str | os.PathLike | None, deps: tuple = ()) -> tuple[str, ...]:
    """Global dependency list: the main file first, then the extra deps."""
    result: list[str] = []
    if main_file:
        result.append(os.fspath(main_file))
    result.extend(os.fspath(dep) for dep in deps)
    return tuple(result)
