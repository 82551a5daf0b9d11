from __future__ import annotations

from rich.console import Console

from buildtree.logging import Logger, LogLevel


class ConsoleLogger(Logger):
    """Logger printing through Rich consoles.

    Build progress goes to `console`. Warnings and errors go to
    `error_console` when one is given, otherwise to `console` as well.
    A stack of levels lets a caller raise verbosity temporarily.
    """

    def __init__(
        self,
        console: Console,
        level: LogLevel = LogLevel.INFO,
        error_console: Console | None = None,
    ) -> None:
        self._out = console
        self._err = error_console or console
        self._levels = [level]

    @property
    def level(self) -> LogLevel:
        """The level currently in effect."""
        return self._levels[-1]

    def _target(self, level: LogLevel) -> Console:
        return self._err if level.value <= LogLevel.WARN.value else self._out

    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        """Print the arguments with Console.print() unless `level` is too verbose."""
        if level.value > self.level.value:
            return
        self._target(level).print(*args, **kwargs)

    def push_level(self, level: LogLevel) -> None:
        self._levels.append(level)

    def pop_level(self) -> LogLevel:
        """Restore the previous level.

        Raises:
            RuntimeError: If only the level given at construction is left
        """
        if len(self._levels) == 1:
            raise RuntimeError("Cannot pop the base log level")
        return self._levels.pop()
