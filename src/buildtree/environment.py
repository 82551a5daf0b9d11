"""Environment overlays for commands."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from buildtree.flatten import Flattenable, flatten, wrap
from buildtree.quoting import maybe_quote

if TYPE_CHECKING:
    from buildtree.task import CommandTask


def getenv(key: str, default: str = "") -> str:
    """Like os.environ.get(), but an empty value also yields the default."""
    return os.environ.get(key) or default


class Env(Mapping[str, str]):
    """Immutable set of environment variables merged onto the process
    environment when a command runs.

    Command tasks are created through the methods of an Env so that the
    overlay is attached at construction time:

        env = Env(CC="clang", CFLAGS="-O2 -g")
        compile = env.command("make", "all")
    """

    def __init__(self, values: Mapping[str, str] | None = None, **kwargs: str) -> None:
        merged = dict(values or {})
        merged.update(kwargs)
        for key, value in merged.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(f"Environment entries must be strings: {key!r}={value!r}")
        self._values = MappingProxyType(merged)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Env({dict(self._values)!r})"

    def __str__(self) -> str:
        pairs = sorted(f"{maybe_quote(k)}={maybe_quote(v)}" for k, v in self._values.items())
        return " ".join(pairs)

    def environ(self) -> dict[str, str]:
        """The current process environment with this overlay applied."""
        merged = dict(os.environ)
        merged.update(self._values)
        return merged

    def command(self, *command: Flattenable) -> CommandTask:
        """Command task running with this environment."""
        from buildtree.task import CommandTask

        return CommandTask(command=tuple(flatten(*command)), env=self)

    def command_wrap(self, optional: str, *command: Flattenable) -> CommandTask:
        """Command task prefixed with a wrapper program, unless it is empty."""
        from buildtree.task import CommandTask

        return CommandTask(command=tuple(wrap(optional, *command)), env=self)

    def system(self, commandline: str) -> CommandTask:
        """Command task from a whitespace-separated command line.

        No shell is involved; quotes in the command line are not interpreted.
        """
        from buildtree.task import CommandTask

        return CommandTask(command=tuple(commandline.split()), env=self)
