"""Running programs directly from build script code.

Tasks should normally use the command factories; these helpers are for
functions that need a program's result while the build is running.
"""

from __future__ import annotations

import subprocess
from typing import IO

from rich.markup import escape

from buildtree.flatten import Flattenable, flatten
from buildtree.logging import Logger
from buildtree.quoting import join_command


def run_command(*command: Flattenable, logger: Logger | None = None) -> None:
    """Run a program with inherited output.

    Raises:
        subprocess.CalledProcessError: If the program exits non-zero
        OSError: If the program cannot be started
    """
    args = flatten(*command)
    if logger:
        logger.info(f"Running {escape(join_command(args))}", highlight=False, soft_wrap=True)
    subprocess.run(args, check=True)


def run_io(input: IO[bytes] | None, *command: Flattenable) -> bytes:
    """Run a program with the given standard input and return its standard output.

    Raises:
        subprocess.CalledProcessError: If the program exits non-zero
        OSError: If the program cannot be started
    """
    result = subprocess.run(
        flatten(*command),
        stdin=input,
        stdout=subprocess.PIPE,
        check=True,
    )
    return result.stdout
