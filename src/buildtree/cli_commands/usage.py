from __future__ import annotations

from typing import Iterable

from rich.console import Console

from buildtree.task import GroupTask, Task
from buildtree.variables import VariableRegistry


def print_usage(
    console: Console,
    prog: str,
    available: Iterable[Task],
    has_default: bool,
    variables: VariableRegistry,
) -> None:
    """
    Print usage text listing the targets and the variables queried by them.
    """
    def line(text: str = "") -> None:
        console.print(text, markup=False, highlight=False, soft_wrap=True)

    meta_target = "[TARGET]..." if has_default else "target"

    line(f"Usage: {prog} {meta_target} [VAR=value]...")
    line(f"       {prog} -h|--help")
    line()
    line("Targets:")

    for task in available:
        if isinstance(task, GroupTask) and task.name:
            if task.is_default:
                line(f"  {task.name} (default)")
            else:
                line(f"  {task.name}")

    values = variables.current_values()
    if values:
        line()
        line("Variables:")
        for name, value in values.items():
            if value:
                line(f"  {name} ({value})")
            else:
                line(f"  {name}")

    line()
