"""Command-line interface for buildtree.

A build script describes its targets in a function and hands it to main():

    from buildtree import cli, command, target_default

    def targets(ctx):
        cc = ctx.getvar("CC", "cc")
        return [
            target_default("all", command(cc, "-o", "hello", "hello.c")),
        ]

    if __name__ == "__main__":
        cli.main(targets, __file__)

The script then accepts target names and VAR=value assignments as arguments.
The `bt` command does the same for a build.py found in the current directory
or one of its parents.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from typer.core import TyperCommand

from buildtree.cli_commands import failure_marker
from buildtree.cli_commands.run_targets import run_targets, select_targets
from buildtree.cli_commands.usage import print_usage
from buildtree.config import ConfigError, load_settings
from buildtree.console_logger import ConsoleLogger
from buildtree.context import BuildContext, make_global_deps
from buildtree.executor import ExecutionError, Executor
from buildtree.loader import BuildScriptError, find_build_script, load_targets_function
from buildtree.logging import Logger, LogLevel, parse_log_level
from buildtree.process_runner import ProcessRunner
from buildtree.task import Task, TaskConstructionError, validate_targets
from buildtree.variables import VariableRegistry, is_assignment, parse_assignments

HELP_FLAGS = ("-h", "-help", "--help")
LOG_LEVEL_FLAGS = ("--log-level", "-L")
RAW_ARGS_KEY = "buildtree.raw_args"

TargetsFn = Callable[[BuildContext], Iterable[Task]]


class UsageError(Exception):
    """Raised for command-line tokens that cannot be interpreted."""

    pass


class RawArgsCommand(TyperCommand):
    """Command keeping its argument vector as given.

    Click drops a "--" token while parsing; build() must see it to reject it.
    """

    def parse_args(self, ctx: typer.Context, args: list[str]) -> list[str]:
        ctx.meta[RAW_ARGS_KEY] = list(args)
        return super().parse_args(ctx, args)


@dataclass
class CommandLine:
    """Command-line tokens sorted by kind."""

    names: list[str] = field(default_factory=list)
    assignments: dict[str, str] = field(default_factory=dict)
    options: list[str] = field(default_factory=list)
    log_level: Optional[LogLevel] = None

    def is_help(self) -> bool:
        """Help is only honored when it is the sole token."""
        return (
            len(self.options) == 1
            and self.options[0] in HELP_FLAGS
            and not self.names
            and not self.assignments
        )


def parse_command_line(args: list[str]) -> CommandLine:
    """
    Split arguments into target names, variable assignments and options.

    Raises:
        UsageError: If a log level flag has a missing or invalid value
    """
    parsed = CommandLine()
    assignments: list[str] = []
    tokens = iter(args)

    for arg in tokens:
        if arg in LOG_LEVEL_FLAGS:
            value = next(tokens, None)
            if value is None:
                raise UsageError(f"{arg} requires a value")
            parsed.log_level = _parse_level(value)
        elif arg.startswith("--log-level="):
            parsed.log_level = _parse_level(arg.split("=", 1)[1])
        elif arg.startswith("-"):
            parsed.options.append(arg)
        elif is_assignment(arg):
            assignments.append(arg)
        elif arg not in parsed.names:
            parsed.names.append(arg)

    parsed.assignments = parse_assignments(assignments)
    return parsed


def _parse_level(value: str) -> LogLevel:
    try:
        return parse_log_level(value)
    except ValueError as e:
        raise UsageError(str(e)) from None


def _fail(logger: Logger, err_console: Console, error: Exception) -> typer.Exit:
    message = str(error) or type(error).__name__
    logger.error(f"[red]{failure_marker(err_console)} {escape(message)}[/red]")
    return typer.Exit(1)


def _usage_error(err_console: Console, message: str) -> typer.Exit:
    err_console.print(message, markup=False, highlight=False, soft_wrap=True)
    return typer.Exit(2)


def _prog_name(prog: Optional[str], main_file: str) -> str:
    if prog:
        return prog
    if main_file:
        return f"python {main_file}"
    return os.path.basename(sys.argv[0]) or "buildtree"


def build(
    get_targets: TargetsFn,
    args: list[str],
    main_file: str = "",
    deps: tuple = (),
    prog: Optional[str] = None,
    process_runner: Optional[ProcessRunner] = None,
) -> None:
    """
    Build the targets named on the command line.

    Raises:
        typer.Exit: Always on failure; code 2 for usage errors, 1 for build failures
    """
    console = Console()
    err_console = Console(stderr=True)
    logger = ConsoleLogger(console, LogLevel.INFO, err_console)
    prog = _prog_name(prog, main_file)

    try:
        command_line = parse_command_line(args)
    except UsageError as e:
        raise _usage_error(err_console, str(e))

    try:
        settings = load_settings()
    except ConfigError as e:
        raise _fail(logger, err_console, e)

    level = command_line.log_level or settings.log_level
    if level is not None:
        logger.push_level(level)

    ctx = BuildContext(
        logger=logger,
        global_deps=make_global_deps(main_file, deps) + tuple(settings.global_deps),
        variables=VariableRegistry(command_line.assignments),
    )
    logger.debug(f"Global dependencies: {escape(', '.join(ctx.global_deps))}")

    try:
        available = list(get_targets(ctx))
        has_default = validate_targets(available)
    except Exception as e:
        raise _fail(logger, err_console, e)

    unknown_vars = ctx.variables.unknown()
    if unknown_vars:
        raise _usage_error(err_console, f"Unknown variable: {unknown_vars[0]}")

    def usage(exit_code: int) -> typer.Exit:
        print_usage(err_console, prog, available, has_default, ctx.variables)
        return typer.Exit(exit_code)

    if command_line.is_help():
        raise usage(0)

    if command_line.options:
        raise usage(2)

    if not has_default and not command_line.names:
        raise usage(2)

    targets, unknown_names = select_targets(available, command_line.names)
    if unknown_names:
        raise _usage_error(err_console, f"Unknown target: {unknown_names[0]}")

    executor = Executor(logger, process_runner)
    try:
        run_targets(executor, targets, logger)
    except (ExecutionError, TaskConstructionError) as e:
        raise _fail(logger, err_console, e)


def make_app(
    get_targets: TargetsFn,
    main_file: str | os.PathLike = "",
    *deps: str | os.PathLike,
    prog: Optional[str] = None,
    process_runner: Optional[ProcessRunner] = None,
) -> typer.Typer:
    """
    Create the typer application for a build script.

    Args:
        get_targets: Function building the top-level targets from a BuildContext
        main_file: The build script; it becomes a global dependency
        *deps: Additional global dependencies
        prog: Program name shown in usage text
        process_runner: Runner used for commands (default: run them directly)
    """
    main_file = os.fspath(main_file) if main_file else ""

    app = typer.Typer(add_completion=False)

    @app.command(
        cls=RawArgsCommand,
        add_help_option=False,
        context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    )
    def run_build(ctx: typer.Context) -> None:
        args = ctx.meta.get(RAW_ARGS_KEY, [])
        build(get_targets, args, main_file, deps, prog, process_runner)

    return app


def main(
    get_targets: TargetsFn,
    main_file: str | os.PathLike = "",
    *deps: str | os.PathLike,
    prog: Optional[str] = None,
) -> None:
    """Run the build for the current process arguments and exit."""
    app = make_app(get_targets, main_file, *deps, prog=prog)
    app(prog_name=_prog_name(prog, os.fspath(main_file) if main_file else ""))


def run() -> None:
    """Entry point of the `bt` command."""
    err_console = Console(stderr=True)

    script = find_build_script()
    if script is None:
        err_console.print("[red]No build script found (build.py or buildtree.py)[/red]")
        sys.exit(1)

    try:
        get_targets = load_targets_function(script)
    except BuildScriptError as e:
        err_console.print(f"[red]{failure_marker(err_console)} {escape(str(e))}[/red]")
        sys.exit(1)

    main(get_targets, str(script), prog="bt")


if __name__ == "__main__":
    run()
