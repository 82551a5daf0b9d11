"""Locating and importing build scripts for the `bt` command."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Callable, Iterable

from buildtree.task import Task

BUILD_SCRIPT_NAMES = ("build.py", "buildtree.py")
TARGETS_FUNCTION = "targets"


class BuildScriptError(Exception):
    """Raised when a build script cannot be found or used."""

    pass


def find_build_script(start_dir: Path | None = None) -> Path | None:
    """Find a build script in the current or parent directories.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the build script if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in BUILD_SCRIPT_NAMES:
            script_path = current / filename
            if script_path.is_file():
                return script_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_targets_function(script_path: Path) -> Callable[..., Iterable[Task]]:
    """Import a build script and return its targets(ctx) function.

    The script's directory is put at the front of sys.path so that it can
    import helper modules living next to it.

    Raises:
        BuildScriptError: If the script cannot be imported or has no targets function
    """
    module_name = f"_buildtree_script_{abs(hash(str(script_path)))}"
    spec = importlib.util.spec_from_file_location(module_name, script_path)
    if spec is None or spec.loader is None:
        raise BuildScriptError(f"Cannot load build script: {script_path}")

    script_dir = str(script_path.parent)
    if script_dir not in sys.path:
        sys.path.insert(0, script_dir)

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise BuildScriptError(f"Error importing build script {script_path}: {e}") from e

    targets = getattr(module, TARGETS_FUNCTION, None)
    if not callable(targets):
        raise BuildScriptError(
            f"Build script {script_path} does not define a {TARGETS_FUNCTION}(ctx) function"
        )
    return targets
