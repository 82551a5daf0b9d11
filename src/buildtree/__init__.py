"""buildtree - A build tool where targets are trees of tasks written in Python."""

__version__ = "0.1.0"

from buildtree.conditions import all_of, any_of, exists, missing, outdated
from buildtree.context import BuildContext
from buildtree.environment import Env, getenv
from buildtree.executor import ExecutionError, Executor
from buildtree.flatten import flatten, flattener, thunk, wrap
from buildtree.install import install, install_data
from buildtree.paths import glob, globber, look_path, replace_suffix, touch
from buildtree.task import (
    CommandTask,
    FunctionTask,
    GroupTask,
    Task,
    TargetValidationError,
    TaskConstructionError,
    Tasks,
    command,
    command_wrap,
    directory,
    directory_of,
    func,
    group,
    if_,
    installation,
    removal,
    system,
    target,
    target_default,
    validate_targets,
)
from buildtree.variables import VariableDefaultError, VariableRegistry

__all__ = [
    "__version__",
    "all_of",
    "any_of",
    "exists",
    "missing",
    "outdated",
    "BuildContext",
    "Env",
    "getenv",
    "ExecutionError",
    "Executor",
    "flatten",
    "flattener",
    "thunk",
    "wrap",
    "install",
    "install_data",
    "glob",
    "globber",
    "look_path",
    "replace_suffix",
    "touch",
    "CommandTask",
    "FunctionTask",
    "GroupTask",
    "Task",
    "TargetValidationError",
    "TaskConstructionError",
    "Tasks",
    "command",
    "command_wrap",
    "directory",
    "directory_of",
    "func",
    "group",
    "if_",
    "installation",
    "removal",
    "system",
    "target",
    "target_default",
    "validate_targets",
    "VariableDefaultError",
    "VariableRegistry",
]
