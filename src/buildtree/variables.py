"""Build variables given on the command line as KEY=VALUE."""

from __future__ import annotations

from typing import Iterable


class VariableDefaultError(Exception):
    """Raised when a variable is queried with two different default values."""

    pass


def is_assignment(arg: str) -> bool:
    """Whether a command-line token is a KEY=VALUE assignment."""
    return "=" in arg and not arg.startswith("-")


def parse_assignments(args: Iterable[str]) -> dict[str, str]:
    """Collect KEY=VALUE tokens. Later assignments of the same key win."""
    assigned: dict[str, str] = {}
    for arg in args:
        if is_assignment(arg):
            key, value = arg.split("=", 1)
            assigned[key] = value
    return assigned


class VariableRegistry:
    """Assigned values plus the defaults each variable was queried with.

    The registry doubles as the list of known variables: a command-line
    assignment of a name that no task queried is a usage error, and the usage
    text lists every queried name.
    """

    def __init__(self, assigned: dict[str, str] | None = None):
        self.assigned: dict[str, str] = dict(assigned or {})
        self.defaults: dict[str, str] = {}

    def getvar(self, key: str, default: str = "") -> str:
        """Value of a variable, or its default when it was not assigned.

        Raises:
            VariableDefaultError: If the variable was already queried with a
                different default
        """
        if key in self.defaults and self.defaults[key] != default:
            raise VariableDefaultError(
                f"Variable {key} accessed with different default values: "
                f"{self.defaults[key]!r} and {default!r}"
            )
        self.defaults[key] = default

        return self.assigned.get(key, default)

    def unknown(self) -> list[str]:
        """Assigned names that were never queried."""
        return [key for key in self.assigned if key not in self.defaults]

    def current_values(self) -> dict[str, str]:
        """Every queried variable with its effective value, sorted by name."""
        return {
            name: self.assigned.get(name, self.defaults[name])
            for name in sorted(self.defaults)
        }
