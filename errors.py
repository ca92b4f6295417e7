"""Exceptions raised while scanning sources and ordering the build."""

from typing import Sequence


class BuildOrderError(Exception):
    """Base class for all fatal f90order errors."""


class ScanError(BuildOrderError):
    """A directory or source file could not be read."""


class ConfigError(BuildOrderError):
    """The configuration file is missing, malformed or has invalid values."""


class LimitExceededError(BuildOrderError):
    """
    An input-size ceiling was exceeded.

    These ceilings guard against unbounded growth (too many files, too many
    references in one file, too many edges from one node) and are never
    expected in normal use.
    """

    def __init__(self, what: str, limit: int):
        self.what = what
        self.limit = limit
        super().__init__(f"Exceeded maximum number of {what} ({limit})")


class CyclicDependencyError(BuildOrderError):
    """The module dependency graph contains a cycle, so no build order exists."""

    def __init__(self, cycle: Sequence[str] = ()):
        self.cycle = list(cycle)
        message = "cyclic dependency detected, no valid build order"
        if self.cycle:
            message += ": " + " -> ".join(self.cycle + self.cycle[:1])
        super().__init__(message)
