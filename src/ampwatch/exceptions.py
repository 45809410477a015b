"""
Exception hierarchy for Ampwatch.

Almost every failure in Ampwatch degrades to a default value at the probe
boundary. These exceptions cover the few conditions that are allowed to
abort the process, all of them detected at startup.
"""


class AmpwatchError(Exception):
    """Base class for all Ampwatch errors."""


class DependencyError(AmpwatchError):
    """A required external program is missing."""


class TmuxNotFoundError(DependencyError):
    """tmux is not installed or not on PATH."""
