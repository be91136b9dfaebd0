"""Error types and exit codes."""

from enum import IntEnum

__all__ = [
    "ArgsError",
    "ConfigError",
    "ExitCode",
    "ExtraArgsError",
    "FlagError",
    "InvalidArgError",
    "MissingArgsError",
    "RegistrationError",
    "ShellCompError",
    "UnknownCommandError",
]


class ShellCompError(Exception):
    """Base class for all shellcomp errors."""


class RegistrationError(ShellCompError):
    """The command tree or a completion hook was wired incorrectly.

    Raised at registration time, never while resolving completions.
    """


class ConfigError(ShellCompError):
    """Used for configuration errors which already triggered logging."""


class FlagError(ShellCompError):
    """A flag could not be parsed (unknown flag, missing value, bad choice)."""


class ArgsError(ShellCompError):
    """Positional arguments rejected by a command's validator."""


class MissingArgsError(ArgsError):
    """Not enough positional arguments."""


class ExtraArgsError(ArgsError):
    """More positional arguments than the command accepts."""


class UnknownCommandError(ExtraArgsError):
    """A positional argument was given to a command which only has subcommands."""


class InvalidArgError(ArgsError):
    """A positional argument is not one of the accepted values."""


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    USAGE_ERROR = 1  # Unknown flag, wrong number of arguments
    COMMAND_ERROR = 4  # The command itself failed
