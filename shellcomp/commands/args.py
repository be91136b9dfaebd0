"""Positional arguments validators.

A validator is called with the command and its positional arguments and raises
an `ArgsError` subclass when they are not acceptable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import ExtraArgsError, InvalidArgError, MissingArgsError, UnknownCommandError

if TYPE_CHECKING:
    from .models import ArgsValidator, Command

__all__ = [
    "arbitrary_args",
    "exact_args",
    "legacy_args",
    "match_all",
    "maximum_n_args",
    "minimum_n_args",
    "no_args",
    "only_valid_args",
    "range_args",
]


def legacy_args(command: Command, args: list[str]) -> None:
    """Default validator.

    A root command with subcommands takes no argument, the first one is
    reported as an unknown command. Any other command accepts anything.
    The hidden completion commands don't count as subcommands, otherwise
    a single-command program would reject its own arguments.
    """
    if not command.has_subcommands():
        return
    if command.parent is None and args:
        msg = f"unknown command {args[0]!r} for {command.path!r}"
        raise UnknownCommandError(msg)


def no_args(command: Command, args: list[str]) -> None:
    """Reject any positional argument."""
    if args:
        msg = f"unknown command {args[0]!r} for {command.path!r}"
        raise UnknownCommandError(msg)


def arbitrary_args(command: Command, args: list[str]) -> None:  # noqa: ARG001  # pylint: disable=unused-argument
    """Accept anything."""


def only_valid_args(command: Command, args: list[str]) -> None:
    """Only accept the values listed in `command.valid_args`."""
    if not command.valid_args:
        return
    accepted = {value.split("\t", 1)[0] for value in command.valid_args}
    for arg in args:
        if arg not in accepted:
            msg = f"invalid argument {arg!r} for {command.path!r}"
            raise InvalidArgError(msg)


def minimum_n_args(n: int) -> ArgsValidator:
    """Require at least `n` arguments."""

    def _validator(command: Command, args: list[str]) -> None:  # noqa: ARG001  # pylint: disable=unused-argument
        if len(args) < n:
            msg = f"requires at least {n} arg(s), only received {len(args)}"
            raise MissingArgsError(msg)

    return _validator


def maximum_n_args(n: int) -> ArgsValidator:
    """Accept at most `n` arguments."""

    def _validator(command: Command, args: list[str]) -> None:  # noqa: ARG001  # pylint: disable=unused-argument
        if len(args) > n:
            msg = f"accepts at most {n} arg(s), received {len(args)}"
            raise ExtraArgsError(msg)

    return _validator


def exact_args(n: int) -> ArgsValidator:
    """Require exactly `n` arguments."""

    def _validator(command: Command, args: list[str]) -> None:  # noqa: ARG001  # pylint: disable=unused-argument
        if len(args) > n:
            msg = f"accepts {n} arg(s), received {len(args)}"
            raise ExtraArgsError(msg)
        if len(args) < n:
            msg = f"accepts {n} arg(s), received {len(args)}"
            raise MissingArgsError(msg)

    return _validator


def range_args(low: int, high: int) -> ArgsValidator:
    """Require between `low` and `high` arguments (inclusive)."""

    def _validator(command: Command, args: list[str]) -> None:  # noqa: ARG001  # pylint: disable=unused-argument
        if len(args) > high:
            msg = f"accepts between {low} and {high} arg(s), received {len(args)}"
            raise ExtraArgsError(msg)
        if len(args) < low:
            msg = f"accepts between {low} and {high} arg(s), received {len(args)}"
            raise MissingArgsError(msg)

    return _validator


def match_all(*validators: ArgsValidator) -> ArgsValidator:
    """Combine validators, the first failure wins."""

    def _validator(command: Command, args: list[str]) -> None:
        for validator in validators:
            validator(command, args)

    return _validator
