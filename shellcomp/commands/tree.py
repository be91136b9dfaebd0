"""Command tree traversal, shared by execution and completion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .parsing import args_minus_first, strip_flags

if TYPE_CHECKING:
    from .models import Command

__all__ = ["find"]


def find(root: Command, tokens: list[str]) -> tuple[Command, list[str]]:
    """Find the deepest command designated by `tokens`.

    Flags may appear anywhere; they are skipped (with their values) while
    looking for subcommand names, and left in place in the returned tokens.
    The walk stops at the first positional token which is not a child name
    or alias.

    Args:
        root: The command to start from
        tokens: Raw command line tokens, without the program name

    Returns:
        Tuple of (command, remaining tokens)
    """
    command = root
    remaining = list(tokens)
    while True:
        positional = strip_flags(command, remaining)
        if not positional:
            return command, remaining
        child = command.find_child(positional[0])
        if child is None:
            return command, remaining
        remaining = args_minus_first(command, remaining, positional[0])
        command = child
