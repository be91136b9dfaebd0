"""Completion function registry.

Completion functions are supplied by the embedding application, per command
(positional arguments) or per flag. They are stored here, keyed by command
identity, rather than on the commands themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from weakref import WeakKeyDictionary

from ..logging_setup import get_logger
from ..models import RegistrationError

if TYPE_CHECKING:
    from ..commands.models import Command
    from .models import CompletionFunc

__all__ = [
    "CompletionRegistry",
    "register_flag_completion",
    "registry",
    "set_args_completion",
]


class CompletionRegistry:
    """Maps commands and (command, flag) pairs to completion functions."""

    def __init__(self) -> None:
        self.log = get_logger("registry")
        self._args: WeakKeyDictionary[Command, CompletionFunc] = WeakKeyDictionary()
        self._flags: WeakKeyDictionary[Command, dict[str, CompletionFunc]] = WeakKeyDictionary()

    def set_args_completion(self, command: Command, func: CompletionFunc) -> None:
        """Set the function completing the positional arguments of `command`.

        A later call replaces the previous function.

        Args:
            command: The command
            func: Called with (command, args, partial token)
        """
        if command in self._args:
            self.log.debug("Replacing args completion of %s", command.path)
        self._args[command] = func

    def register_flag_completion(self, command: Command, flag_name: str, func: CompletionFunc) -> None:
        """Register the function completing the values of a flag.

        Args:
            command: The command declaring (or inheriting) the flag
            flag_name: Long name of the flag, without dashes
            func: Called with (command, args, partial token)

        Raises:
            RegistrationError: the flag doesn't exist or already has a function
        """
        flag = command.find_flag(flag_name)
        if flag is None or flag.name != flag_name:
            msg = f"{command.path!r} has no flag named {flag_name!r}"
            raise RegistrationError(msg)
        funcs = self._flags.setdefault(command, {})
        if flag_name in funcs:
            msg = f"flag {flag_name!r} of {command.path!r} already has a completion function"
            raise RegistrationError(msg)
        funcs[flag_name] = func

    def args_completion(self, command: Command) -> CompletionFunc | None:
        """Return the positional arguments completion function of `command`."""
        return self._args.get(command)

    def flag_completion(self, command: Command, flag_name: str) -> CompletionFunc | None:
        """Return the completion function of a flag.

        Functions registered on an ancestor apply to inherited flags.
        """
        node: Command | None = command
        while node is not None:
            func = self._flags.get(node, {}).get(flag_name)
            if func is not None:
                return func
            if any(flag.name == flag_name for flag in node.local_flags()):
                # declared here: an ancestor's flag of the same name is shadowed
                return None
            node = node.parent
        return None

    def has_completion_functions(self, root: Command) -> bool:
        """Whether any command of the tree has a registered completion function."""
        return any(cmd in self._args or self._flags.get(cmd) for cmd in root.walk())


registry = CompletionRegistry()

set_args_completion = registry.set_args_completion
register_flag_completion = registry.register_flag_completion
