"""Data models for the command tree: commands and flags."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TextIO

from ..models import RegistrationError

if TYPE_CHECKING:
    from ..config import CompletionOptions

__all__ = ["ArgsValidator", "Command", "Flag", "ParsedFlags", "RunFunc"]

ArgsValidator = Callable[["Command", list[str]], None]
RunFunc = Callable[["Command", list[str], dict[str, Any]], "int | None"]


@dataclass(eq=False)
class Flag:  # pylint: disable=too-many-instance-attributes
    """A flag declared on a command.

    Attributes:
        name: Long name, without the leading dashes (e.g. "output")
        shorthand: Optional one letter alias (e.g. "o")
        usage: One line help, used as completion description
        takes_value: False for boolean switches which never consume a value
        default: Value reported when the flag is not given
        choices: Accepted values, also offered as completions
        repeatable: Can be given several times (values are collected in a list)
        hidden: Not offered by flag name completion
        filename_exts: Completion restricted to files with these extensions
        dirname: Completion restricted to directories
        dirname_root: Directory in which `dirname` completion happens
    """

    name: str
    shorthand: str = ""
    usage: str = ""
    takes_value: bool = True
    default: Any = None
    choices: tuple[str, ...] = ()
    repeatable: bool = False
    hidden: bool = False
    filename_exts: tuple[str, ...] = ()
    dirname: bool = False
    dirname_root: str = ""

    def __post_init__(self) -> None:
        if not self.name or self.name.startswith("-") or "=" in self.name:
            msg = f"invalid flag name {self.name!r}"
            raise RegistrationError(msg)
        if self.shorthand and (len(self.shorthand) != 1 or self.shorthand in "-="):
            msg = f"flag {self.name!r}: shorthand must be a single letter, got {self.shorthand!r}"
            raise RegistrationError(msg)
        self.choices = tuple(self.choices)
        self.filename_exts = tuple(self.filename_exts)

    @property
    def initial_value(self) -> Any:  # noqa: ANN401
        """Value before parsing."""
        if self.repeatable:
            return list(self.default or [])
        if not self.takes_value and self.default is None:
            return False
        return self.default


@dataclass
class ParsedFlags:
    """Result of parsing a command line against the flags of a command."""

    values: dict[str, Any] = field(default_factory=dict)
    positional: list[str] = field(default_factory=list)
    changed: set[str] = field(default_factory=set)


@dataclass(eq=False)
class Command:  # pylint: disable=too-many-instance-attributes
    """A node of the command tree.

    Commands compare and hash by identity, completion hooks are keyed on them.

    Attributes:
        name: The name typed by the user
        short: One line description, used as completion description
        aliases: Other names accepted for this command
        args: Positional arguments validator (defaults to `legacy_args`)
        run: Function called on execution with (command, args, flag values)
        hidden: Not offered by completion
        valid_args: Static positional argument values (may hold "value\\tdescription")
        flags: Flags local to this command
        persistent_flags: Flags local to this command and inherited by its children
        disable_flag_parsing: Pass every token to `run` as a positional argument
        completion_options: Options for the completion commands, read on the root
    """

    name: str
    short: str = ""
    aliases: tuple[str, ...] = ()
    args: ArgsValidator | None = None
    run: RunFunc | None = None
    hidden: bool = False
    valid_args: tuple[str, ...] = ()
    flags: list[Flag] = field(default_factory=list)
    persistent_flags: list[Flag] = field(default_factory=list)
    disable_flag_parsing: bool = False
    completion_options: CompletionOptions | None = field(default=None, repr=False)
    parent: Command | None = field(default=None, init=False, repr=False)
    is_completion_request: bool = field(default=False, init=False, repr=False)
    _commands: list[Command] = field(default_factory=list, init=False, repr=False)
    _out: TextIO | None = field(default=None, init=False, repr=False)
    _err: TextIO | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name or self.name.startswith("-") or any(c.isspace() for c in self.name):
            msg = f"invalid command name {self.name!r}"
            raise RegistrationError(msg)
        self.aliases = tuple(self.aliases)
        self.valid_args = tuple(self.valid_args)
        local, persistent = list(self.flags), list(self.persistent_flags)
        self.flags = []
        self.persistent_flags = []
        for flag in local:
            self.add_flag(flag)
        for flag in persistent:
            self.add_flag(flag, persistent=True)

    # Tree structure

    @property
    def commands(self) -> tuple[Command, ...]:
        """Children, in insertion order."""
        return tuple(self._commands)

    @property
    def root(self) -> Command:
        """The top of the tree."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def path(self) -> str:
        """Full command path, e.g. "prog remote add"."""
        names = []
        node: Command | None = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return " ".join(reversed(names))

    @property
    def available(self) -> bool:
        """Whether the command is offered to the user."""
        return not (self.hidden or self.is_completion_request)

    def names(self) -> tuple[str, ...]:
        """The name followed by the aliases."""
        return (self.name, *self.aliases)

    def add_command(self, *commands: Command) -> None:
        """Attach children to this command.

        Raises:
            RegistrationError: a name or alias is already used by a sibling,
                or the command already has a parent
        """
        for cmd in commands:
            if cmd is self:
                msg = f"command {self.name!r} can't be a child of itself"
                raise RegistrationError(msg)
            if cmd.parent is not None:
                msg = f"command {cmd.name!r} already belongs to {cmd.parent.path!r}"
                raise RegistrationError(msg)
            taken = {name for child in self._commands for name in child.names()}
            for name in cmd.names():
                if name in taken:
                    msg = f"{self.path!r} already has a subcommand named {name!r}"
                    raise RegistrationError(msg)
            cmd.parent = self
            self._commands.append(cmd)

    def has_subcommands(self) -> bool:
        """Whether user-defined children exist (completion requests excluded)."""
        return any(not child.is_completion_request for child in self._commands)

    def has_available_subcommands(self) -> bool:
        """Whether some children are offered to the user."""
        return any(child.available for child in self._commands)

    def find_child(self, token: str) -> Command | None:
        """Return the child matching `token` by name or alias."""
        for child in self._commands:
            if token == child.name:
                return child
        for child in self._commands:
            if token in child.aliases:
                return child
        return None

    def walk(self) -> Iterator[Command]:
        """Iterate over this command and all its descendants, depth first."""
        yield self
        for child in self._commands:
            yield from child.walk()

    # Flags

    def add_flag(self, flag: Flag, persistent: bool = False) -> Flag:
        """Declare a flag on this command.

        Raises:
            RegistrationError: the name or shorthand is already declared here
        """
        for other in self.local_flags():
            if other.name == flag.name:
                msg = f"{self.path!r} already has a flag named {flag.name!r}"
                raise RegistrationError(msg)
            if flag.shorthand and other.shorthand == flag.shorthand:
                msg = f"{self.path!r}: shorthand {flag.shorthand!r} of {flag.name!r} is already used by {other.name!r}"
                raise RegistrationError(msg)
        (self.persistent_flags if persistent else self.flags).append(flag)
        return flag

    def local_flags(self) -> list[Flag]:
        """Flags declared on this command."""
        return [*self.flags, *self.persistent_flags]

    def inherited_flags(self) -> list[Flag]:
        """Persistent flags of the ancestors, not shadowed by a closer declaration."""
        seen = {flag.name for flag in self.local_flags()}
        inherited: list[Flag] = []
        node = self.parent
        while node is not None:
            for flag in node.persistent_flags:
                if flag.name not in seen:
                    seen.add(flag.name)
                    inherited.append(flag)
            node = node.parent
        return inherited

    def all_flags(self) -> list[Flag]:
        """Local flags followed by inherited ones."""
        return self.local_flags() + self.inherited_flags()

    def find_flag(self, name: str) -> Flag | None:
        """Look a flag up by shorthand (one letter) or by long name."""
        flags = self.all_flags()
        if len(name) == 1:
            for flag in flags:
                if flag.shorthand == name:
                    return flag
        for flag in flags:
            if flag.name == name:
                return flag
        return None

    # Output

    def set_output(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        """Redirect the output of this command and its descendants."""
        self._out = stdout
        self._err = stderr

    @property
    def stdout(self) -> TextIO:
        """The output stream, inherited from the closest ancestor which has one."""
        node: Command | None = self
        while node is not None:
            if node._out is not None:  # noqa: SLF001
                return node._out  # noqa: SLF001
            node = node.parent
        return sys.stdout

    @property
    def stderr(self) -> TextIO:
        """The diagnostics stream, inherited like `stdout`."""
        node: Command | None = self
        while node is not None:
            if node._err is not None:  # noqa: SLF001
                return node._err  # noqa: SLF001
            node = node.parent
        return sys.stderr

    # Execution

    def validate_args(self, args: list[str]) -> None:
        """Run the positional arguments validator.

        Raises:
            ArgsError: the arguments are not accepted
        """
        from .args import legacy_args  # noqa: PLC0415  # pylint: disable=import-outside-toplevel

        validator = self.args or legacy_args
        validator(self, args)

    def execute(self, argv: list[str] | None = None, stdout: TextIO | None = None, stderr: TextIO | None = None) -> int:
        """Run the program from this command's root.

        Args:
            argv: Arguments, without the program name (defaults to sys.argv[1:])
            stdout: Output stream (defaults to sys.stdout)
            stderr: Diagnostics stream (defaults to sys.stderr)

        Returns:
            The exit code
        """
        from .runner import execute  # noqa: PLC0415  # pylint: disable=import-outside-toplevel

        return execute(self.root, argv, stdout=stdout, stderr=stderr)
