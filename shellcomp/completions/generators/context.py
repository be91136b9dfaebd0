"""Data shared by all the script generators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ...constants import COMP_DEBUG_FILE_ENV, COMP_NO_DESC_REQUEST_CMD, COMP_REQUEST_CMD
from ...directive import Directive
from ..registry import registry as default_registry
from .escaping import shell_identifier

if TYPE_CHECKING:
    from ...commands.models import Command
    from ..registry import CompletionRegistry

__all__ = ["ScriptContext", "StaticTables", "build_context"]


@dataclass
class StaticTables:
    """The command tree, flattened for scripts which don't call the program.

    Keys are command paths ("prog remote add"); flag choices are keyed by
    "<path> <flag token>" (e.g. "prog --format").
    """

    children: dict[str, str] = field(default_factory=dict)  # "<path> <name or alias>" -> child path
    subcommands: dict[str, list[str]] = field(default_factory=dict)
    flags: dict[str, list[str]] = field(default_factory=dict)
    value_flags: dict[str, list[str]] = field(default_factory=dict)
    choices: dict[str, list[str]] = field(default_factory=dict)
    valid_args: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class ScriptContext:  # pylint: disable=too-many-instance-attributes
    """Everything a template needs to know about the program."""

    name: str
    ident: str
    request_cmd: str
    include_descriptions: bool
    has_completion_function: bool
    debug_env: str = COMP_DEBUG_FILE_ENV
    error: int = int(Directive.ERROR)
    no_space: int = int(Directive.NO_SPACE)
    no_file_comp: int = int(Directive.NO_FILE_COMP)
    filter_file_ext: int = int(Directive.FILTER_FILE_EXT)
    filter_dirs: int = int(Directive.FILTER_DIRS)
    keep_order: int = int(Directive.KEEP_ORDER)
    tables: StaticTables = field(default_factory=StaticTables)


def _build_tables(root: Command) -> StaticTables:
    tables = StaticTables()
    for command in root.walk():
        if command.is_completion_request:
            continue
        path = command.path
        for child in command.commands:
            if child.is_completion_request:
                continue
            for name in child.names():
                tables.children[f"{path} {name}"] = child.path
            if child.available:
                tables.subcommands.setdefault(path, []).extend(dict.fromkeys(child.names()))
        for flag in command.all_flags():
            tokens = [f"--{flag.name}"] + ([f"-{flag.shorthand}"] if flag.shorthand else [])
            if not flag.hidden:
                tables.flags.setdefault(path, []).extend(tokens)
            if flag.takes_value:
                tables.value_flags.setdefault(path, []).extend(tokens)
                if flag.choices:
                    values = [choice.split("\t", 1)[0] for choice in flag.choices]
                    for token in tokens:
                        tables.choices[f"{path} {token}"] = values
        if command.valid_args:
            tables.valid_args[path] = [value.split("\t", 1)[0] for value in command.valid_args]
    return tables


def build_context(root: Command, include_descriptions: bool, reg: CompletionRegistry | None = None) -> ScriptContext:
    """Describe `root` for the templates.

    Args:
        root: The root of the command tree
        include_descriptions: Use the request command which sends descriptions
        reg: The registry to inspect (defaults to the global one)

    Returns:
        The script context
    """
    reg = reg or default_registry
    return ScriptContext(
        name=root.name,
        ident=shell_identifier(root.name),
        request_cmd=COMP_REQUEST_CMD if include_descriptions else COMP_NO_DESC_REQUEST_CMD,
        include_descriptions=include_descriptions,
        has_completion_function=reg.has_completion_functions(root),
        tables=_build_tables(root),
    )
