"""Program execution: find the command, parse its flags, run it."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, NoReturn

from ..completions.handlers import install_completion_commands
from ..logging_setup import get_logger
from ..models import ArgsError, ExitCode, FlagError, ShellCompError
from .parsing import parse_flags
from .tree import find

if TYPE_CHECKING:
    from typing import TextIO

    from .models import Command

__all__ = ["execute", "main"]

log = get_logger("runner")


def execute(root: Command, argv: list[str] | None = None, stdout: TextIO | None = None, stderr: TextIO | None = None) -> int:
    """Run a program.

    Args:
        root: The root of the command tree
        argv: Arguments, without the program name (defaults to sys.argv[1:])
        stdout: Output stream (defaults to sys.stdout)
        stderr: Diagnostics stream (defaults to sys.stderr)

    Returns:
        The exit code
    """
    if stdout is not None or stderr is not None:
        root.set_output(stdout, stderr)
    install_completion_commands(root)

    argv = sys.argv[1:] if argv is None else list(argv)
    command, remaining = find(root, argv)
    log.debug("Running %s with %s", command.path, remaining)

    try:
        if command.disable_flag_parsing:
            args, values = remaining, {}
        else:
            parsed = parse_flags(command, remaining, check_choices=True)
            args, values = parsed.positional, parsed.values
        command.validate_args(args)
    except (FlagError, ArgsError) as e:
        command.stderr.write(f"Error: {e}\n")
        return ExitCode.USAGE_ERROR

    if command.run is None:
        if command.has_subcommands():
            names = ", ".join(child.name for child in command.commands if child.available)
            command.stderr.write(f"Error: {command.path!r} requires a subcommand: {names}\n")
            return ExitCode.USAGE_ERROR
        return ExitCode.SUCCESS

    try:
        code = command.run(command, args, values)
    except ShellCompError as e:
        log.debug("%s failed", command.path, exc_info=True)
        command.stderr.write(f"Error: {e}\n")
        return ExitCode.COMMAND_ERROR
    return ExitCode.SUCCESS if code is None else code


def main(root: Command) -> NoReturn:
    """Entry point: run the program with sys.argv and exit with its code."""
    sys.exit(execute(root))
