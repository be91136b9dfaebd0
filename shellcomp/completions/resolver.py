"""Completion resolution.

Given the tokens typed so far, find what may come next: a subcommand, a flag
name, a flag value or a positional argument. The command line is re-parsed with
the same traversal and flag parser as a real execution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..commands.parsing import FLAGS_TERMINATOR, is_flag_arg, parse_flags
from ..commands.tree import find
from ..directive import Directive, describe, has
from ..logging_setup import get_logger
from ..models import ArgsError, ExtraArgsError, FlagError
from .models import Candidate
from .registry import registry as default_registry

if TYPE_CHECKING:
    from ..commands.models import Command, Flag, ParsedFlags
    from .models import CompletionFunc
    from .registry import CompletionRegistry

__all__ = ["filter_candidates", "resolve"]

log = get_logger("resolver")

Resolution = tuple[list[Candidate], Directive]


def filter_candidates(candidates: list[Candidate], prefix: str) -> list[Candidate]:
    """Keep the candidates whose value starts with `prefix`, in order."""
    return [candidate for candidate in candidates if candidate.value.startswith(prefix)]


def _find_flag_for_value(command: Command, args: list[str], partial: str) -> tuple[Flag | None, list[str], str]:
    """Tell if `partial` is the value of a flag.

    Handles "--name=<partial>", "-n=<partial>" and "--name <partial>".

    Args:
        command: The target command
        args: Tokens preceding `partial`, subcommands removed
        partial: The token being completed

    Returns:
        Tuple of (flag or None, args without the flag token, partial value)

    Raises:
        FlagError: the flag is unknown
    """
    flag_name = ""
    trimmed = args
    token = partial
    if partial.startswith("-"):
        if "=" not in partial:
            # completing a flag name
            return None, args, partial
        name, _, value = partial.partition("=")
        flag_name = name[2:] if name.startswith("--") else name[-1:]
        partial = value
    elif args and is_flag_arg(args[-1]) and "=" not in args[-1]:
        previous = args[-1]
        flag_name = previous[2:] if previous.startswith("--") else previous[-1]
        trimmed = args[:-1]

    if not flag_name:
        return None, args, token

    flag = command.find_flag(flag_name)
    if flag is None:
        msg = f"unknown flag {flag_name!r} for {command.path!r}"
        raise FlagError(msg)
    if not flag.takes_value:
        # a switch never takes a value
        return None, args, token
    return flag, trimmed, partial


def _call(func: CompletionFunc, command: Command, args: list[str], partial: str) -> Resolution:
    """Invoke a completion function supplied by the application.

    Exceptions are turned into an ERROR directive: the shell must never see a traceback.
    """
    try:
        items, directive = func(command, list(args), partial)
        return [Candidate.parse(item) for item in items or ()], Directive(int(directive))
    except Exception:  # pylint: disable=broad-exception-caught
        log.error("Completion function %s failed for %r", getattr(func, "__name__", func), command.path, exc_info=log.isEnabledFor(logging.DEBUG))
        return [], Directive.ERROR


def _complete_flag_names(command: Command, parsed: ParsedFlags) -> Resolution:
    """Offer "--name" and "-n" for each flag not given yet (unless repeatable)."""
    candidates: list[Candidate] = []
    for flag in command.all_flags():
        if flag.hidden or (flag.name in parsed.changed and not flag.repeatable):
            continue
        candidates.append(Candidate(f"--{flag.name}", flag.usage))
        if flag.shorthand:
            candidates.append(Candidate(f"-{flag.shorthand}", flag.usage))
    return candidates, Directive.NO_FILE_COMP


def _complete_flag_value(command: Command, flag: Flag, args: list[str], partial: str, reg: CompletionRegistry) -> Resolution:
    """Complete the value of `flag`: registered function, then static annotations."""
    func = reg.flag_completion(command, flag.name)
    if func is not None:
        return _call(func, command, args, partial)
    if flag.choices:
        return [Candidate.parse(choice) for choice in flag.choices], Directive.NO_FILE_COMP
    if flag.filename_exts:
        return [Candidate(ext) for ext in flag.filename_exts], Directive.FILTER_FILE_EXT
    if flag.dirname:
        return ([Candidate(flag.dirname_root)] if flag.dirname_root else []), Directive.FILTER_DIRS
    return [], Directive.DEFAULT


def _complete_subcommands(command: Command, partial: str) -> list[Candidate]:
    """Offer the children names and aliases starting with `partial`."""
    candidates: list[Candidate] = []
    for child in command.commands:
        if not child.available:
            continue
        for name in dict.fromkeys(child.names()):
            if name.startswith(partial):
                candidates.append(Candidate(name, child.short))
    return candidates


def _complete_positional(command: Command, args: list[str], partial: str, reg: CompletionRegistry) -> Resolution:
    """Complete a subcommand name and/or a positional argument."""
    candidates: list[Candidate] = []
    directive = Directive.DEFAULT
    if not args and command.has_available_subcommands():
        candidates.extend(_complete_subcommands(command, partial))

    try:
        # the partial token stands for the argument being typed
        command.validate_args([*args, partial])
    except ExtraArgsError as e:
        log.debug("No more arguments expected: %s", e)
        # the partial token may still be the beginning of a subcommand name
        return candidates, Directive.DEFAULT if candidates else Directive.NO_FILE_COMP
    except ArgsError as e:
        log.debug("Ignoring validation error while completing: %s", e)

    if command.valid_args:
        candidates.extend(Candidate.parse(value) for value in command.valid_args)
        directive = Directive.NO_FILE_COMP

    func = reg.args_completion(command)
    if func is not None:
        extra, directive = _call(func, command, args, partial)
        if has(directive, Directive.ERROR):
            return [], directive
        candidates.extend(extra)
    return candidates, directive


def _resolve(root: Command, tokens: list[str], reg: CompletionRegistry) -> Resolution:
    partial = tokens[-1] if tokens else ""
    preceding = tokens[:-1]

    command, remaining = find(root, preceding)
    log.debug("Target command: %s, remaining tokens: %s, partial: %r", command.path, remaining, partial)

    if command.disable_flag_parsing:
        # every token is a positional argument, as on execution
        candidates, directive = _complete_positional(command, remaining, partial, reg)
        return _finish(candidates, directive, partial)

    flags_done = FLAGS_TERMINATOR in remaining
    try:
        flag: Flag | None = None
        if not flags_done:
            flag, remaining, partial = _find_flag_for_value(command, remaining, partial)
        parsed = parse_flags(command, remaining)
    except FlagError as e:
        log.debug("Invalid flags: %s", e)
        return [], Directive.ERROR

    if flag is not None:
        candidates, directive = _complete_flag_value(command, flag, parsed.positional, partial, reg)
    elif partial.startswith("-") and not flags_done:
        candidates, directive = _complete_flag_names(command, parsed)
    else:
        candidates, directive = _complete_positional(command, parsed.positional, partial, reg)
    return _finish(candidates, directive, partial)


def _finish(candidates: list[Candidate], directive: Directive, partial: str) -> Resolution:
    """Apply the prefix filter."""
    if has(directive, Directive.FILTER_FILE_EXT) or has(directive, Directive.FILTER_DIRS):
        # extensions and directories are not values to match
        return candidates, directive
    return filter_candidates(candidates, partial), directive


def resolve(root: Command, tokens: list[str], reg: CompletionRegistry | None = None) -> Resolution:
    """Compute the completions for a partially typed command line.

    Args:
        root: The root of the command tree
        tokens: The words typed after the program name; the last one is the
            partial token being completed ("" right after a space)
        reg: The registry to use (defaults to the global one)

    Returns:
        Tuple of (ordered candidates, directive)
    """
    candidates, directive = _resolve(root, list(tokens), reg or default_registry)
    log.debug("%d completion(s), directive: %s", len(candidates), describe(directive))
    return candidates, directive
