"""Command line token parsing: flags and positional arguments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import FlagError
from .models import ParsedFlags

if TYPE_CHECKING:
    from .models import Command, Flag

__all__ = ["args_minus_first", "is_flag_arg", "parse_flags", "strip_flags"]

FLAGS_TERMINATOR = "--"


def is_flag_arg(arg: str) -> bool:
    """Tell if `arg` looks like a flag ("--name" or "-n"), a lone dash is not one."""
    return (len(arg) >= 3 and arg.startswith("--")) or (len(arg) >= 2 and arg[0] == "-" and arg[1] != "-")


def _needs_value(command: Command, name: str, short: bool = False) -> bool:
    """Whether the flag `name` consumes the next token.

    Unknown flags are assumed to take a value.
    """
    flags = command.all_flags()
    flag = next((f for f in flags if (f.shorthand if short else f.name) == name), None)
    return flag is None or flag.takes_value


def strip_flags(command: Command, tokens: list[str]) -> list[str]:
    """Return the tokens which are not flags nor flag values.

    Stops at the `--` terminator.
    """
    remaining: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if token == FLAGS_TERMINATOR:
            break
        if token.startswith("--") and "=" not in token:
            if _needs_value(command, token[2:]):
                i += 1
        elif token.startswith("-") and not token.startswith("--") and len(token) == 2:
            if _needs_value(command, token[1:], short=True):
                i += 1
        elif token and not token.startswith("-"):
            remaining.append(token)
    return remaining


def args_minus_first(command: Command, tokens: list[str], target: str) -> list[str]:
    """Remove the first positional occurrence of `target` from `tokens`.

    Flags and their values are kept untouched.
    """
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == FLAGS_TERMINATOR:
            break
        if token.startswith("--") and "=" not in token:
            if _needs_value(command, token[2:]):
                i += 1
        elif token.startswith("-") and not token.startswith("--") and len(token) == 2:
            if _needs_value(command, token[1:], short=True):
                i += 1
        elif token == target:
            return tokens[:i] + tokens[i + 1 :]
        i += 1
    return list(tokens)


def _store(parsed: ParsedFlags, flag: Flag, value: str | bool, check_choices: bool) -> None:
    if check_choices and flag.choices and isinstance(value, str):
        accepted = [choice.split("\t", 1)[0] for choice in flag.choices]
        if value not in accepted:
            msg = f"invalid value {value!r} for --{flag.name}, expected one of: {', '.join(accepted)}"
            raise FlagError(msg)
    if flag.repeatable:
        parsed.values[flag.name].append(value)
    else:
        parsed.values[flag.name] = value
    parsed.changed.add(flag.name)


def _parse_long(command: Command, parsed: ParsedFlags, tokens: list[str], i: int, check_choices: bool) -> int:
    """Parse the "--name[=value]" token at `i`, return the index of the next token."""
    token = tokens[i]
    name, sep, value = token[2:].partition("=")
    flag = next((f for f in command.all_flags() if f.name == name), None)
    if flag is None:
        msg = f"unknown flag: --{name}"
        raise FlagError(msg)
    if sep:
        if not flag.takes_value:
            msg = f"flag --{name} does not take a value"
            raise FlagError(msg)
        _store(parsed, flag, value, check_choices)
        return i + 1
    if not flag.takes_value:
        _store(parsed, flag, True, check_choices)
        return i + 1
    if i + 1 >= len(tokens):
        msg = f"flag needs an argument: --{name}"
        raise FlagError(msg)
    _store(parsed, flag, tokens[i + 1], check_choices)
    return i + 2


def _parse_short(command: Command, parsed: ParsedFlags, tokens: list[str], i: int, check_choices: bool) -> int:
    """Parse the "-abc", "-o value", "-ovalue" or "-o=value" token at `i`."""
    letters = tokens[i][1:]
    j = 0
    while j < len(letters):
        letter = letters[j]
        flag = next((f for f in command.all_flags() if f.shorthand == letter), None)
        if flag is None:
            msg = f"unknown shorthand flag: {letter!r} in -{letters}"
            raise FlagError(msg)
        rest = letters[j + 1 :]
        if not flag.takes_value:
            if rest.startswith("="):
                msg = f"flag -{letter} does not take a value"
                raise FlagError(msg)
            _store(parsed, flag, True, check_choices)
            j += 1
            continue
        if rest:
            _store(parsed, flag, rest.removeprefix("="), check_choices)
            return i + 1
        if i + 1 >= len(tokens):
            msg = f"flag needs an argument: -{letter}"
            raise FlagError(msg)
        _store(parsed, flag, tokens[i + 1], check_choices)
        return i + 2
    return i + 1


def parse_flags(command: Command, tokens: list[str], check_choices: bool = False) -> ParsedFlags:
    """Parse `tokens` against the flags of `command` (local and inherited).

    Args:
        command: The command owning the flags
        tokens: Raw tokens, subcommand names already removed
        check_choices: Reject values which are not in the flag's choices

    Returns:
        The flag values, the positional arguments and the names of the flags given

    Raises:
        FlagError: unknown flag, missing value or (with check_choices) invalid value
    """
    parsed = ParsedFlags(values={flag.name: flag.initial_value for flag in command.all_flags()})
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == FLAGS_TERMINATOR:
            parsed.positional.extend(tokens[i + 1 :])
            break
        if token.startswith("--"):
            i = _parse_long(command, parsed, tokens, i, check_choices)
        elif is_flag_arg(token):
            i = _parse_short(command, parsed, tokens, i, check_choices)
        else:
            parsed.positional.append(token)
            i += 1
    return parsed
