"""Completion directives.

A directive is a small bit set returned with every completion result. It tells
the shell script how to treat the candidates: ignore them, skip the trailing
space, fall back (or not) to file completion...
"""

from __future__ import annotations

from enum import IntFlag

__all__ = [
    "Directive",
    "describe",
    "has",
]


class Directive(IntFlag):
    """Bit set sent to the shell as the last protocol line (`:<value>`)."""

    DEFAULT = 0
    ERROR = 1  # An error occurred, completions must be ignored
    NO_SPACE = 2  # Do not add a space after the completion
    NO_FILE_COMP = 4  # Do not fall back to file completion
    FILTER_FILE_EXT = 8  # Candidates are file extensions to filter on
    FILTER_DIRS = 16  # Only complete directory names
    KEEP_ORDER = 32  # Keep the order of the candidates


# Display names, in bit order
_NAMES: tuple[tuple[Directive, str], ...] = (
    (Directive.ERROR, "Error"),
    (Directive.NO_SPACE, "NoSpace"),
    (Directive.NO_FILE_COMP, "NoFileComp"),
    (Directive.FILTER_FILE_EXT, "FilterFileExt"),
    (Directive.FILTER_DIRS, "FilterDirs"),
    (Directive.KEEP_ORDER, "KeepOrder"),
)


def has(directive: int, bit: Directive) -> bool:
    """Tell if `bit` is set in `directive`.

    Args:
        directive: The directive value (a Directive or a plain int)
        bit: The bit to check

    Returns:
        True if the bit is set
    """
    return bool(int(directive) & int(bit))


def describe(directive: int) -> str:
    """Return the readable form of a directive, e.g. "NoSpace, NoFileComp".

    Unknown bits are kept as their numeric value so nothing is silently lost.

    Args:
        directive: The directive value

    Returns:
        Comma separated bit names, "Default" for 0
    """
    value = int(directive)
    if value == 0:
        return "Default"
    names = [name for bit, name in _NAMES if value & bit]
    unknown = value & ~sum(bit for bit, _ in _NAMES)
    if unknown:
        names.append(str(unknown))
    return ", ".join(names)
