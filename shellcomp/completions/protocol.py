"""Completion protocol, as read by the generated shell scripts.

One line per candidate ("value" or "value<TAB>description"), then the directive
on its own line, prefixed with a colon:

    one<TAB>The first
    two<TAB>The second
    :4
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..directive import Directive
from .models import Candidate

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TextIO

__all__ = ["decode", "encode", "write"]

DIRECTIVE_PREFIX = ":"


def _first_line(text: str) -> str:
    """Keep what precedes the first line break, it would break the protocol otherwise."""
    return text.split("\n", 1)[0].rstrip("\r")


def encode(candidates: Iterable[Candidate], directive: int, include_descriptions: bool) -> str:
    """Serialize a completion result.

    Args:
        candidates: The candidates, in the order they must be shown
        directive: The directive
        include_descriptions: Append "<TAB>description" when a description exists

    Returns:
        The protocol text, each line terminated by a newline
    """
    lines: list[str] = []
    for candidate in candidates:
        value = _first_line(candidate.value)
        description = _first_line(candidate.description).strip() if include_descriptions else ""
        lines.append(f"{value}\t{description}" if description else value)
    lines.append(f"{DIRECTIVE_PREFIX}{int(directive)}")
    return "\n".join(lines) + "\n"


def write(stream: TextIO, candidates: Iterable[Candidate], directive: int, include_descriptions: bool) -> None:
    """Write the encoded completion result to `stream`."""
    stream.write(encode(candidates, directive, include_descriptions))
    stream.flush()


def decode(text: str) -> tuple[list[Candidate], Directive]:
    """Parse the protocol the way the shell scripts do.

    The last non-empty line is the directive when it looks like ":<number>",
    otherwise the directive defaults to 0 and every line is a candidate.

    Args:
        text: The protocol text

    Returns:
        Tuple of (candidates, directive)
    """
    lines = text.split("\n")
    while lines and not lines[-1]:
        lines.pop()
    directive = Directive.DEFAULT
    if lines and lines[-1].startswith(DIRECTIVE_PREFIX) and lines[-1][1:].isdigit():
        directive = Directive(int(lines.pop()[1:]))
    return [Candidate.parse(line) for line in lines if line], directive
