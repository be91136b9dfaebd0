"""What a generated script hands to its shell for a given protocol output.

Mirrors the shell side processing, for tests and for application authors
checking their completion functions without a shell at hand.
"""

from __future__ import annotations

from ...directive import Directive, has
from ..protocol import decode
from .escaping import zsh_describe_entry

__all__ = ["preview"]


def preview(shell: str, text: str) -> list[str]:
    """Return the entries `shell` would offer for the protocol `text`.

    Extension and directory filters are returned as they are: the shell would
    list matching files instead.

    Args:
        shell: One of the supported shells
        text: Output of the completion request command

    Returns:
        The entries, in the order the shell receives them
    """
    candidates, directive = decode(text)
    if has(directive, Directive.ERROR):
        return []
    if shell == "zsh":
        return [zsh_describe_entry(c.value, c.description) for c in candidates]
    if shell == "fish":
        return [f"{c.value}\t{c.description}" if c.description else c.value for c in candidates]
    values = [c.value for c in candidates]
    if shell == "powershell" and not has(directive, Directive.KEEP_ORDER):
        return sorted(values)
    return values
