"""Dialect specific escaping rules.

Pure string transforms, shared by the generators and the preview helpers.
"""

from __future__ import annotations

import re

__all__ = [
    "bash_quote",
    "fish_quote",
    "powershell_quote",
    "shell_identifier",
    "zsh_describe_entry",
]

_NOT_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]")


def shell_identifier(name: str) -> str:
    """Turn a program name into something usable in a shell function name.

    Args:
        name: The program name (e.g. "my-prog.py")

    Returns:
        The identifier (e.g. "my_prog_py")
    """
    ident = _NOT_IDENTIFIER.sub("_", name)
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    return ident


def bash_quote(text: str) -> str:
    """Single quote `text` for bash (also valid for zsh)."""
    return "'" + text.replace("'", "'\\''") + "'"


def zsh_describe_entry(value: str, description: str = "") -> str:
    """Build a `_describe` entry.

    Colons are escaped in the whole protocol line, then the tab becomes the
    colon separating the description, as the zsh script does.
    """
    line = f"{value}\t{description}" if description else value
    return line.replace(":", "\\:").replace("\t", ":")


def fish_quote(text: str) -> str:
    """Single quote `text` for fish, where only backslashes and quotes are special."""
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def powershell_quote(text: str) -> str:
    """Single quote `text` for PowerShell, quotes are doubled."""
    return "'" + text.replace("'", "''") + "'"
