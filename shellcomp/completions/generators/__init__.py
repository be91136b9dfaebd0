"""Shell completion generators.

Provides generator functions for each supported shell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .bash import generate_bash
from .fish import generate_fish
from .powershell import generate_powershell
from .preview import preview
from .zsh import generate_zsh, generate_zsh_v1

if TYPE_CHECKING:
    from collections.abc import Callable

    from ...commands.models import Command

__all__ = [
    "GENERATORS",
    "generate_bash",
    "generate_fish",
    "generate_powershell",
    "generate_zsh",
    "generate_zsh_v1",
    "preview",
]

GENERATORS: dict[str, Callable[[Command, bool], str]] = {
    "bash": generate_bash,
    "zsh": generate_zsh,
    "zsh-v1": generate_zsh_v1,
    "fish": generate_fish,
    "powershell": generate_powershell,
}
