"""shellcomp - dynamic shell completion for command line programs.

Programs describe their commands and flags as a tree; the generated bash, zsh,
fish and PowerShell scripts call the program back through a hidden command to
learn what may be typed next.
"""

from .commands import Command, Flag
from .commands.runner import execute, main
from .completions import Candidate, register_flag_completion, set_args_completion
from .config import CompletionOptions, load_options
from .directive import Directive

__all__ = [
    "Candidate",
    "Command",
    "CompletionOptions",
    "Directive",
    "Flag",
    "execute",
    "load_options",
    "main",
    "register_flag_completion",
    "set_args_completion",
]
