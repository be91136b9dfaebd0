"""Shell completions for shellcomp.

This package provides:
- Completion resolution for a partially typed command line
- The text protocol read by the shell scripts
- Shell-specific completion script generators (bash, zsh, fish, powershell)
- The hidden request commands and the `completion` command
"""

from __future__ import annotations

from .generators import GENERATORS
from .handlers import get_default_path, handle_completion_request, handle_generate, install_completion_commands
from .models import Candidate, CompletionFunc, CompletionResult
from .protocol import decode, encode
from .registry import CompletionRegistry, register_flag_completion, registry, set_args_completion
from .resolver import filter_candidates, resolve

__all__ = [
    "GENERATORS",
    "Candidate",
    "CompletionFunc",
    "CompletionRegistry",
    "CompletionResult",
    "decode",
    "encode",
    "filter_candidates",
    "get_default_path",
    "handle_completion_request",
    "handle_generate",
    "install_completion_commands",
    "register_flag_completion",
    "registry",
    "resolve",
    "set_args_completion",
]
