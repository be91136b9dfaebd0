"""Command tree for shellcomp.

This package provides:
- models: Data structures (Command, Flag, ParsedFlags)
- parsing: Flag parsing
- args: Positional arguments validators
- tree: Traversal shared by execution and completion
- runner: Program execution
"""

from .args import (
    arbitrary_args,
    exact_args,
    legacy_args,
    match_all,
    maximum_n_args,
    minimum_n_args,
    no_args,
    only_valid_args,
    range_args,
)
from .models import Command, Flag, ParsedFlags
from .parsing import parse_flags
from .tree import find

__all__ = [
    "Command",
    "Flag",
    "ParsedFlags",
    "arbitrary_args",
    "exact_args",
    "find",
    "legacy_args",
    "match_all",
    "maximum_n_args",
    "minimum_n_args",
    "no_args",
    "only_valid_args",
    "parse_flags",
    "range_args",
]
