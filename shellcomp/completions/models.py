"""Data models for shell completions."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..commands.models import Command

__all__ = ["Candidate", "CompletionFunc", "CompletionResult"]


@dataclass(frozen=True)
class Candidate:
    """A single completion suggestion."""

    value: str
    description: str = ""

    @classmethod
    def parse(cls, item: str | Candidate) -> Candidate:
        """Build a candidate from "value" or "value<TAB>description".

        Args:
            item: A raw string or an existing candidate (returned as is)

        Returns:
            The candidate
        """
        if isinstance(item, Candidate):
            return item
        value, _, description = item.partition("\t")
        return cls(value, description)


# (items, directive); items can mix Candidate objects and "value\tdescription" strings
CompletionResult = tuple[Iterable["str | Candidate"], int]

# Called with (command being completed, positional args already typed, partial token)
CompletionFunc = Callable[["Command", list[str], str], CompletionResult]
