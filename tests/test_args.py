"""Tests for the positional arguments validators."""

import pytest

from shellcomp.commands.args import (
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
from shellcomp.commands.models import Command
from shellcomp.models import ExtraArgsError, InvalidArgError, MissingArgsError, UnknownCommandError


class TestLegacyArgs:
    """The default validator."""

    def test_root_with_subcommands_rejects_args(self) -> None:
        root = Command("prog")
        root.add_command(Command("child"))
        with pytest.raises(UnknownCommandError):
            legacy_args(root, ["x"])
        legacy_args(root, [])

    def test_child_accepts_anything(self) -> None:
        root = Command("prog")
        child = Command("child")
        grandchild = Command("grandchild")
        child.add_command(grandchild)
        root.add_command(child)
        legacy_args(child, ["x", "y"])
        legacy_args(grandchild, ["x"])

    def test_root_without_subcommands_accepts_anything(self) -> None:
        legacy_args(Command("prog"), ["x", "y"])

    def test_completion_requests_are_ignored(self) -> None:
        """A single command program keeps accepting arguments once the hidden commands exist."""
        root = Command("prog")
        hidden = Command("__complete")
        hidden.is_completion_request = True
        root.add_command(hidden)
        legacy_args(root, ["x"])

    def test_is_the_default(self) -> None:
        root = Command("prog")
        root.add_command(Command("child"))
        with pytest.raises(UnknownCommandError):
            root.validate_args(["x"])


class TestCountValidators:
    """Validators checking the number of arguments."""

    def test_no_args(self) -> None:
        cmd = Command("prog")
        no_args(cmd, [])
        with pytest.raises(UnknownCommandError):
            no_args(cmd, ["x"])

    def test_arbitrary_args(self) -> None:
        arbitrary_args(Command("prog"), ["a", "b", "c"])

    def test_minimum(self) -> None:
        cmd = Command("prog")
        minimum_n_args(1)(cmd, ["a", "b"])
        with pytest.raises(MissingArgsError):
            minimum_n_args(1)(cmd, [])

    def test_maximum(self) -> None:
        cmd = Command("prog")
        maximum_n_args(1)(cmd, ["a"])
        with pytest.raises(ExtraArgsError):
            maximum_n_args(1)(cmd, ["a", "b"])

    def test_exact(self) -> None:
        cmd = Command("prog")
        exact_args(2)(cmd, ["a", "b"])
        with pytest.raises(MissingArgsError):
            exact_args(2)(cmd, ["a"])
        with pytest.raises(ExtraArgsError):
            exact_args(2)(cmd, ["a", "b", "c"])

    def test_range(self) -> None:
        cmd = Command("prog")
        range_args(1, 2)(cmd, ["a"])
        range_args(1, 2)(cmd, ["a", "b"])
        with pytest.raises(MissingArgsError):
            range_args(1, 2)(cmd, [])
        with pytest.raises(ExtraArgsError):
            range_args(1, 2)(cmd, ["a", "b", "c"])


class TestValueValidators:
    """Validators checking the values."""

    def test_only_valid_args(self) -> None:
        cmd = Command("prog", valid_args=("start\tStart it", "stop"))
        only_valid_args(cmd, ["start", "stop"])
        with pytest.raises(InvalidArgError):
            only_valid_args(cmd, ["restart"])

    def test_only_valid_args_without_values(self) -> None:
        only_valid_args(Command("prog"), ["anything"])

    def test_match_all(self) -> None:
        cmd = Command("prog", valid_args=("a", "b"))
        validator = match_all(exact_args(1), only_valid_args)
        validator(cmd, ["a"])
        with pytest.raises(InvalidArgError):
            validator(cmd, ["c"])
        with pytest.raises(ExtraArgsError):
            validator(cmd, ["a", "b"])
