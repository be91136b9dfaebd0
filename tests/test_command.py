"""Tests for the command tree models."""

import pytest

from shellcomp.commands.models import Command, Flag
from shellcomp.models import RegistrationError


@pytest.fixture
def tree():
    "root -> remote -> add, root -> status"
    root = Command("prog", persistent_flags=[Flag("config", "c", usage="Config file")])
    remote = Command("remote", short="Manage remotes", aliases=("rem",), flags=[Flag("verbose", "v", takes_value=False)])
    add = Command("add", short="Add a remote")
    status = Command("status", hidden=True)
    remote.add_command(add)
    root.add_command(remote, status)
    return root, remote, add, status


class TestFlag:
    """Flag declaration."""

    def test_defaults(self) -> None:
        flag = Flag("output")
        assert flag.takes_value
        assert flag.initial_value is None

    def test_switch_initial_value(self) -> None:
        assert Flag("verbose", takes_value=False).initial_value is False

    def test_repeatable_initial_value(self) -> None:
        flag = Flag("tag", repeatable=True, default=["a"])
        value = flag.initial_value
        assert value == ["a"]
        value.append("b")
        assert flag.initial_value == ["a"]

    @pytest.mark.parametrize("name", ["", "-x", "--x", "a=b"])
    def test_invalid_name(self, name: str) -> None:
        with pytest.raises(RegistrationError):
            Flag(name)

    @pytest.mark.parametrize("shorthand", ["ab", "-", "="])
    def test_invalid_shorthand(self, shorthand: str) -> None:
        with pytest.raises(RegistrationError):
            Flag("name", shorthand)

    def test_sequences_become_tuples(self) -> None:
        flag = Flag("format", choices=["json", "yaml"], filename_exts=["json"])
        assert flag.choices == ("json", "yaml")
        assert flag.filename_exts == ("json",)


class TestTreeStructure:
    """Parent links, paths and lookups."""

    def test_path_and_root(self, tree) -> None:
        root, remote, add, _ = tree
        assert add.path == "prog remote add"
        assert add.root is root
        assert remote.parent is root
        assert root.path == "prog"

    def test_commands_in_insertion_order(self, tree) -> None:
        root, remote, _, status = tree
        assert root.commands == (remote, status)

    def test_find_child_by_name_or_alias(self, tree) -> None:
        root, remote, _, _ = tree
        assert root.find_child("remote") is remote
        assert root.find_child("rem") is remote
        assert root.find_child("nope") is None

    def test_walk(self, tree) -> None:
        root, remote, add, status = tree
        assert list(root.walk()) == [root, remote, add, status]

    def test_available(self, tree) -> None:
        root, remote, _, status = tree
        assert remote.available
        assert not status.available
        assert root.has_available_subcommands()

    def test_completion_requests_are_not_subcommands(self) -> None:
        root = Command("prog")
        hidden = Command("__complete")
        hidden.is_completion_request = True
        root.add_command(hidden)
        assert not root.has_subcommands()
        assert not root.has_available_subcommands()

    def test_duplicate_name(self, tree) -> None:
        root, *_ = tree
        with pytest.raises(RegistrationError):
            root.add_command(Command("remote"))

    def test_duplicate_alias(self, tree) -> None:
        root, *_ = tree
        with pytest.raises(RegistrationError):
            root.add_command(Command("other", aliases=("rem",)))

    def test_already_attached(self, tree) -> None:
        root, _, add, _ = tree
        with pytest.raises(RegistrationError):
            root.add_command(add)

    def test_self_child(self) -> None:
        cmd = Command("prog")
        with pytest.raises(RegistrationError):
            cmd.add_command(cmd)

    @pytest.mark.parametrize("name", ["", "-x", "two words"])
    def test_invalid_name(self, name: str) -> None:
        with pytest.raises(RegistrationError):
            Command(name)

    def test_identity_equality(self) -> None:
        """Two commands with the same fields are still different keys."""
        assert Command("a") != Command("a")
        assert len({Command("a"), Command("a")}) == 2


class TestFlags:
    """Local, persistent and inherited flags."""

    def test_inherited(self, tree) -> None:
        _, remote, add, _ = tree
        assert [f.name for f in remote.local_flags()] == ["verbose"]
        assert [f.name for f in remote.inherited_flags()] == ["config"]
        assert [f.name for f in add.all_flags()] == ["config"]

    def test_shadowing(self) -> None:
        root = Command("prog", persistent_flags=[Flag("level")])
        child = Command("child", flags=[Flag("level", usage="local")])
        root.add_command(child)
        assert [f.usage for f in child.all_flags()] == ["local"]

    def test_find_flag(self, tree) -> None:
        _, remote, _, _ = tree
        assert remote.find_flag("v").name == "verbose"
        assert remote.find_flag("verbose").name == "verbose"
        assert remote.find_flag("c").name == "config"
        assert remote.find_flag("nope") is None

    def test_duplicate_flag(self) -> None:
        cmd = Command("prog", flags=[Flag("output", "o")])
        with pytest.raises(RegistrationError):
            cmd.add_flag(Flag("output"))
        with pytest.raises(RegistrationError):
            cmd.add_flag(Flag("other", "o"), persistent=True)

    def test_duplicate_in_constructor(self) -> None:
        with pytest.raises(RegistrationError):
            Command("prog", flags=[Flag("output")], persistent_flags=[Flag("output")])


class TestOutput:
    """Output streams are inherited from the ancestors."""

    def test_defaults_to_sys_streams(self, mocker) -> None:
        out = mocker.patch("sys.stdout")
        err = mocker.patch("sys.stderr")
        cmd = Command("prog")
        assert cmd.stdout is out
        assert cmd.stderr is err

    def test_inherited(self, tree, mocker) -> None:
        root, _, add, _ = tree
        out, err = mocker.Mock(), mocker.Mock()
        root.set_output(out, err)
        assert add.stdout is out
        assert add.stderr is err
