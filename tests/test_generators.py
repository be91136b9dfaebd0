"""Tests for the completion script generators."""

import os
import shutil
import subprocess

import pytest

from shellcomp import Command, Flag, set_args_completion
from shellcomp.completions.generators import (
    GENERATORS,
    generate_bash,
    generate_fish,
    generate_powershell,
    generate_zsh,
    generate_zsh_v1,
    preview,
)
from shellcomp.completions.generators.context import build_context
from shellcomp.completions.handlers import install_completion_commands

from .testtools import static_completion


@pytest.fixture
def program():
    root = Command("my-prog", persistent_flags=[Flag("verbose", "v", takes_value=False)])
    get = Command(
        "get",
        short="Get resources",
        aliases=("fetch",),
        valid_args=("pods\tThe pods", "nodes"),
        flags=[Flag("format", "f", choices=("json\tJSON output", "yaml")), Flag("secret", hidden=True)],
    )
    root.add_command(get, Command("status", short="Show status"), Command("internal", hidden=True))
    install_completion_commands(root)
    return root


class TestContext:
    def test_names(self, program, reg) -> None:
        ctx = build_context(program, True, reg)
        assert ctx.name == "my-prog"
        assert ctx.ident == "my_prog"
        assert ctx.request_cmd == "__complete"
        assert build_context(program, False, reg).request_cmd == "__completeNoDesc"

    def test_completion_function_detection(self, program, reg) -> None:
        assert not build_context(program, True, reg).has_completion_function
        reg.set_args_completion(program.find_child("status"), static_completion("x"))
        assert build_context(program, True, reg).has_completion_function

    def test_tables(self, program, reg) -> None:
        tables = build_context(program, True, reg).tables
        assert tables.children["my-prog get"] == "my-prog get"
        assert tables.children["my-prog fetch"] == "my-prog get"
        assert tables.children["my-prog internal"] == "my-prog internal"
        assert "my-prog __complete" not in tables.children
        assert tables.subcommands["my-prog"] == ["get", "fetch", "status", "completion"]
        assert tables.flags["my-prog get"] == ["--format", "-f", "--verbose", "-v"]
        assert tables.value_flags["my-prog get"] == ["--format", "-f", "--secret"]
        assert tables.choices["my-prog get --format"] == ["json", "yaml"]
        assert tables.choices["my-prog get -f"] == ["json", "yaml"]
        assert tables.valid_args["my-prog get"] == ["pods", "nodes"]
        assert "zsh-v1" in tables.subcommands["my-prog completion"]


class TestBash:
    def test_static(self, program) -> None:
        script = generate_bash(program)
        assert script.startswith("# bash completion for my-prog")
        assert 'local has_completion_function=""' in script
        assert "has_completion_function=1" not in script
        assert "complete -o default -F __start_my_prog 'my-prog'" in script
        assert "['my-prog get --format']='json yaml'" in script
        assert "['my-prog fetch']='my-prog get'" in script

    def test_dynamic(self, program) -> None:
        set_args_completion(program.find_child("status"), static_completion("x"))
        script = generate_bash(program)
        assert "local has_completion_function=1" in script

    def test_never_asks_for_descriptions(self, program) -> None:
        script = generate_bash(program, include_descriptions=True)
        assert "__completeNoDesc" in script
        assert "__complete " not in script


class TestZsh:
    def test_v2(self, program) -> None:
        script = generate_zsh(program)
        assert script.startswith("#compdef my-prog\n")
        assert "${words[1]} __complete ${words[2,-1]}" in script
        assert "compdef _my_prog 'my-prog'" in script
        assert "_describe" in script

    def test_v2_without_descriptions(self, program) -> None:
        assert "__completeNoDesc" in generate_zsh(program, include_descriptions=False)

    def test_v1(self, program) -> None:
        script = generate_zsh_v1(program, include_descriptions=True)
        assert script.startswith("#compdef my-prog\n")
        assert "__completeNoDesc" in script
        assert "_describe" not in script
        assert "compdef _my_prog 'my-prog'" in script


class TestFish:
    def test_script(self, program) -> None:
        script = generate_fish(program)
        assert script.startswith("# fish completion for my-prog")
        assert "complete -c 'my-prog' -e" in script
        assert '"$args[1] __complete $args[2..-1] $lastArg"' in script

    def test_without_descriptions(self, program) -> None:
        assert "__completeNoDesc" in generate_fish(program, include_descriptions=False)


class TestPowershell:
    def test_script(self, program) -> None:
        script = generate_powershell(program)
        assert script.startswith("# powershell completion for my-prog")
        assert "Register-ArgumentCompleter -CommandName 'my-prog'" in script
        assert '"$Program __complete $Arguments"' in script

    def test_without_descriptions(self, program) -> None:
        assert "__completeNoDesc" in generate_powershell(program, include_descriptions=False)


def test_all_shells_have_a_generator(program) -> None:
    assert sorted(GENERATORS) == ["bash", "fish", "powershell", "zsh", "zsh-v1"]
    for generator in GENERATORS.values():
        assert generator(program, True).endswith("\n")


class TestPreview:
    OUTPUT = "zeta\tLast letter\nhost:port\tAn address\nalpha\n:32\n"

    def test_zsh(self) -> None:
        assert preview("zsh", self.OUTPUT) == ["zeta:Last letter", "host\\:port:An address", "alpha"]
        assert preview("zsh", "db\tListens on :5432\n:0\n") == ["db:Listens on \\:5432"]

    def test_fish(self) -> None:
        assert preview("fish", self.OUTPUT) == ["zeta\tLast letter", "host:port\tAn address", "alpha"]

    def test_bash(self) -> None:
        assert preview("bash", self.OUTPUT) == ["zeta", "host:port", "alpha"]

    def test_powershell_sorts(self) -> None:
        assert preview("powershell", self.OUTPUT) == ["zeta", "host:port", "alpha"]
        assert preview("powershell", "zeta\nalpha\n:0\n") == ["alpha", "zeta"]

    def test_error(self) -> None:
        assert preview("bash", "one\n:1\n") == []


SYNTAX_CHECKS = [
    ("bash", "bash", ["bash", "-n"]),
    ("zsh", "zsh", ["zsh", "-n"]),
    ("zsh-v1", "zsh", ["zsh", "-n"]),
    ("fish", "fish", ["fish", "--no-execute"]),
]


@pytest.mark.parametrize(("shell", "executable", "command"), SYNTAX_CHECKS)
def test_script_syntax(program, tmp_path, shell, executable, command) -> None:
    """The scripts are accepted by the shells themselves."""
    if shutil.which(executable) is None:
        pytest.skip(f"{executable} is not installed")
    script = tmp_path / f"completion.{shell}"
    script.write_text(GENERATORS[shell](program, True), encoding="utf-8")
    result = subprocess.run([*command, str(script)], capture_output=True, text=True, check=False)
    assert result.returncode == 0, result.stderr


BASH_DRIVER = """
source "$SCRIPT"
compopt() { echo "compopt $*"; }
prog() {
    printf '%s\\n' "$*" > "$REQUEST_LOG"
    printf '%s\\n' "$PROTOCOL_OUTPUT"
}
COMP_WORDS=(prog get "")
COMP_CWORD=2
__start_prog
for reply in "${COMPREPLY[@]}"; do
    echo "reply:$reply"
done
"""


class TestBashBehaviour:
    """The bash script applies the directives sent by the program."""

    @pytest.fixture
    def run(self, tmp_path):
        if shutil.which("bash") is None:
            pytest.skip("bash is not installed")
        root = Command("prog")
        get = Command("get")
        root.add_command(get)
        set_args_completion(get, static_completion("x"))
        script = tmp_path / "prog.bash"
        script.write_text(generate_bash(root), encoding="utf-8")
        driver = tmp_path / "driver.bash"
        driver.write_text(BASH_DRIVER, encoding="utf-8")
        log = tmp_path / "request.log"

        def _run(output: str) -> list[str]:
            env = {**os.environ, "SCRIPT": str(script), "PROTOCOL_OUTPUT": output, "REQUEST_LOG": str(log)}
            result = subprocess.run(["bash", str(driver)], capture_output=True, text=True, env=env, check=False)
            assert result.returncode == 0, result.stderr
            assert log.read_text(encoding="utf-8") == "__completeNoDesc get \n"
            return result.stdout.splitlines()

        return _run

    def test_candidates(self, run) -> None:
        assert run("one\ntwo\n:0") == ["reply:one", "reply:two"]

    def test_description_is_dropped(self, run) -> None:
        assert run("one\tThe first\ntwo\n:0") == ["reply:one", "reply:two"]

    def test_no_space(self, run) -> None:
        assert run("one\tThe first\n:6") == ["compopt -o nospace", "reply:one"]

    def test_no_space_needs_a_single_candidate(self, run) -> None:
        assert run("one\ntwo\n:2") == ["reply:one", "reply:two"]

    def test_error(self, run) -> None:
        assert run("one\n:1") == ["compopt +o default"]

    def test_no_file_completion(self, run) -> None:
        assert run(":4") == ["compopt +o default"]

    def test_default_keeps_file_completion(self, run) -> None:
        assert run(":0") == []

    def test_keep_order(self, run) -> None:
        assert run("b\na\n:32") == ["compopt -o nosort", "reply:b", "reply:a"]

    def test_missing_directive(self, run) -> None:
        assert run("one") == ["reply:one"]
