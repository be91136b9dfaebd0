"""Completion commands.

Adds to a program the hidden commands the generated scripts call, and the
user facing `completion <shell> [path]` command generating those scripts.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..commands.args import arbitrary_args, maximum_n_args, no_args
from ..commands.models import Command, Flag
from ..config import CompletionOptions, coerce_to_bool
from ..constants import (
    COMP_NO_DESC_REQUEST_CMD,
    COMP_REQUEST_CMD,
    COMPLETION_CMD,
    DEFAULT_PATHS,
    NO_DESC_FLAG,
    NO_DESCRIPTIONS_ENV,
    SUPPORTED_SHELLS,
)
from ..directive import describe
from ..logging_setup import get_logger
from ..models import ExitCode
from . import protocol
from .generators import GENERATORS
from .resolver import resolve

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import TextIO

    from .registry import CompletionRegistry

__all__ = [
    "get_default_path",
    "handle_completion_request",
    "handle_generate",
    "install_completion_commands",
]

log = get_logger("completion")


def get_options(root: Command) -> CompletionOptions:
    """Return the completion options of a program."""
    return root.completion_options or CompletionOptions()


def get_default_path(shell: str, name: str) -> str:
    """Get the default user-level completion path for a shell.

    Args:
        shell: Shell type ("bash", "zsh", "zsh-v1", "fish" or "powershell")
        name: The program name

    Returns:
        Expanded absolute path to the default completion file
    """
    return str(Path(DEFAULT_PATHS[shell].format(name=name)).expanduser())


def handle_completion_request(
    command: Command,
    args: list[str],
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    include_descriptions: bool = True,
    reg: CompletionRegistry | None = None,
) -> int:
    """Answer a request sent by a completion script.

    Args:
        command: Any command of the tree (the request command itself in practice)
        args: The words typed after the program name, the last one being partial
        stdout: Receives the protocol stream
        stderr: Receives the diagnostic line
        include_descriptions: Send the descriptions
        reg: The registry to use (defaults to the global one)

    Returns:
        Always ExitCode.SUCCESS: failures are reported through the directive
    """
    root = command.root
    stdout = stdout or command.stdout
    stderr = stderr or command.stderr
    if get_options(root).disable_descriptions or coerce_to_bool(os.environ.get(NO_DESCRIPTIONS_ENV)):
        include_descriptions = False

    candidates, directive = resolve(root, args, reg)
    protocol.write(stdout, candidates, directive, include_descriptions)
    # Not read by the scripts, helps when running the request by hand
    stderr.write(f"Completion ended with directive: {describe(directive)}\n")
    return ExitCode.SUCCESS


def _get_success_message(shell: str, output_path: str, used_default: bool) -> str:
    """Generate a friendly success message after installing completions.

    Args:
        shell: Shell type
        output_path: Path where completions were written
        used_default: Whether the default path was used

    Returns:
        User-friendly success message
    """
    # Use ~ in display path for readability
    display_path = output_path.replace(str(Path.home()), "~")

    if not used_default:
        return f"Completions written to {display_path}"

    if shell == "bash":
        return f"Completions installed to {display_path}\nReload your shell or run: source ~/.bashrc"

    if shell in ("zsh", "zsh-v1"):
        return (
            f"Completions installed to {display_path}\n"
            "Ensure ~/.zsh/completions is in your fpath. Add to ~/.zshrc:\n"
            "  fpath=(~/.zsh/completions $fpath)\n"
            "  autoload -Uz compinit && compinit\n"
            "Then reload your shell."
        )

    if shell == "fish":
        return f"Completions installed to {display_path}\nReload your shell or run: source ~/.config/fish/config.fish"

    if shell == "powershell":
        return f"Completions installed to {display_path}\nLoad them from your profile, add to $PROFILE:\n  . {display_path}"

    return f"Completions written to {display_path}"


def handle_generate(root: Command, shell: str, path: str | None = None, include_descriptions: bool = True) -> tuple[bool, str]:
    """Generate a completion script, optionally writing it to a file.

    Args:
        root: The root of the command tree
        shell: One of SUPPORTED_SHELLS
        path: None to return the script, "default" for the user-level default
            location, or an absolute (or ~) path
        include_descriptions: Generate a script asking for descriptions

    Returns:
        Tuple of (success, result):
        - No path: result is the script content
        - With path: result is success/error message
    """
    if shell not in SUPPORTED_SHELLS:
        return (False, f"Unsupported shell: {shell}. Supported: {', '.join(SUPPORTED_SHELLS)}")

    if path is not None and path != "default" and not path.startswith(("/", "~")):
        return (False, "Relative paths not supported. Use absolute path, ~/path, or 'default'.")

    try:
        content = GENERATORS[shell](root, include_descriptions)
    except (KeyError, ValueError, TypeError) as e:
        return (False, f"Failed to generate completions: {e}")

    if path is None:
        return (True, content)

    # Determine output path
    if path == "default":
        output_path = get_default_path(shell, root.name)
        used_default = True
    else:
        output_path = str(Path(path).expanduser())
        used_default = False

    log.debug("Writing completions to: %s", output_path)

    # Write to file
    try:
        parent_dir = Path(output_path).parent
        parent_dir.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(content, encoding="utf-8")
    except OSError as e:
        return (False, f"Failed to write completion file: {e}")

    return (True, _get_success_message(shell, output_path, used_default))


def _make_request_runner(include_descriptions: bool) -> Callable[[Command, list[str], dict[str, Any]], int]:
    def _run(command: Command, args: list[str], flags: dict[str, Any]) -> int:  # noqa: ARG001  # pylint: disable=unused-argument
        return handle_completion_request(command, args, include_descriptions=include_descriptions)

    return _run


def _make_generate_runner(shell: str) -> Callable[[Command, list[str], dict[str, Any]], int]:
    def _run(command: Command, args: list[str], flags: dict[str, Any]) -> int:
        root = command.root
        include_descriptions = not (flags.get(NO_DESC_FLAG) or get_options(root).disable_descriptions)
        success, result = handle_generate(root, shell, args[0] if args else None, include_descriptions)
        if not success:
            command.stderr.write(f"Error: {result}\n")
            return ExitCode.COMMAND_ERROR
        command.stdout.write(result if result.endswith("\n") else f"{result}\n")
        return ExitCode.SUCCESS

    return _run


def _make_request_command(name: str, include_descriptions: bool) -> Command:
    command = Command(
        name,
        short="Request shell completion choices for the specified command line",
        args=arbitrary_args,
        run=_make_request_runner(include_descriptions),
        hidden=True,
        disable_flag_parsing=True,
    )
    command.is_completion_request = True
    return command


def _make_completion_command(options: CompletionOptions) -> Command:
    completion = Command(
        COMPLETION_CMD,
        short="Generate the autocompletion script for the specified shell",
        args=no_args,
        hidden=options.hidden_default_cmd,
    )
    for shell in SUPPORTED_SHELLS:
        flags = [] if options.disable_no_desc_flag else [Flag(NO_DESC_FLAG, usage="disable completion descriptions", takes_value=False)]
        completion.add_command(
            Command(
                shell,
                short=f"Generate the autocompletion script for {shell}",
                args=maximum_n_args(1),
                run=_make_generate_runner(shell),
                flags=flags,
            )
        )
    return completion


def install_completion_commands(root: Command, options: CompletionOptions | None = None) -> None:
    """Add the completion commands to a program.

    The `completion` command is only added to programs which have subcommands
    and don't define their own `completion`. Calling this again is harmless.

    Args:
        root: The root of the command tree
        options: Defaults to `root.completion_options`
    """
    options = options or get_options(root)
    for name, include_descriptions in ((COMP_REQUEST_CMD, True), (COMP_NO_DESC_REQUEST_CMD, False)):
        if root.find_child(name) is None:
            root.add_command(_make_request_command(name, include_descriptions))

    if options.disable_default_cmd or not root.has_subcommands() or root.find_child(COMPLETION_CMD) is not None:
        return
    log.debug("Adding the %s command to %s", COMPLETION_CMD, root.path)
    root.add_command(_make_completion_command(options))
