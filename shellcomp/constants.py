"""Shared constants for shellcomp."""

__all__ = [
    "COMPLETION_CMD",
    "COMP_DEBUG_FILE_ENV",
    "COMP_NO_DESC_REQUEST_CMD",
    "COMP_REQUEST_CMD",
    "DEFAULT_PATHS",
    "NO_DESCRIPTIONS_ENV",
    "NO_DESC_FLAG",
    "SUPPORTED_SHELLS",
]

# Hidden commands used by the generated scripts to query the program
COMP_REQUEST_CMD = "__complete"
COMP_NO_DESC_REQUEST_CMD = "__completeNoDesc"

# User facing command generating the scripts
COMPLETION_CMD = "completion"
NO_DESC_FLAG = "no-descriptions"

# Shell side debug channel: scripts append their traces to this file when set
COMP_DEBUG_FILE_ENV = "BASH_COMP_DEBUG_FILE"

# Forces the no-description form even for `__complete`
NO_DESCRIPTIONS_ENV = "SHELLCOMP_NO_DESCRIPTIONS"

# Supported shells for completion generation
SUPPORTED_SHELLS = ("bash", "zsh", "zsh-v1", "fish", "powershell")

# Default user-level completion paths, "{name}" is the program name
DEFAULT_PATHS = {
    "bash": "~/.local/share/bash-completion/completions/{name}",
    "zsh": "~/.zsh/completions/_{name}",
    "zsh-v1": "~/.zsh/completions/_{name}",
    "fish": "~/.config/fish/completions/{name}.fish",
    "powershell": "~/.config/powershell/completions/{name}.ps1",
}
