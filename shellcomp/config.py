"""Configuration: typed access to settings and the completion options."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .logging_setup import get_logger
from .models import ConfigError

if TYPE_CHECKING:
    import logging

__all__ = [
    "BOOL_FALSE_STRINGS",
    "CompletionOptions",
    "Configuration",
    "coerce_to_bool",
    "load_options",
]

# Type alias for config values
ConfigValueType = float | bool | str | list | dict

BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})

CONFIG_SECTION = "completion"


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """Configuration wrapper providing typed access."""

    def __init__(self, *args: Any, logger: logging.Logger, **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing.

        Args:
            name: The key name
            default: Default value if key is missing

        Returns:
            The boolean value
        """
        return coerce_to_bool(self.get(name), default)


@dataclass
class CompletionOptions:
    """Controls the completion commands added to a program.

    Attributes:
        disable_default_cmd: Don't add the `completion` command
        disable_no_desc_flag: Don't add `--no-descriptions` to the `completion` subcommands
        disable_descriptions: Never send descriptions, whatever the request
        hidden_default_cmd: Add the `completion` command but don't offer it for completion
    """

    disable_default_cmd: bool = False
    disable_no_desc_flag: bool = False
    disable_descriptions: bool = False
    hidden_default_cmd: bool = False

    @classmethod
    def from_config(cls, config: Configuration) -> CompletionOptions:
        """Build the options from a configuration section, unknown keys are reported."""
        names = {f.name for f in fields(cls)}
        for key in config:
            if key not in names:
                config.log.warning("Unknown completion option: %s", key)
        return cls(**{name: config.get_bool(name) for name in names})


def load_options(path: str | Path, log: logging.Logger | None = None) -> CompletionOptions:
    """Load the `[completion]` table of a TOML file.

    Args:
        path: The TOML file, "~" and environment variables are expanded
        log: Logger for diagnostics

    Returns:
        The options, defaults when the file doesn't exist

    Raises:
        ConfigError: the file can't be parsed
    """
    log = log or get_logger("config")
    fname = Path(os.path.expandvars(str(path))).expanduser()
    if not fname.exists():
        log.debug("No configuration at %s, using defaults", fname)
        return CompletionOptions()
    log.info("Loading %s", fname)
    try:
        with fname.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log.critical("Problem reading %s: %s", fname, e)
        raise ConfigError(str(e)) from e
    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        log.critical("[%s] must be a table in %s", CONFIG_SECTION, fname)
        msg = f"invalid [{CONFIG_SECTION}] section"
        raise ConfigError(msg)
    return CompletionOptions.from_config(Configuration(section, logger=log))
