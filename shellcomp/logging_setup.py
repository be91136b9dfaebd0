"""Logging setup and utilities.

Everything goes to stderr (or a file): stdout carries the completion protocol
and must stay clean.
"""

import logging
import sys

from .ansi import LogStyles, make_style, should_colorize
from .debug import is_debug, set_debug

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
]


class LogObjects:
    """Reusable objects for loggers."""

    handlers: list[logging.Handler] = []


class ScreenLogFormatter(logging.Formatter):
    """A formatter adding colors based on log level."""

    def __init__(self) -> None:
        super().__init__()
        log_format = r"%(name)s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        if should_colorize():
            warn_pre, warn_suf = make_style(*LogStyles.WARNING)
            err_pre, err_suf = make_style(*LogStyles.ERROR)
            crit_pre, crit_suf = make_style(*LogStyles.CRITICAL)
        else:
            warn_pre = warn_suf = err_pre = err_suf = crit_pre = crit_suf = ""

        self._formatters = {
            logging.DEBUG: logging.Formatter(log_format),
            logging.INFO: logging.Formatter(log_format),
            logging.WARNING: logging.Formatter(warn_pre + log_format + warn_suf),
            logging.ERROR: logging.Formatter(err_pre + log_format + err_suf),
            logging.CRITICAL: logging.Formatter(crit_pre + log_format + crit_suf),
        }

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        return formatter.format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Calling it again replaces the previously installed handlers, so loggers
    created earlier keep working with the new destinations.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    previous = list(LogObjects.handlers)
    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(stream_handler)

    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith("shellcomp"):
            continue
        logger = logging.getLogger(name)
        for handler in previous:
            logger.removeHandler(handler)
        for handler in LogObjects.handlers:
            logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    for handler in previous:
        handler.close()


def get_logger(name: str = "shellcomp", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name, namespaced under "shellcomp"
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    if name != "shellcomp" and not name.startswith("shellcomp."):
        name = f"shellcomp.{name}"
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    if not LogObjects.handlers:
        init_logger()
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger
