"""Tests for the logging setup."""

import logging

from shellcomp.logging_setup import LogObjects, get_logger


def test_namespace():
    assert get_logger("resolver").name == "shellcomp.resolver"
    assert get_logger("shellcomp.resolver").name == "shellcomp.resolver"
    assert get_logger().name == "shellcomp"


def test_no_propagation():
    """Nothing reaches the root logger, the application keeps control of its own output."""
    assert get_logger("tests").propagate is False


def test_handlers():
    logger = get_logger("tests")
    assert LogObjects.handlers
    for handler in LogObjects.handlers:
        assert handler in logger.handlers


def test_debug_level():
    """The test session runs in debug mode."""
    assert get_logger("tests").level == logging.DEBUG
    assert get_logger("tests", logging.ERROR).level == logging.ERROR
