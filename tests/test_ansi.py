"""Tests for the ansi module."""

import os
from io import StringIO
from unittest.mock import patch

from shellcomp.ansi import BOLD, DIM, RED, RESET, YELLOW, LogStyles, make_style, should_colorize


def test_make_style():
    """Test make_style returns correct prefix and suffix."""
    prefix, suffix = make_style(YELLOW, DIM)
    assert prefix == "\x1b[33;2m"
    assert suffix == RESET


def test_make_style_no_codes():
    """No code, no escape sequence at all."""
    assert make_style() == ("", "")


def test_should_colorize_respects_no_color():
    """Test that NO_COLOR environment variable disables colors."""
    with patch.dict(os.environ, {"NO_COLOR": "1", "FORCE_COLOR": "1"}, clear=False):
        assert should_colorize() is False


def test_should_colorize_respects_force_color():
    """Test that FORCE_COLOR environment variable forces colors."""
    stream = StringIO()
    with patch.dict(os.environ, {"FORCE_COLOR": "1", "NO_COLOR": ""}, clear=False):
        assert should_colorize(stream) is True


def test_should_colorize_non_tty():
    """Test that non-TTY streams don't get colors by default."""
    stream = StringIO()
    with patch.dict(os.environ, {"NO_COLOR": "", "FORCE_COLOR": ""}, clear=False):
        assert should_colorize(stream) is False


def test_log_styles():
    """Test LogStyles contains expected style tuples."""
    assert LogStyles.WARNING == (YELLOW, DIM)
    assert LogStyles.ERROR == (RED, DIM)
    assert LogStyles.CRITICAL == (RED, BOLD)
