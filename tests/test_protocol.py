"""Tests for the completion protocol."""

from io import StringIO

import pytest

from shellcomp.completions.models import Candidate
from shellcomp.completions.protocol import decode, encode, write
from shellcomp.directive import Directive


def test_encode_with_descriptions():
    candidates = [Candidate("one", "The first"), Candidate("two")]
    assert encode(candidates, Directive.NO_FILE_COMP, True) == "one\tThe first\ntwo\n:4\n"


def test_encode_without_descriptions():
    candidates = [Candidate("one", "The first"), Candidate("two", "The second")]
    assert encode(candidates, Directive.DEFAULT, False) == "one\ntwo\n:0\n"


def test_encode_nothing():
    assert encode([], Directive.ERROR, True) == ":1\n"
    assert encode([], Directive.NO_SPACE | Directive.NO_FILE_COMP, True) == ":6\n"


def test_encode_keeps_the_lines_intact():
    """A line break would start a new candidate."""
    candidates = [Candidate("value\nother", "A description\nspanning lines"), Candidate("plain", "  padded  ")]
    assert encode(candidates, 0, True) == "value\tA description\nplain\tpadded\n:0\n"


def test_encode_keeps_the_order():
    candidates = [Candidate(name) for name in ("zeta", "alpha", "mid")]
    assert encode(candidates, Directive.KEEP_ORDER, False) == "zeta\nalpha\nmid\n:32\n"


def test_write():
    stream = StringIO()
    write(stream, [Candidate("a", "b")], Directive.NO_SPACE, True)
    assert stream.getvalue() == "a\tb\n:2\n"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("one\tThe first\ntwo\n:4\n", ([Candidate("one", "The first"), Candidate("two")], Directive.NO_FILE_COMP)),
        (":1\n", ([], Directive.ERROR)),
        ("one\ntwo\n", ([Candidate("one"), Candidate("two")], Directive.DEFAULT)),
        ("one\n:6\n\n\n", ([Candidate("one")], Directive.NO_SPACE | Directive.NO_FILE_COMP)),
        ("", ([], Directive.DEFAULT)),
    ],
)
def test_decode(text, expected):
    assert decode(text) == expected


def test_decode_value_looking_like_a_directive():
    """Only the last line is the directive."""
    assert decode(":3\n:0\n") == ([Candidate(":3")], Directive.DEFAULT)
