" generic fixtures "
import pytest

from shellcomp.completions.registry import CompletionRegistry
from shellcomp.constants import COMP_DEBUG_FILE_ENV, NO_DESCRIPTIONS_ENV
from shellcomp.logging_setup import get_logger


def pytest_configure():
    "Runs once before all"
    from shellcomp.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    "Environment variables changing the completion behavior are unset"
    monkeypatch.delenv(NO_DESCRIPTIONS_ENV, raising=False)
    monkeypatch.delenv(COMP_DEBUG_FILE_ENV, raising=False)


@pytest.fixture
def test_logger():
    "A logger for the objects requiring one"
    return get_logger("tests")


@pytest.fixture
def reg():
    "A registry isolated from the global one"
    return CompletionRegistry()
