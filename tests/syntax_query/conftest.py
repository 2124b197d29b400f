"""Shared fixtures for syntax query tests."""

import os

import pytest

from syntax_query.shell.shell_lexer import ShellLexer
from syntax_query.syntax_query_config import SyntaxQueryConfig
from syntax_query.syntax_query_renderer import SyntaxQueryMemoryRenderer


# Qt tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def shell_lexer():
    """Fixture providing a shell lexer."""
    return ShellLexer()


@pytest.fixture
def default_config():
    """Fixture providing the built-in shell configuration."""
    return SyntaxQueryConfig.default()


@pytest.fixture
def memory_renderer():
    """Fixture providing an in-memory renderer."""
    return SyntaxQueryMemoryRenderer()


@pytest.fixture
def simple_styles():
    """Fixture providing a small set of styles for hand-written rules."""
    return {
        "string": {"fg": "yellow"},
        "normal": {"fg": "reset", "bg": "reset", "bold": False},
        "flag": {"fg": "red"},
        "flag_value": {"fg": "blue"},
        "command": {"fg": "green", "bold": True},
        "mark": {"underline": True},
    }
