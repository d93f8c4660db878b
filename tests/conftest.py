"""Shared fixtures for dotbar tests."""

import io

import pytest

from dotbar.core.cursor import AnsiCursor, CursorProtocol
from dotbar.utils.terminal import Terminal


@pytest.fixture
def stream():
    """In-memory sink standing in for stderr."""
    return io.StringIO()


@pytest.fixture
def terminal(stream):
    """Colorless terminal with a fixed width."""
    return Terminal(stream, color=False, width=80)


@pytest.fixture
def cursor(terminal):
    return CursorProtocol(terminal, AnsiCursor())
