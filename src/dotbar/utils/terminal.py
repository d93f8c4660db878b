"""Terminal output utilities."""

import os
import shutil
import sys
from typing import Protocol, TextIO

from rich.color import ColorSystem
from rich.style import Style


class OutputSink(Protocol):
    """Protocol for append-only text sinks."""
    def write(self, text: str) -> int: ...


class Terminal:
    """Append-only terminal writer with rich color rendering."""

    def __init__(self, stream: OutputSink | None = None, color: bool = True, width: int | None = None):
        self.stream = stream if stream is not None else sys.stderr
        self.color_system = ColorSystem.STANDARD if color else None
        self._width = width

    @property
    def width(self) -> int:
        """Width in columns of the terminal behind the stream."""
        if self._width:
            return self._width

        try:
            columns = os.get_terminal_size(self.stream.fileno()).columns
        except (AttributeError, OSError, ValueError):
            columns = shutil.get_terminal_size(fallback=(80, 24)).columns
        return columns if columns > 0 else 80

    def paint(self, text: str, style: str | None) -> str:
        """Return ``text`` wrapped in SGR codes for ``style``."""
        if not style or self.color_system is None:
            return text
        return Style.parse(style).render(text, color_system=self.color_system)

    def write(self, text: str, style: str | None = None) -> None:
        """Write text, optionally styled, and flush."""
        self.stream.write(self.paint(text, style))
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()


def is_tty(stream: TextIO) -> bool:
    """Check whether a stream is attached to a terminal."""
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
