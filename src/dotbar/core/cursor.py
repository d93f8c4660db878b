"""Cursor anchoring for in-place redraw."""

import math
import os
from collections.abc import Mapping

from dotbar.utils.terminal import Terminal


ESC = "\x1b"

# Extra columns allowed for the percentage and fraction after the bar.
RESERVED_COLUMNS = 20


class CursorStrategy:
    """Pair of control sequences that save and restore the cursor."""

    name = "base"
    save = ""
    restore = ""


class AnsiCursor(CursorStrategy):
    """SCO sequences understood by most terminal emulators."""

    name = "ansi"
    save = f"{ESC}[s"
    restore = f"{ESC}[u"


class DecCursor(CursorStrategy):
    """DEC sequences for terminals that ignore the SCO pair."""

    name = "dec"
    save = f"{ESC}7"
    restore = f"{ESC}8"


DEC_TERMINALS = ("Apple_Terminal",)


def cursor_strategy_for(environ: Mapping[str, str] | None = None) -> CursorStrategy:
    """Pick the cursor strategy for the terminal named by ``TERM_PROGRAM``."""
    env = os.environ if environ is None else environ
    if env.get("TERM_PROGRAM") in DEC_TERMINALS:
        return DecCursor()
    return AnsiCursor()


class CursorProtocol:
    """Mark a redraw origin and return to it before each repaint."""

    def __init__(self, terminal: Terminal, strategy: CursorStrategy):
        self.terminal = terminal
        self.strategy = strategy
        self.anchored = False

    def reserve(self, units: int) -> int:
        """Push the prompt down far enough for a wrapped bar, then come back.

        Returns:
            Number of rows reserved
        """
        rows = math.ceil((units + RESERVED_COLUMNS) / max(self.terminal.width, 1))
        self.terminal.write(f"{ESC}[{rows}B \r{ESC}[{rows}A{ESC}[0J")
        return rows

    def mark(self) -> None:
        self.terminal.write(self.strategy.save)
        self.anchored = True

    def restore(self) -> None:
        if not self.anchored:
            return
        self.terminal.write(self.strategy.restore)
