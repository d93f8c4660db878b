"""In-place repaint of the progress bar."""

import math
import threading

from dotbar.core.cursor import ESC, CursorProtocol
from dotbar.core.estimator import TimeEstimator
from dotbar.core.glyphs import select_glyph
from dotbar.core.state import RunState, UnitStatus
from dotbar.utils.config import DotbarConfig
from dotbar.utils.terminal import Terminal


STATUS_STYLES: dict[UnitStatus, str | None] = {
    UnitStatus.PENDING: None,
    UnitStatus.WORKING: "yellow",
    UnitStatus.SKIPPED: "magenta",
    UnitStatus.PASS: "green",
    UnitStatus.FAIL: "red",
}

CLEAR_BELOW = f"{ESC}[0J"


def percent(completed: int, total: int) -> int:
    """Completion percentage rounded half up; zero for an empty run."""
    if total <= 0:
        return 0
    return math.floor(100 * completed / total + 0.5)


class Renderer:
    """Draw the run state as a single bar line plus an optional estimate."""

    def __init__(
        self,
        state: RunState,
        terminal: Terminal,
        cursor: CursorProtocol,
        config: DotbarConfig,
        estimator: TimeEstimator | None = None,
    ):
        self.state = state
        self.terminal = terminal
        self.cursor = cursor
        self.config = config
        self.estimator = estimator
        self._estimate_shown = False
        self._lock = threading.Lock()

    def render_cells(self) -> str:
        policy = self.config.policy
        cells = []

        for unit in self.state.units:
            glyph = select_glyph(unit.sub_progress, unit.status, policy)
            style = STATUS_STYLES[unit.status]
            if style and glyph == policy.anomaly and unit.status is UnitStatus.FAIL:
                style = f"bold {style}"
            cells.append(self.terminal.paint(glyph, style))

        return "".join(cells)

    def render_bar(self) -> str:
        """Return the bar line, without cursor control or trailing newline."""
        completed = self.state.completed_count()
        total = self.state.total

        line = f"[{self.render_cells()}] "
        if self.config.show_percent:
            line += f"{percent(completed, total)}% "
        line += f"({completed}/{total})"
        return line

    def estimate_text(self) -> str | None:
        """Return the estimate line, or None when nothing should be shown."""
        if self.estimator is None or not self.estimator.active:
            return None

        remaining = self.estimator.remaining
        if remaining == 0 and self.config.hide_spent_estimate:
            return None

        return f"Estimated {remaining} sec."

    def push(self) -> None:
        """Repaint the bar at the anchor.

        Called from engine events and from estimator ticks; repaints never overlap.
        """
        with self._lock:
            self.cursor.restore()
            self.cursor.mark()

            self.terminal.write(self.render_bar() + "\n")

            # The previous estimate may be longer than the new one.
            estimate = self.estimate_text()
            if estimate is not None:
                self.terminal.write(CLEAR_BELOW + estimate)
                self._estimate_shown = True
            elif self._estimate_shown:
                self.terminal.write(CLEAR_BELOW)
                self._estimate_shown = False
