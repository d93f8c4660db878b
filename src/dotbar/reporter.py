"""Lifecycle adapter between a test engine and the progress bar."""

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from dotbar.core.cursor import CursorProtocol, cursor_strategy_for
from dotbar.core.estimator import TimeEstimator
from dotbar.core.renderer import Renderer
from dotbar.core.state import RunState, UnitResult, classify
from dotbar.utils.config import DotbarConfig
from dotbar.utils.terminal import OutputSink, Terminal
from dotbar.utils.validation import validate_count


SYMBOLS = {
    "pass": "✔",
    "skipped": "○",
    "fail": "✘",
}


class HostConfig(Protocol):
    """Host settings the reporter needs to know about."""
    verbose: bool


@dataclass
class HostSettings:
    """Plain host configuration."""

    verbose: bool = False


@dataclass
class RunSummary:
    """Aggregated counts handed over when the run completes."""

    failed_tests: int = 0
    passed_tests: int = 0
    pending_tests: int = 0
    total_tests: int = 0
    failed_units: int = 0
    start_time: float = 0.0


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DISABLED = "disabled"
    COMPLETED = "completed"


class DotReporter:
    """Receive engine callbacks and keep the bar up to date.

    One instance serves one run. Callbacks are expected one at a time; the
    only background activity is the estimate countdown, which repaints on
    every tick.
    """

    def __init__(
        self,
        host: HostConfig,
        config: DotbarConfig | None = None,
        stream: OutputSink | None = None,
        environ: Mapping[str, str] | None = None,
        clock: Callable[[], float] = time.time,
        width: int | None = None,
    ):
        self.host = host
        self.config = (config or DotbarConfig()).validate()
        self.terminal = Terminal(stream, color=self.config.color, width=width)
        self.cursor = CursorProtocol(self.terminal, cursor_strategy_for(environ))
        self.state = RunState()
        self.estimator: TimeEstimator | None = None
        self.renderer = Renderer(self.state, self.terminal, self.cursor, self.config)
        self.clock = clock
        self.phase = Phase.IDLE
        self.disabled = bool(getattr(host, "verbose", False))

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    def on_run_start(self, total_units: int, estimated_seconds: int = 0) -> None:
        if self.phase is not Phase.IDLE:
            return

        if self.disabled:
            self.phase = Phase.DISABLED
            self.terminal.write("\n[dotbar] ", "bold yellow")
            self.terminal.write(
                "The dot reporter is not compatible with verbose output. "
                "The reporter will be disabled for this run.\n",
                "yellow",
            )
            return

        self.state.initialize(total_units, estimated_seconds)
        self.phase = Phase.RUNNING

        if self.state.estimate:
            self.estimator = TimeEstimator(self.state.estimate, on_tick=self.renderer.push)
            self.renderer.estimator = self.estimator

        self.terminal.write(f"\nFound {total_units} suites.\n", "bright_black")
        self.cursor.reserve(total_units)

        # Ticks repaint too, so they start only after the banner and reservation.
        if self.estimator is not None:
            self.estimator.start()
        self.renderer.push()

    def on_unit_start(self, unit_id: str) -> None:
        if not self.running:
            return

        self.state.register_start(unit_id)
        self.renderer.push()

    def on_sub_progress(self, unit_id: str) -> None:
        if not self.running:
            return

        self.state.record_sub_progress(unit_id)
        self.renderer.push()

    def on_unit_result(self, unit_id: str, result: UnitResult) -> None:
        if not self.running:
            return

        self.state.resolve(unit_id, classify(result, strict=self.config.strict))
        self.renderer.push()

    def on_run_complete(self, summary: RunSummary) -> None:
        if self.phase is Phase.DISABLED:
            self.phase = Phase.COMPLETED
            return

        if not self.running:
            return

        self.stop_estimator()
        self.phase = Phase.COMPLETED
        self.renderer.push()
        self.write_summary(summary)

    def stop_estimator(self) -> None:
        if self.estimator is not None:
            self.estimator.stop()

    def write_summary(self, summary: RunSummary) -> None:
        """Write the end-of-run block below the bar."""
        for name in ("failed_tests", "passed_tests", "pending_tests", "total_tests", "failed_units"):
            validate_count(name, getattr(summary, name))

        elapsed = max(0.0, self.clock() - summary.start_time)
        write = self.terminal.write

        write(f"Ran {summary.total_tests} tests in {elapsed:.2f} sec.\n", "bright_black")

        if summary.passed_tests > 0:
            write(f"{SYMBOLS['pass']} {summary.passed_tests} passing.\n", "green")

        if summary.pending_tests > 0:
            write(f"{SYMBOLS['skipped']} {summary.pending_tests}", "bold magenta")
            write(" skipped.\n", "magenta")

        if summary.failed_tests > 0:
            write(f"{SYMBOLS['fail']} {summary.failed_tests}", "bold red")
            write(f" failing in {summary.failed_units} suites.\n", "red")
        elif summary.failed_units > 0:
            write(f"{SYMBOLS['fail']} {summary.failed_units}", "bold red")
            write(" failing suites.\n", "red")
