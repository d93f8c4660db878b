"""pytest plugin drawing the dot bar while a session runs.

Every test file is one unit of the bar. The plugin is installed through the
``pytest11`` entry point and stays inactive unless ``--dotbar`` is given.
"""

import sys
import time
from collections import Counter

import pytest

from dotbar.core.state import UnitResult
from dotbar.reporter import DotReporter, HostSettings, RunSummary
from dotbar.utils.config import DotbarConfig, policy_for
from dotbar.utils.terminal import is_tty


PLUGIN_NAME = "dotbar-reporter"


def pytest_addoption(parser):
    group = parser.getgroup("dotbar", "live dot progress bar")
    group.addoption(
        "--dotbar",
        action="store_true",
        default=False,
        help="Draw a live per-file progress bar on stderr.",
    )
    group.addoption(
        "--dotbar-estimate",
        type=int,
        default=0,
        metavar="SECONDS",
        help="Expected run time, counted down below the bar.",
    )
    group.addoption(
        "--dotbar-strict",
        action="store_true",
        default=False,
        help="Mark files without any passing test as failed.",
    )
    group.addoption(
        "--dotbar-no-percent",
        action="store_true",
        default=False,
        help="Show only the completed/total fraction.",
    )
    group.addoption(
        "--dotbar-compact",
        action="store_true",
        default=False,
        help="Use lower glyph thresholds, for files with few tests.",
    )


def pytest_configure(config):
    if not config.getoption("dotbar"):
        return

    verbose = config.getoption("verbose") > 0
    dot_config = DotbarConfig.from_env(
        show_percent=not config.getoption("dotbar_no_percent"),
        strict=config.getoption("dotbar_strict"),
        policy=policy_for(config.getoption("dotbar_compact")),
        color=is_tty(sys.stderr),
    )
    reporter = DotReporter(HostSettings(verbose=verbose), dot_config, stream=sys.stderr)
    plugin = DotbarPlugin(reporter, estimate=config.getoption("dotbar_estimate"))
    config.pluginmanager.register(plugin, PLUGIN_NAME)

    if reporter.disabled:
        return

    # Read by the terminal reporter when it is configured, which happens after this hook.
    config.option.console_output_style = "classic"


def pytest_unconfigure(config):
    plugin = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        plugin.reporter.stop_estimator()
        config.pluginmanager.unregister(plugin)


def unit_of(location) -> str:
    """Return the unit (test file) for a pytest location tuple."""
    return location[0]


class DotbarPlugin:
    """Translate pytest hooks into reporter lifecycle events."""

    def __init__(self, reporter: DotReporter, estimate: int = 0, clock=time.time):
        self.reporter = reporter
        self.estimate = estimate
        self.clock = clock
        self.start_time: float | None = None
        self.remaining: Counter[str] = Counter()
        self.results: dict[str, UnitResult] = {}
        self.started: set[str] = set()
        self.outcomes: Counter[str] = Counter()
        self.test_outcomes: dict[str, str] = {}
        self.failed_units: set[str] = set()

    def start(self, units: list[str]) -> None:
        """Begin a run over the given per-test unit list."""
        self.start_time = self.clock()
        self.remaining = Counter(units)
        self.results = {unit: UnitResult() for unit in self.remaining}
        self.reporter.on_run_start(len(self.remaining), self.estimate)

    def pytest_sessionstart(self, session):
        if self.reporter.disabled:
            return

        terminal = session.config.pluginmanager.get_plugin("terminalreporter")
        if terminal is not None:
            terminal.showfspath = False

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtestloop(self, session):
        if session.config.option.collectonly:
            return None

        self.start([unit_of(item.location) for item in session.items])
        return None

    def pytest_runtest_logstart(self, nodeid, location):
        unit = unit_of(location)
        if unit in self.results and unit not in self.started:
            self.started.add(unit)
            self.reporter.on_unit_start(unit)

    def pytest_runtest_logreport(self, report):
        unit = unit_of(report.location)
        result = self.results.get(unit)
        if result is None:
            return

        if report.when == "call" or (report.when == "setup" and not report.passed):
            if report.skipped:
                self.test_outcomes[report.nodeid] = "pending"
            elif report.failed:
                self.test_outcomes[report.nodeid] = "failed"
            else:
                self.test_outcomes[report.nodeid] = "passed"
            self.reporter.on_sub_progress(unit)
        elif report.when == "teardown" and report.failed:
            # A failed teardown turns the test into a failure, it is not another test.
            self.test_outcomes[report.nodeid] = "failed"

    def pytest_runtest_logfinish(self, nodeid, location):
        unit = unit_of(location)
        if self.remaining.get(unit, 0) <= 0:
            return

        result = self.results[unit]
        outcome = self.test_outcomes.pop(nodeid, None)
        if outcome is not None:
            self.outcomes[outcome] += 1
            if outcome == "failed":
                result.failing += 1
            elif outcome == "pending":
                result.pending += 1
            else:
                result.passing += 1

        self.remaining[unit] -= 1
        if self.remaining[unit] == 0:
            if result.failing > 0:
                self.failed_units.add(unit)
            self.reporter.on_unit_result(unit, result)

    @pytest.hookimpl(wrapper=True)
    def pytest_report_teststatus(self, report, config):
        status = yield
        if self.reporter.disabled or not status:
            return status

        category, _letter, word = status
        return category, "", word

    def summary(self) -> RunSummary:
        return RunSummary(
            failed_tests=self.outcomes["failed"],
            passed_tests=self.outcomes["passed"],
            pending_tests=self.outcomes["pending"],
            total_tests=sum(self.outcomes.values()),
            failed_units=len(self.failed_units),
            start_time=self.start_time or 0.0,
        )

    def pytest_sessionfinish(self, session, exitstatus):
        if self.start_time is None:
            return
        self.reporter.on_run_complete(self.summary())
