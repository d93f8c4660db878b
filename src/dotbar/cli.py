"""Command line interface for dotbar."""

import random
import sys
import time

import click
from rich.console import Console
from rich.table import Table

from dotbar import __version__
from dotbar.core.glyphs import select_glyph
from dotbar.core.renderer import STATUS_STYLES
from dotbar.core.state import UnitResult, UnitStatus
from dotbar.reporter import DotReporter, HostSettings, RunSummary
from dotbar.utils.config import DotbarConfig, policy_for
from dotbar.utils.errors import DotbarError
from dotbar.utils.terminal import is_tty

console = Console()


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """dotbar - Live dot progress bar for test runs."""
    pass


def simulate_run(
    reporter: DotReporter,
    suites: int,
    tests: int,
    estimate: int,
    fail_rate: float,
    skip_rate: float,
    rng: random.Random,
    delay: float = 0.0,
    sleep=time.sleep,
) -> RunSummary:
    """Drive a reporter through a synthetic run.

    Args:
        reporter: Reporter receiving the lifecycle events
        suites: Number of suites (units) in the run
        tests: Maximum number of tests per suite
        estimate: Estimated run time in seconds
        fail_rate: Probability that a single test fails
        skip_rate: Probability that a single test is skipped
        rng: Random source for outcomes and suite sizes
        delay: Seconds to wait between events
        sleep: Sleep function, replaced in tests

    Returns:
        Summary handed to the reporter at completion
    """
    summary = RunSummary(start_time=reporter.clock())
    reporter.on_run_start(suites, estimate)

    for number in range(suites):
        unit_id = f"tests/test_suite_{number:03d}.py"
        reporter.on_unit_start(unit_id)
        result = UnitResult()

        for _ in range(rng.randint(1, max(tests, 1))):
            sleep(delay)
            roll = rng.random()
            if roll < fail_rate:
                result.failing += 1
            elif roll < fail_rate + skip_rate:
                result.pending += 1
            else:
                result.passing += 1
            reporter.on_sub_progress(unit_id)

        reporter.on_unit_result(unit_id, result)
        summary.failed_tests += result.failing
        summary.passed_tests += result.passing
        summary.pending_tests += result.pending
        summary.failed_units += 1 if result.failing else 0

    summary.total_tests = summary.failed_tests + summary.passed_tests + summary.pending_tests
    reporter.on_run_complete(summary)
    return summary


@cli.command()
@click.option("--suites", type=click.IntRange(0, 1000), default=24, help="Number of suites to simulate")
@click.option("--tests", type=click.IntRange(1, 200), default=20, help="Maximum tests per suite")
@click.option("--estimate", type=click.IntRange(0), default=0, help="Estimated run time in seconds")
@click.option("--delay", type=click.FloatRange(0.0, 5.0), default=0.02, help="Seconds between test results")
@click.option("--fail-rate", type=click.FloatRange(0.0, 1.0), default=0.05, help="Probability of a failing test")
@click.option("--skip-rate", type=click.FloatRange(0.0, 1.0), default=0.05, help="Probability of a skipped test")
@click.option("--seed", type=int, default=None, help="Random seed for a reproducible run")
@click.option("--strict/--lenient", default=False, help="Fail suites without passing tests")
@click.option("--percent/--no-percent", default=True, help="Show completion percentage")
@click.option("--compact/--regular", default=False, help="Use lower glyph thresholds")
@click.option("--verbose", is_flag=True, default=False, help="Pretend the host runs in verbose mode")
def demo(
    suites: int,
    tests: int,
    estimate: int,
    delay: float,
    fail_rate: float,
    skip_rate: float,
    seed: int | None,
    strict: bool,
    percent: bool,
    compact: bool,
    verbose: bool,
) -> None:
    """Replay a synthetic test run through the dot bar."""
    try:
        if fail_rate + skip_rate > 1.0:
            raise DotbarError("--fail-rate and --skip-rate must not add up to more than 1")

        config = DotbarConfig.from_env(
            show_percent=percent,
            strict=strict,
            policy=policy_for(compact),
            color=is_tty(sys.stderr),
        )
        reporter = DotReporter(HostSettings(verbose=verbose), config)
        try:
            simulate_run(reporter, suites, tests, estimate, fail_rate, skip_rate, random.Random(seed), delay)
        finally:
            reporter.stop_estimator()

    except DotbarError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        raise click.Abort()
    except KeyboardInterrupt:
        console.print("\n[yellow]Demo cancelled by user[/yellow]")


@cli.command()
@click.option("--compact/--regular", default=False, help="Show the compact glyph thresholds")
def glyphs(compact: bool) -> None:
    """Show the glyph legend."""
    policy = policy_for(compact)

    table = Table(title="dotbar glyphs")
    table.add_column("Status", style="cyan")
    table.add_column("Results", justify="right")
    table.add_column("Glyph", justify="center")

    rows = [
        (UnitStatus.PENDING, 0, "not started"),
        (UnitStatus.WORKING, 1, "odd count"),
        (UnitStatus.WORKING, 2, "even count"),
        (UnitStatus.WORKING, policy.busy_at, f">= {policy.busy_at}"),
        (UnitStatus.WORKING, policy.dense_at, f">= {policy.dense_at}"),
        (UnitStatus.PASS, 0, "no results"),
        (UnitStatus.PASS, 1, "any results"),
        (UnitStatus.SKIPPED, 1, "any results"),
        (UnitStatus.FAIL, 0, "no results"),
        (UnitStatus.FAIL, 1, "any results"),
    ]
    for status, count, label in rows:
        glyph = select_glyph(count, status, policy)
        style = STATUS_STYLES[status] or ""
        table.add_row(status.value, label, f"[{style}]{glyph}[/{style}]" if style else repr(glyph))

    console.print(table)


if __name__ == "__main__":
    cli()
