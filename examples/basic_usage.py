"""Basic usage examples for dotbar."""

import time

from dotbar import DotReporter, DotbarConfig, HostSettings, RunSummary, UnitResult


def example_manual_run():
    """Example: Drive the reporter by hand."""
    reporter = DotReporter(HostSettings(verbose=False), DotbarConfig())
    started = time.time()

    suites = ["tests/test_api.py", "tests/test_models.py", "tests/test_views.py"]
    reporter.on_run_start(len(suites), estimated_seconds=3)

    for suite in suites:
        reporter.on_unit_start(suite)
        for _ in range(4):
            time.sleep(0.1)
            reporter.on_sub_progress(suite)
        reporter.on_unit_result(suite, UnitResult(passing=4))

    reporter.on_run_complete(
        RunSummary(passed_tests=12, total_tests=12, start_time=started)
    )


def example_pytest():
    """Example: Enable the bar in a pytest session."""
    print("pytest --dotbar")
    print("pytest --dotbar --dotbar-estimate 30 --dotbar-no-percent")


if __name__ == '__main__':
    print("dotbar Examples")
    print("=" * 50)
    example_manual_run()
