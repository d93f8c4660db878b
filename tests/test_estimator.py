"""Unit tests for the estimate countdown."""

import time

from dotbar.core.estimator import TimeEstimator


class TestTimeEstimator:
    """Test ticking and cancellation."""

    def test_tick_floors_at_zero(self):
        estimator = TimeEstimator(2)
        for _ in range(5):
            estimator.tick()
            assert estimator.remaining >= 0
        assert estimator.remaining == 0

    def test_negative_seed_clamped(self):
        assert TimeEstimator(-3).remaining == 0

    def test_zero_estimate_does_not_start(self):
        estimator = TimeEstimator(0)
        estimator.start()
        assert not estimator.active

    def test_stop_without_start(self):
        estimator = TimeEstimator(5)
        estimator.stop()
        estimator.stop()
        assert not estimator.active

    def test_counts_down_in_background(self):
        estimator = TimeEstimator(100, interval=0.01)
        estimator.start()
        try:
            deadline = time.monotonic() + 5
            while estimator.remaining == 100 and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            estimator.stop()

        assert estimator.remaining < 100

    def test_no_ticks_after_stop(self):
        """Stopping twice is harmless and nothing ticks afterwards."""
        estimator = TimeEstimator(100, interval=0.01)
        estimator.start()
        assert estimator.active

        estimator.stop()
        estimator.stop()
        frozen = estimator.remaining
        time.sleep(0.05)

        assert estimator.remaining == frozen
        assert not estimator.active

    def test_not_restarted_after_stop(self):
        estimator = TimeEstimator(10, interval=0.01)
        estimator.stop()
        estimator.start()
        assert not estimator.active

    def test_on_tick_called_after_decrement(self):
        seen = []
        estimator = TimeEstimator(100, interval=0.01)
        estimator.on_tick = lambda: seen.append(estimator.remaining)
        estimator.start()
        try:
            deadline = time.monotonic() + 5
            while not seen and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            estimator.stop()

        assert seen
        assert seen[0] == 99

    def test_on_tick_silent_after_stop(self):
        calls = []
        estimator = TimeEstimator(100, interval=0.01, on_tick=lambda: calls.append(1))
        estimator.start()
        estimator.stop()
        frozen = len(calls)
        time.sleep(0.05)
        assert len(calls) == frozen
