"""Unit tests for the run state model and outcome classification."""

import pytest

from dotbar.core.state import FALLBACK_INDEX, RunState, Unit, UnitResult, UnitStatus, classify
from dotbar.utils.errors import InvalidEventError


@pytest.fixture
def state():
    run = RunState()
    run.initialize(3)
    return run


class TestClassify:
    """Test outcome classification precedence."""

    @pytest.mark.parametrize("passing", [0, 1, 7])
    @pytest.mark.parametrize("pending", [0, 3])
    @pytest.mark.parametrize("skipped", [False, True])
    def test_failing_always_fails(self, passing, pending, skipped):
        result = UnitResult(failing=2, passing=passing, skipped=skipped, pending=pending)
        assert classify(result) is UnitStatus.FAIL
        assert classify(result, strict=True) is UnitStatus.FAIL

    def test_pending_tests_skip(self):
        assert classify(UnitResult(passing=4, pending=1)) is UnitStatus.SKIPPED
        assert classify(UnitResult(pending=2)) is UnitStatus.SKIPPED

    def test_skipped_flag(self):
        assert classify(UnitResult(passing=1, skipped=True)) is UnitStatus.SKIPPED

    def test_pass(self):
        assert classify(UnitResult(passing=5)) is UnitStatus.PASS

    def test_strict_requires_passing_test(self):
        """Strict classification fails units that produced no passing test."""
        assert classify(UnitResult(pending=2), strict=True) is UnitStatus.FAIL
        assert classify(UnitResult(), strict=True) is UnitStatus.FAIL
        assert classify(UnitResult(passing=1, pending=2), strict=True) is UnitStatus.SKIPPED

    def test_negative_counts_rejected(self):
        with pytest.raises(InvalidEventError):
            UnitResult(failing=-1)


class TestUnit:
    """Test forward-only status transitions."""

    def test_forward(self):
        unit = Unit(0)
        assert unit.advance(UnitStatus.WORKING)
        assert unit.advance(UnitStatus.PASS)
        assert unit.status is UnitStatus.PASS

    def test_never_reverts(self):
        unit = Unit(0, UnitStatus.FAIL)
        assert not unit.advance(UnitStatus.WORKING)
        assert not unit.advance(UnitStatus.PASS)
        assert unit.status is UnitStatus.FAIL

    def test_pending_can_resolve_directly(self):
        unit = Unit(0)
        assert unit.advance(UnitStatus.SKIPPED)


class TestRunState:
    """Test the per-run state model."""

    def test_initialize(self, state):
        assert state.total == 3
        assert all(unit.status is UnitStatus.PENDING for unit in state.units)
        assert state.estimate is None
        assert state.completed_count() == 0

    def test_initialize_keeps_positive_estimate(self):
        run = RunState()
        run.initialize(2, estimate=10)
        assert run.estimate == 10

    def test_initialize_rejects_negative(self):
        with pytest.raises(InvalidEventError):
            RunState().initialize(-1)
        with pytest.raises(InvalidEventError):
            RunState().initialize(1, estimate=-5)

    def test_initialize_resets(self, state):
        state.register_start("a.py")
        state.initialize(2)
        assert state.path_index == {}
        assert state.started == 0
        assert state.register_start("b.py") == 0

    def test_indices_sequential(self, state):
        indices = [state.register_start(name) for name in ("a.py", "b.py", "c.py")]
        assert indices == [0, 1, 2]
        assert state.units[1].status is UnitStatus.WORKING

    def test_index_stable_for_repeated_start(self, state):
        assert state.register_start("a.py") == 0
        assert state.register_start("b.py") == 1
        assert state.register_start("a.py") == 0
        assert state.register_start("c.py") == 2

    def test_overflow_grows(self):
        """Starting more units than announced appends pending slots."""
        run = RunState()
        run.initialize(1)
        run.register_start("a.py")
        assert run.register_start("b.py") == 1
        assert run.total == 2
        assert run.units[1].status is UnitStatus.WORKING

    def test_rejects_empty_unit_id(self, state):
        with pytest.raises(InvalidEventError):
            state.register_start("")

    def test_sub_progress_only_while_working(self, state):
        state.register_start("a.py")
        state.record_sub_progress("a.py")
        state.record_sub_progress("a.py")
        assert state.units[0].sub_progress == 2

        state.resolve("a.py", UnitStatus.PASS)
        state.record_sub_progress("a.py")
        assert state.units[0].sub_progress == 2

    def test_sub_progress_never_changes_status(self, state):
        state.register_start("a.py")
        for _ in range(8):
            state.record_sub_progress("a.py")
            assert state.units[0].status is UnitStatus.WORKING

    def test_resolve_requires_final_status(self, state):
        state.register_start("a.py")
        with pytest.raises(InvalidEventError):
            state.resolve("a.py", UnitStatus.WORKING)

    def test_completed_count_monotonic(self, state):
        seen = []
        for name in ("a.py", "b.py", "c.py"):
            state.register_start(name)
            seen.append(state.completed_count())
            state.resolve(name, UnitStatus.PASS)
            seen.append(state.completed_count())

        assert seen == sorted(seen)
        assert seen[-1] == 3
        assert max(seen) <= state.total


class TestUnregisteredLookup:
    """Test the fallback for ids that were never started."""

    def test_falls_back_to_first_unit(self, state):
        state.register_start("a.py")
        state.record_sub_progress("unknown.py")
        assert state.units[FALLBACK_INDEX].sub_progress == 1
        assert state.fallback_lookups == 1

    def test_resolve_unknown_hits_first_unit(self, state):
        state.register_start("a.py")
        state.resolve("unknown.py", UnitStatus.FAIL)
        assert state.units[0].status is UnitStatus.FAIL

    def test_fallback_never_reverts_resolved_unit(self, state):
        state.register_start("a.py")
        state.resolve("a.py", UnitStatus.PASS)
        state.resolve("unknown.py", UnitStatus.FAIL)
        assert state.units[0].status is UnitStatus.PASS

    def test_no_units_is_noop(self):
        run = RunState()
        run.initialize(0)
        assert run.lookup("a.py") is None
        run.record_sub_progress("a.py")
        run.resolve("a.py", UnitStatus.PASS)
        assert run.units == []
        assert run.fallback_lookups == 0
