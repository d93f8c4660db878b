"""Per-unit progress model for a single test run."""

from dataclasses import dataclass
from enum import Enum

from dotbar.utils.errors import InvalidEventError
from dotbar.utils.validation import validate_count, validate_unit_id


# Unregistered unit ids land here, so a reporting glitch never stops the bar.
FALLBACK_INDEX = 0


class UnitStatus(str, Enum):
    """Lifecycle status of one unit."""

    PENDING = "pending"
    WORKING = "working"
    SKIPPED = "skipped"
    PASS = "pass"
    FAIL = "fail"

    @property
    def is_resolved(self) -> bool:
        return self in (UnitStatus.SKIPPED, UnitStatus.PASS, UnitStatus.FAIL)

    @property
    def rank(self) -> int:
        if self is UnitStatus.PENDING:
            return 0
        if self is UnitStatus.WORKING:
            return 1
        return 2


@dataclass
class Unit:
    """One test file tracked as a single cell of the bar."""

    index: int
    status: UnitStatus = UnitStatus.PENDING
    sub_progress: int = 0

    def advance(self, status: UnitStatus) -> bool:
        """Move forward to ``status``; backward and sideways moves are ignored."""
        if status.rank <= self.status.rank:
            return False

        self.status = status
        return True


@dataclass
class UnitResult:
    """Result counts reported for a finished unit."""

    failing: int = 0
    passing: int = 0
    skipped: bool = False
    pending: int = 0

    def __post_init__(self) -> None:
        validate_count("failing", self.failing)
        validate_count("passing", self.passing)
        validate_count("pending", self.pending)


def classify(result: UnitResult, strict: bool = False) -> UnitStatus:
    """Map a unit result to its final status.

    Failure wins over skip, skip wins over pass. With ``strict`` a unit
    that produced no passing test at all also counts as failed.
    """
    if result.failing > 0 or (strict and result.passing == 0):
        return UnitStatus.FAIL

    if result.skipped or result.pending > 0:
        return UnitStatus.SKIPPED

    return UnitStatus.PASS


class RunState:
    """Mutable status of every unit in the current run."""

    def __init__(self) -> None:
        self.units: list[Unit] = []
        self.path_index: dict[str, int] = {}
        self.estimate: int | None = None
        self.fallback_lookups = 0
        self._started = 0

    @property
    def total(self) -> int:
        return len(self.units)

    @property
    def started(self) -> int:
        return self._started

    def initialize(self, total_units: int, estimate: int = 0) -> None:
        """Reset to ``total_units`` pending units."""
        validate_count("total_units", total_units)
        if estimate < 0:
            raise InvalidEventError(f"Estimate must not be negative, got {estimate}")

        self.units = [Unit(index) for index in range(total_units)]
        self.path_index = {}
        self.estimate = int(estimate) if estimate > 0 else None
        self.fallback_lookups = 0
        self._started = 0

    def register_start(self, unit_id: str) -> int:
        """Assign the next index to ``unit_id`` and mark it working."""
        validate_unit_id(unit_id)

        index = self.path_index.get(unit_id)
        if index is None:
            index = self._started
            self._started += 1
            self.path_index[unit_id] = index

            while len(self.units) <= index:
                self.units.append(Unit(len(self.units)))

        self.units[index].advance(UnitStatus.WORKING)
        return index

    def lookup(self, unit_id: str) -> int | None:
        """Return the index of ``unit_id``.

        Unknown ids fall back to ``FALLBACK_INDEX`` and are counted in
        ``fallback_lookups``. Returns None only when there are no units.
        """
        index = self.path_index.get(unit_id)
        if index is not None:
            return index

        if not self.units:
            return None

        self.fallback_lookups += 1
        return FALLBACK_INDEX

    def record_sub_progress(self, unit_id: str) -> None:
        index = self.lookup(unit_id)
        if index is None:
            return

        unit = self.units[index]
        if unit.status is UnitStatus.WORKING:
            unit.sub_progress += 1

    def resolve(self, unit_id: str, outcome: UnitStatus) -> None:
        if not outcome.is_resolved:
            raise InvalidEventError(f"Cannot resolve a unit as {outcome.value}")

        index = self.lookup(unit_id)
        if index is None:
            return

        self.units[index].advance(outcome)

    def completed_count(self) -> int:
        """Count units that are neither pending nor working."""
        return sum(1 for unit in self.units if unit.status.is_resolved)
