"""Glyph selection for progress bar cells."""

from dataclasses import dataclass

from dotbar.core.state import UnitStatus
from dotbar.utils.errors import ConfigurationError


@dataclass(frozen=True)
class GlyphPolicy:
    """Staircase thresholds and characters used to draw one unit.

    Working units cycle between ``odd`` and ``even`` as results come in,
    then settle on ``busy`` and ``dense`` once ``busy_at`` and ``dense_at``
    results have been seen.
    """

    busy_at: int = 10
    dense_at: int = 15
    blank: str = " "
    empty: str = "⠢"
    anomaly: str = "⣉"
    full: str = "⣿"
    odd: str = "⠢"
    even: str = "⠔"
    busy: str = "⠶"
    dense: str = "⢷"

    def __post_init__(self) -> None:
        if self.busy_at < 1 or self.dense_at < 1:
            raise ConfigurationError(
                f"Glyph thresholds must be positive, got busy_at={self.busy_at}, dense_at={self.dense_at}"
            )

        if self.busy_at > self.dense_at:
            raise ConfigurationError(
                f"busy_at ({self.busy_at}) must not exceed dense_at ({self.dense_at})"
            )


DEFAULT_POLICY = GlyphPolicy()
COMPACT_POLICY = GlyphPolicy(busy_at=7, dense_at=10)


def select_glyph(count: int, status: UnitStatus, policy: GlyphPolicy = DEFAULT_POLICY) -> str:
    """Return the single character drawn for a unit.

    Args:
        count: Sub-results seen for the unit so far
        status: Current unit status
        policy: Thresholds and characters to use

    Returns:
        One display character
    """
    if status is UnitStatus.PENDING:
        return policy.blank

    if count == 0:
        return policy.anomaly if status is UnitStatus.FAIL else policy.empty

    if status is not UnitStatus.WORKING:
        return policy.full

    if count >= policy.dense_at:
        return policy.dense
    if count >= policy.busy_at:
        return policy.busy
    if count % 2 == 1:
        return policy.odd

    return policy.even
