"""Display configuration for the progress bar."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotbar.core.glyphs import COMPACT_POLICY, DEFAULT_POLICY, GlyphPolicy
from dotbar.utils.errors import ConfigurationError


@dataclass
class DotbarConfig:
    """Rendering choices for one reporter.

    Attributes:
        show_percent: Print a percentage before the completion fraction
        hide_spent_estimate: Stop printing the estimate once it reaches zero
        strict: Treat units without any passing test as failed
        policy: Glyph thresholds and characters
        color: Emit SGR color codes
    """

    show_percent: bool = True
    hide_spent_estimate: bool = True
    strict: bool = False
    policy: GlyphPolicy = DEFAULT_POLICY
    color: bool = True

    def validate(self) -> "DotbarConfig":
        if not isinstance(self.policy, GlyphPolicy):
            raise ConfigurationError(f"policy must be a GlyphPolicy, got {type(self.policy).__name__}")

        glyphs = (
            self.policy.blank,
            self.policy.empty,
            self.policy.anomaly,
            self.policy.full,
            self.policy.odd,
            self.policy.even,
            self.policy.busy,
            self.policy.dense,
        )
        if any(len(glyph) != 1 for glyph in glyphs):
            raise ConfigurationError("Every glyph must be exactly one character")

        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "DotbarConfig":
        """Build a config, turning color off when ``NO_COLOR`` is set."""
        env = os.environ if environ is None else environ
        if env.get("NO_COLOR"):
            overrides["color"] = False

        return cls(**overrides).validate()


def policy_for(compact: bool) -> GlyphPolicy:
    return COMPACT_POLICY if compact else DEFAULT_POLICY
