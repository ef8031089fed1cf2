# MIT License (see LICENSE)
"""
Configuration records injected into the engine components.

Each simulation instance builds (or shares) immutable config objects
instead of reading module-level globals, so two screens running side by
side never alias each other's tunables.
"""
from __future__ import annotations
from dataclasses import dataclass, field

from .constants import MAX_FRAME_DT, DEFAULT_SUBSTEPS
from .util import strict_mode


@dataclass(frozen=True)
class IntegratorConfig:
    """
    Tunables for Integrator.

    Attributes:
        substeps: Integration sub-steps per visible frame (>= 1). Keeps the
                  per-step Boris rotation angle small.
        max_dt: Upper clamp for a frame delta in seconds.
        damping: Exponential velocity damping rate in 1/s. Applied as
                 v *= exp(-damping * dt), so it is timestep-invariant.
        strict: Raise on non-finite state (True) or drop the tick (False).
    """
    substeps: int = DEFAULT_SUBSTEPS
    max_dt: float = MAX_FRAME_DT
    damping: float = 0.0
    strict: bool = field(default_factory=strict_mode)

    def __post_init__(self) -> None:
        if int(self.substeps) < 1:
            raise ValueError(f"substeps must be >= 1, got {self.substeps}")
        if not self.max_dt > 0:
            raise ValueError(f"max_dt must be > 0, got {self.max_dt}")
        if self.damping < 0:
            raise ValueError(f"damping must be >= 0, got {self.damping}")


@dataclass(frozen=True)
class ScoringConfig:
    """
    Tier cutoffs and streak bonus rules for ChallengeScorer.

    The cutoffs are fractions of the challenge tolerance: an error below
    perfect_ratio * tolerance is a perfect, and so on. The same scale is
    used for numeric guesses and click targets.
    """
    perfect_ratio: float = 0.05
    great_ratio: float = 0.15
    close_ratio: float = 0.30
    streak_bonus_threshold: int = 3
    streak_bonus_cap: int = 5

    def __post_init__(self) -> None:
        if not 0 < self.perfect_ratio < self.great_ratio < self.close_ratio:
            raise ValueError(
                "tier ratios must satisfy 0 < perfect < great < close, got "
                f"{self.perfect_ratio}, {self.great_ratio}, {self.close_ratio}"
            )
        if self.streak_bonus_threshold < 1 or self.streak_bonus_cap < 0:
            raise ValueError("streak bonus threshold must be >= 1 and cap >= 0")


DEFAULT_SCORING = ScoringConfig()
