# MIT License (see LICENSE)
"""
Prediction challenges: accuracy tiers, streaks and session score.

Everything here is a pure function of its inputs. The scorer never plays
sounds or spawns popups; the caller inspects the returned tier and
decides which side effects to trigger.

Tier scale (error measured against the challenge tolerance):
    error < 0.05·tol  -> perfect, 3 points
    error < 0.15·tol  -> great,   2 points
    error < 0.30·tol  -> close,   1 point
    otherwise         -> miss,    0 points

Streak bonus: once a run of positive attempts reaches 3, each further
positive attempt (the third included) earns min(streak, 5) extra points.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, replace
from enum import Enum

from ..config import ScoringConfig, DEFAULT_SCORING

logger = logging.getLogger(__name__)


class Tier(str, Enum):
    PERFECT = "perfect"
    GREAT = "great"
    CLOSE = "close"
    MISS = "miss"


TIER_POINTS = {Tier.PERFECT: 3, Tier.GREAT: 2, Tier.CLOSE: 1, Tier.MISS: 0}
TIER_LABELS = {
    Tier.PERFECT: "Perfect!",
    Tier.GREAT: "Great!",
    Tier.CLOSE: "Close!",
    Tier.MISS: "Try Again",
}
TIER_COLORS = {
    Tier.PERFECT: "#22c55e",
    Tier.GREAT: "#3b82f6",
    Tier.CLOSE: "#f59e0b",
    Tier.MISS: "#ef4444",
}

MAX_TIER_POINTS = TIER_POINTS[Tier.PERFECT]


@dataclass(frozen=True)
class AccuracyResult:
    """Outcome of one attempt."""
    points: int
    tier: Tier
    label: str

    @classmethod
    def for_tier(cls, tier: Tier) -> "AccuracyResult":
        return cls(points=TIER_POINTS[tier], tier=tier, label=TIER_LABELS[tier])


@dataclass(frozen=True)
class ChallengeState:
    """
    Session state of one challenge.

    Attributes:
        score: Total points including streak bonuses; never decreases.
        attempts: Number of scored attempts.
        streak: Consecutive attempts with points > 0.
        best_streak: Longest streak seen this session.
        active: Whether the host is currently accepting attempts.
        description: Prompt shown to the user.
        last_result: Most recent AccuracyResult, if any.
        last_bonus: Streak bonus awarded on the most recent attempt.
    """
    score: int = 0
    attempts: int = 0
    streak: int = 0
    best_streak: int = 0
    active: bool = False
    description: str = ""
    last_result: AccuracyResult | None = None
    last_bonus: int = 0


def _classify(error: float, tolerance: float, config: ScoringConfig) -> AccuracyResult:
    if error < tolerance * config.perfect_ratio:
        return AccuracyResult.for_tier(Tier.PERFECT)
    if error < tolerance * config.great_ratio:
        return AccuracyResult.for_tier(Tier.GREAT)
    if error < tolerance * config.close_ratio:
        return AccuracyResult.for_tier(Tier.CLOSE)
    return AccuracyResult.for_tier(Tier.MISS)


def _check_tolerance(tolerance: float) -> float:
    tolerance = float(tolerance)
    if not math.isfinite(tolerance) or tolerance <= 0:
        raise ValueError(f"tolerance must be a finite value > 0, got {tolerance}")
    return tolerance


def calculate_accuracy(
    predicted: float,
    actual: float,
    tolerance: float,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AccuracyResult:
    """
    Score a numeric prediction.

    Args:
        predicted: The user's answer.
        actual: The simulated/true value.
        tolerance: Error scale of the challenge (> 0).
        config: Tier cutoffs.

    Raises:
        ValueError: If tolerance <= 0 or any input is non-finite.
    """
    tolerance = _check_tolerance(tolerance)
    predicted, actual = float(predicted), float(actual)
    if not (math.isfinite(predicted) and math.isfinite(actual)):
        raise ValueError(f"predicted and actual must be finite, got {predicted}, {actual}")
    return _classify(abs(predicted - actual), tolerance, config)


def calculate_target_accuracy(
    point: tuple[float, ...],
    target: tuple[float, ...],
    tolerance: float,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AccuracyResult:
    """
    Score a click/placement against a target; the error is the Euclidean
    distance, judged on the same scale as calculate_accuracy.
    """
    tolerance = _check_tolerance(tolerance)
    if len(point) != len(target):
        raise ValueError("point and target must have the same dimension")
    error = math.dist(point, target)
    if not math.isfinite(error):
        raise ValueError(f"non-finite click distance: {point} vs {target}")
    return _classify(error, tolerance, config)


def create_challenge_state(description: str = "", active: bool = False) -> ChallengeState:
    """Fresh state at challenge start."""
    return ChallengeState(description=description, active=active)


def streak_bonus(streak: int, config: ScoringConfig = DEFAULT_SCORING) -> int:
    """Bonus for a positive attempt that brings the streak to `streak`."""
    if streak < config.streak_bonus_threshold:
        return 0
    return min(streak, config.streak_bonus_cap)


def update_challenge_state(
    state: ChallengeState,
    result: AccuracyResult,
    config: ScoringConfig = DEFAULT_SCORING,
) -> ChallengeState:
    """
    Fold one result into the session state. Returns a new state.

    attempts += 1; a positive result extends the streak and may earn a
    streak bonus, a zero result resets the streak to 0.
    """
    if result.points < 0:
        raise ValueError(f"result points must be >= 0, got {result.points}")
    if result.points > 0:
        streak = state.streak + 1
        bonus = streak_bonus(streak, config)
    else:
        streak = 0
        bonus = 0
    return replace(
        state,
        score=state.score + result.points + bonus,
        attempts=state.attempts + 1,
        streak=streak,
        best_streak=max(state.best_streak, streak),
        last_result=result,
        last_bonus=bonus,
    )


def accuracy_percent(state: ChallengeState) -> int:
    """Score as a percentage of all-perfect play (capped at 100)."""
    if state.attempts == 0:
        return 0
    return min(100, round(100 * state.score / (state.attempts * MAX_TIER_POINTS)))


def tier_color(tier: Tier) -> str:
    """Display color for a tier."""
    return TIER_COLORS[Tier(tier)]


class ChallengeScorer:
    """
    Scorer bound to one ScoringConfig.

    Usage:
        scorer = ChallengeScorer()
        state = scorer.start("Predict the period")
        result = scorer.evaluate(2.9, 2.84, tolerance=2.84)
        state = scorer.record(state, result)
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config if config is not None else DEFAULT_SCORING

    def evaluate(self, predicted: float, actual: float, tolerance: float) -> AccuracyResult:
        return calculate_accuracy(predicted, actual, tolerance, self.config)

    def evaluate_target(self, point, target, tolerance: float) -> AccuracyResult:
        return calculate_target_accuracy(point, target, tolerance, self.config)

    def start(self, description: str) -> ChallengeState:
        """Fresh, active state for a new challenge."""
        logger.info("Challenge started: %s", description)
        return create_challenge_state(description=description, active=True)

    def record(self, state: ChallengeState, result: AccuracyResult) -> ChallengeState:
        return update_challenge_state(state, result, self.config)
