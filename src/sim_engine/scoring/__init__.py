# MIT License (see LICENSE)
"""
Challenge scoring.

This subpackage provides:
    - calculate_accuracy / calculate_target_accuracy: error -> tier.
    - create_challenge_state / update_challenge_state: pure session folds.
    - ChallengeScorer: the same operations bound to a ScoringConfig.
    - ScorePopup: time-driven popup records for renderers.
"""
from .challenge import (
    Tier,
    AccuracyResult,
    ChallengeState,
    ChallengeScorer,
    calculate_accuracy,
    calculate_target_accuracy,
    create_challenge_state,
    update_challenge_state,
    streak_bonus,
    accuracy_percent,
    tier_color,
)
from .popups import ScorePopup, prune_popups

__all__ = [
    "Tier",
    "AccuracyResult",
    "ChallengeState",
    "ChallengeScorer",
    "calculate_accuracy",
    "calculate_target_accuracy",
    "create_challenge_state",
    "update_challenge_state",
    "streak_bonus",
    "accuracy_percent",
    "tier_color",
    "ScorePopup",
    "prune_popups",
]
