# MIT License (see LICENSE)
"""
Floating score popups.

A popup carries no timer: every visual property is a pure function of the
wall-clock time passed in, so renderers can fade it and hosts can prune it
without any per-frame bookkeeping.
"""
from __future__ import annotations
import math
from dataclasses import dataclass

from ..constants import POPUP_DURATION, POPUP_RISE_SPEED, POPUP_SCALE_PULSE
from .challenge import AccuracyResult


@dataclass(frozen=True)
class ScorePopup:
    """
    Attributes:
        text: Label to show ("Perfect!").
        points: Points to show underneath (0 hides the line).
        x, y: Anchor position in pixels.
        start_time: Wall-clock seconds when the popup was created.
    """
    text: str
    points: int
    x: float
    y: float
    start_time: float
    duration: float = POPUP_DURATION

    @classmethod
    def from_result(
        cls,
        result: AccuracyResult,
        x: float,
        y: float,
        now: float,
        bonus: int = 0,
    ) -> "ScorePopup":
        return cls(text=result.label, points=result.points + bonus, x=x, y=y, start_time=now)

    def elapsed(self, now: float) -> float:
        return max(0.0, now - self.start_time)

    def is_alive(self, now: float) -> bool:
        return self.elapsed(now) <= self.duration

    def alpha(self, now: float) -> float:
        """Linear fade 1 -> 0 over the popup duration."""
        return max(0.0, 1.0 - self.elapsed(now) / self.duration)

    def y_offset(self, now: float) -> float:
        """Upward drift in pixels."""
        return self.elapsed(now) * POPUP_RISE_SPEED

    def scale(self, now: float) -> float:
        """Text scale 1 + 0.3 sin(π·elapsed): 1.3x at 0.5 s, 0.7x at the 1.5 s end."""
        return 1.0 + math.sin(self.elapsed(now) * math.pi) * POPUP_SCALE_PULSE


def prune_popups(popups: list[ScorePopup], now: float) -> list[ScorePopup]:
    """Return only popups still visible at `now`."""
    return [p for p in popups if p.is_alive(now)]
