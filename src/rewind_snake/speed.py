"""Tick interval rules per difficulty tier."""

from __future__ import annotations

import enum

# Interval the hard tier snaps back to whenever food is eaten.
BASELINE_INTERVAL = 120


class Difficulty(enum.Enum):
    """How the tick interval evolves over a game."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SpeedCurve:
    """Tracks the current tick interval (milliseconds between ticks).

    Easy and medium keep the starting interval. Hard shortens it by one on
    every forward move and resets it to :data:`BASELINE_INTERVAL` on food.
    Bad berries toggle the interval on any tier.
    """

    def __init__(
        self,
        interval: int = BASELINE_INTERVAL,
        difficulty: Difficulty = Difficulty.MEDIUM,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be non-negative.")
        self.interval = interval
        self.difficulty = difficulty

    def on_tick(self) -> None:
        """Apply the per-move acceleration."""
        if self.difficulty == Difficulty.HARD and self.interval > 0:
            self.interval -= 1

    def on_food(self) -> None:
        if self.difficulty == Difficulty.HARD:
            self.interval = BASELINE_INTERVAL

    def on_bad_berry(self, eaten: int) -> None:
        """Speed up on odd counts, slow down again on even counts."""
        if eaten % 2 != 0:
            self.interval //= 3
        elif eaten > 1:
            self.interval *= 3

    def to_dict(self) -> dict:
        return {
            "interval": self.interval,
            "difficulty": self.difficulty.value,
        }
