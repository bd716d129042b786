"""Food and bad-berry placement."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from rewind_snake.grid import Position

if TYPE_CHECKING:
    from rewind_snake.grid import Grid

logger = logging.getLogger(__name__)

FOOD_SCORE = 10


class ConsumableManager:
    """Places food and, optionally, a bad berry on free cells.

    Candidates are drawn uniformly from the whole grid and redrawn until
    they miss every occupied cell. There is no retry cap, which is fine
    while snakes cover a small fraction of the grid. Uses a seeded NumPy
    RNG for reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        bad_berries: bool = False,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.bad_berries = bad_berries
        self.food: Position | None = None
        self.bad_berry: Position | None = None

    def _draw(self) -> Position:
        x = int(self.rng.integers(self.grid.width))
        y = int(self.rng.integers(self.grid.height))
        return Position(x, y)

    def spawn_food(self, occupied: Iterable[tuple[int, int]]) -> Position:
        """Place the food on a cell free of snakes and the bad berry."""
        blocked = set(occupied)
        if self.bad_berry is not None:
            blocked.add(self.bad_berry)
        self.food = self._draw_free(blocked)
        return self.food

    def spawn_bad_berry(
        self, occupied: Iterable[tuple[int, int]],
    ) -> Position | None:
        """Place the bad berry away from snakes and food, if enabled."""
        if not self.bad_berries:
            return None
        blocked = set(occupied)
        if self.food is not None:
            blocked.add(self.food)
        self.bad_berry = self._draw_free(blocked)
        return self.bad_berry

    def respawn(self, occupied: Iterable[tuple[int, int]]) -> None:
        """Redraw food and bad berry together as a distinct free pair."""
        blocked = set(occupied)
        attempts = 0
        while True:
            attempts += 1
            food = self._draw()
            berry = self._draw()
            if food in blocked:
                continue
            if self.bad_berries and (berry in blocked or berry == food):
                continue
            break

        if attempts > 1:
            logger.debug("Consumables placed after %d draws.", attempts)
        self.food = food
        self.bad_berry = berry if self.bad_berries else None

    def _draw_free(self, blocked: set[tuple[int, int]]) -> Position:
        while True:
            pos = self._draw()
            if pos not in blocked:
                return pos

    def to_dict(self) -> dict:
        """Serialize consumable state to a dictionary."""
        return {
            "food": list(self.food) if self.food is not None else None,
            "bad_berry": (
                list(self.bad_berry) if self.bad_berry is not None else None
            ),
        }
