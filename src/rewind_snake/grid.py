"""Grid bounds, coordinates, and render cell codes."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from rewind_snake.snake import Direction


class WallMode(enum.Enum):
    """Defines behavior when a snake reaches the grid boundary."""

    DEATH = "death"
    WRAP = "wrap"


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    SECOND_SNAKE = 2
    FOOD = 3
    BAD_BERRY = 4


class Position(NamedTuple):
    """An (x, y) grid cell. ``x`` grows eastward, ``y`` grows southward."""

    x: int
    y: int


class Grid:
    """Fixed-size game grid with a configurable wall mode.

    Coordinates use (x, y) ordering; the backing NumPy array is indexed
    ``cells[y, x]`` and is only used to build render snapshots.
    """

    def __init__(
        self,
        width: int = 80,
        height: int = 50,
        wall_mode: WallMode = WallMode.DEATH,
    ) -> None:
        if width < 3 or height < 3:
            raise ValueError("Grid dimensions must be at least 3×3.")
        self.width = width
        self.height = height
        self.wall_mode = wall_mode
        self.cells = np.zeros((height, width), dtype=np.int8)

    @property
    def ghost_mode(self) -> bool:
        return self.wall_mode == WallMode.WRAP

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def wrap(self, x: int, y: int) -> Position:
        """Wrap coordinates around to the opposite edge."""
        return Position(x % self.width, y % self.height)

    def shift(self, position: Position, direction: Direction) -> Position:
        """Return *position* moved one cell in *direction*, unclamped."""
        dx, dy = direction.value
        return Position(position[0] + dx, position[1] + dy)

    def set(self, x: int, y: int, cell_type: CellType) -> None:
        """Set the cell type at the given coordinate."""
        self.cells[y, x] = cell_type

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "wall_mode": self.wall_mode.value,
            "cells": self.cells.tolist(),
        }
