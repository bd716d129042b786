"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rewind_snake.collision import self_collision
from rewind_snake.grid import Position

if TYPE_CHECKING:
    from rewind_snake.grid import Grid

MIN_LENGTH = 3


class Direction(enum.Enum):
    """Movement directions with (dx, dy) values. ``STILL`` does not move."""

    STILL = (0, 0)
    NORTH = (0, -1)
    EAST = (1, 0)
    WEST = (-1, 0)
    SOUTH = (0, 1)

    def opposite(self) -> Direction:
        """Return the 180° reversal of this direction."""
        dx, dy = self.value
        return Direction((-dx, -dy))

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Direction:
        """Map a unit offset to a direction; anything else is ``STILL``."""
        try:
            return cls((dx, dy))
        except ValueError:
            return cls.STILL


class MoveOutcome(enum.Enum):
    """Result of a single :meth:`Snake.advance` call."""

    MOVED = "moved"
    GREW = "grew"
    HELD = "held"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Move:
    """What happened to a snake during one tick."""

    outcome: MoveOutcome
    vacated: Position | None = None
    wrapped: bool = False


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The tail is ``body[0]``; the head is ``body[-1]``.
    """

    def __init__(
        self,
        body: Iterable[tuple[int, int]],
        direction: Direction = Direction.STILL,
    ) -> None:
        cells = [Position(*cell) for cell in body]
        if len(cells) < MIN_LENGTH:
            raise ValueError(f"Snake length must be at least {MIN_LENGTH}.")
        self.body: deque[Position] = deque(cells)
        self.direction = direction
        self.halted = False

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[-1]

    @property
    def tail(self) -> Position:
        """Return the tail coordinate."""
        return self.body[0]

    @property
    def heading(self) -> Direction:
        """Direction pointing from the neck segment to the head."""
        (nx, ny), (hx, hy) = self.body[-2], self.body[-1]
        return Direction.from_delta(hx - nx, hy - ny)

    def advance(
        self,
        grid: Grid,
        grow: bool = False,
        blocked: bool = False,
    ) -> Move:
        """Move the snake one cell in its current direction.

        *grow* keeps the tail in place. *blocked* carries a collision the
        caller already detected (e.g. against another snake). A blocked
        move leaves the body untouched, sets the direction to ``STILL``
        and halts the snake for good.
        """
        if self.halted:
            return Move(MoveOutcome.HELD)
        if blocked:
            return self._halt()
        if self.direction == Direction.STILL:
            return Move(MoveOutcome.HELD)

        candidate = grid.shift(self.head, self.direction)
        wrapped = False
        if not grid.in_bounds(*candidate):
            if not grid.ghost_mode:
                return self._halt()
            candidate = grid.wrap(*candidate)
            wrapped = True

        if self_collision(self.body, candidate):
            return self._halt()

        self.body.append(candidate)
        if grow:
            return Move(MoveOutcome.GREW, wrapped=wrapped)
        return Move(MoveOutcome.MOVED, self.body.popleft(), wrapped)

    def _halt(self) -> Move:
        self.direction = Direction.STILL
        self.halted = True
        return Move(MoveOutcome.BLOCKED)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "halted": self.halted,
        }


def spawn_layout(grid: Grid, size: int = MIN_LENGTH, player: int = 0) -> Snake:
    """Build the starting snake for *player* around the grid centre.

    The first snake lies on the middle row with its head on the centre
    cell, facing east. The second snake is mirrored two rows above,
    facing west.
    """
    mid_x = grid.width // 2
    mid_y = grid.height // 2
    if size < MIN_LENGTH:
        raise ValueError(f"Snake length must be at least {MIN_LENGTH}.")
    if mid_x - (size - 1) < 0:
        raise ValueError(
            f"snake size {size} does not fit on a grid {grid.width} wide.",
        )

    if player == 0:
        body = [(mid_x - (size - 1) + i, mid_y) for i in range(size)]
        return Snake(body, Direction.EAST)
    if player == 1:
        if mid_y - 2 < 0:
            raise ValueError("Grid too short for a second snake.")
        body = [(mid_x - i, mid_y - 2) for i in range(size)]
        return Snake(body, Direction.WEST)
    raise ValueError(f"player {player} out of range [0, 2).")
