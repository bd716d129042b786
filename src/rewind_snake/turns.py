"""Direction-change gating against recently committed directions."""

from __future__ import annotations

from collections import deque

from rewind_snake.snake import Direction


class DirectionHistory:
    """Bounded window over the directions a snake has committed.

    Only the last committed value and whether the snake has ever changed
    direction matter for turn validation, so two entries are kept.
    *heading* is the orientation the snake was spawned with.
    """

    def __init__(self, heading: Direction = Direction.STILL) -> None:
        self.heading = heading
        self.window: deque[Direction] = deque(maxlen=2)
        self.varied = False

    @property
    def last(self) -> Direction | None:
        return self.window[-1] if self.window else None

    def commit(self, direction: Direction) -> None:
        """Record the direction in effect after a tick."""
        if self.window and self.window[-1] != direction:
            self.varied = True
        self.window.append(direction)

    def __len__(self) -> int:
        return len(self.window)


def validate_turn(
    requested: Direction,
    history: DirectionHistory,
    current: Direction,
) -> Direction:
    """Return the direction to use after a turn request.

    A request opposite to the last committed direction is ignored. Until
    the snake has moved in more than one direction, a request opposite to
    its spawn heading is ignored too, so it cannot fold back over its own
    neck from a standstill.
    """
    if requested == Direction.STILL:
        return current

    last = history.last
    if last is not None and requested == last.opposite():
        return current
    if not history.varied and requested == history.heading.opposite():
        return current
    return requested
