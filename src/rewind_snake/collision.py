"""Pure collision checks. Callers decide what a hit means."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rewind_snake.grid import Position
    from rewind_snake.snake import Snake


def self_collision(body: Sequence[Position], candidate: Position) -> bool:
    """Check whether *candidate* lands on the body, ignoring the head."""
    return any(seg == candidate for seg in list(body)[:-1])


def cross_collision(first: Sequence[Position], second: Sequence[Position]) -> bool:
    """Check whether either head touches the other snake.

    A head inside the other snake's body (excluding its head), or two
    heads on the same cell, counts for both snakes at once.
    """
    if not first or not second:
        return False
    first_head = first[-1]
    second_head = second[-1]
    if first_head == second_head:
        return True
    return (
        first_head in list(second)[:-1]
        or second_head in list(first)[:-1]
    )


def detect_collision(
    snake: Snake,
    candidate: Position,
    other: Snake | None = None,
) -> bool:
    """Combine the self check for *candidate* with the cross-snake check."""
    if self_collision(snake.body, candidate):
        return True
    return other is not None and cross_collision(snake.body, other.body)
