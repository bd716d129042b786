"""Reversal history: per-tick records that let a snake play backward."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from rewind_snake.grid import Position
    from rewind_snake.snake import Snake

logger = logging.getLogger(__name__)


class StepKind(enum.Enum):
    """How the body changed on a recorded forward tick."""

    SHIFT = "shift"
    GROW = "grow"
    HOLD = "hold"


class Step(NamedTuple):
    kind: StepKind
    cell: Position | None = None


class ReversalHistory:
    """Last-in-first-out stack with one entry per forward tick."""

    def __init__(self) -> None:
        self._steps: list[Step] = []

    def push(self, step: Step) -> None:
        self._steps.append(step)

    def pop(self) -> Step | None:
        """Remove and return the most recent step, or ``None`` when empty."""
        if not self._steps:
            return None
        return self._steps.pop()

    def __len__(self) -> int:
        return len(self._steps)


def record_tick(
    history: ReversalHistory,
    vacated: Position | None,
    grew: bool = False,
) -> None:
    """Push the outcome of one forward tick.

    A vacated tail cell records a shift; *grew* records growth; anything
    else records a tick where the body stayed put.
    """
    if vacated is not None:
        history.push(Step(StepKind.SHIFT, vacated))
    elif grew:
        history.push(Step(StepKind.GROW))
    else:
        history.push(Step(StepKind.HOLD))


def rewind(snake: Snake, history: ReversalHistory) -> Snake:
    """Undo the most recent recorded tick on *snake* in place.

    A shift is undone by dropping the head and putting the vacated cell
    back as the tail. Rewinding with an empty history leaves the body
    unchanged. Collision and boundary rules are not consulted.
    """
    step = history.pop()
    if step is None:
        logger.debug("Reversal history empty; nothing to rewind.")
        return snake

    if step.kind is StepKind.SHIFT:
        snake.body.pop()
        snake.body.appendleft(step.cell)
    elif step.kind is StepKind.GROW:
        snake.body.pop()
    return snake
