"""Rewind Snake — grid snake simulation with time reversal."""

from rewind_snake.config import GameConfig
from rewind_snake.engine import (
    GameEngine,
    PlayerState,
    SinglePlayer,
    TimeCycle,
    TwoPlayer,
)
from rewind_snake.grid import Grid, Position, WallMode
from rewind_snake.snake import Direction, Snake
from rewind_snake.speed import Difficulty

__all__ = [
    "Difficulty",
    "Direction",
    "GameConfig",
    "GameEngine",
    "Grid",
    "PlayerState",
    "Position",
    "SinglePlayer",
    "Snake",
    "TimeCycle",
    "TwoPlayer",
    "WallMode",
]
