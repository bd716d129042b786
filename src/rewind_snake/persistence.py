"""Binary save files: grid dimensions and food position."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from rewind_snake.grid import Position

if TYPE_CHECKING:
    from rewind_snake.engine import GameEngine

logger = logging.getLogger(__name__)

# width, height, food x, food y as big-endian unsigned 64-bit integers.
_FIELD_DTYPE = np.dtype(">u8")
_FIELD_COUNT = 4
SAVE_SIZE = _FIELD_DTYPE.itemsize * _FIELD_COUNT


class SaveFileError(ValueError):
    """Raised when a save file cannot be decoded."""


class SaveFileMismatchError(SaveFileError):
    """Raised when saved grid dimensions differ from the running grid."""


@dataclass(frozen=True)
class SaveData:
    width: int
    height: int
    food: Position

    def encode(self) -> bytes:
        fields = [self.width, self.height, self.food.x, self.food.y]
        return np.array(fields, dtype=_FIELD_DTYPE).tobytes()

    @classmethod
    def decode(cls, raw: bytes) -> SaveData:
        if len(raw) < SAVE_SIZE:
            raise SaveFileError(
                f"save file too short: {len(raw)} bytes, need {SAVE_SIZE}.",
            )
        fields = np.frombuffer(raw[:SAVE_SIZE], dtype=_FIELD_DTYPE).tolist()
        width, height, food_x, food_y = fields
        return cls(width, height, Position(food_x, food_y))


def save_game(engine: GameEngine, path: str | Path | None = None) -> Path:
    """Write the engine's grid size and food position to *path*.

    Defaults to the configured save path.
    """
    p = Path(path) if path is not None else engine.config.save_path
    food = engine.consumables.food
    if food is None:
        raise SaveFileError("no food has been spawned yet.")
    data = SaveData(engine.grid.width, engine.grid.height, food)
    p.write_bytes(data.encode())
    logger.info("Game saved to %s", p)
    return p


def read_save(path: str | Path) -> SaveData:
    """Decode a save file without applying it."""
    return SaveData.decode(Path(path).read_bytes())


def load_game(engine: GameEngine, path: str | Path | None = None) -> SaveData:
    """Restore the food position, rejecting saves made on another grid size."""
    p = Path(path) if path is not None else engine.config.save_path
    data = read_save(p)
    if data.width != engine.grid.width:
        raise SaveFileMismatchError(
            f"width different from saved width "
            f"({engine.grid.width} != {data.width}).",
        )
    if data.height != engine.grid.height:
        raise SaveFileMismatchError(
            f"height different from saved height "
            f"({engine.grid.height} != {data.height}).",
        )
    if not engine.grid.in_bounds(*data.food):
        raise SaveFileError(f"saved food {tuple(data.food)} is off the grid.")

    engine.consumables.food = data.food
    logger.info("Game loaded from %s", p)
    return data
