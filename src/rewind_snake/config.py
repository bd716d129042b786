"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from rewind_snake.grid import WallMode
from rewind_snake.snake import MIN_LENGTH
from rewind_snake.speed import BASELINE_INTERVAL, Difficulty

logger = logging.getLogger(__name__)

DEFAULT_SAVE_FILE = "save_file"


@dataclass(frozen=True)
class GameConfig:
    """Settings for one game session.

    Supports JSON serialization so a session can be reproduced.
    """

    # Grid
    width: int = 80
    height: int = 50
    ghost_mode: bool = False

    # Snakes
    snake_size_start: int = MIN_LENGTH
    two_players: bool = False

    # Pace
    snake_speed: int = BASELINE_INTERVAL
    difficulty: str = "medium"
    bad_berries: bool = False

    # Persistence
    file_path: str | None = None

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ValueError("width and height must each be at least 3.")
        if self.snake_size_start < MIN_LENGTH:
            raise ValueError(
                f"snake_size_start must be at least {MIN_LENGTH}.",
            )
        if self.snake_speed < 0:
            raise ValueError("snake_speed must be non-negative.")
        try:
            Difficulty(self.difficulty)
        except ValueError:
            raise ValueError(
                f"difficulty must be one of "
                f"{[d.value for d in Difficulty]}, got {self.difficulty!r}.",
            ) from None

        if self.width // 2 - (self.snake_size_start - 1) < 0:
            raise ValueError(
                "snake_size_start does not fit the configured width; "
                "increase width or reduce snake_size_start.",
            )
        if self.two_players and self.height // 2 - 2 < 0:
            raise ValueError(
                "height is too small for two_players; need at least 4 rows.",
            )

    @property
    def speed_difficulty(self) -> Difficulty:
        return Difficulty(self.difficulty)

    @property
    def wall_mode(self) -> WallMode:
        return WallMode.WRAP if self.ghost_mode else WallMode.DEATH

    @property
    def save_path(self) -> Path:
        """Where save requests write to."""
        return Path(self.file_path or DEFAULT_SAVE_FILE)

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
