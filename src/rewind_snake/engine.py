"""Tick driver composing grid, snakes, consumables, and history."""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from rewind_snake.collision import cross_collision
from rewind_snake.config import GameConfig
from rewind_snake.consumables import FOOD_SCORE, ConsumableManager
from rewind_snake.grid import CellType, Grid, Position
from rewind_snake.history import ReversalHistory, record_tick, rewind
from rewind_snake.snake import Direction, MoveOutcome, Snake, spawn_layout
from rewind_snake.speed import SpeedCurve
from rewind_snake.turns import DirectionHistory, validate_turn

logger = logging.getLogger(__name__)


class TimeCycle(enum.Enum):
    """Which pipeline :meth:`GameEngine.step` runs."""

    FORWARD = "forward"
    BACKWARD = "backward"
    PAUSE = "pause"


class PlayerState:
    """Per-snake bundle: the snake, its histories, and its scoring."""

    __slots__ = (
        "player_id", "snake", "turns", "reversal", "score", "bad_berries",
    )

    def __init__(self, player_id: int, snake: Snake) -> None:
        self.player_id = player_id
        self.score = 0
        self.bad_berries = 0
        self.rebuild(snake)

    def rebuild(self, snake: Snake) -> None:
        """Replace the snake and start both histories afresh."""
        self.snake = snake
        self.turns = DirectionHistory(snake.heading)
        self.reversal = ReversalHistory()

    @property
    def halted(self) -> bool:
        return self.snake.halted

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "score": self.score,
            "bad_berries": self.bad_berries,
            **self.snake.to_dict(),
        }


@dataclass
class SinglePlayer:
    first: PlayerState

    @property
    def players(self) -> tuple[PlayerState, ...]:
        return (self.first,)


@dataclass
class TwoPlayer:
    first: PlayerState
    second: PlayerState

    @property
    def players(self) -> tuple[PlayerState, ...]:
        return (self.first, self.second)


GameMode = SinglePlayer | TwoPlayer


class GameEngine:
    """Step-based engine for one or two snakes on a shared grid.

    Each call to :meth:`step` applies one tick according to the current
    :class:`TimeCycle` and returns the updated state dictionary. Ticks are
    skipped entirely while the pause toggle count is odd.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        snakes: Sequence[Snake] | None = None,
    ) -> None:
        cfg = config or GameConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.grid = Grid(
            width=cfg.width, height=cfg.height, wall_mode=cfg.wall_mode,
        )

        if snakes is None:
            snakes = self._generate_snakes()
        self.mode = self._build_mode(snakes)

        self.speed = SpeedCurve(cfg.snake_speed, cfg.speed_difficulty)
        self.consumables = ConsumableManager(
            self.grid, rng=self.rng, bad_berries=cfg.bad_berries,
        )
        self.consumables.respawn(self._occupied())

        self.time_cycle = TimeCycle.FORWARD
        self.pause_toggles = 0
        self.tick = 0
        self.finished = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _generate_snakes(self) -> list[Snake]:
        count = 2 if self.config.two_players else 1
        return [
            spawn_layout(self.grid, self.config.snake_size_start, player=i)
            for i in range(count)
        ]

    def _build_mode(self, snakes: Sequence[Snake]) -> GameMode:
        if len(snakes) not in (1, 2):
            raise ValueError(f"Expected 1 or 2 snakes, got {len(snakes)}.")
        if (len(snakes) == 2) != self.config.two_players:
            raise ValueError(
                "two_players must match the number of snakes supplied.",
            )
        for snake in snakes:
            for x, y in snake.body:
                if not self.grid.in_bounds(x, y):
                    raise ValueError(f"Snake cell ({x}, {y}) is off the grid.")

        if len(snakes) == 1:
            return SinglePlayer(PlayerState(0, snakes[0]))
        return TwoPlayer(PlayerState(0, snakes[0]), PlayerState(1, snakes[1]))

    @property
    def players(self) -> tuple[PlayerState, ...]:
        return self.mode.players

    def _occupied(self) -> set[Position]:
        cells: set[Position] = set()
        for player in self.players:
            cells.update(player.snake.body)
        return cells

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def request_direction(self, player_id: int, direction: Direction) -> None:
        """Apply a direction request for one snake, ignoring invalid turns.

        Only the first snake's requests resume forward time. Requests for
        the second snake are ignored in single-player games.
        """
        if player_id not in (0, 1):
            raise ValueError(f"player_id {player_id} out of range [0, 2).")
        if player_id == 0:
            self.time_cycle = TimeCycle.FORWARD
        if player_id >= len(self.players):
            return

        player = self.players[player_id]
        if player.halted:
            return
        player.snake.direction = validate_turn(
            direction, player.turns, player.snake.direction,
        )

    def toggle_pause(self) -> None:
        """Flip the pause toggle; forward and backward ticks stop while odd."""
        self.pause_toggles += 1

    @property
    def paused(self) -> bool:
        return self.pause_toggles % 2 != 0

    def set_time_cycle(self, mode: TimeCycle) -> None:
        self.time_cycle = mode

    def reset(self) -> None:
        """Respawn every snake with fresh histories.

        Scores, speed and consumables carry over.
        """
        for player, snake in zip(
            self.players, self._generate_snakes(), strict=True,
        ):
            player.rebuild(snake)
        self.finished = False
        self.time_cycle = TimeCycle.FORWARD
        logger.info("World reset at tick %d.", self.tick)

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def step(self) -> dict:
        """Advance the game by one tick in the current time cycle.

        Returns the full game state as a serializable dict.
        """
        if self.paused:
            return self.get_state()

        if self.time_cycle == TimeCycle.FORWARD:
            self._forward()
        elif self.time_cycle == TimeCycle.BACKWARD:
            self._backward()
        return self.get_state()

    def step_backward(self) -> dict:
        """Rewind exactly one tick, then freeze in :attr:`TimeCycle.PAUSE`."""
        self._backward()
        self.time_cycle = TimeCycle.PAUSE
        return self.get_state()

    def _forward(self) -> None:
        if self.finished:
            return

        # Both heads are judged against the bodies as they stood before
        # either snake moves this tick.
        crossed = False
        if isinstance(self.mode, TwoPlayer):
            crossed = cross_collision(
                self.mode.first.snake.body, self.mode.second.snake.body,
            )

        for player in self.players:
            self._advance_player(player, blocked=crossed)

        self.tick += 1
        if any(player.halted for player in self.players):
            self._finish()

    def _advance_player(self, player: PlayerState, blocked: bool) -> None:
        snake = player.snake
        on_food = snake.head == self.consumables.food
        on_berry = (
            not on_food
            and self.consumables.bad_berry is not None
            and snake.head == self.consumables.bad_berry
        )

        move = snake.advance(self.grid, grow=on_food, blocked=blocked)
        player.turns.commit(snake.direction)

        # One step per snake per forward tick, blocked ticks included.
        record_tick(
            player.reversal, move.vacated,
            grew=move.outcome is MoveOutcome.GREW,
        )

        if move.outcome is MoveOutcome.GREW:
            player.score += FOOD_SCORE
            self.speed.on_food()
            self.consumables.respawn(self._occupied())
        elif move.outcome is MoveOutcome.MOVED:
            self.speed.on_tick()
            if on_berry:
                player.bad_berries += 1
                self.speed.on_bad_berry(player.bad_berries)
                self.consumables.respawn(self._occupied())

    def _backward(self) -> None:
        for player in self.players:
            rewind(player.snake, player.reversal)

    def _finish(self) -> None:
        self.finished = True
        if isinstance(self.mode, TwoPlayer):
            logger.info(
                "Player 1 score is %d, Player 2 score is %d",
                self.mode.first.score,
                self.mode.second.score,
            )
        else:
            logger.info("Your score is %d", self.mode.first.score)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def paint(self) -> np.ndarray:
        """Repaint the grid array from the current world and return it."""
        self.grid.clear()
        codes = (CellType.SNAKE, CellType.SECOND_SNAKE)
        for player, code in zip(self.players, codes, strict=False):
            for x, y in player.snake.body:
                self.grid.set(x, y, code)
        if self.consumables.bad_berry is not None:
            bx, by = self.consumables.bad_berry
            self.grid.set(bx, by, CellType.BAD_BERRY)
        if self.consumables.food is not None:
            fx, fy = self.consumables.food
            self.grid.set(fx, fy, CellType.FOOD)
        return self.grid.cells

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        self.paint()
        return {
            "tick": self.tick,
            "finished": self.finished,
            "paused": self.paused,
            "time_cycle": self.time_cycle.value,
            "speed": self.speed.to_dict(),
            "grid": self.grid.to_dict(),
            "snakes": [p.to_dict() for p in self.players],
            **self.consumables.to_dict(),
        }
