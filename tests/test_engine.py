"""Tests for the GameEngine tick driver."""

import json
import logging

import pytest

from rewind_snake.config import GameConfig
from rewind_snake.engine import GameEngine, SinglePlayer, TimeCycle
from rewind_snake.grid import Position
from rewind_snake.history import StepKind
from rewind_snake.snake import Direction, Snake


def _engine(width=8, height=6, food=(0, 0), **kwargs) -> GameEngine:
    """Build a seeded engine with the food parked away from the snake."""
    engine = GameEngine(GameConfig(width=width, height=height, seed=0, **kwargs))
    engine.consumables.food = Position(*food)
    return engine


def _body(engine: GameEngine, player: int = 0) -> list:
    return list(engine.players[player].snake.body)


class TestEngineInit:
    def test_default_init(self):
        engine = GameEngine(GameConfig(seed=0))
        assert engine.tick == 0
        assert not engine.finished
        assert engine.time_cycle == TimeCycle.FORWARD
        assert isinstance(engine.mode, SinglePlayer)
        assert engine.speed.interval == 120

    def test_snake_starts_center(self):
        engine = GameEngine(GameConfig(seed=0))
        assert _body(engine) == [(38, 25), (39, 25), (40, 25)]

    def test_food_spawned_off_snake(self):
        engine = GameEngine(GameConfig(width=8, height=6, seed=3))
        assert engine.consumables.food is not None
        assert engine.consumables.food not in _body(engine)

    def test_custom_snakes(self):
        snake = Snake([(6, 1), (7, 1), (8, 1)], Direction.EAST)
        engine = GameEngine(GameConfig(width=13, height=3, seed=0), [snake])
        assert engine.players[0].snake is snake

    def test_snake_off_grid_rejected(self):
        snake = Snake([(6, 1), (7, 1), (8, 1)], Direction.EAST)
        with pytest.raises(ValueError, match="off the grid"):
            GameEngine(GameConfig(width=8, height=6), [snake])

    def test_too_many_snakes_rejected(self):
        snakes = [
            Snake([(0, y), (1, y), (2, y)]) for y in range(3)
        ]
        with pytest.raises(ValueError, match="1 or 2"):
            GameEngine(GameConfig(width=8, height=6), snakes)

    def test_snake_count_must_match_mode(self):
        snakes = [
            Snake([(0, 0), (1, 0), (2, 0)]),
            Snake([(0, 4), (1, 4), (2, 4)]),
        ]
        with pytest.raises(ValueError, match="two_players"):
            GameEngine(GameConfig(width=8, height=6), snakes)


class TestEngineMovement:
    def test_scenario_two_ticks_east(self):
        engine = _engine()
        assert _body(engine) == [(2, 3), (3, 3), (4, 3)]
        state = engine.step()
        assert _body(engine) == [(3, 3), (4, 3), (5, 3)]
        assert state["tick"] == 1
        engine.step()
        assert _body(engine) == [(4, 3), (5, 3), (6, 3)]

    def test_direction_change(self):
        engine = _engine(width=20, height=20)
        engine.request_direction(0, Direction.NORTH)
        engine.step()
        assert engine.players[0].snake.head == (10, 9)

    def test_rejected_reversal_keeps_direction(self):
        engine = _engine(width=20, height=20)
        engine.request_direction(0, Direction.NORTH)
        engine.step()
        engine.request_direction(0, Direction.SOUTH)
        assert engine.players[0].snake.direction == Direction.NORTH
        engine.step()
        assert engine.players[0].snake.head == (10, 8)

    def test_direction_committed_every_tick(self):
        engine = _engine(width=20, height=20)
        engine.step()
        engine.request_direction(0, Direction.SOUTH)
        engine.step()
        turns = engine.players[0].turns
        assert list(turns.window) == [Direction.EAST, Direction.SOUTH]
        assert turns.varied

    def test_still_snake_logs_still(self):
        snake = Snake([(2, 3), (3, 3), (4, 3)], Direction.STILL)
        engine = GameEngine(GameConfig(width=8, height=6, seed=0), [snake])
        engine.consumables.food = Position(0, 0)
        engine.step()
        player = engine.players[0]
        assert _body(engine) == [(2, 3), (3, 3), (4, 3)]
        assert player.turns.last == Direction.STILL
        assert player.reversal.pop().kind is StepKind.HOLD


class TestEngineBoundary:
    def test_wall_halts_and_finishes(self):
        engine = _engine()
        for _ in range(4):
            engine.step()
        player = engine.players[0]
        assert engine.finished
        assert player.halted
        assert player.snake.direction == Direction.STILL
        assert _body(engine) == [(5, 3), (6, 3), (7, 3)]
        assert player.turns.last == Direction.STILL

    def test_finished_game_stops_ticking(self):
        engine = _engine()
        for _ in range(4):
            engine.step()
        tick = engine.tick
        engine.step()
        assert engine.tick == tick
        assert _body(engine) == [(5, 3), (6, 3), (7, 3)]

    def test_score_reported_on_halt(self, caplog):
        engine = _engine()
        with caplog.at_level(logging.INFO, logger="rewind_snake.engine"):
            for _ in range(4):
                engine.step()
        assert "Your score is 0" in caplog.text

    def test_ghost_mode_wraps(self):
        engine = _engine(ghost_mode=True)
        for _ in range(4):
            engine.step()
        assert not engine.finished
        assert _body(engine) == [(6, 3), (7, 3), (0, 3)]

    def test_halted_snake_ignores_requests(self):
        engine = _engine()
        for _ in range(4):
            engine.step()
        engine.request_direction(0, Direction.NORTH)
        assert engine.players[0].snake.direction == Direction.STILL


class TestEngineFood:
    def test_scenario_growth_under_head(self):
        snake = Snake([(6, 1), (7, 1), (8, 1)], Direction.EAST)
        engine = GameEngine(GameConfig(width=13, height=3, seed=0), [snake])
        engine.consumables.food = Position(8, 1)
        engine.step()
        body = _body(engine)
        assert body == [(6, 1), (7, 1), (8, 1), (9, 1)]
        assert engine.consumables.food not in body

    def test_score_increases_by_ten(self):
        engine = _engine(width=20, height=20)
        engine.consumables.food = engine.players[0].snake.head
        engine.step()
        assert engine.players[0].score == 10
        assert len(_body(engine)) == 4

    def test_hard_speed_sawtooth(self):
        engine = _engine(width=20, height=20, difficulty="hard", snake_speed=50)
        engine.step()
        engine.step()
        assert engine.speed.interval == 48
        engine.consumables.food = engine.players[0].snake.head
        engine.step()
        assert engine.speed.interval == 120
        engine.consumables.food = Position(0, 0)
        engine.step()
        assert engine.speed.interval == 119

    def test_medium_speed_constant(self):
        engine = _engine(width=20, height=20, snake_speed=80)
        for _ in range(3):
            engine.step()
        assert engine.speed.interval == 80


class TestEngineBadBerries:
    def test_bad_berry_spawned_when_enabled(self):
        engine = GameEngine(
            GameConfig(width=20, height=20, seed=1, bad_berries=True),
        )
        consumables = engine.consumables
        assert consumables.bad_berry is not None
        assert consumables.bad_berry != consumables.food
        assert consumables.bad_berry not in _body(engine)

    def test_no_bad_berry_by_default(self):
        engine = GameEngine(GameConfig(width=20, height=20, seed=1))
        assert engine.consumables.bad_berry is None

    def test_toggles_speed(self):
        engine = _engine(width=20, height=20, bad_berries=True)
        player = engine.players[0]

        engine.consumables.bad_berry = player.snake.head
        engine.step()
        assert player.bad_berries == 1
        assert engine.speed.interval == 40
        assert len(player.snake.body) == 3
        assert engine.consumables.bad_berry not in player.snake.body

        engine.consumables.bad_berry = player.snake.head
        engine.step()
        assert player.bad_berries == 2
        assert engine.speed.interval == 120


class TestEngineTimeCycle:
    def test_pause_toggle_gates_ticks(self):
        engine = _engine()
        engine.toggle_pause()
        assert engine.paused
        engine.step()
        assert engine.tick == 0
        assert _body(engine) == [(2, 3), (3, 3), (4, 3)]
        engine.toggle_pause()
        engine.step()
        assert engine.tick == 1

    def test_pause_cycle_freezes(self):
        engine = _engine()
        engine.set_time_cycle(TimeCycle.PAUSE)
        engine.step()
        assert engine.tick == 0
        assert _body(engine) == [(2, 3), (3, 3), (4, 3)]

    def test_backward_rewinds_forward_ticks(self):
        engine = _engine(width=20, height=20)
        start = _body(engine)
        engine.step()
        engine.request_direction(0, Direction.NORTH)
        engine.step()
        engine.step()

        engine.set_time_cycle(TimeCycle.BACKWARD)
        for _ in range(3):
            engine.step()
        assert _body(engine) == start
        engine.step()
        assert _body(engine) == start

    def test_rewind_through_growth(self):
        engine = _engine(width=20, height=20)
        start = _body(engine)
        engine.consumables.food = engine.players[0].snake.head
        engine.step()
        engine.consumables.food = Position(0, 0)
        engine.step()
        assert len(_body(engine)) == 4

        engine.set_time_cycle(TimeCycle.BACKWARD)
        engine.step()
        engine.step()
        assert _body(engine) == start

    def test_step_backward_then_pause(self):
        engine = _engine(width=20, height=20)
        engine.step()
        engine.step()
        engine.step_backward()
        after_one = _body(engine)
        assert engine.time_cycle == TimeCycle.PAUSE
        engine.step()
        assert _body(engine) == after_one

    def test_direction_request_resumes_forward(self):
        engine = _engine(width=20, height=20)
        engine.set_time_cycle(TimeCycle.BACKWARD)
        engine.request_direction(0, Direction.NORTH)
        assert engine.time_cycle == TimeCycle.FORWARD

    def test_rewind_does_not_revive(self):
        engine = _engine()
        for _ in range(4):
            engine.step()
        engine.set_time_cycle(TimeCycle.BACKWARD)
        # The blocked fourth tick recorded a hold; undoing it keeps the body.
        engine.step()
        assert _body(engine) == [(5, 3), (6, 3), (7, 3)]
        engine.step()
        assert _body(engine) == [(4, 3), (5, 3), (6, 3)]
        assert engine.finished
        assert engine.players[0].halted

    def test_blocked_tick_is_recorded(self):
        engine = _engine()
        for _ in range(4):
            engine.step()
        reversal = engine.players[0].reversal
        assert len(reversal) == engine.tick == 4
        assert reversal.pop().kind is StepKind.HOLD


class TestEngineInput:
    def test_second_player_ignored_in_single_mode(self):
        engine = _engine()
        engine.request_direction(1, Direction.NORTH)
        assert engine.players[0].snake.direction == Direction.EAST

    def test_second_player_request_keeps_time_cycle(self):
        engine = _engine()
        engine.set_time_cycle(TimeCycle.BACKWARD)
        engine.request_direction(1, Direction.NORTH)
        assert engine.time_cycle == TimeCycle.BACKWARD

    def test_unknown_player_rejected(self):
        engine = _engine()
        with pytest.raises(ValueError, match="out of range"):
            engine.request_direction(2, Direction.NORTH)


class TestEngineReset:
    def test_reset_rebuilds_snake_bundle(self):
        engine = _engine(width=20, height=20)
        engine.consumables.food = engine.players[0].snake.head
        engine.step()
        engine.consumables.food = Position(0, 0)
        engine.request_direction(0, Direction.NORTH)
        for _ in range(15):
            engine.step()
        assert engine.finished

        engine.reset()
        player = engine.players[0]
        assert not engine.finished
        assert not player.halted
        assert _body(engine) == [(8, 10), (9, 10), (10, 10)]
        assert player.snake.direction == Direction.EAST
        assert len(player.reversal) == 0
        assert len(player.turns) == 0
        assert player.score == 10

    def test_reset_allows_play_again(self):
        engine = _engine()
        for _ in range(4):
            engine.step()
        engine.reset()
        engine.step()
        assert _body(engine) == [(3, 3), (4, 3), (5, 3)]


class TestEngineSerialization:
    def test_state_is_json_serializable(self):
        engine = GameEngine(GameConfig(width=10, height=10, seed=42))
        engine.step()
        serialized = json.dumps(engine.get_state())
        assert isinstance(serialized, str)

    def test_state_structure(self):
        state = _engine().get_state()
        for key in (
            "tick", "finished", "paused", "time_cycle", "speed",
            "grid", "snakes", "food", "bad_berry",
        ):
            assert key in state
        assert state["snakes"][0]["body"][-1] == [4, 3]
        assert state["food"] == [0, 0]


class TestEngineDeterminism:
    def test_same_seed_same_outcome(self):
        actions = [
            Direction.EAST, Direction.NORTH, Direction.NORTH,
            Direction.WEST, Direction.SOUTH,
        ]
        assert self._run_game(123, actions) == self._run_game(123, actions)

    @staticmethod
    def _run_game(seed: int, actions: list[Direction]) -> dict:
        engine = GameEngine(
            GameConfig(width=20, height=20, seed=seed, bad_berries=True),
        )
        for action in actions:
            engine.request_direction(0, action)
            engine.step()
        return engine.get_state()
