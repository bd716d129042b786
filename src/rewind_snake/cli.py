"""Headless command line front end for Rewind Snake."""

from __future__ import annotations

import argparse
import logging
import sys

from rewind_snake.config import GameConfig
from rewind_snake.engine import GameEngine, TimeCycle, TwoPlayer
from rewind_snake.persistence import (
    SaveFileError,
    SaveFileMismatchError,
    load_game,
    read_save,
    save_game,
)
from rewind_snake.render import render_ascii
from rewind_snake.snake import Direction
from rewind_snake.speed import Difficulty

logger = logging.getLogger(__name__)

# Command word -> (player index, direction).
_DIRECTION_KEYS: dict[str, tuple[int, Direction]] = {
    "n": (0, Direction.NORTH),
    "e": (0, Direction.EAST),
    "s": (0, Direction.SOUTH),
    "w": (0, Direction.WEST),
    "i": (1, Direction.NORTH),
    "l": (1, Direction.EAST),
    "k": (1, Direction.SOUTH),
    "j": (1, Direction.WEST),
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rewind-snake",
        description="Rewind Snake grid simulation.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- play ---
    play_p = sub.add_parser(
        "play", help="Run a session driven by commands on stdin.",
    )
    play_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override it).",
    )
    play_p.add_argument("--width", type=int, default=None)
    play_p.add_argument("--height", type=int, default=None)
    play_p.add_argument("--snake-size-start", type=int, default=None)
    play_p.add_argument("--file-path", type=str, default=None)
    play_p.add_argument(
        "--snake-speed", type=int, default=None,
        help="Starting tick interval in milliseconds.",
    )
    play_p.add_argument(
        "--speed-increase", type=str, default=None,
        choices=[d.value for d in Difficulty],
    )
    play_p.add_argument(
        "--bad-berries", action="store_true", default=None,
    )
    play_p.add_argument(
        "--ghost-mode", action="store_true", default=None,
    )
    play_p.add_argument(
        "--two-players-mode", action="store_true", default=None,
    )
    play_p.add_argument("--seed", type=int, default=None)
    play_p.add_argument(
        "--load", type=str, default=None,
        help="Save file to restore before the first tick.",
    )

    # --- inspect ---
    inspect_p = sub.add_parser("inspect", help="Print a save file's fields.")
    inspect_p.add_argument("path", help="Path to the save file.")

    return parser


def _config_from_args(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    overrides: dict = {}
    flag_map = {
        "width": "width",
        "height": "height",
        "snake_size_start": "snake_size_start",
        "file_path": "file_path",
        "snake_speed": "snake_speed",
        "speed_increase": "difficulty",
        "bad_berries": "bad_berries",
        "ghost_mode": "ghost_mode",
        "two_players_mode": "two_players",
        "seed": "seed",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = GameConfig(**d)
    return config


def _apply_command(engine: GameEngine, command: str) -> None:
    """Translate one input line into engine events."""
    if command in _DIRECTION_KEYS:
        player_id, direction = _DIRECTION_KEYS[command]
        engine.request_direction(player_id, direction)
    elif command == "b":
        engine.set_time_cycle(TimeCycle.BACKWARD)
    elif command == "f":
        engine.set_time_cycle(TimeCycle.FORWARD)
    elif command == "p":
        engine.toggle_pause()
    elif command == "q":
        engine.reset()
    elif command == "save":
        try:
            save_game(engine)
        except (OSError, SaveFileError) as exc:
            logger.error("Cannot write save file: %s", exc)
    elif command:
        logger.warning("Ignoring unknown command %r.", command)


def _score_line(engine: GameEngine) -> str:
    if isinstance(engine.mode, TwoPlayer):
        return (
            f"Player 1 score is {engine.mode.first.score}, "
            f"Player 2 score is {engine.mode.second.score}"
        )
    return f"Your score is {engine.mode.first.score}"


def _run_play(args: argparse.Namespace) -> int:
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    engine = GameEngine(config)
    if args.load:
        try:
            load_game(engine, args.load)
        except SaveFileMismatchError as exc:
            logger.error("Save file does not match this grid: %s", exc)
            return 2
        except (OSError, SaveFileError) as exc:
            logger.error("Cannot load save file %s: %s", args.load, exc)
            return 1

    for line in sys.stdin:
        _apply_command(engine, line.strip().lower())
        engine.step()
        print(render_ascii(engine))  # noqa: T201
        print()  # noqa: T201

    print(_score_line(engine))  # noqa: T201
    return 0


def _run_inspect(args: argparse.Namespace) -> int:
    try:
        data = read_save(args.path)
    except (OSError, SaveFileError) as exc:
        logger.error("Cannot read save file %s: %s", args.path, exc)
        return 1
    print(f"width={data.width} height={data.height} "  # noqa: T201
          f"food=({data.food.x}, {data.food.y})")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``rewind-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "play": _run_play,
        "inspect": _run_inspect,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
