"""Plain-text frames of the grid."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rewind_snake.grid import CellType

if TYPE_CHECKING:
    from rewind_snake.engine import GameEngine

GLYPHS: dict[CellType, str] = {
    CellType.EMPTY: ".",
    CellType.SNAKE: "#",
    CellType.SECOND_SNAKE: "@",
    CellType.FOOD: "*",
    CellType.BAD_BERRY: "!",
}


def render_ascii(engine: GameEngine) -> str:
    """Return one line per grid row, top row first."""
    cells = engine.paint()
    return "\n".join(
        "".join(GLYPHS[CellType(code)] for code in row)
        for row in cells.tolist()
    )
