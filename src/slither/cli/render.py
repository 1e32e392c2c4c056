"""Text rendering of levels for the terminal.

Rows are printed top to bottom with y decreasing, so the picture matches
the editor's view where (0, 0) is the bottom-left cell.
"""

from __future__ import annotations

from slither.geometry.primitives import Cell
from slither.level.models import ChainInteractor, LevelData

HEAD = "◉"
TAIL = "◎"
BODY = "○"
HOLE = "●"
EMPTY = "."


def cell_symbol(level: LevelData, cell: Cell) -> str:
    """Return the glyph for one cell."""
    for slither in level.slithers:
        if cell in slither.body_positions:
            index = slither.body_positions.index(cell)
            if index == 0:
                return HEAD
            if index == slither.length - 1:
                return TAIL
            return BODY
    if any(hole.position == cell for hole in level.holes):
        return HOLE
    return EMPTY


def render_grid(level: LevelData) -> str:
    """Render the grid with row labels on the left and column labels below."""
    label_width = len(str(level.height - 1))
    lines = []
    for y in reversed(range(level.height)):
        row = " ".join(cell_symbol(level, Cell(x=x, y=y)) for x in range(level.width))
        lines.append(f"{y:>{label_width}} {row}")
    columns = " ".join(str(x % 10) for x in range(level.width))
    lines.append(f"{'':>{label_width}} {columns}")
    return "\n".join(lines)


def render_legend(level: LevelData) -> str:
    """List slithers and holes with their colours and positions."""
    lines = []
    for number, slither in enumerate(level.slithers, start=1):
        extras = ", ".join(
            f"{'Chain' if isinstance(i, ChainInteractor) else 'Cocoon'} x{i.hit_count}"
            for i in slither.interactors
        )
        line = (
            f"Slither #{number} ({slither.color.value}) "
            f"head {slither.head if slither.body_positions else '-'}, "
            f"{slither.length} segments"
        )
        if extras:
            line = f"{line} [{extras}]"
        lines.append(line)
    for hole in level.holes:
        lines.append(f"Hole at {hole.position} ({hole.color.value})")
    return "\n".join(lines)
