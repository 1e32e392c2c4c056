"""Grid adjacency and bounds helpers.

Pure functions over cells. Nothing here knows about slithers or holes;
the level layer builds its occupancy rules on top of these.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from slither.geometry.primitives import Cell, Direction, GridSize


def is_within_bounds(cell: Cell, width: int, height: int) -> bool:
    """Check that a cell lies inside [0, width) x [0, height)."""
    return 0 <= cell.x < width and 0 <= cell.y < height


def manhattan_distance(a: Cell, b: Cell) -> int:
    """Return |dx| + |dy| between two cells."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def is_adjacent(a: Cell, b: Cell) -> bool:
    """Check orthogonal adjacency (Manhattan distance exactly 1)."""
    return manhattan_distance(a, b) == 1


def cells_equal(a: Cell, b: Cell) -> bool:
    """Compare two cells by coordinates."""
    return a.x == b.x and a.y == b.y


def direction_between(origin: Cell, target: Cell) -> Direction | None:
    """Return the unit direction from origin to target, if they are adjacent."""
    return Direction.from_delta(target.x - origin.x, target.y - origin.y)


def iter_column_major(size: GridSize) -> Iterator[Cell]:
    """Yield every cell scanning x from 0 to width-1, and y within each x."""
    for x in range(size.width):
        for y in range(size.height):
            yield Cell(x=x, y=y)


def first_gap(cells: Sequence[Cell]) -> int | None:
    """Return the index of the first cell not adjacent to its predecessor.

    Returns:
        Index i (>= 1) such that cells[i-1] and cells[i] are not adjacent,
        or None if the sequence is orthogonally connected.
    """
    for index in range(1, len(cells)):
        if not is_adjacent(cells[index - 1], cells[index]):
            return index
    return None


def first_repeat(cells: Iterable[Cell]) -> Cell | None:
    """Return the first cell that appears a second time, or None."""
    seen: set[Cell] = set()
    for cell in cells:
        if cell in seen:
            return cell
        seen.add(cell)
    return None


def format_cells(cells: Iterable[Cell]) -> str:
    """Format cells as "(x,y), (x,y)" for messages."""
    return ", ".join(f"({c.x},{c.y})" for c in cells)
