"""Geometry module for slither levels.

This package provides grid coordinate primitives and the pure adjacency
and bounds helpers the level model is built on.

Key Components:
    - Primitives: Cell, Direction and GridSize models
    - Grid helpers: bounds check, orthogonal adjacency, column-major scan

Example:
    from slither.geometry import Cell, Direction, is_adjacent

    head = Cell(x=0, y=0)
    is_adjacent(head, head.step(Direction.UP))  # True
"""

from slither.geometry.grid import (
    cells_equal,
    direction_between,
    first_gap,
    first_repeat,
    format_cells,
    is_adjacent,
    is_within_bounds,
    iter_column_major,
    manhattan_distance,
)
from slither.geometry.primitives import Cell, Direction, GridSize

__all__ = [
    "Cell",
    "Direction",
    "GridSize",
    "cells_equal",
    "direction_between",
    "first_gap",
    "first_repeat",
    "format_cells",
    "is_adjacent",
    "is_within_bounds",
    "iter_column_major",
    "manhattan_distance",
]
