"""Geometry primitives for slither levels.

This module provides immutable Pydantic models for grid cells, grid sizes
and unit directions. The origin (0, 0) is the bottom-left cell; x grows
rightward and y grows upward.
"""

from __future__ import annotations

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field


class Cell(BaseModel, frozen=True):
    """A grid cell coordinate.

    Cells are plain coordinates: negative or out-of-range values are
    representable so that candidate moves can be built before they are
    checked against a level's bounds.

    Attributes:
        x: Column index (0 is the leftmost column).
        y: Row index (0 is the bottom row).
    """

    x: int = Field(..., description="Column index")
    y: int = Field(..., description="Row index")

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[int, int]) -> Self:
        """Create Cell from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])

    def shifted(self, dx: int, dy: int) -> Cell:
        """Return the cell offset by (dx, dy)."""
        return Cell(x=self.x + dx, y=self.y + dy)

    def step(self, direction: Direction) -> Cell:
        """Return the neighbouring cell in the given direction."""
        dx, dy = direction.delta
        return self.shifted(dx, dy)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Direction(Enum):
    """Unit orthogonal steps on the grid."""

    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        """Return the (dx, dy) offset of this direction."""
        return self.value

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Direction | None:
        """Look up the direction for a unit offset, or None if not orthogonal."""
        for direction in cls:
            if direction.value == (dx, dy):
                return direction
        return None

    @classmethod
    def parse(cls, name: str) -> Direction:
        """Parse a direction name case-insensitively (e.g. "up")."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(d.name.lower() for d in cls)
            raise ValueError(
                f"Unknown direction {name!r} (expected one of {valid})"
            ) from None


class GridSize(BaseModel, frozen=True):
    """Grid dimensions in cells.

    Both dimensions must be strictly positive (> 0).

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    width: int = Field(..., gt=0, description="Number of columns")
    height: int = Field(..., gt=0, description="Number of rows")

    @property
    def area(self) -> int:
        """Number of cells in the grid."""
        return self.width * self.height

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    def contains(self, cell: Cell) -> bool:
        """Check whether a cell lies inside [0, width) x [0, height)."""
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"
