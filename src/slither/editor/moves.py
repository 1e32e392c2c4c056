"""Endpoint extension rules shared by previews and commits.

Two rules exist for moving a slither by one of its ends:

- Dragging a handle inserts the new cell and trims the opposite end only
  when the result is longer than 3, so a 2-segment slither grows to 3 and
  anything longer slides.
- Nudging an end in a direction always trims once the result is longer
  than 2, keeping the length constant.

``plan_extension`` validates a candidate cell and returns the resulting
body without touching the level. The editor uses the same call to build
drag previews and to commit them.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from slither.geometry.grid import is_adjacent
from slither.geometry.primitives import Cell, Direction
from slither.level.exceptions import (
    InvalidPositionError,
    MinLengthError,
    NonAdjacentStepError,
    OccupiedCellError,
    SelfOverlapError,
)
from slither.level.models import MIN_SLITHER_LENGTH, Slither
from slither.level.store import LevelStore


class HandleEnd(str, Enum):
    """Which end of a slither an operation targets."""

    HEAD = "head"
    TAIL = "tail"

    @property
    def opposite(self) -> HandleEnd:
        return HandleEnd.TAIL if self is HandleEnd.HEAD else HandleEnd.HEAD


class ExtensionRule(Enum):
    """How many segments a body may reach before the opposite end is trimmed."""

    DRAG = "drag"
    NUDGE = "nudge"
    GROW = "grow"

    @property
    def trim_above(self) -> int | None:
        return _TRIM_ABOVE[self]


_TRIM_ABOVE: dict[ExtensionRule, int | None] = {
    ExtensionRule.DRAG: 3,
    ExtensionRule.NUDGE: 2,
    ExtensionRule.GROW: None,
}

# Fallback directions when a body has no second cell to extrapolate from
_DEFAULT_EXTRAPOLATION = {
    HandleEnd.HEAD: Direction.UP,
    HandleEnd.TAIL: Direction.DOWN,
}


def end_cell(body: Sequence[Cell], end: HandleEnd) -> Cell:
    """Return the head or tail cell of a body.

    Raises:
        MinLengthError: If the body has no cells.
    """
    if not body:
        raise MinLengthError("Slither has no segments")
    return body[0] if end is HandleEnd.HEAD else body[-1]


def extend(
    body: Sequence[Cell], cell: Cell, end: HandleEnd, rule: ExtensionRule
) -> list[Cell]:
    """Insert a cell at one end and trim the other end if the rule says so.

    Pure: returns a new list and does not check the cell.
    """
    result = list(body)
    if end is HandleEnd.HEAD:
        result.insert(0, cell)
    else:
        result.append(cell)

    limit = rule.trim_above
    if limit is not None and len(result) > limit:
        if end is HandleEnd.HEAD:
            result.pop()
        else:
            result.pop(0)
    return result


def extrapolate_segment(body: Sequence[Cell], end: HandleEnd) -> Cell:
    """Compute the cell that continues a body past one end.

    The step repeats the direction from the neighbouring cell to the end
    cell. A body with a single cell extends up at the head and down at the
    tail.
    """
    tip = end_cell(body, end)
    if len(body) > 1:
        neighbour = body[1] if end is HandleEnd.HEAD else body[-2]
        return tip.shifted(tip.x - neighbour.x, tip.y - neighbour.y)
    return tip.step(_DEFAULT_EXTRAPOLATION[end])


def plan_extension(
    store: LevelStore,
    slither: Slither,
    cell: Cell,
    end: HandleEnd,
    rule: ExtensionRule,
) -> list[Cell]:
    """Validate moving one end of a slither onto a cell and return the new body.

    Checks, in order: the cell is inside the grid; no other slither or hole
    holds it; it is adjacent to the chosen end; it does not land on a cell
    the slither keeps after trimming.

    Args:
        store: Store owning the slither.
        slither: Slither to extend.
        cell: Candidate cell for the new end.
        end: End to extend.
        rule: Trimming rule to apply.

    Returns:
        The body the slither would have. The level is not modified.

    Raises:
        InvalidPositionError: Cell outside the grid.
        OccupiedCellError: Cell held by another slither or any hole.
        NonAdjacentStepError: Cell not orthogonally adjacent to the end.
        SelfOverlapError: Cell collides with the slither's remaining body.
        MinLengthError: The slither is shorter than the minimum length.
    """
    if slither.length < MIN_SLITHER_LENGTH:
        raise MinLengthError(
            f"Slither has {slither.length} segment(s); at least "
            f"{MIN_SLITHER_LENGTH} are needed to move an end"
        )
    if not store.is_within_bounds(cell):
        raise InvalidPositionError(
            f"Cell is outside the {store.width}x{store.height} grid", cell=cell
        )
    if store.is_occupied_by_other(cell, slither_id=slither.id):
        raise OccupiedCellError("Cell is already occupied", cell=cell)
    tip = end_cell(slither.body_positions, end)
    if not is_adjacent(cell, tip):
        raise NonAdjacentStepError(
            f"New {end.value} must be adjacent to the current {end.value} {tip}",
            cell=cell,
        )
    body = extend(slither.body_positions, cell, end, rule)
    if body.count(cell) > 1:
        raise SelfOverlapError(
            f"New {end.value} would overlap the slither's own body", cell=cell
        )
    return body


def plan_removal(slither: Slither, end: HandleEnd) -> list[Cell]:
    """Return the body without its head or tail.

    Raises:
        MinLengthError: If the slither already has the minimum length.
    """
    if slither.length <= MIN_SLITHER_LENGTH:
        raise MinLengthError(
            f"Slither is already at the minimum length ({MIN_SLITHER_LENGTH})"
        )
    body = list(slither.body_positions)
    if end is HandleEnd.HEAD:
        body.pop(0)
    else:
        body.pop()
    return body
