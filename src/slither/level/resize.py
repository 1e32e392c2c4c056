"""Grid resizing with conflict resolution.

Shrinking the grid drops everything that falls outside the new bounds.
Slithers lose their out-of-range cells (remaining cells keep their order);
a slither left with fewer than 2 cells is deleted together with its hole.
Growing the grid never removes anything.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from slither.geometry.grid import format_cells
from slither.geometry.primitives import Cell
from slither.level.models import MIN_SLITHER_LENGTH, LevelData, SlitherColor
from slither.level.pairing import PairingValidator, Violation
from slither.utils.logging import get_logger

logger = get_logger(__name__)


class AffectedHole(BaseModel, frozen=True):
    """A hole that would fall outside the resized grid."""

    kind: Literal["hole"] = "hole"
    position: Cell
    color: SlitherColor
    slither_id: str | None = None

    def describe(self) -> str:
        return f"Hole at {self.position} - Color: {self.color.value}"


class AffectedSlither(BaseModel, frozen=True):
    """A slither with at least one cell outside the resized grid.

    Attributes:
        slither_id: Id of the slither.
        number: 1-based slither number, as shown to users.
        color: Slither colour.
        entirely: True if every cell of the slither is out of range.
        cells: The out-of-range cells, in body order.
    """

    kind: Literal["slither"] = "slither"
    slither_id: str | None
    number: int = Field(..., ge=1)
    color: SlitherColor
    entirely: bool
    cells: tuple[Cell, ...]

    def describe(self) -> str:
        prefix = f"Slither #{self.number} (Color: {self.color.value})"
        if self.entirely:
            return f"{prefix} - Entire slither"
        return f"{prefix} - Segments at: {format_cells(self.cells)}"


AffectedEntity = Annotated[
    AffectedHole | AffectedSlither,
    Field(discriminator="kind"),
]


class ResizeResult(BaseModel):
    """What a resize changed.

    Attributes:
        old_size: (width, height) before the resize.
        new_size: (width, height) after the resize.
        removed_holes: Positions of holes that were out of bounds.
        trimmed_slither_ids: Slithers that lost cells but survived.
        removed_slither_ids: Slithers deleted for dropping below 2 cells.
        repaired: Pairing violations fixed by the final repair pass.
    """

    old_size: tuple[int, int]
    new_size: tuple[int, int]
    removed_holes: list[Cell] = Field(default_factory=list)
    trimmed_slither_ids: list[str | None] = Field(default_factory=list)
    removed_slither_ids: list[str | None] = Field(default_factory=list)
    repaired: list[Violation] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.old_size != self.new_size


class ResizeManager:
    """Previews and applies grid dimension changes.

    Example:
        >>> manager = ResizeManager()
        >>> impact = manager.preview_impact(level, 4, 8)
        >>> if not impact or confirm(impact):
        ...     manager.apply(level, 4, 8)
    """

    def __init__(self, validator: PairingValidator | None = None) -> None:
        self.validator = validator or PairingValidator()

    def preview_impact(
        self, level: LevelData, new_width: int, new_height: int
    ) -> list[AffectedEntity]:
        """List the holes and slither cells a resize would drop.

        Pure: the level is not modified.

        Args:
            level: Level to inspect.
            new_width: Proposed grid width.
            new_height: Proposed grid height.

        Returns:
            Affected holes (in hole order) followed by affected slithers
            (in slither order). Empty if nothing falls outside.

        Raises:
            ValueError: If a dimension is not positive.
        """
        self._validate_parameters(new_width, new_height)

        affected: list[AffectedEntity] = []
        for hole in level.holes:
            if _outside(hole.position, new_width, new_height):
                affected.append(
                    AffectedHole(
                        position=hole.position,
                        color=hole.color,
                        slither_id=hole.slither_id,
                    )
                )

        for number, slither in enumerate(level.slithers, start=1):
            outside = tuple(
                cell
                for cell in slither.body_positions
                if _outside(cell, new_width, new_height)
            )
            if outside:
                affected.append(
                    AffectedSlither(
                        slither_id=slither.id,
                        number=number,
                        color=slither.color,
                        entirely=len(outside) == len(slither.body_positions),
                        cells=outside,
                    )
                )
        return affected

    def apply(self, level: LevelData, new_width: int, new_height: int) -> ResizeResult:
        """Resize the grid in place, dropping content outside the new bounds.

        Steps:
        1. Set the new width and height (no-op if unchanged).
        2. Remove holes now out of bounds.
        3. Remove out-of-bounds cells from every slither, keeping order.
        4. Delete slithers left with 0 or 1 cells, along with their holes.
        5. Repair the pairing in case any hole was orphaned.

        Args:
            level: Level to resize. Modified in place.
            new_width: New grid width.
            new_height: New grid height.

        Returns:
            ResizeResult describing the removals.

        Raises:
            ValueError: If a dimension is not positive.
        """
        self._validate_parameters(new_width, new_height)

        old_size = (level.width, level.height)
        result = ResizeResult(old_size=old_size, new_size=(new_width, new_height))
        if old_size == (new_width, new_height):
            logger.debug("Grid size unchanged", size=old_size)
            return result

        level.width = new_width
        level.height = new_height

        kept_holes = []
        for hole in level.holes:
            if level.contains(hole.position):
                kept_holes.append(hole)
            else:
                result.removed_holes.append(hole.position)
        level.holes[:] = kept_holes

        kept_slithers = []
        for slither in level.slithers:
            remaining = [c for c in slither.body_positions if level.contains(c)]
            if len(remaining) == len(slither.body_positions):
                kept_slithers.append(slither)
                continue
            if len(remaining) < MIN_SLITHER_LENGTH:
                level.holes[:] = [h for h in level.holes if h.slither_id != slither.id]
                result.removed_slither_ids.append(slither.id)
                continue
            slither.body_positions = remaining
            result.trimmed_slither_ids.append(slither.id)
            kept_slithers.append(slither)
        level.slithers[:] = kept_slithers

        result.repaired = self.validator.repair(level)

        logger.info(
            "Grid resized",
            old=old_size,
            new=(new_width, new_height),
            removed_holes=len(result.removed_holes),
            removed_slithers=len(result.removed_slither_ids),
            trimmed_slithers=len(result.trimmed_slither_ids),
        )
        return result

    @staticmethod
    def _validate_parameters(new_width: int, new_height: int) -> None:
        if new_width <= 0:
            raise ValueError(f"width must be positive, got {new_width}")
        if new_height <= 0:
            raise ValueError(f"height must be positive, got {new_height}")


def _outside(cell: Cell, width: int, height: int) -> bool:
    return cell.x >= width or cell.y >= height
