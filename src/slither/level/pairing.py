"""Pairing validation and repair.

Every slither must own exactly one hole of its colour, and every hole must
belong to an existing slither. This module is the single place where that
rule is checked and restored: slither creation, colour changes, load-time
repair and the resize cascade all route through ``PairingValidator``.

Repair is deterministic and idempotent:

1. Give a fresh id to any slither without one, or whose id an earlier
   slither already uses.
2. Create a hole for every slither without one, at the first empty cell in
   column-major order (x outer, y inner), or at (0, 0) if the grid is full.
3. Remove holes whose ``slither_id`` matches no slither.
4. Keep only the first hole (in list order) of any slither with several.
5. Recolour paired holes to their slither's colour.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from slither.geometry.grid import format_cells, iter_column_major
from slither.geometry.primitives import Cell
from slither.level.models import Hole, LevelData, Slither, SlitherColor, new_slither_id
from slither.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_HOLE_CELL = Cell(x=0, y=0)


# =============================================================================
# Violations
# =============================================================================


class DuplicateSlitherId(BaseModel, frozen=True):
    """A slither whose id is already used by an earlier slither."""

    kind: Literal["duplicate_slither_id"] = "duplicate_slither_id"
    slither_id: str
    number: int = Field(..., ge=1)
    color: SlitherColor

    def describe(self) -> str:
        return (
            f"Slither #{self.number} ({self.color.value}) reuses the id "
            f"{self.slither_id!r} of an earlier slither"
        )


class UnmatchedSlither(BaseModel, frozen=True):
    """A slither with no paired hole."""

    kind: Literal["unmatched_slither"] = "unmatched_slither"
    slither_id: str | None
    number: int = Field(..., ge=1, description="1-based slither number")
    color: SlitherColor

    def describe(self) -> str:
        return f"Slither #{self.number} ({self.color.value}) has no matching hole"


class OrphanHole(BaseModel, frozen=True):
    """A hole whose slither id matches no slither."""

    kind: Literal["orphan_hole"] = "orphan_hole"
    position: Cell
    slither_id: str | None
    color: SlitherColor

    def describe(self) -> str:
        return (
            f"Hole at {self.position} ({self.color.value}) "
            "has no matching slither"
        )


class DuplicateHole(BaseModel, frozen=True):
    """A slither paired with more than one hole."""

    kind: Literal["duplicate_hole"] = "duplicate_hole"
    slither_id: str
    number: int = Field(..., ge=1)
    kept: Cell
    extra_positions: tuple[Cell, ...]

    def describe(self) -> str:
        return (
            f"Slither #{self.number} has {len(self.extra_positions) + 1} holes; "
            f"extra holes at {format_cells(self.extra_positions)}"
        )


class ColorMismatch(BaseModel, frozen=True):
    """A paired hole whose colour differs from its slither."""

    kind: Literal["color_mismatch"] = "color_mismatch"
    slither_id: str
    number: int = Field(..., ge=1)
    position: Cell
    expected: SlitherColor
    actual: SlitherColor

    def describe(self) -> str:
        return (
            f"Hole at {self.position} is {self.actual.value} but slither "
            f"#{self.number} is {self.expected.value}"
        )


Violation = Annotated[
    DuplicateSlitherId
    | UnmatchedSlither
    | OrphanHole
    | DuplicateHole
    | ColorMismatch,
    Field(discriminator="kind"),
]


def describe_violations(violations: list[Violation]) -> str:
    """Join violation descriptions, one per line."""
    return "\n".join(v.describe() for v in violations)


# =============================================================================
# Validator
# =============================================================================


class PairingValidator:
    """Checks and restores the slither/hole pairing of a level.

    The validator is stateless and operates purely on the level passed to
    each method.
    """

    def validate(self, level: LevelData) -> list[Violation]:
        """Report every pairing violation in a level.

        Args:
            level: The level to inspect. Not modified.

        Returns:
            Violations ordered as: reused slither ids, unmatched slithers,
            orphan holes, duplicate holes, colour mismatches. Empty if the
            level is valid. A slither reusing an earlier id is only reported
            once, as a reused id.
        """
        violations: list[Violation] = []

        seen: set[str] = set()
        reused: set[int] = set()
        for number, slither in enumerate(level.slithers, start=1):
            if not slither.id:
                continue
            if slither.id in seen:
                reused.add(number)
                violations.append(
                    DuplicateSlitherId(
                        slither_id=slither.id, number=number, color=slither.color
                    )
                )
            seen.add(slither.id)

        for number, slither in enumerate(level.slithers, start=1):
            if number in reused:
                continue
            if not level.holes_for(slither.id):
                violations.append(
                    UnmatchedSlither(
                        slither_id=slither.id, number=number, color=slither.color
                    )
                )

        for hole in level.holes:
            if level.find_slither(hole.slither_id) is None:
                violations.append(
                    OrphanHole(
                        position=hole.position,
                        slither_id=hole.slither_id,
                        color=hole.color,
                    )
                )

        for number, slither in enumerate(level.slithers, start=1):
            holes = level.holes_for(slither.id)
            if len(holes) > 1 and slither.id and number not in reused:
                violations.append(
                    DuplicateHole(
                        slither_id=slither.id,
                        number=number,
                        kept=holes[0].position,
                        extra_positions=tuple(h.position for h in holes[1:]),
                    )
                )

        for number, slither in enumerate(level.slithers, start=1):
            holes = level.holes_for(slither.id)
            if (
                holes
                and holes[0].color != slither.color
                and slither.id
                and number not in reused
            ):
                violations.append(
                    ColorMismatch(
                        slither_id=slither.id,
                        number=number,
                        position=holes[0].position,
                        expected=slither.color,
                        actual=holes[0].color,
                    )
                )

        return violations

    def is_valid(self, level: LevelData) -> bool:
        """Check the pairing without collecting details."""
        return not self.validate(level)

    def repair(self, level: LevelData) -> list[Violation]:
        """Restore the pairing invariant in place.

        Safe to call repeatedly; a second call finds nothing to do.

        Args:
            level: The level to repair. Modified in place.

        Returns:
            The violations present before the repair.
        """
        found = self.validate(level)

        seen: set[str] = set()
        for slither in level.slithers:
            if slither.id and slither.id not in seen:
                seen.add(slither.id)
                continue
            old_id = slither.id
            slither.id = new_slither_id()
            seen.add(slither.id)
            if old_id:
                logger.info(
                    "Reassigned reused slither id",
                    old_id=old_id,
                    slither_id=slither.id,
                )
            else:
                logger.info("Assigned id to slither without one", slither_id=slither.id)

        for slither in level.slithers:
            if not level.holes_for(slither.id):
                self.ensure_hole(level, slither)

        for hole in list(level.holes):
            if level.find_slither(hole.slither_id) is None:
                logger.info(
                    "Removing orphan hole",
                    position=hole.position.to_tuple(),
                    slither_id=hole.slither_id,
                )
                _remove_hole(level, hole)

        for slither in level.slithers:
            for extra in level.holes_for(slither.id)[1:]:
                logger.info(
                    "Removing duplicate hole",
                    position=extra.position.to_tuple(),
                    slither_id=slither.id,
                )
                _remove_hole(level, extra)

        for slither in level.slithers:
            self.sync_color(level, slither)

        return found

    def ensure_hole(self, level: LevelData, slither: Slither) -> Hole:
        """Return the slither's hole, creating one if it has none.

        A new hole takes the slither's colour and the first empty cell in
        column-major order. If the grid has no empty cell the hole is placed
        at (0, 0), which leaves the level overlapping; that case is logged.

        Args:
            level: Level owning the slither. Modified in place.
            slither: Slither that needs a hole.

        Returns:
            The existing or newly created hole.
        """
        existing = level.holes_for(slither.id)
        if existing:
            return existing[0]

        position = self.first_empty_cell(level)
        if position is None:
            position = FALLBACK_HOLE_CELL
            logger.warning(
                "No empty cell for hole; placing it at fallback cell",
                slither_id=slither.id,
                position=position.to_tuple(),
            )

        hole = Hole(color=slither.color, position=position, slither_id=slither.id)
        level.holes.append(hole)
        logger.info(
            "Created matching hole",
            slither_id=slither.id,
            color=slither.color.value,
            position=position.to_tuple(),
        )
        return hole

    def sync_color(self, level: LevelData, slither: Slither) -> Hole:
        """Make the slither's hole agree with its colour, creating it if missing."""
        hole = self.ensure_hole(level, slither)
        if hole.color != slither.color:
            logger.info(
                "Updated hole color",
                slither_id=slither.id,
                old=hole.color.value,
                new=slither.color.value,
            )
            hole.color = slither.color
        return hole

    @staticmethod
    def first_empty_cell(level: LevelData) -> Cell | None:
        """Return the first unoccupied cell in column-major order, or None."""
        occupied = level.occupied_cells()
        for cell in iter_column_major(level.size):
            if cell not in occupied:
                return cell
        return None


def _remove_hole(level: LevelData, hole: Hole) -> None:
    """Remove a hole by identity (holes with equal fields may coexist)."""
    level.holes[:] = [h for h in level.holes if h is not hole]
