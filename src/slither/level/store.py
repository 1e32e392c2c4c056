"""Level store: occupancy queries and primitive mutations.

``LevelStore`` owns a ``LevelData`` and is the only component that mutates
it directly. Every mutating method either completes with the pairing
invariant intact or raises a ``LevelError`` before touching the level.

Occupancy lookups are linear scans over slithers and holes, which is fine
for the grid sizes the editor allows (at most 20x20).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import NamedTuple

from slither.geometry.grid import first_gap, first_repeat, format_cells
from slither.geometry.primitives import Cell
from slither.level.exceptions import (
    InvalidHitCountError,
    InvalidPathError,
    InvalidPositionError,
    OccupiedCellError,
    RejectionReason,
    UnknownEntityError,
)
from slither.level.models import (
    MIN_SLITHER_LENGTH,
    ChainInteractor,
    CocoonInteractor,
    Hole,
    LevelData,
    Slither,
    SlitherColor,
)
from slither.level.pairing import PairingValidator, Violation
from slither.utils.logging import get_logger

logger = get_logger(__name__)


class SlitherSegment(NamedTuple):
    """A cell occupied by a slither body segment.

    Attributes:
        slither_id: Id of the owning slither (None or empty until the level is
            repaired).
        index: Position in the body (0 = head).
    """

    slither_id: str | None
    index: int


class HoleOccupant(NamedTuple):
    """A cell occupied by a hole."""

    hole: Hole


Occupant = SlitherSegment | HoleOccupant


class ClearResult(NamedTuple):
    """What ``clear_cell`` removed."""

    removed_hole: Hole | None
    removed_slither: Slither | None

    @property
    def changed(self) -> bool:
        return self.removed_hole is not None or self.removed_slither is not None


class LevelStore:
    """Owns a level and performs validated primitive mutations.

    Usage:
        store = LevelStore()  # empty 5x8 level
        slither_id = store.add_slither(
            [Cell(x=0, y=0), Cell(x=0, y=1)], SlitherColor.RED
        )
        store.occupant(Cell(x=0, y=2))  # HoleOccupant for the new hole
    """

    def __init__(
        self,
        level: LevelData | None = None,
        *,
        validator: PairingValidator | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            level: Level to own. Defaults to an empty level of default size.
            validator: Pairing validator used to create and fix holes.
        """
        self.level = level if level is not None else LevelData()
        self.validator = validator or PairingValidator()

    @classmethod
    def new(cls, width: int, height: int) -> LevelStore:
        """Create a store holding an empty level of the given size."""
        return cls(LevelData(width=width, height=height))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.level.width

    @property
    def height(self) -> int:
        return self.level.height

    @property
    def slithers(self) -> list[Slither]:
        return self.level.slithers

    @property
    def holes(self) -> list[Hole]:
        return self.level.holes

    def is_within_bounds(self, cell: Cell) -> bool:
        """Check that a cell lies inside the current grid."""
        return self.level.contains(cell)

    def occupant(self, cell: Cell) -> Occupant | None:
        """Return what occupies a cell: a slither segment, a hole, or None."""
        for slither in self.level.slithers:
            for index, body_cell in enumerate(slither.body_positions):
                if body_cell == cell:
                    return SlitherSegment(slither_id=slither.id, index=index)
        for hole in self.level.holes:
            if hole.position == cell:
                return HoleOccupant(hole=hole)
        return None

    def is_occupied(self, cell: Cell) -> bool:
        """Check whether any slither segment or hole holds the cell."""
        return self.occupant(cell) is not None

    def is_occupied_by_other(
        self,
        cell: Cell,
        *,
        slither_id: str | None = None,
        hole: Hole | None = None,
    ) -> bool:
        """Check occupancy while ignoring one slither's body and/or one hole.

        Args:
            cell: Cell to check.
            slither_id: Slither whose own body does not count as blocking.
            hole: Hole whose own position does not count as blocking.

        Returns:
            True if any other slither segment or hole holds the cell.
        """
        for slither in self.level.slithers:
            if slither_id is not None and slither.id == slither_id:
                continue
            if slither.occupies(cell):
                return True
        return any(
            h.position == cell for h in self.level.holes if h is not hole
        )

    def find_slither(self, slither_id: str | None) -> Slither | None:
        """Return the slither with the given id, or None."""
        return self.level.find_slither(slither_id)

    def get_slither(self, slither_id: str | None) -> Slither:
        """Return the slither with the given id.

        Raises:
            UnknownEntityError: If no such slither exists.
        """
        slither = self.level.find_slither(slither_id)
        if slither is None:
            raise UnknownEntityError(f"No slither with id {slither_id!r}")
        return slither

    def slither_at(self, cell: Cell) -> Slither | None:
        """Return the slither whose body contains the cell, or None."""
        for slither in self.level.slithers:
            if slither.occupies(cell):
                return slither
        return None

    def hole_at(self, cell: Cell) -> Hole | None:
        """Return the hole at the cell, or None."""
        for hole in self.level.holes:
            if hole.position == cell:
                return hole
        return None

    def hole_for(self, slither_id: str | None) -> Hole | None:
        """Return the hole paired with a slither, or None."""
        holes = self.level.holes_for(slither_id)
        return holes[0] if holes else None

    # -------------------------------------------------------------------------
    # Validation helpers
    # -------------------------------------------------------------------------

    def check_body(
        self,
        cells: Sequence[Cell],
        *,
        slither_id: str | None = None,
    ) -> None:
        """Validate a candidate body sequence against shape and occupancy rules.

        Args:
            cells: Candidate body, head first.
            slither_id: Slither the body belongs to; its current cells do
                not count as occupied.

        Raises:
            InvalidPathError: With the specific reason the body is rejected.
        """
        self._check_shape(cells)
        for cell in cells:
            if self.is_occupied_by_other(cell, slither_id=slither_id):
                raise InvalidPathError(
                    "Cell is already occupied",
                    reason=RejectionReason.OCCUPIED_CELL,
                    cell=cell,
                )

    def check_structure(self) -> None:
        """Check the whole level: slither shapes, bounds and disjoint cells.

        Unlike ``check_body`` this looks at every entity at once, so it also
        catches slithers overlapping each other and holes stacked on other
        entities.

        Raises:
            InvalidPathError: A slither is too short, disconnected, repeats a
                cell or leaves the grid.
            InvalidPositionError: A hole lies outside the grid.
            OccupiedCellError: Two segments or holes share a cell.
        """
        for number, slither in enumerate(self.level.slithers, start=1):
            try:
                self._check_shape(slither.body_positions)
            except InvalidPathError as e:
                raise InvalidPathError(
                    f"Slither #{number}: {e.message}", reason=e.reason, cell=e.cell
                ) from e
        for hole in self.level.holes:
            if not self.is_within_bounds(hole.position):
                raise InvalidPositionError(
                    f"Hole is outside the {self.width}x{self.height} grid",
                    cell=hole.position,
                )
        for cell, count in Counter(self.level.iter_occupied()).items():
            if count > 1:
                raise OccupiedCellError(
                    f"Cell is held by {count} slither segments or holes", cell=cell
                )

    def _check_shape(self, cells: Sequence[Cell]) -> None:
        if len(cells) < MIN_SLITHER_LENGTH:
            raise InvalidPathError(
                f"A slither needs at least {MIN_SLITHER_LENGTH} segments, "
                f"got {len(cells)}",
                reason=RejectionReason.MIN_LENGTH_VIOLATION,
            )
        for cell in cells:
            if not self.is_within_bounds(cell):
                raise InvalidPathError(
                    f"Cell is outside the {self.width}x{self.height} grid",
                    reason=RejectionReason.INVALID_POSITION,
                    cell=cell,
                )
        gap = first_gap(cells)
        if gap is not None:
            raise InvalidPathError(
                f"Cells {format_cells(cells[gap - 1 : gap + 1])} are not adjacent",
                reason=RejectionReason.NON_ADJACENT_STEP,
                cell=cells[gap],
            )
        repeat = first_repeat(cells)
        if repeat is not None:
            raise InvalidPathError(
                "Cell appears more than once in the path",
                reason=RejectionReason.SELF_OVERLAP,
                cell=repeat,
            )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_slither(
        self,
        body_positions: Sequence[Cell],
        color: SlitherColor,
        *,
        interactors: Sequence[ChainInteractor | CocoonInteractor] = (),
    ) -> str:
        """Insert a new slither and create its matching hole.

        Args:
            body_positions: Body cells, head first.
            color: Palette colour for the slither and its hole.
            interactors: Optional interactors to attach.

        Returns:
            The new slither's id.

        Raises:
            InvalidPathError: If the body is too short, not connected,
                repeats a cell, leaves the grid or overlaps anything.
            OccupiedCellError: If no empty cell would be left for the hole.
        """
        cells = list(body_positions)
        self.check_body(cells)
        taken = self.level.occupied_cells() | set(cells)
        if len(taken) >= self.width * self.height:
            raise OccupiedCellError("No empty cell left for the slither's hole")

        slither = Slither(
            color=color, body_positions=cells, interactors=list(interactors)
        )
        self.level.slithers.append(slither)
        hole = self.validator.ensure_hole(self.level, slither)
        assert slither.id is not None
        logger.info(
            "Slither added",
            slither_id=slither.id,
            color=color.value,
            length=len(cells),
            hole=hole.position.to_tuple(),
        )
        return slither.id

    def remove_slither(self, slither_id: str | None) -> Slither:
        """Remove a slither together with every hole paired with it.

        Raises:
            UnknownEntityError: If no such slither exists.
        """
        slither = self.get_slither(slither_id)
        self.level.holes[:] = [
            h for h in self.level.holes if h.slither_id != slither.id
        ]
        self.level.slithers[:] = [s for s in self.level.slithers if s is not slither]
        logger.info("Slither removed", slither_id=slither.id)
        return slither

    def set_body(self, slither_id: str | None, body_positions: Sequence[Cell]) -> None:
        """Replace a slither's body after validating the new sequence.

        Raises:
            UnknownEntityError: If no such slither exists.
            InvalidPathError: If the new body breaks a shape or occupancy rule.
        """
        slither = self.get_slither(slither_id)
        cells = list(body_positions)
        self.check_body(cells, slither_id=slither.id)
        slither.body_positions = cells

    def move_hole(self, hole: Hole, new_cell: Cell) -> None:
        """Relocate a hole.

        Raises:
            InvalidPositionError: If the cell is outside the grid.
            OccupiedCellError: If anything other than the hole itself is there.
            UnknownEntityError: If the hole is not part of this level.
        """
        if not any(h is hole for h in self.level.holes):
            raise UnknownEntityError("Hole is not part of this level")
        if not self.is_within_bounds(new_cell):
            raise InvalidPositionError(
                f"Cell is outside the {self.width}x{self.height} grid",
                cell=new_cell,
            )
        if self.is_occupied_by_other(new_cell, hole=hole):
            raise OccupiedCellError("Cell is already occupied", cell=new_cell)
        old = hole.position
        hole.position = new_cell
        logger.info(
            "Hole moved",
            slither_id=hole.slither_id,
            old=old.to_tuple(),
            new=new_cell.to_tuple(),
        )

    def clear_cell(self, cell: Cell) -> ClearResult:
        """Remove whatever is at a cell.

        A hole at the cell is removed; a slither owning the cell is removed
        whole. A removed slither's hole is left behind as an orphan: call
        ``repair`` (or use the editor's eraser) to restore the pairing.
        """
        hole = self.hole_at(cell)
        slither = self.slither_at(cell)
        if hole is not None:
            self.level.holes[:] = [h for h in self.level.holes if h is not hole]
        if slither is not None:
            self.level.slithers[:] = [
                s for s in self.level.slithers if s is not slither
            ]
        result = ClearResult(removed_hole=hole, removed_slither=slither)
        if result.changed:
            logger.info(
                "Cell cleared",
                cell=cell.to_tuple(),
                removed_hole=hole is not None,
                removed_slither=slither.id if slither is not None else None,
            )
        return result

    def set_color(self, slither_id: str | None, color: SlitherColor) -> None:
        """Recolour a slither and its paired hole.

        Raises:
            UnknownEntityError: If no such slither exists.
        """
        slither = self.get_slither(slither_id)
        slither.color = color
        self.validator.sync_color(self.level, slither)

    def add_interactor(
        self,
        slither_id: str | None,
        interactor: ChainInteractor | CocoonInteractor,
    ) -> int:
        """Attach an interactor and return its index."""
        slither = self.get_slither(slither_id)
        slither.interactors.append(interactor)
        logger.info(
            "Interactor added",
            slither_id=slither.id,
            kind=interactor.kind,
            hit_count=interactor.hit_count,
        )
        return len(slither.interactors) - 1

    def remove_interactor(
        self, slither_id: str | None, index: int
    ) -> ChainInteractor | CocoonInteractor:
        """Detach the interactor at an index.

        Raises:
            UnknownEntityError: If the slither or index does not exist.
        """
        slither = self.get_slither(slither_id)
        if not 0 <= index < len(slither.interactors):
            raise UnknownEntityError(f"Slither has no interactor at index {index}")
        interactor = slither.interactors.pop(index)
        logger.info("Interactor removed", slither_id=slither.id, kind=interactor.kind)
        return interactor

    def set_hit_count(self, slither_id: str | None, index: int, hit_count: int) -> None:
        """Change an interactor's hit count (must be at least 1).

        Raises:
            UnknownEntityError: If the slither or index does not exist.
            InvalidHitCountError: If hit_count is below 1.
        """
        slither = self.get_slither(slither_id)
        if not 0 <= index < len(slither.interactors):
            raise UnknownEntityError(f"Slither has no interactor at index {index}")
        if hit_count < 1:
            raise InvalidHitCountError(
                f"hit_count must be at least 1, got {hit_count}"
            )
        current = slither.interactors[index]
        slither.interactors[index] = current.model_copy(update={"hit_count": hit_count})

    def repair(self) -> list[Violation]:
        """Run pairing repair on the owned level and return what was found."""
        return self.validator.repair(self.level)

