"""Level entity models.

Pydantic models for slithers, holes, interactors and the level aggregate.
Field aliases match the on-disk JSON shape (``gridWidth``,
``bodyPositions``, ``hitCount``, ``slitherId`` and the interactor ``Type``
discriminator), so ``model_dump(by_alias=True)`` produces the file format
directly.

Structural rules (body shape, occupancy, pairing) are not enforced by the
models: loaded files may break them, and the store, validator and editor
are responsible for restoring and preserving them.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from slither.geometry.primitives import Cell, GridSize

DEFAULT_GRID_WIDTH = 5
DEFAULT_GRID_HEIGHT = 8
MIN_SLITHER_LENGTH = 2


def new_slither_id() -> str:
    """Generate a fresh opaque slither identifier."""
    return str(uuid.uuid4())


class SlitherColor(str, Enum):
    """Fixed colour palette shared by slithers and holes."""

    RED = "Red"
    GREEN = "Green"
    BLUE = "Blue"
    YELLOW = "Yellow"
    PURPLE = "Purple"
    ORANGE = "Orange"
    CYAN = "Cyan"
    MAGENTA = "Magenta"

    @property
    def display_value(self) -> str:
        """Hex RGB value hosts use to draw this colour."""
        return _DISPLAY_VALUES[self]

    @classmethod
    def parse(cls, name: str) -> SlitherColor:
        """Parse a colour name case-insensitively (e.g. "red" or "Red")."""
        for color in cls:
            if color.value.lower() == name.strip().lower():
                return color
        valid = ", ".join(c.value for c in cls)
        raise ValueError(f"Unknown color {name!r} (expected one of {valid})")


_DISPLAY_VALUES: dict[SlitherColor, str] = {
    SlitherColor.RED: "#E63333",
    SlitherColor.GREEN: "#33CC4D",
    SlitherColor.BLUE: "#3366E6",
    SlitherColor.YELLOW: "#FFE633",
    SlitherColor.PURPLE: "#B34DE6",
    SlitherColor.ORANGE: "#FF991A",
    SlitherColor.CYAN: "#33CCE6",
    SlitherColor.MAGENTA: "#FF66B3",
}


# =============================================================================
# Interactors
# =============================================================================


class ChainInteractor(BaseModel):
    """Chain wrapped around a slither; broken after ``hit_count`` interactions."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["ChainInteractor"] = Field(default="ChainInteractor", alias="Type")
    hit_count: int = Field(default=1, ge=1, alias="hitCount")


class CocoonInteractor(BaseModel):
    """Cocoon around a slither; hatches after ``hit_count`` interactions."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["CocoonInteractor"] = Field(default="CocoonInteractor", alias="Type")
    hit_count: int = Field(default=1, ge=1, alias="hitCount")


def _interactor_tag(value: Any) -> str | None:
    """Read the discriminator from JSON input ("Type") or a model ("kind")."""
    if isinstance(value, dict):
        return value.get("Type", value.get("kind"))
    return getattr(value, "kind", None)


# Discriminated union keyed on the JSON "Type" field
Interactor = Annotated[
    Annotated[ChainInteractor, Tag("ChainInteractor")]
    | Annotated[CocoonInteractor, Tag("CocoonInteractor")],
    Discriminator(_interactor_tag),
]

INTERACTOR_KINDS: dict[str, type[ChainInteractor] | type[CocoonInteractor]] = {
    "chain": ChainInteractor,
    "cocoon": CocoonInteractor,
}


def make_interactor(
    kind: str, hit_count: int = 1
) -> ChainInteractor | CocoonInteractor:
    """Build an interactor from a short kind name ("chain" or "cocoon").

    Raises:
        ValueError: If the kind is unknown.
        pydantic.ValidationError: If hit_count is below 1.
    """
    try:
        model = INTERACTOR_KINDS[kind.strip().lower()]
    except KeyError:
        valid = ", ".join(INTERACTOR_KINDS)
        raise ValueError(
            f"Unknown interactor kind {kind!r} (expected one of {valid})"
        ) from None
    return model(hit_count=hit_count)


# =============================================================================
# Entities
# =============================================================================


class Slither(BaseModel):
    """A coloured snake occupying an ordered sequence of cells.

    Index 0 of ``body_positions`` is the head, the last index is the tail.

    Attributes:
        id: Opaque identifier assigned at creation. May be empty in a
            damaged file until repaired.
        color: Palette colour, shared with the paired hole.
        body_positions: Ordered, orthogonally connected cells.
        interactors: Attached Chain/Cocoon modifiers (order-independent).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default_factory=new_slither_id)
    color: SlitherColor
    body_positions: list[Cell] = Field(default_factory=list, alias="bodyPositions")
    interactors: list[Interactor] = Field(default_factory=list)

    @property
    def head(self) -> Cell:
        """First cell of the body."""
        return self.body_positions[0]

    @property
    def tail(self) -> Cell:
        """Last cell of the body."""
        return self.body_positions[-1]

    @property
    def length(self) -> int:
        """Number of body segments."""
        return len(self.body_positions)

    def occupies(self, cell: Cell) -> bool:
        """Check whether a cell is part of this slither's body."""
        return cell in self.body_positions


class Hole(BaseModel):
    """A coloured target cell paired with one slither.

    Attributes:
        color: Palette colour; agrees with the paired slither.
        position: Cell the hole occupies.
        slither_id: Id of the paired slither (None or empty if orphaned).
    """

    model_config = ConfigDict(populate_by_name=True)

    color: SlitherColor
    position: Cell
    slither_id: str | None = Field(default=None, alias="slitherId")


class LevelData(BaseModel):
    """The level aggregate: grid dimensions plus slithers and holes.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        slithers: Slithers in creation order.
        holes: Holes in creation order (order matters for duplicate repair).
    """

    model_config = ConfigDict(populate_by_name=True)

    width: int = Field(default=DEFAULT_GRID_WIDTH, gt=0, alias="gridWidth")
    height: int = Field(default=DEFAULT_GRID_HEIGHT, gt=0, alias="gridHeight")
    slithers: list[Slither] = Field(default_factory=list)
    holes: list[Hole] = Field(default_factory=list)

    @property
    def size(self) -> GridSize:
        """Grid dimensions as a GridSize."""
        return GridSize(width=self.width, height=self.height)

    def contains(self, cell: Cell) -> bool:
        """Check whether a cell lies within the grid."""
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def iter_occupied(self) -> Iterator[Cell]:
        """Yield every cell held by a slither segment or a hole."""
        for slither in self.slithers:
            yield from slither.body_positions
        for hole in self.holes:
            yield hole.position

    def occupied_cells(self) -> set[Cell]:
        """Return the set of cells held by any slither segment or hole."""
        return set(self.iter_occupied())

    def find_slither(self, slither_id: str | None) -> Slither | None:
        """Return the slither with the given id, or None."""
        if not slither_id:
            return None
        for slither in self.slithers:
            if slither.id == slither_id:
                return slither
        return None

    def holes_for(self, slither_id: str | None) -> list[Hole]:
        """Return every hole paired with the given slither id, in order."""
        if not slither_id:
            return []
        return [hole for hole in self.holes if hole.slither_id == slither_id]

    def slither_number(self, slither: Slither) -> int:
        """Return the 1-based position of a slither, as shown to users."""
        for index, candidate in enumerate(self.slithers):
            if candidate is slither:
                return index + 1
        raise ValueError("Slither is not part of this level")

    def to_json_dict(self) -> dict[str, object]:
        """Dump to the on-disk JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
