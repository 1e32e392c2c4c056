"""Level data model and structural rules.

Key Components:
    - Models: Slither, Hole, interactors and the LevelData aggregate
    - LevelStore: occupancy queries and validated primitive mutations
    - PairingValidator: slither/hole pairing checks and deterministic repair
    - ResizeManager: grid resizing with conflict resolution

Example:
    from slither.level import LevelStore, SlitherColor
    from slither.geometry import Cell

    store = LevelStore()
    store.add_slither([Cell(x=0, y=0), Cell(x=0, y=1)], SlitherColor.RED)
    store.validator.validate(store.level)  # []
"""

from slither.level.exceptions import (
    InvalidGridSizeError,
    InvalidHitCountError,
    InvalidPathError,
    InvalidPositionError,
    LevelError,
    MinLengthError,
    NonAdjacentStepError,
    OccupiedCellError,
    RejectionReason,
    SelfOverlapError,
    SerializationError,
    UnknownEntityError,
)
from slither.level.models import (
    ChainInteractor,
    CocoonInteractor,
    Hole,
    Interactor,
    LevelData,
    Slither,
    SlitherColor,
    make_interactor,
)
from slither.level.pairing import (
    ColorMismatch,
    DuplicateHole,
    DuplicateSlitherId,
    OrphanHole,
    PairingValidator,
    UnmatchedSlither,
    Violation,
    describe_violations,
)
from slither.level.resize import (
    AffectedHole,
    AffectedSlither,
    ResizeManager,
    ResizeResult,
)
from slither.level.store import (
    ClearResult,
    HoleOccupant,
    LevelStore,
    Occupant,
    SlitherSegment,
)

__all__ = [
    "AffectedHole",
    "AffectedSlither",
    "ChainInteractor",
    "ClearResult",
    "CocoonInteractor",
    "ColorMismatch",
    "DuplicateHole",
    "DuplicateSlitherId",
    "Hole",
    "HoleOccupant",
    "Interactor",
    "InvalidGridSizeError",
    "InvalidHitCountError",
    "InvalidPathError",
    "InvalidPositionError",
    "LevelData",
    "LevelError",
    "LevelStore",
    "MinLengthError",
    "NonAdjacentStepError",
    "Occupant",
    "OccupiedCellError",
    "OrphanHole",
    "PairingValidator",
    "RejectionReason",
    "ResizeManager",
    "ResizeResult",
    "SelfOverlapError",
    "SerializationError",
    "Slither",
    "SlitherColor",
    "SlitherSegment",
    "UnknownEntityError",
    "UnmatchedSlither",
    "Violation",
    "describe_violations",
    "make_interactor",
]
