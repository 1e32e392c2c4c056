"""Custom exceptions for level editing operations.

Every rejected mutation raises a LevelError subclass naming the rule it
violated. The editor turns these into reported outcomes; they never leave
the level half-modified.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from slither.geometry.primitives import Cell


class RejectionReason(str, Enum):
    """Why an editing operation was rejected."""

    INVALID_POSITION = "InvalidPosition"
    OCCUPIED_CELL = "OccupiedCell"
    NON_ADJACENT_STEP = "NonAdjacentStep"
    MIN_LENGTH_VIOLATION = "MinLengthViolation"
    SELF_OVERLAP = "SelfOverlap"
    UNKNOWN_ENTITY = "UnknownEntity"
    INVALID_GRID_SIZE = "InvalidGridSize"
    INVALID_HIT_COUNT = "InvalidHitCount"
    INVALID_STATE = "InvalidState"
    SERIALIZATION_ERROR = "SerializationError"


class LevelError(Exception):
    """Base exception for all level editing errors."""

    reason: RejectionReason = RejectionReason.INVALID_STATE

    def __init__(self, message: str, *, cell: Cell | None = None) -> None:
        """Initialize level error with optional cell context.

        Args:
            message: Human-readable error description.
            cell: Grid cell the failed operation targeted.
        """
        self.message = message
        self.cell = cell
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with cell context if available."""
        if self.cell is not None:
            return f"{self.message} (cell: {self.cell})"
        return self.message


class InvalidPositionError(LevelError):
    """Raised when a cell lies outside the current grid bounds."""

    reason = RejectionReason.INVALID_POSITION


class OccupiedCellError(LevelError):
    """Raised when a target cell already holds a conflicting entity."""

    reason = RejectionReason.OCCUPIED_CELL


class NonAdjacentStepError(LevelError):
    """Raised when a path or drag step is not orthogonally adjacent."""

    reason = RejectionReason.NON_ADJACENT_STEP


class MinLengthError(LevelError):
    """Raised when an operation would leave a slither below 2 segments."""

    reason = RejectionReason.MIN_LENGTH_VIOLATION


class SelfOverlapError(LevelError):
    """Raised when a new cell would duplicate a cell of the same slither."""

    reason = RejectionReason.SELF_OVERLAP


class UnknownEntityError(LevelError):
    """Raised when an operation names a slither or hole that does not exist."""

    reason = RejectionReason.UNKNOWN_ENTITY


class InvalidGridSizeError(LevelError):
    """Raised when a requested grid size violates the resize policy."""

    reason = RejectionReason.INVALID_GRID_SIZE


class InvalidHitCountError(LevelError):
    """Raised when an interactor hit count is below 1."""

    reason = RejectionReason.INVALID_HIT_COUNT


class InvalidPathError(LevelError):
    """Raised when a body sequence is not a valid slither shape.

    The specific rule that failed is carried in ``reason`` so callers can
    report it (too short, gap between steps, repeated cell, out of bounds,
    or overlapping another entity).
    """

    def __init__(
        self,
        message: str,
        *,
        reason: RejectionReason,
        cell: Cell | None = None,
    ) -> None:
        """Initialize path error with the underlying rule.

        Args:
            message: Human-readable error description.
            reason: The specific rule the path violates.
            cell: First offending cell, if any.
        """
        self.reason = reason
        super().__init__(message, cell=cell)


class SerializationError(LevelError):
    """Raised when level data cannot be read, written or decoded.

    This error is raised when:
    - The file does not exist or cannot be read/written
    - The content is not valid JSON
    - The JSON does not match the level shape
    - An interactor has a missing or unrecognized ``Type``
    """

    reason = RejectionReason.SERIALIZATION_ERROR

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize serialization error with optional path context.

        Args:
            message: Human-readable error description.
            path: Path to the level file that caused the error.
        """
        self.path = Path(path) if path else None
        super().__init__(message)

    def _format_message(self) -> str:
        """Format error message with path context if available."""
        if self.path:
            return f"{self.message} (path: {self.path})"
        return self.message
