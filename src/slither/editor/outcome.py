"""Results returned by editor operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from slither.geometry.primitives import Cell
from slither.level.exceptions import LevelError, RejectionReason
from slither.level.resize import AffectedHole, AffectedSlither
from slither.level.store import Occupant


class OutcomeStatus(str, Enum):
    """What an editor call did to the level."""

    APPLIED = "applied"
    REJECTED = "rejected"
    NO_OP = "no_op"


@dataclass(frozen=True)
class EditOutcome:
    """Result of one editor call.

    Attributes:
        status: Whether the level changed, the request was refused, or
            only the session or nothing changed.
        message: Human-readable summary for the host.
        reason: Rule that caused a rejection.
        cell: Cell the rejection refers to, if any.
        slither_id: Slither created or changed by the call.
        occupant: What occupies the clicked cell, for host-side selection.
        preview: Cells the host should highlight (path or drag preview).
        affected: Entities a resize drops.
    """

    status: OutcomeStatus
    message: str = ""
    reason: RejectionReason | None = None
    cell: Cell | None = None
    slither_id: str | None = None
    occupant: Occupant | None = None
    preview: tuple[Cell, ...] = ()
    affected: tuple[AffectedHole | AffectedSlither, ...] = ()

    @classmethod
    def applied(cls, message: str, **kwargs: Any) -> EditOutcome:
        return cls(status=OutcomeStatus.APPLIED, message=message, **kwargs)

    @classmethod
    def no_op(cls, message: str = "", **kwargs: Any) -> EditOutcome:
        return cls(status=OutcomeStatus.NO_OP, message=message, **kwargs)

    @classmethod
    def rejected(cls, error: LevelError, **kwargs: Any) -> EditOutcome:
        """Build a rejection from the error that caused it."""
        return cls(
            status=OutcomeStatus.REJECTED,
            message=str(error),
            reason=error.reason,
            cell=error.cell,
            **kwargs,
        )

    @property
    def is_applied(self) -> bool:
        return self.status is OutcomeStatus.APPLIED

    @property
    def is_rejected(self) -> bool:
        return self.status is OutcomeStatus.REJECTED

    @property
    def is_no_op(self) -> bool:
        return self.status is OutcomeStatus.NO_OP


class SlitherSummary(BaseModel):
    """One line of a level summary."""

    number: int = Field(..., ge=1)
    slither_id: str | None
    color: str
    length: int = Field(..., ge=0)
    interactors: int = Field(default=0, ge=0)


class LevelSummary(BaseModel):
    """Counts describing a level, as shown in a host's status panel."""

    width: int
    height: int
    slither_count: int = Field(..., ge=0)
    hole_count: int = Field(..., ge=0)
    violation_count: int = Field(default=0, ge=0)
    slithers: list[SlitherSummary] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.violation_count == 0
