"""Editing session state.

The session holds everything about an editing context that is not level
data: the active tool and colour, the selected slither, and the transient
gesture state. Transient states are immutable; the editor replaces
``session.state`` on every transition.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from slither.editor.moves import HandleEnd
from slither.geometry.primitives import Cell
from slither.level.models import SlitherColor


class Tool(str, Enum):
    """Gesture type the next click on an idle editor starts."""

    NONE = "none"
    SLITHER = "slither"
    HOLE = "hole"
    ERASER = "eraser"
    MOVE = "move"


class Idle(BaseModel, frozen=True):
    """No gesture in progress."""

    kind: Literal["idle"] = "idle"


class PaintingPath(BaseModel, frozen=True):
    """A new slither is being painted cell by cell."""

    kind: Literal["painting_path"] = "painting_path"
    cells: tuple[Cell, ...] = Field(..., min_length=1)


class DraggingHandle(BaseModel, frozen=True):
    """The head or tail of a slither is being dragged.

    Attributes:
        slither_id: Slither being dragged.
        end: Which end is being dragged.
        preview: Body the slither would have if committed at the last
            valid pointer position (empty if there is none).
    """

    kind: Literal["dragging_handle"] = "dragging_handle"
    slither_id: str
    end: HandleEnd
    preview: tuple[Cell, ...] = ()


class DraggingHole(BaseModel, frozen=True):
    """A hole is being dragged.

    Attributes:
        origin: Cell the hole occupied when the drag started.
        preview: Last valid target under the pointer, if any.
    """

    kind: Literal["dragging_hole"] = "dragging_hole"
    origin: Cell
    preview: Cell | None = None


EditorState = Annotated[
    Idle | PaintingPath | DraggingHandle | DraggingHole,
    Field(discriminator="kind"),
]


def _new_session_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class EditingSession:
    """Editor context for one level being edited.

    Usage:
        session = EditingSession(tool=Tool.SLITHER, color=SlitherColor.BLUE)
        editor = PlacementEditor(store, session)
        editor.click(Cell(x=0, y=0))
        session.state  # PaintingPath(cells=(Cell(x=0, y=0),))
    """

    tool: Tool = Tool.NONE
    color: SlitherColor = SlitherColor.RED
    selected_slither_id: str | None = None
    state: EditorState = field(default_factory=Idle)
    session_id: str = field(default_factory=_new_session_id)

    @property
    def is_idle(self) -> bool:
        """Check whether no gesture is in progress."""
        return isinstance(self.state, Idle)

    def reset(self) -> None:
        """Drop any transient state and the selection."""
        self.state = Idle()
        self.selected_slither_id = None
