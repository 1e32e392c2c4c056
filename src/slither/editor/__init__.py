"""Interactive editing for slither levels.

This module provides the editing session and the placement state machine
that hosts drive with clicks, pointer moves and commands.
"""

from slither.editor.moves import ExtensionRule, HandleEnd
from slither.editor.outcome import (
    EditOutcome,
    LevelSummary,
    OutcomeStatus,
    SlitherSummary,
)
from slither.editor.placement import PlacementEditor
from slither.editor.session import (
    DraggingHandle,
    DraggingHole,
    EditingSession,
    EditorState,
    Idle,
    PaintingPath,
    Tool,
)

__all__ = [
    "DraggingHandle",
    "DraggingHole",
    "EditOutcome",
    "EditingSession",
    "EditorState",
    "ExtensionRule",
    "HandleEnd",
    "Idle",
    "LevelSummary",
    "OutcomeStatus",
    "PaintingPath",
    "PlacementEditor",
    "SlitherSummary",
    "Tool",
]
