"""Tests for painting new slithers through the placement editor."""

from __future__ import annotations

from slither.editor.outcome import OutcomeStatus
from slither.editor.placement import PlacementEditor
from slither.editor.session import EditingSession, Idle, PaintingPath, Tool
from slither.geometry import Cell
from slither.level.exceptions import RejectionReason
from slither.level.models import SlitherColor
from slither.level.store import HoleOccupant, LevelStore


def _paint(editor: PlacementEditor, *coords: tuple[int, int]) -> None:
    for x, y in coords:
        editor.click(Cell(x=x, y=y))


class TestPaintingCommit:
    """A path ends and commits on the first click that cannot extend it."""

    def test_invalid_fourth_click_commits_three_cells(
        self, editor: PlacementEditor
    ) -> None:
        _paint(editor, (0, 0), (0, 1), (0, 2))

        outcome = editor.click(Cell(x=4, y=7))

        assert outcome.status is OutcomeStatus.APPLIED
        assert outcome.message == "Slither created with 3 segments"
        assert editor.session.is_idle
        (slither,) = editor.level.slithers
        assert slither.id == outcome.slither_id
        assert slither.body_positions == [
            Cell(x=0, y=0),
            Cell(x=0, y=1),
            Cell(x=0, y=2),
        ]
        assert slither.color is SlitherColor.BLUE
        (hole,) = editor.level.holes
        assert hole.position == Cell(x=0, y=3)
        assert hole.color is SlitherColor.BLUE
        assert hole.slither_id == slither.id

    def test_path_grows_while_clicks_are_valid(self, editor: PlacementEditor) -> None:
        _paint(editor, (2, 2), (2, 3))
        outcome = editor.click(Cell(x=3, y=3))

        assert outcome.is_no_op
        assert outcome.preview == (Cell(x=2, y=2), Cell(x=2, y=3), Cell(x=3, y=3))
        assert editor.session.state == PaintingPath(
            cells=(Cell(x=2, y=2), Cell(x=2, y=3), Cell(x=3, y=3))
        )
        assert editor.level.slithers == []

    def test_revisiting_a_path_cell_ends_painting(
        self, editor: PlacementEditor
    ) -> None:
        _paint(editor, (2, 2), (2, 3), (3, 3), (3, 2))
        outcome = editor.click(Cell(x=2, y=2))
        assert outcome.is_applied
        assert editor.level.slithers[0].length == 4

    def test_occupied_cell_ends_painting(self, editor: PlacementEditor) -> None:
        _paint(editor, (1, 0), (1, 1))
        editor.click(Cell(x=3, y=3))  # commit; hole goes to (0, 0)

        _paint(editor, (0, 2), (0, 1))
        outcome = editor.click(Cell(x=0, y=0))

        assert outcome.is_applied
        assert editor.level.slithers[1].body_positions == [
            Cell(x=0, y=2),
            Cell(x=0, y=1),
        ]

    def test_out_of_bounds_click_ends_painting(self, editor: PlacementEditor) -> None:
        _paint(editor, (4, 6), (4, 7))
        outcome = editor.click(Cell(x=4, y=8))
        assert outcome.is_applied

    def test_finish_painting_commits(self, editor: PlacementEditor) -> None:
        _paint(editor, (0, 0), (1, 0))
        outcome = editor.finish_painting()
        assert outcome.is_applied
        assert len(editor.level.slithers) == 1

    def test_finish_painting_when_idle(self, editor: PlacementEditor) -> None:
        outcome = editor.finish_painting()
        assert outcome.is_no_op
        assert outcome.message == "Not painting"

    def test_color_comes_from_session(self, editor: PlacementEditor) -> None:
        editor.select_color(SlitherColor.PURPLE)
        _paint(editor, (0, 0), (1, 0))
        editor.finish_painting()
        assert editor.level.slithers[0].color is SlitherColor.PURPLE
        assert editor.level.holes[0].color is SlitherColor.PURPLE


class TestPaintingDiscard:
    """A path with a single cell is dropped without touching the level."""

    def test_single_click_then_invalid_click(self, editor: PlacementEditor) -> None:
        editor.click(Cell(x=0, y=0))
        outcome = editor.click(Cell(x=3, y=5))

        assert outcome.is_no_op
        assert outcome.message == "Path discarded"
        assert editor.session.is_idle
        assert editor.level.slithers == []
        assert editor.level.holes == []

    def test_single_click_then_finish(self, editor: PlacementEditor) -> None:
        editor.click(Cell(x=0, y=0))
        outcome = editor.finish_painting()
        assert outcome.message == "Path discarded"
        assert editor.level.slithers == []
        assert editor.level.holes == []

    def test_cancel_drops_path(self, editor: PlacementEditor) -> None:
        _paint(editor, (0, 0), (0, 1), (0, 2))
        outcome = editor.cancel()
        assert outcome.message == "Cancelled painting path"
        assert editor.session.state == Idle()
        assert editor.level.slithers == []


class TestPaintingStart:
    """Tests for the click that starts a path."""

    def test_click_on_empty_cell_starts_path(self, editor: PlacementEditor) -> None:
        outcome = editor.click(Cell(x=2, y=2))
        assert outcome.is_no_op
        assert outcome.preview == (Cell(x=2, y=2),)
        assert isinstance(editor.session.state, PaintingPath)

    def test_click_on_occupied_cell_reports_occupant(
        self, editor: PlacementEditor
    ) -> None:
        _paint(editor, (1, 0), (1, 1))
        editor.finish_painting()

        outcome = editor.click(Cell(x=0, y=0))

        assert outcome.is_no_op
        assert isinstance(outcome.occupant, HoleOccupant)
        assert editor.session.is_idle

    def test_click_outside_grid_is_rejected(self, editor: PlacementEditor) -> None:
        outcome = editor.click(Cell(x=-1, y=0))
        assert outcome.is_rejected
        assert outcome.reason is RejectionReason.INVALID_POSITION
        assert outcome.cell == Cell(x=-1, y=0)
        assert editor.session.is_idle

    def test_other_tools_do_not_paint(self, editor: PlacementEditor) -> None:
        editor.select_tool(Tool.NONE)
        editor.click(Cell(x=2, y=2))
        assert editor.session.is_idle

    def test_tool_change_keeps_path(self, editor: PlacementEditor) -> None:
        editor.click(Cell(x=2, y=2))
        editor.select_tool(Tool.ERASER)
        assert isinstance(editor.session.state, PaintingPath)
        editor.click(Cell(x=2, y=3))
        assert editor.finish_painting().is_applied


class TestPaintingFullGrid:
    """Painting is refused when the new slither would leave no room for its hole."""

    def test_full_grid_rejected(self) -> None:
        editor = PlacementEditor(
            LevelStore.new(2, 1), EditingSession(tool=Tool.SLITHER)
        )
        _paint(editor, (0, 0), (1, 0))

        outcome = editor.finish_painting()

        assert outcome.is_rejected
        assert outcome.reason is RejectionReason.OCCUPIED_CELL
        assert editor.level.slithers == []
        assert editor.session.is_idle
