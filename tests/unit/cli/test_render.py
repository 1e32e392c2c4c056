"""Tests for terminal rendering of levels."""

from __future__ import annotations

from slither.cli.render import (
    BODY,
    EMPTY,
    HEAD,
    HOLE,
    TAIL,
    cell_symbol,
    render_grid,
    render_legend,
)
from slither.geometry import Cell
from slither.level.models import (
    ChainInteractor,
    CocoonInteractor,
    Hole,
    LevelData,
    Slither,
    SlitherColor,
)


def _level() -> LevelData:
    return LevelData(
        width=3,
        height=3,
        slithers=[
            Slither(
                id="s",
                color=SlitherColor.PURPLE,
                body_positions=[Cell(x=0, y=0), Cell(x=1, y=0), Cell(x=1, y=1)],
            )
        ],
        holes=[
            Hole(color=SlitherColor.PURPLE, position=Cell(x=2, y=2), slither_id="s")
        ],
    )


class TestCellSymbol:
    def test_slither_parts(self) -> None:
        level = _level()
        assert cell_symbol(level, Cell(x=0, y=0)) == HEAD
        assert cell_symbol(level, Cell(x=1, y=0)) == BODY
        assert cell_symbol(level, Cell(x=1, y=1)) == TAIL

    def test_hole_and_empty(self) -> None:
        level = _level()
        assert cell_symbol(level, Cell(x=2, y=2)) == HOLE
        assert cell_symbol(level, Cell(x=0, y=2)) == EMPTY


class TestRenderGrid:
    def test_rows_run_top_down_with_labels(self) -> None:
        assert render_grid(_level()).splitlines() == [
            "2 . . ●",
            "1 . ◎ .",
            "0 ◉ ○ .",
            "  0 1 2",
        ]

    def test_label_width_follows_height(self) -> None:
        lines = render_grid(LevelData(width=3, height=12)).splitlines()
        assert lines[0] == "11 . . ."
        assert lines[-2] == " 0 . . ."
        assert lines[-1] == "   0 1 2"


class TestRenderLegend:
    def test_lists_slithers_then_holes(self) -> None:
        assert render_legend(_level()).splitlines() == [
            "Slither #1 (Purple) head (0, 0), 3 segments",
            "Hole at (2, 2) (Purple)",
        ]

    def test_includes_interactors(self) -> None:
        level = _level()
        level.slithers[0].interactors = [
            ChainInteractor(hit_count=2),
            CocoonInteractor(hit_count=1),
        ]
        first = render_legend(level).splitlines()[0]
        assert first.endswith("[Chain x2, Cocoon x1]")

    def test_empty_level(self) -> None:
        assert render_legend(LevelData()) == ""
