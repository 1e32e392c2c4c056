"""Property tests: random gesture sequences keep every level invariant.

After each editor call on a valid level:
- no cell holds two entities (body segments or holes)
- every slither has exactly one hole and every hole has a slither
- each hole matches its slither's colour
- every body cell and hole lies inside the grid
- a call that did not apply left the level untouched
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st

from slither.editor.moves import HandleEnd
from slither.editor.outcome import EditOutcome
from slither.editor.placement import PlacementEditor
from slither.editor.session import EditingSession, Tool
from slither.geometry import Cell, Direction
from slither.level.models import LevelData, SlitherColor
from slither.level.store import LevelStore

coords = st.integers(min_value=-1, max_value=6)
cells = st.builds(Cell, x=coords, y=coords)
ends = st.sampled_from(list(HandleEnd))
sizes = st.integers(min_value=3, max_value=7)

operations = st.one_of(
    st.tuples(st.just("click"), cells),
    st.tuples(st.just("pointer_move"), cells),
    st.tuples(st.just("release"), cells),
    st.tuples(st.just("cancel")),
    st.tuples(st.just("finish_painting")),
    st.tuples(st.just("select_tool"), st.sampled_from(list(Tool))),
    st.tuples(st.just("select_color"), st.sampled_from(list(SlitherColor))),
    st.tuples(st.just("set_slither_color"), st.sampled_from(list(SlitherColor))),
    st.tuples(st.just("nudge"), ends, st.sampled_from(list(Direction))),
    st.tuples(st.just("add_segment"), ends),
    st.tuples(st.just("remove_segment"), ends),
    st.tuples(st.just("delete_slither")),
    st.tuples(st.just("erase"), cells),
    st.tuples(st.just("resize"), sizes, sizes),
)


def _apply(editor: PlacementEditor, operation: tuple[Any, ...]) -> EditOutcome:
    name, *args = operation
    result: EditOutcome = getattr(editor, name)(*args)
    return result


def _assert_invariants(level: LevelData) -> None:
    occupied = Counter(level.iter_occupied())
    assert all(count == 1 for count in occupied.values()), occupied

    ids = [s.id for s in level.slithers]
    assert all(ids)
    assert len(set(ids)) == len(ids)
    for slither in level.slithers:
        holes = level.holes_for(slither.id)
        assert len(holes) == 1
        assert holes[0].color is slither.color
        assert slither.length >= 2

    for hole in level.holes:
        assert level.find_slither(hole.slither_id) is not None

    assert all(level.contains(cell) for cell in occupied)


class TestInvariantClosure:
    """Editor operations never leave a level in an invalid state."""

    @settings(max_examples=150, deadline=None)
    @given(
        tool=st.sampled_from([Tool.SLITHER, Tool.MOVE]),
        script=st.lists(operations, max_size=40),
    )
    def test_random_gestures_preserve_invariants(
        self, tool: Tool, script: list[tuple[Any, ...]]
    ) -> None:
        editor = PlacementEditor(LevelStore.new(5, 5), EditingSession(tool=tool))

        for operation in script:
            before = editor.level.model_copy(deep=True)
            outcome = _apply(editor, operation)

            _assert_invariants(editor.level)
            if not outcome.is_applied:
                assert editor.level == before, operation

    @settings(max_examples=100, deadline=None)
    @given(script=st.lists(operations, max_size=30))
    def test_invariants_hold_from_populated_level(
        self, script: list[tuple[Any, ...]]
    ) -> None:
        store = LevelStore.new(5, 5)
        first = store.add_slither(
            [Cell(x=1, y=1), Cell(x=1, y=2), Cell(x=1, y=3), Cell(x=2, y=3)],
            SlitherColor.GREEN,
        )
        store.add_slither([Cell(x=3, y=0), Cell(x=4, y=0)], SlitherColor.ORANGE)
        editor = PlacementEditor(
            store, EditingSession(tool=Tool.MOVE, selected_slither_id=first)
        )
        _assert_invariants(editor.level)

        for operation in script:
            _apply(editor, operation)
            _assert_invariants(editor.level)
