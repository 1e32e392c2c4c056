"""Tests for level entity models and the on-disk JSON shape."""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from slither.geometry import Cell
from slither.level.models import (
    ChainInteractor,
    CocoonInteractor,
    Hole,
    LevelData,
    Slither,
    SlitherColor,
    make_interactor,
)


class TestSlitherColor:
    """Tests for the colour palette."""

    def test_palette(self) -> None:
        assert [c.value for c in SlitherColor] == [
            "Red",
            "Green",
            "Blue",
            "Yellow",
            "Purple",
            "Orange",
            "Cyan",
            "Magenta",
        ]

    def test_every_color_has_a_display_value(self) -> None:
        for color in SlitherColor:
            assert color.display_value.startswith("#")
            assert len(color.display_value) == 7

    def test_parse_is_case_insensitive(self) -> None:
        assert SlitherColor.parse("red") is SlitherColor.RED
        assert SlitherColor.parse("MAGENTA") is SlitherColor.MAGENTA

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown color 'Black'"):
            SlitherColor.parse("Black")


class TestInteractors:
    """Tests for the Chain/Cocoon discriminated union."""

    def test_defaults(self) -> None:
        chain = ChainInteractor()
        assert chain.kind == "ChainInteractor"
        assert chain.hit_count == 1

    def test_hit_count_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="greater than or equal to 1"):
            CocoonInteractor(hit_count=0)

    def test_make_interactor(self) -> None:
        interactor = make_interactor("Cocoon", 3)
        assert isinstance(interactor, CocoonInteractor)
        assert interactor.hit_count == 3

    def test_make_interactor_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown interactor kind"):
            make_interactor("spikes")

    def test_json_type_selects_variant(self) -> None:
        slither = Slither.model_validate(
            {
                "id": "s1",
                "color": "Blue",
                "bodyPositions": [{"x": 0, "y": 0}, {"x": 0, "y": 1}],
                "interactors": [
                    {"Type": "ChainInteractor", "hitCount": 2},
                    {"Type": "CocoonInteractor", "hitCount": 1},
                ],
            }
        )
        chain, cocoon = slither.interactors
        assert isinstance(chain, ChainInteractor)
        assert chain.hit_count == 2
        assert isinstance(cocoon, CocoonInteractor)

    def test_unknown_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Slither.model_validate(
                {
                    "color": "Blue",
                    "bodyPositions": [],
                    "interactors": [{"Type": "SpikeInteractor", "hitCount": 1}],
                }
            )

    def test_missing_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Slither.model_validate(
                {"color": "Blue", "bodyPositions": [], "interactors": [{"hitCount": 1}]}
            )

    def test_dump_uses_type_field(self) -> None:
        dumped = ChainInteractor(hit_count=4).model_dump(by_alias=True)
        assert dumped == {"Type": "ChainInteractor", "hitCount": 4}


class TestSlither:
    """Tests for the Slither model."""

    def test_new_slither_gets_uuid(self) -> None:
        slither = Slither(color=SlitherColor.RED)
        assert slither.id is not None
        uuid.UUID(slither.id)

    def test_ids_are_unique(self) -> None:
        assert Slither(color=SlitherColor.RED).id != Slither(color=SlitherColor.RED).id

    def test_loaded_slither_without_id_key_gets_one(self) -> None:
        slither = Slither.model_validate({"color": "Red", "bodyPositions": []})
        assert slither.id

    def test_explicit_null_id_is_kept(self) -> None:
        slither = Slither.model_validate({"id": None, "color": "Red"})
        assert slither.id is None

    def test_head_tail_length(self) -> None:
        slither = Slither(
            color=SlitherColor.RED,
            body_positions=[Cell(x=0, y=0), Cell(x=0, y=1), Cell(x=1, y=1)],
        )
        assert slither.head == Cell(x=0, y=0)
        assert slither.tail == Cell(x=1, y=1)
        assert slither.length == 3
        assert slither.occupies(Cell(x=0, y=1))
        assert not slither.occupies(Cell(x=1, y=0))


class TestLevelData:
    """Tests for the LevelData aggregate."""

    def test_defaults_to_empty_5x8(self) -> None:
        level = LevelData()
        assert (level.width, level.height) == (5, 8)
        assert level.slithers == []
        assert level.holes == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValidationError):
            LevelData(width=0, height=8)

    def test_json_shape(self, paired_level: LevelData) -> None:
        data = paired_level.to_json_dict()
        assert data["gridWidth"] == 5
        assert data["gridHeight"] == 8
        assert data["slithers"] == [
            {
                "id": "red-1",
                "color": "Red",
                "bodyPositions": [
                    {"x": 1, "y": 0},
                    {"x": 1, "y": 1},
                    {"x": 1, "y": 2},
                ],
                "interactors": [],
            }
        ]
        assert data["holes"] == [
            {"color": "Red", "position": {"x": 3, "y": 3}, "slitherId": "red-1"}
        ]

    def test_validate_from_json_shape(self, paired_level: LevelData) -> None:
        restored = LevelData.model_validate(paired_level.to_json_dict())
        assert restored == paired_level

    def test_contains(self) -> None:
        level = LevelData(width=5, height=8)
        assert level.contains(Cell(x=4, y=7))
        assert not level.contains(Cell(x=5, y=7))

    def test_occupied_cells(self, paired_level: LevelData) -> None:
        assert paired_level.occupied_cells() == {
            Cell(x=1, y=0),
            Cell(x=1, y=1),
            Cell(x=1, y=2),
            Cell(x=3, y=3),
        }

    def test_find_slither_and_holes_for(self, paired_level: LevelData) -> None:
        assert paired_level.find_slither("red-1") is paired_level.slithers[0]
        assert paired_level.find_slither("missing") is None
        assert paired_level.find_slither(None) is None
        assert paired_level.holes_for("red-1") == paired_level.holes
        assert paired_level.holes_for("") == []

    def test_slither_number_is_one_based(self, paired_level: LevelData) -> None:
        assert paired_level.slither_number(paired_level.slithers[0]) == 1

    def test_slither_number_for_foreign_slither(self, paired_level: LevelData) -> None:
        with pytest.raises(ValueError, match="not part of this level"):
            paired_level.slither_number(Slither(color=SlitherColor.RED))

    def test_hole_accepts_field_names_and_aliases(self) -> None:
        by_name = Hole(color=SlitherColor.RED, position=Cell(x=0, y=0), slither_id="a")
        by_alias = Hole.model_validate(
            {"color": "Red", "position": {"x": 0, "y": 0}, "slitherId": "a"}
        )
        assert by_name == by_alias
