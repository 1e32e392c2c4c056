"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest

from slither.config import Settings
from slither.editor.placement import PlacementEditor
from slither.editor.session import EditingSession, Tool
from slither.geometry.primitives import Cell
from slither.level.models import Hole, LevelData, Slither, SlitherColor
from slither.level.store import LevelStore
from slither.utils.logging import clear_correlation_context, configure_logging


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test in its own directory so the last-level file stays local."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


def cells(*coords: tuple[int, int]) -> list[Cell]:
    """Build a list of cells from (x, y) tuples."""
    return [Cell(x=x, y=y) for x, y in coords]


@pytest.fixture
def make_slither() -> Callable[..., Slither]:
    """Factory for slithers from coordinate tuples."""

    def _make(
        body: Sequence[tuple[int, int]],
        color: SlitherColor = SlitherColor.RED,
        slither_id: str | None = None,
    ) -> Slither:
        slither = Slither(color=color, body_positions=cells(*body))
        if slither_id is not None:
            slither.id = slither_id
        return slither

    return _make


@pytest.fixture
def paired_level() -> LevelData:
    """A valid 5x8 level with one red slither at (1,0)-(1,2) and its hole at (3,3)."""
    slither = Slither(
        id="red-1",
        color=SlitherColor.RED,
        body_positions=cells((1, 0), (1, 1), (1, 2)),
    )
    hole = Hole(color=SlitherColor.RED, position=Cell(x=3, y=3), slither_id="red-1")
    return LevelData(width=5, height=8, slithers=[slither], holes=[hole])


@pytest.fixture
def store() -> LevelStore:
    """An empty 5x8 level store."""
    return LevelStore.new(5, 8)


@pytest.fixture
def editor(store: LevelStore, test_settings: Settings) -> PlacementEditor:
    """An editor over an empty 5x8 level with the slither tool active."""
    session = EditingSession(tool=Tool.SLITHER, color=SlitherColor.BLUE)
    return PlacementEditor(store, session, config=test_settings)
