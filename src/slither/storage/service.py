"""Level file persistence.

Reads and writes levels in the on-disk JSON shape::

    {
      "gridWidth": 5, "gridHeight": 8,
      "slithers": [{"id": "...", "color": "Red",
                    "bodyPositions": [{"x": 0, "y": 0}, ...],
                    "interactors": [{"Type": "ChainInteractor", "hitCount": 1}]}],
      "holes": [{"color": "Red", "position": {"x": 0, "y": 2}, "slitherId": "..."}]
    }

Loading repairs the pairing and reports what it fixed. Saving refuses to
write a level with pairing violations unless the caller allows it. Any I/O
or decoding failure raises ``SerializationError`` and leaves the caller's
in-memory level alone.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from slither.config import Settings, settings
from slither.level.exceptions import LevelError, SerializationError
from slither.level.models import LevelData
from slither.level.pairing import PairingValidator, Violation
from slither.level.store import LevelStore
from slither.utils.logging import get_logger

logger = get_logger(__name__)


class SaveResult(BaseModel):
    """Outcome of a save request.

    Attributes:
        saved: Whether the file was written.
        path: Target path.
        violations: Pairing violations found before saving. When non-empty
            and ``saved`` is False, the caller may retry with
            ``allow_violations=True``.
    """

    saved: bool
    path: Path
    violations: list[Violation] = Field(default_factory=list)


class LoadResult(BaseModel):
    """A loaded (and repaired) level plus the violations that were fixed."""

    level: LevelData
    path: Path
    violations: list[Violation] = Field(default_factory=list)

    @property
    def was_repaired(self) -> bool:
        return bool(self.violations)


class LevelPersistence:
    """Saves and loads level files and remembers the last one used.

    Usage:
        persistence = LevelPersistence()
        result = persistence.save(level, Path("levels/level_01.json"))
        if not result.saved:
            warn(describe_violations(result.violations))
            persistence.save(level, result.path, allow_violations=True)

        loaded = persistence.load(Path("levels/level_01.json"))
        editor.replace_level(loaded.level)
    """

    def __init__(
        self,
        validator: PairingValidator | None = None,
        *,
        config: Settings | None = None,
        last_level_file: Path | None = None,
    ) -> None:
        """Initialize persistence.

        Args:
            validator: Validator used for save checks and load repair.
            config: Settings supplying JSON indentation and new-level size.
            last_level_file: File recording the last saved or loaded path.
                Defaults to ``LAST_LEVEL_FILE`` from settings.
        """
        self.validator = validator or PairingValidator()
        self._config = config or settings
        self.last_level_file = last_level_file or self._config.LAST_LEVEL_FILE

    def new_level(self) -> LevelData:
        """Create an empty level of the configured default size."""
        return LevelData(
            width=self._config.DEFAULT_GRID_WIDTH,
            height=self._config.DEFAULT_GRID_HEIGHT,
        )

    def save(
        self, level: LevelData, path: Path | str, *, allow_violations: bool = False
    ) -> SaveResult:
        """Write a level to disk.

        Args:
            level: Level to save.
            path: Target file. Parent directories are created.
            allow_violations: Write even if the pairing is broken.

        Returns:
            SaveResult; ``saved`` is False only when violations block it.

        Raises:
            SerializationError: If the file cannot be written.
        """
        path = Path(path)
        violations = self.validator.validate(level)
        if violations and not allow_violations:
            logger.warning(
                "Save blocked by pairing violations",
                path=str(path),
                violations=len(violations),
            )
            return SaveResult(saved=False, path=path, violations=violations)

        payload = json.dumps(level.to_json_dict(), indent=self._config.JSON_INDENT)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(payload, encoding="utf-8")
            temp_path.replace(path)
        except OSError as e:
            logger.error("Failed to save level", path=str(path), error=str(e))
            self._discard_temp(temp_path)
            raise SerializationError(f"Cannot write level file: {e}", path) from e

        self.remember(path)
        logger.info(
            "Level saved",
            path=str(path),
            slithers=len(level.slithers),
            holes=len(level.holes),
            violations=len(violations),
        )
        return SaveResult(saved=True, path=path, violations=violations)

    @staticmethod
    def _discard_temp(temp_path: Path) -> None:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(
                "Could not remove temporary file", file=str(temp_path), error=str(e)
            )

    def load(self, path: Path | str) -> LoadResult:
        """Read a level from disk and repair its pairing.

        An empty or whitespace-only file yields a new empty level.

        Args:
            path: Level file to read.

        Returns:
            LoadResult with the repaired level and the violations found.

        Raises:
            SerializationError: If the file is missing or unreadable, is not
                valid JSON, does not match the level shape, holds an
                interactor with a missing or unknown ``Type``, or has an
                unsound layout (see ``parse``).
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Failed to read level", path=str(path), error=str(e))
            raise SerializationError(f"Cannot read level file: {e}", path) from e

        if not text.strip():
            logger.warning("Level file is empty; starting a new level", path=str(path))
            level = self.new_level()
            self.remember(path)
            return LoadResult(level=level, path=path)

        level = self.parse(text, path)
        violations = self.validator.repair(level)
        if violations:
            logger.warning(
                "Level repaired on load",
                path=str(path),
                violations=[v.describe() for v in violations],
            )

        self.remember(path)
        logger.info(
            "Level loaded",
            path=str(path),
            size=(level.width, level.height),
            slithers=len(level.slithers),
            holes=len(level.holes),
        )
        return LoadResult(level=level, path=path, violations=violations)

    @staticmethod
    def parse(text: str, path: Path | str | None = None) -> LevelData:
        """Decode level JSON without repairing it.

        Besides the JSON shape, the layout must be sound: every slither has
        at least 2 connected, distinct cells inside the grid, every hole is
        inside the grid, and no two segments or holes share a cell. Pairing
        problems are left for ``load`` to repair.

        Raises:
            SerializationError: If the text is not a valid level document.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Invalid JSON: {e}", path) from e
        if not isinstance(data, dict):
            raise SerializationError("Level document must be a JSON object", path)
        try:
            level = LevelData.model_validate(data)
        except ValidationError as e:
            raise SerializationError(f"Invalid level data: {e}", path) from e
        try:
            LevelStore(level).check_structure()
        except LevelError as e:
            raise SerializationError(f"Invalid level layout: {e}", path) from e
        return level

    # -------------------------------------------------------------------------
    # Last level memory
    # -------------------------------------------------------------------------

    def remember(self, path: Path) -> None:
        """Record a level path as the last one used."""
        try:
            self.last_level_file.write_text(str(path.resolve()), encoding="utf-8")
        except OSError as e:
            logger.warning(
                "Could not record last level",
                file=str(self.last_level_file),
                error=str(e),
            )

    def last_level_path(self) -> Path | None:
        """Return the last saved or loaded level, if it still exists.

        A stale entry (the level file was deleted) is cleared.
        """
        if not self.last_level_file.exists():
            return None
        recorded = self.last_level_file.read_text(encoding="utf-8").strip()
        if not recorded:
            return None
        path = Path(recorded)
        if path.exists():
            return path
        logger.info("Last level no longer exists", path=recorded)
        self.forget()
        return None

    def forget(self) -> None:
        """Clear the last-level record."""
        self.last_level_file.unlink(missing_ok=True)
