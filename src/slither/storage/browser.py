"""Level file discovery for a host's level browser."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from slither.config import settings
from slither.utils.logging import get_logger

logger = get_logger(__name__)


class LevelEntry(NamedTuple):
    """A level file found on disk.

    Attributes:
        path: Location of the file.
        modified: Last modification time.
    """

    path: Path
    modified: datetime

    @property
    def name(self) -> str:
        """File name without the .json extension."""
        return self.path.stem


def scan_levels(*directories: Path | str) -> list[LevelEntry]:
    """Find level files under one or more directories.

    Searches recursively for ``*.json`` files. Missing directories are
    skipped. A file reachable from several directories is listed once.

    Args:
        *directories: Directories to scan. Defaults to ``LEVELS_DIR``.

    Returns:
        Entries sorted by modification time, most recent first.
    """
    roots = [Path(d) for d in directories] or [settings.LEVELS_DIR]

    seen: set[Path] = set()
    entries: list[LevelEntry] = []
    for root in roots:
        if not root.is_dir():
            logger.debug("Level directory not found", directory=str(root))
            continue
        for path in root.rglob("*.json"):
            resolved = path.resolve()
            if resolved in seen or not path.is_file():
                continue
            seen.add(resolved)
            modified = datetime.fromtimestamp(path.stat().st_mtime)
            entries.append(LevelEntry(path=path, modified=modified))

    entries.sort(key=lambda entry: entry.modified, reverse=True)
    logger.debug("Scanned level directories", found=len(entries))
    return entries
