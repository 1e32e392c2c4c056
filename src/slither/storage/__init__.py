"""Level file storage: JSON persistence and the level browser."""

from slither.storage.browser import LevelEntry, scan_levels
from slither.storage.service import LevelPersistence, LoadResult, SaveResult

__all__ = [
    "LevelEntry",
    "LevelPersistence",
    "LoadResult",
    "SaveResult",
    "scan_levels",
]
