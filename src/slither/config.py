"""Slither configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from pathlib import Path
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # New level defaults
    DEFAULT_GRID_WIDTH: int = 5
    DEFAULT_GRID_HEIGHT: int = 8

    # Resize policy enforced by the editing tools (inclusive)
    MIN_GRID_SIZE: int = 3
    MAX_GRID_SIZE: int = 20

    # Storage
    LEVELS_DIR: Path = Path("levels")
    LAST_LEVEL_FILE: Path = Path(".slither_last_level")
    JSON_INDENT: int = 2

    @model_validator(mode="after")
    def _validate_grid_policy(self) -> Self:
        if self.MIN_GRID_SIZE < 1:
            raise ValueError("MIN_GRID_SIZE must be at least 1")
        if self.MIN_GRID_SIZE > self.MAX_GRID_SIZE:
            raise ValueError(
                f"MIN_GRID_SIZE ({self.MIN_GRID_SIZE}) must not exceed "
                f"MAX_GRID_SIZE ({self.MAX_GRID_SIZE})"
            )
        return self

    def is_allowed_grid_size(self, width: int, height: int) -> bool:
        """Check a grid size against the editor resize policy.

        Args:
            width: Requested grid width.
            height: Requested grid height.

        Returns:
            True if both dimensions lie within [MIN_GRID_SIZE, MAX_GRID_SIZE].
        """
        low, high = self.MIN_GRID_SIZE, self.MAX_GRID_SIZE
        return low <= width <= high and low <= height <= high


# Singleton instance for import convenience
settings = Settings()
