"""CLI module for Slither.

Provides the command-line host for creating, inspecting, repairing,
resizing and painting levels.
"""

from __future__ import annotations

from slither.cli.main import app

__all__ = ["app"]
