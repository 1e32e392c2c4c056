"""Slither CLI - headless host for the level editor.

Command-line interface for creating, inspecting, repairing, resizing and
painting slither levels.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from slither import __version__
from slither.cli.render import render_grid, render_legend
from slither.config import settings
from slither.editor.placement import PlacementEditor
from slither.editor.session import EditingSession, Tool
from slither.geometry.primitives import Cell
from slither.level.models import LevelData, SlitherColor
from slither.level.pairing import PairingValidator
from slither.level.store import LevelStore
from slither.storage.browser import scan_levels
from slither.storage.service import LevelPersistence
from slither.utils.logging import (
    configure_logging,
    get_logger,
    set_correlation_context,
)

app = typer.Typer(
    name="slither",
    help="Slither: grid puzzle level editor",
    add_completion=False,
)

Verbose = Annotated[
    int,
    typer.Option("--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"),
]
JsonOutput = Annotated[bool, typer.Option("--json", help="Output as JSON")]
LevelPath = Annotated[
    Path,
    typer.Argument(dir_okay=False, help="Path to a level JSON file"),
]


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(json_output: JsonOutput = False) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"slither {__version__}")


@app.command()
def new(
    path: LevelPath,
    width: Annotated[
        int, typer.Option("--width", "-W", help="Grid width")
    ] = settings.DEFAULT_GRID_WIDTH,
    height: Annotated[
        int, typer.Option("--height", "-H", help="Grid height")
    ] = settings.DEFAULT_GRID_HEIGHT,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite an existing file")
    ] = False,
    verbose: Verbose = 0,
) -> None:
    """Create an empty level file."""
    _configure_logging(verbose)
    set_correlation_context(level_path=str(path), operation="new")
    logger = get_logger(__name__)

    try:
        if not settings.is_allowed_grid_size(width, height):
            typer.echo(
                f"Error: grid size must be between {settings.MIN_GRID_SIZE} and "
                f"{settings.MAX_GRID_SIZE}",
                err=True,
            )
            raise typer.Exit(1)
        if path.exists() and not force:
            typer.echo(f"Error: {path} already exists (use --force)", err=True)
            raise typer.Exit(1)

        LevelPersistence().save(LevelData(width=width, height=height), path)
        typer.echo(f"Created {width}x{height} level at {path}")
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception("Failed to create level")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def show(
    path: LevelPath,
    json_output: JsonOutput = False,
    verbose: Verbose = 0,
) -> None:
    """Print a level as a text grid."""
    _configure_logging(verbose)
    set_correlation_context(level_path=str(path), operation="show")
    logger = get_logger(__name__)

    try:
        loaded = LevelPersistence().load(path)
        summary = PlacementEditor(LevelStore(loaded.level)).summary()

        if json_output:
            output = {
                **summary.model_dump(mode="json"),
                "repaired": [v.describe() for v in loaded.violations],
            }
            typer.echo(json.dumps(output, indent=2))
            return

        typer.echo(f"Level {path} ({summary.width}x{summary.height})")
        for violation in loaded.violations:
            typer.echo(f"Repaired: {violation.describe()}")
        typer.echo(render_grid(loaded.level))
        legend = render_legend(loaded.level)
        if legend:
            typer.echo(legend)
    except Exception as e:
        logger.exception("Failed to show level")
        _echo_error(e, json_output)
        raise typer.Exit(1) from None


@app.command()
def validate(
    path: LevelPath,
    json_output: JsonOutput = False,
    verbose: Verbose = 0,
) -> None:
    """Check a level's slither/hole pairing without changing it."""
    _configure_logging(verbose)
    set_correlation_context(level_path=str(path), operation="validate")
    logger = get_logger(__name__)

    try:
        level = LevelPersistence.parse(path.read_text(encoding="utf-8"), path)
        violations = PairingValidator().validate(level)

        if json_output:
            output = {
                "path": str(path),
                "valid": not violations,
                "violations": [
                    {**v.model_dump(mode="json"), "message": v.describe()}
                    for v in violations
                ],
            }
            typer.echo(json.dumps(output, indent=2))
        elif violations:
            typer.echo(f"{len(violations)} issue(s) found in {path}:")
            for violation in violations:
                typer.echo(f"  - {violation.describe()}")
        else:
            typer.echo(f"{path} is valid")

        raise typer.Exit(1 if violations else 0)
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception("Validation failed")
        _echo_error(e, json_output)
        raise typer.Exit(1) from None


@app.command()
def repair(
    path: LevelPath,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the repaired level here"),
    ] = None,
    verbose: Verbose = 0,
) -> None:
    """Fix pairing issues and save the level (in place by default)."""
    _configure_logging(verbose)
    set_correlation_context(level_path=str(path), operation="repair")
    logger = get_logger(__name__)

    try:
        persistence = LevelPersistence()
        loaded = persistence.load(path)
        target = output or path

        if not loaded.violations and output is None:
            typer.echo(f"{path} has no issues")
            return

        for violation in loaded.violations:
            typer.echo(f"Fixed: {violation.describe()}")
        persistence.save(loaded.level, target)
        typer.echo(f"Saved repaired level to {target}")
    except Exception as e:
        logger.exception("Repair failed")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def resize(
    path: LevelPath,
    width: Annotated[int, typer.Argument(help="New grid width")],
    height: Annotated[int, typer.Argument(help="New grid height")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")
    ] = False,
    verbose: Verbose = 0,
) -> None:
    """Resize a level, removing anything that falls outside the new grid."""
    _configure_logging(verbose)
    set_correlation_context(level_path=str(path), operation="resize")
    logger = get_logger(__name__)

    try:
        persistence = LevelPersistence()
        editor = PlacementEditor(LevelStore(persistence.load(path).level))

        preview = editor.preview_resize(width, height)
        if preview.is_rejected:
            typer.echo(f"Error: {preview.message}", err=True)
            raise typer.Exit(1)

        if preview.affected:
            typer.echo("These items are outside the new grid and will be removed:")
            for item in preview.affected:
                typer.echo(f"  - {item.describe()}")
            if not yes and not typer.confirm("Continue?", default=False):
                typer.echo("Resize cancelled")
                return

        outcome = editor.resize(width, height)
        if outcome.is_no_op:
            typer.echo(outcome.message)
            return
        persistence.save(editor.level, path)
        typer.echo(outcome.message)
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception("Resize failed")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def paint(
    path: LevelPath,
    cells: Annotated[
        list[str], typer.Argument(help="Cells to paint in order, as X,Y")
    ],
    color: Annotated[
        str, typer.Option("--color", "-c", help="Slither color (e.g. Red)")
    ] = "Red",
    verbose: Verbose = 0,
) -> None:
    """Paint a new slither through the given cells and save the level."""
    _configure_logging(verbose)
    set_correlation_context(level_path=str(path), operation="paint")
    logger = get_logger(__name__)

    try:
        slither_color = SlitherColor.parse(color)
        points = [_parse_cell(value) for value in cells]

        persistence = LevelPersistence()
        session = EditingSession(tool=Tool.SLITHER, color=slither_color)
        editor = PlacementEditor(LevelStore(persistence.load(path).level), session)

        # Stop at the first click that leaves the editor idle: it either
        # committed the path, discarded it, or never started one.
        for index, point in enumerate(points):
            outcome = editor.click(point)
            if session.is_idle:
                if index < len(points) - 1 or outcome.is_applied:
                    typer.echo(f"Painting ended at {point}")
                break
        else:
            outcome = editor.finish_painting()

        if not outcome.is_applied:
            typer.echo(f"Error: {outcome.message or 'Path discarded'}", err=True)
            raise typer.Exit(1)

        persistence.save(editor.level, path)
        slither = editor.store.get_slither(outcome.slither_id)
        hole = editor.store.hole_for(slither.id)
        typer.echo(outcome.message)
        if hole is not None:
            typer.echo(f"Hole placed at {hole.position}")
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception("Paint failed")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command("list")
def list_levels(
    directories: Annotated[
        list[Path] | None,
        typer.Argument(help="Directories to scan (default: LEVELS_DIR)"),
    ] = None,
    json_output: JsonOutput = False,
    verbose: Verbose = 0,
) -> None:
    """List level files, most recently modified first."""
    _configure_logging(verbose)
    entries = scan_levels(*(directories or []))

    if json_output:
        output = [
            {
                "name": entry.name,
                "path": str(entry.path),
                "modified": entry.modified.isoformat(timespec="seconds"),
            }
            for entry in entries
        ]
        typer.echo(json.dumps(output, indent=2))
        return

    if not entries:
        typer.echo("No levels found")
        return
    for entry in entries:
        typer.echo(f"{entry.modified:%Y-%m-%d %H:%M}  {entry.name}  ({entry.path})")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Slither: grid puzzle level editor."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _parse_cell(value: str) -> Cell:
    """Parse "X,Y" into a Cell."""
    try:
        x, y = (int(part) for part in value.split(","))
    except ValueError:
        raise typer.BadParameter(f"Invalid cell {value!r}; expected X,Y") from None
    return Cell(x=x, y=y)


def _echo_error(error: Exception, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps({"error": str(error)}))
    else:
        typer.echo(f"Error: {error}", err=True)


if __name__ == "__main__":  # pragma: no cover
    app()
