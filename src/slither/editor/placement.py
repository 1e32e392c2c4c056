"""Interactive placement editor.

``PlacementEditor`` turns host gestures (clicks, pointer moves, releases,
cancels and explicit commands) into level mutations. It owns the gesture
state machine:

    Idle --click empty cell (slither tool)--> PaintingPath
    Idle --click head/tail (move tool)------> DraggingHandle
    Idle --click hole (hole or move tool)---> DraggingHole

Every transient state returns to Idle on commit, on cancel, or on an
invalid continuation.

No operation raises for a refused request. A ``LevelError`` coming from
the store or a move rule is turned into a rejected ``EditOutcome`` naming
the rule, and the committed level is left exactly as it was.
"""

from __future__ import annotations

from slither.config import Settings, settings
from slither.editor.moves import (
    ExtensionRule,
    HandleEnd,
    end_cell,
    extrapolate_segment,
    plan_extension,
    plan_removal,
)
from slither.editor.outcome import EditOutcome, LevelSummary, SlitherSummary
from slither.editor.session import (
    DraggingHandle,
    DraggingHole,
    EditingSession,
    Idle,
    PaintingPath,
    Tool,
)
from slither.geometry.grid import direction_between, is_adjacent
from slither.geometry.primitives import Cell, Direction
from slither.level.exceptions import (
    InvalidGridSizeError,
    InvalidHitCountError,
    InvalidPositionError,
    LevelError,
    UnknownEntityError,
)
from slither.level.models import (
    ChainInteractor,
    Hole,
    LevelData,
    Slither,
    SlitherColor,
    make_interactor,
)
from slither.level.resize import ResizeManager
from slither.level.store import HoleOccupant, LevelStore, SlitherSegment
from slither.utils.logging import get_logger

logger = get_logger(__name__)


class PlacementEditor:
    """Gesture state machine and command surface over a LevelStore.

    Usage:
        editor = PlacementEditor()
        editor.select_tool(Tool.SLITHER)
        editor.click(Cell(x=0, y=0))
        editor.click(Cell(x=0, y=1))
        outcome = editor.click(Cell(x=4, y=7))  # not adjacent: commits
        outcome.slither_id  # id of the new 2-segment slither
    """

    def __init__(
        self,
        store: LevelStore | None = None,
        session: EditingSession | None = None,
        *,
        resize_manager: ResizeManager | None = None,
        config: Settings | None = None,
    ) -> None:
        """Initialize the editor.

        Args:
            store: Store holding the level being edited. Defaults to an
                empty level of the configured default size.
            session: Session context. Defaults to a fresh idle session.
            resize_manager: Resize implementation (shares the store's
                validator by default).
            config: Settings supplying the resize policy.
        """
        self._config = config or settings
        self.store = store or LevelStore.new(
            self._config.DEFAULT_GRID_WIDTH, self._config.DEFAULT_GRID_HEIGHT
        )
        self.session = session or EditingSession()
        self.resize_manager = resize_manager or ResizeManager(self.store.validator)
        self._log = logger.bind(session_id=self.session.session_id)

    @property
    def level(self) -> LevelData:
        return self.store.level

    @property
    def selected_slither(self) -> Slither | None:
        return self.store.find_slither(self.session.selected_slither_id)

    # -------------------------------------------------------------------------
    # Session context
    # -------------------------------------------------------------------------

    def select_tool(self, tool: Tool) -> EditOutcome:
        """Change the active tool. Any gesture in progress continues."""
        self.session.tool = tool
        self._log.debug("Tool selected", tool=tool.value)
        return EditOutcome.no_op(f"Tool changed to {tool.value}")

    def select_color(self, color: SlitherColor) -> EditOutcome:
        """Change the colour used for newly painted slithers."""
        self.session.color = color
        self._log.debug("Color selected", color=color.value)
        return EditOutcome.no_op(f"Color changed to {color.value}")

    def select_slither(self, slither_id: str | None) -> EditOutcome:
        """Select a slither by id, or clear the selection with None."""
        if slither_id is None:
            self.session.selected_slither_id = None
            return EditOutcome.no_op("Selection cleared")
        try:
            slither = self.store.get_slither(slither_id)
        except LevelError as e:
            return self._reject(e, "select")
        self.session.selected_slither_id = slither.id
        return EditOutcome.no_op("Slither selected", slither_id=slither.id)

    # -------------------------------------------------------------------------
    # Gestures
    # -------------------------------------------------------------------------

    def click(self, cell: Cell) -> EditOutcome:
        """Handle a click on a grid cell in the current state."""
        state = self.session.state
        if isinstance(state, PaintingPath):
            return self._continue_painting(state, cell)
        if isinstance(state, DraggingHandle):
            return self._commit_handle_drag(state, cell)
        if isinstance(state, DraggingHole):
            return self._commit_hole_drag(state, cell)
        return self._click_idle(cell)

    def pointer_move(self, cell: Cell) -> EditOutcome:
        """Update the drag preview for the cell under the pointer.

        Never mutates the level. Outside a drag this is a no-op.
        """
        state = self.session.state
        if isinstance(state, DraggingHandle):
            slither = self.store.find_slither(state.slither_id)
            if slither is None:
                self.session.state = Idle()
                return EditOutcome.no_op("Dragged slither no longer exists")
            try:
                body = plan_extension(
                    self.store, slither, cell, state.end, ExtensionRule.DRAG
                )
            except LevelError as e:
                self.session.state = state.model_copy(update={"preview": ()})
                return EditOutcome.no_op(
                    str(e),
                    reason=e.reason,
                    cell=cell,
                    preview=tuple(slither.body_positions),
                )
            preview = tuple(body)
            self.session.state = state.model_copy(update={"preview": preview})
            return EditOutcome.no_op(slither_id=slither.id, preview=preview)

        if isinstance(state, DraggingHole):
            hole = self.store.hole_at(state.origin)
            if hole is not None and self._is_valid_hole_target(hole, cell):
                self.session.state = state.model_copy(update={"preview": cell})
                return EditOutcome.no_op(preview=(cell,))
            self.session.state = state.model_copy(update={"preview": None})
            return EditOutcome.no_op("Invalid hole position", cell=cell)

        return EditOutcome.no_op()

    def release(self, cell: Cell) -> EditOutcome:
        """Handle a pointer release. Only a hole drag commits on release."""
        state = self.session.state
        if isinstance(state, DraggingHole):
            return self._commit_hole_drag(state, cell)
        return EditOutcome.no_op()

    def cancel(self) -> EditOutcome:
        """Abandon any gesture in progress without touching the level."""
        state = self.session.state
        self.session.state = Idle()
        if isinstance(state, Idle):
            return EditOutcome.no_op()
        self._log.info("Gesture cancelled", state=state.kind)
        return EditOutcome.no_op(f"Cancelled {state.kind.replace('_', ' ')}")

    def _click_idle(self, cell: Cell) -> EditOutcome:
        tool = self.session.tool
        if tool is Tool.ERASER:
            return self.erase(cell)

        if not self.store.is_within_bounds(cell):
            return self._reject(self._out_of_bounds(cell), "click")

        occupant = self.store.occupant(cell)

        if tool is Tool.SLITHER:
            if occupant is not None:
                return EditOutcome.no_op("Cell is occupied", occupant=occupant)
            self.session.state = PaintingPath(cells=(cell,))
            self._log.debug("Painting started", cell=cell.to_tuple())
            return EditOutcome.no_op("Painting started", preview=(cell,))

        if isinstance(occupant, HoleOccupant) and tool in (Tool.HOLE, Tool.MOVE):
            self.session.state = DraggingHole(origin=cell)
            self._log.debug("Hole drag started", cell=cell.to_tuple())
            return EditOutcome.no_op("Hole drag started", occupant=occupant)

        if isinstance(occupant, SlitherSegment) and not occupant.slither_id:
            return EditOutcome.no_op(
                "Slither has no id until the level is repaired", occupant=occupant
            )

        if isinstance(occupant, SlitherSegment):
            self.session.selected_slither_id = occupant.slither_id
            slither = self.store.get_slither(occupant.slither_id)
            end = _handle_at(slither, occupant.index)
            if tool is Tool.MOVE and end is not None:
                self.session.state = DraggingHandle(
                    slither_id=occupant.slither_id, end=end
                )
                self._log.debug(
                    "Handle drag started",
                    slither_id=occupant.slither_id,
                    end=end.value,
                )
                return EditOutcome.no_op(
                    f"Dragging {end.value}",
                    slither_id=occupant.slither_id,
                    occupant=occupant,
                    preview=tuple(slither.body_positions),
                )
            return EditOutcome.no_op(
                "Slither selected", slither_id=occupant.slither_id, occupant=occupant
            )

        if tool is Tool.NONE:
            self.session.selected_slither_id = None
        return EditOutcome.no_op(occupant=occupant)

    def _continue_painting(self, state: PaintingPath, cell: Cell) -> EditOutcome:
        path = state.cells
        if (
            self.store.is_within_bounds(cell)
            and is_adjacent(path[-1], cell)
            and cell not in path
            and not self.store.is_occupied(cell)
        ):
            cells = (*path, cell)
            self.session.state = PaintingPath(cells=cells)
            return EditOutcome.no_op(preview=cells)
        return self._finish_path(path)

    def finish_painting(self) -> EditOutcome:
        """End painting: commit a path of 2 or more cells, discard a shorter one."""
        state = self.session.state
        if not isinstance(state, PaintingPath):
            return EditOutcome.no_op("Not painting")
        return self._finish_path(state.cells)

    def _finish_path(self, path: tuple[Cell, ...]) -> EditOutcome:
        self.session.state = Idle()
        if len(path) < 2:
            self._log.debug("Painting discarded", cell=path[0].to_tuple())
            return EditOutcome.no_op("Path discarded")

        try:
            slither_id = self.store.add_slither(path, self.session.color)
        except LevelError as e:
            return self._reject(e, "paint")
        return EditOutcome.applied(
            f"Slither created with {len(path)} segments",
            slither_id=slither_id,
            preview=path,
        )

    def _commit_handle_drag(self, state: DraggingHandle, cell: Cell) -> EditOutcome:
        self.session.state = Idle()
        try:
            slither = self.store.get_slither(state.slither_id)
            old_body = list(slither.body_positions)
            body = plan_extension(
                self.store, slither, cell, state.end, ExtensionRule.DRAG
            )
            self.store.set_body(slither.id, body)
        except LevelError as e:
            return self._reject(e, "drag_handle")

        direction = direction_between(end_cell(old_body, state.end), cell)
        self._log.info(
            "Handle moved",
            slither_id=slither.id,
            end=state.end.value,
            cell=cell.to_tuple(),
            length=len(body),
        )
        moved = f"{state.end.value.capitalize()} moved"
        if direction is not None:
            moved = f"{moved} {direction.name.lower()}"
        if len(body) > len(old_body):
            message = (
                f"{moved} to {cell}. Slither length increased from "
                f"{len(old_body)} to {len(body)}."
            )
        else:
            freed = old_body[-1] if state.end is HandleEnd.HEAD else old_body[0]
            message = (
                f"{moved} to {cell}. {state.end.opposite.value.capitalize()} "
                f"segment at {freed} was removed to maintain length."
            )
        return EditOutcome.applied(message, slither_id=slither.id, preview=tuple(body))

    def _commit_hole_drag(self, state: DraggingHole, cell: Cell) -> EditOutcome:
        self.session.state = Idle()
        hole = self.store.hole_at(state.origin)
        try:
            if hole is None:
                raise UnknownEntityError(
                    "Dragged hole no longer exists", cell=state.origin
                )
            if cell == state.origin:
                return EditOutcome.no_op("Hole left in place")
            self.store.move_hole(hole, cell)
        except LevelError as e:
            return self._reject(e, "drag_hole")
        return EditOutcome.applied(
            f"Hole moved from {state.origin} to {cell}", slither_id=hole.slither_id
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def erase(self, cell: Cell) -> EditOutcome:
        """Clear a cell and restore the pairing.

        Erasing a slither segment removes the whole slither and its hole.
        Erasing the hole of a live slither recreates that hole at the first
        empty cell.
        """
        self._end_gesture()
        if not self.store.is_within_bounds(cell):
            return self._reject(self._out_of_bounds(cell), "erase")
        result = self.store.clear_cell(cell)
        if not result.changed:
            return EditOutcome.no_op("Cell is already empty")
        self.store.repair()
        removed = result.removed_slither
        if removed is not None and removed.id == self.session.selected_slither_id:
            self.session.selected_slither_id = None
        return EditOutcome.applied(
            f"Cleared cell {cell}",
            slither_id=removed.id if removed is not None else None,
        )

    def nudge(
        self, end: HandleEnd, direction: Direction, slither_id: str | None = None
    ) -> EditOutcome:
        """Move one end one step in a direction, keeping the length constant.

        Args:
            end: End to move.
            direction: Step direction.
            slither_id: Target slither; defaults to the selected one.
        """
        self._end_gesture()
        try:
            slither = self._target(slither_id)
            cell = end_cell(slither.body_positions, end).step(direction)
            body = plan_extension(self.store, slither, cell, end, ExtensionRule.NUDGE)
            self.store.set_body(slither.id, body)
        except LevelError as e:
            return self._reject(e, "nudge")
        self._log.info(
            "Slither nudged",
            slither_id=slither.id,
            end=end.value,
            direction=direction.name.lower(),
        )
        return EditOutcome.applied(
            f"{end.value.capitalize()} moved {direction.name.lower()} to {cell}",
            slither_id=slither.id,
            preview=tuple(body),
        )

    def add_segment(
        self, end: HandleEnd, slither_id: str | None = None
    ) -> EditOutcome:
        """Grow a slither by one cell past its head or tail."""
        self._end_gesture()
        try:
            slither = self._target(slither_id)
            cell = extrapolate_segment(slither.body_positions, end)
            body = plan_extension(self.store, slither, cell, end, ExtensionRule.GROW)
            self.store.set_body(slither.id, body)
        except LevelError as e:
            return self._reject(e, "add_segment")
        self._log.info(
            "Segment added", slither_id=slither.id, end=end.value, length=len(body)
        )
        return EditOutcome.applied(
            f"Added {end.value} segment at {cell}. "
            f"Slither length increased to {len(body)}.",
            slither_id=slither.id,
            preview=tuple(body),
        )

    def remove_segment(
        self, end: HandleEnd, slither_id: str | None = None
    ) -> EditOutcome:
        """Shrink a slither by dropping its head or tail cell."""
        self._end_gesture()
        try:
            slither = self._target(slither_id)
            body = plan_removal(slither, end)
            self.store.set_body(slither.id, body)
        except LevelError as e:
            return self._reject(e, "remove_segment")
        self._log.info(
            "Segment removed", slither_id=slither.id, end=end.value, length=len(body)
        )
        return EditOutcome.applied(
            f"Removed {end.value} segment", slither_id=slither.id, preview=tuple(body)
        )

    def delete_slither(self, slither_id: str | None = None) -> EditOutcome:
        """Delete a slither and its hole."""
        self._end_gesture()
        try:
            slither = self.store.remove_slither(self._target(slither_id).id)
        except LevelError as e:
            return self._reject(e, "delete")
        if slither.id == self.session.selected_slither_id:
            self.session.selected_slither_id = None
        return EditOutcome.applied("Slither deleted", slither_id=slither.id)

    def set_slither_color(
        self, color: SlitherColor, slither_id: str | None = None
    ) -> EditOutcome:
        """Recolour a slither; its hole follows."""
        try:
            slither = self._target(slither_id)
            old = slither.color
            self.store.set_color(slither.id, color)
        except LevelError as e:
            return self._reject(e, "set_color")
        if old is color:
            return EditOutcome.no_op("Color unchanged", slither_id=slither.id)
        self._log.info(
            "Slither recolored", slither_id=slither.id, old=old.value, new=color.value
        )
        return EditOutcome.applied(
            f"Color changed from {old.value} to {color.value}", slither_id=slither.id
        )

    def add_interactor(
        self, kind: str, hit_count: int = 1, slither_id: str | None = None
    ) -> EditOutcome:
        """Attach a Chain or Cocoon interactor.

        Args:
            kind: "chain" or "cocoon".
            hit_count: Interactions needed to clear it (at least 1).
            slither_id: Target slither; defaults to the selected one.
        """
        try:
            slither = self._target(slither_id)
            if hit_count < 1:
                raise InvalidHitCountError(
                    f"hit_count must be at least 1, got {hit_count}"
                )
            try:
                interactor = make_interactor(kind, hit_count)
            except ValueError as e:
                raise UnknownEntityError(str(e)) from e
            self.store.add_interactor(slither.id, interactor)
        except LevelError as e:
            return self._reject(e, "add_interactor")
        label = "Chain" if isinstance(interactor, ChainInteractor) else "Cocoon"
        return EditOutcome.applied(
            f"Added {label} (Hit Count: {hit_count})", slither_id=slither.id
        )

    def remove_interactor(
        self, index: int, slither_id: str | None = None
    ) -> EditOutcome:
        """Detach the interactor at an index."""
        try:
            slither = self._target(slither_id)
            interactor = self.store.remove_interactor(slither.id, index)
        except LevelError as e:
            return self._reject(e, "remove_interactor")
        return EditOutcome.applied(
            f"Removed {interactor.kind}", slither_id=slither.id
        )

    def set_hit_count(
        self, index: int, hit_count: int, slither_id: str | None = None
    ) -> EditOutcome:
        """Change the hit count of an attached interactor."""
        try:
            slither = self._target(slither_id)
            self.store.set_hit_count(slither.id, index, hit_count)
        except LevelError as e:
            return self._reject(e, "set_hit_count")
        return EditOutcome.applied(
            f"Hit count set to {hit_count}", slither_id=slither.id
        )

    # -------------------------------------------------------------------------
    # Grid size and level replacement
    # -------------------------------------------------------------------------

    def preview_resize(self, width: int, height: int) -> EditOutcome:
        """Report what a resize would drop, without changing anything."""
        try:
            self._check_grid_policy(width, height)
        except LevelError as e:
            return self._reject(e, "preview_resize")
        affected = self.resize_manager.preview_impact(self.level, width, height)
        return EditOutcome.no_op(
            f"{len(affected)} item(s) affected", affected=tuple(affected)
        )

    def resize(self, width: int, height: int) -> EditOutcome:
        """Resize the grid, dropping content outside the new bounds.

        Cancels any gesture in progress and clears the selection if the
        selected slither is deleted.
        """
        try:
            self._check_grid_policy(width, height)
        except LevelError as e:
            return self._reject(e, "resize")
        if (width, height) == (self.level.width, self.level.height):
            return EditOutcome.no_op("Grid size unchanged")

        self._end_gesture()
        affected = tuple(self.resize_manager.preview_impact(self.level, width, height))
        result = self.resize_manager.apply(self.level, width, height)
        if self.selected_slither is None:
            self.session.selected_slither_id = None
        return EditOutcome.applied(
            f"Grid resized from {result.old_size[0]}x{result.old_size[1]} "
            f"to {width}x{height}",
            affected=affected,
        )

    def replace_level(self, level: LevelData) -> EditOutcome:
        """Swap in a new or loaded level and reset the session."""
        self.store.level = level
        self.session.reset()
        self._log.info(
            "Level replaced",
            size=(level.width, level.height),
            slithers=len(level.slithers),
        )
        return EditOutcome.applied("Level replaced")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def describe_cell(self, cell: Cell) -> str:
        """Describe a cell's occupant for a hover panel."""
        if not self.store.is_within_bounds(cell):
            return "Outside grid"

        lines: list[str] = []
        slither = self.store.slither_at(cell)
        if slither is not None:
            number = self.level.slither_number(slither)
            index = slither.body_positions.index(cell)
            if index == 0:
                part = "Head"
            elif index == slither.length - 1:
                part = "Tail"
            else:
                part = "Body"
            lines.append(f"Slither #{number} - {part} (Color: {slither.color.value})")
            for interactor in slither.interactors:
                label = "Chain" if isinstance(interactor, ChainInteractor) else "Cocoon"
                lines.append(f"{label} (Hit Count: {interactor.hit_count})")

        hole = self.store.hole_at(cell)
        if hole is not None:
            lines.append(
                f"Hole (Color: {hole.color.value}, Slither ID: {hole.slither_id})"
            )

        return "\n".join(lines) if lines else "Empty cell"

    def summary(self) -> LevelSummary:
        """Summarize the level for a status panel."""
        level = self.level
        return LevelSummary(
            width=level.width,
            height=level.height,
            slither_count=len(level.slithers),
            hole_count=len(level.holes),
            violation_count=len(self.store.validator.validate(level)),
            slithers=[
                SlitherSummary(
                    number=number,
                    slither_id=slither.id,
                    color=slither.color.value,
                    length=slither.length,
                    interactors=len(slither.interactors),
                )
                for number, slither in enumerate(level.slithers, start=1)
            ],
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _target(self, slither_id: str | None) -> Slither:
        target = slither_id or self.session.selected_slither_id
        if target is None:
            raise UnknownEntityError("No slither selected")
        return self.store.get_slither(target)

    def _end_gesture(self) -> None:
        if not self.session.is_idle:
            self._log.debug("Gesture ended by command", state=self.session.state.kind)
            self.session.state = Idle()

    def _is_valid_hole_target(self, hole: Hole, cell: Cell) -> bool:
        if not self.store.is_within_bounds(cell):
            return False
        return not self.store.is_occupied_by_other(cell, hole=hole)

    def _check_grid_policy(self, width: int, height: int) -> None:
        if not self._config.is_allowed_grid_size(width, height):
            low, high = self._config.MIN_GRID_SIZE, self._config.MAX_GRID_SIZE
            raise InvalidGridSizeError(
                f"Grid size {width}x{height} is outside the allowed range "
                f"[{low}, {high}]"
            )

    def _out_of_bounds(self, cell: Cell) -> InvalidPositionError:
        return InvalidPositionError(
            f"Cell is outside the {self.level.width}x{self.level.height} grid",
            cell=cell,
        )

    def _reject(self, error: LevelError, operation: str) -> EditOutcome:
        self._log.warning(
            "Operation rejected",
            operation=operation,
            reason=error.reason.value,
            error=error.message,
            cell=error.cell.to_tuple() if error.cell is not None else None,
        )
        return EditOutcome.rejected(error)


def _handle_at(slither: Slither, index: int) -> HandleEnd | None:
    if index == 0:
        return HandleEnd.HEAD
    if index == slither.length - 1:
        return HandleEnd.TAIL
    return None
