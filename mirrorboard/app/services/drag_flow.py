"""Pointer-driven drag interaction for the layout editor."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from mirrorboard.core.models import GridPosition, MoveOutcome, MoveResult
from mirrorboard.core.occupancy import OccupancyGrid
from mirrorboard.core.store import LayoutStore
from mirrorboard.ui_runtime.grid_tracks import (
    GeometryProvider,
    TrackMetrics,
    cell_at_point,
    cell_rect,
    resolve_cell,
)

logger = logging.getLogger(__name__)

INTERACTIVE_TAGS: frozenset[str] = frozenset({"button", "input", "select", "textarea", "a"})


class DragPhase(StrEnum):
    IDLE = "IDLE"
    DRAGGING = "DRAGGING"


@dataclass(frozen=True, slots=True)
class HeldWidgetState:
    """Widget currently held by the pointer."""

    instance_id: str | None = None
    origin: GridPosition | None = None
    grab_dx: float = 0.0
    grab_dy: float = 0.0
    preview: GridPosition | None = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self.instance_id is None else DragPhase.DRAGGING


IDLE_STATE = HeldWidgetState()


@dataclass(frozen=True, slots=True)
class DragActionResult:
    """Outcome of a pointer event."""

    handled: bool
    preview: GridPosition | None = None
    move: MoveResult | None = None
    status: str | None = None


class DragController:
    """Idle/Dragging state machine over a layout store.

    Pointer moves only update ``preview``; the store changes once, on release.
    """

    def __init__(self, store: LayoutStore, geometry: GeometryProvider) -> None:
        self._store = store
        self._geometry = geometry
        self._held = IDLE_STATE

    @property
    def held(self) -> HeldWidgetState:
        return self._held

    @property
    def phase(self) -> DragPhase:
        return self._held.phase

    def on_pointer_down(
        self,
        x: float,
        y: float,
        *,
        edit_mode: bool,
        instance_id: str | None = None,
        target_tags: Iterable[str] = (),
    ) -> DragActionResult:
        """Start a drag on the widget under the pointer.

        ``target_tags`` lists element tags from the event target up to the
        widget surface; presses that land on interactive children are left to
        the widget. ``instance_id`` may be supplied by hosts that already know
        the pressed widget; otherwise the widget is hit-tested from the grid.
        """
        if not edit_mode or self._held.phase is DragPhase.DRAGGING:
            return DragActionResult(handled=False)
        if any(tag.strip().lower() in INTERACTIVE_TAGS for tag in target_tags):
            return DragActionResult(handled=False)
        metrics = self._geometry.measure()
        if instance_id is None:
            instance_id = self._widget_at(metrics, x, y)
        widget = self._store.get(instance_id) if instance_id is not None else None
        if widget is None:
            return DragActionResult(handled=False)
        corner = cell_rect(widget.position, metrics)
        self._held = HeldWidgetState(
            instance_id=widget.id,
            origin=widget.position,
            grab_dx=x - corner.x,
            grab_dy=y - corner.y,
            preview=widget.position,
        )
        logger.debug("drag_start id=%s origin=%s", widget.id, widget.position)
        return DragActionResult(handled=True, preview=widget.position, status=f"Moving {widget.widget_id}.")

    def on_pointer_move(self, x: float, y: float) -> DragActionResult:
        """Refresh the snapped preview; the layout store is not touched."""
        if self._held.phase is DragPhase.IDLE:
            return DragActionResult(handled=False)
        preview = self._snapped(x, y)
        if preview is None:
            return DragActionResult(handled=True, preview=self._held.preview)
        if preview != self._held.preview:
            self._held = HeldWidgetState(
                instance_id=self._held.instance_id,
                origin=self._held.origin,
                grab_dx=self._held.grab_dx,
                grab_dy=self._held.grab_dy,
                preview=preview,
            )
        return DragActionResult(handled=True, preview=preview)

    def on_pointer_release(self, x: float, y: float) -> DragActionResult:
        """Commit the drop through the layout store and return to idle."""
        held = self._held
        if held.phase is DragPhase.IDLE or held.instance_id is None:
            return DragActionResult(handled=False)
        self._held = IDLE_STATE
        target = self._snapped(x, y, held=held)
        if target is None:
            return DragActionResult(
                handled=True,
                move=MoveResult(outcome=MoveOutcome.STALE),
                status="Widget no longer exists.",
            )
        result = self._store.move_widget(held.instance_id, target)
        logger.debug("drag_drop id=%s target=%s outcome=%s", held.instance_id, target, result.outcome)
        return DragActionResult(
            handled=True,
            preview=result.position,
            move=result,
            status=_drop_status(result),
        )

    def _snapped(self, x: float, y: float, held: HeldWidgetState | None = None) -> GridPosition | None:
        held = held or self._held
        if held.instance_id is None:
            return None
        widget = self._store.get(held.instance_id)
        if widget is None:
            return None
        size = widget.position
        # Live re-measure: tracks change with window size and content.
        metrics = self._geometry.measure()
        cell = resolve_cell(
            x - held.grab_dx,
            y - held.grab_dy,
            metrics,
            grid_columns=self._store.grid_columns,
            grid_rows=self._store.grid_rows,
            width=size.width,
            height=size.height,
        )
        return size.moved_to(cell.col, cell.row)

    def _widget_at(self, metrics: TrackMetrics, x: float, y: float) -> str | None:
        cell = cell_at_point(
            x,
            y,
            metrics,
            grid_columns=self._store.grid_columns,
            grid_rows=self._store.grid_rows,
        )
        if cell is None:
            return None
        return OccupancyGrid.from_layout(self._store.layout).widget_at(cell.col, cell.row)


def _drop_status(result: MoveResult) -> str:
    if result.outcome is MoveOutcome.MOVED:
        return "Widget moved."
    if result.outcome is MoveOutcome.COLLISION:
        return "Drop rejected: overlaps another widget."
    if result.outcome is MoveOutcome.OUT_OF_BOUNDS:
        return "Drop rejected: outside the grid."
    return "Widget no longer exists."
