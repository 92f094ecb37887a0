"""Authoritative in-memory layout store for an edit session."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from mirrorboard.core.collision import find_collisions, in_bounds, is_free
from mirrorboard.core.models import (
    AddResult,
    DashboardLayout,
    GridPosition,
    MoveOutcome,
    MoveResult,
    PlacementOutcome,
    WidgetInstance,
    default_layout,
)
from mirrorboard.core.placement import find_placement

logger = logging.getLogger(__name__)


class LayoutStore:
    """Sole mutator of a dashboard layout.

    Every public mutation keeps the no-overlap invariant: after any call no two
    widgets share cell area and every widget lies inside the grid. Rejections
    are reported through return values, never exceptions.
    """

    def __init__(
        self,
        layout: DashboardLayout | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._layout = layout if layout is not None else default_layout()
        self._clock = clock
        self.repaired: list[str] = []
        self.dropped: list[str] = []
        self._normalize()

    @property
    def layout(self) -> DashboardLayout:
        """Live layout; read it, mutate only through the store."""
        return self._layout

    @property
    def grid_columns(self) -> int:
        return self._layout.grid_columns

    @property
    def grid_rows(self) -> int:
        return self._layout.grid_rows

    @property
    def widgets(self) -> tuple[WidgetInstance, ...]:
        return tuple(self._layout.widgets)

    def get(self, instance_id: str) -> WidgetInstance | None:
        return self._layout.by_id(instance_id)

    def snapshot(self) -> DashboardLayout:
        """Independent copy of the current layout."""
        return self._layout.copy()

    def add_widget(
        self,
        widget_id: str,
        width: int,
        height: int,
        config: dict[str, Any] | None = None,
    ) -> AddResult:
        """Place a new widget at the first free slot."""
        position = find_placement(self._layout, width, height)
        if position is None:
            logger.info(
                "layout_add_no_space widget=%s size=%dx%d grid=%dx%d",
                widget_id,
                width,
                height,
                self.grid_columns,
                self.grid_rows,
            )
            return AddResult(outcome=PlacementOutcome.NO_SPACE)
        instance = WidgetInstance(
            id=self._new_instance_id(widget_id),
            widget_id=widget_id,
            position=position,
            config=dict(config or {}),
        )
        self._layout.widgets.append(instance)
        logger.debug("layout_add id=%s position=%s", instance.id, position)
        return AddResult(outcome=PlacementOutcome.PLACED, instance=instance)

    def move_widget(self, instance_id: str, position: GridPosition) -> MoveResult:
        """Move a widget if the target is in bounds and free of other widgets."""
        widget = self._layout.by_id(instance_id)
        if widget is None:
            logger.debug("layout_move_stale id=%s", instance_id)
            return MoveResult(outcome=MoveOutcome.STALE)
        if not in_bounds(position, self.grid_columns, self.grid_rows):
            return MoveResult(outcome=MoveOutcome.OUT_OF_BOUNDS, position=widget.position)
        blockers = find_collisions(position, self._layout.widgets, ignore_id=instance_id)
        if blockers:
            logger.debug(
                "layout_move_rejected id=%s target=%s blockers=%s",
                instance_id,
                position,
                ",".join(blocker.id for blocker in blockers),
            )
            return MoveResult(outcome=MoveOutcome.COLLISION, position=widget.position)
        widget.position = position
        return MoveResult(outcome=MoveOutcome.MOVED, position=position)

    def remove_widget(self, instance_id: str) -> bool:
        """Remove a widget; returns False when it was already gone."""
        remaining = [widget for widget in self._layout.widgets if widget.id != instance_id]
        removed = len(remaining) != len(self._layout.widgets)
        self._layout.widgets = remaining
        return removed

    def resize_grid(self, columns: int, rows: int) -> bool:
        """Change grid dimensions when every widget still fits."""
        if columns < 1 or rows < 1:
            return False
        for widget in self._layout.widgets:
            if not in_bounds(widget.position, columns, rows):
                return False
        self._layout.grid_columns = columns
        self._layout.grid_rows = rows
        return True

    def _new_instance_id(self, widget_id: str) -> str:
        stamp = int(self._clock() * 1000)
        candidate = f"{widget_id}-{stamp}"
        while self._layout.by_id(candidate) is not None:
            stamp += 1
            candidate = f"{widget_id}-{stamp}"
        return candidate

    def _normalize(self) -> None:
        """Restore the invariant on a hydrated layout.

        Widgets that fall outside the grid or overlap an earlier widget are
        re-placed first-fit; widgets with no room left are dropped.
        """
        layout = self._layout
        layout.grid_columns = max(1, layout.grid_columns)
        layout.grid_rows = max(1, layout.grid_rows)
        incoming = layout.widgets
        layout.widgets = []
        seen: set[str] = set()
        for widget in incoming:
            if widget.id in seen:
                widget.id = self._new_instance_id(widget.widget_id)
            pos = widget.position
            if in_bounds(pos, layout.grid_columns, layout.grid_rows) and is_free(pos, layout.widgets):
                layout.widgets.append(widget)
                seen.add(widget.id)
                continue
            width = min(max(1, pos.width), layout.grid_columns)
            height = min(max(1, pos.height), layout.grid_rows)
            replacement = find_placement(layout, width, height)
            if replacement is None:
                self.dropped.append(widget.id)
                logger.warning("layout_widget_dropped id=%s position=%s", widget.id, pos)
                continue
            widget.position = replacement
            layout.widgets.append(widget)
            seen.add(widget.id)
            self.repaired.append(widget.id)
            logger.warning(
                "layout_widget_repaired id=%s from=%s to=%s", widget.id, pos, replacement
            )
