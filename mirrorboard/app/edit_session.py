"""Edit-mode session tying the layout store, drag flow and persistence together."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mirrorboard.app.services.drag_flow import DragActionResult, DragController, DragPhase
from mirrorboard.core.models import AddResult, DashboardLayout, MoveOutcome, MoveResult
from mirrorboard.core.registry import WidgetType, WidgetTypeRegistry
from mirrorboard.core.store import LayoutStore
from mirrorboard.infra.errors import WidgetRequestError
from mirrorboard.persistence.service import LayoutPersistenceService
from mirrorboard.ui_runtime.grid_tracks import GeometryProvider

logger = logging.getLogger(__name__)


class EditSession:
    """Owns one dashboard layout for the lifetime of a view.

    Structural edits are only accepted while edit mode is active. Leaving edit
    mode saves the layout; a failed save keeps the in-memory edits and the
    ``dirty`` flag so the caller can retry.
    """

    def __init__(
        self,
        store: LayoutStore,
        registry: WidgetTypeRegistry,
        persistence: LayoutPersistenceService,
        geometry: GeometryProvider,
    ) -> None:
        self._store = store
        self._registry = registry
        self._persistence = persistence
        self._drag = DragController(store, geometry)
        self._edit_mode = False
        self._dirty = False
        self.status = ""
        if store.repaired or store.dropped:
            # Repaired positions differ from the stored layout.
            self._dirty = True
        for widget in store.widgets:
            if widget.widget_id not in registry:
                logger.warning("session_unknown_widget_type id=%s type=%s", widget.id, widget.widget_id)

    @classmethod
    def open(
        cls,
        registry: WidgetTypeRegistry,
        persistence: LayoutPersistenceService,
        geometry: GeometryProvider,
    ) -> EditSession:
        """Hydrate a session from the backend (or the default board)."""
        return cls(LayoutStore(persistence.load()), registry, persistence, geometry)

    @property
    def store(self) -> LayoutStore:
        return self._store

    @property
    def layout(self) -> DashboardLayout:
        return self._store.layout

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def dragging(self) -> bool:
        return self._drag.phase is DragPhase.DRAGGING

    def enter_edit_mode(self) -> None:
        self._edit_mode = True
        self.status = "Editing layout."

    def exit_edit_mode(self) -> bool:
        """Leave edit mode and persist the layout; returns the save result."""
        self._edit_mode = False
        return self.save()

    def toggle_edit_mode(self) -> bool:
        if self._edit_mode:
            return self.exit_edit_mode()
        self.enter_edit_mode()
        return True

    def save(self) -> bool:
        saved = self._persistence.save(self._store.layout)
        if saved:
            self._dirty = False
            self.status = "Layout saved."
        else:
            self.status = "Could not save layout; changes are kept. Try again later."
        return saved

    def add_widget(self, type_id: str) -> AddResult:
        """Add a widget of a registered type at its default size.

        Raises ``WidgetRequestError`` for requests the grid can never satisfy
        (unknown type, not in edit mode, size invalid for this grid). A full
        grid is reported through the returned result instead.
        """
        if not self._edit_mode:
            raise WidgetRequestError("Widgets can only be added in edit mode.")
        widget_type = self._registry.require(type_id)
        self._validate_size(widget_type)
        size = widget_type.default_size
        result = self._store.add_widget(widget_type.id, size.width, size.height)
        if result.placed:
            self._dirty = True
            self.status = f"Added {widget_type.name}."
        else:
            self.status = f"No space available for {widget_type.name}."
        return result

    def remove_widget(self, instance_id: str) -> bool:
        if not self._edit_mode:
            return False
        removed = self._store.remove_widget(instance_id)
        if removed:
            self._dirty = True
            self.status = "Widget removed."
        return removed

    def move_widget(self, instance_id: str, x: int, y: int) -> MoveResult:
        """Move a widget to a top-left cell without a pointer drag.

        Raises ``WidgetRequestError`` outside edit mode; ``STALE`` is reserved
        for ids that are no longer on the board.
        """
        if not self._edit_mode:
            raise WidgetRequestError("Widgets can only be moved in edit mode.")
        widget = self._store.get(instance_id)
        if widget is None:
            self.status = f"No widget '{instance_id}'."
            return MoveResult(outcome=MoveOutcome.STALE)
        result = self._store.move_widget(instance_id, widget.position.moved_to(x, y))
        if result.accepted:
            self._dirty = True
            self.status = "Widget moved."
        elif result.outcome is MoveOutcome.COLLISION:
            self.status = "Move rejected: overlaps another widget."
        else:
            self.status = "Move rejected: outside the grid."
        return result

    def resize_grid(self, columns: int, rows: int) -> bool:
        if not self._edit_mode:
            return False
        if not self._store.resize_grid(columns, rows):
            self.status = f"Grid cannot become {columns}x{rows} without displacing widgets."
            return False
        self._dirty = True
        self.status = f"Grid resized to {columns}x{rows}."
        return True

    def on_pointer_down(
        self,
        x: float,
        y: float,
        *,
        instance_id: str | None = None,
        target_tags: Iterable[str] = (),
    ) -> DragActionResult:
        result = self._drag.on_pointer_down(
            x, y, edit_mode=self._edit_mode, instance_id=instance_id, target_tags=target_tags
        )
        self._apply_status(result)
        return result

    def on_pointer_move(self, x: float, y: float) -> DragActionResult:
        return self._drag.on_pointer_move(x, y)

    def on_pointer_release(self, x: float, y: float) -> DragActionResult:
        result = self._drag.on_pointer_release(x, y)
        if result.move is not None and result.move.accepted:
            self._dirty = True
        self._apply_status(result)
        return result

    def _validate_size(self, widget_type: WidgetType) -> None:
        size = widget_type.default_size
        if size.width < widget_type.min_size.width or size.height < widget_type.min_size.height:
            raise WidgetRequestError(f"{widget_type.name} is smaller than its minimum size.")
        if size.width > self._store.grid_columns or size.height > self._store.grid_rows:
            raise WidgetRequestError(
                f"{widget_type.name} ({size.width}x{size.height}) does not fit a "
                f"{self._store.grid_columns}x{self._store.grid_rows} grid."
            )

    def _apply_status(self, result: DragActionResult) -> None:
        if result.status is not None:
            self.status = result.status
