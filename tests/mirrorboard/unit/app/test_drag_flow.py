from __future__ import annotations

from mirrorboard.app.services.drag_flow import DragController, DragPhase
from mirrorboard.core.models import GridPosition, MoveOutcome
from mirrorboard.core.store import LayoutStore
from mirrorboard.ui_runtime.grid_tracks import uniform_metrics

# Centre of cell (0, 0) for the shared 100x80 px geometry at origin (20, 40).
CELL_0_X = 70.0
CELL_0_Y = 80.0


def _controller(layout_factory, geometry) -> tuple[DragController, LayoutStore]:
    store = LayoutStore(layout_factory(("w", "weather", 0, 0, 1, 1), ("cal", "calendar", 2, 0, 2, 2)))
    return DragController(store, geometry), store


def test_drag_previews_without_touching_store_then_commits(layout_factory, geometry) -> None:
    controller, store = _controller(layout_factory, geometry)

    down = controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True)
    assert down.handled
    assert controller.phase is DragPhase.DRAGGING
    assert controller.held.grab_dx == 50.0 and controller.held.grab_dy == 40.0

    moved = controller.on_pointer_move(CELL_0_X + 110, CELL_0_Y + 90)
    assert moved.preview == GridPosition(1, 1, 1, 1)
    assert store.get("w").position == GridPosition(0, 0, 1, 1)  # type: ignore[union-attr]

    released = controller.on_pointer_release(CELL_0_X + 110, CELL_0_Y + 90)
    assert released.move is not None and released.move.outcome is MoveOutcome.MOVED
    assert released.status == "Widget moved."
    assert store.get("w").position == GridPosition(1, 1, 1, 1)  # type: ignore[union-attr]
    assert controller.phase is DragPhase.IDLE


def test_drop_onto_another_widget_reverts(layout_factory, geometry) -> None:
    controller, store = _controller(layout_factory, geometry)
    controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True)

    released = controller.on_pointer_release(CELL_0_X + 220, CELL_0_Y)

    assert released.move is not None and released.move.outcome is MoveOutcome.COLLISION
    assert released.preview == GridPosition(0, 0, 1, 1)
    assert released.status == "Drop rejected: overlaps another widget."
    assert store.get("w").position == GridPosition(0, 0, 1, 1)  # type: ignore[union-attr]


def test_pointer_down_ignored_outside_edit_mode_or_on_controls(layout_factory, geometry) -> None:
    controller, _ = _controller(layout_factory, geometry)

    assert not controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=False).handled
    assert not controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True, target_tags=("BUTTON", "div")).handled
    assert not controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True, target_tags=("a",)).handled
    assert controller.phase is DragPhase.IDLE


def test_pointer_down_misses_empty_cells_and_gaps(layout_factory, geometry) -> None:
    controller, _ = _controller(layout_factory, geometry)
    assert not controller.on_pointer_down(CELL_0_X + 110, CELL_0_Y, edit_mode=True).handled
    assert not controller.on_pointer_down(CELL_0_X + 55, CELL_0_Y, edit_mode=True).handled


def test_host_supplied_instance_id_skips_hit_testing(layout_factory, geometry) -> None:
    controller, _ = _controller(layout_factory, geometry)
    result = controller.on_pointer_down(5.0, 5.0, edit_mode=True, instance_id="cal")
    assert result.handled
    assert controller.held.instance_id == "cal"
    assert not controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True).handled


def test_release_re_measures_tracks(layout_factory, geometry) -> None:
    controller, store = _controller(layout_factory, geometry)
    controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True)

    geometry.metrics = uniform_metrics(6, 4, cell_width=50.0, cell_height=40.0)
    released = controller.on_pointer_release(210.0, 120.0)

    assert released.move is not None and released.move.accepted
    assert store.get("w").position == GridPosition(3, 2, 1, 1)  # type: ignore[union-attr]


def test_widget_removed_mid_drag_is_stale(layout_factory, geometry) -> None:
    controller, store = _controller(layout_factory, geometry)
    controller.on_pointer_down(CELL_0_X, CELL_0_Y, edit_mode=True)
    store.remove_widget("w")

    released = controller.on_pointer_release(CELL_0_X + 110, CELL_0_Y)

    assert released.move is not None and released.move.outcome is MoveOutcome.STALE
    assert released.status == "Widget no longer exists."
    assert controller.phase is DragPhase.IDLE


def test_idle_pointer_events_are_not_handled(layout_factory, geometry) -> None:
    controller, _ = _controller(layout_factory, geometry)
    assert not controller.on_pointer_move(CELL_0_X, CELL_0_Y).handled
    assert not controller.on_pointer_release(CELL_0_X, CELL_0_Y).handled
