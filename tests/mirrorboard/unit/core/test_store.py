from __future__ import annotations

import logging

from mirrorboard.core.collision import in_bounds, overlapping_pairs
from mirrorboard.core.models import GridPosition, MoveOutcome, PlacementOutcome
from mirrorboard.core.store import LayoutStore

FIXED_CLOCK = lambda: 1_700_000_000.0  # noqa: E731


def test_add_widget_places_first_fit_with_timestamped_id(layout_factory) -> None:
    store = LayoutStore(layout_factory(), clock=FIXED_CLOCK)

    weather = store.add_widget("weather", 1, 1)
    calendar = store.add_widget("calendar", 4, 4, config={"trash_day": "Tuesday"})

    assert weather.placed and weather.instance is not None
    assert weather.instance.id == "weather-1700000000000"
    assert weather.instance.position == GridPosition(0, 0, 1, 1)
    assert calendar.instance is not None
    assert calendar.instance.position == GridPosition(1, 0, 4, 4)
    assert calendar.instance.config == {"trash_day": "Tuesday"}


def test_instance_ids_stay_unique_when_clock_repeats(layout_factory) -> None:
    store = LayoutStore(layout_factory(), clock=FIXED_CLOCK)
    ids = {store.add_widget("weather", 1, 1).instance.id for _ in range(3)}  # type: ignore[union-attr]
    assert ids == {"weather-1700000000000", "weather-1700000000001", "weather-1700000000002"}


def test_add_widget_reports_no_space_without_mutation(layout_factory, caplog) -> None:
    store = LayoutStore(layout_factory(("a", "calendar", 0, 0, 6, 4)))
    before = store.snapshot()

    with caplog.at_level(logging.INFO, logger="mirrorboard.core.store"):
        result = store.add_widget("weather", 1, 1)

    assert result.outcome is PlacementOutcome.NO_SPACE
    assert result.instance is None
    assert store.layout == before
    assert "layout_add_no_space" in caplog.text


def test_move_widget_accepts_free_target(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "weather", 0, 0, 1, 1)))
    result = store.move_widget("a", GridPosition(5, 3, 1, 1))
    assert result.outcome is MoveOutcome.MOVED
    assert store.get("a").position == GridPosition(5, 3, 1, 1)  # type: ignore[union-attr]


def test_move_widget_may_overlap_its_own_old_area(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "calendar", 0, 0, 2, 2)))
    assert store.move_widget("a", GridPosition(1, 1, 2, 2)).accepted


def test_rejected_move_leaves_layout_unchanged(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "weather", 0, 0, 1, 1), ("b", "plants", 2, 0, 1, 2)))
    before = store.snapshot()

    collision = store.move_widget("a", GridPosition(2, 1, 1, 1))
    off_grid = store.move_widget("b", GridPosition(5, 3, 1, 2))

    assert collision.outcome is MoveOutcome.COLLISION
    assert collision.position == GridPosition(0, 0, 1, 1)
    assert off_grid.outcome is MoveOutcome.OUT_OF_BOUNDS
    assert off_grid.position == GridPosition(2, 0, 1, 2)
    assert store.layout == before


def test_move_of_removed_widget_is_stale(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "weather", 0, 0, 1, 1)))
    assert store.remove_widget("a")
    result = store.move_widget("a", GridPosition(1, 1, 1, 1))
    assert result.outcome is MoveOutcome.STALE
    assert not result.accepted


def test_remove_widget_is_idempotent(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "weather", 0, 0, 1, 1), ("b", "tesla", 1, 0, 1, 1)))
    assert store.remove_widget("a") is True
    assert store.remove_widget("a") is False
    assert [w.id for w in store.widgets] == ["b"]


def test_resize_grid_refuses_to_cut_off_widgets(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "calendar", 2, 0, 4, 4)))
    assert not store.resize_grid(5, 4)
    assert not store.resize_grid(0, 4)
    assert (store.grid_columns, store.grid_rows) == (6, 4)
    assert store.resize_grid(8, 4)
    assert (store.grid_columns, store.grid_rows) == (8, 4)
    assert store.add_widget("weather", 2, 4).instance.position == GridPosition(0, 0, 2, 4)  # type: ignore[union-attr]


def test_hydration_repairs_overlapping_and_out_of_bounds_widgets(layout_factory) -> None:
    layout = layout_factory(
        ("a", "calendar", 0, 0, 2, 2),
        ("b", "photos", 1, 1, 2, 2),
        ("c", "weather", 5, 3, 2, 2),
    )
    store = LayoutStore(layout)

    assert store.get("a").position == GridPosition(0, 0, 2, 2)  # type: ignore[union-attr]
    assert store.get("b").position == GridPosition(2, 0, 2, 2)  # type: ignore[union-attr]
    assert store.get("c").position == GridPosition(4, 0, 2, 2)  # type: ignore[union-attr]
    assert store.repaired == ["b", "c"]
    assert store.dropped == []
    assert overlapping_pairs(list(store.widgets)) == []


def test_hydration_drops_widgets_without_room(layout_factory, caplog) -> None:
    layout = layout_factory(("a", "calendar", 0, 0, 2, 2), ("b", "weather", 0, 0, 1, 1), columns=2, rows=2)
    with caplog.at_level(logging.WARNING, logger="mirrorboard.core.store"):
        store = LayoutStore(layout)
    assert [w.id for w in store.widgets] == ["a"]
    assert store.dropped == ["b"]
    assert "layout_widget_dropped" in caplog.text


def test_hydration_clips_oversized_widgets_to_grid(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "calendar", 0, 0, 8, 2)))
    widget = store.get("a")
    assert widget is not None
    assert widget.position == GridPosition(0, 0, 6, 2)
    assert in_bounds(widget.position, store.grid_columns, store.grid_rows)


def test_hydration_renames_duplicate_instance_ids(layout_factory) -> None:
    layout = layout_factory(("dup", "weather", 0, 0, 1, 1), ("dup", "tesla", 1, 0, 1, 1))
    store = LayoutStore(layout, clock=FIXED_CLOCK)
    assert [w.id for w in store.widgets] == ["dup", "tesla-1700000000000"]


def test_snapshot_is_independent(layout_factory) -> None:
    store = LayoutStore(layout_factory(("a", "weather", 0, 0, 1, 1)))
    snap = store.snapshot()
    store.move_widget("a", GridPosition(3, 3, 1, 1))
    assert snap.widgets[0].position == GridPosition(0, 0, 1, 1)


def test_mixed_edit_sequence_keeps_layout_valid(layout_factory) -> None:
    store = LayoutStore(layout_factory(), clock=FIXED_CLOCK)
    added = [store.add_widget(kind, w, h) for kind, w, h in (("calendar", 4, 4), ("plants", 1, 2), ("photos", 1, 2))]
    ids = [result.instance.id for result in added if result.instance is not None]
    store.move_widget(ids[1], GridPosition(0, 0, 1, 2))
    store.move_widget(ids[2], GridPosition(4, 1, 1, 2))
    store.remove_widget(ids[0])
    store.add_widget("weather", 2, 2)

    assert overlapping_pairs(list(store.widgets)) == []
    assert all(in_bounds(w.position, store.grid_columns, store.grid_rows) for w in store.widgets)
