from __future__ import annotations

import random

from mirrorboard.core.collision import overlapping_pairs
from mirrorboard.core.models import GridPosition, WidgetInstance
from mirrorboard.core.placement import find_placement, iter_candidates


def test_empty_grid_places_at_origin(layout_factory) -> None:
    assert find_placement(layout_factory(), 1, 1) == GridPosition(0, 0, 1, 1)


def test_calendar_lands_right_of_weather(layout_factory) -> None:
    layout = layout_factory()
    weather = find_placement(layout, 1, 1)
    assert weather == GridPosition(0, 0, 1, 1)
    layout.widgets.append(WidgetInstance(id="weather-1", widget_id="weather", position=weather))

    assert find_placement(layout, 4, 4) == GridPosition(1, 0, 4, 4)


def test_scan_is_row_major(layout_factory) -> None:
    layout = layout_factory(("a", "weather", 0, 0, 1, 1), ("b", "calendar", 1, 0, 5, 1))
    assert find_placement(layout, 1, 1) == GridPosition(0, 1, 1, 1)


def test_too_large_or_full_grid_returns_none(layout_factory) -> None:
    assert find_placement(layout_factory(), 7, 1) is None
    assert find_placement(layout_factory(), 1, 5) is None
    full = layout_factory(("a", "calendar", 0, 0, 6, 4))
    assert find_placement(full, 1, 1) is None


def test_placement_is_deterministic(layout_factory) -> None:
    layout = layout_factory(("a", "calendar", 1, 0, 4, 4))
    first = find_placement(layout, 1, 2)
    assert first == GridPosition(0, 0, 1, 2)
    assert find_placement(layout, 1, 2) == first


def test_iter_candidates_covers_every_anchor() -> None:
    candidates = list(iter_candidates(6, 4, 2, 2))
    assert len(candidates) == 15
    assert candidates[:2] == [GridPosition(0, 0, 2, 2), GridPosition(1, 0, 2, 2)]
    assert candidates[-1] == GridPosition(4, 2, 2, 2)
    assert list(iter_candidates(6, 4, 0, 1)) == []


def test_repeated_placement_never_overlaps(layout_factory) -> None:
    rng = random.Random(1337)
    layout = layout_factory()
    for index in range(40):
        width, height = rng.randint(1, 3), rng.randint(1, 2)
        position = find_placement(layout, width, height)
        if position is None:
            continue
        layout.widgets.append(WidgetInstance(id=f"w-{index}", widget_id="weather", position=position))
    assert overlapping_pairs(layout.widgets) == []
