"""Rectangle overlap and bounds checks for grid positions."""

from __future__ import annotations

from collections.abc import Iterable

from mirrorboard.core.models import GridPosition, WidgetInstance


def overlaps(a: GridPosition, b: GridPosition) -> bool:
    """Return whether two rectangles share any cell area.

    Rectangles that only touch along an edge do not overlap.
    """
    return not (a.right <= b.x or b.right <= a.x or a.bottom <= b.y or b.bottom <= a.y)


def in_bounds(position: GridPosition, columns: int, rows: int) -> bool:
    """Return whether a rectangle lies fully inside a columns x rows grid."""
    return (
        position.width >= 1
        and position.height >= 1
        and position.x >= 0
        and position.y >= 0
        and position.right <= columns
        and position.bottom <= rows
    )


def find_collisions(
    candidate: GridPosition,
    widgets: Iterable[WidgetInstance],
    *,
    ignore_id: str | None = None,
) -> list[WidgetInstance]:
    """List widgets whose rectangles overlap the candidate."""
    return [
        widget
        for widget in widgets
        if widget.id != ignore_id and overlaps(candidate, widget.position)
    ]


def is_free(
    candidate: GridPosition,
    widgets: Iterable[WidgetInstance],
    *,
    ignore_id: str | None = None,
) -> bool:
    for widget in widgets:
        if widget.id != ignore_id and overlaps(candidate, widget.position):
            return False
    return True


def overlapping_pairs(widgets: list[WidgetInstance]) -> list[tuple[str, str]]:
    """Return id pairs of every overlapping widget combination."""
    pairs: list[tuple[str, str]] = []
    for index, first in enumerate(widgets):
        for second in widgets[index + 1 :]:
            if overlaps(first.position, second.position):
                pairs.append((first.id, second.id))
    return pairs
