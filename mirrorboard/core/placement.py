"""First-fit placement planner for new widgets."""

from __future__ import annotations

from collections.abc import Iterator

from mirrorboard.core.collision import is_free
from mirrorboard.core.models import DashboardLayout, GridPosition


def iter_candidates(columns: int, rows: int, width: int, height: int) -> Iterator[GridPosition]:
    """Yield every in-bounds anchor for a width x height widget, row-major from the top-left."""
    if width < 1 or height < 1:
        return
    for y in range(rows - height + 1):
        for x in range(columns - width + 1):
            yield GridPosition(x=x, y=y, width=width, height=height)


def find_placement(layout: DashboardLayout, width: int, height: int) -> GridPosition | None:
    """Return the first collision-free rectangle in row-major order, or None when nothing fits.

    The scan order is part of the contract: rows top to bottom, columns left to
    right, so the same layout and size always yield the same cell.
    """
    for candidate in iter_candidates(layout.grid_columns, layout.grid_rows, width, height):
        if is_free(candidate, layout.widgets):
            return candidate
    return None
