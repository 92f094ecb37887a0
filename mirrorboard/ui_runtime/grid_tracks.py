"""Pointer-to-cell resolution over measured grid tracks.

Rendered grids do not have uniform cells: each column and row track has its
own pixel size, and tracks are separated by a fixed gap. Everything here is a
pure function of a ``TrackMetrics`` measurement, so hosts supply measurements
through a ``GeometryProvider`` and tests use ``StaticGeometryProvider``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from mirrorboard.core.models import GridPosition


@dataclass(frozen=True, slots=True)
class GridCell:
    col: int
    row: int


@dataclass(frozen=True, slots=True)
class PixelRect:
    """Pixel-space rectangle; the right and bottom edges are exclusive."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.right and self.y <= py < self.bottom


@dataclass(frozen=True, slots=True)
class TrackMetrics:
    """One measurement of a rendered grid."""

    origin_x: float
    origin_y: float
    column_tracks: tuple[float, ...]
    row_tracks: tuple[float, ...]
    gap: float = 0.0


class GeometryProvider(Protocol):
    """Anything able to report the current grid track sizes."""

    def measure(self) -> TrackMetrics: ...


@dataclass(slots=True)
class StaticGeometryProvider:
    """Provider returning a fixed measurement; swap ``metrics`` to simulate resizes."""

    metrics: TrackMetrics

    def measure(self) -> TrackMetrics:
        return self.metrics


def uniform_metrics(
    columns: int,
    rows: int,
    *,
    cell_width: float,
    cell_height: float,
    gap: float = 0.0,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> TrackMetrics:
    """Build metrics for a grid whose tracks all share one size."""
    return TrackMetrics(
        origin_x=origin_x,
        origin_y=origin_y,
        column_tracks=(cell_width,) * columns,
        row_tracks=(cell_height,) * rows,
        gap=gap,
    )


def track_size(tracks: Sequence[float], index: int) -> float:
    """Size of a track; unmeasured tracks count as zero."""
    if 0 <= index < len(tracks):
        return float(tracks[index])
    return 0.0


def track_offsets(tracks: Sequence[float], count: int, gap: float) -> list[float]:
    """Leading-edge offset of each of ``count`` tracks, relative to the grid origin."""
    offsets: list[float] = []
    cumulative = 0.0
    for index in range(count):
        offsets.append(cumulative)
        cumulative += track_size(tracks, index) + gap
    return offsets


def snap_index(offset: float, tracks: Sequence[float], count: int, gap: float) -> int:
    """Snap an axis offset to the first track whose midpoint lies beyond it.

    Points in the trailing half of a track already snap to the next one,
    unlike floor division over track edges. Offsets past every track resolve
    to the last index.
    """
    cumulative = 0.0
    for index in range(count):
        size = track_size(tracks, index)
        if offset < cumulative + size / 2:
            return index
        cumulative += size + gap
    return max(0, count - 1)


def resolve_cell(
    pointer_x: float,
    pointer_y: float,
    metrics: TrackMetrics,
    *,
    grid_columns: int,
    grid_rows: int,
    width: int = 1,
    height: int = 1,
) -> GridCell:
    """Resolve a pixel point to the top-left cell of a width x height widget.

    The result is clamped so the widget stays fully on the grid.
    """
    col = snap_index(pointer_x - metrics.origin_x, metrics.column_tracks, grid_columns, metrics.gap)
    row = snap_index(pointer_y - metrics.origin_y, metrics.row_tracks, grid_rows, metrics.gap)
    col = max(0, min(col, grid_columns - width))
    row = max(0, min(row, grid_rows - height))
    return GridCell(col=col, row=row)


def cell_at_point(
    px: float,
    py: float,
    metrics: TrackMetrics,
    *,
    grid_columns: int,
    grid_rows: int,
) -> GridCell | None:
    """Return the cell containing a point, or None for gaps and outside points."""
    col = _containing_track(px - metrics.origin_x, metrics.column_tracks, grid_columns, metrics.gap)
    row = _containing_track(py - metrics.origin_y, metrics.row_tracks, grid_rows, metrics.gap)
    if col is None or row is None:
        return None
    return GridCell(col=col, row=row)


def cell_rect(position: GridPosition, metrics: TrackMetrics) -> PixelRect:
    """Pixel rectangle covered by a grid position, gaps between its tracks included."""
    col_offsets = track_offsets(metrics.column_tracks, position.right, metrics.gap)
    row_offsets = track_offsets(metrics.row_tracks, position.bottom, metrics.gap)
    x = col_offsets[position.x] if position.x < len(col_offsets) else 0.0
    y = row_offsets[position.y] if position.y < len(row_offsets) else 0.0
    w = _span(metrics.column_tracks, position.x, position.width, metrics.gap)
    h = _span(metrics.row_tracks, position.y, position.height, metrics.gap)
    return PixelRect(x=metrics.origin_x + x, y=metrics.origin_y + y, width=w, height=h)


def grid_intersections(
    metrics: TrackMetrics, columns: int, rows: int
) -> list[tuple[float, float]]:
    """Guide-dot coordinates at track boundaries, relative to the grid origin.

    There are ``(columns + 1) * (rows + 1)`` dots in row-major order; each
    boundary after the first sits one track plus one gap after the previous.
    """
    xs = _boundaries(metrics.column_tracks, columns, metrics.gap)
    ys = _boundaries(metrics.row_tracks, rows, metrics.gap)
    return [(x, y) for y in ys for x in xs]


def _boundaries(tracks: Sequence[float], count: int, gap: float) -> list[float]:
    positions = [0.0]
    for index in range(count):
        positions.append(positions[-1] + track_size(tracks, index) + gap)
    return positions


def _span(tracks: Sequence[float], start: int, length: int, gap: float) -> float:
    if length <= 0:
        return 0.0
    total = sum(track_size(tracks, index) for index in range(start, start + length))
    return total + gap * (length - 1)


def _containing_track(offset: float, tracks: Sequence[float], count: int, gap: float) -> int | None:
    if offset < 0:
        return None
    cumulative = 0.0
    for index in range(count):
        size = track_size(tracks, index)
        if cumulative <= offset < cumulative + size:
            return index
        cumulative += size + gap
    return None
