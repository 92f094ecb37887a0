"""Occupancy grid representation for hit-testing and text rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from mirrorboard.core.models import DashboardLayout

EMPTY_MARK = "."


@dataclass(slots=True)
class OccupancyGrid:
    """Numpy-backed map of which widget covers each cell.

    Cell values are 1-based indexes into ``instance_ids``; 0 marks a free cell.
    """

    columns: int
    rows: int
    cells: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), dtype=np.int32))
    instance_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.cells.shape != (self.rows, self.columns):
            self.cells = np.zeros((self.rows, self.columns), dtype=np.int32)

    @classmethod
    def from_layout(cls, layout: DashboardLayout) -> OccupancyGrid:
        grid = cls(columns=layout.grid_columns, rows=layout.grid_rows)
        for index, widget in enumerate(layout.widgets, start=1):
            grid.instance_ids.append(widget.id)
            pos = widget.position
            region = grid.cells[
                max(0, pos.y) : max(0, min(grid.rows, pos.bottom)),
                max(0, pos.x) : max(0, min(grid.columns, pos.right)),
            ]
            # Earlier widgets keep contested cells.
            region[region == 0] = index
        return grid

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.columns and 0 <= row < self.rows

    def widget_at(self, col: int, row: int) -> str | None:
        """Return the instance id covering a cell, if any."""
        if not self.in_bounds(col, row):
            return None
        index = int(self.cells[row, col])
        if index == 0:
            return None
        return self.instance_ids[index - 1]

    def free_cells(self) -> int:
        return int(np.count_nonzero(self.cells == 0))

    def coverage(self) -> float:
        """Fraction of cells covered by widgets."""
        total = self.columns * self.rows
        if total == 0:
            return 0.0
        return 1.0 - self.free_cells() / total

    def render(self, marks: dict[str, str] | None = None) -> list[str]:
        """Render one text line per grid row.

        ``marks`` maps instance ids to a single display character; unmapped
        widgets are drawn with ``ordinal_mark``.
        """
        marks = marks or {}
        lines: list[str] = []
        for row in range(self.rows):
            chars: list[str] = []
            for col in range(self.columns):
                index = int(self.cells[row, col])
                if index == 0:
                    chars.append(EMPTY_MARK)
                    continue
                instance_id = self.instance_ids[index - 1]
                chars.append(marks.get(instance_id, ordinal_mark(index)))
            lines.append("".join(chars))
        return lines


def ordinal_mark(index: int) -> str:
    """Single-character label for the 1-based widget ordinal; "#" once letters run out."""
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
    if index <= len(alphabet):
        return alphabet[index - 1]
    return "#"
