"""Core layout models used by the grid engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

LAYOUT_VERSION = "1.0"
DEFAULT_GRID_COLUMNS = 6
DEFAULT_GRID_ROWS = 4


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Axis-aligned rectangle in grid cell space."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge column."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge row."""
        return self.y + self.height

    def moved_to(self, x: int, y: int) -> GridPosition:
        """Return the same-sized rectangle anchored at a new top-left cell."""
        return GridPosition(x=x, y=y, width=self.width, height=self.height)


@dataclass(slots=True)
class WidgetInstance:
    """A placed widget on the dashboard grid."""

    id: str
    widget_id: str
    position: GridPosition
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class DashboardLayout:
    """Grid dimensions plus the ordered set of placed widgets."""

    version: str = LAYOUT_VERSION
    grid_columns: int = DEFAULT_GRID_COLUMNS
    grid_rows: int = DEFAULT_GRID_ROWS
    widgets: list[WidgetInstance] = field(default_factory=list)
    last_modified: str = ""
    global_config: dict[str, Any] | None = None

    def by_id(self, instance_id: str) -> WidgetInstance | None:
        """Find a widget instance by its instance id."""
        for widget in self.widgets:
            if widget.id == instance_id:
                return widget
        return None

    def copy(self) -> DashboardLayout:
        return copy.deepcopy(self)


def default_layout(
    columns: int = DEFAULT_GRID_COLUMNS, rows: int = DEFAULT_GRID_ROWS
) -> DashboardLayout:
    """Empty layout rendered when nothing better is available."""
    return DashboardLayout(
        version=LAYOUT_VERSION,
        grid_columns=max(1, columns),
        grid_rows=max(1, rows),
        widgets=[],
    )


class PlacementOutcome(StrEnum):
    """Result of adding a widget."""

    PLACED = "PLACED"
    NO_SPACE = "NO_SPACE"


class MoveOutcome(StrEnum):
    """Result of moving a widget."""

    MOVED = "MOVED"
    COLLISION = "COLLISION"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    STALE = "STALE"


@dataclass(frozen=True, slots=True)
class AddResult:
    outcome: PlacementOutcome
    instance: WidgetInstance | None = None

    @property
    def placed(self) -> bool:
        return self.outcome is PlacementOutcome.PLACED


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of a move plus the widget's position after the call."""

    outcome: MoveOutcome
    position: GridPosition | None = None

    @property
    def accepted(self) -> bool:
        return self.outcome is MoveOutcome.MOVED
