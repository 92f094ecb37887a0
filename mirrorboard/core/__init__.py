"""Grid layout core: models, collision checks, placement and the layout store."""

from mirrorboard.core.collision import find_collisions, in_bounds, overlaps
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
from mirrorboard.core.registry import WidgetType, WidgetTypeRegistry, default_registry
from mirrorboard.core.store import LayoutStore

__all__ = [
    "AddResult",
    "DashboardLayout",
    "GridPosition",
    "LayoutStore",
    "MoveOutcome",
    "MoveResult",
    "PlacementOutcome",
    "WidgetInstance",
    "WidgetType",
    "WidgetTypeRegistry",
    "default_layout",
    "default_registry",
    "find_collisions",
    "find_placement",
    "in_bounds",
    "overlaps",
]
