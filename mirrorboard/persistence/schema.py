"""Persisted layout schema and validation helpers."""

from __future__ import annotations

from typing import Any

from mirrorboard.core.models import (
    DEFAULT_GRID_COLUMNS,
    DEFAULT_GRID_ROWS,
    LAYOUT_VERSION,
    DashboardLayout,
    GridPosition,
    WidgetInstance,
)
from mirrorboard.infra.errors import LayoutSchemaError


def layout_to_payload(layout: DashboardLayout) -> dict[str, object]:
    """Convert a layout to the JSON shape the backend stores."""
    payload: dict[str, object] = {
        "version": layout.version,
        "gridColumns": layout.grid_columns,
        "gridRows": layout.grid_rows,
        "widgets": [
            {
                "id": widget.id,
                "widgetId": widget.widget_id,
                "position": {
                    "x": widget.position.x,
                    "y": widget.position.y,
                    "width": widget.position.width,
                    "height": widget.position.height,
                },
                "config": dict(widget.config),
            }
            for widget in layout.widgets
        ],
        "lastModified": layout.last_modified,
    }
    if layout.global_config is not None:
        payload["global"] = dict(layout.global_config)
    return payload


def payload_to_layout(payload: object) -> DashboardLayout:
    """Convert a loaded payload into a layout, raising ``LayoutSchemaError`` when malformed."""
    if not isinstance(payload, dict):
        raise LayoutSchemaError("Layout payload must be an object.")
    version = payload.get("version", LAYOUT_VERSION)
    if not isinstance(version, (str, int, float)):
        raise LayoutSchemaError("Layout version must be a string.")
    columns = _positive_int(payload.get("gridColumns", DEFAULT_GRID_COLUMNS), "gridColumns")
    rows = _positive_int(payload.get("gridRows", DEFAULT_GRID_ROWS), "gridRows")

    raw_widgets = payload.get("widgets")
    if raw_widgets is None:
        raw_widgets = []
    if not isinstance(raw_widgets, list):
        raise LayoutSchemaError("Layout widgets must be a list.")
    widgets = [_widget_from_payload(item) for item in raw_widgets]

    raw_global = payload.get("global")
    if raw_global is not None and not isinstance(raw_global, dict):
        raise LayoutSchemaError("Layout global config must be an object.")
    last_modified = payload.get("lastModified") or ""

    return DashboardLayout(
        version=str(version),
        grid_columns=columns,
        grid_rows=rows,
        widgets=widgets,
        last_modified=str(last_modified),
        global_config=dict(raw_global) if raw_global is not None else None,
    )


def _widget_from_payload(item: object) -> WidgetInstance:
    if not isinstance(item, dict):
        raise LayoutSchemaError("Each layout widget must be an object.")
    try:
        instance_id = str(item["id"]).strip()
        widget_id = str(item["widgetId"]).strip()
        raw_position = item["position"]
        if not isinstance(raw_position, dict):
            raise LayoutSchemaError("Widget position must be an object.")
        position = GridPosition(
            x=_int(raw_position["x"], "x"),
            y=_int(raw_position["y"], "y"),
            width=_positive_int(raw_position["width"], "width"),
            height=_positive_int(raw_position["height"], "height"),
        )
    except KeyError as exc:
        raise LayoutSchemaError(f"Layout widget is missing field {exc.args[0]!r}.") from exc
    if not instance_id or not widget_id:
        raise LayoutSchemaError("Layout widget ids cannot be empty.")
    config: Any = item.get("config") or {}
    if not isinstance(config, dict):
        raise LayoutSchemaError("Widget config must be an object.")
    return WidgetInstance(id=instance_id, widget_id=widget_id, position=position, config=dict(config))


def _int(value: object, field_name: str) -> int:
    """Accept JSON integers, including integral floats such as ``2.0``."""
    if isinstance(value, bool):
        raise LayoutSchemaError(f"{field_name} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise LayoutSchemaError(f"{field_name} must be an integer.")


def _positive_int(value: object, field_name: str) -> int:
    result = _int(value, field_name)
    if result < 1:
        raise LayoutSchemaError(f"{field_name} must be at least 1.")
    return result
