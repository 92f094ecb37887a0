"""Command line entry point for viewing and editing the dashboard layout."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from mirrorboard.app.edit_session import EditSession
from mirrorboard.core.models import DashboardLayout
from mirrorboard.core.occupancy import OccupancyGrid, ordinal_mark
from mirrorboard.core.registry import WidgetTypeRegistry, default_registry
from mirrorboard.core.store import LayoutStore
from mirrorboard.infra.api_client import DashboardApiClient
from mirrorboard.infra.config import DashboardSettings, load_default_env_files, load_settings
from mirrorboard.infra.errors import RECOVERABLE_IO_ERRORS, WidgetRequestError, log_recoverable
from mirrorboard.infra.logging import setup_logging, shutdown_logging
from mirrorboard.persistence.service import LayoutPersistenceService
from mirrorboard.ui_runtime.grid_tracks import StaticGeometryProvider, uniform_metrics

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_SAVE_FAILED = 2
EXIT_LOAD_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mirrorboard", description="Inspect and edit the dashboard grid layout.")
    parser.add_argument("--api-base", default=None, help="Backend base URL (overrides MIRRORBOARD_API_BASE).")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print the layout as a cell map.")
    sub.add_parser("types", help="List available widget types.")

    add = sub.add_parser("add", help="Add a widget at the first free slot.")
    add.add_argument("widget_type")

    move = sub.add_parser("move", help="Move a widget to a new top-left cell.")
    move.add_argument("instance_id")
    move.add_argument("x", type=int)
    move.add_argument("y", type=int)

    remove = sub.add_parser("remove", help="Remove a widget instance.")
    remove.add_argument("instance_id")

    grid = sub.add_parser("grid", help="Change grid dimensions.")
    grid.add_argument("columns", type=int)
    grid.add_argument("rows", type=int)
    return parser


def render_layout(layout: DashboardLayout, registry: WidgetTypeRegistry) -> list[str]:
    """Text view: a cell map followed by one legend line per widget."""
    occupancy = OccupancyGrid.from_layout(layout)
    legend: list[str] = []
    for index, widget in enumerate(layout.widgets, start=1):
        mark = ordinal_mark(index)
        widget_type = registry.get(widget.widget_id)
        name = widget_type.name if widget_type is not None else f"{widget.widget_id} (unknown type)"
        pos = widget.position
        legend.append(f"  {mark} {widget.id:<28} {name:<20} at ({pos.x},{pos.y}) {pos.width}x{pos.height}")
    lines = [f"grid {layout.grid_columns}x{layout.grid_rows}  coverage {occupancy.coverage():.0%}"]
    lines.extend(f"  {row}" for row in occupancy.render())
    lines.extend(legend)
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_default_env_files(override_existing=False)
    settings = load_settings()
    setup_logging(settings)
    logger.debug("cli_command=%s", args.command)
    try:
        return _run(args, settings.api_base if args.api_base is None else args.api_base, settings)
    finally:
        shutdown_logging()


def _run(args: argparse.Namespace, api_base: str, settings: DashboardSettings) -> int:
    registry = default_registry()
    if args.command == "types":
        for category, types in registry.by_category().items():
            print(f"{category.value}:")
            for widget_type in types:
                size = widget_type.default_size
                print(f"  {widget_type.id:<10} {widget_type.icon} {widget_type.name} ({size.width}x{size.height})")
        return EXIT_OK

    persistence = LayoutPersistenceService(
        DashboardApiClient(api_base, timeout_s=settings.http_timeout_s),
        default_columns=settings.default_columns,
        default_rows=settings.default_rows,
    )
    if args.command == "show":
        for line in render_layout(persistence.load(), registry):
            print(line)
        return EXIT_OK

    # Edits are saved over the stored layout, so they need the real one.
    try:
        layout = persistence.fetch()
    except RECOVERABLE_IO_ERRORS:
        log_recoverable(logger, "cli_edit_refused url=%s", api_base, level=logging.DEBUG)
        print("Could not load the stored layout; nothing was changed.")
        return EXIT_LOAD_FAILED
    session = EditSession(LayoutStore(layout), registry, persistence, _nominal_geometry())

    session.enter_edit_mode()
    code = _apply_edit(session, args)
    if code != EXIT_OK:
        print(session.status)
        return code
    if not session.exit_edit_mode():
        print(session.status)
        return EXIT_SAVE_FAILED
    for line in render_layout(session.layout, registry):
        print(line)
    return EXIT_OK


def _apply_edit(session: EditSession, args: argparse.Namespace) -> int:
    if args.command == "add":
        try:
            result = session.add_widget(args.widget_type)
        except WidgetRequestError as exc:
            session.status = str(exc)
            return EXIT_REJECTED
        return EXIT_OK if result.placed else EXIT_REJECTED
    if args.command == "move":
        move = session.move_widget(args.instance_id, args.x, args.y)
        return EXIT_OK if move.accepted else EXIT_REJECTED
    if args.command == "remove":
        if not session.remove_widget(args.instance_id):
            session.status = f"No widget '{args.instance_id}'."
            return EXIT_REJECTED
        return EXIT_OK
    if args.command == "grid":
        return EXIT_OK if session.resize_grid(args.columns, args.rows) else EXIT_REJECTED
    raise ValueError(f"unknown command: {args.command!r}")


def _nominal_geometry() -> StaticGeometryProvider:
    # The terminal has no pointer; a unit grid keeps the session well-formed.
    return StaticGeometryProvider(uniform_metrics(1, 1, cell_width=1.0, cell_height=1.0))


if __name__ == "__main__":
    raise SystemExit(main())
