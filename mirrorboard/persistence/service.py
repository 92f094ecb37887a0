"""Layout load/save against the dashboard backend."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from mirrorboard.core.models import DashboardLayout, default_layout
from mirrorboard.infra.api_client import DashboardApiClient
from mirrorboard.infra.errors import RECOVERABLE_IO_ERRORS, log_recoverable
from mirrorboard.persistence.schema import layout_to_payload, payload_to_layout

logger = logging.getLogger(__name__)

LAYOUT_PATH = "/layout"


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class LayoutPersistenceService:
    """Load and save layouts without ever failing the caller.

    ``load`` falls back to an empty default board and ``save`` reports
    failure as ``False``; both log the underlying error.
    """

    def __init__(
        self,
        client: DashboardApiClient,
        *,
        default_columns: int | None = None,
        default_rows: int | None = None,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self._client = client
        self._default_columns = default_columns
        self._default_rows = default_rows
        self._clock = clock

    def default(self) -> DashboardLayout:
        layout = default_layout()
        if self._default_columns is not None:
            layout.grid_columns = max(1, self._default_columns)
        if self._default_rows is not None:
            layout.grid_rows = max(1, self._default_rows)
        layout.last_modified = self._clock()
        return layout

    def fetch(self) -> DashboardLayout:
        """Read the stored layout without falling back.

        Raises ``BackendUnavailableError`` or ``LayoutSchemaError``.
        """
        return payload_to_layout(self._client.get_json(LAYOUT_PATH))

    def load(self) -> DashboardLayout:
        """Stored layout, or the default board when it cannot be read."""
        try:
            layout = self.fetch()
        except RECOVERABLE_IO_ERRORS:
            log_recoverable(logger, "layout_load_failed url=%s", self._client.url_for(LAYOUT_PATH))
            return self.default()
        logger.info(
            "layout_loaded widgets=%d grid=%dx%d",
            len(layout.widgets),
            layout.grid_columns,
            layout.grid_rows,
        )
        return layout

    def save(self, layout: DashboardLayout) -> bool:
        """Stamp ``last_modified`` and send the layout; False on any failure."""
        layout.last_modified = self._clock()
        try:
            self._client.post_json(LAYOUT_PATH, layout_to_payload(layout))
        except RECOVERABLE_IO_ERRORS:
            log_recoverable(logger, "layout_save_failed url=%s", self._client.url_for(LAYOUT_PATH))
            return False
        logger.info("layout_saved widgets=%d", len(layout.widgets))
        return True
