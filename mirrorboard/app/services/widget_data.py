"""Status and data lookups for individual widget types."""

from __future__ import annotations

import logging
from typing import Any

from mirrorboard.core.registry import WidgetTypeRegistry
from mirrorboard.infra.api_client import DashboardApiClient
from mirrorboard.infra.errors import RECOVERABLE_IO_ERRORS, log_recoverable

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_STATUS_PATH = "/google/token-status"


class WidgetDataClient:
    """Fetches per-widget payloads; any failure means "not connected"."""

    def __init__(self, client: DashboardApiClient, registry: WidgetTypeRegistry) -> None:
        self._client = client
        self._registry = registry

    def fetch(self, type_id: str) -> dict[str, Any] | None:
        widget_type = self._registry.get(type_id)
        if widget_type is None or widget_type.data_endpoint is None:
            return None
        return self._get_object(widget_type.data_endpoint)

    def setup_status(self, type_id: str) -> bool:
        """Whether the backend reports the widget as configured."""
        payload = self._get_object(f"/setup/{self._setup_slug(type_id)}/status")
        if payload is None:
            return False
        return bool(payload.get("configured", False))

    def submit_setup(self, type_id: str, values: dict[str, str]) -> bool:
        try:
            self._client.post_json(f"/setup/{self._setup_slug(type_id)}", values)
        except RECOVERABLE_IO_ERRORS:
            log_recoverable(logger, "widget_setup_failed widget=%s", type_id)
            return False
        return True

    def google_token_status(self) -> dict[str, Any] | None:
        return self._get_object(GOOGLE_TOKEN_STATUS_PATH)

    def _setup_slug(self, type_id: str) -> str:
        widget_type = self._registry.get(type_id)
        return widget_type.setup_slug if widget_type is not None else type_id

    def _get_object(self, path: str) -> dict[str, Any] | None:
        try:
            payload = self._client.get_json(path)
        except RECOVERABLE_IO_ERRORS:
            log_recoverable(logger, "widget_data_unavailable path=%s", path, level=logging.INFO)
            return None
        if not isinstance(payload, dict):
            logger.info("widget_data_unexpected_shape path=%s", path)
            return None
        return payload
