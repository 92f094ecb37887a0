from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit

import pytest

from mirrorboard.core.models import DashboardLayout, GridPosition, WidgetInstance
from mirrorboard.core.registry import WidgetTypeRegistry, default_registry
from mirrorboard.infra.api_client import DashboardApiClient
from mirrorboard.infra.json_codec import dumps_bytes, loads
from mirrorboard.persistence.service import LayoutPersistenceService
from mirrorboard.ui_runtime.grid_tracks import StaticGeometryProvider, uniform_metrics

API_BASE = "http://mirror.test/api"
FIXED_TIMESTAMP = "2024-05-01T12:00:00Z"


@dataclass
class FakeResponse:
    body: bytes = b""
    status: int = 200

    def read(self) -> bytes:
        return self.body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


@dataclass
class RecordedRequest:
    method: str
    path: str
    payload: Any
    timeout: float | None


class FakeBackend:
    """Stands in for ``urlopen``; unrouted paths behave like a refused connection."""

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], FakeResponse | BaseException] = {}
        self.requests: list[RecordedRequest] = []

    def route(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        body: bytes | None = None,
        status: int = 200,
        error: BaseException | None = None,
    ) -> None:
        if error is not None:
            self._routes[(method, path)] = error
            return
        raw = body if body is not None else (b"" if json is None else dumps_bytes(json))
        self._routes[(method, path)] = FakeResponse(body=raw, status=status)

    def last(self, method: str, path: str) -> RecordedRequest:
        for request in reversed(self.requests):
            if request.method == method and request.path == path:
                return request
        raise AssertionError(f"no {method} {path} request recorded")

    def __call__(self, request: Any, timeout: float | None = None) -> FakeResponse:
        url = request.full_url
        path = urlsplit(url).path.removeprefix("/api")
        method = request.get_method()
        payload = loads(request.data) if request.data else None
        self.requests.append(RecordedRequest(method=method, path=path, payload=payload, timeout=timeout))
        target = self._routes.get((method, path))
        if target is None:
            raise URLError("connection refused")
        if isinstance(target, BaseException):
            raise target
        if target.status >= 400:
            raise HTTPError(url, target.status, "error", hdrs=None, fp=None)  # type: ignore[arg-type]
        return target


def make_layout(
    *widgets: tuple[str, str, int, int, int, int],
    columns: int = 6,
    rows: int = 4,
) -> DashboardLayout:
    """Build a layout from ``(id, type, x, y, width, height)`` tuples."""
    return DashboardLayout(
        grid_columns=columns,
        grid_rows=rows,
        widgets=[
            WidgetInstance(id=wid, widget_id=wtype, position=GridPosition(x, y, w, h))
            for wid, wtype, x, y, w, h in widgets
        ],
    )


@pytest.fixture
def layout_factory():
    return make_layout


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api_client(backend: FakeBackend) -> DashboardApiClient:
    return DashboardApiClient(API_BASE, timeout_s=2.5, opener=backend)


@pytest.fixture
def persistence(api_client: DashboardApiClient) -> LayoutPersistenceService:
    return LayoutPersistenceService(api_client, clock=lambda: FIXED_TIMESTAMP)


@pytest.fixture
def registry() -> WidgetTypeRegistry:
    return default_registry()


@pytest.fixture
def geometry() -> StaticGeometryProvider:
    """6x4 grid of 100x80 px cells with 10 px gaps at origin (20, 40)."""
    return StaticGeometryProvider(
        uniform_metrics(6, 4, cell_width=100.0, cell_height=80.0, gap=10.0, origin_x=20.0, origin_y=40.0)
    )
