"""Minimal JSON-over-HTTP client for the dashboard backend."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from mirrorboard.infra.errors import BackendUnavailableError
from mirrorboard.infra.json_codec import dumps_bytes, loads

logger = logging.getLogger(__name__)

Opener = Callable[..., Any]


class DashboardApiClient:
    """Talks to the ``/api`` backend.

    Every transport, status or decoding failure surfaces as
    ``BackendUnavailableError``; callers decide whether that is fatal.
    """

    def __init__(self, base_url: str, *, timeout_s: float = 5.0, opener: Opener = urlopen) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._opener = opener

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def get_json(self, path: str) -> Any:
        return self._send(Request(self.url_for(path), method="GET", headers={"Accept": "application/json"}))

    def post_json(self, path: str, payload: Any) -> Any:
        request = Request(
            self.url_for(path),
            data=dumps_bytes(payload),
            method="POST",
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        return self._send(request)

    def _send(self, request: Request) -> Any:
        url = request.full_url
        logger.debug("api_request method=%s url=%s", request.get_method(), url)
        try:
            with self._opener(request, timeout=self._timeout_s) as resp:  # noqa: S310
                status = int(getattr(resp, "status", 200))
                raw = resp.read()
        except HTTPError as exc:
            raise BackendUnavailableError(f"{request.get_method()} {url} failed with HTTP {exc.code}", status=exc.code) from exc
        except (URLError, OSError) as exc:
            raise BackendUnavailableError(f"{request.get_method()} {url} unreachable: {exc}") from exc
        if not 200 <= status < 300:
            raise BackendUnavailableError(f"{request.get_method()} {url} failed with HTTP {status}", status=status)
        if not raw:
            return None
        try:
            return loads(raw)
        except ValueError as exc:
            raise BackendUnavailableError(f"{request.get_method()} {url} returned malformed JSON") from exc
