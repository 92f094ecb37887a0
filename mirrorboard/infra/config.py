"""Application configuration and env loading."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from mirrorboard.core.models import DEFAULT_GRID_COLUMNS, DEFAULT_GRID_ROWS

DEFAULT_API_BASE = "http://localhost:8080/api"
DEFAULT_HTTP_TIMEOUT_S = 5.0


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Copy KEY=VALUE pairs from a dotenv file into ``os.environ``.

    Missing files are ignored. Existing variables are overwritten unless
    ``override_existing`` is False.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        entry = _parse_env_line(raw_line)
        if entry is None:
            continue
        key, value = entry
        if override_existing or key not in os.environ:
            os.environ[key] = value


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line.removeprefix("export ").lstrip()
    if not line or line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1]
    return key, value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files left to right; later files win.

    Default order: ``.env`` then ``.env.local``.
    """
    to_load = tuple(paths) if paths is not None else (".env", ".env.local")
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


@dataclass(frozen=True, slots=True)
class DashboardSettings:
    """Immutable runtime settings."""

    api_base: str = DEFAULT_API_BASE
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    log_level: str = "INFO"
    log_format: str = "text"
    log_file: str | None = None
    default_columns: int = DEFAULT_GRID_COLUMNS
    default_rows: int = DEFAULT_GRID_ROWS


def load_settings(env: Mapping[str, str] | None = None) -> DashboardSettings:
    """Read settings from the environment, falling back to defaults on bad values."""
    source = os.environ if env is None else env
    log_level = source.get("MIRRORBOARD_LOG_LEVEL") or source.get("LOG_LEVEL") or "INFO"
    log_file = (source.get("MIRRORBOARD_LOG_FILE") or "").strip() or None
    return DashboardSettings(
        api_base=(source.get("MIRRORBOARD_API_BASE") or DEFAULT_API_BASE).strip().rstrip("/"),
        http_timeout_s=_positive_float(source.get("MIRRORBOARD_HTTP_TIMEOUT_S"), DEFAULT_HTTP_TIMEOUT_S),
        log_level=log_level.strip().upper(),
        log_format=(source.get("LOG_FORMAT") or "text").strip().lower(),
        log_file=log_file,
        default_columns=_positive_int(source.get("MIRRORBOARD_DEFAULT_COLUMNS"), DEFAULT_GRID_COLUMNS),
        default_rows=_positive_int(source.get("MIRRORBOARD_DEFAULT_ROWS"), DEFAULT_GRID_ROWS),
    )


def _positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 1 else default


def _positive_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default
