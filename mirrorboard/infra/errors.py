"""Exception taxonomy and recoverable-error policy helpers."""

from __future__ import annotations

import logging
from typing import TypeAlias


class MirrorboardError(Exception):
    """Base class for dashboard errors."""


class BackendUnavailableError(MirrorboardError):
    """The dashboard backend could not be reached or answered with a failure."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class LayoutSchemaError(MirrorboardError, ValueError):
    """A layout payload does not match the persisted layout shape."""


class WidgetRequestError(MirrorboardError, ValueError):
    """An add-widget request was rejected before reaching the layout store."""


# Bounded set of failures tolerated at I/O boundaries.
RecoverableErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_IO_ERRORS: RecoverableErrors = (
    BackendUnavailableError,
    LayoutSchemaError,
    OSError,
    ValueError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *args: object,
    level: int = logging.WARNING,
) -> None:
    """Emit observability for a tolerated exception, including its traceback."""
    logger.log(level, message, *args, exc_info=True)
