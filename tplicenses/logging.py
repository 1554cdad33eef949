"""Logging utilities for tplicenses commands."""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "tplicenses"
_NO_COORDINATE = "-"

_coordinate: contextvars.ContextVar[str] = contextvars.ContextVar(
    "tplicenses_coordinate", default=_NO_COORDINATE
)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the tplicenses hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class CoordinateFilter(logging.Filter):
    """Stamp each record with the coordinate currently being processed."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.coordinate = _coordinate.get()
        return True


@contextmanager
def coordinate_context(coordinate: object) -> Iterator[None]:
    """Attribute log records emitted inside the block to ``coordinate``."""
    token = _coordinate.set(str(coordinate))
    try:
        yield
    finally:
        _coordinate.reset(token)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the console handler and, when ``log_file`` is given, a file sink.

    File lines carry a timestamp, the emitting module and the coordinate in
    flight (``-`` outside of per-artifact work), so a long run can be grepped
    per dependency. Calling this again replaces the previous handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[tplicenses] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.addFilter(CoordinateFilter())
        sink.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s %(name)s [%(coordinate)s] %(message)s"
            )
        )
        logger.addHandler(sink)

    return logger


__all__ = ["CoordinateFilter", "configure_logging", "coordinate_context", "get_logger"]
