"""Package logging helpers."""

from __future__ import annotations

import logging

from cairo_ctypes._platform import _CAIRO_LOG_LEVEL

__all__ = ("get_logger", "configure_logging")

_PACKAGE = "cairo_ctypes"

logging.getLogger(_PACKAGE).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package namespace."""
    if name != _PACKAGE and not name.startswith(_PACKAGE + "."):
        name = f"{_PACKAGE}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None) -> None:
    """Attach a console handler to the package logger (scripts and examples)."""
    logger = logging.getLogger(_PACKAGE)
    if level is None:
        level = _CAIRO_LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(level)
    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
