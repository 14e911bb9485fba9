"""Environment configuration for cairo_ctypes.

CAIRO_CTYPES_LIBRARY      Path or soname of libcairo ("" = search the system).
CAIRO_CTYPES_TRACING      Track every handle in the leak registry.
                          Defaults to on, and to off under ``python -O``.
CAIRO_CTYPES_LEAK_REPORT  Log outstanding handles at interpreter exit.
CAIRO_CTYPES_LOG_LEVEL    Level used by configure_logging().
"""

from __future__ import annotations
import os


def _get_env_var(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _get_env_bool(name: str, default: str) -> bool:
    value: str = _get_env_var(name, default).lower()
    return value in (
        "true",
        "1",
        "yes",
        "y",
        "on",
    )


_CAIRO_LIBRARY = _get_env_var("CAIRO_CTYPES_LIBRARY", "")
_CAIRO_TRACING = _get_env_bool("CAIRO_CTYPES_TRACING", "1" if __debug__ else "0")
_CAIRO_LEAK_REPORT = _get_env_bool("CAIRO_CTYPES_LEAK_REPORT", "1")
_env_log_level = _get_env_var("CAIRO_CTYPES_LOG_LEVEL", "WARNING").upper()
if _env_log_level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
    _CAIRO_LOG_LEVEL = _env_log_level
else:
    _CAIRO_LOG_LEVEL = "WARNING"

# Sonames tried in order when CAIRO_CTYPES_LIBRARY is empty
_CAIRO_SONAMES = (
    "libcairo.so.2",
    "libcairo.2.dylib",
    "libcairo-2.dll",
)

__all__ = (
    "_CAIRO_LIBRARY",
    "_CAIRO_TRACING",
    "_CAIRO_LEAK_REPORT",
    "_CAIRO_LOG_LEVEL",
    "_CAIRO_SONAMES",
)
