"""Handle registry: leak and double-destroy detection.

cairo keeps its reference counts private, so a destroy() too many is only
noticed once native code touches freed memory. When tracing is on, every
constructor and every reference() adds one *unit* for the handle, tagged
with the caller's file and line, and every destroy() removes one. A destroy
with no unit left is reported before it reaches cairo; units still present
at a checkpoint (assert_no_leaks(), interpreter exit) are leaks.

Tracing defaults to on and is off under ``python -O`` (see _platform).
Everything here is a no-op cost when it is off: wrappers test the flag
before calling in.
"""

from __future__ import annotations

import atexit
import sys
import threading
from dataclasses import dataclass

from cairo_ctypes._errors import HandleTrackingError, LeakError
from cairo_ctypes._logging import get_logger
from cairo_ctypes._platform import _CAIRO_LEAK_REPORT, _CAIRO_TRACING
from cairo_ctypes._types import Handle

__all__ = (
    "Leak",
    "HandleRegistry",
    "registry",
    "tracing",
    "set_tracing",
    "is_tracing",
    "call_site",
    "mark_for_leak_detection",
    "reference",
    "destroy",
    "assert_no_leaks",
)

_log = get_logger(__name__)

_PACKAGE_PREFIX = __name__.partition(".")[0]

tracing: bool = _CAIRO_TRACING


@dataclass(frozen=True, slots=True)
class Leak:
    """One handle that still has outstanding units."""

    handle: Handle
    kind: str
    sites: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.sites)

    def __str__(self) -> str:
        kind = self.kind or "handle"
        return (
            f"{kind} {self.handle!r}: {self.count} outstanding, "
            f"created at {self.sites[0]}"
        )


class HandleRegistry:
    """Outstanding units per handle, with the site that added each one.

    All methods are safe to call from several threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # handle → sites, one entry per outstanding unit (oldest first)
        self._entries: dict[Handle, list[str]] = {}
        self._kinds: dict[Handle, str] = {}

    def track(self, handle: Handle, site: str, kind: str = "") -> None:
        """Record one more unit for ``handle``."""
        with self._lock:
            self._entries.setdefault(handle, []).append(site)
            if kind or handle not in self._kinds:
                self._kinds[handle] = kind

    def untrack(self, handle: Handle) -> None:
        """Remove one unit for ``handle``.

        Raises HandleTrackingError when no unit is outstanding: the handle was
        destroyed more often than it was created/referenced, or never tracked.
        """
        with self._lock:
            sites = self._entries.get(handle)
            if not sites:
                kind = self._kinds.get(handle, "") or "handle"
                raise HandleTrackingError(
                    f"untracked destroy of {kind} {handle!r} "
                    "(double destroy, or destroy without create/reference)"
                )
            sites.pop()
            if not sites:
                del self._entries[handle]
                self._kinds.pop(handle, None)

    def outstanding(self, handle: Handle) -> int:
        with self._lock:
            return len(self._entries.get(handle, ()))

    def sites(self, handle: Handle) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._entries.get(handle, ()))

    def report_leaks(self) -> list[Leak]:
        """Every handle with outstanding units, oldest site first."""
        with self._lock:
            return [
                Leak(handle=h, kind=self._kinds.get(h, ""), sites=tuple(sites))
                for h, sites in self._entries.items()
            ]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._kinds.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._entries


registry = HandleRegistry()


def set_tracing(enabled: bool) -> bool:
    """Turn tracing on or off; returns the previous setting.

    Handles created while tracing was off are unknown to the registry, so
    switch it before creating resources, not in the middle of their life.
    """
    global tracing
    previous = tracing
    tracing = bool(enabled)
    _log.debug("Handle tracing %s", "enabled" if tracing else "disabled")
    return previous


def is_tracing() -> bool:
    return tracing


def call_site() -> str:
    """Location of the first caller outside this package."""
    frame = sys._getframe(1)
    while frame is not None:
        module = frame.f_globals.get("__name__", "")
        if module != _PACKAGE_PREFIX and not module.startswith(_PACKAGE_PREFIX + "."):
            code = frame.f_code
            return f"{code.co_filename}:{frame.f_lineno} in {code.co_name}"
        frame = frame.f_back
    return "<unknown>"


def mark_for_leak_detection(site: str, handle: Handle, kind: str = "") -> None:
    """A constructor handed out ``handle``."""
    registry.track(handle, site, kind)


def reference(site: str, handle: Handle, kind: str = "") -> None:
    """reference() gave ``handle`` one more owner."""
    registry.track(handle, site, kind)


def destroy(handle: Handle) -> None:
    """One owner of ``handle`` is about to drop its reference."""
    registry.untrack(handle)


def assert_no_leaks(clear: bool = True) -> None:
    """Raise LeakError if any handle is still outstanding.

    With ``clear`` the registry is emptied first, so one failing check does
    not cascade into the next.
    """
    leaks = registry.report_leaks()
    if clear:
        registry.clear()
    if leaks:
        raise LeakError(leaks)


def _report_at_exit() -> None:
    if not tracing:
        return
    leaks = registry.report_leaks()
    if not leaks:
        return
    _log.warning("%d cairo handle(s) never destroyed", len(leaks))
    for leak in leaks:
        _log.warning("  %s", leak)


if _CAIRO_LEAK_REPORT:
    atexit.register(_report_at_exit)
