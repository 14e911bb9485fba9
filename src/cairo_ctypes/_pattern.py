from __future__ import annotations

import ctypes
from typing import TYPE_CHECKING

from cairo_ctypes import _native
from cairo_ctypes._enums import PatternType, Status
from cairo_ctypes._resource import RefCounted

if TYPE_CHECKING:
    from cairo_ctypes._surface import Surface

__all__ = ("Pattern",)


class Pattern(RefCounted):
    """Paint source: solid colour, surface, or gradient."""

    __slots__ = ()

    _prefix = "cairo_pattern"
    _kind = "pattern"

    @classmethod
    def create_rgb(cls, red: float, green: float, blue: float) -> Pattern:
        return cls._from_new(
            _native.lib().cairo_pattern_create_rgb(
                float(red), float(green), float(blue)
            )
        )

    @classmethod
    def create_rgba(
        cls, red: float, green: float, blue: float, alpha: float
    ) -> Pattern:
        return cls._from_new(
            _native.lib().cairo_pattern_create_rgba(
                float(red), float(green), float(blue), float(alpha)
            )
        )

    @classmethod
    def create_for_surface(cls, surface: Surface) -> Pattern:
        """Pattern painting ``surface``; the pattern takes its own reference."""
        return cls._from_new(
            _native.lib().cairo_pattern_create_for_surface(surface._ptr())
        )

    @classmethod
    def create_linear(cls, x0: float, y0: float, x1: float, y1: float) -> Pattern:
        return cls._from_new(
            _native.lib().cairo_pattern_create_linear(
                float(x0), float(y0), float(x1), float(y1)
            )
        )

    @classmethod
    def create_radial(
        cls,
        cx0: float,
        cy0: float,
        radius0: float,
        cx1: float,
        cy1: float,
        radius1: float,
    ) -> Pattern:
        return cls._from_new(
            _native.lib().cairo_pattern_create_radial(
                float(cx0),
                float(cy0),
                float(radius0),
                float(cx1),
                float(cy1),
                float(radius1),
            )
        )

    def add_color_stop_rgb(
        self, offset: float, red: float, green: float, blue: float
    ) -> None:
        _native.lib().cairo_pattern_add_color_stop_rgb(
            self._ptr(), float(offset), float(red), float(green), float(blue)
        )

    def add_color_stop_rgba(
        self, offset: float, red: float, green: float, blue: float, alpha: float
    ) -> None:
        _native.lib().cairo_pattern_add_color_stop_rgba(
            self._ptr(),
            float(offset),
            float(red),
            float(green),
            float(blue),
            float(alpha),
        )

    def get_type(self) -> PatternType:
        return PatternType(_native.lib().cairo_pattern_get_type(self._ptr()))

    def get_surface(self) -> Surface:
        """The surface of a surface pattern (borrowed).

        Raises PatternTypeMismatchError for other pattern types.
        """
        from cairo_ctypes._surface import Surface

        address = ctypes.c_void_p()
        status = Status(
            _native.lib().cairo_pattern_get_surface(
                self._ptr(), ctypes.pointer(address)
            )
        )
        status.raise_for_status()
        return Surface._borrow(address.value)
