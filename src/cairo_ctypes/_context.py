"""Drawing context.

A Context holds the drawing state (source, path, line width, font) and
renders onto its target surface. Drawing calls do not raise: cairo records
the first failure on the context, read it with status().
"""

from __future__ import annotations

import ctypes

from cairo_ctypes import _native
from cairo_ctypes._enums import FontSlant, FontWeight
from cairo_ctypes._font_face import FontFace
from cairo_ctypes._pattern import Pattern
from cairo_ctypes._resource import RefCounted
from cairo_ctypes._surface import Surface
from cairo_ctypes._types import TextExtents

__all__ = ("Context",)


class Context(RefCounted):
    __slots__ = ()

    _prefix = "cairo"
    _kind = "context"

    @classmethod
    def create(cls, target: Surface) -> Context:
        """A context drawing on ``target``; it keeps a reference to the target."""
        return cls._from_new(_native.lib().cairo_create(target._active_ptr()))

    def get_target(self) -> Surface:
        """The target surface (borrowed)."""
        return Surface._borrow(_native.lib().cairo_get_target(self._ptr()))

    # -- State ---------------------------------------------------------------

    def save(self) -> None:
        _native.lib().cairo_save(self._ptr())

    def restore(self) -> None:
        _native.lib().cairo_restore(self._ptr())

    # -- Source --------------------------------------------------------------

    def set_source(self, source: Pattern) -> None:
        _native.lib().cairo_set_source(self._ptr(), source._ptr())

    def set_source_rgb(self, red: float, green: float, blue: float) -> None:
        _native.lib().cairo_set_source_rgb(
            self._ptr(), float(red), float(green), float(blue)
        )

    def set_source_rgba(
        self, red: float, green: float, blue: float, alpha: float
    ) -> None:
        _native.lib().cairo_set_source_rgba(
            self._ptr(), float(red), float(green), float(blue), float(alpha)
        )

    def set_source_surface(
        self, surface: Surface, x: float = 0.0, y: float = 0.0
    ) -> None:
        _native.lib().cairo_set_source_surface(
            self._ptr(), surface._ptr(), float(x), float(y)
        )

    # -- Painting ------------------------------------------------------------

    def paint(self) -> None:
        _native.lib().cairo_paint(self._ptr())

    def paint_with_alpha(self, alpha: float) -> None:
        _native.lib().cairo_paint_with_alpha(self._ptr(), float(alpha))

    def fill(self) -> None:
        _native.lib().cairo_fill(self._ptr())

    def stroke(self) -> None:
        _native.lib().cairo_stroke(self._ptr())

    def set_line_width(self, width: float) -> None:
        _native.lib().cairo_set_line_width(self._ptr(), float(width))

    # -- Path ----------------------------------------------------------------

    def new_path(self) -> None:
        _native.lib().cairo_new_path(self._ptr())

    def move_to(self, x: float, y: float) -> None:
        _native.lib().cairo_move_to(self._ptr(), float(x), float(y))

    def line_to(self, x: float, y: float) -> None:
        _native.lib().cairo_line_to(self._ptr(), float(x), float(y))

    def rectangle(self, x: float, y: float, width: float, height: float) -> None:
        _native.lib().cairo_rectangle(
            self._ptr(), float(x), float(y), float(width), float(height)
        )

    def arc(
        self, xc: float, yc: float, radius: float, angle1: float, angle2: float
    ) -> None:
        _native.lib().cairo_arc(
            self._ptr(),
            float(xc),
            float(yc),
            float(radius),
            float(angle1),
            float(angle2),
        )

    def close_path(self) -> None:
        _native.lib().cairo_close_path(self._ptr())

    # -- Text ----------------------------------------------------------------

    def select_font_face(
        self,
        family: str,
        slant: FontSlant = FontSlant.NORMAL,
        weight: FontWeight = FontWeight.NORMAL,
    ) -> None:
        _native.lib().cairo_select_font_face(
            self._ptr(), family.encode("utf-8"), int(slant), int(weight)
        )

    def set_font_size(self, size: float) -> None:
        _native.lib().cairo_set_font_size(self._ptr(), float(size))

    def set_font_face(self, font_face: FontFace | None) -> None:
        """Use ``font_face`` for text; None restores the default face."""
        face_ptr = font_face._ptr() if font_face is not None else None
        _native.lib().cairo_set_font_face(self._ptr(), face_ptr)

    def get_font_face(self) -> FontFace:
        """The current font face (borrowed)."""
        return FontFace._borrow(_native.lib().cairo_get_font_face(self._ptr()))

    def show_text(self, text: str) -> None:
        _native.lib().cairo_show_text(self._ptr(), text.encode("utf-8"))

    def text_extents(self, text: str) -> TextExtents:
        extents = TextExtents()
        _native.lib().cairo_text_extents(
            self._ptr(), text.encode("utf-8"), ctypes.pointer(extents)
        )
        return extents
