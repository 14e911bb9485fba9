"""Font faces.

A FontFace is a particular font at a particular weight and slant, with no
size or transformation. Faces come from backend constructors
(ToyFontFace.create() here) or from a Context by way of the toy text API:
Context.select_font_face() followed by Context.get_font_face().
"""

from __future__ import annotations

from cairo_ctypes import _native
from cairo_ctypes._enums import FontSlant, FontType, FontWeight
from cairo_ctypes._resource import RefCounted

__all__ = ("FontFace", "ToyFontFace")


class FontFace(RefCounted):
    __slots__ = ()

    _prefix = "cairo_font_face"
    _kind = "font face"

    @classmethod
    def _class_for(cls, address: int) -> type:
        if _native.lib().cairo_font_face_get_type(address) == FontType.TOY:
            return ToyFontFace
        return FontFace

    def get_type(self) -> FontType:
        return FontType(_native.lib().cairo_font_face_get_type(self._ptr()))


class ToyFontFace(FontFace):
    """Font face picked by family name, slant and weight."""

    __slots__ = ()

    _kind = "toy font face"

    @classmethod
    def _class_for(cls, address: int) -> type:
        return ToyFontFace

    @classmethod
    def create(
        cls,
        family: str,
        slant: FontSlant = FontSlant.NORMAL,
        weight: FontWeight = FontWeight.NORMAL,
    ) -> ToyFontFace:
        address = _native.lib().cairo_toy_font_face_create(
            family.encode("utf-8"), int(slant), int(weight)
        )
        return cls._from_new(address)

    def get_family(self) -> str:
        family = _native.lib().cairo_toy_font_face_get_family(self._ptr())
        return family.decode("utf-8") if family else ""

    def get_slant(self) -> FontSlant:
        return FontSlant(_native.lib().cairo_toy_font_face_get_slant(self._ptr()))

    def get_weight(self) -> FontWeight:
        return FontWeight(_native.lib().cairo_toy_font_face_get_weight(self._ptr()))
