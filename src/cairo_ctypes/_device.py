from __future__ import annotations

from cairo_ctypes import _native
from cairo_ctypes._enums import Antialias, DeviceType
from cairo_ctypes._resource import RefCounted, Resource

__all__ = ("Device", "FontOptions")


class Device(RefCounted):
    """Backend device shared by the surfaces that render through it.

    Devices are never created directly; Surface.get_device() returns a
    borrowed one.
    """

    __slots__ = ()

    _prefix = "cairo_device"
    _kind = "device"

    def finish(self) -> None:
        _native.lib().cairo_device_finish(self._ptr())

    def flush(self) -> None:
        _native.lib().cairo_device_flush(self._ptr())

    def get_type(self) -> DeviceType:
        return DeviceType(_native.lib().cairo_device_get_type(self._ptr()))


class FontOptions(Resource):
    """Rendering options for fonts. Not reference counted: copy() it to share."""

    __slots__ = ()

    _prefix = "cairo_font_options"
    _kind = "font options"

    @classmethod
    def create(cls) -> FontOptions:
        return cls._from_new(_native.lib().cairo_font_options_create())

    def copy(self) -> FontOptions:
        return FontOptions._from_new(
            _native.lib().cairo_font_options_copy(self._ptr())
        )

    def get_antialias(self) -> Antialias:
        return Antialias(_native.lib().cairo_font_options_get_antialias(self._ptr()))

    def set_antialias(self, antialias: Antialias) -> None:
        _native.lib().cairo_font_options_set_antialias(self._ptr(), int(antialias))

    def __eq__(self, other) -> bool:
        if not isinstance(other, FontOptions):
            return NotImplemented
        if self.released or other.released:
            return self.handle == other.handle
        return bool(_native.lib().cairo_font_options_equal(self._ptr(), other._ptr()))

    # Mutable and compared by content
    __hash__ = None
