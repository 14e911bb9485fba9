"""
ctypes bindings for the cairo 2D graphics library.

Usage:
    import cairo_ctypes as cairo

    with cairo.ImageSurface.create(cairo.Format.ARGB32, 200, 100) as surface:
        with cairo.Context.create(surface) as cr:
            cr.set_source_rgb(1, 1, 1)
            cr.paint()
        surface.write_to_png("out.png")

Every create*() and reference() call hands out one reference that must be
given back with destroy() (or a ``with`` block). While tracing is on (the
default, off under ``python -O``) mismatched destroys raise
HandleTrackingError and assert_no_leaks() reports what was never destroyed.
"""

from __future__ import annotations

from cairo_ctypes._enums import (
    Antialias,
    Content,
    DeviceType,
    FontSlant,
    FontType,
    FontWeight,
    Format,
    MimeType,
    PatternType,
    Status,
    SurfaceType,
)
from cairo_ctypes._errors import (
    CairoError,
    CairoFileNotFoundError,
    DeviceFinishedError,
    FontTypeMismatchError,
    HandleReleasedError,
    HandleTrackingError,
    InvalidContentError,
    InvalidFormatError,
    InvalidMatrixError,
    InvalidRestoreError,
    InvalidSizeError,
    InvalidStrideError,
    InvalidStringError,
    LeakError,
    LibraryNotFoundError,
    NativeContractError,
    NoCurrentPointError,
    NoMemoryError,
    NullPointerError,
    PatternTypeMismatchError,
    PngError,
    ReadError,
    SurfaceFinishedError,
    SurfaceTypeMismatchError,
    UserDataError,
    WriteError,
    error_for_status,
)
from cairo_ctypes._types import Handle, RectangleInt, TextExtents, UserDataKey
from cairo_ctypes._safety import (
    HandleRegistry,
    Leak,
    assert_no_leaks,
    is_tracing,
    registry,
    set_tracing,
)
from cairo_ctypes._native import load_library, use_library, version_string
from cairo_ctypes._logging import configure_logging
from cairo_ctypes._resource import RefCounted, Resource
from cairo_ctypes._surface import ImageSurface, MappedImage, Surface
from cairo_ctypes._device import Device, FontOptions
from cairo_ctypes._font_face import FontFace, ToyFontFace
from cairo_ctypes._pattern import Pattern
from cairo_ctypes._context import Context

__all__ = (
    # Enums
    "Antialias",
    "Content",
    "DeviceType",
    "FontSlant",
    "FontType",
    "FontWeight",
    "Format",
    "MimeType",
    "PatternType",
    "Status",
    "SurfaceType",
    # Errors
    "CairoError",
    "CairoFileNotFoundError",
    "DeviceFinishedError",
    "FontTypeMismatchError",
    "HandleReleasedError",
    "HandleTrackingError",
    "InvalidContentError",
    "InvalidFormatError",
    "InvalidMatrixError",
    "InvalidRestoreError",
    "InvalidSizeError",
    "InvalidStrideError",
    "InvalidStringError",
    "LeakError",
    "LibraryNotFoundError",
    "NativeContractError",
    "NoCurrentPointError",
    "NoMemoryError",
    "NullPointerError",
    "PatternTypeMismatchError",
    "PngError",
    "ReadError",
    "SurfaceFinishedError",
    "SurfaceTypeMismatchError",
    "UserDataError",
    "WriteError",
    "error_for_status",
    # Types
    "Handle",
    "RectangleInt",
    "TextExtents",
    "UserDataKey",
    # Handle tracking
    "HandleRegistry",
    "Leak",
    "assert_no_leaks",
    "is_tracing",
    "registry",
    "set_tracing",
    # Library
    "load_library",
    "use_library",
    "version_string",
    "configure_logging",
    # Resources
    "Resource",
    "RefCounted",
    "Surface",
    "ImageSurface",
    "MappedImage",
    "Device",
    "FontOptions",
    "FontFace",
    "ToyFontFace",
    "Pattern",
    "Context",
)
