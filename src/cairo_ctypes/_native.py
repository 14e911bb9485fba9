"""Loading libcairo and declaring the C signatures the bindings call.

The library is loaded lazily on first use and shared by every wrapper.
use_library() swaps in another object exposing the same ``cairo_*``
attributes: an already-loaded CDLL from an embedding application, or a
stand-in used by the test-suite.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import threading
from typing import Protocol

from cairo_ctypes._errors import LibraryNotFoundError
from cairo_ctypes._logging import get_logger
from cairo_ctypes._platform import _CAIRO_LIBRARY, _CAIRO_SONAMES
from cairo_ctypes._types import (
    DestroyFunc,
    ReadFunc,
    RectangleInt,
    TextExtents,
    WriteFunc,
)

__all__ = ("lib", "use_library", "load_library", "version_string")

_log = get_logger(__name__)


class _CairoLibFunc(Protocol):
    def __call__(self, *args) -> object: ...


class _CairoLib(ctypes.CDLL):
    # Surface
    cairo_surface_create_similar: _CairoLibFunc
    cairo_surface_create_similar_image: _CairoLibFunc
    cairo_surface_create_for_rectangle: _CairoLibFunc
    cairo_surface_reference: _CairoLibFunc
    cairo_surface_destroy: _CairoLibFunc
    cairo_surface_status: _CairoLibFunc
    cairo_surface_finish: _CairoLibFunc
    cairo_surface_flush: _CairoLibFunc
    cairo_surface_get_device: _CairoLibFunc
    cairo_surface_get_font_options: _CairoLibFunc
    cairo_surface_get_content: _CairoLibFunc
    cairo_surface_mark_dirty: _CairoLibFunc
    cairo_surface_mark_dirty_rectangle: _CairoLibFunc
    cairo_surface_set_device_offset: _CairoLibFunc
    cairo_surface_get_device_offset: _CairoLibFunc
    cairo_surface_set_device_scale: _CairoLibFunc
    cairo_surface_get_device_scale: _CairoLibFunc
    cairo_surface_set_fallback_resolution: _CairoLibFunc
    cairo_surface_get_fallback_resolution: _CairoLibFunc
    cairo_surface_get_type: _CairoLibFunc
    cairo_surface_get_reference_count: _CairoLibFunc
    cairo_surface_set_user_data: _CairoLibFunc
    cairo_surface_get_user_data: _CairoLibFunc
    cairo_surface_copy_page: _CairoLibFunc
    cairo_surface_show_page: _CairoLibFunc
    cairo_surface_has_show_text_glyphs: _CairoLibFunc
    cairo_surface_set_mime_data: _CairoLibFunc
    cairo_surface_get_mime_data: _CairoLibFunc
    cairo_surface_supports_mime_type: _CairoLibFunc
    cairo_surface_map_to_image: _CairoLibFunc
    cairo_surface_unmap_image: _CairoLibFunc
    cairo_surface_write_to_png: _CairoLibFunc
    cairo_surface_write_to_png_stream: _CairoLibFunc
    # Image surface
    cairo_image_surface_create: _CairoLibFunc
    cairo_image_surface_create_from_png: _CairoLibFunc
    cairo_image_surface_create_from_png_stream: _CairoLibFunc
    cairo_image_surface_get_width: _CairoLibFunc
    cairo_image_surface_get_height: _CairoLibFunc
    cairo_image_surface_get_stride: _CairoLibFunc
    cairo_image_surface_get_format: _CairoLibFunc
    cairo_image_surface_get_data: _CairoLibFunc
    cairo_format_stride_for_width: _CairoLibFunc
    # Device
    cairo_device_reference: _CairoLibFunc
    cairo_device_destroy: _CairoLibFunc
    cairo_device_status: _CairoLibFunc
    cairo_device_finish: _CairoLibFunc
    cairo_device_flush: _CairoLibFunc
    cairo_device_get_type: _CairoLibFunc
    cairo_device_get_reference_count: _CairoLibFunc
    cairo_device_set_user_data: _CairoLibFunc
    cairo_device_get_user_data: _CairoLibFunc
    # Font options
    cairo_font_options_create: _CairoLibFunc
    cairo_font_options_copy: _CairoLibFunc
    cairo_font_options_destroy: _CairoLibFunc
    cairo_font_options_status: _CairoLibFunc
    cairo_font_options_equal: _CairoLibFunc
    cairo_font_options_set_antialias: _CairoLibFunc
    cairo_font_options_get_antialias: _CairoLibFunc
    # Font face
    cairo_font_face_reference: _CairoLibFunc
    cairo_font_face_destroy: _CairoLibFunc
    cairo_font_face_status: _CairoLibFunc
    cairo_font_face_get_type: _CairoLibFunc
    cairo_font_face_get_reference_count: _CairoLibFunc
    cairo_font_face_set_user_data: _CairoLibFunc
    cairo_font_face_get_user_data: _CairoLibFunc
    cairo_toy_font_face_create: _CairoLibFunc
    cairo_toy_font_face_get_family: _CairoLibFunc
    cairo_toy_font_face_get_slant: _CairoLibFunc
    cairo_toy_font_face_get_weight: _CairoLibFunc
    # Pattern
    cairo_pattern_create_rgb: _CairoLibFunc
    cairo_pattern_create_rgba: _CairoLibFunc
    cairo_pattern_create_for_surface: _CairoLibFunc
    cairo_pattern_create_linear: _CairoLibFunc
    cairo_pattern_create_radial: _CairoLibFunc
    cairo_pattern_add_color_stop_rgb: _CairoLibFunc
    cairo_pattern_add_color_stop_rgba: _CairoLibFunc
    cairo_pattern_get_surface: _CairoLibFunc
    cairo_pattern_reference: _CairoLibFunc
    cairo_pattern_destroy: _CairoLibFunc
    cairo_pattern_status: _CairoLibFunc
    cairo_pattern_get_type: _CairoLibFunc
    cairo_pattern_get_reference_count: _CairoLibFunc
    cairo_pattern_set_user_data: _CairoLibFunc
    cairo_pattern_get_user_data: _CairoLibFunc
    # Context
    cairo_create: _CairoLibFunc
    cairo_reference: _CairoLibFunc
    cairo_destroy: _CairoLibFunc
    cairo_status: _CairoLibFunc
    cairo_get_reference_count: _CairoLibFunc
    cairo_set_user_data: _CairoLibFunc
    cairo_get_user_data: _CairoLibFunc
    cairo_get_target: _CairoLibFunc
    cairo_save: _CairoLibFunc
    cairo_restore: _CairoLibFunc
    cairo_set_source: _CairoLibFunc
    cairo_set_source_rgb: _CairoLibFunc
    cairo_set_source_rgba: _CairoLibFunc
    cairo_set_source_surface: _CairoLibFunc
    cairo_paint: _CairoLibFunc
    cairo_paint_with_alpha: _CairoLibFunc
    cairo_new_path: _CairoLibFunc
    cairo_move_to: _CairoLibFunc
    cairo_line_to: _CairoLibFunc
    cairo_rectangle: _CairoLibFunc
    cairo_arc: _CairoLibFunc
    cairo_close_path: _CairoLibFunc
    cairo_fill: _CairoLibFunc
    cairo_stroke: _CairoLibFunc
    cairo_set_line_width: _CairoLibFunc
    cairo_select_font_face: _CairoLibFunc
    cairo_set_font_size: _CairoLibFunc
    cairo_set_font_face: _CairoLibFunc
    cairo_get_font_face: _CairoLibFunc
    cairo_show_text: _CairoLibFunc
    cairo_text_extents: _CairoLibFunc
    # Misc
    cairo_status_to_string: _CairoLibFunc
    cairo_version_string: _CairoLibFunc


_lib: _CairoLib | None = None
_lib_lock = threading.Lock()


def _find_library_path(path: str | None) -> list[str]:
    if path:
        return [str(path)]
    if _CAIRO_LIBRARY:
        return [_CAIRO_LIBRARY]
    candidates = []
    found = ctypes.util.find_library("cairo")
    if found:
        candidates.append(found)
    candidates.extend(_CAIRO_SONAMES)
    return candidates


def load_library(path: str | None = None) -> _CairoLib:
    """Load libcairo and declare its signatures. Does not install it."""
    candidates = _find_library_path(path)
    errors = []
    for candidate in candidates:
        try:
            handle = ctypes.CDLL(candidate)
        except OSError as e:
            errors.append(f"{candidate}: {e}")
            continue
        _log.debug("Loaded cairo from %s", candidate)
        _setup_argtypes_static(handle)
        return handle
    raise LibraryNotFoundError(
        "Failed to load libcairo (set CAIRO_CTYPES_LIBRARY): " + "; ".join(errors)
    )


def lib() -> _CairoLib:
    """Return the active cairo library, loading it on first use."""
    global _lib
    if _lib is None:
        with _lib_lock:
            if _lib is None:
                _lib = load_library()
    return _lib


def use_library(library) -> object:
    """Install ``library`` as the active cairo library; returns the previous one.

    Passing None unloads the current one so that the next call loads
    libcairo again.
    """
    global _lib
    with _lib_lock:
        previous = _lib
        _lib = library
    _log.debug("Active cairo library: %r", library)
    return previous


def version_string() -> str:
    return lib().cairo_version_string().decode("ascii")


def _setup_argtypes_static(lib: _CairoLib) -> None:
    """Set up argtypes once"""
    L = lib
    _p = ctypes.c_void_p
    _i = ctypes.c_int
    _d = ctypes.c_double
    _s = ctypes.c_char_p
    _pd = ctypes.POINTER(ctypes.c_double)

    # Lifecycle shared by every reference-counted kind
    for prefix in (
        "cairo_surface",
        "cairo_device",
        "cairo_font_face",
        "cairo_pattern",
        "cairo",
    ):
        fn = getattr(L, f"{prefix}_reference")
        fn.argtypes = [_p]
        fn.restype = _p
        fn = getattr(L, f"{prefix}_destroy")
        fn.argtypes = [_p]
        fn.restype = None
        fn = getattr(L, f"{prefix}_status")
        fn.argtypes = [_p]
        fn.restype = _i
        fn = getattr(L, f"{prefix}_get_reference_count")
        fn.argtypes = [_p]
        fn.restype = ctypes.c_uint
        fn = getattr(L, f"{prefix}_set_user_data")
        fn.argtypes = [_p, _p, _p, DestroyFunc]
        fn.restype = _i
        fn = getattr(L, f"{prefix}_get_user_data")
        fn.argtypes = [_p, _p]
        fn.restype = _p

    # Surface constructors
    L.cairo_surface_create_similar.argtypes = [_p, _i, _i, _i]
    L.cairo_surface_create_similar.restype = _p
    L.cairo_surface_create_similar_image.argtypes = [_p, _i, _i, _i]
    L.cairo_surface_create_similar_image.restype = _p
    L.cairo_surface_create_for_rectangle.argtypes = [_p, _d, _d, _d, _d]
    L.cairo_surface_create_for_rectangle.restype = _p

    # Surface state
    for name in (
        "cairo_surface_finish",
        "cairo_surface_flush",
        "cairo_surface_mark_dirty",
        "cairo_surface_copy_page",
        "cairo_surface_show_page",
    ):
        fn = getattr(L, name)
        fn.argtypes = [_p]
        fn.restype = None

    L.cairo_surface_get_device.argtypes = [_p]
    L.cairo_surface_get_device.restype = _p
    L.cairo_surface_get_font_options.argtypes = [_p, _p]
    L.cairo_surface_get_font_options.restype = None
    L.cairo_surface_get_content.argtypes = [_p]
    L.cairo_surface_get_content.restype = _i
    L.cairo_surface_mark_dirty_rectangle.argtypes = [_p, _i, _i, _i, _i]
    L.cairo_surface_mark_dirty_rectangle.restype = None
    L.cairo_surface_get_type.argtypes = [_p]
    L.cairo_surface_get_type.restype = _i
    L.cairo_surface_has_show_text_glyphs.argtypes = [_p]
    L.cairo_surface_has_show_text_glyphs.restype = _i

    # (surface, x, y) setters and (surface, *x, *y) getters
    for name in ("device_offset", "device_scale", "fallback_resolution"):
        fn = getattr(L, f"cairo_surface_set_{name}")
        fn.argtypes = [_p, _d, _d]
        fn.restype = None
        fn = getattr(L, f"cairo_surface_get_{name}")
        fn.argtypes = [_p, _pd, _pd]
        fn.restype = None

    # Mime data
    L.cairo_surface_set_mime_data.argtypes = [
        _p,
        _s,  # mime_type
        _p,  # data
        ctypes.c_ulong,  # length
        DestroyFunc,
        _p,  # closure
    ]
    L.cairo_surface_set_mime_data.restype = _i
    L.cairo_surface_get_mime_data.argtypes = [
        _p,
        _s,
        ctypes.POINTER(ctypes.c_void_p),
        ctypes.POINTER(ctypes.c_ulong),
    ]
    L.cairo_surface_get_mime_data.restype = None
    L.cairo_surface_supports_mime_type.argtypes = [_p, _s]
    L.cairo_surface_supports_mime_type.restype = _i

    # Map / unmap
    L.cairo_surface_map_to_image.argtypes = [_p, ctypes.POINTER(RectangleInt)]
    L.cairo_surface_map_to_image.restype = _p
    L.cairo_surface_unmap_image.argtypes = [_p, _p]
    L.cairo_surface_unmap_image.restype = None

    # PNG output
    L.cairo_surface_write_to_png.argtypes = [_p, _s]
    L.cairo_surface_write_to_png.restype = _i
    L.cairo_surface_write_to_png_stream.argtypes = [_p, WriteFunc, _p]
    L.cairo_surface_write_to_png_stream.restype = _i

    # Image surface
    L.cairo_image_surface_create.argtypes = [_i, _i, _i]
    L.cairo_image_surface_create.restype = _p
    L.cairo_image_surface_create_from_png.argtypes = [_s]
    L.cairo_image_surface_create_from_png.restype = _p
    L.cairo_image_surface_create_from_png_stream.argtypes = [ReadFunc, _p]
    L.cairo_image_surface_create_from_png_stream.restype = _p
    for name in ("width", "height", "stride", "format"):
        fn = getattr(L, f"cairo_image_surface_get_{name}")
        fn.argtypes = [_p]
        fn.restype = _i
    L.cairo_image_surface_get_data.argtypes = [_p]
    L.cairo_image_surface_get_data.restype = _p
    L.cairo_format_stride_for_width.argtypes = [_i, _i]
    L.cairo_format_stride_for_width.restype = _i

    # Device
    L.cairo_device_finish.argtypes = [_p]
    L.cairo_device_finish.restype = None
    L.cairo_device_flush.argtypes = [_p]
    L.cairo_device_flush.restype = None
    L.cairo_device_get_type.argtypes = [_p]
    L.cairo_device_get_type.restype = _i

    # Font options (create/copy/destroy, no reference count)
    L.cairo_font_options_create.argtypes = []
    L.cairo_font_options_create.restype = _p
    L.cairo_font_options_copy.argtypes = [_p]
    L.cairo_font_options_copy.restype = _p
    L.cairo_font_options_destroy.argtypes = [_p]
    L.cairo_font_options_destroy.restype = None
    L.cairo_font_options_status.argtypes = [_p]
    L.cairo_font_options_status.restype = _i
    L.cairo_font_options_equal.argtypes = [_p, _p]
    L.cairo_font_options_equal.restype = _i
    L.cairo_font_options_set_antialias.argtypes = [_p, _i]
    L.cairo_font_options_set_antialias.restype = None
    L.cairo_font_options_get_antialias.argtypes = [_p]
    L.cairo_font_options_get_antialias.restype = _i

    # Font face
    L.cairo_font_face_get_type.argtypes = [_p]
    L.cairo_font_face_get_type.restype = _i
    L.cairo_toy_font_face_create.argtypes = [_s, _i, _i]
    L.cairo_toy_font_face_create.restype = _p
    L.cairo_toy_font_face_get_family.argtypes = [_p]
    L.cairo_toy_font_face_get_family.restype = _s
    L.cairo_toy_font_face_get_slant.argtypes = [_p]
    L.cairo_toy_font_face_get_slant.restype = _i
    L.cairo_toy_font_face_get_weight.argtypes = [_p]
    L.cairo_toy_font_face_get_weight.restype = _i

    # Pattern
    L.cairo_pattern_create_rgb.argtypes = [_d] * 3
    L.cairo_pattern_create_rgb.restype = _p
    L.cairo_pattern_create_rgba.argtypes = [_d] * 4
    L.cairo_pattern_create_rgba.restype = _p
    L.cairo_pattern_create_for_surface.argtypes = [_p]
    L.cairo_pattern_create_for_surface.restype = _p
    L.cairo_pattern_create_linear.argtypes = [_d] * 4
    L.cairo_pattern_create_linear.restype = _p
    L.cairo_pattern_create_radial.argtypes = [_d] * 6
    L.cairo_pattern_create_radial.restype = _p
    L.cairo_pattern_add_color_stop_rgb.argtypes = [_p] + [_d] * 4
    L.cairo_pattern_add_color_stop_rgb.restype = None
    L.cairo_pattern_add_color_stop_rgba.argtypes = [_p] + [_d] * 5
    L.cairo_pattern_add_color_stop_rgba.restype = None
    L.cairo_pattern_get_surface.argtypes = [_p, ctypes.POINTER(ctypes.c_void_p)]
    L.cairo_pattern_get_surface.restype = _i
    L.cairo_pattern_get_type.argtypes = [_p]
    L.cairo_pattern_get_type.restype = _i

    # Context
    L.cairo_create.argtypes = [_p]
    L.cairo_create.restype = _p
    L.cairo_get_target.argtypes = [_p]
    L.cairo_get_target.restype = _p
    for name in (
        "cairo_save",
        "cairo_restore",
        "cairo_paint",
        "cairo_new_path",
        "cairo_close_path",
        "cairo_fill",
        "cairo_stroke",
    ):
        fn = getattr(L, name)
        fn.argtypes = [_p]
        fn.restype = None
    L.cairo_set_source.argtypes = [_p, _p]
    L.cairo_set_source.restype = None
    L.cairo_set_source_rgb.argtypes = [_p] + [_d] * 3
    L.cairo_set_source_rgb.restype = None
    L.cairo_set_source_rgba.argtypes = [_p] + [_d] * 4
    L.cairo_set_source_rgba.restype = None
    L.cairo_set_source_surface.argtypes = [_p, _p, _d, _d]
    L.cairo_set_source_surface.restype = None
    L.cairo_paint_with_alpha.argtypes = [_p, _d]
    L.cairo_paint_with_alpha.restype = None
    L.cairo_move_to.argtypes = [_p, _d, _d]
    L.cairo_move_to.restype = None
    L.cairo_line_to.argtypes = [_p, _d, _d]
    L.cairo_line_to.restype = None
    L.cairo_rectangle.argtypes = [_p] + [_d] * 4
    L.cairo_rectangle.restype = None
    # (cr, xc, yc, radius, angle1, angle2)
    L.cairo_arc.argtypes = [_p] + [_d] * 5
    L.cairo_arc.restype = None
    L.cairo_set_line_width.argtypes = [_p, _d]
    L.cairo_set_line_width.restype = None
    L.cairo_select_font_face.argtypes = [_p, _s, _i, _i]
    L.cairo_select_font_face.restype = None
    L.cairo_set_font_size.argtypes = [_p, _d]
    L.cairo_set_font_size.restype = None
    L.cairo_set_font_face.argtypes = [_p, _p]
    L.cairo_set_font_face.restype = None
    L.cairo_get_font_face.argtypes = [_p]
    L.cairo_get_font_face.restype = _p
    L.cairo_show_text.argtypes = [_p, _s]
    L.cairo_show_text.restype = None
    L.cairo_text_extents.argtypes = [_p, _s, ctypes.POINTER(TextExtents)]
    L.cairo_text_extents.restype = None

    # Misc
    L.cairo_status_to_string.argtypes = [_i]
    L.cairo_status_to_string.restype = _s
    L.cairo_version_string.argtypes = []
    L.cairo_version_string.restype = _s
