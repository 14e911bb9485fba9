"""Shared fixtures: a fake libcairo and an isolated handle registry.

FakeCairo answers the ``cairo_*`` calls the bindings make with plain Python
objects keyed by fake addresses. It keeps native-style reference counts,
hands out error objects instead of NULL on invalid arguments, and runs
user-data/mime-data destroy callbacks the way cairo does (on overwrite and
when the object is freed). Every call on a freed address raises
FakeCairoMisuse, so a test fails loudly if a wrapper reaches native code
after giving its reference back.
"""

from __future__ import annotations

import ctypes
import struct
from collections import Counter

import pytest

from cairo_ctypes import _native, _safety
from cairo_ctypes._enums import (
    Antialias,
    Content,
    DeviceType,
    FontType,
    Format,
    PatternType,
    Status,
    SurfaceType,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_BITS_PER_PIXEL = {
    Format.ARGB32: 32,
    Format.RGB24: 32,
    Format.A8: 8,
    Format.A1: 1,
    Format.RGB16_565: 16,
    Format.RGB30: 32,
    Format.RGB96F: 96,
    Format.RGBA128F: 128,
}

_CONTENT_FORMAT = {
    Content.COLOR: Format.RGB24,
    Content.ALPHA: Format.A8,
    Content.COLOR_ALPHA: Format.ARGB32,
}

# Attributes holding native references an object releases when freed
_OWNED_FIELDS = ("target", "source", "font_face", "surface", "parent_ref", "device")


class FakeCairoMisuse(Exception):
    """A call reached the fake library with a freed or unknown address."""


class _Obj:
    def __init__(self, kind: str, status: int = 0, **fields) -> None:
        self.kind = kind
        self.status = int(status)
        self.refs = 1
        self.user_data: dict[int, tuple] = {}
        self.__dict__.update(fields)


class FakeCairo:
    def __init__(self) -> None:
        self._next = 0x1000
        self.objects: dict[int, _Obj] = {}
        self.freed: list[int] = []
        self.destroy_calls: Counter = Counter()
        self.calls: list[tuple] = []
        self.fail_user_data = False

        for prefix in (
            "cairo_surface",
            "cairo_device",
            "cairo_font_face",
            "cairo_pattern",
            "cairo",
        ):
            setattr(self, f"{prefix}_reference", self._reference)
            setattr(self, f"{prefix}_destroy", self._destroy)
            setattr(self, f"{prefix}_status", self._status)
            setattr(self, f"{prefix}_get_reference_count", self._refcount)
            setattr(self, f"{prefix}_set_user_data", self._set_user_data)
            setattr(self, f"{prefix}_get_user_data", self._get_user_data)
        self.cairo_font_options_destroy = self._destroy
        self.cairo_font_options_status = self._status

    # -- Bookkeeping ---------------------------------------------------------

    def _new(self, kind: str, status: int = 0, **fields) -> int:
        address = self._next
        self._next += 0x10
        self.objects[address] = _Obj(kind, status, **fields)
        return address

    def obj(self, address) -> _Obj:
        obj = self.objects.get(address)
        if obj is None:
            raise FakeCairoMisuse(f"use of freed or unknown object {address!r}")
        return obj

    def is_alive(self, address: int) -> bool:
        return address in self.objects

    def live(self, kind: str) -> list[int]:
        return [a for a, o in self.objects.items() if o.kind == kind]

    def _release(self, address: int) -> None:
        obj = self.obj(address)
        obj.refs -= 1
        if obj.refs > 0:
            return
        del self.objects[address]
        self.freed.append(address)
        for data, destroy in list(obj.user_data.values()):
            if destroy:
                destroy(data)
        for _, _, destroy, closure in list(getattr(obj, "mime", {}).values()):
            if destroy:
                destroy(closure)
        for name in _OWNED_FIELDS:
            owned = getattr(obj, name, None)
            if owned:
                self._release(owned)

    def _retain(self, address: int) -> int:
        self.obj(address).refs += 1
        return address

    def attach_device(self, surface: int, device_type=DeviceType.SCRIPT) -> int:
        device = self._new("device", type=int(device_type), finished=False)
        self.obj(surface).device = device
        return device

    # -- Shared lifecycle ----------------------------------------------------

    def _reference(self, address):
        return self._retain(address)

    def _destroy(self, address):
        self.destroy_calls[address] += 1
        self._release(address)

    def _status(self, address):
        return self.obj(address).status

    def _refcount(self, address):
        return self.obj(address).refs

    def _set_user_data(self, address, key, data, destroy):
        obj = self.obj(address)
        if self.fail_user_data:
            return Status.NO_MEMORY
        old = obj.user_data.pop(key, None)
        if old is not None and old[1]:
            old[1](old[0])
        if data is not None:
            obj.user_data[key] = (data, destroy)
        return Status.SUCCESS

    def _get_user_data(self, address, key):
        entry = self.obj(address).user_data.get(key)
        return None if entry is None else entry[0]

    # -- Surfaces ------------------------------------------------------------

    def _surface(self, status=0, **fields) -> int:
        defaults = dict(
            type=SurfaceType.IMAGE,
            content=Content.COLOR_ALPHA,
            width=0,
            height=0,
            format=Format.INVALID,
            stride=0,
            data=None,
            finished=False,
            device=None,
            device_offset=(0.0, 0.0),
            device_scale=(1.0, 1.0),
            fallback_resolution=(300.0, 300.0),
            antialias=Antialias.DEFAULT,
            mime={},
            mapped_from=None,
        )
        defaults.update(fields)
        return self._new("surface", status, **defaults)

    def _error_surface(self, status) -> int:
        return self._surface(status=status)

    def _image(self, fmt, width, height, **fields) -> int:
        fmt = Format(fmt)
        stride = self.cairo_format_stride_for_width(fmt, width)
        data = (ctypes.c_ubyte * (stride * height))() if stride * height else None
        if fmt in (Format.A8, Format.A1):
            content = Content.ALPHA
        elif fmt in (Format.RGB24, Format.RGB16_565, Format.RGB30, Format.RGB96F):
            content = Content.COLOR
        else:
            content = Content.COLOR_ALPHA
        return self._surface(
            content=content,
            width=width,
            height=height,
            format=fmt,
            stride=stride,
            data=data,
            **fields,
        )

    def cairo_format_stride_for_width(self, fmt, width):
        bpp = _BITS_PER_PIXEL.get(fmt)
        if bpp is None or width < 0:
            return -1
        return (((bpp * width + 7) // 8) + 3) & ~3

    def cairo_image_surface_create(self, fmt, width, height):
        if fmt not in _BITS_PER_PIXEL:
            return self._error_surface(Status.INVALID_FORMAT)
        if width < 0 or height < 0 or width > 32767 or height > 32767:
            return self._error_surface(Status.INVALID_SIZE)
        return self._image(fmt, width, height)

    def cairo_surface_create_similar(self, address, content, width, height):
        parent = self.obj(address)
        if parent.status:
            return self._error_surface(parent.status)
        if width < 0 or height < 0:
            return self._error_surface(Status.INVALID_SIZE)
        return self._image(
            _CONTENT_FORMAT[Content(content)],
            width,
            height,
            device_scale=parent.device_scale,
        )

    def cairo_surface_create_similar_image(self, address, fmt, width, height):
        self.obj(address)
        return self.cairo_image_surface_create(fmt, width, height)

    def cairo_surface_create_for_rectangle(self, address, x, y, width, height):
        parent = self.obj(address)
        if parent.status:
            return self._error_surface(parent.status)
        if width < 0 or height < 0:
            return self._error_surface(Status.INVALID_SIZE)
        return self._surface(
            type=SurfaceType.SUBSURFACE,
            content=parent.content,
            width=int(width),
            height=int(height),
            parent_ref=self._retain(address),
        )

    def cairo_surface_finish(self, address):
        self.obj(address).finished = True
        self._draw(address, "finish")

    def cairo_surface_flush(self, address):
        self._draw(address, "flush")

    def cairo_surface_mark_dirty(self, address):
        self._draw(address, "mark_dirty")

    def cairo_surface_mark_dirty_rectangle(self, address, x, y, width, height):
        self._draw(address, "mark_dirty_rectangle", x, y, width, height)

    def cairo_surface_copy_page(self, address):
        self._draw(address, "copy_page")

    def cairo_surface_show_page(self, address):
        self._draw(address, "show_page")

    def cairo_surface_get_device(self, address):
        return self.obj(address).device

    def cairo_surface_get_font_options(self, address, options):
        self.obj(options).antialias = self.obj(address).antialias

    def cairo_surface_get_content(self, address):
        return int(self.obj(address).content)

    def cairo_surface_get_type(self, address):
        return int(self.obj(address).type)

    def cairo_surface_has_show_text_glyphs(self, address):
        self.obj(address)
        return 0

    def cairo_surface_set_device_offset(self, address, x, y):
        self.obj(address).device_offset = (x, y)

    def cairo_surface_get_device_offset(self, address, x_ptr, y_ptr):
        x_ptr.contents.value, y_ptr.contents.value = self.obj(address).device_offset

    def cairo_surface_set_device_scale(self, address, x, y):
        self.obj(address).device_scale = (x, y)

    def cairo_surface_get_device_scale(self, address, x_ptr, y_ptr):
        x_ptr.contents.value, y_ptr.contents.value = self.obj(address).device_scale

    def cairo_surface_set_fallback_resolution(self, address, x, y):
        self.obj(address).fallback_resolution = (x, y)

    def cairo_surface_get_fallback_resolution(self, address, x_ptr, y_ptr):
        x_ptr.contents.value, y_ptr.contents.value = (
            self.obj(address).fallback_resolution
        )

    def cairo_surface_set_mime_data(
        self, address, mime_type, data, length, destroy, closure
    ):
        obj = self.obj(address)
        if self.fail_user_data:
            return Status.NO_MEMORY
        old = obj.mime.pop(mime_type, None)
        if old is not None and old[2]:
            old[2](old[3])
        if data is not None:
            obj.mime[mime_type] = (data, length, destroy, closure)
        return Status.SUCCESS

    def cairo_surface_get_mime_data(self, address, mime_type, data_ptr, length_ptr):
        entry = self.obj(address).mime.get(mime_type)
        data_ptr.contents.value = entry[0] if entry else None
        length_ptr.contents.value = entry[1] if entry else 0

    def cairo_surface_supports_mime_type(self, address, mime_type):
        self.obj(address)
        return 0

    def cairo_surface_map_to_image(self, address, extents_ptr):
        parent = self.obj(address)
        if extents_ptr:
            rect = extents_ptr.contents
            width, height = rect.width, rect.height
        else:
            width, height = parent.width, parent.height
        if width < 0 or height < 0:
            image = self._error_surface(Status.INVALID_SIZE)
        else:
            image = self._image(Format.ARGB32, width, height)
        self.obj(image).mapped_from = address
        return image

    def cairo_surface_unmap_image(self, address, image):
        self.obj(address)
        if self.obj(image).mapped_from != address:
            raise FakeCairoMisuse("unmap_image with the wrong parent")
        self.calls.append(("unmap_image", address, image))
        self._release(image)

    def png_bytes(self, address) -> bytes:
        obj = self.obj(address)
        return PNG_SIGNATURE + struct.pack(">HH", obj.width, obj.height)

    def cairo_surface_write_to_png(self, address, filename):
        obj = self.obj(address)
        if obj.status:
            return obj.status
        try:
            with open(filename, "wb") as f:
                f.write(self.png_bytes(address))
        except OSError:
            return Status.WRITE_ERROR
        return Status.SUCCESS

    def cairo_surface_write_to_png_stream(self, address, write_func, closure):
        obj = self.obj(address)
        if obj.status:
            return obj.status
        data = self.png_bytes(address)
        for start in range(0, len(data), 8):
            chunk = data[start : start + 8]
            buf = (ctypes.c_ubyte * len(chunk)).from_buffer_copy(chunk)
            status = write_func(closure, buf, len(chunk))
            if status:
                return status
        return Status.SUCCESS

    def _image_from_png(self, data: bytes) -> int:
        if len(data) != 12 or not data.startswith(PNG_SIGNATURE):
            return self._error_surface(Status.PNG_ERROR)
        width, height = struct.unpack(">HH", data[8:])
        return self._image(Format.ARGB32, width, height)

    def cairo_image_surface_create_from_png(self, filename):
        try:
            with open(filename, "rb") as f:
                data = f.read()
        except OSError:
            return self._error_surface(Status.FILE_NOT_FOUND)
        return self._image_from_png(data)

    def cairo_image_surface_create_from_png_stream(self, read_func, closure):
        data = b""
        for size in (8, 4):
            buf = (ctypes.c_ubyte * size)()
            if read_func(closure, buf, size):
                return self._error_surface(Status.READ_ERROR)
            data += bytes(buf)
        return self._image_from_png(data)

    def cairo_image_surface_get_width(self, address):
        return self.obj(address).width

    def cairo_image_surface_get_height(self, address):
        return self.obj(address).height

    def cairo_image_surface_get_stride(self, address):
        return self.obj(address).stride

    def cairo_image_surface_get_format(self, address):
        return int(self.obj(address).format)

    def cairo_image_surface_get_data(self, address):
        data = self.obj(address).data
        return None if data is None else ctypes.addressof(data)

    # -- Devices -------------------------------------------------------------

    def cairo_device_finish(self, address):
        self.obj(address).finished = True

    def cairo_device_flush(self, address):
        self._draw(address, "device_flush")

    def cairo_device_get_type(self, address):
        return self.obj(address).type

    # -- Font options --------------------------------------------------------

    def cairo_font_options_create(self):
        return self._new("font_options", antialias=Antialias.DEFAULT)

    def cairo_font_options_copy(self, address):
        return self._new("font_options", antialias=self.obj(address).antialias)

    def cairo_font_options_equal(self, a, b):
        return int(self.obj(a).antialias == self.obj(b).antialias)

    def cairo_font_options_set_antialias(self, address, antialias):
        self.obj(address).antialias = Antialias(antialias)

    def cairo_font_options_get_antialias(self, address):
        return int(self.obj(address).antialias)

    # -- Font faces ----------------------------------------------------------

    def cairo_toy_font_face_create(self, family, slant, weight):
        if family is None:
            return self._new("font_face", Status.NULL_POINTER, type=FontType.TOY)
        if slant not in (0, 1, 2):
            return self._new("font_face", Status.INVALID_SLANT, type=FontType.TOY)
        if weight not in (0, 1):
            return self._new("font_face", Status.INVALID_WEIGHT, type=FontType.TOY)
        return self._new(
            "font_face", type=FontType.TOY, family=family, slant=slant, weight=weight
        )

    def cairo_font_face_get_type(self, address):
        return int(self.obj(address).type)

    def cairo_toy_font_face_get_family(self, address):
        return self.obj(address).family

    def cairo_toy_font_face_get_slant(self, address):
        return self.obj(address).slant

    def cairo_toy_font_face_get_weight(self, address):
        return self.obj(address).weight

    # -- Patterns ------------------------------------------------------------

    def _pattern(self, pattern_type, **fields) -> int:
        return self._new("pattern", type=pattern_type, stops=[], **fields)

    def cairo_pattern_create_rgb(self, red, green, blue):
        return self._pattern(PatternType.SOLID, color=(red, green, blue, 1.0))

    def cairo_pattern_create_rgba(self, red, green, blue, alpha):
        return self._pattern(PatternType.SOLID, color=(red, green, blue, alpha))

    def cairo_pattern_create_for_surface(self, surface):
        return self._pattern(PatternType.SURFACE, surface=self._retain(surface))

    def cairo_pattern_create_linear(self, x0, y0, x1, y1):
        return self._pattern(PatternType.LINEAR)

    def cairo_pattern_create_radial(self, cx0, cy0, radius0, cx1, cy1, radius1):
        return self._pattern(PatternType.RADIAL)

    def _add_stop(self, address, stop):
        obj = self.obj(address)
        if obj.type not in (PatternType.LINEAR, PatternType.RADIAL):
            obj.status = Status.PATTERN_TYPE_MISMATCH
            return
        obj.stops.append(stop)

    def cairo_pattern_add_color_stop_rgb(self, address, offset, red, green, blue):
        self._add_stop(address, (offset, red, green, blue, 1.0))

    def cairo_pattern_add_color_stop_rgba(
        self, address, offset, red, green, blue, alpha
    ):
        self._add_stop(address, (offset, red, green, blue, alpha))

    def cairo_pattern_get_type(self, address):
        return int(self.obj(address).type)

    def cairo_pattern_get_surface(self, address, surface_ptr):
        obj = self.obj(address)
        if obj.type != PatternType.SURFACE:
            return Status.PATTERN_TYPE_MISMATCH
        surface_ptr.contents.value = obj.surface
        return Status.SUCCESS

    # -- Contexts ------------------------------------------------------------

    def cairo_create(self, target):
        surface = self.obj(target)
        if surface.status:
            return self._new("context", surface.status, target=None)
        return self._new(
            "context",
            target=self._retain(target),
            source=None,
            font_face=None,
            font_size=10.0,
            line_width=2.0,
            depth=0,
            path=[],
            color=(0.0, 0.0, 0.0, 1.0),
        )

    def _draw(self, address, op, *args):
        self.obj(address)
        self.calls.append((op, address) + args)

    def _replace(self, obj, name, address):
        old = getattr(obj, name)
        setattr(obj, name, address)
        if old:
            self._release(old)

    def cairo_get_target(self, address):
        return self.obj(address).target

    def cairo_save(self, address):
        self.obj(address).depth += 1

    def cairo_restore(self, address):
        obj = self.obj(address)
        if obj.depth == 0:
            obj.status = Status.INVALID_RESTORE
            return
        obj.depth -= 1

    def cairo_set_source(self, address, pattern):
        self._replace(self.obj(address), "source", self._retain(pattern))

    def cairo_set_source_rgb(self, address, red, green, blue):
        self.cairo_set_source_rgba(address, red, green, blue, 1.0)

    def cairo_set_source_rgba(self, address, red, green, blue, alpha):
        obj = self.obj(address)
        self._replace(obj, "source", None)
        obj.color = (red, green, blue, alpha)

    def cairo_set_source_surface(self, address, surface, x, y):
        pattern = self.cairo_pattern_create_for_surface(surface)
        self._replace(self.obj(address), "source", pattern)

    def cairo_paint(self, address):
        self._draw(address, "paint")

    def cairo_paint_with_alpha(self, address, alpha):
        self._draw(address, "paint_with_alpha", alpha)

    def cairo_fill(self, address):
        self._draw(address, "fill")
        self.obj(address).path = []

    def cairo_stroke(self, address):
        self._draw(address, "stroke")
        self.obj(address).path = []

    def cairo_set_line_width(self, address, width):
        self.obj(address).line_width = width

    def cairo_new_path(self, address):
        self.obj(address).path = []

    def cairo_move_to(self, address, x, y):
        self.obj(address).path.append(("move_to", x, y))

    def cairo_line_to(self, address, x, y):
        self.obj(address).path.append(("line_to", x, y))

    def cairo_rectangle(self, address, x, y, width, height):
        self.obj(address).path.append(("rectangle", x, y, width, height))

    def cairo_arc(self, address, xc, yc, radius, angle1, angle2):
        self.obj(address).path.append(("arc", xc, yc, radius, angle1, angle2))

    def cairo_close_path(self, address):
        self.obj(address).path.append(("close_path",))

    def cairo_select_font_face(self, address, family, slant, weight):
        face = self.cairo_toy_font_face_create(family, slant, weight)
        self._replace(self.obj(address), "font_face", face)

    def cairo_set_font_size(self, address, size):
        self.obj(address).font_size = size

    def cairo_set_font_face(self, address, face):
        if face:
            self._retain(face)
        self._replace(self.obj(address), "font_face", face)

    def cairo_get_font_face(self, address):
        obj = self.obj(address)
        if obj.font_face is None:
            obj.font_face = self.cairo_toy_font_face_create(b"", 0, 0)
        return obj.font_face

    def cairo_show_text(self, address, text):
        self._draw(address, "show_text", text)

    def cairo_text_extents(self, address, text, extents_ptr):
        obj = self.obj(address)
        extents = extents_ptr.contents
        size = obj.font_size
        extents.x_bearing = 0.0
        extents.y_bearing = -0.8 * size
        extents.width = 0.5 * size * len(text.decode("utf-8"))
        extents.height = size
        extents.x_advance = extents.width
        extents.y_advance = 0.0

    # -- Misc ----------------------------------------------------------------

    def cairo_status_to_string(self, status):
        return Status(status).name.lower().encode("ascii")

    def cairo_version_string(self):
        return b"1.18.0"


@pytest.fixture(autouse=True)
def registry():
    """Tracing on, with an empty registry, for every test."""
    previous = _safety.set_tracing(True)
    _safety.registry.clear()
    yield _safety.registry
    _safety.registry.clear()
    _safety.set_tracing(previous)


@pytest.fixture
def no_tracing():
    previous = _safety.set_tracing(False)
    yield
    _safety.set_tracing(previous)


@pytest.fixture
def fake():
    library = FakeCairo()
    previous = _native.use_library(library)
    yield library
    _native.use_library(previous)
