"""Surfaces: the drawing targets.

Surface carries the methods every cairo surface shares; ImageSurface adds
the in-memory image constructors and pixel accessors. Wrapping a native
surface picks the class from cairo_surface_get_type(), so a surface created
through create_similar() on an image comes back as an ImageSurface.

Most surface types allow accessing the pixels directly. Call flush()
before reading or writing them and mark_dirty() after modifying them.
"""

from __future__ import annotations

import ctypes
import os
from typing import IO, TYPE_CHECKING

from cairo_ctypes import _native, _safety
from cairo_ctypes._enums import Content, Format, MimeType, Status, SurfaceType
from cairo_ctypes._errors import (
    HandleReleasedError,
    NativeContractError,
    SurfaceFinishedError,
    UserDataError,
)
from cairo_ctypes._logging import get_logger
from cairo_ctypes._resource import (
    RefCounted,
    _NO_DESTROY,
    _closures,
    _release_closure,
)
from cairo_ctypes._types import (
    Handle,
    ReadFunc,
    RectangleInt,
    UserDataKey,
    WriteFunc,
)

if TYPE_CHECKING:
    from cairo_ctypes._device import Device, FontOptions


__all__ = ("Surface", "ImageSurface", "MappedImage")

_log = get_logger(__name__)

# Marker stored on the native object by finish(), shared by all its wrappers
_FINISHED_KEY = UserDataKey("cairo_ctypes.finished")


def _mime_bytes(mime_type: MimeType | str) -> bytes:
    if isinstance(mime_type, MimeType):
        return mime_type.as_bytes()
    return str(mime_type).encode("ascii")


class _ImageAccessors:
    """Pixel-buffer queries shared by ImageSurface and MappedImage."""

    __slots__ = ()

    def get_width(self) -> int:
        return _native.lib().cairo_image_surface_get_width(self._ptr())

    def get_height(self) -> int:
        return _native.lib().cairo_image_surface_get_height(self._ptr())

    def get_stride(self) -> int:
        return _native.lib().cairo_image_surface_get_stride(self._ptr())

    def get_format(self) -> Format:
        return Format(_native.lib().cairo_image_surface_get_format(self._ptr()))

    def get_data(self) -> ctypes.Array | None:
        """The pixel buffer as a c_ubyte array, or None if there is none.

        The array aliases native memory: it is only valid while the image
        is alive. Call flush() first and mark_dirty() after writing.
        """
        ptr = self._ptr()
        L = _native.lib()
        address = L.cairo_image_surface_get_data(ptr)
        if not address:
            return None
        stride = L.cairo_image_surface_get_stride(ptr)
        size = stride * L.cairo_image_surface_get_height(ptr)
        return (ctypes.c_ubyte * size).from_address(address)


class Surface(RefCounted):
    """A drawing target. To draw on it, create a Context with it as target.

    Memory is managed with reference() and destroy(); ``with`` blocks
    destroy on exit.
    """

    __slots__ = ()

    _prefix = "cairo_surface"
    _kind = "surface"

    @classmethod
    def _class_for(cls, address: int) -> type:
        surface_type = _native.lib().cairo_surface_get_type(address)
        if surface_type == SurfaceType.IMAGE:
            return ImageSurface
        return Surface

    # -- Finish --------------------------------------------------------------

    def finish(self) -> None:
        """Drop every tie to external resources; idempotent.

        Afterwards the surface only accepts lifecycle and metadata calls
        (status, reference/destroy, user data, getters). Drawing calls
        raise SurfaceFinishedError.
        """
        if self.is_finished():
            return
        _native.lib().cairo_surface_finish(self._ptr())
        self._set_flag(_FINISHED_KEY)
        _log.debug("Finished %r", self)

    def is_finished(self) -> bool:
        return self._has_flag(_FINISHED_KEY)

    def _active_ptr(self) -> int:
        """Native address for an operation that needs drawing capability."""
        ptr = self._ptr()
        if self.is_finished():
            raise SurfaceFinishedError(Status.SURFACE_FINISHED)
        return ptr

    # -- Derived surfaces ----------------------------------------------------

    def create_similar(self, content: Content, width: int, height: int) -> Surface:
        """A new surface as compatible as possible with this one.

        It shares device scale, fallback resolution and font options, and
        usually the backend. Contents start cleared. The caller owns it.
        """
        address = _native.lib().cairo_surface_create_similar(
            self._active_ptr(), int(content), int(width), int(height)
        )
        return Surface._from_new(address)

    def create_similar_image(
        self, format: Format, width: int, height: int
    ) -> ImageSurface:
        """A new image surface suited for painting quickly onto this one.

        Unlike create_similar() it does not inherit the device scale.
        """
        address = _native.lib().cairo_surface_create_similar_image(
            self._active_ptr(), int(format), int(width), int(height)
        )
        return ImageSurface._from_new(address)

    def create_for_rectangle(
        self, x: float, y: float, width: float, height: float
    ) -> Surface:
        """A sub-surface clipped and translated onto a rectangle of this one."""
        address = _native.lib().cairo_surface_create_for_rectangle(
            self._active_ptr(), float(x), float(y), float(width), float(height)
        )
        return Surface._from_new(address)

    # -- State ---------------------------------------------------------------

    def flush(self) -> None:
        _native.lib().cairo_surface_flush(self._active_ptr())

    def mark_dirty(self) -> None:
        _native.lib().cairo_surface_mark_dirty(self._active_ptr())

    def mark_dirty_rectangle(self, rect: RectangleInt) -> None:
        _native.lib().cairo_surface_mark_dirty_rectangle(
            self._active_ptr(), rect.x, rect.y, rect.width, rect.height
        )

    def get_content(self) -> Content:
        return Content(_native.lib().cairo_surface_get_content(self._ptr()))

    def get_type(self) -> SurfaceType:
        return SurfaceType(_native.lib().cairo_surface_get_type(self._ptr()))

    def get_device(self) -> Device | None:
        """The device this surface belongs to (borrowed), or None."""
        from cairo_ctypes._device import Device

        return Device._borrow(_native.lib().cairo_surface_get_device(self._ptr()))

    def get_font_options(self) -> FontOptions:
        """Default font options for this surface, as a new object you own."""
        from cairo_ctypes._device import FontOptions

        options = FontOptions.create()
        _native.lib().cairo_surface_get_font_options(self._ptr(), options._ptr())
        return options

    def _get_pair(self, getter) -> tuple[float, float]:
        x = ctypes.c_double()
        y = ctypes.c_double()
        getter(self._ptr(), ctypes.pointer(x), ctypes.pointer(y))
        return (x.value, y.value)

    def set_device_offset(self, x_offset: float, y_offset: float) -> None:
        _native.lib().cairo_surface_set_device_offset(
            self._active_ptr(), float(x_offset), float(y_offset)
        )

    def get_device_offset(self) -> tuple[float, float]:
        return self._get_pair(_native.lib().cairo_surface_get_device_offset)

    def set_device_scale(self, x_scale: float, y_scale: float) -> None:
        _native.lib().cairo_surface_set_device_scale(
            self._active_ptr(), float(x_scale), float(y_scale)
        )

    def get_device_scale(self) -> tuple[float, float]:
        return self._get_pair(_native.lib().cairo_surface_get_device_scale)

    def set_fallback_resolution(
        self, x_pixels_per_inch: float, y_pixels_per_inch: float
    ) -> None:
        _native.lib().cairo_surface_set_fallback_resolution(
            self._active_ptr(), float(x_pixels_per_inch), float(y_pixels_per_inch)
        )

    def get_fallback_resolution(self) -> tuple[float, float]:
        return self._get_pair(_native.lib().cairo_surface_get_fallback_resolution)

    # -- Pages ---------------------------------------------------------------

    def copy_page(self) -> None:
        _native.lib().cairo_surface_copy_page(self._active_ptr())

    def show_page(self) -> None:
        _native.lib().cairo_surface_show_page(self._active_ptr())

    def has_show_text_glyphs(self) -> bool:
        return _native.lib().cairo_surface_has_show_text_glyphs(self._ptr()) > 0

    # -- Mime data -----------------------------------------------------------

    def set_mime_data(
        self,
        mime_type: MimeType | str,
        data: bytes | None,
        destroy=None,
    ) -> None:
        """Attach encoded image data (e.g. the original JPEG) to the surface.

        Same contract as set_user_data(): the latest data for a mime type
        wins, and ``destroy(data)`` runs once cairo drops it. None detaches.
        """
        ptr = self._active_ptr()
        mime = _mime_bytes(mime_type)
        L = _native.lib()
        if data is None:
            status = Status(
                L.cairo_surface_set_mime_data(ptr, mime, None, 0, _NO_DESTROY, None)
            )
            if status is not Status.SUCCESS:
                raise UserDataError(status)
            return
        data = bytes(data)
        buf = (ctypes.c_ubyte * len(data)).from_buffer_copy(data)
        # The buffer rides along with the user's value so it outlives cairo's use
        token = _closures.add(_MimePayload(data, buf, destroy), _MimePayload.release)
        status = Status(
            L.cairo_surface_set_mime_data(
                ptr, mime, ctypes.addressof(buf), len(data), _release_closure, token
            )
        )
        if status is not Status.SUCCESS:
            _closures.discard(token)
            raise UserDataError(status)

    def get_mime_data(self, mime_type: MimeType | str) -> bytes | None:
        data = ctypes.c_void_p()
        length = ctypes.c_ulong()
        _native.lib().cairo_surface_get_mime_data(
            self._ptr(),
            _mime_bytes(mime_type),
            ctypes.pointer(data),
            ctypes.pointer(length),
        )
        if not data.value:
            return None
        return ctypes.string_at(data.value, length.value)

    def supports_mime_type(self, mime_type: MimeType | str) -> bool:
        return (
            _native.lib().cairo_surface_supports_mime_type(
                self._ptr(), _mime_bytes(mime_type)
            )
            != 0
        )

    # -- Map / unmap ---------------------------------------------------------

    def map_to_image(self, extents: RectangleInt | None = None) -> MappedImage:
        """Direct pixel access to (part of) this surface.

        The result is released with MappedImage.unmap() (or a ``with``
        block), never with destroy(); it has no destroy() method.
        """
        ptr = self._active_ptr()
        extents_ptr = ctypes.pointer(extents) if extents is not None else None
        address = _native.lib().cairo_surface_map_to_image(ptr, extents_ptr)
        return MappedImage._from_map(self, address)

    # -- PNG output ----------------------------------------------------------

    def write_to_png(self, filename: str | os.PathLike) -> None:
        """Write the contents of the surface to a new PNG file."""
        status = Status(
            _native.lib().cairo_surface_write_to_png(
                self._active_ptr(), os.fsencode(filename)
            )
        )
        status.raise_for_status()

    def write_to_png_stream(self, writer: IO[bytes]) -> None:
        """Write PNG data through ``writer.write()``.

        An exception raised by the writer aborts the encoding and is
        re-raised here.
        """
        ptr = self._active_ptr()
        errors: list[BaseException] = []

        def _write(closure, data, length):
            try:
                writer.write(ctypes.string_at(data, length))
            except Exception as e:
                errors.append(e)
                return Status.WRITE_ERROR
            return Status.SUCCESS

        # Keep the callback referenced for the duration of the call
        write_cb = WriteFunc(_write)
        status = Status(
            _native.lib().cairo_surface_write_to_png_stream(ptr, write_cb, None)
        )
        if errors:
            raise errors[0]
        status.raise_for_status()


class _MimePayload:
    __slots__ = ("data", "buffer", "destroy")

    def __init__(self, data: bytes, buffer, destroy):
        self.data = data
        self.buffer = buffer
        self.destroy = destroy

    @staticmethod
    def release(payload: _MimePayload) -> None:
        if payload.destroy is not None:
            payload.destroy(payload.data)


class ImageSurface(_ImageAccessors, Surface):
    """A surface backed by a pixel buffer in memory."""

    __slots__ = ()

    _kind = "image surface"

    @classmethod
    def _class_for(cls, address: int) -> type:
        return ImageSurface

    @classmethod
    def create(cls, format: Format, width: int, height: int) -> ImageSurface:
        """A new image surface, initially cleared."""
        address = _native.lib().cairo_image_surface_create(
            int(format), int(width), int(height)
        )
        return cls._from_new(address)

    @classmethod
    def create_from_png(cls, filename: str | os.PathLike) -> ImageSurface:
        address = _native.lib().cairo_image_surface_create_from_png(
            os.fsencode(filename)
        )
        return cls._from_new(address)

    @classmethod
    def create_from_png_stream(cls, reader: IO[bytes]) -> ImageSurface:
        """Decode PNG data pulled through ``reader.read(n)``."""
        errors: list[BaseException] = []

        def _read(closure, data, length):
            try:
                chunk = reader.read(length)
            except Exception as e:
                errors.append(e)
                return Status.READ_ERROR
            if chunk is None or len(chunk) != length:
                return Status.READ_ERROR
            ctypes.memmove(data, chunk, length)
            return Status.SUCCESS

        read_cb = ReadFunc(_read)
        address = _native.lib().cairo_image_surface_create_from_png_stream(
            read_cb, None
        )
        if errors:
            # The error surface still has to go back to cairo
            if address:
                _native.lib().cairo_surface_destroy(address)
            raise errors[0]
        return cls._from_new(address)

    @staticmethod
    def format_stride_for_width(format: Format, width: int) -> int:
        """Stride cairo expects for ``width`` pixels, or -1 if unsupported."""
        return _native.lib().cairo_format_stride_for_width(int(format), int(width))


class MappedImage(_ImageAccessors):
    """Image view returned by Surface.map_to_image().

    It is not a Surface: it cannot be referenced or destroyed, only given
    back with unmap(), which also writes the pixels back to the parent.
    """

    __slots__ = ("_parent", "_parent_address", "_handle", "_unmapped")

    _kind = "mapped image"

    def __init__(self, *args, **kwargs):
        raise TypeError("MappedImage is obtained from Surface.map_to_image()")

    @classmethod
    def _from_map(cls, parent: Surface, address: int | None) -> MappedImage:
        if not address:
            raise NativeContractError("cairo_surface_map_to_image returned NULL")
        lib = _native.lib()
        obj = object.__new__(cls)
        obj._parent = parent
        obj._parent_address = None
        obj._handle = Handle(address)
        obj._unmapped = False
        status = obj.status()
        if status is not Status.SUCCESS:
            obj._unmapped = True
            lib.cairo_surface_unmap_image(parent._ptr(), address)
            status.raise_for_status()
        # The image pins the parent natively until unmap(), independent of
        # the wrapper that mapped it
        pinned = lib.cairo_surface_reference(parent._ptr())
        if not pinned:
            obj._unmapped = True
            lib.cairo_surface_unmap_image(parent._ptr(), address)
            raise NativeContractError("cairo_surface_reference returned NULL")
        obj._parent_address = pinned
        if _safety.tracing:
            _safety.mark_for_leak_detection(
                _safety.call_site(), obj._handle, cls._kind
            )
        return obj

    def _ptr(self) -> int:
        if self._unmapped:
            raise HandleReleasedError(
                f"{self._kind} {self._handle!r} used after unmap()"
            )
        return self._handle.address

    @property
    def handle(self) -> Handle:
        return self._handle

    @property
    def parent(self) -> Surface:
        return self._parent

    @property
    def unmapped(self) -> bool:
        return self._unmapped

    def status(self) -> Status:
        return Status(_native.lib().cairo_surface_status(self._ptr()))

    def flush(self) -> None:
        _native.lib().cairo_surface_flush(self._ptr())

    def mark_dirty(self) -> None:
        _native.lib().cairo_surface_mark_dirty(self._ptr())

    def unmap(self) -> None:
        """Write the pixels back to the parent surface and release the image."""
        image_ptr = self._ptr()
        parent_ptr = self._parent_address
        if _safety.tracing:
            _safety.destroy(self._handle)
        self._unmapped = True
        lib = _native.lib()
        lib.cairo_surface_unmap_image(parent_ptr, image_ptr)
        lib.cairo_surface_destroy(parent_ptr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self._unmapped:
            self.unmap()

    def __repr__(self) -> str:
        state = "unmapped" if self._unmapped else "mapped"
        return f"<MappedImage 0x{self._handle.address:x} {state}>"
