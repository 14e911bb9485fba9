from __future__ import annotations

from enum import Enum, IntEnum


__all__ = (
    "Status",
    "Content",
    "Format",
    "SurfaceType",
    "DeviceType",
    "FontType",
    "FontSlant",
    "FontWeight",
    "PatternType",
    "Antialias",
    "MimeType",
)


class Status(IntEnum):
    """Mirror of cairo_status_t. SUCCESS is the only non-error value."""

    SUCCESS = 0
    NO_MEMORY = 1
    INVALID_RESTORE = 2
    INVALID_POP_GROUP = 3
    NO_CURRENT_POINT = 4
    INVALID_MATRIX = 5
    INVALID_STATUS = 6
    NULL_POINTER = 7
    INVALID_STRING = 8
    INVALID_PATH_DATA = 9
    READ_ERROR = 10
    WRITE_ERROR = 11
    SURFACE_FINISHED = 12
    SURFACE_TYPE_MISMATCH = 13
    PATTERN_TYPE_MISMATCH = 14
    INVALID_CONTENT = 15
    INVALID_FORMAT = 16
    INVALID_VISUAL = 17
    FILE_NOT_FOUND = 18
    INVALID_DASH = 19
    INVALID_DSC_COMMENT = 20
    INVALID_INDEX = 21
    CLIP_NOT_REPRESENTABLE = 22
    TEMP_FILE_ERROR = 23
    INVALID_STRIDE = 24
    FONT_TYPE_MISMATCH = 25
    USER_FONT_IMMUTABLE = 26
    USER_FONT_ERROR = 27
    NEGATIVE_COUNT = 28
    INVALID_CLUSTERS = 29
    INVALID_SLANT = 30
    INVALID_WEIGHT = 31
    INVALID_SIZE = 32
    USER_FONT_NOT_IMPLEMENTED = 33
    DEVICE_TYPE_MISMATCH = 34
    DEVICE_ERROR = 35
    INVALID_MESH_CONSTRUCTION = 36
    DEVICE_FINISHED = 37
    JBIG2_GLOBAL_MISSING = 38
    PNG_ERROR = 39
    FREETYPE_ERROR = 40
    WIN32_GDI_ERROR = 41
    TAG_ERROR = 42
    DWRITE_ERROR = 43
    SVG_FONT_ERROR = 44

    @classmethod
    def _missing_(cls, value):
        # Newer libcairo releases append statuses; keep them as errors
        if isinstance(value, int) and value > 0:
            obj = int.__new__(cls, value)
            obj._name_ = f"UNKNOWN_{value}"
            obj._value_ = value
            return obj
        return None

    @property
    def is_error(self) -> bool:
        return self is not Status.SUCCESS

    def raise_for_status(self) -> None:
        """Raise the CairoError subclass matching this status, if any."""
        if self is Status.SUCCESS:
            return
        from cairo_ctypes._errors import error_for_status

        raise error_for_status(self)


class Content(IntEnum):
    COLOR = 0x1000
    ALPHA = 0x2000
    COLOR_ALPHA = 0x3000


class Format(IntEnum):
    INVALID = -1
    ARGB32 = 0
    RGB24 = 1
    A8 = 2
    A1 = 3
    RGB16_565 = 4
    RGB30 = 5
    RGB96F = 6
    RGBA128F = 7


class SurfaceType(IntEnum):
    IMAGE = 0
    PDF = 1
    PS = 2
    XLIB = 3
    XCB = 4
    GLITZ = 5
    QUARTZ = 6
    WIN32 = 7
    BEOS = 8
    DIRECTFB = 9
    SVG = 10
    OS2 = 11
    WIN32_PRINTING = 12
    QUARTZ_IMAGE = 13
    SCRIPT = 14
    QT = 15
    RECORDING = 16
    VG = 17
    GL = 18
    DRM = 19
    TEE = 20
    XML = 21
    SKIA = 22
    SUBSURFACE = 23
    COGL = 24


class DeviceType(IntEnum):
    INVALID = -1
    DRM = 0
    GL = 1
    SCRIPT = 2
    XCB = 3
    XLIB = 4
    XML = 5
    COGL = 6
    WIN32 = 7


class FontType(IntEnum):
    TOY = 0
    FT = 1
    WIN32 = 2
    QUARTZ = 3
    USER = 4
    DWRITE = 5


class FontSlant(IntEnum):
    NORMAL = 0
    ITALIC = 1
    OBLIQUE = 2


class FontWeight(IntEnum):
    NORMAL = 0
    BOLD = 1


class PatternType(IntEnum):
    SOLID = 0
    SURFACE = 1
    LINEAR = 2
    RADIAL = 3
    MESH = 4
    RASTER_SOURCE = 5


class Antialias(IntEnum):
    DEFAULT = 0
    NONE = 1
    GRAY = 2
    SUBPIXEL = 3
    FAST = 4
    GOOD = 5
    BEST = 6


class MimeType(str, Enum):
    """Mime-type identifiers understood by cairo_surface_set_mime_data()."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    JP2 = "image/jp2"
    URI = "text/x-uri"
    UNIQUE_ID = "application/x-cairo.uid"
    JBIG2 = "application/x-cairo.jbig2"
    JBIG2_GLOBAL = "application/x-cairo.jbig2-global"
    JBIG2_GLOBAL_ID = "application/x-cairo.jbig2-global-id"
    CCITT_FAX = "image/g3fax"
    CCITT_FAX_PARAMS = "application/x-cairo.ccitt.params"
    EPS = "application/postscript"
    EPS_PARAMS = "application/x-cairo.eps.params"

    def as_bytes(self) -> bytes:
        return self.value.encode("ascii")
