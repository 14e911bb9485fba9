from __future__ import annotations

import ctypes


__all__ = (
    "Handle",
    "UserDataKey",
    "RectangleInt",
    "TextExtents",
    "DestroyFunc",
    "WriteFunc",
    "ReadFunc",
)


# -- Callback signatures -----------------------------------------------------

# void (*cairo_destroy_func_t) (void *data)
DestroyFunc = ctypes.CFUNCTYPE(None, ctypes.c_void_p)
# cairo_status_t (*cairo_write_func_t) (void *closure, const unsigned char *data, unsigned int length)
WriteFunc = ctypes.CFUNCTYPE(
    ctypes.c_int, ctypes.c_void_p, ctypes.POINTER(ctypes.c_ubyte), ctypes.c_uint
)
# cairo_status_t (*cairo_read_func_t) (void *closure, unsigned char *data, unsigned int length)
ReadFunc = ctypes.CFUNCTYPE(
    ctypes.c_int, ctypes.c_void_p, ctypes.POINTER(ctypes.c_ubyte), ctypes.c_uint
)


# ── Handle ───────────────────────────────────────────────────────────────────


class Handle:
    """Opaque token for a native object.

    Equality and hashing follow the native address, so two wrappers of the
    same cairo object carry equal handles. The token never looks at the
    memory behind the address.
    """

    __slots__ = ("_address",)

    _address: int

    def __init__(self, address: int) -> None:
        if not address:
            raise ValueError("Handle cannot wrap a NULL address")
        object.__setattr__(self, "_address", int(address))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def address(self) -> int:
        return self._address

    def __eq__(self, other) -> bool:
        if isinstance(other, Handle):
            return self._address == other._address
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._address)

    def __repr__(self) -> str:
        return f"Handle(0x{self._address:x})"


# ── UserDataKey ──────────────────────────────────────────────────────────────


class _cairo_user_data_key_t(ctypes.Structure):
    _fields_ = [("unused", ctypes.c_int)]


class UserDataKey:
    """Key for set_user_data()/get_user_data().

    cairo identifies keys by address, so a key must stay alive for as long
    as it is attached to anything. Create keys once, at module level.
    """

    __slots__ = ("name", "_key")

    def __init__(self, name: str = ""):
        self.name = name
        self._key = _cairo_user_data_key_t()

    @property
    def address(self) -> int:
        return ctypes.addressof(self._key)

    def __repr__(self) -> str:
        return f"UserDataKey({self.name!r})"


# ── Structures ───────────────────────────────────────────────────────────────


class RectangleInt(ctypes.Structure):
    """cairo_rectangle_int_t"""

    _fields_ = [
        ("x", ctypes.c_int),
        ("y", ctypes.c_int),
        ("width", ctypes.c_int),
        ("height", ctypes.c_int),
    ]

    def __repr__(self) -> str:
        return (
            f"RectangleInt(x={self.x}, y={self.y}, "
            f"width={self.width}, height={self.height})"
        )


class TextExtents(ctypes.Structure):
    """cairo_text_extents_t"""

    _fields_ = [
        ("x_bearing", ctypes.c_double),
        ("y_bearing", ctypes.c_double),
        ("width", ctypes.c_double),
        ("height", ctypes.c_double),
        ("x_advance", ctypes.c_double),
        ("y_advance", ctypes.c_double),
    ]
