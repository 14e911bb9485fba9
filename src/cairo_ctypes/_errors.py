"""Exception types raised by the bindings.

Native failures carry the cairo Status that caused them. Misuse of the
handle lifecycle (double destroy, leaks) is reported through
HandleTrackingError, an AssertionError: it is a bug in the calling code,
not a state the program can continue from.
"""

from __future__ import annotations

from cairo_ctypes._enums import Status


__all__ = (
    "CairoError",
    "NoMemoryError",
    "InvalidRestoreError",
    "NoCurrentPointError",
    "InvalidMatrixError",
    "NullPointerError",
    "InvalidStringError",
    "ReadError",
    "WriteError",
    "SurfaceFinishedError",
    "SurfaceTypeMismatchError",
    "PatternTypeMismatchError",
    "InvalidContentError",
    "InvalidFormatError",
    "CairoFileNotFoundError",
    "InvalidStrideError",
    "FontTypeMismatchError",
    "InvalidSizeError",
    "DeviceFinishedError",
    "PngError",
    "UserDataError",
    "HandleTrackingError",
    "LeakError",
    "HandleReleasedError",
    "NativeContractError",
    "LibraryNotFoundError",
    "error_for_status",
)


class CairoError(Exception):
    """A cairo call reported a non-success status."""

    def __init__(self, status: Status | int, message: str | None = None):
        self.status = Status(status)
        if message is None:
            message = self.status.name.lower().replace("_", " ")
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status.name}, {str(self)!r})"


class NoMemoryError(CairoError, MemoryError):
    pass


class InvalidRestoreError(CairoError):
    pass


class NoCurrentPointError(CairoError):
    pass


class InvalidMatrixError(CairoError):
    pass


class NullPointerError(CairoError):
    pass


class InvalidStringError(CairoError):
    pass


class ReadError(CairoError):
    pass


class WriteError(CairoError):
    pass


class SurfaceFinishedError(CairoError):
    """Drawing was requested on a surface after finish()."""


class SurfaceTypeMismatchError(CairoError):
    pass


class PatternTypeMismatchError(CairoError):
    pass


class InvalidContentError(CairoError):
    pass


class InvalidFormatError(CairoError):
    pass


class CairoFileNotFoundError(CairoError):
    pass


class InvalidStrideError(CairoError):
    pass


class FontTypeMismatchError(CairoError):
    pass


class InvalidSizeError(CairoError):
    pass


class DeviceFinishedError(CairoError):
    pass


class PngError(CairoError):
    pass


class UserDataError(CairoError):
    """Attaching user data or mime data to a resource failed."""


_STATUS_ERRORS: dict[Status, type[CairoError]] = {
    Status.NO_MEMORY: NoMemoryError,
    Status.INVALID_RESTORE: InvalidRestoreError,
    Status.NO_CURRENT_POINT: NoCurrentPointError,
    Status.INVALID_MATRIX: InvalidMatrixError,
    Status.NULL_POINTER: NullPointerError,
    Status.INVALID_STRING: InvalidStringError,
    Status.READ_ERROR: ReadError,
    Status.WRITE_ERROR: WriteError,
    Status.SURFACE_FINISHED: SurfaceFinishedError,
    Status.SURFACE_TYPE_MISMATCH: SurfaceTypeMismatchError,
    Status.PATTERN_TYPE_MISMATCH: PatternTypeMismatchError,
    Status.INVALID_CONTENT: InvalidContentError,
    Status.INVALID_FORMAT: InvalidFormatError,
    Status.FILE_NOT_FOUND: CairoFileNotFoundError,
    Status.INVALID_STRIDE: InvalidStrideError,
    Status.FONT_TYPE_MISMATCH: FontTypeMismatchError,
    Status.INVALID_SIZE: InvalidSizeError,
    Status.DEVICE_FINISHED: DeviceFinishedError,
    Status.PNG_ERROR: PngError,
}


def error_for_status(
    status: Status | int, message: str | None = None
) -> CairoError:
    """Build the exception matching a non-success status."""
    status = Status(status)
    if status is Status.SUCCESS:
        raise ValueError("Status.SUCCESS is not an error")
    cls = _STATUS_ERRORS.get(status, CairoError)
    return cls(status, message)


# -- Lifecycle misuse ----------------------------------------------------------


class HandleTrackingError(AssertionError):
    """The handle registry saw a destroy with no matching create/reference."""


class LeakError(HandleTrackingError):
    """Handles were still outstanding at a diagnostic checkpoint."""

    def __init__(self, leaks):
        self.leaks = list(leaks)
        lines = [f"{len(self.leaks)} leaked handle(s):"]
        lines.extend(f"  {leak}" for leak in self.leaks)
        super().__init__("\n".join(lines))


class HandleReleasedError(ReferenceError):
    """An operation was issued through a wrapper after its own destroy()."""


class NativeContractError(RuntimeError):
    """The native library broke its documented contract (e.g. returned NULL)."""


class LibraryNotFoundError(RuntimeError):
    """libcairo could not be located or loaded."""
