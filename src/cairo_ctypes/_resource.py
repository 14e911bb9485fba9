"""Shared lifecycle for every wrapped cairo object.

Each concrete kind (Surface, FontFace, Pattern, Context, Device) only names
its native prefix; construction, reference(), destroy(), status() and user
data are implemented once here on top of ``<prefix>_reference``,
``<prefix>_destroy`` and friends.

Ownership model
---------------
A wrapper either *owns* one native reference or *borrows* the handle.

- Constructors return owning wrappers.
- reference() takes one more native reference and returns a new owning
  wrapper around the same handle (wrappers compare equal by handle).
- destroy() gives the wrapper's reference back. The wrapper is released
  afterwards; using it again raises HandleReleasedError.
- Getters such as Context.get_target() return borrowing wrappers. They
  hold no reference and cannot be destroyed; reference() them to keep the
  object beyond the lifetime of its owner.
"""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable, ClassVar, TypeVar

from cairo_ctypes import _native, _safety
from cairo_ctypes._enums import Status
from cairo_ctypes._errors import (
    HandleReleasedError,
    HandleTrackingError,
    NativeContractError,
    UserDataError,
    error_for_status,
)
from cairo_ctypes._logging import get_logger
from cairo_ctypes._types import DestroyFunc, Handle, UserDataKey

__all__ = ("Resource", "RefCounted")

_log = get_logger(__name__)

_R = TypeVar("_R", bound="Resource")


# -- Python objects passed through cairo as void* ----------------------------


class _ClosureStore:
    """Keeps Python objects alive while cairo holds an opaque token for them.

    Tokens are small integers handed to cairo in place of a pointer; the
    destroy callback cairo invokes gets the token back and drops the entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        # token → (value, user destroy callback)
        self._items: dict[int, tuple[Any, Callable[[Any], None] | None]] = {}

    def add(self, value: Any, destroy: Callable[[Any], None] | None = None) -> int:
        with self._lock:
            token = next(self._counter)
            self._items[token] = (value, destroy)
        return token

    def get(self, token: int | None, default: Any = None) -> Any:
        if not token:
            return default
        with self._lock:
            item = self._items.get(token)
        return default if item is None else item[0]

    def discard(self, token: int) -> None:
        """Forget ``token`` without running its destroy callback."""
        with self._lock:
            self._items.pop(token, None)

    def release(self, token: int) -> None:
        with self._lock:
            item = self._items.pop(token, None)
        if item is None:
            return
        value, destroy = item
        if destroy is not None:
            destroy(value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_closures = _ClosureStore()


def _release_closure_cb(token) -> None:
    # Runs inside a cairo callback: an exception cannot propagate through C
    try:
        _closures.release(token)
    except Exception:
        _log.exception("user data destroy callback failed")


# Module-level so the C function pointer outlives every object it is set on
_release_closure = DestroyFunc(_release_closure_cb)
_NO_DESTROY = DestroyFunc()


# -- Base classes -------------------------------------------------------------


class Resource:
    """A native object with a create/destroy lifecycle and a status."""

    __slots__ = ("_handle", "_owned", "_released")

    _prefix: ClassVar[str] = ""
    _kind: ClassVar[str] = "resource"

    _handle: Handle
    _owned: bool
    _released: bool

    def __init__(self, *args, **kwargs):
        raise TypeError(
            f"{type(self).__name__} cannot be instantiated directly; "
            "use one of its create*() constructors"
        )

    # -- Construction --------------------------------------------------------

    @classmethod
    def _class_for(cls, address: int) -> type:
        """Concrete wrapper class for a native object; overridden per kind."""
        return cls

    @classmethod
    def _wrap(cls: type[_R], address: int, *, owned: bool) -> _R:
        obj = object.__new__(cls._class_for(address))
        obj._handle = Handle(address)
        obj._owned = owned
        obj._released = False
        return obj

    @classmethod
    def _from_new(cls: type[_R], address: int | None, site: str | None = None) -> _R:
        """Adopt the result of a native constructor.

        NULL is a broken native contract (cairo returns an error object, never
        NULL). An error object is destroyed here and reported as the matching
        CairoError, so callers never receive a handle they have to clean up.
        """
        if not address:
            raise NativeContractError(
                f"native constructor for {cls._kind} returned NULL"
            )
        obj = cls._wrap(address, owned=True)
        status = obj._native_status()
        if status is not Status.SUCCESS:
            obj._released = True
            obj._native_destroy(address)
            raise error_for_status(status)
        if _safety.tracing:
            _safety.mark_for_leak_detection(
                site or _safety.call_site(), obj._handle, obj._kind
            )
        return obj

    @classmethod
    def _borrow(cls: type[_R], address: int | None) -> _R | None:
        if not address:
            return None
        return cls._wrap(address, owned=False)

    # -- Native access -------------------------------------------------------

    def _fn(self, op: str):
        return getattr(_native.lib(), f"{self._prefix}_{op}")

    def _ptr(self) -> int:
        """Native address, refusing to hand out one this wrapper gave back."""
        if self._released:
            raise HandleReleasedError(
                f"{self._kind} {self._handle!r} used after destroy()"
            )
        return self._handle.address

    def _native_status(self) -> Status:
        return Status(self._fn("status")(self._handle.address))

    def _native_destroy(self, address: int) -> None:
        self._fn("destroy")(address)

    # -- Public lifecycle ----------------------------------------------------

    @property
    def handle(self) -> Handle:
        return self._handle

    @property
    def owned(self) -> bool:
        return self._owned

    @property
    def released(self) -> bool:
        return self._released

    def status(self) -> Status:
        """Error state of the object; SUCCESS unless an operation failed."""
        return Status(self._fn("status")(self._ptr()))

    def destroy(self) -> None:
        """Give back the reference this wrapper owns."""
        if not self._owned:
            raise HandleTrackingError(
                f"borrowed {self._kind} {self._handle!r} cannot be destroyed; "
                "reference() it first"
            )
        if self._released:
            if _safety.tracing:
                raise HandleTrackingError(
                    f"double destroy of {self._kind} {self._handle!r}"
                )
            _log.debug("Ignoring repeated destroy of %s %r", self._kind, self._handle)
            return
        if _safety.tracing:
            _safety.destroy(self._handle)
        self._released = True
        self._native_destroy(self._handle.address)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._owned and not self._released:
            self.destroy()

    def __eq__(self, other) -> bool:
        if isinstance(other, Resource) and other._prefix == self._prefix:
            return self._handle == other._handle
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._prefix, self._handle))

    def __repr__(self) -> str:
        state = "released" if self._released else ("owned" if self._owned else "borrowed")
        return f"<{type(self).__name__} 0x{self._handle.address:x} {state}>"


class RefCounted(Resource):
    """Resource whose native object is shared through a reference count."""

    __slots__ = ()

    def reference(self: _R) -> _R:
        """Take one more native reference; returns a new owning wrapper."""
        address = self._fn("reference")(self._ptr())
        if not address:
            raise NativeContractError(f"{self._prefix}_reference returned NULL")
        if _safety.tracing:
            _safety.reference(_safety.call_site(), self._handle, self._kind)
        return type(self)._wrap(address, owned=True)

    def get_reference_count(self) -> int:
        return int(self._fn("get_reference_count")(self._ptr()))

    def set_user_data(
        self,
        key: UserDataKey,
        data: Any,
        destroy: Callable[[Any], None] | None = None,
    ) -> None:
        """Attach ``data`` under ``key``; last write wins.

        ``destroy(data)`` runs when the native object is freed or when the key
        is overwritten. Passing None as data removes the key.
        """
        ptr = self._ptr()
        setter = self._fn("set_user_data")
        if data is None:
            status = Status(setter(ptr, key.address, None, _NO_DESTROY))
            if status is not Status.SUCCESS:
                raise UserDataError(status)
            return
        token = _closures.add(data, destroy)
        status = Status(setter(ptr, key.address, token, _release_closure))
        if status is not Status.SUCCESS:
            _closures.discard(token)
            raise UserDataError(status)

    def get_user_data(self, key: UserDataKey, default: Any = None) -> Any:
        token = self._fn("get_user_data")(self._ptr(), key.address)
        return _closures.get(token, default)

    def _set_flag(self, key: UserDataKey) -> None:
        """Attach a bare marker under ``key`` (no Python object behind it)."""
        status = Status(
            self._fn("set_user_data")(self._ptr(), key.address, 1, _NO_DESTROY)
        )
        if status is not Status.SUCCESS:
            raise UserDataError(status)

    def _has_flag(self, key: UserDataKey) -> bool:
        return bool(self._fn("get_user_data")(self._ptr(), key.address))
