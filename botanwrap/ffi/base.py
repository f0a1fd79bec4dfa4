"""
Shared object model for every primitive wrapper.
"""

from .buffers import negotiate_str
from .errors import InvalidInputError, InvalidKeyLengthError, check
from .handle import Handle


class NativeObject:
    """
    Owner of one Handle.

    Use as a context manager, or call close(), for deterministic release.
    """

    def __init__(self, handle: Handle):
        self._handle = handle

    @classmethod
    def _wrap(cls, handle: Handle, **state):
        obj = cls.__new__(cls)
        NativeObject.__init__(obj, handle)
        for name, value in state.items():
            setattr(obj, name, value)
        return obj

    @property
    def _lib(self):
        return self._handle.lib

    @property
    def _ptr(self):
        return self._handle.ptr

    def handle_(self):
        """Raw native pointer, for passing this object to another native call."""
        return self._handle.ptr

    def close(self) -> None:
        self._handle.release()

    @property
    def closed(self) -> bool:
        return not self._handle.alive

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class NamedAlgorithm(NativeObject):
    """NativeObject created from an algorithm name that can report it back."""

    _name_fn = None

    def algo_name(self) -> str:
        fn = getattr(self._lib, self._name_fn)
        return negotiate_str(lambda b, bl: fn(self._ptr, b, bl), 32, self._name_fn)

    def __repr__(self) -> str:
        if self.closed:
            return f"<{type(self).__name__} closed>"
        return f"<{type(self).__name__} {self.algo_name()}>"


class KeyedAlgorithm(NamedAlgorithm):
    """
    NamedAlgorithm that needs set_key() before processing data.

    Subclasses provide key_spec() and _set_key_fn.
    """

    _set_key_fn = None
    _keyed = False

    def key_spec(self):
        raise NotImplementedError

    def set_key(self, key: bytes) -> None:
        """
        Key the object.

        Raises:
            InvalidKeyLengthError: If the key spec rejects len(key)
        """
        key = bytes(key)
        if not self.key_spec().is_valid_keylength(len(key)):
            raise InvalidKeyLengthError(f"{len(key)} byte key rejected by {self.algo_name()}")
        check(getattr(self._lib, self._set_key_fn)(self._ptr, key, len(key)), self._set_key_fn)
        self._keyed = True

    def _require_key(self, operation: str) -> None:
        if not self._keyed:
            raise InvalidInputError(f"{operation} called before set_key")
