"""
Ownership of native opaque handles.

A Handle owns exactly one native object. It is live until release() is
called or its owner is garbage collected, at which point the matching
*_destroy entry point runs exactly once. Destruction failures are
logged and never raised, since they happen during cleanup.
"""

import enum
import logging
import weakref
from ctypes import byref, c_void_p
from typing import Callable, Optional

from .errors import HandleReleasedError, NotSupportedError, check

logger = logging.getLogger(__name__)


class HandleKind(enum.Enum):
    """Capability kind of a handle, with its destroy and state-copy entry points."""

    RNG = ("RNG", "botan_rng_destroy", None)
    HASH = ("hash", "botan_hash_destroy", "botan_hash_copy_state")
    MAC = ("MAC", "botan_mac_destroy", None)
    BLOCK_CIPHER = ("block cipher", "botan_block_cipher_destroy", None)
    CIPHER = ("cipher", "botan_cipher_destroy", None)
    MPI = ("MPI", "botan_mp_destroy", None)
    PRIVKEY = ("private key", "botan_privkey_destroy", None)
    PUBKEY = ("public key", "botan_pubkey_destroy", None)
    SIGNER = ("signer", "botan_pk_op_sign_destroy", None)
    VERIFIER = ("verifier", "botan_pk_op_verify_destroy", None)
    ENCRYPTOR = ("encryptor", "botan_pk_op_encrypt_destroy", None)
    DECRYPTOR = ("decryptor", "botan_pk_op_decrypt_destroy", None)
    KEY_AGREEMENT = ("key agreement", "botan_pk_op_key_agreement_destroy", None)
    CERTIFICATE = ("certificate", "botan_x509_cert_destroy", "botan_x509_cert_dup")
    FPE = ("FPE", "botan_fpe_destroy", None)

    def __init__(self, label: str, destroy_fn: str, copy_fn: Optional[str]):
        self.label = label
        self.destroy_fn = destroy_fn
        self.copy_fn = copy_fn

    @property
    def duplicable(self) -> bool:
        return self.copy_fn is not None


def _destroy(lib, kind: HandleKind, address: int) -> None:
    rc = getattr(lib, kind.destroy_fn)(c_void_p(address))
    if rc != 0:
        logger.warning("%s returned %d while releasing a %s handle",
                       kind.destroy_fn, rc, kind.label)


class Handle:
    """
    Single-owner reference to one native object.

    Attributes:
        kind: HandleKind of the native object
        lib: Library the object was created with
    """

    def __init__(self, kind: HandleKind, ptr: c_void_p, lib):
        if not ptr.value:
            raise ValueError(f"cannot own a null {kind.label} handle")
        self.kind = kind
        self.lib = lib
        self._ptr = ptr
        self._finalizer = weakref.finalize(self, _destroy, lib, kind, ptr.value)

    @classmethod
    def acquire(cls, kind: HandleKind, lib, init: Callable[..., int], *args,
                function: Optional[str] = None) -> "Handle":
        """
        Run a native constructor and take ownership of the object it creates.

        Args:
            kind: Kind of the object being constructed
            lib: Library providing the constructor and the destructor
            init: Native constructor; receives the out-pointer then args
            function: Constructor name for error messages

        Raises:
            BotanError: If the constructor fails
        """
        ptr = c_void_p(0)
        check(init(byref(ptr), *args), function or f"{kind.label} init")
        return cls(kind, ptr, lib)

    @property
    def ptr(self) -> c_void_p:
        """The raw native pointer. Raises HandleReleasedError once released."""
        if not self._finalizer.alive:
            raise HandleReleasedError(f"{self.kind.label} handle used after release")
        return self._ptr

    @property
    def alive(self) -> bool:
        return self._finalizer.alive

    def release(self) -> None:
        """Destroy the native object. Calling this again does nothing."""
        self._finalizer()

    def duplicate(self) -> "Handle":
        """
        Clone the native object's current state into a new, independent handle.

        Raises:
            NotSupportedError: If this kind of object has no state-copy entry point
        """
        if not self.kind.duplicable:
            raise NotSupportedError(f"{self.kind.label} handles cannot be duplicated")
        copy_fn = getattr(self.lib, self.kind.copy_fn)
        return Handle.acquire(self.kind, self.lib, copy_fn, self.ptr, function=self.kind.copy_fn)

    def __repr__(self) -> str:
        state = "live" if self.alive else "released"
        return f"<Handle {self.kind.label} {state}>"
