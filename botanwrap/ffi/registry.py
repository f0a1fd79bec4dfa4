"""
Construction of native objects from algorithm names.

Algorithm names ("SHA-384", "AES-128/GCM", "HMAC(SHA-256)") are opaque
here: they are encoded and handed to the native constructor, which alone
decides whether they are valid. Unknown names come back as the native
not-implemented status and surface as NotSupportedError.
"""

from ctypes import byref, c_size_t
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidInputError, check
from .handle import Handle, HandleKind
from .library import native

# Native constructor for each kind that is built from an algorithm name
CONSTRUCTORS = {
    HandleKind.RNG: "botan_rng_init",
    HandleKind.HASH: "botan_hash_init",
    HandleKind.MAC: "botan_mac_init",
    HandleKind.BLOCK_CIPHER: "botan_block_cipher_init",
    HandleKind.CIPHER: "botan_cipher_init",
    HandleKind.PRIVKEY: "botan_privkey_create",
    HandleKind.SIGNER: "botan_pk_op_sign_create",
    HandleKind.VERIFIER: "botan_pk_op_verify_create",
    HandleKind.ENCRYPTOR: "botan_pk_op_encrypt_create",
    HandleKind.DECRYPTOR: "botan_pk_op_decrypt_create",
    HandleKind.KEY_AGREEMENT: "botan_pk_op_key_agreement_create",
}


def encode_name(name: Union[str, bytes], what: str = "algorithm name") -> bytes:
    """
    Encode a name or passphrase as a NUL-terminable UTF-8 byte string.

    Raises:
        InvalidInputError: If the value contains an embedded NUL byte
    """
    if isinstance(name, str):
        encoded = name.encode("utf-8")
    elif isinstance(name, (bytes, bytearray)):
        encoded = bytes(name)
    else:
        raise TypeError(f"{what} must be str or bytes, got {type(name).__name__}")
    if b"\x00" in encoded:
        raise InvalidInputError(f"{what} contains an embedded NUL byte")
    return encoded


def encode_optional(name: Optional[Union[str, bytes]], what: str = "algorithm name") -> Optional[bytes]:
    if name is None:
        return None
    return encode_name(name, what)


def construct(kind: HandleKind, name: Union[str, bytes], *params, lib=None,
              prefix=()) -> Handle:
    """
    Build a native object of the given kind from an algorithm name.

    Args:
        kind: Kind of object to build
        name: Algorithm name, passed through verbatim
        params: Constructor arguments following the name
        lib: Library to use; the global one when omitted
        prefix: Constructor arguments preceding the name (e.g. a key handle)

    Raises:
        NotSupportedError: If the native library does not know the name
    """
    if lib is None:
        lib = native()
    init_fn = CONSTRUCTORS[kind]
    return Handle.acquire(kind, lib, getattr(lib, init_fn), *prefix, encode_name(name), *params,
                          function=init_fn)


@dataclass(frozen=True)
class KeySpec:
    """Accepted key lengths: min..max inclusive, in steps of mod bytes."""

    min_keylength: int
    max_keylength: int
    mod: int

    def is_valid_keylength(self, length: int) -> bool:
        if length < self.min_keylength or length > self.max_keylength:
            return False
        return self.mod <= 1 or length % self.mod == 0

    @classmethod
    def query(cls, fn, ptr, function: str = None) -> "KeySpec":
        """Read a key spec through a native (obj, *min, *max, *mod) getter."""
        min_len = c_size_t(0)
        max_len = c_size_t(0)
        mod = c_size_t(0)
        check(fn(ptr, byref(min_len), byref(max_len), byref(mod)), function)
        return cls(int(min_len.value), int(max_len.value), int(mod.value))
