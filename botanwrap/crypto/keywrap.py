"""
NIST AES key wrap (RFC 3394).
"""

from ..ffi.buffers import as_bytes, negotiate
from ..ffi.errors import InvalidInputError
from ..ffi.library import native

# RFC 3394 adds one 8 byte integrity block
_KW_OVERHEAD = 8


def _cipher_name(kek: bytes) -> bytes:
    if len(kek) not in (16, 24, 32):
        raise InvalidInputError(f"{len(kek)} byte KEK is not an AES key")
    return b"AES-%d" % (8 * len(kek))


def nist_aes_key_wrap(kek, key, lib=None) -> bytes:
    """
    Wrap key under the key encryption key kek.

    Returns:
        Wrapped key, len(key) + 8 bytes
    """
    lib = lib or native()
    kek, key = as_bytes(kek), as_bytes(key)
    if len(key) < 16 or len(key) % 8 != 0:
        raise InvalidInputError("key to wrap must be a multiple of 8 bytes, at least 16")

    if lib.has("botan_key_wrap3394"):
        return negotiate(lambda b, bl: lib.botan_key_wrap3394(key, len(key), kek, len(kek), b, bl),
                         len(key) + _KW_OVERHEAD, "botan_key_wrap3394")
    cipher = _cipher_name(kek)
    return negotiate(lambda b, bl: lib.botan_nist_kw_enc(cipher, 0, key, len(key), kek, len(kek), b, bl),
                     len(key) + _KW_OVERHEAD, "botan_nist_kw_enc")


def nist_aes_key_unwrap(kek, wrapped, lib=None) -> bytes:
    """
    Recover a key wrapped by nist_aes_key_wrap.

    Raises:
        InvalidInputError: If wrapped is too short to be a wrapped key
        BotanError: If the integrity check fails
    """
    lib = lib or native()
    kek, wrapped = as_bytes(kek), as_bytes(wrapped)
    if len(wrapped) < 2 * _KW_OVERHEAD or len(wrapped) % 8 != 0:
        raise InvalidInputError("wrapped key must be a multiple of 8 bytes, at least 16")

    if lib.has("botan_key_unwrap3394"):
        return negotiate(lambda b, bl: lib.botan_key_unwrap3394(wrapped, len(wrapped), kek, len(kek), b, bl),
                         len(wrapped) - _KW_OVERHEAD, "botan_key_unwrap3394")
    cipher = _cipher_name(kek)
    return negotiate(lambda b, bl: lib.botan_nist_kw_dec(cipher, 0, wrapped, len(wrapped), kek, len(kek), b, bl),
                     len(wrapped) - _KW_OVERHEAD, "botan_nist_kw_dec")
