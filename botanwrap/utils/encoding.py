"""
Encoding helpers: hex and PKCS #1 hash identifiers.
"""

import binascii

from ..ffi.buffers import as_bytes, negotiate
from ..ffi.errors import ConversionError, InvalidInputError, NotSupportedError
from ..ffi.library import native
from ..ffi.registry import encode_name


def hex_encode(data) -> str:
    """Uppercase hex encoding of data."""
    return binascii.hexlify(as_bytes(data)).decode("ascii").upper()


def hex_decode(text: str) -> bytes:
    """
    Decode hex text, either case.

    Raises:
        ConversionError: If text has odd length or non-hex characters
    """
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise ConversionError(f"invalid hex input: {e}") from e


def pkcs_hash_id(hash_algo: str, lib=None) -> bytes:
    """
    DER prefix of the PKCS #1 DigestInfo for hash_algo.

    Raises:
        NotSupportedError: If the library has no identifier for hash_algo
    """
    lib = lib or native()
    name = encode_name(hash_algo)
    try:
        return negotiate(lambda b, bl: lib.botan_pkcs_hash_id(name, b, bl), 0, "botan_pkcs_hash_id")
    except InvalidInputError as e:
        # Unknown hashes are reported as a bad argument
        raise NotSupportedError(f"no PKCS #1 hash identifier for {hash_algo}", e.rc) from e
