"""
bcrypt password hashing.
"""

from ..ffi.buffers import negotiate_str
from ..ffi.errors import INVALID_VERIFIER, InvalidInputError, check
from ..ffi.library import native
from ..ffi.registry import encode_name
from .rng import RandomNumberGenerator

# "$2a$" + cost + "$" + 53 characters of salt and hash, plus the terminator
BCRYPT_OUTPUT_GUESS = 64


def bcrypt_hash(password: str, rng: RandomNumberGenerator, work_factor: int = 10) -> str:
    """
    Hash a password with bcrypt. Each call embeds a fresh salt.

    Returns:
        The 60 character bcrypt hash string
    """
    if not 4 <= work_factor <= 18:
        raise InvalidInputError("bcrypt work factor must be between 4 and 18")
    lib = rng._lib
    password = encode_name(password, "password")
    return negotiate_str(
        lambda b, bl: lib.botan_bcrypt_generate(b, bl, password, rng.handle_(), work_factor, 0),
        BCRYPT_OUTPUT_GUESS, "botan_bcrypt_generate")


def bcrypt_verify(password: str, hashed: str, lib=None) -> bool:
    """
    Check a password against a bcrypt hash.

    Returns False for a well-formed hash that does not match; only
    malformed input raises.
    """
    lib = lib or native()
    rc = lib.botan_bcrypt_is_valid(encode_name(password, "password"), encode_name(hashed, "hash"))
    if rc == INVALID_VERIFIER:
        return False
    check(rc, "botan_bcrypt_is_valid")
    return rc == 0
