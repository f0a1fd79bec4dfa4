"""
Key derivation: KDFs, password-based KDFs and scrypt.

These are stateless calls. The output length is chosen by the caller,
so no buffer negotiation is involved.
"""

from ctypes import create_string_buffer

from ..ffi.buffers import as_bytes, fixed_output
from ..ffi.errors import InvalidInputError, check
from ..ffi.library import native
from ..ffi.registry import encode_name


def _check_length(length: int) -> None:
    if length <= 0:
        raise InvalidInputError("output length must be positive")


def kdf(algo: str, output_length: int, secret, salt, label, lib=None) -> bytes:
    """
    Derive key material with a KDF such as "HKDF(SHA-256)".

    Args:
        algo: KDF name
        output_length: Number of bytes to produce
        secret: Input keying material
        salt: KDF salt
        label: Context/label input

    Returns:
        output_length bytes of derived key material
    """
    _check_length(output_length)
    lib = lib or native()
    algo = encode_name(algo)
    secret, salt, label = as_bytes(secret), as_bytes(salt), as_bytes(label)
    return fixed_output(
        lambda out: lib.botan_kdf(algo, out, output_length,
                                  secret, len(secret), salt, len(salt), label, len(label)),
        output_length, "botan_kdf")


def pbkdf(algo: str, output_length: int, passphrase: str, salt, iterations: int, lib=None) -> bytes:
    """
    Derive a key from a passphrase with a PBKDF such as "PBKDF2(SHA-256)".

    Returns:
        output_length bytes of derived key material
    """
    _check_length(output_length)
    if iterations <= 0:
        raise InvalidInputError("iteration count must be positive")
    lib = lib or native()
    algo = encode_name(algo)
    passphrase = encode_name(passphrase, "passphrase")
    salt = as_bytes(salt)
    return fixed_output(
        lambda out: lib.botan_pbkdf(algo, out, output_length, passphrase, salt, len(salt), iterations),
        output_length, "botan_pbkdf")


def scrypt(output_length: int, passphrase: str, salt, n: int, r: int, p: int, lib=None) -> bytes:
    """
    Derive a key with scrypt.

    Uses botan_scrypt where the library exports it and the generic
    password hashing entry point otherwise.

    Args:
        output_length: Number of bytes to produce
        passphrase: Password
        salt: Salt bytes
        n: CPU/memory cost
        r: Block size
        p: Parallelization
    """
    _check_length(output_length)
    lib = lib or native()
    password = encode_name(passphrase, "passphrase")
    salt = as_bytes(salt)
    out = create_string_buffer(output_length)

    if lib.has("botan_scrypt"):
        rc = lib.botan_scrypt(out, output_length, password, salt, len(salt), n, r, p)
        check(rc, "botan_scrypt")
    else:
        rc = lib.botan_pwdhash(b"Scrypt", n, r, p, out, output_length,
                               password, len(password), salt, len(salt))
        check(rc, "botan_pwdhash")
    return out.raw
