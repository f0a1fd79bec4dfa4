"""
botanwrap: safe Python access to the Botan cryptography library.

The native library is reached through its C ABI. This package owns the
parts that are easy to get wrong at that boundary: releasing every
native object exactly once, sizing output buffers, and turning integer
status codes into typed exceptions.

Basic Usage:
    >>> from botanwrap import HashFunction, hex_encode
    >>>
    >>> with HashFunction("SHA-256") as h:
    ...     h.update(b"abc")
    ...     digest = h.final()
    >>> hex_encode(digest)[:8]
    'BA7816BF'

The shared library is located on first use; set BOTANWRAP_LIBRARY to
point at a specific build.
"""

__version__ = "0.1.0"
__author__ = "botanwrap developers"

# Safety layer
from .ffi import (
    BotanError,
    ErrorKind,
    NotSupportedError,
    InvalidKeyLengthError,
    InvalidInputError,
    InsufficientBufferSpaceError,
    BadMACError,
    ConversionError,
    GenericError,
    InternalError,
    HandleReleasedError,
    LibraryLoadError,
    KeySpec,
)
from .ffi.library import install, native, teardown
from .config import BotanConfig, ConfigError, get_config, set_config
from .version import Version

# Primitives
from .crypto import (
    RandomNumberGenerator,
    HashFunction,
    MsgAuthCode,
    BlockCipher,
    Cipher,
    CipherDirection,
    kdf,
    pbkdf,
    scrypt,
    bcrypt_hash,
    bcrypt_verify,
    MPI,
    Privkey,
    Pubkey,
    Signer,
    Verifier,
    Encryptor,
    Decryptor,
    KeyAgreement,
    Certificate,
    FPE,
    nist_aes_key_wrap,
    nist_aes_key_unwrap,
)

# Helpers
from .utils import hex_encode, hex_decode, pkcs_hash_id, const_time_compare, scrub_mem

__all__ = [
    'BotanError',
    'ErrorKind',
    'NotSupportedError',
    'InvalidKeyLengthError',
    'InvalidInputError',
    'InsufficientBufferSpaceError',
    'BadMACError',
    'ConversionError',
    'GenericError',
    'InternalError',
    'HandleReleasedError',
    'LibraryLoadError',
    'KeySpec',
    'install',
    'native',
    'teardown',
    'BotanConfig',
    'ConfigError',
    'get_config',
    'set_config',
    'Version',
    'RandomNumberGenerator',
    'HashFunction',
    'MsgAuthCode',
    'BlockCipher',
    'Cipher',
    'CipherDirection',
    'kdf',
    'pbkdf',
    'scrypt',
    'bcrypt_hash',
    'bcrypt_verify',
    'MPI',
    'Privkey',
    'Pubkey',
    'Signer',
    'Verifier',
    'Encryptor',
    'Decryptor',
    'KeyAgreement',
    'Certificate',
    'FPE',
    'nist_aes_key_wrap',
    'nist_aes_key_unwrap',
    'hex_encode',
    'hex_decode',
    'pkcs_hash_id',
    'const_time_compare',
    'scrub_mem',
]
