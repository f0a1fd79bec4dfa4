"""
FFI-safety layer over the native Botan library.

This package contains the pieces every primitive wrapper is built from:
- errors: native status codes to typed exceptions
- library: loading, prototypes, lazy global initialization
- handle: exactly-once release of native objects
- buffers: probe-then-fill negotiation of output sizes
- registry: construction from algorithm names, key specs
"""

from .errors import (
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
    check,
    translate,
)
from .library import LibraryLoadError, NativeLibrary, install, load, native, teardown
from .handle import Handle, HandleKind
from .buffers import negotiate, negotiate_str
from .registry import KeySpec, construct, encode_name

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
    'check',
    'translate',
    'LibraryLoadError',
    'NativeLibrary',
    'install',
    'load',
    'native',
    'teardown',
    'Handle',
    'HandleKind',
    'negotiate',
    'negotiate_str',
    'KeySpec',
    'construct',
    'encode_name',
]
