"""
Error taxonomy for native status codes.

Every native entry point returns a small integer. Zero is success, a
positive 1 is the "valid call, boolean false" answer of verification
functions, and negative values are failures. This module maps failures
onto a closed set of exception classes so callers can tell an unknown
algorithm name apart from a bad key length or a resource problem.
"""

import enum
import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# Native status codes
SUCCESS = 0
INVALID_VERIFIER = 1

ERROR_INVALID_INPUT = -1
ERROR_BAD_MAC = -2
ERROR_INSUFFICIENT_BUFFER_SPACE = -10
ERROR_STRING_CONVERSION_ERROR = -11
ERROR_EXCEPTION_THROWN = -20
ERROR_OUT_OF_MEMORY = -21
ERROR_SYSTEM_ERROR = -22
ERROR_INTERNAL_ERROR = -23
ERROR_BAD_FLAG = -30
ERROR_NULL_POINTER = -31
ERROR_BAD_PARAMETER = -32
ERROR_KEY_NOT_SET = -33
ERROR_INVALID_KEY_LENGTH = -34
ERROR_INVALID_OBJECT_STATE = -35
ERROR_NOT_IMPLEMENTED = -40
ERROR_INVALID_OBJECT = -50
ERROR_TLS_ERROR = -75
ERROR_HTTP_ERROR = -76
ERROR_ROUGHTIME_ERROR = -77
ERROR_UNKNOWN_ERROR = -100


class ErrorKind(enum.Enum):
    """Closed set of failure kinds surfaced to callers."""

    NOT_IMPLEMENTED = "not implemented"
    INVALID_KEY_LENGTH = "invalid key length"
    INVALID_INPUT = "invalid input"
    INSUFFICIENT_BUFFER_SPACE = "insufficient buffer space"
    BAD_MAC = "bad MAC"
    CONVERSION_ERROR = "conversion error"
    GENERIC_ERROR = "generic error"


_KIND_BY_CODE = {
    ERROR_INVALID_INPUT: ErrorKind.INVALID_INPUT,
    ERROR_BAD_FLAG: ErrorKind.INVALID_INPUT,
    ERROR_NULL_POINTER: ErrorKind.INVALID_INPUT,
    ERROR_BAD_PARAMETER: ErrorKind.INVALID_INPUT,
    ERROR_KEY_NOT_SET: ErrorKind.INVALID_INPUT,
    ERROR_INVALID_OBJECT_STATE: ErrorKind.INVALID_INPUT,
    ERROR_INVALID_OBJECT: ErrorKind.INVALID_INPUT,
    ERROR_BAD_MAC: ErrorKind.BAD_MAC,
    ERROR_INSUFFICIENT_BUFFER_SPACE: ErrorKind.INSUFFICIENT_BUFFER_SPACE,
    ERROR_STRING_CONVERSION_ERROR: ErrorKind.CONVERSION_ERROR,
    ERROR_INVALID_KEY_LENGTH: ErrorKind.INVALID_KEY_LENGTH,
    ERROR_NOT_IMPLEMENTED: ErrorKind.NOT_IMPLEMENTED,
}

_DESCRIPTIONS = {
    ERROR_INVALID_INPUT: "invalid input",
    ERROR_BAD_MAC: "invalid authentication code",
    ERROR_INSUFFICIENT_BUFFER_SPACE: "insufficient buffer space",
    ERROR_STRING_CONVERSION_ERROR: "string conversion error",
    ERROR_EXCEPTION_THROWN: "exception thrown",
    ERROR_OUT_OF_MEMORY: "out of memory",
    ERROR_SYSTEM_ERROR: "system error",
    ERROR_INTERNAL_ERROR: "internal error",
    ERROR_BAD_FLAG: "bad flag",
    ERROR_NULL_POINTER: "null pointer argument",
    ERROR_BAD_PARAMETER: "bad parameter",
    ERROR_KEY_NOT_SET: "key not set on object",
    ERROR_INVALID_KEY_LENGTH: "invalid key length",
    ERROR_INVALID_OBJECT_STATE: "invalid object state",
    ERROR_NOT_IMPLEMENTED: "not implemented",
    ERROR_INVALID_OBJECT: "invalid object handle",
    ERROR_TLS_ERROR: "TLS error",
    ERROR_HTTP_ERROR: "HTTP error",
    ERROR_ROUGHTIME_ERROR: "roughtime error",
    ERROR_UNKNOWN_ERROR: "unknown error",
}


class BotanError(Exception):
    """Base class for every failure reported by the native library."""

    kind = ErrorKind.GENERIC_ERROR

    def __init__(self, message: Optional[str] = None, rc: Optional[int] = None):
        self.rc = rc
        if message is None:
            message = self.kind.value
        if rc is not None:
            message = f"{message}: {rc} ({describe(rc)})"
        super().__init__(message)


class NotSupportedError(BotanError):
    """Unknown algorithm name, or operation unsupported for this key/algorithm."""
    kind = ErrorKind.NOT_IMPLEMENTED


class InvalidKeyLengthError(BotanError):
    kind = ErrorKind.INVALID_KEY_LENGTH


class InvalidInputError(BotanError):
    """Malformed argument or an operation called in the wrong state."""
    kind = ErrorKind.INVALID_INPUT


class InsufficientBufferSpaceError(BotanError):
    kind = ErrorKind.INSUFFICIENT_BUFFER_SPACE


class BadMACError(BotanError):
    """Authenticated decryption rejected the tag."""
    kind = ErrorKind.BAD_MAC


class ConversionError(BotanError):
    """Malformed encoded data (hex, DER/PEM, integer literals)."""
    kind = ErrorKind.CONVERSION_ERROR


class GenericError(BotanError):
    kind = ErrorKind.GENERIC_ERROR


class InternalError(GenericError):
    """The native side reported corruption; the process state is suspect."""
    fatal = True


class HandleReleasedError(RuntimeError):
    """A released native handle was used. This is a programming error."""
    pass


_CLASS_BY_KIND = {
    ErrorKind.NOT_IMPLEMENTED: NotSupportedError,
    ErrorKind.INVALID_KEY_LENGTH: InvalidKeyLengthError,
    ErrorKind.INVALID_INPUT: InvalidInputError,
    ErrorKind.INSUFFICIENT_BUFFER_SPACE: InsufficientBufferSpaceError,
    ErrorKind.BAD_MAC: BadMACError,
    ErrorKind.CONVERSION_ERROR: ConversionError,
    ErrorKind.GENERIC_ERROR: GenericError,
}


def describe(rc: int) -> str:
    """Human readable name of a native status code."""
    if rc == SUCCESS:
        return "success"
    if rc == INVALID_VERIFIER:
        return "invalid verifier"
    return _DESCRIPTIONS.get(rc, "unrecognized status")


def translate(rc: int) -> Optional[ErrorKind]:
    """
    Map a native status code to its error kind.

    Returns None for success and for non-negative results. Unknown
    negative codes fall back to GENERIC_ERROR.
    """
    if rc >= 0:
        return None
    return _KIND_BY_CODE.get(rc, ErrorKind.GENERIC_ERROR)


def internal_error(message: str, rc: Optional[int] = None) -> InternalError:
    """Log and build (but do not raise) an InternalError."""
    logger.critical("native library internal error: %s", message)
    return InternalError(message, rc)


def error_for(rc: int, message: Optional[str] = None) -> BotanError:
    """Build (but do not raise) the exception for a failing status code."""
    if rc == ERROR_INTERNAL_ERROR:
        return internal_error(message or "no context", rc)
    kind = translate(rc)
    if kind is None:
        raise ValueError(f"status {rc} is not a failure")
    return _CLASS_BY_KIND[kind](message, rc)


def check(rc: int, function: Optional[str] = None, allowed: Iterable[int] = ()) -> int:
    """
    Raise the taxonomy exception for a failing status code.

    Args:
        rc: Status returned by a native call
        function: Native function name, used in the error message
        allowed: Negative codes the caller handles itself

    Returns:
        The status code unchanged when it is not a failure
    """
    if rc >= 0 or rc in allowed:
        return rc
    message = f"{function} failed" if function else None
    raise error_for(rc, message)
