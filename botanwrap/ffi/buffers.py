"""
Output buffer negotiation.

Native calls producing variable-length output take an output pointer
and an in/out length. Called with too little room they report
"insufficient buffer space" and store the required length. negotiate()
probes for that length, allocates, fills, and retries once if the
required length moved in between. Outputs whose length is known up
front skip the probe and use a single pre-sized call.
"""

import logging
from ctypes import byref, c_size_t, create_string_buffer
from typing import Callable, NamedTuple, Union

from .errors import (
    ERROR_INSUFFICIENT_BUFFER_SPACE,
    ConversionError,
    InsufficientBufferSpaceError,
    check,
    internal_error,
)

logger = logging.getLogger(__name__)

# Extra fill attempts allowed after the probe before giving up
MAX_RETRIES = 1

BytesLike = Union[bytes, bytearray, memoryview, str]


class BufferResult(NamedTuple):
    capacity: int
    written: int


def as_bytes(data: BytesLike) -> bytes:
    """Coerce caller input into bytes for a native char* argument."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes-like or str, got {type(data).__name__}")


def _fill(fn, capacity: int):
    buf = create_string_buffer(capacity) if capacity else None
    length = c_size_t(capacity)
    rc = fn(buf, byref(length))
    return rc, buf, BufferResult(capacity, length.value)


def negotiate(fn: Callable, guess: int = 0, function: str = None) -> bytes:
    """
    Run a variable-length output call until its output fits.

    Args:
        fn: Callable taking (buffer, byref(length)) and returning a status
        guess: Initial capacity; 0 probes with a null buffer
        function: Native name for error messages

    Returns:
        Exactly the bytes the native call reported as written

    Raises:
        InsufficientBufferSpaceError: If the required length keeps growing
        InternalError: If the native side claims to have overrun the buffer
    """
    capacity = guess
    retries = 0
    probing = True

    while True:
        rc, buf, result = _fill(fn, capacity)

        if rc == ERROR_INSUFFICIENT_BUFFER_SPACE and result.written > result.capacity:
            if probing:
                probing = False
            elif retries < MAX_RETRIES:
                retries += 1
                logger.debug("%s: required length moved to %d, retrying",
                             function or "native call", result.written)
            else:
                raise InsufficientBufferSpaceError(
                    f"{function or 'native call'} still needs {result.written} bytes "
                    f"after {retries + 1} attempts",
                    rc,
                )
            capacity = result.written
            continue

        check(rc, function)

        if result.written > result.capacity:
            raise internal_error(
                f"{function or 'native call'} wrote {result.written} bytes "
                f"into a {result.capacity} byte buffer"
            )
        if buf is None:
            return b""
        return buf.raw[:result.written]


def negotiate_str(fn: Callable, guess: int = 0, function: str = None) -> str:
    """negotiate() for NUL-terminated text output."""
    raw = negotiate(fn, guess, function)
    if raw.endswith(b"\x00"):
        raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConversionError(f"{function or 'native call'} returned undecodable text") from e


def fixed_output(fn: Callable, length: int, function: str = None) -> bytes:
    """Single call into a buffer whose exact size is already known."""
    buf = create_string_buffer(length)
    check(fn(buf), function)
    return buf.raw


def query_size(fn: Callable, function: str = None) -> int:
    """Call a native size getter taking a single size_t out-parameter."""
    value = c_size_t(0)
    check(fn(byref(value)), function)
    return int(value.value)
