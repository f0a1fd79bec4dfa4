"""
Secure memory operations.

Provides utilities for handling key material held in Python buffers.
"""

import ctypes

from cryptography.hazmat.primitives import constant_time

from ..ffi.buffers import as_bytes


def const_time_compare(a, b) -> bool:
    """
    Compare two byte sequences in constant time.

    Sequences of different length compare unequal immediately; equal
    length sequences are compared without exiting early on the first
    difference.

    Args:
        a: First byte sequence
        b: Second byte sequence

    Returns:
        True if sequences are equal, False otherwise
    """
    a, b = as_bytes(a), as_bytes(b)
    if len(a) != len(b):
        return False
    return constant_time.bytes_eq(a, b)


def scrub_mem(buffer) -> None:
    """
    Overwrite a mutable buffer with zeros, in place.

    Works for any writable buffer regardless of element width:
    bytearray, array.array, ctypes arrays and writable memoryviews. Plain
    lists of ints are zeroed element-wise.

    Args:
        buffer: Memory to zero

    Raises:
        TypeError: If buffer is immutable or not a buffer
    """
    if isinstance(buffer, list):
        buffer[:] = [0] * len(buffer)
        return

    view = memoryview(buffer)
    try:
        if view.readonly:
            raise TypeError(f"cannot scrub read-only {type(buffer).__name__}")
        if not view.contiguous:
            raise TypeError("cannot scrub a non-contiguous buffer")
        nbytes = view.nbytes
    finally:
        view.release()

    if nbytes:
        target = (ctypes.c_char * nbytes).from_buffer(buffer)
        ctypes.memset(target, 0, nbytes)
        del target
