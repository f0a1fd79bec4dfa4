"""
Random number generation.
"""

from ctypes import create_string_buffer
from typing import Optional

from ..config import get_config
from ..ffi.base import NativeObject
from ..ffi.buffers import as_bytes
from ..ffi.errors import InvalidInputError, check
from ..ffi.handle import HandleKind
from ..ffi.registry import construct


class RandomNumberGenerator(NativeObject):
    """
    Native random number generator.

    rng_type is a native generator name such as "system" (the operating
    system source) or "user" (a userspace generator seeded from it).
    """

    def __init__(self, rng_type: Optional[str] = None, lib=None):
        if rng_type is None:
            rng_type = get_config().rng_type
        super().__init__(construct(HandleKind.RNG, rng_type, lib=lib))
        self.rng_type = rng_type

    @classmethod
    def system(cls, lib=None) -> "RandomNumberGenerator":
        return cls("system", lib=lib)

    @classmethod
    def user(cls, lib=None) -> "RandomNumberGenerator":
        return cls("user", lib=lib)

    def read(self, length: int) -> bytes:
        """Return exactly length random bytes."""
        if length < 0:
            raise InvalidInputError("cannot read a negative number of bytes")
        out = create_string_buffer(length)
        check(self._lib.botan_rng_get(self._ptr, out, length), "botan_rng_get")
        return out.raw

    get = read

    def reseed(self, bits: int = 256) -> None:
        check(self._lib.botan_rng_reseed(self._ptr, bits), "botan_rng_reseed")

    def add_entropy(self, seed) -> None:
        seed = as_bytes(seed)
        check(self._lib.botan_rng_add_entropy(self._ptr, seed, len(seed)), "botan_rng_add_entropy")

    def __repr__(self) -> str:
        return f"<RandomNumberGenerator {self.rng_type}>"
