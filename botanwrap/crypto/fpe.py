"""
Format preserving encryption over integers below a modulus.
"""

from ..ffi.base import NativeObject
from ..ffi.buffers import as_bytes
from ..ffi.errors import InvalidInputError, check
from ..ffi.handle import Handle, HandleKind
from .mpi import MPI, MPIInput

FPE_FLAG_FE1_COMPAT_MODE = 1


class FPE(NativeObject):
    """
    FE1 format preserving encryption.

    encrypt() and decrypt() are inverse permutations of [0, modulus),
    parameterized by key and a per-call tweak.
    """

    def __init__(self, modulus: MPI, key, rounds: int = 5, compat_mode: bool = False):
        key = as_bytes(key)
        flags = FPE_FLAG_FE1_COMPAT_MODE if compat_mode else 0
        lib = modulus._lib
        super().__init__(Handle.acquire(HandleKind.FPE, lib, lib.botan_fpe_fe1_init,
                                        modulus.handle_(), key, len(key), rounds, flags,
                                        function="botan_fpe_fe1_init"))
        self._modulus = MPI(modulus)

    @classmethod
    def new_fe1(cls, modulus: MPI, key, rounds: int = 5, compat_mode: bool = False) -> "FPE":
        return cls(modulus, key, rounds, compat_mode)

    def _transform(self, fn_name: str, value: MPIInput, tweak) -> MPI:
        result = MPI(value, lib=self._lib)
        if result.is_negative() or result >= self._modulus:
            raise InvalidInputError("FPE input must be in [0, modulus)")
        tweak = as_bytes(tweak)
        check(getattr(self._lib, fn_name)(self._ptr, result.handle_(), tweak, len(tweak)), fn_name)
        return result

    def encrypt(self, value: MPIInput, tweak) -> MPI:
        return self._transform("botan_fpe_encrypt", value, tweak)

    def decrypt(self, value: MPIInput, tweak) -> MPI:
        return self._transform("botan_fpe_decrypt", value, tweak)
