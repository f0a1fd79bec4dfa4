"""
Multiple precision integers backed by native bignums.

MPI values are mutable native objects. The plain arithmetic methods
(add, sub, mul) return new values and leave their operands untouched;
the *_assign forms and the in-place operators mutate self.
"""

import re
from ctypes import byref, c_int, c_uint32, create_string_buffer
from typing import Optional, Tuple, Union

from ..ffi.base import NativeObject
from ..ffi.buffers import negotiate_str, query_size
from ..ffi.errors import ConversionError, InvalidInputError, check
from ..ffi.handle import Handle, HandleKind
from ..ffi.library import native

_LITERAL = re.compile(r"-?(0[xX][0-9a-fA-F]+|[0-9]+)\Z")

MPIInput = Union["MPI", int, str]


class MPI(NativeObject):
    """
    Arbitrary precision signed integer.

    Args:
        value: Initial value: an int, a decimal or "0x" hex literal, or another MPI
    """

    def __init__(self, value: Optional[MPIInput] = None, lib=None):
        if lib is None:
            lib = value._lib if isinstance(value, MPI) else native()
        super().__init__(Handle.acquire(HandleKind.MPI, lib, lib.botan_mp_init,
                                        function="botan_mp_init"))
        if value is not None:
            self.assign(value)

    @classmethod
    def from_str(cls, literal: str, lib=None) -> "MPI":
        mpi = cls(lib=lib)
        mpi.set_from_str(literal)
        return mpi

    @classmethod
    def from_bytes(cls, data: bytes, lib=None) -> "MPI":
        """Big-endian unsigned value of data."""
        mpi = cls(lib=lib)
        mpi.set_from_bin(data)
        return mpi

    def _coerce(self, other: MPIInput) -> "MPI":
        if isinstance(other, MPI):
            return other
        if isinstance(other, (int, str)):
            return MPI(other, lib=self._lib)
        raise TypeError(f"cannot use {type(other).__name__} as an MPI")

    # Setters

    def assign(self, value: MPIInput) -> None:
        if isinstance(value, MPI):
            check(self._lib.botan_mp_set_from_mp(self._ptr, value._ptr), "botan_mp_set_from_mp")
        elif isinstance(value, bool):
            raise TypeError("cannot use bool as an MPI")
        elif isinstance(value, int):
            self.set_from_int(value)
        elif isinstance(value, str):
            self.set_from_str(value)
        else:
            raise TypeError(f"cannot use {type(value).__name__} as an MPI")

    def set_i32(self, value: int) -> None:
        if not -2**31 <= value < 2**31:
            raise InvalidInputError(f"{value} does not fit in 32 bits")
        check(self._lib.botan_mp_set_from_int(self._ptr, value), "botan_mp_set_from_int")

    def set_from_int(self, value: int) -> None:
        """Assign any Python int; values beyond 32 bits go through the binary form."""
        if -2**31 <= value < 2**31:
            self.set_i32(value)
            return
        magnitude = abs(value)
        self.set_from_bin(magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big"))
        if value < 0:
            self.flip_sign()

    def set_from_str(self, literal: str) -> None:
        """
        Assign a decimal or "0x"-prefixed hexadecimal literal.

        Raises:
            ConversionError: If the literal is malformed
        """
        literal = literal.strip()
        if not _LITERAL.match(literal):
            raise ConversionError(f"malformed integer literal {literal!r}")
        negative = literal.startswith("-")
        if negative:
            literal = literal[1:]
        check(self._lib.botan_mp_set_from_str(self._ptr, literal.encode("ascii")),
              "botan_mp_set_from_str")
        if negative and not self.is_zero():
            self.flip_sign()

    def set_from_bin(self, data: bytes) -> None:
        data = bytes(data)
        check(self._lib.botan_mp_from_bin(self._ptr, data, len(data)), "botan_mp_from_bin")

    # Predicates and sizes

    def is_negative(self) -> bool:
        return check(self._lib.botan_mp_is_negative(self._ptr), "botan_mp_is_negative") == 1

    def is_zero(self) -> bool:
        return check(self._lib.botan_mp_is_zero(self._ptr), "botan_mp_is_zero") == 1

    def flip_sign(self) -> None:
        check(self._lib.botan_mp_flip_sign(self._ptr), "botan_mp_flip_sign")

    def bit_count(self) -> int:
        return query_size(lambda l: self._lib.botan_mp_num_bits(self._ptr, l), "botan_mp_num_bits")

    def byte_count(self) -> int:
        return query_size(lambda l: self._lib.botan_mp_num_bytes(self._ptr, l), "botan_mp_num_bytes")

    # Conversions

    def to_u32(self) -> int:
        value = c_uint32(0)
        check(self._lib.botan_mp_to_uint32(self._ptr, byref(value)), "botan_mp_to_uint32")
        return int(value.value)

    def to_bin(self, min_width: int = 0) -> bytes:
        """
        Big-endian magnitude with no leading zero bytes, left-padded to min_width.
        """
        length = self.byte_count()
        out = create_string_buffer(length)
        if length:
            check(self._lib.botan_mp_to_bin(self._ptr, out), "botan_mp_to_bin")
        raw = out.raw
        if len(raw) < min_width:
            raw = bytes(min_width - len(raw)) + raw
        return raw

    def to_string(self) -> str:
        """Decimal representation."""
        return negotiate_str(lambda b, bl: self._lib.botan_mp_to_str(self._ptr, 10, b, bl),
                             0, "botan_mp_to_str")

    def to_hex(self, upper: bool = False, prefix: bool = False) -> str:
        """Hex digits of the magnitude, always a whole number of bytes."""
        digits = self.to_bin().hex() or "00"
        if upper:
            digits = digits.upper()
        if prefix:
            digits = "0x" + digits
        if self.is_negative():
            digits = "-" + digits
        return digits

    def to_int(self) -> int:
        value = int.from_bytes(self.to_bin(), "big")
        return -value if self.is_negative() else value

    __int__ = to_int

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        if self.closed:
            return "<MPI closed>"
        return f"MPI({self.to_string()})"

    def __format__(self, spec: str) -> str:
        if spec in ("", "d"):
            return self.to_string()
        if spec in ("x", "X", "#x", "#X"):
            return self.to_hex(upper=spec.endswith("X"), prefix=spec.startswith("#"))
        return format(self.to_int(), spec)

    # Arithmetic

    def _binary(self, fn_name: str, other: MPIInput) -> "MPI":
        other = self._coerce(other)
        result = MPI(lib=self._lib)
        check(getattr(self._lib, fn_name)(result._ptr, self._ptr, other._ptr), fn_name)
        return result

    def _binary_assign(self, fn_name: str, other: MPIInput) -> "MPI":
        other = self._coerce(other)
        check(getattr(self._lib, fn_name)(self._ptr, self._ptr, other._ptr), fn_name)
        return self

    def add(self, other: MPIInput) -> "MPI":
        return self._binary("botan_mp_add", other)

    def sub(self, other: MPIInput) -> "MPI":
        return self._binary("botan_mp_sub", other)

    def mul(self, other: MPIInput) -> "MPI":
        return self._binary("botan_mp_mul", other)

    def add_assign(self, other: MPIInput) -> "MPI":
        return self._binary_assign("botan_mp_add", other)

    def sub_assign(self, other: MPIInput) -> "MPI":
        return self._binary_assign("botan_mp_sub", other)

    def mul_assign(self, other: MPIInput) -> "MPI":
        return self._binary_assign("botan_mp_mul", other)

    def divmod(self, other: MPIInput) -> Tuple["MPI", "MPI"]:
        """Quotient and remainder of self / other."""
        other = self._coerce(other)
        if other.is_zero():
            raise InvalidInputError("division by zero")
        quotient = MPI(lib=self._lib)
        remainder = MPI(lib=self._lib)
        check(self._lib.botan_mp_div(quotient._ptr, remainder._ptr, self._ptr, other._ptr),
              "botan_mp_div")
        return quotient, remainder

    def pow_mod(self, exponent: MPIInput, modulus: MPIInput) -> "MPI":
        exponent = self._coerce(exponent)
        modulus = self._coerce(modulus)
        result = MPI(lib=self._lib)
        check(self._lib.botan_mp_powmod(result._ptr, self._ptr, exponent._ptr, modulus._ptr),
              "botan_mp_powmod")
        return result

    def mod_inverse(self, modulus: MPIInput) -> "MPI":
        return self._binary("botan_mp_mod_inverse", modulus)

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __iadd__ = add_assign
    __isub__ = sub_assign
    __imul__ = mul_assign

    def __radd__(self, other):
        return self.add(other)

    def __rmul__(self, other):
        return self.mul(other)

    def __divmod__(self, other):
        return self.divmod(other)

    # Comparison

    def cmp(self, other: MPIInput) -> int:
        other = self._coerce(other)
        result = c_int(0)
        check(self._lib.botan_mp_cmp(byref(result), self._ptr, other._ptr), "botan_mp_cmp")
        return int(result.value)

    def __eq__(self, other):
        if isinstance(other, bool) or not isinstance(other, (MPI, int)):
            return NotImplemented
        other = self._coerce(other)
        return check(self._lib.botan_mp_equal(self._ptr, other._ptr), "botan_mp_equal") == 1

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        return self.cmp(other) < 0

    def __le__(self, other):
        return self.cmp(other) <= 0

    def __gt__(self, other):
        return self.cmp(other) > 0

    def __ge__(self, other):
        return self.cmp(other) >= 0

    __hash__ = None
