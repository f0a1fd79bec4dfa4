"""
Tests for multiple precision integers and format preserving encryption.
"""

import pytest

from botanwrap import FPE, MPI, ConversionError, InvalidInputError


class TestConstruction:
    """Test creating and assigning values."""

    def test_default_is_zero(self, fake_native):
        value = MPI()
        assert value.is_zero()
        assert value.to_u32() == 0

    def test_set_i32(self, fake_native):
        a = MPI()
        b = MPI()
        a.set_i32(9)
        b.set_i32(81)
        assert a.to_u32() == 9
        assert b.to_u32() == 81

    def test_set_i32_range(self, fake_native):
        with pytest.raises(InvalidInputError):
            MPI().set_i32(2**31)

    def test_from_str(self, fake_native):
        assert MPI.from_str("0x5A") == 90
        assert MPI.from_str("92700") == 92700
        assert MPI.from_str("-0x10") == -16
        assert MPI.from_str("-0") == 0

    @pytest.mark.parametrize("literal", ["", "12a", "0x", "--5", "1 2", "0xZZ"])
    def test_malformed_literals(self, fake_native, literal):
        with pytest.raises(ConversionError):
            MPI.from_str(literal)

    def test_large_ints(self, fake_native):
        """Test values that do not fit in the native int setter."""
        for value in (2**31, 2**100 + 7, -(2**70) - 3):
            assert int(MPI(value)) == value

    def test_from_bytes(self, fake_native):
        assert MPI.from_bytes(b"\x01\x6a\x1c") == 92700

    def test_copy_from_mpi(self, fake_native):
        original = MPI(42)
        copy = MPI(original)
        copy.add_assign(1)
        assert original == 42
        assert copy == 43

    def test_rejects_other_types(self, fake_native):
        with pytest.raises(TypeError):
            MPI(1.5)
        with pytest.raises(TypeError):
            MPI(True)


class TestConversions:
    """Test string, binary and integer output."""

    def test_formatting(self, fake_native):
        c = MPI(90)
        c.mul_assign(MPI.from_str("1030"))

        assert c.to_string() == "92700"
        assert str(c) == "92700"
        assert f"{c}" == "92700"
        assert f"{c:d}" == "92700"
        assert f"{c:x}" == "016a1c"
        assert f"{c:X}" == "016A1C"
        assert f"{c:#x}" == "0x016a1c"
        assert f"{c:#X}" == "0x016A1C"
        assert repr(c) == "MPI(92700)"

    def test_to_bin(self, fake_native):
        c = MPI(92700)
        assert c.to_bin() == b"\x01\x6a\x1c"
        assert c.to_bin(5) == b"\x00\x00\x01\x6a\x1c"
        assert MPI(0).to_bin() == b""

    def test_negative(self, fake_native):
        value = MPI(-5)
        assert value.is_negative()
        assert value.to_int() == -5
        assert str(value) == "-5"
        assert f"{value:x}" == "-05"

    def test_sizes(self, fake_native):
        assert MPI(255).bit_count() == 8
        assert MPI(256).bit_count() == 9
        assert MPI(256).byte_count() == 2
        assert MPI(0).byte_count() == 0

    def test_to_u32_overflow(self, fake_native):
        with pytest.raises(InvalidInputError):
            MPI(2**40).to_u32()

    def test_flip_sign(self, fake_native):
        value = MPI(7)
        value.flip_sign()
        assert value == -7


class TestArithmetic:
    """Test arithmetic and comparison."""

    def test_add(self, fake_native):
        a, b = MPI(9), MPI(81)
        c = a.add(b)
        assert c == 90
        assert a == 9 and b == 81

    def test_operators(self, fake_native):
        a = MPI(100)
        assert a + 5 == 105
        assert a - 5 == 95
        assert a * 3 == 300
        assert 5 + a == 105
        assert 3 * a == 300

    def test_in_place(self, fake_native):
        a = MPI(10)
        before = a
        a += 5
        a *= 2
        a -= 1
        assert a is before
        assert a == 29

    def test_divmod(self, fake_native):
        q, r = divmod(MPI(100), 7)
        assert q == 14
        assert r == 2

    def test_division_by_zero(self, fake_native):
        with pytest.raises(InvalidInputError):
            MPI(1).divmod(0)

    def test_pow_mod(self, fake_native):
        assert MPI(4).pow_mod(13, 497) == 445

    def test_mod_inverse(self, fake_native):
        assert MPI(3).mod_inverse(11) == 4

    def test_comparisons(self, fake_native):
        small, big = MPI(3), MPI(10)
        assert small < big
        assert small <= 3
        assert big > small
        assert big >= 10
        assert small != big
        assert small.cmp(big) == -1
        assert big.cmp(small) == 1
        assert small.cmp(3) == 0

    def test_equality_with_other_types(self, fake_native):
        assert MPI(1) != "1"
        assert not (MPI(1) == 1.0)

    def test_unhashable(self, fake_native):
        with pytest.raises(TypeError):
            hash(MPI(1))


class TestFPE:
    """Test format preserving encryption."""

    def test_roundtrip(self, fake_native):
        modulus = MPI.from_str("1000000000")
        value = MPI.from_str("939210311")
        key = bytes(32)
        tweak = bytes(8)

        fpe = FPE.new_fe1(modulus, key, 8, False)
        ctext = fpe.encrypt(value, tweak)

        assert ctext != value
        assert 0 <= int(ctext) < 1000000000
        assert fpe.decrypt(ctext, tweak) == value
        assert value == 939210311

    def test_out_of_range(self, fake_native):
        fpe = FPE(MPI(1000), bytes(32))
        with pytest.raises(InvalidInputError):
            fpe.encrypt(1000, b"tweak")
        with pytest.raises(InvalidInputError):
            fpe.encrypt(-1, b"tweak")

    def test_accepts_ints(self, fake_native):
        fpe = FPE(MPI(1000), bytes(32))
        ctext = fpe.encrypt(123, b"tweak")
        assert fpe.decrypt(ctext, b"tweak") == 123


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
