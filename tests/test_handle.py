"""
Tests for native handle ownership.

Every native object must be destroyed exactly once, whether released
explicitly, by a with block, or by garbage collection.
"""

import gc
import logging
from ctypes import c_void_p

import pytest

from botanwrap import HashFunction, MPI, NotSupportedError
from botanwrap.ffi import handle as handle_module
from botanwrap.ffi import library
from botanwrap.ffi.errors import HandleReleasedError
from botanwrap.ffi.handle import Handle, HandleKind


def _hash_handle(lib):
    return Handle.acquire(HandleKind.HASH, lib, lib.botan_hash_init, b"SHA-256", 0)


class TestRelease:
    """Test exactly-once destruction."""

    def test_explicit_release(self, fake_native):
        """Test that release() destroys once and repeated calls do nothing."""
        h = _hash_handle(fake_native)
        assert h.alive

        h.release()
        h.release()

        assert not h.alive
        assert fake_native.destroyed == [("hash", h._ptr.value)]

    def test_context_manager(self, fake_native):
        with HashFunction("SHA-256") as h:
            h.update(b"abc")
        assert h.closed
        assert len(fake_native.destroyed) == 1

    def test_close_then_exit(self, fake_native):
        """Test that close() inside a with block does not destroy twice."""
        with HashFunction("SHA-256") as h:
            h.close()
        assert len(fake_native.destroyed) == 1

    def test_garbage_collection(self, fake_native):
        """Test that dropping the last reference destroys the object."""
        h = HashFunction("SHA-256")
        del h
        gc.collect()
        assert len(fake_native.destroyed) == 1
        assert fake_native.live() == []

    def test_every_kind_has_a_destructor(self, fake_native):
        for kind in HandleKind:
            assert kind.destroy_fn.startswith("botan_")
            assert kind.destroy_fn.endswith("_destroy")

    def test_destroy_failure_is_logged(self, fake_native, caplog):
        """Test that a failing destructor warns instead of raising."""
        h = _hash_handle(fake_native)
        del fake_native.objects[h._ptr.value]

        with caplog.at_level(logging.WARNING, logger=handle_module.__name__):
            h.release()

        assert not h.alive
        assert any("botan_hash_destroy" in r.getMessage() for r in caplog.records)


class TestUseAfterRelease:
    """Test that released handles cannot reach the native side."""

    def test_ptr_after_release(self, fake_native):
        h = _hash_handle(fake_native)
        h.release()
        with pytest.raises(HandleReleasedError):
            h.ptr

    def test_wrapper_after_close(self, fake_native):
        h = HashFunction("SHA-256")
        h.close()
        calls = len(fake_native.calls)

        with pytest.raises(HandleReleasedError):
            h.update(b"abc")
        with pytest.raises(HandleReleasedError):
            h.final()

        assert len(fake_native.calls) == calls

    def test_repr_after_close(self, fake_native):
        h = HashFunction("SHA-256")
        h.close()
        assert "closed" in repr(h)


class TestConstruction:
    """Test handle acquisition."""

    def test_failed_init_leaves_nothing(self, fake_native):
        """Test that a rejected constructor produces no handle to destroy."""
        with pytest.raises(NotSupportedError):
            HashFunction("BunnyHash9000")
        assert fake_native.live() == []
        assert fake_native.destroyed == []

    def test_null_pointer_rejected(self, fake_native):
        with pytest.raises(ValueError):
            Handle(HandleKind.HASH, c_void_p(0), fake_native)

    def test_handle_keeps_its_library(self, fake_native):
        """Test that teardown of the global library does not break live objects."""
        h = HashFunction("SHA-256")
        library.teardown()

        h.update(b"abc")
        assert len(h.final()) == 32
        h.close()
        assert len(fake_native.destroyed) == 1


class TestDuplicate:
    """Test state copies."""

    def test_duplicable_kinds(self):
        assert HandleKind.HASH.duplicable
        assert HandleKind.CERTIFICATE.duplicable
        assert not HandleKind.MPI.duplicable
        assert not HandleKind.CIPHER.duplicable

    def test_duplicate_is_independent(self, fake_native):
        """Test that the copy and the original are released separately."""
        h = _hash_handle(fake_native)
        copy = h.duplicate()

        assert copy._ptr.value != h._ptr.value
        h.release()
        assert copy.alive
        copy.release()
        assert len(fake_native.destroyed) == 2

    def test_duplicate_unsupported(self, fake_native):
        value = MPI(5)
        with pytest.raises(NotSupportedError):
            value._handle.duplicate()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
