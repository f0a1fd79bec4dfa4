"""
Read-only access to X.509 certificates.
"""

from ctypes import byref, c_uint64

from ..ffi.base import NativeObject
from ..ffi.buffers import as_bytes, negotiate, negotiate_str
from ..ffi.errors import check
from ..ffi.handle import Handle, HandleKind
from ..ffi.library import native
from ..ffi.registry import encode_name
from .pubkey import Pubkey

# hostname_match answers -1 when the name does not match
_NO_MATCH = -1


class Certificate(NativeObject):
    """An X.509 certificate loaded from DER (or PEM) bytes."""

    @classmethod
    def load(cls, data, lib=None) -> "Certificate":
        lib = lib or native()
        data = as_bytes(data)
        return cls(Handle.acquire(HandleKind.CERTIFICATE, lib, lib.botan_x509_cert_load,
                                  data, len(data), function="botan_x509_cert_load"))

    @classmethod
    def load_file(cls, path: str, lib=None) -> "Certificate":
        lib = lib or native()
        return cls(Handle.acquire(HandleKind.CERTIFICATE, lib, lib.botan_x509_cert_load_file,
                                  encode_name(path, "path"), function="botan_x509_cert_load_file"))

    def duplicate(self) -> "Certificate":
        return Certificate(self._handle.duplicate())

    def _bytes_field(self, fn_name: str) -> bytes:
        fn = getattr(self._lib, fn_name)
        return negotiate(lambda b, bl: fn(self._ptr, b, bl), 0, fn_name)

    def serial_number(self) -> bytes:
        return self._bytes_field("botan_x509_cert_get_serial_number")

    def authority_key_id(self) -> bytes:
        return self._bytes_field("botan_x509_cert_get_authority_key_id")

    def subject_key_id(self) -> bytes:
        return self._bytes_field("botan_x509_cert_get_subject_key_id")

    def public_key_bits(self) -> bytes:
        return self._bytes_field("botan_x509_cert_get_public_key_bits")

    def public_key(self) -> Pubkey:
        return Pubkey(Handle.acquire(HandleKind.PUBKEY, self._lib,
                                     lambda out: self._lib.botan_x509_cert_get_public_key(self._ptr, out),
                                     function="botan_x509_cert_get_public_key"))

    def fingerprint(self, hash_algo: str = "SHA-256") -> str:
        """Colon separated hex fingerprint."""
        algo = encode_name(hash_algo)
        return negotiate_str(
            lambda b, bl: self._lib.botan_x509_cert_get_fingerprint(self._ptr, algo, b, bl),
            0, "botan_x509_cert_get_fingerprint")

    def _time(self, fn_name: str) -> int:
        value = c_uint64(0)
        check(getattr(self._lib, fn_name)(self._ptr, byref(value)), fn_name)
        return int(value.value)

    def not_before(self) -> int:
        """Start of validity, seconds since the epoch."""
        return self._time("botan_x509_cert_not_before")

    def not_after(self) -> int:
        """End of validity, seconds since the epoch."""
        return self._time("botan_x509_cert_not_after")

    def _dn(self, fn_name: str, key: str, index: int) -> str:
        fn = getattr(self._lib, fn_name)
        key = encode_name(key, "DN key")
        return negotiate_str(lambda b, bl: fn(self._ptr, key, index, b, bl), 0, fn_name)

    def subject_dn(self, key: str, index: int = 0) -> str:
        return self._dn("botan_x509_cert_get_subject_dn", key, index)

    def issuer_dn(self, key: str, index: int = 0) -> str:
        return self._dn("botan_x509_cert_get_issuer_dn", key, index)

    def hostname_match(self, hostname: str) -> bool:
        rc = self._lib.botan_x509_cert_hostname_match(self._ptr, encode_name(hostname, "hostname"))
        if rc == _NO_MATCH:
            return False
        check(rc, "botan_x509_cert_hostname_match")
        return True

    def to_string(self) -> str:
        return negotiate_str(lambda b, bl: self._lib.botan_x509_cert_to_string(self._ptr, b, bl),
                             0, "botan_x509_cert_to_string")

    def __repr__(self) -> str:
        if self.closed:
            return "<Certificate closed>"
        return f"<Certificate serial={self.serial_number().hex()}>"
