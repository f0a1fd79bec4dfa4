"""
Public and private keys.

Keys are created by generation (Privkey.create), by loading a DER or
PEM encoding, or by derivation (Privkey.pubkey). Encoded output goes
through buffer negotiation since its length depends on the key.
"""

from typing import Optional

from ..config import get_config
from ..ffi.base import NativeObject
from ..ffi.buffers import as_bytes, negotiate, negotiate_str, query_size
from ..ffi.errors import check
from ..ffi.handle import Handle, HandleKind
from ..ffi.library import native
from ..ffi.registry import construct, encode_name, encode_optional
from .mpi import MPI
from .rng import RandomNumberGenerator

EXPORT_DER = 0
EXPORT_PEM = 1
CHECK_KEY_STRONG = 1

# check_key entry points answer -1 for a key that fails the checks
_CHECK_KEY_FAILED = -1


class _Key(NativeObject):
    _prefix = None

    def _fn(self, suffix: str):
        return getattr(self._lib, f"botan_{self._prefix}_{suffix}")

    def algo_name(self) -> str:
        fn = self._fn("algo_name")
        return negotiate_str(lambda b, bl: fn(self._ptr, b, bl), 32, f"botan_{self._prefix}_algo_name")

    def check_key(self, rng: RandomNumberGenerator, strong: bool = True) -> bool:
        """Run the algorithm's consistency checks; False if the key fails them."""
        flags = CHECK_KEY_STRONG if strong else 0
        rc = self._fn("check_key")(self._ptr, rng.handle_(), flags)
        if rc == _CHECK_KEY_FAILED:
            return False
        check(rc, f"botan_{self._prefix}_check_key")
        return True

    def get_field(self, field_name: str) -> MPI:
        """
        Named numeric parameter of the key, e.g. "n" and "e" for RSA or "order" for EC keys.

        Raises:
            BotanError: If the field does not exist for this algorithm
        """
        field = MPI(lib=self._lib)
        check(self._fn("get_field")(field.handle_(), self._ptr, encode_name(field_name, "field name")),
              f"botan_{self._prefix}_get_field")
        return field

    def _export(self, flags: int):
        fn = self._fn("export")
        name = f"botan_{self._prefix}_export"
        if flags == EXPORT_PEM:
            return negotiate_str(lambda b, bl: fn(self._ptr, b, bl, flags), 0, name)
        return negotiate(lambda b, bl: fn(self._ptr, b, bl, flags), 0, name)

    def export(self, pem: bool = False):
        return self._export(EXPORT_PEM if pem else EXPORT_DER)

    def der_encode(self) -> bytes:
        return self._export(EXPORT_DER)

    def pem_encode(self) -> str:
        return self._export(EXPORT_PEM)

    def __repr__(self) -> str:
        if self.closed:
            return f"<{type(self).__name__} closed>"
        return f"<{type(self).__name__} {self.algo_name()}>"


class Pubkey(_Key):
    """Public key."""

    _prefix = "pubkey"

    @classmethod
    def load(cls, data, lib=None) -> "Pubkey":
        """Load a DER or PEM encoded public key."""
        lib = lib or native()
        data = as_bytes(data)
        return cls(Handle.acquire(HandleKind.PUBKEY, lib, lib.botan_pubkey_load, data, len(data),
                                  function="botan_pubkey_load"))

    load_der = load
    load_pem = load

    @classmethod
    def load_rsa(cls, n: MPI, e: MPI) -> "Pubkey":
        lib = n._lib
        return cls(Handle.acquire(HandleKind.PUBKEY, lib, lib.botan_pubkey_load_rsa,
                                  n.handle_(), e.handle_(), function="botan_pubkey_load_rsa"))

    def estimated_strength(self) -> int:
        return query_size(lambda l: self._lib.botan_pubkey_estimated_strength(self._ptr, l),
                          "botan_pubkey_estimated_strength")

    def fingerprint(self, hash_algo: str = "SHA-256") -> bytes:
        algo = encode_name(hash_algo)
        return negotiate(lambda b, bl: self._lib.botan_pubkey_fingerprint(self._ptr, algo, b, bl),
                         0, "botan_pubkey_fingerprint")


class Privkey(_Key):
    """Private key."""

    _prefix = "privkey"

    @classmethod
    def create(cls, algo: str, params: str, rng: RandomNumberGenerator) -> "Privkey":
        """
        Generate a new key pair.

        Args:
            algo: Algorithm name, e.g. "RSA", "ECDSA", "ECDH"
            params: Algorithm parameters, e.g. "2048" or "secp256r1"
            rng: Randomness source

        Raises:
            NotSupportedError: If the algorithm is unknown
        """
        return cls(construct(HandleKind.PRIVKEY, algo, encode_name(params, "key parameters"),
                             rng.handle_(), lib=rng._lib))

    @classmethod
    def load(cls, data, passphrase: Optional[str] = None, lib=None) -> "Privkey":
        """Load a DER or PEM private key, optionally encrypted under passphrase."""
        lib = lib or native()
        data = as_bytes(data)
        password = encode_optional(passphrase, "passphrase")
        return cls(Handle.acquire(HandleKind.PRIVKEY, lib, lib.botan_privkey_load,
                                  None, data, len(data), password, function="botan_privkey_load"))

    @classmethod
    def load_der(cls, data, lib=None) -> "Privkey":
        return cls.load(data, lib=lib)

    @classmethod
    def load_pem(cls, pem: str, lib=None) -> "Privkey":
        return cls.load(pem, lib=lib)

    @classmethod
    def load_encrypted_der(cls, data, passphrase: str, lib=None) -> "Privkey":
        return cls.load(data, passphrase, lib=lib)

    @classmethod
    def load_encrypted_pem(cls, pem: str, passphrase: str, lib=None) -> "Privkey":
        return cls.load(pem, passphrase, lib=lib)

    @classmethod
    def load_rsa(cls, p: MPI, q: MPI, e: MPI) -> "Privkey":
        lib = p._lib
        return cls(Handle.acquire(HandleKind.PRIVKEY, lib, lib.botan_privkey_load_rsa,
                                  p.handle_(), q.handle_(), e.handle_(),
                                  function="botan_privkey_load_rsa"))

    def pubkey(self) -> Pubkey:
        """The public half of this key pair."""
        return Pubkey(Handle.acquire(HandleKind.PUBKEY, self._lib, self._lib.botan_privkey_export_pubkey,
                                     self._ptr, function="botan_privkey_export_pubkey"))

    def key_agreement_key(self) -> bytes:
        """
        Public value to send to a key agreement peer.

        Raises:
            BotanError: If the algorithm does not support key agreement
        """
        return negotiate(
            lambda b, bl: self._lib.botan_pk_op_key_agreement_export_public(self._ptr, b, bl),
            0, "botan_pk_op_key_agreement_export_public")

    def _export_encrypted(self, passphrase: str, rng: RandomNumberGenerator, flags: int,
                          iterations: Optional[int], cipher: Optional[str], pbkdf_hash: Optional[str]):
        config = get_config()
        password = encode_name(passphrase, "passphrase")
        if iterations is None:
            iterations = config.pbkdf_iterations
        cipher = encode_optional(cipher or config.key_cipher)
        pbkdf_hash = encode_optional(pbkdf_hash or config.key_pbkdf_hash)
        name = "botan_privkey_export_encrypted_pbkdf_iter"
        fn = self._lib.botan_privkey_export_encrypted_pbkdf_iter

        def export(b, bl):
            return fn(self._ptr, b, bl, rng.handle_(), password, iterations, cipher, pbkdf_hash, flags)

        if flags == EXPORT_PEM:
            return negotiate_str(export, 0, name)
        return negotiate(export, 0, name)

    def der_encode_encrypted(self, passphrase: str, rng: RandomNumberGenerator,
                             iterations: Optional[int] = None, cipher: Optional[str] = None,
                             pbkdf_hash: Optional[str] = None) -> bytes:
        """PKCS #8 DER encoding encrypted under passphrase."""
        return self._export_encrypted(passphrase, rng, EXPORT_DER, iterations, cipher, pbkdf_hash)

    def pem_encode_encrypted(self, passphrase: str, rng: RandomNumberGenerator,
                             iterations: Optional[int] = None, cipher: Optional[str] = None,
                             pbkdf_hash: Optional[str] = None) -> str:
        """PEM "ENCRYPTED PRIVATE KEY" encoding encrypted under passphrase."""
        return self._export_encrypted(passphrase, rng, EXPORT_PEM, iterations, cipher, pbkdf_hash)
