"""
Public key operations: signing, verification, encryption, decryption
and key agreement.

Each operation object keeps a reference to the key it was created from,
since the native operation refers to the key's internals for its whole
lifetime.
"""

import logging
from ctypes import byref, c_size_t, create_string_buffer

from ..ffi.base import NativeObject
from ..ffi.buffers import as_bytes, negotiate, query_size
from ..ffi.errors import INVALID_VERIFIER, check, internal_error
from ..ffi.handle import HandleKind
from ..ffi.registry import construct
from .pubkey import Privkey, Pubkey
from .rng import RandomNumberGenerator

logger = logging.getLogger(__name__)


class _PKOperation(NativeObject):
    _kind = None

    def __init__(self, key, params: str):
        super().__init__(construct(self._kind, params, 0, lib=key._lib, prefix=(key.handle_(),)))
        self._key = key
        self.params = params

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.params}>"


class Signer(_PKOperation):
    """
    Signature generation, e.g. Signer(key, "EMSA-PKCS1-v1_5(SHA-256)").

    Accumulate the message with update(); finish() produces the
    signature and resets the object for the next message.
    """

    _kind = HandleKind.SIGNER

    def __init__(self, key: Privkey, params: str):
        super().__init__(key, params)

    def update(self, data) -> None:
        data = as_bytes(data)
        check(self._lib.botan_pk_op_sign_update(self._ptr, data, len(data)), "botan_pk_op_sign_update")

    def finish(self, rng: RandomNumberGenerator) -> bytes:
        # Probing would consume the accumulated message, so size the buffer up front
        capacity = query_size(lambda l: self._lib.botan_pk_op_sign_output_length(self._ptr, l),
                              "botan_pk_op_sign_output_length")
        out = create_string_buffer(capacity)
        out_len = c_size_t(capacity)
        check(self._lib.botan_pk_op_sign_finish(self._ptr, rng.handle_(), out, byref(out_len)),
              "botan_pk_op_sign_finish")
        if out_len.value > capacity:
            raise internal_error(
                f"botan_pk_op_sign_finish wrote {out_len.value} bytes into a {capacity} byte buffer")
        return out.raw[:out_len.value]


class Verifier(_PKOperation):
    """
    Signature verification, e.g. Verifier(pubkey, "EMSA1(SHA-256)").

    finish() answers False for a signature that does not match; it only
    raises for malformed input. The object resets after each finish().
    """

    _kind = HandleKind.VERIFIER

    def __init__(self, key: Pubkey, params: str):
        super().__init__(key, params)

    def update(self, data) -> None:
        data = as_bytes(data)
        check(self._lib.botan_pk_op_verify_update(self._ptr, data, len(data)), "botan_pk_op_verify_update")

    def finish(self, signature) -> bool:
        signature = as_bytes(signature)
        rc = self._lib.botan_pk_op_verify_finish(self._ptr, signature, len(signature))
        if rc == INVALID_VERIFIER:
            return False
        check(rc, "botan_pk_op_verify_finish")
        return rc == 0

    check_signature = finish


class Encryptor(_PKOperation):
    """Public key encryption, e.g. Encryptor(pubkey, "OAEP(SHA-256)")."""

    _kind = HandleKind.ENCRYPTOR

    def __init__(self, key: Pubkey, params: str):
        super().__init__(key, params)

    def output_length(self, input_length: int) -> int:
        out_len = c_size_t(0)
        check(self._lib.botan_pk_op_encrypt_output_length(self._ptr, input_length, byref(out_len)),
              "botan_pk_op_encrypt_output_length")
        return int(out_len.value)

    def encrypt(self, msg, rng: RandomNumberGenerator) -> bytes:
        msg = as_bytes(msg)
        return negotiate(
            lambda b, bl: self._lib.botan_pk_op_encrypt(self._ptr, rng.handle_(), b, bl, msg, len(msg)),
            self.output_length(len(msg)), "botan_pk_op_encrypt")


class Decryptor(_PKOperation):
    """Public key decryption, e.g. Decryptor(privkey, "OAEP(SHA-256)")."""

    _kind = HandleKind.DECRYPTOR

    def __init__(self, key: Privkey, params: str):
        super().__init__(key, params)

    def output_length(self, input_length: int) -> int:
        out_len = c_size_t(0)
        check(self._lib.botan_pk_op_decrypt_output_length(self._ptr, input_length, byref(out_len)),
              "botan_pk_op_decrypt_output_length")
        return int(out_len.value)

    def decrypt(self, ctext) -> bytes:
        ctext = as_bytes(ctext)
        return negotiate(
            lambda b, bl: self._lib.botan_pk_op_decrypt(self._ptr, b, bl, ctext, len(ctext)),
            self.output_length(len(ctext)), "botan_pk_op_decrypt")


class KeyAgreement(_PKOperation):
    """
    Key agreement, e.g. KeyAgreement(privkey, "KDF2(SHA-384)").

    With the "Raw" KDF and an output length of 0, agree() returns the raw
    shared value and ignores the salt.
    """

    _kind = HandleKind.KEY_AGREEMENT

    def __init__(self, key: Privkey, kdf: str):
        super().__init__(key, kdf)

    def public_value(self) -> bytes:
        return self._key.key_agreement_key()

    def agreement_size(self) -> int:
        return query_size(lambda l: self._lib.botan_pk_op_key_agreement_size(self._ptr, l),
                          "botan_pk_op_key_agreement_size")

    def agree(self, output_length: int, other, salt=b"") -> bytes:
        """
        Derive the shared secret with a peer's public value.

        Args:
            output_length: Bytes of key material wanted, 0 for the raw agreed value
            other: Peer's public value (from key_agreement_key())
            salt: KDF salt
        """
        other = as_bytes(other)
        salt = as_bytes(salt)
        # The native call reads the incoming length as the requested key length
        if output_length == 0:
            output_length = self.agreement_size()
        return negotiate(
            lambda b, bl: self._lib.botan_pk_op_key_agreement(self._ptr, b, bl, other, len(other),
                                                              salt, len(salt)),
            output_length, "botan_pk_op_key_agreement")
