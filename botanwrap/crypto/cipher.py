"""
Symmetric cipher modes, including AEADs and stream ciphers.

A Cipher is created for one direction. process() is the one-shot path
(start with a nonce, then a single final update); start()/update()/
finish() expose the streaming path for callers feeding data piecewise.
For AEAD decryption a tag mismatch raises BadMACError.
"""

import enum
from ctypes import byref, c_size_t, create_string_buffer

from ..ffi.base import KeyedAlgorithm
from ..ffi.buffers import as_bytes, query_size
from ..ffi.errors import InvalidInputError, check, internal_error
from ..ffi.handle import HandleKind
from ..ffi.registry import KeySpec, construct

CIPHER_UPDATE_FLAG_FINAL = 1


class CipherDirection(enum.IntEnum):
    ENCRYPT = 0
    DECRYPT = 1


class Cipher(KeyedAlgorithm):
    """Cipher mode selected by name, e.g. "AES-128/GCM" or "ChaCha20"."""

    _name_fn = "botan_cipher_name"
    _set_key_fn = "botan_cipher_set_key"

    def __init__(self, algo: str, direction: CipherDirection = CipherDirection.ENCRYPT, lib=None):
        direction = CipherDirection(direction)
        super().__init__(construct(HandleKind.CIPHER, algo, int(direction), lib=lib))
        self.direction = direction
        # Input the native side has not consumed yet
        self._pending = b""

    def _size(self, fn_name: str) -> int:
        fn = getattr(self._lib, fn_name)
        return query_size(lambda l: fn(self._ptr, l), fn_name)

    def tag_length(self) -> int:
        """Authentication tag length; 0 for non-AEAD modes."""
        return self._size("botan_cipher_get_tag_length")

    def is_authenticated(self) -> bool:
        return self.tag_length() > 0

    def default_nonce_length(self) -> int:
        return self._size("botan_cipher_get_default_nonce_length")

    def update_granularity(self) -> int:
        return self._size("botan_cipher_get_update_granularity")

    def valid_nonce_length(self, length: int) -> bool:
        rc = check(self._lib.botan_cipher_valid_nonce_length(self._ptr, length),
                   "botan_cipher_valid_nonce_length")
        return rc == 1

    def key_spec(self) -> KeySpec:
        return KeySpec.query(self._lib.botan_cipher_get_keyspec, self._ptr,
                             "botan_cipher_get_keyspec")

    def output_length(self, input_length: int) -> int:
        out_len = c_size_t(0)
        check(self._lib.botan_cipher_output_length(self._ptr, input_length, byref(out_len)),
              "botan_cipher_output_length")
        return int(out_len.value)

    def set_associated_data(self, ad) -> None:
        """
        Set associated data for the next message.

        Raises:
            InvalidInputError: Before set_key(), or for a non-AEAD mode
        """
        self._require_key("set_associated_data")
        ad = as_bytes(ad)
        check(self._lib.botan_cipher_set_associated_data(self._ptr, ad, len(ad)),
              "botan_cipher_set_associated_data")

    def start(self, nonce) -> None:
        self._require_key("start")
        nonce = as_bytes(nonce)
        check(self._lib.botan_cipher_start(self._ptr, nonce, len(nonce)), "botan_cipher_start")
        self._pending = b""

    def _update(self, data: bytes, final: bool) -> bytes:
        data = self._pending + data
        flags = CIPHER_UPDATE_FLAG_FINAL if final else 0
        capacity = self.output_length(len(data)) if final else len(data)
        out = create_string_buffer(capacity)
        written = c_size_t(0)
        consumed = c_size_t(0)

        check(self._lib.botan_cipher_update(self._ptr, flags, out, capacity, byref(written),
                                            data, len(data), byref(consumed)),
              "botan_cipher_update")

        if written.value > capacity:
            raise internal_error(
                f"botan_cipher_update wrote {written.value} bytes into a {capacity} byte buffer")
        if consumed.value > len(data) or (final and consumed.value != len(data)):
            raise internal_error(
                f"botan_cipher_update consumed {consumed.value} of {len(data)} input bytes")
        # A non-final call may leave a tail shorter than the native chunk size
        self._pending = data[consumed.value:]
        return out.raw[:written.value]

    def update(self, data) -> bytes:
        """
        Process a non-final chunk after start().

        Raises:
            InvalidInputError: If len(data) is not a multiple of
                update_granularity(); the stream is left untouched
        """
        self._require_key("update")
        data = as_bytes(data)
        granularity = self.update_granularity()
        if granularity > 1 and len(data) % granularity:
            raise InvalidInputError(
                f"input must be a multiple of the {granularity} byte update granularity")
        return self._update(data, final=False)

    def finish(self, data=b"") -> bytes:
        """Process the last chunk; for AEAD encryption the output includes the tag."""
        self._require_key("finish")
        return self._update(as_bytes(data), final=True)

    def process(self, nonce, data) -> bytes:
        """One-shot transformation of data under nonce."""
        self.start(nonce)
        return self.finish(data)

    def reset(self) -> None:
        """Abandon the current message, keeping the key."""
        check(self._lib.botan_cipher_reset(self._ptr), "botan_cipher_reset")
        self._pending = b""

    def clear(self) -> None:
        """Abandon the current message and forget the key."""
        check(self._lib.botan_cipher_clear(self._ptr), "botan_cipher_clear")
        self._pending = b""
        self._keyed = False
