"""
Raw block ciphers (no mode, no IV).
"""

from ctypes import create_string_buffer

from ..ffi.base import KeyedAlgorithm
from ..ffi.buffers import as_bytes
from ..ffi.errors import InvalidInputError, check
from ..ffi.handle import HandleKind
from ..ffi.registry import KeySpec, construct


class BlockCipher(KeyedAlgorithm):
    """Block cipher selected by name, e.g. "AES-128"."""

    _name_fn = "botan_block_cipher_name"
    _set_key_fn = "botan_block_cipher_set_key"

    def __init__(self, algo: str, lib=None):
        super().__init__(construct(HandleKind.BLOCK_CIPHER, algo, lib=lib))
        # The native getter returns the size as its status value
        self._block_size = check(self._lib.botan_block_cipher_block_size(self._ptr),
                                 "botan_block_cipher_block_size")

    def block_size(self) -> int:
        return self._block_size

    def key_spec(self) -> KeySpec:
        return KeySpec.query(self._lib.botan_block_cipher_get_keyspec, self._ptr,
                             "botan_block_cipher_get_keyspec")

    def _process(self, fn_name: str, data) -> bytes:
        self._require_key(fn_name)
        data = as_bytes(data)
        if len(data) % self._block_size != 0:
            raise InvalidInputError(
                f"input length {len(data)} is not a multiple of the {self._block_size} byte block size")
        out = create_string_buffer(len(data))
        blocks = len(data) // self._block_size
        check(getattr(self._lib, fn_name)(self._ptr, data, out, blocks), fn_name)
        return out.raw

    def encrypt_blocks(self, data) -> bytes:
        return self._process("botan_block_cipher_encrypt_blocks", data)

    def decrypt_blocks(self, data) -> bytes:
        return self._process("botan_block_cipher_decrypt_blocks", data)

    def clear(self) -> None:
        check(self._lib.botan_block_cipher_clear(self._ptr), "botan_block_cipher_clear")
        self._keyed = False
