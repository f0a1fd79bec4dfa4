"""
Message authentication codes.
"""

from ..ffi.base import KeyedAlgorithm
from ..ffi.buffers import as_bytes, fixed_output, query_size
from ..ffi.errors import check
from ..ffi.handle import HandleKind
from ..ffi.registry import KeySpec, construct


class MsgAuthCode(KeyedAlgorithm):
    """
    Keyed MAC selected by name, e.g. "HMAC(SHA-384)".

    set_key() must be called before update() or final(). The key stays
    set across final() calls; clear() forgets it.
    """

    _name_fn = "botan_mac_name"
    _set_key_fn = "botan_mac_set_key"

    def __init__(self, algo: str, lib=None):
        super().__init__(construct(HandleKind.MAC, algo, 0, lib=lib))
        ptr = self._ptr
        self._output_length = query_size(
            lambda l: self._lib.botan_mac_output_length(ptr, l), "botan_mac_output_length")

    def output_length(self) -> int:
        return self._output_length

    def key_spec(self) -> KeySpec:
        return KeySpec.query(self._lib.botan_mac_get_keyspec, self._ptr, "botan_mac_get_keyspec")

    def update(self, data) -> None:
        self._require_key("update")
        data = as_bytes(data)
        check(self._lib.botan_mac_update(self._ptr, data, len(data)), "botan_mac_update")

    def final(self) -> bytes:
        self._require_key("final")
        return fixed_output(lambda out: self._lib.botan_mac_final(self._ptr, out),
                            self._output_length, "botan_mac_final")

    finish = final

    def clear(self) -> None:
        check(self._lib.botan_mac_clear(self._ptr), "botan_mac_clear")
        self._keyed = False
