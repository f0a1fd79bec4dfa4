"""
Hash functions.

HashFunction accumulates input through update() and produces a digest
with final(), which also resets the object for reuse. duplicate() forks
the running state so two copies can be fed different suffixes.
"""

from ..ffi.base import NamedAlgorithm
from ..ffi.buffers import as_bytes, fixed_output, query_size
from ..ffi.errors import check
from ..ffi.handle import HandleKind
from ..ffi.registry import construct


class HashFunction(NamedAlgorithm):
    """Streaming hash function selected by name, e.g. "SHA-384"."""

    _name_fn = "botan_hash_name"

    def __init__(self, algo: str, lib=None):
        super().__init__(construct(HandleKind.HASH, algo, 0, lib=lib))
        self._load_sizes()

    def _load_sizes(self):
        ptr = self._ptr
        self._output_length = query_size(
            lambda l: self._lib.botan_hash_output_length(ptr, l), "botan_hash_output_length")
        self._block_size = query_size(
            lambda l: self._lib.botan_hash_block_size(ptr, l), "botan_hash_block_size")

    def output_length(self) -> int:
        return self._output_length

    def block_size(self) -> int:
        return self._block_size

    def update(self, data) -> None:
        data = as_bytes(data)
        check(self._lib.botan_hash_update(self._ptr, data, len(data)), "botan_hash_update")

    def final(self) -> bytes:
        """Return the digest of everything fed so far and reset the state."""
        return fixed_output(lambda out: self._lib.botan_hash_final(self._ptr, out),
                            self._output_length, "botan_hash_final")

    finish = final

    def clear(self) -> None:
        """Discard accumulated input."""
        check(self._lib.botan_hash_clear(self._ptr), "botan_hash_clear")

    def duplicate(self) -> "HashFunction":
        """Independent copy carrying the current accumulated state."""
        return HashFunction._wrap(self._handle.duplicate(),
                                  _output_length=self._output_length,
                                  _block_size=self._block_size)

    copy = duplicate

    @classmethod
    def digest(cls, algo: str, data, lib=None) -> bytes:
        """One-shot hash of data."""
        with cls(algo, lib=lib) as h:
            h.update(data)
            return h.final()
