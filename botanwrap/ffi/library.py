"""
Loading of the native shared library and declaration of its C ABI.

The library is loaded lazily on first use. native() is idempotent and
guarded by a lock; install() lets callers supply an alternate library
object (another build, or an in-process test double) and teardown()
forgets the global one. Handles keep a reference to the library that
created them, so teardown never pulls the rug from live objects.
"""

import ctypes.util
import logging
import sys
import threading
from ctypes import CDLL, POINTER, c_char_p, c_int, c_size_t, c_uint8, c_uint32, c_uint64, c_void_p
from functools import partial
from typing import List, Optional

from ..config import get_config
from .errors import ERROR_NOT_IMPLEMENTED

logger = logging.getLogger(__name__)

_sz = POINTER(c_size_t)

# Entry points returning a status code, keyed by name, with their argument types
_PROTOTYPES = {
    "botan_ffi_supports_api": [c_uint32],
    "botan_constant_time_compare": [c_void_p, c_void_p, c_size_t],
    "botan_scrub_mem": [c_void_p, c_size_t],

    # RNG
    "botan_rng_init": [c_void_p, c_char_p],
    "botan_rng_get": [c_void_p, c_char_p, c_size_t],
    "botan_rng_reseed": [c_void_p, c_size_t],
    "botan_rng_add_entropy": [c_void_p, c_char_p, c_size_t],
    "botan_rng_destroy": [c_void_p],

    # Hash
    "botan_hash_init": [c_void_p, c_char_p, c_uint32],
    "botan_hash_copy_state": [c_void_p, c_void_p],
    "botan_hash_output_length": [c_void_p, _sz],
    "botan_hash_block_size": [c_void_p, _sz],
    "botan_hash_update": [c_void_p, c_char_p, c_size_t],
    "botan_hash_final": [c_void_p, c_char_p],
    "botan_hash_clear": [c_void_p],
    "botan_hash_destroy": [c_void_p],
    "botan_hash_name": [c_void_p, c_char_p, _sz],

    # MAC
    "botan_mac_init": [c_void_p, c_char_p, c_uint32],
    "botan_mac_output_length": [c_void_p, _sz],
    "botan_mac_set_key": [c_void_p, c_char_p, c_size_t],
    "botan_mac_update": [c_void_p, c_char_p, c_size_t],
    "botan_mac_final": [c_void_p, c_char_p],
    "botan_mac_clear": [c_void_p],
    "botan_mac_name": [c_void_p, c_char_p, _sz],
    "botan_mac_get_keyspec": [c_void_p, _sz, _sz, _sz],
    "botan_mac_destroy": [c_void_p],

    # Cipher modes
    "botan_cipher_init": [c_void_p, c_char_p, c_uint32],
    "botan_cipher_name": [c_void_p, c_char_p, _sz],
    "botan_cipher_output_length": [c_void_p, c_size_t, _sz],
    "botan_cipher_valid_nonce_length": [c_void_p, c_size_t],
    "botan_cipher_get_tag_length": [c_void_p, _sz],
    "botan_cipher_get_default_nonce_length": [c_void_p, _sz],
    "botan_cipher_get_update_granularity": [c_void_p, _sz],
    "botan_cipher_get_keyspec": [c_void_p, _sz, _sz, _sz],
    "botan_cipher_set_key": [c_void_p, c_char_p, c_size_t],
    "botan_cipher_reset": [c_void_p],
    "botan_cipher_set_associated_data": [c_void_p, c_char_p, c_size_t],
    "botan_cipher_start": [c_void_p, c_char_p, c_size_t],
    "botan_cipher_update": [c_void_p, c_uint32, c_char_p, c_size_t, _sz, c_char_p, c_size_t, _sz],
    "botan_cipher_clear": [c_void_p],
    "botan_cipher_destroy": [c_void_p],

    # Block ciphers
    "botan_block_cipher_init": [c_void_p, c_char_p],
    "botan_block_cipher_destroy": [c_void_p],
    "botan_block_cipher_clear": [c_void_p],
    "botan_block_cipher_set_key": [c_void_p, c_char_p, c_size_t],
    "botan_block_cipher_block_size": [c_void_p],
    "botan_block_cipher_encrypt_blocks": [c_void_p, c_char_p, c_char_p, c_size_t],
    "botan_block_cipher_decrypt_blocks": [c_void_p, c_char_p, c_char_p, c_size_t],
    "botan_block_cipher_name": [c_void_p, c_char_p, _sz],
    "botan_block_cipher_get_keyspec": [c_void_p, _sz, _sz, _sz],

    # Key derivation
    "botan_pbkdf": [c_char_p, c_char_p, c_size_t, c_char_p, c_char_p, c_size_t, c_size_t],
    "botan_pwdhash": [c_char_p, c_size_t, c_size_t, c_size_t, c_char_p, c_size_t,
                      c_char_p, c_size_t, c_char_p, c_size_t],
    "botan_scrypt": [c_char_p, c_size_t, c_char_p, c_char_p, c_size_t, c_size_t, c_size_t, c_size_t],
    "botan_kdf": [c_char_p, c_char_p, c_size_t, c_char_p, c_size_t, c_char_p, c_size_t,
                  c_char_p, c_size_t],
    "botan_bcrypt_generate": [c_char_p, _sz, c_char_p, c_void_p, c_size_t, c_uint32],
    "botan_bcrypt_is_valid": [c_char_p, c_char_p],

    # Multiple precision integers
    "botan_mp_init": [c_void_p],
    "botan_mp_destroy": [c_void_p],
    "botan_mp_to_str": [c_void_p, c_uint8, c_char_p, _sz],
    "botan_mp_set_from_int": [c_void_p, c_int],
    "botan_mp_set_from_mp": [c_void_p, c_void_p],
    "botan_mp_set_from_str": [c_void_p, c_char_p],
    "botan_mp_num_bits": [c_void_p, _sz],
    "botan_mp_num_bytes": [c_void_p, _sz],
    "botan_mp_to_bin": [c_void_p, c_char_p],
    "botan_mp_from_bin": [c_void_p, c_char_p, c_size_t],
    "botan_mp_to_uint32": [c_void_p, POINTER(c_uint32)],
    "botan_mp_is_negative": [c_void_p],
    "botan_mp_is_zero": [c_void_p],
    "botan_mp_flip_sign": [c_void_p],
    "botan_mp_add": [c_void_p, c_void_p, c_void_p],
    "botan_mp_sub": [c_void_p, c_void_p, c_void_p],
    "botan_mp_mul": [c_void_p, c_void_p, c_void_p],
    "botan_mp_div": [c_void_p, c_void_p, c_void_p, c_void_p],
    "botan_mp_equal": [c_void_p, c_void_p],
    "botan_mp_cmp": [POINTER(c_int), c_void_p, c_void_p],
    "botan_mp_powmod": [c_void_p, c_void_p, c_void_p, c_void_p],
    "botan_mp_mod_inverse": [c_void_p, c_void_p, c_void_p],

    # Public keys
    "botan_privkey_create": [c_void_p, c_char_p, c_char_p, c_void_p],
    "botan_privkey_check_key": [c_void_p, c_void_p, c_uint32],
    "botan_privkey_load": [c_void_p, c_void_p, c_char_p, c_size_t, c_char_p],
    "botan_privkey_destroy": [c_void_p],
    "botan_privkey_export": [c_void_p, c_char_p, _sz, c_uint32],
    "botan_privkey_algo_name": [c_void_p, c_char_p, _sz],
    "botan_privkey_export_encrypted_pbkdf_iter": [c_void_p, c_char_p, _sz, c_void_p, c_char_p,
                                                  c_size_t, c_char_p, c_char_p, c_uint32],
    "botan_privkey_export_pubkey": [c_void_p, c_void_p],
    "botan_privkey_get_field": [c_void_p, c_void_p, c_char_p],
    "botan_privkey_load_rsa": [c_void_p, c_void_p, c_void_p, c_void_p],
    "botan_pubkey_load": [c_void_p, c_char_p, c_size_t],
    "botan_pubkey_export": [c_void_p, c_char_p, _sz, c_uint32],
    "botan_pubkey_algo_name": [c_void_p, c_char_p, _sz],
    "botan_pubkey_check_key": [c_void_p, c_void_p, c_uint32],
    "botan_pubkey_estimated_strength": [c_void_p, _sz],
    "botan_pubkey_fingerprint": [c_void_p, c_char_p, c_char_p, _sz],
    "botan_pubkey_destroy": [c_void_p],
    "botan_pubkey_get_field": [c_void_p, c_void_p, c_char_p],
    "botan_pubkey_load_rsa": [c_void_p, c_void_p, c_void_p],

    # Public key operations
    "botan_pk_op_encrypt_create": [c_void_p, c_void_p, c_char_p, c_uint32],
    "botan_pk_op_encrypt_destroy": [c_void_p],
    "botan_pk_op_encrypt_output_length": [c_void_p, c_size_t, _sz],
    "botan_pk_op_encrypt": [c_void_p, c_void_p, c_char_p, _sz, c_char_p, c_size_t],
    "botan_pk_op_decrypt_create": [c_void_p, c_void_p, c_char_p, c_uint32],
    "botan_pk_op_decrypt_destroy": [c_void_p],
    "botan_pk_op_decrypt_output_length": [c_void_p, c_size_t, _sz],
    "botan_pk_op_decrypt": [c_void_p, c_char_p, _sz, c_char_p, c_size_t],
    "botan_pk_op_sign_create": [c_void_p, c_void_p, c_char_p, c_uint32],
    "botan_pk_op_sign_destroy": [c_void_p],
    "botan_pk_op_sign_output_length": [c_void_p, _sz],
    "botan_pk_op_sign_update": [c_void_p, c_char_p, c_size_t],
    "botan_pk_op_sign_finish": [c_void_p, c_void_p, c_char_p, _sz],
    "botan_pk_op_verify_create": [c_void_p, c_void_p, c_char_p, c_uint32],
    "botan_pk_op_verify_destroy": [c_void_p],
    "botan_pk_op_verify_update": [c_void_p, c_char_p, c_size_t],
    "botan_pk_op_verify_finish": [c_void_p, c_char_p, c_size_t],
    "botan_pk_op_key_agreement_create": [c_void_p, c_void_p, c_char_p, c_uint32],
    "botan_pk_op_key_agreement_destroy": [c_void_p],
    "botan_pk_op_key_agreement_export_public": [c_void_p, c_char_p, _sz],
    "botan_pk_op_key_agreement_size": [c_void_p, _sz],
    "botan_pk_op_key_agreement": [c_void_p, c_char_p, _sz, c_char_p, c_size_t, c_char_p, c_size_t],

    "botan_pkcs_hash_id": [c_char_p, c_char_p, _sz],

    # X.509
    "botan_x509_cert_load": [c_void_p, c_char_p, c_size_t],
    "botan_x509_cert_load_file": [c_void_p, c_char_p],
    "botan_x509_cert_destroy": [c_void_p],
    "botan_x509_cert_dup": [c_void_p, c_void_p],
    "botan_x509_cert_not_before": [c_void_p, POINTER(c_uint64)],
    "botan_x509_cert_not_after": [c_void_p, POINTER(c_uint64)],
    "botan_x509_cert_get_fingerprint": [c_void_p, c_char_p, c_char_p, _sz],
    "botan_x509_cert_get_serial_number": [c_void_p, c_char_p, _sz],
    "botan_x509_cert_get_authority_key_id": [c_void_p, c_char_p, _sz],
    "botan_x509_cert_get_subject_key_id": [c_void_p, c_char_p, _sz],
    "botan_x509_cert_get_public_key_bits": [c_void_p, c_char_p, _sz],
    "botan_x509_cert_get_public_key": [c_void_p, c_void_p],
    "botan_x509_cert_get_issuer_dn": [c_void_p, c_char_p, c_size_t, c_char_p, _sz],
    "botan_x509_cert_get_subject_dn": [c_void_p, c_char_p, c_size_t, c_char_p, _sz],
    "botan_x509_cert_to_string": [c_void_p, c_char_p, _sz],
    "botan_x509_cert_hostname_match": [c_void_p, c_char_p],

    # Key wrapping, older and newer generations
    "botan_key_wrap3394": [c_char_p, c_size_t, c_char_p, c_size_t, c_char_p, _sz],
    "botan_key_unwrap3394": [c_char_p, c_size_t, c_char_p, c_size_t, c_char_p, _sz],
    "botan_nist_kw_enc": [c_char_p, c_int, c_char_p, c_size_t, c_char_p, c_size_t, c_char_p, _sz],
    "botan_nist_kw_dec": [c_char_p, c_int, c_char_p, c_size_t, c_char_p, c_size_t, c_char_p, _sz],

    # Format preserving encryption
    "botan_fpe_fe1_init": [c_void_p, c_void_p, c_char_p, c_size_t, c_size_t, c_uint32],
    "botan_fpe_destroy": [c_void_p],
    "botan_fpe_encrypt": [c_void_p, c_void_p, c_char_p, c_size_t],
    "botan_fpe_decrypt": [c_void_p, c_void_p, c_char_p, c_size_t],
}

# Entry points that do not return a status code
_PLAIN_PROTOTYPES = {
    "botan_version_string": ([], c_char_p),
    "botan_version_major": ([], c_uint32),
    "botan_version_minor": ([], c_uint32),
    "botan_version_patch": ([], c_uint32),
    "botan_version_datestamp": ([], c_uint32),
    "botan_ffi_api_version": ([], c_uint32),
    "botan_error_description": ([c_int], c_char_p),
}


class LibraryLoadError(OSError):
    """Raised when no usable native library can be loaded."""
    pass


def _unavailable(name: str, *_args) -> int:
    logger.debug("%s is not exported by the loaded library", name)
    return ERROR_NOT_IMPLEMENTED


class NativeLibrary:
    """
    A loaded shared object with its prototypes declared.

    Entry points are exposed as attributes with the native names. Entry
    points the build does not export resolve to a function returning
    the not-implemented status, so wrappers surface NotSupportedError
    at call time instead of failing the whole load.
    """

    def __init__(self, dll, name: Optional[str] = None):
        self._dll = dll
        self.name = name
        self.missing = set()

        for fn_name, argtypes in _PROTOTYPES.items():
            self._declare(fn_name, argtypes, c_int)
        for fn_name, (argtypes, restype) in _PLAIN_PROTOTYPES.items():
            self._declare(fn_name, argtypes, restype)

        if self.missing:
            logger.debug("%s lacks %d entry points: %s",
                         name, len(self.missing), ", ".join(sorted(self.missing)))

    def _declare(self, fn_name, argtypes, restype):
        try:
            fn = getattr(self._dll, fn_name)
        except AttributeError:
            self.missing.add(fn_name)
            return
        fn.argtypes = argtypes
        fn.restype = restype
        setattr(self, fn_name, fn)

    def __getattr__(self, name):
        # Only reached for names not declared in __init__
        if name.startswith("botan_") and name in self.__dict__.get("missing", ()):
            return partial(_unavailable, name)
        raise AttributeError(name)

    def has(self, fn_name: str) -> bool:
        """Whether the loaded build exports an entry point."""
        return fn_name in self.__dict__

    def __repr__(self) -> str:
        return f"NativeLibrary({self.name!r})"


def candidate_names() -> List[str]:
    """Shared object names to try, newest major version first."""
    names = []
    if sys.platform in ("win32", "cygwin", "msys"):
        names += ["botan-3.dll", "libbotan-3.dll", "botan.dll"]
    elif sys.platform in ("darwin", "macos"):
        names += ["libbotan-3.dylib", "libbotan-2.dylib"]
    else:
        names.append("libbotan-3.so")
        names += ["libbotan-3.so.%d" % v for v in reversed(range(0, 32))]
        names.append("libbotan-2.so")
        names += ["libbotan-2.so.%d" % v for v in reversed(range(13, 20))]

    for short in ("botan-3", "botan-2"):
        found = ctypes.util.find_library(short)
        if found and found not in names:
            names.append(found)
    return names


def load(path: Optional[str] = None, ffi_version: Optional[int] = None) -> NativeLibrary:
    """
    Load the native library and declare its prototypes.

    Args:
        path: Explicit shared object path; searched by name when omitted
        ffi_version: Minimum FFI API version the library must support

    Raises:
        LibraryLoadError: If no candidate loads and supports the API version
    """
    if ffi_version is None:
        ffi_version = get_config().ffi_version
    names = [path] if path else candidate_names()

    for dll_name in names:
        try:
            dll = CDLL(dll_name)
        except OSError:
            logger.debug("could not load %s", dll_name)
            continue

        if not hasattr(dll, "botan_ffi_supports_api"):
            continue
        dll.botan_ffi_supports_api.argtypes = [c_uint32]
        dll.botan_ffi_supports_api.restype = c_int
        if dll.botan_ffi_supports_api(ffi_version) != 0:
            logger.debug("%s does not support FFI version %d", dll_name, ffi_version)
            continue

        lib = NativeLibrary(dll, dll_name)
        logger.info("loaded %s (%s)", dll_name, lib.botan_version_string().decode("ascii"))
        return lib

    raise LibraryLoadError(f"Could not find a usable Botan library supporting FFI {ffi_version}")


_native = None
_native_lock = threading.Lock()


def native():
    """Return the global library, loading it on first use."""
    global _native
    lib = _native
    if lib is not None:
        return lib
    with _native_lock:
        if _native is None:
            config = get_config()
            _native = load(config.library_path, config.ffi_version)
        return _native


def install(lib):
    """
    Make lib the global library.

    Returns:
        The previously installed library, or None
    """
    global _native
    with _native_lock:
        previous = _native
        _native = lib
        return previous


def teardown() -> None:
    """Forget the global library. A later native() call loads it again."""
    global _native
    with _native_lock:
        _native = None
