"""
Configuration management for botanwrap.

Settings come from environment variables and are read once, when the
configuration object is built. The library loader, the default random
number generator and encrypted key export all consult the process-wide
instance returned by get_config().
"""

import os
import threading
from typing import Mapping, Optional

# Oldest FFI API revision whose entry points this package relies on
MINIMUM_FFI_VERSION = 20180713
DEFAULT_RNG = "system"
DEFAULT_PBKDF_ITERATIONS = 100000


class ConfigError(Exception):
    """Raised when configuration values are invalid."""
    pass


class BotanConfig:
    """
    Runtime settings for the native library wrapper.

    Recognized environment variables:
        BOTANWRAP_LIBRARY: explicit path of the shared library
        BOTANWRAP_FFI_VERSION: minimum FFI API version to require
        BOTANWRAP_RNG: RNG type used when callers do not pass one
        BOTANWRAP_PBKDF_ITERATIONS: iterations for encrypted key export
        BOTANWRAP_KEY_CIPHER: cipher for encrypted key export
        BOTANWRAP_KEY_PBKDF_HASH: PBKDF hash for encrypted key export
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize configuration.

        Args:
            environ: Mapping to read settings from. Defaults to os.environ.

        Raises:
            ConfigError: If a numeric setting cannot be parsed
        """
        if environ is None:
            environ = os.environ

        self.library_path = environ.get("BOTANWRAP_LIBRARY") or None
        self.ffi_version = self._read_int(environ, "BOTANWRAP_FFI_VERSION", MINIMUM_FFI_VERSION)
        self.rng_type = environ.get("BOTANWRAP_RNG") or DEFAULT_RNG
        self.pbkdf_iterations = self._read_int(
            environ, "BOTANWRAP_PBKDF_ITERATIONS", DEFAULT_PBKDF_ITERATIONS
        )
        self.key_cipher = environ.get("BOTANWRAP_KEY_CIPHER") or None
        self.key_pbkdf_hash = environ.get("BOTANWRAP_KEY_PBKDF_HASH") or None

        if self.library_path is not None and not os.path.exists(self.library_path):
            raise ConfigError(f"Library file not found: {self.library_path}")
        if self.ffi_version < MINIMUM_FFI_VERSION:
            raise ConfigError(
                f"FFI version {self.ffi_version} is older than the minimum {MINIMUM_FFI_VERSION}"
            )
        if self.pbkdf_iterations <= 0:
            raise ConfigError("PBKDF iterations must be positive")

    @staticmethod
    def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
        value = environ.get(name)
        if not value:
            return default
        try:
            return int(value, 10)
        except ValueError:
            raise ConfigError(f"{name} must be an integer, got {value!r}")

    def __repr__(self) -> str:
        return (
            f"BotanConfig(library_path={self.library_path!r}, ffi_version={self.ffi_version}, "
            f"rng_type={self.rng_type!r}, pbkdf_iterations={self.pbkdf_iterations})"
        )


_config: Optional[BotanConfig] = None
_config_lock = threading.Lock()


def get_config() -> BotanConfig:
    """Return the process-wide configuration, reading the environment on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = BotanConfig()
        return _config


def set_config(config: Optional[BotanConfig]) -> Optional[BotanConfig]:
    """
    Replace the process-wide configuration.

    Passing None makes the next get_config() call re-read the environment.

    Returns:
        The previous configuration
    """
    global _config
    with _config_lock:
        previous = _config
        _config = config
        return previous
