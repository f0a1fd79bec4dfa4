"""
Version information of the loaded native library.
"""

from dataclasses import dataclass

from .ffi.library import native


@dataclass(frozen=True)
class Version:
    """
    Fields:
        major, minor, patch: Library release number
        release_date: YYYYMMDD datestamp, 0 for unreleased builds
        ffi_api: FFI API version implemented by the library
        string: Human readable version string
    """
    major: int
    minor: int
    patch: int
    release_date: int
    ffi_api: int
    string: str

    @classmethod
    def current(cls, lib=None) -> "Version":
        lib = lib or native()
        return cls(
            major=int(lib.botan_version_major()),
            minor=int(lib.botan_version_minor()),
            patch=int(lib.botan_version_patch()),
            release_date=int(lib.botan_version_datestamp()),
            ffi_api=int(lib.botan_ffi_api_version()),
            string=lib.botan_version_string().decode("ascii"),
        )

    @staticmethod
    def supports_version(ffi_api: int, lib=None) -> bool:
        """Whether the library implements the given FFI API version."""
        lib = lib or native()
        return lib.botan_ffi_supports_api(ffi_api) == 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
