"""
Shared fixtures.

Most tests run against FakeNative, an in-process double of the native
ABI (see fake_native.py). Tests requesting the `botan` fixture need the
real shared library and are skipped when it cannot be loaded.
"""

import pytest

from botanwrap.config import BotanConfig, ConfigError, set_config
from botanwrap.crypto import RandomNumberGenerator
from botanwrap.ffi import library
from fake_native import FakeNative


@pytest.fixture(autouse=True)
def default_config():
    """Run every test with settings independent of the caller's environment."""
    previous = set_config(BotanConfig({}))
    yield
    set_config(previous)


@pytest.fixture
def fake_native():
    """Install a fresh FakeNative as the global library."""
    lib = FakeNative()
    previous = library.install(lib)
    yield lib
    library.install(previous)


@pytest.fixture
def rng(fake_native):
    with RandomNumberGenerator.system() as generator:
        yield generator


@pytest.fixture(scope="session")
def botan_library():
    try:
        config = BotanConfig()
        return library.load(config.library_path, config.ffi_version)
    except (ConfigError, library.LibraryLoadError) as e:
        pytest.skip(f"Botan shared library not available: {e}")


@pytest.fixture
def botan(botan_library):
    """Install the real shared library as the global library."""
    previous = library.install(botan_library)
    yield botan_library
    library.install(previous)
