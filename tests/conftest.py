"""
Shared pytest fixtures for the pwbackup test suite.

Most tests run the real 100k-iteration KDF. Sweeps that open hundreds of
containers use ``fast_kdf`` so the suite stays quick; the derivation code
path is identical, only the iteration count changes.
"""

import logging

import pytest
import structlog


@pytest.fixture
def fast_kdf(monkeypatch):
    """Lower the PBKDF2 iteration count for the duration of a test."""
    import pwbackup.crypto.kdf as kdf_mod

    monkeypatch.setattr(kdf_mod, "PBKDF2_ITERATIONS", 1000)
    yield


@pytest.fixture
def captured_keys(monkeypatch):
    """Record every derived key buffer handed out during the test."""
    import pwbackup.crypto.kdf as kdf_mod

    keys = []
    original = kdf_mod.derive_key

    def recording_derive_key(password, salt, iterations=None):
        key = original(password, salt, iterations)
        keys.append(key)
        return key

    monkeypatch.setattr(kdf_mod, "derive_key", recording_derive_key)
    return keys


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by configure_logging() between tests."""
    yield
    package_logger = logging.getLogger("pwbackup")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()
