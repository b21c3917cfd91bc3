"""Shared infrastructure: errors, buffer wiping, logging setup.

``settings`` is imported directly (``pwbackup.core.settings``) since it
depends on the container registry.
"""

from .errors import (
    BackupCryptoError,
    BadMagicError,
    ContainerFormatError,
    CryptoBackendError,
    DecryptionFailedError,
    ErrorKind,
    InvalidKeyFileError,
    TruncatedContainerError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
    describe_error,
)
from .log_config import configure_logging
from .secure_erase import secure_zero, wiped

__all__ = [
    "BackupCryptoError",
    "BadMagicError",
    "ContainerFormatError",
    "CryptoBackendError",
    "DecryptionFailedError",
    "ErrorKind",
    "InvalidKeyFileError",
    "TruncatedContainerError",
    "UnsupportedAlgorithmError",
    "UnsupportedVersionError",
    "configure_logging",
    "describe_error",
    "secure_zero",
    "wiped",
]
