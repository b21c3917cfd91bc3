"""pwbackup - encrypted containers for password-manager vault backups.

Usage:
    from pwbackup import seal, open_container

    blob = seal(export_bytes, password)
    export_bytes = open_container(blob, password)
"""

__version__ = "0.1.0"

from .core.errors import (
    BackupCryptoError,
    ContainerFormatError,
    CryptoBackendError,
    DecryptionFailedError,
    ErrorKind,
    describe_error,
)
from .core.log_config import configure_logging
from .core.settings import EncryptionSettings, passwords_match, validate_password
from .crypto import (
    BackupCrypto,
    decrypt_file,
    encrypt_file,
    get_or_create_key_file,
    load_key_file,
    open_container,
    seal,
)

__all__ = [
    "__version__",
    "BackupCrypto",
    "BackupCryptoError",
    "ContainerFormatError",
    "CryptoBackendError",
    "DecryptionFailedError",
    "EncryptionSettings",
    "ErrorKind",
    "configure_logging",
    "decrypt_file",
    "describe_error",
    "encrypt_file",
    "get_or_create_key_file",
    "load_key_file",
    "open_container",
    "passwords_match",
    "seal",
    "validate_password",
]
