"""Error types for backup container handling.

Every failure carries an ``ErrorKind`` so callers can branch on the category
without parsing messages:

- Format errors: the input is not a container this build understands.
- Authentication error: wrong password OR corrupted data (never distinguished).
- Backend errors: entropy source or cipher construction failed.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag identifying which failure occurred."""
    TRUNCATED = "truncated"
    BAD_MAGIC = "bad_magic"
    UNSUPPORTED_VERSION = "unsupported_version"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    DECRYPTION_FAILED = "decryption_failed"
    ENTROPY = "entropy"
    CIPHER = "cipher"
    INVALID_KEY_FILE = "invalid_key_file"


_FORMAT_KINDS = frozenset({
    ErrorKind.TRUNCATED,
    ErrorKind.BAD_MAGIC,
    ErrorKind.UNSUPPORTED_VERSION,
    ErrorKind.UNSUPPORTED_ALGORITHM,
})


class BackupCryptoError(Exception):
    """Base class for all container/encryption failures."""

    kind: ErrorKind = ErrorKind.CIPHER

    def __init__(self, message: str = "", kind: Optional[ErrorKind] = None):
        if kind is not None:
            self.kind = kind
        super().__init__(message or self.kind.value)

    @property
    def is_format_error(self) -> bool:
        return self.kind in _FORMAT_KINDS


# ── Format errors ────────────────────────────────────────────────────


class ContainerFormatError(BackupCryptoError):
    """Raised when a buffer is not a container this build can parse."""


class TruncatedContainerError(ContainerFormatError):
    kind = ErrorKind.TRUNCATED


class BadMagicError(ContainerFormatError):
    kind = ErrorKind.BAD_MAGIC


class UnsupportedVersionError(ContainerFormatError):
    kind = ErrorKind.UNSUPPORTED_VERSION


class UnsupportedAlgorithmError(ContainerFormatError):
    kind = ErrorKind.UNSUPPORTED_ALGORITHM


# ── Authentication / backend errors ─────────────────────────────────


class DecryptionFailedError(BackupCryptoError):
    """Wrong password or corrupted/tampered data.

    Deliberately carries no detail about which of the two occurred.
    """

    kind = ErrorKind.DECRYPTION_FAILED

    def __init__(self, message: str = "incorrect password or corrupted data"):
        super().__init__(message)


class CryptoBackendError(BackupCryptoError):
    """Entropy source or cipher construction failure. Not user-correctable."""


class InvalidKeyFileError(BackupCryptoError):
    """A key file decrypted correctly but does not hold a usable key."""

    kind = ErrorKind.INVALID_KEY_FILE


_USER_MESSAGES = {
    ErrorKind.DECRYPTION_FAILED: (
        "Incorrect password or corrupted backup. "
        "Make sure you're using the correct encryption password."
    ),
    ErrorKind.INVALID_KEY_FILE: "The encryption key file is damaged.",
    ErrorKind.ENTROPY: "The system random number generator is unavailable.",
    ErrorKind.CIPHER: "The encryption backend failed to initialise.",
}


def describe_error(exc: BaseException) -> str:
    """Return the message to show an end user for a failed seal/open."""
    if not isinstance(exc, BackupCryptoError):
        return str(exc)
    if exc.is_format_error:
        return f"This does not look like a backup file ({exc})."
    return _USER_MESSAGES.get(exc.kind, str(exc))
