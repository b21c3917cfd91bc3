"""Password-based key derivation for backup containers.

PBKDF2-HMAC-SHA256 with a fixed iteration count turns a password and a
per-container salt into a 256-bit AES key. Same (password, salt) always
yields the same key, which is what lets ``open`` re-derive the key ``seal``
used.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..core.errors import CryptoBackendError, ErrorKind
from ..core.secure_erase import secure_zero

PBKDF2_ITERATIONS = 100_000
KEY_SIZE = 32   # 256 bits for AES-256
SALT_SIZE = 32  # 256-bit salt

BytesLike = Union[bytes, bytearray, memoryview]


def random_bytes(size: int) -> bytes:
    """Read ``size`` bytes from the OS CSPRNG.

    Raises:
        CryptoBackendError: The entropy source is unavailable.
    """
    try:
        return os.urandom(size)
    except (OSError, NotImplementedError) as exc:
        raise CryptoBackendError(
            "failed to read from the system random source", kind=ErrorKind.ENTROPY,
        ) from exc


def generate_salt() -> bytes:
    """Generate a fresh random salt."""
    return random_bytes(SALT_SIZE)


def derive_key(
    password: BytesLike,
    salt: BytesLike,
    iterations: Optional[int] = None,
) -> bytearray:
    """Derive a 256-bit key from password + salt via PBKDF2-SHA256.

    The result is a ``bytearray`` so the caller can (and must) zero it once
    done; see ``derived_key`` for a scoped version. Empty passwords are
    rejected by callers before they reach this point.

    Raises:
        ValueError: ``iterations`` is given and below 1.
    """
    if iterations is None:
        iterations = PBKDF2_ITERATIONS
    elif iterations < 1:
        raise ValueError(f"PBKDF2 iteration count must be positive, got {iterations}")
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=bytes(salt),
        iterations=iterations,
    )
    # The intermediate bytes object returned by derive() cannot be wiped.
    return bytearray(kdf.derive(password))


@contextmanager
def derived_key(password: BytesLike, salt: BytesLike) -> Iterator[bytearray]:
    """Yield the derived key and zero it on every exit path."""
    key = derive_key(password, salt)
    try:
        yield key
    finally:
        secure_zero(key)
