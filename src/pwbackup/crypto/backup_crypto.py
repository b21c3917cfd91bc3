"""Backup encryption using AES-256-GCM with PBKDF2 key derivation.

- PBKDF2-SHA256 (100k iterations) derives a fresh key per container
- AES-256-GCM for authenticated encryption, no associated data
- Random 32-byte salt + 12-byte nonce per container

Container format: see ``container.py``.
"""

import logging
from typing import Union

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..core.errors import CryptoBackendError, DecryptionFailedError, ErrorKind
from ..core.secure_erase import secure_zero
from . import kdf
from .container import (
    ALGORITHM_AES_256_GCM,
    FORMAT_VERSION,
    NONCE_SIZE,
    SALT_SIZE,
    decode_container,
    encode_container,
)

logger = logging.getLogger(__name__)

Password = Union[str, bytes, bytearray, memoryview]
BytesLike = Union[bytes, bytearray, memoryview]


def _password_buffer(password: Password) -> bytearray:
    if isinstance(password, str):
        return bytearray(password.encode("utf-8"))
    return bytearray(password)


def _new_cipher(key: bytearray) -> AESGCM:
    try:
        return AESGCM(key)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise CryptoBackendError(
            "failed to create AES-256-GCM cipher", kind=ErrorKind.CIPHER,
        ) from exc


class BackupCrypto:
    """Seal/open backup containers with a user-provided password.

    Holds no state; every call owns its own key material.
    """

    @staticmethod
    def seal(plaintext: BytesLike, password: Password) -> bytes:
        """Encrypt ``plaintext`` into a self-describing container.

        Raises:
            CryptoBackendError: Entropy source or cipher construction failed.
        """
        salt = kdf.random_bytes(SALT_SIZE)
        nonce = kdf.random_bytes(NONCE_SIZE)

        secret = _password_buffer(password)
        try:
            with kdf.derived_key(secret, salt) as key:
                ciphertext = _new_cipher(key).encrypt(nonce, plaintext, None)
        finally:
            secure_zero(secret)

        container = encode_container(
            FORMAT_VERSION, ALGORITHM_AES_256_GCM, salt, nonce, ciphertext,
        )
        logger.debug(
            "Sealed backup container: %d plaintext bytes -> %d bytes",
            len(plaintext), len(container),
        )
        return container

    @staticmethod
    def open(container: BytesLike, password: Password) -> bytes:
        """Decrypt a container produced by ``seal``.

        Raises:
            ContainerFormatError: Not a container this build understands
                (raised before any key derivation).
            DecryptionFailedError: Wrong password or corrupted data.
        """
        parsed = decode_container(container)

        secret = _password_buffer(password)
        try:
            with kdf.derived_key(secret, parsed.salt) as key:
                cipher = _new_cipher(key)
                try:
                    plaintext = cipher.decrypt(parsed.nonce, parsed.ciphertext, None)
                except InvalidTag:
                    logger.warning("Backup container failed authentication")
                    raise DecryptionFailedError() from None
        finally:
            secure_zero(secret)

        logger.debug("Opened backup container: %d plaintext bytes", len(plaintext))
        return plaintext


seal = BackupCrypto.seal
open_container = BackupCrypto.open
