"""Encryption key files.

A key file holds a random 256-bit key sealed with a password, so a user can
pick a password once and reuse a strong random key afterwards.
"""

import errno
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from ..core.errors import InvalidKeyFileError
from ..core.secure_erase import secure_zero
from . import kdf
from .backup_crypto import BackupCrypto, Password

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

KEY_FILE_MODE = 0o600

# link() not supported by the filesystem (e.g. FAT-formatted USB drives)
_NO_HARDLINK_ERRNOS = frozenset(
    code for code in (
        getattr(errno, "EPERM", None),
        getattr(errno, "ENOTSUP", None),
        getattr(errno, "EOPNOTSUPP", None),
    ) if code is not None
)


def _publish_exclusive(path: Path, data: bytes) -> bool:
    """Write ``data`` to ``path`` only if nothing is there yet.

    The bytes are written and fsynced to a private temp file first, then
    hard-linked into place; ``link`` fails if ``path`` exists, so an existing
    file is never replaced and a failed or interrupted write never leaves a
    partial key file at ``path``.

    Returns:
        False if ``path`` already existed.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, KEY_FILE_MODE)
        try:
            os.link(tmp_name, path)
        except FileExistsError:
            return False
        except OSError as exc:
            if exc.errno not in _NO_HARDLINK_ERRNOS:
                raise
            return _create_exclusive(path, data)
        return True
    finally:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass


def _create_exclusive(path: Path, data: bytes) -> bool:
    """O_EXCL fallback; removes the file again if writing it fails."""
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, KEY_FILE_MODE)
    except FileExistsError:
        return False
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
    except BaseException:
        os.unlink(path)
        raise
    return True


def get_or_create_key_file(path: PathLike, password: Password) -> bool:
    """Create a sealed random key at ``path`` unless a file already exists.

    Never overwrites: if the file exists (or another process creates it
    first) nothing is written.

    Returns:
        True if a new key file was written, False if one was already there.
    """
    key_path = Path(path)
    if key_path.exists():
        return False

    key = bytearray(kdf.random_bytes(kdf.KEY_SIZE))
    try:
        sealed = BackupCrypto.seal(key, password)
    finally:
        secure_zero(key)

    key_path.parent.mkdir(parents=True, exist_ok=True)
    if not _publish_exclusive(key_path, sealed):
        logger.info("Key file %s appeared concurrently; keeping existing file", key_path)
        return False
    logger.info("Created encryption key file %s", key_path)
    return True


def load_key_file(path: PathLike, password: Password) -> bytearray:
    """Decrypt the key stored at ``path``.

    The caller owns the returned buffer and should zero it when done.

    Raises:
        FileNotFoundError: No key file at ``path``.
        ContainerFormatError: The file is not a sealed container.
        DecryptionFailedError: Wrong password or corrupted key file.
        InvalidKeyFileError: Decrypted payload is not a 32-byte key.
    """
    sealed = Path(path).read_bytes()
    key = bytearray(BackupCrypto.open(sealed, password))
    if len(key) != kdf.KEY_SIZE:
        secure_zero(key)
        raise InvalidKeyFileError(
            f"key file holds {len(key)} bytes, expected {kdf.KEY_SIZE}"
        )
    return key
