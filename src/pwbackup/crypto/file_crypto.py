"""Whole-file encryption helpers built on ``BackupCrypto``.

Files are read fully into memory; GCM needs the whole plaintext for its tag.
Output is written to a private (0600) temp file beside the destination and
moved into place, so a failed call never leaves a partial output file.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .backup_crypto import BackupCrypto, Password

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

FILE_MODE = 0o600


def write_private_file(path: PathLike, data: bytes) -> None:
    """Atomically write ``data`` to ``path`` with owner-only permissions."""
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)

    # mkstemp creates the file 0600
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", dir=dest.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, dest)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def encrypt_file(input_path: PathLike, output_path: PathLike, password: Password) -> None:
    """Encrypt ``input_path`` into a container at ``output_path``.

    Raises:
        FileNotFoundError: If input_path doesn't exist.
        CryptoBackendError: Entropy or cipher failure.
    """
    plaintext = Path(input_path).read_bytes()
    container = BackupCrypto.seal(plaintext, password)
    write_private_file(output_path, container)
    logger.info("Encrypted %s -> %s (%d bytes)", input_path, output_path, len(container))


def decrypt_file(input_path: PathLike, output_path: PathLike, password: Password) -> None:
    """Decrypt the container at ``input_path`` into ``output_path``.

    Raises:
        FileNotFoundError: If input_path doesn't exist.
        ContainerFormatError: The input is not a backup container.
        DecryptionFailedError: Wrong password or corrupted data.
    """
    container = Path(input_path).read_bytes()
    plaintext = BackupCrypto.open(container, password)
    write_private_file(output_path, plaintext)
    logger.info("Decrypted %s -> %s (%d bytes)", input_path, output_path, len(plaintext))
