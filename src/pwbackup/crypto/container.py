"""Byte layout of an encrypted backup container.

All multi-byte integers are big-endian::

    offset  size  field
    0       4     magic       "PWBK"
    4       2     version     1
    6       2     algorithm   1 (AES-256-GCM)
    8       8     reserved    zero on write, ignored on read
    16      32    salt
    48      12    nonce
    60      N+16  ciphertext || GCM tag

The header is self-describing so newer formats can coexist with old
containers. Decoding rejects anything it does not recognise instead of
guessing.
"""

import struct
from dataclasses import dataclass
from typing import Dict, Union

from ..core.errors import (
    BadMagicError,
    TruncatedContainerError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
)

BytesLike = Union[bytes, bytearray, memoryview]

MAGIC = b"PWBK"
FORMAT_VERSION = 1
ALGORITHM_AES_256_GCM = 1

SALT_SIZE = 32      # 256-bit salt
NONCE_SIZE = 12     # 96-bit nonce for GCM
TAG_SIZE = 16       # 128-bit GCM tag
RESERVED_SIZE = 8

_HEADER = struct.Struct(f">4sHH{RESERVED_SIZE}s{SALT_SIZE}s{NONCE_SIZE}s")

HEADER_SIZE = _HEADER.size                  # 60
MIN_CONTAINER_SIZE = HEADER_SIZE + TAG_SIZE  # 76

SUPPORTED_VERSIONS = frozenset({FORMAT_VERSION})

# algorithm_id -> display name. The KDF parameters (PBKDF2-SHA256, 100k
# iterations) are part of an algorithm's definition; changing them needs a
# new id.
ALGORITHMS: Dict[int, str] = {
    ALGORITHM_AES_256_GCM: "AES-256-GCM",
}


def algorithm_id_for_name(name: str) -> int:
    """Resolve a configured algorithm name (case-insensitive) to its id."""
    wanted = name.strip().upper()
    for algorithm_id, known in ALGORITHMS.items():
        if known.upper() == wanted:
            return algorithm_id
    raise UnsupportedAlgorithmError(f"unsupported algorithm: {name!r}")


@dataclass(frozen=True)
class ContainerHeader:
    """Parsed fixed-size header fields."""
    version: int
    algorithm_id: int
    salt: bytes
    nonce: bytes
    reserved: bytes = bytes(RESERVED_SIZE)

    def to_bytes(self) -> bytes:
        if len(self.salt) != SALT_SIZE:
            raise ValueError(f"Salt must be exactly {SALT_SIZE} bytes")
        if len(self.nonce) != NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {NONCE_SIZE} bytes")
        if len(self.reserved) != RESERVED_SIZE:
            raise ValueError(f"Reserved field must be exactly {RESERVED_SIZE} bytes")
        return _HEADER.pack(
            MAGIC,
            self.version,
            self.algorithm_id,
            bytes(self.reserved),
            bytes(self.salt),
            bytes(self.nonce),
        )


@dataclass(frozen=True)
class Container:
    """A decoded container: header plus ciphertext (tag included)."""
    header: ContainerHeader
    ciphertext: bytes

    @property
    def salt(self) -> bytes:
        return self.header.salt

    @property
    def nonce(self) -> bytes:
        return self.header.nonce

    def to_bytes(self) -> bytes:
        return self.header.to_bytes() + bytes(self.ciphertext)

    def __repr__(self) -> str:
        return (
            f"Container(version={self.header.version}, "
            f"algorithm_id={self.header.algorithm_id}, "
            f"ciphertext_len={len(self.ciphertext)})"
        )


def encode_container(
    version: int,
    algorithm_id: int,
    salt: BytesLike,
    nonce: BytesLike,
    ciphertext: BytesLike,
) -> bytes:
    """Serialize header fields and ciphertext; reserved bytes are zeroed."""
    header = ContainerHeader(
        version=version,
        algorithm_id=algorithm_id,
        salt=bytes(salt),
        nonce=bytes(nonce),
    )
    return header.to_bytes() + bytes(ciphertext)


def decode_container(data: BytesLike) -> Container:
    """Parse and validate a container.

    Checks run in a fixed order and stop at the first failure: length,
    magic, version, algorithm. Reserved bytes are not inspected.

    Raises:
        TruncatedContainerError: Shorter than header + tag.
        BadMagicError: Magic marker mismatch.
        UnsupportedVersionError: Unknown format version.
        UnsupportedAlgorithmError: Unknown algorithm id.
    """
    data = bytes(data)
    if len(data) < MIN_CONTAINER_SIZE:
        raise TruncatedContainerError(
            f"container too short: {len(data)} bytes (minimum {MIN_CONTAINER_SIZE})"
        )

    if data[:len(MAGIC)] != MAGIC:
        raise BadMagicError("invalid file format: bad magic bytes")

    magic, version, algorithm_id, reserved, salt, nonce = _HEADER.unpack_from(data)

    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(f"unsupported file version: {version}")
    if algorithm_id not in ALGORITHMS:
        raise UnsupportedAlgorithmError(f"unsupported algorithm: {algorithm_id}")

    header = ContainerHeader(
        version=version,
        algorithm_id=algorithm_id,
        salt=salt,
        nonce=nonce,
        reserved=reserved,
    )
    return Container(header=header, ciphertext=data[HEADER_SIZE:])


def looks_like_container(data: BytesLike) -> bool:
    """Cheap sniff: does ``data`` start with the container magic?"""
    return bytes(data[:len(MAGIC)]) == MAGIC
