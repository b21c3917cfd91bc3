"""Tests for the container codec: byte layout and decode validation order."""

import struct

import pytest

from pwbackup.core.errors import (
    BadMagicError,
    ContainerFormatError,
    TruncatedContainerError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
)
from pwbackup.crypto.container import (
    ALGORITHM_AES_256_GCM,
    FORMAT_VERSION,
    HEADER_SIZE,
    MAGIC,
    MIN_CONTAINER_SIZE,
    Container,
    ContainerHeader,
    algorithm_id_for_name,
    decode_container,
    encode_container,
    looks_like_container,
)

SALT = bytes(range(32))
NONCE = bytes(range(100, 112))
CIPHERTEXT = b"\xaa" * 16 + b"payload"


def _valid_blob():
    return encode_container(FORMAT_VERSION, ALGORITHM_AES_256_GCM, SALT, NONCE, CIPHERTEXT)


# ── Layout ───────────────────────────────────────────────────────────


class TestLayout:
    """Byte-exact header layout."""

    def test_sizes(self):
        assert HEADER_SIZE == 60
        assert MIN_CONTAINER_SIZE == 76

    def test_field_offsets(self):
        blob = _valid_blob()
        assert blob[0:4] == b"PWBK"
        assert blob[4:6] == b"\x00\x01"
        assert blob[6:8] == b"\x00\x01"
        assert blob[8:16] == bytes(8)
        assert blob[16:48] == SALT
        assert blob[48:60] == NONCE
        assert blob[60:] == CIPHERTEXT

    def test_big_endian_integers(self):
        blob = encode_container(0x0102, 0x0304, SALT, NONCE, CIPHERTEXT)
        assert blob[4:8] == b"\x01\x02\x03\x04"

    def test_header_to_bytes_matches_encode(self):
        header = ContainerHeader(
            version=FORMAT_VERSION,
            algorithm_id=ALGORITHM_AES_256_GCM,
            salt=SALT,
            nonce=NONCE,
        )
        container = Container(header=header, ciphertext=CIPHERTEXT)
        assert container.to_bytes() == _valid_blob()

    def test_wrong_salt_size_rejected(self):
        with pytest.raises(ValueError):
            encode_container(FORMAT_VERSION, ALGORITHM_AES_256_GCM, b"short", NONCE, CIPHERTEXT)

    def test_wrong_nonce_size_rejected(self):
        with pytest.raises(ValueError):
            encode_container(FORMAT_VERSION, ALGORITHM_AES_256_GCM, SALT, b"n" * 24, CIPHERTEXT)


# ── Decode ───────────────────────────────────────────────────────────


class TestDecode:

    def test_decode_fields(self):
        container = decode_container(_valid_blob())
        assert container.header.version == FORMAT_VERSION
        assert container.header.algorithm_id == ALGORITHM_AES_256_GCM
        assert container.salt == SALT
        assert container.nonce == NONCE
        assert container.ciphertext == CIPHERTEXT

    def test_accepts_bytearray_and_memoryview(self):
        blob = _valid_blob()
        assert decode_container(bytearray(blob)).ciphertext == CIPHERTEXT
        assert decode_container(memoryview(blob)).ciphertext == CIPHERTEXT

    def test_every_short_prefix_is_truncated(self):
        blob = _valid_blob()
        for length in range(MIN_CONTAINER_SIZE):
            with pytest.raises(TruncatedContainerError):
                decode_container(blob[:length])

    def test_minimum_length_accepted(self):
        blob = encode_container(FORMAT_VERSION, ALGORITHM_AES_256_GCM, SALT, NONCE, b"t" * 16)
        assert len(blob) == MIN_CONTAINER_SIZE
        assert decode_container(blob).ciphertext == b"t" * 16

    def test_bad_magic(self):
        blob = b"PWBX" + _valid_blob()[4:]
        with pytest.raises(BadMagicError):
            decode_container(blob)

    def test_magic_checked_before_version(self):
        blob = b"ZIP!" + struct.pack(">HH", 99, 99) + _valid_blob()[8:]
        with pytest.raises(BadMagicError):
            decode_container(blob)

    def test_unsupported_version(self):
        blob = encode_container(2, ALGORITHM_AES_256_GCM, SALT, NONCE, CIPHERTEXT)
        with pytest.raises(UnsupportedVersionError, match="2"):
            decode_container(blob)

    def test_version_checked_before_algorithm(self):
        blob = encode_container(7, 9, SALT, NONCE, CIPHERTEXT)
        with pytest.raises(UnsupportedVersionError):
            decode_container(blob)

    def test_unsupported_algorithm(self):
        blob = encode_container(FORMAT_VERSION, 2, SALT, NONCE, CIPHERTEXT)
        with pytest.raises(UnsupportedAlgorithmError):
            decode_container(blob)

    def test_truncation_checked_before_magic(self):
        with pytest.raises(TruncatedContainerError):
            decode_container(b"not a container")

    def test_reserved_bytes_ignored(self):
        blob = bytearray(_valid_blob())
        blob[8:16] = b"\xff" * 8
        container = decode_container(bytes(blob))
        assert container.header.reserved == b"\xff" * 8
        assert container.ciphertext == CIPHERTEXT

    def test_format_errors_share_base_class(self):
        for exc_type in (
            TruncatedContainerError,
            BadMagicError,
            UnsupportedVersionError,
            UnsupportedAlgorithmError,
        ):
            assert issubclass(exc_type, ContainerFormatError)


# ── Helpers ──────────────────────────────────────────────────────────


class TestHelpers:

    def test_looks_like_container(self):
        assert looks_like_container(_valid_blob())
        assert looks_like_container(MAGIC)
        assert not looks_like_container(b"\x1f\x8b\x08\x00")
        assert not looks_like_container(b"")

    def test_algorithm_name_lookup(self):
        assert algorithm_id_for_name("AES-256-GCM") == ALGORITHM_AES_256_GCM
        assert algorithm_id_for_name(" aes-256-gcm ") == ALGORITHM_AES_256_GCM

    def test_unknown_algorithm_name(self):
        with pytest.raises(UnsupportedAlgorithmError):
            algorithm_id_for_name("ChaCha20-Poly1305")

    def test_repr_hides_salt_and_nonce(self):
        text = repr(decode_container(_valid_blob()))
        assert "ciphertext_len=" in text
        assert SALT.hex() not in text
