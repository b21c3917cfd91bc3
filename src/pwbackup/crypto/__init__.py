"""Encrypted backup containers: key derivation, codec, seal/open, file helpers."""

from .backup_crypto import BackupCrypto, open_container, seal
from .container import (
    Container,
    ContainerHeader,
    decode_container,
    encode_container,
    looks_like_container,
)
from .file_crypto import decrypt_file, encrypt_file
from .kdf import derive_key, derived_key, generate_salt
from .key_file import get_or_create_key_file, load_key_file

__all__ = [
    "BackupCrypto",
    "Container",
    "ContainerHeader",
    "decode_container",
    "decrypt_file",
    "derive_key",
    "derived_key",
    "encode_container",
    "encrypt_file",
    "generate_salt",
    "get_or_create_key_file",
    "load_key_file",
    "looks_like_container",
    "open_container",
    "seal",
]
