"""Encryption settings and password policy.

Loading these from a config file is the caller's job; this module only
defines the typed section and validates it.
"""

import hmac
from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from ..crypto.container import ALGORITHMS, ALGORITHM_AES_256_GCM, algorithm_id_for_name

DEFAULT_ALGORITHM = ALGORITHMS[ALGORITHM_AES_256_GCM]


@dataclass
class EncryptionSettings:
    """The ``backup.encryption`` section of the user's configuration."""
    enabled: bool = True
    algorithm: str = DEFAULT_ALGORITHM

    @property
    def algorithm_id(self) -> int:
        """Container algorithm id for the configured name.

        Raises:
            UnsupportedAlgorithmError: Unknown algorithm name.
        """
        return algorithm_id_for_name(self.algorithm)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncryptionSettings":
        algorithm = data.get("algorithm") or DEFAULT_ALGORITHM
        settings = cls(
            enabled=bool(data.get("enabled", True)),
            algorithm=str(algorithm),
        )
        if settings.enabled:
            # Fail at load time, not on the first backup
            algorithm_id_for_name(settings.algorithm)
        return settings


def validate_password(password: str) -> Tuple[bool, str]:
    """
    Check an encryption password before it reaches the crypto core.

    There is no password recovery: a lost password means a lost backup, so
    the only hard rule is that the password is not blank.

    Returns:
        (is_valid, error_message)
    """
    if not password:
        return False, "Encryption password is required"
    if not password.strip():
        return False, "Encryption password cannot be only whitespace"
    return True, ""


def passwords_match(password: str, confirmation: str) -> bool:
    """Constant-time comparison of a password and its confirmation."""
    return hmac.compare_digest(password.encode("utf-8"), confirmation.encode("utf-8"))
