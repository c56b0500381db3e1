"""Field-level encryption utilities for tenant secrets.

Uses Fernet symmetric encryption for mail-relay credentials stored on the
tenant profile. Each value of a settings object is encrypted independently and
prefixed with ``enc:`` so plaintext legacy values can still be read.
"""

import logging
import re
from typing import Any, Optional

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "enc:"

_INTEGER_RE = re.compile(r"-?(0|[1-9]\d*)")
_DECIMAL_RE = re.compile(r"-?(0|[1-9]\d*)\.\d+")


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""
    pass


class EncryptionService:
    """Service for encrypting and decrypting sensitive data.

    Uses Fernet symmetric encryption which provides:
    - AES-128-CBC encryption
    - HMAC-SHA256 authentication
    """

    def __init__(self, key: str | None = None) -> None:
        """Initialize the encryption service with the encryption key.

        Args:
            key: Fernet key; defaults to ``settings.field_encryption_key``
        """
        self._fernet: Optional[Fernet] = None

        key_bytes = self._get_encryption_key(key)
        if key_bytes:
            self._fernet = Fernet(key_bytes)
            logger.info("Encryption service initialized")
        else:
            logger.warning("No encryption key configured - encryption disabled")

    def _get_encryption_key(self, key: str | None) -> Optional[bytes]:
        """Get the encryption key from the argument or settings.

        The key must be a valid 32-byte URL-safe base64-encoded key.
        """
        if key is None:
            # Import here to avoid circular import
            from leadflow.settings import settings

            key = settings.field_encryption_key

        if not key:
            return None

        try:
            key_bytes = key.encode()
            Fernet(key_bytes)  # Validate key format
            return key_bytes
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid FIELD_ENCRYPTION_KEY format: {e}")
            return None

    @property
    def is_enabled(self) -> bool:
        """Check if encryption is enabled (key is configured)."""
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a plaintext string.

        Returns:
            Base64-encoded encrypted string prefixed with 'enc:' marker

        Raises:
            EncryptionError: If encryption fails
        """
        if not plaintext:
            return plaintext

        if not self._fernet:
            logger.warning("Encryption not enabled - storing plaintext")
            return plaintext

        try:
            encrypted_bytes = self._fernet.encrypt(plaintext.encode())
            return f"{ENCRYPTED_PREFIX}{encrypted_bytes.decode()}"
        except Exception as e:
            raise EncryptionError(f"Failed to encrypt value: {e}") from e

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt an encrypted string.

        Raises:
            EncryptionError: If decryption fails
        """
        if not ciphertext:
            return ciphertext

        # Plaintext values are returned as-is (backward compatibility)
        if not ciphertext.startswith(ENCRYPTED_PREFIX):
            return ciphertext

        if not self._fernet:
            raise EncryptionError("Cannot decrypt: encryption key not configured")

        try:
            encrypted_bytes = ciphertext[len(ENCRYPTED_PREFIX):].encode()
            return self._fernet.decrypt(encrypted_bytes).decode()
        except InvalidToken:
            raise EncryptionError("Failed to decrypt: invalid token or wrong key")
        except Exception as e:
            raise EncryptionError(f"Failed to decrypt value: {e}") from e

    def is_encrypted(self, value: str) -> bool:
        """Check if a value is already encrypted."""
        return value.startswith(ENCRYPTED_PREFIX) if value else False


_encryption_service: Optional[EncryptionService] = None


def get_encryption_service() -> EncryptionService:
    """Get the shared encryption service instance."""
    global _encryption_service
    if _encryption_service is None:
        _encryption_service = EncryptionService()
    return _encryption_service


def reset_encryption_service() -> None:
    """Drop the shared instance so the next call re-reads the key."""
    global _encryption_service
    _encryption_service = None


def _coerce(value: str) -> Any:
    """Restore the scalar type of a decrypted settings value."""
    if value in ("true", "false"):
        return value == "true"
    if _INTEGER_RE.fullmatch(value):
        return int(value)
    if _DECIMAL_RE.fullmatch(value):
        return float(value)
    return value


def encrypt_settings(values: dict[str, Any]) -> dict[str, str]:
    """Encrypt every scalar value of a settings object.

    None values are dropped. Booleans are stored as ``true``/``false``.
    Values that already carry the ``enc:`` prefix are kept as they are.
    """
    service = get_encryption_service()
    encrypted: dict[str, str] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, str) and service.is_encrypted(value):
            encrypted[key] = value
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        encrypted[key] = service.encrypt(str(value))
    return encrypted


def decrypt_settings(blob: dict[str, Any] | None) -> dict[str, Any]:
    """Decrypt a settings object produced by :func:`encrypt_settings`.

    Raises:
        EncryptionError: If the blob is malformed or any value fails to decrypt
    """
    if not blob:
        return {}
    if not isinstance(blob, dict):
        raise EncryptionError("Encrypted settings must be an object")

    service = get_encryption_service()
    decrypted: dict[str, Any] = {}
    for key, value in blob.items():
        if value in (None, ""):
            continue
        if not isinstance(value, str):
            decrypted[key] = value
            continue
        decrypted[key] = _coerce(service.decrypt(value))
    return decrypted


def generate_encryption_key() -> str:
    """Generate a new Fernet encryption key."""
    return Fernet.generate_key().decode()
