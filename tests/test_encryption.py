"""Tests for credential encryption."""

import pytest

from leadflow.core.encryption import (
    ENCRYPTED_PREFIX,
    EncryptionError,
    EncryptionService,
    decrypt_settings,
    encrypt_settings,
    generate_encryption_key,
)


def test_settings_round_trip_restores_types(encryption_key):
    original = {
        "SMTP_HOST": "smtp.acme.test",
        "SMTP_PORT": 587,
        "SMTP_SECURE": False,
        "SMTP_PASSWORD": "p@ss word",
        "SMTP_FROM": None,
    }

    encrypted = encrypt_settings(original)

    assert "SMTP_FROM" not in encrypted
    assert all(value.startswith(ENCRYPTED_PREFIX) for value in encrypted.values())
    assert "p@ss word" not in str(encrypted)
    assert decrypt_settings(encrypted) == {
        "SMTP_HOST": "smtp.acme.test",
        "SMTP_PORT": 587,
        "SMTP_SECURE": False,
        "SMTP_PASSWORD": "p@ss word",
    }


def test_plaintext_values_pass_through(encryption_key):
    assert decrypt_settings({"SMTP_HOST": "plain.test", "SMTP_PORT": 25}) == {
        "SMTP_HOST": "plain.test",
        "SMTP_PORT": 25,
    }


def test_empty_blob():
    assert decrypt_settings(None) == {}
    assert decrypt_settings({}) == {}


def test_non_object_blob_rejected(encryption_key):
    with pytest.raises(EncryptionError):
        decrypt_settings(["enc:abc"])


def test_wrong_key_raises():
    token = EncryptionService(generate_encryption_key()).encrypt("secret")

    with pytest.raises(EncryptionError):
        EncryptionService(generate_encryption_key()).decrypt(token)


def test_decrypt_without_key_raises():
    service = EncryptionService(generate_encryption_key())
    token = service.encrypt("secret")

    disabled = EncryptionService("")
    assert disabled.is_enabled is False
    with pytest.raises(EncryptionError):
        disabled.decrypt(token)


def test_invalid_key_disables_encryption():
    service = EncryptionService("not-a-fernet-key")
    assert service.is_enabled is False
    assert service.encrypt("plain") == "plain"


def test_encrypt_settings_keeps_encrypted_values(encryption_key):
    encrypted = encrypt_settings({"SMTP_HOST": "smtp.acme.test", "SMTP_PORT": 587})

    assert encrypt_settings(encrypted) == encrypted
    assert decrypt_settings(encrypt_settings(encrypted)) == {"SMTP_HOST": "smtp.acme.test", "SMTP_PORT": 587}
