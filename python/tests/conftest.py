"""
Pytest configuration and fixtures for encrypted attribute tests.
"""

from __future__ import annotations

import base64
from typing import Dict

import pytest

from encrypted_attributes import (
    AttributeCipher,
    EncryptedAttributes,
    EncryptedAttributesConfig,
    KeySet,
    generate_key,
)

_ZERO_KEY = base64.standard_b64encode(bytes(32)).decode("ascii")


@pytest.fixture
def zero_key() -> str:
    """Base64 of 32 zero bytes."""
    return _ZERO_KEY


@pytest.fixture
def keys(zero_key: str) -> Dict[str, str]:
    """Two valid keys: the all-zero k1 and a random k2."""
    return {"k1": zero_key, "k2": generate_key()}


@pytest.fixture
def key_set(keys: Dict[str, str]) -> KeySet:
    """Key set with k1 active."""
    return KeySet(keys, active_key_id="k1")


@pytest.fixture
def cipher(key_set: KeySet) -> AttributeCipher:
    """Cipher without id binding."""
    return AttributeCipher(key_set)


@pytest.fixture
def verifying_cipher(key_set: KeySet) -> AttributeCipher:
    """Cipher that binds envelopes to the record id."""
    return AttributeCipher(key_set, verify_id=True)


@pytest.fixture
def config(keys: Dict[str, str]) -> EncryptedAttributesConfig:
    """Config encrypting ``secret`` and ``profile.ssn`` with id binding."""
    return EncryptedAttributesConfig(
        attributes=("secret", "profile.ssn"),
        keys=keys,
        key_id="k1",
        verify_id=True,
    )


@pytest.fixture
def encrypted(config: EncryptedAttributesConfig) -> EncryptedAttributes:
    """EncryptedAttributes built from the default config."""
    return EncryptedAttributes(config)
