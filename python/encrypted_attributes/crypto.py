"""
Cryptographic primitives for AES-256-GCM attribute encryption.

This module provides:
- SecureKey: Secure key wrapper with automatic zeroization
- AeadProvider: Interface for the seal/open primitive used by AttributeCipher
- AesGcmProvider: AES-256-GCM implementation backed by ``cryptography``
- generate_random_bytes / generate_key: CSPRNG helpers
"""

from __future__ import annotations

import base64
import secrets
from abc import ABC, abstractmethod
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import AuthenticationError, CryptoError

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)


class SecureKey:
    """
    Secure key wrapper with automatic memory cleanup on deletion.

    Uses bytearray internally for mutable zeroing in __del__.
    Note: Python's garbage collector doesn't guarantee immediate cleanup,
    so this is best-effort zeroization.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        """
        Create a SecureKey from raw bytes.

        Args:
            key_bytes: Raw key material (should be 32 bytes for AES-256)
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise CryptoError("Key must be bytes or bytearray")
        self._bytes = bytearray(key_bytes)

    @classmethod
    def generate(cls) -> SecureKey:
        """Generate a cryptographically secure random 32-byte key."""
        return cls(secrets.token_bytes(AES_256_KEY_SIZE))

    def as_bytes(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def to_base64(self) -> str:
        """Encode key material as a standard base64 string."""
        return base64.standard_b64encode(self._bytes).decode("ascii")

    def __len__(self) -> int:
        """Return key length in bytes."""
        return len(self._bytes)

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecureKey([REDACTED])"

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


class AeadProvider(ABC):
    """
    Authenticated encryption with associated data.

    Implementations keep the tag separate from the ciphertext so the
    envelope can carry them as distinct segments.
    """

    @abstractmethod
    def seal(
        self, key: SecureKey, nonce: bytes, plaintext: bytes, aad: bytes
    ) -> Tuple[bytes, bytes]:
        """Encrypt plaintext, returning (ciphertext, tag)."""
        ...

    @abstractmethod
    def open(
        self, key: SecureKey, nonce: bytes, ciphertext: bytes, tag: bytes, aad: bytes
    ) -> bytes:
        """Verify the tag and return plaintext, or raise AuthenticationError."""
        ...


class AesGcmProvider(AeadProvider):
    """AES-256-GCM with a 96-bit nonce and a 128-bit tag."""

    @staticmethod
    def _check_sizes(key: SecureKey, nonce: bytes) -> None:
        if len(key) != AES_256_KEY_SIZE:
            raise CryptoError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key)}"
            )
        if len(nonce) != NONCE_SIZE:
            raise CryptoError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}"
            )

    def seal(
        self, key: SecureKey, nonce: bytes, plaintext: bytes, aad: bytes
    ) -> Tuple[bytes, bytes]:
        """
        Encrypt plaintext with AES-256-GCM.

        Args:
            key: 32-byte encryption key
            nonce: 12-byte nonce, never reused under the same key
            plaintext: Data to encrypt
            aad: Associated data bound to the ciphertext

        Returns:
            Tuple of (ciphertext, 16-byte tag)

        Raises:
            CryptoError: If key or nonce size is invalid
        """
        self._check_sizes(key, nonce)
        sealed = AESGCM(key.as_bytes()).encrypt(nonce, plaintext, aad)
        return sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

    def open(
        self, key: SecureKey, nonce: bytes, ciphertext: bytes, tag: bytes, aad: bytes
    ) -> bytes:
        """
        Decrypt ciphertext with AES-256-GCM.

        Args:
            key: 32-byte decryption key
            nonce: Nonce used at encryption
            ciphertext: Encrypted data without the tag
            tag: 16-byte authentication tag
            aad: Associated data (must match encryption)

        Returns:
            Decrypted plaintext bytes

        Raises:
            CryptoError: If key or nonce size is invalid
            AuthenticationError: If the tag does not verify
        """
        self._check_sizes(key, nonce)
        if len(tag) != TAG_SIZE:
            raise AuthenticationError("Decryption failed")

        try:
            return AESGCM(key.as_bytes()).decrypt(nonce, ciphertext + tag, aad)
        except InvalidTag:
            # Generic error to prevent oracle attacks
            raise AuthenticationError("Decryption failed") from None


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)


def generate_key() -> str:
    """Generate a fresh AES-256 key, base64-encoded for configuration."""
    return SecureKey.generate().to_base64()
