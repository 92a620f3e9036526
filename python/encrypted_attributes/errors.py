"""
Exception classes for encrypted attribute operations.

Every error raised by this package derives from EncryptedAttributeError.
"""

from __future__ import annotations


class EncryptedAttributeError(Exception):
    """Base exception for all encrypted attribute operations."""

    pass


class ValidationError(EncryptedAttributeError):
    """Attribute value cannot be encrypted (only strings are supported)."""

    pass


class MissingIdError(EncryptedAttributeError):
    """Record has no id but id verification is enabled."""

    pass


class UnknownKeyError(EncryptedAttributeError):
    """Key id is not present in the configured key set."""

    pass


class FormatError(EncryptedAttributeError):
    """Malformed envelope or associated data."""

    pass


class IdMismatchError(EncryptedAttributeError):
    """Envelope is bound to a different record id."""

    pass


class CryptoError(EncryptedAttributeError):
    """Cryptographic primitive failed (bad key size, bad nonce size)."""

    pass


class AuthenticationError(CryptoError):
    """Authentication tag verification failed."""

    pass


class ConfigError(EncryptedAttributeError):
    """Configuration error."""

    pass
