"""
Envelope string codec.

This module provides:
- Envelope: AAD, nonce, ciphertext and tag of one encrypted attribute
- is_encrypted: Prefix check used to make encryption idempotent

Wire format (base64 segments joined by ``$``, tag padding stripped)::

    <base64(aad)>$<base64(nonce)>$<base64(ciphertext)>$<base64(tag)>
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any

from .aad import ALGORITHM, SEPARATOR, AssociatedData
from .crypto import NONCE_SIZE, TAG_SIZE
from .errors import FormatError

# base64("aes-256-gcm$") == "YWVzLTI1Ni1nY20k"; 12 bytes encode without padding.
ENCRYPTED_PREFIX: str = base64.standard_b64encode(
    f"{ALGORITHM}{SEPARATOR}".encode("ascii")
).decode("ascii")


def _b64encode(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


def _b64decode(segment: str, name: str) -> bytes:
    try:
        return base64.b64decode(segment, validate=True)
    except (binascii.Error, ValueError):
        raise FormatError(f"Envelope {name} is not valid base64") from None


def is_encrypted(value: Any) -> bool:
    """Return True if value is a string carrying the envelope prefix."""
    return isinstance(value, str) and len(value) > 0 and value.startswith(ENCRYPTED_PREFIX)


@dataclass(frozen=True)
class Envelope:
    """Encrypted attribute container."""

    aad: bytes
    nonce: bytes  # 12 bytes
    ciphertext: bytes
    tag: bytes  # 16 bytes

    @property
    def associated_data(self) -> AssociatedData:
        """Parsed associated data."""
        return AssociatedData.parse(self.aad)

    @property
    def key_id(self) -> str:
        """Id of the key that sealed this envelope."""
        return self.associated_data.key_id

    def encode(self) -> str:
        """Serialize to the ``$``-separated envelope string."""
        return SEPARATOR.join(
            [
                _b64encode(self.aad),
                _b64encode(self.nonce),
                _b64encode(self.ciphertext),
                _b64encode(self.tag).rstrip("="),
            ]
        )

    @classmethod
    def decode(cls, value: str) -> Envelope:
        """
        Parse an envelope string.

        Args:
            value: Envelope string as produced by encode()

        Returns:
            Envelope instance

        Raises:
            FormatError: If the segment count, base64 or field sizes are wrong
        """
        segments = value.split(SEPARATOR)
        if len(segments) != 4:
            raise FormatError(
                f"Envelope must have 4 segments, got {len(segments)}"
            )

        aad_b64, nonce_b64, ciphertext_b64, tag_b64 = segments
        tag_b64 += "=" * (-len(tag_b64) % 4)

        nonce = _b64decode(nonce_b64, "nonce")
        if len(nonce) != NONCE_SIZE:
            raise FormatError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}"
            )
        tag = _b64decode(tag_b64, "tag")
        if len(tag) != TAG_SIZE:
            raise FormatError(
                f"Invalid tag size: expected {TAG_SIZE}, got {len(tag)}"
            )

        return cls(
            aad=_b64decode(aad_b64, "aad"),
            nonce=nonce,
            ciphertext=_b64decode(ciphertext_b64, "ciphertext"),
            tag=tag,
        )
