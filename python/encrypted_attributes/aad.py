"""
Associated data binding an envelope to its algorithm, record and key.

Wire form: ``aes-256-gcm$<id-or-empty>$<keyId>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import FormatError

ALGORITHM: str = "aes-256-gcm"
SEPARATOR: str = "$"


@dataclass(frozen=True)
class AssociatedData:
    """Parsed associated data."""

    algorithm: str
    id: str
    key_id: str

    @staticmethod
    def build(verify_id: bool, id: Any, key_id: str) -> bytes:
        """
        Build associated data bytes for a new envelope.

        Args:
            verify_id: Whether to bind the envelope to the record id
            id: Record id, stringified when verify_id is set
            key_id: Id of the key sealing the envelope

        Returns:
            Encoded associated data

        Raises:
            FormatError: If the id or key id contains the separator
        """
        record_id = str(id) if verify_id else ""
        if SEPARATOR in record_id:
            raise FormatError(f"Record id must not contain {SEPARATOR!r}")
        if SEPARATOR in key_id:
            raise FormatError(f"Key id must not contain {SEPARATOR!r}")
        return f"{ALGORITHM}{SEPARATOR}{record_id}{SEPARATOR}{key_id}".encode("utf-8")

    @classmethod
    def parse(cls, aad: bytes) -> AssociatedData:
        """
        Parse associated data bytes taken from an envelope.

        Raises:
            FormatError: If the structure or algorithm is wrong
        """
        try:
            text = aad.decode("utf-8")
        except UnicodeDecodeError:
            raise FormatError("Associated data is not valid text") from None

        parts = text.split(SEPARATOR)
        if len(parts) != 3:
            raise FormatError(
                f"Associated data must have 3 parts, got {len(parts)}"
            )

        algorithm, record_id, key_id = parts
        if algorithm != ALGORITHM:
            raise FormatError(f"Unsupported algorithm: {algorithm!r}")
        return cls(algorithm=algorithm, id=record_id, key_id=key_id)
