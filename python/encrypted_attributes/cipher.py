"""
Single attribute encryption and decryption.

AttributeCipher ties together the key set, associated data, envelope
codec and an AEAD provider. It never mutates the record it is given.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .aad import AssociatedData
from .accessor import DottedPathAccessor, PathAccessor
from .crypto import NONCE_SIZE, AeadProvider, AesGcmProvider, generate_random_bytes
from .envelope import Envelope, is_encrypted
from .errors import (
    AuthenticationError,
    CryptoError,
    FormatError,
    IdMismatchError,
    MissingIdError,
    ValidationError,
)
from .keys import KeySet

logger = logging.getLogger(__name__)


class AttributeCipher:
    """
    Encrypts and decrypts one attribute value at a time.

    Encryption is idempotent: None and values already carrying the
    envelope prefix are returned unchanged. Decryption returns anything
    that is not an envelope unchanged.
    """

    def __init__(
        self,
        key_set: KeySet,
        verify_id: bool = False,
        aead: Optional[AeadProvider] = None,
        random_bytes: Callable[[int], bytes] = generate_random_bytes,
        accessor: Optional[PathAccessor] = None,
        id_attribute: str = "id",
    ) -> None:
        """
        Initialize AttributeCipher.

        Args:
            key_set: Keys available for decryption plus the active key
            verify_id: Bind every envelope to the owning record's id
            aead: AEAD provider (AES-256-GCM by default)
            random_bytes: CSPRNG used for nonces
            accessor: Accessor used to read the record id
            id_attribute: Path of the record id
        """
        self._key_set = key_set
        self._verify_id = verify_id
        self._aead = aead if aead is not None else AesGcmProvider()
        self._random_bytes = random_bytes
        self._accessor = accessor if accessor is not None else DottedPathAccessor()
        self._id_attribute = id_attribute

    @property
    def key_set(self) -> KeySet:
        """Configured key set."""
        return self._key_set

    @property
    def verify_id(self) -> bool:
        """Whether envelopes are bound to the record id."""
        return self._verify_id

    def record_id(self, record: Any) -> Optional[str]:
        """Return the stringified record id, or None if the record has none."""
        value = self._accessor.get(record, self._id_attribute)
        if value is None or value == "":
            return None
        return str(value)

    def encrypt(self, record: Any, plaintext: Any) -> Any:
        """
        Encrypt an attribute value.

        Args:
            record: Record owning the attribute (used for id binding)
            plaintext: String to encrypt

        Returns:
            Envelope string, or the input unchanged if None or already encrypted

        Raises:
            ValidationError: If plaintext is not a string
            MissingIdError: If id verification is on and the record has no id
            UnknownKeyError: If the active key id is not configured
        """
        if plaintext is None or is_encrypted(plaintext):
            return plaintext
        if not isinstance(plaintext, str):
            raise ValidationError(
                f"Encrypted attribute must be a string, got {type(plaintext).__name__}"
            )

        record_id = None
        if self._verify_id:
            record_id = self.record_id(record)
            if record_id is None:
                raise MissingIdError(
                    f"Cannot encrypt without {self._id_attribute!r} attribute"
                )

        key_id = self._key_set.active_key_id
        key = self._key_set.resolve(key_id)

        nonce = self._random_bytes(NONCE_SIZE)
        if len(nonce) != NONCE_SIZE:
            raise CryptoError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}"
            )

        aad = AssociatedData.build(self._verify_id, record_id, key_id)
        ciphertext, tag = self._aead.seal(key, nonce, plaintext.encode("utf-8"), aad)
        return Envelope(aad=aad, nonce=nonce, ciphertext=ciphertext, tag=tag).encode()

    def decrypt(self, record: Any, value: Any) -> Any:
        """
        Decrypt an attribute value.

        Args:
            record: Record owning the attribute (used for id verification)
            value: Envelope string

        Returns:
            Plaintext string, or the input unchanged if it is not an envelope

        Raises:
            FormatError: If the envelope or its associated data is malformed
            MissingIdError: If id verification is on and the record has no id
            IdMismatchError: If the envelope is bound to another record id
            UnknownKeyError: If the embedded key id is not configured
            AuthenticationError: If the tag does not verify
        """
        if not is_encrypted(value):
            return value

        envelope = Envelope.decode(value)
        aad = envelope.associated_data

        if self._verify_id:
            record_id = self.record_id(record)
            if record_id is None:
                raise MissingIdError(
                    f"Cannot decrypt without {self._id_attribute!r} attribute"
                )
            if aad.id != record_id:
                logger.warning(
                    "Encrypted attribute is bound to another record id (key %s)",
                    aad.key_id,
                )
                raise IdMismatchError("Encrypted attribute has invalid id")

        key = self._key_set.resolve(aad.key_id)

        try:
            plaintext = self._aead.open(
                key, envelope.nonce, envelope.ciphertext, envelope.tag, envelope.aad
            )
        except AuthenticationError:
            logger.warning("Encrypted attribute failed authentication (key %s)", aad.key_id)
            raise

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise FormatError("Decrypted attribute is not valid UTF-8") from None
