"""
Encryption of a configured set of attributes on a record.

EncryptedAttributes reads each configured path through a PathAccessor,
runs it through AttributeCipher and writes the result back. All new
values are computed before any is written, so a failure on one attribute
leaves the whole record untouched. If writing back fails partway, the
paths already written are restored before the error propagates.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .accessor import DottedPathAccessor, PathAccessor
from .cipher import AttributeCipher
from .config import EncryptedAttributesConfig
from .crypto import AeadProvider, generate_random_bytes
from .envelope import Envelope, is_encrypted
from .errors import ConfigError, FormatError

logger = logging.getLogger(__name__)


class EncryptedAttributes:
    """
    Encrypts and decrypts the configured attributes of records.

    An instance is immutable and safe to share between threads working on
    distinct records. To rotate keys, build a new instance from
    ``config.with_active_key(...)`` and swap it in.
    """

    def __init__(
        self,
        config: EncryptedAttributesConfig,
        aead: Optional[AeadProvider] = None,
        accessor: Optional[PathAccessor] = None,
        random_bytes: Callable[[int], bytes] = generate_random_bytes,
    ) -> None:
        """
        Initialize EncryptedAttributes.

        Args:
            config: Attribute paths, keys and id binding settings
            aead: AEAD provider (AES-256-GCM by default)
            accessor: Path accessor (dotted paths over dicts/objects by default)
            random_bytes: CSPRNG used for nonces
        """
        if config.verify_id and config.id_attribute in config.attributes:
            raise ConfigError(
                f"Cannot encrypt the id attribute {config.id_attribute!r} "
                "while id verification is enabled"
            )
        self._config = config
        self._accessor = accessor if accessor is not None else DottedPathAccessor()
        self._cipher = AttributeCipher(
            key_set=config.key_set(),
            verify_id=config.verify_id,
            aead=aead,
            random_bytes=random_bytes,
            accessor=self._accessor,
            id_attribute=config.id_attribute,
        )

    @classmethod
    def from_options(
        cls,
        attributes: List[str],
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> EncryptedAttributes:
        """
        Create from an attribute list and an options mapping.

        Args:
            attributes: Dotted paths of the attributes to encrypt
            options: ``keys``, ``keyId``, ``verifyId`` and ``idAttribute``
            **kwargs: Passed to the constructor (aead, accessor, random_bytes)
        """
        config = EncryptedAttributesConfig.from_options(
            {**(options or {}), "attributes": attributes}
        )
        return cls(config, **kwargs)

    @property
    def config(self) -> EncryptedAttributesConfig:
        return self._config

    @property
    def attributes(self) -> Tuple[str, ...]:
        return self._config.attributes

    @property
    def cipher(self) -> AttributeCipher:
        return self._cipher

    def encrypt_attribute(self, record: Any, value: Any) -> Any:
        """Encrypt a single value owned by record."""
        return self._cipher.encrypt(record, value)

    def decrypt_attribute(self, record: Any, value: Any) -> Any:
        """Decrypt a single value owned by record."""
        return self._cipher.decrypt(record, value)

    def encrypt_all(self, record: Any) -> Any:
        """Encrypt every configured attribute in place and return the record."""
        return self._apply(record, self._cipher.encrypt, "encrypted")

    def decrypt_all(self, record: Any) -> Any:
        """Decrypt every configured attribute in place and return the record."""
        return self._apply(record, self._cipher.decrypt, "decrypted")

    def rotate_all(self, record: Any) -> Any:
        """
        Re-encrypt configured attributes under the active key.

        Envelopes sealed with another key are decrypted and encrypted
        again; plaintext values are encrypted; envelopes already sealed
        with the active key are left as they are.
        """
        return self._apply(record, self._rotate_attribute, "rotated")

    def _rotate_attribute(self, record: Any, value: Any) -> Any:
        if is_encrypted(value):
            if Envelope.decode(value).key_id == self._cipher.key_set.active_key_id:
                return value
            value = self._cipher.decrypt(record, value)
        return self._cipher.encrypt(record, value)

    def _apply(
        self, record: Any, transform: Callable[[Any, Any], Any], action: str
    ) -> Any:
        updates = []
        for path in self._config.attributes:
            value = self._accessor.get(record, path)
            if value is None:
                continue
            updates.append((path, value, transform(record, value)))

        written = []
        try:
            for path, original, value in updates:
                self._accessor.set(record, path, value)
                written.append((path, original))
        except Exception:
            for path, original in reversed(written):
                self._accessor.set(record, path, original)
            raise

        if logger.isEnabledFor(logging.DEBUG):
            for path, original, value in updates:
                envelope = original if action == "decrypted" else value
                logger.debug(
                    "Attribute %s %s with key %s", path, action, _key_id(envelope)
                )
        return record


def _key_id(value: Any) -> Optional[str]:
    """Key id of an envelope value, or None for anything else."""
    if not is_encrypted(value):
        return None
    try:
        return Envelope.decode(value).key_id
    except FormatError:
        return None
