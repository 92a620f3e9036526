"""
Immutable key set used to resolve key ids to AES-256 keys.

Key rotation publishes a new KeySet through with_active_key(); an
existing KeySet is never mutated, so in-flight calls keep a consistent view.
"""

from __future__ import annotations

import base64
import binascii
from types import MappingProxyType
from typing import Mapping, Optional

from .crypto import AES_256_KEY_SIZE, SecureKey
from .errors import ConfigError, UnknownKeyError


class KeySet:
    """
    Mapping of key id to base64-encoded key plus the active key id.

    Key material is decoded at resolve time, so a bad entry only fails
    the calls that actually use it.
    """

    __slots__ = ("_keys", "_active_key_id")

    def __init__(
        self, keys: Mapping[str, str], active_key_id: Optional[str] = None
    ) -> None:
        """
        Create a KeySet.

        Args:
            keys: Key id to base64-encoded 32-byte key
            active_key_id: Key id used for new encryptions
        """
        self._keys = MappingProxyType(dict(keys))
        self._active_key_id = active_key_id

    @property
    def active_key_id(self) -> Optional[str]:
        """Key id used for new encryptions."""
        return self._active_key_id

    @property
    def key_ids(self) -> frozenset:
        """All configured key ids."""
        return frozenset(self._keys)

    def __contains__(self, key_id: object) -> bool:
        return key_id in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        """Redacted representation listing key ids only."""
        return f"KeySet(key_ids={sorted(self._keys)!r}, active_key_id={self._active_key_id!r})"

    def resolve(self, key_id: Optional[str]) -> SecureKey:
        """
        Resolve a key id to key material.

        Args:
            key_id: Key id embedded in an envelope, or the active key id

        Returns:
            SecureKey holding exactly 32 bytes

        Raises:
            UnknownKeyError: If the key id is not configured
            ConfigError: If the configured key is not base64 or not 32 bytes
        """
        if key_id is None or key_id not in self._keys:
            raise UnknownKeyError(f"Unknown key id: {key_id!r}")

        try:
            key_bytes = base64.b64decode(self._keys[key_id], validate=True)
        except (binascii.Error, ValueError, TypeError):
            raise ConfigError(f"Key {key_id!r} is not valid base64") from None

        if len(key_bytes) != AES_256_KEY_SIZE:
            raise ConfigError(
                f"Key {key_id!r} has invalid size: expected {AES_256_KEY_SIZE}, "
                f"got {len(key_bytes)}"
            )
        return SecureKey(key_bytes)

    def resolve_active(self) -> SecureKey:
        """Resolve the active key."""
        return self.resolve(self._active_key_id)

    def with_active_key(self, key_id: str, key: Optional[str] = None) -> KeySet:
        """
        Publish a new KeySet with a different active key.

        Args:
            key_id: New active key id
            key: Base64 key material, required if key_id is not yet configured

        Returns:
            New KeySet; this one is unchanged

        Raises:
            UnknownKeyError: If key_id is unknown and no key material is given
        """
        keys = dict(self._keys)
        if key is not None:
            keys[key_id] = key
        elif key_id not in keys:
            raise UnknownKeyError(f"Unknown key id: {key_id!r}")
        return KeySet(keys, active_key_id=key_id)
