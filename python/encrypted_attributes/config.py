"""
Configuration for encrypted attributes.

A config is immutable. Rotating the active key produces a new config
(and a new EncryptedAttributes built from it) instead of mutating the
one in use.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from dotenv import load_dotenv

from .errors import ConfigError
from .keys import KeySet

ENV_PREFIX = "ENCRYPTED_ATTRIBUTES_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})

# Option names accepted by from_options(), camelCase and snake_case.
_OPTION_ALIASES = {
    "attributes": "attributes",
    "keys": "keys",
    "keyId": "key_id",
    "key_id": "key_id",
    "verifyId": "verify_id",
    "verify_id": "verify_id",
    "idAttribute": "id_attribute",
    "id_attribute": "id_attribute",
}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True, repr=False)
class EncryptedAttributesConfig:
    """
    Settings for one EncryptedAttributes instance.

    Attributes:
        attributes: Dotted paths of the attributes to encrypt, in order
        keys: Key id to base64-encoded 32-byte key
        key_id: Active key id used for new encryptions
        verify_id: Bind every envelope to the owning record's id
        id_attribute: Path of the record id
    """

    attributes: Tuple[str, ...] = ()
    keys: Mapping[str, str] = field(default_factory=dict)
    key_id: Optional[str] = None
    verify_id: bool = False
    id_attribute: str = "id"

    def __post_init__(self) -> None:
        if isinstance(self.attributes, str):
            raise ConfigError("attributes must be a sequence of paths, not a string")
        attributes = tuple(self.attributes)
        for path in attributes:
            if not isinstance(path, str) or not path:
                raise ConfigError(f"Invalid attribute path: {path!r}")
        if not isinstance(self.keys, Mapping):
            raise ConfigError("keys must be a mapping of key id to base64 key")
        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "keys", MappingProxyType(dict(self.keys)))

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> EncryptedAttributesConfig:
        """
        Build a config from an options mapping.

        Accepts ``attributes``, ``keys``, ``keyId``, ``verifyId`` and
        ``idAttribute`` as well as their snake_case spellings.

        Raises:
            ConfigError: On unknown option names or an unparseable verifyId
        """
        kwargs = {}
        for name, value in options.items():
            if name not in _OPTION_ALIASES:
                raise ConfigError(f"Unknown option: {name!r}")
            kwargs[_OPTION_ALIASES[name]] = value
        if isinstance(kwargs.get("verify_id"), str):
            kwargs["verify_id"] = _parse_bool("verifyId", kwargs["verify_id"])
        elif "verify_id" in kwargs:
            kwargs["verify_id"] = bool(kwargs["verify_id"])
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> EncryptedAttributesConfig:
        """
        Build a config from environment variables.

        Loads ``env_file`` (or a ``.env`` found from the working directory)
        with python-dotenv first, without overriding variables already set.

        Variables:
            ENCRYPTED_ATTRIBUTES_ATTRIBUTES: Comma-separated attribute paths
            ENCRYPTED_ATTRIBUTES_KEYS: JSON object of key id to base64 key
            ENCRYPTED_ATTRIBUTES_KEY_ID: Active key id
            ENCRYPTED_ATTRIBUTES_VERIFY_ID: 1/true/yes/on to bind record ids
            ENCRYPTED_ATTRIBUTES_ID_ATTRIBUTE: Path of the record id

        Raises:
            ConfigError: If a variable cannot be parsed
        """
        if environ is None:
            if env_file is not None:
                load_dotenv(env_file)
            else:
                load_dotenv()
            environ = os.environ

        raw_attributes = environ.get(f"{ENV_PREFIX}ATTRIBUTES", "")
        attributes: Sequence[str] = [
            path.strip() for path in raw_attributes.split(",") if path.strip()
        ]

        raw_keys = environ.get(f"{ENV_PREFIX}KEYS", "{}")
        try:
            keys = json.loads(raw_keys)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{ENV_PREFIX}KEYS is not valid JSON: {e}") from None
        if not isinstance(keys, dict):
            raise ConfigError(f"{ENV_PREFIX}KEYS must be a JSON object")

        return cls(
            attributes=tuple(attributes),
            keys=keys,
            key_id=environ.get(f"{ENV_PREFIX}KEY_ID") or None,
            verify_id=_parse_bool(
                f"{ENV_PREFIX}VERIFY_ID", environ.get(f"{ENV_PREFIX}VERIFY_ID", "")
            ),
            id_attribute=environ.get(f"{ENV_PREFIX}ID_ATTRIBUTE") or "id",
        )

    def key_set(self) -> KeySet:
        """Build the immutable KeySet for this config."""
        return KeySet(self.keys, active_key_id=self.key_id)

    def with_active_key(
        self, key_id: str, key: Optional[str] = None
    ) -> EncryptedAttributesConfig:
        """
        Return a new config with a different active key.

        Args:
            key_id: New active key id
            key: Base64 key material, required if key_id is not yet configured
        """
        key_set = self.key_set().with_active_key(key_id, key)
        keys = dict(self.keys)
        if key is not None:
            keys[key_id] = key
        return replace(self, keys=keys, key_id=key_set.active_key_id)

    def __repr__(self) -> str:
        """Redacted representation listing key ids only."""
        return (
            f"EncryptedAttributesConfig(attributes={self.attributes!r}, "
            f"key_ids={sorted(self.keys)!r}, key_id={self.key_id!r}, "
            f"verify_id={self.verify_id!r}, id_attribute={self.id_attribute!r})"
        )
