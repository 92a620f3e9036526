"""
Tests for EncryptedAttributesConfig.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from encrypted_attributes import ConfigError, EncryptedAttributesConfig, KeySet


def test_defaults() -> None:
    config = EncryptedAttributesConfig()
    assert config.attributes == ()
    assert dict(config.keys) == {}
    assert config.key_id is None
    assert config.verify_id is False
    assert config.id_attribute == "id"


def test_is_immutable(zero_key: str) -> None:
    keys = {"k1": zero_key}
    config = EncryptedAttributesConfig(attributes=["a"], keys=keys, key_id="k1")
    keys["k2"] = zero_key

    assert config.attributes == ("a",)
    assert "k2" not in config.keys
    with pytest.raises(TypeError):
        config.keys["k3"] = zero_key  # type: ignore[index]


@pytest.mark.parametrize("attributes", ["secret", ["ok", ""], [None]])
def test_rejects_bad_attributes(attributes: object) -> None:
    with pytest.raises(ConfigError):
        EncryptedAttributesConfig(attributes=attributes)  # type: ignore[arg-type]


def test_from_options_accepts_both_spellings(zero_key: str) -> None:
    camel = EncryptedAttributesConfig.from_options(
        {"attributes": ["a"], "keys": {"k1": zero_key}, "keyId": "k1", "verifyId": 1}
    )
    snake = EncryptedAttributesConfig.from_options(
        {"attributes": ["a"], "keys": {"k1": zero_key}, "key_id": "k1", "verify_id": True}
    )
    assert camel == snake
    assert camel.verify_id is True


@pytest.mark.parametrize(
    "raw, expected", [("false", False), ("0", False), ("", False), ("true", True), ("on", True)]
)
def test_from_options_parses_string_verify_id(raw: str, expected: bool) -> None:
    config = EncryptedAttributesConfig.from_options({"verifyId": raw})
    assert config.verify_id is expected


def test_from_options_rejects_unparseable_verify_id() -> None:
    with pytest.raises(ConfigError, match="verifyId"):
        EncryptedAttributesConfig.from_options({"verifyId": "maybe"})


def test_from_options_rejects_unknown_option() -> None:
    with pytest.raises(ConfigError, match="keyid"):
        EncryptedAttributesConfig.from_options({"keyid": "k1"})


def test_from_env(zero_key: str) -> None:
    environ = {
        "ENCRYPTED_ATTRIBUTES_ATTRIBUTES": "secret, profile.ssn,",
        "ENCRYPTED_ATTRIBUTES_KEYS": json.dumps({"k1": zero_key}),
        "ENCRYPTED_ATTRIBUTES_KEY_ID": "k1",
        "ENCRYPTED_ATTRIBUTES_VERIFY_ID": "true",
    }
    config = EncryptedAttributesConfig.from_env(environ=environ)

    assert config.attributes == ("secret", "profile.ssn")
    assert dict(config.keys) == {"k1": zero_key}
    assert config.key_id == "k1"
    assert config.verify_id is True


def test_from_env_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, zero_key: str
) -> None:
    for name in ("ATTRIBUTES", "KEYS", "KEY_ID", "VERIFY_ID", "ID_ATTRIBUTE"):
        # setenv first so monkeypatch also removes what load_dotenv writes
        monkeypatch.setenv(f"ENCRYPTED_ATTRIBUTES_{name}", "")
        monkeypatch.delenv(f"ENCRYPTED_ATTRIBUTES_{name}")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "ENCRYPTED_ATTRIBUTES_ATTRIBUTES=secret\n"
        f"ENCRYPTED_ATTRIBUTES_KEYS='{json.dumps({'k1': zero_key})}'\n"
        "ENCRYPTED_ATTRIBUTES_KEY_ID=k1\n"
        "ENCRYPTED_ATTRIBUTES_ID_ATTRIBUTE=uuid\n"
    )

    config = EncryptedAttributesConfig.from_env(env_file)

    assert config.attributes == ("secret",)
    assert config.key_id == "k1"
    assert config.verify_id is False
    assert config.id_attribute == "uuid"
    assert config.key_set().resolve("k1").as_bytes() == bytes(32)


@pytest.mark.parametrize(
    "environ",
    [
        {"ENCRYPTED_ATTRIBUTES_KEYS": "{not json"},
        {"ENCRYPTED_ATTRIBUTES_KEYS": "[]"},
        {"ENCRYPTED_ATTRIBUTES_VERIFY_ID": "maybe"},
    ],
)
def test_from_env_rejects_bad_values(environ: dict) -> None:
    with pytest.raises(ConfigError):
        EncryptedAttributesConfig.from_env(environ=environ)


def test_key_set(zero_key: str) -> None:
    config = EncryptedAttributesConfig(keys={"k1": zero_key}, key_id="k1")
    key_set = config.key_set()
    assert isinstance(key_set, KeySet)
    assert key_set.active_key_id == "k1"


def test_with_active_key(zero_key: str) -> None:
    config = EncryptedAttributesConfig(attributes=["a"], keys={"k1": zero_key}, key_id="k1")
    rotated = config.with_active_key("k2", zero_key)

    assert rotated.key_id == "k2"
    assert set(rotated.keys) == {"k1", "k2"}
    assert rotated.attributes == ("a",)
    assert config.key_id == "k1"


def test_repr_hides_key_material(zero_key: str) -> None:
    config = EncryptedAttributesConfig(keys={"k1": zero_key}, key_id="k1")
    assert zero_key not in repr(config)
    assert "k1" in repr(config)
