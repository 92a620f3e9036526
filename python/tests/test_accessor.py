"""
Tests for DottedPathAccessor.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from encrypted_attributes import DottedPathAccessor


@pytest.fixture
def accessor() -> DottedPathAccessor:
    return DottedPathAccessor()


def test_get_nested(accessor: DottedPathAccessor) -> None:
    record = {"a": {"b": [{"c": "x"}]}}
    assert accessor.get(record, "a.b.0.c") == "x"


def test_get_missing_returns_none(accessor: DottedPathAccessor) -> None:
    record = {"a": {"b": None}}
    assert accessor.get(record, "a.b.c") is None
    assert accessor.get(record, "z") is None
    assert accessor.get({"l": []}, "l.3") is None
    assert accessor.get({"l": []}, "l.x") is None


def test_get_object_attributes(accessor: DottedPathAccessor) -> None:
    record = SimpleNamespace(profile=SimpleNamespace(ssn="1"))
    assert accessor.get(record, "profile.ssn") == "1"
    assert accessor.get(record, "profile.missing") is None


def test_set_creates_intermediate_dicts(accessor: DottedPathAccessor) -> None:
    record: dict = {}
    accessor.set(record, "a.b.c", "x")
    assert record == {"a": {"b": {"c": "x"}}}


def test_set_list_index(accessor: DottedPathAccessor) -> None:
    record = {"items": ["a", "b"]}
    accessor.set(record, "items.1", "z")
    assert record == {"items": ["a", "z"]}


def test_set_object_attribute(accessor: DottedPathAccessor) -> None:
    record = SimpleNamespace(profile=SimpleNamespace(ssn="1"))
    accessor.set(record, "profile.ssn", "2")
    assert record.profile.ssn == "2"


def test_empty_path_is_rejected(accessor: DottedPathAccessor) -> None:
    with pytest.raises(ValueError):
        accessor.get({}, "")
