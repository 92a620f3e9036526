"""
Tests for the benchmark CLI.
"""

from __future__ import annotations

import json

import pytest

from encrypted_attributes.benchmark import run_benchmark


@pytest.fixture
def bench_env(monkeypatch: pytest.MonkeyPatch, zero_key: str) -> pytest.MonkeyPatch:
    """Environment for a small benchmark run with key k1 active."""
    monkeypatch.setenv("BENCHMARK_RECORDS", "3")
    monkeypatch.setenv("ENCRYPTED_ATTRIBUTES_ATTRIBUTES", "email,profile.ssn")
    monkeypatch.setenv("ENCRYPTED_ATTRIBUTES_KEYS", json.dumps({"k1": zero_key}))
    monkeypatch.setenv("ENCRYPTED_ATTRIBUTES_KEY_ID", "k1")
    monkeypatch.setenv("ENCRYPTED_ATTRIBUTES_VERIFY_ID", "true")
    monkeypatch.setenv("ENCRYPTED_ATTRIBUTES_ID_ATTRIBUTE", "id")
    return monkeypatch


def test_completes_with_configured_keys(
    bench_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    run_benchmark()

    out = capsys.readouterr().out
    assert "[OK] Encrypted 6 attributes" in out
    assert "k1 -> bench-rotated" in out
    assert "BENCHMARK COMPLETE" in out


def test_active_key_missing_from_keys(
    bench_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    bench_env.setenv("ENCRYPTED_ATTRIBUTES_KEY_ID", "k2")

    with pytest.raises(SystemExit) as exc_info:
        run_benchmark()

    assert exc_info.value.code == 1
    assert "ERROR: ENCRYPTED_ATTRIBUTES_KEY_ID 'k2'" in capsys.readouterr().out


def test_encryption_error_is_reported(
    bench_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    # synthetic records only carry "id"
    bench_env.setenv("ENCRYPTED_ATTRIBUTES_ID_ATTRIBUTE", "uuid")

    with pytest.raises(SystemExit) as exc_info:
        run_benchmark()

    assert exc_info.value.code == 1
    assert "ERROR: Cannot encrypt without 'uuid' attribute" in capsys.readouterr().out
