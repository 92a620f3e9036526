"""
Encrypted Attributes Benchmark CLI.

Usage:
    encrypted-attributes-benchmark

Or run directly:
    python -m encrypted_attributes.benchmark

Configuration:
    Keys and attributes are read from ENCRYPTED_ATTRIBUTES_* variables
    (environment or .env file). Without keys, a throwaway key is generated.
    BENCHMARK_RECORDS sets the record count and skips the prompt.
"""

from __future__ import annotations

import os
import sys
import time
from typing import Dict, List

from dotenv import load_dotenv

from encrypted_attributes.accessor import DottedPathAccessor
from encrypted_attributes.config import EncryptedAttributesConfig
from encrypted_attributes.crypto import generate_key
from encrypted_attributes.envelope import Envelope, is_encrypted
from encrypted_attributes.errors import EncryptedAttributeError
from encrypted_attributes.processor import EncryptedAttributes

DEFAULT_ATTRIBUTES = ("email", "profile.ssn", "profile.notes")


def _make_records(count: int) -> List[Dict[str, object]]:
    return [
        {
            "id": str(i),
            "email": f"user{i}@example.com",
            "profile": {"ssn": f"{i:09d}", "notes": "Sensitive data " * 4},
        }
        for i in range(count)
    ]


def _rate(count: int, duration: float) -> str:
    return f"{count / duration:.2f}" if duration > 0 else "inf"


def run_benchmark() -> None:
    """Run the encrypted attributes benchmark."""
    print("=== Encrypted Attributes Benchmark ===\n")

    # Load environment variables
    load_dotenv()

    try:
        config = EncryptedAttributesConfig.from_env(environ=os.environ)
    except EncryptedAttributeError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if not config.keys:
        config = EncryptedAttributesConfig(
            attributes=config.attributes or DEFAULT_ATTRIBUTES,
            keys={"bench-1": generate_key()},
            key_id="bench-1",
            verify_id=True,
        )
        print("[STARTUP] No keys configured, generated throwaway key 'bench-1'")
    elif not config.attributes or config.key_id is None:
        print("ERROR: ENCRYPTED_ATTRIBUTES_ATTRIBUTES and ENCRYPTED_ATTRIBUTES_KEY_ID must be set")
        sys.exit(1)
    elif config.key_id not in config.keys:
        print(f"ERROR: ENCRYPTED_ATTRIBUTES_KEY_ID {config.key_id!r} is not in ENCRYPTED_ATTRIBUTES_KEYS")
        sys.exit(1)

    # Get test quantity from environment or user
    raw_quantity = os.environ.get("BENCHMARK_RECORDS")
    try:
        if raw_quantity is None:
            raw_quantity = input("Enter number of records to test (default: 1000): ").strip()
        test_quantity = int(raw_quantity) if raw_quantity else 1000
    except ValueError:
        test_quantity = 1000
    print(f"Testing with {test_quantity} records, attributes: {', '.join(config.attributes)}\n")

    try:
        _run_demos(config, test_quantity)
    except EncryptedAttributeError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


def _run_demos(config: EncryptedAttributesConfig, test_quantity: int) -> None:
    """Encrypt, rotate and decrypt synthetic records, printing timings."""
    service = EncryptedAttributes(config)
    records = _make_records(test_quantity)
    attribute_ops = test_quantity * len(config.attributes)

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    # ========================================================================
    # Demo 1: Encrypt all records
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 1: Encrypt Records                                          |")
    print("+" + "-" * 68 + "+")

    encrypt_start = time.perf_counter()
    for record in records:
        service.encrypt_all(record)
    encrypt_duration = time.perf_counter() - encrypt_start

    print(f"[OK] Encrypted {attribute_ops} attributes")
    print(f"[PERF] Time: {encrypt_duration * 1000:.3f}ms | Rate: {_rate(attribute_ops, encrypt_duration)} ops/sec\n")

    # ========================================================================
    # Demo 2: Key rotation
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 2: Key Rotation                                             |")
    print("+" + "-" * 68 + "+")

    old_key_id = config.key_id
    rotated = EncryptedAttributes(config.with_active_key("bench-rotated", generate_key()))

    rotate_start = time.perf_counter()
    for record in records:
        rotated.rotate_all(record)
    rotate_duration = time.perf_counter() - rotate_start

    sample_value = DottedPathAccessor().get(records[0], config.attributes[0]) if records else None
    key_id = Envelope.decode(sample_value).key_id if is_encrypted(sample_value) else "-"
    print(f"[OK] Rotated {attribute_ops} attributes: {old_key_id} -> {key_id}")
    print(f"[PERF] Time: {rotate_duration * 1000:.3f}ms | Rate: {_rate(attribute_ops, rotate_duration)} ops/sec\n")

    # ========================================================================
    # Demo 3: Decrypt all records
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 3: Decrypt Records                                          |")
    print("+" + "-" * 68 + "+")

    decrypt_start = time.perf_counter()
    for record in records:
        rotated.decrypt_all(record)
    decrypt_duration = time.perf_counter() - decrypt_start

    print(f"[OK] Decrypted {attribute_ops} attributes")
    print(f"[PERF] Time: {decrypt_duration * 1000:.3f}ms | Rate: {_rate(attribute_ops, decrypt_duration)} ops/sec\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("+- Performance Summary ---------------------------------------------+")
    print("|                                                                    |")

    enc_rate = _rate(attribute_ops, encrypt_duration)
    print(f"|  Encryption:        {enc_rate} ops/sec" + " " * (37 - len(enc_rate)) + "|")

    rot_rate = _rate(attribute_ops, rotate_duration)
    print(f"|  Rotation:          {rot_rate} ops/sec" + " " * (37 - len(rot_rate)) + "|")

    dec_rate = _rate(attribute_ops, decrypt_duration)
    print(f"|  Decryption:        {dec_rate} ops/sec" + " " * (37 - len(dec_rate)) + "|")

    print("|                                                                    |")
    print("+--------------------------------------------------------------------+")

    print("\nTest Configuration:")
    print(f"  - Total records tested: {test_quantity}")
    print(f"  - Attributes per record: {len(config.attributes)}")
    print(f"  - Record id binding: {'on' if config.verify_id else 'off'}")
    print("  - Crypto: AES-256-GCM with AEAD")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main() -> None:
    """CLI entry point for encrypted-attributes-benchmark command."""
    run_benchmark()


if __name__ == "__main__":
    main()
