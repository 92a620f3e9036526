"""
Encrypted Attributes Library

Field-level AES-256-GCM encryption for selected attributes of a record,
producing self-describing, tamper-evident envelope strings.

Quick Start
-----------
```python
from encrypted_attributes import EncryptedAttributes, EncryptedAttributesConfig, generate_key

config = EncryptedAttributesConfig(
    attributes=("secret", "profile.ssn"),
    keys={"k1": generate_key()},
    key_id="k1",
    verify_id=True,
)
encrypted = EncryptedAttributes(config)

user = {"id": "42", "secret": "hello", "profile": {"ssn": "123-45-6789"}}
encrypted.encrypt_all(user)   # user["secret"] is now an envelope string
encrypted.decrypt_all(user)   # user["secret"] == "hello" again

# Key rotation: publish a new config, old keys still decrypt
rotated = EncryptedAttributes(config.with_active_key("k2", generate_key()))
rotated.rotate_all(user)
```

Envelope Format
---------------
``<base64(aad)>$<base64(nonce)>$<base64(ciphertext)>$<base64(tag)>``
with the tag's padding stripped and AAD ``aes-256-gcm$<id-or-empty>$<keyId>``.

Key Features
------------
- **AES-256-GCM**: Industry-standard authenticated encryption
- **Idempotent**: Encrypting an envelope or None returns it unchanged
- **Record Binding**: Optional binding of ciphertext to the record id
- **Key Rotation**: Key id embedded in every envelope, immutable key sets
- **All-or-Nothing**: A failing attribute leaves the record untouched
"""

__version__ = "0.1.0"

# =============================================================================
# Crypto Exports
# =============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AeadProvider,
    AesGcmProvider,
    SecureKey,
    generate_key,
    generate_random_bytes,
)

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    AuthenticationError,
    ConfigError,
    CryptoError,
    EncryptedAttributeError,
    FormatError,
    IdMismatchError,
    MissingIdError,
    UnknownKeyError,
    ValidationError,
)

# =============================================================================
# Envelope Exports
# =============================================================================

from .aad import ALGORITHM, AssociatedData
from .envelope import ENCRYPTED_PREFIX, Envelope, is_encrypted

# =============================================================================
# Attribute Encryption Exports (Primary API)
# =============================================================================

from .accessor import DottedPathAccessor, PathAccessor
from .cipher import AttributeCipher
from .config import EncryptedAttributesConfig
from .keys import KeySet
from .processor import EncryptedAttributes

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AeadProvider",
    "AesGcmProvider",
    "SecureKey",
    "generate_key",
    "generate_random_bytes",
    # Errors
    "EncryptedAttributeError",
    "ValidationError",
    "MissingIdError",
    "UnknownKeyError",
    "FormatError",
    "IdMismatchError",
    "CryptoError",
    "AuthenticationError",
    "ConfigError",
    # Envelope
    "ALGORITHM",
    "AssociatedData",
    "ENCRYPTED_PREFIX",
    "Envelope",
    "is_encrypted",
    # Attribute encryption (Primary API)
    "AttributeCipher",
    "DottedPathAccessor",
    "EncryptedAttributes",
    "EncryptedAttributesConfig",
    "KeySet",
    "PathAccessor",
]
