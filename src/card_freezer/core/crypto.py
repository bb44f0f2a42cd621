"""AES-256 helpers for encrypting card attributes before storage."""

from __future__ import annotations

import base64
import hashlib
import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import Callable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from card_freezer.core.errors import (
    DecryptionError,
    MalformedEncryptedValueError,
    SecureStoreDecodeError,
    ValueTooLargeError,
)
from card_freezer.core.validation import format_secure_store, parse_secure_store

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
KEY_LENGTH = 32
ENCRYPT_CHUNK_BYTES = 24
SEPARATOR = "|"

# Development fallback only; deployments must configure their own pass key.
_DEFAULT_KEY_SEED = b"card_freezer.core.crypto:default-pass-key"

RandomBytes = Callable[[int], bytes]


def _hex_digest(value: bytes) -> bytes:
    return hashlib.sha256(value).hexdigest().encode("ascii")


def resolve_pass_key(raw_key: str | bytes | None = None) -> bytes:
    """Normalize a raw pass key to exactly 32 bytes.

    An empty key falls back to a fixed built-in key. Longer keys are
    truncated; shorter keys are extended by appending the hex digest of the
    key so far until they are long enough, then truncated.
    """
    key = raw_key.encode("utf-8") if isinstance(raw_key, str) else bytes(raw_key or b"")
    if not key:
        logger.warning("No pass key configured; using the built-in development key.")
        key = _hex_digest(_DEFAULT_KEY_SEED)

    while len(key) < KEY_LENGTH:
        key += _hex_digest(key)
    return key[:KEY_LENGTH]


def generate_pass_key() -> str:
    """Generate a random 32-character pass key."""
    return secrets.token_hex(KEY_LENGTH // 2)


@dataclass
class CryptoCodec:
    """Encrypts short values in fixed-size chunks using AES-256-GCM."""

    pass_key: bytes
    random_bytes: RandomBytes = field(default=os.urandom, repr=False)

    def __post_init__(self) -> None:
        if len(self.pass_key) != KEY_LENGTH:
            raise ValueError(f"Pass key must be exactly {KEY_LENGTH} bytes.")

    @classmethod
    def from_raw_key(
        cls,
        raw_key: str | bytes | None = None,
        random_bytes: RandomBytes | None = None,
    ) -> "CryptoCodec":
        return cls(pass_key=resolve_pass_key(raw_key), random_bytes=random_bytes or os.urandom)

    def encrypt(self, plain_text: str) -> str:
        """Encrypt one value and return the ``base64(iv)|base64(cipher)`` pair."""
        data = str(plain_text).encode("utf-8")
        if len(data) > ENCRYPT_CHUNK_BYTES:
            raise ValueTooLargeError(
                f"Value to encrypt is too long. Should not exceed {ENCRYPT_CHUNK_BYTES} bytes."
            )
        # Uniform chunk size keeps cipher text length independent of the value.
        padded = data.ljust(ENCRYPT_CHUNK_BYTES, b" ")
        # Scrambles the digit patterns of numeric values before encryption.
        blob = base64.b64encode(padded)

        nonce = self.random_bytes(NONCE_SIZE)
        cipher_text = AESGCM(self.pass_key).encrypt(nonce, blob, None)
        return SEPARATOR.join(
            [
                base64.b64encode(nonce).decode("ascii"),
                base64.b64encode(cipher_text).decode("ascii"),
            ]
        )

    def decrypt(self, encrypted: str) -> str | None:
        """Decrypt an iv/cipher text pair.

        Returns None when the value has no separator so callers can branch on
        malformed input. Values that fail authentication raise DecryptionError.
        """
        if not isinstance(encrypted, str) or encrypted.find(SEPARATOR) <= 0:
            return None

        nonce_b64, cipher_b64 = encrypted.split(SEPARATOR, 2)[:2]
        try:
            nonce = base64.b64decode(nonce_b64, validate=True)
            cipher_text = base64.b64decode(cipher_b64, validate=True)
            blob = AESGCM(self.pass_key).decrypt(nonce, cipher_text, None)
            plain = base64.b64decode(blob, validate=True).decode("utf-8")
        except (InvalidTag, ValueError) as error:
            raise DecryptionError(
                "Encrypted value could not be decrypted with the current pass key."
            ) from error
        return plain.rstrip()

    def decrypt_strict(self, encrypted: str) -> str:
        """Decrypt like decrypt() but raise for a missing separator."""
        plain = self.decrypt(encrypted)
        if plain is None:
            raise MalformedEncryptedValueError(
                "Encrypted value must contain an iv and cipher text separated by '|'."
            )
        return plain

    def pack_secure_store(self, number: str, month: str, year: str) -> str:
        """Encrypt month, year and card number as a single value."""
        return self.encrypt(format_secure_store(number, month, year))

    def unpack_secure_store(self, encrypted: str) -> tuple[str, str, str]:
        """Decrypt a secure store value into (month, year, number)."""
        try:
            plain = self.decrypt(encrypted)
        except DecryptionError as error:
            raise SecureStoreDecodeError(_SECURE_STORE_MESSAGE) from error

        parts = parse_secure_store(plain) if plain else None
        if parts is None:
            raise SecureStoreDecodeError(_SECURE_STORE_MESSAGE)
        return parts


_SECURE_STORE_MESSAGE = (
    "Secure store value does not decrypt to the expected values. "
    "Perhaps the pass key has been changed?"
)


def mask_card_number(number: str) -> str:
    """Mask a card number except its last 4 digits."""
    if len(number) <= 4:
        return "*" * len(number)
    return "*" * (len(number) - 4) + number[-4:]
