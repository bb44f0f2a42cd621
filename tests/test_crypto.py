"""Tests for encryption helpers."""

from __future__ import annotations

import pytest

from card_freezer.core.crypto import (
    ENCRYPT_CHUNK_BYTES,
    KEY_LENGTH,
    CryptoCodec,
    generate_pass_key,
    mask_card_number,
    resolve_pass_key,
)
from card_freezer.core.errors import (
    DecryptionError,
    MalformedEncryptedValueError,
    SecureStoreDecodeError,
    ValueTooLargeError,
)


def test_encrypt_decrypt_round_trip() -> None:
    codec = CryptoCodec.from_raw_key(generate_pass_key())

    encrypted = codec.encrypt("1234123412341234")

    assert encrypted != "1234123412341234"
    assert codec.decrypt(encrypted) == "1234123412341234"


def test_encrypt_uses_fresh_iv_each_call() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    first = codec.encrypt("4111")
    second = codec.encrypt("4111")

    assert first != second
    assert first.split("|")[0] != second.split("|")[0]
    assert codec.decrypt(first) == codec.decrypt(second) == "4111"


def test_injected_random_source_gives_repeatable_output() -> None:
    codec = CryptoCodec.from_raw_key("test key", random_bytes=lambda size: b"\x00" * size)

    first = codec.encrypt("12")

    assert first == codec.encrypt("12")
    assert first.startswith("AAAAAAAAAAAAAAAA|")


def test_encrypt_rejects_values_over_chunk_size() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    assert codec.decrypt(codec.encrypt("1" * ENCRYPT_CHUNK_BYTES)) == "1" * ENCRYPT_CHUNK_BYTES
    with pytest.raises(ValueTooLargeError):
        codec.encrypt("1" * (ENCRYPT_CHUNK_BYTES + 1))


def test_encrypted_length_does_not_depend_on_value_length() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    assert len(codec.encrypt("1234")) == len(codec.encrypt("1234123412341234"))


def test_trailing_spaces_are_lost_in_round_trip() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    assert codec.decrypt(codec.encrypt("Visa  ")) == "Visa"


def test_decrypt_without_separator_returns_none() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    assert codec.decrypt("bad text") is None
    assert codec.decrypt("|abc") is None
    with pytest.raises(MalformedEncryptedValueError):
        codec.decrypt_strict("bad text")


def test_decrypt_with_other_key_fails() -> None:
    encrypted = CryptoCodec.from_raw_key("first key").encrypt("1234")

    with pytest.raises(DecryptionError):
        CryptoCodec.from_raw_key("second key").decrypt(encrypted)


def test_decrypt_rejects_broken_base64() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    with pytest.raises(DecryptionError):
        codec.decrypt("not base64!|also not")


def test_secure_store_round_trip() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    encrypted = codec.pack_secure_store("1234123412341234", "3", "2010")

    assert codec.unpack_secure_store(encrypted) == ("03", "2010", "1234123412341234")


def test_secure_store_rejects_unexpected_plain_text() -> None:
    codec = CryptoCodec.from_raw_key("test key")

    with pytest.raises(SecureStoreDecodeError):
        codec.unpack_secure_store(codec.encrypt("12ab"))
    with pytest.raises(SecureStoreDecodeError):
        codec.unpack_secure_store("bad text")


def test_resolve_pass_key_lengths() -> None:
    default_key = resolve_pass_key("")
    long_key = resolve_pass_key("X" * KEY_LENGTH * 2)
    short_key = resolve_pass_key("X" * 8)

    assert len(default_key) == KEY_LENGTH
    assert default_key == resolve_pass_key(None)
    assert long_key == b"X" * KEY_LENGTH
    assert len(short_key) == KEY_LENGTH
    assert short_key.startswith(b"XXXXXXXX")
    assert short_key == resolve_pass_key(b"XXXXXXXX")


def test_codec_requires_full_length_key() -> None:
    with pytest.raises(ValueError):
        CryptoCodec(pass_key=b"short")


def test_mask_card_number() -> None:
    assert mask_card_number("1234123412341234") == "************1234"
    assert mask_card_number("12") == "**"
