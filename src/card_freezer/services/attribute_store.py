"""Attribute container with field-level encryption for card data."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any

from card_freezer.core.crypto import CryptoCodec, RandomBytes, mask_card_number, resolve_pass_key
from card_freezer.core.errors import (
    MalformedEncryptedValueError,
    MissingAttributeError,
    SecureStoreDecodeError,
    UnknownAttributeError,
    ValueTooLargeError,
)
from card_freezer.core.validation import digits_only
from card_freezer.models.attribute import Attribute, AttributeKey, resolve_attribute

logger = logging.getLogger(__name__)


class AttributeStore:
    """Holds card attributes and encrypts the sensitive ones for storage.

    Card number and expiration month/year are kept as plain text in memory
    and encrypted whenever they are read for storage. Values loaded from
    storage are decrypted on the way in.

    A store is owned by a single caller; it does no locking.
    """

    def __init__(
        self,
        values: Mapping[AttributeKey, Any] | None = None,
        pass_key: str | bytes | None = None,
        random_bytes: RandomBytes | None = None,
    ):
        self._values: dict[Attribute, Any] = {}
        self._pass_key: bytes | None = None
        self._codec: CryptoCodec | None = None
        self._random_bytes = random_bytes
        if pass_key is not None:
            self.set_pass_key(pass_key)
        for attribute, value in (values or {}).items():
            self.set(attribute, value)

    def __str__(self) -> str:
        lines = []
        for attribute, value in self._values.items():
            label = f"{attribute.label}:"
            if attribute.is_encrypted_at_rest:
                try:
                    encrypted = f"{self.get_for_storage(attribute)[:8]}..."
                except ValueTooLargeError:
                    encrypted = "n/a"
                lines.append(
                    f"{label:>15} {mask_card_number(str(value))} (Encrypted: {encrypted})"
                )
            else:
                lines.append(f"{label:>15} {value}")
        return "\n".join(lines) + "\n"

    def __getitem__(self, attribute: AttributeKey) -> Any:
        return self.get(attribute)

    def __setitem__(self, attribute: AttributeKey, value: Any) -> None:
        self.set(attribute, value)

    def __contains__(self, attribute: object) -> bool:
        resolved = resolve_attribute(attribute)  # type: ignore[arg-type]
        return resolved is not None and resolved in self._values

    # Pass key

    def set_pass_key(self, raw_key: str | bytes = "") -> "AttributeStore":
        """Set the key used for the secured attributes.

        Keys longer than 32 bytes are truncated and shorter keys are extended
        by hashing. An empty key selects the built-in development key.
        """
        self._pass_key = resolve_pass_key(raw_key)
        self._codec = None
        return self

    def get_pass_key(self) -> bytes:
        """Return the 32-byte pass key, deriving the default when unset."""
        if self._pass_key is None:
            self.set_pass_key()
        return self._pass_key  # type: ignore[return-value]

    @property
    def codec(self) -> CryptoCodec:
        if self._codec is None:
            self._codec = CryptoCodec(
                pass_key=self.get_pass_key(),
                random_bytes=self._random_bytes or os.urandom,
            )
        return self._codec

    # Reading and writing attributes

    def set(self, attribute: AttributeKey, value: Any, from_storage: bool = False) -> "AttributeStore":
        """Set an attribute value and return the store for chaining.

        The secure store attribute is always treated as encrypted and fills
        number, expiration month and expiration year. Numeric attributes are
        decrypted when ``from_storage`` is true and stripped to digits
        otherwise; a stored CCV that is not in wire form becomes None.
        Everything else is stored verbatim.
        """
        resolved = resolve_attribute(attribute)
        if resolved is None:
            raise UnknownAttributeError(f"Unknown attribute: {attribute!r}")

        if resolved is Attribute.SECURE_STORE:
            try:
                month, year, number = self.codec.unpack_secure_store(value)
            except SecureStoreDecodeError:
                logger.warning("Secure store value could not be decoded.")
                raise
            self._values[Attribute.EXPIRE_MONTH] = month
            self._values[Attribute.EXPIRE_YEAR] = year
            self._values[Attribute.NUMBER] = number
        elif resolved.is_numeric_only:
            if from_storage:
                self._values[resolved] = self._decrypt_stored(resolved, value)
            else:
                self._values[resolved] = digits_only(value)
        else:
            self._values[resolved] = value
        return self

    def _decrypt_stored(self, attribute: Attribute, value: Any) -> str | None:
        if not attribute.is_encrypted_at_rest:
            # CCV is written to storage in plain text.
            return self.codec.decrypt(value)
        try:
            return self.codec.decrypt_strict(value)
        except MalformedEncryptedValueError:
            logger.warning("Stored value for %s is not an encrypted value.", attribute.label)
            raise

    def get(self, attribute: AttributeKey | None = None, for_storage: bool = False) -> Any:
        """Return an attribute value, or None when unknown or unset.

        Without an attribute the secure store value is returned. The secure
        store can only be retrieved in its encrypted form.
        """
        resolved = Attribute.SECURE_STORE if attribute is None else resolve_attribute(attribute)
        if resolved is None:
            return None

        if resolved is Attribute.SECURE_STORE:
            for_storage = True

        if for_storage:
            return self.get_for_storage(resolved)
        return self._values.get(resolved)

    def get_for_storage(
        self,
        filter: AttributeKey | Iterable[AttributeKey] | None = None,
    ) -> Any:
        """Return values in the form they should be persisted in.

        With no filter, every stored attribute is returned as a dict. A single
        attribute returns its value directly and a collection of attributes
        returns a dict restricted to them. The secure store attribute returns
        the packed, encrypted number and expiration; number, expiration month
        and expiration year must all be set for that.
        """
        if filter is not None and not isinstance(filter, (str, int)):
            filter = list(filter) or None
        if filter is None:
            return {attribute: self._storage_value(attribute) for attribute in self._values}

        if isinstance(filter, (str, int)):
            resolved = resolve_attribute(filter)
            if resolved is Attribute.SECURE_STORE:
                return self._pack_secure_store()
            if resolved is None or resolved not in self._values:
                return None
            return self._storage_value(resolved)

        wanted = {resolve_attribute(item) for item in filter}
        return {
            attribute: self._storage_value(attribute)
            for attribute in self._values
            if attribute in wanted
        }

    def _storage_value(self, attribute: Attribute) -> Any:
        value = self._values[attribute]
        if attribute.is_encrypted_at_rest:
            return self.codec.encrypt(value)
        return value

    def _pack_secure_store(self) -> str:
        required = (Attribute.NUMBER, Attribute.EXPIRE_MONTH, Attribute.EXPIRE_YEAR)
        missing = [attribute.label for attribute in required if not self._values.get(attribute)]
        if missing:
            raise MissingAttributeError(
                f"Secure store requires {', '.join(missing)} to be set."
            )
        return self.codec.pack_secure_store(
            self._values[Attribute.NUMBER],
            self._values[Attribute.EXPIRE_MONTH],
            self._values[Attribute.EXPIRE_YEAR],
        )

    def get_values(
        self,
        attributes: Iterable[AttributeKey] | None = None,
        for_storage: bool = True,
    ) -> list[Any]:
        """Return values in the order requested; unset attributes give None."""
        keys = list(attributes or []) or list(self._values)
        values: list[Any] = []
        for key in keys:
            resolved = resolve_attribute(key)
            if resolved is None or resolved not in self._values:
                values.append(None)
            elif for_storage:
                values.append(self.get_for_storage(resolved))
            else:
                values.append(self.get(resolved))
        return values

    def from_array(
        self,
        values: Mapping[AttributeKey, Any],
        from_storage: bool = True,
    ) -> "AttributeStore":
        """Fill attributes from a mapping, decrypting secured values by default."""
        for attribute, value in values.items():
            self.set(attribute, value, from_storage)
        return self

    def to_array(
        self,
        for_storage: bool = False,
        labels: bool | Mapping[AttributeKey, str] = True,
    ) -> dict[Any, Any]:
        """Return every stored attribute as a dict.

        ``labels`` selects the keys: True for the default text labels, False
        for the Attribute members, or a mapping of attribute to custom label.
        Attributes missing from a custom mapping use their default label.
        """
        custom: dict[Attribute, str] = {}
        if isinstance(labels, Mapping):
            for key, label in labels.items():
                resolved = resolve_attribute(key)
                if resolved is not None:
                    custom[resolved] = label

        result: dict[Any, Any] = {}
        for attribute, value in self._values.items():
            if for_storage:
                value = self._storage_value(attribute)

            if attribute in custom:
                result[custom[attribute]] = value
            elif labels is not False:
                result[attribute.label] = value
            else:
                result[attribute] = value
        return result
