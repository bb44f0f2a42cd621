"""Exception types raised by the card freezer core."""

from __future__ import annotations


class CardFreezerError(Exception):
    """Base class for every card freezer error."""


class ValueTooLargeError(CardFreezerError, ValueError):
    """Plain text does not fit in a single encryption chunk."""


class MalformedEncryptedValueError(CardFreezerError, ValueError):
    """Encrypted value is missing the iv/cipher text separator."""


class DecryptionError(CardFreezerError, ValueError):
    """Encrypted value could not be authenticated or decoded."""


class SecureStoreDecodeError(CardFreezerError, ValueError):
    """Secure store value did not decrypt to month, year and number."""


class UnknownAttributeError(CardFreezerError, KeyError):
    """Attribute id or label does not match any known attribute."""


class MissingAttributeError(CardFreezerError, KeyError):
    """A required attribute has not been set."""
