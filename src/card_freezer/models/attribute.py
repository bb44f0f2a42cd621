"""Credit card and billing attribute definitions."""

from __future__ import annotations

import re
from enum import Enum, IntEnum
from typing import Union


class AttributeKind(Enum):
    """How plain-text values for an attribute are normalized."""

    NUMERIC = "numeric"
    TEXT = "text"


class Attribute(IntEnum):
    """Stable attribute ids used as keys in a store."""

    NUMBER = 1
    EXPIRE_MONTH = 2
    EXPIRE_YEAR = 3
    CCV = 4
    FIRST_NAME = 5
    LAST_NAME = 6
    ADDRESS = 7
    CITY = 8
    STATE = 9
    POSTAL_CODE = 10
    COUNTRY = 11
    PHONE = 12
    TYPE = 13
    # Card number and expiration packed into one encrypted value.
    SECURE_STORE = 14

    @property
    def label(self) -> str:
        return TEXT_LABELS[self]

    @property
    def kind(self) -> AttributeKind:
        if self in NUMERIC_ATTRIBUTES:
            return AttributeKind.NUMERIC
        return AttributeKind.TEXT

    @property
    def is_numeric_only(self) -> bool:
        return self.kind is AttributeKind.NUMERIC

    @property
    def is_encrypted_at_rest(self) -> bool:
        return self in ENCRYPTED_ATTRIBUTES


AttributeKey = Union[Attribute, int, str]


TEXT_LABELS: dict[Attribute, str] = {
    Attribute.NUMBER: "card_number",
    Attribute.SECURE_STORE: "secure_store",
    Attribute.EXPIRE_MONTH: "expire_month",
    Attribute.EXPIRE_YEAR: "expire_year",
    Attribute.CCV: "card_ccv",
    Attribute.TYPE: "card_type",
    Attribute.FIRST_NAME: "first_name",
    Attribute.LAST_NAME: "last_name",
    Attribute.ADDRESS: "address",
    Attribute.CITY: "city",
    Attribute.STATE: "state",
    Attribute.POSTAL_CODE: "postal_code",
    Attribute.COUNTRY: "country",
    Attribute.PHONE: "phone",
}

NUMERIC_ATTRIBUTES = frozenset(
    {
        Attribute.NUMBER,
        Attribute.EXPIRE_MONTH,
        Attribute.EXPIRE_YEAR,
        Attribute.CCV,
    }
)

ENCRYPTED_ATTRIBUTES = frozenset(
    {
        Attribute.NUMBER,
        Attribute.EXPIRE_MONTH,
        Attribute.EXPIRE_YEAR,
    }
)

_UNDERSCORE_LETTER = re.compile(r"_([a-z])")


def camel_case(label: str) -> str:
    """Convert ``card_number`` into ``cardNumber``."""
    return _UNDERSCORE_LETTER.sub(lambda match: match.group(1).upper(), label)


def _build_label_index() -> dict[str, Attribute]:
    index: dict[str, Attribute] = {}
    for attribute, label in TEXT_LABELS.items():
        index[label.lower()] = attribute
        index[camel_case(label).lower()] = attribute
    return index


_LABEL_INDEX = _build_label_index()


def resolve_attribute(key: AttributeKey | None) -> Attribute | None:
    """Resolve an attribute member, numeric id or text label.

    Labels match case-insensitively and also in their camelCase form, so
    ``"card_number"``, ``"cardNumber"`` and ``"CARD_NUMBER"`` all resolve to
    ``Attribute.NUMBER``. Unknown keys return None.
    """
    if key is None or isinstance(key, bool):
        return None
    if isinstance(key, Attribute):
        return key
    if isinstance(key, int):
        try:
            return Attribute(key)
        except ValueError:
            return None

    text = str(key).strip()
    if text.isdigit():
        return resolve_attribute(int(text))
    return _LABEL_INDEX.get(text.lower())
