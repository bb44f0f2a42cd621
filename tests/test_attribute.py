"""Tests for attribute definitions and lookup."""

from __future__ import annotations

from card_freezer.models.attribute import Attribute, AttributeKind, camel_case, resolve_attribute


def test_resolve_attribute_by_id_and_label() -> None:
    assert resolve_attribute(Attribute.NUMBER) is Attribute.NUMBER
    assert resolve_attribute(1) is Attribute.NUMBER
    assert resolve_attribute("1") is Attribute.NUMBER
    assert resolve_attribute("card_number") is Attribute.NUMBER
    assert resolve_attribute("cardNumber") is Attribute.NUMBER
    assert resolve_attribute("CARD_NUMBER") is Attribute.NUMBER
    assert resolve_attribute("secureStore") is Attribute.SECURE_STORE


def test_resolve_attribute_unknown() -> None:
    assert resolve_attribute(0) is None
    assert resolve_attribute("nickname") is None
    assert resolve_attribute(None) is None


def test_classification() -> None:
    encrypted = {attribute for attribute in Attribute if attribute.is_encrypted_at_rest}
    numeric = {attribute for attribute in Attribute if attribute.is_numeric_only}

    assert encrypted == {Attribute.NUMBER, Attribute.EXPIRE_MONTH, Attribute.EXPIRE_YEAR}
    assert numeric == encrypted | {Attribute.CCV}
    assert Attribute.FIRST_NAME.kind is AttributeKind.TEXT


def test_camel_case() -> None:
    assert camel_case("postal_code") == "postalCode"
    assert camel_case("city") == "city"
