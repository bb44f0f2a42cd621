"""Normalization rules for card attribute values."""

from __future__ import annotations

import re

NON_DIGIT_PATTERN = re.compile(r"[^\d]")
SECURE_STORE_PATTERN = re.compile(r"^(\d{2})(\d{4})(.*)$", re.DOTALL)


def digits_only(value: object) -> str:
    """Strip every non-digit character; nothing is rejected."""
    if value is None:
        return ""
    return NON_DIGIT_PATTERN.sub("", str(value))


def parse_secure_store(plain: str) -> tuple[str, str, str] | None:
    """Split packed secure store text into (month, year, number)."""
    if not plain:
        return None
    match = SECURE_STORE_PATTERN.match(plain)
    if match is None:
        return None
    month, year, number = match.groups()
    return month, year, number


def format_secure_store(number: str, month: str, year: str) -> str:
    """Pack number and expiration as 2-digit month, 4-digit year, number."""
    month_digits = digits_only(month)
    year_digits = digits_only(year)
    if not month_digits or not year_digits:
        raise ValueError("Expiration month and year must contain digits.")
    return f"{int(month_digits):02d}{int(year_digits):04d}{number}"
