"""Shared parsing helpers for runtime values and request options."""

from __future__ import annotations


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def normalize_identifier(value: object) -> str | None:
    """Normalize provider, voice, and mode identifiers to lowercase tokens."""

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    return normalized.lower()


def parse_positive_number(value: object, field_name: str) -> float:
    """Parse a strictly positive number from a textual or numeric value.

    Raises:
        ValueError: If the value is missing, boolean, non-numeric, or not positive.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a positive number.")
    if isinstance(value, int | float):
        parsed = float(value)
    else:
        normalized = normalize_optional_string(value)
        if normalized is None:
            raise ValueError(f"`{field_name}` must be a positive number.")
        try:
            parsed = float(normalized)
        except ValueError as exc:
            raise ValueError(f"`{field_name}` must be a positive number.") from exc
    if parsed <= 0:
        raise ValueError(f"`{field_name}` must be a positive number.")
    return parsed
