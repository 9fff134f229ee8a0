from __future__ import annotations

from typing import Any


def sanitize_text(value: str) -> str:
    stripped = value.strip()
    return "".join(ch for ch in stripped if ch.isprintable() or ch in {"\n", "\t"})


def sanitize_payload(
    data: Any,
    *,
    text_fields: set[str],
    choice_fields: frozenset[str] = frozenset(),
) -> Any:
    """Strip control characters from free text and normalize enum casing."""
    if not isinstance(data, dict):
        return data
    sanitized = dict(data)
    for field_name in text_fields | choice_fields:
        current = sanitized.get(field_name)
        if not isinstance(current, str):
            continue
        cleaned = sanitize_text(current)
        sanitized[field_name] = (
            cleaned.lower() if field_name in choice_fields else cleaned
        )
    return sanitized
