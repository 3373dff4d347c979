from __future__ import annotations

from typing import Any


def sanitize_text(value: str) -> str:
    stripped = value.strip()
    return "".join(ch for ch in stripped if ch.isprintable() or ch in {"\n", "\t"})


def sanitize_string_fields(data: Any, field_names: set[str]) -> Any:
    """Strip and drop control characters from the named string fields."""
    if not isinstance(data, dict):
        return data
    sanitized = dict(data)
    for field_name in field_names & sanitized.keys():
        current = sanitized[field_name]
        if isinstance(current, str):
            sanitized[field_name] = sanitize_text(current)
    return sanitized
