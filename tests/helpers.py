"""Small helpers shared by test modules."""

from __future__ import annotations

from contentkit.domain.entities import ContentType


def field_id(content_type: ContentType, name: str) -> str:
    """Id of the named field."""
    for f in content_type.fields:
        if f.name == name:
            return f.id
    raise KeyError(name)
