"""
JSON rendering of domain records for responses (camelCase keys).
"""

from __future__ import annotations

from typing import Any

from contentkit.domain.entities import ContentEntry, ContentType
from contentkit.domain.field_types import format_value


def render_type(content_type: ContentType) -> dict[str, Any]:
    return content_type.model_dump(mode="json", by_alias=True)


def render_entry(entry: ContentEntry, content_type: ContentType | None) -> dict[str, Any]:
    """
    Dump an entry, resolving each value's field through the content type.

    Values whose field is gone from the type render with `field: None`
    and their raw value as display text.
    """
    data = entry.model_dump(mode="json", by_alias=True)
    for rendered, fv in zip(data["fieldValues"], entry.field_values, strict=True):
        f = content_type.field_by_id(fv.field_id) if content_type else None
        if f is None:
            rendered["field"] = None
            rendered["displayValue"] = fv.value
            continue
        rendered["field"] = {
            "name": f.name,
            "displayName": f.display_name,
            "fieldType": f.field_type.value,
        }
        rendered["displayValue"] = format_value(f.field_type, fv.value)
    return data
