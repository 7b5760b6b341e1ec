"""
Entries component input/output models.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from contentkit.components.validation import FieldError, FieldValueInput
from contentkit.domain.entities import ContentEntry

NOT_FOUND = "not_found"
STATUS_CONFLICT = "status_conflict"

# Keys honoured by UpdateEntryInput.updates
UPDATABLE_KEYS = (
    "slug",
    "field_values",
    "status",
    "published_at",
    "scheduled_at",
    "author_id",
)


def coerce_value(raw: Any) -> str:
    """Strings pass through, None is empty, everything else is stored as JSON."""
    if isinstance(raw, str):
        return raw
    if raw is None:
        return ""
    return json.dumps(raw)


def field_value(field_id: str, raw: Any) -> FieldValueInput:
    """Build a FieldValueInput from an arbitrary JSON value."""
    return FieldValueInput(field_id=field_id, value=coerce_value(raw))


# --- Input Models ---


@dataclass(frozen=True)
class CreateEntryInput:
    """Input for creating an entry."""

    content_type_id: str
    field_values: list[FieldValueInput] = field(default_factory=list)
    slug: str | None = None
    status: str | None = None
    published_at: datetime | None = None
    scheduled_at: datetime | None = None
    author_id: str | None = None


@dataclass(frozen=True)
class UpdateEntryInput:
    """
    Partial update of an entry.

    Only keys present in `updates` change; an explicit None clears the
    attribute. `field_values` replaces the whole value set.

    When `expected_status` is set the update applies only while the
    stored entry is in one of those statuses.
    """

    entry_id: str
    updates: dict[str, Any]
    expected_status: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ListEntriesInput:
    """Filters for listing the entries of one content type."""

    content_type_id: str
    status: str | None = None
    search: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class EntryOutput:
    """Output for entry writes."""

    entry: ContentEntry | None = None
    errors: list[FieldError] = field(default_factory=list)
    success: bool = True

    @property
    def not_found(self) -> bool:
        return any(e.code == NOT_FOUND for e in self.errors)
