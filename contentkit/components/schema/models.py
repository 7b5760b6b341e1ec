"""
Schema component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from contentkit.domain.entities import ContentType

# --- Validation Error ---


@dataclass(frozen=True)
class SchemaValidationError:
    """Content type validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class FieldInput:
    """One field definition as supplied by the caller."""

    name: str
    display_name: str
    field_type: str
    required: bool = False
    unique: bool = False
    default_value: str | None = None
    options: dict[str, Any] | None = None
    related_type: str | None = None
    # Only honoured on update, and only for ids already on the type
    id: str | None = None


@dataclass(frozen=True)
class CreateContentTypeInput:
    """Input for creating a content type."""

    name: str
    display_name: str
    description: str | None = None
    fields: list[FieldInput] = field(default_factory=list)


@dataclass(frozen=True)
class UpdateContentTypeInput:
    """
    Partial update of a content type.

    Only keys present in `updates` are applied. Recognised keys:
    name, display_name, description, fields (list[FieldInput]).
    """

    type_id: str
    updates: dict[str, Any]


# --- Output Models ---


@dataclass(frozen=True)
class ContentTypeOutput:
    """Output for content type operations."""

    content_type: ContentType | None = None
    errors: list[SchemaValidationError] = field(default_factory=list)
    success: bool = True
