"""
Request body models. Wire keys are camelCase; unknown keys are ignored.

Partial-update models rely on `model_fields_set`: a key that was sent
(even as null) is applied, a key that was not sent is left alone.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict

from contentkit.components.entries import field_value
from contentkit.components.schema import FieldInput
from contentkit.components.validation import FieldValueInput
from contentkit.domain.entities import CamelModel


class _Body(CamelModel):
    model_config = ConfigDict(extra="ignore")


# --- Entries ---


class FieldValueBody(_Body):
    field_id: str
    value: Any = None

    def to_input(self) -> FieldValueInput:
        return field_value(self.field_id, self.value)


class CreateEntryBody(_Body):
    slug: str | None = None
    field_values: list[FieldValueBody] = []
    status: str | None = None
    published_at: datetime | None = None
    scheduled_at: datetime | None = None
    author_id: str | None = None


class UpdateEntryBody(_Body):
    slug: str | None = None
    field_values: list[FieldValueBody] | None = None
    status: str | None = None
    published_at: datetime | None = None
    scheduled_at: datetime | None = None
    author_id: str | None = None

    def to_updates(self) -> dict[str, Any]:
        """Only the keys the caller actually sent."""
        updates: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "field_values":
                value = [fv.to_input() for fv in value or []]
            updates[name] = value
        return updates


# --- Content types ---


class FieldBody(_Body):
    id: str | None = None
    name: str
    display_name: str
    field_type: str
    required: bool = False
    unique: bool = False
    default_value: str | None = None
    options: dict[str, Any] | None = None
    related_type: str | None = None

    def to_input(self) -> FieldInput:
        return FieldInput(
            id=self.id,
            name=self.name,
            display_name=self.display_name,
            field_type=self.field_type,
            required=self.required,
            unique=self.unique,
            default_value=self.default_value,
            options=self.options,
            related_type=self.related_type,
        )


class CreateContentTypeBody(_Body):
    name: str
    display_name: str
    description: str | None = None
    fields: list[FieldBody] = []


class UpdateContentTypeBody(_Body):
    name: str | None = None
    display_name: str | None = None
    description: str | None = None
    fields: list[FieldBody] | None = None

    def to_updates(self) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "fields":
                value = [f.to_input() for f in value or []]
            updates[name] = value
        return updates


# --- Workflow ---


class ScheduleBody(_Body):
    scheduled_at: datetime
