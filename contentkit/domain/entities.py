from datetime import UTC, datetime
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from contentkit.domain.field_types import FieldType

# --- Enums / Literals ---
EntryStatus = Literal["DRAFT", "PUBLISHED", "SCHEDULED", "ARCHIVED"]
ENTRY_STATUSES: tuple[EntryStatus, ...] = ("DRAFT", "PUBLISHED", "SCHEDULED", "ARCHIVED")


def new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Schema ---

class ContentField(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    display_name: str
    field_type: FieldType
    required: bool = False
    unique: bool = False
    default_value: str | None = None
    options: dict[str, Any] | None = None
    related_type: str | None = None
    # Secondary sort key only
    order: int = 0
    content_type_id: str = ""


class ContentType(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    display_name: str
    description: str | None = None
    slug: str
    fields: list[ContentField] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def field_by_id(self, field_id: str) -> ContentField | None:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None


# --- Entries ---

class ContentFieldValue(CamelModel):
    # Field metadata is resolved through the content type, never copied here
    id: str = Field(default_factory=new_id)
    field_id: str
    entry_id: str = ""
    value: str = ""


class ContentEntry(CamelModel):
    id: str = Field(default_factory=new_id)
    content_type_id: str
    slug: str | None = None
    status: EntryStatus = "DRAFT"

    published_at: datetime | None = None
    scheduled_at: datetime | None = None
    author_id: str | None = None

    field_values: list[ContentFieldValue] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def value_of(self, field_id: str) -> str | None:
        for fv in self.field_values:
            if fv.field_id == field_id:
                return fv.value
        return None
