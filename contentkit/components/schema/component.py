"""
Schema component - ContentType definitions and their ordered fields.

Behaviours:
- create mints the type id, every field id, and slug = slugify(name)
  made unique across all content types
- update replaces the field list wholesale when `fields` is given;
  order is reassigned by position, caller-supplied ids survive only
  when they already belong to the type; an id repeated in one list
  is rejected
- slug is recomputed only when `name` is part of the update
- absence is a normal outcome for get/get_by_slug (None, not an error)

A process-wide lock guards the type collection and its slug index so
slug allocation and insert are atomic with respect to other writers.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from contentkit.components.slugs import ensure_unique, slugify
from contentkit.domain.entities import ContentField, ContentType, new_id
from contentkit.domain.field_types import FieldType, check_options

from .models import (
    ContentTypeOutput,
    CreateContentTypeInput,
    FieldInput,
    SchemaValidationError,
    UpdateContentTypeInput,
)
from .ports import ContentTypeRepoPort, TimePort

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "display_name", "description", "fields")


# --- Validation Functions ---


def _check_fields(fields: Iterable[FieldInput]) -> list[SchemaValidationError]:
    errors: list[SchemaValidationError] = []
    seen: set[str] = set()
    seen_ids: set[str] = set()

    for index, f in enumerate(fields):
        label = f.display_name or f.name or f"#{index + 1}"
        if not f.name or not f.name.strip():
            errors.append(
                SchemaValidationError(
                    code="field_name_required",
                    message=f"Field {index + 1} must have a name",
                    field="fields",
                )
            )
        elif f.name in seen:
            errors.append(
                SchemaValidationError(
                    code="duplicate_field_name",
                    message=f"Field name '{f.name}' is used more than once",
                    field="fields",
                )
            )
        else:
            seen.add(f.name)

        if not f.display_name or not f.display_name.strip():
            errors.append(
                SchemaValidationError(
                    code="field_display_name_required",
                    message=f"Field '{label}' must have a display name",
                    field="fields",
                )
            )

        if f.id:
            if f.id in seen_ids:
                errors.append(
                    SchemaValidationError(
                        code="duplicate_field_id",
                        message=f"Field id '{f.id}' is used more than once",
                        field="fields",
                    )
                )
            seen_ids.add(f.id)

        try:
            field_type = FieldType(f.field_type)
        except ValueError:
            errors.append(
                SchemaValidationError(
                    code="unknown_field_type",
                    message=f"Field '{label}' has unknown type '{f.field_type}'",
                    field="fields",
                )
            )
            continue

        errors.extend(
            SchemaValidationError(
                code="invalid_field_options",
                message=f"Field '{label}': {problem}",
                field="fields",
            )
            for problem in check_options(field_type, f.options)
        )

    return errors


def _check_text(value: Any, key: str, label: str) -> list[SchemaValidationError]:
    if not isinstance(value, str) or not value.strip():
        return [
            SchemaValidationError(
                code=f"{key}_required",
                message=f"{label} is required",
                field=key,
            )
        ]
    return []


def _build_fields(
    type_id: str,
    inputs: Iterable[FieldInput],
    keep_ids: set[str] | None = None,
) -> list[ContentField]:
    keep_ids = keep_ids or set()
    return [
        ContentField(
            id=f.id if f.id and f.id in keep_ids else new_id(),
            name=f.name,
            display_name=f.display_name,
            field_type=FieldType(f.field_type),
            required=f.required,
            unique=f.unique,
            default_value=f.default_value,
            options=f.options,
            related_type=f.related_type,
            order=index,
            content_type_id=type_id,
        )
        for index, f in enumerate(inputs)
    ]


def _failure(errors: list[SchemaValidationError]) -> ContentTypeOutput:
    return ContentTypeOutput(content_type=None, errors=errors, success=False)


# --- Registry ---


class SchemaRegistry:
    """Owns ContentType definitions."""

    def __init__(self, repo: ContentTypeRepoPort, time: TimePort) -> None:
        self._repo = repo
        self._time = time
        self._lock = threading.RLock()

    def get(self, type_id: str) -> ContentType | None:
        return self._repo.get_by_id(type_id)

    def get_by_slug(self, slug: str) -> ContentType | None:
        return self._repo.get_by_slug(slug)

    def list(self) -> list[ContentType]:
        return self._repo.list_all()

    def create(self, inp: CreateContentTypeInput) -> ContentTypeOutput:
        errors = (
            _check_text(inp.name, "name", "Name")
            + _check_text(inp.display_name, "display_name", "Display name")
            + _check_fields(inp.fields)
        )
        if errors:
            return _failure(errors)

        type_id = new_id()
        now = self._time.now_utc()

        with self._lock:
            slug = ensure_unique(
                slugify(inp.name) or f"type-{type_id}",
                lambda s: self._repo.get_by_slug(s) is not None,
            )
            content_type = ContentType(
                id=type_id,
                name=inp.name,
                display_name=inp.display_name,
                description=inp.description,
                slug=slug,
                fields=_build_fields(type_id, inp.fields),
                created_at=now,
                updated_at=now,
            )
            saved = self._repo.insert(content_type)

        logger.info("Created content type %s (slug=%s)", saved.id, saved.slug)
        return ContentTypeOutput(content_type=saved, errors=[], success=True)

    def update(self, inp: UpdateContentTypeInput) -> ContentTypeOutput:
        updates = {k: v for k, v in inp.updates.items() if k in _UPDATABLE}

        errors: list[SchemaValidationError] = []
        if "name" in updates:
            errors += _check_text(updates["name"], "name", "Name")
        if "display_name" in updates:
            errors += _check_text(updates["display_name"], "display_name", "Display name")
        if "fields" in updates:
            updates["fields"] = list(updates["fields"] or [])
            errors += _check_fields(updates["fields"])

        with self._lock:
            existing = self._repo.get_by_id(inp.type_id)
            if existing is None:
                return _failure(
                    [
                        SchemaValidationError(
                            code="not_found",
                            message=f"Content type {inp.type_id} not found",
                        )
                    ]
                )
            if errors:
                return _failure(errors)

            changes: dict[str, Any] = {"updated_at": self._time.now_utc()}

            if "name" in updates:
                changes["name"] = updates["name"]
                changes["slug"] = ensure_unique(
                    slugify(updates["name"]) or f"type-{existing.id}",
                    lambda s: self._slug_taken_by_other(s, existing.id),
                )
            if "display_name" in updates:
                changes["display_name"] = updates["display_name"]
            if "description" in updates:
                changes["description"] = updates["description"]
            if "fields" in updates:
                keep_ids = {f.id for f in existing.fields}
                changes["fields"] = _build_fields(existing.id, updates["fields"], keep_ids)

            updated = existing.model_copy(update=changes)
            saved = self._repo.update(updated)

        logger.info("Updated content type %s (slug=%s)", saved.id, saved.slug)
        return ContentTypeOutput(content_type=saved, errors=[], success=True)

    def delete(self, type_id: str) -> bool:
        with self._lock:
            deleted = self._repo.delete(type_id)
        if deleted:
            logger.info("Deleted content type %s", type_id)
        return deleted

    def _slug_taken_by_other(self, slug: str, type_id: str) -> bool:
        other = self._repo.get_by_slug(slug)
        return other is not None and other.id != type_id
