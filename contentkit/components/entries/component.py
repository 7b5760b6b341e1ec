"""
Entries component - ContentEntry records and their field values.

Behaviours:
- create resolves the content type, validates, allocates a slug unique
  within the type and defaults status to DRAFT
- update applies only the keys present; field values are replaced as a
  set and revalidated, a changed slug is re-deduplicated excluding self
- store functions return None / False for absence, never raise
- find_due lists SCHEDULED entries whose scheduled_at has passed

Writers of one content type serialize on that type's lock, so the slug
and unique-value checks and the insert that follows are atomic.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from contentkit.components.slugs import derive_candidate, ensure_unique
from contentkit.components.validation import (
    DEFAULT_CONFIG,
    FieldError,
    FieldValueInput,
    ValidationConfig,
    apply_defaults,
    validate_entry,
)
from contentkit.domain.entities import (
    ENTRY_STATUSES,
    ContentEntry,
    ContentFieldValue,
    ContentType,
    as_utc,
    new_id,
)

from .models import (
    NOT_FOUND,
    STATUS_CONFLICT,
    UPDATABLE_KEYS,
    CreateEntryInput,
    EntryOutput,
    ListEntriesInput,
    UpdateEntryInput,
)
from .ports import EntryRepoPort, SchemaLookupPort, TimePort

logger = logging.getLogger(__name__)


def _failure(errors: list[FieldError]) -> EntryOutput:
    return EntryOutput(entry=None, errors=errors, success=False)


def _not_found(message: str) -> EntryOutput:
    return _failure([FieldError(code=NOT_FOUND, message=message)])


def _check_status(status: Any) -> list[FieldError]:
    if status not in ENTRY_STATUSES:
        return [
            FieldError(
                code="invalid_status",
                message=f"Status must be one of {', '.join(ENTRY_STATUSES)}",
                field="status",
            )
        ]
    return []


def _optional_utc(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


def _matches(entry: ContentEntry, needle: str) -> bool:
    if entry.slug and needle in entry.slug.lower():
        return True
    return any(needle in fv.value.lower() for fv in entry.field_values)


class EntryStore:
    """Owns ContentEntry records."""

    def __init__(
        self,
        repo: EntryRepoPort,
        schemas: SchemaLookupPort,
        time: TimePort,
        config: ValidationConfig = DEFAULT_CONFIG,
    ) -> None:
        self._repo = repo
        self._schemas = schemas
        self._time = time
        self._config = config
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _type_lock(self, content_type_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(content_type_id, threading.RLock())
        with lock:
            yield

    # --- Reads ---

    def list(self, inp: ListEntriesInput) -> list[ContentEntry]:
        """Entries of one type, insertion order, optionally filtered."""
        entries = self._repo.list_by_owner(inp.content_type_id)
        if inp.status:
            entries = [e for e in entries if e.status == inp.status]
        if inp.search:
            needle = inp.search.lower()
            entries = [e for e in entries if _matches(e, needle)]
        return entries

    def get(self, entry_id: str) -> ContentEntry | None:
        return self._repo.get_by_id(entry_id)

    def get_by_slug(self, content_type_id: str, slug: str) -> ContentEntry | None:
        return self._repo.get_by_slug(content_type_id, slug)

    def count(self, content_type_id: str) -> int:
        return len(self._repo.list_by_owner(content_type_id))

    def find_due(self, now: datetime) -> list[ContentEntry]:
        return self._repo.find_due(as_utc(now))

    # --- Writes ---

    def create(self, inp: CreateEntryInput) -> EntryOutput:
        content_type = self._schemas.get(inp.content_type_id)
        if content_type is None:
            return _not_found(f"Content type {inp.content_type_id} not found")

        values: Sequence[FieldValueInput] = inp.field_values
        if self._config.apply_defaults:
            values = apply_defaults(content_type, values)

        status = inp.status or "DRAFT"
        entry_id = new_id()

        with self._type_lock(content_type.id):
            errors = self._validate(content_type, values, exclude_id=None)
            errors += _check_status(status)
            if errors:
                logger.info(
                    "Rejected entry for %s: %s",
                    content_type.slug,
                    "; ".join(e.message for e in errors),
                )
                return _failure(errors)

            candidate = derive_candidate(
                entry_id=entry_id,
                fields=content_type.fields,
                field_values=[(fv.field_id, fv.value) for fv in values],
                slug=inp.slug,
            )
            slug = ensure_unique(
                candidate,
                lambda s: self._repo.get_by_slug(content_type.id, s) is not None,
            )

            now = self._time.now_utc()
            published_at = _optional_utc(inp.published_at)
            if status == "PUBLISHED" and published_at is None:
                published_at = now

            entry = ContentEntry(
                id=entry_id,
                content_type_id=content_type.id,
                slug=slug,
                status=status,
                published_at=published_at,
                scheduled_at=_optional_utc(inp.scheduled_at),
                author_id=inp.author_id,
                field_values=self._build_values(entry_id, values),
                created_at=now,
                updated_at=now,
            )
            saved = self._repo.insert(entry)

        logger.info("Created entry %s in %s (slug=%s)", saved.id, content_type.slug, saved.slug)
        return EntryOutput(entry=saved, errors=[], success=True)

    def update(self, inp: UpdateEntryInput) -> EntryOutput:
        existing = self._repo.get_by_id(inp.entry_id)
        if existing is None:
            return _not_found(f"Entry {inp.entry_id} not found")

        updates = {k: v for k, v in inp.updates.items() if k in UPDATABLE_KEYS}

        with self._type_lock(existing.content_type_id):
            # Re-read under the lock; a concurrent delete wins
            existing = self._repo.get_by_id(inp.entry_id)
            if existing is None:
                return _not_found(f"Entry {inp.entry_id} not found")
            if inp.expected_status is not None and existing.status not in inp.expected_status:
                return _failure(
                    [
                        FieldError(
                            code=STATUS_CONFLICT,
                            message=(
                                f"Entry {existing.id} is {existing.status}, expected "
                                f"{' or '.join(inp.expected_status)}"
                            ),
                            field="status",
                        )
                    ]
                )

            changes: dict[str, Any] = {}
            errors: list[FieldError] = []

            if "field_values" in updates:
                content_type = self._schemas.get(existing.content_type_id)
                if content_type is None:
                    return _not_found(f"Content type {existing.content_type_id} not found")
                values = list(updates["field_values"] or [])
                errors += self._validate(content_type, values, exclude_id=existing.id)
                changes["field_values"] = self._build_values(existing.id, values)

            if "status" in updates:
                errors += _check_status(updates["status"])
                changes["status"] = updates["status"]

            if errors:
                logger.info(
                    "Rejected update of entry %s: %s",
                    existing.id,
                    "; ".join(e.message for e in errors),
                )
                return _failure(errors)

            if "slug" in updates:
                requested = updates["slug"]
                changes["slug"] = (
                    ensure_unique(
                        requested,
                        lambda s: self._slug_taken_by_other(existing, s),
                    )
                    if requested
                    else None
                )

            for key in ("published_at", "scheduled_at"):
                if key in updates:
                    changes[key] = _optional_utc(updates[key])

            if "author_id" in updates:
                changes["author_id"] = updates["author_id"]

            changes["updated_at"] = self._time.now_utc()
            saved = self._repo.update(existing.model_copy(update=changes))

        logger.info("Updated entry %s (%s)", saved.id, ", ".join(sorted(updates)) or "touch")
        return EntryOutput(entry=saved, errors=[], success=True)

    def delete(self, entry_id: str) -> bool:
        existing = self._repo.get_by_id(entry_id)
        if existing is None:
            return False
        with self._type_lock(existing.content_type_id):
            deleted = self._repo.delete(entry_id)
        if deleted:
            logger.info("Deleted entry %s", entry_id)
        return deleted

    def delete_all_for_type(self, content_type_id: str) -> int:
        """Delete every entry of one content type; returns how many went."""
        with self._type_lock(content_type_id):
            removed = sum(
                1 for e in self._repo.list_by_owner(content_type_id) if self._repo.delete(e.id)
            )
        if removed:
            logger.info("Deleted %d entries of content type %s", removed, content_type_id)
        return removed

    # --- Helpers ---

    def _validate(
        self,
        content_type: ContentType,
        values: Sequence[FieldValueInput],
        *,
        exclude_id: str | None,
    ) -> list[FieldError]:
        def sibling_values(field_id: str) -> list[str]:
            return [
                v
                for e in self._repo.list_by_owner(content_type.id)
                if e.id != exclude_id and (v := e.value_of(field_id)) is not None
            ]

        return validate_entry(
            content_type,
            values,
            sibling_values=sibling_values,
            config=self._config,
        )

    def _slug_taken_by_other(self, entry: ContentEntry, slug: str) -> bool:
        other = self._repo.get_by_slug(entry.content_type_id, slug)
        return other is not None and other.id != entry.id

    @staticmethod
    def _build_values(
        entry_id: str, values: Sequence[FieldValueInput]
    ) -> list[ContentFieldValue]:
        return [
            ContentFieldValue(id=new_id(), field_id=fv.field_id, entry_id=entry_id, value=fv.value)
            for fv in values
        ]
