"""
In-memory content repositories.

Records live in an id -> record arena with secondary indexes kept in
step on every write. Stored records are never handed out: reads return
deep copies and writes store deep copies.
"""

from __future__ import annotations

import threading
from datetime import datetime

from contentkit.domain.entities import ContentEntry, ContentType, as_utc


class InMemoryContentTypeRepo:
    """Content types keyed by id, with a slug index."""

    def __init__(self) -> None:
        self._types: dict[str, ContentType] = {}
        self._by_slug: dict[str, str] = {}  # slug -> type id
        self._lock = threading.RLock()

    def insert(self, content_type: ContentType) -> ContentType:
        with self._lock:
            if content_type.id in self._types:
                msg = f"Content type already exists: {content_type.id}"
                raise ValueError(msg)
            if content_type.slug in self._by_slug:
                msg = f"Content type slug already taken: {content_type.slug}"
                raise ValueError(msg)
            self._types[content_type.id] = content_type.model_copy(deep=True)
            self._by_slug[content_type.slug] = content_type.id
        return content_type.model_copy(deep=True)

    def get_by_id(self, type_id: str) -> ContentType | None:
        with self._lock:
            found = self._types.get(type_id)
            return found.model_copy(deep=True) if found else None

    def get_by_slug(self, slug: str) -> ContentType | None:
        with self._lock:
            type_id = self._by_slug.get(slug)
            return self.get_by_id(type_id) if type_id else None

    def list_all(self) -> list[ContentType]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._types.values()]

    def update(self, content_type: ContentType) -> ContentType:
        with self._lock:
            previous = self._types.get(content_type.id)
            if previous is None:
                msg = f"Content type not found: {content_type.id}"
                raise KeyError(msg)
            owner = self._by_slug.get(content_type.slug)
            if owner is not None and owner != content_type.id:
                msg = f"Content type slug already taken: {content_type.slug}"
                raise ValueError(msg)
            del self._by_slug[previous.slug]
            self._by_slug[content_type.slug] = content_type.id
            self._types[content_type.id] = content_type.model_copy(deep=True)
        return content_type.model_copy(deep=True)

    def delete(self, type_id: str) -> bool:
        with self._lock:
            removed = self._types.pop(type_id, None)
            if removed is None:
                return False
            self._by_slug.pop(removed.slug, None)
            return True


class InMemoryEntryRepo:
    """Entries keyed by id, indexed by (content type, slug) and by owner."""

    def __init__(self) -> None:
        self._entries: dict[str, ContentEntry] = {}
        self._by_slug: dict[tuple[str, str], str] = {}  # (type id, slug) -> entry id
        self._by_owner: dict[str, list[str]] = {}  # type id -> entry ids, insertion order
        self._lock = threading.RLock()

    def _index(self, entry: ContentEntry) -> None:
        if entry.slug:
            self._by_slug[(entry.content_type_id, entry.slug)] = entry.id

    def _unindex(self, entry: ContentEntry) -> None:
        if entry.slug:
            self._by_slug.pop((entry.content_type_id, entry.slug), None)

    def insert(self, entry: ContentEntry) -> ContentEntry:
        with self._lock:
            if entry.id in self._entries:
                msg = f"Entry already exists: {entry.id}"
                raise ValueError(msg)
            if entry.slug and (entry.content_type_id, entry.slug) in self._by_slug:
                msg = f"Entry slug already taken in content type: {entry.slug}"
                raise ValueError(msg)
            self._entries[entry.id] = entry.model_copy(deep=True)
            self._index(entry)
            self._by_owner.setdefault(entry.content_type_id, []).append(entry.id)
        return entry.model_copy(deep=True)

    def get_by_id(self, entry_id: str) -> ContentEntry | None:
        with self._lock:
            found = self._entries.get(entry_id)
            return found.model_copy(deep=True) if found else None

    def get_by_slug(self, content_type_id: str, slug: str) -> ContentEntry | None:
        with self._lock:
            entry_id = self._by_slug.get((content_type_id, slug))
            return self.get_by_id(entry_id) if entry_id else None

    def list_by_owner(self, content_type_id: str) -> list[ContentEntry]:
        with self._lock:
            return [
                self._entries[entry_id].model_copy(deep=True)
                for entry_id in self._by_owner.get(content_type_id, [])
            ]

    def update(self, entry: ContentEntry) -> ContentEntry:
        with self._lock:
            previous = self._entries.get(entry.id)
            if previous is None:
                msg = f"Entry not found: {entry.id}"
                raise KeyError(msg)
            if entry.slug:
                owner = self._by_slug.get((entry.content_type_id, entry.slug))
                if owner is not None and owner != entry.id:
                    msg = f"Entry slug already taken in content type: {entry.slug}"
                    raise ValueError(msg)
            self._unindex(previous)
            self._entries[entry.id] = entry.model_copy(deep=True)
            self._index(entry)
        return entry.model_copy(deep=True)

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            removed = self._entries.pop(entry_id, None)
            if removed is None:
                return False
            self._unindex(removed)
            owned = self._by_owner.get(removed.content_type_id, [])
            if entry_id in owned:
                owned.remove(entry_id)
            return True

    def find_due(self, now: datetime) -> list[ContentEntry]:
        now = as_utc(now)
        with self._lock:
            return [
                e.model_copy(deep=True)
                for e in self._entries.values()
                if e.status == "SCHEDULED"
                and e.scheduled_at is not None
                and as_utc(e.scheduled_at) <= now
            ]
