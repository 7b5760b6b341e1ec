from datetime import datetime
from typing import Protocol

from contentkit.domain.entities import ContentEntry, ContentType


class ContentTypeRepoPort(Protocol):
    def insert(self, content_type: ContentType) -> ContentType:
        ...

    def get_by_id(self, type_id: str) -> ContentType | None:
        ...

    def get_by_slug(self, slug: str) -> ContentType | None:
        ...

    def list_all(self) -> list[ContentType]:
        ...

    def update(self, content_type: ContentType) -> ContentType:
        ...

    def delete(self, type_id: str) -> bool:
        ...


class EntryRepoPort(Protocol):
    def insert(self, entry: ContentEntry) -> ContentEntry:
        ...

    def get_by_id(self, entry_id: str) -> ContentEntry | None:
        ...

    def get_by_slug(self, content_type_id: str, slug: str) -> ContentEntry | None:
        ...

    def list_by_owner(self, content_type_id: str) -> list[ContentEntry]:
        """Entries of one content type, insertion order."""
        ...

    def update(self, entry: ContentEntry) -> ContentEntry:
        ...

    def delete(self, entry_id: str) -> bool:
        ...

    def find_due(self, now: datetime) -> list[ContentEntry]:
        """SCHEDULED entries whose scheduled_at <= now."""
        ...
