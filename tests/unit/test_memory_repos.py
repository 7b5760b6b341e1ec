"""
Tests for the in-memory repositories.
"""

from datetime import UTC, datetime, timedelta

import pytest

from contentkit.adapters.memory import InMemoryContentTypeRepo, InMemoryEntryRepo
from contentkit.domain.entities import ContentEntry, ContentType

NOW = datetime(2026, 6, 15, 12, 0, 0, tzinfo=UTC)


def _entry(type_id: str = "t1", slug: str | None = None, **kwargs) -> ContentEntry:
    return ContentEntry(content_type_id=type_id, slug=slug, **kwargs)


class TestInMemoryContentTypeRepo:
    def test_insert_and_lookup(self) -> None:
        repo = InMemoryContentTypeRepo()
        ct = repo.insert(ContentType(name="blog", display_name="Blog", slug="blog"))

        assert repo.get_by_id(ct.id) == ct
        assert repo.get_by_slug("blog") == ct
        assert repo.get_by_slug("other") is None
        assert repo.list_all() == [ct]

    def test_reads_are_copies(self) -> None:
        repo = InMemoryContentTypeRepo()
        ct = repo.insert(ContentType(name="blog", display_name="Blog", slug="blog"))

        loaded = repo.get_by_id(ct.id)
        assert loaded is not None
        loaded.display_name = "Changed"

        stored = repo.get_by_id(ct.id)
        assert stored is not None
        assert stored.display_name == "Blog"

    def test_duplicate_slug_rejected(self) -> None:
        repo = InMemoryContentTypeRepo()
        repo.insert(ContentType(name="blog", display_name="Blog", slug="blog"))
        with pytest.raises(ValueError):
            repo.insert(ContentType(name="blog2", display_name="Blog", slug="blog"))

    def test_update_moves_slug_index(self) -> None:
        repo = InMemoryContentTypeRepo()
        ct = repo.insert(ContentType(name="blog", display_name="Blog", slug="blog"))

        repo.update(ct.model_copy(update={"slug": "posts"}))

        assert repo.get_by_slug("blog") is None
        moved = repo.get_by_slug("posts")
        assert moved is not None
        assert moved.id == ct.id

    def test_update_missing(self) -> None:
        repo = InMemoryContentTypeRepo()
        with pytest.raises(KeyError):
            repo.update(ContentType(name="x", display_name="X", slug="x"))

    def test_delete(self) -> None:
        repo = InMemoryContentTypeRepo()
        ct = repo.insert(ContentType(name="blog", display_name="Blog", slug="blog"))

        assert repo.delete(ct.id) is True
        assert repo.delete(ct.id) is False
        assert repo.get_by_slug("blog") is None


class TestInMemoryEntryRepo:
    def test_slug_scoped_to_type(self) -> None:
        repo = InMemoryEntryRepo()
        a = repo.insert(_entry("t1", "hello"))
        b = repo.insert(_entry("t2", "hello"))

        found_a = repo.get_by_slug("t1", "hello")
        found_b = repo.get_by_slug("t2", "hello")
        assert found_a is not None and found_a.id == a.id
        assert found_b is not None and found_b.id == b.id

    def test_duplicate_slug_in_type_rejected(self) -> None:
        repo = InMemoryEntryRepo()
        repo.insert(_entry("t1", "hello"))
        with pytest.raises(ValueError):
            repo.insert(_entry("t1", "hello"))

    def test_list_by_owner_keeps_insertion_order(self) -> None:
        repo = InMemoryEntryRepo()
        ids = [repo.insert(_entry("t1", f"e{i}")).id for i in range(5)]
        repo.insert(_entry("t2", "elsewhere"))

        assert [e.id for e in repo.list_by_owner("t1")] == ids
        assert repo.list_by_owner("unknown") == []

    def test_update_reindexes_slug(self) -> None:
        repo = InMemoryEntryRepo()
        entry = repo.insert(_entry("t1", "old"))

        repo.update(entry.model_copy(update={"slug": "new"}))

        assert repo.get_by_slug("t1", "old") is None
        assert repo.get_by_slug("t1", "new") is not None

    def test_update_to_taken_slug_rejected(self) -> None:
        repo = InMemoryEntryRepo()
        repo.insert(_entry("t1", "taken"))
        entry = repo.insert(_entry("t1", "mine"))
        with pytest.raises(ValueError):
            repo.update(entry.model_copy(update={"slug": "taken"}))

    def test_delete_removes_from_indexes(self) -> None:
        repo = InMemoryEntryRepo()
        entry = repo.insert(_entry("t1", "gone"))

        assert repo.delete(entry.id) is True
        assert repo.get_by_id(entry.id) is None
        assert repo.get_by_slug("t1", "gone") is None
        assert repo.list_by_owner("t1") == []
        assert repo.delete(entry.id) is False

    def test_find_due(self) -> None:
        repo = InMemoryEntryRepo()
        due = repo.insert(
            _entry(status="SCHEDULED", scheduled_at=NOW - timedelta(minutes=1))
        )
        exact = repo.insert(_entry(status="SCHEDULED", scheduled_at=NOW))
        repo.insert(_entry(status="SCHEDULED", scheduled_at=NOW + timedelta(minutes=1)))
        repo.insert(_entry(status="DRAFT", scheduled_at=NOW - timedelta(days=1)))

        assert {e.id for e in repo.find_due(NOW)} == {due.id, exact.id}

    def test_find_due_naive_now_is_utc(self) -> None:
        repo = InMemoryEntryRepo()
        due = repo.insert(_entry(status="SCHEDULED", scheduled_at=NOW))

        naive = NOW.replace(tzinfo=None)
        assert [e.id for e in repo.find_due(naive)] == [due.id]
