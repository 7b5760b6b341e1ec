"""
Tests for the entry store.
"""

from __future__ import annotations

from datetime import UTC, datetime

from contentkit.adapters.clock import FixedClock
from contentkit.components.entries import (
    STATUS_CONFLICT,
    CreateEntryInput,
    ListEntriesInput,
    UpdateEntryInput,
    field_value,
)
from contentkit.components.schema import CreateContentTypeInput, FieldInput
from contentkit.components.validation import FieldValueInput
from contentkit.domain.entities import ContentType
from contentkit.services.engine import ContentEngine
from tests.helpers import field_id


def _review(
    ct: ContentType, title: str = "Great", rating: str = "5", **kwargs
) -> CreateEntryInput:
    return CreateEntryInput(
        content_type_id=ct.id,
        field_values=[
            FieldValueInput(field_id=field_id(ct, "title"), value=title),
            FieldValueInput(field_id=field_id(ct, "rating"), value=rating),
        ],
        **kwargs,
    )


class TestCreate:
    """Validation, slug allocation and defaults."""

    def test_create_then_get(
        self, engine: ContentEngine, review_type: ContentType, clock: FixedClock
    ) -> None:
        """Stored values equal the input, modulo assigned ids."""
        result = engine.entries.create(_review(review_type, title="Nice Phone"))

        assert result.success
        entry = result.entry
        assert entry is not None
        assert entry.status == "DRAFT"
        assert entry.slug == "nice-phone"
        assert entry.created_at == entry.updated_at == clock.now_utc()

        fetched = engine.entries.get(entry.id)
        assert fetched is not None
        assert [(fv.field_id, fv.value) for fv in fetched.field_values] == [
            (field_id(review_type, "title"), "Nice Phone"),
            (field_id(review_type, "rating"), "5"),
        ]
        assert all(fv.entry_id == entry.id and fv.id for fv in fetched.field_values)

    def test_missing_required_batched(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """Every missing required field is named."""
        result = engine.entries.create(CreateEntryInput(content_type_id=review_type.id))

        assert not result.success
        assert [e.field for e in result.errors] == ["Title", "Rating"]
        assert engine.entries.count(review_type.id) == 0

    def test_unknown_field_rejected(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """A field id from outside the type aborts the write."""
        inp = _review(review_type)
        bad = CreateEntryInput(
            content_type_id=review_type.id,
            field_values=[*inp.field_values, FieldValueInput(field_id="elsewhere", value="x")],
        )
        result = engine.entries.create(bad)
        assert not result.success
        assert result.errors[0].code == "unknown_field"
        assert engine.entries.count(review_type.id) == 0

    def test_unknown_content_type(self, engine: ContentEngine) -> None:
        result = engine.entries.create(CreateEntryInput(content_type_id="missing"))
        assert not result.success
        assert result.not_found

    def test_slug_unique_within_type(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """Same derived slug in one type is suffixed."""
        first = engine.entries.create(_review(review_type, title="Same")).entry
        second = engine.entries.create(_review(review_type, title="Same")).entry
        assert first is not None and second is not None
        assert (first.slug, second.slug) == ("same", "same-1")

    def test_slug_may_repeat_across_types(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """Entry slugs are scoped to their content type."""
        other = engine.schemas.create(
            CreateContentTypeInput(
                name="note",
                display_name="Note",
                fields=[FieldInput(name="text", display_name="Text", field_type="TEXT")],
            )
        ).content_type
        assert other is not None

        a = engine.entries.create(_review(review_type, slug="shared")).entry
        b = engine.entries.create(
            CreateEntryInput(content_type_id=other.id, slug="shared")
        ).entry
        assert a is not None and b is not None
        assert a.slug == b.slug == "shared"

    def test_caller_slug_used_verbatim(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        entry = engine.entries.create(_review(review_type, slug="Custom_Slug")).entry
        assert entry is not None
        assert entry.slug == "Custom_Slug"

    def test_fallback_slug(self, engine: ContentEngine, review_type: ContentType) -> None:
        """No usable TEXT value falls back to entry-{id}."""
        entry = engine.entries.create(_review(review_type, title="!!!")).entry
        assert entry is not None
        assert entry.slug == f"entry-{entry.id}"

    def test_published_on_create_is_stamped(
        self, engine: ContentEngine, review_type: ContentType, clock: FixedClock
    ) -> None:
        entry = engine.entries.create(_review(review_type, status="PUBLISHED")).entry
        assert entry is not None
        assert entry.status == "PUBLISHED"
        assert entry.published_at == clock.now_utc()

    def test_invalid_status(self, engine: ContentEngine, review_type: ContentType) -> None:
        result = engine.entries.create(_review(review_type, status="LIVE"))
        assert not result.success
        assert result.errors[0].code == "invalid_status"

    def test_non_string_values_stored_as_json(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        result = engine.entries.create(
            CreateEntryInput(
                content_type_id=review_type.id,
                field_values=[
                    field_value(field_id(review_type, "title"), "Typed"),
                    field_value(field_id(review_type, "rating"), 5),
                    field_value(field_id(review_type, "body"), {"a": 1}),
                ],
            )
        )
        assert result.entry is not None
        assert [fv.value for fv in result.entry.field_values] == ["Typed", "5", '{"a": 1}']

    def test_defaults_applied(self, engine: ContentEngine) -> None:
        ct = engine.schemas.create(
            CreateContentTypeInput(
                name="plan",
                display_name="Plan",
                fields=[
                    FieldInput(
                        name="tier",
                        display_name="Tier",
                        field_type="TEXT",
                        required=True,
                        default_value="free",
                    )
                ],
            )
        ).content_type
        assert ct is not None

        entry = engine.entries.create(CreateEntryInput(content_type_id=ct.id)).entry
        assert entry is not None
        assert entry.value_of(ct.fields[0].id) == "free"
        assert entry.slug == "free"


class TestUnique:
    def test_unique_field_enforced(self, engine: ContentEngine) -> None:
        """A unique value may appear once per type; self is excluded on update."""
        ct = engine.schemas.create(
            CreateContentTypeInput(
                name="user",
                display_name="User",
                fields=[
                    FieldInput(
                        name="email", display_name="Email", field_type="EMAIL", unique=True
                    )
                ],
            )
        ).content_type
        assert ct is not None
        email = ct.fields[0].id

        first = engine.entries.create(
            CreateEntryInput(content_type_id=ct.id, field_values=[field_value(email, "a@b.co")])
        )
        assert first.success and first.entry is not None

        clash = engine.entries.create(
            CreateEntryInput(content_type_id=ct.id, field_values=[field_value(email, "a@b.co")])
        )
        assert not clash.success
        assert clash.errors[0].code == "not_unique"

        same_again = engine.entries.update(
            UpdateEntryInput(
                entry_id=first.entry.id,
                updates={"field_values": [field_value(email, "a@b.co")]},
            )
        )
        assert same_again.success


class TestList:
    """Filters and order."""

    def test_insertion_order_and_search(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        for title in ("Alpha phone", "Beta tablet", "Gamma Phone case"):
            engine.entries.create(_review(review_type, title=title))

        all_entries = engine.entries.list(ListEntriesInput(content_type_id=review_type.id))
        assert [e.slug for e in all_entries] == ["alpha-phone", "beta-tablet", "gamma-phone-case"]

        hits = engine.entries.list(
            ListEntriesInput(content_type_id=review_type.id, search="PHONE")
        )
        assert [e.slug for e in hits] == ["alpha-phone", "gamma-phone-case"]

    def test_search_matches_slug(self, engine: ContentEngine, review_type: ContentType) -> None:
        engine.entries.create(_review(review_type, title="Plain", slug="special-slug"))
        hits = engine.entries.list(
            ListEntriesInput(content_type_id=review_type.id, search="special")
        )
        assert len(hits) == 1

    def test_status_filter(self, engine: ContentEngine, review_type: ContentType) -> None:
        engine.entries.create(_review(review_type, title="One"))
        engine.entries.create(_review(review_type, title="Two", status="PUBLISHED"))
        published = engine.entries.list(
            ListEntriesInput(content_type_id=review_type.id, status="PUBLISHED")
        )
        assert [e.slug for e in published] == ["two"]


class TestUpdate:
    """Only keys present change."""

    def test_absent_keys_unchanged(
        self, engine: ContentEngine, review_type: ContentType, clock: FixedClock
    ) -> None:
        entry = engine.entries.create(_review(review_type, author_id="u1")).entry
        assert entry is not None
        clock.advance(30)

        result = engine.entries.update(
            UpdateEntryInput(entry_id=entry.id, updates={"status": "ARCHIVED"})
        )
        assert result.entry is not None
        assert result.entry.status == "ARCHIVED"
        assert result.entry.author_id == "u1"
        assert result.entry.slug == entry.slug
        assert result.entry.field_values == entry.field_values
        assert result.entry.updated_at == clock.now_utc()
        assert result.entry.created_at == entry.created_at

    def test_explicit_none_clears(self, engine: ContentEngine, review_type: ContentType) -> None:
        when = datetime(2026, 7, 1, tzinfo=UTC)
        entry = engine.entries.create(_review(review_type, scheduled_at=when)).entry
        assert entry is not None
        assert entry.scheduled_at == when

        result = engine.entries.update(
            UpdateEntryInput(entry_id=entry.id, updates={"scheduled_at": None})
        )
        assert result.entry is not None
        assert result.entry.scheduled_at is None

    def test_field_values_replaced_and_revalidated(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """Replacement drops a required value and is refused."""
        entry = engine.entries.create(_review(review_type)).entry
        assert entry is not None

        result = engine.entries.update(
            UpdateEntryInput(
                entry_id=entry.id,
                updates={"field_values": [field_value(field_id(review_type, "title"), "Only")]},
            )
        )
        assert not result.success
        assert [e.field for e in result.errors] == ["Rating"]
        stored = engine.entries.get(entry.id)
        assert stored is not None
        assert stored.field_values == entry.field_values

    def test_slug_rename_to_own_slug(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """Renaming an entry to its current slug is accepted as-is."""
        entry = engine.entries.create(_review(review_type, title="Keep")).entry
        assert entry is not None
        result = engine.entries.update(
            UpdateEntryInput(entry_id=entry.id, updates={"slug": "keep"})
        )
        assert result.entry is not None
        assert result.entry.slug == "keep"

    def test_slug_rename_collision(self, engine: ContentEngine, review_type: ContentType) -> None:
        engine.entries.create(_review(review_type, title="Taken"))
        other = engine.entries.create(_review(review_type, title="Other")).entry
        assert other is not None
        result = engine.entries.update(
            UpdateEntryInput(entry_id=other.id, updates={"slug": "taken"})
        )
        assert result.entry is not None
        assert result.entry.slug == "taken-1"

    def test_missing_entry(self, engine: ContentEngine) -> None:
        result = engine.entries.update(UpdateEntryInput(entry_id="nope", updates={}))
        assert result.not_found

    def test_expected_status_mismatch_refused(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        """A status precondition that no longer holds leaves the entry alone."""
        entry = engine.entries.create(_review(review_type, status="ARCHIVED")).entry
        assert entry is not None

        result = engine.entries.update(
            UpdateEntryInput(
                entry_id=entry.id,
                updates={"status": "PUBLISHED"},
                expected_status=("DRAFT", "SCHEDULED"),
            )
        )

        assert not result.success
        assert [e.code for e in result.errors] == [STATUS_CONFLICT]
        assert result.errors[0].message == (
            f"Entry {entry.id} is ARCHIVED, expected DRAFT or SCHEDULED"
        )
        assert engine.entries.get(entry.id) == entry

    def test_expected_status_match_applies(
        self, engine: ContentEngine, review_type: ContentType
    ) -> None:
        entry = engine.entries.create(_review(review_type)).entry
        assert entry is not None
        result = engine.entries.update(
            UpdateEntryInput(
                entry_id=entry.id, updates={"status": "ARCHIVED"}, expected_status=("DRAFT",)
            )
        )
        assert result.entry is not None
        assert result.entry.status == "ARCHIVED"


class TestDeleteAndDue:
    def test_delete_twice(self, engine: ContentEngine, review_type: ContentType) -> None:
        """Second delete reports absence without raising."""
        entry = engine.entries.create(_review(review_type)).entry
        assert entry is not None
        assert engine.entries.delete(entry.id) is True
        assert engine.entries.delete(entry.id) is False
        assert engine.entries.delete("never-existed") is False

    def test_find_due(
        self, engine: ContentEngine, review_type: ContentType, clock: FixedClock
    ) -> None:
        """Only SCHEDULED entries at or before now are due."""
        now = clock.now_utc()
        past = datetime(2026, 6, 1, tzinfo=UTC)
        future = datetime(2026, 7, 1, tzinfo=UTC)

        due = engine.entries.create(
            _review(review_type, title="Due", status="SCHEDULED", scheduled_at=past)
        ).entry
        engine.entries.create(
            _review(review_type, title="Later", status="SCHEDULED", scheduled_at=future)
        )
        engine.entries.create(_review(review_type, title="Draft", scheduled_at=past))
        exact = engine.entries.create(
            _review(review_type, title="Exact", status="SCHEDULED", scheduled_at=now)
        ).entry
        assert due is not None and exact is not None

        assert {e.id for e in engine.entries.find_due(now)} == {due.id, exact.id}

    def test_delete_all_for_type(self, engine: ContentEngine, review_type: ContentType) -> None:
        engine.entries.create(_review(review_type, title="A"))
        engine.entries.create(_review(review_type, title="B"))
        assert engine.entries.delete_all_for_type(review_type.id) == 2
        assert engine.entries.count(review_type.id) == 0
