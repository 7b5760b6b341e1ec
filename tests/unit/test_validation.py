"""
Tests for entry validation against a content type.
"""

from __future__ import annotations

from contentkit.components.validation import (
    FieldValueInput,
    ValidationConfig,
    apply_defaults,
    validate_entry,
    validate_references,
    validate_required,
    validate_unique,
)
from contentkit.domain.entities import ContentField, ContentType
from contentkit.domain.field_types import FieldType


def _type() -> ContentType:
    return ContentType(
        id="t1",
        name="contact",
        display_name="Contact",
        slug="contact",
        fields=[
            ContentField(
                id="f-name", name="name", display_name="Name",
                field_type=FieldType.TEXT, required=True, order=0,
            ),
            ContentField(
                id="f-email", name="email", display_name="Email",
                field_type=FieldType.EMAIL, required=True, unique=True, order=1,
            ),
            ContentField(
                id="f-tier", name="tier", display_name="Tier",
                field_type=FieldType.TEXT, default_value="free", order=2,
            ),
        ],
    )


def _fv(field_id: str, value: str) -> FieldValueInput:
    return FieldValueInput(field_id=field_id, value=value)


class TestRequired:
    """Required fields need a non-blank value."""

    def test_all_missing_reported(self) -> None:
        """Violations are batched, not fail-fast."""
        errors = validate_required(_type(), [])
        assert [e.message for e in errors] == [
            "Field 'Name' is required",
            "Field 'Email' is required",
        ]
        assert [e.field for e in errors] == ["Name", "Email"]

    def test_whitespace_is_empty(self) -> None:
        """Values are trimmed before the check."""
        errors = validate_required(_type(), [_fv("f-name", "   "), _fv("f-email", "a@b.co")])
        assert [e.field for e in errors] == ["Name"]

    def test_satisfied(self) -> None:
        errors = validate_required(_type(), [_fv("f-name", "Ann"), _fv("f-email", "a@b.co")])
        assert errors == []


class TestReferences:
    """Field ids must belong to the type."""

    def test_unknown_ids_reported_individually(self) -> None:
        errors = validate_references(_type(), [_fv("x1", "a"), _fv("f-name", "b"), _fv("x2", "c")])
        assert [(e.code, e.field) for e in errors] == [
            ("unknown_field", "x1"),
            ("unknown_field", "x2"),
        ]

    def test_duplicate_value_for_field(self) -> None:
        errors = validate_references(_type(), [_fv("f-name", "a"), _fv("f-name", "b")])
        assert [e.code for e in errors] == ["duplicate_field"]


class TestUnique:
    """Unique fields may not repeat within the type."""

    def test_taken_value(self) -> None:
        errors = validate_unique(
            _type(),
            [_fv("f-email", "a@b.co")],
            lambda fid: ["a@b.co"] if fid == "f-email" else [],
        )
        assert [e.code for e in errors] == ["not_unique"]
        assert errors[0].message == "Field 'Email' must be unique"

    def test_free_value(self) -> None:
        errors = validate_unique(_type(), [_fv("f-email", "c@d.co")], lambda fid: ["a@b.co"])
        assert errors == []

    def test_non_unique_field_ignored(self) -> None:
        """Only fields flagged unique are checked."""
        errors = validate_unique(_type(), [_fv("f-name", "Ann")], lambda fid: ["Ann"])
        assert errors == []


class TestValidateEntry:
    """Combined checks."""

    def test_references_then_required(self) -> None:
        """Unknown ids and missing required fields come back together."""
        errors = validate_entry(_type(), [_fv("bogus", "x")])
        assert [e.code for e in errors] == ["unknown_field", "required", "required"]

    def test_formats_off_by_default(self) -> None:
        values = [_fv("f-name", "Ann"), _fv("f-email", "not-an-email")]
        assert validate_entry(_type(), values) == []

    def test_formats_opt_in(self) -> None:
        values = [_fv("f-name", "Ann"), _fv("f-email", "not-an-email")]
        errors = validate_entry(
            _type(), values, config=ValidationConfig(enforce_field_formats=True)
        )
        assert [e.code for e in errors] == ["invalid_format"]
        assert errors[0].field == "Email"


class TestDefaults:
    def test_fills_only_absent_fields(self) -> None:
        """A default is appended when the field received no value at all."""
        values = apply_defaults(_type(), [_fv("f-name", "Ann")])
        assert values[-1] == _fv("f-tier", "free")

    def test_explicit_value_wins(self) -> None:
        values = apply_defaults(_type(), [_fv("f-tier", "pro")])
        assert [v for v in values if v.field_id == "f-tier"] == [_fv("f-tier", "pro")]
