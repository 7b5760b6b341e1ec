"""
Validation component - field values against a caller-defined schema.

Every check collects all violations; nothing here is fail-fast and
nothing here mutates state. Callers combine the lists and abort the
write when the result is non-empty.

Checks:
- references: each field_id must belong to the content type, once
- required: each required field needs a value non-empty after trim
- unique: values of unique fields may not repeat within the type
- formats: per-field-type rules, opt-in via ValidationConfig
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from contentkit.domain.entities import ContentType
from contentkit.domain.field_types import validate_value

from .models import DEFAULT_CONFIG, FieldError, FieldValueInput, ValidationConfig

# Returns the existing values of one field across the other entries of the type
SiblingValues = Callable[[str], Iterable[str]]


def validate_references(
    content_type: ContentType,
    field_values: Sequence[FieldValueInput],
) -> list[FieldError]:
    """Report every unknown or repeated field id."""
    known = {f.id: f for f in content_type.fields}
    errors: list[FieldError] = []
    seen: set[str] = set()

    for fv in field_values:
        if fv.field_id not in known:
            errors.append(
                FieldError(
                    code="unknown_field",
                    message=f"Field '{fv.field_id}' does not belong to content type "
                    f"'{content_type.name}'",
                    field=fv.field_id,
                )
            )
        elif fv.field_id in seen:
            label = known[fv.field_id].display_name
            errors.append(
                FieldError(
                    code="duplicate_field",
                    message=f"Field '{label}' has more than one value",
                    field=label,
                )
            )
        seen.add(fv.field_id)

    return errors


def validate_required(
    content_type: ContentType,
    field_values: Sequence[FieldValueInput],
) -> list[FieldError]:
    """Report every required field without a non-blank value."""
    filled = {fv.field_id for fv in field_values if fv.value.strip()}
    return [
        FieldError(
            code="required",
            message=f"Field '{f.display_name}' is required",
            field=f.display_name,
        )
        for f in content_type.fields
        if f.required and f.id not in filled
    ]


def validate_unique(
    content_type: ContentType,
    field_values: Sequence[FieldValueInput],
    sibling_values: SiblingValues,
) -> list[FieldError]:
    """
    Report unique fields whose value is already used in the type.

    Args:
        content_type: Owning content type.
        field_values: Candidate values.
        sibling_values: Lookup of a field's values in the other entries
            (self already excluded by the caller).
    """
    errors: list[FieldError] = []
    for fv in field_values:
        f = content_type.field_by_id(fv.field_id)
        if f is None or not f.unique or not fv.value.strip():
            continue
        if fv.value in set(sibling_values(f.id)):
            errors.append(
                FieldError(
                    code="not_unique",
                    message=f"Field '{f.display_name}' must be unique",
                    field=f.display_name,
                )
            )
    return errors


def validate_formats(
    content_type: ContentType,
    field_values: Sequence[FieldValueInput],
) -> list[FieldError]:
    """Run each field type's format rule over non-empty values."""
    errors: list[FieldError] = []
    for fv in field_values:
        f = content_type.field_by_id(fv.field_id)
        if f is None:
            continue
        problem = validate_value(f.field_type, fv.value, f.options)
        if problem:
            errors.append(
                FieldError(
                    code="invalid_format",
                    message=f"Field '{f.display_name}': {problem}",
                    field=f.display_name,
                )
            )
    return errors


def apply_defaults(
    content_type: ContentType,
    field_values: Sequence[FieldValueInput],
) -> list[FieldValueInput]:
    """Append default values for fields that received no value at all."""
    supplied = {fv.field_id for fv in field_values}
    result = list(field_values)
    for f in sorted(content_type.fields, key=lambda x: x.order):
        if f.id not in supplied and f.default_value is not None:
            result.append(FieldValueInput(field_id=f.id, value=f.default_value))
    return result


def validate_entry(
    content_type: ContentType,
    field_values: Sequence[FieldValueInput],
    *,
    sibling_values: SiblingValues | None = None,
    config: ValidationConfig = DEFAULT_CONFIG,
) -> list[FieldError]:
    """
    Run every applicable check and return the combined error list.

    Reference errors come first so unknown ids are reported even when
    required fields are also missing.
    """
    errors = validate_references(content_type, field_values)
    errors += validate_required(content_type, field_values)
    if sibling_values is not None:
        errors += validate_unique(content_type, field_values, sibling_values)
    if config.enforce_field_formats:
        errors += validate_formats(content_type, field_values)
    return errors
