"""
Validation component models.
"""

from __future__ import annotations

from dataclasses import dataclass

# --- Configuration ---


@dataclass(frozen=True)
class ValidationConfig:
    """Validation configuration from rules."""

    enforce_field_formats: bool = False
    apply_defaults: bool = True


DEFAULT_CONFIG = ValidationConfig()


# --- Input / Error Models ---


@dataclass(frozen=True)
class FieldValueInput:
    """One incoming field value, already coerced to text."""

    field_id: str
    value: str


@dataclass(frozen=True)
class FieldError:
    """
    One field-level violation.

    `field` carries the display name of the offending field when known,
    otherwise the raw field id.
    """

    code: str
    message: str
    field: str | None = None
