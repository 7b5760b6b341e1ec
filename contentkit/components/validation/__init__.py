"""
Validation component - entry field values against their content type.
"""

from .component import (
    SiblingValues,
    apply_defaults,
    validate_entry,
    validate_formats,
    validate_references,
    validate_required,
    validate_unique,
)
from .models import DEFAULT_CONFIG, FieldError, FieldValueInput, ValidationConfig

__all__ = [
    # Checks
    "validate_entry",
    "validate_references",
    "validate_required",
    "validate_unique",
    "validate_formats",
    "apply_defaults",
    "SiblingValues",
    # Models
    "FieldError",
    "FieldValueInput",
    "ValidationConfig",
    "DEFAULT_CONFIG",
]
