"""
Field type enumeration and per-type behaviour table.

Every FieldType maps to a FieldTypeSpec holding its display label,
its format validator and its plain-text display formatter. Adding a
type means adding one member and one row in FIELD_TYPE_SPECS.

Validators return None when the value is acceptable, otherwise a
human-readable message. They are only ever called with non-empty values.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any
from urllib.parse import urlparse


class FieldType(str, Enum):
    TEXT = "TEXT"
    TEXTAREA = "TEXTAREA"
    RICH_TEXT = "RICH_TEXT"
    WYSIWYG = "WYSIWYG"
    EMAIL = "EMAIL"
    URL = "URL"
    PHONE = "PHONE"
    DATE = "DATE"
    DATETIME = "DATETIME"
    BOOLEAN = "BOOLEAN"
    NUMBER = "NUMBER"
    DECIMAL = "DECIMAL"
    COLOR = "COLOR"
    JSON = "JSON"
    SLUG = "SLUG"
    PASSWORD = "PASSWORD"
    MEDIA = "MEDIA"
    RELATION = "RELATION"


Validator = Callable[[str, dict[str, Any]], str | None]
Formatter = Callable[[str], str]

EMPTY_DISPLAY = "(empty)"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_PHONE_STRIP_RE = re.compile(r"[\s\-()]")
_PHONE_RE = re.compile(r"^\+?\d+$")
_URL_SCHEMES = {"http", "https", "ftp", "ftps"}


# --- Options ---
# Readers return None for an absent or unusable option; check_options
# reports the unusable ones when a field is defined.


def _number_option(options: dict[str, Any], key: str) -> float | None:
    raw = options.get(key)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _length_option(options: dict[str, Any], key: str) -> int | None:
    raw = options.get(key)
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int) and raw >= 0:
        return raw
    if isinstance(raw, str) and raw.isdigit():
        return int(raw)
    return None


def _pattern_option(options: dict[str, Any]) -> re.Pattern[str] | None:
    raw = options.get("pattern")
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return re.compile(raw)
    except re.error:
        return None


def check_options(field_type: FieldType | str, options: dict[str, Any] | None) -> list[str]:
    """Messages for options the type's format check could not use."""
    options = options or {}
    field_type = FieldType(field_type)
    problems: list[str] = []

    if field_type in (FieldType.NUMBER, FieldType.DECIMAL):
        for key in ("min", "max"):
            if options.get(key) is not None and _number_option(options, key) is None:
                problems.append(f"option '{key}' must be a number")

    if field_type in (FieldType.TEXT, FieldType.TEXTAREA):
        for key in ("minLength", "maxLength"):
            if options.get(key) is not None and _length_option(options, key) is None:
                problems.append(f"option '{key}' must be a non-negative integer")
        if options.get("pattern") and _pattern_option(options) is None:
            problems.append("option 'pattern' must be a valid regular expression")

    return problems


# --- Validators ---


def _always_valid(value: str, options: dict[str, Any]) -> str | None:
    return None


def _validate_email(value: str, options: dict[str, Any]) -> str | None:
    if _EMAIL_RE.match(value):
        return None
    return "Please enter a valid email address"


def _validate_url(value: str, options: dict[str, Any]) -> str | None:
    try:
        parsed = urlparse(value)
    except ValueError:
        return "Please enter a valid URL"
    if parsed.scheme in _URL_SCHEMES and parsed.netloc:
        return None
    return "Please enter a valid URL"


def _validate_phone(value: str, options: dict[str, Any]) -> str | None:
    cleaned = _PHONE_STRIP_RE.sub("", value)
    if len(cleaned) >= 10 and _PHONE_RE.match(cleaned):
        return None
    return "Please enter a valid phone number"


def _validate_number(value: str, options: dict[str, Any]) -> str | None:
    try:
        number = float(value)
    except ValueError:
        return "Please enter a valid number"

    minimum = _number_option(options, "min")
    maximum = _number_option(options, "max")
    if minimum is not None and number < minimum:
        return f"Value must be at least {options['min']}"
    if maximum is not None and number > maximum:
        return f"Value must be at most {options['max']}"
    return None


def _validate_text(value: str, options: dict[str, Any]) -> str | None:
    min_length = _length_option(options, "minLength")
    max_length = _length_option(options, "maxLength")
    pattern = _pattern_option(options)

    if min_length is not None and len(value) < min_length:
        return f"Text must be at least {min_length} characters long"
    if max_length is not None and len(value) > max_length:
        return f"Text must be at most {max_length} characters long"
    if pattern is not None and not pattern.search(value):
        return "Text does not match the required pattern"
    return None


def _validate_color(value: str, options: dict[str, Any]) -> str | None:
    if _COLOR_RE.match(value):
        return None
    return "Please enter a valid hex color (e.g., #FF0000)"


def _validate_slug(value: str, options: dict[str, Any]) -> str | None:
    if _SLUG_RE.match(value):
        return None
    return "Slug must contain only lowercase letters, numbers, and hyphens"


def _validate_boolean(value: str, options: dict[str, Any]) -> str | None:
    if value in ("true", "false"):
        return None
    return "Value must be 'true' or 'false'"


def _validate_date(value: str, options: dict[str, Any]) -> str | None:
    try:
        date.fromisoformat(value)
    except ValueError:
        return "Please enter a valid date (YYYY-MM-DD)"
    return None


def _validate_datetime(value: str, options: dict[str, Any]) -> str | None:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return "Please enter a valid ISO-8601 date and time"
    return None


def _validate_json(value: str, options: dict[str, Any]) -> str | None:
    try:
        json.loads(value)
    except ValueError:
        return "Please enter valid JSON"
    return None


def _validate_password(value: str, options: dict[str, Any]) -> str | None:
    checks = [
        len(value) >= 8,
        bool(re.search(r"[a-z]", value)),
        bool(re.search(r"[A-Z]", value)),
        bool(re.search(r"\d", value)),
        bool(re.search(r"[^A-Za-z0-9]", value)),
    ]
    if sum(checks) >= 3:
        return None
    return "Password must be at least 8 characters with uppercase, lowercase, and numbers"


# --- Formatters ---


def _verbatim(value: str) -> str:
    return value


def _format_boolean(value: str) -> str:
    return "Yes" if value == "true" else "No"


def _format_number(value: str) -> str:
    try:
        number = float(value)
    except ValueError:
        return value
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,}"


def _format_slug(value: str) -> str:
    return f"/{value}"


def _format_json(value: str) -> str:
    try:
        return json.dumps(json.loads(value), indent=2)
    except ValueError:
        return value


def _format_password(value: str) -> str:
    return "********"


# --- Behaviour Table ---


@dataclass(frozen=True)
class FieldTypeSpec:
    """Behaviour attached to one field type."""

    label: str
    validate: Validator = _always_valid
    format: Formatter = _verbatim


FIELD_TYPE_SPECS: dict[FieldType, FieldTypeSpec] = {
    FieldType.TEXT: FieldTypeSpec("Text", _validate_text),
    FieldType.TEXTAREA: FieldTypeSpec("Long Text", _validate_text),
    FieldType.RICH_TEXT: FieldTypeSpec("Rich Text"),
    FieldType.WYSIWYG: FieldTypeSpec("Rich Text"),
    FieldType.EMAIL: FieldTypeSpec("Email", _validate_email),
    FieldType.URL: FieldTypeSpec("URL", _validate_url),
    FieldType.PHONE: FieldTypeSpec("Phone", _validate_phone),
    FieldType.DATE: FieldTypeSpec("Date", _validate_date),
    FieldType.DATETIME: FieldTypeSpec("Date & Time", _validate_datetime),
    FieldType.BOOLEAN: FieldTypeSpec("Yes/No", _validate_boolean, _format_boolean),
    FieldType.NUMBER: FieldTypeSpec("Number", _validate_number, _format_number),
    FieldType.DECIMAL: FieldTypeSpec("Decimal", _validate_number, _format_number),
    FieldType.COLOR: FieldTypeSpec("Color", _validate_color),
    FieldType.JSON: FieldTypeSpec("JSON", _validate_json, _format_json),
    FieldType.SLUG: FieldTypeSpec("URL Slug", _validate_slug, _format_slug),
    FieldType.PASSWORD: FieldTypeSpec("Password", _validate_password, _format_password),
    FieldType.MEDIA: FieldTypeSpec("Media"),
    FieldType.RELATION: FieldTypeSpec("Relation"),
}


def get_spec(field_type: FieldType | str) -> FieldTypeSpec:
    """Look up the behaviour row for a field type."""
    return FIELD_TYPE_SPECS[FieldType(field_type)]


def validate_value(
    field_type: FieldType | str,
    value: str,
    options: dict[str, Any] | None = None,
) -> str | None:
    """Run the type's format check. Empty values are never rejected here."""
    if not value:
        return None
    return get_spec(field_type).validate(value, options or {})


def format_value(field_type: FieldType | str, value: str) -> str:
    """Render a stored value as display text."""
    if not value or not value.strip():
        return EMPTY_DISPLAY
    return get_spec(field_type).format(value)
