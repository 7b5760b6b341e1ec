"""
Slug component - URL-safe identifier derivation and deduplication.

Scopes:
- content types: globally unique
- entries: unique within their content type, self excluded on update

Collisions are resolved by appending -1, -2, ... to the candidate.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from contentkit.domain.entities import ContentField
from contentkit.domain.field_types import FieldType

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one hyphen, trim hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def derive_candidate(
    *,
    entry_id: str,
    fields: Iterable[ContentField],
    field_values: Iterable[tuple[str, str]],
    slug: str | None = None,
) -> str:
    """
    Pick the slug candidate for a new entry.

    Args:
        entry_id: Id minted for the entry, used by the fallback.
        fields: Field definitions of the entry's content type.
        field_values: (field_id, value) pairs in input order.
        slug: Caller-supplied slug, used verbatim when non-empty.

    Returns:
        Caller slug, else the slugified first TEXT value, else "entry-{id}".
    """
    if slug:
        return slug

    text_field_ids = {f.id for f in fields if f.field_type == FieldType.TEXT}
    for field_id, value in field_values:
        if field_id in text_field_ids:
            candidate = slugify(value)
            if candidate:
                return candidate

    return f"entry-{entry_id}"


def ensure_unique(candidate: str, is_taken: Callable[[str], bool]) -> str:
    """
    Return candidate, or the first free candidate-N.

    Args:
        candidate: Preferred slug.
        is_taken: Scope query; True when the slug is already used in scope.
    """
    if not is_taken(candidate):
        return candidate

    counter = 1
    while is_taken(f"{candidate}-{counter}"):
        counter += 1
    return f"{candidate}-{counter}"
