"""
Entries component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from contentkit.domain.entities import ContentType
from contentkit.ports.clock import TimePort
from contentkit.ports.repo import EntryRepoPort


class SchemaLookupPort(Protocol):
    """Read access to content type definitions."""

    def get(self, type_id: str) -> ContentType | None:
        """Get content type by ID."""
        ...


__all__ = ["EntryRepoPort", "SchemaLookupPort", "TimePort"]
