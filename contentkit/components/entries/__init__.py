"""
Entries component - ContentEntry storage with validation and slugs.
"""

from .component import EntryStore
from .models import (
    NOT_FOUND,
    STATUS_CONFLICT,
    CreateEntryInput,
    EntryOutput,
    ListEntriesInput,
    UpdateEntryInput,
    coerce_value,
    field_value,
)
from .ports import EntryRepoPort, SchemaLookupPort, TimePort

__all__ = [
    # Store
    "EntryStore",
    # Input models
    "CreateEntryInput",
    "UpdateEntryInput",
    "ListEntriesInput",
    "field_value",
    "coerce_value",
    # Output models
    "EntryOutput",
    "NOT_FOUND",
    "STATUS_CONFLICT",
    # Ports
    "EntryRepoPort",
    "SchemaLookupPort",
    "TimePort",
]
