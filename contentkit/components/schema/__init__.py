"""
Schema component - ContentType registry.
"""

from .component import SchemaRegistry
from .models import (
    ContentTypeOutput,
    CreateContentTypeInput,
    FieldInput,
    SchemaValidationError,
    UpdateContentTypeInput,
)
from .ports import ContentTypeRepoPort, TimePort

__all__ = [
    # Registry
    "SchemaRegistry",
    # Input models
    "CreateContentTypeInput",
    "FieldInput",
    "UpdateContentTypeInput",
    # Output models
    "ContentTypeOutput",
    "SchemaValidationError",
    # Ports
    "ContentTypeRepoPort",
    "TimePort",
]
