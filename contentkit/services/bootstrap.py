"""
Demo data for local development.
"""

from __future__ import annotations

import logging

from contentkit.components.schema import CreateContentTypeInput, FieldInput
from contentkit.domain.entities import ContentType
from contentkit.services.engine import ContentEngine

logger = logging.getLogger(__name__)

DEMO_TYPE_NAME = "product"


def seed_demo(engine: ContentEngine) -> ContentType:
    """Create the demo `product` content type unless it already exists."""
    existing = engine.schemas.get_by_slug(DEMO_TYPE_NAME)
    if existing is not None:
        logger.info("Demo content type already present (%s)", existing.id)
        return existing

    result = engine.schemas.create(
        CreateContentTypeInput(
            name=DEMO_TYPE_NAME,
            display_name="Product",
            description="Demo catalogue item",
            fields=[
                FieldInput(name="title", display_name="Title", field_type="TEXT", required=True),
                FieldInput(name="price", display_name="Price", field_type="NUMBER", required=True),
                FieldInput(name="description", display_name="Description", field_type="TEXTAREA"),
            ],
        )
    )
    if not result.success or result.content_type is None:
        raise RuntimeError("; ".join(e.message for e in result.errors))
    return result.content_type
