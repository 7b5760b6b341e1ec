"""
Shared fixtures: a fixed clock, in-memory repos and a wired engine.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from contentkit.adapters.clock import FixedClock
from contentkit.adapters.memory import InMemoryContentTypeRepo, InMemoryEntryRepo
from contentkit.components.schema import CreateContentTypeInput, FieldInput
from contentkit.domain.entities import ContentType
from contentkit.rules.models import Rules
from contentkit.services.engine import ContentEngine

NOW = datetime(2026, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2026-06-15 12:00 UTC."""
    return FixedClock(NOW)


@pytest.fixture
def rules() -> Rules:
    return Rules()


@pytest.fixture
def engine(clock: FixedClock, rules: Rules) -> ContentEngine:
    """Engine over fresh in-memory repos."""
    return ContentEngine(InMemoryContentTypeRepo(), InMemoryEntryRepo(), rules=rules, time=clock)


@pytest.fixture
def review_type(engine: ContentEngine) -> ContentType:
    """`review` type: required TEXT title, required NUMBER rating, optional body."""
    result = engine.schemas.create(
        CreateContentTypeInput(
            name="review",
            display_name="Review",
            fields=[
                FieldInput(name="title", display_name="Title", field_type="TEXT", required=True),
                FieldInput(
                    name="rating", display_name="Rating", field_type="NUMBER", required=True
                ),
                FieldInput(name="body", display_name="Body", field_type="TEXTAREA"),
            ],
        )
    )
    assert result.success
    assert result.content_type is not None
    return result.content_type

