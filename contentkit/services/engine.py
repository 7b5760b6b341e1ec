"""
ContentEngine - the explicitly constructed owner of every content store.

One engine is built at process start (FastAPI lifespan or CLI command)
and passed to whatever needs it; nothing here is a module singleton.
The engine also carries the operations that span components, such as
deleting a content type under the configured entry policy.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from contentkit.adapters.clock import SystemClock
from contentkit.adapters.memory import InMemoryContentTypeRepo, InMemoryEntryRepo
from contentkit.adapters.scheduler import DuePromoter
from contentkit.adapters.sqlite import SQLiteContentTypeRepo, SQLiteEntryRepo, SQLiteMigrator
from contentkit.components.entries import EntryStore
from contentkit.components.schema import SchemaRegistry, SchemaValidationError
from contentkit.components.workflow import WorkflowController
from contentkit.domain.entities import ContentEntry
from contentkit.ports.clock import TimePort
from contentkit.ports.repo import ContentTypeRepoPort, EntryRepoPort
from contentkit.rules.models import Rules

logger = logging.getLogger(__name__)

Backend = Literal["memory", "sqlite"]


@dataclass(frozen=True)
class DeleteTypeOutput:
    """Outcome of deleting a content type."""

    deleted: bool = False
    entries_removed: int = 0
    errors: list[SchemaValidationError] = field(default_factory=list)
    success: bool = True


def build_repos(backend: Backend, db_path: str | None) -> tuple[ContentTypeRepoPort, EntryRepoPort]:
    """Construct the repository pair for a backend, migrating sqlite first."""
    if backend == "memory":
        return InMemoryContentTypeRepo(), InMemoryEntryRepo()
    if backend == "sqlite":
        if not db_path:
            raise ValueError("sqlite backend needs a db_path")
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        SQLiteMigrator(db_path).run_migrations()
        return SQLiteContentTypeRepo(db_path), SQLiteEntryRepo(db_path)
    raise ValueError(f"Unknown backend: {backend}")


class ContentEngine:
    """Schema registry, entry store, workflow and scheduler wired together."""

    def __init__(
        self,
        type_repo: ContentTypeRepoPort,
        entry_repo: EntryRepoPort,
        rules: Rules | None = None,
        time: TimePort | None = None,
    ) -> None:
        self.rules = rules or Rules()
        self.time = time or SystemClock()
        self.schemas = SchemaRegistry(type_repo, self.time)
        self.entries = EntryStore(
            entry_repo,
            self.schemas,
            self.time,
            config=self.rules.validation.to_config(),
        )
        self.workflow = WorkflowController(
            self.entries,
            self.time,
            config=self.rules.workflow.to_config(),
        )
        self.promoter = DuePromoter(
            self.workflow.promote_due,
            poll_interval_seconds=self.rules.scheduler.poll_interval_seconds,
        )

    @classmethod
    def create(
        cls,
        rules: Rules | None = None,
        backend: Backend = "memory",
        db_path: str | None = None,
        time: TimePort | None = None,
    ) -> ContentEngine:
        type_repo, entry_repo = build_repos(backend, db_path)
        logger.info("Content engine using %s backend", backend)
        return cls(type_repo, entry_repo, rules=rules, time=time)

    # --- Lifecycle ---

    def start(self) -> None:
        if self.rules.scheduler.enabled:
            self.promoter.start()

    def shutdown(self) -> None:
        self.promoter.stop()

    # --- Cross-component operations ---

    def delete_content_type(self, type_id: str) -> DeleteTypeOutput:
        """
        Delete a content type, treating its entries per `schema.on_delete`.

        restrict refuses while entries exist, cascade deletes them first,
        orphan leaves them in place.
        """
        if self.schemas.get(type_id) is None:
            return DeleteTypeOutput(
                deleted=False,
                errors=[
                    SchemaValidationError(
                        code="not_found", message=f"Content type {type_id} not found"
                    )
                ],
                success=False,
            )

        policy = self.rules.schema_.on_delete
        removed = 0

        if policy == "restrict":
            remaining = self.entries.count(type_id)
            if remaining:
                return DeleteTypeOutput(
                    deleted=False,
                    errors=[
                        SchemaValidationError(
                            code="has_entries",
                            message=f"Content type still has {remaining} entries",
                        )
                    ],
                    success=False,
                )
        elif policy == "cascade":
            removed = self.entries.delete_all_for_type(type_id)

        deleted = self.schemas.delete(type_id)
        return DeleteTypeOutput(deleted=deleted, entries_removed=removed, success=deleted)

    def promote_due(self, now: datetime | None = None) -> list[ContentEntry]:
        return self.workflow.promote_due(now)
