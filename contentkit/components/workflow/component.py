"""
Workflow component - publication state machine over entries.

States: DRAFT (initial), PUBLISHED, SCHEDULED, ARCHIVED.

| action     | to        | side effect                              |
|------------|-----------|------------------------------------------|
| publish    | PUBLISHED | published_at = now, scheduled_at cleared |
| unpublish  | DRAFT     | published_at cleared                     |
| schedule   | SCHEDULED | scheduled_at = when                      |
| unschedule | DRAFT     | scheduled_at cleared                     |
| archive    | ARCHIVED  | none                                     |

Every action is allowed from every state unless ARCHIVED is configured
as terminal. All writes go through EntryStore.update; the terminal
check travels with the write as an expected-status precondition.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from contentkit.components.entries import STATUS_CONFLICT, EntryStore, UpdateEntryInput
from contentkit.domain.entities import ENTRY_STATUSES, ContentEntry, as_utc

from .models import DEFAULT_CONFIG, WorkflowConfig, WorkflowError, WorkflowOutput
from .ports import TimePort

logger = logging.getLogger(__name__)


def _failure(code: str, message: str, entry_id: str) -> WorkflowOutput:
    return WorkflowOutput(
        entry=None,
        errors=[WorkflowError(code=code, message=message, entry_id=entry_id)],
        success=False,
    )


class WorkflowController:
    """Applies workflow actions to entries."""

    def __init__(
        self,
        entries: EntryStore,
        time: TimePort,
        config: WorkflowConfig = DEFAULT_CONFIG,
    ) -> None:
        self._entries = entries
        self._time = time
        self._config = config

    def publish(self, entry_id: str) -> WorkflowOutput:
        return self._apply(
            entry_id,
            "PUBLISHED",
            {"published_at": self._time.now_utc(), "scheduled_at": None},
        )

    def unpublish(self, entry_id: str) -> WorkflowOutput:
        return self._apply(entry_id, "DRAFT", {"published_at": None})

    def schedule(self, entry_id: str, when: datetime | None) -> WorkflowOutput:
        if when is None:
            return _failure("schedule_required", "A schedule time is required", entry_id)

        when = as_utc(when)
        if self._config.require_future_schedule:
            earliest = self._time.now_utc() + timedelta(
                seconds=self._config.schedule_grace_seconds
            )
            if when < earliest:
                return _failure(
                    "schedule_in_past",
                    f"Schedule time {when.isoformat()} is before {earliest.isoformat()}",
                    entry_id,
                )

        return self._apply(entry_id, "SCHEDULED", {"scheduled_at": when})

    def unschedule(self, entry_id: str) -> WorkflowOutput:
        return self._apply(entry_id, "DRAFT", {"scheduled_at": None})

    def archive(self, entry_id: str) -> WorkflowOutput:
        return self._apply(entry_id, "ARCHIVED", {})

    def transition(
        self,
        entry_id: str,
        to_status: str,
        scheduled_at: datetime | None = None,
    ) -> WorkflowOutput:
        """
        Move an entry to `to_status` using the matching action.

        DRAFT undoes whichever of schedule or publish put the entry where
        it is: a SCHEDULED entry is unscheduled, anything else unpublished.
        """
        if to_status == "PUBLISHED":
            return self.publish(entry_id)
        if to_status == "SCHEDULED":
            return self.schedule(entry_id, scheduled_at)
        if to_status == "ARCHIVED":
            return self.archive(entry_id)
        if to_status == "DRAFT":
            current = self._entries.get(entry_id)
            if current is not None and current.status == "SCHEDULED":
                return self.unschedule(entry_id)
            return self.unpublish(entry_id)
        return _failure(
            "invalid_transition",
            f"Unknown target status '{to_status}'",
            entry_id,
        )

    def find_due(self, now: datetime | None = None) -> list[ContentEntry]:
        return self._entries.find_due(now or self._time.now_utc())

    def promote_due(self, now: datetime | None = None) -> list[ContentEntry]:
        """Publish every due scheduled entry; returns the promoted entries."""
        promoted: list[ContentEntry] = []
        for entry in self.find_due(now):
            result = self.publish(entry.id)
            if result.success and result.entry is not None:
                promoted.append(result.entry)
            else:
                logger.warning(
                    "Could not promote entry %s: %s",
                    entry.id,
                    "; ".join(e.message for e in result.errors),
                )
        if promoted:
            logger.info("Promoted %d scheduled entries", len(promoted))
        return promoted

    def _apply(self, entry_id: str, to_status: str, changes: dict[str, Any]) -> WorkflowOutput:
        # The archived guard is checked by EntryStore under the per-type lock
        expected: tuple[str, ...] | None = None
        if self._config.archived_is_terminal and to_status != "ARCHIVED":
            expected = tuple(s for s in ENTRY_STATUSES if s != "ARCHIVED")

        result = self._entries.update(
            UpdateEntryInput(
                entry_id=entry_id,
                updates={"status": to_status, **changes},
                expected_status=expected,
            )
        )
        if not result.success or result.entry is None:
            if any(e.code == STATUS_CONFLICT for e in result.errors):
                return _failure(
                    "invalid_transition",
                    f"Entry {entry_id} is archived and cannot move to {to_status}",
                    entry_id,
                )
            return WorkflowOutput(
                entry=None,
                errors=[
                    WorkflowError(code=e.code, message=e.message, entry_id=entry_id)
                    for e in result.errors
                ],
                success=False,
            )

        logger.info("Entry %s -> %s", entry_id, to_status)
        return WorkflowOutput(entry=result.entry, errors=[], success=True)
