"""
Workflow component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from contentkit.domain.entities import ContentEntry

# --- Configuration ---


@dataclass(frozen=True)
class WorkflowConfig:
    """Workflow configuration from rules."""

    archived_is_terminal: bool = False
    require_future_schedule: bool = False
    schedule_grace_seconds: int = 0


DEFAULT_CONFIG = WorkflowConfig()


# --- Errors / Output ---


@dataclass(frozen=True)
class WorkflowError:
    """Workflow transition error."""

    code: str
    message: str
    entry_id: str | None = None


@dataclass(frozen=True)
class WorkflowOutput:
    """Output for a workflow action."""

    entry: ContentEntry | None = None
    errors: list[WorkflowError] = field(default_factory=list)
    success: bool = True
