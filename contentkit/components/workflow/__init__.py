"""
Workflow component - DRAFT / PUBLISHED / SCHEDULED / ARCHIVED.
"""

from .component import WorkflowController
from .models import DEFAULT_CONFIG, WorkflowConfig, WorkflowError, WorkflowOutput

__all__ = [
    "WorkflowController",
    "WorkflowConfig",
    "WorkflowError",
    "WorkflowOutput",
    "DEFAULT_CONFIG",
]
