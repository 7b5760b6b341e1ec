"""
Schema component port definitions.
"""

from __future__ import annotations

from contentkit.ports.clock import TimePort
from contentkit.ports.repo import ContentTypeRepoPort

__all__ = ["ContentTypeRepoPort", "TimePort"]
