"""
Workflow component port definitions.
"""

from __future__ import annotations

from contentkit.ports.clock import TimePort

__all__ = ["TimePort"]
