"""
In-memory repositories for tests and single-process deployments.
"""

from .repos import InMemoryContentTypeRepo, InMemoryEntryRepo

__all__ = ["InMemoryContentTypeRepo", "InMemoryEntryRepo"]
