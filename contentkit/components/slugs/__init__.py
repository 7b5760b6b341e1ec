"""
Slug component - derivation and scoped uniqueness of slugs.
"""

from .component import derive_candidate, ensure_unique, slugify

__all__ = [
    "derive_candidate",
    "ensure_unique",
    "slugify",
]
