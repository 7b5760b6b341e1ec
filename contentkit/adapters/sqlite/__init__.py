"""
SQLite repositories and schema migrations.
"""

from .migrator import MIGRATIONS_DIR, SQLiteMigrator
from .repos import SQLiteContentTypeRepo, SQLiteEntryRepo

__all__ = ["MIGRATIONS_DIR", "SQLiteMigrator", "SQLiteContentTypeRepo", "SQLiteEntryRepo"]
