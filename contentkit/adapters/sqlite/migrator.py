"""
Forward-only SQL migrations for the sqlite backend.

Each `NNNN_name.sql` file holds an up script, optionally followed by a
`-- Down` section that is kept for manual rollback and never executed.
Applied files are recorded by name in `schema_migrations`.
"""

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

DOWN_MARKER = "-- Down"


@dataclass(frozen=True)
class Migration:
    name: str
    up_sql: str

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        text = path.read_text()
        up_sql, _, _ = text.partition(DOWN_MARKER)
        return cls(name=path.name, up_sql=up_sql)


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path = MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        return conn

    def available(self) -> list[Migration]:
        return [Migration.from_file(p) for p in sorted(self.migrations_dir.glob("*.sql"))]

    def applied(self) -> set[str]:
        conn = self._connect()
        try:
            return {row[0] for row in conn.execute("SELECT name FROM schema_migrations")}
        finally:
            conn.close()

    def pending(self) -> list[Migration]:
        done = self.applied()
        return [m for m in self.available() if m.name not in done]

    def run_migrations(self) -> list[str]:
        """Apply pending migrations in name order; returns the names applied."""
        todo = self.pending()
        if not todo:
            return []

        conn = self._connect()
        try:
            for migration in todo:
                logger.info("Applying migration: %s", migration.name)
                self._apply(conn, migration)
        finally:
            conn.close()
        return [m.name for m in todo]

    def _apply(self, conn: sqlite3.Connection, migration: Migration) -> None:
        try:
            conn.executescript(migration.up_sql)
            conn.execute("INSERT INTO schema_migrations (name) VALUES (?)", (migration.name,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {migration.name} failed: {e}") from e
