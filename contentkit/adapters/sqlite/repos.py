import json
import sqlite3
from datetime import datetime
from typing import Any

from contentkit.domain.entities import (
    ContentEntry,
    ContentField,
    ContentFieldValue,
    ContentType,
    as_utc,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def to_db_dt(value: datetime | None) -> str | None:
    # Fixed-width UTC text so that SQL string comparison orders by time
    return as_utc(value).isoformat(timespec="microseconds") if value else None


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteContentTypeRepo(_SQLiteRepo):
    def insert(self, content_type: ContentType) -> ContentType:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO content_types (
                    id, name, display_name, description, slug, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    content_type.id,
                    content_type.name,
                    content_type.display_name,
                    content_type.description,
                    content_type.slug,
                    to_db_dt(content_type.created_at),
                    to_db_dt(content_type.updated_at),
                ),
            )
            self._write_fields(conn, content_type)
            conn.commit()
            return content_type
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def update(self, content_type: ContentType) -> ContentType:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE content_types SET
                    name = ?, display_name = ?, description = ?, slug = ?, updated_at = ?
                WHERE id = ?
            """,
                (
                    content_type.name,
                    content_type.display_name,
                    content_type.description,
                    content_type.slug,
                    to_db_dt(content_type.updated_at),
                    content_type.id,
                ),
            )
            if cursor.rowcount == 0:
                raise KeyError(f"Content type not found: {content_type.id}")

            # Field list is replaced wholesale
            conn.execute(
                "DELETE FROM content_fields WHERE content_type_id = ?", (content_type.id,)
            )
            self._write_fields(conn, content_type)
            conn.commit()
            return content_type
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _write_fields(self, conn: sqlite3.Connection, content_type: ContentType) -> None:
        for f in content_type.fields:
            conn.execute(
                """
                INSERT INTO content_fields (
                    id, content_type_id, name, display_name, field_type, required,
                    is_unique, default_value, options_json, related_type, position
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    f.id,
                    content_type.id,
                    f.name,
                    f.display_name,
                    f.field_type.value,
                    int(f.required),
                    int(f.unique),
                    f.default_value,
                    json.dumps(f.options) if f.options is not None else None,
                    f.related_type,
                    f.order,
                ),
            )

    def _row_to_type(self, conn: sqlite3.Connection, row: dict[str, Any]) -> ContentType:
        field_rows = conn.execute(
            "SELECT * FROM content_fields WHERE content_type_id = ? ORDER BY position ASC",
            (row["id"],),
        ).fetchall()

        fields = [
            ContentField(
                id=f_row["id"],
                name=f_row["name"],
                display_name=f_row["display_name"],
                field_type=f_row["field_type"],
                required=bool(f_row["required"]),
                unique=bool(f_row["is_unique"]),
                default_value=f_row["default_value"],
                options=json.loads(f_row["options_json"]) if f_row["options_json"] else None,
                related_type=f_row["related_type"],
                order=f_row["position"],
                content_type_id=row["id"],
            )
            for f_row in field_rows
        ]

        return ContentType(
            id=row["id"],
            name=row["name"],
            display_name=row["display_name"],
            description=row["description"],
            slug=row["slug"],
            fields=fields,
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )

    def get_by_id(self, type_id: str) -> ContentType | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM content_types WHERE id = ?", (type_id,)).fetchone()
            return self._row_to_type(conn, row) if row else None
        finally:
            conn.close()

    def get_by_slug(self, slug: str) -> ContentType | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM content_types WHERE slug = ?", (slug,)).fetchone()
            return self._row_to_type(conn, row) if row else None
        finally:
            conn.close()

    def list_all(self) -> list[ContentType]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM content_types ORDER BY rowid ASC").fetchall()
            return [self._row_to_type(conn, r) for r in rows]
        finally:
            conn.close()

    def delete(self, type_id: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute("DELETE FROM content_types WHERE id = ?", (type_id,))
            conn.commit()
            return cursor.rowcount > 0
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


class SQLiteEntryRepo(_SQLiteRepo):
    def insert(self, entry: ContentEntry) -> ContentEntry:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO content_entries (
                    id, content_type_id, slug, status, published_at, scheduled_at,
                    author_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    entry.id,
                    entry.content_type_id,
                    entry.slug,
                    entry.status,
                    to_db_dt(entry.published_at),
                    to_db_dt(entry.scheduled_at),
                    entry.author_id,
                    to_db_dt(entry.created_at),
                    to_db_dt(entry.updated_at),
                ),
            )
            self._write_values(conn, entry)
            conn.commit()
            return entry
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def update(self, entry: ContentEntry) -> ContentEntry:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE content_entries SET
                    slug = ?, status = ?, published_at = ?, scheduled_at = ?,
                    author_id = ?, updated_at = ?
                WHERE id = ?
            """,
                (
                    entry.slug,
                    entry.status,
                    to_db_dt(entry.published_at),
                    to_db_dt(entry.scheduled_at),
                    entry.author_id,
                    to_db_dt(entry.updated_at),
                    entry.id,
                ),
            )
            if cursor.rowcount == 0:
                raise KeyError(f"Entry not found: {entry.id}")

            conn.execute("DELETE FROM content_field_values WHERE entry_id = ?", (entry.id,))
            self._write_values(conn, entry)
            conn.commit()
            return entry
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _write_values(self, conn: sqlite3.Connection, entry: ContentEntry) -> None:
        for i, fv in enumerate(entry.field_values):
            conn.execute(
                """
                INSERT INTO content_field_values (id, entry_id, field_id, value, position)
                VALUES (?, ?, ?, ?, ?)
            """,
                (fv.id, entry.id, fv.field_id, fv.value, i),
            )

    def _row_to_entry(self, conn: sqlite3.Connection, row: dict[str, Any]) -> ContentEntry:
        value_rows = conn.execute(
            "SELECT * FROM content_field_values WHERE entry_id = ? ORDER BY position ASC",
            (row["id"],),
        ).fetchall()

        return ContentEntry(
            id=row["id"],
            content_type_id=row["content_type_id"],
            slug=row["slug"],
            status=row["status"],
            published_at=parse_dt(row["published_at"]),
            scheduled_at=parse_dt(row["scheduled_at"]),
            author_id=row["author_id"],
            field_values=[
                ContentFieldValue(
                    id=v["id"], field_id=v["field_id"], entry_id=row["id"], value=v["value"]
                )
                for v in value_rows
            ],
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )

    def _select(self, where: str, params: tuple[Any, ...]) -> list[ContentEntry]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM content_entries WHERE {where} ORDER BY rowid ASC", params
            ).fetchall()
            return [self._row_to_entry(conn, r) for r in rows]
        finally:
            conn.close()

    def get_by_id(self, entry_id: str) -> ContentEntry | None:
        found = self._select("id = ?", (entry_id,))
        return found[0] if found else None

    def get_by_slug(self, content_type_id: str, slug: str) -> ContentEntry | None:
        found = self._select("content_type_id = ? AND slug = ?", (content_type_id, slug))
        return found[0] if found else None

    def list_by_owner(self, content_type_id: str) -> list[ContentEntry]:
        return self._select("content_type_id = ?", (content_type_id,))

    def find_due(self, now: datetime) -> list[ContentEntry]:
        return self._select(
            "status = 'SCHEDULED' AND scheduled_at IS NOT NULL AND scheduled_at <= ?",
            (to_db_dt(now),),
        )

    def delete(self, entry_id: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute("DELETE FROM content_entries WHERE id = ?", (entry_id,))
            conn.commit()
            return cursor.rowcount > 0
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
