"""Shared storage for per-user annotations anchored to a verse range."""
from typing import Any, Dict, List, Optional

from app.database import get_db_connection


class VerseAnnotationRepository:
    """Base repository for tables keyed by (user_id, book_id, chapter, verse_start, verse_count).

    Subclasses set TABLE, the extra columns they carry and whether a user may
    annotate the same verse range twice.
    """

    TABLE = ""
    EXTRA_FIELDS: tuple = ()
    FILTER_FIELDS: tuple = ("book_id", "chapter")
    UNIQUE_RANGE = True

    ANCHOR_FIELDS = ("book_id", "chapter", "verse_start", "verse_count")

    @classmethod
    def _writable(cls) -> tuple:
        return cls.ANCHOR_FIELDS + cls.EXTRA_FIELDS

    @classmethod
    def _select_fields(cls) -> str:
        return ", ".join(("id", "user_id") + cls._writable() + ("created_at", "updated_at"))

    @classmethod
    def list_for_user(
        cls,
        user_id: int,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        query = [f"SELECT {cls._select_fields()}", f"FROM {cls.TABLE}", "WHERE user_id = %s"]
        params: List[Any] = [user_id]

        for column, value in (filters or {}).items():
            if column not in cls.FILTER_FIELDS or value is None:
                continue
            query.append(f"AND {column} = %s")
            params.append(value)

        query.append("ORDER BY created_at DESC LIMIT %s")
        params.append(limit)

        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("\n".join(query), tuple(params))
                rows = cur.fetchall()
        return [dict(row) for row in rows]

    @classmethod
    def get_for_user(cls, user_id: int, item_id: int) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {cls._select_fields()} FROM {cls.TABLE} WHERE id = %s AND user_id = %s",
                    (item_id, user_id),
                )
                row = cur.fetchone()
        return dict(row) if row else None

    @classmethod
    def create(cls, user_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert a row; returns None if the user already annotated this range."""
        columns = [column for column in cls._writable() if column in values]
        placeholders = ", ".join(["%s"] * (len(columns) + 1))
        conflict = (
            "ON CONFLICT (user_id, book_id, chapter, verse_start, verse_count) DO NOTHING"
            if cls.UNIQUE_RANGE
            else ""
        )
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO {cls.TABLE} (user_id, {", ".join(columns)})
                    VALUES ({placeholders})
                    {conflict}
                    RETURNING {cls._select_fields()}
                    """,
                    (user_id, *[values[column] for column in columns]),
                )
                row = cur.fetchone()
                conn.commit()
        return dict(row) if row else None

    @classmethod
    def update(cls, user_id: int, item_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        columns = [column for column in cls._writable() if values.get(column) is not None]
        if not columns:
            return cls.get_for_user(user_id, item_id)

        assignments = ", ".join(f"{column} = %s" for column in columns)
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE {cls.TABLE}
                    SET {assignments}, updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND user_id = %s
                    RETURNING {cls._select_fields()}
                    """,
                    (*[values[column] for column in columns], item_id, user_id),
                )
                row = cur.fetchone()
                conn.commit()
        return dict(row) if row else None

    @classmethod
    def delete(cls, user_id: int, item_id: int) -> bool:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"DELETE FROM {cls.TABLE} WHERE id = %s AND user_id = %s RETURNING id",
                    (item_id, user_id),
                )
                deleted = cur.fetchone() is not None
                conn.commit()
        return deleted


class BookmarkRepository(VerseAnnotationRepository):
    """Repository for verse bookmarks."""
    TABLE = "bookmarks"


class HighlightRepository(VerseAnnotationRepository):
    """Repository for coloured verse highlights."""
    TABLE = "highlights"
    EXTRA_FIELDS = ("color",)
    FILTER_FIELDS = ("book_id", "chapter", "color")


class UserNotesRepository(VerseAnnotationRepository):
    """Repository for storing and retrieving user-authored study notes."""
    TABLE = "user_notes"
    EXTRA_FIELDS = ("content", "visibility")
    FILTER_FIELDS = ("book_id", "chapter", "visibility")
    UNIQUE_RANGE = False

    @classmethod
    def list_public(
        cls,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        """Public notes from every user, newest first."""
        query = [f"SELECT {cls._select_fields()}", f"FROM {cls.TABLE}", "WHERE visibility = 'public'"]
        params: List[Any] = []

        for column in ("book_id", "chapter"):
            value = (filters or {}).get(column)
            if value is None:
                continue
            query.append(f"AND {column} = %s")
            params.append(value)

        query.append("ORDER BY created_at DESC LIMIT %s")
        params.append(limit)

        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("\n".join(query), tuple(params))
                rows = cur.fetchall()
        return [dict(row) for row in rows]

    @classmethod
    def find_public_by_verse(
        cls,
        book_id: str,
        chapter: int,
        verse_start: int,
        verse_end: int,
    ) -> List[Dict[str, Any]]:
        """Public notes whose verse range overlaps verse_start..verse_end of the chapter."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {cls._select_fields()}
                    FROM {cls.TABLE}
                    WHERE visibility = 'public'
                      AND book_id = %s
                      AND chapter = %s
                      AND verse_start <= %s
                      AND verse_start + verse_count - 1 >= %s
                    ORDER BY verse_start ASC, created_at DESC
                    """,
                    (book_id, chapter, verse_end, verse_start),
                )
                rows = cur.fetchall()
        return [dict(row) for row in rows]

    @classmethod
    def get_public(cls, note_id: int) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {cls._select_fields()} FROM {cls.TABLE} WHERE id = %s AND visibility = 'public'",
                    (note_id,),
                )
                row = cur.fetchone()
        return dict(row) if row else None
