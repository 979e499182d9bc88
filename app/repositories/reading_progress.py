"""Repository for chapters a user has read and their daily reading streak."""
from typing import Any, Dict, List, Optional

from app.database import get_db_connection


class ReadingProgressRepository:
    """Repository for chapters a user has read and their daily reading streak."""

    @staticmethod
    def record_chapter(user_id: int, book_id: str, chapter: int) -> bool:
        """Store a chapter as read; returns False if it was already recorded."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO reading_progress (user_id, book_id, chapter)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (user_id, book_id, chapter) DO NOTHING
                    RETURNING id
                    """,
                    (user_id, book_id, chapter),
                )
                inserted = cur.fetchone() is not None
                conn.commit()
        return inserted

    @staticmethod
    def list_chapters(user_id: int, book_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = [
            "SELECT book_id, chapter, first_read_at",
            "FROM reading_progress",
            "WHERE user_id = %s",
        ]
        params: List[Any] = [user_id]
        if book_id is not None:
            query.append("AND book_id = %s")
            params.append(book_id)
        query.append("ORDER BY book_id ASC, chapter ASC")

        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("\n".join(query), tuple(params))
                rows = cur.fetchall()
        return [dict(row) for row in rows]

    @staticmethod
    def get_streak(user_id: int) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT streak_current, streak_longest, streak_last_date
                    FROM users
                    WHERE id = %s
                    """,
                    (user_id,),
                )
                row = cur.fetchone()
        return dict(row) if row else None

    @staticmethod
    def save_streak(user_id: int, current: int, longest: int, last_date) -> None:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE users
                    SET streak_current = %s,
                        streak_longest = %s,
                        streak_last_date = %s
                    WHERE id = %s
                    """,
                    (current, longest, last_date, user_id),
                )
                conn.commit()
