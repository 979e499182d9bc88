"""Repository for removing everything a user has stored."""
from typing import Dict

from app.database import get_db_connection


# (result key, table)
USER_DATA_TABLES = (
    ("bookmarks", "bookmarks"),
    ("highlights", "highlights"),
    ("notes", "user_notes"),
    ("progress", "reading_progress"),
    ("topics", "topics"),
    ("reading_plans", "reading_plans"),
)


class UserDataRepository:
    """Repository for removing everything a user has stored."""

    @staticmethod
    def delete_all_for_user(user_id: int) -> Dict[str, int]:
        """Delete the user's rows from every table and reset their streak in one transaction.

        Returns the number of rows removed per kind. Nothing is committed if
        any statement fails.
        """
        counts: Dict[str, int] = {}
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                for key, table in USER_DATA_TABLES:
                    cur.execute(f"DELETE FROM {table} WHERE user_id = %s", (user_id,))
                    counts[key] = cur.rowcount
                cur.execute(
                    """
                    UPDATE users
                    SET streak_current = 0,
                        streak_longest = 0,
                        streak_last_date = NULL
                    WHERE id = %s
                    """,
                    (user_id,),
                )
            conn.commit()
        return counts
