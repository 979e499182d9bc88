"""Repository for user-curated topical verse collections."""
import json
from typing import Any, Dict, List, Optional

from app.database import get_db_connection


TOPIC_FIELDS = "id, user_id, name, verses, created_at, updated_at"


class TopicRepository:
    """Repository for topics; each row keeps its verse references as a JSONB array."""

    @staticmethod
    def _normalize(row) -> Optional[Dict[str, Any]]:
        if not row:
            return None
        topic = dict(row)
        verses = topic.get("verses")
        if isinstance(verses, str):
            verses = json.loads(verses)
        topic["verses"] = verses or []
        return topic

    @staticmethod
    def create_topic(user_id: int, name: str, verses: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Insert a topic; returns None when the user already has one with this name."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO topics (user_id, name, verses)
                    VALUES (%s, %s, %s::jsonb)
                    ON CONFLICT (user_id, name) DO NOTHING
                    RETURNING {TOPIC_FIELDS}
                    """,
                    (user_id, name, json.dumps(verses)),
                )
                row = cur.fetchone()
                conn.commit()
        return TopicRepository._normalize(row)

    @staticmethod
    def list_topics(user_id: int, search: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
        query = [f"SELECT {TOPIC_FIELDS}", "FROM topics", "WHERE user_id = %s"]
        params: List[Any] = [user_id]
        if search:
            query.append("AND name ILIKE %s")
            params.append(f"%{search}%")
        query.append("ORDER BY created_at DESC LIMIT %s")
        params.append(limit)

        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("\n".join(query), tuple(params))
                rows = cur.fetchall()
        return [TopicRepository._normalize(row) for row in rows]

    @staticmethod
    def get_topic(user_id: int, topic_id: int) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {TOPIC_FIELDS} FROM topics WHERE id = %s AND user_id = %s",
                    (topic_id, user_id),
                )
                row = cur.fetchone()
        return TopicRepository._normalize(row)

    @staticmethod
    def rename_topic(user_id: int, topic_id: int, name: str) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE topics
                    SET name = %s, updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND user_id = %s
                    RETURNING {TOPIC_FIELDS}
                    """,
                    (name, topic_id, user_id),
                )
                row = cur.fetchone()
                conn.commit()
        return TopicRepository._normalize(row)

    @staticmethod
    def save_verses(user_id: int, topic_id: int, verses: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE topics
                    SET verses = %s::jsonb, updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND user_id = %s
                    RETURNING {TOPIC_FIELDS}
                    """,
                    (json.dumps(verses), topic_id, user_id),
                )
                row = cur.fetchone()
                conn.commit()
        return TopicRepository._normalize(row)

    @staticmethod
    def delete_topic(user_id: int, topic_id: int) -> bool:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM topics WHERE id = %s AND user_id = %s RETURNING id",
                    (topic_id, user_id),
                )
                deleted = cur.fetchone() is not None
                conn.commit()
        return deleted

    @staticmethod
    def find_by_verse(
        user_id: int,
        book_id: str,
        chapter: int,
        verse_start: int,
        verse_end: int,
    ) -> List[Dict[str, Any]]:
        """Topics holding a reference that overlaps verse_start..verse_end of the chapter."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {TOPIC_FIELDS}
                    FROM topics t
                    WHERE t.user_id = %s
                      AND EXISTS (
                        SELECT 1
                        FROM jsonb_array_elements(t.verses) AS v
                        WHERE v->>'book_id' = %s
                          AND (v->>'chapter')::int = %s
                          AND (v->>'verse_start')::int <= %s
                          AND (v->>'verse_start')::int + (v->>'verse_count')::int - 1 >= %s
                      )
                    ORDER BY t.name ASC
                    """,
                    (user_id, book_id, chapter, verse_end, verse_start),
                )
                rows = cur.fetchall()
        return [TopicRepository._normalize(row) for row in rows]

    @staticmethod
    def get_stats(user_id: int) -> Dict[str, Any]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT COUNT(*) AS total_topics,
                           COALESCE(SUM(jsonb_array_length(verses)), 0) AS total_verses
                    FROM topics
                    WHERE user_id = %s
                    """,
                    (user_id,),
                )
                row = cur.fetchone()
        return dict(row) if row else {"total_topics": 0, "total_verses": 0}
