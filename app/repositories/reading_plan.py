"""Repository for user-created reading plans.

A plan is stored as one row; its daily readings live in a JSONB column and
every write bumps ``version`` so stale read-modify-write cycles can be
detected.
"""
import json
from typing import Any, Dict, List, Optional

from app.database import get_db_connection


class ReadingPlanRepository:
    """Repository for user-created reading plans."""

    PLAN_FIELDS = (
        "id, user_id, name, start_book, start_chapter, end_book, end_chapter, "
        "start_date, duration_in_days, requested_duration_days, daily_readings, "
        "status, is_public, shared_with, version, created_at, updated_at"
    )

    @staticmethod
    def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(row)
        readings = row.get("daily_readings")
        if isinstance(readings, str):
            row["daily_readings"] = json.loads(readings)
        elif readings is None:
            row["daily_readings"] = []
        row["shared_with"] = list(row.get("shared_with") or [])
        return row

    @classmethod
    def create_plan(
        cls,
        *,
        user_id: int,
        name: str,
        start_book: str,
        start_chapter: int,
        end_book: str,
        end_chapter: int,
        start_date,
        duration_in_days: int,
        requested_duration_days: int,
        daily_readings: List[Dict[str, Any]],
        is_public: bool,
        shared_with: List[int],
    ) -> Dict[str, Any]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO reading_plans
                        (user_id, name, start_book, start_chapter, end_book, end_chapter,
                         start_date, duration_in_days, requested_duration_days, daily_readings,
                         is_public, shared_with)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s::jsonb, %s, %s::integer[])
                    RETURNING {cls.PLAN_FIELDS}
                    """,
                    (
                        user_id,
                        name,
                        start_book,
                        start_chapter,
                        end_book,
                        end_chapter,
                        start_date,
                        duration_in_days,
                        requested_duration_days,
                        json.dumps(daily_readings),
                        is_public,
                        list(shared_with),
                    ),
                )
                row = cur.fetchone()
                conn.commit()
        return cls._normalize(row)

    @classmethod
    def list_visible_plans(cls, user_id: int, limit: int = 50) -> List[Dict[str, Any]]:
        """Plans owned by, public, or shared with the user, newest first."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {cls.PLAN_FIELDS}
                    FROM reading_plans
                    WHERE user_id = %s
                       OR is_public = TRUE
                       OR %s = ANY(shared_with)
                    ORDER BY created_at DESC
                    LIMIT %s
                    """,
                    (user_id, user_id, limit),
                )
                rows = cur.fetchall()
        return [cls._normalize(row) for row in rows]

    @classmethod
    def get_plan(cls, plan_id: int) -> Optional[Dict[str, Any]]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {cls.PLAN_FIELDS} FROM reading_plans WHERE id = %s LIMIT 1",
                    (plan_id,),
                )
                row = cur.fetchone()
        if not row:
            return None
        return cls._normalize(row)

    @classmethod
    def update_plan(
        cls,
        plan_id: int,
        user_id: int,
        expected_version: int,
        *,
        name: Optional[str] = None,
        status: Optional[str] = None,
        is_public: Optional[bool] = None,
    ) -> Optional[Dict[str, Any]]:
        """Apply metadata changes; returns None when the version no longer matches."""
        assignments = ["version = version + 1", "updated_at = CURRENT_TIMESTAMP"]
        params: List[Any] = []
        if name is not None:
            assignments.append("name = %s")
            params.append(name)
        if status is not None:
            assignments.append("status = %s")
            params.append(status)
        if is_public is not None:
            assignments.append("is_public = %s")
            params.append(is_public)
        params.extend([plan_id, user_id, expected_version])

        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE reading_plans
                    SET {", ".join(assignments)}
                    WHERE id = %s AND user_id = %s AND version = %s
                    RETURNING {cls.PLAN_FIELDS}
                    """,
                    tuple(params),
                )
                row = cur.fetchone()
                conn.commit()
        if not row:
            return None
        return cls._normalize(row)

    @classmethod
    def save_daily_readings(
        cls,
        plan_id: int,
        user_id: int,
        expected_version: int,
        daily_readings: List[Dict[str, Any]],
        status: str,
    ) -> Optional[Dict[str, Any]]:
        """Replace the day list and status; returns None on a version mismatch."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE reading_plans
                    SET daily_readings = %s::jsonb,
                        status = %s,
                        version = version + 1,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND user_id = %s AND version = %s
                    RETURNING {cls.PLAN_FIELDS}
                    """,
                    (json.dumps(daily_readings), status, plan_id, user_id, expected_version),
                )
                row = cur.fetchone()
                conn.commit()
        if not row:
            return None
        return cls._normalize(row)

    @staticmethod
    def delete_plan(plan_id: int, user_id: int) -> bool:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    DELETE FROM reading_plans
                    WHERE id = %s AND user_id = %s
                    RETURNING id
                    """,
                    (plan_id, user_id),
                )
                deleted = cur.fetchone() is not None
                conn.commit()
        return deleted
