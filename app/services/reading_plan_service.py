"""Business logic for user-created reading plans."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import psycopg2

from app.repositories.reading_plan import ReadingPlanRepository
from app.services.bible_index import BibleIndex, get_bible_index
from app.services.reading_distribution import distribute_readings
from app.services.scripture_range import validate_range
from app.utils.exceptions import (
    AccessDeniedError,
    ConflictError,
    DatabaseError,
    DayNotFoundError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

PLAN_STATUSES = ("active", "completed")


@contextmanager
def _database_errors(action: str):
    try:
        yield
    except psycopg2.Error as exc:
        logger.error(f"Database error while trying to {action}: {exc}")
        raise DatabaseError(f"Failed to {action}") from exc


def parse_start_date(raw_value) -> date:
    """Accept a date, a YYYY-MM-DD string or a full ISO-8601 timestamp."""
    if isinstance(raw_value, datetime):
        return raw_value.date()
    if isinstance(raw_value, date):
        return raw_value
    if not raw_value or not str(raw_value).strip():
        raise ValidationError("startDate is required")
    text = str(raw_value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as err:
        raise ValidationError("startDate must be an ISO-8601 date") from err


def _chapters_in(day: Dict[str, Any]) -> int:
    return sum(unit["end_chapter"] - unit["start_chapter"] + 1 for unit in day.get("readings", []))


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def _isoformat(value) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class ReadingPlanService:
    """Creates reading plans from a scripture range and tracks their completion."""

    def __init__(self, index: Optional[BibleIndex] = None):
        self.index = index or get_bible_index()

    def create_plan(
        self,
        *,
        user_id: int,
        name: str,
        start_book: str,
        start_chapter: int,
        end_book: str,
        end_chapter: Optional[int],
        start_date,
        duration_in_days: int,
        is_public: bool = False,
        shared_with: Optional[Iterable[int]] = None,
    ) -> Dict[str, Any]:
        cleaned_name = (name or "").strip()
        if not cleaned_name:
            raise ValidationError("name is required")

        normalized_start = parse_start_date(start_date)
        scripture_range = validate_range(self.index, start_book, start_chapter, end_book, end_chapter)
        assignments = distribute_readings(self.index, scripture_range, duration_in_days)

        if len(assignments) < duration_in_days:
            logger.warning(
                f"Plan '{cleaned_name}' for user {user_id} capped at {len(assignments)} days "
                f"(requested {duration_in_days}): range has fewer chapters than days"
            )

        daily_readings = [
            {
                "day_number": assignment.day_number,
                "date": (normalized_start + timedelta(days=assignment.day_number - 1)).isoformat(),
                "readings": [unit.to_dict() for unit in assignment.readings],
                "is_completed": False,
                "completed_at": None,
            }
            for assignment in assignments
        ]

        viewers: List[int] = []
        for viewer_id in shared_with or []:
            if viewer_id != user_id and viewer_id not in viewers:
                viewers.append(viewer_id)

        with _database_errors("create reading plan"):
            row = ReadingPlanRepository.create_plan(
                user_id=user_id,
                name=cleaned_name,
                start_book=scripture_range.start_book,
                start_chapter=scripture_range.start_chapter,
                end_book=scripture_range.end_book,
                end_chapter=scripture_range.end_chapter,
                start_date=normalized_start,
                duration_in_days=len(daily_readings),
                requested_duration_days=duration_in_days,
                daily_readings=daily_readings,
                is_public=bool(is_public),
                shared_with=viewers,
            )
        logger.info(f"User {user_id} created reading plan {row['id']} with {len(daily_readings)} days")
        return self._serialize_plan(row)

    def list_plans(self, user_id: int, limit: int = 50) -> List[Dict[str, Any]]:
        with _database_errors("list reading plans"):
            rows = ReadingPlanRepository.list_visible_plans(user_id, limit)
        return [self._serialize_plan(row) for row in rows]

    def get_plan(self, *, user_id: int, plan_id: int) -> Dict[str, Any]:
        plan = self._load_plan(plan_id)
        if not self._can_view(plan, user_id):
            raise AccessDeniedError()
        return self._serialize_plan(plan)

    def update_plan(
        self,
        *,
        user_id: int,
        plan_id: int,
        name: Optional[str] = None,
        status: Optional[str] = None,
        is_public: Optional[bool] = None,
        expected_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        plan = self._load_owned_plan(plan_id, user_id)
        self._check_version(plan, expected_version)

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("name cannot be empty")
        if status is not None and status not in PLAN_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(PLAN_STATUSES)}")

        if name is None and status is None and is_public is None:
            return self._serialize_plan(plan)

        with _database_errors("update reading plan"):
            row = ReadingPlanRepository.update_plan(
                plan_id,
                user_id,
                plan["version"],
                name=name,
                status=status,
                is_public=is_public,
            )
        if row is None:
            raise ConflictError()
        return self._serialize_plan(row)

    def delete_plan(self, *, user_id: int, plan_id: int) -> None:
        self._load_owned_plan(plan_id, user_id)
        with _database_errors("delete reading plan"):
            deleted = ReadingPlanRepository.delete_plan(plan_id, user_id)
        if not deleted:
            raise NotFoundError("Reading plan not found")
        logger.info(f"User {user_id} deleted reading plan {plan_id}")

    def mark_day_complete(
        self,
        *,
        user_id: int,
        plan_id: int,
        day_number: int,
        expected_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        plan = self._load_owned_plan(plan_id, user_id)
        self._check_version(plan, expected_version)

        daily_readings = [dict(day) for day in plan["daily_readings"]]
        day = next((d for d in daily_readings if d["day_number"] == day_number), None)
        if day is None:
            raise DayNotFoundError(day_number)

        day["is_completed"] = True
        day["completed_at"] = datetime.now(timezone.utc).isoformat()

        status = plan["status"]
        if all(d.get("is_completed") for d in daily_readings):
            status = "completed"

        with _database_errors("update reading plan progress"):
            row = ReadingPlanRepository.save_daily_readings(
                plan_id, user_id, plan["version"], daily_readings, status
            )
        if row is None:
            raise ConflictError()
        return self._serialize_plan(row)

    def get_progress(self, *, user_id: int, plan_id: int) -> Dict[str, Any]:
        plan = self._load_owned_plan(plan_id, user_id)
        days = plan["daily_readings"]

        total_days = len(days)
        completed_days = sum(1 for day in days if day.get("is_completed"))
        total_chapters = sum(_chapters_in(day) for day in days)
        completed_chapters = sum(_chapters_in(day) for day in days if day.get("is_completed"))

        return {
            "plan_id": plan["id"],
            "total_days": total_days,
            "completed_days": completed_days,
            "percent_days": _percent(completed_days, total_days),
            "total_chapters": total_chapters,
            "completed_chapters": completed_chapters,
            "percent_chapters": _percent(completed_chapters, total_chapters),
            "status": plan["status"],
        }

    def _load_plan(self, plan_id: int) -> Dict[str, Any]:
        with _database_errors("load reading plan"):
            plan = ReadingPlanRepository.get_plan(plan_id)
        if not plan:
            raise NotFoundError("Reading plan not found")
        return plan

    def _load_owned_plan(self, plan_id: int, user_id: int) -> Dict[str, Any]:
        plan = self._load_plan(plan_id)
        if plan["user_id"] != user_id:
            raise AccessDeniedError("Only the plan owner can do this")
        return plan

    @staticmethod
    def _can_view(plan: Dict[str, Any], user_id: int) -> bool:
        return (
            plan["user_id"] == user_id
            or bool(plan.get("is_public"))
            or user_id in (plan.get("shared_with") or [])
        )

    @staticmethod
    def _check_version(plan: Dict[str, Any], expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != plan["version"]:
            raise ConflictError(
                f"Plan version is {plan['version']}, request expected {expected_version}"
            )

    @staticmethod
    def _serialize_plan(row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": row["id"],
            "owner_id": row["user_id"],
            "name": row["name"],
            "start_book": row["start_book"],
            "start_chapter": row["start_chapter"],
            "end_book": row["end_book"],
            "end_chapter": row["end_chapter"],
            "start_date": _isoformat(row.get("start_date")),
            "duration_in_days": row["duration_in_days"],
            "requested_duration_days": row.get("requested_duration_days", row["duration_in_days"]),
            "daily_readings": row.get("daily_readings", []),
            "status": row.get("status", "active"),
            "is_public": row.get("is_public", False),
            "shared_with": row.get("shared_with", []),
            "version": row.get("version", 1),
            "created_at": _isoformat(row.get("created_at")),
            "updated_at": _isoformat(row.get("updated_at")),
        }


def get_reading_plan_service() -> ReadingPlanService:
    return ReadingPlanService(get_bible_index())
