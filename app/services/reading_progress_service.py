"""Business logic for logged chapter reads and daily streaks."""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional

import psycopg2

from app.repositories.reading_progress import ReadingProgressRepository
from app.services.bible_index import BibleIndex, get_bible_index
from app.utils.exceptions import DatabaseError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def advance_streak(
    current: int,
    longest: int,
    last_date: Optional[date],
    today: date,
) -> Dict[str, Any]:
    """Streak after reading on ``today``.

    Reading again on the same day changes nothing, reading the day after the
    last read extends the streak, and any longer gap starts over at one.
    """
    if last_date == today:
        new_current = max(current, 1)
    elif last_date == today - timedelta(days=1):
        new_current = current + 1
    else:
        new_current = 1
    return {
        "current": new_current,
        "longest": max(longest, new_current),
        "last_date": today,
    }


def _serialize_streak(streak: Dict[str, Any]) -> Dict[str, Any]:
    last_date = streak.get("last_date")
    return {
        "current": streak.get("current", 0),
        "longest": streak.get("longest", 0),
        "last_date": last_date.isoformat() if isinstance(last_date, date) else last_date,
    }


class ReadingProgressService:
    """Records chapters read and keeps the reader's streak current."""

    def __init__(self, index: Optional[BibleIndex] = None):
        self.index = index or get_bible_index()

    def log_reading(
        self,
        *,
        user_id: int,
        book_id: str,
        chapter: int,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        canonical = self.index.resolve_book(book_id)
        chapter_count = self.index.chapter_count_of(canonical)
        if chapter < 1 or chapter > chapter_count:
            raise ValidationError(
                f"chapter must be between 1 and {chapter_count} for {self.index.name_of(canonical)}"
            )

        today = today or date.today()
        try:
            ReadingProgressRepository.record_chapter(user_id, canonical, chapter)
            stored = ReadingProgressRepository.get_streak(user_id)
            if stored is None:
                raise NotFoundError("User not found")
            streak = advance_streak(
                stored.get("streak_current") or 0,
                stored.get("streak_longest") or 0,
                stored.get("streak_last_date"),
                today,
            )
            ReadingProgressRepository.save_streak(
                user_id, streak["current"], streak["longest"], streak["last_date"]
            )
        except psycopg2.Error as exc:
            logger.error(f"Database error logging reading for user {user_id}: {exc}")
            raise DatabaseError("Failed to log reading progress") from exc

        logger.info(f"User {user_id} read {canonical} {chapter}; streak {streak['current']}")
        progress = self.get_progress(user_id=user_id)
        progress["streak"] = _serialize_streak(streak)
        return progress

    def get_progress(self, *, user_id: int) -> Dict[str, Any]:
        try:
            rows = ReadingProgressRepository.list_chapters(user_id)
            stored = ReadingProgressRepository.get_streak(user_id) or {}
        except psycopg2.Error as exc:
            logger.error(f"Database error loading progress for user {user_id}: {exc}")
            raise DatabaseError("Failed to retrieve reading progress") from exc

        chapters_read: Dict[str, list] = {}
        for row in rows:
            chapters_read.setdefault(row["book_id"], []).append(row["chapter"])

        return {
            "progress": {
                "chapters_read": chapters_read,
                "total_chapters_read": len(rows),
            },
            "streak": _serialize_streak(
                {
                    "current": stored.get("streak_current") or 0,
                    "longest": stored.get("streak_longest") or 0,
                    "last_date": stored.get("streak_last_date"),
                }
            ),
        }

    def get_book_progress(self, *, user_id: int, book_id: str) -> Dict[str, Any]:
        canonical = self.index.resolve_book(book_id)
        try:
            rows = ReadingProgressRepository.list_chapters(user_id, canonical)
        except psycopg2.Error as exc:
            logger.error(f"Database error loading {canonical} progress for user {user_id}: {exc}")
            raise DatabaseError("Failed to retrieve book progress") from exc

        chapters = sorted(row["chapter"] for row in rows)
        chapter_count = self.index.chapter_count_of(canonical)
        return {
            "book_id": canonical,
            "chapters_read": chapters,
            "total_chapters_read": len(chapters),
            "chapter_count": chapter_count,
            "percent_complete": round(len(chapters) / chapter_count * 100, 2),
        }


def get_reading_progress_service() -> ReadingProgressService:
    return ReadingProgressService(get_bible_index())
