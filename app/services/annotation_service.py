"""Owner-scoped CRUD for bookmarks, highlights and notes, plus public note reads."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type

import psycopg2
from psycopg2 import errors

from app.repositories.verse_annotation import (
    BookmarkRepository,
    HighlightRepository,
    UserNotesRepository,
    VerseAnnotationRepository,
)
from app.services.bible_index import BibleIndex, get_bible_index
from app.utils.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

HIGHLIGHT_COLORS = ("yellow", "green", "blue", "pink", "purple", "orange", "red")


class VerseAnnotationService:
    """CRUD for one kind of verse-anchored annotation."""

    def __init__(
        self,
        repository: Type[VerseAnnotationRepository],
        label: str,
        index: Optional[BibleIndex] = None,
    ):
        self.repository = repository
        self.label = label
        self.index = index or get_bible_index()

    def list_items(
        self,
        user_id: int,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        filters = dict(filters or {})
        if filters.get("book_id"):
            filters["book_id"] = self.index.resolve_book(filters["book_id"])
        try:
            return self.repository.list_for_user(user_id, filters, limit)
        except psycopg2.Error as exc:
            logger.error(f"Database error listing {self.label}s: {exc}")
            raise DatabaseError(f"Failed to retrieve {self.label}s") from exc

    def get_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        try:
            item = self.repository.get_for_user(user_id, item_id)
        except psycopg2.Error as exc:
            logger.error(f"Database error loading {self.label} {item_id}: {exc}")
            raise DatabaseError(f"Failed to retrieve {self.label}") from exc
        if not item:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        return item

    def create_item(self, user_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        values = self._clean(values, partial=False)
        try:
            item = self.repository.create(user_id, values)
        except psycopg2.Error as exc:
            logger.error(f"Database error creating {self.label}: {exc}")
            raise DatabaseError(f"Failed to create {self.label}") from exc
        if item is None:
            raise ConflictError(f"{self.label.capitalize()} already exists for this verse range")
        logger.info(f"User {user_id} created {self.label} {item['id']}")
        return item

    def update_item(self, user_id: int, item_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        current = self.get_item(user_id, item_id)
        values = self._clean(values, partial=True)
        if "book_id" in values or "chapter" in values:
            self._check_chapter(
                values.get("book_id", current["book_id"]),
                values.get("chapter", current["chapter"]),
            )
        try:
            item = self.repository.update(user_id, item_id, values)
        except errors.UniqueViolation as exc:
            raise ConflictError(f"{self.label.capitalize()} already exists for this verse range") from exc
        except psycopg2.Error as exc:
            logger.error(f"Database error updating {self.label} {item_id}: {exc}")
            raise DatabaseError(f"Failed to update {self.label}") from exc
        if not item:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        return item

    def delete_item(self, user_id: int, item_id: int) -> None:
        try:
            deleted = self.repository.delete(user_id, item_id)
        except psycopg2.Error as exc:
            logger.error(f"Database error deleting {self.label} {item_id}: {exc}")
            raise DatabaseError(f"Failed to delete {self.label}") from exc
        if not deleted:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        logger.info(f"User {user_id} deleted {self.label} {item_id}")

    def _clean(self, values: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
        cleaned = {key: value for key, value in values.items() if value is not None}
        if "book_id" in cleaned:
            cleaned["book_id"] = self.index.resolve_book(cleaned["book_id"])
        if not partial:
            self._check_chapter(cleaned["book_id"], cleaned["chapter"])
        if "color" in cleaned:
            color = cleaned["color"].strip().lower()
            if color not in HIGHLIGHT_COLORS:
                raise ValidationError(f"color must be one of: {', '.join(HIGHLIGHT_COLORS)}")
            cleaned["color"] = color
        if "content" in cleaned:
            content = cleaned["content"].strip()
            if not content:
                raise ValidationError("content must be a non-empty string")
            cleaned["content"] = content
        return cleaned

    def _check_chapter(self, book_id: str, chapter: int) -> None:
        chapter_count = self.index.chapter_count_of(book_id)
        if chapter > chapter_count:
            raise ValidationError(
                f"chapter must be between 1 and {chapter_count} for {self.index.name_of(book_id)}"
            )


class NoteService(VerseAnnotationService):
    """Notes add read-only access to other users' public notes."""

    def __init__(self, index: Optional[BibleIndex] = None):
        super().__init__(UserNotesRepository, "note", index)

    def list_public_notes(
        self,
        book_id: Optional[str] = None,
        chapter: Optional[int] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        filters = {"book_id": self.index.resolve_book(book_id) if book_id else None, "chapter": chapter}
        try:
            return self.repository.list_public(filters, limit)
        except psycopg2.Error as exc:
            logger.error(f"Database error listing public notes: {exc}")
            raise DatabaseError("Failed to retrieve public notes") from exc

    def public_notes_for_verse(
        self,
        book_id: str,
        chapter: int,
        verse_start: int,
        verse_end: int,
    ) -> Dict[str, Any]:
        canonical = self.index.resolve_book(book_id)
        if verse_end < verse_start:
            raise ValidationError("verseEnd must not be before verseStart")
        try:
            notes = self.repository.find_public_by_verse(canonical, chapter, verse_start, verse_end)
        except psycopg2.Error as exc:
            logger.error(f"Database error finding public notes for {canonical} {chapter}: {exc}")
            raise DatabaseError("Failed to retrieve public notes for verse range") from exc
        return {"notes": notes, "count": len(notes)}

    def get_public_note(self, note_id: int) -> Dict[str, Any]:
        try:
            note = self.repository.get_public(note_id)
        except psycopg2.Error as exc:
            logger.error(f"Database error loading public note {note_id}: {exc}")
            raise DatabaseError("Failed to retrieve public note") from exc
        if not note:
            raise NotFoundError("Public note not found")
        return note


def get_bookmark_service() -> VerseAnnotationService:
    return VerseAnnotationService(BookmarkRepository, "bookmark")


def get_highlight_service() -> VerseAnnotationService:
    return VerseAnnotationService(HighlightRepository, "highlight")


def get_note_service() -> NoteService:
    return NoteService()
