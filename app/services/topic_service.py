"""Topics: named collections of verse references owned by one user."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import psycopg2
from psycopg2 import errors

from app.repositories.topic import TopicRepository
from app.services.bible_index import BibleIndex, get_bible_index
from app.utils.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

VERSE_KEYS = ("book_id", "chapter", "verse_start", "verse_count")


def _verse_key(verse: Dict[str, Any]) -> tuple:
    return tuple(verse[key] for key in VERSE_KEYS)


class TopicService:
    def __init__(self, index: Optional[BibleIndex] = None):
        self.index = index or get_bible_index()

    def create_topic(self, *, user_id: int, name: str, verses: Iterable[Dict[str, Any]] = ()) -> Dict[str, Any]:
        name = self._clean_name(name)
        cleaned = self._dedupe([], self._clean_verses(verses))
        try:
            topic = TopicRepository.create_topic(user_id, name, cleaned)
        except psycopg2.Error as exc:
            logger.error(f"Database error creating topic for user {user_id}: {exc}")
            raise DatabaseError("Failed to create topic") from exc
        if topic is None:
            raise ConflictError("A topic with this name already exists")
        logger.info(f"User {user_id} created topic {topic['id']} with {len(cleaned)} verses")
        return self._serialize(topic)

    def list_topics(self, *, user_id: int, search: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
        search = search.strip() if search else None
        try:
            topics = TopicRepository.list_topics(user_id, search=search or None, limit=limit)
        except psycopg2.Error as exc:
            logger.error(f"Database error listing topics for user {user_id}: {exc}")
            raise DatabaseError("Failed to retrieve topics") from exc
        return [self._serialize(topic) for topic in topics]

    def get_topic(self, *, user_id: int, topic_id: int) -> Dict[str, Any]:
        return self._serialize(self._load(user_id, topic_id))

    def rename_topic(self, *, user_id: int, topic_id: int, name: str) -> Dict[str, Any]:
        name = self._clean_name(name)
        self._load(user_id, topic_id)
        try:
            topic = TopicRepository.rename_topic(user_id, topic_id, name)
        except errors.UniqueViolation as exc:
            raise ConflictError("A topic with this name already exists") from exc
        except psycopg2.Error as exc:
            logger.error(f"Database error renaming topic {topic_id}: {exc}")
            raise DatabaseError("Failed to update topic") from exc
        if topic is None:
            raise NotFoundError("Topic not found")
        return self._serialize(topic)

    def delete_topic(self, *, user_id: int, topic_id: int) -> None:
        try:
            deleted = TopicRepository.delete_topic(user_id, topic_id)
        except psycopg2.Error as exc:
            logger.error(f"Database error deleting topic {topic_id}: {exc}")
            raise DatabaseError("Failed to delete topic") from exc
        if not deleted:
            raise NotFoundError("Topic not found")
        logger.info(f"User {user_id} deleted topic {topic_id}")

    def add_verses(self, *, user_id: int, topic_id: int, verses: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        incoming = self._clean_verses(verses)
        topic = self._load(user_id, topic_id)
        added = self._dedupe(topic["verses"], incoming)
        if not added:
            return {"topic": self._serialize(topic), "changed": [], "changed_count": 0}
        return self._save(user_id, topic_id, topic["verses"] + added, added)

    def remove_verses(self, *, user_id: int, topic_id: int, verses: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        targets = {_verse_key(verse) for verse in self._clean_verses(verses)}
        topic = self._load(user_id, topic_id)
        kept = [verse for verse in topic["verses"] if _verse_key(verse) not in targets]
        removed = [verse for verse in topic["verses"] if _verse_key(verse) in targets]
        if not removed:
            return {"topic": self._serialize(topic), "changed": [], "changed_count": 0}
        return self._save(user_id, topic_id, kept, removed)

    def topics_for_verse(
        self,
        *,
        user_id: int,
        book_id: str,
        chapter: int,
        verse_start: int,
        verse_end: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        canonical = self.index.resolve_book(book_id)
        verse_end = verse_start if verse_end is None else verse_end
        if verse_end < verse_start:
            raise ValidationError("verse_end must not be before verse_start")
        try:
            topics = TopicRepository.find_by_verse(user_id, canonical, chapter, verse_start, verse_end)
        except psycopg2.Error as exc:
            logger.error(f"Database error finding topics by verse for user {user_id}: {exc}")
            raise DatabaseError("Failed to retrieve topics by verse") from exc
        return [self._serialize(topic) for topic in topics]

    def get_stats(self, *, user_id: int) -> Dict[str, Any]:
        try:
            stats = TopicRepository.get_stats(user_id)
        except psycopg2.Error as exc:
            logger.error(f"Database error loading topic stats for user {user_id}: {exc}")
            raise DatabaseError("Failed to retrieve topic statistics") from exc
        total_topics = int(stats.get("total_topics") or 0)
        total_verses = int(stats.get("total_verses") or 0)
        return {
            "total_topics": total_topics,
            "total_verses": total_verses,
            "avg_verses_per_topic": round(total_verses / total_topics, 2) if total_topics else 0.0,
        }

    def _load(self, user_id: int, topic_id: int) -> Dict[str, Any]:
        try:
            topic = TopicRepository.get_topic(user_id, topic_id)
        except psycopg2.Error as exc:
            logger.error(f"Database error loading topic {topic_id}: {exc}")
            raise DatabaseError("Failed to retrieve topic") from exc
        if not topic:
            raise NotFoundError("Topic not found")
        return topic

    def _save(self, user_id, topic_id, verses, changed) -> Dict[str, Any]:
        try:
            topic = TopicRepository.save_verses(user_id, topic_id, verses)
        except psycopg2.Error as exc:
            logger.error(f"Database error saving verses for topic {topic_id}: {exc}")
            raise DatabaseError("Failed to update topic verses") from exc
        if topic is None:
            raise NotFoundError("Topic not found")
        return {"topic": self._serialize(topic), "changed": changed, "changed_count": len(changed)}

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Topic name is required and must be a non-empty string")
        return name

    def _clean_verses(self, verses: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        cleaned = []
        for verse in verses or ():
            book_id = self.index.resolve_book(verse["book_id"])
            chapter_count = self.index.chapter_count_of(book_id)
            if verse["chapter"] > chapter_count:
                raise ValidationError(
                    f"chapter must be between 1 and {chapter_count} for {self.index.name_of(book_id)}"
                )
            cleaned.append(
                {
                    "book_id": book_id,
                    "chapter": verse["chapter"],
                    "verse_start": verse["verse_start"],
                    "verse_count": verse["verse_count"],
                }
            )
        return cleaned

    @staticmethod
    def _dedupe(existing: List[Dict[str, Any]], incoming: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Incoming references not already present, in order, without repeats."""
        seen = {_verse_key(verse) for verse in existing}
        fresh = []
        for verse in incoming:
            key = _verse_key(verse)
            if key in seen:
                continue
            seen.add(key)
            fresh.append(verse)
        return fresh

    def _serialize(self, topic: Dict[str, Any]) -> Dict[str, Any]:
        verses = topic.get("verses") or []
        books = {verse["book_id"] for verse in verses if verse.get("book_id") in self.index}
        return {
            "id": topic["id"],
            "name": topic["name"],
            "verses": verses,
            "total_verses": len(verses),
            "unique_books": sorted(books, key=self.index.order_of),
            "created_at": topic.get("created_at"),
            "updated_at": topic.get("updated_at"),
        }


def get_topic_service() -> TopicService:
    return TopicService(get_bible_index())
