"""Repository modules for database operations.

All repository classes are re-exported here for convenient imports.
"""
from app.repositories.reading_plan import ReadingPlanRepository
from app.repositories.reading_progress import ReadingProgressRepository
from app.repositories.topic import TopicRepository
from app.repositories.user_data import UserDataRepository
from app.repositories.verse_annotation import (
    BookmarkRepository,
    HighlightRepository,
    UserNotesRepository,
    VerseAnnotationRepository,
)

__all__ = [
    "ReadingPlanRepository",
    "ReadingProgressRepository",
    "TopicRepository",
    "UserDataRepository",
    "VerseAnnotationRepository",
    "BookmarkRepository",
    "HighlightRepository",
    "UserNotesRepository",
]
