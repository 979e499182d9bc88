"""Validation and normalization of scripture ranges."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.services.bible_index import AFTER, BibleIndex
from app.utils.exceptions import InvalidChapterError, RangeReversedError


@dataclass(frozen=True)
class ScriptureRange:
    """A span from (start_book, start_chapter) to (end_book, end_chapter).

    end_chapter is None until the range has been validated.
    """
    start_book: str
    start_chapter: int
    end_book: str
    end_chapter: Optional[int] = None


def _check_chapter(index: BibleIndex, book_id: str, chapter) -> int:
    chapter_count = index.chapter_count_of(book_id)
    if isinstance(chapter, bool) or not isinstance(chapter, int):
        raise InvalidChapterError(index.name_of(book_id), chapter, chapter_count)
    if chapter < 1 or chapter > chapter_count:
        raise InvalidChapterError(index.name_of(book_id), chapter, chapter_count)
    return chapter


def validate_range(
    index: BibleIndex,
    start_book: str,
    start_chapter: int,
    end_book: str,
    end_chapter: Optional[int] = None,
) -> ScriptureRange:
    """Return the normalized range or raise the first violated precondition.

    Book names are resolved to canonical ids and a missing end_chapter
    becomes the last chapter of end_book.
    """
    start_id = index.resolve_book(start_book)
    end_id = index.resolve_book(end_book)

    if end_chapter is None:
        end_chapter = index.chapter_count_of(end_id)

    _check_chapter(index, start_id, start_chapter)
    _check_chapter(index, end_id, end_chapter)

    if index.compare(start_id, start_chapter, end_id, end_chapter) == AFTER:
        raise RangeReversedError(
            f"Range end {index.name_of(end_id)} {end_chapter} comes before "
            f"its start {index.name_of(start_id)} {start_chapter}"
        )

    return ScriptureRange(
        start_book=start_id,
        start_chapter=start_chapter,
        end_book=end_id,
        end_chapter=end_chapter,
    )
