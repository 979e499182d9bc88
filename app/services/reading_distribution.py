"""Split a scripture range into daily reading assignments.

Chapters are the unit of work. The range is flattened into its chapters in
canonical order, cut into per-day buckets whose sizes differ by at most one
(larger buckets first), and each bucket is run-length encoded back into
per-book chapter spans.
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import Any, Dict, List, Sequence, Tuple

from app.services.bible_index import BibleIndex
from app.services.scripture_range import ScriptureRange
from app.utils.exceptions import EmptyRangeError, InvalidDaysError

ChapterRef = Tuple[str, int]


@dataclass(frozen=True)
class ReadingUnit:
    """Contiguous chapters of a single book."""
    book_id: str
    start_chapter: int
    end_chapter: int

    @property
    def chapter_count(self) -> int:
        return self.end_chapter - self.start_chapter + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "book_id": self.book_id,
            "start_chapter": self.start_chapter,
            "end_chapter": self.end_chapter,
        }


@dataclass(frozen=True)
class DayAssignment:
    day_number: int
    readings: Tuple[ReadingUnit, ...]

    @property
    def chapter_count(self) -> int:
        return sum(unit.chapter_count for unit in self.readings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day_number": self.day_number,
            "readings": [unit.to_dict() for unit in self.readings],
        }


def enumerate_chapters(index: BibleIndex, scripture_range: ScriptureRange) -> List[ChapterRef]:
    """Every (book_id, chapter) in the range, in canonical order."""
    end_chapter = scripture_range.end_chapter
    if end_chapter is None:
        end_chapter = index.chapter_count_of(scripture_range.end_book)

    chapters: List[ChapterRef] = []
    for book in index.books_between(scripture_range.start_book, scripture_range.end_book):
        first = scripture_range.start_chapter if book.book_id == scripture_range.start_book else 1
        last = end_chapter if book.book_id == scripture_range.end_book else book.chapter_count
        chapters.extend((book.book_id, chapter) for chapter in range(first, last + 1))
    return chapters


def bucket_sizes(total_chapters: int, days: int) -> List[int]:
    """Per-day chapter counts; never more days than chapters."""
    if days >= total_chapters:
        return [1] * total_chapters
    base, remainder = divmod(total_chapters, days)
    return [base + 1] * remainder + [base] * (days - remainder)


def coalesce(bucket: Sequence[ChapterRef]) -> Tuple[ReadingUnit, ...]:
    """Run-length encode consecutive chapters of the same book."""
    units: List[ReadingUnit] = []
    for book_id, run in groupby(bucket, key=lambda ref: ref[0]):
        chapters = [chapter for _, chapter in run]
        units.append(ReadingUnit(book_id, chapters[0], chapters[-1]))
    return tuple(units)


def distribute_readings(
    index: BibleIndex,
    scripture_range: ScriptureRange,
    days: int,
) -> List[DayAssignment]:
    """Assign every chapter of the range to exactly one day.

    When days exceeds the number of chapters the result is capped at one
    chapter per day, so it can be shorter than requested. Raises
    InvalidDaysError for a non-positive day count and EmptyRangeError when the
    range holds no chapters.
    """
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise InvalidDaysError(f"Number of days must be a positive integer, got {days!r}")

    chapters = enumerate_chapters(index, scripture_range)
    if not chapters:
        raise EmptyRangeError()

    assignments: List[DayAssignment] = []
    cursor = 0
    for day_number, size in enumerate(bucket_sizes(len(chapters), days), start=1):
        bucket = chapters[cursor:cursor + size]
        cursor += size
        assignments.append(DayAssignment(day_number=day_number, readings=coalesce(bucket)))
    return assignments
