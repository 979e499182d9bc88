"""Canonical ordering and chapter counts for the books of the Bible."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, List, Tuple

from app.utils.exceptions import UnknownBookError

BEFORE = -1
SAME = 0
AFTER = 1

# (display name, chapter count, aliases) in canonical order
CANONICAL_BOOKS: List[Tuple[str, int, Tuple[str, ...]]] = [
    ("Genesis", 50, ("gen", "gn")),
    ("Exodus", 40, ("exod", "exo", "ex")),
    ("Leviticus", 27, ("lev", "lv")),
    ("Numbers", 36, ("num", "nm")),
    ("Deuteronomy", 34, ("deut", "dt")),
    ("Joshua", 24, ("josh", "jos")),
    ("Judges", 21, ("judg", "jdg")),
    ("Ruth", 4, ("rth",)),
    ("1 Samuel", 31, ("1 sam", "1 sa", "i samuel")),
    ("2 Samuel", 24, ("2 sam", "2 sa", "ii samuel")),
    ("1 Kings", 22, ("1 kgs", "1 ki", "i kings")),
    ("2 Kings", 25, ("2 kgs", "2 ki", "ii kings")),
    ("1 Chronicles", 29, ("1 chr", "1 chron", "i chronicles")),
    ("2 Chronicles", 36, ("2 chr", "2 chron", "ii chronicles")),
    ("Ezra", 10, ("ezr",)),
    ("Nehemiah", 13, ("neh",)),
    ("Esther", 10, ("esth", "est")),
    ("Job", 42, ()),
    ("Psalms", 150, ("psalm", "ps", "psa")),
    ("Proverbs", 31, ("prov", "prv")),
    ("Ecclesiastes", 12, ("eccl", "ecc", "qoheleth")),
    ("Song of Solomon", 8, ("song of songs", "songs of solomon", "canticles", "song")),
    ("Isaiah", 66, ("isa",)),
    ("Jeremiah", 52, ("jer",)),
    ("Lamentations", 5, ("lam",)),
    ("Ezekiel", 48, ("ezek", "ezk")),
    ("Daniel", 12, ("dan", "dn")),
    ("Hosea", 14, ("hos",)),
    ("Joel", 3, ()),
    ("Amos", 9, ()),
    ("Obadiah", 1, ("obad", "ob")),
    ("Jonah", 4, ("jon",)),
    ("Micah", 7, ("mic",)),
    ("Nahum", 3, ("nah",)),
    ("Habakkuk", 3, ("hab",)),
    ("Zephaniah", 3, ("zeph", "zep")),
    ("Haggai", 2, ("hag",)),
    ("Zechariah", 14, ("zech", "zec")),
    ("Malachi", 4, ("mal",)),
    ("Matthew", 28, ("matt", "mt")),
    ("Mark", 16, ("mk", "mrk")),
    ("Luke", 24, ("lk", "luk")),
    ("John", 21, ("jn", "jhn")),
    ("Acts", 28, ("act",)),
    ("Romans", 16, ("rom",)),
    ("1 Corinthians", 16, ("1 cor", "i corinthians")),
    ("2 Corinthians", 13, ("2 cor", "ii corinthians")),
    ("Galatians", 6, ("gal",)),
    ("Ephesians", 6, ("eph",)),
    ("Philippians", 4, ("phil", "php")),
    ("Colossians", 4, ("col",)),
    ("1 Thessalonians", 5, ("1 thess", "1 th", "i thessalonians")),
    ("2 Thessalonians", 3, ("2 thess", "2 th", "ii thessalonians")),
    ("1 Timothy", 6, ("1 tim", "i timothy")),
    ("2 Timothy", 4, ("2 tim", "ii timothy")),
    ("Titus", 3, ("tit",)),
    ("Philemon", 1, ("philem", "phm")),
    ("Hebrews", 13, ("heb",)),
    ("James", 5, ("jas",)),
    ("1 Peter", 5, ("1 pet", "i peter")),
    ("2 Peter", 3, ("2 pet", "ii peter")),
    ("1 John", 5, ("1 jn", "i john")),
    ("2 John", 1, ("2 jn", "ii john")),
    ("3 John", 1, ("3 jn", "iii john")),
    ("Jude", 1, ("jud",)),
    ("Revelation", 22, ("rev", "revelations", "apocalypse")),
]

_NUMBERED_PREFIX = re.compile(r"^([1-3])\s*(?=[a-z])")


def _lookup_key(raw: str) -> str:
    key = re.sub(r"[\s_\-\.]+", " ", raw.strip().lower()).strip()
    return _NUMBERED_PREFIX.sub(r"\1 ", key)


def slugify_book_name(name: str) -> str:
    return _lookup_key(name).replace(" ", "-")


@dataclass(frozen=True)
class BookMeta:
    """Static metadata for one book."""
    book_id: str
    name: str
    order: int
    chapter_count: int
    aliases: Tuple[str, ...] = field(default_factory=tuple)


class BibleIndex:
    """Read-only lookup over an ordered table of books.

    The index is built once and handed to the range validator and the
    distribution engine. Tests can build one from a small fixture table.
    """

    def __init__(self, books: Iterable[BookMeta]):
        ordered = sorted(books, key=lambda book: book.order)
        if not ordered:
            raise ValueError("A Bible index needs at least one book")

        self._books: Dict[str, BookMeta] = {}
        self._lookup: Dict[str, str] = {}
        seen_orders = set()
        for book in ordered:
            if book.chapter_count < 1:
                raise ValueError(f"Book '{book.book_id}' must have at least one chapter")
            if book.book_id in self._books:
                raise ValueError(f"Duplicate book id '{book.book_id}'")
            if book.order in seen_orders:
                raise ValueError(f"Duplicate canonical order {book.order}")
            seen_orders.add(book.order)
            self._books[book.book_id] = book

            for label in (book.book_id, book.name, *book.aliases):
                self._lookup.setdefault(_lookup_key(label), book.book_id)

        self._ordered = tuple(ordered)

    @property
    def books(self) -> Tuple[BookMeta, ...]:
        return self._ordered

    def __contains__(self, book_id: str) -> bool:
        return book_id in self._books

    def get(self, book_id: str) -> BookMeta:
        try:
            return self._books[book_id]
        except KeyError:
            raise UnknownBookError(book_id) from None

    def resolve_book(self, raw: str) -> str:
        """Map a slug, display name or alias to the canonical book id."""
        if not raw or not str(raw).strip():
            raise UnknownBookError(str(raw or ""))
        if raw in self._books:
            return raw
        book_id = self._lookup.get(_lookup_key(str(raw)))
        if book_id is None:
            raise UnknownBookError(str(raw).strip())
        return book_id

    def chapter_count_of(self, book_id: str) -> int:
        return self.get(book_id).chapter_count

    def order_of(self, book_id: str) -> int:
        return self.get(book_id).order

    def name_of(self, book_id: str) -> str:
        return self.get(book_id).name

    def compare(self, book_a: str, chapter_a: int, book_b: str, chapter_b: int) -> int:
        """Return BEFORE, SAME or AFTER for position a relative to position b."""
        left = (self.order_of(book_a), chapter_a)
        right = (self.order_of(book_b), chapter_b)
        if left < right:
            return BEFORE
        if left > right:
            return AFTER
        return SAME

    def books_between(self, start_book: str, end_book: str) -> List[BookMeta]:
        """Books from start_book to end_book inclusive, in canonical order."""
        start_order = self.order_of(start_book)
        end_order = self.order_of(end_book)
        return [book for book in self._ordered if start_order <= book.order <= end_order]


def build_canonical_books() -> List[BookMeta]:
    return [
        BookMeta(
            book_id=slugify_book_name(name),
            name=name,
            order=position,
            chapter_count=chapters,
            aliases=aliases,
        )
        for position, (name, chapters, aliases) in enumerate(CANONICAL_BOOKS, start=1)
    ]


@lru_cache(maxsize=1)
def get_bible_index() -> BibleIndex:
    """Dependency injector returning the process-wide canonical index."""
    return BibleIndex(build_canonical_books())
