"""Pydantic models for request/response schemas."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Literal


class RequestModel(BaseModel):
    """Request bodies accept both camelCase and snake_case field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthCheck(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    version: str = "1.0.0"


# Reading Plan Schemas
class ReadingUnitSchema(BaseModel):
    """Contiguous chapters of one book assigned to a day."""
    book_id: str
    start_chapter: int
    end_chapter: int


class DailyReadingSchema(BaseModel):
    """One day of a reading plan."""
    day_number: int
    date: str
    readings: List[ReadingUnitSchema]
    is_completed: bool = False
    completed_at: Optional[str] = None


class ReadingPlanCreate(RequestModel):
    """Request model for creating a reading plan from a scripture range."""
    name: str = Field(..., max_length=200, description="Plan name")
    start_book: str = Field(..., description="First book of the range (id, name or alias)")
    start_chapter: int = Field(default=1, description="First chapter of the range")
    end_book: str = Field(..., description="Last book of the range")
    end_chapter: Optional[int] = Field(default=None, description="Last chapter; defaults to the end of end_book")
    start_date: str = Field(..., description="ISO-8601 date of day 1")
    duration_in_days: int = Field(..., description="Requested number of days")
    is_public: bool = False
    shared_with: List[int] = Field(default_factory=list, description="User ids granted read access")


class ReadingPlanUpdate(RequestModel):
    """Owner-editable plan fields."""
    name: Optional[str] = Field(default=None, max_length=200)
    status: Optional[Literal["active", "completed"]] = None
    is_public: Optional[bool] = None
    version: Optional[int] = Field(default=None, description="Version the caller last saw")


class ReadingPlanResponse(BaseModel):
    """Full reading plan payload."""
    id: int
    owner_id: int
    name: str
    start_book: str
    start_chapter: int
    end_book: str
    end_chapter: int
    start_date: str
    duration_in_days: int
    requested_duration_days: int
    daily_readings: List[DailyReadingSchema]
    status: str
    is_public: bool
    shared_with: List[int] = Field(default_factory=list)
    version: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ReadingPlanProgressResponse(BaseModel):
    """Day-based and chapter-based completion of a plan."""
    plan_id: int
    total_days: int
    completed_days: int
    percent_days: float
    total_chapters: int
    completed_chapters: int
    percent_chapters: float
    status: str


# Verse annotation schemas
class VerseAnchor(RequestModel):
    """Verse range shared by bookmarks, highlights, notes and topics."""
    book_id: str = Field(..., min_length=1, description="Book id, name or alias")
    chapter: int = Field(..., ge=1)
    verse_start: int = Field(..., ge=1)
    verse_count: int = Field(..., ge=1)


class VerseAnchorUpdate(RequestModel):
    book_id: Optional[str] = Field(default=None, min_length=1)
    chapter: Optional[int] = Field(default=None, ge=1)
    verse_start: Optional[int] = Field(default=None, ge=1)
    verse_count: Optional[int] = Field(default=None, ge=1)


class VerseReference(BaseModel):
    book_id: str
    chapter: int
    verse_start: int
    verse_count: int


class BookmarkCreate(VerseAnchor):
    """Request model for creating a bookmark."""


class BookmarkUpdate(VerseAnchorUpdate):
    """Request model for moving a bookmark."""


class BookmarkResponse(VerseReference):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class HighlightCreate(VerseAnchor):
    color: str = Field(..., min_length=1, description="Palette colour name")


class HighlightUpdate(VerseAnchorUpdate):
    color: Optional[str] = Field(default=None, min_length=1)


class HighlightResponse(VerseReference):
    id: int
    color: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class NoteCreate(VerseAnchor):
    content: str = Field(..., min_length=1, max_length=5000)
    visibility: Literal["private", "public"] = "private"


class NoteUpdate(VerseAnchorUpdate):
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    visibility: Optional[Literal["private", "public"]] = None


class NoteResponse(VerseReference):
    id: int
    content: str
    visibility: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class PublicNoteResponse(NoteResponse):
    """A public note with its author's id."""
    user_id: int


class PublicNotesByVerseResponse(BaseModel):
    notes: List[PublicNoteResponse]
    count: int


# Reading progress schemas
class ReadingLogRequest(RequestModel):
    """Request model for logging a chapter read."""
    book_id: str = Field(..., min_length=1)
    chapter: int = Field(..., ge=1)


class StreakResponse(BaseModel):
    current: int = 0
    longest: int = 0
    last_date: Optional[str] = None


class ProgressSummary(BaseModel):
    chapters_read: Dict[str, List[int]] = Field(default_factory=dict)
    total_chapters_read: int = 0


class ProgressResponse(BaseModel):
    """Overall reading progress and streak."""
    progress: ProgressSummary
    streak: StreakResponse


class BookProgressResponse(BaseModel):
    book_id: str
    chapters_read: List[int]
    total_chapters_read: int
    chapter_count: int
    percent_complete: float


# Topic schemas
class TopicCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    verses: List[VerseAnchor] = Field(default_factory=list)


class TopicRename(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)


class TopicVersesRequest(RequestModel):
    verses: List[VerseAnchor] = Field(..., min_length=1)


class TopicResponse(BaseModel):
    id: int
    name: str
    verses: List[VerseReference] = Field(default_factory=list)
    total_verses: int
    unique_books: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TopicVersesChangeResponse(BaseModel):
    topic: TopicResponse
    changed: List[VerseReference]
    changed_count: int


class TopicStatsResponse(BaseModel):
    total_topics: int
    total_verses: int
    avg_verses_per_topic: float


class DataDeletionResponse(BaseModel):
    """Counts of rows removed by a full data wipe."""
    bookmarks: int
    highlights: int
    notes: int
    progress: int
    topics: int
    reading_plans: int
