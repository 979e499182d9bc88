"""Custom exceptions for the Bible Study API."""
from fastapi import HTTPException


class DatabaseError(HTTPException):
    """Database-related errors."""
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(status_code=500, detail=detail)


class ValidationError(HTTPException):
    """Input validation errors."""
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=400, detail=detail)


class UnknownBookError(ValidationError):
    """Book identifier is not part of the canonical index."""
    def __init__(self, book: str):
        self.book = book
        super().__init__(detail=f"Unknown book '{book}'")


class InvalidChapterError(ValidationError):
    """Chapter number outside the book's chapter range."""
    def __init__(self, book: str, chapter, chapter_count: int):
        self.book = book
        self.chapter = chapter
        super().__init__(
            detail=f"Chapter {chapter} is out of range for {book} (1-{chapter_count})"
        )


class RangeReversedError(ValidationError):
    def __init__(self, detail: str = "End of range comes before its start"):
        super().__init__(detail=detail)


class EmptyRangeError(ValidationError):
    def __init__(self, detail: str = "Scripture range contains no chapters"):
        super().__init__(detail=detail)


class InvalidDaysError(ValidationError):
    def __init__(self, detail: str = "Number of days must be a positive integer"):
        super().__init__(detail=detail)


class NotFoundError(HTTPException):
    """Requested resource does not exist."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=404, detail=detail)


class DayNotFoundError(NotFoundError):
    def __init__(self, day_number: int):
        self.day_number = day_number
        super().__init__(detail=f"Day {day_number} not found in plan")


class AccessDeniedError(HTTPException):
    """Caller may not read or modify the resource."""
    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=403, detail=detail)


class ConflictError(HTTPException):
    """Duplicate resource or stale version on write."""
    def __init__(self, detail: str = "Resource was modified concurrently"):
        super().__init__(status_code=409, detail=detail)
