"""Tests for custom exception classes."""
import pytest

from app.utils.exceptions import (
    AccessDeniedError,
    ConflictError,
    DatabaseError,
    DayNotFoundError,
    EmptyRangeError,
    InvalidChapterError,
    InvalidDaysError,
    NotFoundError,
    RangeReversedError,
    UnknownBookError,
    ValidationError,
)


class TestDatabaseError:
    """Tests for DatabaseError."""

    def test_default_detail(self):
        err = DatabaseError()
        assert err.status_code == 500
        assert err.detail == "Database operation failed"

    def test_custom_detail(self):
        err = DatabaseError(detail="Connection pool exhausted")
        assert err.detail == "Connection pool exhausted"


class TestValidationErrors:
    """Range and distribution failures are all bad requests."""

    def test_default_detail(self):
        err = ValidationError()
        assert err.status_code == 400
        assert err.detail == "Invalid input"

    @pytest.mark.parametrize("err", [
        UnknownBookError("Enoch"),
        InvalidChapterError("Genesis", 51, 50),
        RangeReversedError(),
        EmptyRangeError(),
        InvalidDaysError(),
    ])
    def test_subclasses_are_validation_errors(self, err):
        assert isinstance(err, ValidationError)
        assert err.status_code == 400

    def test_unknown_book_keeps_the_name(self):
        err = UnknownBookError("Enoch")
        assert err.book == "Enoch"
        assert err.detail == "Unknown book 'Enoch'"

    def test_invalid_chapter_message(self):
        err = InvalidChapterError("Genesis", 51, 50)
        assert err.chapter == 51
        assert err.detail == "Chapter 51 is out of range for Genesis (1-50)"


class TestAccessErrors:

    def test_not_found(self):
        assert NotFoundError().status_code == 404

    def test_day_not_found(self):
        err = DayNotFoundError(9)
        assert isinstance(err, NotFoundError)
        assert err.day_number == 9
        assert err.detail == "Day 9 not found in plan"

    def test_access_denied(self):
        assert AccessDeniedError().status_code == 403

    def test_conflict(self):
        err = ConflictError()
        assert err.status_code == 409
        assert err.detail == "Resource was modified concurrently"
