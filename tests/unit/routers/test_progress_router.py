"""Tests for the reading progress endpoints."""
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.auth import get_current_user_dependency
from app.routers import progress
from app.services.reading_progress_service import ReadingProgressService
from app.utils.exceptions import UnknownBookError

client = TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def service_mock():
    service = Mock(spec=ReadingProgressService)
    app.dependency_overrides[get_current_user_dependency] = lambda: {"id": 3, "is_active": True}
    app.dependency_overrides[progress.get_reading_progress_service] = lambda: service
    return service


PROGRESS = {
    "progress": {"chapters_read": {"john": [1, 2]}, "total_chapters_read": 2},
    "streak": {"current": 2, "longest": 4, "last_date": "2025-06-10"},
}


def test_log_reading(service_mock):
    service_mock.log_reading.return_value = PROGRESS

    response = client.post("/api/progress", json={"bookId": "John", "chapter": 2})

    assert response.status_code == 201
    assert response.json()["streak"]["current"] == 2
    service_mock.log_reading.assert_called_once_with(user_id=3, book_id="John", chapter=2)


def test_log_reading_requires_positive_chapter(service_mock):
    response = client.post("/api/progress", json={"bookId": "John", "chapter": 0})

    assert response.status_code == 400
    service_mock.log_reading.assert_not_called()


def test_log_reading_unknown_book(service_mock):
    service_mock.log_reading.side_effect = UnknownBookError("Enoch")

    response = client.post("/api/progress", json={"bookId": "Enoch", "chapter": 1})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown book 'Enoch'"


def test_get_progress(service_mock):
    service_mock.get_progress.return_value = PROGRESS

    response = client.get("/api/progress")

    assert response.status_code == 200
    assert response.json()["progress"]["chapters_read"] == {"john": [1, 2]}


def test_get_book_progress(service_mock):
    service_mock.get_book_progress.return_value = {
        "book_id": "ruth",
        "chapters_read": [1],
        "total_chapters_read": 1,
        "chapter_count": 4,
        "percent_complete": 25.0,
    }

    response = client.get("/api/progress/books/ruth")

    assert response.status_code == 200
    assert response.json()["percent_complete"] == 25.0
    service_mock.get_book_progress.assert_called_once_with(user_id=3, book_id="ruth")
