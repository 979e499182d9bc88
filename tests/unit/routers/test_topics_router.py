"""Tests for the topic endpoints."""
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.auth import get_current_user_dependency
from app.routers import topics
from app.services.topic_service import TopicService
from app.utils.exceptions import ConflictError, NotFoundError

client = TestClient(app)

VERSE = {"book_id": "john", "chapter": 3, "verse_start": 16, "verse_count": 1}


@pytest.fixture(autouse=True)
def clear_overrides():
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def service_mock():
    service = Mock(spec=TopicService)
    app.dependency_overrides[get_current_user_dependency] = lambda: {"id": 5, "is_active": True}
    app.dependency_overrides[topics.get_topic_service] = lambda: service
    return service


def _topic(**overrides):
    topic = {
        "id": 2, "name": "Love", "verses": [VERSE], "total_verses": 1,
        "unique_books": ["john"], "created_at": None, "updated_at": None,
    }
    topic.update(overrides)
    return topic


def test_create_topic(service_mock):
    service_mock.create_topic.return_value = _topic()

    response = client.post(
        "/api/topics",
        json={"name": "Love", "verses": [{"bookId": "John", "chapter": 3, "verseStart": 16, "verseCount": 1}]},
    )

    assert response.status_code == 201
    assert response.json()["unique_books"] == ["john"]
    kwargs = service_mock.create_topic.call_args.kwargs
    assert kwargs["verses"] == [{"book_id": "John", "chapter": 3, "verse_start": 16, "verse_count": 1}]


def test_create_duplicate_topic(service_mock):
    service_mock.create_topic.side_effect = ConflictError("A topic with this name already exists")

    response = client.post("/api/topics", json={"name": "Love"})

    assert response.status_code == 409


def test_list_topics_with_search(service_mock):
    service_mock.list_topics.return_value = [_topic()]

    response = client.get("/api/topics", params={"search": "lo"})

    assert response.status_code == 200
    service_mock.list_topics.assert_called_once_with(user_id=5, search="lo", limit=50)


def test_stats_route_is_not_a_topic_id(service_mock):
    service_mock.get_stats.return_value = {"total_topics": 1, "total_verses": 1, "avg_verses_per_topic": 1.0}

    response = client.get("/api/topics/stats")

    assert response.status_code == 200
    assert response.json()["total_topics"] == 1
    service_mock.get_topic.assert_not_called()


def test_topics_by_verse(service_mock):
    service_mock.topics_for_verse.return_value = [_topic()]

    response = client.get("/api/topics/verse", params={"bookId": "john", "chapter": 3, "verseStart": 16})

    assert response.status_code == 200
    service_mock.topics_for_verse.assert_called_once_with(
        user_id=5, book_id="john", chapter=3, verse_start=16, verse_end=None,
    )


def test_topics_by_verse_requires_verse_start(service_mock):
    response = client.get("/api/topics/verse", params={"bookId": "john", "chapter": 3})

    assert response.status_code == 400


def test_get_missing_topic(service_mock):
    service_mock.get_topic.side_effect = NotFoundError("Topic not found")

    response = client.get("/api/topics/99")

    assert response.status_code == 404


def test_rename_topic(service_mock):
    service_mock.rename_topic.return_value = _topic(name="Agape")

    response = client.put("/api/topics/2", json={"name": "Agape"})

    assert response.status_code == 200
    assert response.json()["name"] == "Agape"


def test_delete_topic(service_mock):
    response = client.delete("/api/topics/2")

    assert response.status_code == 204
    service_mock.delete_topic.assert_called_once_with(user_id=5, topic_id=2)


def test_add_verses(service_mock):
    service_mock.add_verses.return_value = {"topic": _topic(), "changed": [VERSE], "changed_count": 1}

    response = client.post(
        "/api/topics/2/verses",
        json={"verses": [{"bookId": "john", "chapter": 3, "verseStart": 16, "verseCount": 1}]},
    )

    assert response.status_code == 200
    assert response.json()["changed_count"] == 1


def test_add_verses_requires_at_least_one(service_mock):
    response = client.post("/api/topics/2/verses", json={"verses": []})

    assert response.status_code == 400
    service_mock.add_verses.assert_not_called()


def test_remove_verses(service_mock):
    service_mock.remove_verses.return_value = {
        "topic": _topic(verses=[], total_verses=0, unique_books=[]),
        "changed": [VERSE],
        "changed_count": 1,
    }

    response = client.request(
        "DELETE",
        "/api/topics/2/verses",
        json={"verses": [{"bookId": "john", "chapter": 3, "verseStart": 16, "verseCount": 1}]},
    )

    assert response.status_code == 200
    assert response.json()["topic"]["total_verses"] == 0
