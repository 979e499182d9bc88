"""Tests for TopicService."""
from datetime import datetime, timezone
from unittest.mock import patch

import psycopg2
import pytest
from psycopg2 import errors

from app.services.topic_service import TopicService
from app.utils.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError

REPO = "app.services.topic_service.TopicRepository"


def _verse(book_id="john", chapter=3, verse_start=16, verse_count=1):
    return {"book_id": book_id, "chapter": chapter, "verse_start": verse_start, "verse_count": verse_count}


def _topic_row(**overrides):
    base = {
        "id": 4,
        "user_id": 1,
        "name": "Grace",
        "verses": [_verse(), _verse("ephesians", 2, 8, 2)],
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    base.update(overrides)
    return base


@pytest.fixture
def service(bible_index):
    return TopicService(bible_index)


class TestCreateTopic:

    @patch(REPO)
    def test_creates_with_normalized_deduplicated_verses(self, mock_repo, service):
        mock_repo.create_topic.side_effect = lambda user_id, name, verses: _topic_row(name=name, verses=verses)

        result = service.create_topic(
            user_id=1,
            name="  Grace ",
            verses=[_verse("John"), _verse("jn"), _verse("Romans", 5, 8)],
        )

        mock_repo.create_topic.assert_called_once_with(1, "Grace", [_verse(), _verse("romans", 5, 8)])
        assert result["total_verses"] == 2
        assert result["unique_books"] == ["john", "romans"]

    @patch(REPO)
    def test_duplicate_name(self, mock_repo, service):
        mock_repo.create_topic.return_value = None

        with pytest.raises(ConflictError) as exc_info:
            service.create_topic(user_id=1, name="Grace")

        assert exc_info.value.status_code == 409

    @patch(REPO)
    def test_blank_name(self, mock_repo, service):
        with pytest.raises(ValidationError):
            service.create_topic(user_id=1, name="  ")
        mock_repo.create_topic.assert_not_called()

    @patch(REPO)
    def test_chapter_outside_book(self, mock_repo, service):
        with pytest.raises(ValidationError):
            service.create_topic(user_id=1, name="Grace", verses=[_verse("jude", 2)])


class TestReadRenameDelete:

    @patch(REPO)
    def test_serializes_books_in_canonical_order(self, mock_repo, service):
        mock_repo.get_topic.return_value = _topic_row(
            verses=[_verse("revelation", 1, 1), _verse("genesis", 1, 1), _verse("genesis", 2, 1)]
        )

        result = service.get_topic(user_id=1, topic_id=4)

        assert result["unique_books"] == ["genesis", "revelation"]
        assert result["total_verses"] == 3

    @patch(REPO)
    def test_missing_topic(self, mock_repo, service):
        mock_repo.get_topic.return_value = None

        with pytest.raises(NotFoundError):
            service.get_topic(user_id=1, topic_id=4)

    @patch(REPO)
    def test_list_strips_search(self, mock_repo, service):
        mock_repo.list_topics.return_value = [_topic_row()]

        result = service.list_topics(user_id=1, search="  gra ", limit=5)

        mock_repo.list_topics.assert_called_once_with(1, search="gra", limit=5)
        assert result[0]["name"] == "Grace"

    @patch(REPO)
    def test_rename_to_taken_name(self, mock_repo, service):
        mock_repo.get_topic.return_value = _topic_row()
        mock_repo.rename_topic.side_effect = errors.UniqueViolation("duplicate key")

        with pytest.raises(ConflictError):
            service.rename_topic(user_id=1, topic_id=4, name="Faith")

    @patch(REPO)
    def test_rename(self, mock_repo, service):
        mock_repo.get_topic.return_value = _topic_row()
        mock_repo.rename_topic.return_value = _topic_row(name="Faith")

        result = service.rename_topic(user_id=1, topic_id=4, name=" Faith ")

        mock_repo.rename_topic.assert_called_once_with(1, 4, "Faith")
        assert result["name"] == "Faith"

    @patch(REPO)
    def test_delete_missing(self, mock_repo, service):
        mock_repo.delete_topic.return_value = False

        with pytest.raises(NotFoundError):
            service.delete_topic(user_id=1, topic_id=4)


class TestVerseMembership:

    @patch(REPO)
    def test_add_skips_existing_references(self, mock_repo, service):
        mock_repo.get_topic.return_value = _topic_row()
        mock_repo.save_verses.side_effect = lambda user_id, topic_id, verses: _topic_row(verses=verses)

        result = service.add_verses(user_id=1, topic_id=4, verses=[_verse(), _verse("titus", 3, 5)])

        saved = mock_repo.save_verses.call_args.args[2]
        assert saved[-1] == _verse("titus", 3, 5)
        assert len(saved) == 3
        assert result["changed"] == [_verse("titus", 3, 5)]
        assert result["changed_count"] == 1
        assert result["topic"]["total_verses"] == 3

    @patch(REPO)
    def test_add_nothing_new_does_not_write(self, mock_repo, service):
        mock_repo.get_topic.return_value = _topic_row()

        result = service.add_verses(user_id=1, topic_id=4, verses=[_verse("John")])

        mock_repo.save_verses.assert_not_called()
        assert result["changed_count"] == 0

    @patch(REPO)
    def test_remove(self, mock_repo, service):
        mock_repo.get_topic.return_value = _topic_row()
        mock_repo.save_verses.side_effect = lambda user_id, topic_id, verses: _topic_row(verses=verses)

        result = service.remove_verses(user_id=1, topic_id=4, verses=[_verse()])

        assert mock_repo.save_verses.call_args.args[2] == [_verse("ephesians", 2, 8, 2)]
        assert result["changed"] == [_verse()]
        assert result["topic"]["total_verses"] == 1

    @patch(REPO)
    def test_topics_for_verse_defaults_end_to_start(self, mock_repo, service):
        mock_repo.find_by_verse.return_value = [_topic_row()]

        result = service.topics_for_verse(user_id=1, book_id="Eph", chapter=2, verse_start=9)

        mock_repo.find_by_verse.assert_called_once_with(1, "ephesians", 2, 9, 9)
        assert result[0]["id"] == 4

    @patch(REPO)
    def test_topics_for_verse_rejects_backwards_span(self, mock_repo, service):
        with pytest.raises(ValidationError):
            service.topics_for_verse(user_id=1, book_id="john", chapter=3, verse_start=5, verse_end=2)


class TestStats:

    @patch(REPO)
    def test_average(self, mock_repo, service):
        mock_repo.get_stats.return_value = {"total_topics": 3, "total_verses": 10}

        assert service.get_stats(user_id=1) == {
            "total_topics": 3,
            "total_verses": 10,
            "avg_verses_per_topic": 3.33,
        }

    @patch(REPO)
    def test_no_topics(self, mock_repo, service):
        mock_repo.get_stats.return_value = {"total_topics": 0, "total_verses": 0}

        assert service.get_stats(user_id=1)["avg_verses_per_topic"] == 0.0

    @patch(REPO)
    def test_database_error(self, mock_repo, service):
        mock_repo.get_stats.side_effect = psycopg2.Error("down")

        with pytest.raises(DatabaseError):
            service.get_stats(user_id=1)
