"""Tests for TopicRepository."""
import json
from unittest.mock import patch, MagicMock

from app.repositories.topic import TopicRepository


def _setup_db(mock_get_conn):
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


VERSES = [{"book_id": "john", "chapter": 3, "verse_start": 16, "verse_count": 1}]


class TestTopicRepository:

    @patch("app.repositories.topic.get_db_connection")
    def test_create_topic(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 1, "name": "Love", "verses": VERSES}

        result = TopicRepository.create_topic(2, "Love", VERSES)

        sql, params = cur.execute.call_args.args
        assert "ON CONFLICT (user_id, name) DO NOTHING" in sql
        assert params[:2] == (2, "Love")
        assert json.loads(params[2]) == VERSES
        assert result["verses"] == VERSES

    @patch("app.repositories.topic.get_db_connection")
    def test_create_duplicate_name(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = None

        assert TopicRepository.create_topic(2, "Love", []) is None

    @patch("app.repositories.topic.get_db_connection")
    def test_list_with_search(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchall.return_value = [{"id": 1, "name": "Love", "verses": json.dumps(VERSES)}]

        result = TopicRepository.list_topics(2, search="lov", limit=5)

        sql, params = cur.execute.call_args.args
        assert "name ILIKE %s" in sql
        assert params == (2, "%lov%", 5)
        assert result[0]["verses"] == VERSES

    @patch("app.repositories.topic.get_db_connection")
    def test_get_topic_with_null_verses(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 1, "name": "Love", "verses": None}

        assert TopicRepository.get_topic(2, 1)["verses"] == []

    @patch("app.repositories.topic.get_db_connection")
    def test_save_verses(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 1, "name": "Love", "verses": VERSES}

        TopicRepository.save_verses(2, 1, VERSES)

        sql, params = cur.execute.call_args.args
        assert "SET verses = %s::jsonb" in sql
        assert params[1:] == (1, 2)
        conn.commit.assert_called_once()

    @patch("app.repositories.topic.get_db_connection")
    def test_find_by_verse_uses_overlap(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchall.return_value = []

        TopicRepository.find_by_verse(2, "john", 3, 14, 18)

        sql, params = cur.execute.call_args.args
        assert "jsonb_array_elements" in sql
        assert params == (2, "john", 3, 18, 14)

    @patch("app.repositories.topic.get_db_connection")
    def test_stats(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"total_topics": 2, "total_verses": 5}

        assert TopicRepository.get_stats(2) == {"total_topics": 2, "total_verses": 5}

    @patch("app.repositories.topic.get_db_connection")
    def test_delete_topic(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = None

        assert TopicRepository.delete_topic(2, 1) is False
