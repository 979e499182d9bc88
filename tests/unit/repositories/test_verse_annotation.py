"""Tests for the bookmark, highlight and note repositories."""
from unittest.mock import patch, MagicMock

from app.repositories.verse_annotation import (
    BookmarkRepository,
    HighlightRepository,
    UserNotesRepository,
)


def _setup_db(mock_get_conn):
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


ANCHOR = {"book_id": "john", "chapter": 3, "verse_start": 16, "verse_count": 1}


class TestBookmarkRepository:

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_create_ignores_duplicate_range(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = None

        result = BookmarkRepository.create(1, ANCHOR)

        sql, params = cur.execute.call_args.args
        assert "INSERT INTO bookmarks" in sql
        assert "ON CONFLICT (user_id, book_id, chapter, verse_start, verse_count) DO NOTHING" in sql
        assert params == (1, "john", 3, 16, 1)
        assert result is None

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_list_applies_known_filters_only(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchall.return_value = [{"id": 1, **ANCHOR}]

        result = BookmarkRepository.list_for_user(1, {"book_id": "john", "color": "red", "chapter": None}, 25)

        sql, params = cur.execute.call_args.args
        assert "AND book_id = %s" in sql
        assert "color" not in sql
        assert params == (1, "john", 25)
        assert result == [{"id": 1, **ANCHOR}]

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_get_for_user_scopes_by_owner(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = None

        assert BookmarkRepository.get_for_user(1, 9) is None
        assert cur.execute.call_args.args[1] == (9, 1)

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_update_without_changes_reads_current_row(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 9, **ANCHOR}

        result = BookmarkRepository.update(1, 9, {})

        assert "SELECT" in cur.execute.call_args.args[0]
        assert result["id"] == 9

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_delete(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 9}

        assert BookmarkRepository.delete(1, 9) is True
        conn.commit.assert_called_once()


class TestHighlightRepository:

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_create_includes_color(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 3, **ANCHOR, "color": "green"}

        result = HighlightRepository.create(1, {**ANCHOR, "color": "green"})

        sql, params = cur.execute.call_args.args
        assert "INSERT INTO highlights (user_id, book_id, chapter, verse_start, verse_count, color)" in sql
        assert params[-1] == "green"
        assert result["color"] == "green"

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_update_sets_only_given_columns(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 3, **ANCHOR, "color": "blue"}

        HighlightRepository.update(1, 3, {"color": "blue"})

        sql, params = cur.execute.call_args.args
        assert "SET color = %s, updated_at = CURRENT_TIMESTAMP" in sql
        assert params == ("blue", 3, 1)
        conn.commit.assert_called_once()


class TestUserNotesRepository:

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_notes_allow_repeated_ranges(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = {"id": 4}

        UserNotesRepository.create(1, {**ANCHOR, "content": "Love", "visibility": "private"})

        sql, params = cur.execute.call_args.args
        assert "INSERT INTO user_notes" in sql
        assert "ON CONFLICT" not in sql
        assert params == (1, "john", 3, 16, 1, "Love", "private")

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_visibility_filter(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchall.return_value = []

        UserNotesRepository.list_for_user(1, {"visibility": "public"}, 10)

        sql, params = cur.execute.call_args.args
        assert "AND visibility = %s" in sql
        assert params == (1, "public", 10)

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_list_public_ignores_owner(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchall.return_value = [{"id": 4, "user_id": 7, **ANCHOR}]

        result = UserNotesRepository.list_public({"book_id": "john", "chapter": None}, 10)

        sql, params = cur.execute.call_args.args
        assert "WHERE visibility = 'public'" in sql
        assert "user_id = %s" not in sql
        assert "AND book_id = %s" in sql
        assert "ORDER BY created_at DESC" in sql
        assert params == ("john", 10)
        assert result[0]["user_id"] == 7

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_find_public_by_verse_uses_overlap(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchall.return_value = []

        UserNotesRepository.find_public_by_verse("john", 3, 16, 18)

        sql, params = cur.execute.call_args.args
        assert "visibility = 'public'" in sql
        assert "verse_start <= %s" in sql
        assert "verse_start + verse_count - 1 >= %s" in sql
        assert params == ("john", 3, 18, 16)

    @patch("app.repositories.verse_annotation.get_db_connection")
    def test_get_public(self, mock_get_conn):
        conn, cur = _setup_db(mock_get_conn)
        cur.fetchone.return_value = None

        assert UserNotesRepository.get_public(4) is None
        sql, params = cur.execute.call_args.args
        assert "visibility = 'public'" in sql
        assert params == (4,)
