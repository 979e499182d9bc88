"""Configuration for pytest."""
import sys
import os

# Make the project root importable when running without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Common test fixtures can be defined here
import pytest
from unittest.mock import Mock

from app.services.bible_index import BibleIndex, BookMeta, get_bible_index


@pytest.fixture
def mock_settings():
    """Mock application settings for testing."""
    settings = Mock()
    settings.app_name = "Test Bible Study API"
    settings.debug = True
    settings.db_name = "test_db"
    settings.db_user = "test_user"
    settings.db_password = "test_password"
    settings.db_host = "localhost"
    settings.db_port = 5432
    settings.db_pool_min = 1
    settings.db_pool_max = 5
    settings.allowed_origins = ["http://localhost:3000"]
    return settings


@pytest.fixture
def bible_index():
    """The canonical 66-book index."""
    return get_bible_index()


@pytest.fixture
def tiny_index():
    """A three-book index small enough to reason about by hand."""
    return BibleIndex([
        BookMeta(book_id="alpha", name="Alpha", order=1, chapter_count=3, aliases=("al",)),
        BookMeta(book_id="beta", name="Beta", order=2, chapter_count=1),
        BookMeta(book_id="gamma", name="Gamma", order=3, chapter_count=4),
    ])
