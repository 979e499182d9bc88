"""Create bookmarks, highlights and user notes tables

Revision ID: 0003_create_verse_annotations
Revises: 0002_create_reading_plans
Create Date: 2026-10-18
"""
from alembic import op


revision = "0003_create_verse_annotations"
down_revision = "0002_create_reading_plans"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS bookmarks (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            book_id TEXT NOT NULL,
            chapter INTEGER NOT NULL CHECK (chapter >= 1),
            verse_start INTEGER NOT NULL CHECK (verse_start >= 1),
            verse_count INTEGER NOT NULL CHECK (verse_count >= 1),
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, book_id, chapter, verse_start, verse_count)
        );

        CREATE TABLE IF NOT EXISTS highlights (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            book_id TEXT NOT NULL,
            chapter INTEGER NOT NULL CHECK (chapter >= 1),
            verse_start INTEGER NOT NULL CHECK (verse_start >= 1),
            verse_count INTEGER NOT NULL CHECK (verse_count >= 1),
            color TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, book_id, chapter, verse_start, verse_count)
        );

        CREATE TABLE IF NOT EXISTS user_notes (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            book_id TEXT NOT NULL,
            chapter INTEGER NOT NULL CHECK (chapter >= 1),
            verse_start INTEGER NOT NULL CHECK (verse_start >= 1),
            verse_count INTEGER NOT NULL CHECK (verse_count >= 1),
            content TEXT NOT NULL,
            visibility TEXT NOT NULL DEFAULT 'private' CHECK (visibility IN ('private', 'public')),
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_bookmarks_user_book_chapter
            ON bookmarks(user_id, book_id, chapter);
        CREATE INDEX IF NOT EXISTS idx_highlights_user_book_chapter
            ON highlights(user_id, book_id, chapter);
        CREATE INDEX IF NOT EXISTS idx_user_notes_user_book_chapter
            ON user_notes(user_id, book_id, chapter);
        """
    )


def downgrade():
    op.execute(
        """
        DROP INDEX IF EXISTS idx_user_notes_user_book_chapter;
        DROP INDEX IF EXISTS idx_highlights_user_book_chapter;
        DROP INDEX IF EXISTS idx_bookmarks_user_book_chapter;
        DROP TABLE IF EXISTS user_notes;
        DROP TABLE IF EXISTS highlights;
        DROP TABLE IF EXISTS bookmarks;
        """
    )
