"""Create reading progress table

Revision ID: 0004_create_reading_progress
Revises: 0003_create_verse_annotations
Create Date: 2026-10-18
"""
from alembic import op


revision = "0004_create_reading_progress"
down_revision = "0003_create_verse_annotations"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS reading_progress (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            book_id TEXT NOT NULL,
            chapter INTEGER NOT NULL CHECK (chapter >= 1),
            first_read_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, book_id, chapter)
        );
        """
    )


def downgrade():
    op.execute("DROP TABLE IF EXISTS reading_progress;")
