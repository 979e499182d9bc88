"""Create topics table

Revision ID: 0005_create_topics
Revises: 0004_create_reading_progress
Create Date: 2026-10-18
"""
from alembic import op


revision = "0005_create_topics"
down_revision = "0004_create_reading_progress"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS topics (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            verses JSONB NOT NULL DEFAULT '[]'::jsonb,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, name)
        );

        CREATE INDEX IF NOT EXISTS idx_topics_user_id_created_at
            ON topics(user_id, created_at DESC);
        """
    )


def downgrade():
    op.execute(
        """
        DROP INDEX IF EXISTS idx_topics_user_id_created_at;
        DROP TABLE IF EXISTS topics;
        """
    )
