"""Create reading plans table

Revision ID: 0002_create_reading_plans
Revises: 0001_create_users
Create Date: 2026-10-18
"""
from alembic import op


revision = "0002_create_reading_plans"
down_revision = "0001_create_users"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS reading_plans (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            start_book TEXT NOT NULL,
            start_chapter INTEGER NOT NULL CHECK (start_chapter >= 1),
            end_book TEXT NOT NULL,
            end_chapter INTEGER NOT NULL CHECK (end_chapter >= 1),
            start_date DATE NOT NULL,
            duration_in_days INTEGER NOT NULL CHECK (duration_in_days >= 1),
            requested_duration_days INTEGER NOT NULL CHECK (requested_duration_days >= 1),
            daily_readings JSONB NOT NULL DEFAULT '[]'::jsonb,
            status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'completed')),
            is_public BOOLEAN NOT NULL DEFAULT FALSE,
            shared_with INTEGER[] NOT NULL DEFAULT '{}',
            version INTEGER NOT NULL DEFAULT 1,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_reading_plans_user_id_created_at
            ON reading_plans(user_id, created_at DESC);
        CREATE INDEX IF NOT EXISTS idx_reading_plans_public
            ON reading_plans(is_public) WHERE is_public;
        CREATE INDEX IF NOT EXISTS idx_reading_plans_shared_with
            ON reading_plans USING GIN (shared_with);
        """
    )


def downgrade():
    op.execute(
        """
        DROP INDEX IF EXISTS idx_reading_plans_shared_with;
        DROP INDEX IF EXISTS idx_reading_plans_public;
        DROP INDEX IF EXISTS idx_reading_plans_user_id_created_at;
        DROP TABLE IF EXISTS reading_plans;
        """
    )
