"""Create users table

Revision ID: 0001_create_users
Revises:
Create Date: 2026-10-18
"""
from alembic import op

revision = '0001_create_users'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            streak_current INTEGER NOT NULL DEFAULT 0,
            streak_longest INTEGER NOT NULL DEFAULT 0,
            streak_last_date DATE,
            created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
        """
    )

def downgrade():
    op.execute(
        """
        DROP INDEX IF EXISTS idx_users_email;
        DROP TABLE IF EXISTS users;
        """
    )
