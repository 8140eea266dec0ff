"""users table (bcrypt password hashes, optional phone and photo)

Revision ID: 0001_users
Revises:
Create Date: 2025-10-02

"""

from alembic import op

revision = "0001_users"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
    CREATE EXTENSION IF NOT EXISTS "citext";

    CREATE TABLE IF NOT EXISTS users (
      id SERIAL PRIMARY KEY,
      name TEXT NOT NULL,
      email CITEXT NOT NULL UNIQUE,
      password_hash TEXT NOT NULL,
      phone TEXT NULL,
      photo_url TEXT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """
    )


def downgrade():
    op.execute("DROP TABLE IF EXISTS users;")
