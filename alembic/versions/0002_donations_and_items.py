"""donations and donation_items

Revision ID: 0002_donations
Revises: 0001_users
Create Date: 2025-10-02

"""

from alembic import op

revision = "0002_donations"
down_revision = "0001_users"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
    CREATE TABLE IF NOT EXISTS donations (
      id SERIAL PRIMARY KEY,
      transaction_id TEXT NOT NULL UNIQUE,
      user_id INTEGER NULL REFERENCES users(id) ON DELETE SET NULL,
      first_name TEXT NULL,
      last_name TEXT NULL,
      email TEXT NULL,
      amount NUMERIC(12, 2) NOT NULL CHECK (amount > 0),
      payment_method TEXT NOT NULL,
      currency TEXT NOT NULL DEFAULT 'INR',
      description TEXT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS idx_donations_user ON donations(user_id, created_at DESC);

    -- items are deleted explicitly before their donation
    CREATE TABLE IF NOT EXISTS donation_items (
      id SERIAL PRIMARY KEY,
      donation_id INTEGER NOT NULL REFERENCES donations(id),
      user_id INTEGER NULL REFERENCES users(id) ON DELETE SET NULL,
      item_name TEXT NOT NULL,
      price NUMERIC(12, 2) NOT NULL CHECK (price >= 0),
      qty INTEGER NOT NULL DEFAULT 1 CHECK (qty > 0),
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS idx_donation_items_donation ON donation_items(donation_id);
    """
    )


def downgrade():
    op.execute(
        """
    DROP TABLE IF EXISTS donation_items;
    DROP TABLE IF EXISTS donations;
    """
    )
