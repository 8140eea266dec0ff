#!/usr/bin/env python3
"""
Seed database with test data.

Usage: python scripts/seed.py [--force]
Requires: migrations applied (alembic upgrade head)
"""
import os
import sys
import uuid

# Ensure kindkart is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import bcrypt
from psycopg2.extras import execute_values

from kindkart.utils.db import get_db_connection

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123456"


def _hash(pw: str) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def seed():
    with get_db_connection() as conn, conn.cursor() as cur:
        # Check if already seeded
        cur.execute("SELECT COUNT(*) FROM users WHERE email = %s", (DEMO_EMAIL,))
        if cur.fetchone()[0] > 0:
            print(f"Already seeded ({DEMO_EMAIL} exists). Use --force to re-seed.")
            return

        # 1. Demo user
        cur.execute(
            """
            INSERT INTO users (name, email, password_hash, phone)
            VALUES ('Demo User', %s, %s, '+91 90000 00000')
            RETURNING id
            """,
            (DEMO_EMAIL, _hash(DEMO_PASSWORD)),
        )
        user_id = cur.fetchone()[0]

        # 2. Direct money donation
        cur.execute(
            """
            INSERT INTO donations
              (transaction_id, user_id, first_name, last_name, email, amount, payment_method, currency, description)
            VALUES (%s, %s, 'Demo', 'User', %s, 500, 'upi', 'INR', 'Monthly support')
            """,
            (str(uuid.uuid4()), user_id, DEMO_EMAIL),
        )

        # 3. Cart donation with two items
        cur.execute(
            """
            INSERT INTO donations (transaction_id, user_id, amount, payment_method, currency, description)
            VALUES (%s, %s, 22, 'card', 'INR', 'Cart donation')
            RETURNING id
            """,
            (str(uuid.uuid4()), user_id),
        )
        donation_id = cur.fetchone()[0]
        execute_values(
            cur,
            """
            INSERT INTO donation_items (donation_id, user_id, item_name, price, qty)
            VALUES %s
            """,
            [
                (donation_id, user_id, "Book", 10, 2),
                (donation_id, user_id, "Pen", 2, 1),
            ],
        )

        conn.commit()
        print("Seeded successfully.")
        print(f"  Demo user: {DEMO_EMAIL} / {DEMO_PASSWORD} (id={user_id})")
        print(f"  Donations: 1 direct, 1 cart (id={donation_id}, 2 items)")


def force_seed():
    """Clear the demo user's data and re-seed. Use with caution."""
    with get_db_connection() as conn, conn.cursor() as cur:
        # Items first (FK to donations)
        cur.execute(
            """
            DELETE FROM donation_items
            WHERE donation_id IN (
                SELECT d.id FROM donations d JOIN users u ON u.id = d.user_id
                WHERE u.email = %s
            )
            """,
            (DEMO_EMAIL,),
        )
        cur.execute(
            "DELETE FROM donations WHERE user_id IN (SELECT id FROM users WHERE email = %s)",
            (DEMO_EMAIL,),
        )
        cur.execute("DELETE FROM users WHERE email = %s", (DEMO_EMAIL,))
        conn.commit()
    print("Cleared test data. Seeding...")
    seed()


if __name__ == "__main__":
    if "--force" in sys.argv:
        force_seed()
    else:
        seed()
