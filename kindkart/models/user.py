from typing import Optional, Dict, Any

PROFILE_COLS = ["id", "name", "email", "phone", "photo_url"]


def get_user_by_email(conn, email: str) -> Optional[Dict[str, Any]]:
    sql = """
    SELECT id, name, email, phone, photo_url, password_hash
    FROM users WHERE email = %s
    """
    with conn.cursor() as cur:
        cur.execute(sql, (email,))
        row = cur.fetchone()
        if not row:
            return None
        return dict(zip(PROFILE_COLS + ["password_hash"], row))


def get_user(conn, user_id) -> Optional[Dict[str, Any]]:
    sql = "SELECT id, name, email, phone, photo_url FROM users WHERE id = %s"
    with conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        row = cur.fetchone()
        if not row:
            return None
        return dict(zip(PROFILE_COLS, row))


def create_user(conn, *, name: str, email: str, password_hash: str) -> Dict[str, Any]:
    sql = """
    INSERT INTO users (name, email, password_hash)
    VALUES (%s, %s, %s)
    RETURNING id, name, email
    """
    with conn.cursor() as cur:
        cur.execute(sql, (name, email, password_hash))
        row = cur.fetchone()
        return {"id": row[0], "name": row[1], "email": row[2]}


def update_profile(
    conn,
    user_id,
    *,
    name: str,
    email: str,
    phone: Optional[str],
    photo_url: Optional[str] = None,
) -> int:
    """Returns the number of rows touched (0 when the user does not exist)."""
    with conn.cursor() as cur:
        if photo_url is None:
            cur.execute(
                """
                UPDATE users
                SET name = %s, email = %s, phone = %s, updated_at = now()
                WHERE id = %s
                """,
                (name, email, phone, user_id),
            )
        else:
            cur.execute(
                """
                UPDATE users
                SET name = %s, email = %s, phone = %s, photo_url = %s, updated_at = now()
                WHERE id = %s
                """,
                (name, email, phone, photo_url, user_id),
            )
        return cur.rowcount
