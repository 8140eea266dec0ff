from typing import Any


def insert_contact_message(conn, *, name: str, email: str, message: str) -> Any:
    sql = """
    INSERT INTO contact_messages (name, email, message)
    VALUES (%s, %s, %s)
    RETURNING id
    """
    with conn.cursor() as cur:
        cur.execute(sql, (name, email, message))
        return cur.fetchone()[0]


def insert_feedback(conn, *, name: str, email: str, message: str, rating: int) -> Any:
    sql = """
    INSERT INTO feedback (name, email, message, rating)
    VALUES (%s, %s, %s, %s)
    RETURNING id
    """
    with conn.cursor() as cur:
        cur.execute(sql, (name, email, message, rating))
        return cur.fetchone()[0]
