from typing import Any, Dict, List, Sequence

from psycopg2.extras import execute_values


def insert_items(conn, donation_id: int, user_id, items: Sequence[Dict[str, Any]]) -> int:
    """Bulk insert cart lines for one donation in a single statement. Items are already validated."""
    sql = """
    INSERT INTO donation_items (donation_id, user_id, item_name, price, qty)
    VALUES %s
    """
    rows = [(donation_id, user_id, i["name"], i["price"], i["qty"]) for i in items]
    with conn.cursor() as cur:
        execute_values(cur, sql, rows, page_size=max(len(rows), 1))
    return len(rows)


def list_items(conn, donation_id) -> List[Dict[str, Any]]:
    sql = """
    SELECT item_name, price, qty, created_at
    FROM donation_items
    WHERE donation_id = %s
    ORDER BY id
    """
    with conn.cursor() as cur:
        cur.execute(sql, (donation_id,))
        rows = cur.fetchall()
    return [
        {
            "itemName": r[0],
            "price": float(r[1]) if r[1] is not None else None,
            "qty": r[2],
            "createdAt": r[3].isoformat() if r[3] else None,
        }
        for r in rows
    ]


def delete_items(conn, donation_id) -> int:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM donation_items WHERE donation_id = %s", (donation_id,))
        return cur.rowcount
