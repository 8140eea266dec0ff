from typing import Any, Dict, List, Optional

RECIPIENT_LABEL = "Kind-Kart"


def _money(v) -> float | None:
    return float(v) if v is not None else None


def _ts(v) -> str | None:
    return v.isoformat() if v is not None else None


def insert_donation(
    conn,
    *,
    transaction_id: str,
    user_id,
    first_name: str | None,
    last_name: str | None,
    email: str | None,
    amount,
    payment_method: str,
    currency: str,
    description: str | None,
) -> int:
    sql = """
    INSERT INTO donations
      (transaction_id, user_id, first_name, last_name, email, amount,
       payment_method, currency, description)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING id
    """
    with conn.cursor() as cur:
        cur.execute(
            sql,
            (
                transaction_id,
                user_id,
                first_name,
                last_name,
                email,
                amount,
                payment_method,
                currency,
                description,
            ),
        )
        return cur.fetchone()[0]


def summary_for_user(conn, user_id) -> List[Dict[str, Any]]:
    sql = """
    SELECT id, transaction_id, amount, created_at
    FROM donations
    WHERE user_id = %s
    ORDER BY created_at DESC, id DESC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        rows = cur.fetchall()
    return [
        {
            "id": r[0],
            "transactionId": r[1],
            "amount": _money(r[2]),
            "createdAt": _ts(r[3]),
            "donatedTo": RECIPIENT_LABEL,
        }
        for r in rows
    ]


def get_donation_with_donor(conn, donation_id) -> Optional[Dict[str, Any]]:
    # userName prefers the account name, then the donor's first name.
    sql = """
    SELECT d.id, d.transaction_id, d.amount, d.payment_method, d.currency,
           d.description, d.created_at,
           COALESCE(u.name, d.first_name, 'Anonymous') AS user_name,
           u.email AS user_email
    FROM donations d
    LEFT JOIN users u ON d.user_id = u.id
    WHERE d.id = %s
    """
    with conn.cursor() as cur:
        cur.execute(sql, (donation_id,))
        row = cur.fetchone()
    if not row:
        return None
    return {
        "id": row[0],
        "transactionId": row[1],
        "amount": _money(row[2]),
        "paymentMethod": row[3],
        "currency": row[4],
        "description": row[5],
        "createdAt": _ts(row[6]),
        "userName": row[7],
        "userEmail": row[8],
    }


def delete_donation(conn, donation_id) -> int:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM donations WHERE id = %s", (donation_id,))
        return cur.rowcount
