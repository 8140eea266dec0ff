import uuid
from datetime import datetime, timezone
from decimal import Decimal

import psycopg2
import psycopg2.errors


CART = {
    "items": [
        {"name": "Book", "price": 10, "qty": 2},
        {"name": "Pen", "price": 2, "qty": 1},
    ],
    "amount": 22,
}


def _is_uuid(v: str) -> bool:
    try:
        uuid.UUID(v)
        return True
    except ValueError:
        return False


# --- direct payment ---


def test_process_payment_records_one_donation(client, conn):
    conn.on("INSERT INTO donations", rows=[(11,)])

    resp = client.post(
        "/api/payments/process",
        json={
            "amount": 500,
            "paymentMethod": "upi",
            "donorInfo": {"userId": 3, "firstName": "Ravi", "email": "ravi@example.com"},
        },
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert _is_uuid(body["transactionId"])

    (sql, params), = conn.statements("INSERT INTO donations")
    tx, user_id, first, last, email, amount, method, currency, desc = params
    assert tx == body["transactionId"]
    assert (user_id, first, last, email) == (3, "Ravi", None, "ravi@example.com")
    assert amount == Decimal("500.00")
    assert (method, currency, desc) == ("upi", "INR", None)
    assert conn.commits == 1


def test_duplicate_payments_create_duplicate_donations(client, conn):
    conn.on("INSERT INTO donations", rows=lambda params: [(1,)])
    payload = {"amount": 50, "paymentMethod": "card", "donorInfo": {"firstName": "A"}}

    first = client.post("/api/payments/process", json=payload).get_json()
    second = client.post("/api/payments/process", json=payload).get_json()

    assert first["transactionId"] != second["transactionId"]
    assert len(conn.statements("INSERT INTO donations")) == 2


def test_process_payment_requires_fields(client, conn):
    for payload in (
        {"paymentMethod": "card", "donorInfo": {"firstName": "A"}},
        {"amount": 10, "donorInfo": {"firstName": "A"}},
        {"amount": 10, "paymentMethod": "card"},
    ):
        resp = client.post("/api/payments/process", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid request data"
    assert conn.executed == []


def test_process_payment_rejects_non_positive_amount(client, conn):
    for amount in (0, -5, "ten"):
        resp = client.post(
            "/api/payments/process",
            json={"amount": amount, "paymentMethod": "card", "donorInfo": {"firstName": "A"}},
        )
        assert resp.status_code == 400
    assert conn.executed == []


def test_process_payment_rejects_sub_cent_amount(client, conn):
    for amount in ("0.004", 10.005):
        resp = client.post(
            "/api/payments/process",
            json={"amount": amount, "paymentMethod": "card", "donorInfo": {"firstName": "A"}},
        )
        assert resp.status_code == 400, amount
        assert resp.get_json()["error"] == "amount must have at most 2 decimal places"
    assert conn.executed == []


def test_process_payment_keeps_two_decimal_amount(client, conn):
    conn.on("INSERT INTO donations", rows=[(1,)])
    resp = client.post(
        "/api/payments/process",
        json={"amount": "10.5", "paymentMethod": "card", "donorInfo": {"firstName": "A"}},
    )
    assert resp.status_code == 200
    (_, params), = conn.statements("INSERT INTO donations")
    assert params[5] == Decimal("10.50")


def test_process_payment_database_error(client, conn):
    conn.on("INSERT INTO donations", error=psycopg2.OperationalError("down"))
    resp = client.post(
        "/api/payments/process",
        json={"amount": 5, "paymentMethod": "card", "donorInfo": {"firstName": "A"}},
    )
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Database error"


# --- checkout ---


def test_checkout_creates_one_donation_and_n_items(client, conn):
    conn.on("INSERT INTO donations", rows=[(42,)])

    resp = client.post("/api/checkout", json={**CART, "userId": 5})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["donationId"] == 42
    assert body["amount"] == 22.0
    assert _is_uuid(body["transactionId"])
    assert body["items"] == [
        {"name": "Book", "price": 10.0, "qty": 2},
        {"name": "Pen", "price": 2.0, "qty": 1},
    ]

    donations = conn.statements("INSERT INTO donations")
    items = conn.statements("INSERT INTO donation_items")
    assert len(donations) == 1
    # one multi-row INSERT for the whole cart
    (_, rows), = items
    assert rows == [
        (42, 5, "Book", Decimal("10.00"), 2),
        (42, 5, "Pen", Decimal("2.00"), 1),
    ]
    # cart defaults
    _, params = donations[0]
    assert params[6:] == ("card", "INR", "Cart donation")
    assert conn.commits == 1
    assert conn.rollbacks == 0


def test_checkout_qty_defaults_to_one(client, conn):
    conn.on("INSERT INTO donations", rows=[(1,)])
    resp = client.post(
        "/api/checkout", json={"items": [{"name": "Pen", "price": 2}], "amount": 2}
    )
    assert resp.status_code == 200
    (_, rows), = conn.statements("INSERT INTO donation_items")
    assert rows[0][-1] == 1


def test_checkout_amount_defaults_to_cart_total(client, conn):
    conn.on("INSERT INTO donations", rows=[(1,)])
    resp = client.post("/api/checkout", json={"items": CART["items"]})
    assert resp.status_code == 200
    assert resp.get_json()["amount"] == 22.0


def test_checkout_empty_cart_writes_nothing(client, conn):
    for payload in ({"items": [], "amount": 10}, {"amount": 10}):
        resp = client.post("/api/checkout", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "No items in cart"
    assert conn.executed == []
    assert conn.commits == 0


def test_checkout_rejects_bad_items(client, conn):
    for items in (
        [{"price": 1}],
        [{"name": "Pen", "price": -1}],
        [{"name": "Pen", "price": 1, "qty": 0}],
        [{"name": "Pen", "price": 1, "qty": 1.5}],
        ["Pen"],
    ):
        resp = client.post("/api/checkout", json={"items": items, "amount": 1})
        assert resp.status_code == 400, items
    assert conn.executed == []


def test_checkout_rejects_sub_cent_price(client, conn):
    resp = client.post(
        "/api/checkout", json={"items": [{"name": "Pen", "price": "0.004"}], "amount": 1}
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "price must have at most 2 decimal places"

    resp = client.post(
        "/api/checkout", json={"items": [{"name": "Pen", "price": 1}], "amount": "0.004"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "amount must have at most 2 decimal places"
    assert conn.executed == []


def test_checkout_donation_insert_failure_is_generic_db_error(client, conn):
    conn.on(
        "INSERT INTO donations",
        error=psycopg2.errors.ForeignKeyViolation("donations_user_id_fkey"),
    )

    resp = client.post("/api/checkout", json={**CART, "userId": 999})

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Database error"
    assert conn.statements("INSERT INTO donation_items") == []
    assert conn.commits == 0
    assert conn.rollbacks == 1


def test_checkout_item_failure_rolls_back_donation(client, conn):
    conn.on("INSERT INTO donations", rows=[(42,)])
    conn.on("INSERT INTO donation_items", error=psycopg2.IntegrityError("bad item"))

    resp = client.post("/api/checkout", json=CART)

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to save donation items"
    assert len(conn.statements("INSERT INTO donations")) == 1
    assert conn.commits == 0
    assert conn.rollbacks == 1


# --- summary / details ---


def test_summary_lists_newest_first_with_label(client, conn):
    ts = datetime(2025, 10, 1, 12, 30, tzinfo=timezone.utc)
    conn.on(
        "FROM donations WHERE user_id",
        rows=[(9, "tx-9", Decimal("22.00"), ts), (4, "tx-4", Decimal("500.00"), ts)],
    )

    resp = client.get("/api/users/5/donations/summary")

    assert resp.status_code == 200
    donations = resp.get_json()["donations"]
    assert [d["id"] for d in donations] == [9, 4]
    assert donations[0] == {
        "id": 9,
        "transactionId": "tx-9",
        "amount": 22.0,
        "createdAt": ts.isoformat(),
        "donatedTo": "Kind-Kart",
    }
    (sql, params), = conn.statements("FROM donations WHERE user_id")
    assert "ORDER BY created_at DESC" in sql
    assert params == (5,)


def test_summary_empty(client, conn):
    resp = client.get("/api/users/5/donations/summary")
    assert resp.status_code == 200
    assert resp.get_json() == {"donations": []}


def test_summary_database_error(client, conn):
    conn.on("FROM donations WHERE user_id", error=psycopg2.OperationalError("down"))
    resp = client.get("/api/users/5/donations/summary")
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Error fetching donation summary"


def _donation_row(user_name="Asha"):
    ts = datetime(2025, 10, 1, tzinfo=timezone.utc)
    return (42, "tx-42", Decimal("22.00"), "card", "INR", "Cart donation", ts, user_name, None)


def test_details_cart_donation(client, conn):
    ts = datetime(2025, 10, 1, tzinfo=timezone.utc)
    conn.on("FROM donations d", rows=[_donation_row()])
    conn.on(
        "SELECT item_name",
        rows=[("Book", Decimal("10.00"), 2, ts), ("Pen", Decimal("2.00"), 1, ts)],
    )

    resp = client.get("/api/donations/42/details")

    assert resp.status_code == 200
    d = resp.get_json()["donation"]
    assert d["type"] == "Cart Donation"
    assert d["userName"] == "Asha"
    assert d["transactionId"] == "tx-42"
    assert d["items"][0] == {
        "itemName": "Book",
        "price": 10.0,
        "qty": 2,
        "createdAt": ts.isoformat(),
    }
    assert len(d["items"]) == 2


def test_details_direct_donation(client, conn):
    conn.on("FROM donations d", rows=[_donation_row(user_name="Anonymous")])

    d = client.get("/api/donations/42/details").get_json()["donation"]

    assert d["type"] == "Direct Money Donation"
    assert d["items"] == []
    assert d["userName"] == "Anonymous"


def test_details_name_fallback_order_in_sql(client, conn):
    conn.on("FROM donations d", rows=[_donation_row()])
    client.get("/api/donations/42/details")
    (sql, _), = conn.statements("FROM donations d")
    assert "COALESCE(u.name, d.first_name, 'Anonymous')" in sql
    assert "LEFT JOIN users u" in sql


def test_details_not_found(client, conn):
    resp = client.get("/api/donations/999/details")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Donation not found"
    assert conn.statements("SELECT item_name") == []


# --- delete ---


def test_delete_removes_items_then_donation(client, conn):
    conn.on("DELETE FROM donation_items", rowcount=2)
    conn.on("DELETE FROM donations", rowcount=1)

    resp = client.delete("/api/donations/42")

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Donation deleted successfully"}
    deletes = [sql for sql, _ in conn.executed]
    assert deletes[0].startswith("DELETE FROM donation_items")
    assert deletes[1].startswith("DELETE FROM donations")
    assert conn.commits == 1


def test_delete_missing_donation_changes_nothing(client, conn):
    conn.on("DELETE FROM donation_items", rowcount=0)
    conn.on("DELETE FROM donations", rowcount=0)

    resp = client.delete("/api/donations/999")

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Donation not found"
    assert conn.commits == 0
    assert conn.rollbacks == 1


def test_delete_database_error(client, conn):
    conn.on("DELETE FROM donation_items", error=psycopg2.OperationalError("down"))
    resp = client.delete("/api/donations/42")
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to delete donation"
    assert conn.statements("DELETE FROM donations ") == []
