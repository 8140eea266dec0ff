import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import psycopg2

from kindkart.errors import DatabaseError, NotFoundError, ValidationError
from kindkart.models.donation import (
    delete_donation,
    get_donation_with_donor,
    insert_donation,
    summary_for_user,
)
from kindkart.models.donation_item import delete_items, insert_items, list_items
from kindkart.utils.db import transaction

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "INR"
DEFAULT_CART_METHOD = "card"
DEFAULT_CART_DESCRIPTION = "Cart donation"
CART_DONATION = "Cart Donation"
DIRECT_DONATION = "Direct Money Donation"

# NUMERIC(12,2)
MAX_AMOUNT = Decimal("9999999999.99")
CENTS = Decimal("0.01")


def _to_decimal(value, field: str, *, allow_zero: bool = False) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        d = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not d.is_finite():
        raise ValidationError(f"{field} must be a number")
    if d < 0 or (d == 0 and not allow_zero):
        raise ValidationError(
            f"{field} must be {'>= 0' if allow_zero else '> 0'}"
        )
    if d > MAX_AMOUNT:
        raise ValidationError(f"{field} is too large")
    if d != d.quantize(CENTS):
        raise ValidationError(f"{field} must have at most 2 decimal places")
    return d.quantize(CENTS)


def _to_qty(value) -> int:
    if value is None or value == "":
        return 1
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError("qty must be a positive integer")
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise ValidationError("qty must be a positive integer")
    if qty < 1:
        raise ValidationError("qty must be a positive integer")
    return qty


def _optional_id(value, field: str):
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def _clean_items(items) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        raise ValidationError("items must be a list")
    cleaned = []
    for i in items:
        if not isinstance(i, dict):
            raise ValidationError("each item must be an object")
        name = str(i.get("name") or "").strip()
        if not name:
            raise ValidationError("each item needs a name")
        cleaned.append(
            {
                "name": name,
                "price": _to_decimal(i.get("price"), "price", allow_zero=True),
                "qty": _to_qty(i.get("qty")),
            }
        )
    return cleaned


def process_payment(conn, data: dict) -> Dict[str, Any]:
    """Direct money donation: one donations row, donor fields copied in."""
    donor = data.get("donorInfo")
    if data.get("amount") in (None, "") or not data.get("paymentMethod") or not donor:
        raise ValidationError("Invalid request data")
    if not isinstance(donor, dict):
        raise ValidationError("donorInfo must be an object")

    amount = _to_decimal(data.get("amount"), "amount")
    user_id = _optional_id(donor.get("userId"), "donorInfo.userId")
    transaction_id = str(uuid.uuid4())

    with transaction(conn):
        donation_id = insert_donation(
            conn,
            transaction_id=transaction_id,
            user_id=user_id,
            first_name=donor.get("firstName") or None,
            last_name=donor.get("lastName") or None,
            email=donor.get("email") or None,
            amount=amount,
            payment_method=str(data["paymentMethod"]),
            currency=data.get("currency") or DEFAULT_CURRENCY,
            description=data.get("description") or None,
        )

    logger.info("donation %s recorded (transaction %s)", donation_id, transaction_id)
    return {
        "success": True,
        "transactionId": transaction_id,
        "message": "Donation successful",
    }


def checkout(conn, data: dict) -> Dict[str, Any]:
    """
    Cart donation: the donations row and every donation_items row commit
    together or not at all.
    """
    raw_items = data.get("items")
    if not raw_items:
        raise ValidationError("No items in cart")

    items = _clean_items(raw_items)
    user_id = _optional_id(data.get("userId"), "userId")
    if data.get("amount") in (None, ""):
        amount = sum((i["price"] * i["qty"] for i in items), Decimal("0")).quantize(CENTS)
        if amount <= 0:
            raise ValidationError("amount must be > 0")
        if amount > MAX_AMOUNT:
            raise ValidationError("amount is too large")
    else:
        amount = _to_decimal(data.get("amount"), "amount")

    transaction_id = str(uuid.uuid4())

    with transaction(conn):
        donation_id = insert_donation(
            conn,
            transaction_id=transaction_id,
            user_id=user_id,
            first_name=None,
            last_name=None,
            email=None,
            amount=amount,
            payment_method=data.get("paymentMethod") or DEFAULT_CART_METHOD,
            currency=data.get("currency") or DEFAULT_CURRENCY,
            description=data.get("description") or DEFAULT_CART_DESCRIPTION,
        )
        try:
            insert_items(conn, donation_id, user_id, items)
        except psycopg2.Error as e:
            logger.exception("items for donation %s not saved", donation_id)
            raise DatabaseError("Failed to save donation items") from e

    logger.info(
        "cart donation %s recorded with %d items (transaction %s)",
        donation_id,
        len(items),
        transaction_id,
    )
    return {
        "success": True,
        "transactionId": transaction_id,
        "donationId": donation_id,
        "amount": float(amount),
        "items": [
            {"name": i["name"], "price": float(i["price"]), "qty": i["qty"]}
            for i in items
        ],
    }


def donation_summary(conn, user_id) -> Dict[str, Any]:
    with transaction(conn, "Error fetching donation summary"):
        return {"donations": summary_for_user(conn, user_id)}


def donation_details(conn, donation_id) -> Dict[str, Any]:
    with transaction(conn, "Error fetching donation details"):
        donation = get_donation_with_donor(conn, donation_id)
        if donation is None:
            raise NotFoundError("Donation not found")
        items = list_items(conn, donation_id)

    donation["type"] = CART_DONATION if items else DIRECT_DONATION
    donation["items"] = items
    return {"donation": donation}


def remove_donation(conn, donation_id) -> Dict[str, Any]:
    """Items first, then the donation; a missing donation rolls both back."""
    with transaction(conn, "Failed to delete donation"):
        removed_items = delete_items(conn, donation_id)
        if delete_donation(conn, donation_id) == 0:
            raise NotFoundError("Donation not found")

    logger.info("donation %s deleted with %d items", donation_id, removed_items)
    return {"success": True, "message": "Donation deleted successfully"}
