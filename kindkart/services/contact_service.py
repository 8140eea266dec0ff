"""
Contact and feedback intake: validate, store, done. Rows are never updated
or deleted through the API.
"""

import logging
import re
from typing import Any, Dict, Tuple

from kindkart.errors import ValidationError
from kindkart.models.contact import insert_contact_message, insert_feedback
from kindkart.utils.db import transaction

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_RATING = 5


def _required_fields(data: dict) -> Tuple[str, str, str]:
    name = str(data.get("name") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    message = str(data.get("message") or "").strip()
    if not name or not email or not message:
        raise ValidationError("All fields are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("invalid email format")
    return name, email, message


def _rating(value) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValidationError("rating must be an integer between 0 and 5")
    try:
        rating = int(value)
    except (TypeError, ValueError):
        raise ValidationError("rating must be an integer between 0 and 5")
    if not 0 <= rating <= MAX_RATING:
        raise ValidationError("rating must be an integer between 0 and 5")
    return rating


def submit_contact(conn, data: dict) -> Dict[str, Any]:
    name, email, message = _required_fields(data)
    with transaction(conn):
        msg_id = insert_contact_message(conn, name=name, email=email, message=message)
    logger.info("contact message %s stored", msg_id)
    return {"success": True, "message": "Message sent successfully!"}


def submit_feedback(conn, data: dict) -> Dict[str, Any]:
    name, email, message = _required_fields(data)
    rating = _rating(data.get("rating"))
    with transaction(conn):
        fb_id = insert_feedback(
            conn, name=name, email=email, message=message, rating=rating
        )
    logger.info("feedback %s stored (rating=%s)", fb_id, rating)
    return {"success": True, "message": "Thank you for your feedback!"}
