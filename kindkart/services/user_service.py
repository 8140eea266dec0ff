import logging
import re
from typing import Any, Dict, Optional

from psycopg2.errors import UniqueViolation
from werkzeug.datastructures import FileStorage

from kindkart.errors import ConflictError, NotFoundError, ValidationError
from kindkart.models.user import get_user, update_profile
from kindkart.utils.db import transaction
from kindkart.utils.uploads import StagedPhoto, check_photo

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_user_id(value) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("user id must be an integer")


def get_profile(conn, user_id) -> Dict[str, Any]:
    with transaction(conn):
        user = get_user(conn, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _write_profile(conn, user_id, fields: dict, photo_url: Optional[str] = None) -> None:
    try:
        count = update_profile(conn, user_id, photo_url=photo_url, **fields)
    except UniqueViolation:
        raise ConflictError("Email already registered")
    if count == 0:
        raise NotFoundError("User not found")


def update_user_profile(
    conn,
    user_id,
    data: dict,
    photo: Optional[FileStorage],
    *,
    upload_dir: str,
    max_photo_bytes: int,
) -> Dict[str, Any]:
    """
    Update name/email/phone and, when a photo is attached, replace photo_url.

    The photo is checked before anything is written, staged on disk, and
    promoted only after the row update succeeds. Every failure after staging
    removes the file again.
    """
    if photo is not None and not photo.filename:
        photo = None

    name = str(data.get("name") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    phone = str(data.get("phone") or "").strip() or None

    if not name or not email or not EMAIL_RE.match(email):
        if photo is not None:
            photo.close()
        if not name or not email:
            raise ValidationError("Name and email are required")
        raise ValidationError("Invalid email format")

    fields = {"name": name, "email": email, "phone": phone}

    if photo is None:
        with transaction(conn):
            _write_profile(conn, user_id, fields)
        logger.info("profile %s updated", user_id)
        return {"success": True, "message": "Profile updated"}

    check_photo(photo, max_photo_bytes)
    staged = StagedPhoto.stage(photo, upload_dir)
    try:
        with transaction(conn):
            _write_profile(conn, user_id, fields, photo_url=staged.url)
            staged.promote()
    except Exception:
        staged.discard()
        raise

    logger.info("profile %s updated with photo %s", user_id, staged.name)
    return {"success": True, "message": "Profile updated", "photo_url": staged.url}
