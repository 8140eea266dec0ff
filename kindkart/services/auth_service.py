import logging
import re
from typing import Any, Dict

import bcrypt
from flask_jwt_extended import create_access_token, create_refresh_token
from psycopg2.errors import UniqueViolation

from kindkart.errors import AuthError, ConflictError, ValidationError
from kindkart.models.user import create_user, get_user_by_email
from kindkart.utils.db import transaction

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(email) -> str:
    return str(email or "").strip().lower()


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def _make_tokens(user_id) -> Dict[str, str]:
    identity = str(user_id)
    return {
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
    }


def signup_user(conn, data: dict) -> Dict[str, Any]:
    name = str(data.get("name") or "").strip()
    email = _normalize_email(data.get("email"))
    password = str(data.get("password") or "")

    if not name or not email or not password:
        raise ValidationError("All fields are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")

    with transaction(conn):
        try:
            user = create_user(
                conn, name=name, email=email, password_hash=_hash_password(password)
            )
        except UniqueViolation:
            raise ConflictError("Email already registered")

    logger.info("user %s signed up", user["id"])
    return {"message": "Signup successful", "user": user, **_make_tokens(user["id"])}


def login_user(conn, data: dict) -> Dict[str, Any]:
    email = _normalize_email(data.get("email"))
    password = str(data.get("password") or "")

    if not email or not password:
        raise ValidationError("Email and password required")

    with transaction(conn):
        user = get_user_by_email(conn, email)

    if not user or not _verify_password(password, user.pop("password_hash")):
        raise AuthError("Invalid credentials")

    return {"message": "Login successful", "user": user, **_make_tokens(user["id"])}
