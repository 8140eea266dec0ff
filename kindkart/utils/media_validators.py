"""
Profile photo validation: allowed content types, file extensions, and size.
"""

import os
from typing import Tuple

ALLOWED_PHOTO_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/pjpeg",
        "image/png",
    }
)

PHOTO_EXTS = {".jpg", ".jpeg", ".png"}

# 5MB
MAX_PHOTO_SIZE = 5 * 1024 * 1024


def photo_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[-1].lower()


def validate_content_type(content_type: str | None) -> Tuple[bool, str | None]:
    """
    Validate the declared content type. Returns (valid, error_message).
    Browsers sometimes omit it, so a missing value is accepted.
    """
    if not content_type or not content_type.strip():
        return True, None
    ct = content_type.strip().lower().split(";")[0].strip()
    if ct == "application/octet-stream":
        return True, None
    if ct not in ALLOWED_PHOTO_TYPES:
        return False, "Only JPG/PNG files are allowed"
    return True, None


def validate_filename(filename: str | None) -> Tuple[bool, str | None]:
    if not filename or not filename.strip():
        return False, "filename required"
    fn = os.path.basename(filename.strip().replace("\\", "/"))
    if not fn:
        return False, "invalid filename"
    if photo_extension(fn) not in PHOTO_EXTS:
        return False, "Only JPG/PNG files are allowed"
    return True, None


def validate_size(size_bytes: int | None, max_size: int = MAX_PHOTO_SIZE) -> Tuple[bool, str | None]:
    if size_bytes is None:
        return True, None
    if size_bytes < 0:
        return False, "size_bytes must be non-negative"
    if size_bytes > max_size:
        return False, f"File too large (max {max_size // (1024 * 1024)}MB)"
    return True, None
