"""
Local disk storage for profile photos.

A photo is first written under a ".part" name, promoted to its final name
once the database row referencing it has been updated, and discarded if
anything fails in between.
"""

from __future__ import annotations
import logging
import os
import uuid

from werkzeug.datastructures import FileStorage

from kindkart.errors import UploadError
from kindkart.utils.media_validators import (
    photo_extension,
    validate_content_type,
    validate_filename,
    validate_size,
)

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


def make_photo_name(filename: str) -> str:
    return f"photo_{uuid.uuid4().hex}{photo_extension(filename)}"


def public_url(name: str) -> str:
    return f"{PUBLIC_PREFIX}/{name}"


def _stream_size(photo: FileStorage) -> int:
    stream = photo.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def check_photo(photo: FileStorage, max_size: int) -> None:
    """Raise UploadError for a wrong type or an oversized file."""
    for ok, err in (
        validate_filename(photo.filename),
        validate_content_type(photo.mimetype),
        validate_size(_stream_size(photo), max_size),
    ):
        if not ok:
            raise UploadError(err)


class StagedPhoto:
    def __init__(self, upload_dir: str, name: str):
        self.name = name
        self.final_path = os.path.join(upload_dir, name)
        self.staged_path = self.final_path + ".part"
        self.url = public_url(name)
        self.promoted = False

    @classmethod
    def stage(cls, photo: FileStorage, upload_dir: str) -> "StagedPhoto":
        os.makedirs(upload_dir, exist_ok=True)
        staged = cls(upload_dir, make_photo_name(photo.filename))
        photo.save(staged.staged_path)
        logger.debug("staged photo %s", staged.staged_path)
        return staged

    def promote(self) -> None:
        os.replace(self.staged_path, self.final_path)
        self.promoted = True

    def discard(self) -> None:
        for path in (self.staged_path, self.final_path):
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
            except OSError:
                logger.exception("could not remove %s", path)
        self.promoted = False
