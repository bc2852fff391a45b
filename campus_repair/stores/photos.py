import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from campus_repair.core.errors import PhotoStorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_PHOTO_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_PHOTO_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content_type: str | None
    data: bytes


class PhotoStore(Protocol):
    """Blob storage for complaint photos."""

    def save(self, upload: PhotoUpload) -> str:
        ...

    def delete(self, reference: str) -> None:
        ...


def describe_size(size: int) -> str:
    if size >= 1024 * 1024 and size % (1024 * 1024) == 0:
        return f"{size // (1024 * 1024)}MB"
    if size >= 1024 and size % 1024 == 0:
        return f"{size // 1024}KB"
    return f"{size} bytes"


def validate_photo(upload: PhotoUpload, max_bytes: int) -> None:
    extension = os.path.splitext(upload.filename or "")[1].lower()
    content_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if extension not in ALLOWED_PHOTO_EXTENSIONS or content_type not in ALLOWED_PHOTO_CONTENT_TYPES:
        raise ValidationError("Only image files are allowed")
    if len(upload.data) > max_bytes:
        raise ValidationError(f"Photo must be {describe_size(max_bytes)} or smaller")


def sanitize_filename(filename: str) -> str:
    base = os.path.basename(filename.replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "photo"


class LocalPhotoStore:
    """Stores photos as files in a single upload directory.

    The reference returned by ``save`` is the bare filename, which is also the
    path the API serves it under (``/uploads/<reference>``).
    """

    def __init__(self, directory: str | Path, max_bytes: int = 5 * 1024 * 1024) -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, upload: PhotoUpload) -> str:
        validate_photo(upload, self.max_bytes)
        reference = f"{int(time.time() * 1000)}-{sanitize_filename(upload.filename)}"
        try:
            self.ensure_directory()
            # "x" mode refuses to overwrite a file saved in the same millisecond.
            with open(self.directory / reference, "xb") as handle:
                handle.write(upload.data)
        except OSError as exc:
            logger.error("Failed to store photo %s: %s", reference, exc)
            raise PhotoStorageError() from exc
        return reference

    def delete(self, reference: str) -> None:
        path = self.directory / os.path.basename(reference)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Failed to remove photo %s: %s", reference, exc)
