"""Storage of post images under the public uploads directory."""

from __future__ import annotations

import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from fastapi.staticfiles import StaticFiles

from config import settings
from services.validation import image_extension_error

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class ImageUploadError(ValueError):
    """Raised when an uploaded image is missing, empty, too large or of the wrong type."""


@dataclass
class StoredImage:
    file_path: Path
    public_path: str
    size_bytes: int


def _sanitize_filename(filename: Optional[str]) -> str:
    base = os.path.basename(filename or "image.jpg")
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", base)
    return safe or "image.jpg"


def uploads_dir() -> Path:
    return Path(settings.UPLOAD_DIR)


def public_path_for(filename: str) -> str:
    prefix = "/" + settings.UPLOAD_URL_PREFIX.strip("/")
    return f"{prefix}/{filename}"


def has_content(upload: Optional[UploadFile]) -> bool:
    """Browsers submit an empty part with no filename when no file is chosen."""
    return upload is not None and bool(upload.filename)


async def save_post_image(upload: Optional[UploadFile]) -> StoredImage:
    """
    Write an uploaded image as ``{uuid}_{name}`` inside the uploads directory.

    The returned public path is what gets stored on the post, e.g.
    ``/uploads/3f0c..._beach.jpg``.
    """
    if not has_content(upload):
        raise ImageUploadError("An image file is required.")

    extension_error = image_extension_error(upload.filename)
    if extension_error:
        raise ImageUploadError(extension_error)

    target_dir = uploads_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_filename = f"{uuid.uuid4()}_{_sanitize_filename(upload.filename)}"
    destination = target_dir / stored_filename

    total_size = 0
    try:
        with destination.open("wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > settings.MAX_IMAGE_UPLOAD_BYTES:
                    out.close()
                    destination.unlink(missing_ok=True)
                    raise ImageUploadError(
                        f"Image too large. Max upload size is {settings.MAX_IMAGE_UPLOAD_BYTES // (1024 * 1024)}MB."
                    )
                out.write(chunk)
    finally:
        await upload.close()

    if total_size == 0:
        destination.unlink(missing_ok=True)
        raise ImageUploadError("An image file is required.")

    logger.info("Stored post image %s (%s bytes)", destination, total_size)
    return StoredImage(file_path=destination, public_path=public_path_for(stored_filename), size_bytes=total_size)


def discard_image(image: StoredImage) -> None:
    """Remove a stored image whose post could not be persisted."""
    try:
        image.file_path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not cleanup orphaned upload %s: %s", image.file_path, exc)


class UploadsStaticFiles(StaticFiles):
    """Static file app over the uploads directory, resolved from settings on every lookup."""

    def __init__(self) -> None:
        super().__init__(directory=str(uploads_dir()), check_dir=False)

    async def check_config(self) -> None:
        target_dir = uploads_dir()
        target_dir.mkdir(parents=True, exist_ok=True)
        self.directory = str(target_dir)
        await super().check_config()

    def lookup_path(self, path: str):
        self.all_directories = [str(uploads_dir())]
        return super().lookup_path(path)
