"""Disk storage for menu images."""
import os
import random
import time
from dataclasses import dataclass
from typing import Optional
from fastapi import UploadFile
from core.exceptions import ValidationError
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("Storage_Service")

ALLOWED_IMAGE_TYPES = {"jpeg", "jpg", "png", "gif"}
CHUNK_SIZE = 64 * 1024
TYPE_ERROR = "File upload only supports images (jpeg, jpg, png, gif)"


@dataclass
class StoredImage:
    """Where a saved upload lives: public path for the record, file path on disk."""
    url_path: str
    file_path: str


def upload_dir() -> str:
    return os.path.abspath(settings.UPLOAD_DIR)


def ensure_upload_dir() -> str:
    path = upload_dir()
    os.makedirs(path, exist_ok=True)
    return path


def build_image_name(original_name: str) -> str:
    """<epoch millis>-<random 9 digits><original extension>"""
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1):09d}{ext}"


def validate_image(upload: UploadFile) -> None:
    """Both the extension and the declared MIME subtype must be an allowed image type."""
    ext = os.path.splitext(upload.filename or "")[1].lower().lstrip(".")
    content_type = (upload.content_type or "").lower()
    main_type, _, sub_type = content_type.partition("/")
    if ext not in ALLOWED_IMAGE_TYPES or main_type != "image" or sub_type not in ALLOWED_IMAGE_TYPES:
        logger.warning(f"Rejected upload {upload.filename!r} with content type {content_type!r}")
        raise ValidationError(TYPE_ERROR, errors=[{"field": "image", "message": TYPE_ERROR}])


def _file_path_for(url_path: str) -> Optional[str]:
    # only the basename is trusted, the file must sit directly in the upload dir
    name = os.path.basename(url_path or "")
    if not name:
        return None
    return os.path.join(upload_dir(), name)


async def save_image(upload: UploadFile) -> StoredImage:
    """
    Validate and write an uploaded image under the upload directory.
    The file is streamed in chunks; anything past MAX_IMAGE_SIZE is rejected
    and the partial file removed.
    """
    validate_image(upload)
    directory = ensure_upload_dir()
    name = build_image_name(upload.filename)
    file_path = os.path.join(directory, name)

    written = 0
    try:
        with open(file_path, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > settings.MAX_IMAGE_SIZE:
                    raise ValidationError(
                        "File too large",
                        errors=[{"field": "image", "message": f"Image must be at most {settings.MAX_IMAGE_SIZE} bytes"}]
                    )
                out.write(chunk)
    except BaseException:
        _remove(file_path)
        raise

    url_path = f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{name}"
    logger.info(f"Image saved: {url_path} ({written} bytes)")
    return StoredImage(url_path=url_path, file_path=file_path)


def resolve_image(url_path: str) -> Optional[str]:
    """Path on disk for a stored image path, or None if the file is gone."""
    file_path = _file_path_for(url_path)
    if file_path and os.path.isfile(file_path):
        return file_path
    return None


def _remove(file_path: str) -> bool:
    try:
        os.remove(file_path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error(f"Could not delete file {file_path}: {e}")
        return False


def delete_image(url_path: Optional[str]) -> bool:
    """
    Best-effort removal of a stored image. Never raises.
    Returns True only if a file was actually deleted.
    """
    file_path = _file_path_for(url_path)
    if not file_path:
        return False
    removed = _remove(file_path)
    if removed:
        logger.info(f"Image deleted: {url_path}")
    else:
        logger.warning(f"Image not deleted: {url_path}")
    return removed
