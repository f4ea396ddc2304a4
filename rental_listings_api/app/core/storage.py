"""
Object storage used for listing images.

The API never uploads images; it only cleans up objects referenced by
a listing when that listing is deleted.  ``storage_path_from_url``
turns the URLs saved on a listing back into object paths inside the
bucket, and ``FirebaseImageStorage`` deletes them through
firebase-admin.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import unquote, urlparse

from firebase_admin import storage
from google.api_core import exceptions as google_exceptions

from .config import settings
from .db import init_firebase_app
from .exceptions import NotFoundError, StoreError

logger = logging.getLogger(__name__)


def storage_path_from_url(url: str) -> Optional[str]:
    """Return the object path encoded in an image URL, or ``None``.

    Understands Firebase download URLs
    (``https://firebasestorage.googleapis.com/v0/b/<bucket>/o/<path>?alt=media``),
    ``gs://<bucket>/<path>`` URIs and public
    ``https://storage.googleapis.com/<bucket>/<path>`` URLs.
    """
    if not isinstance(url, str) or not url.strip():
        return None
    parsed = urlparse(url.strip())
    if parsed.scheme == "gs":
        path = parsed.path.lstrip("/")
        return unquote(path) or None
    if parsed.scheme not in {"http", "https"}:
        return None
    if parsed.netloc == "storage.googleapis.com":
        _, _, path = parsed.path.lstrip("/").partition("/")
        return unquote(path) or None
    # The object name is percent-encoded as a single path segment after /o/.
    marker = "/o/"
    if parsed.path.startswith("/v0/b/") and marker in parsed.path:
        encoded = parsed.path.split(marker, 1)[1]
        return unquote(encoded) or None
    return None


class ImageStorage(ABC):
    """Bucket-like storage that can delete objects by path."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete the object at ``path``."""


class FirebaseImageStorage(ImageStorage):
    """``ImageStorage`` backed by a Cloud Storage bucket."""

    def __init__(self, bucket: Any) -> None:
        self.bucket = bucket

    def delete(self, path: str) -> None:
        logger.info("Deleting image from storage: gs://%s/%s", self.bucket.name, path)
        try:
            self.bucket.blob(path).delete()
        except google_exceptions.NotFound as exc:
            raise NotFoundError(f"Image {path} not found in storage") from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise StoreError(f"Error deleting image {path}: {exc.message}") from exc


_image_storage: Optional[ImageStorage] = None
_image_storage_lock = threading.Lock()


def init_image_storage() -> Optional[ImageStorage]:
    """Create the image storage client once; ``None`` when not configured."""
    global _image_storage
    with _image_storage_lock:
        if _image_storage is not None:
            return _image_storage
        if settings.store_backend != "firestore":
            return None
        bucket_name = settings.firebase_storage_bucket
        if not bucket_name:
            logger.warning(
                "Firebase Storage bucket name (FIREBASE_STORAGE_BUCKET) is not configured. "
                "Images will not be deleted from storage."
            )
            return None
        app = init_firebase_app()
        if app is None:
            return None
        _image_storage = FirebaseImageStorage(storage.bucket(bucket_name, app=app))
        return _image_storage


def close_image_storage() -> None:
    global _image_storage
    with _image_storage_lock:
        _image_storage = None


def get_image_storage() -> Optional[ImageStorage]:
    """FastAPI dependency; image cleanup is optional so this may be ``None``."""
    return _image_storage
