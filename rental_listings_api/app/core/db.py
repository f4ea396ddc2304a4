"""
Document store integration.

This module defines the small ``DocumentStore`` interface the services
depend on, two implementations of it and the one-time initialisation
routine used at application start:

* ``FirestoreDocumentStore`` wraps a Firestore client obtained through
  firebase-admin.  Google API errors are translated into the exceptions
  from ``core.exceptions``.
* ``InMemoryDocumentStore`` keeps documents in process.  It follows the
  Firestore query rules the services rely on and is used for local
  development and tests.

``init_store`` builds the configured store exactly once; ``get_store``
is the FastAPI dependency that hands it to the routes.  Nothing is
initialised at import time.
"""

from __future__ import annotations

import copy
import json
import logging
import operator
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from .config import settings
from .exceptions import (
    MissingIndexError,
    NotFoundError,
    StoreError,
    StoreRejectedError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

# (field, operator, value), e.g. ("price", ">=", 50000)
QueryFilter = Tuple[str, str, Any]
Document = Dict[str, Any]

STORE_NOT_INITIALIZED = "Firestore is not initialized. Check server logs."


class DocumentStore(ABC):
    """Minimal document store addressed by collection and document id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document data or ``None`` when it does not exist."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[str] = None,
    ) -> List[Tuple[str, Optional[Document]]]:
        """Return ``(id, data)`` pairs matching every filter, in order."""

    @abstractmethod
    def add(self, collection: str, data: Document) -> str:
        """Store a new document and return its generated id."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> None:
        """Apply a sparse update.

        Keys mapped to ``None`` are removed from the stored document.
        Raises ``NotFoundError`` when the document does not exist.
        """

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document.  Deleting a missing document is a no-op."""


# ----------------------------------------------------------------------
# Firestore
# ----------------------------------------------------------------------


@contextmanager
def _translate_errors(action: str, write: bool = False) -> Iterator[None]:
    """Convert Google API errors raised inside the block into store errors.

    With ``write=True`` values the client library refuses to encode
    (``TypeError``/``ValueError``) are reported as a rejected payload.
    On reads they are not caught.
    """
    try:
        yield
    except google_exceptions.NotFound as exc:
        raise NotFoundError(f"{action}: {exc.message}") from exc
    except google_exceptions.InvalidArgument as exc:
        if write:
            raise StoreRejectedError(
                f"{action}: Firestore rejected the payload, the document size limit was likely exceeded. "
                f"Details: {exc.message}"
            ) from exc
        raise StoreRejectedError(f"{action}: Firestore rejected the request. Details: {exc.message}") from exc
    except google_exceptions.FailedPrecondition as exc:
        if "index" in str(exc.message):
            logger.error("Firestore query requires an index. Link: %s", exc.message)
            raise MissingIndexError(
                "Query requires a Firestore index. Please create it using the link from the "
                f"server logs. Details: {exc.message}"
            ) from exc
        raise StoreError(f"{action}: {exc.message}") from exc
    except google_exceptions.GoogleAPICallError as exc:
        raise StoreError(f"{action}: {exc.message}") from exc
    except (TypeError, ValueError) as exc:
        if not write:
            raise
        raise StoreRejectedError(f"{action}: Firestore cannot store a value in the payload: {exc}") from exc


class FirestoreDocumentStore(DocumentStore):
    """``DocumentStore`` backed by a ``google.cloud.firestore.Client``."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with _translate_errors(f"Error reading {collection}/{doc_id}"):
            snapshot = self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[str] = None,
    ) -> List[Tuple[str, Optional[Document]]]:
        with _translate_errors(f"Error querying {collection}"):
            query = self.client.collection(collection)
            for field, op, value in filters:
                query = query.where(filter=firestore.FieldFilter(field, op, value))
            if order_by:
                query = query.order_by(order_by)
            return [(snapshot.id, snapshot.to_dict()) for snapshot in query.stream()]

    def add(self, collection: str, data: Document) -> str:
        with _translate_errors(f"Error adding to {collection}", write=True):
            _, doc_ref = self.client.collection(collection).add(data)
        return doc_ref.id

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> None:
        payload = {
            key: firestore.DELETE_FIELD if value is None else value
            for key, value in changes.items()
        }
        with _translate_errors(f"Error updating {collection}/{doc_id}", write=True):
            self.client.collection(collection).document(doc_id).update(payload)

    def delete(self, collection: str, doc_id: str) -> None:
        with _translate_errors(f"Error deleting {collection}/{doc_id}"):
            self.client.collection(collection).document(doc_id).delete()


# ----------------------------------------------------------------------
# In-memory
# ----------------------------------------------------------------------

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _sort_key(value: Any) -> Tuple[int, Any]:
    # Firestore orders numbers before strings; other types go last.
    if _is_number(value):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, repr(value))


class InMemoryDocumentStore(DocumentStore):
    """Process-local ``DocumentStore``.

    Mirrors the Firestore behaviours the services depend on: range
    filters only match values of a comparable type, and ordering by a
    field drops documents that do not have it.  Ties are broken by
    document id.
    """

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._lock = threading.Lock()

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(data) if data is not None else None

    def query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[str] = None,
    ) -> List[Tuple[str, Optional[Document]]]:
        with self._lock:
            docs = copy.deepcopy(list(self._collections.get(collection, {}).items()))
        matched = [(doc_id, data) for doc_id, data in docs if all(self._matches(data, f) for f in filters)]
        if order_by:
            matched = [(doc_id, data) for doc_id, data in matched if order_by in data]
            matched.sort(key=lambda item: (_sort_key(item[1][order_by]), item[0]))
        else:
            matched.sort(key=lambda item: item[0])
        return matched

    def add(self, collection: str, data: Document) -> str:
        doc_id = uuid.uuid4().hex[:20]
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        return doc_id

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> None:
        with self._lock:
            stored = self._collections.get(collection, {}).get(doc_id)
            if stored is None:
                raise NotFoundError(f"No document to update: {collection}/{doc_id}")
            for key, value in changes.items():
                if value is None:
                    stored.pop(key, None)
                else:
                    stored[key] = copy.deepcopy(value)

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)

    @staticmethod
    def _matches(data: Document, query_filter: QueryFilter) -> bool:
        field, op, value = query_filter
        if field not in data:
            return False
        current = data[field]
        if _is_number(value) != _is_number(current):
            return False
        try:
            return bool(_OPERATORS[op](current, value))
        except TypeError:
            return False


# ----------------------------------------------------------------------
# Initialisation
# ----------------------------------------------------------------------

_store: Optional[DocumentStore] = None
_store_lock = threading.Lock()


def init_firebase_app() -> Optional[firebase_admin.App]:
    """Return the default firebase-admin app, initialising it if needed.

    Credentials come from ``FIREBASE_SERVICE_ACCOUNT_JSON``.  Missing or
    unparsable credentials are logged and ``None`` is returned so the
    API can still start and report the problem per request.
    """
    try:
        app = firebase_admin.get_app()
        logger.info("Firebase Admin SDK already initialized, re-using existing instance.")
        return app
    except ValueError:
        pass

    raw = settings.firebase_service_account_json
    if not raw.strip():
        logger.warning(
            "FIREBASE_SERVICE_ACCOUNT_JSON environment variable is not set or is empty. "
            "Firebase Admin SDK will not be initialized."
        )
        return None
    try:
        service_account = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error(
            "Error parsing FIREBASE_SERVICE_ACCOUNT_JSON. Ensure it is a valid, single-line JSON string: %s",
            exc,
        )
        return None
    options = {"storageBucket": settings.firebase_storage_bucket} if settings.firebase_storage_bucket else None
    try:
        app = firebase_admin.initialize_app(credentials.Certificate(service_account), options)
    except ValueError as exc:
        logger.error("Firebase Admin SDK initialization error: %s", exc)
        return None
    logger.info("Firebase Admin SDK initialized")
    return app


def init_store() -> Optional[DocumentStore]:
    """Create the configured document store once and return it.

    Subsequent calls return the same instance.  ``None`` is returned
    when the backend could not be initialised.
    """
    global _store
    with _store_lock:
        if _store is not None:
            return _store
        backend = settings.store_backend
        if backend == "memory":
            _store = InMemoryDocumentStore()
            logger.info("Using in-memory document store")
        elif backend == "firestore":
            app = init_firebase_app()
            if app is not None:
                _store = FirestoreDocumentStore(firestore.client(app))
                logger.info("Using Firestore document store")
        else:
            logger.error("Unknown STORE_BACKEND %r; expected 'firestore' or 'memory'", backend)
        return _store


def close_store() -> None:
    """Forget the current store so the next ``init_store`` builds a new one."""
    global _store
    with _store_lock:
        _store = None


def store_initialized() -> bool:
    return _store is not None


def get_store() -> DocumentStore:
    """FastAPI dependency returning the initialised document store."""
    if _store is None:
        logger.error("Document store requested before initialization")
        raise StoreUnavailableError(STORE_NOT_INITIALIZED)
    return _store
