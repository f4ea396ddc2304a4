"""Pytest configuration and fixtures."""

import copy
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from rental_listings_api.app.core.db import InMemoryDocumentStore, close_store, get_store
from rental_listings_api.app.core.storage import ImageStorage, get_image_storage
from rental_listings_api.app.main import app
from rental_listings_api.app.services.property_service import PropertyService
from seed_properties import SAMPLE_PROPERTIES

COLLECTION = "properties"


class RecordingImageStorage(ImageStorage):
    """Image storage double that records deletions and can fail on demand."""

    def __init__(self) -> None:
        self.deleted: List[str] = []
        self.failing: set = set()

    def delete(self, path: str) -> None:
        if path in self.failing:
            raise RuntimeError(f"storage refused to delete {path}")
        self.deleted.append(path)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Create a fresh store for each test."""
    return InMemoryDocumentStore()


@pytest.fixture
def image_storage() -> RecordingImageStorage:
    return RecordingImageStorage()


@pytest.fixture
def service(store: InMemoryDocumentStore, image_storage: RecordingImageStorage) -> PropertyService:
    return PropertyService(store, image_storage, collection=COLLECTION)


@pytest.fixture
def seeded(store: InMemoryDocumentStore) -> Dict[str, str]:
    """Store the sample listings directly; maps title to document id."""
    ids = {}
    for payload in SAMPLE_PROPERTIES:
        data = copy.deepcopy(payload)
        data["images"] = []
        ids[payload["title"]] = store.add(COLLECTION, data)
    return ids


@pytest.fixture
def client(store: InMemoryDocumentStore, image_storage: RecordingImageStorage):
    """HTTP client for the app wired to the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unavailable_client():
    """HTTP client for the app with no document store initialised."""
    close_store()
    app.dependency_overrides.clear()
    yield TestClient(app)
    close_store()
