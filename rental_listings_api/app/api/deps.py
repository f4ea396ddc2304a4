"""
FastAPI dependencies wiring services to the initialised clients.

Tests override ``get_store`` (and optionally ``get_image_storage``)
through ``app.dependency_overrides`` to run against an in-memory store.
"""

from typing import Optional

from fastapi import Depends

from rental_listings_api.app.core.config import settings
from rental_listings_api.app.core.db import DocumentStore, get_store
from rental_listings_api.app.core.storage import ImageStorage, get_image_storage
from rental_listings_api.app.services.property_service import PropertyService
from rental_listings_api.app.services.search_service import SearchService


def get_property_service(
    store: DocumentStore = Depends(get_store),
    image_storage: Optional[ImageStorage] = Depends(get_image_storage),
) -> PropertyService:
    return PropertyService(store, image_storage, collection=settings.properties_collection)


def get_search_service(store: DocumentStore = Depends(get_store)) -> SearchService:
    return SearchService(store, collection=settings.properties_collection)
