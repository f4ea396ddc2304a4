"""
Business logic for property listings.

``PropertyService`` implements get/create/update/delete for the
``properties`` collection on top of an injected ``DocumentStore``.
Everything read from the store is passed through
``coercion.normalize_property`` so legacy or partially written
documents still come back in the strict shape.  Store calls are
blocking client round trips and run in worker threads via
``asyncio.to_thread``.

Images are not persisted: new listings always store an empty
``images`` list because embedding uploads would hit Firestore's
document size limit.  When a listing that does reference stored images
is deleted, the images are removed from object storage on a
best-effort basis.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

from rental_listings_api.app.core.db import DocumentStore
from rental_listings_api.app.core.exceptions import NotFoundError, ValidationError
from rental_listings_api.app.core.storage import ImageStorage, storage_path_from_url
from rental_listings_api.app.schemas.property import Property
from rental_listings_api.app.services.coercion import (
    coerce_number,
    coerce_optional_number,
    coerce_optional_string,
    coerce_string,
    coerce_string_array,
    normalize_property,
)

logger = logging.getLogger(__name__)

# Defaults that stand for "not supplied"; a listing may not be saved with them.
UNTITLED_PROPERTY = "Untitled Property"
UNKNOWN_LOCATION = "Unknown Location"

INVALID_FIELDS_MESSAGE = "Missing or invalid required fields: title, price, and location must be valid."
NO_FIELDS_MESSAGE = "No valid fields provided for update."


def _not_found(property_id: str) -> NotFoundError:
    return NotFoundError(f"Property with ID {property_id} not found.")


def has_invalid_required_fields(fields: Mapping[str, Any]) -> bool:
    """Check title, price and location, but only those present in ``fields``.

    Titles and locations are compared against the sentinel defaults, so a
    listing genuinely titled "Untitled Property" is rejected as well.
    """
    if "title" in fields:
        title = fields["title"]
        if not title.strip() or title == UNTITLED_PROPERTY:
            return True
    if "price" in fields and fields["price"] <= 0:
        return True
    if "location" in fields:
        location = fields["location"]
        if not location.strip() or location == UNKNOWN_LOCATION:
            return True
    return False


def build_update(raw: Mapping[str, Any]) -> Dict[str, Optional[Any]]:
    """Turn a partial request body into a sparse update.

    Only keys present in ``raw`` appear in the result.  A value of
    ``None`` means the stored field must be removed; this is how an
    empty or invalid ``area`` clears the stored area instead of
    writing 0.
    """
    changes: Dict[str, Optional[Any]] = {}
    if "title" in raw:
        changes["title"] = coerce_string(raw["title"], UNTITLED_PROPERTY)
    if "description" in raw:
        changes["description"] = coerce_string(raw["description"])
    if "location" in raw:
        changes["location"] = coerce_string(raw["location"], UNKNOWN_LOCATION)
    if "price" in raw:
        changes["price"] = coerce_number(raw["price"], 0)
    if "bedrooms" in raw:
        changes["bedrooms"] = coerce_number(raw["bedrooms"], 0)
    if "bathrooms" in raw:
        changes["bathrooms"] = coerce_number(raw["bathrooms"], 1)
    if "amenities" in raw:
        changes["amenities"] = coerce_string_array(raw["amenities"])
    if "images" in raw:
        changes["images"] = coerce_string_array(raw["images"])
    if "phoneNumber" in raw:
        # An empty string is kept so a number can be cleared from the form.
        changes["phoneNumber"] = coerce_string(raw["phoneNumber"])
    if "area" in raw:
        changes["area"] = coerce_optional_number(raw["area"])
    return changes


class PropertyService:
    """CRUD operations for property listings."""

    def __init__(
        self,
        store: DocumentStore,
        image_storage: Optional[ImageStorage] = None,
        collection: str = "properties",
    ) -> None:
        self.store = store
        self.image_storage = image_storage
        self.collection = collection

    async def get(self, property_id: str) -> Property:
        """Return a single listing or raise ``NotFoundError``."""
        logger.info("Fetching property %s", property_id)
        data = await asyncio.to_thread(self.store.get, self.collection, property_id)
        if data is None:
            logger.warning("Property %s not found", property_id)
            raise _not_found(property_id)
        return normalize_property(property_id, data)

    async def create(self, raw: Mapping[str, Any]) -> Property:
        """Validate and store a new listing.

        ``images`` is always stored as an empty list whatever the request
        contained.  Raises ``ValidationError`` when title, price or
        location is missing or invalid.
        """
        data: Dict[str, Any] = {
            "title": coerce_string(raw.get("title"), UNTITLED_PROPERTY),
            "description": coerce_string(raw.get("description")),
            "location": coerce_string(raw.get("location"), UNKNOWN_LOCATION),
            "price": coerce_number(raw.get("price"), 0),
            "bedrooms": coerce_number(raw.get("bedrooms"), 0),
            "bathrooms": coerce_number(raw.get("bathrooms"), 1),
            "amenities": coerce_string_array(raw.get("amenities")),
            "images": [],
        }
        area = coerce_optional_number(raw.get("area"))
        if area is not None:
            data["area"] = area
        phone_number = coerce_optional_string(raw.get("phoneNumber"))
        if phone_number is not None:
            data["phoneNumber"] = phone_number

        supplied_images = raw.get("images")
        if isinstance(supplied_images, list) and supplied_images:
            logger.warning(
                "%d image(s) supplied for new property were not saved; images are stored as an empty list",
                len(supplied_images),
            )

        if has_invalid_required_fields(data):
            logger.warning("Rejected new property with invalid required fields: %s", data)
            raise ValidationError(INVALID_FIELDS_MESSAGE)

        property_id = await asyncio.to_thread(self.store.add, self.collection, data)
        logger.info("Created property %s (%s)", property_id, data["title"])
        return normalize_property(property_id, data)

    async def update(self, property_id: str, raw: Mapping[str, Any]) -> Property:
        """Apply a sparse update and return the full, re-read listing."""
        changes = build_update(raw)
        if has_invalid_required_fields({k: v for k, v in changes.items() if v is not None}):
            logger.warning("Rejected update of property %s with invalid fields: %s", property_id, changes)
            raise ValidationError(INVALID_FIELDS_MESSAGE)
        if not changes:
            logger.warning("No valid fields provided for update of property %s", property_id)
            raise ValidationError(NO_FIELDS_MESSAGE)

        try:
            await asyncio.to_thread(self.store.update, self.collection, property_id, changes)
        except NotFoundError as exc:
            logger.warning("Property %s not found for update", property_id)
            raise _not_found(property_id) from exc
        logger.info("Updated property %s fields: %s", property_id, sorted(changes))
        return await self.get(property_id)

    async def delete(self, property_id: str) -> None:
        """Delete a listing after trying to remove its stored images.

        Image cleanup never prevents the listing itself from being
        deleted once it is known to exist.
        """
        data = await asyncio.to_thread(self.store.get, self.collection, property_id)
        if data is None:
            logger.warning("Property %s not found for deletion", property_id)
            raise _not_found(property_id)

        images = coerce_string_array(data.get("images"))
        if images:
            if self.image_storage is None:
                logger.error(
                    "Image storage is not configured; %d image(s) of property %s were not deleted",
                    len(images),
                    property_id,
                )
            else:
                await self._delete_images(property_id, images)

        await asyncio.to_thread(self.store.delete, self.collection, property_id)
        logger.info("Deleted property %s", property_id)

    async def _delete_images(self, property_id: str, urls: List[str]) -> None:
        await asyncio.gather(*(self._delete_image(property_id, url) for url in urls))
        logger.info("Attempted to delete %d image(s) of property %s", len(urls), property_id)

    async def _delete_image(self, property_id: str, url: str) -> None:
        path = storage_path_from_url(url)
        if path is None:
            logger.warning("Could not extract storage path from image URL %s of property %s", url, property_id)
            return
        try:
            await asyncio.to_thread(self.image_storage.delete, path)
        except Exception as exc:
            # Cleanup is best effort; the listing is deleted regardless.
            logger.warning("Failed to delete image %s of property %s: %s", path, property_id, exc)
