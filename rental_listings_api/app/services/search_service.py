"""
Listing search.

Numeric bounds are pushed down to the document store; text and
amenity criteria are applied in memory afterwards because Firestore
has no substring or subset queries.  Firestore also requires the first
``order_by`` field to match the field of any inequality filter, so
results are ordered by price whenever a price bound is present and by
title otherwise.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from rental_listings_api.app.core.db import DocumentStore, QueryFilter
from rental_listings_api.app.schemas.property import Number, Property, PropertyFilters
from rental_listings_api.app.services.coercion import coerce_optional_number, normalize_property

logger = logging.getLogger(__name__)


def parse_minimum(value: Optional[str]) -> Optional[Number]:
    """Parse a ``minBedrooms``/``minBathrooms`` parameter; ``"all"`` means no bound."""
    if value is None or value == "all":
        return None
    return coerce_optional_number(value)


def matches_text(prop: Property, term: str) -> bool:
    term = term.lower()
    return (
        term in prop.title.lower()
        or term in prop.description.lower()
        or term in prop.location.lower()
        or any(term in amenity.lower() for amenity in prop.amenities)
    )


class SearchService:
    """Answers filtered listing queries."""

    def __init__(self, store: DocumentStore, collection: str = "properties") -> None:
        self.store = store
        self.collection = collection

    @staticmethod
    def build_query(filters: PropertyFilters) -> Tuple[List[QueryFilter], str]:
        """Return the store filters and order field for ``filters``."""
        store_filters: List[QueryFilter] = []
        if filters.min_price is not None:
            store_filters.append(("price", ">=", filters.min_price))
        if filters.max_price is not None:
            store_filters.append(("price", "<=", filters.max_price))
        if filters.min_bedrooms is not None:
            store_filters.append(("bedrooms", ">=", filters.min_bedrooms))
        if filters.min_bathrooms is not None:
            store_filters.append(("bathrooms", ">=", filters.min_bathrooms))

        if filters.min_price is not None or filters.max_price is not None:
            order_by = "price"
        else:
            order_by = "title"
        return store_filters, order_by

    async def search(self, filters: PropertyFilters) -> List[Property]:
        """Return listings matching every criterion in ``filters``."""
        logger.info("Searching properties with filters: %s", filters.model_dump(exclude_defaults=True))
        store_filters, order_by = self.build_query(filters)
        results: List[Property] = []
        rows = await asyncio.to_thread(self.store.query, self.collection, store_filters, order_by)
        for doc_id, data in rows:
            if not data:
                logger.warning("Document %s has no data. Skipping.", doc_id)
                continue
            results.append(normalize_property(doc_id, data))

        query_term = filters.q.lower() if filters.q else None
        location_term = filters.location.lower() if filters.location else None

        if query_term:
            results = [prop for prop in results if matches_text(prop, query_term)]
        if location_term and location_term != query_term:
            results = [prop for prop in results if location_term in prop.location.lower()]
        if filters.amenities:
            required = set(filters.amenities)
            results = [prop for prop in results if required.issubset(prop.amenities)]

        logger.info("Fetched and filtered %d properties", len(results))
        return results
