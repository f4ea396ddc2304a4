"""
Property endpoints.

These routes expose listing search and CRUD.  Request bodies are read
as raw JSON objects and normalised by the service layer, because the
listing form sends loosely typed values (numbers as strings, empty
strings for unset fields).  Errors raised by the services are turned
into ``{"message": ...}`` responses by the handler in ``main.py``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from rental_listings_api.app.core.exceptions import InvalidPayloadError
from rental_listings_api.app.schemas.property import (
    Property,
    PropertyDeleteResponse,
    PropertyFilters,
    PropertyMutationResponse,
)
from rental_listings_api.app.services.coercion import coerce_optional_number
from rental_listings_api.app.services.property_service import PropertyService
from rental_listings_api.app.services.search_service import SearchService, parse_minimum
from rental_listings_api.app.api.deps import get_property_service, get_search_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_json_object(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict or raise ``InvalidPayloadError``."""
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.warning("Invalid JSON payload received on %s %s", request.method, request.url.path)
        raise InvalidPayloadError("Invalid JSON payload") from exc
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid JSON payload: expected an object")
    return payload


@router.get("", response_model=List[Property], response_model_exclude_none=True)
async def list_properties(
    q: Optional[str] = Query(None, description="Matched against title, description, location and amenities"),
    location: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    min_bedrooms: Optional[str] = Query(None, alias="minBedrooms"),
    min_bathrooms: Optional[str] = Query(None, alias="minBathrooms"),
    amenities: List[str] = Query([]),
    service: SearchService = Depends(get_search_service),
) -> List[Property]:
    """Search listings.

    - **q**: free text, case-insensitive.
    - **location**: case-insensitive substring of the location.
    - **minPrice**, **maxPrice**: monthly rent bounds; results are then
      ordered by price, otherwise by title.
    - **minBedrooms**, **minBathrooms**: lower bounds, ``all`` for none.
    - **amenities**: repeatable; every one must be offered.
    """
    filters = PropertyFilters(
        q=q,
        location=location,
        min_price=coerce_optional_number(min_price),
        max_price=coerce_optional_number(max_price),
        min_bedrooms=parse_minimum(min_bedrooms),
        min_bathrooms=parse_minimum(min_bathrooms),
        amenities=amenities,
    )
    return await service.search(filters)


@router.post(
    "",
    response_model=PropertyMutationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    request: Request,
    service: PropertyService = Depends(get_property_service),
) -> PropertyMutationResponse:
    """Create a listing.  Supplied images are ignored and stored as ``[]``."""
    raw = await read_json_object(request)
    prop = await service.create(raw)
    return PropertyMutationResponse(
        message="Property listed successfully",
        property_id=prop.id,
        property=prop,
    )


@router.get("/{property_id}", response_model=Property, response_model_exclude_none=True)
async def get_property(
    property_id: str,
    service: PropertyService = Depends(get_property_service),
) -> Property:
    """Retrieve a single listing.  Returns HTTP 404 if it does not exist."""
    return await service.get(property_id)


@router.put("/{property_id}", response_model=PropertyMutationResponse, response_model_exclude_none=True)
async def update_property(
    property_id: str,
    request: Request,
    service: PropertyService = Depends(get_property_service),
) -> PropertyMutationResponse:
    """Update a listing.

    Only fields present in the body change; an empty ``area`` removes
    the stored area.
    """
    raw = await read_json_object(request)
    prop = await service.update(property_id, raw)
    return PropertyMutationResponse(
        message="Property updated successfully",
        property_id=prop.id,
        property=prop,
    )


@router.delete("/{property_id}", response_model=PropertyDeleteResponse)
async def delete_property(
    property_id: str,
    service: PropertyService = Depends(get_property_service),
) -> PropertyDeleteResponse:
    """Delete a listing and, best effort, its stored images."""
    await service.delete(property_id)
    return PropertyDeleteResponse(message="Property deleted successfully", property_id=property_id)
