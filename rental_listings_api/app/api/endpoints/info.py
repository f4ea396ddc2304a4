"""
Information and helper endpoints.

``GET /info`` reports whether the document store is usable and lists
the amenity options offered by the listing form.  ``GET /geocode`` is
the geocoding placeholder used by the detail page map.
"""

from fastapi import APIRouter, Query

from rental_listings_api.app.core.config import settings
from rental_listings_api.app.core.db import store_initialized
from rental_listings_api.app.schemas.info import Coordinates, ServiceInfo
from rental_listings_api.app.schemas.property import AMENITY_CHOICES
from rental_listings_api.app.services.geocoding_service import get_coordinates

router = APIRouter()


@router.get("/info", response_model=ServiceInfo)
async def get_info() -> ServiceInfo:
    return ServiceInfo(
        project_name=settings.project_name,
        version=settings.api_version,
        store="connected" if store_initialized() else "not initialized",
        amenities=list(AMENITY_CHOICES),
    )


@router.get("/geocode", response_model=Coordinates)
async def geocode(location: str = Query(..., min_length=1)) -> Coordinates:
    """Return coordinates for ``location``.

    Always the same point for now; see ``geocoding_service``.
    """
    return await get_coordinates(location)
