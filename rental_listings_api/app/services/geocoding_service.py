"""
Geocoding placeholder.

``get_coordinates`` always answers with the centre of Nairobi.  It
exists so the detail page and its map have a stable contract; wiring a
real geocoding provider only needs this function to change.
"""

import logging

from rental_listings_api.app.schemas.info import Coordinates

logger = logging.getLogger(__name__)

NAIROBI_CENTRE = Coordinates(lat=-1.286389, lng=36.817223)


async def get_coordinates(location: str) -> Coordinates:
    """Return coordinates for a Kenyan location (currently a fixed point)."""
    logger.debug("Geocoding %r with the fixed placeholder coordinates", location)
    return NAIROBI_CENTRE.model_copy()
