"""
Field coercion for loosely typed listing data.

Listings reach the API from a browser form and are read back from a
schema-less document store, so any field may be missing or have the
wrong type.  The helpers below never raise: they either return a value
of the expected type or the supplied default.  ``normalize_property``
applies them to a whole stored document.
"""

from __future__ import annotations

import math
from typing import Any, List, Mapping, Optional, Union

from rental_listings_api.app.schemas.property import Property

Number = Union[int, float]


def _to_number(value: Any) -> Optional[Number]:
    """Parse ``value`` as a finite number, or return ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    try:
        finite = math.isfinite(number)
    except OverflowError:
        # Ints beyond the float range, e.g. a 400 digit JSON number.
        return None
    if not finite:
        return None
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def coerce_string(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def coerce_optional_string(value: Any) -> Optional[str]:
    """Return the trimmed string, or ``None`` for blanks and non-strings."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def coerce_number(value: Any, default: Number = 0) -> Number:
    """Return ``value`` as a number, or ``default`` when it is not one."""
    number = _to_number(value)
    return default if number is None else number


def coerce_optional_number(value: Any) -> Optional[Number]:
    return _to_number(value)


def coerce_string_array(value: Any) -> List[str]:
    """Return ``value`` as a list only when every element is a string."""
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    return []


def normalize_property(doc_id: str, data: Mapping[str, Any]) -> Property:
    """Build a ``Property`` from a stored document, whatever its state."""
    return Property(
        id=doc_id,
        title=coerce_string(data.get("title")),
        description=coerce_string(data.get("description")),
        location=coerce_string(data.get("location")),
        price=coerce_number(data.get("price")),
        images=coerce_string_array(data.get("images")),
        bedrooms=coerce_number(data.get("bedrooms")),
        bathrooms=coerce_number(data.get("bathrooms"), 1),
        area=coerce_optional_number(data.get("area")),
        amenities=coerce_string_array(data.get("amenities")),
        phone_number=coerce_optional_string(data.get("phoneNumber")),
    )
