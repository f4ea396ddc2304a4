"""
Pydantic models for property listings.

``Property`` is the normalised shape returned by every route.  Field
names on the wire are the camelCase names the web client already uses
(``phoneNumber``, ``propertyId``); Python code uses snake_case through
pydantic aliases.  Request bodies are deliberately *not* modelled here:
listings arrive loosely typed from the browser form and are normalised
by ``services.coercion`` instead of being rejected field by field.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]

# Options offered by the listing form.  Stored amenities are not
# restricted to this list.
AMENITY_CHOICES = (
    "Parking",
    "Swimming Pool",
    "Gym",
    "Security",
    "Balcony",
    "Garden",
    "Internet Ready",
    "Servant Quarters",
    "Lift",
    "Water Included",
    "Beach Access",
    "Air Conditioning",
)


class Property(BaseModel):
    """A rental listing as stored and returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., examples=["3WkQ9fJ2pX"])
    title: str = Field(..., examples=["Spacious 2 Bedroom Apt in Kilimani"])
    description: str = Field("", examples=["Modern apartment with great views and amenities."])
    location: str = Field(..., examples=["Kilimani, Nairobi"])
    price: Number = Field(..., description="Monthly rent", examples=[75000])
    images: List[str] = Field(default_factory=list)
    bedrooms: Number = Field(0, description="0 means studio", examples=[2])
    bathrooms: Number = Field(1, examples=[2])
    area: Optional[Number] = Field(None, examples=[120])
    amenities: List[str] = Field(default_factory=list, examples=[["Parking", "Gym"]])
    phone_number: Optional[str] = Field(None, alias="phoneNumber", examples=["+254700000000"])


class PropertyFilters(BaseModel):
    """Search criteria accepted by ``GET /properties``.

    ``q`` and ``location`` are matched case-insensitively in memory;
    the numeric bounds are pushed down to the document store.
    """

    q: Optional[str] = None
    location: Optional[str] = None
    min_price: Optional[Number] = None
    max_price: Optional[Number] = None
    min_bedrooms: Optional[Number] = None
    min_bathrooms: Optional[Number] = None
    amenities: List[str] = Field(default_factory=list)


class PropertyMutationResponse(BaseModel):
    """Body returned after a listing is created or updated."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    property_id: str = Field(..., alias="propertyId")
    property: Property


class PropertyDeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    property_id: str = Field(..., alias="propertyId")
