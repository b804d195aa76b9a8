"""
Six Cities Backend — Offer DTOs and RDOs
==========================================

What:  Request shapes for creating/updating offers and the offer representation.
How:   Constraints are declared per field; ValidateBody reports every
       violated constraint at once.

Constraint summary:
    title          10–100 chars        description   20–1024 chars
    city           one of CITY values  images        exactly 6 entries
    bedrooms       1–8                 maxAdults     1–10
    price          100–100000          goods         at least one Good
    location       latitude -90..90, longitude -180..180
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field

from sixcities.schemas.common import DtoModel, RdoModel
from sixcities.schemas.user import UserRdo

OFFER_IMAGE_COUNT = 6


class City(str, Enum):
    PARIS = "Paris"
    COLOGNE = "Cologne"
    BRUSSELS = "Brussels"
    AMSTERDAM = "Amsterdam"
    HAMBURG = "Hamburg"
    DUSSELDORF = "Dusseldorf"


class OfferType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    ROOM = "room"
    HOTEL = "hotel"


class Good(str, Enum):
    BREAKFAST = "Breakfast"
    AIR_CONDITIONING = "Air conditioning"
    LAPTOP_FRIENDLY_WORKSPACE = "Laptop friendly workspace"
    BABY_SEAT = "Baby seat"
    WASHER = "Washer"
    TOWELS = "Towels"
    FRIDGE = "Fridge"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class LocationDto(DtoModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class CreateOfferDto(DtoModel):
    title: str = Field(min_length=10, max_length=100)
    description: str = Field(min_length=20, max_length=1024)
    city: City
    preview_image: str = Field(min_length=1, max_length=255)
    images: List[str] = Field(min_length=OFFER_IMAGE_COUNT, max_length=OFFER_IMAGE_COUNT)
    is_premium: bool
    type: OfferType
    bedrooms: int = Field(ge=1, le=8)
    max_adults: int = Field(ge=1, le=10)
    price: int = Field(ge=100, le=100_000)
    goods: List[Good] = Field(min_length=1)
    location: LocationDto


class UpdateOfferDto(DtoModel):
    """Partial update: only the fields present in the body are changed."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=10, max_length=100)
    description: Optional[str] = Field(default=None, min_length=20, max_length=1024)
    city: Optional[City] = None
    preview_image: Optional[str] = Field(default=None, min_length=1, max_length=255)
    images: Optional[List[str]] = Field(
        default=None, min_length=OFFER_IMAGE_COUNT, max_length=OFFER_IMAGE_COUNT
    )
    is_premium: Optional[bool] = None
    type: Optional[OfferType] = None
    bedrooms: Optional[int] = Field(default=None, ge=1, le=8)
    max_adults: Optional[int] = Field(default=None, ge=1, le=10)
    price: Optional[int] = Field(default=None, ge=100, le=100_000)
    goods: Optional[List[Good]] = Field(default=None, min_length=1)
    location: Optional[LocationDto] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class LocationRdo(RdoModel):
    latitude: float
    longitude: float


class OfferRdo(RdoModel):
    id: str
    title: str
    description: str
    created_at: datetime
    city: str
    preview_image: str
    images: List[str]
    is_premium: bool
    # Only known per user; set for the favorites listing
    is_favorite: bool = False
    rating: float
    type: str
    bedrooms: int
    max_adults: int
    price: int
    goods: List[str]
    author: Optional[UserRdo] = None
    comment_count: int
    location: LocationRdo


class UploadImageRdo(RdoModel):
    preview_image: str
