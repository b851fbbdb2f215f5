"""Data models for brew-signals."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FoodStyle = Literal["In-House", "Food Trucks"]
YesNo = Literal["yes", "no"]

AMENITY_FIELDS = (
    "allows_visitors",
    "offers_tours",
    "beer_to_go",
    "has_merch",
    "dog_friendly",
    "outdoor_seating",
    "food",
    "other_drinks",
    "parking",
)


class AmenityFields(BaseModel):
    """Structured amenity facts stored on a brewery row.

    Enumeration columns are read as plain strings: curated rows may hold
    values outside `FoodStyle`/`YesNo` and must still count as set.
    """

    allows_visitors: bool | None = None
    offers_tours: bool | None = None
    beer_to_go: bool | None = None
    has_merch: bool | None = None
    dog_friendly: bool | None = None
    outdoor_seating: bool | None = None
    food: str | None = None
    other_drinks: str | None = None
    parking: str | None = None


class Membership(BaseModel):
    """A membership badge. Unknown metadata keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    name: str
    price: float | None = None
    duration: str | None = None


class BreweryRecord(BaseModel):
    """One physical brewery as read from the store."""

    id: str
    name: str
    website: str | None = None
    amenities: AmenityFields = Field(default_factory=AmenityFields)
    memberships: list[Membership] = Field(default_factory=list)
    review_themes: dict | None = None


class ReviewRecord(BaseModel):
    """One review occurrence for a brewery."""

    id: str
    brewery_id: str
    reviewer_name: str | None = None
    review_timestamp: int | None = None
    text: str | None = None
    rating: float | None = None
    language: str | None = "en"
    created_at: datetime | None = None


class ExternalListing(BaseModel):
    """A listing scraped from a third-party directory page."""

    name: str
    website: str | None = None
    flags: set[str] = Field(default_factory=set)
