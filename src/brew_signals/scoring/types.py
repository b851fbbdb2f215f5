"""Data models for scoring output."""

from datetime import datetime

from pydantic import BaseModel, Field

from brew_signals.schema import FoodStyle, YesNo


class ThemeResult(BaseModel):
    """Per-category result of scoring a text blob against a rule set."""

    detected: bool = False
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    keywords: list[str] = Field(default_factory=list, max_length=5)
    match_count: int = Field(default=0, ge=0)


class AmenityResult(BaseModel):
    """Amenities inferred from review text. None means no evidence."""

    allows_visitors: bool | None = None
    offers_tours: bool | None = None
    beer_to_go: bool | None = None
    has_merch: bool | None = None
    dog_friendly: bool | None = None
    outdoor_seating: bool | None = None
    food: FoodStyle | None = None
    other_drinks: YesNo | None = None
    parking: YesNo | None = None


class ReviewThemes(BaseModel):
    """Aggregate stored on a brewery row after review analysis."""

    ruleset_version: str
    language: str | None = None
    review_count_analyzed: int = 0
    themes: dict[str, ThemeResult] = Field(default_factory=dict)
    amenities: AmenityResult = Field(default_factory=AmenityResult)
    last_analyzed: datetime | None = None
