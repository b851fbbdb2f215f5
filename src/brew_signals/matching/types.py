"""Data models for entity matching output."""

from typing import Literal

from pydantic import BaseModel, Field

from brew_signals.schema import ExternalListing

Method = Literal["website", "exact", "fuzzy", "unmatched"]


class MatchResult(BaseModel):
    """Resolution of one external listing against internal brewery records."""

    listing_name: str
    method: Method = "unmatched"
    record_id: str | None = None
    record_name: str | None = None
    candidates: list[str] = Field(default_factory=list)
    reason: str | None = None

    @property
    def matched(self) -> bool:
        return self.method != "unmatched"

    @property
    def ambiguous(self) -> bool:
        return len(self.candidates) > 1


class RecordMatches(BaseModel):
    """Listings resolved to a single brewery record."""

    record_id: str
    listings: list[ExternalListing] = Field(default_factory=list)
    results: list[MatchResult] = Field(default_factory=list)

    @property
    def flags(self) -> set[str]:
        merged: set[str] = set()
        for listing in self.listings:
            merged |= listing.flags
        return merged
