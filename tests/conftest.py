"""Shared fixtures: an in-memory stand-in for the brewery store."""

from __future__ import annotations

from typing import Any

import pytest

from brew_signals.exceptions import StoreError
from brew_signals.schema import AMENITY_FIELDS, BreweryRecord, Membership, ReviewRecord


class FakeStore:
    def __init__(self, breweries: list[BreweryRecord] | None = None, reviews: list[ReviewRecord] | None = None):
        self.breweries: dict[str, BreweryRecord] = {b.id: b for b in breweries or []}
        self.reviews: list[ReviewRecord] = list(reviews or [])
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.deleted: list[str] = []
        self.fail_reviews_for: set[str] = set()
        self.fail_update_for: set[str] = set()

    def list_breweries(self, brewery_id: str | None = None) -> list[BreweryRecord]:
        rows = sorted(self.breweries.values(), key=lambda b: b.name)
        if brewery_id is not None:
            rows = [b for b in rows if b.id == brewery_id]
        return [b.model_copy(deep=True) for b in rows]

    def list_reviews(self, brewery_id: str, language: str | None = None) -> list[ReviewRecord]:
        if brewery_id in self.fail_reviews_for:
            raise StoreError(f"reviews unavailable for {brewery_id}")
        return [
            r
            for r in self.reviews
            if r.brewery_id == brewery_id and r.text is not None and (not language or r.language == language)
        ]

    def list_all_reviews(self) -> list[ReviewRecord]:
        return list(self.reviews)

    def update_brewery(self, brewery_id: str, fields: dict[str, Any]) -> None:
        if brewery_id in self.fail_update_for:
            raise StoreError(f"write rejected for {brewery_id}")
        self.updates.append((brewery_id, dict(fields)))
        record = self.breweries[brewery_id]
        amenities = record.amenities.model_copy(
            update={k: v for k, v in fields.items() if k in AMENITY_FIELDS}
        )
        update: dict[str, Any] = {"amenities": amenities}
        if "memberships" in fields:
            update["memberships"] = [Membership(**m.model_dump()) for m in fields["memberships"]]
        if "review_themes" in fields:
            update["review_themes"] = fields["review_themes"].model_dump(mode="json", exclude_none=True)
        self.breweries[brewery_id] = record.model_copy(update=update)

    def delete_review(self, review_id: str) -> None:
        self.deleted.append(review_id)
        self.reviews = [r for r in self.reviews if r.id != review_id]


@pytest.fixture
def make_store():
    def _make(breweries=None, reviews=None) -> FakeStore:
        return FakeStore(breweries, reviews)

    return _make
