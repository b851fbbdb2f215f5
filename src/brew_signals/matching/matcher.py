"""Tiered matching of external directory listings to brewery records."""

from __future__ import annotations

from typing import Iterable, Sequence

from brew_signals.matching.types import MatchResult, Method, RecordMatches
from brew_signals.schema import BreweryRecord, ExternalListing
from brew_signals.text import normalize_name, normalize_url, significant_words, strip_legal_suffix


def fuzzy_name_match(name1: str | None, name2: str | None) -> bool:
    """Loose brewery name comparison used as the last matching tier."""
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)
    if not n1 or not n2:
        return False

    if n1 == n2 or n1 in n2 or n2 in n1:
        return True

    base1 = strip_legal_suffix(n1)
    base2 = strip_legal_suffix(n2)
    if base1 and base2 and (base1 == base2 or base1 in base2 or base2 in base1):
        return True

    words1 = significant_words(n1)
    words2 = set(significant_words(n2))
    common = [word for word in words1 if word in words2]
    required = max(1, min(2, min(len(words1), len(words2))))
    return len(common) >= required


class EntityMatcher:
    """Website first, then exact name, then fuzzy name. First tier with a hit wins."""

    def match(self, listing: ExternalListing, records: Sequence[BreweryRecord]) -> MatchResult:
        return (
            self._match_website(listing, records)
            or self._match_exact(listing, records)
            or self._match_fuzzy(listing, records)
            or MatchResult(listing_name=listing.name, method="unmatched", reason="no_tier_matched")
        )

    def match_listings(
        self,
        listings: Iterable[ExternalListing],
        records: Sequence[BreweryRecord],
    ) -> tuple[dict[str, RecordMatches], list[MatchResult]]:
        """Resolve every listing. Returns hits grouped by record id, and misses."""
        by_record: dict[str, RecordMatches] = {}
        unmatched: list[MatchResult] = []
        for listing in listings:
            result = self.match(listing, records)
            if not result.matched or result.record_id is None:
                unmatched.append(result)
                continue
            group = by_record.setdefault(result.record_id, RecordMatches(record_id=result.record_id))
            group.listings.append(listing)
            group.results.append(result)
        return by_record, unmatched

    def _match_website(self, listing: ExternalListing, records: Sequence[BreweryRecord]) -> MatchResult | None:
        website = normalize_url(listing.website)
        if not website:
            return None
        hits = [record for record in records if normalize_url(record.website) == website]
        return _result(listing, hits, "website", reason=f"website={website}")

    def _match_exact(self, listing: ExternalListing, records: Sequence[BreweryRecord]) -> MatchResult | None:
        name = normalize_name(listing.name)
        if not name:
            return None
        hits = [record for record in records if normalize_name(record.name) == name]
        return _result(listing, hits, "exact")

    def _match_fuzzy(self, listing: ExternalListing, records: Sequence[BreweryRecord]) -> MatchResult | None:
        hits = [record for record in records if fuzzy_name_match(listing.name, record.name)]
        return _result(listing, hits, "fuzzy")


def _result(
    listing: ExternalListing,
    hits: list[BreweryRecord],
    method: Method,
    reason: str | None = None,
) -> MatchResult | None:
    if not hits:
        return None
    first = hits[0]
    return MatchResult(
        listing_name=listing.name,
        method=method,
        record_id=first.id,
        record_name=first.name,
        candidates=[record.id for record in hits],
        reason=reason,
    )
