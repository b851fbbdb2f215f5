"""Sequential batch jobs that enrich brewery rows."""

from __future__ import annotations

import logging
import os
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable

from brew_signals.exceptions import StoreError
from brew_signals.matching import EntityMatcher
from brew_signals.merge import (
    merge_amenities,
    merge_memberships,
    plan_review_dedup,
    strip_membership_metadata,
    themes_changed,
)
from brew_signals.schema import BreweryRecord, ExternalListing
from brew_signals.scoring import AmenityInferencer, RuleSetRepository, ThemeScorer, analyze_reviews
from brew_signals.store import Store

logger = logging.getLogger(__name__)


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class RunnerConfig:
    ruleset_version: str = "v1"
    review_language: str | None = "en"
    request_delay_sec: float = 0.1
    dry_run: bool = False

    @classmethod
    def from_env(cls) -> "RunnerConfig":
        delay_ms = max(0.0, _safe_float(os.getenv("BREW_SIGNALS_REQUEST_DELAY_MS"), 100.0))
        return cls(
            ruleset_version=os.getenv("BREW_SIGNALS_RULESET_VERSION", "v1").strip() or "v1",
            review_language=os.getenv("BREW_SIGNALS_REVIEW_LANGUAGE", "en").strip() or None,
            request_delay_sec=delay_ms / 1000.0,
            dry_run=_parse_bool(os.getenv("BREW_SIGNALS_DRY_RUN"), False),
        )


class EntityState(str, Enum):
    PENDING = "pending"
    FETCHING_SOURCE_DATA = "fetching_source_data"
    SCORING = "scoring"
    MERGING = "merging"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RunSummary:
    job: str
    processed: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    unmatched: int = 0
    deleted: int = 0
    dry_run: bool = False
    field_counts: Counter = field(default_factory=Counter)

    def record(self, state: EntityState) -> None:
        self.processed += 1
        if state is EntityState.UPDATED:
            self.updated += 1
        elif state is EntityState.SKIPPED:
            self.skipped += 1
        elif state is EntityState.FAILED:
            self.failed += 1

    def as_dict(self) -> dict[str, Any]:
        return {
            "job": self.job,
            "processed": self.processed,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "unmatched": self.unmatched,
            "deleted": self.deleted,
            "dry_run": self.dry_run,
            "field_counts": dict(sorted(self.field_counts.items())),
        }


class BatchRunner:
    """Processes breweries one at a time; one bad row never stops the batch.

    This is the only place that catches and logs failures. Merges are
    fill-only, so rows left half-written by a failure are safe to re-run.
    Concurrent runs against the same store are not safe: updates are
    read-then-write without compare-and-swap.
    """

    def __init__(
        self,
        store: Store,
        config: RunnerConfig | None = None,
        *,
        scorer: ThemeScorer | None = None,
        inferencer: AmenityInferencer | None = None,
        matcher: EntityMatcher | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.config = config or RunnerConfig()
        if scorer is None or inferencer is None:
            repo = RuleSetRepository(version=self.config.ruleset_version)
            scorer = scorer or ThemeScorer(repo)
            inferencer = inferencer or AmenityInferencer(repo)
        self.scorer = scorer
        self.inferencer = inferencer
        self.matcher = matcher or EntityMatcher()
        self._sleep = sleep

    def enrich_from_reviews(self, brewery_id: str | None = None) -> RunSummary:
        """Score review themes and fill empty amenity fields for each brewery."""
        summary = RunSummary(job="reviews", dry_run=self.config.dry_run)
        breweries = self.store.list_breweries(brewery_id)
        logger.info("Analyzing reviews for %d breweries", len(breweries))

        for index, brewery in enumerate(breweries, start=1):
            logger.info("[%d/%d] %s", index, len(breweries), brewery.name)
            summary.record(self._enrich_one_from_reviews(brewery, summary))

        self._log_summary(summary)
        return summary

    def enrich_memberships(self, listings: Iterable[ExternalListing]) -> RunSummary:
        """Link directory listings to breweries and merge their membership badges."""
        summary = RunSummary(job="memberships", dry_run=self.config.dry_run)
        breweries = self.store.list_breweries()
        by_record, unmatched = self.matcher.match_listings(listings, breweries)

        for result in unmatched:
            summary.unmatched += 1
            logger.info("No brewery matched listing %r", result.listing_name)

        for brewery in breweries:
            group = by_record.get(brewery.id)
            if group is None:
                continue
            for result in group.results:
                logger.info(
                    "Listing %r matched %s (%s) by %s", result.listing_name, brewery.name, brewery.id, result.method
                )
                if result.ambiguous:
                    logger.warning(
                        "Listing %r matched %d breweries by %s; using first, candidates: %s",
                        result.listing_name,
                        len(result.candidates),
                        result.method,
                        ", ".join(result.candidates),
                    )
            summary.record(
                self._write_one(
                    brewery,
                    summary,
                    lambda b=brewery, g=group: _memberships_patch(merge_memberships(b.memberships, g.flags)),
                )
            )

        self._log_summary(summary)
        return summary

    def cleanup_memberships(self) -> RunSummary:
        """Drop description/benefits metadata from stored memberships."""
        summary = RunSummary(job="cleanup-memberships", dry_run=self.config.dry_run)
        for brewery in self.store.list_breweries():
            summary.record(
                self._write_one(
                    brewery,
                    summary,
                    lambda b=brewery: _memberships_patch(strip_membership_metadata(b.memberships)),
                )
            )
        self._log_summary(summary)
        return summary

    def remove_duplicate_reviews(self, dry_run: bool | None = None) -> RunSummary:
        """Delete duplicate reviews, keeping the oldest of each group."""
        if dry_run is None:
            dry_run = self.config.dry_run
        summary = RunSummary(job="dedup-reviews", dry_run=dry_run)
        groups = plan_review_dedup(self.store.list_all_reviews())
        logger.info("Found %d groups of duplicate reviews", len(groups))

        for group in groups:
            brewery_id, timestamp, reviewer = group.key
            logger.info(
                "Brewery %s, reviewer %r, timestamp %s: keeping %s, deleting %s",
                brewery_id,
                reviewer or "anonymous",
                timestamp or "n/a",
                group.keep_id,
                ", ".join(group.delete_ids),
            )
            state = EntityState.UPDATED
            for review_id in group.delete_ids:
                if dry_run:
                    continue
                try:
                    self.store.delete_review(review_id)
                    summary.deleted += 1
                except Exception:
                    logger.exception("Failed to delete duplicate review %s (brewery %s)", review_id, brewery_id)
                    state = EntityState.FAILED
                self._pause()
            summary.record(state)

        self._log_summary(summary)
        return summary

    def _enrich_one_from_reviews(self, brewery: BreweryRecord, summary: RunSummary) -> EntityState:
        state = EntityState.PENDING
        fields: dict[str, Any] = {}
        try:
            state = EntityState.FETCHING_SOURCE_DATA
            try:
                reviews = self.store.list_reviews(brewery.id, self.config.review_language)
            except StoreError as exc:
                logger.warning("Reviews unavailable for %s (%s): %s", brewery.name, brewery.id, exc)
                return EntityState.SKIPPED
            finally:
                self._pause()

            if not reviews:
                logger.info("No reviews for %s; skipping", brewery.name)
                return EntityState.SKIPPED

            state = EntityState.SCORING
            themes = analyze_reviews(
                reviews,
                scorer=self.scorer,
                inferencer=self.inferencer,
                language=self.config.review_language,
            )
            detected = [f"{name} ({result.score})" for name, result in themes.themes.items() if result.detected]
            if detected:
                logger.debug("Themes for %s: %s", brewery.name, ", ".join(detected))

            state = EntityState.MERGING
            fields = merge_amenities(brewery.amenities, themes.amenities)
            if themes_changed(brewery.review_themes, themes):
                fields["review_themes"] = themes
            return self._apply(brewery, fields, summary)
        except Exception:
            logger.exception(
                "Failed %s (%s) while %s; fields attempted: %s",
                brewery.name,
                brewery.id,
                state.value,
                sorted(fields) or "none",
            )
            return EntityState.FAILED

    def _write_one(
        self,
        brewery: BreweryRecord,
        summary: RunSummary,
        build_patch: Callable[[], dict[str, Any]],
    ) -> EntityState:
        fields: dict[str, Any] = {}
        try:
            fields = build_patch()
            return self._apply(brewery, fields, summary)
        except Exception:
            logger.exception(
                "Failed %s (%s); fields attempted: %s", brewery.name, brewery.id, sorted(fields) or "none"
            )
            return EntityState.FAILED

    def _apply(self, brewery: BreweryRecord, fields: dict[str, Any], summary: RunSummary) -> EntityState:
        if not fields:
            logger.info("Nothing new for %s; skipping", brewery.name)
            return EntityState.SKIPPED
        if self.config.dry_run:
            logger.info("[dry-run] Would update %s: %s", brewery.name, ", ".join(sorted(fields)))
        else:
            self.store.update_brewery(brewery.id, fields)
            self._pause()
            logger.info("Updated %s: %s", brewery.name, ", ".join(sorted(fields)))
        summary.field_counts.update(fields.keys())
        return EntityState.UPDATED

    def _pause(self) -> None:
        if self.config.request_delay_sec > 0:
            self._sleep(self.config.request_delay_sec)

    @staticmethod
    def _log_summary(summary: RunSummary) -> None:
        logger.info(
            "%s summary: processed=%d updated=%d skipped=%d failed=%d unmatched=%d deleted=%d",
            summary.job,
            summary.processed,
            summary.updated,
            summary.skipped,
            summary.failed,
            summary.unmatched,
            summary.deleted,
        )


def _memberships_patch(memberships: list | None) -> dict[str, Any]:
    if memberships is None:
        return {}
    return {"memberships": memberships}
