"""Tests for the batch runner jobs against an in-memory store."""

from datetime import datetime, timezone

import pytest

from brew_signals.runner import BatchRunner, EntityState, RunnerConfig, RunSummary
from brew_signals.schema import AmenityFields, BreweryRecord, ExternalListing, Membership, ReviewRecord


def _config(**overrides):
    values = {"request_delay_sec": 0.0}
    values.update(overrides)
    return RunnerConfig(**values)


def _review(id_, brewery_id, text, **kwargs):
    return ReviewRecord(id=id_, brewery_id=brewery_id, text=text, **kwargs)


@pytest.fixture
def review_store(make_store):
    breweries = [
        BreweryRecord(id="b1", name="Alpha Brewing", amenities=AmenityFields(offers_tours=True)),
        BreweryRecord(id="b2", name="Bravo Brewing"),
    ]
    reviews = [
        _review("r1", "b1", "Great IPA selection and a lovely outdoor patio."),
        _review("r2", "b1", "Friendly staff who know their stuff."),
        _review("r3", "b2", "There was a food truck out front."),
    ]
    return make_store(breweries, reviews)


def test_enrich_from_reviews_fills_empty_fields(review_store):
    summary = BatchRunner(review_store, _config()).enrich_from_reviews()

    assert summary.processed == 2
    assert summary.updated == 2
    updates = dict(review_store.updates)
    assert {"allows_visitors", "outdoor_seating", "review_themes"} <= set(updates["b1"])
    assert "offers_tours" not in updates["b1"]
    assert updates["b2"]["food"] == "Food Trucks"
    stored = review_store.breweries["b1"]
    assert stored.amenities.offers_tours is True
    assert stored.amenities.outdoor_seating is True
    assert stored.review_themes["themes"]["beer_quality"]["detected"] is True


def test_enrich_from_reviews_second_run_is_a_no_op(review_store):
    runner = BatchRunner(review_store, _config())
    runner.enrich_from_reviews()
    writes = len(review_store.updates)

    summary = runner.enrich_from_reviews()

    assert len(review_store.updates) == writes
    assert summary.updated == 0
    assert summary.skipped == 2


def test_enrich_from_reviews_single_brewery(review_store):
    summary = BatchRunner(review_store, _config()).enrich_from_reviews("b2")

    assert summary.processed == 1
    assert [brewery_id for brewery_id, _ in review_store.updates] == ["b2"]


def test_enrich_from_reviews_never_unsets_fields(review_store):
    runner = BatchRunner(review_store, _config())
    runner.enrich_from_reviews()
    before = review_store.breweries["b1"].amenities.model_dump()

    review_store.reviews = [_review("r9", "b1", "ok")]
    runner.enrich_from_reviews()
    after = review_store.breweries["b1"].amenities.model_dump()

    for name, value in before.items():
        if value:
            assert after[name] == value


def test_failed_write_does_not_stop_the_batch(review_store):
    review_store.fail_update_for = {"b1"}

    summary = BatchRunner(review_store, _config()).enrich_from_reviews()

    assert summary.failed == 1
    assert summary.updated == 1
    assert [brewery_id for brewery_id, _ in review_store.updates] == ["b2"]


def test_unavailable_reviews_skip_the_brewery(review_store):
    review_store.fail_reviews_for = {"b1"}

    summary = BatchRunner(review_store, _config()).enrich_from_reviews()

    assert summary.skipped == 1
    assert summary.updated == 1
    assert summary.failed == 0


def test_brewery_without_reviews_is_skipped(make_store):
    store = make_store([BreweryRecord(id="b1", name="Quiet Brewing")])

    summary = BatchRunner(store, _config()).enrich_from_reviews()

    assert summary.skipped == 1
    assert store.updates == []


def test_reviews_in_other_languages_are_ignored(make_store):
    store = make_store(
        [BreweryRecord(id="b1", name="Alpha Brewing")],
        [_review("r1", "b1", "Buena cerveza en el patio", language="es")],
    )

    summary = BatchRunner(store, _config(review_language="en")).enrich_from_reviews()

    assert summary.skipped == 1


def test_dry_run_writes_nothing(review_store):
    summary = BatchRunner(review_store, _config(dry_run=True)).enrich_from_reviews()

    assert review_store.updates == []
    assert summary.dry_run is True
    assert summary.updated == 2
    assert summary.field_counts["review_themes"] == 2


def test_rate_limit_pauses_between_requests(review_store):
    pauses = []
    runner = BatchRunner(review_store, _config(request_delay_sec=0.25), sleep=pauses.append)

    runner.enrich_from_reviews("b2")

    assert pauses == [0.25, 0.25]


@pytest.fixture
def membership_store(make_store):
    breweries = [
        BreweryRecord(id="b1", name="Heavy Seas Brewing", website="https://heavyseas.com/"),
        BreweryRecord(id="b2", name="Flying Dog Brewery", memberships=[Membership(name="Guild")]),
    ]
    return make_store(breweries)


def test_enrich_memberships_merges_matched_listings(membership_store):
    listings = [
        ExternalListing(name="Heavy Seas", website="www.heavyseas.com", flags={"ba_member"}),
        ExternalListing(name="Nowhere Ales", flags={"ba_member"}),
    ]

    summary = BatchRunner(membership_store, _config()).enrich_memberships(listings)

    assert summary.updated == 1
    assert summary.unmatched == 1
    assert [m.name for m in membership_store.breweries["b1"].memberships] == ["Brewers Association Member"]
    assert membership_store.breweries["b2"].memberships == [Membership(name="Guild")]


def test_enrich_memberships_is_idempotent(membership_store):
    listings = [ExternalListing(name="Flying Dog Brewing Co", flags={"brewers_association_of_maryland"})]
    runner = BatchRunner(membership_store, _config())
    runner.enrich_memberships(listings)

    summary = runner.enrich_memberships(listings)

    assert summary.updated == 0
    assert summary.skipped == 1
    assert len(membership_store.updates) == 1


def test_separate_directory_passes_settle_after_first_run(membership_store):
    ba = [ExternalListing(name="Heavy Seas Brewing", flags={"ba_member"})]
    mbam = [ExternalListing(name="Heavy Seas Brewing", flags={"brewers_association_of_maryland"})]
    runner = BatchRunner(membership_store, _config())
    runner.enrich_memberships(ba)
    runner.enrich_memberships(mbam)

    runner.enrich_memberships(ba)
    runner.enrich_memberships(mbam)

    assert len(membership_store.updates) == 2
    assert [m.name for m in membership_store.breweries["b1"].memberships] == [
        "Brewers Association Member",
        "brewers_association_of_maryland",
    ]


def test_unknown_membership_token_fails_only_that_brewery(membership_store):
    listings = [
        ExternalListing(name="Heavy Seas Brewing", flags={"mystery_club"}),
        ExternalListing(name="Flying Dog Brewery", flags={"ba_member"}),
    ]

    summary = BatchRunner(membership_store, _config()).enrich_memberships(listings)

    assert summary.failed == 1
    assert summary.updated == 1


def test_ambiguous_listing_is_logged(make_store, caplog):
    store = make_store([BreweryRecord(id="a", name="Dog Brewing"), BreweryRecord(id="b", name="Dog Brewing Taproom")])

    BatchRunner(store, _config()).enrich_memberships([ExternalListing(name="Dog", flags={"ba_member"})])

    assert "candidates: a, b" in caplog.text
    assert [brewery_id for brewery_id, _ in store.updates] == ["a"]


def test_cleanup_memberships(make_store):
    store = make_store(
        [
            BreweryRecord(
                id="b1",
                name="Alpha Brewing",
                memberships=[Membership(name="Guild", description="Local guild", benefits=["stickers"])],
            ),
            BreweryRecord(id="b2", name="Bravo Brewing", memberships=[Membership(name="Guild")]),
        ]
    )

    summary = BatchRunner(store, _config()).cleanup_memberships()

    assert summary.updated == 1
    assert summary.skipped == 1
    assert store.breweries["b1"].memberships[0].model_dump(exclude_none=True) == {"name": "Guild"}


def _dup_reviews():
    return [
        _review("1", "b1", "Nice", reviewer_name="Jane", review_timestamp=1700000000,
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        _review("2", "b1", "Nice", reviewer_name="jane", review_timestamp=1700000000,
                created_at=datetime(2024, 2, 1, tzinfo=timezone.utc)),
        _review("3", "b1", "Other", reviewer_name="Bob", review_timestamp=1700000000,
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
    ]


def test_remove_duplicate_reviews_keeps_oldest(make_store):
    store = make_store(reviews=_dup_reviews())

    summary = BatchRunner(store, _config()).remove_duplicate_reviews()

    assert store.deleted == ["2"]
    assert summary.deleted == 1
    assert [r.id for r in store.reviews] == ["1", "3"]
    assert BatchRunner(store, _config()).remove_duplicate_reviews().deleted == 0


def test_remove_duplicate_reviews_dry_run(make_store):
    store = make_store(reviews=_dup_reviews())

    summary = BatchRunner(store, _config(dry_run=True)).remove_duplicate_reviews()

    assert store.deleted == []
    assert summary.deleted == 0
    assert summary.processed == 1


def test_remove_duplicate_reviews_dry_run_argument_overrides_config(make_store):
    store = make_store(reviews=_dup_reviews())

    summary = BatchRunner(store, _config()).remove_duplicate_reviews(dry_run=True)

    assert store.deleted == []
    assert summary.dry_run is True


def test_delete_failure_is_isolated(make_store, mocker):
    store = make_store(reviews=_dup_reviews())
    mocker.patch.object(store, "delete_review", side_effect=RuntimeError("boom"))

    summary = BatchRunner(store, _config()).remove_duplicate_reviews()

    assert summary.failed == 1
    assert summary.deleted == 0


def test_run_summary_record_and_as_dict():
    summary = RunSummary(job="reviews")
    summary.record(EntityState.UPDATED)
    summary.record(EntityState.SKIPPED)
    summary.record(EntityState.FAILED)
    summary.field_counts.update(["parking", "food", "parking"])

    assert summary.as_dict() == {
        "job": "reviews",
        "processed": 3,
        "updated": 1,
        "skipped": 1,
        "failed": 1,
        "unmatched": 0,
        "deleted": 0,
        "dry_run": False,
        "field_counts": {"food": 1, "parking": 2},
    }


def test_runner_config_from_env(monkeypatch):
    monkeypatch.setenv("BREW_SIGNALS_RULESET_VERSION", "v1")
    monkeypatch.setenv("BREW_SIGNALS_REVIEW_LANGUAGE", "")
    monkeypatch.setenv("BREW_SIGNALS_REQUEST_DELAY_MS", "250")
    monkeypatch.setenv("BREW_SIGNALS_DRY_RUN", "yes")

    config = RunnerConfig.from_env()

    assert config.review_language is None
    assert config.request_delay_sec == 0.25
    assert config.dry_run is True


def test_runner_config_from_env_defaults(monkeypatch):
    for name in (
        "BREW_SIGNALS_RULESET_VERSION",
        "BREW_SIGNALS_REVIEW_LANGUAGE",
        "BREW_SIGNALS_DRY_RUN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BREW_SIGNALS_REQUEST_DELAY_MS", "not-a-number")

    config = RunnerConfig.from_env()

    assert config == RunnerConfig()
