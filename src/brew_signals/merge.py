"""Fill-only field merge, membership merge and review deduplication."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from brew_signals.exceptions import UnknownMembershipError
from brew_signals.schema import AMENITY_FIELDS, AmenityFields, Membership, ReviewRecord
from brew_signals.scoring.types import AmenityResult, ReviewThemes

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_KEPT_MEMBERSHIP_KEYS = ("name", "price", "duration")


@dataclass(frozen=True)
class MembershipProgram:
    token: str
    name: str
    aliases: tuple[str, ...]

    def owns(self, membership: Membership) -> bool:
        lowered = membership.name.lower()
        return any(alias in lowered for alias in self.aliases)


PROGRAMS: dict[str, MembershipProgram] = {
    program.token: program
    for program in (
        MembershipProgram(
            token="ba_member",
            name="Brewers Association Member",
            aliases=("ba_member", "brewers association member"),
        ),
        MembershipProgram(
            token="ba_independent_seal",
            name="Independent Craft Brewer Seal",
            aliases=("ba_independent_seal", "independent craft"),
        ),
        MembershipProgram(
            token="brewers_association_of_maryland",
            name="brewers_association_of_maryland",
            aliases=(
                "brewers_association_of_maryland",
                "brewers association of maryland",
                "maryland brewers association",
            ),
        ),
    )
}


def merge_amenities(current: AmenityFields, candidate: AmenityFields | AmenityResult) -> dict[str, Any]:
    """Return the fields that may be written: current empty and candidate set.

    Existing truthy values are never replaced, even when the candidate
    disagrees, so a second run with the same input yields an empty patch.
    """
    patch: dict[str, Any] = {}
    for name in AMENITY_FIELDS:
        existing = getattr(current, name)
        proposed = getattr(candidate, name)
        if not existing and proposed:
            patch[name] = proposed
    return patch


def merge_memberships(
    current: Iterable[Membership],
    tokens: Iterable[str],
    programs: Mapping[str, MembershipProgram] = PROGRAMS,
) -> list[Membership] | None:
    """Replace alias entries of the incoming programs with one canonical entry each.

    The first entry owned by a program is replaced in place; further entries
    of that program are dropped. Programs without an entry are appended in
    token order. Returns None when the merged list equals the current one.
    """
    current_list = list(current)
    incoming: list[MembershipProgram] = []
    for token in sorted(set(tokens)):
        program = programs.get(token)
        if program is None:
            raise UnknownMembershipError(f"No membership program for token {token!r}")
        incoming.append(program)
    if not incoming:
        return None

    merged: list[Membership] = []
    placed: set[str] = set()
    for membership in current_list:
        owner = next((program for program in incoming if program.owns(membership)), None)
        if owner is None:
            merged.append(membership)
        elif owner.token not in placed:
            merged.append(Membership(name=owner.name))
            placed.add(owner.token)
    merged.extend(Membership(name=program.name) for program in incoming if program.token not in placed)

    if _dump_memberships(merged) == _dump_memberships(current_list):
        return None
    return merged


def strip_membership_metadata(current: Iterable[Membership]) -> list[Membership] | None:
    """Keep only name/price/duration on every entry; None when already clean."""
    current_list = list(current)
    cleaned = [
        Membership(**{k: v for k, v in m.model_dump(exclude_none=True).items() if k in _KEPT_MEMBERSHIP_KEYS})
        for m in current_list
    ]
    if _dump_memberships(cleaned) == _dump_memberships(current_list):
        return None
    return cleaned


def themes_changed(stored: Mapping[str, Any] | ReviewThemes | None, fresh: ReviewThemes) -> bool:
    """Compare two theme aggregates, ignoring when they were computed."""
    if stored is None:
        return True
    if not isinstance(stored, BaseModel):
        try:
            stored = ReviewThemes.model_validate(stored)
        except ValueError:
            return True
    exclude = {"last_analyzed"}
    return stored.model_dump(mode="json", exclude=exclude) != fresh.model_dump(mode="json", exclude=exclude)


def review_dedup_key(review: ReviewRecord) -> tuple[str, int, str]:
    reviewer = (review.reviewer_name or "").strip().lower()
    return (review.brewery_id, review.review_timestamp or 0, reviewer)


@dataclass
class DuplicateGroup:
    key: tuple[str, int, str]
    reviews: list[ReviewRecord] = field(default_factory=list)

    @property
    def keep_id(self) -> str:
        return self.reviews[0].id

    @property
    def delete_ids(self) -> list[str]:
        return [review.id for review in self.reviews[1:]]


def plan_review_dedup(reviews: Iterable[ReviewRecord]) -> list[DuplicateGroup]:
    """Group all reviews by composite key in one pass.

    Within each group the earliest ``created_at`` survives; missing timestamps
    sort first and the review id breaks ties. Single-review groups are dropped.
    """
    groups: dict[tuple[str, int, str], list[ReviewRecord]] = {}
    for review in reviews:
        groups.setdefault(review_dedup_key(review), []).append(review)

    duplicates: list[DuplicateGroup] = []
    for key, members in groups.items():
        if len(members) < 2:
            continue
        members.sort(key=lambda r: (_as_utc(r.created_at), r.id))
        duplicates.append(DuplicateGroup(key=key, reviews=members))
    return duplicates


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _dump_memberships(memberships: list[Membership]) -> list[dict[str, Any]]:
    return [m.model_dump(exclude_none=True) for m in memberships]
