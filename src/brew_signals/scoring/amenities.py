"""Heuristic amenity inference from review text."""

from __future__ import annotations

from brew_signals.scoring.rules import PatternRule, RuleSetRepository
from brew_signals.scoring.types import AmenityResult
from brew_signals.text import normalize_text

_BOOLEAN_AMENITIES = ("offers_tours", "beer_to_go", "has_merch", "dog_friendly", "outdoor_seating")
_YES_AMENITIES = ("other_drinks", "parking")


def any_match(text: str, rules: list[PatternRule]) -> bool:
    if not text:
        return False
    return any(rule.pattern.search(text) for rule in rules)


class AmenityInferencer:
    """Infers amenity flags with `any rule matches` semantics.

    ``allows_visitors`` is set whenever there is any review text at all. This
    is a coarse heuristic: a review is taken as evidence that visits happen.

    Food is categorical: kitchen signals win over food-truck signals.
    """

    def __init__(self, repository: RuleSetRepository | None = None):
        self.repo = repository or RuleSetRepository()

    def infer(self, text: str | None) -> AmenityResult:
        t = normalize_text(text)
        if not t:
            return AmenityResult()

        values: dict[str, object] = {"allows_visitors": True}
        for amenity in _BOOLEAN_AMENITIES:
            if any_match(t, self.repo.amenity_rules(amenity)):
                values[amenity] = True
        for amenity in _YES_AMENITIES:
            if any_match(t, self.repo.amenity_rules(amenity)):
                values[amenity] = "yes"

        if any_match(t, self.repo.amenity_rules("food_in_house")):
            values["food"] = "In-House"
        elif any_match(t, self.repo.amenity_rules("food_trucks")):
            values["food"] = "Food Trucks"

        return AmenityResult(**values)
