"""Rule set repository for theme scoring and amenity inference."""

from __future__ import annotations

import re
from dataclasses import dataclass
from importlib import import_module

from brew_signals.exceptions import RuleSetError

AMENITY_KEYS = frozenset(
    {
        "offers_tours",
        "beer_to_go",
        "has_merch",
        "dog_friendly",
        "outdoor_seating",
        "other_drinks",
        "parking",
        "food_in_house",
        "food_trucks",
    }
)


@dataclass(frozen=True)
class PatternRule:
    pattern: re.Pattern[str]
    weight: float = 1.0


class RuleSetRepository:
    """Loads theme and amenity rules from packaged, versioned rule data."""

    def __init__(self, version: str = "v1"):
        self.version = version
        self.themes: dict[str, list[PatternRule]] = self._load_themes()
        self.amenities: dict[str, list[PatternRule]] = self._load_amenities()

    @property
    def categories(self) -> list[str]:
        return list(self.themes)

    def theme_rules(self, category: str) -> list[PatternRule]:
        return self.themes.get(category, [])

    def amenity_rules(self, amenity: str) -> list[PatternRule]:
        return self.amenities.get(amenity, [])

    def _load_module(self, name: str):
        try:
            return import_module(f"brew_signals.scoring.data.{self.version}.{name}")
        except ModuleNotFoundError as exc:
            raise RuleSetError(f"Unknown rule set version: {self.version}") from exc

    def _load_themes(self) -> dict[str, list[PatternRule]]:
        data = self._load_module("themes").THEME_RULES
        grouped: dict[str, list[PatternRule]] = {}
        for item in data:
            weight = float(item.get("weight", 1.0))
            if not 0.0 < weight <= 1.0:
                raise RuleSetError(
                    f"Weight {weight} out of range for {item['category']!r} in {self.version}"
                )
            grouped.setdefault(item["category"], []).append(
                PatternRule(pattern=_compile(item["pattern"], self.version), weight=weight)
            )
        return grouped

    def _load_amenities(self) -> dict[str, list[PatternRule]]:
        data = self._load_module("amenities").AMENITY_RULES
        grouped: dict[str, list[PatternRule]] = {}
        for item in data:
            amenity = item["amenity"]
            if amenity not in AMENITY_KEYS:
                raise RuleSetError(f"Unknown amenity key {amenity!r} in {self.version}")
            grouped.setdefault(amenity, []).append(
                PatternRule(pattern=_compile(item["pattern"], self.version))
            )
        return grouped


def _compile(pattern: str, version: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise RuleSetError(f"Invalid pattern {pattern!r} in {version}: {exc}") from exc
