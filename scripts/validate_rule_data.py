"""Validate scoring rule data consistency.

Checks, for every version under src/brew_signals/scoring/data:
1. Every pattern compiles.
2. Theme weights are in (0, 1].
3. Amenity rules only use known amenity keys.
4. No duplicate (category, pattern) or (amenity, pattern) entries.

Example:
  python scripts/validate_rule_data.py
"""

from __future__ import annotations

import re
import runpy
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
DATA_ROOT = ROOT / "src" / "brew_signals" / "scoring" / "data"
AMENITY_KEYS = {
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


def fail(message: str) -> None:
    print(f"[rule-check] ERROR: {message}")
    raise SystemExit(1)


def load_python_constant(path: Path, key: str) -> list[dict]:
    namespace = runpy.run_path(str(path))
    if key not in namespace or not isinstance(namespace[key], list):
        fail(f"Missing or invalid constant '{key}' in {path}")
    return namespace[key]


def validate_patterns(rules: list[dict], label: str) -> None:
    for rule in rules:
        pattern = rule.get("pattern")
        if not isinstance(pattern, str) or not pattern:
            fail(f"{label}: rule without pattern: {rule}")
        try:
            re.compile(pattern)
        except re.error as exc:
            fail(f"{label}: pattern {pattern!r} does not compile: {exc}")


def validate_weights(rules: list[dict], label: str) -> None:
    for rule in rules:
        weight = rule.get("weight", 1.0)
        if not isinstance(weight, (int, float)) or not 0.0 < float(weight) <= 1.0:
            fail(f"{label}: weight out of range for {rule.get('category')!r}: {weight!r}")


def validate_amenity_keys(rules: list[dict], label: str) -> None:
    for rule in rules:
        if rule.get("amenity") not in AMENITY_KEYS:
            fail(f"{label}: unknown amenity key {rule.get('amenity')!r}")


def validate_duplicates(rules: list[dict], group_key: str, label: str) -> None:
    seen: set[tuple[str, str]] = set()
    for rule in rules:
        signature = (str(rule.get(group_key)), str(rule.get("pattern")))
        if signature in seen:
            fail(f"{label}: duplicate rule {signature}")
        seen.add(signature)


def iter_rule_versions() -> list[Path]:
    versions: list[Path] = []
    for path in sorted(DATA_ROOT.iterdir()):
        if not path.is_dir():
            continue
        if all((path / name).exists() for name in ["themes.py", "amenities.py"]):
            versions.append(path)
    if not versions:
        fail(f"No rule versions found under {DATA_ROOT}")
    return versions


def main() -> int:
    for version_dir in iter_rule_versions():
        themes = load_python_constant(version_dir / "themes.py", "THEME_RULES")
        amenities = load_python_constant(version_dir / "amenities.py", "AMENITY_RULES")

        validate_patterns(themes, f"{version_dir.name}/themes")
        validate_weights(themes, f"{version_dir.name}/themes")
        validate_duplicates(themes, "category", f"{version_dir.name}/themes")

        validate_patterns(amenities, f"{version_dir.name}/amenities")
        validate_amenity_keys(amenities, f"{version_dir.name}/amenities")
        validate_duplicates(amenities, "amenity", f"{version_dir.name}/amenities")

    print("[rule-check] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
