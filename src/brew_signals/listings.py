"""Load already-extracted external directory listings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from brew_signals.exceptions import ListingFormatError
from brew_signals.schema import ExternalListing


def load_listings(path: str | Path, *, default_flags: set[str] | None = None) -> list[ExternalListing]:
    """Read listings from a JSON array or a JSONL file.

    Each object needs ``name``; ``website`` is optional and membership tokens
    come from ``flags`` (or ``membership_flags``). ``default_flags`` is added
    to every listing, for directories where membership is implied by presence
    on the page.
    """
    path = Path(path)
    if not path.exists():
        raise ListingFormatError(f"Listings file not found: {path}")

    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []

    if text.startswith("["):
        try:
            rows = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ListingFormatError(f"Invalid JSON in {path}: {exc}") from exc
    else:
        rows = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise ListingFormatError(f"Invalid JSON on line {lineno} of {path}: {exc}") from exc

    return [_to_listing(row, default_flags or set(), path) for row in rows]


def _to_listing(row: Any, default_flags: set[str], path: Path) -> ExternalListing:
    if not isinstance(row, dict):
        raise ListingFormatError(f"Listing entries must be objects in {path}: {row!r}")
    flags = row.get("flags", row.get("membership_flags")) or []
    try:
        return ExternalListing(
            name=row.get("name"),
            website=row.get("website") or None,
            flags=set(flags) | default_flags,
        )
    except ValidationError as exc:
        raise ListingFormatError(f"Invalid listing in {path}: {exc}") from exc
