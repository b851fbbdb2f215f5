"""Text, name and URL normalization shared by scoring and matching."""

from __future__ import annotations

import re
import unicodedata

_LEGAL_SUFFIXES = (
    "brewing company",
    "brewing co",
    "brewery company",
    "beer company",
    "beer co",
    "brewing",
    "brewery",
    "breweries",
)
_SUFFIX_RE = re.compile(r"\s+(" + "|".join(re.escape(s) for s in _LEGAL_SUFFIXES) + r")$")


def normalize_text(value: str | None) -> str:
    """Lowercase, drop diacritics and collapse punctuation to single spaces.

    Total: None, empty and whitespace-only input all give "".
    """
    if not value:
        return ""
    text = unicodedata.normalize("NFKD", value)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.lower().replace("_", " ").replace("-", " ")
    text = re.sub(r"[^\w\s]", " ", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def word_count(text: str | None) -> int:
    return len(normalize_text(text).split())


def normalize_name(name: str | None) -> str:
    text = re.sub(r"[^a-z0-9 ]", " ", normalize_text(name))
    return re.sub(r"\s+", " ", text).strip()


def normalize_url(url: str | None) -> str | None:
    """Strip scheme, leading www. and trailing slashes; lowercase."""
    if not url:
        return None
    text = url.strip().lower()
    text = re.sub(r"^[a-z][a-z0-9+.-]*://", "", text)
    text = re.sub(r"^www\.", "", text)
    text = text.rstrip("/")
    return text or None


def strip_legal_suffix(name: str) -> str:
    """Remove one trailing legal-entity suffix from a normalized name."""
    return _SUFFIX_RE.sub("", name).strip()


def significant_words(name: str) -> list[str]:
    return [word for word in name.split() if len(word) > 2]
