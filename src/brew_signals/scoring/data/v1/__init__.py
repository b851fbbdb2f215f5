"""Scoring rules v1."""

from brew_signals.scoring.data.v1.amenities import AMENITY_RULES
from brew_signals.scoring.data.v1.themes import THEME_RULES

__all__ = ["THEME_RULES", "AMENITY_RULES"]
