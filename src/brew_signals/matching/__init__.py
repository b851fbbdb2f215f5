"""Entity matching for external directory listings."""

from brew_signals.matching.matcher import EntityMatcher, fuzzy_name_match
from brew_signals.matching.types import MatchResult, RecordMatches

__all__ = ["EntityMatcher", "MatchResult", "RecordMatches", "fuzzy_name_match"]
