"""brew-signals: Extract amenity and theme signals for brewery directory records."""

from brew_signals.matching import EntityMatcher, MatchResult
from brew_signals.merge import merge_amenities, merge_memberships, plan_review_dedup
from brew_signals.schema import AmenityFields, BreweryRecord, ExternalListing, Membership, ReviewRecord
from brew_signals.scoring import AmenityInferencer, ThemeResult, ThemeScorer, score_text
from brew_signals.text import normalize_text

__version__ = "0.1.0"

__all__ = [
    "AmenityFields",
    "AmenityInferencer",
    "BreweryRecord",
    "EntityMatcher",
    "ExternalListing",
    "MatchResult",
    "Membership",
    "ReviewRecord",
    "ThemeResult",
    "ThemeScorer",
    "merge_amenities",
    "merge_memberships",
    "normalize_text",
    "plan_review_dedup",
    "score_text",
    "__version__",
]
