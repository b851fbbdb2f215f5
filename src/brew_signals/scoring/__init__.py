"""Review text scoring for brew-signals."""

from brew_signals.scoring.amenities import AmenityInferencer
from brew_signals.scoring.rules import PatternRule, RuleSetRepository
from brew_signals.scoring.themes import ThemeScorer, analyze_reviews, score_text
from brew_signals.scoring.types import AmenityResult, ReviewThemes, ThemeResult

__all__ = [
    "AmenityInferencer",
    "AmenityResult",
    "PatternRule",
    "ReviewThemes",
    "RuleSetRepository",
    "ThemeResult",
    "ThemeScorer",
    "analyze_reviews",
    "score_text",
]
