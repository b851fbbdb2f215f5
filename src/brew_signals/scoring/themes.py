"""Weighted pattern scoring of review text into theme categories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from brew_signals.schema import ReviewRecord
from brew_signals.scoring.amenities import AmenityInferencer
from brew_signals.scoring.rules import PatternRule, RuleSetRepository
from brew_signals.scoring.types import ReviewThemes, ThemeResult
from brew_signals.text import normalize_text

MAX_KEYWORDS = 5
EXAMPLES_PER_RULE = 3
MIN_DENOMINATOR = 10.0


def score_text(text: str | None, rules: list[PatternRule]) -> ThemeResult:
    """Score text against one category's rules.

    Weighted match total over ``max(10, words / 100)``, capped at 1.
    """
    normalized = normalize_text(text)
    if not normalized or not rules:
        return ThemeResult(detected=False, score=0.0, keywords=[], match_count=0)

    total_score = 0.0
    match_count = 0
    keywords: list[str] = []

    for rule in rules:
        matches = [m.group(0).strip() for m in rule.pattern.finditer(normalized)]
        if not matches:
            continue
        match_count += len(matches)
        total_score += len(matches) * rule.weight
        for keyword in matches[:EXAMPLES_PER_RULE]:
            if keyword and keyword not in keywords and len(keywords) < MAX_KEYWORDS:
                keywords.append(keyword)

    denominator = max(MIN_DENOMINATOR, len(normalized.split()) / 100)
    normalized_score = min(1.0, total_score / denominator)

    return ThemeResult(
        detected=match_count > 0,
        score=round(normalized_score, 2),
        keywords=keywords,
        match_count=match_count,
    )


class ThemeScorer:
    """Scores text against every category of a rule set."""

    def __init__(self, repository: RuleSetRepository | None = None):
        self.repo = repository or RuleSetRepository()

    def score_all(self, text: str | None) -> dict[str, ThemeResult]:
        return {category: score_text(text, self.repo.theme_rules(category)) for category in self.repo.categories}


def combine_review_text(reviews: Iterable[ReviewRecord], language: str | None = None) -> tuple[str, int]:
    """Join non-empty review texts of one language; return text and review count."""
    texts: list[str] = []
    count = 0
    for review in reviews:
        if language and review.language and review.language != language:
            continue
        count += 1
        if review.text and review.text.strip():
            texts.append(review.text.strip())
    return " ".join(texts), count


def analyze_reviews(
    reviews: Iterable[ReviewRecord],
    *,
    scorer: ThemeScorer,
    inferencer: AmenityInferencer,
    language: str | None = "en",
) -> ReviewThemes:
    combined, count = combine_review_text(reviews, language)
    return ReviewThemes(
        ruleset_version=scorer.repo.version,
        language=language,
        review_count_analyzed=count,
        themes=scorer.score_all(combined),
        amenities=inferencer.infer(combined),
        last_analyzed=datetime.now(timezone.utc),
    )
