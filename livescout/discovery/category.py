"""
Rule-based category matching for discovered streams.

A stream can match several categories at once; the highest-scoring one
is its primary category, used for ranking and display only.
"""
import logging
import re
from typing import Optional, Sequence

from .models import CategoryRule, DetectedCategory

logger = logging.getLogger(__name__)


def _matches(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE) is not None


def score_rule(text: str, rule: CategoryRule) -> Optional[float]:
    """Score one rule against `text`, or None if it does not match.

    Base confidence grows with the share of include patterns that hit,
    then is scaled by priority / 10. Priorities above 10 therefore push
    the score past 1.0.
    """
    if not rule.enabled or not rule.include:
        return None

    matching_includes = sum(1 for p in rule.include if _matches(p, text))
    if matching_includes == 0:
        return None

    if any(_matches(p, text) for p in rule.exclude):
        return None

    base = min(0.5 + (matching_includes / len(rule.include)) * 0.5, 1.0)
    return base * (rule.priority / 10)


def match_categories(text: str, rules: Sequence[CategoryRule]) -> list[DetectedCategory]:
    """Match `text` against every enabled rule.

    Returns:
        DetectedCategory entries sorted by score, highest first.
    """
    lowered = (text or "").lower()
    matches = []
    for rule in rules:
        score = score_rule(lowered, rule)
        if score is None:
            continue
        matches.append(DetectedCategory(category_id=rule.id, score=score))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def get_primary_category(detected: Sequence[DetectedCategory]) -> Optional[str]:
    """Category id of the highest-scoring match, or None."""
    if not detected:
        return None
    return detected[0].category_id
