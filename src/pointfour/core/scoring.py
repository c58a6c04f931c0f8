"""Confidence scoring."""

from .aspect import REVIEW_LANGUAGE, FIT_RULE, QUALITY_RULE, FIBERS, keyword_regex
from .constants import ThresholdConstants
from .models import ConfidenceTier


def adaptive_min_mentions(result_count: int, rule_min: int = ThresholdConstants.DEFAULT_MIN_MENTIONS) -> int:
    """Mentions required before an aspect is attempted; lenient for small corpora."""
    if result_count < ThresholdConstants.SMALL_CORPUS_SIZE:
        return ThresholdConstants.SMALL_CORPUS_MIN_MENTIONS
    return rule_min


def tier_from_count(count: int) -> ConfidenceTier:
    if count >= ThresholdConstants.HIGH_CONFIDENCE_MENTIONS:
        return ConfidenceTier.HIGH
    if count >= ThresholdConstants.MEDIUM_CONFIDENCE_MENTIONS:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def quality_ratio(positive: int, negative: int) -> float:
    total = positive + negative
    return positive / total if total else 0.0


def quality_tier(positive: int, negative: int) -> ConfidenceTier:
    """Tier for the bivalent quality lane: volume, or a strongly positive ratio."""
    ratio = quality_ratio(positive, negative)
    if ratio >= ThresholdConstants.QUALITY_HIGH_RATIO and positive >= ThresholdConstants.QUALITY_HIGH_RATIO_MIN_POSITIVE:
        return ConfidenceTier.HIGH
    return tier_from_count(positive + negative)


def quality_verdict(positive: int, negative: int) -> str:
    ratio = quality_ratio(positive, negative)
    if ratio >= ThresholdConstants.QUALITY_POSITIVE_RATIO:
        return "positive"
    if ratio <= ThresholdConstants.QUALITY_NEGATIVE_RATIO:
        return "negative"
    return "mixed"


# Per-review score
_FIT_PHRASES = keyword_regex([k for words in FIT_RULE.patterns.values() for k in words])
_QUALITY_OR_MATERIAL = keyword_regex(
    [k for words in QUALITY_RULE.patterns.values() for k in words] + list(FIBERS) + ["quality", "fabric", "material"]
)
_REVIEW_LANGUAGE = keyword_regex(REVIEW_LANGUAGE)


def review_score(text: str) -> int:
    score = 0
    if _FIT_PHRASES.search(text or ""):
        score += ThresholdConstants.REVIEW_FIT_POINTS
    if _QUALITY_OR_MATERIAL.search(text or ""):
        score += ThresholdConstants.REVIEW_QUALITY_POINTS
    if _REVIEW_LANGUAGE.search(text or ""):
        score += ThresholdConstants.REVIEW_LANGUAGE_POINTS
    return score


def review_confidence(text: str) -> ConfidenceTier:
    score = review_score(text)
    if score >= ThresholdConstants.REVIEW_HIGH_SCORE:
        return ConfidenceTier.HIGH
    if score >= ThresholdConstants.REVIEW_MEDIUM_SCORE:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW
