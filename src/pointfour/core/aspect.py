"""Aspect keyword tables and matching helpers for fashion reviews."""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple

from .constants import ThresholdConstants
from .models import Aspect


@dataclass(frozen=True)
class AspectRule:
    """Keyword table for one analysis lane.

    ``patterns`` maps sub-pattern name to its keyword phrases; dict order is the
    tie-break order when two sub-patterns have the same count. ``negatable``
    lists sub-patterns whose hits are ignored when preceded by a negation
    ("didn't shrink"). When ``context`` is set, hits only count inside results
    that also mention one of the context keywords.
    """
    aspect: Aspect
    patterns: Dict[str, Tuple[str, ...]]
    min_mentions: int = ThresholdConstants.DEFAULT_MIN_MENTIONS
    negatable: Tuple[str, ...] = ()
    context: Optional[Tuple[str, ...]] = None


FIT_RULE = AspectRule(
    aspect=Aspect.FIT,
    patterns={
        "runs_small": (
            "runs small", "run small", "running small", "fits small", "fit small",
            "size up", "sized up", "sizing up", "too small", "too tight", "a bit snug",
        ),
        "runs_large": (
            "runs large", "run large", "runs big", "run big", "fits large", "fits big",
            "size down", "sized down", "sizing down", "too big", "too large", "too loose",
        ),
        "true_to_size": (
            "true to size", "true-to-size", "tts", "fits true", "fit true",
            "fits perfectly", "perfect fit", "fits as expected",
        ),
    },
)

QUALITY_RULE = AspectRule(
    aspect=Aspect.QUALITY,
    patterns={
        "positive": (
            "high quality", "great quality", "good quality", "excellent quality",
            "amazing quality", "well made", "well-made", "well constructed", "durable",
            "holds up", "held up", "sturdy", "worth every penny", "worth the money",
            "lasts for years", "built to last", "premium",
        ),
        "negative": (
            "poor quality", "bad quality", "low quality", "terrible quality", "cheap",
            "cheaply made", "fell apart", "falls apart", "pilling", "pilled", "pills",
            "ripped", "tore", "holes", "flimsy", "not worth", "disappointing quality",
            "unraveled", "unravelled", "loose threads",
        ),
    },
)

WASH_CARE_RULE = AspectRule(
    aspect=Aspect.WASH_CARE,
    patterns={
        "shrinks": ("shrink", "shrinks", "shrank", "shrunk", "shrunken", "shrinkage", "shrinking"),
        "holds": (
            "washes well", "washed well", "survived the wash", "holds up in the wash",
            "held up in the wash", "held up after washing", "holds its shape",
            "kept its shape", "keeps its shape", "no shrinkage", "didn't shrink",
            "did not shrink", "doesn't shrink", "does not shrink", "hasn't shrunk",
        ),
        "stretches": (
            "stretches out", "stretched out", "stretch out", "lost its shape",
            "loses its shape", "bagged out", "bags out", "baggy after washing",
        ),
    },
    negatable=("shrinks", "stretches"),
)

MATERIAL_NAMES = (
    "cotton", "wool", "merino", "cashmere", "linen", "silk", "polyester", "viscose",
    "rayon", "nylon", "denim", "leather", "suede", "lyocell", "tencel", "modal",
    "spandex", "elastane", "acrylic", "alpaca", "mohair", "fleece", "jersey", "fabric",
)

FABRIC_RULE = AspectRule(
    aspect=Aspect.FABRIC,
    patterns={
        "positive_feel": (
            "soft", "thick", "heavyweight", "substantial", "breathable", "luxurious",
            "smooth", "cozy", "cosy", "comfortable", "buttery", "sturdy fabric",
        ),
        "negative_feel": (
            "thin", "itchy", "scratchy", "rough", "see-through", "see through", "sheer",
            "stiff", "synthetic feel", "feels cheap", "plasticky", "paper thin",
        ),
    },
    context=MATERIAL_NAMES,
)

ASPECT_RULES = {
    Aspect.FIT: FIT_RULE,
    Aspect.QUALITY: QUALITY_RULE,
    Aspect.FABRIC: FABRIC_RULE,
    Aspect.WASH_CARE: WASH_CARE_RULE,
}

RECOMMENDATIONS = {
    (Aspect.FIT, "runs_small"): "Reviewers say {brand} pieces tend to run small; consider sizing up.",
    (Aspect.FIT, "runs_large"): "Reviewers say {brand} pieces tend to run large; consider sizing down.",
    (Aspect.FIT, "true_to_size"): "Reviewers say {brand} pieces fit true to size.",
    (Aspect.QUALITY, "positive"): "Quality feedback is mostly positive; reviewers describe {brand} as well made and durable.",
    (Aspect.QUALITY, "mixed"): "Quality feedback is mixed; some reviewers praise the construction while others report wear issues.",
    (Aspect.QUALITY, "negative"): "Quality feedback is mostly negative; reviewers report issues such as pilling, thin fabric or items falling apart.",
    (Aspect.WASH_CARE, "shrinks"): "May shrink after washing; wash cold or consider sizing up.",
    (Aspect.WASH_CARE, "holds"): "Holds up well after washing.",
    (Aspect.WASH_CARE, "stretches"): "Can stretch out or lose its shape after washing.",
    (Aspect.FABRIC, "positive_feel"): "Reviewers describe the {materials} as {descriptors}.",
    (Aspect.FABRIC, "negative_feel"): "Reviewers describe the {materials} as {descriptors}.",
}

# Material composition (specific clothing items)
FIBERS = (
    "cotton", "wool", "silk", "linen", "cashmere", "polyester", "viscose", "lyocell",
    "tencel", "modal", "spandex", "elastane", "nylon", "polyamide", "rayon", "acrylic",
    "alpaca", "mohair", "hemp", "bamboo",
)
_FIBER_ALT = "|".join(FIBERS)

COMPOSITION_PATTERNS = (
    re.compile(rf"\b\d{{1,3}}\s?%\s+(?:[a-z]+\s+){{0,2}}?(?:{_FIBER_ALT})\b", re.IGNORECASE),
    re.compile(rf"\b100\s?%\s+(?:[a-z]+\s+){{0,2}}?(?:{_FIBER_ALT}|leather|suede|denim)\b", re.IGNORECASE),
    re.compile(rf"\b(?:(?:{_FIBER_ALT})[\s/-]+)?(?:{_FIBER_ALT})\s+blend\b", re.IGNORECASE),
)

# Per-review tags, checked in order
TAG_RULES = (
    ("runs-small", ("runs small", "run small", "fits small", "size up", "sized up")),
    ("runs-large", ("runs large", "run large", "runs big", "fits large", "size down", "sized down")),
    ("true-to-size", ("true to size", "true-to-size", "tts", "fits true")),
    ("high-quality", ("high quality", "great quality", "good quality", "well made", "well-made", "durable")),
    ("quality-issues", ("poor quality", "cheap", "cheaply made", "fell apart", "pilling", "pilled")),
    ("cotton", ("cotton",)),
    ("wool", ("wool", "merino")),
    ("cashmere", ("cashmere",)),
    ("linen", ("linen",)),
    ("silk", ("silk",)),
    ("leather", ("leather",)),
    ("denim", ("denim",)),
    ("synthetic", ("polyester", "nylon", "acrylic")),
    ("may-shrink", ("shrink", "shrunk", "shrank")),
    ("stretchy", ("stretchy", "stretch")),
    ("comfortable", ("comfortable", "comfy")),
)
DEFAULT_TAG = "general-review"

REVIEW_LANGUAGE = (
    "review", "bought", "ordered", "purchased", "wore", "wearing", "i own",
    "i have", "my experience", "returned", "after wearing", "recommend",
)

_NEGATION_RE = re.compile(r"(?:\bnot|n['’]t|\bno|\bnever|\bwithout)\s+$")
_NEGATION_WINDOW = 12


def is_negated(text: str, start: int) -> bool:
    """True when the words just before ``start`` negate the phrase found there."""
    return bool(_NEGATION_RE.search(text[max(0, start - _NEGATION_WINDOW):start].lower()))


def keyword_regex(keywords) -> Pattern:
    """Compile keyword phrases into one case-insensitive alternation bounded on word edges."""
    alternation = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"(?<![a-z0-9])(?:{alternation})(?![a-z0-9])", re.IGNORECASE)


def count_matches(pattern: Pattern, text: str, negatable: bool = False) -> int:
    """Count keyword hits, skipping negated ones when requested."""
    count = 0
    for m in pattern.finditer(text):
        if negatable and is_negated(text, m.start()):
            continue
        count += 1
    return count


def has_match(pattern: Pattern, text: str, negatable: bool = False) -> bool:
    return count_matches(pattern, text, negatable) > 0


def compiled_patterns(rule: AspectRule) -> Dict[str, Pattern]:
    return {name: _compile_cached(keywords) for name, keywords in rule.patterns.items()}


_PATTERN_CACHE: Dict[Tuple[str, ...], Pattern] = {}


def _compile_cached(keywords: Tuple[str, ...]) -> Pattern:
    pattern = _PATTERN_CACHE.get(keywords)
    if pattern is None:
        pattern = keyword_regex(keywords)
        _PATTERN_CACHE[keywords] = pattern
    return pattern
