"""Evidence extraction: literal quotes joined to the result they came from."""

import math
import re
from typing import Iterable, List, Optional, Pattern

from .aspect import count_matches, has_match
from .constants import SearchConstants, ThresholdConstants
from .models import Evidence, RawResult

_WS = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[a-z0-9]+")


def normalize_text(text: str) -> str:
    return _WS.sub(" ", (text or "")).strip().lower()


def snippet_key(text: str) -> str:
    """Dedup key: the first characters of the normalized text."""
    return normalize_text(text)[:SearchConstants.SNIPPET_PREFIX_LENGTH]


def brand_pattern(brand: str) -> Pattern:
    return re.compile(rf"(?<![a-z0-9]){re.escape(brand.strip().lower())}(?![a-z0-9])", re.IGNORECASE)


def mentions_brand(text: str, brand: str) -> bool:
    if not (brand or "").strip():
        return False
    return bool(brand_pattern(brand).search(text or ""))


def item_tokens(item_name: str) -> List[str]:
    tokens = _TOKEN_RE.findall((item_name or "").lower())
    return [t for t in tokens if len(t) >= SearchConstants.MIN_ITEM_TOKEN_LENGTH]


def mentions_item(text: str, item_name: str) -> bool:
    """True when at least half (rounded up) of the item's tokens occur in the text."""
    tokens = item_tokens(item_name)
    if not tokens:
        return False
    words = set(_TOKEN_RE.findall((text or "").lower()))
    hits = sum(1 for t in tokens if t in words)
    return hits >= math.ceil(len(tokens) / 2)


def corpus_text(results: Iterable[RawResult]) -> str:
    """Lower-cased concatenation of titles and snippets, one result per line."""
    return "\n".join(r.text.lower() for r in results)


class EvidenceExtractor:
    """Finds quotable snippets in a result set."""

    def __init__(self, results: List[RawResult], max_quotes: int = ThresholdConstants.MAX_EVIDENCE):
        self.results = list(results)
        self.max_quotes = max_quotes

    def results_matching(self, pattern: Pattern, negatable: bool = False) -> List[RawResult]:
        return [r for r in self.results if has_match(pattern, r.text, negatable)]

    def count(self, pattern: Pattern, negatable: bool = False, within: Optional[List[RawResult]] = None) -> int:
        results = self.results if within is None else within
        return count_matches(pattern, corpus_text(results), negatable)

    def quotes(self, patterns: List[Pattern], negatable: bool = False,
               within: Optional[List[RawResult]] = None) -> List[Evidence]:
        """Up to ``max_quotes`` snippets matching any of ``patterns``, deduplicated by prefix."""
        results = self.results if within is None else within
        seen = set()
        evidence: List[Evidence] = []
        for result in results:
            quote = self._quote_from(result, patterns, negatable)
            if not quote:
                continue
            key = snippet_key(quote)
            if key in seen:
                continue
            seen.add(key)
            evidence.append(Evidence(text=quote, origin=result))
            if len(evidence) >= self.max_quotes:
                break
        return evidence

    @staticmethod
    def _quote_from(result: RawResult, patterns: List[Pattern], negatable: bool) -> str:
        # Prefer the snippet; fall back to the title when only the title matches.
        for part in (result.snippet, result.title):
            part = (part or "").strip()
            if part and any(has_match(p, part, negatable) for p in patterns):
                return part
        return ""
