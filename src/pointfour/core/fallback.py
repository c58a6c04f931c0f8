"""Deterministic keyword-based review analyzer.

Used when the LLM extractor is unavailable or fails. Every section it emits
carries at least one literal quote from the supplied results; identical input
always yields identical output.
"""

import logging
import re
from typing import Dict, List, Optional

from .aspect import (
    ASPECT_RULES, COMPOSITION_PATTERNS, MATERIAL_NAMES, RECOMMENDATIONS,
    AspectRule, compiled_patterns, keyword_regex,
)
from .constants import ThresholdConstants
from .evidence import EvidenceExtractor, mentions_brand, mentions_item
from .models import (
    AnalysisInput, AnalysisResult, Aspect, AspectSection, Category,
    best_tier,
)
from .scoring import adaptive_min_mentions, quality_tier, quality_verdict, tier_from_count

logger = logging.getLogger(__name__)

FIT_CATEGORIES = (Category.CLOTHING, Category.SHOES, Category.GENERAL)
WASH_CARE_CATEGORIES = (Category.CLOTHING, Category.GENERAL)

_FIBER_NAMES = tuple(m for m in MATERIAL_NAMES if m != "fabric")


def _join_words(words: List[str]) -> str:
    if len(words) <= 1:
        return "".join(words)
    return ", ".join(words[:-1]) + " and " + words[-1]


def normalize_composition(text: str) -> str:
    text = re.sub(r"\s+", " ", text).strip().lower()
    return re.sub(r"(\d)\s%", r"\1%", text)


class FallbackAnalyzer:
    """Rule-based analyzer over the aspect keyword tables."""

    name = "fallback"

    def analyze(self, analysis_input: AnalysisInput) -> AnalysisResult:
        results = analysis_input.results
        extractor = EvidenceExtractor(results)
        brand = analysis_input.brand
        category = analysis_input.category

        sections: Dict[Aspect, AspectSection] = {}
        for aspect, rule in ASPECT_RULES.items():
            if aspect == Aspect.FIT and category not in FIT_CATEGORIES:
                continue
            if aspect == Aspect.WASH_CARE and category not in WASH_CARE_CATEGORIES:
                continue
            min_mentions = adaptive_min_mentions(len(results), rule.min_mentions)
            if aspect == Aspect.QUALITY:
                section = self._quality_section(rule, extractor, brand, min_mentions)
            else:
                section = self._dominant_section(rule, extractor, brand, min_mentions)
            if section is not None:
                sections[aspect] = section

        if analysis_input.is_specific_item and category == Category.CLOTHING:
            section = self._materials_section(results, brand, analysis_input.item_name)
            if section is not None:
                sections[Aspect.MATERIALS] = section

        overall = best_tier(s.confidence for s in sections.values())
        logger.debug(f"Fallback analysis for {brand}: {len(sections)} sections from {len(results)} results")
        return AnalysisResult(sections=sections, overall_confidence=overall, analyzer=self.name)

    def _dominant_section(self, rule: AspectRule, extractor: EvidenceExtractor, brand: str,
                          min_mentions: int) -> Optional[AspectSection]:
        patterns = compiled_patterns(rule)
        within = extractor.results_matching(keyword_regex(rule.context)) if rule.context else None

        counts = {
            name: extractor.count(p, name in rule.negatable, within)
            for name, p in patterns.items()
        }
        if sum(counts.values()) < min_mentions:
            return None

        # max() keeps the first of equal counts, so table order breaks ties.
        dominant = max(counts, key=lambda name: counts[name])
        if counts[dominant] == 0:
            return None

        negatable = dominant in rule.negatable
        evidence = extractor.quotes([patterns[dominant]], negatable, within)
        if not evidence:
            return None

        template = RECOMMENDATIONS[(rule.aspect, dominant)]
        if rule.aspect == Aspect.FABRIC:
            recommendation = template.format(
                materials=self._materials_named(within or []),
                descriptors=_join_words(self._descriptors_found(rule, dominant, within or [])),
            )
        else:
            recommendation = template.format(brand=brand)

        return AspectSection(
            confidence=tier_from_count(counts[dominant]),
            evidence=evidence,
            recommendation=recommendation,
        )

    def _quality_section(self, rule: AspectRule, extractor: EvidenceExtractor, brand: str,
                         min_mentions: int) -> Optional[AspectSection]:
        patterns = compiled_patterns(rule)
        positive = extractor.count(patterns["positive"])
        negative = extractor.count(patterns["negative"])
        if positive + negative < min_mentions or positive + negative == 0:
            return None

        verdict = quality_verdict(positive, negative)
        if verdict == "mixed":
            quote_patterns = [patterns["positive"], patterns["negative"]]
        else:
            quote_patterns = [patterns[verdict]]
        evidence = extractor.quotes(quote_patterns)
        if not evidence:
            return None

        return AspectSection(
            confidence=quality_tier(positive, negative),
            evidence=evidence,
            recommendation=RECOMMENDATIONS[(rule.aspect, verdict)].format(brand=brand),
        )

    def _materials_section(self, results, brand: str, item_name: str) -> Optional[AspectSection]:
        compositions: List[str] = []
        evidence_results = []
        for result in results:
            text = result.text
            if not (mentions_brand(text, brand) and mentions_item(text, item_name)):
                continue
            found = [normalize_composition(m.group(0)) for p in COMPOSITION_PATTERNS for m in p.finditer(text)]
            if not found:
                continue
            evidence_results.append(result)
            for comp in found:
                if comp not in compositions:
                    compositions.append(comp)

        if not compositions:
            return None

        extractor = EvidenceExtractor(evidence_results, ThresholdConstants.MAX_MATERIAL_EVIDENCE)
        evidence = extractor.quotes(list(COMPOSITION_PATTERNS))
        if not evidence:
            return None

        return AspectSection(
            confidence=tier_from_count(len(evidence_results)),
            evidence=evidence,
            composition=compositions[:ThresholdConstants.MAX_COMPOSITIONS],
        )

    @staticmethod
    def _materials_named(results) -> str:
        text = " ".join(r.text for r in results)
        named = [m for m in _FIBER_NAMES if keyword_regex([m]).search(text)]
        return _join_words(named[:3]) or "fabric"

    @staticmethod
    def _descriptors_found(rule: AspectRule, dominant: str, results) -> List[str]:
        text = " ".join(r.text for r in results)
        found = [d for d in rule.patterns[dominant] if keyword_regex([d]).search(text)]
        return found[:3]
