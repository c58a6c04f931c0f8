"""Narrative summary synthesis."""

import re
from typing import List, Optional

from .aspect import is_negated
from .constants import SummaryConstants
from .models import (
    AnalysisResult, Aspect, BrandFitSummary, Category, ConfidenceTier,
)
from .sources import collect_sources

FIT_SUMMARY_CATEGORIES = (Category.CLOTHING, Category.SHOES)

# Checked in order against the fit recommendation text
FIT_TENDENCIES = (
    (re.compile(r"\bruns?\s+small\b|\bsiz(?:e|ing)\s+up\b", re.I),
     "Most reviewers say {brand} runs small, so consider sizing up."),
    (re.compile(r"\bruns?\s+(?:large|big)\b|\bsiz(?:e|ing)\s+down\b", re.I),
     "Most reviewers say {brand} runs large, so consider sizing down."),
    (re.compile(r"\btrue[\s-]to[\s-]size\b", re.I),
     "Most reviewers say {brand} fits true to size."),
)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def fit_tendency(recommendation: Optional[str], brand: str) -> Optional[str]:
    """Fit sentence matching the tendency stated in the recommendation, if any."""
    if not recommendation:
        return None
    for pattern, sentence in FIT_TENDENCIES:
        if any(not is_negated(recommendation, m.start()) for m in pattern.finditer(recommendation)):
            return sentence.format(brand=brand)
    return None


def synthesize_summary(analysis: AnalysisResult, total_results: int, category: Category,
                       sources: List[str], brand: str) -> str:
    sections = analysis.sections
    if not sections:
        return (f"Found {_plural(total_results, 'search result')} for {brand}, "
                "but none contained usable fit or quality feedback.")

    named = sources[:SummaryConstants.MAX_NAMED_SOURCES]
    opening = f"Based on {_plural(total_results, 'search result')}"
    if named:
        opening += f" from {', '.join(named)}"
    parts = [opening + "."]

    fit = sections.get(Aspect.FIT)
    if fit is not None and category in FIT_SUMMARY_CATEGORIES:
        sentence = fit_tendency(fit.recommendation, brand)
        if sentence:
            parts.append(sentence)

    quality = sections.get(Aspect.QUALITY)
    if quality is not None and quality.confidence.rank >= ConfidenceTier.MEDIUM.rank and quality.recommendation:
        parts.append(quality.recommendation)

    fabric = sections.get(Aspect.FABRIC)
    if fabric is not None and fabric.recommendation:
        parts.append(fabric.recommendation)

    materials = sections.get(Aspect.MATERIALS)
    if materials is not None and materials.composition:
        parts.append(f"Reported composition: {', '.join(materials.composition)}.")

    wash = sections.get(Aspect.WASH_CARE)
    if wash is not None and wash.recommendation:
        parts.append(f"Washing: {wash.recommendation}")

    if analysis.overall_confidence == ConfidenceTier.LOW and total_results < SummaryConstants.LIMITED_DATA_RESULTS:
        parts.append("Limited data: only a few reviews were found, so treat this as a rough guide.")

    return " ".join(parts)


def build_brand_fit_summary(analysis: AnalysisResult, total_results: int, category: Category,
                            brand: str) -> BrandFitSummary:
    """Wrap the analysis sections and narrative into a BrandFitSummary."""
    sources = collect_sources(analysis.sections)
    return BrandFitSummary(
        summary=synthesize_summary(analysis, total_results, category, sources, brand),
        confidence=analysis.overall_confidence,
        sections=dict(analysis.sections),
        total_results=total_results,
        sources=sources,
    )
