"""LLM-backed review extraction with OpenAI."""

import hashlib
import json
import logging
import re
import unicodedata
from textwrap import dedent
from typing import Dict, List, Optional, Tuple

import openai
import pydantic
from diskcache import Cache
from pydantic import BaseModel, ConfigDict, Field

from ..core.config import settings
from ..core.constants import FileConstants, PromptConstants, ThresholdConstants
from ..core.errors import ConfigurationError, ExtractionError
from ..core.fallback import FIT_CATEGORIES, normalize_composition
from ..core.models import (
    AnalysisInput, AnalysisResult, Aspect, AspectSection, Category, ConfidenceTier,
    Evidence, RawResult, best_tier,
)

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = dedent("""
You are a fashion expert analysing customer reviews of clothing, shoes, bags and accessories.
Return ONLY JSON (no prose, no markdown).

Rules:
- Use only what is present in the supplied search results.
- OMIT any aspect that lacks real evidence in the results. Never guess.
- Evidence entries MUST be direct quotes copied verbatim from the results (1-3 per aspect).
- Confidence reflects the volume and consistency of evidence: "low", "medium" or "high".
- Fit: state whether the brand runs small, runs large or is true to size. Omit fit for bags and accessories.
- Materials: only when the request is for a specific clothing item; list reported compositions such as "100% cotton".
- overallConfidence must not exceed the highest aspect confidence.

JSON schema:
{ "fit":       {"recommendation": str, "confidence": str, "evidence": [str]},
  "quality":   {"recommendation": str, "confidence": str, "evidence": [str]},
  "fabric":    {"recommendation": str, "confidence": str, "evidence": [str]},
  "washCare":  {"recommendation": str, "confidence": str, "evidence": [str]},
  "materials": {"composition": [str], "confidence": str, "evidence": [str]},
  "overallConfidence": str }
""").strip()


class SectionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recommendation: Optional[str] = None
    confidence: str = "low"
    evidence: List[str] = Field(default_factory=list)


class MaterialsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    composition: List[str] = Field(default_factory=list)
    confidence: str = "low"
    evidence: List[str] = Field(default_factory=list)


class AnalysisPayload(BaseModel):
    """Shape of the model's JSON answer."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    fit: Optional[SectionPayload] = None
    quality: Optional[SectionPayload] = None
    fabric: Optional[SectionPayload] = None
    wash_care: Optional[SectionPayload] = Field(None, alias="washCare")
    materials: Optional[MaterialsPayload] = None
    overall_confidence: str = Field("low", alias="overallConfidence")


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    return re.sub(r"^```(?:json)?|```$", "", s, flags=re.IGNORECASE | re.MULTILINE).strip()


def _safe_json(s: str) -> dict:
    """Parse a JSON object from model output, tolerating fences and trailing commas."""
    cleaned = _strip_code_fences(s or "")
    candidates = [cleaned, re.sub(r",\s*([}\]])", r"\1", cleaned)]
    m = re.search(r"\{.*\}", cleaned, re.S)
    if m:
        candidates.append(m.group(0))
    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    raise ExtractionError(f"Could not parse JSON from: {cleaned[:200]}...")


_WS = re.compile(r"\s+")
_QUOTE_CHARS = str.maketrans({"‘": "'", "’": "'", "“": '"', "”": '"'})


def _norm_for_substring(s: str) -> str:
    if not s:
        return ""
    s = unicodedata.normalize("NFKC", s).translate(_QUOTE_CHARS)
    s = s.strip().strip('"').strip("'")
    return _WS.sub(" ", s).strip().lower()


def _contains_norm(hay: str, needle: str) -> bool:
    n = _norm_for_substring(needle)
    return bool(n) and n in _norm_for_substring(hay)


def parse_analysis(content: str, analysis_input: AnalysisInput) -> AnalysisResult:
    """Validate the model's answer and keep only quotes found in the supplied results.

    Raises ExtractionError on malformed JSON or schema violations.
    """
    data = _safe_json(content)
    try:
        payload = AnalysisPayload.model_validate(data)
    except pydantic.ValidationError as e:
        raise ExtractionError(f"Schema violation in LLM response: {e}") from e

    results = analysis_input.results
    category = analysis_input.category
    sections: Dict[Aspect, AspectSection] = {}

    lanes: List[Tuple[Aspect, Optional[SectionPayload]]] = [
        (Aspect.FIT, payload.fit if category in FIT_CATEGORIES else None),
        (Aspect.QUALITY, payload.quality),
        (Aspect.FABRIC, payload.fabric),
        (Aspect.WASH_CARE, payload.wash_care),
    ]
    for aspect, section in lanes:
        if section is None or not (section.recommendation or "").strip():
            continue
        evidence = _verified_evidence(section.evidence, results)
        if evidence:
            sections[aspect] = AspectSection(
                confidence=ConfidenceTier.parse(section.confidence),
                evidence=evidence,
                recommendation=section.recommendation.strip(),
            )

    materials = payload.materials
    if materials is not None and analysis_input.is_specific_item and category == Category.CLOTHING:
        compositions: List[str] = []
        for comp in materials.composition:
            norm = normalize_composition(comp)
            if norm and norm not in compositions:
                compositions.append(norm)
        evidence = _verified_evidence(materials.evidence, results, ThresholdConstants.MAX_MATERIAL_EVIDENCE)
        if compositions and evidence:
            sections[Aspect.MATERIALS] = AspectSection(
                confidence=ConfidenceTier.parse(materials.confidence),
                evidence=evidence,
                composition=compositions[:ThresholdConstants.MAX_COMPOSITIONS],
            )

    best = best_tier(s.confidence for s in sections.values())
    overall = ConfidenceTier.parse(payload.overall_confidence)
    if overall.rank > best.rank or not sections:
        overall = best
    return AnalysisResult(sections=sections, overall_confidence=overall)


def _verified_evidence(quotes: List[str], results: List[RawResult],
                       limit: int = ThresholdConstants.MAX_EVIDENCE) -> List[Evidence]:
    evidence: List[Evidence] = []
    seen = set()
    for quote in quotes:
        key = _norm_for_substring(quote)
        if not key or key in seen:
            continue
        origin = next((r for r in results if _contains_norm(r.text, quote)), None)
        if origin is None:
            logger.debug(f"Dropping unverifiable quote: {quote[:60]}")
            continue
        seen.add(key)
        evidence.append(Evidence(text=quote.strip(), origin=origin))
        if len(evidence) >= limit:
            break
    return evidence


def build_user_message(analysis_input: AnalysisInput) -> str:
    lines = [
        f"Brand: {analysis_input.brand}",
        f"Category: {analysis_input.category.value}",
    ]
    if analysis_input.item_name:
        lines.append(f"Item: {analysis_input.item_name}")
    lines.append(f"Specific item request: {'yes' if analysis_input.is_specific_item else 'no'}")
    lines.append("")
    lines.append("Search results:")
    for i, result in enumerate(analysis_input.results[:PromptConstants.MAX_PROMPT_RESULTS], 1):
        snippet = result.snippet[:PromptConstants.MAX_SNIPPET_CHARS]
        lines.append(f"[{i}] {result.title}\n{snippet}\n{result.url}")
    return "\n".join(lines)


class OpenAIAnalyzer:
    """Primary analyzer: one JSON-mode chat completion per request."""

    name = "openai"

    def __init__(self, client=None, model: Optional[str] = None, cache: Optional[Cache] = None):
        if client is None:
            api_key = settings.effective_openai_key
            if not api_key:
                raise ConfigurationError("OpenAI API key is not configured")
            client = openai.OpenAI(api_key=api_key, timeout=settings.llm_timeout)
        self.client = client
        self.model = model or settings.openai_model
        if cache is None and settings.llm_cache_enabled:
            cache = Cache(settings.cache_dir)
        self.cache = cache

    def analyze(self, analysis_input: AnalysisInput) -> AnalysisResult:
        if not analysis_input.results:
            return AnalysisResult(analyzer=self.name)
        content = self._complete(EXTRACTION_PROMPT, build_user_message(analysis_input))
        result = parse_analysis(content, analysis_input)
        result.analyzer = self.name
        return result

    def _complete(self, system: str, user: str) -> str:
        cache_key = hashlib.md5(
            f"{self.model}|{system}|{user}|{PromptConstants.PROMPT_VERSION}".encode()
        ).hexdigest()
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached:
                logger.debug(f"Cache hit for LLM request: {cache_key[:FileConstants.CACHE_KEY_LENGTH]}...")
                return cached

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=settings.llm_max_tokens,
                temperature=settings.llm_temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise ExtractionError(f"OpenAI call failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise ExtractionError(f"Unexpected completion shape: {e}") from e
        if not content:
            raise ExtractionError("Empty completion from OpenAI")

        if self.cache is not None:
            self.cache.set(cache_key, content, expire=3600 * FileConstants.CACHE_TTL_HOURS)
        return content
