"""Data models for PointFour."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any


class Category(Enum):
    CLOTHING = "clothing"
    BAGS = "bags"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    GENERAL = "general"


class Aspect(Enum):
    FIT = "fit"
    QUALITY = "quality"
    FABRIC = "fabric"
    WASH_CARE = "washCare"
    MATERIALS = "materials"


class ConfidenceTier(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    @classmethod
    def parse(cls, value: Any) -> "ConfidenceTier":
        """Parse a tier name, defaulting to LOW for anything unrecognized."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.LOW


_TIER_RANK = {ConfidenceTier.LOW: 0, ConfidenceTier.MEDIUM: 1, ConfidenceTier.HIGH: 2}


def best_tier(tiers) -> ConfidenceTier:
    """Highest tier in an iterable; LOW when empty."""
    return max(tiers, key=lambda t: t.rank, default=ConfidenceTier.LOW)


@dataclass(frozen=True)
class RawResult:
    """One search-engine hit."""
    title: str
    snippet: str
    url: str

    @property
    def text(self) -> str:
        return f"{self.title} {self.snippet}".strip()


@dataclass
class Evidence:
    """A quoted snippet and the result it was taken from."""
    text: str
    origin: Optional[RawResult] = None


@dataclass
class AspectSection:
    """Recommendation for one aspect, backed by evidence quotes."""
    confidence: ConfidenceTier
    evidence: List[Evidence]
    recommendation: Optional[str] = None
    composition: Optional[List[str]] = None  # materials sections only

    @property
    def evidence_texts(self) -> List[str]:
        return [e.text for e in self.evidence]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.composition is not None:
            data["composition"] = list(self.composition)
        else:
            data["recommendation"] = self.recommendation
        data["confidence"] = self.confidence.value
        data["evidence"] = self.evidence_texts
        return data


@dataclass
class AnalysisInput:
    """Everything an analyzer needs for one request."""
    results: List[RawResult]
    brand: str
    category: Category
    item_name: str = ""
    is_specific_item: bool = False


@dataclass
class AnalysisResult:
    """Per-aspect sections produced by an analyzer."""
    sections: Dict[Aspect, AspectSection] = field(default_factory=dict)
    overall_confidence: ConfidenceTier = ConfidenceTier.LOW
    analyzer: str = ""

    @property
    def has_data(self) -> bool:
        return bool(self.sections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": {a.value: s.to_dict() for a, s in self.sections.items()},
            "overallConfidence": self.overall_confidence.value,
            "analyzer": self.analyzer,
        }


@dataclass
class Review:
    """A search result normalized for display."""
    title: str
    snippet: str
    url: str
    source: str
    tags: List[str]
    confidence: ConfidenceTier
    brand_level: bool
    full_content: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "snippet": self.snippet,
            "url": self.url,
            "source": self.source,
            "tags": list(self.tags),
            "confidence": self.confidence.value,
            "brandLevel": self.brand_level,
            "fullContent": self.full_content,
        }


@dataclass
class BrandFitSummary:
    """Narrative summary plus the sections it was built from."""
    summary: str
    confidence: ConfidenceTier
    sections: Dict[Aspect, AspectSection] = field(default_factory=dict)
    total_results: int = 0
    sources: List[str] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.sections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "confidence": self.confidence.value,
            "sections": {a.value: s.to_dict() for a, s in self.sections.items()},
            "hasData": self.has_data,
            "totalResults": self.total_results,
            "sources": list(self.sources),
        }


GROUP_NAMES = ("primary", "community", "blogs", "videos", "social", "publications", "other")


@dataclass
class GroupedReviews:
    """Reviews partitioned by source family."""
    primary: List[Review] = field(default_factory=list)
    community: List[Review] = field(default_factory=list)
    blogs: List[Review] = field(default_factory=list)
    videos: List[Review] = field(default_factory=list)
    social: List[Review] = field(default_factory=list)
    publications: List[Review] = field(default_factory=list)
    other: List[Review] = field(default_factory=list)

    def bucket(self, name: str) -> List[Review]:
        return getattr(self, name)

    def all_reviews(self) -> List[Review]:
        return [r for name in GROUP_NAMES for r in self.bucket(name)]

    def to_dict(self) -> Dict[str, Any]:
        return {name: [r.to_dict() for r in self.bucket(name)] for name in GROUP_NAMES}


@dataclass
class UrlExtraction:
    """Brand/item hints harvested from the product page URL."""
    brand: Optional[str] = None
    item_name: Optional[str] = None
    confidence: Optional[str] = None


@dataclass
class SearchRequest:
    """Incoming review search request."""
    brand: str
    item_name: str = ""
    url_extraction: Optional[UrlExtraction] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchRequest":
        hint = data.get("urlExtraction")
        extraction = None
        if isinstance(hint, dict):
            extraction = UrlExtraction(
                brand=hint.get("brand"),
                item_name=hint.get("itemName"),
                confidence=hint.get("confidence"),
            )
        return cls(
            brand=str(data.get("brand") or ""),
            item_name=str(data.get("itemName") or ""),
            url_extraction=extraction,
        )


@dataclass
class SearchResponse:
    """Standard response envelope; every request produces one."""
    brand_fit_summary: BrandFitSummary
    reviews: List[Review] = field(default_factory=list)
    grouped_reviews: GroupedReviews = field(default_factory=GroupedReviews)
    total_results: int = 0
    success: bool = True
    status_code: int = 200
    message: str = ""
    brand: str = ""
    item_name: str = ""
    category: Optional[Category] = None
    search_queries: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "statusCode": self.status_code,
            "brand": self.brand,
            "itemName": self.item_name or None,
            "category": self.category.value if self.category else None,
            "brandFitSummary": self.brand_fit_summary.to_dict(),
            "reviews": [r.to_dict() for r in self.reviews],
            "groupedReviews": self.grouped_reviews.to_dict(),
            "totalResults": self.total_results,
            "searchQueries": list(self.search_queries),
            "message": self.message,
        }
