"""Core modules for PointFour."""

from .models import *
from .config import settings
from .errors import PointFourError, ConfigurationError, UpstreamQueryError, ExtractionError, ValidationError
from .category import detect_category, is_specific_item_search, validate_fashion_brand
from .planner import build_search_queries
from .fallback import FallbackAnalyzer

__all__ = [
    "settings",
    "RawResult",
    "Category",
    "Aspect",
    "ConfidenceTier",
    "AspectSection",
    "AnalysisInput",
    "AnalysisResult",
    "Review",
    "BrandFitSummary",
    "GroupedReviews",
    "SearchRequest",
    "SearchResponse",
    "PointFourError",
    "ConfigurationError",
    "UpstreamQueryError",
    "ExtractionError",
    "ValidationError",
    "detect_category",
    "is_specific_item_search",
    "validate_fashion_brand",
    "build_search_queries",
    "FallbackAnalyzer",
]
