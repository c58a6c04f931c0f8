"""Services for PointFour."""

from .analyzers import AnalyzerFactory
from .page_content import PageContentFetcher
from .review_search import ReviewSearchService
from .search_client import SerperService

__all__ = [
    "AnalyzerFactory",
    "PageContentFetcher",
    "ReviewSearchService",
    "SerperService",
]
