"""Review search orchestration."""

import logging
from typing import Optional, Tuple

from ..core.category import detect_category, is_specific_item_search, validate_fashion_brand
from ..core.config import settings
from ..core.errors import ConfigurationError, ValidationError
from ..core.models import (
    AnalysisInput, BrandFitSummary, ConfidenceTier, SearchRequest, SearchResponse,
)
from ..core.planner import build_search_queries
from ..core.sources import build_reviews, group_reviews, shortlist_results
from ..core.summary import build_brand_fit_summary
from .analyzers import Analyzer, AnalyzerFactory
from .page_content import PageContentFetcher
from .search_client import SerperService

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Review search is unavailable right now. Please try again later."


class ReviewSearchService:
    """Runs one review search request end to end.

    ``search`` always returns a SearchResponse; failures become degraded
    responses with an explanatory summary and an HTTP-style status code.
    """

    def __init__(self, search_client: Optional[SerperService] = None, analyzer: Optional[Analyzer] = None,
                 page_fetcher: Optional[PageContentFetcher] = None):
        self.search_client = search_client or SerperService()
        self.analyzer = analyzer or AnalyzerFactory.create()
        if page_fetcher is None and settings.fetch_page_content:
            page_fetcher = PageContentFetcher()
        self.page_fetcher = page_fetcher

    @staticmethod
    def resolve_request(request: SearchRequest) -> Tuple[str, str, bool]:
        """Apply URL-extraction hints; returns (brand, item_name, forced_specific)."""
        brand = (request.brand or "").strip()
        item_name = (request.item_name or "").strip()
        forced_specific = False

        hint = request.url_extraction
        if hint is not None:
            if hint.brand and str(hint.confidence or "").lower() == "high":
                brand = hint.brand.strip()
            if hint.item_name and hint.item_name.strip():
                item_name = hint.item_name.strip()
                forced_specific = True
        return brand, item_name, forced_specific

    def search(self, request: SearchRequest) -> SearchResponse:
        brand, item_name, forced_specific = self.resolve_request(request)
        try:
            return self._run(brand, item_name, forced_specific)
        except ValidationError as e:
            logger.info(f"Rejected review search for '{brand}': {e.message}")
            return self._degraded(brand, item_name, e.message, 400)
        except ConfigurationError as e:
            logger.error(f"Review search unavailable: {e.message}")
            return self._degraded(brand, item_name, UNAVAILABLE_MESSAGE, 503)
        except Exception as e:
            logger.exception(f"Review search failed for '{brand}': {e}")
            return self._degraded(brand, item_name, UNAVAILABLE_MESSAGE, 500)

    def _run(self, brand: str, item_name: str, forced_specific: bool) -> SearchResponse:
        brand = validate_fashion_brand(brand)
        if not self.search_client.is_configured:
            raise ConfigurationError("Search provider API key is not configured")

        category = detect_category(brand, item_name)
        is_specific = forced_specific or is_specific_item_search(item_name, brand)
        queries = build_search_queries(brand, category, item_name, is_specific)
        logger.info(f"Searching reviews for {brand} ({category.value}, specific={is_specific}) with {len(queries)} queries")

        results = self.search_client.search_many(queries)
        analysis = self.analyzer.analyze(AnalysisInput(
            results=results,
            brand=brand,
            category=category,
            item_name=item_name,
            is_specific_item=is_specific,
        ))

        summary = build_brand_fit_summary(analysis, len(results), category, brand)
        page_texts = {}
        if self.page_fetcher is not None:
            page_texts = self.page_fetcher.fetch_many(r.url for r in shortlist_results(results))
        reviews = build_reviews(results, brand, item_name, page_texts)
        return SearchResponse(
            brand_fit_summary=summary,
            reviews=reviews,
            grouped_reviews=group_reviews(reviews),
            total_results=len(results),
            brand=brand,
            item_name=item_name,
            category=category,
            search_queries=queries,
        )

    @staticmethod
    def _degraded(brand: str, item_name: str, message: str, status_code: int) -> SearchResponse:
        return SearchResponse(
            brand_fit_summary=BrandFitSummary(summary=message, confidence=ConfidenceTier.LOW),
            success=False,
            status_code=status_code,
            message=message,
            brand=brand,
            item_name=item_name,
        )
