"""End-to-end tests for review search orchestration."""

from unittest.mock import Mock

from pointfour.core.config import settings
from pointfour.core.errors import ExtractionError
from pointfour.core.fallback import FallbackAnalyzer
from pointfour.core.models import (
    Category, GROUP_NAMES, RawResult, SearchRequest, UrlExtraction,
)
from pointfour.services.analyzers import FallbackChain
from pointfour.services.page_content import PageContentFetcher
from pointfour.services.review_search import ReviewSearchService


class FakeSearch:
    """Search client stand-in returning canned results."""

    def __init__(self, results=None, configured=True, error=None):
        self.results = results or []
        self.is_configured = configured
        self.error = error
        self.queries = []

    def search_many(self, queries):
        self.queries.extend(queries)
        if self.error is not None:
            raise self.error
        return list(self.results)


RUNS_SMALL = [
    RawResult("Everlane sizing?", "I bought the Everlane tee and it runs small.", "https://www.reddit.com/r/ffa/1"),
    RawResult("Everlane haul", "Everything runs small, I always size up.", "https://www.youtube.com/watch?v=2"),
    RawResult("Everlane review", "Their denim runs small too.", "https://www.everlane.com/blog/3"),
]


def _service(search, primary=None):
    return ReviewSearchService(search_client=search, analyzer=FallbackChain(primary, FallbackAnalyzer()))


def test_empty_search_scenario():
    response = _service(FakeSearch()).search(SearchRequest(brand="Everlane"))
    data = response.to_dict()

    assert response.success
    assert "0 search results" in data["brandFitSummary"]["summary"]
    assert data["brandFitSummary"]["hasData"] is False
    assert data["totalResults"] == 0
    assert all(data["groupedReviews"][name] == [] for name in GROUP_NAMES)
    assert data["category"] == "clothing"


def test_full_flow():
    search = FakeSearch(RUNS_SMALL)
    response = _service(search).search(SearchRequest(brand="Everlane"))

    summary = response.brand_fit_summary
    assert summary.has_data
    assert "runs small" in summary.summary
    assert "Reddit" in summary.sources
    assert response.total_results == 3
    assert len(response.grouped_reviews.primary) == 1
    assert len(response.grouped_reviews.videos) == 1
    assert len(response.grouped_reviews.other) == 1
    assert response.search_queries == search.queries


def test_page_text_enriches_reviews():
    fetcher = Mock()
    fetcher.fetch_many.return_value = {RUNS_SMALL[0].url: "The cotton shrank after one wash."}
    service = ReviewSearchService(
        search_client=FakeSearch(RUNS_SMALL), analyzer=FallbackAnalyzer(), page_fetcher=fetcher,
    )

    response = service.search(SearchRequest(brand="Everlane"))

    fetched_urls = list(fetcher.fetch_many.call_args[0][0])
    assert fetched_urls == [r.url for r in RUNS_SMALL]
    enriched, plain = response.reviews[0], response.reviews[1]
    assert "may-shrink" in enriched.tags
    assert enriched.full_content.endswith("The cotton shrank after one wash.")
    assert "may-shrink" not in plain.tags
    assert plain.full_content == RUNS_SMALL[1].text


def test_page_fetching_follows_setting(monkeypatch):
    monkeypatch.setattr(settings, "fetch_page_content", False)
    assert _service(FakeSearch()).page_fetcher is None

    monkeypatch.setattr(settings, "fetch_page_content", True)
    assert isinstance(_service(FakeSearch()).page_fetcher, PageContentFetcher)


def test_primary_failure_still_returns_summary():
    primary = Mock()
    primary.name = "openai"
    primary.analyze.side_effect = ExtractionError("malformed JSON")

    response = _service(FakeSearch(RUNS_SMALL), primary).search(SearchRequest(brand="Everlane"))

    assert response.success
    assert response.brand_fit_summary.has_data
    primary.analyze.assert_called_once()


def test_search_not_configured():
    response = _service(FakeSearch(configured=False)).search(SearchRequest(brand="Everlane"))

    assert response.status_code == 503
    assert not response.success
    assert "search is unavailable" in response.brand_fit_summary.summary
    assert response.reviews == []
    assert response.total_results == 0


def test_non_fashion_brand_rejected():
    search = FakeSearch(RUNS_SMALL)
    response = _service(search).search(SearchRequest(brand="Starbucks"))

    assert response.status_code == 400
    assert "fashion" in response.brand_fit_summary.summary
    assert not response.brand_fit_summary.has_data
    assert search.queries == []


def test_unexpected_failure_degrades():
    response = _service(FakeSearch(error=RuntimeError("boom"))).search(SearchRequest(brand="Everlane"))

    assert response.status_code == 500
    assert "search is unavailable" in response.brand_fit_summary.summary
    assert response.to_dict()["reviews"] == []


class TestUrlExtraction:
    """URL extraction hints override the request."""

    def test_high_confidence_brand_overrides(self):
        request = SearchRequest(brand="Evrlane", url_extraction=UrlExtraction(brand="Everlane", confidence="high"))
        assert ReviewSearchService.resolve_request(request) == ("Everlane", "", False)

    def test_low_confidence_brand_ignored(self):
        request = SearchRequest(brand="Everlane", url_extraction=UrlExtraction(brand="Other", confidence="low"))
        assert ReviewSearchService.resolve_request(request)[0] == "Everlane"

    def test_item_name_always_overrides_and_forces_specific(self):
        search = FakeSearch()
        request = SearchRequest.from_dict({
            "brand": "Everlane",
            "itemName": "tee",
            "urlExtraction": {"itemName": "Day Glove", "confidence": "low"},
        })

        response = _service(search).search(request)

        assert response.item_name == "Day Glove"
        assert search.queries[0].startswith('"Everlane Day Glove"')
        assert response.category == Category.CLOTHING
