"""Tests for the Serper search client."""

from unittest.mock import Mock, patch

import pytest
import requests

from pointfour.core.config import settings
from pointfour.core.models import RawResult
from pointfour.services.search_client import SERPER_SEARCH_URL, SerperService


def _response(status_code=200, body=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


class TestSerperService:
    """Serper client behaviour with a mocked HTTP session."""

    def setup_method(self):
        self.session = Mock()

    @pytest.fixture(autouse=True)
    def _no_retry_wait(self, monkeypatch):
        monkeypatch.setattr(settings, "retry_delay", 0)
        monkeypatch.setattr(settings, "max_retries", 3)

    def test_is_configured(self):
        assert SerperService(api_key="key", session=self.session).is_configured
        assert not SerperService(api_key="", session=self.session).is_configured

    def test_parses_organic_results(self):
        self.session.post.return_value = _response(body={"organic": [
            {"title": "Everlane review", "snippet": "Runs small.", "link": "https://www.reddit.com/r/x"},
            {"title": "No link", "snippet": "dropped"},
            "garbage",
        ]})
        service = SerperService(api_key="key", session=self.session)

        results = service.search("Everlane sizing")

        assert results == [RawResult("Everlane review", "Runs small.", "https://www.reddit.com/r/x")]
        args, kwargs = self.session.post.call_args
        assert args[0] == SERPER_SEARCH_URL
        assert kwargs["headers"]["X-API-KEY"] == "key"
        assert kwargs["json"] == {"q": "Everlane sizing", "num": settings.results_per_query,
                                  "gl": settings.serper_gl, "hl": settings.serper_hl}

    def test_non_2xx_returns_empty(self):
        self.session.post.return_value = _response(status_code=403, body={"message": "forbidden"})
        assert SerperService(api_key="key", session=self.session).search("q") == []

    def test_malformed_body_returns_empty(self):
        self.session.post.return_value = _response(json_error=ValueError("not json"))
        assert SerperService(api_key="key", session=self.session).search("q") == []

        self.session.post.return_value = _response(body=["not", "an", "object"])
        assert SerperService(api_key="key", session=self.session).search("q") == []

    @pytest.mark.parametrize("organic", [5, True, "text", {"title": "t"}])
    def test_non_list_organic_returns_empty(self, organic):
        self.session.post.return_value = _response(body={"organic": organic})
        assert SerperService(api_key="key", session=self.session).search("q") == []

    def test_search_many_survives_malformed_body(self):
        def post(url, json=None, headers=None, timeout=None):
            if json["q"] == "bad":
                return _response(body={"organic": 5})
            return _response(body={"organic": [{"title": json["q"], "snippet": "", "link": "https://e.com"}]})

        self.session.post.side_effect = post
        results = SerperService(api_key="key", session=self.session).search_many(["good", "bad"])

        assert [r.title for r in results] == ["good"]

    def test_network_errors_retried_then_empty(self):
        self.session.post.side_effect = requests.ConnectionError("down")
        service = SerperService(api_key="key", session=self.session)

        assert service.search("q") == []
        assert self.session.post.call_count == 3

    def test_retry_recovers(self):
        self.session.post.side_effect = [
            requests.Timeout("slow"),
            _response(body={"organic": [{"title": "t", "snippet": "s", "link": "https://e.com"}]}),
        ]
        results = SerperService(api_key="key", session=self.session).search("q")
        assert [r.url for r in results] == ["https://e.com"]

    def test_search_many_keeps_query_order_and_duplicates(self):
        service = SerperService(api_key="key", session=self.session)

        def fake_search(query):
            return [RawResult(query, "same", "https://e.com/same")]

        with patch.object(service, "search", side_effect=fake_search):
            results = service.search_many(["first", "second", "third"])

        assert [r.title for r in results] == ["first", "second", "third"]

    def test_search_many_tolerates_failing_query(self):
        def post(url, json=None, headers=None, timeout=None):
            if json["q"] == "bad":
                return _response(status_code=500)
            return _response(body={"organic": [{"title": json["q"], "snippet": "", "link": "https://e.com"}]})

        self.session.post.side_effect = post
        results = SerperService(api_key="key", session=self.session).search_many(["good", "bad", "also good"])

        assert [r.title for r in results] == ["good", "also good"]
