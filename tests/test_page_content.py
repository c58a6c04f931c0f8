"""Tests for review page fetching and HTML cleaning."""

from unittest.mock import Mock

import pytest
import requests

from pointfour.core.config import settings
from pointfour.core.constants import SearchConstants
from pointfour.services.page_content import PageContentFetcher, clean_html

REDDIT_PAGE = """
<html>
  <head><title>Everlane sizing</title><style>.x { color: red; }</style></head>
  <body>
    <nav>Home | Popular | All</nav>
    <script>window.tracking = true;</script>
    <div class="ad-container">Buy now, 50% off</div>
    <!-- hidden comment -->
    <div class="usertext-body">The cotton tee shrank after one wash.</div>
    <div class="usertext-body">Runs small, I sized up.</div>
    <footer>Terms</footer>
  </body>
</html>
"""


def _response(status_code=200, text="", content_type="text/html; charset=utf-8"):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.headers = {"Content-Type": content_type}
    return response


class TestCleanHtml:
    """HTML to review text."""

    def test_keeps_review_text_and_drops_noise(self):
        text = clean_html(REDDIT_PAGE)
        assert "The cotton tee shrank after one wash." in text
        assert "Runs small, I sized up." in text
        for noise in ("Popular", "tracking", "50% off", "hidden comment", "Terms", "color: red"):
            assert noise not in text

    def test_falls_back_to_page_text(self):
        assert clean_html("<html><body><div>Only   plain\n text</div></body></html>") == "Only plain text"

    def test_empty_input(self):
        assert clean_html("") == ""
        assert clean_html("   ") == ""

    def test_length_capped(self):
        html = "<article><p>" + ("well made " * 600) + "</p></article>"
        assert len(clean_html(html)) == SearchConstants.PAGE_TEXT_MAX_LENGTH

    def test_nested_blocks_not_repeated(self):
        text = clean_html("<main><article><p>Fits true to size.</p></article></main>")
        assert text.count("Fits true to size.") == 1


class TestPageContentFetcher:
    """Fetching with a mocked HTTP session."""

    def setup_method(self):
        self.session = Mock()

    def test_fetch_cleans_page(self):
        self.session.get.return_value = _response(text=REDDIT_PAGE)
        fetcher = PageContentFetcher(session=self.session)

        text = fetcher.fetch("https://www.reddit.com/r/ffa/1")

        assert "shrank after one wash" in text
        args, kwargs = self.session.get.call_args
        assert args[0] == "https://www.reddit.com/r/ffa/1"
        assert kwargs["headers"]["User-Agent"] == SearchConstants.PAGE_FETCH_USER_AGENT
        assert kwargs["timeout"] == settings.page_fetch_timeout

    @pytest.mark.parametrize("response", [
        _response(status_code=404, text=REDDIT_PAGE),
        _response(status_code=500, text=REDDIT_PAGE),
        _response(text="%PDF-1.4", content_type="application/pdf"),
    ])
    def test_unusable_responses_give_empty_text(self, response):
        self.session.get.return_value = response
        assert PageContentFetcher(session=self.session).fetch("https://e.com/x") == ""

    def test_network_error_gives_empty_text(self):
        self.session.get.side_effect = requests.Timeout("slow")
        assert PageContentFetcher(session=self.session).fetch("https://e.com/x") == ""

    def test_fetch_many_maps_unique_urls(self):
        def get(url, headers=None, timeout=None):
            if "bad" in url:
                raise requests.ConnectionError("down")
            return _response(text=f"<p>Review of {url}</p>")

        self.session.get.side_effect = get
        texts = PageContentFetcher(session=self.session).fetch_many(
            ["https://a.com/1", "https://bad.com/2", "https://a.com/1", ""]
        )

        assert texts == {"https://a.com/1": "Review of https://a.com/1", "https://bad.com/2": ""}
        assert self.session.get.call_count == 2

    def test_fetch_many_empty(self):
        assert PageContentFetcher(session=self.session).fetch_many([]) == {}
        self.session.get.assert_not_called()
