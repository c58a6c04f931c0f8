"""Review page fetching and HTML-to-text cleaning."""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Optional

import requests
from bs4 import BeautifulSoup, Comment

from ..core.config import settings
from ..core.constants import SearchConstants

logger = logging.getLogger(__name__)

NOISE_TAGS = ("script", "style", "noscript", "iframe", "svg", "nav", "header", "footer", "form")
AD_PATTERN = re.compile(r"\b(?:ad|ads|advertisement|sponsored|promo-box|banner)\b", re.I)

# Tried in order; Reddit and Substack bodies first, then generic article containers.
CONTENT_SELECTORS = (
    '[data-testid="comment-top-level"]',
    ".RichTextJSON-root",
    ".usertext-body",
    ".comment",
    ".post-content",
    ".entry-content",
    "main",
    "article",
    ".content",
    ".review-content",
    ".product-description",
    "p",
)

_WHITESPACE_RE = re.compile(r"\s+")


def clean_html(html: str) -> str:
    """Visible review text from an HTML page, whitespace-collapsed and capped."""
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for tag in NOISE_TAGS:
        for elem in soup.find_all(tag):
            elem.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for elem in soup.find_all(class_=AD_PATTERN):
        elem.decompose()

    collected = ""
    for selector in CONTENT_SELECTORS:
        for node in soup.select(selector):
            text = _WHITESPACE_RE.sub(" ", node.get_text(" ", strip=True)).strip()
            if text and text not in collected:
                collected = f"{collected} {text}".strip()
        if len(collected) > SearchConstants.PAGE_TEXT_TARGET_LENGTH:
            break

    if not collected:
        collected = _WHITESPACE_RE.sub(" ", soup.get_text(" ", strip=True)).strip()
    return collected[:SearchConstants.PAGE_TEXT_MAX_LENGTH]


class PageContentFetcher:
    """Fetches review pages; any failure yields empty text for that page."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.timeout = settings.page_fetch_timeout
        self.headers = {
            "User-Agent": SearchConstants.PAGE_FETCH_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "en",
        }

    def fetch(self, url: str) -> str:
        if not url:
            return ""
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"Page fetch failed for {url}: {e}")
            return ""

        if response.status_code < 200 or response.status_code >= 400:
            logger.debug(f"Page fetch for {url} returned HTTP {response.status_code}")
            return ""
        content_type = str(response.headers.get("Content-Type") or "").lower()
        if content_type and "html" not in content_type:
            return ""
        return clean_html(response.text or "")

    def fetch_many(self, urls: Iterable[str]) -> Dict[str, str]:
        """Fetch pages in parallel; maps each unique URL to its cleaned text."""
        unique = list(dict.fromkeys(u for u in urls if u))
        if not unique:
            return {}
        workers = max(1, min(settings.page_fetch_workers, len(unique)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            texts = list(executor.map(self.fetch, unique))
        fetched = sum(1 for text in texts if text)
        logger.info(f"Fetched page text for {fetched}/{len(unique)} review pages")
        return dict(zip(unique, texts))
