"""Serper web search client for PointFour."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.config import settings
from ..core.constants import ErrorConstants
from ..core.errors import UpstreamQueryError
from ..core.models import RawResult

logger = logging.getLogger(__name__)

SERPER_SEARCH_URL = "https://google.serper.dev/search"


class SerperService:
    """Web search through the Serper API.

    A failing query never raises: it is logged and yields an empty list so the
    remaining queries still contribute results.
    """

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        self.api_key = settings.serper_api_key if api_key is None else api_key
        self.session = session or requests.Session()
        self.gl = settings.serper_gl
        self.hl = settings.serper_hl
        self.num = settings.results_per_query
        self.timeout = settings.search_timeout
        self._retrying = Retrying(
            stop=stop_after_attempt(max(1, settings.max_retries)),
            wait=wait_exponential(multiplier=settings.retry_delay, max=ErrorConstants.RETRY_MAX_WAIT),
            retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
            reraise=True,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def search(self, query: str) -> List[RawResult]:
        """Run one query; returns [] on any failure."""
        try:
            return self._search(query)
        except UpstreamQueryError as e:
            logger.warning(f"Search query failed, skipping: {e.message} (query={e.query!r})")
            return []

    def _search(self, query: str) -> List[RawResult]:
        payload = {"q": query, "num": self.num, "gl": self.gl, "hl": self.hl}
        headers = {"X-API-KEY": self.api_key, "Content-Type": "application/json"}
        try:
            response = self._retrying(
                self.session.post, SERPER_SEARCH_URL, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamQueryError(f"request error: {e}", query=query) from e

        if response.status_code < 200 or response.status_code >= 300:
            raise UpstreamQueryError(f"HTTP {response.status_code}", query=query)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamQueryError(f"malformed response body: {e}", query=query) from e
        if not isinstance(data, dict):
            raise UpstreamQueryError("malformed response body: expected an object", query=query)

        organic = data.get("organic") or []
        if not isinstance(organic, list):
            raise UpstreamQueryError("malformed response body: organic is not a list", query=query)

        results = self._parse_organic(organic)
        logger.info(f"Found {len(results)} results for query: {query}")
        return results

    @staticmethod
    def _parse_organic(items: List[Dict[str, Any]]) -> List[RawResult]:
        results = []
        for item in items:
            if not isinstance(item, dict):
                continue
            url = str(item.get("link") or "").strip()
            if not url:
                continue
            results.append(RawResult(
                title=str(item.get("title") or ""),
                snippet=str(item.get("snippet") or ""),
                url=url,
            ))
        return results

    def search_many(self, queries: List[str]) -> List[RawResult]:
        """Run queries in parallel and concatenate their results in query order."""
        if not queries:
            return []
        workers = max(1, min(settings.max_search_workers, len(queries)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            batches = list(executor.map(self.search, queries))
        return [result for batch in batches for result in batch]
