"""Source naming, review normalization and source-family grouping."""

import logging
import re
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

from .aspect import DEFAULT_TAG, TAG_RULES, keyword_regex
from .constants import SearchConstants
from .evidence import mentions_item, snippet_key
from .models import AspectSection, GroupedReviews, GROUP_NAMES, RawResult, Review
from .scoring import review_confidence

logger = logging.getLogger(__name__)

# Exact registrable domain -> display label
SOURCE_LABELS = {
    "reddit.com": "Reddit",
    "redd.it": "Reddit",
    "substack.com": "Substack",
    "youtube.com": "YouTube",
    "youtu.be": "YouTube",
    "instagram.com": "Instagram",
    "pinterest.com": "Pinterest",
    "tiktok.com": "TikTok",
    "styleforum.net": "Styleforum",
    "thefashionspot.com": "The Fashion Spot",
    "purseforum.com": "PurseForum",
    "fashionista.com": "Fashionista",
    "stylebistro.com": "StyleBistro",
    "medium.com": "Medium",
    "wordpress.com": "WordPress",
    "blogspot.com": "Blogspot",
    "manrepeller.com": "Man Repeller",
    "thecut.com": "The Cut",
    "refinery29.com": "Refinery29",
    "bustle.com": "Bustle",
    "whowhatwear.com": "Who What Wear",
    "racked.com": "Racked",
    "stylecaster.com": "StyleCaster",
    "vogue.com": "Vogue",
    "vogue.co.uk": "British Vogue",
    "elle.com": "Elle",
    "cosmopolitan.com": "Cosmopolitan",
    "glamour.com": "Glamour",
    "instyle.com": "InStyle",
    "people.com": "People",
    "usmagazine.com": "Us Weekly",
    "harpersbazaar.com": "Harper's Bazaar",
    "gq.com": "GQ",
    "nytimes.com": "The New York Times",
    "theguardian.com": "The Guardian",
    "trustpilot.com": "Trustpilot",
}

# Ordered: the first family whose marker occurs in the URL wins.
SOURCE_FAMILIES = (
    ("primary", ("reddit", "redd.it", "substack")),
    ("community", ("styleforum", "thefashionspot", "purseforum", "fashionista", "stylebistro")),
    ("blogs", (
        "medium.com", "wordpress", "blogspot", "manrepeller", "thecut", "refinery29",
        "bustle", "whowhatwear", "racked", "stylecaster",
    )),
    ("videos", ("youtube", "youtu.be", "vimeo")),
    ("social", ("instagram", "pinterest", "tiktok", "facebook")),
    ("publications", (
        "vogue", "elle.com", "cosmopolitan", "glamour", "instyle", "people.com",
        "usmagazine", "harpersbazaar", "gq.com",
    )),
)

_HOST_PREFIXES = ("www.", "m.", "old.")
_HOST_RE = re.compile(r"^[a-z0-9.-]+$")
_TAG_PATTERNS = [(tag, keyword_regex(words)) for tag, words in TAG_RULES]


def _host(url: str) -> str:
    url = (url or "").strip()
    if not url:
        return ""
    if "://" not in url:
        url = "http://" + url
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""
    if not _HOST_RE.match(host):
        return ""
    for prefix in _HOST_PREFIXES:
        if host.startswith(prefix):
            host = host[len(prefix):]
            break
    return host


def source_name(url: str) -> str:
    """Human-readable source label for a URL; "" when the URL has no usable host."""
    host = _host(url)
    if not host:
        return ""
    labels = host.split(".")
    for i in range(len(labels) - 1):
        candidate = ".".join(labels[i:])
        if candidate in SOURCE_LABELS:
            return SOURCE_LABELS[candidate]
    first = labels[0]
    return first[:1].upper() + first[1:] if first else ""


def collect_sources(sections: Dict[object, AspectSection]) -> List[str]:
    """Source labels of evidence origins, unique, in first-seen order."""
    sources: List[str] = []
    for section in sections.values():
        for evidence in section.evidence:
            if evidence.origin is None:
                continue
            label = source_name(evidence.origin.url)
            if label and label not in sources:
                sources.append(label)
    return sources


def review_tags(text: str) -> List[str]:
    tags = [tag for tag, pattern in _TAG_PATTERNS if pattern.search(text or "")]
    return tags or [DEFAULT_TAG]


def shortlist_results(results: Iterable[RawResult]) -> List[RawResult]:
    """Results kept as reviews: repeated URLs and snippet prefixes dropped, capped."""
    shortlist: List[RawResult] = []
    seen_urls = set()
    seen_snippets = set()
    for result in results:
        if len(shortlist) >= SearchConstants.MAX_REVIEWS:
            break
        key = snippet_key(result.snippet or result.title)
        if result.url in seen_urls or (key and key in seen_snippets):
            continue
        seen_urls.add(result.url)
        if key:
            seen_snippets.add(key)
        shortlist.append(result)
    return shortlist


def build_reviews(results: Iterable[RawResult], brand: str, item_name: str = "",
                  page_texts: Optional[Dict[str, str]] = None) -> List[Review]:
    """Normalize results into reviews, dropping repeated URLs and snippets.

    ``page_texts`` maps a URL to cleaned page text; when present it is appended
    to the snippet for tagging, confidence and ``full_content``.
    """
    page_texts = page_texts or {}
    reviews: List[Review] = []
    for result in shortlist_results(results):
        text = f"{result.text} {page_texts.get(result.url, '')}".strip()
        reviews.append(Review(
            title=result.title,
            snippet=result.snippet,
            url=result.url,
            source=source_name(result.url),
            tags=review_tags(text),
            confidence=review_confidence(text),
            brand_level=not item_name or not mentions_item(text, item_name),
            full_content=text[:SearchConstants.FULL_CONTENT_LENGTH],
        ))
    logger.debug(f"Normalized {len(reviews)} reviews for {brand}")
    return reviews


def source_family(url: str) -> str:
    """Family bucket for a URL; markers are tested against the whole lower-cased URL."""
    text = (url or "").lower()
    for family, markers in SOURCE_FAMILIES:
        if any(marker in text for marker in markers):
            return family
    return "other"


def group_reviews(reviews: Iterable[Review]) -> GroupedReviews:
    """Partition reviews into source-family buckets; every review lands in exactly one."""
    grouped = GroupedReviews()
    for review in reviews:
        family = source_family(review.url)
        if family not in GROUP_NAMES:
            family = "other"
        grouped.bucket(family).append(review)
    return grouped
