"""Tests for source naming, review normalization and grouping."""

import pytest

from pointfour.core.constants import SearchConstants
from pointfour.core.models import (
    Aspect, AspectSection, ConfidenceTier, Evidence, GROUP_NAMES, RawResult,
)
from pointfour.core.sources import (
    build_reviews, collect_sources, group_reviews, review_tags, source_family, source_name,
)
from pointfour.core.scoring import review_confidence


@pytest.mark.parametrize("url,expected", [
    ("https://www.reddit.com/r/femalefashionadvice/comments/abc", "Reddit"),
    ("https://old.reddit.com/r/malefashionadvice", "Reddit"),
    ("https://someone.substack.com/p/review", "Substack"),
    ("https://m.youtube.com/watch?v=1", "YouTube"),
    ("https://www.vogue.co.uk/article/x", "British Vogue"),
    ("https://shop.example.com/item", "Shop"),
    ("example.org/path", "Example"),
    ("", ""),
    ("not a url", ""),
    ("http://[broken", ""),
])
def test_source_name(url, expected):
    assert source_name(url) == expected


def test_collect_sources_unique_in_order():
    reddit = RawResult("t", "s", "https://www.reddit.com/r/a")
    vogue = RawResult("t", "s", "https://www.vogue.com/a")
    sections = {
        Aspect.FIT: AspectSection(ConfidenceTier.LOW, [Evidence("a", reddit), Evidence("b", vogue)], "r"),
        Aspect.QUALITY: AspectSection(ConfidenceTier.LOW, [Evidence("c", reddit), Evidence("d", None)], "r"),
        Aspect.FABRIC: AspectSection(ConfidenceTier.LOW, [Evidence("e", RawResult("t", "s", ""))], "r"),
    }
    assert collect_sources(sections) == ["Reddit", "Vogue"]


def test_review_tags():
    assert review_tags("This runs small and is 100% cotton") == ["runs-small", "cotton"]
    assert review_tags("Nothing to see here") == ["general-review"]


def test_review_confidence():
    assert review_confidence("I bought this and it runs small, great quality") == ConfidenceTier.HIGH
    assert review_confidence("Great quality overall") == ConfidenceTier.MEDIUM
    assert review_confidence("Store opening hours") == ConfidenceTier.LOW


class TestBuildReviews:
    """Review normalization."""

    def test_dedup_by_url_and_snippet_prefix(self):
        results = [
            RawResult("A", "The Everlane tee runs small.", "https://www.reddit.com/1"),
            RawResult("A again", "Different text entirely.", "https://www.reddit.com/1"),
            RawResult("B", "  the everlane TEE runs small.  ", "https://other.com/2"),
            RawResult("C", "Something new.", "https://other.com/3"),
        ]
        reviews = build_reviews(results, "Everlane")
        assert [r.url for r in reviews] == ["https://www.reddit.com/1", "https://other.com/3"]

    def test_cap(self):
        results = [RawResult(f"t{i}", f"unique snippet number {i}", f"https://e.com/{i}") for i in range(30)]
        reviews = build_reviews(results, "Everlane")
        assert len(reviews) == SearchConstants.MAX_REVIEWS
        assert reviews[0].url == "https://e.com/0"

    def test_fields(self):
        result = RawResult("Day Glove review", "The Everlane Day Glove runs small.", "https://www.reddit.com/r/x")
        review = build_reviews([result], "Everlane", "Day Glove")[0]

        assert review.source == "Reddit"
        assert "runs-small" in review.tags
        assert review.brand_level is False
        assert review.full_content == result.text
        assert review.to_dict()["brandLevel"] is False

    def test_brand_level(self):
        result = RawResult("Everlane sizing", "Everlane runs small overall.", "https://e.com/1")
        assert build_reviews([result], "Everlane")[0].brand_level is True
        assert build_reviews([result], "Everlane", "Day Glove")[0].brand_level is True


class TestGrouping:
    """Source-family partition."""

    def test_reddit_is_primary(self):
        reviews = build_reviews([RawResult("t", "s", "https://www.reddit.com/r/x")], "Everlane")
        grouped = group_reviews(reviews)
        assert len(grouped.primary) == 1
        assert grouped.other == []

    def test_reddit_link_behind_redirect_is_primary(self):
        url = "https://www.google.com/url?q=https://www.reddit.com/r/femalefashionadvice/comments/1"
        grouped = group_reviews(build_reviews([RawResult("t", "s", url)], "Everlane"))
        assert [r.url for r in grouped.primary] == [url]
        assert grouped.other == []

    @pytest.mark.parametrize("url,family", [
        ("https://x.substack.com/p/1", "primary"),
        ("https://www.styleforum.net/threads/1", "community"),
        ("https://medium.com/@a/b", "blogs"),
        ("https://youtu.be/abc", "videos"),
        ("https://www.pinterest.com/pin/1", "social"),
        ("https://www.vogue.com/article", "publications"),
        ("https://www.everlane.com/products/x", "other"),
    ])
    def test_families(self, url, family):
        assert source_family(url) == family

    def test_partition_is_total_and_disjoint(self):
        urls = [
            "https://www.reddit.com/1", "https://youtube.com/2", "https://vogue.com/3",
            "https://blog.example.com/4", "https://www.instagram.com/5", "https://purseforum.com/6",
            "https://a.wordpress.com/7", "not a url",
        ]
        results = [RawResult(f"t{i}", f"snippet {i}", u) for i, u in enumerate(urls)]
        reviews = build_reviews(results, "Everlane")
        grouped = group_reviews(reviews)

        bucketed = grouped.all_reviews()
        assert sum(len(grouped.bucket(name)) for name in GROUP_NAMES) == len(reviews)
        assert len(bucketed) == len(reviews)
        assert {id(r) for r in bucketed} == {id(r) for r in reviews}
