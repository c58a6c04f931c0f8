"""Tests for search query planning."""

from pointfour.core.constants import SearchConstants
from pointfour.core.models import Category
from pointfour.core.planner import build_search_queries


def test_brand_only_queries_use_category_templates():
    shoes = build_search_queries("Veja", Category.SHOES)
    bags = build_search_queries("Polene", Category.BAGS)

    assert any("comfort" in q for q in shoes)
    assert any("construction" in q for q in bags)
    assert not any('"' in q for q in shoes + bags)


def test_every_query_contains_brand():
    for category in Category:
        for q in build_search_queries("Everlane", category, "cashmere crew", True):
            assert "Everlane" in q


def test_specific_item_queries_come_first_and_quote_pair():
    queries = build_search_queries("Everlane", Category.CLOTHING, "merino wool crew neck", True)

    material = [q for q in queries if q.startswith('"Everlane merino wool crew neck"')]
    assert len(material) >= SearchConstants.MIN_MATERIAL_QUERIES + 1  # material queries + item review
    assert queries[:len(material)] == material
    assert '"Everlane merino wool crew neck" review' in queries


def test_cap_and_no_duplicates():
    queries = build_search_queries("Everlane", Category.CLOTHING, "merino wool crew neck", True)
    assert len(queries) <= SearchConstants.MAX_QUERIES
    assert len({q.lower() for q in queries}) == len(queries)


def test_item_already_prefixed_with_brand():
    queries = build_search_queries("Everlane", Category.CLOTHING, "Everlane Day Glove", True)
    assert queries[0].startswith('"Everlane Day Glove"')


def test_specific_flag_without_item_falls_back_to_base():
    assert build_search_queries("Everlane", Category.GENERAL, "", True) == build_search_queries("Everlane", Category.GENERAL)
