"""Search query planning."""

from typing import List

from .constants import SearchConstants
from .models import Category

BASE_QUERY_TEMPLATES = {
    Category.SHOES: (
        "{brand} shoes fit sizing review",
        "{brand} shoes comfort review",
        "{brand} shoes durability quality",
    ),
    Category.BAGS: (
        "{brand} bag material quality review",
        "{brand} bag construction durability",
        "{brand} bag review reddit",
    ),
    Category.CLOTHING: (
        "{brand} sizing fit review",
        "{brand} fabric quality review",
        "{brand} after washing shrink review",
    ),
    Category.ACCESSORIES: (
        "{brand} material quality review",
        "{brand} durability review",
        "{brand} review reddit",
    ),
    Category.GENERAL: (
        "{brand} reviews",
        "{brand} sizing fit",
        "{brand} quality review reddit",
    ),
}

MATERIAL_QUERY_TEMPLATES = (
    '"{pair}" material OR fabric OR composition',
    '"{pair}" cotton OR wool OR polyester OR linen OR cashmere OR viscose',
    '"{pair}" "100%" OR blend OR "made of"',
    '"{pair}" fabric feel thickness',
    '"{pair}" care label washing',
)

ITEM_REVIEW_TEMPLATE = '"{pair}" review'


def _brand_item_pair(brand: str, item_name: str) -> str:
    if item_name.lower().startswith(brand.lower()):
        return item_name
    return f"{brand} {item_name}"


def _material_query_count(category: Category) -> int:
    wanted = SearchConstants.CLOTHING_MATERIAL_QUERIES if category == Category.CLOTHING else SearchConstants.MIN_MATERIAL_QUERIES
    return max(SearchConstants.MIN_MATERIAL_QUERIES, min(SearchConstants.MAX_MATERIAL_QUERIES, wanted))


def build_search_queries(brand: str, category: Category, item_name: str = "",
                         is_specific_item: bool = False) -> List[str]:
    """Build the ordered query list for one request.

    Specific-item requests get material-composition queries and an item review
    query ahead of the category's base queries. Every query contains the
    brand, duplicates are dropped and the list is capped.
    """
    brand = " ".join((brand or "").split())
    item_name = " ".join((item_name or "").split())

    queries: List[str] = []
    if is_specific_item and item_name:
        pair = _brand_item_pair(brand, item_name)
        for template in MATERIAL_QUERY_TEMPLATES[:_material_query_count(category)]:
            queries.append(template.format(pair=pair))
        queries.append(ITEM_REVIEW_TEMPLATE.format(pair=pair))

    templates = BASE_QUERY_TEMPLATES.get(category, BASE_QUERY_TEMPLATES[Category.GENERAL])
    queries.extend(t.format(brand=brand) for t in templates)

    seen = set()
    planned = []
    for q in queries:
        key = q.lower()
        if key in seen:
            continue
        seen.add(key)
        planned.append(q)
    return planned[:SearchConstants.MAX_QUERIES]
