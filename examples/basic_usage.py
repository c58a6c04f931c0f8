"""Basic usage examples for PointFour."""

from pointfour import ReviewSearchService
from pointfour.core.category import detect_category, is_specific_item_search
from pointfour.core.fallback import FallbackAnalyzer
from pointfour.core.models import AnalysisInput, RawResult, SearchRequest
from pointfour.core.planner import build_search_queries


def example_brand_search():
    """Example: brand-level search (needs SERPER_API_KEY; OPENAI_API_KEY optional)."""
    print("🔍 Searching reviews for Everlane")

    service = ReviewSearchService()
    response = service.search(SearchRequest(brand="Everlane"))

    summary = response.brand_fit_summary
    print(f"📊 {response.total_results} results, confidence {summary.confidence.value}")
    print(f"📝 {summary.summary}")
    for name, reviews in response.grouped_reviews.to_dict().items():
        if reviews:
            print(f"  {name}: {len(reviews)} reviews")


def example_query_plan():
    """Example: category detection and query planning for a specific item."""
    brand, item = "Everlane", "merino wool crew neck"
    category = detect_category(brand, item)
    specific = is_specific_item_search(item, brand)
    print(f"\n🎯 Category: {category.value}, specific item: {specific}")
    for query in build_search_queries(brand, category, item, specific):
        print(f"  - {query}")


def example_offline_analysis():
    """Example: run the keyword analyzer on hand-written results."""
    results = [
        RawResult("Sizing thread", "The Everlane tee runs small, size up.", "https://www.reddit.com/r/ffa/1"),
        RawResult("Haul", "Runs small but really well made.", "https://www.youtube.com/watch?v=2"),
    ]
    category = detect_category("Everlane")
    analysis = FallbackAnalyzer().analyze(AnalysisInput(results=results, brand="Everlane", category=category))

    print("\n🤖 Offline analysis:")
    for aspect, section in analysis.sections.items():
        print(f"  {aspect.value} ({section.confidence.value}): {section.recommendation}")


if __name__ == "__main__":
    example_query_plan()
    example_offline_analysis()
    example_brand_search()
