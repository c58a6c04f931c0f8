"""Command-line interface for PointFour."""

import argparse
import json
import logging
import sys

from .core.category import detect_category, is_specific_item_search
from .core.config import settings
from .core.constants import FileConstants
from .core.models import SearchRequest
from .core.planner import build_search_queries
from .services.review_search import ReviewSearchService
from .utils.data_prep import export_to_json, load_export, prepare_export

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT,
    )


def cmd_search(args):
    """Search command."""
    service = ReviewSearchService()
    response = service.search(SearchRequest(brand=args.brand, item_name=args.item or ""))

    if args.out:
        export_to_json(prepare_export(response), args.out)
        print(f"Results exported to {args.out}")

    if args.json:
        print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
        return 0 if response.success else 1

    summary = response.brand_fit_summary
    print(f"\nReview summary for '{response.brand or args.brand}':")
    if not response.success:
        print(f"  [{response.status_code}] {summary.summary}")
        return 1

    if response.category is not None:
        print(f"Category: {response.category.value}")
    print(f"Confidence: {summary.confidence.value}")
    print(f"Summary: {summary.summary}")
    for aspect, section in summary.sections.items():
        headline = section.recommendation or ", ".join(section.composition or [])
        print(f"\n{aspect.value} ({section.confidence.value}): {headline}")
        for quote in section.evidence_texts:
            print(f"  - \"{quote[:120]}\"")

    print(f"\n{len(response.reviews)} reviews from {response.total_results} results:")
    for name, reviews in response.grouped_reviews.to_dict().items():
        if reviews:
            print(f"  {name}: {len(reviews)}")
    return 0


def cmd_categorize(args):
    """Categorize command."""
    item = args.item or ""
    category = detect_category(args.brand, item)
    specific = is_specific_item_search(item, args.brand)
    print(f"Category: {category.value}")
    print(f"Specific item: {'yes' if specific else 'no'}")
    return 0


def cmd_plan(args):
    """Plan command."""
    item = args.item or ""
    category = detect_category(args.brand, item)
    queries = build_search_queries(args.brand, category, item, is_specific_item_search(item, args.brand))
    for i, query in enumerate(queries, 1):
        print(f"  {i}. {query}")
    return 0


def cmd_export(args):
    """Export command."""
    try:
        data = load_export(args.input_file)
    except FileNotFoundError:
        print(f"Input file {args.input_file} not found")
        return 1
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in input file: {e}")
        return 1

    if args.pretty:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    output_file = args.output or args.input_file.replace(".json", "_export.json")
    export_to_json(data, output_file)
    print(f"Exported to {output_file}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PointFour - fashion fit and quality review search")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search and analyze reviews for a brand")
    search_parser.add_argument("brand", help="Brand name")
    search_parser.add_argument("--item", help="Specific item name")
    search_parser.add_argument("--out", help="Output JSON file")
    search_parser.add_argument("--json", action="store_true", help="Print the full response as JSON")

    # Categorize command
    categorize_parser = subparsers.add_parser("categorize", help="Show the detected product category")
    categorize_parser.add_argument("brand", help="Brand name")
    categorize_parser.add_argument("--item", help="Specific item name")

    # Plan command
    plan_parser = subparsers.add_parser("plan", help="Show the planned search queries")
    plan_parser.add_argument("brand", help="Brand name")
    plan_parser.add_argument("--item", help="Specific item name")

    # Export command
    export_parser = subparsers.add_parser("export", help="Re-export saved results")
    export_parser.add_argument("--in", dest="input_file", required=True, help="Input JSON file")
    export_parser.add_argument("--out", dest="output", help="Output file (optional)")
    export_parser.add_argument("--pretty", action="store_true", help="Pretty print to stdout")

    return parser


COMMANDS = {
    "search": cmd_search,
    "categorize": cmd_categorize,
    "plan": cmd_plan,
    "export": cmd_export,
}


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging()

    try:
        return COMMANDS[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130
    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
