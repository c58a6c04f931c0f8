"""Constants and configuration values for PointFour."""

# Search and Review Constants
class SearchConstants:
    """Constants related to query planning and review normalization."""

    MAX_QUERIES = 6  # planned queries per request
    MAX_MATERIAL_QUERIES = 5  # material-composition queries for a specific item
    MIN_MATERIAL_QUERIES = 2
    CLOTHING_MATERIAL_QUERIES = 3  # material queries for clothing items

    MAX_REVIEWS = 20  # reviews returned per response
    SNIPPET_PREFIX_LENGTH = 50  # chars compared when deduplicating snippets
    FULL_CONTENT_LENGTH = 500  # chars kept in Review.full_content
    MIN_ITEM_TOKEN_LENGTH = 3  # shorter item words are ignored when matching

    PAGE_TEXT_TARGET_LENGTH = 1500  # stop collecting content blocks past this
    PAGE_TEXT_MAX_LENGTH = 2500  # chars of cleaned page text kept per review
    PAGE_FETCH_USER_AGENT = "Mozilla/5.0 (compatible; PointFour/0.3)"


# Analysis Thresholds
class ThresholdConstants:
    """Heuristic cut-points used by the rule-based analyzer."""

    # Adaptive mention threshold
    SMALL_CORPUS_SIZE = 15  # corpora below this size use the lenient threshold
    SMALL_CORPUS_MIN_MENTIONS = 1
    DEFAULT_MIN_MENTIONS = 2

    # Confidence tiers from mention counts
    HIGH_CONFIDENCE_MENTIONS = 4
    MEDIUM_CONFIDENCE_MENTIONS = 2

    # Quality ratio (positive / (positive + negative))
    QUALITY_HIGH_RATIO = 0.8
    QUALITY_HIGH_RATIO_MIN_POSITIVE = 2
    QUALITY_POSITIVE_RATIO = 0.6
    QUALITY_NEGATIVE_RATIO = 0.4

    # Evidence limits
    MAX_EVIDENCE = 3  # quotes per aspect section
    MAX_COMPOSITIONS = 5
    MAX_MATERIAL_EVIDENCE = 3

    # Per-review confidence score
    REVIEW_FIT_POINTS = 2
    REVIEW_QUALITY_POINTS = 1
    REVIEW_LANGUAGE_POINTS = 1
    REVIEW_HIGH_SCORE = 3
    REVIEW_MEDIUM_SCORE = 1


# Summary Constants
class SummaryConstants:
    """Constants for narrative summary synthesis."""

    MAX_NAMED_SOURCES = 4  # sources named in the summary
    LIMITED_DATA_RESULTS = 5  # below this count a low-confidence caveat is added


# Prompt Constants
class PromptConstants:
    """Constants for LLM prompts and templates."""

    PROMPT_VERSION = "v1.3"  # part of the cache key
    MAX_PROMPT_RESULTS = 40  # results included in one prompt
    MAX_SNIPPET_CHARS = 400  # chars per result in the prompt


# Error Handling Constants
class ErrorConstants:
    """Constants for error handling and retries."""

    RETRY_MAX_WAIT = 10  # cap on exponential backoff in seconds
    MAX_BRAND_LENGTH = 80


# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    BRAND_LISTS_FILE = "brand_lists.yaml"  # inside pointfour/data
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    CACHE_TTL_HOURS = 24
    CACHE_KEY_LENGTH = 8  # length of cache key for logging
