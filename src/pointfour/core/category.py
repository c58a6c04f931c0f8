"""Product category classification and request validation."""

import logging
import os
import re
from functools import lru_cache
from typing import Dict, List

import yaml

from .aspect import FIBERS, MATERIAL_NAMES, keyword_regex
from .constants import ErrorConstants, FileConstants
from .errors import ValidationError
from .models import Category

logger = logging.getLogger(__name__)


# Checked in order; the first set with a hit wins.
CATEGORY_KEYWORDS = (
    (Category.BAGS, (
        "bag", "bags", "handbag", "purse", "clutch", "tote", "backpack", "satchel",
        "crossbody", "shoulder bag", "bucket bag", "duffel", "weekender", "luggage",
    )),
    (Category.SHOES, (
        "shoe", "shoes", "sneaker", "sneakers", "trainer", "trainers", "boot", "boots",
        "sandal", "sandals", "heels", "flats", "loafer", "loafers", "oxfords", "pumps",
        "mules", "clogs", "espadrilles", "footwear", "ballet flats", "slides",
    )),
    (Category.ACCESSORIES, (
        "belt", "wallet", "scarf", "hat", "cap", "beanie", "jewelry", "jewellery",
        "necklace", "bracelet", "earrings", "ring", "watch", "sunglasses", "gloves",
        "headband", "brooch",
    )),
    (Category.CLOTHING, (
        "shirt", "t-shirt", "tee", "blouse", "top", "sweater", "jumper", "cardigan",
        "hoodie", "sweatshirt", "jacket", "coat", "blazer", "parka", "vest", "dress",
        "skirt", "jeans", "pants", "trousers", "chinos", "shorts", "leggings", "joggers",
        "jumpsuit", "suit", "knitwear", "crew neck", "crewneck", "v-neck", "turtleneck",
        "merino", "cashmere", "denim", "linen", "clothing", "apparel",
    )),
)

STYLE_DESCRIPTORS = (
    "oversized", "cropped", "slim", "relaxed", "straight leg", "wide leg", "wide-leg",
    "high rise", "high-waisted", "boxy", "fitted", "tailored", "ribbed", "organic",
    "recycled", "heavyweight", "lightweight", "midi", "maxi", "mini",
)

_CATEGORY_PATTERNS = [(category, keyword_regex(words)) for category, words in CATEGORY_KEYWORDS]
_DESCRIPTOR_PATTERN = keyword_regex(
    set(FIBERS) | set(MATERIAL_NAMES) | set(STYLE_DESCRIPTORS)
    | {w for _, words in CATEGORY_KEYWORDS for w in words}
)
_LETTER_RE = re.compile(r"[a-z]", re.IGNORECASE)

DEFAULT_BRAND_LISTS = {
    "shoe_only_brands": ["allbirds", "birkenstock", "converse", "dr. martens", "vans", "veja"],
    "clothing_only_brands": ["arket", "cos", "everlane", "uniqlo", "zara", "reformation"],
    "non_fashion_terms": ["restaurant", "airline", "bank", "insurance", "hotel"],
    "fashion_allow_list": [],
}


@lru_cache(maxsize=1)
def load_brand_lists() -> Dict[str, List[str]]:
    """Load curated brand lists from the packaged YAML file."""
    try:
        path = os.path.join(os.path.dirname(__file__), "..", "data", FileConstants.BRAND_LISTS_FILE)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load brand lists: {e}. Using defaults.")
        return DEFAULT_BRAND_LISTS

    lists = {}
    for key, default in DEFAULT_BRAND_LISTS.items():
        values = data.get(key, default) or []
        lists[key] = [str(v).strip().lower() for v in values if str(v).strip()]
    return lists


def _normalize_name(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", (text or "").lower())


def detect_category(brand: str, item_name: str = "") -> Category:
    """Infer the product category from item and brand text.

    Keyword sets are tried in order (bags, shoes, accessories, clothing); when
    nothing matches, the brand is looked up in the curated shoe-only and
    clothing-only lists. Falls back to ``Category.GENERAL``.
    """
    text = f"{item_name or ''} {brand or ''}".lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category

    lists = load_brand_lists()
    brand_key = (brand or "").strip().lower()
    if brand_key in lists["shoe_only_brands"]:
        return Category.SHOES
    if brand_key in lists["clothing_only_brands"]:
        return Category.CLOTHING
    return Category.GENERAL


def is_specific_item_search(item_name: str, brand: str) -> bool:
    """True when the request names a particular product rather than just the brand."""
    item = (item_name or "").strip()
    if not item:
        return False
    if _DESCRIPTOR_PATTERN.search(item):
        return True
    return len(item.split()) > 1 and _normalize_name(item) != _normalize_name(brand)


def validate_fashion_brand(brand: str) -> str:
    """Return the cleaned brand name or raise ValidationError."""
    cleaned = (brand or "").strip()
    if not cleaned:
        raise ValidationError("A brand name is required.")
    if not _LETTER_RE.search(cleaned):
        raise ValidationError(f"'{cleaned}' is not a valid brand name.")
    if len(cleaned) > ErrorConstants.MAX_BRAND_LENGTH:
        raise ValidationError("Brand name is too long.")

    lists = load_brand_lists()
    key = cleaned.lower()
    allowed = set(lists["shoe_only_brands"]) | set(lists["clothing_only_brands"]) | set(lists["fashion_allow_list"])
    if key in allowed:
        return cleaned

    deny = keyword_regex(lists["non_fashion_terms"]) if lists["non_fashion_terms"] else None
    if deny is not None and deny.search(key):
        logger.info(f"Rejected non-fashion brand: {cleaned}")
        raise ValidationError(
            f"'{cleaned}' does not look like a fashion brand. "
            "Fit and quality reviews are only available for clothing, shoes, bags and accessories."
        )
    return cleaned
