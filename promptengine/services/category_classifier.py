"""
Category classifier: free-text category label -> CategoryFlags
"""
from typing import Tuple

from promptengine.models import CategoryFlags

# Case-sensitive substrings. A keyword may appear in several groups.
FASHION_KEYWORDS: Tuple[str, ...] = ("Fashion", "Clothing", "Jewelry")
TECH_KEYWORDS: Tuple[str, ...] = ("Electronics", "Computers", "Phones")
HOME_KEYWORDS: Tuple[str, ...] = ("Home", "Appliances", "Garden")
LUXURY_KEYWORDS: Tuple[str, ...] = ("Luxury", "Jewelry", "Fine Art")
SMALL_KEYWORDS: Tuple[str, ...] = ("Beauty", "Jewelry", "Grocery")
PET_KEYWORDS: Tuple[str, ...] = ("Pet",)


def _contains_any(category: str, keywords: Tuple[str, ...]) -> bool:
    return any(keyword in category for keyword in keywords)


def classify(category: str) -> CategoryFlags:
    """
    Derive domain flags from a category label.

    The label does not have to be one of CATEGORIES; anything unmatched
    (including an empty string) yields all-false flags.

    Args:
        category: Category label, e.g. "Clothing, Shoes & Jewelry"

    Returns:
        CategoryFlags with each flag computed independently
    """
    category = category or ""
    return CategoryFlags(
        is_fashion=_contains_any(category, FASHION_KEYWORDS),
        is_tech=_contains_any(category, TECH_KEYWORDS),
        is_home=_contains_any(category, HOME_KEYWORDS),
        is_luxury=_contains_any(category, LUXURY_KEYWORDS),
        is_small=_contains_any(category, SMALL_KEYWORDS),
        is_pet=_contains_any(category, PET_KEYWORDS),
    )
