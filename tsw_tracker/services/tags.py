"""
Trigger tag normalization.

Check-ins carry plain trigger ids (``stress``, ``heat_sweat``) alongside
namespaced food and product tags (``food:Banana``, ``new_product:Balm``).
Food and product names are kept distinct per name: every tag is reduced to
one of three canonical shapes::

    stress            -> stress
    food: Banana      -> food:banana
    new_product:Balm  -> product:balm
    product:balm      -> product:balm
"""
from enum import Enum
from typing import Optional

from tsw_tracker.services.constants import TRIGGER_LABELS

FOOD_PREFIX = "food:"
PRODUCT_PREFIX = "product:"
PRODUCT_PREFIXES = ("new_product:", "product:")

class TagKind(str, Enum):
    """Category of a normalized tag."""
    TRIGGER = "trigger"
    FOOD = "food"
    PRODUCT = "product"

def _namespaced(tag: str, prefix: str, canonical_prefix: str) -> Optional[str]:
    name = tag[len(prefix):].strip().lower()
    if not name:
        return None
    return f"{canonical_prefix}{name}"

def normalize_tag(raw: str) -> Optional[str]:
    """
    Reduce a raw trigger tag to its canonical form.

    Args:
        raw: Tag as stored on the check-in

    Returns:
        Canonical tag, or None for empty tags and empty food/product names
    """
    tag = raw.strip()
    if not tag:
        return None

    lowered = tag.lower()
    if lowered.startswith(FOOD_PREFIX):
        return _namespaced(tag, FOOD_PREFIX, FOOD_PREFIX)
    for prefix in PRODUCT_PREFIXES:
        if lowered.startswith(prefix):
            return _namespaced(tag, prefix, PRODUCT_PREFIX)
    return tag

def tag_kind(tag: str) -> TagKind:
    """Return the category of a normalized tag."""
    if tag.startswith(FOOD_PREFIX):
        return TagKind.FOOD
    if tag.startswith(PRODUCT_PREFIX):
        return TagKind.PRODUCT
    return TagKind.TRIGGER

def tag_name(tag: str) -> str:
    """Return the tag without its food/product namespace."""
    kind = tag_kind(tag)
    if kind is TagKind.FOOD:
        return tag[len(FOOD_PREFIX):]
    if kind is TagKind.PRODUCT:
        return tag[len(PRODUCT_PREFIX):]
    return tag

def title_case(name: str) -> str:
    """Capitalize the first letter of every space-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))

def tag_label(tag: str) -> str:
    """
    Human-readable label for a normalized tag.

    Known trigger ids use their display label, unknown ones are returned as-is,
    foods and products are title-cased.
    """
    if tag_kind(tag) is TagKind.TRIGGER:
        return TRIGGER_LABELS.get(tag, tag)
    return title_case(tag_name(tag))
