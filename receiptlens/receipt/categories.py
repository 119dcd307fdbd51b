"""Tax category classification for extracted receipts.

This is a deterministic keyword lookup. The merchant name is checked
first against the merchant rules in priority order, then every line item
description against the item rules. First match wins; if nothing matches
the default category is returned.

To add keywords:
1. Pass a config mapping to build_category_rule_layers()
2. Use [[merchant_rules]] / [[item_rules]] tables with `category` and `keywords`
3. Keywords are case-insensitive substrings; extra keywords never reorder categories
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from receiptlens.domain.categories import (
    CHILDCARE,
    DEFAULT_CATEGORY,
    DONATIONS,
    EDUCATION,
    MEDICAL,
    SPORT_EQUIPMENT,
    TAX_CATEGORIES,
)
from receiptlens.domain.receipt import LineItem

logger = logging.getLogger(__name__)

MEDICAL_KEYWORDS = ("clinic", "hospital", "pharmacy", "medical", "healthcare", "doctor", "guardian", "watson")
EDUCATION_KEYWORDS = ("school", "college", "university", "education", "books", "stationery", "tuition", "popular")
SPORT_EQUIPMENT_KEYWORDS = ("sports", "fitness", "gym", "athletic", "decathlon")
CHILDCARE_KEYWORDS = ("childcare", "nursery", "kindergarten", "child care", "daycare")
DONATION_KEYWORDS = ("donation", "donate", "charity")

# Priority order matters: first matching category wins.
MERCHANT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (MEDICAL, MEDICAL_KEYWORDS),
    (EDUCATION, EDUCATION_KEYWORDS),
    (SPORT_EQUIPMENT, SPORT_EQUIPMENT_KEYWORDS),
    (CHILDCARE, CHILDCARE_KEYWORDS),
)
ITEM_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (MEDICAL, MEDICAL_KEYWORDS),
    (EDUCATION, EDUCATION_KEYWORDS),
    (DONATIONS, DONATION_KEYWORDS),
)

RuleEntry = tuple[str, tuple[str, ...]]


@dataclass(frozen=True)
class CategoryRuleLayers:
    """In-memory merchant and item keyword rules, in priority order."""

    merchant_rules: tuple[RuleEntry, ...]
    item_rules: tuple[RuleEntry, ...]
    default_category: str = DEFAULT_CATEGORY


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize keywords value from config into a lowercase tuple."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip().lower() for v in raw if str(v).strip())
    return tuple()


def _merge_rules(
    base: Sequence[RuleEntry],
    extra: Iterable[Any],
) -> tuple[RuleEntry, ...]:
    merged: dict[str, list[str]] = {category: list(keywords) for category, keywords in base}
    for rule in extra:
        if not isinstance(rule, Mapping):
            continue
        category = str(rule.get("category") or "").strip()
        if category not in TAX_CATEGORIES:
            logger.warning("Ignoring category rule for unknown category %r", category)
            continue
        keywords = _normalize_keywords(rule.get("keywords"))
        bucket = merged.setdefault(category, [])
        bucket.extend(kw for kw in keywords if kw not in bucket)
    return tuple((category, tuple(keywords)) for category, keywords in merged.items())


def build_category_rule_layers(configs: Sequence[Mapping[str, Any]] | None = None) -> CategoryRuleLayers:
    """Build rule layers from the built-in keyword sets plus optional config mappings."""
    merchant_rules: tuple[RuleEntry, ...] = MERCHANT_RULES
    item_rules: tuple[RuleEntry, ...] = ITEM_RULES
    for config in configs or ():
        merchant_rules = _merge_rules(merchant_rules, config.get("merchant_rules", []))
        item_rules = _merge_rules(item_rules, config.get("item_rules", []))
    return CategoryRuleLayers(merchant_rules=merchant_rules, item_rules=item_rules)


@lru_cache(maxsize=1)
def _get_default_rule_layers() -> CategoryRuleLayers:
    """Built-in-only default rules (no file I/O)."""
    return build_category_rule_layers()


def _first_match(text: str, rules: Sequence[RuleEntry]) -> str | None:
    for category, keywords in rules:
        if any(kw in text for kw in keywords):
            return category
    return None


def classify_receipt(
    merchant_name: str,
    line_items: Sequence[LineItem],
    rule_layers: CategoryRuleLayers | None = None,
) -> str:
    """
    Return the tax category for a receipt.

    Args:
        merchant_name: Extracted (or template) merchant name
        line_items: Extracted line items, scanned in order
        rule_layers: Preloaded rules; built-in keyword sets when omitted

    Returns:
        One of TAX_CATEGORIES
    """
    layers = rule_layers or _get_default_rule_layers()

    category = _first_match(merchant_name.lower(), layers.merchant_rules)
    if category is not None:
        logger.debug("Merchant %r classified as %s", merchant_name, category)
        return category

    for item in line_items:
        category = _first_match(item.description.lower(), layers.item_rules)
        if category is not None:
            logger.debug("Item %r classified receipt as %s", item.description, category)
            return category

    return layers.default_category
