"""Text-line based receipt item extraction."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from receiptlens.domain.receipt import LineItem

from ..amounts import AMOUNT_PATTERN, parse_amount
from .common import HEADER_FOOTER_MARKERS, _contains_marker, _looks_like_summary_line, _strip_dates

# Item prices at or above this are phone numbers, totals or other false positives
MAX_ITEM_AMOUNT = Decimal("10000")

DEFAULT_ITEM_DESCRIPTION = "Item"


def _parse_item_line(line: str, max_amount: Decimal = MAX_ITEM_AMOUNT) -> LineItem | None:
    """Parse one "DESCRIPTION ... PRICE" line; the last amount on the line is the price."""
    searchable = _strip_dates(line)
    matches = list(AMOUNT_PATTERN.finditer(searchable))
    if not matches:
        return None

    last = matches[-1]
    price = parse_amount(last.group(0))
    if price is None or price <= 0 or price >= max_amount:
        return None

    description = searchable[: last.start()].strip() or DEFAULT_ITEM_DESCRIPTION
    description = " ".join(description.split())
    return LineItem(description=description, amount=price)


def _extract_items(
    lines: Sequence[str],
    max_amount: Decimal = MAX_ITEM_AMOUNT,
) -> list[LineItem]:
    """
    Extract line items from receipt.

    This is heuristic-based and will likely need manual correction.
    Header/footer and summary lines are skipped; every other line with a
    decimal amount becomes an item priced at its trailing amount.

    Args:
        lines: List of text lines from the receipt
        max_amount: Exclusive upper bound for a plausible item price
    """
    items: list[LineItem] = []
    for line in lines:
        if not line.strip():
            continue
        if _contains_marker(line, HEADER_FOOTER_MARKERS):
            continue
        if _looks_like_summary_line(line):
            continue

        item = _parse_item_line(line, max_amount=max_amount)
        if item is not None:
            items.append(item)
    return items
