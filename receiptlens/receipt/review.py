"""Pure helpers for editing an extracted receipt during review.

Receipts are immutable; every edit returns a new ReceiptData. Item edits
recalculate the total from the remaining items.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal

from receiptlens.domain.receipt import LineItem, ReceiptData

from .date_utils import DISPLAY_DATE_FORMAT

_CENTS = Decimal("0.01")
_EDITABLE_FIELDS = frozenset({"merchant_name", "date", "total_amount", "category"})


def recalculate_total(receipt: ReceiptData) -> ReceiptData:
    """Return a copy whose total is the sum of its line items."""
    return dataclasses.replace(receipt, total_amount=receipt.items_total.quantize(_CENTS))


def replace_line_item(receipt: ReceiptData, index: int, item: LineItem) -> ReceiptData:
    """Replace the item at `index` and recalculate the total."""
    items = list(receipt.line_items)
    items[index] = item
    return recalculate_total(dataclasses.replace(receipt, line_items=tuple(items)))


def remove_line_item(receipt: ReceiptData, index: int) -> ReceiptData:
    """Delete the item at `index` and recalculate the total (0.00 when none remain)."""
    items = list(receipt.line_items)
    del items[index]
    return recalculate_total(dataclasses.replace(receipt, line_items=tuple(items)))


def update_fields(receipt: ReceiptData, **changes: object) -> ReceiptData:
    """Replace header fields of a receipt. The raw OCR text cannot be edited."""
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot edit receipt fields: {', '.join(sorted(unknown))}")
    return dataclasses.replace(receipt, **changes)  # type: ignore[arg-type]


def parse_display_date(text: str) -> date | None:
    """Parse a DD/MM/YYYY display date; None if it is not one."""
    try:
        return datetime.strptime(text.strip(), DISPLAY_DATE_FORMAT).date()
    except ValueError:
        return None
