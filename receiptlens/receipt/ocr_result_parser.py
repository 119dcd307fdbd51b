"""Parse raw OCR text into structured ReceiptData without templates."""

from __future__ import annotations

from datetime import date

from receiptlens.domain.receipt import ReceiptData

from .categories import CategoryRuleLayers, classify_receipt
from .config import ExtractionConfig
from .ocr_parser import _extract_date, _extract_items, _extract_merchant, _extract_total
from .ocr_parser.common import _split_lines


def parse_receipt_text(
    text: str,
    raw_text: str | None = None,
    config: ExtractionConfig | None = None,
    category_rule_layers: CategoryRuleLayers | None = None,
    today: date | None = None,
) -> ReceiptData:
    """
    Parse OCR text into a ReceiptData object.

    This is a best-effort parser - results should be manually reviewed.
    Missing fields resolve to defaults, so a complete record is always
    returned (an empty string yields the all-defaults record).

    Args:
        text: OCR text to parse, usually already dictionary-corrected
        raw_text: Original uncorrected OCR text kept on the record; defaults to `text`
        config: Extraction constants
        category_rule_layers: Keyword rules for category classification
        today: Date used when no date is found; defaults to the current date

    Returns:
        ReceiptData with parsed fields
    """
    if config is None:
        config = ExtractionConfig()

    lines = _split_lines(text)

    merchant = _extract_merchant(lines, scan_lines=config.merchant_scan_lines, unknown=config.unknown_merchant)
    receipt_date = _extract_date(lines, prioritize_date_lines=config.prioritize_date_lines, today=today)
    total = _extract_total(lines, text)
    items = _extract_items(lines, max_amount=config.max_item_amount)
    category = classify_receipt(merchant, items, rule_layers=category_rule_layers)

    return ReceiptData(
        merchant_name=merchant,
        date=receipt_date,
        total_amount=total,
        line_items=items,
        category=category,
        raw_text=text if raw_text is None else raw_text,
    )
