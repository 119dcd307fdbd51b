"""Tunable constants for receipt extraction."""

from dataclasses import dataclass
from decimal import Decimal

from receiptlens.domain.categories import DEFAULT_CATEGORY
from receiptlens.domain.receipt import UNKNOWN_DATE, UNKNOWN_MERCHANT

from .corrections import DEFAULT_MERCHANT_MATCH_THRESHOLD
from .ocr_parser.common import MERCHANT_SCAN_LINES
from .ocr_parser.items_text_parser import MAX_ITEM_AMOUNT
from .templates import HEADER_SCAN_LINES


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for the extraction pipeline."""

    merchant_match_threshold: int = DEFAULT_MERCHANT_MATCH_THRESHOLD  # strictly-less-than
    header_scan_lines: int = HEADER_SCAN_LINES
    merchant_scan_lines: int = MERCHANT_SCAN_LINES
    max_item_amount: Decimal = MAX_ITEM_AMOUNT  # exclusive
    prioritize_date_lines: bool = True
    unknown_date: str = UNKNOWN_DATE
    unknown_merchant: str = UNKNOWN_MERCHANT
    default_category: str = DEFAULT_CATEGORY
