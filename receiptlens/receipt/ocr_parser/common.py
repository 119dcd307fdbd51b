"""Shared constants and helpers for OCR receipt parsing."""

import re
from functools import lru_cache

# Lines looked at when searching for the merchant name
MERCHANT_SCAN_LINES = 5

# Merchant lines shorter than this must be fully uppercase to qualify
MERCHANT_MIN_MIXED_CASE_LENGTH = 10

# Header/footer markers; lines containing these are never merchants or items
HEADER_FOOTER_MARKERS = ("RECEIPT", "INVOICE", "TEL:", "THANK YOU", "CUSTOMER")
MERCHANT_EXCLUDED_MARKERS = ("RECEIPT", "INVOICE", "TEL:")

# Four consecutive digits: phone numbers, years, postcodes
FOUR_DIGIT_RUN = re.compile(r"\d{4}")

# Substrings that mark a line as carrying the total (case-insensitive)
TOTAL_INDICATORS = ("total", "amount", "grand total", "subtotal", "rm", "myr")

# Amount patterns tried in order on a total-indicator line
TOTAL_AMOUNT_PATTERNS = (
    # "RM 45.90", "MYR45,90"
    re.compile(r"(?:RM|MYR)\s*(\d+[.,]\d{2})", re.IGNORECASE),
    # "TOTAL: 45.90", "AMOUNT 45.90"
    re.compile(r"(?:TOTAL|AMOUNT)\s*:?\s*(\d+[.,]\d{2})", re.IGNORECASE),
    # bare "45.90"
    re.compile(r"(\d+[.,]\d{2})"),
)

_MONTHS = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?"

# Date pattern families, tried in order
DATE_PATTERNS = (
    # DD/MM/YYYY, DD-MM-YY, DD.MM.YYYY
    re.compile(r"(?<!\d)\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4}(?!\d)"),
    # YYYY-MM-DD, YYYY/MM/DD, YYYY.MM.DD
    re.compile(r"(?<!\d)\d{4}[/.-]\d{1,2}[/.-]\d{1,2}(?!\d)"),
    # 12 Jun 2023
    re.compile(r"(?<!\d)\d{1,2}\s+" + _MONTHS + r"\s+\d{4}(?!\d)", re.IGNORECASE),
    # Jun 12, 2023
    re.compile(r"\b" + _MONTHS + r"\s+\d{1,2},?\s+\d{4}(?!\d)", re.IGNORECASE),
)

# Summary/payment lines that carry amounts but are not items
SUMMARY_PATTERNS = re.compile(
    r"^(?:SUB\s*TOTAL|SUBTOTAL|TOTAL|GRAND\s+TOTAL|AMOUNT|TAX|SST|GST|SERVICE\s+CHARGE|ROUNDING|"
    r"CASH|CHANGE|BALANCE|TENDER|PAID|VISA|MASTERCARD|MASTER|DEBIT|CREDIT|CARD)\b",
    re.IGNORECASE,
)

# TOTAL at a word end: SUBTOTAL matches, TOTALLY does not
TOTAL_WORD = re.compile(r"TOTAL\b")


def _split_lines(text: str) -> list[str]:
    """Split OCR text into stripped lines, keeping blank lines as empty strings."""
    return [line.strip() for line in text.splitlines()]


@lru_cache(maxsize=None)
def _marker_pattern(markers: tuple[str, ...]) -> re.Pattern[str]:
    """Compile markers into one pattern that only matches at a word start."""
    return re.compile(r"\b(?:" + "|".join(re.escape(marker) for marker in markers) + ")")


def _contains_marker(text: str, markers: tuple[str, ...]) -> bool:
    return _marker_pattern(markers).search(text.upper()) is not None


def _looks_like_summary_line(text: str) -> bool:
    """Return True if text appears to be a total/tax/payment line."""
    if not text:
        return False
    upper = text.upper().strip()
    if SUMMARY_PATTERNS.match(upper):
        return True
    if TOTAL_WORD.search(upper):
        return True
    return False


def _strip_dates(text: str) -> str:
    """Blank out date substrings so their digits are not read as prices."""
    for pattern in DATE_PATTERNS:
        text = pattern.sub(" ", text)
    return text
