"""Merchant/date/total extraction helpers."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from receiptlens.domain.receipt import UNKNOWN_MERCHANT

from ..amounts import find_amounts, parse_amount
from ..date_utils import placeholder_receipt_date
from .common import (
    DATE_PATTERNS,
    FOUR_DIGIT_RUN,
    MERCHANT_EXCLUDED_MARKERS,
    MERCHANT_MIN_MIXED_CASE_LENGTH,
    MERCHANT_SCAN_LINES,
    TOTAL_AMOUNT_PATTERNS,
    TOTAL_INDICATORS,
    _contains_marker,
)


def _is_merchant_candidate(line: str) -> bool:
    if not line:
        return False
    if not (line.isupper() or len(line) > MERCHANT_MIN_MIXED_CASE_LENGTH):
        return False
    if _contains_marker(line, MERCHANT_EXCLUDED_MARKERS):
        return False
    if FOUR_DIGIT_RUN.search(line):
        return False
    return True


def _extract_merchant(
    lines: Sequence[str],
    scan_lines: int = MERCHANT_SCAN_LINES,
    unknown: str = UNKNOWN_MERCHANT,
) -> str:
    """
    Extract merchant name from the top of the receipt.

    Strategy order:
    1. First of the top lines that is uppercase or long, and is not a
       header marker, phone number, date or postcode
    2. First non-empty line of the whole text
    3. `unknown`
    """
    for line in lines[:scan_lines]:
        if _is_merchant_candidate(line):
            return line

    for line in lines:
        if line:
            return line

    return unknown


def _find_date_in_line(line: str) -> str | None:
    for pattern in DATE_PATTERNS:
        match = pattern.search(line)
        if match:
            return match.group(0)
    return None


def _extract_date(
    lines: Sequence[str],
    prioritize_date_lines: bool = True,
    today: date | None = None,
) -> str:
    """Extract the receipt date as printed.

    Lines mentioning "date" are scanned first when `prioritize_date_lines`
    is set. Falls back to today's date as DD/MM/YYYY when nothing matches.
    """
    if prioritize_date_lines:
        for line in lines:
            if "date" in line.lower():
                found = _find_date_in_line(line)
                if found:
                    return found

    for line in lines:
        found = _find_date_in_line(line)
        if found:
            return found

    return placeholder_receipt_date(today)


def _has_total_indicator(line: str) -> bool:
    lower = line.lower()
    return any(indicator in lower for indicator in TOTAL_INDICATORS)


def _extract_total_from_line(line: str) -> Decimal | None:
    for pattern in TOTAL_AMOUNT_PATTERNS:
        match = pattern.search(line)
        if match:
            amount = parse_amount(match.group(1))
            if amount is not None:
                return amount
    return None


def _extract_total(lines: Sequence[str], full_text: str) -> Decimal:
    """Extract total amount.

    Phase 1 takes the first parseable amount on a line carrying a total
    indicator. Phase 2 falls back to the largest amount anywhere in the text.
    """
    for line in lines:
        if not _has_total_indicator(line):
            continue
        amount = _extract_total_from_line(line)
        if amount is not None:
            return amount

    candidates = find_amounts(full_text)
    if candidates:
        return max(candidates)
    return Decimal("0")
