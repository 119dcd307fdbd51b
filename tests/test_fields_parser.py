from datetime import date
from decimal import Decimal

import pytest
from receiptlens.receipt.ocr_parser import _extract_date, _extract_merchant, _extract_total
from receiptlens.receipt.ocr_parser.common import _split_lines


def test_merchant_prefers_uppercase_top_line() -> None:
    lines = ["Welcome", "AEON BIG", "Lot 12, Jalan Besar"]

    assert _extract_merchant(lines) == "AEON BIG"


def test_merchant_accepts_long_mixed_case_line() -> None:
    assert _extract_merchant(["Thanks", "Kedai Runcit Ah Seng"]) == "Kedai Runcit Ah Seng"


@pytest.mark.parametrize(
    "excluded",
    ["OFFICIAL RECEIPT", "TAX INVOICE", "TEL: 03-1234", "STORE 1234"],
)
def test_merchant_skips_markers_and_digit_runs(excluded: str) -> None:
    assert _extract_merchant([excluded, "GUARDIAN"]) == "GUARDIAN"


def test_merchant_marker_must_start_a_word() -> None:
    assert _extract_merchant(["HOTEL: SERI MALAYSIA", "GUARDIAN"]) == "HOTEL: SERI MALAYSIA"


def test_merchant_only_scans_top_lines_then_falls_back() -> None:
    lines = ["shop", "a", "b", "c", "d", "MYDIN MART"]

    # No qualifying line in the first five, so the first non-empty line wins.
    assert _extract_merchant(lines) == "shop"


def test_merchant_unknown_for_blank_text() -> None:
    assert _extract_merchant(["", "  ".strip()]) == "Unknown Merchant"
    assert _extract_merchant([]) == "Unknown Merchant"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("12/06/2023", "12/06/2023"),
        ("Issued 1-2-23 10:15", "1-2-23"),
        ("2023-06-12 14:02", "2023-06-12"),
        ("12 Jun 2023", "12 Jun 2023"),
        ("Printed: June 5, 2023", "June 5, 2023"),
    ],
)
def test_date_pattern_families(line: str, expected: str) -> None:
    assert _extract_date([line]) == expected


def test_date_prefers_lines_mentioning_date() -> None:
    lines = ["Valid until 31/12/2024", "Date: 05/01/2024"]

    assert _extract_date(lines) == "05/01/2024"
    assert _extract_date(lines, prioritize_date_lines=False) == "31/12/2024"


def test_date_falls_back_to_today() -> None:
    assert _extract_date(["no date here"], today=date(2024, 3, 9)) == "09/03/2024"


def test_total_prefers_indicator_line_over_decoys() -> None:
    text = "\n".join(
        [
            "KEDAI MAJU",
            "Sugar 1kg 3.10",
            "Rice 5kg 21.80",
            "TOTAL: RM 45.90",
            "Cash 50.00",
            "Change 4.10",
        ]
    )

    assert _extract_total(_split_lines(text), text) == Decimal("45.90")


def test_total_tries_currency_pattern_first_on_a_line() -> None:
    text = "TOTAL 2 ITEMS MYR 12,50"

    assert _extract_total(_split_lines(text), text) == Decimal("12.50")


def test_total_falls_back_to_largest_amount() -> None:
    text = "SHOP\nTea 2.50\nCake 12.00\nPaid 20.00"

    assert _extract_total(_split_lines(text), text) == Decimal("20.00")


def test_total_is_zero_without_amounts() -> None:
    assert _extract_total(["SHOP"], "SHOP") == Decimal("0")
