"""End-to-end tests for receipt text extraction.

Each test case consists of files in tests/receipts_e2e/:
  - Required OCR text: <name>.txt
  - Required expected results: <name>.expected.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, cast

import pytest
from receiptlens.receipt.config import ExtractionConfig
from receiptlens.receipt.formatter import format_parsed_receipt, receipt_to_document
from receiptlens.runtime.receipt_pipeline import create_extraction_pipeline
from receiptlens.runtime.settings import RemoteSettings

RECEIPTS_DIR = Path(__file__).parent / "receipts_e2e"

# Fixed so receipts without a date stay reproducible.
TODAY = date(2024, 6, 1)


@dataclass(frozen=True)
class E2ECase:
    name: str
    text_path: Path
    expected_path: Path


def find_e2e_test_cases() -> list[E2ECase]:
    """Find test cases by <name>.expected.json with a matching <name>.txt."""
    test_cases: list[E2ECase] = []
    for expected_path in RECEIPTS_DIR.glob("*.expected.json"):
        name = expected_path.name.removesuffix(".expected.json")
        text_path = RECEIPTS_DIR / f"{name}.txt"
        if text_path.exists():
            test_cases.append(E2ECase(name=name, text_path=text_path, expected_path=expected_path))
    return sorted(test_cases, key=lambda c: c.name)


def load_expected(expected_path: Path) -> dict[str, Any]:
    with open(expected_path, encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


E2E_CASES = find_e2e_test_cases()


def test_e2e_cases_present() -> None:
    assert E2E_CASES, f"No e2e cases found in {RECEIPTS_DIR}"


@pytest.mark.parametrize("case", E2E_CASES, ids=[c.name for c in E2E_CASES])
def test_receipt_extraction(case: E2ECase, project_root: Path) -> None:
    pipeline = create_extraction_pipeline(config=ExtractionConfig(), remote=RemoteSettings())
    raw_text = case.text_path.read_text(encoding="utf-8")

    receipt = pipeline.extract(raw_text, today=TODAY)

    document = receipt_to_document(receipt)
    assert document.pop("rawText") == raw_text
    expected = load_expected(case.expected_path)
    assert document == expected, f"{case.name}:\n{format_parsed_receipt(receipt)}"
