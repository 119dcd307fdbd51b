"""Core domain models for receiptlens.

This module provides the data models shared by the extraction core and
the runtime shell:
- ReceiptData, LineItem: extraction results
- CorrectionKind, CorrectionRecord: dictionary correction feedback
- TAX_CATEGORIES: the fixed category set

Usage:
    from receiptlens.domain import ReceiptData, LineItem
"""

from receiptlens.domain.categories import DEFAULT_CATEGORY, TAX_CATEGORIES
from receiptlens.domain.receipt import (
    UNKNOWN_DATE,
    UNKNOWN_MERCHANT,
    CorrectionKind,
    CorrectionRecord,
    LineItem,
    ReceiptData,
)

__all__ = [
    "CorrectionKind",
    "CorrectionRecord",
    "DEFAULT_CATEGORY",
    "LineItem",
    "ReceiptData",
    "TAX_CATEGORIES",
    "UNKNOWN_DATE",
    "UNKNOWN_MERCHANT",
]
