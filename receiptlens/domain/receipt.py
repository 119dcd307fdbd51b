"""Data models for receipt extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

UNKNOWN_DATE = "Unknown Date"
UNKNOWN_MERCHANT = "Unknown Merchant"


@dataclass(frozen=True)
class LineItem:
    """A single purchased product/service entry on a receipt."""

    description: str
    amount: Decimal


@dataclass(frozen=True)
class ReceiptData:
    """Structured result of one extraction call.

    `raw_text` is always the original OCR output. Correction passes work on a
    derived copy and never overwrite it.
    """

    merchant_name: str
    date: str  # display format, not a validated calendar date
    total_amount: Decimal
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)
    category: str = ""
    raw_text: str = ""

    def __post_init__(self) -> None:
        # Accept any sequence for convenience but always store a tuple.
        if not isinstance(self.line_items, tuple):
            object.__setattr__(self, "line_items", tuple(self.line_items))

    @property
    def items_total(self) -> Decimal:
        return sum((item.amount for item in self.line_items), Decimal("0"))


class CorrectionKind(str, Enum):
    """Namespace a correction entry belongs to."""

    MERCHANT = "MERCHANT"
    TERM = "TERM"


@dataclass(frozen=True)
class CorrectionRecord:
    """Feedback record emitted when a user correction is added to the dictionary."""

    original_text: str
    corrected_text: str
    kind: CorrectionKind
    user_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> dict[str, Any]:
        """Flat document form for the caller to persist."""
        return {
            "userId": self.user_id,
            "originalText": self.original_text,
            "correctedText": self.corrected_text,
            "type": self.kind.value,
            "timestamp": int(self.timestamp.timestamp() * 1000),
        }
