"""Format ReceiptData for review and for handing to a document store."""

from decimal import Decimal
from typing import Any

from receiptlens.domain.receipt import ReceiptData


def _format_amount(amount: Decimal) -> str:
    return f"{amount:.2f}"


def receipt_to_document(receipt: ReceiptData) -> dict[str, Any]:
    """Plain-dict form of a receipt with camelCase keys and string amounts."""
    return {
        "merchantName": receipt.merchant_name,
        "date": receipt.date,
        "totalAmount": _format_amount(receipt.total_amount),
        "lineItems": [
            {"description": item.description, "amount": _format_amount(item.amount)} for item in receipt.line_items
        ],
        "category": receipt.category,
        "rawText": receipt.raw_text,
    }


def _format_items_aligned(
    rows: list[tuple[str, str]],
    indent: str = "  ",
) -> list[str]:
    """
    Format (label, amount) rows with left-aligned labels and right-aligned amounts.

    Args:
        rows: List of (label, amount_text) tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines
    """
    if not rows:
        return []

    max_label_len = max(len(label) for label, _ in rows)
    max_amount_len = max(len(amount) for _, amount in rows)

    return [f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}" for label, amount in rows]


def format_parsed_receipt(receipt: ReceiptData, currency: str = "RM") -> str:
    """
    Format an extracted receipt as a human-readable review summary.

    Args:
        receipt: Extracted receipt data
        currency: Currency label shown next to amounts

    Returns:
        Multi-line summary text
    """
    lines = [
        f"Merchant: {receipt.merchant_name}",
        f"Date:     {receipt.date}",
        f"Category: {receipt.category}",
        "",
    ]

    rows = [(item.description, f"{currency} {_format_amount(item.amount)}") for item in receipt.line_items]
    rows.append(("TOTAL", f"{currency} {_format_amount(receipt.total_amount)}"))
    lines.extend(_format_items_aligned(rows))

    if receipt.line_items and receipt.items_total != receipt.total_amount:
        diff = receipt.total_amount - receipt.items_total
        lines.append(f"; WARN: items sum to {_format_amount(receipt.items_total)}, {_format_amount(diff)} unaccounted")

    lines.append("")
    return "\n".join(lines)
