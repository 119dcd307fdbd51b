"""Amount cleaning shared by the template and heuristic extraction paths."""

import re
from decimal import Decimal, InvalidOperation

# Decimal-looking amount anywhere in text, e.g. "4.50" or "4,50"
AMOUNT_PATTERN = re.compile(r"\d+[.,]\d{2}")

_CURRENCY_LABELS = re.compile(r"RM|MYR", re.IGNORECASE)


def clean_amount_text(text: str) -> str:
    """Strip currency labels and spaces, and use a dot as decimal separator."""
    cleaned = _CURRENCY_LABELS.sub("", text)
    cleaned = re.sub(r"\s+", "", cleaned)
    return cleaned.replace(",", ".").strip()


def parse_amount(text: str | None) -> Decimal | None:
    """Parse an OCR amount string ("RM 45,90", "MYR12.00") into a Decimal.

    Returns None for anything that does not parse to a finite number.
    """
    if not text:
        return None
    cleaned = clean_amount_text(text)
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def find_amounts(text: str) -> list[Decimal]:
    """Return every parseable decimal-looking amount in `text`, in order."""
    amounts: list[Decimal] = []
    for match in AMOUNT_PATTERN.finditer(text):
        value = parse_amount(match.group(0))
        if value is not None:
            amounts.append(value)
    return amounts
