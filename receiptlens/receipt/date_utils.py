"""Date helpers for receipt parsing."""

from __future__ import annotations

from datetime import date

DISPLAY_DATE_FORMAT = "%d/%m/%Y"


def placeholder_receipt_date(today: date | None = None) -> str:
    """Return today's date in display format, used when no date is found."""
    return (today or date.today()).strftime(DISPLAY_DATE_FORMAT)
