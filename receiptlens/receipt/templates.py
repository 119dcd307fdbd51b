"""Merchant receipt templates.

A template is a set of regexes for one known merchant: a header pattern
that identifies the merchant, plus date/total/item patterns that extract
fields precisely. Templates bypass the generic heuristics entirely.

Store order is priority (descending), then insertion order. The first
template whose header matches wins; there is no scoring across templates.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from receiptlens.domain.categories import DEFAULT_CATEGORY, TAX_CATEGORIES
from receiptlens.domain.receipt import UNKNOWN_DATE, LineItem, ReceiptData

from .amounts import parse_amount

logger = logging.getLogger(__name__)

HEADER_SCAN_LINES = 5


class InvalidTemplateError(ValueError):
    """Raised when a template record is malformed or a pattern does not compile."""


@dataclass(frozen=True)
class TemplateRecord:
    """Validated template record as found in a template bundle."""

    merchant_name: str
    header_pattern: str
    date_pattern: str = ""
    total_pattern: str = ""
    item_pattern: str = ""
    category: str = DEFAULT_CATEGORY
    priority: int = 0

    @property
    def merchant_key(self) -> str:
        return self.merchant_name.strip().lower()

    @classmethod
    def from_mapping(cls, raw: Any) -> TemplateRecord:
        """Build a record from a bundle entry ({merchantName, headerPattern, ...})."""
        if not isinstance(raw, Mapping):
            raise InvalidTemplateError(f"Template record must be a mapping, got {type(raw).__name__}")

        def _text(key: str, default: str = "") -> str:
            value = raw.get(key, default)
            if value is None:
                return default
            if not isinstance(value, str):
                raise InvalidTemplateError(f"Template field {key!r} must be a string")
            return value

        merchant_name = _text("merchantName").strip()
        header_pattern = _text("headerPattern")
        if not merchant_name:
            raise InvalidTemplateError("Template record is missing merchantName")
        if not header_pattern:
            raise InvalidTemplateError(f"Template {merchant_name!r} is missing headerPattern")

        priority = raw.get("priority", 0)
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidTemplateError(f"Template {merchant_name!r} priority must be an integer")

        return cls(
            merchant_name=merchant_name,
            header_pattern=header_pattern,
            date_pattern=_text("datePattern"),
            total_pattern=_text("totalPattern"),
            item_pattern=_text("itemPattern"),
            category=_text("category").strip() or DEFAULT_CATEGORY,
            priority=priority,
        )


def _compile(pattern: str, flags: int, merchant: str, field_name: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidTemplateError(f"Template {merchant!r} has invalid {field_name}: {e}") from e


@dataclass(frozen=True)
class ReceiptTemplate:
    """Compiled template ready for matching."""

    merchant_key: str
    merchant_name: str
    header_pattern: re.Pattern[str]
    date_pattern: re.Pattern[str] | None
    total_pattern: re.Pattern[str] | None
    item_pattern: re.Pattern[str] | None
    category: str
    priority: int = 0

    @classmethod
    def compile(cls, record: TemplateRecord) -> ReceiptTemplate:
        name = record.merchant_name
        header = _compile(record.header_pattern, re.IGNORECASE, name, "headerPattern")
        if header is None:
            raise InvalidTemplateError(f"Template {name!r} is missing headerPattern")
        if record.category not in TAX_CATEGORIES:
            logger.debug("Template %r uses non-standard category %r", name, record.category)
        return cls(
            merchant_key=record.merchant_key,
            merchant_name=name,
            header_pattern=header,
            date_pattern=_compile(record.date_pattern, re.IGNORECASE, name, "datePattern"),
            total_pattern=_compile(record.total_pattern, re.IGNORECASE, name, "totalPattern"),
            item_pattern=_compile(record.item_pattern, re.IGNORECASE | re.MULTILINE, name, "itemPattern"),
            category=record.category,
            priority=record.priority,
        )


def parse_template_records(raw_records: Iterable[Any], source: str = "template bundle") -> list[TemplateRecord]:
    """Validate raw bundle entries, logging and skipping malformed ones."""
    records: list[TemplateRecord] = []
    for index, raw in enumerate(raw_records):
        try:
            records.append(TemplateRecord.from_mapping(raw))
        except InvalidTemplateError as e:
            logger.warning("Skipping template #%d from %s: %s", index, source, e)
    return records


def _build_ordered(records: Iterable[TemplateRecord]) -> tuple[ReceiptTemplate, ...]:
    # Same key overwrites content but keeps the key's original position.
    by_key: dict[str, ReceiptTemplate] = {}
    for record in records:
        try:
            template = ReceiptTemplate.compile(record)
        except InvalidTemplateError as e:
            logger.warning("Skipping template: %s", e)
            continue
        by_key[template.merchant_key] = template
    ordered = sorted(enumerate(by_key.values()), key=lambda pair: (-pair[1].priority, pair[0]))
    return tuple(template for _, template in ordered)


class TemplateStore:
    """Read-mostly collection of compiled templates, replaced by atomic snapshot swap."""

    def __init__(self, records: Iterable[TemplateRecord] = ()) -> None:
        self._lock = threading.Lock()
        self._templates: tuple[ReceiptTemplate, ...] = _build_ordered(records)

    def __len__(self) -> int:
        return len(self._templates)

    @property
    def templates(self) -> tuple[ReceiptTemplate, ...]:
        return self._templates

    def get(self, merchant_key: str) -> ReceiptTemplate | None:
        key = merchant_key.strip().lower()
        for template in self._templates:
            if template.merchant_key == key:
                return template
        return None

    def load(
        self,
        bundled: Sequence[TemplateRecord] = (),
        remote: Sequence[TemplateRecord] = (),
    ) -> None:
        """Replace all templates with the bundled set overlaid by the remote set."""
        templates = _build_ordered([*bundled, *remote])
        with self._lock:
            self._templates = templates
        logger.info("Template store loaded: %d templates", len(templates))


class TemplateMatcher:
    """Identify a known merchant and extract fields with its template."""

    def __init__(
        self,
        store: TemplateStore,
        *,
        header_scan_lines: int = HEADER_SCAN_LINES,
        unknown_date: str = UNKNOWN_DATE,
    ) -> None:
        self.store = store
        self.header_scan_lines = header_scan_lines
        self.unknown_date = unknown_date

    def _identify(self, text: str) -> ReceiptTemplate | None:
        head_lines = text.split("\n")[: self.header_scan_lines]
        for template in self.store.templates:
            if any(template.header_pattern.search(line) for line in head_lines):
                return template
            if template.header_pattern.search(text):
                return template
        return None

    def identify_merchant(self, text: str) -> str | None:
        """Return the merchant key of the first template whose header matches."""
        template = self._identify(text)
        return template.merchant_key if template else None

    def match_receipt(self, text: str) -> ReceiptData | None:
        """Extract a receipt with the matching template, or None if no template matches."""
        template = self._identify(text)
        if template is None:
            return None

        logger.debug("Found template match for %s", template.merchant_key)
        date = _first_group(template.date_pattern, text)
        total = parse_amount(_first_group(template.total_pattern, text))
        items = _extract_template_items(template.item_pattern, text)

        return ReceiptData(
            merchant_name=template.merchant_name,
            date=date.strip() if date else self.unknown_date,
            total_amount=total if total is not None else Decimal("0"),
            line_items=items,
            category=template.category,
            raw_text=text,
        )


def _first_group(pattern: re.Pattern[str] | None, text: str) -> str | None:
    if pattern is None or pattern.groups < 1:
        return None
    match = pattern.search(text)
    if match is None:
        return None
    return match.group(1)


def _extract_template_items(pattern: re.Pattern[str] | None, text: str) -> list[LineItem]:
    if pattern is None or pattern.groups < 2:
        return []
    items: list[LineItem] = []
    for match in pattern.finditer(text):
        description = match.group(1)
        amount_text = match.group(2)
        if description is None or amount_text is None:
            continue
        amount = parse_amount(amount_text)
        if amount is None:
            logger.debug("Skipping template item with unparseable amount %r", amount_text)
            continue
        if amount < 0:
            logger.debug("Skipping template item with negative amount %r", amount_text)
            continue
        items.append(LineItem(description=description.strip(), amount=amount))
    return items
