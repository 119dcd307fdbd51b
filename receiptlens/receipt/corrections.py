"""Learned OCR correction dictionary.

Two disjoint namespaces are kept: merchant-name corrections and common-term
corrections. Sources are layered local cache -> remote global -> remote
user, with later layers winning on key collision.

Reads never take a lock: every extraction works against one immutable
snapshot. Writers build a new snapshot and swap it in under a lock.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from receiptlens.domain.receipt import CorrectionKind, CorrectionRecord
from receiptlens.util.fuzzy import FuzzyTextMatcher

logger = logging.getLogger(__name__)

# Nearest key must be strictly closer than this to be used.
DEFAULT_MERCHANT_MATCH_THRESHOLD = 3

# Local cache document keys
LOCAL_MERCHANTS_KEY = "merchant_corrections"
LOCAL_TERMS_KEY = "common_terms"
# Remote document keys
REMOTE_MERCHANTS_KEY = "merchants"
REMOTE_TERMS_KEY = "terms"


def _string_map(raw: Any, source: str) -> dict[str, str]:
    """Validate a str->str mapping, dropping anything else with a warning."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring %s: expected a mapping, got %s", source, type(raw).__name__)
        return {}
    result: dict[str, str] = {}
    skipped = 0
    for key, value in raw.items():
        if isinstance(key, str) and isinstance(value, str) and key:
            result[key] = value
        else:
            skipped += 1
    if skipped:
        logger.warning("Skipped %d malformed entries in %s", skipped, source)
    return result


@dataclass(frozen=True)
class CorrectionDocument:
    """One validated source layer of correction entries."""

    merchants: Mapping[str, str] = field(default_factory=dict)
    terms: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_local_cache(cls, raw: Any) -> CorrectionDocument:
        """Parse the flat local cache format ({merchant_corrections, common_terms})."""
        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.warning("Ignoring malformed local dictionary cache")
            return cls()
        return cls(
            merchants=_string_map(raw.get(LOCAL_MERCHANTS_KEY), "local merchant corrections"),
            terms=_string_map(raw.get(LOCAL_TERMS_KEY), "local common terms"),
        )

    @classmethod
    def from_remote(cls, raw: Any, source: str = "remote dictionary") -> CorrectionDocument:
        """Parse a remote dictionary document ({merchants, terms})."""
        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.warning("Ignoring malformed %s document", source)
            return cls()
        return cls(
            merchants=_string_map(raw.get(REMOTE_MERCHANTS_KEY), f"{source} merchants"),
            terms=_string_map(raw.get(REMOTE_TERMS_KEY), f"{source} terms"),
        )


def _application_order(mapping: Mapping[str, str]) -> tuple[tuple[re.Pattern[str], str], ...]:
    """Compile replacements longest key first, then lexicographically."""
    ordered = sorted(mapping.items(), key=lambda kv: (-len(kv[0]), kv[0]))
    return tuple((re.compile(re.escape(original), re.IGNORECASE), corrected) for original, corrected in ordered)


class CorrectionSnapshot:
    """Immutable view of both correction maps plus precomputed lookups."""

    def __init__(self, merchants: Mapping[str, str], terms: Mapping[str, str]) -> None:
        self.merchants: Mapping[str, str] = MappingProxyType(dict(merchants))
        self.terms: Mapping[str, str] = MappingProxyType(dict(terms))
        self._replacements = _application_order(self.merchants) + _application_order(self.terms)

        # Lowercased key -> original key; first key in sorted order wins a case collision.
        lowered: dict[str, str] = {}
        for key in sorted(self.merchants):
            lowered.setdefault(key.lower().strip(), key)
        self._merchant_keys = lowered
        self._matcher = FuzzyTextMatcher(lowered)

    def apply(self, text: str) -> str:
        corrected = text
        for pattern, replacement in self._replacements:
            corrected = pattern.sub(lambda _m, r=replacement: r, corrected)
        return corrected

    def merchant_match(self, name: str, threshold: int) -> str | None:
        query = name.lower().strip()
        found = self._matcher.nearest(query)
        if found is None:
            return None
        key, distance = found
        if distance < threshold:
            return self.merchants[self._merchant_keys[key]]
        return None


class CorrectionDictionary:
    """Merchant-name and common-term corrections applied to OCR text."""

    def __init__(
        self,
        merchants: Mapping[str, str] | None = None,
        terms: Mapping[str, str] | None = None,
        *,
        merchant_match_threshold: int = DEFAULT_MERCHANT_MATCH_THRESHOLD,
    ) -> None:
        self.merchant_match_threshold = merchant_match_threshold
        self._lock = threading.Lock()
        self._snapshot = CorrectionSnapshot(merchants or {}, terms or {})

    @property
    def snapshot(self) -> CorrectionSnapshot:
        return self._snapshot

    @property
    def merchant_corrections(self) -> Mapping[str, str]:
        return self._snapshot.merchants

    @property
    def common_terms(self) -> Mapping[str, str]:
        return self._snapshot.terms

    def load(
        self,
        local_cache: CorrectionDocument | None = None,
        remote_global: CorrectionDocument | None = None,
        remote_user: CorrectionDocument | None = None,
    ) -> None:
        """Replace the dictionary with local cache, then remote global, then remote user entries.

        Missing layers are skipped. The new state becomes visible in a single swap.
        """
        merchants: dict[str, str] = {}
        terms: dict[str, str] = {}
        for name, layer in (("local cache", local_cache), ("global", remote_global), ("user", remote_user)):
            if layer is None:
                continue
            merchants.update(layer.merchants)
            terms.update(layer.terms)
            logger.debug(
                "Merged %s dictionary layer: %d merchants, %d terms",
                name,
                len(layer.merchants),
                len(layer.terms),
            )

        snapshot = CorrectionSnapshot(merchants, terms)
        with self._lock:
            self._snapshot = snapshot
        logger.info("Correction dictionary loaded: %d merchants, %d terms", len(merchants), len(terms))

    def apply_corrections(self, text: str) -> str:
        """Replace every known misreading in `text`, case-insensitively.

        Merchant corrections run before term corrections, so a term
        correction overlapping a merchant correction has the final say.
        """
        return self._snapshot.apply(text)

    def correct_merchant_name(self, name: str) -> str:
        """Map `name` to its correction if a merchant key is close enough, else return it unchanged."""
        corrected = self._snapshot.merchant_match(name, self.merchant_match_threshold)
        if corrected is None:
            return name
        if corrected != name:
            logger.debug("Normalized merchant %r -> %r", name, corrected)
        return corrected

    def add_correction(
        self,
        original: str,
        corrected: str,
        kind: CorrectionKind,
        *,
        user_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> CorrectionRecord:
        """Upsert one correction in memory and return the record the caller should persist."""
        if not original:
            raise ValueError("Correction original text must be non-empty")

        with self._lock:
            current = self._snapshot
            merchants = dict(current.merchants)
            terms = dict(current.terms)
            if kind is CorrectionKind.MERCHANT:
                merchants[original] = corrected
            else:
                terms[original] = corrected
            self._snapshot = CorrectionSnapshot(merchants, terms)

        return CorrectionRecord(
            original_text=original,
            corrected_text=corrected,
            kind=kind,
            user_id=user_id,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    def to_local_cache(self) -> dict[str, dict[str, str]]:
        """Export the current state in the flat local cache format."""
        snapshot = self._snapshot
        return {
            LOCAL_MERCHANTS_KEY: dict(snapshot.merchants),
            LOCAL_TERMS_KEY: dict(snapshot.terms),
        }
