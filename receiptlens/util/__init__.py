"""Dependency-free helpers.

Modules here must not import from ``receiptlens``.
"""

from .fuzzy import FuzzyTextMatcher, levenshtein_distance, nearest

__all__ = [
    "FuzzyTextMatcher",
    "levenshtein_distance",
    "nearest",
]
