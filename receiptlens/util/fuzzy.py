"""Edit-distance nearest-neighbour lookup for short strings.

No normalisation happens here; callers lowercase/trim before comparing.
"""

from __future__ import annotations

from collections.abc import Iterable


def levenshtein_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between two strings.

    Insertions, deletions and substitutions each cost 1. Uses a single DP
    row sized to the shorter string.
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    costs = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        diagonal = costs[0]
        costs[0] = i
        for j, char_b in enumerate(b, start=1):
            above = costs[j]
            substitution = diagonal if char_a == char_b else diagonal + 1
            costs[j] = min(above + 1, costs[j - 1] + 1, substitution)
            diagonal = above
    return costs[-1]


def nearest(query: str, candidates: Iterable[str]) -> tuple[str, int] | None:
    """Return (candidate, distance) minimising distance to `query`.

    Candidates are scanned in lexicographic order and the first minimum
    wins, so ties resolve the same way regardless of container ordering.
    Returns None when there are no candidates.
    """
    best: tuple[str, int] | None = None
    for candidate in sorted(set(candidates)):
        distance = levenshtein_distance(query, candidate)
        if best is None or distance < best[1]:
            best = (candidate, distance)
            if distance == 0:
                break
    return best


class FuzzyTextMatcher:
    """Nearest-match lookup over a fixed mapping of known strings."""

    def __init__(self, known: Iterable[str]) -> None:
        self._known = tuple(sorted(set(known)))

    def __len__(self) -> int:
        return len(self._known)

    def distance(self, a: str, b: str) -> int:
        return levenshtein_distance(a, b)

    def nearest(self, query: str) -> tuple[str, int] | None:
        return nearest(query, self._known)

    def match(self, query: str, max_distance: int) -> str | None:
        """Return the nearest known string if its distance is strictly below `max_distance`."""
        found = self.nearest(query)
        if found is None:
            return None
        candidate, distance = found
        return candidate if distance < max_distance else None
