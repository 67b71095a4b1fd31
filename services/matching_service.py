# -*- coding: utf-8 -*-
"""
Fuzzy Matching Service
======================
Edit-distance similarity used to reconcile free-text delegate names from
imported sheets with the delegates known for a camp.

Similarity is the normalized Levenshtein score:

    (max_len - distance) / max_len

computed case-insensitively. A candidate is accepted only at or above
the configured threshold.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from app.config import Config
from utils.logger import get_logger

logger = get_logger(__name__)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Classic insert/delete/substitute edit distance."""
    len1, len2 = len(s1), len(s2)
    if len1 == 0:
        return len2
    if len2 == 0:
        return len1

    # Create distance matrix
    dp = [[0] * (len2 + 1) for _ in range(len1 + 1)]

    for i in range(len1 + 1):
        dp[i][0] = i
    for j in range(len2 + 1):
        dp[0][j] = j

    for i in range(1, len1 + 1):
        for j in range(1, len2 + 1):
            cost = 0 if s1[i-1] == s2[j-1] else 1
            dp[i][j] = min(
                dp[i-1][j] + 1,      # Deletion
                dp[i][j-1] + 1,      # Insertion
                dp[i-1][j-1] + cost  # Substitution
            )

    return dp[len1][len2]


def similarity(s1: str, s2: str) -> float:
    """Case-insensitive normalized similarity in [0, 1]."""
    a = (s1 or "").lower()
    b = (s2 or "").lower()
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - levenshtein_distance(a, b)) / max_len


@dataclass(frozen=True)
class DelegateMatch:
    """Best candidate for an input name; name is None when below threshold."""
    query: str
    name: Optional[str]
    score: float

    @property
    def is_resolved(self) -> bool:
        return self.name is not None


class DelegateMatcher:
    """Resolves free-text delegate names against a fixed list of known names."""

    def __init__(self, names: Iterable[str], threshold: float = None):
        self.names: List[str] = [n for n in names if n]
        self.threshold = Config.DELEGATE_MATCH_THRESHOLD if threshold is None else threshold

    def best_match(self, text: str) -> DelegateMatch:
        query = (text or "").strip()
        best_name, best_score = None, 0.0
        for name in self.names:
            score = similarity(query, name)
            if score > best_score:
                best_name, best_score = name, score

        if best_name is not None and best_score >= self.threshold:
            return DelegateMatch(query=query, name=best_name, score=best_score)

        logger.debug(f"No delegate match for {query!r} (best {best_score:.2f})")
        return DelegateMatch(query=query, name=None, score=best_score)
