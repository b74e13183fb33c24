"""
ColumnMatcher: fuzzy alignment of headers coming from different sheets.

Headers are normalised, then grouped greedily: each header joins the first
existing canonical key it is similar enough to, in the order the keys were
created. This is first-match, not best-match; merged output depends on it.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from tablesplit.detection.config import DetectionConfig, DEFAULT_CONFIG
from tablesplit.merge.normalizer import normalize_column_name
from tablesplit.logger import get_logger

logger = get_logger(__name__)


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance (insert, delete, substitute), case-sensitive."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> int:
    """
    Similarity on a 0..100 scale derived from the edit distance.

    Both-empty scores 100. Halves round up, so 62.5 becomes 63.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 100
    ratio = (1 - levenshtein(a, b) / longest) * 100
    return int(math.floor(ratio + 0.5))


class ColumnMatcher:
    """Build a normalised-header → canonical-key mapping across sheets."""

    def __init__(self, threshold: Optional[int] = None, cfg: DetectionConfig = DEFAULT_CONFIG):
        self._threshold = cfg.similarity_threshold if threshold is None else threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    @staticmethod
    def unique_normalized(header_lists: Iterable[Sequence[Any]]) -> List[str]:
        """Flatten and normalise every header, keeping first-seen order."""
        seen: Dict[str, None] = {}
        for headers in header_lists:
            for header in headers or []:
                seen.setdefault(normalize_column_name(header), None)
        return list(seen)

    def build_mapping(self, header_lists: Iterable[Sequence[Any]]) -> Dict[str, str]:
        """
        Map every normalised header to its canonical key.

        A header that matches no existing canonical key becomes one and maps
        to itself.
        """
        canonical: List[str] = []
        mapping: Dict[str, str] = {}
        for col in self.unique_normalized(header_lists):
            matched = None
            for canon in canonical:
                if similarity(col, canon) >= self._threshold:
                    matched = canon
                    break
            if matched is None:
                canonical.append(col)
                mapping[col] = col
            else:
                mapping[col] = matched
                logger.debug("Column %r aligned to %r", col, matched)
        return mapping


def build_column_mapping(
    header_lists: Iterable[Sequence[Any]],
    threshold: int = 85,
) -> Dict[str, str]:
    """Convenience wrapper around :meth:`ColumnMatcher.build_mapping`."""
    return ColumnMatcher(threshold).build_mapping(header_lists)
