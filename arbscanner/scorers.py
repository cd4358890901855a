"""
Similarity scorers used by the matching engine.

A scorer turns question text into a comparison key once (``prepare``) and
compares two keys (``compare``). ``score`` combines both for one-off use.
Scores are integers between 0 and 100; ``None`` means "not comparable".
"""

from typing import Any, Callable, Dict, FrozenSet, Optional

from rapidfuzz import fuzz

from .utils.text_processing import extract_keywords, normalize_title


def _harmonic(a: int, b: int) -> float:
    return 2.0 * a * b / (a + b)


OVERLAP_DENOMINATORS: Dict[str, Callable[[FrozenSet[str], FrozenSet[str]], float]] = {
    "min": lambda a, b: min(len(a), len(b)),
    "max": lambda a, b: max(len(a), len(b)),
    "union": lambda a, b: len(a | b),
    "harmonic": lambda a, b: _harmonic(len(a), len(b)),
}

FUZZY_METHODS = {
    "ratio": fuzz.ratio,
    "partial_ratio": fuzz.partial_ratio,
    "token_sort_ratio": fuzz.token_sort_ratio,
    "token_set_ratio": fuzz.token_set_ratio,
}


class SimilarityScorer:
    """Base class for pluggable scorers."""

    name = "base"

    def prepare(self, text: str) -> Optional[Any]:
        raise NotImplementedError

    def compare(self, key_a: Any, key_b: Any) -> Optional[int]:
        raise NotImplementedError

    def score(self, text_a: str, text_b: str) -> Optional[int]:
        """Score two raw texts; None when either is not matchable."""
        key_a = self.prepare(text_a)
        key_b = self.prepare(text_b)
        if key_a is None or key_b is None:
            return None
        return self.compare(key_a, key_b)


class KeywordOverlapScorer(SimilarityScorer):
    """
    Scores shared significant keywords.

    The overlap is normalized by the smaller keyword set by default, which
    rewards a terse phrasing of a longer question.
    """

    name = "keyword"

    def __init__(
        self,
        min_keywords: int = 2,
        min_common_keywords: int = 2,
        denominator: str = "min",
    ):
        """
        Initialize keyword scorer.

        Args:
            min_keywords: Keyword sets smaller than this are not matchable
            min_common_keywords: Minimum shared keywords for a candidate pair
            denominator: One of 'min', 'max', 'union', 'harmonic'
        """
        if denominator not in OVERLAP_DENOMINATORS:
            raise ValueError(
                f"Unknown overlap denominator {denominator!r}, "
                f"expected one of {sorted(OVERLAP_DENOMINATORS)}"
            )
        self.min_keywords = min_keywords
        self.min_common_keywords = min_common_keywords
        self.denominator = denominator
        self._denominator = OVERLAP_DENOMINATORS[denominator]

    def prepare(self, text: str) -> Optional[FrozenSet[str]]:
        keywords = frozenset(extract_keywords(text))
        if len(keywords) < self.min_keywords:
            return None
        return keywords

    def compare(self, key_a: FrozenSet[str], key_b: FrozenSet[str]) -> Optional[int]:
        overlap = len(key_a & key_b)
        if overlap < self.min_common_keywords or overlap == 0:
            return None
        return round(overlap / self._denominator(key_a, key_b) * 100)


class FuzzyScorer(SimilarityScorer):
    """String-distance scorer over the full normalized question."""

    name = "fuzzy"

    def __init__(self, method: str = "token_set_ratio"):
        if method not in FUZZY_METHODS:
            raise ValueError(
                f"Unknown fuzzy method {method!r}, expected one of {sorted(FUZZY_METHODS)}"
            )
        self.method = method
        self._ratio = FUZZY_METHODS[method]

    def prepare(self, text: str) -> Optional[str]:
        normalized = normalize_title(text)
        return normalized or None

    def compare(self, key_a: str, key_b: str) -> Optional[int]:
        return round(self._ratio(key_a, key_b))
