"""
Keyword occurrence counting and weighted content scoring.

Formula:
    score(text) = Σ weight(k) × count(k, text)

Where count(k, text) is a pure substring scan of the lowercased keyword name
in the lowercased text, restarting at every successive index so overlapping
matches each count ("aa" occurs twice in "aaa"). No tokenization is done,
which keeps CJK text ("不限時", "咖啡") working without a segmenter.

Caching contract:
    The weighted score is computed once and cached on the scorer. Changing a
    keyword weight does NOT invalidate it; callers that reuse a scorer after
    changing weights must call invalidate() first.
"""

from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .keywords import Keyword

Weights = Union[Mapping[str, float], Iterable[Keyword]]


def weight_items(keywords: Weights) -> Iterable[Tuple[str, float]]:
    """Normalize a keyword list or a name → weight mapping to (name, weight) pairs"""
    if isinstance(keywords, Mapping):
        return keywords.items()
    return ((k.name, k.weight) for k in keywords)


def count_occurrences(text: str, keyword: str) -> int:
    """
    Count overlapping, case-insensitive occurrences of keyword in text.

    Examples:
        >>> count_occurrences("wifi wifi 咖啡", "WiFi")
        2
        >>> count_occurrences("aaa", "aa")
        2
        >>> count_occurrences("anything", "")
        0
    """
    if not text or not keyword:
        return 0

    haystack = text.lower()
    needle = keyword.lower()

    count = 0
    index = haystack.find(needle)
    while index != -1:
        count += 1
        index = haystack.find(needle, index + 1)
    return count


class ContentScorer:
    """
    Scores one text body against weighted keywords.

    Per-keyword counts depend only on the text and are cached for the
    scorer's lifetime. The weighted score is cached after the first
    weighted_score() call (see module docstring for invalidation).
    """

    def __init__(self, text: Optional[str]):
        self.text = text or ""
        self._counts: Dict[str, int] = {}
        self._weighted: Optional[float] = None

    def count_occurrences(self, keyword: str) -> int:
        if keyword not in self._counts:
            self._counts[keyword] = count_occurrences(self.text, keyword)
        return self._counts[keyword]

    def count_all(self, keywords: Weights) -> Dict[str, int]:
        """Occurrence count per keyword name (zero counts included)"""
        return {name: self.count_occurrences(name) for name, _ in weight_items(keywords)}

    def weighted_score(self, keywords: Weights) -> float:
        """
        Weighted keyword score of the text.

        Args:
            keywords: Keyword objects (current weights are read) or a
                name → weight snapshot

        Returns:
            Σ weight × count; 0.0 for empty text or no matches.
            Cached: later calls return the first result until invalidate().
        """
        if self._weighted is None:
            total = 0.0
            for name, weight in weight_items(keywords):
                count = self.count_occurrences(name)
                if count:
                    total += weight * count
            self._weighted = total
        return self._weighted

    def invalidate(self):
        """Drop cached counts and score (after text or weight changes)"""
        self._counts.clear()
        self._weighted = None

    def set_text(self, text: Optional[str]):
        self.text = text or ""
        self.invalidate()
