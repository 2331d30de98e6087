"""
Per-query venue ranking.

Pipeline for one candidate set:
1. compute_final_scores(): weighted content score per venue using the
   weights passed in (possibly boosted for this query)
2. normalize_scores(): linear min-max rescale into [0, 100]
3. ranked_results(): SearchResults sorted by score, descending

Normalization edge case:
    If every score is equal (max == min) there is no spread to rescale, so
    every venue gets 0. This also keeps them below the "score > 0"
    inclusion threshold applied by the search engine.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .content_scorer import ContentScorer, Weights, weight_items
from .models import Venue

NORMALIZED_MAX = 100.0


@dataclass(frozen=True)
class SearchResult:
    """Venue paired with its (normalized) score"""
    venue: Venue
    score: float

    def to_dict(self) -> dict:
        data = self.venue.to_dict()
        data["score"] = self.score
        return data


def normalize(scores: Sequence[float], upper: float = NORMALIZED_MAX) -> List[float]:
    """
    Min-max rescale scores into [0, upper].

    Examples:
        >>> normalize([2.0, 4.0, 6.0])
        [0.0, 50.0, 100.0]
        >>> normalize([3.0, 3.0])
        [0.0, 0.0]
        >>> normalize([])
        []
    """
    if not scores:
        return []

    low = min(scores)
    high = max(scores)
    if high == low:
        return [0.0 for _ in scores]

    span = high - low
    return [(score - low) / span * upper for score in scores]


class Ranker:
    """Scores and orders one candidate set of venues"""

    def __init__(self, venues: Sequence[Venue]):
        self.venues: List[Venue] = list(venues or [])
        self.scores: List[float] = [0.0] * len(self.venues)
        self._raw_scores: List[float] = [0.0] * len(self.venues)

    def compute_final_scores(self, keywords: Weights) -> List[float]:
        """
        Score every candidate with the given weights.

        A fresh ContentScorer is used per venue, so the weights in effect
        for this call are always the ones applied.
        """
        keywords = dict(weight_items(keywords))

        self._raw_scores = [
            ContentScorer(venue.content).weighted_score(keywords)
            for venue in self.venues
        ]
        self.scores = list(self._raw_scores)
        return self.scores

    def normalize_scores(self) -> List[float]:
        self.scores = normalize(self.scores)
        return self.scores

    def raw_scores(self) -> Dict[str, float]:
        """Unnormalized scores keyed by venue id"""
        return {venue.id: score for venue, score in zip(self.venues, self._raw_scores)}

    def ranked_results(self) -> List[SearchResult]:
        """
        Results ordered by score descending.

        sorted() is stable with reverse=True, so venues with equal scores
        stay in candidate order.
        """
        results = [SearchResult(venue, score) for venue, score in zip(self.venues, self.scores)]
        return sorted(results, key=lambda r: r.score, reverse=True)
