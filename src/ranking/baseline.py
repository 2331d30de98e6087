"""
Query-independent baseline (popularity) scores.

Baseline scores use the full, unboosted keyword weights and are only
recomputed on an explicit calculate_all() call; searches never touch them.
"""

import logging
from typing import Iterable

from .content_scorer import ContentScorer, Weights, weight_items
from .models import Venue

logger = logging.getLogger(__name__)


class BaselineScoreCalculator:
    """Computes venue.baseline_score from venue content"""

    def calculate(self, venue: Venue, keywords: Weights) -> float:
        score = ContentScorer(venue.content).weighted_score(keywords)
        venue.baseline_score = score
        return score

    def calculate_all(self, venues: Iterable[Venue], keywords: Weights) -> int:
        """
        Set baseline_score on every venue.

        The caller guarantees keywords are at their original weights
        (registry reset, or an unboosted snapshot).

        Returns:
            Number of venues scored
        """
        keywords = dict(weight_items(keywords))

        count = 0
        for venue in venues:
            self.calculate(venue, keywords)
            count += 1

        logger.debug(f"Calculated baseline scores for {count} venues")
        return count
