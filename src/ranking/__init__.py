"""
Keyword-weighted venue ranking.

Scores venue content by counting weighted keyword occurrences (plain
case-insensitive substring matching, no tokenizer) and ranks candidates by
min-max normalized score.

Components:
- keywords: Keyword model (tiers, boost/reset) and KeywordRegistry
- content_scorer: Occurrence counting and weighted scoring with caching
- content_tree: Depth-decayed hierarchical content scoring
- baseline: Query-independent popularity scores
- ranker: Score computation, normalization, ordering
- filters: Venue attribute filters and result filter chains
"""

from .keywords import (
    DEFAULT_BOOST_MULTIPLIER,
    Keyword,
    KeywordRegistry,
    KeywordTier,
    determine_tier,
)
from .models import Venue
from .content_scorer import ContentScorer, count_occurrences
from .content_tree import ContentTree, ContentTreeRegistry, decay
from .baseline import BaselineScoreCalculator
from .ranker import Ranker, SearchResult, normalize
from .filters import (
    FilterChain,
    FilterReport,
    MinScoreFilter,
    ResultFilter,
    TopKFilter,
    filter_venues,
)

__all__ = [
    "DEFAULT_BOOST_MULTIPLIER",
    "Keyword",
    "KeywordRegistry",
    "KeywordTier",
    "determine_tier",
    "Venue",
    "ContentScorer",
    "count_occurrences",
    "ContentTree",
    "ContentTreeRegistry",
    "decay",
    "BaselineScoreCalculator",
    "Ranker",
    "SearchResult",
    "normalize",
    "FilterChain",
    "FilterReport",
    "MinScoreFilter",
    "ResultFilter",
    "TopKFilter",
    "filter_venues",
]
