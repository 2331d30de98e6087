"""
Venue search engine - end-to-end query pipeline.

Stages (fixed order):
1. Adjust: per-query weight snapshot (keywords mentioned in the query are
   boosted to original × multiplier); the shared registry is not mutated
2. Filter: district membership AND required features; empty → return []
3. Rank: fresh Ranker over the filtered venues, scores normalized to 0-100
4. Relevance gate: the query must mention a keyword, a venue name, a
   district, or a locale anchor that appears in some venue address;
   otherwise the ranking is discarded and [] is returned
5. Threshold: drop results with score <= 0

No stage raises for "no matches"; misses degrade to empty lists.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .ranking import (
    DEFAULT_BOOST_MULTIPLIER,
    BaselineScoreCalculator,
    ContentTreeRegistry,
    FilterChain,
    Keyword,
    KeywordRegistry,
    KeywordTier,
    MinScoreFilter,
    Ranker,
    SearchResult,
    Venue,
    filter_venues,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCALE_ANCHORS = ("台北",)
MAX_SUGGESTIONS = 10
MAX_KEYWORD_LENGTH = 20


class SearchEngine:
    """
    Ranks a venue catalog against free-text queries.

    Baseline scores are computed by initialize() and never refreshed
    implicitly. Content trees are built on demand and cached by venue id.
    """

    def __init__(
        self,
        venues: Optional[Iterable[Venue]] = None,
        keywords: Optional[Iterable[Keyword]] = None,
        dynamic_weight_adjustment: bool = True,
        boost_multiplier: float = DEFAULT_BOOST_MULTIPLIER,
        locale_anchors: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            venues: Venue catalog (search candidates)
            keywords: Keywords, or a ready KeywordRegistry
            dynamic_weight_adjustment: Boost keywords mentioned in the query
            boost_multiplier: Boost factor (default: 1.5)
            locale_anchors: City-level tokens accepted by the relevance gate
                when they appear in both the query and some venue address
        """
        self.venues: List[Venue] = list(venues or [])
        if isinstance(keywords, KeywordRegistry):
            self.keywords = keywords
        else:
            self.keywords = KeywordRegistry(keywords)
        self.dynamic_weight_adjustment = dynamic_weight_adjustment
        self.boost_multiplier = boost_multiplier
        self.locale_anchors = [
            anchor.lower() for anchor in
            (DEFAULT_LOCALE_ANCHORS if locale_anchors is None else locale_anchors)
            if anchor and anchor.strip()
        ]

        self.baseline_calculator = BaselineScoreCalculator()
        self.content_trees = ContentTreeRegistry()
        self.result_filters = FilterChain([MinScoreFilter(0.0)])
        self.ranker: Optional[Ranker] = None

    def initialize(self):
        """Reset keyword weights and compute baseline scores for all venues"""
        self.keywords.reset_all()
        self.baseline_calculator.calculate_all(self.venues, self.keywords.weights())
        logger.info(f"Search engine initialized: {len(self.venues)} venues, {len(self.keywords)} keywords")

    def set_dynamic_weight_adjustment(self, enabled: bool):
        self.dynamic_weight_adjustment = enabled
        logger.info(f"Dynamic weight adjustment {'enabled' if enabled else 'disabled'}")

    # ---------------------------------------------------------------------
    # Query pipeline
    # ---------------------------------------------------------------------

    def search(
        self,
        query: Optional[str],
        districts: Optional[Iterable[str]] = None,
        features: Optional[Iterable[str]] = None,
    ) -> List[SearchResult]:
        """
        Run the full query pipeline.

        Args:
            query: Free-text query (None/blank yields [])
            districts: Allowed districts (None/empty = any)
            features: Required features, all must be present (None/empty = any)

        Returns:
            SearchResults ordered by normalized score descending, each with
            score > 0
        """
        weights = self.adjusted_weights(query)

        candidates = filter_venues(self.venues, districts, features)
        if not candidates:
            logger.debug(f"No venues left after filtering (districts={districts}, features={features})")
            return []

        self.ranker = Ranker(candidates)
        self.ranker.compute_final_scores(weights)
        self.ranker.normalize_scores()

        # Gate runs after ranking; the ranking work is discarded on failure
        if not self.is_relevant(query):
            logger.debug(f"Query judged irrelevant: {query!r}")
            return []

        results = self.ranker.ranked_results()
        report = self.result_filters.apply_with_statistics(results)
        return report.results

    def adjusted_weights(self, query: Optional[str]) -> Dict[str, float]:
        """
        Weights for one search call.

        With dynamic adjustment enabled, keywords mentioned in the query are
        boosted relative to their original weight. The registry itself is
        left untouched, so concurrent searches never see each other's boosts.
        """
        if not self.dynamic_weight_adjustment:
            return self.keywords.weights()

        weights = self.keywords.weights_for_query(query, self.boost_multiplier)
        if logger.isEnabledFor(logging.DEBUG):
            for keyword in self.keywords:
                if weights[keyword.name] != keyword.original_weight:
                    logger.debug(
                        f"Boost {keyword.name}: {keyword.original_weight:.3f} -> {weights[keyword.name]:.3f}"
                    )
        return weights

    def is_relevant(self, query: Optional[str]) -> bool:
        """
        Decide whether a query relates to the catalog at all.

        Relevant if the lowercased query contains any keyword name, any
        venue name or district (from the full catalog), or a locale anchor
        that also occurs in some venue's address.
        """
        if query is None or not query.strip():
            return False

        lowered = query.lower()

        if self.keywords.matching(lowered):
            return True

        for venue in self.venues:
            if venue.name and venue.name.strip() and venue.name.lower() in lowered:
                return True
            if venue.district and venue.district.strip() and venue.district.lower() in lowered:
                return True

        for anchor in self.locale_anchors:
            if anchor in lowered and any(
                venue.address and anchor in venue.address.lower()
                for venue in self.venues
            ):
                return True

        return False

    # ---------------------------------------------------------------------
    # Other queries
    # ---------------------------------------------------------------------

    def get_recommendations(self, limit: int) -> List[SearchResult]:
        """Top venues by baseline score (stable on ties)"""
        if limit <= 0:
            return []
        ordered = sorted(self.venues, key=lambda v: v.baseline_score, reverse=True)
        return [SearchResult(venue, venue.baseline_score) for venue in ordered[:limit]]

    def get_search_suggestions(self, partial_query: Optional[str]) -> List[str]:
        """
        Autocomplete: keyword names containing the partial query.

        Returns:
            Up to 10 names in registry order; [] for a blank input
        """
        if partial_query is None or not partial_query.strip():
            return []

        lowered = partial_query.lower()
        suggestions = [name for name in self.keywords.names() if lowered in name.lower()]
        return suggestions[:MAX_SUGGESTIONS]

    def build_content_tree(self, venue: Venue, max_depth: int) -> float:
        """
        Build (or rebuild) the content tree for a venue.

        Scored with the live registry weights, so explicit boosts and weight
        updates apply. The tree is cached by venue id and replaces any
        previous one.

        Returns:
            Tree score (root aggregate)
        """
        return self.content_trees.build(venue, max_depth, self.keywords.weights())

    # ---------------------------------------------------------------------
    # Keyword management
    # ---------------------------------------------------------------------

    def get_keywords(self) -> List[Keyword]:
        return list(self.keywords)

    def add_keyword(self, keyword: Keyword) -> bool:
        """
        Register a new keyword.

        Returns:
            False if the trimmed name is longer than MAX_KEYWORD_LENGTH or a
            keyword with the same name already exists
        """
        if len(keyword.name.strip()) > MAX_KEYWORD_LENGTH:
            logger.warning(f"Keyword rejected, name too long: {keyword.name!r}")
            return False
        if not self.keywords.add(keyword):
            return False
        logger.info(f"Keyword added: {keyword.name} ({keyword.tier.value}, weight={keyword.weight:.2f})")
        return True

    def update_keyword_weight(self, name: str, weight: float) -> bool:
        """
        Change a keyword's baseline weight and make it effective.

        The tier stays as classified at construction. Baseline scores are
        not recomputed until initialize() runs again.

        Returns:
            False if no keyword has that name
        """
        keyword = self.keywords.get(name)
        if keyword is None:
            return False
        keyword.set_original_weight(weight)
        keyword.reset_weight()
        logger.info(f"Keyword weight updated: {name} -> {keyword.weight:.2f}")
        return True

    def get_keyword_statistics(self) -> dict:
        keywords = list(self.keywords)
        average = sum(k.weight for k in keywords) / len(keywords) if keywords else 0.0
        return {
            "total_keywords": len(keywords),
            "core_count": len(self.keywords.by_tier(KeywordTier.CORE)),
            "secondary_count": len(self.keywords.by_tier(KeywordTier.SECONDARY)),
            "reference_count": len(self.keywords.by_tier(KeywordTier.REFERENCE)),
            "average_weight": average,
        }

    # ---------------------------------------------------------------------
    # Catalog management
    # ---------------------------------------------------------------------

    def get_venue_by_id(self, venue_id: str) -> Optional[Venue]:
        for venue in self.venues:
            if venue.id == venue_id:
                return venue
        return None

    def add_venue(self, venue: Venue) -> bool:
        """Add a venue unless one with the same id exists"""
        if self.get_venue_by_id(venue.id) is not None:
            return False
        self.venues.append(venue)
        return True

    def remove_venue(self, venue_id: str) -> bool:
        venue = self.get_venue_by_id(venue_id)
        if venue is None:
            return False
        self.venues.remove(venue)
        return True

    def get_statistics(self) -> dict:
        average = (
            sum(v.baseline_score for v in self.venues) / len(self.venues)
            if self.venues else 0.0
        )
        return {
            "total_venues": len(self.venues),
            "total_keywords": len(self.keywords),
            "content_trees_built": len(self.content_trees),
            "average_baseline_score": average,
            "dynamic_weight_adjustment": self.dynamic_weight_adjustment,
        }
