"""
Factory to create the search engine from environment configuration.
"""

import logging
import os
from typing import Optional

from .data_loader import load_keywords, load_venues
from .ranking import DEFAULT_BOOST_MULTIPLIER
from .search_engine import DEFAULT_LOCALE_ANCHORS, SearchEngine

logger = logging.getLogger(__name__)


def parse_anchors(value: Optional[str]):
    """Comma-separated anchor list; blank entries dropped"""
    if value is None:
        return list(DEFAULT_LOCALE_ANCHORS)
    return [part.strip() for part in value.split(",") if part.strip()]


class SearchEngineFactory:
    """Builds and caches one initialized SearchEngine."""

    _instance: Optional[SearchEngine] = None  # Singleton cache

    @classmethod
    def create(cls, force_reload: bool = False) -> SearchEngine:
        """
        Create the search engine based on environment configuration.

        Config (env vars):
            VENUES_FILE: Venue JSON path (default: data/venues.json)
            KEYWORDS_FILE: Keyword JSON path (default: data/keywords.json)
            DYNAMIC_WEIGHT_ADJUSTMENT: "true" to boost query keywords (default: true)
            BOOST_MULTIPLIER: Boost factor (default: 1.5)
            LOCALE_ANCHORS: Comma-separated locale tokens (default: 台北)

        Args:
            force_reload: If True, rebuild even if cached

        Raises:
            ValueError: If BOOST_MULTIPLIER is not a number
        """
        if cls._instance is not None and not force_reload:
            return cls._instance

        venues_file = os.getenv("VENUES_FILE", "data/venues.json")
        keywords_file = os.getenv("KEYWORDS_FILE", "data/keywords.json")
        dynamic = os.getenv("DYNAMIC_WEIGHT_ADJUSTMENT", "true").lower() == "true"

        multiplier_value = os.getenv("BOOST_MULTIPLIER", str(DEFAULT_BOOST_MULTIPLIER))
        try:
            multiplier = float(multiplier_value)
        except ValueError:
            raise ValueError(f"BOOST_MULTIPLIER must be a number, got {multiplier_value!r}")

        anchors = parse_anchors(os.getenv("LOCALE_ANCHORS"))

        logger.info(
            f"Creating search engine: venues={venues_file}, keywords={keywords_file}, "
            f"dynamic={dynamic}, boost={multiplier}, anchors={anchors}"
        )
        engine = SearchEngine(
            venues=load_venues(venues_file),
            keywords=load_keywords(keywords_file),
            dynamic_weight_adjustment=dynamic,
            boost_multiplier=multiplier,
            locale_anchors=anchors,
        )
        engine.initialize()

        cls._instance = engine
        return cls._instance

    @classmethod
    def cleanup(cls):
        """Drop the cached engine."""
        if cls._instance is not None:
            logger.info("Cleaning up search engine instance")
            cls._instance = None
