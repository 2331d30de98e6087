"""
Unit tests for venue filtering and result filter chains.
"""

import pytest

from src.ranking import (
    FilterChain,
    MinScoreFilter,
    SearchResult,
    TopKFilter,
    Venue,
    filter_venues,
)

pytestmark = pytest.mark.unit


def results_with(*scores):
    return [SearchResult(Venue(id=f"v{i}", name=f"V{i}"), s) for i, s in enumerate(scores)]


class TestFilterVenues:

    def test_no_filters_returns_all(self, venues):
        filtered = filter_venues(venues, [], [])

        assert filtered == venues
        assert filtered is not venues

    def test_none_filters_returns_all(self, venues):
        assert filter_venues(venues, None, None) == venues

    def test_district_membership(self, venues):
        filtered = filter_venues(venues, districts=["大安區", "信義區"])

        assert [v.id for v in filtered] == ["cafe_001", "cafe_003"]

    def test_district_exact_match_only(self, venues):
        assert filter_venues(venues, districts=["大安"]) == []

    def test_features_are_and(self, venues):
        filtered = filter_venues(venues, features=["插座", "安靜"])

        assert [v.id for v in filtered] == ["cafe_001"]

    def test_district_and_features_combined(self, venues):
        filtered = filter_venues(venues, districts=["中山區", "信義區"], features=["wifi"])

        assert [v.id for v in filtered] == ["cafe_002"]

    def test_missing_one_feature_excludes(self, venues):
        assert filter_venues(venues, features=["wifi", "寵物友善"]) == []


class TestResultFilters:

    def test_min_score_excludes_zero(self):
        kept = MinScoreFilter(0.0).apply(results_with(100.0, 0.0, 12.5))

        assert [r.score for r in kept] == [100.0, 12.5]

    def test_min_score_inclusive(self):
        kept = MinScoreFilter(0.0, inclusive=True).apply(results_with(0.0, 5.0))

        assert len(kept) == 2

    def test_top_k(self):
        assert len(TopKFilter(2).apply(results_with(3, 2, 1))) == 2
        with pytest.raises(ValueError):
            TopKFilter(-1)

    def test_chain_applies_in_order(self):
        chain = FilterChain([MinScoreFilter(0.0), TopKFilter(1)])

        kept = chain.apply(results_with(0.0, 50.0, 20.0))

        assert [r.venue.id for r in kept] == ["v1"]

    def test_chain_statistics(self):
        chain = FilterChain().add(MinScoreFilter(0.0)).add(TopKFilter(1))

        report = chain.apply_with_statistics(results_with(0.0, 50.0, 20.0, 0.0))

        assert report.original_count == 4
        assert report.final_count == 1
        assert report.retention_rate == pytest.approx(25.0)
        assert [(s.before_count, s.after_count) for s in report.steps] == [(4, 2), (2, 1)]
        assert report.steps[0].removed_count == 2
        assert report.steps[0].retention_rate == pytest.approx(50.0)
        assert "MinScoreFilter(score > 0.0)" in report.report()

    def test_statistics_on_empty_input(self):
        report = FilterChain([MinScoreFilter()]).apply_with_statistics([])

        assert report.retention_rate == 0.0
        assert report.steps[0].retention_rate == 0.0
