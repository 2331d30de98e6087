"""
Unit tests for Keyword and KeywordRegistry.
"""

import pytest

from src.ranking import Keyword, KeywordRegistry, KeywordTier, determine_tier

pytestmark = pytest.mark.unit


class TestKeywordTier:
    """Tier boundaries at 2.0 and 1.0"""

    @pytest.mark.parametrize("weight,tier", [
        (3.0, KeywordTier.CORE),
        (2.0, KeywordTier.CORE),
        (1.999, KeywordTier.SECONDARY),
        (1.0, KeywordTier.SECONDARY),
        (0.999, KeywordTier.REFERENCE),
        (0.0, KeywordTier.REFERENCE),
    ])
    def test_boundaries(self, weight, tier):
        assert determine_tier(weight) is tier
        assert Keyword("kw", weight).tier is tier

    def test_tier_frozen_after_boost(self):
        """Tier reflects construction-time weight only"""
        keyword = Keyword("wifi", 1.5)
        keyword.boost_weight(2.0)

        assert keyword.weight == 3.0
        assert keyword.tier is KeywordTier.SECONDARY
        assert keyword.is_secondary()
        assert not keyword.is_core()

    def test_tier_predicates(self):
        assert Keyword("a", 2.5).is_core()
        assert Keyword("b", 0.5).is_reference()


class TestKeywordWeights:

    def test_boost_is_relative_to_original(self):
        keyword = Keyword("wifi", 1.5)
        keyword.boost_weight(1.5)
        keyword.boost_weight(1.5)

        assert keyword.weight == pytest.approx(2.25)  # not 1.5 ** 3
        assert keyword.original_weight == 1.5

    def test_reset_restores_original(self):
        keyword = Keyword("安靜", 2.5)
        for multiplier in (1.5, 3.0, 0.1):
            keyword.boost_weight(multiplier)
        keyword.reset_weight()

        assert keyword.weight == 2.5

    def test_compare_weight_sign(self):
        high = Keyword("a", 3.0)
        low = Keyword("b", 1.0)

        assert high.compare_weight(low) == 1
        assert low.compare_weight(high) == -1
        assert high.compare_weight(Keyword("c", 3.0)) == 0

    def test_set_original_weight_takes_effect_on_reset(self):
        keyword = Keyword("咖啡", 0.8)
        keyword.set_original_weight(1.2)

        assert keyword.weight == 0.8
        keyword.reset_weight()
        assert keyword.weight == 1.2
        assert keyword.tier is KeywordTier.REFERENCE

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            Keyword("  ", 1.0)

    def test_equality_by_name(self):
        assert Keyword("wifi", 1.5) == Keyword("wifi", 2.6)
        assert len({Keyword("wifi", 1.5), Keyword("wifi", 2.6)}) == 1


class TestKeywordRegistry:

    def test_iteration_order_is_insertion_order(self, registry):
        assert registry.names() == ["不限時", "安靜", "插座", "wifi", "咖啡"]

    def test_duplicate_ignored(self, registry):
        assert registry.add(Keyword("wifi", 9.0)) is False
        assert registry.get("wifi").weight == 1.5
        assert len(registry) == 5

    def test_by_tier(self, registry):
        core = [k.name for k in registry.by_tier(KeywordTier.CORE)]
        assert core == ["不限時", "安靜", "插座"]

    def test_matching_is_case_insensitive(self, registry):
        names = [k.name for k in registry.matching("需要WIFI跟插座")]
        assert names == ["插座", "wifi"]

    def test_weights_for_query_boosts_mentioned(self, registry):
        weights = registry.weights_for_query("安靜的WiFi咖啡廳")

        assert weights["安靜"] == pytest.approx(3.75)
        assert weights["wifi"] == pytest.approx(2.25)
        assert weights["咖啡"] == pytest.approx(1.2)
        assert weights["不限時"] == 3.0

    def test_weights_for_query_does_not_mutate(self, registry):
        registry.weights_for_query("wifi")

        assert registry.get("wifi").weight == 1.5

    def test_weights_for_query_starts_from_original(self, registry):
        """A leftover manual boost is not carried into the snapshot"""
        registry.get("安靜").boost_weight(10)

        weights = registry.weights_for_query("wifi")

        assert weights["安靜"] == 2.5
        assert weights["wifi"] == pytest.approx(2.25)

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_blank_query_no_adjustment(self, registry, query):
        assert registry.weights_for_query(query) == registry.weights()

    def test_reset_all(self, registry):
        for keyword in registry:
            keyword.boost_weight(2.0)
        registry.reset_all()

        assert all(k.weight == k.original_weight for k in registry)
