"""
Unit tests for depth-weighted content trees.
"""

import pytest

from src.ranking import ContentTree, ContentTreeRegistry, Venue, decay

pytestmark = pytest.mark.unit

WEIGHTS = {"安靜": 2.5, "wifi": 1.5}


@pytest.fixture
def nested_venue():
    """Name line + one paragraph with two sentences"""
    return Venue(id="v1", name="N", content="wifi。安靜。")


class TestDecay:

    @pytest.mark.parametrize("depth,expected", [(0, 1.0), (1, 0.5), (2, 0.25), (3, 0.125)])
    def test_halves_per_level(self, depth, expected):
        assert decay(depth) == expected


class TestContentTreeBuild:

    def test_depth_zero_is_single_node(self):
        venue = Venue(id="v", name="安靜", content="wifi")
        tree = ContentTree.build(venue, max_depth=0)

        assert len(tree) == 1
        assert tree.root.children == []
        assert tree.aggregate_score(WEIGHTS) == pytest.approx(4.0)

    def test_name_leads_content_children(self):
        venue = Venue(id="v", name="安靜", content="wifi")
        tree = ContentTree.build(venue, max_depth=1)

        assert tree.root.text == "安靜"
        assert [tree.nodes[i].text for i in tree.root.children] == ["wifi"]
        # 2.5 + 1.5 × 1/2
        assert tree.aggregate_score(WEIGHTS) == pytest.approx(3.25)

    def test_nested_levels(self, nested_venue):
        tree = ContentTree.build(nested_venue, max_depth=2)

        assert [node.depth for node in tree.nodes] == [0, 1, 2]
        assert [node.text for node in tree.nodes] == ["N", "wifi。", "安靜。"]
        # leaf: 2.5; middle: 1.5 + 2.5 × 1/4; root: 0 + 2.125 × 1/2
        assert tree.aggregate_score(WEIGHTS) == pytest.approx(1.0625)
        assert tree.nodes[1].aggregate == pytest.approx(2.125)

    def test_max_depth_bounds_tree(self, nested_venue):
        tree = ContentTree.build(nested_venue, max_depth=1)

        assert tree.depth() == 1
        leaf = tree.nodes[1]
        assert leaf.children == []
        assert leaf.text == "wifi。安靜。"

    def test_separators_stay_with_preceding_segment(self):
        venue = Venue(id="v", name="Cafe", content="Quiet. Nice, power outlet")
        tree = ContentTree.build(venue, max_depth=3)

        assert [node.text for node in tree.nodes] == ["Cafe", "Quiet.", "Nice,", "power outlet"]
        assert [node.depth for node in tree.nodes] == [0, 1, 2, 3]

    @pytest.mark.parametrize("max_depth", [3, 4, 5])
    def test_multi_word_keyword_survives_deep_trees(self, max_depth):
        venue = Venue(id="v", name="Cafe", content="Quiet. Nice, power outlet")
        tree = ContentTree.build(venue, max_depth=max_depth)

        assert tree.depth() == 3
        assert tree.nodes[-1].children == []
        # 2.0 at depth 3, then × 1/8 × 1/4 × 1/2 back up to the root
        assert tree.aggregate_score({"power outlet": 2.0}) == pytest.approx(0.03125)

    def test_multi_word_keyword_at_depth_zero(self):
        venue = Venue(id="v", name="Cafe", content="Quiet. Nice, power outlet")
        tree = ContentTree.build(venue, max_depth=0)

        assert tree.aggregate_score({"power outlet": 2.0}) == pytest.approx(2.0)

    def test_arena_indices_are_preorder(self):
        venue = Venue(id="v", name="Cafe", content="安靜，wifi。插座。\n咖啡 甜點")
        tree = ContentTree.build(venue, max_depth=4)

        for index, node in enumerate(tree.nodes):
            for child in node.children:
                assert child > index
                assert tree.nodes[child].parent == index
                assert tree.nodes[child].depth == node.depth + 1
        assert tree.post_order()[-1] == 0
        assert sorted(tree.post_order()) == list(range(len(tree)))

    def test_negative_depth_rejected(self, nested_venue):
        with pytest.raises(ValueError):
            ContentTree.build(nested_venue, max_depth=-1)

    def test_no_keywords_scores_zero(self, nested_venue):
        tree = ContentTree.build(nested_venue, max_depth=3)

        assert tree.aggregate_score({}) == 0.0


class TestContentTreeRegistry:

    def test_build_caches_by_venue_id(self, nested_venue):
        trees = ContentTreeRegistry()
        score = trees.build(nested_venue, 2, WEIGHTS)

        assert "v1" in trees
        assert trees.get("v1").score == score

    def test_rebuild_overwrites(self, nested_venue):
        trees = ContentTreeRegistry()
        trees.build(nested_venue, 2, WEIGHTS)
        score = trees.build(nested_venue, 0, WEIGHTS)

        assert len(trees) == 1
        assert score == pytest.approx(4.0)
        assert len(trees.get("v1")) == 1

    def test_stale_until_rebuilt(self, nested_venue):
        trees = ContentTreeRegistry()
        before = trees.build(nested_venue, 2, WEIGHTS)

        nested_venue.content = "安靜 安靜 安靜"

        assert trees.get("v1").score == before
