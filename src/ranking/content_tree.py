"""
Depth-weighted content tree for venues.

A venue's text (name + content) is split into a bounded-depth hierarchy and
scored bottom-up:

    aggregate(node) = own(node) + Σ aggregate(child) × decay(child.depth)
    decay(d) = 1 / 2^d

Each level of depth halves the contribution of nested content.

Segmentation levels:
    0: lines (root span = name + "\\n" + content, so the name leads)
    1: sentences (。！？.!?)
    2: clauses (，,；;、)

Text is only cut after a separator, which stays on the preceding segment,
and never inside a clause, so multi-word keywords ("power outlet") survive
at any depth. Nodes at depth 3 or deeper are always leaves.

A node above max_depth whose span splits into 2+ segments keeps the first
segment as its own text and gets one child per remaining segment. Every
other node is a leaf owning its whole span.

Nodes live in a flat arena (list) and reference each other by index.
Nodes are appended in pre-order, so every child index is greater than its
parent's and a reverse scan is a valid post-order for aggregation.
"""

import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .content_scorer import ContentScorer, Weights
from .models import Venue

logger = logging.getLogger(__name__)

SEGMENT_PATTERNS = [
    re.compile(r"(?<=\n)"),
    re.compile(r"(?<=[。！？.!?])\s*"),
    re.compile(r"(?<=[，,；;、])\s*"),
]


def decay(depth: int) -> float:
    """Contribution multiplier for a node at the given depth"""
    return 1.0 / (2 ** depth)


def split_segments(text: str, level: int) -> List[str]:
    """
    Split text at a segmentation level, dropping blank pieces.

    Below the clause level the text is returned whole.

    Examples:
        >>> split_segments("Nice, power outlet", 2)
        ['Nice,', 'power outlet']
        >>> split_segments("power outlet", 3)
        ['power outlet']
    """
    if level >= len(SEGMENT_PATTERNS):
        return [text.strip()] if text.strip() else []
    pattern = SEGMENT_PATTERNS[level]
    return [part.strip() for part in pattern.split(text) if part.strip()]


@dataclass
class TreeNode:
    text: str
    depth: int
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    aggregate: float = 0.0


class ContentTree:
    """Arena-backed hierarchy of one venue's text"""

    def __init__(self, venue_id: str):
        self.venue_id = venue_id
        self.nodes: List[TreeNode] = []
        self.max_depth = 0
        self.score = 0.0

    @classmethod
    def build(cls, venue: Venue, max_depth: int) -> "ContentTree":
        """
        Build the tree for a venue.

        Args:
            venue: Venue whose name + content is segmented
            max_depth: Deepest allowed node depth (root = 0)

        Raises:
            ValueError: If max_depth is negative
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        tree = cls(venue.id)
        tree.max_depth = max_depth
        span = "\n".join(part for part in (venue.name, venue.content) if part)
        tree._expand(span, depth=0, parent=None)
        return tree

    def _expand(self, span: str, depth: int, parent: Optional[int]) -> int:
        index = len(self.nodes)
        node = TreeNode(text=span, depth=depth, parent=parent)
        self.nodes.append(node)
        if parent is not None:
            self.nodes[parent].children.append(index)

        if depth >= self.max_depth:
            return index

        segments = split_segments(span, depth)
        if len(segments) < 2:
            return index

        node.text = segments[0]
        for segment in segments[1:]:
            self._expand(segment, depth + 1, index)
        return index

    @property
    def root(self) -> TreeNode:
        return self.nodes[0]

    def aggregate_score(self, keywords: Weights) -> float:
        """
        Compute every node's aggregate score post-order.

        Returns:
            Root aggregate (the tree score)
        """
        for node in reversed(self.nodes):
            own = ContentScorer(node.text).weighted_score(keywords)
            node.aggregate = own + sum(
                self.nodes[child].aggregate * decay(self.nodes[child].depth)
                for child in node.children
            )
        self.score = self.root.aggregate if self.nodes else 0.0
        return self.score

    def post_order(self) -> List[int]:
        """Node indices in post-order (children before parents, left to right)"""
        order: List[int] = []

        def visit(index: int):
            for child in self.nodes[index].children:
                visit(child)
            order.append(index)

        if self.nodes:
            visit(0)
        return order

    def depth(self) -> int:
        return max((node.depth for node in self.nodes), default=0)

    def __len__(self):
        return len(self.nodes)


class ContentTreeRegistry:
    """
    Content trees keyed by venue id.

    Rebuilding a venue replaces its previous tree; there is no incremental
    update and no staleness detection when venue content changes.
    """

    def __init__(self):
        self._trees: Dict[str, ContentTree] = {}
        self._lock = threading.Lock()

    def build(self, venue: Venue, max_depth: int, keywords: Weights) -> float:
        tree = ContentTree.build(venue, max_depth)
        score = tree.aggregate_score(keywords)
        with self._lock:
            self._trees[venue.id] = tree
        logger.debug(f"Built content tree for {venue.id}: {len(tree)} nodes, score={score:.3f}")
        return score

    def get(self, venue_id: str) -> Optional[ContentTree]:
        return self._trees.get(venue_id)

    def clear(self):
        with self._lock:
            self._trees.clear()

    def __len__(self):
        return len(self._trees)

    def __contains__(self, venue_id):
        return venue_id in self._trees
