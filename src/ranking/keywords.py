"""
Weighted keyword model for venue ranking.

Keywords carry two weights:
- original_weight: baseline loaded from configuration
- weight: current value, equal to original_weight after reset or
  original_weight × multiplier after a boost

Tiers (classified once, at construction):
    weight >= 2.0  → CORE
    weight >= 1.0  → SECONDARY
    otherwise      → REFERENCE

The tier is a frozen load-time classification: boosting a SECONDARY keyword
above 2.0 does not promote it.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_BOOST_MULTIPLIER = 1.5

CORE_THRESHOLD = 2.0
SECONDARY_THRESHOLD = 1.0


class KeywordTier(str, Enum):
    """Keyword classification by load-time weight"""
    CORE = "core"
    SECONDARY = "secondary"
    REFERENCE = "reference"


def determine_tier(weight: float) -> KeywordTier:
    """Classify a weight into a tier"""
    if weight >= CORE_THRESHOLD:
        return KeywordTier.CORE
    if weight >= SECONDARY_THRESHOLD:
        return KeywordTier.SECONDARY
    return KeywordTier.REFERENCE


class Keyword:
    """
    Single weighted keyword.

    Matching against text is case-insensitive; the name is stored as given.
    Two keywords are equal when their names are equal.
    """

    def __init__(self, name: str, weight: float, category: str = ""):
        if not name or not name.strip():
            raise ValueError("Keyword name must not be blank")
        self.name = name
        self.weight = float(weight)
        self._original_weight = float(weight)
        self._tier = determine_tier(self._original_weight)
        self.category = category or ""

    @property
    def original_weight(self) -> float:
        return self._original_weight

    @property
    def tier(self) -> KeywordTier:
        return self._tier

    def set_original_weight(self, value: float):
        """
        Administrative update of the baseline weight.

        Does not touch the current weight or the tier; call reset_weight()
        to make the new baseline effective.
        """
        self._original_weight = float(value)

    def reset_weight(self):
        self.weight = self._original_weight

    def boost_weight(self, multiplier: float):
        """
        Set weight to original_weight × multiplier.

        Always relative to the baseline, so repeated boosts never compound:
        boost(1.5) twice leaves weight at original × 1.5, not × 2.25.
        """
        self.weight = self._original_weight * multiplier

    def compare_weight(self, other: "Keyword") -> int:
        """Sign of (self.weight - other.weight): -1, 0 or 1"""
        return (self.weight > other.weight) - (self.weight < other.weight)

    def is_core(self) -> bool:
        return self._tier is KeywordTier.CORE

    def is_secondary(self) -> bool:
        return self._tier is KeywordTier.SECONDARY

    def is_reference(self) -> bool:
        return self._tier is KeywordTier.REFERENCE

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "weight": self.weight,
            "original_weight": self._original_weight,
            "tier": self._tier.value,
            "category": self.category,
        }

    def __eq__(self, other):
        if not isinstance(other, Keyword):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"Keyword({self.name!r}, weight={self.weight:.2f}, tier={self._tier.value})"


class KeywordRegistry:
    """
    Ordered collection of keywords.

    Iteration order is insertion order; suggestion lists and weight
    snapshots follow it.
    """

    def __init__(self, keywords: Optional[Iterable[Keyword]] = None):
        self._keywords: Dict[str, Keyword] = {}
        for keyword in keywords or []:
            self.add(keyword)

    def add(self, keyword: Keyword) -> bool:
        """
        Register a keyword.

        Returns:
            False if a keyword with the same name is already registered
            (the existing one is kept)
        """
        if keyword.name in self._keywords:
            logger.warning(f"Duplicate keyword ignored: {keyword.name}")
            return False
        self._keywords[keyword.name] = keyword
        return True

    def get(self, name: str) -> Optional[Keyword]:
        return self._keywords.get(name)

    def names(self) -> List[str]:
        return list(self._keywords)

    def by_tier(self, tier: KeywordTier) -> List[Keyword]:
        return [k for k in self._keywords.values() if k.tier is tier]

    def reset_all(self):
        for keyword in self._keywords.values():
            keyword.reset_weight()

    def weights(self) -> Dict[str, float]:
        """Snapshot of current weights (name → weight)"""
        return {name: k.weight for name, k in self._keywords.items()}

    def matching(self, text: Optional[str]) -> List[Keyword]:
        """Keywords whose lowercased name occurs in the lowercased text"""
        if not text:
            return []
        lowered = text.lower()
        return [k for k in self._keywords.values() if k.name.lower() in lowered]

    def weights_for_query(
        self,
        query: Optional[str],
        multiplier: float = DEFAULT_BOOST_MULTIPLIER,
    ) -> Dict[str, float]:
        """
        Compute a per-query weight snapshot without mutating the registry.

        Every keyword starts from its original weight; keywords mentioned in
        the query (case-insensitive substring) get original × multiplier.

        Args:
            query: Raw user query
            multiplier: Boost factor for mentioned keywords

        Returns:
            New dict name → weight, used only for one search call.
            A blank query returns the current weights unchanged (no
            adjustment).

        Example:
            >>> registry = KeywordRegistry([Keyword("wifi", 1.5), Keyword("安靜", 2.5)])
            >>> registry.weights_for_query("有WiFi的咖啡廳")
            {'wifi': 2.25, '安靜': 2.5}
        """
        if query is None or not query.strip():
            return self.weights()

        lowered = query.lower()
        snapshot = {}
        for name, keyword in self._keywords.items():
            if name.lower() in lowered:
                snapshot[name] = keyword.original_weight * multiplier
            else:
                snapshot[name] = keyword.original_weight
        return snapshot

    def __iter__(self) -> Iterator[Keyword]:
        return iter(list(self._keywords.values()))

    def __len__(self) -> int:
        return len(self._keywords)

    def __contains__(self, name) -> bool:
        return name in self._keywords
