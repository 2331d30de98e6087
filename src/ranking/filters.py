"""
Filters for venues (before ranking) and search results (after ranking).

Venue filtering is strict AND:
- district: venue.district must be in the given set (exact membership)
- features: venue.features must contain every required feature
An empty or missing filter means "no constraint" for that dimension.

Result filters are composable through FilterChain, which can also report
how many results each step removed.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .models import Venue
from .ranker import SearchResult

logger = logging.getLogger(__name__)


def filter_venues(
    venues: Sequence[Venue],
    districts: Optional[Iterable[str]] = None,
    features: Optional[Iterable[str]] = None,
) -> List[Venue]:
    """
    Select venues matching district AND feature constraints.

    Examples:
        >>> a = Venue(id="a", name="A", district="大安區", features={"wifi", "插座"})
        >>> b = Venue(id="b", name="B", district="中山區", features={"wifi"})
        >>> [v.id for v in filter_venues([a, b], districts=["大安區", "中山區"], features=["插座"])]
        ['a']
    """
    district_set = set(districts or [])
    feature_set = set(features or [])

    if not district_set and not feature_set:
        return list(venues)

    return [
        venue for venue in venues
        if (not district_set or venue.district in district_set)
        and (not feature_set or venue.has_features(feature_set))
    ]


class ResultFilter(ABC):
    """Base class for search result filters"""

    @abstractmethod
    def apply(self, results: List[SearchResult]) -> List[SearchResult]:
        """Return the results that pass, preserving order"""
        pass

    @property
    def description(self) -> str:
        return self.__class__.__name__


class MinScoreFilter(ResultFilter):
    """Keep results scoring above a threshold (strictly, unless inclusive)"""

    def __init__(self, threshold: float = 0.0, inclusive: bool = False):
        self.threshold = threshold
        self.inclusive = inclusive

    def apply(self, results: List[SearchResult]) -> List[SearchResult]:
        if self.inclusive:
            return [r for r in results if r.score >= self.threshold]
        return [r for r in results if r.score > self.threshold]

    @property
    def description(self) -> str:
        op = ">=" if self.inclusive else ">"
        return f"MinScoreFilter(score {op} {self.threshold})"


class TopKFilter(ResultFilter):
    """Keep the first k results"""

    def __init__(self, k: int):
        if k < 0:
            raise ValueError(f"k must be >= 0, got {k}")
        self.k = k

    def apply(self, results: List[SearchResult]) -> List[SearchResult]:
        return results[:self.k]

    @property
    def description(self) -> str:
        return f"TopKFilter(k={self.k})"


@dataclass
class FilterStep:
    """Statistics for one filter in a chain"""
    filter_name: str
    before_count: int
    after_count: int

    @property
    def removed_count(self) -> int:
        return self.before_count - self.after_count

    @property
    def retention_rate(self) -> float:
        """Percentage of results kept (0.0 when nothing came in)"""
        if self.before_count == 0:
            return 0.0
        return self.after_count / self.before_count * 100


@dataclass
class FilterReport:
    results: List[SearchResult]
    original_count: int
    steps: List[FilterStep] = field(default_factory=list)

    @property
    def final_count(self) -> int:
        return len(self.results)

    @property
    def retention_rate(self) -> float:
        if self.original_count == 0:
            return 0.0
        return self.final_count / self.original_count * 100

    def report(self) -> str:
        lines = [
            "=== Filter statistics ===",
            f"Original results: {self.original_count}",
            f"Final results: {self.final_count}",
            f"Total retention: {self.retention_rate:.1f}%",
        ]
        for i, step in enumerate(self.steps, start=1):
            lines.append(
                f"Step {i}: {step.filter_name} "
                f"{step.before_count} -> {step.after_count} "
                f"(removed {step.removed_count}, kept {step.retention_rate:.1f}%)"
            )
        return "\n".join(lines)


class FilterChain(ResultFilter):
    """Applies filters in order"""

    def __init__(self, filters: Optional[Iterable[ResultFilter]] = None):
        self.filters: List[ResultFilter] = list(filters or [])

    def add(self, result_filter: ResultFilter) -> "FilterChain":
        self.filters.append(result_filter)
        return self

    def apply(self, results: List[SearchResult]) -> List[SearchResult]:
        for result_filter in self.filters:
            results = result_filter.apply(results)
        return results

    def apply_with_statistics(self, results: List[SearchResult]) -> FilterReport:
        report = FilterReport(results=results, original_count=len(results))
        current = results
        for result_filter in self.filters:
            before = len(current)
            current = result_filter.apply(current)
            report.steps.append(FilterStep(result_filter.description, before, len(current)))
        report.results = current
        logger.debug(report.report())
        return report

    @property
    def description(self) -> str:
        return " -> ".join(f.description for f in self.filters) or "FilterChain(empty)"

    def __len__(self):
        return len(self.filters)
