"""Venue record consumed by the ranking core"""

from dataclasses import dataclass, field
from typing import Set


@dataclass
class Venue:
    """
    Single venue (cafe) in the catalog.

    Only baseline_score is written by the ranking core; everything else is
    supplied by the data loader.
    """
    id: str
    name: str
    url: str = ""
    district: str = ""
    address: str = ""
    content: str = ""
    features: Set[str] = field(default_factory=set)
    baseline_score: float = 0.0
    hashtags: str = ""

    def has_features(self, required: Set[str]) -> bool:
        """True if the venue has every required feature (AND)"""
        return set(required).issubset(self.features)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "district": self.district,
            "address": self.address,
            "features": sorted(self.features),
            "baseline_score": self.baseline_score,
            "hashtags": self.hashtags,
        }
